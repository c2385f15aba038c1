"""
Martingale Grid Strategy Implementation

A host-driven grid trading strategy that:
- Builds a ladder of trigger levels around an anchor price (linear or fibo spacing)
- Opens a new order every time price crosses the next level on the committed side
- Sizes each order with a martingale multiplier tied to the activation depth
- Closes the whole grid on take profit or stop loss, or hands the last order
  to a trailing takes manager
"""

from .config import GridHostContext, MartingaleGridConfig
from .exceptions import GridConfigurationError, GridDisposedError, GridError
from .host import GridHost, TrailingTakesManager
from .ladder import GridLadder
from .models import ExecutedOrder, GridControllerState, GridCycleState, GridLevel, OrderSide, Tick
from .strategy import MartingaleGridStrategy

__all__ = [
    'MartingaleGridStrategy',
    'MartingaleGridConfig',
    'GridHostContext',
    'GridHost',
    'TrailingTakesManager',
    'GridLadder',
    'GridLevel',
    'GridControllerState',
    'GridCycleState',
    'ExecutedOrder',
    'OrderSide',
    'Tick',
    'GridError',
    'GridConfigurationError',
    'GridDisposedError',
]
