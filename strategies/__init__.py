"""
Trading Strategies Module
Provides the strategy abstraction and the martingale grid implementation.

- BaseStrategy: callback interface the host drives (init, fills, ticks, closes)
- MartingaleGridStrategy: grid controller composed from a level ladder and
  an injected host
"""

from .base_strategy import BaseStrategy
from .factory import StrategyFactory

from .implementations.martingale_grid import MartingaleGridStrategy, MartingaleGridConfig

__all__ = [
    'BaseStrategy',
    'StrategyFactory',
    'MartingaleGridStrategy',
    'MartingaleGridConfig',
]
