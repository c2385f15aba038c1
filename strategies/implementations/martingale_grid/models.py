"""
Martingale Grid Strategy Data Models

Data structures shared by the level ladder, the grid controller and the host.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, Optional

if TYPE_CHECKING:
    from .ladder import GridLadder


class OrderSide(str, Enum):
    """Order direction."""
    BUY = "buy"
    SELL = "sell"

    @classmethod
    def parse(cls, value: Any) -> "OrderSide":
        """Accept enum members or case-insensitive 'buy'/'sell' strings."""
        if isinstance(value, OrderSide):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ValueError(f"Order side must be 'buy' or 'sell', got {value!r}") from None


class GridCycleState(Enum):
    """Grid cycle states."""
    FLAT = "flat"      # No ladder, no open orders
    ACTIVE = "active"  # Ladder exists, position may be open


@dataclass
class GridLevel:
    """A single trigger level of the ladder."""
    price: Decimal
    activated: bool = False

    def to_dict(self) -> dict:
        return {
            'price': float(self.price),
            'activated': self.activated,
        }


@dataclass(frozen=True)
class ExecutedOrder:
    """Snapshot of an open order as reported by the host."""
    cid: str
    side: OrderSide
    price: Decimal
    lots: Decimal = Decimal("1")

    def to_dict(self) -> dict:
        return {
            'cid': self.cid,
            'side': self.side.value,
            'price': float(self.price),
            'lots': float(self.lots),
        }


@dataclass(frozen=True)
class Tick:
    """Price observation delivered by the host feed."""
    close: Decimal
    time: Optional[float] = None


@dataclass
class GridControllerState:
    """Internal state for the grid controller."""
    cycle_state: GridCycleState = GridCycleState.FLAT
    ladder: Optional["GridLadder"] = None
    committed_amount: Optional[Decimal] = None
    lots_multiplier: Decimal = Decimal("1")
    trailing_engaged: bool = False
    equity_level: Decimal = Decimal("1")
    disposed: bool = False
    cycles_started: int = 0

    def to_dict(self) -> Dict[str, Any]:
        """Read-only snapshot for status reporting."""
        return {
            'cycle_state': self.cycle_state.value,
            'committed_amount': float(self.committed_amount) if self.committed_amount is not None else None,
            'lots_multiplier': float(self.lots_multiplier),
            'trailing_engaged': self.trailing_engaged,
            'equity_level': float(self.equity_level),
            'disposed': self.disposed,
            'cycles_started': self.cycles_started,
            'ladder': self.ladder.to_dict() if self.ladder is not None else None,
        }
