"""
Level ladder for the martingale grid.

Builds the upward and downward trigger levels around an anchor price and
keeps track of how far each side has been activated. Level prices never
change after construction; only activation flags and cursors move.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, List, Optional

from .models import GridLevel, OrderSide
from .utils import to_decimal, to_decimal_optional


class GridLadder:
    """
    Two ordered sequences of trigger levels around an anchor price.

    ``up_levels`` and ``low_levels`` are ordered by increasing distance from the
    anchor, so index 0 is always the nearest level. ``next_up_idx`` and
    ``next_low_idx`` point at the next level to activate on each side.

    Spacing:
    - linear (no ``fibo``): every level is ``anchor * step / 100`` further away
    - geometric (``fibo``): the first gap is ``anchor * step / 100`` and every
      following gap is the previous one multiplied by ``fibo``

    A ``side`` restricts the ladder to one direction: ``buy`` only builds the
    lower levels (averaging down), ``sell`` only the upper ones.
    """

    def __init__(
        self,
        anchor_price: Any,
        step: Any,
        levels_count: int,
        fibo: Any = None,
        side: Optional[OrderSide] = None,
    ) -> None:
        self.anchor_price: Decimal = to_decimal(anchor_price)
        self.step: Decimal = to_decimal(step)
        self.fibo: Optional[Decimal] = to_decimal_optional(fibo)
        self.side: Optional[OrderSide] = OrderSide.parse(side) if side is not None else None

        self.next_up_idx = 0
        self.next_low_idx = 0
        self.up_levels: List[GridLevel] = []
        self.low_levels: List[GridLevel] = []

        self._build(levels_count)

    @classmethod
    def from_config(cls, anchor_price: Any, config, side: Optional[OrderSide] = None) -> "GridLadder":
        """Build a ladder using the spacing parameters of a ``MartingaleGridConfig``."""
        return cls(
            anchor_price=anchor_price,
            step=config.step,
            levels_count=config.levels_count,
            fibo=config.fibo,
            side=side,
        )

    def _build(self, levels_count: int) -> None:
        distance = self.anchor_price * self.step / Decimal("100")
        prev_up = self.anchor_price
        prev_low = self.anchor_price

        for i in range(1, levels_count + 1):
            if self.fibo:
                prev_up = prev_up + distance
                prev_low = prev_low - distance
                up_price, low_price = prev_up, prev_low
                distance *= self.fibo
            else:
                up_price = self.anchor_price + distance * i
                low_price = self.anchor_price - distance * i

            if self.side is None or self.side is OrderSide.SELL:
                self.up_levels.append(GridLevel(price=up_price))
            if self.side is None or self.side is OrderSide.BUY:
                self.low_levels.append(GridLevel(price=low_price))

    # ------------------------------------------------------------------ #
    # Activation
    # ------------------------------------------------------------------ #
    def activate_up(self) -> None:
        """Activate the pending upper level (if any) and advance the cursor."""
        level = self.peek_next_up()
        if level is not None:
            level.activated = True
        self.next_up_idx += 1

    def activate_low(self) -> None:
        """Activate the pending lower level (if any) and advance the cursor."""
        level = self.peek_next_low()
        if level is not None:
            level.activated = True
        self.next_low_idx += 1

    # ------------------------------------------------------------------ #
    # Query helpers
    # ------------------------------------------------------------------ #
    def peek_next_up(self) -> Optional[GridLevel]:
        if self.next_up_idx < len(self.up_levels):
            return self.up_levels[self.next_up_idx]
        return None

    def peek_next_low(self) -> Optional[GridLevel]:
        if self.next_low_idx < len(self.low_levels):
            return self.low_levels[self.next_low_idx]
        return None

    def depth(self, side: OrderSide) -> int:
        """Number of activations performed on the side that opens ``side`` orders."""
        side = OrderSide.parse(side)
        return self.next_low_idx if side is OrderSide.BUY else self.next_up_idx

    def to_dict(self) -> Dict[str, Any]:
        """Read-only snapshot of the ladder."""
        return {
            'anchor_price': float(self.anchor_price),
            'side': self.side.value if self.side is not None else None,
            'next_up_idx': self.next_up_idx,
            'next_low_idx': self.next_low_idx,
            'up_levels': [level.to_dict() for level in self.up_levels],
            'low_levels': [level.to_dict() for level in self.low_levels],
        }

    def __repr__(self) -> str:
        return (
            f"GridLadder(anchor={self.anchor_price}, up={len(self.up_levels)}, "
            f"low={len(self.low_levels)}, next_up_idx={self.next_up_idx}, "
            f"next_low_idx={self.next_low_idx})"
        )
