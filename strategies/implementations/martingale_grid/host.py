"""
Host capabilities consumed by the martingale grid.

The grid never talks to an exchange directly. Everything that places, closes
or values orders goes through a ``GridHost`` injected at construction, which
keeps the controller testable with an in-memory fake.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Iterable, Optional, Protocol, Sequence, runtime_checkable

from strategies.components.pnl_calculator import (
    get_currency_batch_commission,
    get_currency_batch_profit,
)

from .config import GridHostContext
from .models import ExecutedOrder, OrderSide


@runtime_checkable
class TrailingTakesManager(Protocol):
    """Optional collaborator that takes over the last order with a trailing take."""

    def is_manual(self) -> bool:
        """True when takes are only set on explicit request."""
        ...

    def set_for_order(self, cid: str, side: OrderSide) -> None:
        """Start managing the order identified by ``cid``."""
        ...


class GridHost(ABC):
    """
    Order-execution capabilities the grid relies on.

    Hosts guarantee that ``orders`` lists open orders oldest first and that
    the grid callbacks are never invoked concurrently.
    """

    @property
    @abstractmethod
    def context(self) -> GridHostContext:
        """Capital, fee and sizing values configured on the host."""

    @property
    @abstractmethod
    def orders(self) -> Sequence[ExecutedOrder]:
        """Currently open orders, oldest first."""

    @property
    def orders_count(self) -> int:
        return len(self.orders)

    @abstractmethod
    async def create_order(self, side: OrderSide, lots_multiplier: Decimal) -> Optional[ExecutedOrder]:
        """Open a new order sized with ``lots_multiplier``."""

    @abstractmethod
    async def close_order(self, order: ExecutedOrder) -> None:
        """Close a single open order."""

    @abstractmethod
    async def close_all(self, collapse: bool = False) -> None:
        """Close every open order, as one collapsed operation when ``collapse`` is set."""

    @abstractmethod
    def dispose(self) -> None:
        """Permanently disable the host strategy."""

    def get_trailing_manager(self) -> Optional[TrailingTakesManager]:
        """Trailing takes collaborator, if the host has one."""
        return None

    def get_currency_batch_profit(self, orders: Iterable[ExecutedOrder], price: Decimal) -> Decimal:
        return get_currency_batch_profit(orders, price)

    def get_currency_batch_commission(
        self,
        orders: Iterable[ExecutedOrder],
        price: Decimal,
        fee: Decimal,
    ) -> Decimal:
        return get_currency_batch_commission(orders, price, fee)
