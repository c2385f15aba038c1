"""
Batch PnL helpers.

Currency profit and closing commission for a batch of open orders valued at
a single price. Used by the grid host to evaluate the aggregate position on
every tick.
"""

from decimal import Decimal
from typing import Iterable

from strategies.implementations.martingale_grid.models import ExecutedOrder, OrderSide


def get_currency_profit(order: ExecutedOrder, price: Decimal) -> Decimal:
    """
    Unrealized profit of a single order in quote currency.

    Longs (buy) profit when price rises above the fill, shorts (sell) when it
    falls below.
    """
    if order.side is OrderSide.BUY:
        return (price - order.price) * order.lots
    return (order.price - price) * order.lots


def get_currency_batch_profit(orders: Iterable[ExecutedOrder], price: Decimal) -> Decimal:
    """Sum of unrealized profit across ``orders`` at ``price``."""
    total = Decimal("0")
    for order in orders:
        total += get_currency_profit(order, price)
    return total


def get_currency_batch_commission(
    orders: Iterable[ExecutedOrder],
    price: Decimal,
    fee: Decimal,
) -> Decimal:
    """
    Estimated commission for closing every order in ``orders`` at ``price``.

    Args:
        orders: Open orders
        price: Price the batch would be closed at
        fee: Fee as a fraction of traded value (0.0002 = 0.02%)

    Returns:
        Total closing commission in quote currency
    """
    total = Decimal("0")
    for order in orders:
        total += price * order.lots * fee
    return total
