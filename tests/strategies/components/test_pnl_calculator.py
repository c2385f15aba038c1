from decimal import Decimal

from strategies.components.pnl_calculator import (
    get_currency_batch_commission,
    get_currency_batch_profit,
    get_currency_profit,
)
from strategies.implementations.martingale_grid.models import ExecutedOrder, OrderSide


def make_order(side, price, lots="1", cid="o-1"):
    return ExecutedOrder(cid=cid, side=side, price=Decimal(price), lots=Decimal(lots))


def test_long_profit_follows_price():
    order = make_order(OrderSide.BUY, "100", lots="2")

    assert get_currency_profit(order, Decimal("105")) == Decimal("10")
    assert get_currency_profit(order, Decimal("95")) == Decimal("-10")


def test_short_profit_is_mirrored():
    order = make_order(OrderSide.SELL, "100", lots="2")

    assert get_currency_profit(order, Decimal("95")) == Decimal("10")
    assert get_currency_profit(order, Decimal("105")) == Decimal("-10")


def test_batch_profit_sums_orders():
    orders = [
        make_order(OrderSide.BUY, "100", lots="1", cid="a"),
        make_order(OrderSide.BUY, "98", lots="1.5", cid="b"),
        make_order(OrderSide.BUY, "96", lots="2.25", cid="c"),
    ]

    # 0 + 3 + 9
    assert get_currency_batch_profit(orders, Decimal("100")) == Decimal("12")


def test_batch_profit_of_no_orders_is_zero():
    assert get_currency_batch_profit([], Decimal("100")) == Decimal("0")


def test_batch_commission_uses_close_price():
    orders = [
        make_order(OrderSide.BUY, "100", lots="10", cid="a"),
        make_order(OrderSide.SELL, "90", lots="5", cid="b"),
    ]

    commission = get_currency_batch_commission(orders, Decimal("103"), Decimal("0.0002"))

    assert commission == Decimal("103") * Decimal("15") * Decimal("0.0002")
    assert get_currency_batch_commission(orders, Decimal("103"), Decimal("0")) == Decimal("0")
