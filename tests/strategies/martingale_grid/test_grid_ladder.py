from decimal import Decimal

import pytest

from strategies.implementations.martingale_grid.config import MartingaleGridConfig
from strategies.implementations.martingale_grid.ladder import GridLadder
from strategies.implementations.martingale_grid.models import OrderSide


def prices(levels):
    return [level.price for level in levels]


def test_linear_ladder_matches_reference_scenario():
    ladder = GridLadder(anchor_price=Decimal("100"), step=Decimal("2"), levels_count=3)

    assert prices(ladder.up_levels) == [Decimal("102"), Decimal("104"), Decimal("106")]
    assert prices(ladder.low_levels) == [Decimal("98"), Decimal("96"), Decimal("94")]
    assert ladder.next_up_idx == 0
    assert ladder.next_low_idx == 0
    assert not any(level.activated for level in ladder.up_levels + ladder.low_levels)


@pytest.mark.parametrize(
    "anchor, step, count",
    [
        (Decimal("100"), Decimal("2"), 6),
        (Decimal("27350.5"), Decimal("0.35"), 10),
        (Decimal("0.0421"), Decimal("5"), 4),
    ],
)
def test_linear_ladder_is_monotonic_and_symmetric(anchor, step, count):
    ladder = GridLadder(anchor_price=anchor, step=step, levels_count=count)

    ups = prices(ladder.up_levels)
    lows = prices(ladder.low_levels)

    assert all(a < b for a, b in zip(ups, ups[1:]))
    assert all(a > b for a, b in zip(lows, lows[1:]))
    for up, low in zip(ups, lows):
        assert up - anchor == anchor - low


def test_fibo_ladder_spacing_grows_by_constant_ratio():
    ladder = GridLadder(
        anchor_price=Decimal("100"),
        step=Decimal("2"),
        levels_count=4,
        fibo=Decimal("1.5"),
    )

    up_gaps = []
    previous = ladder.anchor_price
    for level in ladder.up_levels:
        up_gaps.append(level.price - previous)
        previous = level.price

    low_gaps = []
    previous = ladder.anchor_price
    for level in ladder.low_levels:
        low_gaps.append(previous - level.price)
        previous = level.price

    assert up_gaps == [Decimal("2"), Decimal("3"), Decimal("4.5"), Decimal("6.75")]
    assert low_gaps == up_gaps
    for gaps in (up_gaps, low_gaps):
        assert all(b / a == Decimal("1.5") for a, b in zip(gaps, gaps[1:]))


def test_buy_side_ladder_only_builds_lower_levels():
    ladder = GridLadder(Decimal("100"), Decimal("1"), 5, side=OrderSide.BUY)

    assert ladder.up_levels == []
    assert len(ladder.low_levels) == 5
    assert ladder.peek_next_up() is None


def test_sell_side_ladder_only_builds_upper_levels():
    ladder = GridLadder(Decimal("100"), Decimal("1"), 5, side="sell")

    assert ladder.low_levels == []
    assert len(ladder.up_levels) == 5
    assert ladder.side is OrderSide.SELL


def test_activation_marks_level_and_advances_cursor():
    ladder = GridLadder(Decimal("100"), Decimal("2"), 3)

    first = ladder.peek_next_low()
    ladder.activate_low()

    assert first.activated is True
    assert ladder.next_low_idx == 1
    assert ladder.peek_next_low().price == Decimal("96")
    assert ladder.depth(OrderSide.BUY) == 1
    assert ladder.depth(OrderSide.SELL) == 0


def test_peek_returns_none_exactly_when_cursor_reaches_end():
    ladder = GridLadder(Decimal("100"), Decimal("2"), 2)

    for expected_idx in range(2):
        assert ladder.next_up_idx == expected_idx
        assert ladder.peek_next_up() is not None
        ladder.activate_up()

    assert ladder.next_up_idx == len(ladder.up_levels)
    assert ladder.peek_next_up() is None
    assert all(level.activated for level in ladder.up_levels)


def test_activation_past_end_is_a_no_op_on_levels():
    ladder = GridLadder(Decimal("100"), Decimal("2"), 1, side=OrderSide.BUY)

    ladder.activate_low()
    ladder.activate_low()
    ladder.activate_up()

    assert ladder.next_low_idx == 2
    assert ladder.next_up_idx == 1
    assert ladder.peek_next_low() is None
    assert [level.activated for level in ladder.low_levels] == [True]


def test_zero_levels_produces_empty_ladder():
    ladder = GridLadder(Decimal("100"), Decimal("2"), 0)

    assert ladder.up_levels == []
    assert ladder.low_levels == []
    assert ladder.peek_next_low() is None
    assert ladder.peek_next_up() is None


def test_from_config_uses_config_spacing():
    config = MartingaleGridConfig(
        step=Decimal("1"),
        martingale=Decimal("2"),
        take_profit=Decimal("3"),
        levels_count=2,
        fibo=Decimal("2"),
    )

    ladder = GridLadder.from_config(Decimal("200"), config, side=OrderSide.SELL)

    assert prices(ladder.up_levels) == [Decimal("202"), Decimal("206")]
    assert ladder.low_levels == []


def test_to_dict_snapshot():
    ladder = GridLadder(Decimal("100"), Decimal("2"), 2)
    ladder.activate_up()

    snapshot = ladder.to_dict()

    assert snapshot["anchor_price"] == pytest.approx(100.0)
    assert snapshot["side"] is None
    assert snapshot["next_up_idx"] == 1
    assert snapshot["next_low_idx"] == 0
    assert snapshot["up_levels"][0] == {"price": pytest.approx(102.0), "activated": True}
    assert snapshot["low_levels"][1] == {"price": pytest.approx(96.0), "activated": False}
