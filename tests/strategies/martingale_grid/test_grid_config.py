from decimal import Decimal

import pytest
from pydantic import ValidationError

from strategies.implementations.martingale_grid.config import (
    DEFAULT_EQUITY_DECAY,
    DEFAULT_EQUITY_FLOOR,
    DEFAULT_FEE_PERCENT,
    DEFAULT_LEVELS_COUNT,
    GridHostContext,
    MartingaleGridConfig,
)


def base_params(**overrides):
    params = {"step": "2", "martingale": "1.5", "take_profit": "3"}
    params.update(overrides)
    return params


def test_defaults():
    config = MartingaleGridConfig(**base_params())

    assert config.step == Decimal("2")
    assert config.levels_count == DEFAULT_LEVELS_COUNT == 6
    assert config.fibo is None
    assert config.stop_loss is None
    assert config.reduce_equity is False
    assert config.trailing is False
    assert config.collapse is False
    assert config.equity_decay == DEFAULT_EQUITY_DECAY
    assert config.equity_floor == DEFAULT_EQUITY_FLOOR


@pytest.mark.parametrize("field", ["step", "martingale", "take_profit"])
def test_required_fields(field):
    params = base_params()
    params.pop(field)

    with pytest.raises(ValidationError):
        MartingaleGridConfig(**params)


@pytest.mark.parametrize(
    "overrides",
    [
        {"step": "0"},
        {"step": "-1"},
        {"martingale": "0"},
        {"take_profit": "-2"},
        {"levels_count": -1},
        {"stop_loss": "-5"},
        {"equity_decay": "1.5"},
        {"equity_floor": "1"},
    ],
)
def test_invalid_values_rejected(overrides):
    with pytest.raises(ValidationError):
        MartingaleGridConfig(**base_params(**overrides))


@pytest.mark.parametrize("unset", [None, "", 0, "0"])
def test_unset_stop_loss_and_fibo_mean_disabled(unset):
    config = MartingaleGridConfig(**base_params(stop_loss=unset, fibo=unset))

    assert config.stop_loss is None
    assert config.fibo is None


def test_config_is_immutable():
    config = MartingaleGridConfig(**base_params())

    with pytest.raises(ValidationError):
        config.step = Decimal("5")


def test_unknown_fields_rejected():
    with pytest.raises(ValidationError):
        MartingaleGridConfig(**base_params(grid_size=10))


def test_host_context_defaults():
    context = GridHostContext(amount="1000")

    assert context.amount == Decimal("1000")
    assert context.lots_multiplier == Decimal("1")
    assert context.fee == DEFAULT_FEE_PERCENT
    assert context.equity_level == Decimal("1")
    assert context.name == "grid"


def test_host_context_none_falls_back_to_defaults():
    context = GridHostContext(amount=500, lots_multiplier=None, fee=None, equity_level=None)

    assert context.lots_multiplier == Decimal("1")
    assert context.fee == DEFAULT_FEE_PERCENT
    assert context.equity_level == Decimal("1")


@pytest.mark.parametrize(
    "overrides",
    [
        {"amount": 0},
        {"fee": -0.1},
        {"equity_level": 0},
        {"equity_level": "1.2"},
        {"lots_multiplier": 0},
    ],
)
def test_host_context_validation(overrides):
    params = {"amount": 1000}
    params.update(overrides)

    with pytest.raises(ValidationError):
        GridHostContext(**params)
