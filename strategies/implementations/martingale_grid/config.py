"""
Martingale Grid Strategy Configuration

Pydantic models for grid strategy configuration and host context validation.
"""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


DEFAULT_LEVELS_COUNT = 6
DEFAULT_EQUITY_DECAY = Decimal("0.97")
DEFAULT_EQUITY_FLOOR = Decimal("0.002")
DEFAULT_FEE_PERCENT = Decimal("0.02")


class MartingaleGridConfig(BaseModel):
    """Configuration for the martingale grid strategy."""

    model_config = ConfigDict(validate_assignment=True, extra='forbid', frozen=True)

    # Required parameters
    step: Decimal = Field(
        ...,
        description="Distance of the first level (or of every level when fibo is off) as percentage",
        gt=0
    )
    martingale: Decimal = Field(
        ...,
        description="Position size growth factor per activated level (usually 1-2)",
        gt=0
    )
    take_profit: Decimal = Field(
        ...,
        description="Take profit percentage for the whole grid",
        gt=0
    )

    # Ladder shape
    levels_count: int = Field(
        DEFAULT_LEVELS_COUNT,
        description="Number of levels on each side of the anchor price",
        ge=0
    )
    fibo: Optional[Decimal] = Field(
        None,
        description="Optional growth factor applied to the spacing of every next level",
        gt=0
    )

    # Exit management
    stop_loss: Optional[Decimal] = Field(
        None,
        description="Stop loss percentage for the whole grid (None means no stop)",
        gt=0
    )
    reduce_equity: bool = Field(
        False,
        description="Shrink the capital committed to future cycles after every take profit"
    )
    trailing: bool = Field(
        False,
        description="Hand the last order over to the trailing takes manager on take profit"
    )
    collapse: bool = Field(
        False,
        description="Close all orders as a single collapsed operation"
    )
    equity_decay: Decimal = Field(
        DEFAULT_EQUITY_DECAY,
        description="Equity level multiplier applied on every take profit when reduce_equity is on",
        gt=0,
        le=1
    )
    equity_floor: Decimal = Field(
        DEFAULT_EQUITY_FLOOR,
        description="Equity level below which the strategy is permanently disposed",
        ge=0,
        lt=1
    )

    @field_validator('stop_loss', 'fibo', mode='before')
    @classmethod
    def empty_as_none(cls, v):
        """Treat 0/empty values the same way as an unset option."""
        if v in (None, "", 0, "0"):
            return None
        return v


class GridHostContext(BaseModel):
    """Values the host exposes to the grid on initialization."""

    model_config = ConfigDict(validate_assignment=True, extra='forbid')

    amount: Decimal = Field(
        ...,
        description="Fixed trade amount in quote currency used as the capital basis",
        gt=0
    )
    lots_multiplier: Decimal = Field(
        Decimal("1"),
        description="Baseline position size multiplier restored after every cycle",
        gt=0
    )
    fee: Decimal = Field(
        DEFAULT_FEE_PERCENT,
        description="Commission rate as percentage of traded value",
        ge=0
    )
    equity_level: Decimal = Field(
        Decimal("1"),
        description="Initial fraction of the amount committed to a cycle",
        gt=0,
        le=1
    )
    name: str = Field(
        "grid",
        description="Host strategy name used in log lines"
    )

    @field_validator('lots_multiplier', 'fee', 'equity_level', mode='before')
    @classmethod
    def none_as_default(cls, v, info):
        """Hosts may pass None for unset options; fall back to field defaults."""
        if v is None:
            return cls.model_fields[info.field_name].default
        return v
