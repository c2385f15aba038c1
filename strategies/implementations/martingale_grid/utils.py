"""
Utility helpers for the martingale grid strategy.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Optional


def to_decimal(value: Any, default: Decimal = Decimal("0")) -> Decimal:
    """
    Convert value to Decimal, handling None, float, int, and Decimal.

    Floats go through ``str`` so that ``0.1`` becomes ``Decimal("0.1")`` and
    not its binary expansion.
    """
    if value is None:
        return default
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except (ValueError, TypeError, InvalidOperation):
        return default


def to_decimal_optional(value: Any) -> Optional[Decimal]:
    """Best-effort conversion to Decimal, returning None if conversion fails."""
    if value is None:
        return None
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        return None


def serialize_value(value: Any) -> Any:
    """Serialize payload values for structured logging and event history."""
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (list, tuple)):
        return [serialize_value(item) for item in value]
    if isinstance(value, dict):
        return {key: serialize_value(val) for key, val in value.items()}
    return value
