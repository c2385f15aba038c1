"""
Shared components for trading strategies.

These components are reusable across different strategy implementations.
"""

from .pnl_calculator import (
    get_currency_profit,
    get_currency_batch_profit,
    get_currency_batch_commission,
)

__all__ = [
    'get_currency_profit',
    'get_currency_batch_profit',
    'get_currency_batch_commission',
]
