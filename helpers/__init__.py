"""
Helper modules for the martingale grid engine.
"""

from .unified_logger import get_logger, get_strategy_logger, get_core_logger
from .event_notifier import GridEventNotifier

__all__ = [
    'get_logger',
    'get_strategy_logger',
    'get_core_logger',
    'GridEventNotifier',
]
