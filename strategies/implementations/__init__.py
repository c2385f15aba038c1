"""
Strategy Implementations

Concrete strategy implementations:
- martingale_grid: Host-driven martingale grid
"""

from .martingale_grid import MartingaleGridConfig, MartingaleGridStrategy

__all__ = [
    'MartingaleGridStrategy',
    'MartingaleGridConfig',
]
