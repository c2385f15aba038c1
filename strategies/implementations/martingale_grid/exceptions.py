"""Custom exceptions for the martingale grid strategy."""


class GridError(Exception):
    """Base class for martingale grid errors."""


class GridConfigurationError(GridError):
    """Raised when the grid cannot start with the supplied configuration or collaborators."""


class GridDisposedError(GridError):
    """Raised when a new cycle is requested after the strategy was permanently disabled."""
