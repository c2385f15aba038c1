"""
Unified logging for the martingale grid engine.

Every component gets a loguru logger bound to a component id such as
``STRATEGY:MARTINGALE_GRID:host=btc``. Sinks are shared per process:
- colored console output with the caller's module:function:line
- ``unified_history.log`` (rotated) and one ``session_<ts>.log`` per run
"""

import os
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

from loguru import logger as _logger


LOGS_DIR_ENV = "GRID_LOGS_DIR"
LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

_SOURCE_WIDTH = 45

_sinks_installed = {"console": False, "files": False}


def _logs_dir() -> Path:
    """Directory for file sinks; ``GRID_LOGS_DIR`` overrides ``./logs``."""
    logs_dir = Path(os.getenv(LOGS_DIR_ENV, "logs"))
    logs_dir.mkdir(parents=True, exist_ok=True)
    return logs_dir


def _console_filter(record) -> bool:
    if not record["extra"].get("component_id"):
        return False

    source = f"{record['module']}:{record['function']}:{record['line']}"
    if len(source) > _SOURCE_WIDTH:
        source = "..." + source[-(_SOURCE_WIDTH - 3):]
    record["extra"]["source"] = source.rjust(_SOURCE_WIDTH)
    return True


def _file_filter(record) -> bool:
    record["extra"].setdefault("component_id", "UNKNOWN")
    return True


def _install_console_sink(level: str) -> None:
    _logger.remove()
    _logger.add(
        sys.stdout,
        format=(
            "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{extra[source]}</cyan> | "
            "<level>{message}</level>"
        ),
        level=level,
        colorize=True,
        filter=_console_filter,
        backtrace=True,
        diagnose=False,
    )


def _install_file_sinks() -> None:
    logs_dir = _logs_dir()
    session_file = logs_dir / f"session_{datetime.now():%Y%m%d_%H%M%S}.log"
    file_format = "{time:YYYY-MM-DD HH:mm:ss} | {level:<8} | {extra[component_id]:<35} | {message}"

    _logger.add(
        str(logs_dir / "unified_history.log"),
        format=file_format,
        level="DEBUG",
        filter=_file_filter,
        rotation="50 MB",
        enqueue=True,
        catch=True,
    )
    _logger.add(
        str(session_file),
        format=file_format,
        level="DEBUG",
        filter=_file_filter,
        enqueue=True,
        catch=True,
    )


class UnifiedLogger:
    """
    Logger bound to a component identifier.

    Extra keyword arguments passed to any log call are bound to the record
    (``record["extra"]``) rather than used for message formatting, so messages
    may contain braces.
    """

    def __init__(
        self,
        component_type: str,
        component_name: str,
        context: Optional[Dict[str, Any]] = None,
        log_to_console: bool = True,
        log_level: str = "INFO"
    ):
        """
        Args:
            component_type: "strategy", "config" or "core"
            component_name: e.g. "martingale_grid"
            context: Additional identity values (host, symbol, ...)
            log_to_console: Install the console sink if none exists yet
            log_level: Minimum console log level
        """
        self.component_type = component_type.upper()
        self.component_name = component_name.upper()
        self.context = context or {}
        self.log_level = log_level.upper()

        parts = [self.component_type, self.component_name]
        parts.extend(f"{key}={value}" for key, value in self.context.items())
        self.component_id = ":".join(parts)

        if not _sinks_installed["console"]:
            if log_to_console:
                _install_console_sink(self.log_level)
            else:
                _logger.remove()
            _sinks_installed["console"] = True

        if not _sinks_installed["files"]:
            _install_file_sinks()
            _sinks_installed["files"] = True

        self._logger = _logger.bind(component_id=self.component_id)

    def _emit(self, level: str, message: str, extra: Dict[str, Any]) -> None:
        # depth=2 skips _emit and the public wrapper
        self._logger.opt(depth=2).bind(**extra).log(level, message)

    def debug(self, message: str, **kwargs):
        self._emit("DEBUG", message, kwargs)

    def info(self, message: str, **kwargs):
        self._emit("INFO", message, kwargs)

    def warning(self, message: str, **kwargs):
        self._emit("WARNING", message, kwargs)

    def error(self, message: str, **kwargs):
        self._emit("ERROR", message, kwargs)

    def critical(self, message: str, **kwargs):
        self._emit("CRITICAL", message, kwargs)

    def log(self, message: str, level: str = "INFO", **kwargs):
        """Log ``message`` at a level given by name; unknown names fall back to INFO."""
        level = level.upper()
        self._emit(level if level in LEVELS else "INFO", message, kwargs)

    def flush(self):
        """Wait for enqueued file records to be written."""
        _logger.complete()
        sys.stdout.flush()


def get_logger(
    component_type: str,
    component_name: str,
    context: Optional[Dict[str, Any]] = None,
    log_to_console: bool = True,
    log_level: Optional[str] = None
) -> UnifiedLogger:
    """
    Factory function to create unified loggers.

    Examples:
        logger = get_logger("strategy", "martingale_grid", {"host": "BTC"})
        logger = get_logger("config", "yaml")
    """
    return UnifiedLogger(
        component_type=component_type,
        component_name=component_name,
        context=context,
        log_to_console=log_to_console,
        log_level=log_level or os.getenv("LOG_LEVEL", "INFO"),
    )


def get_strategy_logger(strategy_name: str, **context) -> UnifiedLogger:
    """Get logger for trading strategies."""
    return get_logger("strategy", strategy_name, context)


def get_core_logger(module_name: str, **context) -> UnifiedLogger:
    """Get logger for core utilities."""
    return get_logger("core", module_name, context)
