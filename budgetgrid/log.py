"""Logging utilities for budgetgrid.

Render-time problems are logged as warnings instead of raised, so a single
misconfigured column or failing callback never takes down a whole grid.
"""

from __future__ import annotations

import logging
import sys

from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from .config import LogSettings


_DEFAULT_FORMAT = "%(name)s - %(levelname)s - %(message)s"


class _LoggerHolder:
    """Holder for the global logger instance."""

    instance: logging.Logger | None = None


def get_logger() -> logging.Logger:
    """Get the budgetgrid logger instance.

    Returns
    -------
    logging.Logger
        The budgetgrid logger configured with a stream handler.
    """
    if _LoggerHolder.instance is None:
        logger = logging.getLogger("budgetgrid")
        logger.setLevel(logging.WARNING)

        # Only add handler if none exists
        if not logger.handlers:
            handler = logging.StreamHandler(sys.stderr)
            handler.setLevel(logging.DEBUG)
            handler.setFormatter(logging.Formatter(_DEFAULT_FORMAT))
            logger.addHandler(handler)

        _LoggerHolder.instance = logger

    return _LoggerHolder.instance


def debug(msg: str) -> None:
    """Log a debug message."""
    get_logger().debug(msg)


def info(msg: str) -> None:
    """Log an info message."""
    get_logger().info(msg)


def warn(msg: str) -> None:
    """Log a warning message. Never raises exceptions.

    Parameters
    ----------
    msg : str
        The warning message to log.
    """
    get_logger().warning(msg)


def error(msg: str) -> None:
    """Log an error message. Never raises exceptions.

    Parameters
    ----------
    msg : str
        The error message to log.
    """
    get_logger().error(msg)


def exception(msg: str) -> None:
    """Log an exception with full traceback.

    Call this from within an except block.
    """
    get_logger().exception(msg)


def set_level(level: int | str) -> None:
    """Set the minimum logging level.

    Parameters
    ----------
    level : int or str
        The logging level (e.g., logging.DEBUG, "DEBUG").
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper())
    get_logger().setLevel(level)


def enable_debug() -> None:
    """Enable verbose logging of pagination, visibility and dispatch decisions."""
    set_level(logging.DEBUG)


def configure(settings: LogSettings | None = None) -> logging.Logger:
    """Apply log settings to the budgetgrid logger.

    Meant to be called once at process start. Later calls simply re-apply
    the level and format.

    Parameters
    ----------
    settings : LogSettings or None, optional
        Settings to apply. Defaults to the cached global settings.

    Returns
    -------
    logging.Logger
        The configured logger.
    """
    if settings is None:
        from .config import get_settings

        settings = get_settings().log

    logger = get_logger()
    set_level(settings.level)
    for handler in logger.handlers:
        handler.setFormatter(logging.Formatter(settings.format))
    return logger


def log_callback_error(action: str, grid_id: str, exc: BaseException) -> None:
    """Log a caller callback failure with standardized format.

    Parameters
    ----------
    action : str
        The action or event whose callback raised.
    grid_id : str
        The grid the event originated from.
    exc : BaseException
        The exception that was raised.
    """
    get_logger().exception(f"Callback error for '{action}' on grid '{grid_id}': {exc}")
