"""budgetgrid exception hierarchy.

All budgetgrid-specific exceptions inherit from BudgetGridException.
They are only raised while a grid is being configured; rendering and
user interaction never raise (see ``budgetgrid.log``).
"""

from __future__ import annotations

from typing import Any


class BudgetGridException(Exception):
    """Base exception for all budgetgrid errors."""

    def __init__(self, message: str, **context: Any) -> None:
        """Initialize budgetgrid exception.

        Parameters
        ----------
        message : str
            Human-readable error message.
        **context : Any
            Additional context (column_id, grid_id, etc.).
        """
        super().__init__(message)
        self.message = message
        self.context = context

    def __str__(self) -> str:
        """Format exception with context."""
        if self.context:
            ctx = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
            return f"{self.message} ({ctx})"
        return self.message


class ConfigurationError(BudgetGridException):
    """Grid configuration is invalid.

    Raised when a grid is constructed, never while it renders.
    """


class ColumnConfigError(ConfigurationError):
    """Column descriptor set is invalid.

    Raised for empty or duplicated column ids, which would break
    visibility toggling and row keying.
    """

    def __init__(self, message: str, column_id: str | None = None, **context: Any) -> None:
        """Initialize column configuration error.

        Parameters
        ----------
        message : str
            Human-readable error message.
        column_id : str, optional
            The offending column id.
        **context : Any
            Additional context.
        """
        super().__init__(message, column_id=column_id, **context)
        self.column_id = column_id


class PaginationConfigError(ConfigurationError):
    """Pagination configuration is contradictory.

    Raised when an explicit pagination mode disagrees with legacy
    server-mode hints passed alongside it.
    """

    def __init__(self, message: str, mode: str | None = None, **context: Any) -> None:
        """Initialize pagination configuration error.

        Parameters
        ----------
        message : str
            Human-readable error message.
        mode : str, optional
            The explicit pagination mode that was given.
        **context : Any
            Additional context.
        """
        super().__init__(message, mode=mode, **context)
        self.mode = mode
