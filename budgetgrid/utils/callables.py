"""Helpers for invoking caller-supplied functions with optional trailing arguments.

Render functions and row-action callbacks may be written as ``f(value, row)``
or ``f(value, row, index)``; the engine passes only as many positional
arguments as the function accepts.
"""

from __future__ import annotations

import inspect

from collections.abc import Callable
from typing import Any


_POSITIONAL = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)


def positional_arity(func: Callable[..., Any]) -> int | None:
    """Count the positional parameters a callable accepts.

    Parameters
    ----------
    func : Callable
        The callable to inspect.

    Returns
    -------
    int or None
        Number of positional parameters, or None when the callable takes
        ``*args`` or its signature cannot be inspected (pass everything).
    """
    try:
        sig = inspect.signature(func)
    except (TypeError, ValueError):
        return None

    count = 0
    for param in sig.parameters.values():
        if param.kind is inspect.Parameter.VAR_POSITIONAL:
            return None
        if param.kind in _POSITIONAL:
            count += 1
    return count


def call_flexible(func: Callable[..., Any], *args: Any) -> Any:
    """Call ``func`` with as many leading ``args`` as it accepts.

    Examples
    --------
    >>> call_flexible(lambda v: v * 2, 3, {"id": 1}, 0)
    6
    >>> call_flexible(lambda v, row, i: i, 3, {"id": 1}, 7)
    7
    """
    arity = positional_arity(func)
    if arity is None:
        return func(*args)
    return func(*args[:arity])
