"""Footer aggregation.

Sums are taken over the rows the grid currently renders (the visible page),
not the whole dataset, unless a grid opts into ``aggregation_scope="dataset"``.
Values that are not numeric count as 0; aggregation never raises.
"""

from __future__ import annotations

import math
import re

from collections.abc import Iterable, Mapping
from decimal import Decimal
from typing import Any

from .cells import access_value
from .columns import ColumnDescriptor


# Leading numeric prefix, parsed the way a browser's parseFloat does ("12abc" -> 12)
_NUMERIC_PREFIX = re.compile(r"^\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def coerce_number(value: Any) -> float:
    """Coerce a raw cell value to a number for summation.

    Numbers pass through, strings are parsed from their leading numeric
    prefix, and everything else (None, booleans, NaN, infinities, objects)
    counts as 0.

    Examples
    --------
    >>> coerce_number("1500.25")
    1500.25
    >>> coerce_number(None)
    0.0
    >>> coerce_number("n/a")
    0.0
    """
    if value is None or isinstance(value, bool):
        return 0.0

    if isinstance(value, (int, float, Decimal)):
        number = float(value)
    elif isinstance(value, str):
        match = _NUMERIC_PREFIX.match(value)
        if not match:
            return 0.0
        number = float(match.group(0))
    elif hasattr(value, "item"):
        # numpy scalars
        try:
            return coerce_number(value.item())
        except (AttributeError, TypeError, ValueError):
            return 0.0
    else:
        return 0.0

    if not math.isfinite(number):
        return 0.0
    return number


def column_sum(rows: Iterable[Mapping[str, Any]], column: ColumnDescriptor) -> float:
    """Sum one column's accessed values over ``rows``."""
    return math.fsum(coerce_number(access_value(row, column)) for row in rows)


def compute_sums(
    rows: Iterable[Mapping[str, Any]],
    columns: Iterable[ColumnDescriptor],
) -> dict[str, float]:
    """Sum every ``show_sum`` column over ``rows``.

    Parameters
    ----------
    rows : Iterable[Mapping]
        The row window to aggregate.
    columns : Iterable[ColumnDescriptor]
        Candidate columns; those without ``show_sum`` are skipped.

    Returns
    -------
    dict[str, float]
        Column id to sum, in column order.
    """
    row_list = list(rows)
    return {column.id: column_sum(row_list, column) for column in columns if column.show_sum}


def format_number(value: Any, max_fraction_digits: int = 3) -> str:
    """Format a number with thousands separators and trimmed decimals.

    Mirrors ``Intl.NumberFormat("en-US")`` defaults: grouping commas and
    at most three fraction digits with trailing zeros removed.

    Examples
    --------
    >>> format_number(1234567.5)
    '1,234,567.5'
    >>> format_number(300)
    '300'
    >>> format_number(None)
    ''
    """
    if value is None or value == "":
        return ""
    try:
        number = float(value)
    except (TypeError, ValueError):
        return str(value)
    if not math.isfinite(number):
        return str(value)

    text = f"{number:,.{max_fraction_digits}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    if text == "-0":
        text = "0"
    return text
