"""Cell value resolution.

Resolution order per (row, column):
1. ``render`` defined: ``render(value, row[, index])`` output is used verbatim.
2. ``accessor`` defined: the accessed value as a string; None renders empty.
3. Neither: the cell is blank.

A render function that raises degrades to a blank cell with a warning.
"""

from __future__ import annotations

from typing import Any

from .columns import ColumnDescriptor
from .log import warn
from .rows import Row
from .utils.callables import call_flexible
from .view import BodyCell


def access_value(row: Row, column: ColumnDescriptor) -> Any:
    """Read the raw value a column points at, preserving its type.

    Returns None when the column has no accessor or the field is missing.
    """
    if column.accessor is None:
        return None
    try:
        return row.get(column.accessor)
    except (AttributeError, TypeError):
        return None


def stringify_value(value: Any) -> str:
    """Convert a raw value to display text.

    None becomes the empty string. Booleans are lower-cased and integral
    floats lose their trailing ``.0`` to match the wire representation
    used by the front-end.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return value
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    try:
        return str(value)
    except Exception:
        return ""


def resolve_cell(row: Row, column: ColumnDescriptor, index: int = 0) -> BodyCell:
    """Resolve the display content of one cell.

    Parameters
    ----------
    row : Row
        The record being rendered. Never mutated.
    column : ColumnDescriptor
        The column descriptor.
    index : int
        Global row index, passed to render functions that accept it.

    Returns
    -------
    BodyCell
        The resolved cell.
    """
    value = access_value(row, column)

    if column.render is not None:
        try:
            output = call_flexible(column.render, value, row, index)
        except Exception as e:
            warn(f"Render function for column '{column.id}' failed on row {index}: {e}")
            return BodyCell(column_id=column.id, raw=value)
        if output is None:
            return BodyCell(column_id=column.id, raw=value)
        if isinstance(output, str):
            return BodyCell(column_id=column.id, content=output, markup=True, raw=value)
        return BodyCell(column_id=column.id, content=stringify_value(output), raw=value)

    if column.accessor is not None:
        return BodyCell(column_id=column.id, content=stringify_value(value), raw=value)

    return BodyCell(column_id=column.id)
