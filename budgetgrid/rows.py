"""Row store helpers.

Rows are open-ended string-keyed mappings. The engine never mutates them;
it only reads fields through column accessors and hands whole rows back to
action callbacks.
"""

from __future__ import annotations

import math

from collections.abc import Mapping, Sequence
from typing import Any, TypeAlias

from .log import debug, warn


Row: TypeAlias = Mapping[str, Any]
RowKey: TypeAlias = str


def row_key(row: Row, index: int) -> RowKey:
    """Identity of a row for list diffing.

    Uses ``row["id"]`` when present, else the positional index. Positional
    identity is unstable across inserts; callers that need stable keys
    should supply ids.
    """
    row_id = row.get("id")
    if row_id is not None:
        return f"id:{row_id}"
    return f"idx:{index}"


def _clean_value(value: Any) -> Any:
    """Convert DataFrame scalars to plain Python values.

    NaN/NaT become None and numpy scalars become native numbers.
    """
    if value is None:
        return None
    if isinstance(value, float) and math.isnan(value):
        return None
    # pandas NaT compares unequal to itself
    if type(value).__name__ == "NaTType":
        return None
    if hasattr(value, "item") and not isinstance(value, (str, bytes)):
        try:
            value = value.item()
        except (AttributeError, ValueError, TypeError):
            return value
        if isinstance(value, float) and math.isnan(value):
            return None
    return value


def normalize_rows(data: Any) -> list[dict[str, Any]]:
    """Convert common tabular shapes to a list of row dicts.

    Handles:
    - list of mappings: [{'a': 1}, {'a': 2}]
    - dict of lists (columnar): {'a': [1, 2], 'b': [3, 4]}
    - single mapping: {'a': 1, 'b': 2}
    - DataFrame-like objects exposing ``to_dict(orient="records")``
    - None (treated as no rows)

    Unsupported inputs log a warning and yield no rows.
    """
    if data is None:
        return []

    try:
        # pandas DataFrame (duck typing)
        if hasattr(data, "to_dict") and hasattr(data, "columns"):
            records = data.to_dict(orient="records")
            debug(f"Normalized DataFrame with {len(records)} rows")
            return [{str(k): _clean_value(v) for k, v in rec.items()} for rec in records]

        if isinstance(data, Mapping):
            first_value = next(iter(data.values()), None)
            if isinstance(first_value, (list, tuple)):
                columns = list(data.keys())
                num_rows = len(first_value)
                return [
                    {col: data[col][i] if i < len(data[col]) else None for col in columns}
                    for i in range(num_rows)
                ]
            return [dict(data)]

        if isinstance(data, Sequence) and not isinstance(data, (str, bytes)):
            rows: list[dict[str, Any]] = []
            for i, item in enumerate(data):
                if isinstance(item, Mapping):
                    rows.append(dict(item))
                else:
                    warn(f"Skipping non-mapping row at index {i}: {type(item).__name__}")
            return rows
    except (ValueError, TypeError, AttributeError) as e:
        warn(f"Failed to convert data to rows: {e}")
        return []

    warn(f"Unsupported row data type: {type(data).__name__}")
    return []
