"""Sort intent and the optional local comparator.

The grid only tracks which column the user asked to sort by and in which
direction; callers usually honour that upstream (e.g. an ``ordering``
query parameter). Grids built with ``sort_locally=True`` apply
``sort_rows`` to their row store instead.
"""

from __future__ import annotations

import functools

from collections.abc import Mapping, Sequence
from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict

from .columns import ColumnDescriptor
from .view import SortDirection


R = TypeVar("R", bound=Mapping[str, Any])


class SortState(BaseModel):
    """Current sort intent. ``key`` is None when unsorted."""

    model_config = ConfigDict(frozen=True)

    key: str | None = None
    direction: SortDirection = "desc"

    def toggled(self, column: ColumnDescriptor) -> SortState:
        """Sort intent after a click on ``column``'s header.

        A new column starts descending; clicking the same column again
        flips between descending and ascending. Columns with
        ``sortable=False`` leave the state unchanged.
        """
        if not column.is_sortable:
            return self
        if self.key == column.id and self.direction == "desc":
            return SortState(key=column.id, direction="asc")
        return SortState(key=column.id, direction="desc")

    def direction_for(self, column_id: str) -> SortDirection | None:
        """Direction shown on ``column_id``'s header, if it is the sort key."""
        return self.direction if self.key == column_id else None


def _sort_key_pair(a: Any, b: Any) -> tuple[Any, Any]:
    """Make two non-null values comparable."""
    if isinstance(a, (int, float)) and isinstance(b, (int, float)):
        return a, b
    if isinstance(a, str) and isinstance(b, str):
        try:
            return float(a), float(b)
        except ValueError:
            return a.lower(), b.lower()
    return str(a).lower(), str(b).lower()


def _compare(a: Any, b: Any, ascending: bool) -> int:
    if a is None and b is None:
        return 0
    if a is None:
        return -1 if ascending else 1
    if b is None:
        return 1 if ascending else -1

    left, right = _sort_key_pair(a, b)
    if left < right:
        return -1 if ascending else 1
    if left > right:
        return 1 if ascending else -1
    return 0


def sort_rows(rows: Sequence[R], column: ColumnDescriptor, direction: SortDirection) -> list[R]:
    """Return a sorted copy of ``rows`` by ``column``'s accessed value.

    Nulls sort first when ascending and last when descending. Two numeric
    strings compare as numbers; other strings compare case-insensitively;
    mixed types compare by their lower-cased text. The sort is stable and
    never mutates ``rows``.
    """
    if column.accessor is None:
        return list(rows)
    accessor = column.accessor
    ascending = direction == "asc"
    return sorted(
        rows,
        key=functools.cmp_to_key(lambda a, b: _compare(a.get(accessor), b.get(accessor), ascending)),
    )
