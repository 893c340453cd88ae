"""Column visibility selector state.

Visibility is a projection over the column set: toggling never touches the
column descriptors, the rows or the pagination state. At least one
hideable column always stays visible; hiding the last one is a no-op.
"""

from __future__ import annotations

from collections.abc import Iterable

from .columns import ColumnDescriptor
from .log import debug, warn
from .view import ColumnOption


class ColumnVisibility:
    """The set of visible column ids for one grid.

    Starts with every column visible. Columns with ``hideable=False`` are
    always rendered and never appear in the selector.
    """

    def __init__(self, columns: Iterable[ColumnDescriptor], grid_id: str = "") -> None:
        self.grid_id = grid_id
        self._columns: tuple[ColumnDescriptor, ...] = tuple(columns)
        self._known: set[str] = {c.id for c in self._columns}
        self._visible: set[str] = set(self._known)

    @property
    def visible_ids(self) -> frozenset[str]:
        """Ids currently visible."""
        return frozenset(self._visible)

    def is_visible(self, column_id: str) -> bool:
        """Whether ``column_id`` renders."""
        column = self._find(column_id)
        if column is not None and not column.hideable:
            return True
        return column_id in self._visible

    def _find(self, column_id: str) -> ColumnDescriptor | None:
        return next((c for c in self._columns if c.id == column_id), None)

    def _visible_hideable(self) -> list[str]:
        return [c.id for c in self._columns if c.hideable and c.id in self._visible]

    def hide(self, column_id: str) -> bool:
        """Hide a column. Returns True if visibility changed."""
        column = self._find(column_id)
        if column is None:
            warn(f"Cannot hide unknown column '{column_id}' on grid '{self.grid_id}'")
            return False
        if not column.hideable or column_id not in self._visible:
            return False
        if self._visible_hideable() == [column_id]:
            debug(f"Refusing to hide last visible column '{column_id}' on grid '{self.grid_id}'")
            return False
        self._visible.discard(column_id)
        return True

    def show(self, column_id: str) -> bool:
        """Show a column. Returns True if visibility changed."""
        if self._find(column_id) is None:
            warn(f"Cannot show unknown column '{column_id}' on grid '{self.grid_id}'")
            return False
        if column_id in self._visible:
            return False
        self._visible.add(column_id)
        return True

    def toggle(self, column_id: str) -> bool:
        """Flip a column's visibility. Returns True if visibility changed."""
        if column_id in self._visible:
            return self.hide(column_id)
        return self.show(column_id)

    def reset(self) -> None:
        """Make every column visible again."""
        self._visible = {c.id for c in self._columns}

    def sync(self, columns: Iterable[ColumnDescriptor]) -> None:
        """Follow a new column set.

        Columns seen for the first time start visible, removed columns are
        forgotten, and existing choices are kept. If that leaves nothing
        visible, every column is shown again.
        """
        self._columns = tuple(columns)
        ids = {c.id for c in self._columns}
        self._visible = (self._visible & ids) | (ids - self._known)
        self._known = ids
        if self._columns and not self._visible_hideable() and any(c.hideable for c in self._columns):
            self.reset()

    def project(self, columns: Iterable[ColumnDescriptor] | None = None) -> list[ColumnDescriptor]:
        """Visible columns, in descriptor order."""
        source = self._columns if columns is None else tuple(columns)
        return [c for c in source if self.is_visible(c.id)]

    def options(self) -> list[ColumnOption]:
        """Selector entries for hideable columns, in descriptor order."""
        return [
            ColumnOption(column_id=c.id, label=c.header, visible=c.id in self._visible)
            for c in self._columns
            if c.hideable
        ]
