"""Column descriptors for the data grid.

A column descriptor is pure configuration: identity, header label, value
accessor, optional render function, aggregation flag, width hints and
sortability. Everything else in the engine reads descriptors; nothing
mutates them.

Usage:
    from budgetgrid.columns import ColumnDescriptor

    columns = [
        ColumnDescriptor(id="code", header="Transfer", accessor="transaction_id"),
        ColumnDescriptor(
            id="amount",
            header="Amount",
            accessor="amount",
            show_sum=True,
            render=currency_renderer("SAR"),
        ),
    ]

Field names are snake_case in Python and accept the camelCase spelling
(``showSum``, ``minWidth``) used by page configuration dicts.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Mapping, Sequence
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .exceptions import ColumnConfigError
from .log import debug


# Render functions take (value, row) or (value, row, index)
RenderFunc = Callable[..., Any]

# Approximate pixel width of one character plus cell padding
_CHAR_WIDTH = 8
_CELL_PADDING = 40
# Rows sampled when estimating a content-based width
_WIDTH_SAMPLE_ROWS = 5


class ColumnDescriptor(BaseModel):
    """Configuration for one grid column.

    Attributes
    ----------
        id: Stable identity, unique within a column set.
        header: Display label.
        accessor: Row field read when no render function is given.
        render: Optional ``(value, row[, index]) -> displayable`` function.
        sortable: ``False`` disables the sort toggle; ``None`` or ``True`` allow it.
        show_sum: Marks the column for footer aggregation.
        width: Preferred width in pixels.
        min_width: Hard lower bound on the rendered width.
        description: Header tooltip text.
        hideable: Whether the column can be hidden by the column selector.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        frozen=True,
        arbitrary_types_allowed=True,
    )

    id: str
    header: str = ""
    accessor: str | None = None
    render: RenderFunc | None = Field(default=None, repr=False)
    sortable: bool | None = None
    show_sum: bool = Field(default=False, alias="showSum")
    width: int | None = Field(default=None, gt=0)
    min_width: int | None = Field(default=None, alias="minWidth", gt=0)
    description: str | None = None
    hideable: bool = True

    @field_validator("id")
    @classmethod
    def validate_id(cls, v: str) -> str:
        """Column ids must be non-blank."""
        if not v or not v.strip():
            raise ValueError("Column id cannot be empty")
        return v

    @model_validator(mode="after")
    def default_header(self) -> ColumnDescriptor:
        """Fall back to the id when no header label is given."""
        if not self.header:
            object.__setattr__(self, "header", self.id)
        return self

    @property
    def is_sortable(self) -> bool:
        """Only an explicit ``sortable=False`` disables sorting."""
        return self.sortable is not False

    @property
    def is_blank(self) -> bool:
        """A column with neither accessor nor render function renders nothing."""
        return self.accessor is None and self.render is None

    @property
    def tooltip(self) -> str:
        """Header tooltip: the description, or the header label."""
        return self.description or self.header


def _coerce_column(column: ColumnDescriptor | Mapping[str, Any]) -> ColumnDescriptor:
    if isinstance(column, ColumnDescriptor):
        return column
    if isinstance(column, Mapping):
        return ColumnDescriptor(**column)
    raise TypeError(f"Invalid column descriptor type: {type(column)}")


class ColumnSet(Sequence[ColumnDescriptor]):
    """An ordered, id-unique collection of column descriptors."""

    def __init__(self, columns: Iterable[ColumnDescriptor | Mapping[str, Any]]) -> None:
        self._columns: tuple[ColumnDescriptor, ...] = tuple(_coerce_column(c) for c in columns)
        self._by_id: dict[str, ColumnDescriptor] = {}
        for column in self._columns:
            if column.id in self._by_id:
                raise ColumnConfigError("Duplicate column id", column_id=column.id)
            self._by_id[column.id] = column
        blank = [c.id for c in self._columns if c.is_blank]
        if blank:
            debug(f"Columns without accessor or render will render blank: {blank}")

    def __getitem__(self, index):  # type: ignore[override]
        return self._columns[index]

    def __len__(self) -> int:
        return len(self._columns)

    def __iter__(self) -> Iterator[ColumnDescriptor]:
        return iter(self._columns)

    def __contains__(self, item: object) -> bool:
        if isinstance(item, str):
            return item in self._by_id
        return item in self._columns

    def __repr__(self) -> str:
        return f"ColumnSet({list(self.ids)!r})"

    @property
    def ids(self) -> tuple[str, ...]:
        """Column ids in descriptor order."""
        return tuple(c.id for c in self._columns)

    def get(self, column_id: str) -> ColumnDescriptor | None:
        """Look up a column by id."""
        return self._by_id.get(column_id)

    def sum_columns(self) -> list[ColumnDescriptor]:
        """Columns flagged for footer aggregation."""
        return [c for c in self._columns if c.show_sum]


def estimate_content_width(
    column: ColumnDescriptor,
    rows: Sequence[Mapping[str, Any]],
    *,
    default_min_width: int = 100,
    max_width: int = 300,
) -> int:
    """Estimate a column width from its header and the first few rows.

    Parameters
    ----------
    column : ColumnDescriptor
        The column to size.
    rows : Sequence[Mapping]
        Rows to sample (only the first five are read).
    default_min_width : int
        Lower bound when the column has no ``min_width``.
    max_width : int
        Upper bound for the estimate.

    Returns
    -------
    int
        Width in pixels, clamped to ``[min_width, max_width]``.
    """
    header_width = len(column.header) * _CHAR_WIDTH + _CELL_PADDING

    content_width = 0
    for row in rows[:_WIDTH_SAMPLE_ROWS]:
        value = row.get(column.accessor) if column.accessor else None
        is_number = isinstance(value, (int, float)) and not isinstance(value, bool)
        if is_number and column.render is not None:
            content = f"{value:.2f}"
        else:
            content = "" if value is None else str(value)
        content_width = max(content_width, len(content) * _CHAR_WIDTH + _CELL_PADDING)

    floor = column.min_width or default_min_width
    return min(max(header_width, content_width, floor), max(max_width, floor))


def resolve_width(
    column: ColumnDescriptor,
    rows: Sequence[Mapping[str, Any]],
    *,
    default_min_width: int = 100,
    max_width: int = 300,
) -> tuple[int, int]:
    """Resolve ``(width, min_width)`` for a column.

    An explicit ``width`` wins over the content estimate, but ``min_width``
    is always a hard floor so a column can never be cropped to nothing.
    """
    min_width = column.min_width or default_min_width
    if column.width is not None:
        return max(column.width, min_width), min_width
    width = estimate_content_width(
        column, rows, default_min_width=default_min_width, max_width=max_width
    )
    return max(width, min_width), min_width
