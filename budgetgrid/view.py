"""View models produced by the grid shell.

A ``GridView`` is a complete, immutable snapshot of what one grid shows:
header cells, windowed body rows with their action affordances, the
aggregate footer, pagination controls and title bar. ``budgetgrid.html``
turns it into markup; ``to_dict()`` turns it into camelCase JSON for a
front-end that renders it itself.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


GridState = Literal["ready", "empty", "loading", "error"]
SortDirection = Literal["asc", "desc"]
PaginationKind = Literal["client", "server"]


class ViewModel(BaseModel):
    """Base model for view objects with camelCase serialization."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict with camelCase keys, excluding None values."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class HeaderCell(ViewModel):
    """One header cell."""

    column_id: str
    label: str
    tooltip: str
    width: int
    min_width: int
    sortable: bool = True
    sort_direction: SortDirection | None = None


class BodyCell(ViewModel):
    """One resolved body cell.

    ``markup`` is True when ``content`` came from a render function and
    must be emitted verbatim; plain accessor values are escaped.
    """

    column_id: str
    content: str = ""
    markup: bool = False
    raw: Any = Field(default=None, exclude=True, repr=False)


class ActionButton(ViewModel):
    """A row-level action affordance."""

    action: str
    label: str
    event: str
    destructive: bool = False


class BodyRow(ViewModel):
    """One windowed row."""

    key: str
    index: int
    cells: list[BodyCell] = Field(default_factory=list)
    actions: list[ActionButton] = Field(default_factory=list)


class FooterCell(ViewModel):
    """One aggregate footer cell."""

    column_id: str
    content: str = ""
    value: float | None = None


class PageButton(ViewModel):
    """A page number entry, or an ellipsis gap when ``page`` is None."""

    page: int | None = None
    label: str
    current: bool = False

    @property
    def is_gap(self) -> bool:
        """True for the ``…`` separator."""
        return self.page is None


class PaginationView(ViewModel):
    """Pagination controls for the current state."""

    kind: PaginationKind
    current_page: int
    total_pages: int | None = None
    can_go_first: bool = False
    can_go_previous: bool = False
    can_go_next: bool = False
    can_go_last: bool = False
    pages: list[PageButton] = Field(default_factory=list)


class ColumnOption(ViewModel):
    """An entry of the column visibility selector."""

    column_id: str
    label: str
    visible: bool


class TitleBar(ViewModel):
    """Optional bar above the table."""

    title: str | None = None
    filter_label: str | None = None
    show_save_button: bool = False
    add_row_label: str | None = None
    column_options: list[ColumnOption] | None = None


class GridView(ViewModel):
    """Everything one grid renders."""

    grid_id: str
    state: GridState
    message: str | None = None
    title_bar: TitleBar | None = None
    headers: list[HeaderCell] = Field(default_factory=list)
    rows: list[BodyRow] = Field(default_factory=list)
    footer: list[FooterCell] | None = None
    pagination: PaginationView | None = None
    show_actions: bool = False
    actions_width: int = 120
    max_height: str = "500px"
    class_name: str = ""

    @property
    def column_count(self) -> int:
        """Number of rendered columns, including the actions column."""
        return len(self.headers) + (1 if self.show_actions else 0)
