# pylint: disable=too-many-instance-attributes,too-many-public-methods
"""The grid shell: one configurable data grid.

``DataGrid`` composes the column set, row store, pagination controller,
aggregation, cell resolution, action dispatch and column visibility into a
single object. Callers own the rows and columns and replace them through
``update()``; the grid owns only ephemeral UI state (current page, visible
columns, sort intent) and reports user intent back through callbacks.

Usage:
    from budgetgrid import ColumnDescriptor, DataGrid

    grid = DataGrid(
        columns=[
            ColumnDescriptor(id="code", header="Transfer", accessor="code"),
            ColumnDescriptor(id="amount", header="Amount", accessor="amount", show_sum=True),
        ],
        data=rows,
        title="Pending Transfers",
        show_pagination=True,
        show_footer=True,
        pending=True,
        show_actions=True,
        on_approve=approve_transfer,
        on_reject=reject_transfer,
    )
    html = grid.build_html()
"""

from __future__ import annotations

import uuid

from collections.abc import Callable, Iterable, Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .actions import ActionDispatcher, ActionSlots, RowAction, resolve_action_mode
from .aggregation import compute_sums, format_number
from .cells import resolve_cell
from .columns import ColumnDescriptor, ColumnSet, resolve_width
from .config import AggregationScope, GridSettings, get_settings
from .log import debug, log_callback_error, warn
from .pagination import (
    ClientPagination,
    PaginationController,
    PaginationMode,
    ServerPagination,
    resolve_mode,
)
from .rows import Row, normalize_rows, row_key
from .sorting import SortState, sort_rows
from .view import BodyRow, FooterCell, GridView, HeaderCell, TitleBar
from .visibility import ColumnVisibility


Callback = Callable[..., Any]


def _generate_grid_id() -> str:
    """Generate a unique grid ID."""
    return f"grid-{uuid.uuid4().hex[:8]}"


class QueryResult(BaseModel):
    """What the data-fetch layer hands a grid: rows plus loading and error status."""

    model_config = ConfigDict(populate_by_name=True, arbitrary_types_allowed=True)

    data: Any = None
    is_loading: bool = Field(default=False, alias="isLoading")
    error: Any = None


class GridOptions(BaseModel):
    """Per-grid configuration.

    Options left as None fall back to ``GridSettings``. Field names are
    snake_case and also accept the camelCase spelling of page configs
    (``showPagination``, ``itemsPerPage``, ``onEdit`` ...).
    """

    model_config = ConfigDict(
        populate_by_name=True,
        extra="forbid",
        arbitrary_types_allowed=True,
    )

    grid_id: str = Field(default_factory=_generate_grid_id, alias="gridId")

    # Cosmetic
    title: str | None = None
    class_name: str = Field(default="", alias="className")
    max_height: str | None = Field(default=None, alias="maxHeight")

    # Pagination
    show_pagination: bool = Field(default=False, alias="showPagination")
    current_page: int = Field(default=1, ge=1, alias="currentPage")
    items_per_page: int | None = Field(default=None, gt=0, alias="itemsPerPage")
    pagination: PaginationMode | None = None
    total_count: int | None = Field(default=None, ge=0, alias="totalCount")
    has_next: bool | None = Field(default=None, alias="hasNext")
    has_previous: bool | None = Field(default=None, alias="hasPrevious")
    on_page_change: Callback | None = Field(default=None, alias="onPageChange")

    # Footer
    show_footer: bool = Field(default=False, alias="showFooter")
    aggregation_scope: AggregationScope | None = Field(default=None, alias="aggregationScope")

    # Actions
    show_actions: bool = Field(default=False, alias="showActions")
    pending: bool = False
    documents: bool = False
    on_view: Callback | None = Field(default=None, alias="onView")
    on_edit: Callback | None = Field(default=None, alias="onEdit")
    on_delete: Callback | None = Field(default=None, alias="onDelete")
    on_approve: Callback | None = Field(default=None, alias="onApprove")
    on_reject: Callback | None = Field(default=None, alias="onReject")

    # Column selector and sorting
    show_column_selector: bool = Field(default=False, alias="showColumnSelector")
    sort: SortState = Field(default_factory=SortState)
    sort_locally: bool = Field(default=False, alias="sortLocally")
    on_sort_change: Callback | None = Field(default=None, alias="onSortChange")

    # Title bar affordances
    on_filter: Callback | None = Field(default=None, alias="onFilter")
    filter_label: str | None = Field(default=None, alias="filterLabel")
    on_save: Callback | None = Field(default=None, alias="onSave")
    show_save_button: bool = Field(default=False, alias="showSaveButton")
    on_add_row: Callback | None = Field(default=None, alias="onAddRow")
    show_add_row_button: bool = Field(default=False, alias="showAddRowButton")
    add_row_label: str | None = Field(default=None, alias="addRowLabel")

    # Placeholder text
    empty_message: str | None = Field(default=None, alias="emptyMessage")
    loading_message: str | None = Field(default=None, alias="loadingMessage")
    error_message: str | None = Field(default=None, alias="errorMessage")

    # Custom events emitted by cell renderers (e.g. clickable cells)
    on_event: Callback | None = Field(default=None, alias="onEvent")

    def action_slots(self) -> ActionSlots:
        """Row action callbacks as an ``ActionSlots``."""
        return ActionSlots(
            on_view=self.on_view,
            on_edit=self.on_edit,
            on_delete=self.on_delete,
            on_approve=self.on_approve,
            on_reject=self.on_reject,
        )


class DataGrid:
    """A mounted data grid.

    Parameters
    ----------
    columns : Iterable[ColumnDescriptor | Mapping]
        Column descriptors (owned by the caller).
    data : Any
        Rows, in any shape ``normalize_rows`` accepts.
    options : GridOptions, optional
        Grid configuration. Keyword arguments are merged on top.
    settings : GridSettings, optional
        Defaults for unset options. Uses the global settings when omitted.
    **option_kwargs : Any
        ``GridOptions`` fields.

    Raises
    ------
    ColumnConfigError
        If column ids are empty or duplicated.
    PaginationConfigError
        If an explicit pagination mode is combined with legacy hints.
    """

    def __init__(
        self,
        columns: Iterable[ColumnDescriptor | Mapping[str, Any]],
        data: Any = None,
        options: GridOptions | None = None,
        *,
        settings: GridSettings | None = None,
        **option_kwargs: Any,
    ) -> None:
        if options is None:
            options = GridOptions(**option_kwargs)
        elif option_kwargs:
            options = GridOptions.model_validate({**options.model_dump(), **option_kwargs})

        self.options = options
        self.grid_id = options.grid_id
        self.settings = settings or get_settings().grid

        self.columns = ColumnSet(columns)
        self._rows: list[dict[str, Any]] = normalize_rows(data)
        self._loading = False
        self._error: Any = None

        mode = resolve_mode(
            options.pagination,
            total_count=options.total_count,
            has_next=options.has_next,
            has_previous=options.has_previous,
        )
        self.pagination = PaginationController(
            mode,
            options.items_per_page or self.settings.items_per_page,
            current_page=options.current_page,
            enabled=options.show_pagination,
            max_page_buttons=self.settings.max_page_buttons,
            on_page_change=options.on_page_change,
            grid_id=self.grid_id,
        )
        self.visibility = ColumnVisibility(self.columns, grid_id=self.grid_id)
        self.sort = options.sort
        self.dispatcher = ActionDispatcher(
            options.action_slots(),
            show_actions=options.show_actions,
            mode=resolve_action_mode(pending=options.pending, documents=options.documents),
            grid_id=self.grid_id,
        )

        self.pagination.clamp(len(self._rows))
        debug(
            f"Mounted grid '{self.grid_id}': {len(self.columns)} columns, "
            f"{len(self._rows)} rows, {mode.kind} pagination"
        )

    def __repr__(self) -> str:
        return f"DataGrid(grid_id={self.grid_id!r}, columns={len(self.columns)}, rows={len(self._rows)})"

    # -------------------------------------------------------------------------
    # Caller-owned data
    # -------------------------------------------------------------------------

    @property
    def rows(self) -> tuple[Row, ...]:
        """The full row store, as last supplied."""
        return tuple(self._rows)

    @property
    def is_loading(self) -> bool:
        """Whether the caller reported a fetch in flight."""
        return self._loading

    @property
    def error(self) -> Any:
        """The caller-reported fetch error, if any."""
        return self._error

    def update(
        self,
        data: Any = None,
        columns: Iterable[ColumnDescriptor | Mapping[str, Any]] | None = None,
        *,
        pagination: ClientPagination | ServerPagination | None = None,
        total_count: int | None = None,
        has_next: bool | None = None,
        has_previous: bool | None = None,
    ) -> None:
        """Replace rows, columns and/or server pagination hints.

        The grid always reflects the latest values it was given. The current
        page is clamped after every update.
        """
        if columns is not None:
            self.columns = ColumnSet(columns)
            self.visibility.sync(self.columns)
        if data is not None:
            self._rows = normalize_rows(data)

        hints_given = any(h is not None for h in (total_count, has_next, has_previous))
        if pagination is not None or hints_given:
            if pagination is None and isinstance(self.pagination.mode, ServerPagination):
                # Hints are partial updates of the current server state
                current = self.pagination.mode
                pagination = ServerPagination(
                    total_count=current.total_count if total_count is None else total_count,
                    has_next=current.has_next if has_next is None else has_next,
                    has_previous=current.has_previous if has_previous is None else has_previous,
                )
                total_count = has_next = has_previous = None
            self.pagination.update_mode(
                resolve_mode(
                    pagination,
                    total_count=total_count,
                    has_next=has_next,
                    has_previous=has_previous,
                )
            )

        self.pagination.clamp(len(self._rows))

    def set_query_result(self, result: QueryResult | Mapping[str, Any]) -> None:
        """Apply a data-fetch result (``data``, ``is_loading``, ``error``)."""
        if not isinstance(result, QueryResult):
            result = QueryResult.model_validate(result)
        self._loading = result.is_loading
        self._error = result.error
        if result.error is not None:
            warn(f"Grid '{self.grid_id}' received a fetch error: {result.error}")
        if result.data is not None:
            self._rows = normalize_rows(result.data)
            self.pagination.clamp(len(self._rows))

    # -------------------------------------------------------------------------
    # Derived state
    # -------------------------------------------------------------------------

    def _ordered_rows(self) -> list[dict[str, Any]]:
        if not self.options.sort_locally or self.sort.key is None:
            return self._rows
        column = self.columns.get(self.sort.key)
        if column is None:
            return self._rows
        return sort_rows(self._rows, column, self.sort.direction)

    def visible_rows(self) -> list[Row]:
        """Rows on the current page."""
        return self.pagination.window(self._ordered_rows())

    def visible_columns(self) -> list[ColumnDescriptor]:
        """Visible columns in descriptor order."""
        return self.visibility.project(self.columns)

    def footer_sums(self) -> dict[str, float]:
        """Sums of visible ``show_sum`` columns over the aggregation scope."""
        scope = self.options.aggregation_scope or self.settings.aggregation_scope
        if scope == "dataset" and not self.pagination.is_server:
            rows: list[Row] = list(self._rows)
        else:
            rows = self.visible_rows()
        return compute_sums(rows, self.visible_columns())

    @property
    def state(self) -> str:
        """``loading``, ``error``, ``empty`` or ``ready``."""
        if self._loading:
            return "loading"
        if self._error is not None:
            return "error"
        if not self.visible_rows():
            return "empty"
        return "ready"

    # -------------------------------------------------------------------------
    # User interaction
    # -------------------------------------------------------------------------

    def go_to_page(self, page: int) -> bool:
        """Jump to ``page``; emits ``on_page_change`` when it changes."""
        return self.pagination.go_to(page, len(self._rows))

    def next_page(self) -> bool:
        """Advance one page if allowed."""
        return self.pagination.next(len(self._rows))

    def previous_page(self) -> bool:
        """Go back one page if allowed."""
        return self.pagination.previous(len(self._rows))

    def first_page(self) -> bool:
        """Jump to the first page if allowed."""
        return self.pagination.first(len(self._rows))

    def last_page(self) -> bool:
        """Jump to the last page if allowed."""
        return self.pagination.last(len(self._rows))

    def toggle_column(self, column_id: str) -> bool:
        """Show or hide a column through the column selector."""
        if not self.options.show_column_selector:
            warn(f"Column selector is disabled on grid '{self.grid_id}'")
            return False
        return self.visibility.toggle(column_id)

    def toggle_sort(self, column_id: str) -> bool:
        """Toggle the sort intent on a header click; emits ``on_sort_change``."""
        column = self.columns.get(column_id)
        if column is None:
            warn(f"Cannot sort by unknown column '{column_id}' on grid '{self.grid_id}'")
            return False
        new_sort = self.sort.toggled(column)
        if new_sort == self.sort:
            return False
        self.sort = new_sort
        self._call("sort-change", self.options.on_sort_change, new_sort)
        return True

    def find_row(self, key: str) -> tuple[Row, int] | None:
        """Find a row on the current page by its key; returns (row, global index)."""
        start = self.pagination.start_index
        for offset, row in enumerate(self.visible_rows()):
            index = start + offset
            if row_key(row, index) == key:
                return row, index
        return None

    def dispatch(self, action: RowAction | str, key: str) -> bool:
        """Run a row action for the row with ``key`` on the current page."""
        found = self.find_row(key)
        if found is None:
            warn(f"No row '{key}' on the current page of grid '{self.grid_id}'")
            return False
        row, index = found
        return self.dispatcher.dispatch(action, row, index)

    def trigger_filter(self) -> bool:
        """Invoke the caller's filter trigger."""
        return self._call("filter", self.options.on_filter)

    def trigger_save(self) -> bool:
        """Invoke the caller's save handler."""
        if not self.options.show_save_button:
            return False
        return self._call("save", self.options.on_save)

    def trigger_add_row(self) -> bool:
        """Invoke the caller's add-row handler."""
        if not self.options.show_add_row_button:
            return False
        return self._call("add-row", self.options.on_add_row)

    def handle_event(self, event: str, data: Mapping[str, Any] | None = None) -> bool:
        """Route an event emitted by the rendered HTML.

        Parameters
        ----------
        event : str
            Event name from a ``data-event`` attribute (e.g. ``page:next``,
            ``row:edit``, ``column:toggle``).
        data : Mapping, optional
            Event payload (``page``, ``columnId``, ``rowKey`` ...).

        Returns
        -------
        bool
            True if the event changed state or reached a callback.
        """
        payload = dict(data or {})
        handlers: dict[str, Callable[[], bool]] = {
            "page:first": self.first_page,
            "page:previous": self.previous_page,
            "page:next": self.next_page,
            "page:last": self.last_page,
            "grid:filter": self.trigger_filter,
            "grid:save": self.trigger_save,
            "grid:add-row": self.trigger_add_row,
        }
        if event in handlers:
            return handlers[event]()
        if event == "page:goto":
            try:
                page = int(payload.get("page", 0))
            except (TypeError, ValueError):
                warn(f"Invalid page in '{event}' event: {payload.get('page')!r}")
                return False
            return self.go_to_page(page)
        if event == "column:toggle":
            return self.toggle_column(str(payload.get("columnId", "")))
        if event == "sort:toggle":
            return self.toggle_sort(str(payload.get("columnId", "")))
        if event.startswith("row:"):
            return self.dispatch(event.split(":", 1)[1], str(payload.get("rowKey", "")))

        if self.options.on_event is not None:
            return self._call(event, self.options.on_event, event, payload)
        debug(f"Unhandled event '{event}' on grid '{self.grid_id}'")
        return False

    def _call(self, name: str, callback: Callback | None, *args: Any) -> bool:
        if callback is None:
            return False
        try:
            callback(*args)
        except Exception as e:
            log_callback_error(name, self.grid_id, e)
            return False
        return True

    # -------------------------------------------------------------------------
    # Rendering
    # -------------------------------------------------------------------------

    def _title_bar(self) -> TitleBar | None:
        opts = self.options
        show_save = opts.show_save_button and opts.on_save is not None
        add_row_label = None
        if opts.show_add_row_button and opts.on_add_row is not None:
            add_row_label = opts.add_row_label or self.settings.add_row_label
        filter_label = None
        if opts.on_filter is not None:
            filter_label = opts.filter_label or self.settings.filter_label
        column_options = self.visibility.options() if opts.show_column_selector else None

        if not (opts.title or filter_label or show_save or add_row_label or column_options):
            return None
        return TitleBar(
            title=opts.title,
            filter_label=filter_label,
            show_save_button=show_save,
            add_row_label=add_row_label,
            column_options=column_options,
        )

    def _headers(self, columns: list[ColumnDescriptor]) -> list[HeaderCell]:
        headers = []
        for column in columns:
            width, min_width = resolve_width(
                column,
                self._rows,
                default_min_width=self.settings.default_min_width,
                max_width=self.settings.max_auto_width,
            )
            headers.append(
                HeaderCell(
                    column_id=column.id,
                    label=column.header,
                    tooltip=column.tooltip,
                    width=width,
                    min_width=min_width,
                    sortable=column.is_sortable,
                    sort_direction=self.sort.direction_for(column.id),
                )
            )
        return headers

    def _body(self, columns: list[ColumnDescriptor], rows: list[Row]) -> list[BodyRow]:
        start = self.pagination.start_index
        buttons = self.dispatcher.buttons()
        body = []
        for offset, row in enumerate(rows):
            index = start + offset
            body.append(
                BodyRow(
                    key=row_key(row, index),
                    index=index,
                    cells=[resolve_cell(row, column, index) for column in columns],
                    actions=buttons,
                )
            )
        return body

    def _footer(self, columns: list[ColumnDescriptor]) -> list[FooterCell] | None:
        if not self.options.show_footer or not any(c.show_sum for c in columns):
            return None
        sums = self.footer_sums()
        label_id = next((c.id for c in columns if c.id not in sums), None)
        cells = []
        for column in columns:
            if column.id in sums:
                value = sums[column.id]
                cells.append(
                    FooterCell(column_id=column.id, content=format_number(value), value=value)
                )
            elif column.id == label_id:
                cells.append(FooterCell(column_id=column.id, content=self.settings.footer_label))
            else:
                cells.append(FooterCell(column_id=column.id))
        return cells

    def render(self) -> GridView:
        """Build the view model for the current state."""
        opts = self.options
        columns = self.visible_columns()
        state = self.state
        common: dict[str, Any] = {
            "grid_id": self.grid_id,
            "state": state,
            "title_bar": self._title_bar(),
            "headers": self._headers(columns),
            "show_actions": bool(self.dispatcher.capabilities),
            "actions_width": self.settings.actions_column_width,
            "max_height": opts.max_height or self.settings.max_height,
            "class_name": opts.class_name,
        }

        if state == "loading":
            return GridView(message=opts.loading_message or self.settings.loading_message, **common)
        if state == "error":
            return GridView(message=opts.error_message or self.settings.error_message, **common)

        pagination = self.pagination.view(len(self._rows))
        if state == "empty":
            return GridView(
                message=opts.empty_message or self.settings.empty_message,
                pagination=pagination,
                **common,
            )

        rows = self.visible_rows()
        return GridView(
            rows=self._body(columns, rows),
            footer=self._footer(columns),
            pagination=pagination,
            **common,
        )

    def build_html(self) -> str:
        """Render the current state to an HTML fragment."""
        from .html import build_grid_html

        return build_grid_html(self.render())

    def to_dict(self) -> dict[str, Any]:
        """Render the current state to camelCase JSON-ready data."""
        return self.render().to_dict()
