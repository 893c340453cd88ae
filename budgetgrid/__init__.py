"""budgetgrid - a generic data grid engine for admin consoles.

Declarative column descriptors, client or server pagination, per-page
footer sums, row actions and a column visibility selector, rendered to a
view model or an HTML fragment.
"""

from .actions import (
    ActionCapabilities,
    ActionDispatcher,
    ActionMode,
    ActionSlots,
    RowAction,
)
from .aggregation import compute_sums, format_number
from .cells import resolve_cell
from .columns import ColumnDescriptor, ColumnSet
from .config import (
    BudgetGridSettings,
    GridSettings,
    LogSettings,
    get_settings,
    reload_settings,
)
from .exceptions import (
    BudgetGridException,
    ColumnConfigError,
    ConfigurationError,
    PaginationConfigError,
)
from .html import build_grid_html
from .pagination import (
    ClientPagination,
    PaginationController,
    ServerPagination,
    resolve_mode,
)
from .renderers import (
    clickable_renderer,
    currency_renderer,
    number_renderer,
    status_badge_renderer,
)
from .rows import normalize_rows, row_key
from .shell import DataGrid, GridOptions, QueryResult
from .sorting import SortState, sort_rows
from .view import GridView
from .visibility import ColumnVisibility


__version__ = "0.1.0"

__all__ = [
    "ActionCapabilities",
    "ActionDispatcher",
    "ActionMode",
    "ActionSlots",
    "BudgetGridException",
    "BudgetGridSettings",
    "ClientPagination",
    "ColumnConfigError",
    "ColumnDescriptor",
    "ColumnSet",
    "ColumnVisibility",
    "ConfigurationError",
    "DataGrid",
    "GridOptions",
    "GridSettings",
    "GridView",
    "LogSettings",
    "PaginationConfigError",
    "PaginationController",
    "QueryResult",
    "RowAction",
    "ServerPagination",
    "SortState",
    "__version__",
    "build_grid_html",
    "clickable_renderer",
    "compute_sums",
    "currency_renderer",
    "format_number",
    "get_settings",
    "normalize_rows",
    "number_renderer",
    "reload_settings",
    "resolve_cell",
    "resolve_mode",
    "row_key",
    "sort_rows",
    "status_badge_renderer",
]
