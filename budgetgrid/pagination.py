"""Pagination controller.

Two mutually exclusive modes, chosen once when a grid is built:

- ``ClientPagination``: the grid holds every row and slices the current
  page out locally.
- ``ServerPagination``: the caller already fetched exactly one page; the
  grid renders it unchanged and only drives the controls, emitting page
  changes so the caller can re-fetch.

Usage:
    from budgetgrid.pagination import ServerPagination

    mode = ServerPagination(total_count=57, has_next=True, has_previous=True)
"""

from __future__ import annotations

import math

from collections.abc import Callable, Sequence
from typing import Annotated, Any, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from .exceptions import PaginationConfigError
from .log import debug, log_callback_error, warn
from .view import PageButton, PaginationView


T = TypeVar("T")

PageChangeCallback = Callable[[int], Any]

_ELLIPSIS = "…"


class ClientPagination(BaseModel):
    """Client-side windowing over the full row store."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["client"] = "client"


class ServerPagination(BaseModel):
    """Server-side paging: rows already hold exactly one page.

    Attributes
    ----------
        total_count: Total rows on the server, if known.
        has_next: Whether the server has a page after the current one.
        has_previous: Whether the server has a page before the current one.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    kind: Literal["server"] = "server"
    total_count: int | None = Field(default=None, ge=0, alias="totalCount")
    has_next: bool | None = Field(default=None, alias="hasNext")
    has_previous: bool | None = Field(default=None, alias="hasPrevious")


PaginationMode = Annotated[ClientPagination | ServerPagination, Field(discriminator="kind")]

_MODE_ADAPTER: TypeAdapter[ClientPagination | ServerPagination] = TypeAdapter(PaginationMode)


def resolve_mode(
    mode: ClientPagination | ServerPagination | dict[str, Any] | None = None,
    *,
    total_count: int | None = None,
    has_next: bool | None = None,
    has_previous: bool | None = None,
) -> ClientPagination | ServerPagination:
    """Pick the pagination mode from an explicit mode or legacy hints.

    An explicit ``mode`` always wins and must not be combined with the
    legacy ``total_count``/``has_next``/``has_previous`` hints. Without a
    mode, ``total_count`` selects server mode; ``has_next``/``has_previous``
    alone also select server mode, with an unknown page count.

    Raises
    ------
    PaginationConfigError
        If an explicit mode is combined with legacy hints.
    """
    hints = {
        "total_count": total_count,
        "has_next": has_next,
        "has_previous": has_previous,
    }
    given = {k: v for k, v in hints.items() if v is not None}

    if mode is not None:
        resolved = mode if isinstance(mode, BaseModel) else _MODE_ADAPTER.validate_python(mode)
        if given:
            raise PaginationConfigError(
                "Pass server hints on the pagination mode, not alongside it",
                mode=resolved.kind,
                hints=sorted(given),
            )
        return resolved

    if total_count is not None:
        return ServerPagination(
            total_count=total_count, has_next=has_next, has_previous=has_previous
        )

    if given:
        warn("Server pagination hints given without total_count; page count is unknown")
        return ServerPagination(has_next=has_next, has_previous=has_previous)

    return ClientPagination()


class PaginationController:
    """Owns the current page and computes the visible row window.

    Parameters
    ----------
    mode : ClientPagination or ServerPagination
        Pagination mode; its kind is fixed for the controller's lifetime.
    items_per_page : int
        Rows per page (> 0).
    current_page : int
        Initial page (1-based).
    enabled : bool
        When False, no windowing happens and no controls render.
    max_page_buttons : int
        Maximum number of page-number entries before gaps are used.
    on_page_change : callable, optional
        Called with the new page number whenever the page changes.
    grid_id : str
        Grid identifier used in log messages.
    """

    def __init__(
        self,
        mode: ClientPagination | ServerPagination,
        items_per_page: int,
        *,
        current_page: int = 1,
        enabled: bool = True,
        max_page_buttons: int = 5,
        on_page_change: PageChangeCallback | None = None,
        grid_id: str = "",
    ) -> None:
        if items_per_page <= 0:
            raise PaginationConfigError(
                "items_per_page must be positive", mode=mode.kind, items_per_page=items_per_page
            )
        self._mode = mode
        self.items_per_page = items_per_page
        self._current_page = max(1, int(current_page))
        self.enabled = enabled
        self.max_page_buttons = max_page_buttons
        self.on_page_change = on_page_change
        self.grid_id = grid_id

    @property
    def mode(self) -> ClientPagination | ServerPagination:
        """The active pagination mode."""
        return self._mode

    @property
    def is_server(self) -> bool:
        """True in server mode."""
        return isinstance(self._mode, ServerPagination)

    @property
    def current_page(self) -> int:
        """The current 1-based page."""
        return self._current_page

    @property
    def start_index(self) -> int:
        """Global index of the first row on the current page."""
        if not self.enabled:
            return 0
        return (self._current_page - 1) * self.items_per_page

    def update_mode(self, mode: ClientPagination | ServerPagination) -> None:
        """Replace server hints after a re-fetch.

        The mode kind is fixed per grid; a different kind is ignored.
        """
        if mode.kind != self._mode.kind:
            warn(
                f"Ignoring switch from {self._mode.kind} to {mode.kind} pagination "
                f"on grid '{self.grid_id}'"
            )
            return
        self._mode = mode

    def total_pages(self, row_count: int) -> int | None:
        """Number of pages, or None when a server total is unknown."""
        if isinstance(self._mode, ServerPagination):
            if self._mode.total_count is None:
                return None
            return math.ceil(self._mode.total_count / self.items_per_page)
        return math.ceil(row_count / self.items_per_page)

    def window(self, rows: Sequence[T]) -> list[T]:
        """Rows to render for the current page.

        Server mode and disabled pagination return ``rows`` unchanged.
        """
        if not self.enabled or self.is_server:
            return list(rows)
        start = self.start_index
        return list(rows[start : start + self.items_per_page])

    def clamp(self, row_count: int) -> bool:
        """Pull the current page back into range after the rows changed.

        Must be called on every row-count change. In server mode a clamp
        also emits ``on_page_change`` so the caller re-fetches.

        Returns
        -------
        bool
            True if the current page changed.
        """
        last = self.total_pages(row_count)
        if last is None:
            return False
        target = min(self._current_page, max(last, 1))
        if target == self._current_page:
            return False
        debug(
            f"Clamping page {self._current_page} -> {target} on grid '{self.grid_id}' "
            f"({row_count} rows)"
        )
        self._current_page = target
        if self.is_server:
            self._emit(target)
        return True

    def can_go_previous(self) -> bool:
        """Whether the Back control is enabled."""
        if isinstance(self._mode, ServerPagination):
            return bool(self._mode.has_previous)
        return self._current_page > 1

    def can_go_next(self, row_count: int) -> bool:
        """Whether the Next control is enabled."""
        if isinstance(self._mode, ServerPagination):
            return bool(self._mode.has_next)
        return self._current_page < (self.total_pages(row_count) or 0)

    def can_go_first(self) -> bool:
        """Whether the First control is enabled."""
        return self.can_go_previous()

    def can_go_last(self, row_count: int) -> bool:
        """Whether the Last control is enabled (needs a known page count)."""
        return self.can_go_next(row_count) and self.total_pages(row_count) is not None

    def go_to(self, page: int, row_count: int, *, check_range: bool = True) -> bool:
        """Move to ``page`` and emit ``on_page_change``.

        Out-of-range pages and the current page are no-ops. Server-side
        Next and Back pass ``check_range=False``; there the hints alone
        decide whether a neighbouring page exists.

        Returns
        -------
        bool
            True if the page changed.
        """
        last = self.total_pages(row_count)
        if page < 1 or (check_range and last is not None and page > max(last, 1)):
            debug(f"Ignoring out-of-range page {page} on grid '{self.grid_id}'")
            return False
        if page == self._current_page:
            return False
        self._current_page = page
        self._emit(page)
        return True

    def next(self, row_count: int) -> bool:
        """Go to the next page if allowed."""
        if not self.can_go_next(row_count):
            return False
        return self.go_to(self._current_page + 1, row_count, check_range=not self.is_server)

    def previous(self, row_count: int) -> bool:
        """Go to the previous page if allowed."""
        if not self.can_go_previous():
            return False
        return self.go_to(self._current_page - 1, row_count, check_range=not self.is_server)

    def first(self, row_count: int) -> bool:
        """Go to the first page if allowed."""
        if not self.can_go_first():
            return False
        return self.go_to(1, row_count)

    def last(self, row_count: int) -> bool:
        """Go to the last page if allowed."""
        last = self.total_pages(row_count)
        if last is None or not self.can_go_last(row_count):
            return False
        return self.go_to(last, row_count)

    def page_numbers(self, row_count: int) -> list[PageButton]:
        """Page-number entries, with ``…`` gaps on long ranges.

        Up to ``max_page_buttons`` pages are listed in full. Beyond that the
        strip shows the first page, the current page's neighbours and the
        last page, separated by gaps.
        """
        total = self.total_pages(row_count)
        current = self._current_page
        if total is None:
            return [PageButton(page=current, label=str(current), current=True)]

        if total <= self.max_page_buttons:
            pages: list[int | None] = list(range(1, total + 1))
        else:
            pages = [1]
            if current > 3:
                pages.append(None)
            start = max(2, current - 1)
            end = min(total - 1, current + 1)
            pages.extend(p for p in range(start, end + 1) if p not in pages)
            if current < total - 2:
                pages.append(None)
            if total not in pages:
                pages.append(total)

        return [
            PageButton(label=_ELLIPSIS)
            if page is None
            else PageButton(page=page, label=str(page), current=page == current)
            for page in pages
        ]

    def view(self, row_count: int) -> PaginationView | None:
        """Controls to render, or None when pagination is off or unnecessary."""
        if not self.enabled:
            return None
        total = self.total_pages(row_count)
        if total is None:
            if not (self.can_go_next(row_count) or self.can_go_previous()):
                return None
        elif total <= 1:
            return None

        return PaginationView(
            kind=self._mode.kind,
            current_page=self._current_page,
            total_pages=total,
            can_go_first=self.can_go_first(),
            can_go_previous=self.can_go_previous(),
            can_go_next=self.can_go_next(row_count),
            can_go_last=self.can_go_last(row_count),
            pages=self.page_numbers(row_count),
        )

    def _emit(self, page: int) -> None:
        if self.on_page_change is None:
            return
        try:
            self.on_page_change(page)
        except Exception as e:
            log_callback_error("page-change", self.grid_id, e)
