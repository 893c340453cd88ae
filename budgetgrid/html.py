"""HTML rendering for ``GridView`` snapshots.

Produces a self-contained fragment: title bar, scrollable table with the
aggregate footer, then the pagination strip. Every interactive element
carries a ``data-event`` attribute and, where needed, a JSON ``data-data``
payload; the host page forwards clicks to ``DataGrid.handle_event``.
"""

from __future__ import annotations

import html
import json

from typing import Any

from .view import (
    BodyCell,
    BodyRow,
    ColumnOption,
    FooterCell,
    GridView,
    HeaderCell,
    PaginationView,
    TitleBar,
)


_SORT_ARROWS = {"asc": "▲", "desc": "▼"}


def _attr(value: Any) -> str:
    return html.escape(str(value), quote=True)


def _data_attr(payload: dict[str, Any]) -> str:
    """JSON event payload as a ``data-data`` attribute."""
    if not payload:
        return ""
    return f' data-data="{html.escape(json.dumps(payload), quote=True)}"'


def _button(
    label: str,
    event: str,
    *,
    payload: dict[str, Any] | None = None,
    variant: str = "",
    disabled: bool = False,
    title: str | None = None,
) -> str:
    variant_class = f" bg-btn-{variant}" if variant else ""
    disabled_attr = " disabled" if disabled else ""
    title_attr = f' title="{_attr(title)}"' if title else ""
    return (
        f'<button type="button" class="bg-btn{variant_class}" data-event="{_attr(event)}"'
        f"{_data_attr(payload or {})}{title_attr}{disabled_attr}>"
        f"{html.escape(label)}</button>"
    )


def _column_selector(options: list[ColumnOption]) -> str:
    items = []
    for option in options:
        checked = " checked" if option.visible else ""
        payload = _data_attr({"columnId": option.column_id})
        items.append(
            f'<label class="bg-column-option">'
            f'<input type="checkbox" data-event="column:toggle" '
            f'data-column-id="{_attr(option.column_id)}"{payload}{checked}> '
            f"{html.escape(option.label)}</label>"
        )
    return (
        '<details class="bg-column-selector"><summary>Columns</summary>'
        f'<div class="bg-column-options">{"".join(items)}</div></details>'
    )


def _title_bar(bar: TitleBar | None) -> str:
    if bar is None:
        return ""
    title = f'<h2 class="bg-title">{html.escape(bar.title)}</h2>' if bar.title else ""
    controls = []
    if bar.column_options:
        controls.append(_column_selector(bar.column_options))
    if bar.show_save_button:
        controls.append(_button("Save", "grid:save", variant="primary"))
    if bar.filter_label:
        controls.append(_button(bar.filter_label, "grid:filter", variant="outline"))
    return (
        f'<div class="bg-title-bar">{title}'
        f'<div class="bg-title-controls">{"".join(controls)}</div></div>'
    )


def _header_cell(cell: HeaderCell) -> str:
    style = f"width:{cell.width}px;min-width:{cell.min_width}px"
    title_attr = f' title="{_attr(cell.tooltip)}"' if cell.tooltip else ""
    label = html.escape(cell.label)
    if not cell.sortable:
        return f'<th data-column-id="{_attr(cell.column_id)}" style="{style}"{title_attr}>{label}</th>'

    arrow = ""
    aria = ""
    if cell.sort_direction is not None:
        arrow = f' <span class="bg-sort-indicator">{_SORT_ARROWS[cell.sort_direction]}</span>'
        aria = f' aria-sort="{"ascending" if cell.sort_direction == "asc" else "descending"}"'
    return (
        f'<th class="bg-sortable" data-column-id="{_attr(cell.column_id)}" '
        f'data-event="sort:toggle"{_data_attr({"columnId": cell.column_id})} '
        f'style="{style}"{title_attr}{aria}>{label}{arrow}</th>'
    )


def _body_cell(cell: BodyCell) -> str:
    content = cell.content if cell.markup else html.escape(cell.content)
    return f'<td data-column-id="{_attr(cell.column_id)}">{content}</td>'


def _body_row(row: BodyRow, show_actions: bool) -> str:
    cells = "".join(_body_cell(cell) for cell in row.cells)
    if show_actions:
        buttons = "".join(
            _button(
                action.label,
                action.event,
                payload={"rowKey": row.key},
                variant="danger" if action.destructive else "ghost",
                title=action.label,
            )
            for action in row.actions
        )
        cells += f'<td class="bg-actions">{buttons}</td>'
    return f'<tr data-row-key="{_attr(row.key)}" data-row-index="{row.index}">{cells}</tr>'


def _footer_row(footer: list[FooterCell], show_actions: bool) -> str:
    cells = "".join(
        f'<td data-column-id="{_attr(cell.column_id)}">{html.escape(cell.content)}</td>'
        for cell in footer
    )
    if show_actions:
        cells += "<td></td>"
    return f'<tfoot><tr class="bg-footer">{cells}</tr></tfoot>'


def _pagination(view: PaginationView | None) -> str:
    if view is None:
        return ""
    parts = [
        _button("First", "page:first", disabled=not view.can_go_first),
        _button("Back", "page:previous", disabled=not view.can_go_previous),
    ]
    for page in view.pages:
        if page.is_gap:
            parts.append(f'<span class="bg-page-gap">{html.escape(page.label)}</span>')
        else:
            parts.append(
                _button(
                    page.label,
                    "page:goto",
                    payload={"page": page.page},
                    variant="current" if page.current else "",
                )
            )
    parts.append(_button("Next", "page:next", disabled=not view.can_go_next))
    parts.append(_button("Last", "page:last", disabled=not view.can_go_last))
    return (
        f'<nav class="bg-pagination" data-kind="{view.kind}" '
        f'data-current-page="{view.current_page}">{"".join(parts)}</nav>'
    )


def build_grid_html(view: GridView) -> str:
    """Render a grid snapshot to an HTML fragment.

    Parameters
    ----------
    view : GridView
        Snapshot produced by ``DataGrid.render()``.

    Returns
    -------
    str
        HTML fragment rooted at a ``div.bg-grid`` element.
    """
    headers = "".join(_header_cell(cell) for cell in view.headers)
    if view.show_actions:
        headers += (
            f'<th class="bg-actions" style="width:{view.actions_width}px;'
            f'min-width:{view.actions_width}px">Actions</th>'
        )

    if view.message is not None:
        body = (
            f'<tr class="bg-message bg-{view.state}">'
            f'<td colspan="{max(view.column_count, 1)}">{html.escape(view.message)}</td></tr>'
        )
    else:
        body = "".join(_body_row(row, view.show_actions) for row in view.rows)

    footer = _footer_row(view.footer, view.show_actions) if view.footer else ""

    label = view.title_bar.add_row_label if view.title_bar is not None else None
    add_row = ""
    if label:
        add_row = f'<div class="bg-add-row">{_button(label, "grid:add-row", variant="outline")}</div>'

    class_attr = f"bg-grid {view.class_name}".strip()
    return (
        f'<div class="{_attr(class_attr)}" id="{_attr(view.grid_id)}" '
        f'data-grid-id="{_attr(view.grid_id)}" data-state="{view.state}">'
        f"{_title_bar(view.title_bar)}"
        f'<div class="bg-scroll" style="max-height:{_attr(view.max_height)};overflow:auto">'
        f'<table class="bg-table"><thead><tr>{headers}</tr></thead>'
        f"<tbody>{body}</tbody>{footer}</table></div>"
        f"{add_row}"
        f"{_pagination(view.pagination)}"
        "</div>"
    )
