# pylint: disable=unused-argument
"""Stock render functions for common budget-console columns.

Each factory returns a ``(value, row) -> str`` function suitable for
``ColumnDescriptor.render``. Output is HTML and is emitted verbatim by the
grid, so every factory escapes the values it interpolates.

Usage:
    ColumnDescriptor(id="status", header="Status", accessor="status",
                     render=status_badge_renderer())
    ColumnDescriptor(id="amount", header="Amount", accessor="amount",
                     render=currency_renderer("SAR"), show_sum=True)
"""

from __future__ import annotations

import html

from collections.abc import Callable, Mapping
from typing import Any

from .aggregation import coerce_number, format_number
from .cells import stringify_value


Renderer = Callable[[Any, Mapping[str, Any]], str]

# Status text (lower-cased) -> badge tone
DEFAULT_STATUS_TONES: dict[str, str] = {
    "active": "success",
    "approved": "success",
    "pending": "warning",
    "under approval": "warning",
    "in progress": "warning",
    "rejected": "danger",
    "inactive": "danger",
}


def number_renderer(max_fraction_digits: int = 3) -> Renderer:
    """Grouped number formatting; non-numeric values render as 0."""

    def render(value: Any, row: Mapping[str, Any]) -> str:
        if value is None or value == "":
            return ""
        return html.escape(format_number(coerce_number(value), max_fraction_digits))

    return render


def currency_renderer(currency: str = "", decimals: int = 2) -> Renderer:
    """Fixed-decimal amount with an optional currency code prefix."""

    def render(value: Any, row: Mapping[str, Any]) -> str:
        if value is None or value == "":
            return ""
        amount = f"{coerce_number(value):,.{decimals}f}"
        text = f"{currency} {amount}" if currency else amount
        return f'<span class="bg-amount">{html.escape(text)}</span>'

    return render


def status_badge_renderer(
    tones: Mapping[str, str] | None = None,
    default_tone: str = "danger",
) -> Renderer:
    """Colored status pill keyed on the lower-cased status text."""
    tone_map = {k.lower(): v for k, v in (tones or DEFAULT_STATUS_TONES).items()}

    def render(value: Any, row: Mapping[str, Any]) -> str:
        text = stringify_value(value)
        tone = tone_map.get(text.lower(), default_tone)
        return f'<span class="bg-badge bg-badge-{tone}">{html.escape(text)}</span>'

    return render


def clickable_renderer(event: str, key_field: str = "id") -> Renderer:
    """A clickable cell that emits ``event`` with the row's ``key_field``.

    Used for cells such as a transfer code that navigates to a detail page;
    the host page maps the event to a navigation intent.
    """

    def render(value: Any, row: Mapping[str, Any]) -> str:
        key = html.escape(stringify_value(row.get(key_field)), quote=True)
        return (
            f'<span class="bg-clickable" data-event="{html.escape(event, quote=True)}" '
            f'data-key="{key}">{html.escape(stringify_value(value))}</span>'
        )

    return render
