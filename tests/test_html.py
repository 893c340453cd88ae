"""Tests for HTML rendering of grid snapshots."""

from __future__ import annotations

import html
import json

from unittest.mock import MagicMock

from budgetgrid.columns import ColumnDescriptor
from budgetgrid.html import build_grid_html
from budgetgrid.shell import DataGrid
from budgetgrid.view import GridView


class TestBuildGridHtml:
    """Tests for build_grid_html()."""

    def test_root_element(self, amount_columns, amount_rows):
        """The fragment is rooted at the grid container."""
        out = DataGrid(amount_columns, amount_rows, grid_id="g1", class_name="wide").build_html()
        assert out.startswith('<div class="bg-grid wide" id="g1" data-grid-id="g1"')
        assert 'data-state="ready"' in out
        assert "max-height:500px" in out

    def test_accessor_values_escaped(self):
        """Plain values are escaped."""
        columns = [ColumnDescriptor(id="note", accessor="note")]
        out = DataGrid(columns, [{"note": "<script>alert(1)</script>"}]).build_html()
        assert "<script>" not in out
        assert "&lt;script&gt;" in out

    def test_render_output_verbatim(self):
        """Render output is emitted as markup."""
        columns = [ColumnDescriptor(id="s", accessor="s", render=lambda v, r: f"<em>{v}</em>")]
        out = DataGrid(columns, [{"s": "ok"}]).build_html()
        assert "<em>ok</em>" in out

    def test_headers(self, transfer_columns, transfer_rows):
        """Headers carry widths, tooltips and sort events."""
        out = DataGrid(transfer_columns, transfer_rows).build_html()
        assert 'title="Requesting cost center"' in out
        assert 'data-event="sort:toggle"' in out
        # status is not sortable
        assert '<th data-column-id="status"' in out

    def test_sort_indicator(self, transfer_columns, transfer_rows):
        """The sorted header shows its direction."""
        grid = DataGrid(transfer_columns, transfer_rows)
        grid.toggle_sort("amount")
        out = grid.build_html()
        assert 'aria-sort="descending"' in out
        assert "▼" in out

    def test_empty_message_spans_columns(self, amount_columns):
        """The empty state spans every column."""
        out = DataGrid(amount_columns, [], show_actions=True, on_edit=MagicMock()).build_html()
        assert '<td colspan="3">No data available</td>' in out

    def test_action_buttons(self, amount_columns, amount_rows):
        """Action buttons carry the event and row key."""
        out = DataGrid(
            amount_columns, amount_rows, show_actions=True, on_delete=MagicMock()
        ).build_html()
        assert 'data-event="row:delete"' in out
        payload = html.escape(json.dumps({"rowKey": "id:1"}), quote=True)
        assert f'data-data="{payload}"' in out
        assert "bg-btn-danger" in out
        assert ">Actions</th>" in out

    def test_footer(self, amount_columns, amount_rows):
        """The footer row shows the label and sums."""
        out = DataGrid(amount_columns, amount_rows, show_footer=True).build_html()
        assert '<tr class="bg-footer">' in out
        assert ">Total:</td>" in out
        assert ">600</td>" in out

    def test_pagination_controls(self, amount_columns, many_rows):
        """First/Back/Next/Last and page numbers render."""
        out = DataGrid(amount_columns, many_rows, show_pagination=True).build_html()
        assert 'data-event="page:first"' in out
        assert 'data-event="page:last"' in out
        assert 'data-event="page:goto"' in out
        assert "bg-btn-current" in out
        # Back is disabled on the first page
        assert 'data-event="page:previous" disabled>Back</button>' in out

    def test_title_bar(self, transfer_columns, transfer_rows):
        """Title bar controls render."""
        out = DataGrid(
            transfer_columns,
            transfer_rows,
            title="Pending <Transfers>",
            show_column_selector=True,
            on_filter=MagicMock(),
            on_save=MagicMock(),
            show_save_button=True,
            on_add_row=MagicMock(),
            show_add_row_button=True,
        ).build_html()
        assert "Pending &lt;Transfers&gt;" in out
        assert 'data-event="grid:filter"' in out
        assert 'data-event="grid:save"' in out
        assert 'data-event="grid:add-row"' in out
        assert ">Add New Row</button>" in out
        assert out.count('data-event="column:toggle"') == 4

    def test_minimal_view(self):
        """A bare view renders without error."""
        out = build_grid_html(GridView(grid_id="x", state="empty", message="None"))
        assert '<td colspan="1">None</td>' in out
