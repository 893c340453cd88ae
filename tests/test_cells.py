"""Tests for cell value resolution."""

from __future__ import annotations

import logging

from budgetgrid.cells import access_value, resolve_cell, stringify_value
from budgetgrid.columns import ColumnDescriptor


class TestAccessValue:
    """Tests for access_value()."""

    def test_reads_accessor(self):
        """The accessor field is read with its type preserved."""
        column = ColumnDescriptor(id="amount", accessor="amount")
        assert access_value({"amount": 12.5}, column) == 12.5

    def test_missing_field(self):
        """Missing fields read as None."""
        column = ColumnDescriptor(id="amount", accessor="amount")
        assert access_value({}, column) is None

    def test_no_accessor_does_not_fall_back_to_id(self):
        """The column id is never used as an accessor."""
        column = ColumnDescriptor(id="amount")
        assert access_value({"amount": 5}, column) is None


class TestStringifyValue:
    """Tests for stringify_value()."""

    def test_none_is_empty(self):
        """None renders as an empty string."""
        assert stringify_value(None) == ""

    def test_booleans_lowercase(self):
        """Booleans render as true/false."""
        assert stringify_value(True) == "true"
        assert stringify_value(False) == "false"

    def test_numbers(self):
        """Numbers use their str() form."""
        assert stringify_value(0) == "0"
        assert stringify_value(1.5) == "1.5"

    def test_integral_floats(self):
        """Whole floats render without a trailing .0."""
        assert stringify_value(100.0) == "100"
        assert stringify_value(-0.0) == "0"
        assert stringify_value(2.50) == "2.5"


class TestResolveCell:
    """Tests for resolve_cell()."""

    def test_render_output_used_verbatim(self):
        """Render output is trusted markup."""
        column = ColumnDescriptor(
            id="status",
            accessor="status",
            render=lambda value, row: f"<b>{value}</b>",
        )
        cell = resolve_cell({"status": "Pending"}, column)
        assert cell.content == "<b>Pending</b>"
        assert cell.markup is True
        assert cell.raw == "Pending"

    def test_render_receives_row(self):
        """Render functions see the whole row."""
        column = ColumnDescriptor(
            id="label",
            render=lambda value, row: f"{row['code']} ({row['entity']})",
        )
        cell = resolve_cell({"code": "FAR-1", "entity": "IT"}, column)
        assert cell.content == "FAR-1 (IT)"

    def test_render_receives_index_when_accepted(self):
        """A three-argument render function gets the global row index."""
        column = ColumnDescriptor(id="n", render=lambda value, row, index: str(index + 1))
        assert resolve_cell({}, column, index=11).content == "12"

    def test_render_none_is_blank(self):
        """A render function returning None yields a blank cell."""
        column = ColumnDescriptor(id="a", accessor="a", render=lambda value, row: None)
        cell = resolve_cell({"a": 1}, column)
        assert cell.content == ""
        assert cell.markup is False

    def test_render_non_string_is_stringified(self):
        """Non-string render output is converted to text."""
        column = ColumnDescriptor(id="a", accessor="a", render=lambda value, row: value * 2)
        cell = resolve_cell({"a": 4}, column)
        assert cell.content == "8"
        assert cell.markup is False

    def test_render_error_degrades_to_blank(self, caplog):
        """A failing render function blanks the cell and logs a warning."""

        def broken(value, row):
            raise KeyError("missing")

        column = ColumnDescriptor(id="a", accessor="a", render=broken)
        with caplog.at_level(logging.WARNING, logger="budgetgrid"):
            cell = resolve_cell({"a": 1}, column, index=4)
        assert cell.content == ""
        assert "column 'a'" in caplog.text
        assert "row 4" in caplog.text

    def test_accessor_value(self):
        """Accessor-only columns show the stringified value."""
        column = ColumnDescriptor(id="amount", accessor="amount")
        cell = resolve_cell({"amount": 250}, column)
        assert cell.content == "250"
        assert cell.markup is False

    def test_accessor_missing_field(self):
        """A missing field renders empty."""
        column = ColumnDescriptor(id="amount", accessor="amount")
        assert resolve_cell({"id": 1}, column).content == ""

    def test_blank_column(self):
        """Columns with neither accessor nor render are blank."""
        cell = resolve_cell({"blank": "x"}, ColumnDescriptor(id="blank"))
        assert cell.content == ""
        assert cell.column_id == "blank"

    def test_row_not_mutated(self):
        """Resolution never modifies the row."""
        row = {"a": 1}
        column = ColumnDescriptor(id="a", accessor="a", render=lambda value, row: "x")
        resolve_cell(row, column)
        assert row == {"a": 1}
