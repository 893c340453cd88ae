"""Tests for CLI module.

Tests the command-line interface for configuration management and HTML
previews.
"""

from __future__ import annotations

import json
import logging

from io import StringIO
from pathlib import Path
from unittest.mock import patch

from budgetgrid.cli import main, show_config_sources


def _run(argv: list[str]) -> tuple[int, str, str]:
    with (
        patch("sys.stdout", new_callable=StringIO) as mock_stdout,
        patch("sys.stderr", new_callable=StringIO) as mock_stderr,
    ):
        result = main(argv)
    return result, mock_stdout.getvalue(), mock_stderr.getvalue()


class TestMainEntryPoint:
    """Tests for CLI main entry point."""

    def test_no_args_prints_help_text(self):
        """Running with no args prints help text with the subcommands."""
        result, output, _ = _run([])
        assert result == 0
        assert "usage:" in output.lower()
        assert "config" in output
        assert "init" in output
        assert "preview" in output

    def test_applies_log_level_from_env(self, monkeypatch):
        """BUDGETGRID_LOG__LEVEL takes effect for every command."""
        monkeypatch.setenv("BUDGETGRID_LOG__LEVEL", "ERROR")
        _run(["config", "--show"])
        assert logging.getLogger("budgetgrid").level == logging.ERROR


class TestHandleConfig:
    """Tests for the config command."""

    def test_show(self):
        """--show prints a readable table."""
        result, output, _ = _run(["config", "--show"])
        assert result == 0
        assert "Grid Defaults" in output
        assert "items_per_page" in output

    def test_default_is_show(self):
        """No flag behaves like --show."""
        _, output, _ = _run(["config"])
        assert "Grid Defaults" in output

    def test_toml(self):
        """--toml prints TOML sections."""
        _, output, _ = _run(["config", "--toml"])
        assert "[grid]" in output
        assert "items_per_page = 10" in output
        assert 'footer_label = "Total:"' in output

    def test_env(self):
        """--env prints export lines."""
        _, output, _ = _run(["config", "--env"])
        assert 'export BUDGETGRID_GRID__ITEMS_PER_PAGE="10"' in output
        assert 'export BUDGETGRID_LOG__LEVEL="WARNING"' in output

    def test_output_file(self, tmp_path):
        """--output writes to a file."""
        target = tmp_path / "out.toml"
        result, output, _ = _run(["config", "--toml", "--output", str(target)])
        assert result == 0
        assert "[grid]" in target.read_text(encoding="utf-8")
        assert "written to" in output

    def test_sources(self, monkeypatch):
        """--sources lists every layer."""
        monkeypatch.setenv("BUDGETGRID_GRID__ITEMS_PER_PAGE", "20")
        with patch("sys.stdout", new_callable=StringIO) as mock_stdout:
            assert show_config_sources() == 0
        output = mock_stdout.getvalue()
        assert "pyproject.toml [tool.budgetgrid]" in output
        assert "1 vars" in output


class TestHandleInit:
    """Tests for the init command."""

    def test_creates_file(self, tmp_path):
        """init writes a commented TOML file."""
        target = tmp_path / "budgetgrid.toml"
        result, output, _ = _run(["init", "--path", str(target)])
        assert result == 0
        assert "Created" in output
        content = target.read_text(encoding="utf-8")
        assert content.startswith("# budgetgrid Configuration File")
        assert "[grid]" in content

    def test_refuses_overwrite(self, tmp_path):
        """An existing file is kept unless --force is given."""
        target = tmp_path / "budgetgrid.toml"
        target.write_text("keep", encoding="utf-8")
        result, _, errors = _run(["init", "--path", str(target)])
        assert result == 1
        assert "already exists" in errors
        assert target.read_text(encoding="utf-8") == "keep"

        result, _, _ = _run(["init", "--path", str(target), "--force"])
        assert result == 0
        assert "[grid]" in target.read_text(encoding="utf-8")


class TestHandlePreview:
    """Tests for the preview command."""

    def _write(self, path: Path, data) -> str:
        path.write_text(json.dumps(data), encoding="utf-8")
        return str(path)

    def test_preview_infers_columns(self, tmp_path, amount_rows):
        """Without a columns file every key becomes a column."""
        rows = self._write(tmp_path / "rows.json", amount_rows)
        result, output, _ = _run(["preview", rows])
        assert result == 0
        assert 'data-column-id="amt"' in output
        assert "bg-grid" in output

    def test_preview_with_columns(self, tmp_path, many_rows):
        """A columns file controls headers and sums."""
        rows = self._write(tmp_path / "rows.json", many_rows)
        columns = self._write(
            tmp_path / "cols.json",
            [
                {"id": "id", "header": "ID", "accessor": "id"},
                {"id": "amt", "header": "Amount", "accessor": "amt", "showSum": True},
            ],
        )
        out_file = tmp_path / "preview.html"
        result, _, _ = _run(
            ["preview", rows, "--columns", columns, "--page", "2", "-o", str(out_file)]
        )
        assert result == 0
        content = out_file.read_text(encoding="utf-8")
        # Page 2 holds ids 11..20, amounts 110..200
        assert ">1,550</td>" in content
        assert 'data-current-page="2"' in content

    def test_missing_rows_file(self, tmp_path):
        """Unreadable input reports an error."""
        result, _, errors = _run(["preview", str(tmp_path / "missing.json")])
        assert result == 1
        assert "Cannot read rows file" in errors

    def test_invalid_json(self, tmp_path):
        """Malformed JSON reports an error."""
        bad = tmp_path / "rows.json"
        bad.write_text("{not json", encoding="utf-8")
        result, _, errors = _run(["preview", str(bad)])
        assert result == 1
        assert "Invalid JSON" in errors

    def test_duplicate_columns(self, tmp_path, amount_rows):
        """Column configuration errors are reported, not raised."""
        rows = self._write(tmp_path / "rows.json", amount_rows)
        columns = self._write(tmp_path / "cols.json", [{"id": "a"}, {"id": "a"}])
        result, _, errors = _run(["preview", rows, "--columns", columns])
        assert result == 1
        assert "Duplicate column id" in errors
