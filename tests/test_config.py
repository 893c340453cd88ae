"""Tests for configuration classes.

Tests GridSettings, LogSettings and the layered BudgetGridSettings loader.
"""

from __future__ import annotations

import pytest

from pydantic import ValidationError

from budgetgrid.config import (
    BudgetGridSettings,
    GridSettings,
    LogSettings,
    clear_settings,
    get_settings,
    reload_settings,
)


class TestGridSettings:
    """Tests for GridSettings defaults and validation."""

    def test_defaults(self):
        """Defaults match the console's standard grid."""
        settings = GridSettings()
        assert settings.items_per_page == 10
        assert settings.max_height == "500px"
        assert settings.empty_message == "No data available"
        assert settings.loading_message == "Loading..."
        assert settings.footer_label == "Total:"
        assert settings.max_page_buttons == 5
        assert settings.default_min_width == 100
        assert settings.max_auto_width == 300
        assert settings.actions_column_width == 120
        assert settings.aggregation_scope == "page"

    def test_env_override(self, monkeypatch):
        """BUDGETGRID_GRID__* variables override defaults."""
        monkeypatch.setenv("BUDGETGRID_GRID__ITEMS_PER_PAGE", "25")
        monkeypatch.setenv("BUDGETGRID_GRID__AGGREGATION_SCOPE", "dataset")
        settings = GridSettings()
        assert settings.items_per_page == 25
        assert settings.aggregation_scope == "dataset"

    def test_invalid_items_per_page(self):
        """items_per_page must be positive."""
        with pytest.raises(ValidationError):
            GridSettings(items_per_page=0)

    def test_invalid_scope(self):
        """Only page and dataset scopes exist."""
        with pytest.raises(ValidationError):
            GridSettings(aggregation_scope="everything")


class TestLogSettings:
    """Tests for LogSettings."""

    def test_default_level(self):
        """Warnings and above are logged by default."""
        assert LogSettings().level == "WARNING"

    def test_level_case_insensitive(self, monkeypatch):
        """Lower-case levels from the environment are accepted."""
        monkeypatch.setenv("BUDGETGRID_LOG__LEVEL", "debug")
        assert LogSettings().level == "DEBUG"

    def test_invalid_level(self):
        """Unknown levels are rejected."""
        with pytest.raises(ValidationError):
            LogSettings(level="VERBOSE")


class TestBudgetGridSettings:
    """Tests for layered settings loading."""

    def test_sections(self):
        """Settings aggregate the grid and log sections."""
        settings = BudgetGridSettings()
        assert isinstance(settings.grid, GridSettings)
        assert isinstance(settings.log, LogSettings)

    def test_project_toml(self, tmp_path):
        """./budgetgrid.toml is loaded."""
        (tmp_path / "budgetgrid.toml").write_text(
            '[grid]\nitems_per_page = 50\nempty_message = "Nothing yet"\n', encoding="utf-8"
        )
        settings = BudgetGridSettings()
        assert settings.grid.items_per_page == 50
        assert settings.grid.empty_message == "Nothing yet"

    def test_pyproject_section(self, tmp_path):
        """[tool.budgetgrid] in pyproject.toml is loaded."""
        (tmp_path / "pyproject.toml").write_text(
            '[project]\nname = "console"\n\n[tool.budgetgrid.log]\nlevel = "INFO"\n',
            encoding="utf-8",
        )
        assert BudgetGridSettings().log.level == "INFO"

    def test_project_toml_overrides_pyproject(self, tmp_path):
        """budgetgrid.toml wins over pyproject.toml."""
        (tmp_path / "pyproject.toml").write_text(
            "[tool.budgetgrid.grid]\nitems_per_page = 20\n", encoding="utf-8"
        )
        (tmp_path / "budgetgrid.toml").write_text(
            "[grid]\nitems_per_page = 30\n", encoding="utf-8"
        )
        assert BudgetGridSettings().grid.items_per_page == 30

    def test_config_file_env(self, tmp_path, monkeypatch):
        """BUDGETGRID_CONFIG_FILE names an extra config file."""
        extra = tmp_path / "extra.toml"
        extra.write_text("[grid]\nmax_height = \"640px\"\n", encoding="utf-8")
        monkeypatch.setenv("BUDGETGRID_CONFIG_FILE", str(extra))
        assert BudgetGridSettings().grid.max_height == "640px"

    def test_user_config(self, tmp_path):
        """The user-level config file is loaded."""
        user_dir = tmp_path / ".config" / "budgetgrid"
        user_dir.mkdir(parents=True)
        (user_dir / "config.toml").write_text(
            "[grid]\nitems_per_page = 15\n", encoding="utf-8"
        )
        assert BudgetGridSettings().grid.items_per_page == 15

    def test_broken_toml_ignored(self, tmp_path, caplog):
        """A malformed config file is skipped with a warning."""
        (tmp_path / "budgetgrid.toml").write_text("[grid\n", encoding="utf-8")
        settings = BudgetGridSettings()
        assert settings.grid.items_per_page == 10
        assert "Ignoring unreadable config file" in caplog.text

    def test_env_overrides_files(self, tmp_path, monkeypatch):
        """Environment variables win over config files for the same key."""
        (tmp_path / "budgetgrid.toml").write_text(
            "[grid]\nitems_per_page = 20\nmax_height = \"640px\"\n", encoding="utf-8"
        )
        monkeypatch.setenv("BUDGETGRID_GRID__ITEMS_PER_PAGE", "30")
        settings = BudgetGridSettings()
        assert settings.grid.items_per_page == 30
        assert settings.grid.max_height == "640px"

    def test_env_overrides_pyproject_log_level(self, tmp_path, monkeypatch):
        """BUDGETGRID_LOG__LEVEL beats [tool.budgetgrid.log]."""
        (tmp_path / "pyproject.toml").write_text(
            "[tool.budgetgrid.log]\nlevel = \"INFO\"\n", encoding="utf-8"
        )
        monkeypatch.setenv("BUDGETGRID_LOG__LEVEL", "error")
        assert BudgetGridSettings().log.level == "ERROR"

    def test_kwargs_override_env(self, monkeypatch):
        """Explicit keyword arguments win over environment variables."""
        monkeypatch.setenv("BUDGETGRID_GRID__ITEMS_PER_PAGE", "30")
        assert BudgetGridSettings(grid={"items_per_page": 5}).grid.items_per_page == 5

    def test_kwargs_override_files(self, tmp_path):
        """Explicit keyword arguments win over config files."""
        (tmp_path / "budgetgrid.toml").write_text(
            "[grid]\nitems_per_page = 50\n", encoding="utf-8"
        )
        settings = BudgetGridSettings(grid={"items_per_page": 5})
        assert settings.grid.items_per_page == 5

    def test_to_toml(self):
        """to_toml() writes every section."""
        output = BudgetGridSettings().to_toml()
        assert "[grid]" in output
        assert "[log]" in output
        assert 'aggregation_scope = "page"' in output

    def test_to_env(self):
        """to_env() writes export lines with nested names."""
        output = BudgetGridSettings().to_env()
        assert 'export BUDGETGRID_GRID__MAX_HEIGHT="500px"' in output

    def test_show(self):
        """show() renders a readable table."""
        output = BudgetGridSettings().show()
        assert "Logging" in output
        assert "empty_message" in output


class TestSettingsCache:
    """Tests for the cached global settings."""

    def test_cached(self):
        """get_settings() returns the same instance."""
        assert get_settings() is get_settings()

    def test_clear(self):
        """clear_settings() forces a reload."""
        first = get_settings()
        clear_settings()
        assert get_settings() is not first

    def test_reload_picks_up_changes(self, monkeypatch):
        """reload_settings() sees new environment values."""
        assert get_settings().grid.items_per_page == 10
        monkeypatch.setenv("BUDGETGRID_GRID__ITEMS_PER_PAGE", "40")
        assert reload_settings().grid.items_per_page == 40
