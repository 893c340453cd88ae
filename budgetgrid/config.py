"""Configuration system for budgetgrid using pydantic-settings.

Supports layered configuration:
1. Built-in defaults (lowest priority)
2. pyproject.toml [tool.budgetgrid] section (project-level)
3. ./budgetgrid.toml (project-level, explicit)
4. ~/.config/budgetgrid/config.toml (user-level, overrides project)
5. The file named by BUDGETGRID_CONFIG_FILE
6. Environment variables (highest priority)

Environment variables use the BUDGETGRID_ prefix with nested delimiter __.
Example: BUDGETGRID_GRID__ITEMS_PER_PAGE=25, BUDGETGRID_LOG__LEVEL=DEBUG
"""

from __future__ import annotations

import os
import sys

from functools import lru_cache
from pathlib import Path
from typing import Any, ClassVar, Literal

from pydantic import Field, field_validator
from pydantic.fields import FieldInfo
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from .log import warn


if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib


AggregationScope = Literal["page", "dataset"]


def _user_config_path() -> Path:
    """Location of the user-level config file."""
    if sys.platform == "win32":
        return Path(os.environ.get("APPDATA", "~")) / "budgetgrid" / "config.toml"
    return Path("~/.config/budgetgrid/config.toml")


def _find_config_files() -> list[Path]:
    """Find all configuration files in order of precedence (lowest first)."""
    files = []

    pyproject = Path("pyproject.toml")
    if pyproject.exists():
        files.append(pyproject)

    project_toml = Path("budgetgrid.toml")
    if project_toml.exists():
        files.append(project_toml)

    user_config = _user_config_path().expanduser()
    if user_config.exists():
        files.append(user_config)

    env_config = os.environ.get("BUDGETGRID_CONFIG_FILE")
    if env_config:
        env_path = Path(env_config)
        if env_path.exists():
            files.append(env_path)

    return files


def _load_toml_config() -> dict[str, Any]:
    """Load and merge all TOML configuration files."""
    merged: dict[str, Any] = {}

    for config_file in _find_config_files():
        try:
            data = tomllib.loads(config_file.read_text(encoding="utf-8"))
        except (OSError, tomllib.TOMLDecodeError) as e:
            warn(f"Ignoring unreadable config file {config_file}: {e}")
            continue

        # pyproject.toml keeps its settings under [tool.budgetgrid]
        if config_file.name == "pyproject.toml":
            data = data.get("tool", {}).get("budgetgrid", {})

        merged = _deep_merge(merged, data)

    return merged


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


class TomlSectionSource(PydanticBaseSettingsSource):
    """Settings source reading one ``[section]`` of the merged TOML files.

    Ranks below environment variables and explicit keyword arguments.
    """

    def __init__(self, settings_cls: type[BaseSettings], section: str) -> None:
        super().__init__(settings_cls)
        data = _load_toml_config().get(section, {})
        self._data = data if isinstance(data, dict) else {}

    def get_field_value(self, field: FieldInfo, field_name: str) -> tuple[Any, str, bool]:
        return self._data.get(field_name), field_name, False

    def __call__(self) -> dict[str, Any]:
        return {
            name: value
            for name, value in self._data.items()
            if name in self.settings_cls.model_fields
        }


class _SectionSettings(BaseSettings):
    """Base for one configuration section.

    Sources in priority order: keyword arguments, environment variables,
    then the section's table in the TOML files.
    """

    toml_section: ClassVar[str] = ""

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            TomlSectionSource(settings_cls, cls.toml_section),
        )


class GridSettings(_SectionSettings):
    """Default presentation settings for every grid.

    Per-grid ``GridOptions`` fall back to these values when left unset.

    Environment prefix: BUDGETGRID_GRID__
    Example: BUDGETGRID_GRID__ITEMS_PER_PAGE=25
    """

    model_config = SettingsConfigDict(
        env_prefix="BUDGETGRID_GRID__",
        extra="ignore",
    )

    toml_section: ClassVar[str] = "grid"

    items_per_page: int = Field(default=10, gt=0, description="Rows per page")
    max_height: str = Field(default="500px", description="Max height of the scroll region")
    empty_message: str = "No data available"
    loading_message: str = "Loading..."
    error_message: str = "Failed to load data"
    filter_label: str = "Filter"
    footer_label: str = "Total:"
    add_row_label: str = "Add New Row"
    max_page_buttons: int = Field(default=5, ge=3, description="Page number buttons shown")
    default_min_width: int = Field(default=100, gt=0)
    max_auto_width: int = Field(default=300, gt=0)
    actions_column_width: int = Field(default=120, gt=0)
    aggregation_scope: AggregationScope = Field(
        default="page",
        description="Footer sums over the visible 'page' or the whole client-side 'dataset'",
    )


class LogSettings(_SectionSettings):
    """Logging settings.

    Environment prefix: BUDGETGRID_LOG__
    Example: BUDGETGRID_LOG__LEVEL=DEBUG
    """

    model_config = SettingsConfigDict(
        env_prefix="BUDGETGRID_LOG__",
        extra="ignore",
    )

    toml_section: ClassVar[str] = "log"

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"
    format: str = "%(name)s - %(levelname)s - %(message)s"

    @field_validator("level", mode="before")
    @classmethod
    def upper_level(cls, v: Any) -> Any:
        """Accept lower-case level names from env vars."""
        if isinstance(v, str):
            return v.upper()
        return v


_SECTIONS: list[tuple[str, str, str]] = [
    ("GRID", "grid", "Grid Defaults"),
    ("LOG", "log", "Logging"),
]

_SECTION_CLASSES: dict[str, type[_SectionSettings]] = {
    "grid": GridSettings,
    "log": LogSettings,
}


class BudgetGridSettings(BaseSettings):
    """Main settings aggregating all configuration sections.

    Environment prefix: BUDGETGRID__
    """

    model_config = SettingsConfigDict(
        env_prefix="BUDGETGRID__",
        env_nested_delimiter="__",
        extra="ignore",
    )

    grid: GridSettings = Field(default_factory=GridSettings)
    log: LogSettings = Field(default_factory=LogSettings)

    def __init__(self, **data: Any) -> None:
        # Each section layers its own kwargs, env vars and TOML table
        for attr_name, section_cls in _SECTION_CLASSES.items():
            section = data.get(attr_name)
            if section is None or isinstance(section, dict):
                data[attr_name] = section_cls(**(section or {}))
        super().__init__(**data)

    def to_toml(self) -> str:
        """Export settings as TOML string."""
        lines = ["# budgetgrid configuration", "# Generated by: budgetgrid config --toml", ""]

        all_data = self.model_dump()
        for _, attr_name, _ in _SECTIONS:
            lines.append(f"[{attr_name}]")
            for field_name, field_value in all_data[attr_name].items():
                if isinstance(field_value, bool):
                    value_str = "true" if field_value else "false"
                elif isinstance(field_value, str):
                    escaped = field_value.replace("\\", "\\\\").replace('"', '\\"')
                    value_str = f'"{escaped}"'
                else:
                    value_str = str(field_value)
                lines.append(f"{field_name} = {value_str}")
            lines.append("")

        return "\n".join(lines)

    def to_env(self) -> str:
        """Export settings as shell environment variables."""
        lines = [
            "# budgetgrid environment variables",
            "# Generated by: budgetgrid config --env",
            "",
        ]

        all_data = self.model_dump()
        for env_prefix, attr_name, _ in _SECTIONS:
            for field_name, field_value in all_data[attr_name].items():
                env_name = f"BUDGETGRID_{env_prefix}__{field_name.upper()}"
                if isinstance(field_value, bool):
                    value_str = "true" if field_value else "false"
                else:
                    value_str = str(field_value)
                lines.append(f'export {env_name}="{value_str}"')

        return "\n".join(lines)

    def show(self) -> str:
        """Format settings as a readable table."""
        lines = ["budgetgrid Configuration", "=" * 60]

        all_data = self.model_dump()
        for _, attr_name, display_name in _SECTIONS:
            lines.append(f"\n{display_name}")
            lines.append("-" * 40)
            for field_name, field_value in all_data[attr_name].items():
                value_str = str(field_value)
                if len(value_str) > 50:
                    value_str = value_str[:47] + "..."
                lines.append(f"  {field_name:22} = {value_str}")

        return "\n".join(lines)


@lru_cache(maxsize=1)
def get_settings() -> BudgetGridSettings:
    """Get the global settings instance (cached).

    Call clear_settings() to reload configuration.
    """
    return BudgetGridSettings()


def clear_settings() -> None:
    """Clear the cached settings to force reload."""
    get_settings.cache_clear()


def reload_settings() -> BudgetGridSettings:
    """Reload settings from all sources."""
    clear_settings()
    return get_settings()
