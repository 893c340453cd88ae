"""Command-line interface for budgetgrid configuration and previews."""

from __future__ import annotations

import argparse
import json
import os
import sys

from pathlib import Path
from typing import Any

from . import log
from .config import _user_config_path


def main(argv: list[str] | None = None) -> int:
    """Run the main CLI entry point.

    Parameters
    ----------
    argv : list of str, optional
        Arguments to parse. Defaults to ``sys.argv[1:]``.

    Returns
    -------
    int
        Exit code.
    """
    parser = argparse.ArgumentParser(
        prog="budgetgrid",
        description="budgetgrid configuration and preview tools",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # config command
    config_parser = subparsers.add_parser(
        "config",
        help="Show or export configuration",
    )
    config_group = config_parser.add_mutually_exclusive_group()
    config_group.add_argument(
        "--show",
        action="store_true",
        help="Show current configuration",
    )
    config_group.add_argument(
        "--toml",
        action="store_true",
        help="Export configuration as TOML",
    )
    config_group.add_argument(
        "--env",
        action="store_true",
        help="Export configuration as environment variables",
    )
    config_group.add_argument(
        "--sources",
        action="store_true",
        help="Show configuration file sources",
    )
    config_parser.add_argument(
        "--output",
        "-o",
        type=str,
        help="Output file path (default: stdout)",
    )

    # init command
    init_parser = subparsers.add_parser(
        "init",
        help="Initialize a budgetgrid.toml configuration file",
    )
    init_parser.add_argument(
        "--force",
        "-f",
        action="store_true",
        help="Overwrite existing configuration file",
    )
    init_parser.add_argument(
        "--path",
        "-p",
        type=str,
        default="budgetgrid.toml",
        help="Path for configuration file (default: budgetgrid.toml)",
    )

    # preview command
    preview_parser = subparsers.add_parser(
        "preview",
        help="Render a JSON file of rows to an HTML grid",
    )
    preview_parser.add_argument("rows", type=str, help="JSON file with a list of row objects")
    preview_parser.add_argument(
        "--columns",
        "-c",
        type=str,
        default=None,
        help="JSON file with column descriptors (default: one column per key of the first row)",
    )
    preview_parser.add_argument(
        "--page",
        type=int,
        default=1,
        help="Page to render (default: 1)",
    )
    preview_parser.add_argument(
        "--items-per-page",
        type=int,
        default=None,
        help="Rows per page (uses config default)",
    )
    preview_parser.add_argument(
        "--title",
        type=str,
        default=None,
        help="Title shown above the table",
    )
    preview_parser.add_argument(
        "--output",
        "-o",
        type=str,
        help="Output file path (default: stdout)",
    )

    args = parser.parse_args(argv)
    log.configure()

    if args.command == "config":
        return handle_config(args)
    if args.command == "init":
        return handle_init(args)
    if args.command == "preview":
        return handle_preview(args)
    parser.print_help()
    return 0


def handle_config(args: argparse.Namespace) -> int:
    """Handle the config command.

    Parameters
    ----------
    args : argparse.Namespace
        Parsed command line arguments.

    Returns
    -------
    int
        Exit code.
    """
    from .config import BudgetGridSettings

    settings = BudgetGridSettings()

    if args.sources:
        return show_config_sources()

    if args.toml:
        output = settings.to_toml()
    elif args.env:
        output = settings.to_env()
    else:
        output = settings.show()

    _write_output(output, args.output, "Configuration")
    return 0


def handle_init(args: argparse.Namespace) -> int:
    """Handle the init command.

    Parameters
    ----------
    args : argparse.Namespace
        Parsed command line arguments.

    Returns
    -------
    int
        Exit code.
    """
    from .config import BudgetGridSettings

    path = Path(args.path)

    if path.exists() and not args.force:
        print(f"Error: {path} already exists. Use --force to overwrite.", file=sys.stderr)
        return 1

    settings = BudgetGridSettings()
    toml_content = settings.to_toml()

    header = """# budgetgrid Configuration File
#
# Environment variables can override any setting:
#   BUDGETGRID_GRID__ITEMS_PER_PAGE=25
#   BUDGETGRID_GRID__MAX_HEIGHT="600px"
#   BUDGETGRID_GRID__AGGREGATION_SCOPE="dataset"
#   BUDGETGRID_LOG__LEVEL=DEBUG
#
# Use nested keys with __ (double underscore) delimiter.

"""
    path.write_text(header + toml_content, encoding="utf-8")
    print(f"Created {path}")

    return 0


def _load_json(path: str, what: str) -> Any:
    try:
        return json.loads(Path(path).read_text(encoding="utf-8"))
    except OSError as e:
        raise ValueError(f"Cannot read {what} file {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {what} file {path}: {e}") from e


def _infer_columns(rows: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """One column per key of the first row."""
    if not rows:
        return []
    return [{"id": key, "header": key, "accessor": key} for key in rows[0]]


def handle_preview(args: argparse.Namespace) -> int:
    """Handle the preview command.

    Parameters
    ----------
    args : argparse.Namespace
        Parsed command line arguments.

    Returns
    -------
    int
        Exit code.
    """
    from .exceptions import BudgetGridException
    from .rows import normalize_rows
    from .shell import DataGrid

    try:
        rows = normalize_rows(_load_json(args.rows, "rows"))
        columns = (
            _load_json(args.columns, "columns") if args.columns else _infer_columns(rows)
        )
        grid = DataGrid(
            columns,
            rows,
            title=args.title,
            show_pagination=True,
            show_footer=True,
            current_page=max(args.page, 1),
            items_per_page=args.items_per_page,
        )
    except (ValueError, BudgetGridException) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    _write_output(grid.build_html(), args.output, "Preview")
    return 0


def _write_output(output: str, destination: str | None, what: str) -> None:
    if destination:
        Path(destination).write_text(output, encoding="utf-8")
        print(f"{what} written to {destination}")
    else:
        print(output)


def show_config_sources() -> int:
    """Show configuration file sources and their status.

    Returns
    -------
    int
        Exit code.
    """
    sources = [
        ("Built-in defaults", "Always loaded", True),
        ("pyproject.toml [tool.budgetgrid]", "pyproject.toml", None),
        ("./budgetgrid.toml", "budgetgrid.toml", None),
        ("User config", str(_user_config_path()), None),
        ("BUDGETGRID_CONFIG_FILE", os.environ.get("BUDGETGRID_CONFIG_FILE", ""), None),
        ("Environment variables", "BUDGETGRID_* vars", None),
    ]

    print("Configuration Sources (in order of precedence):\n")
    print(f"{'Source':<40} {'Status':<15} {'Path'}")
    print("-" * 80)

    for name, path_str, forced_status in sources:
        if forced_status is True:
            status = "✓ Active"
            path_display = ""
        elif name == "Environment variables":
            env_vars = [k for k in os.environ if k.startswith("BUDGETGRID_")]
            if env_vars:
                status = f"✓ {len(env_vars)} vars"
                path_display = ", ".join(env_vars[:3])
                if len(env_vars) > 3:
                    path_display += "..."
            else:
                status = "✗ No vars"
                path_display = ""
        elif not path_str:
            status = "✗ Not set"
            path_display = ""
        else:
            path = Path(path_str).expanduser()
            status = "✓ Found" if path.exists() else "✗ Not found"
            path_display = str(path)

        print(f"{name:<40} {status:<15} {path_display}")

    print("\nNote: Later sources override earlier ones.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
