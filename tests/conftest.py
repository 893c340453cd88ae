"""Pytest configuration and fixtures."""

from __future__ import annotations

import logging
import os

from typing import TYPE_CHECKING, Any

import pytest

from budgetgrid.columns import ColumnDescriptor
from budgetgrid.config import clear_settings


if TYPE_CHECKING:
    from collections.abc import Generator


# =============================================================================
# Settings isolation
# =============================================================================


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch) -> Generator[None, None, None]:
    """Run every test from an empty directory with no budgetgrid env vars.

    Config files in the repository root (pyproject.toml) and the user's
    home directory would otherwise leak into settings tests.
    """
    for key in list(os.environ):
        if key.startswith("BUDGETGRID_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("APPDATA", str(tmp_path))
    clear_settings()
    yield
    clear_settings()


@pytest.fixture(autouse=True)
def reset_logger_level() -> Generator[None, None, None]:
    """Restore the budgetgrid logger level after tests that change it."""
    logger = logging.getLogger("budgetgrid")
    level = logger.level
    yield
    logger.setLevel(level)


# =============================================================================
# Sample data
# =============================================================================


@pytest.fixture
def amount_rows() -> list[dict[str, Any]]:
    """Three rows with an ``amt`` field."""
    return [
        {"id": 1, "amt": 100},
        {"id": 2, "amt": 200},
        {"id": 3, "amt": 300},
    ]


@pytest.fixture
def amount_columns() -> list[ColumnDescriptor]:
    """An id column plus a summed amount column."""
    return [
        ColumnDescriptor(id="id", header="ID", accessor="id"),
        ColumnDescriptor(id="amt", header="Amount", accessor="amt", show_sum=True),
    ]


@pytest.fixture
def transfer_rows() -> list[dict[str, Any]]:
    """Budget transfer records as returned by the transfers endpoint."""
    return [
        {
            "id": 101,
            "code": "FAR-0101",
            "entity": "Finance",
            "amount": "1500.50",
            "status": "Pending",
        },
        {
            "id": 102,
            "code": "FAR-0102",
            "entity": "Operations",
            "amount": 2500,
            "status": "Approved",
        },
        {
            "id": 103,
            "code": "FAR-0103",
            "entity": "IT",
            "amount": None,
            "status": "Rejected",
        },
    ]


@pytest.fixture
def transfer_columns() -> list[ColumnDescriptor]:
    """Columns of the transfers page."""
    return [
        ColumnDescriptor(id="code", header="Transfer", accessor="code"),
        ColumnDescriptor(
            id="entity",
            header="Entity",
            accessor="entity",
            description="Requesting cost center",
        ),
        ColumnDescriptor(id="amount", header="Amount", accessor="amount", show_sum=True),
        ColumnDescriptor(id="status", header="Status", accessor="status", sortable=False),
    ]


@pytest.fixture
def many_rows() -> list[dict[str, Any]]:
    """25 rows with ids 1..25 and amount = id * 10."""
    return [{"id": i, "amt": i * 10} for i in range(1, 26)]
