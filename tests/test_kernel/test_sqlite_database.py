"""
Tests for the shared SQLite database handle
"""

import sqlite3
from datetime import datetime, timezone
from decimal import Decimal
from pathlib import Path

import pytest

from freelance_market.kernel.database import (
    TABLES,
    SQLiteDatabase,
    no_transaction,
    to_db_row,
    to_db_value,
)
from freelance_market.kernel.errors import StorageError
from freelance_market.project.models import ProjectStatus


def test_schema_created(sqlite_db: SQLiteDatabase, temp_db: Path) -> None:
    conn = sqlite3.connect(str(temp_db))
    names = {row[0] for row in conn.execute("SELECT name FROM sqlite_master WHERE type='table'")}
    conn.close()

    assert set(TABLES) <= names


def test_reopening_keeps_data(sqlite_db: SQLiteDatabase, temp_db: Path) -> None:
    with sqlite_db.connect() as conn:
        conn.execute(
            "INSERT INTO freelancers VALUES ('f-1', 'Ada', NULL, 'AVAILABLE', NULL, 4.0, 0, 0.0, 't', 't')"
        )

    assert SQLiteDatabase(temp_db).count_rows()["freelancers"] == 1


def test_count_rows(sqlite_db: SQLiteDatabase) -> None:
    assert sqlite_db.count_rows() == {table: 0 for table in TABLES}


def test_sqlite_errors_become_storage_errors(sqlite_db: SQLiteDatabase) -> None:
    with pytest.raises(StorageError):
        with sqlite_db.connect() as conn:
            conn.execute("SELECT * FROM no_such_table")


@pytest.mark.asyncio
async def test_transaction_commits(sqlite_db: SQLiteDatabase) -> None:
    async with sqlite_db.transaction():
        with sqlite_db.connect() as conn:
            conn.execute(
                "INSERT INTO freelancers VALUES ('f-1', 'Ada', NULL, 'AVAILABLE', NULL, 4.0, 0, 0.0, 't', 't')"
            )

    assert sqlite_db.count_rows()["freelancers"] == 1


@pytest.mark.asyncio
async def test_transaction_connection_is_shared(sqlite_db: SQLiteDatabase) -> None:
    async with sqlite_db.transaction():
        with sqlite_db.connect() as first, sqlite_db.connect() as second:
            assert first is second


@pytest.mark.asyncio
async def test_no_transaction_is_a_plain_context() -> None:
    async with no_transaction():
        pass


def test_db_value_conversion() -> None:
    moment = datetime(2025, 1, 15, 12, tzinfo=timezone.utc)

    assert to_db_value(ProjectStatus.OPEN) == "OPEN"
    assert to_db_value(Decimal("75.50")) == "75.50"
    assert to_db_value(moment) == "2025-01-15T12:00:00+00:00"
    assert to_db_value(3) == 3
    assert to_db_row({"a": Decimal("1"), "b": None}) == {"a": "1", "b": None}
