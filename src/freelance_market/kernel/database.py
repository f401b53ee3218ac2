"""
SQLite database handle shared by the SQLite repositories

One file holds every table. Statements outside a transaction commit on
their own; statements issued inside `transaction()` join it, so a
multi-entity write (accepting a bid) commits or rolls back as a unit.
"""

import contextvars
import sqlite3
from contextlib import asynccontextmanager, contextmanager
from datetime import datetime
from decimal import Decimal
from enum import Enum
from pathlib import Path
from typing import Any, AsyncIterator, Iterator

from freelance_market.kernel.errors import StorageError
from freelance_market.kernel.logging import get_logger
from freelance_market.kernel.retry import retry_on_sqlite_lock

logger = get_logger(__name__)

SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS projects (
        project_id TEXT PRIMARY KEY,
        client_id TEXT NOT NULL,
        freelancer_id TEXT,
        title TEXT NOT NULL,
        description TEXT NOT NULL,
        budget_min TEXT NOT NULL,
        budget_max TEXT NOT NULL,
        deadline TEXT NOT NULL,
        status TEXT NOT NULL,
        project_type TEXT NOT NULL,
        agreed_rate TEXT,
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_projects_client ON projects(client_id)",
    "CREATE INDEX IF NOT EXISTS idx_projects_status ON projects(status)",
    """
    CREATE TABLE IF NOT EXISTS bids (
        bid_id TEXT PRIMARY KEY,
        project_id TEXT NOT NULL,
        freelancer_id TEXT NOT NULL,
        proposed_rate TEXT NOT NULL,
        estimated_duration_days INTEGER NOT NULL,
        cover_letter TEXT NOT NULL,
        status TEXT NOT NULL,
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_bids_project ON bids(project_id)",
    "CREATE INDEX IF NOT EXISTS idx_bids_freelancer ON bids(freelancer_id)",
    """
    CREATE TABLE IF NOT EXISTS freelancers (
        freelancer_id TEXT PRIMARY KEY,
        display_name TEXT NOT NULL,
        hourly_rate TEXT,
        availability_status TEXT NOT NULL,
        portfolio_url TEXT,
        rating REAL NOT NULL,
        completed_projects_count INTEGER NOT NULL,
        on_time_delivery_rate REAL NOT NULL,
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS milestones (
        milestone_id TEXT PRIMARY KEY,
        project_id TEXT NOT NULL,
        title TEXT NOT NULL,
        description TEXT,
        amount TEXT NOT NULL,
        sort_order INTEGER NOT NULL,
        due_date TEXT NOT NULL,
        status TEXT NOT NULL,
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_milestones_project ON milestones(project_id)",
    """
    CREATE TABLE IF NOT EXISTS time_entries (
        entry_id TEXT PRIMARY KEY,
        project_id TEXT NOT NULL,
        freelancer_id TEXT NOT NULL,
        milestone_id TEXT,
        hours TEXT NOT NULL,
        description TEXT NOT NULL,
        date TEXT NOT NULL,
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_time_entries_project ON time_entries(project_id)",
)

TABLES = ("projects", "bids", "freelancers", "milestones", "time_entries")


class SQLiteDatabase:
    """
    SQLite database with WAL mode and explicit transactions

    Connections run in autocommit mode; `transaction()` opens one
    connection, issues BEGIN IMMEDIATE and publishes it through a
    context variable so every repository call in the same task reuses it.
    """

    def __init__(self, db_path: str | Path) -> None:
        """
        Args:
            db_path: Path to SQLite database file (created if missing)
        """
        self.db_path = Path(db_path)
        self._active: contextvars.ContextVar[sqlite3.Connection | None] = (
            contextvars.ContextVar(f"sqlite_tx_{id(self)}", default=None)
        )
        self._initialize_schema()

    def _initialize_schema(self) -> None:
        """Create tables and indices if they don't exist"""
        with self.connect() as conn:
            conn.execute("PRAGMA journal_mode=WAL")
            conn.execute("PRAGMA synchronous=NORMAL")
            for statement in SCHEMA:
                conn.execute(statement)

    def _open(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self.db_path), isolation_level=None)
        conn.row_factory = sqlite3.Row
        return conn

    @contextmanager
    def connect(self) -> Iterator[sqlite3.Connection]:
        """
        Yield a connection for one repository call

        Inside `transaction()` this is the transaction's connection and is
        left open; otherwise a fresh autocommit connection is closed after use.
        sqlite3 errors are re-raised as StorageError.
        """
        active = self._active.get()
        if active is not None:
            try:
                yield active
            except sqlite3.Error as e:
                raise StorageError(f"Database operation failed: {e}") from e
            return

        conn = self._open()
        try:
            yield conn
        except sqlite3.Error as e:
            raise StorageError(f"Database operation failed: {e}") from e
        finally:
            conn.close()

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        """
        Run the enclosed repository calls as one atomic unit

        Nested use joins the outer transaction.
        """
        if self._active.get() is not None:
            yield
            return

        conn = self._open()
        token = self._active.set(conn)
        try:
            try:
                _begin(conn)
            except sqlite3.Error as e:
                raise StorageError(f"Failed to begin transaction: {e}") from e
            try:
                yield
            except BaseException:
                conn.rollback()
                logger.debug("Transaction rolled back", db_path=str(self.db_path))
                raise
            try:
                conn.commit()
            except sqlite3.Error as e:
                raise StorageError(f"Failed to commit transaction: {e}") from e
        finally:
            self._active.reset(token)
            conn.close()

    def count_rows(self) -> dict[str, int]:
        """Row count per table (for health reporting)"""
        with self.connect() as conn:
            return {
                table: conn.execute(f"SELECT COUNT(*) FROM {table}").fetchone()[0]
                for table in TABLES
            }


@retry_on_sqlite_lock()
def _begin(conn: sqlite3.Connection) -> None:
    conn.execute("BEGIN IMMEDIATE")


@asynccontextmanager
async def no_transaction() -> AsyncIterator[None]:
    """Transaction stand-in for stores without transactions (in-memory)"""
    yield


def to_db_value(value: Any) -> Any:
    """Convert a model field value into its SQLite column representation"""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    return value


def to_db_row(values: dict[str, Any]) -> dict[str, Any]:
    """Convert every value of a model dump for use as named SQL parameters"""
    return {key: to_db_value(value) for key, value in values.items()}
