"""
Time entry repository

Entries are append-only: there is no update or delete.
"""

from typing import Protocol

from freelance_market.kernel.database import SQLiteDatabase, to_db_row
from freelance_market.time_entry.models import TimeEntry

TIME_ENTRY_COLUMNS = (
    "entry_id",
    "project_id",
    "freelancer_id",
    "milestone_id",
    "hours",
    "description",
    "date",
    "created_at",
    "updated_at",
)


class TimeEntryRepository(Protocol):
    """Persistence contract for time entries"""

    async def find_by_project_id(self, project_id: str) -> list[TimeEntry]: ...

    async def create(self, entry: TimeEntry) -> TimeEntry: ...


class InMemoryTimeEntryRepository:
    """Dict-backed time entry store returning copies"""

    def __init__(self) -> None:
        self.entries: dict[str, TimeEntry] = {}

    async def find_by_project_id(self, project_id: str) -> list[TimeEntry]:
        matches = [
            e.model_copy(deep=True) for e in self.entries.values() if e.project_id == project_id
        ]
        return sorted(matches, key=lambda e: (e.date, e.created_at, e.entry_id))

    async def create(self, entry: TimeEntry) -> TimeEntry:
        self.entries[entry.entry_id] = entry.model_copy(deep=True)
        return entry.model_copy(deep=True)


class SQLiteTimeEntryRepository:
    """Time entry store on the shared SQLite database"""

    def __init__(self, db: SQLiteDatabase) -> None:
        self.db = db

    async def find_by_project_id(self, project_id: str) -> list[TimeEntry]:
        with self.db.connect() as conn:
            rows = conn.execute(
                "SELECT * FROM time_entries WHERE project_id = ? "
                "ORDER BY date, created_at, entry_id",
                (project_id,),
            ).fetchall()
        return [TimeEntry.model_validate(dict(row)) for row in rows]

    async def create(self, entry: TimeEntry) -> TimeEntry:
        columns = ", ".join(TIME_ENTRY_COLUMNS)
        placeholders = ", ".join(f":{c}" for c in TIME_ENTRY_COLUMNS)
        with self.db.connect() as conn:
            conn.execute(
                f"INSERT INTO time_entries ({columns}) VALUES ({placeholders})",
                to_db_row(entry.model_dump()),
            )
        return entry
