"""
Milestone repository

The model's `order` field is stored in the `sort_order` column
(ORDER is an SQL keyword).
"""

from typing import Any, Protocol

from freelance_market.kernel.database import SQLiteDatabase, to_db_row
from freelance_market.kernel.errors import MilestoneNotFound
from freelance_market.kernel.time import TimeProvider, default_time_provider
from freelance_market.milestone.models import Milestone

MILESTONE_COLUMNS = (
    "milestone_id",
    "project_id",
    "title",
    "description",
    "amount",
    "sort_order",
    "due_date",
    "status",
    "created_at",
    "updated_at",
)


class MilestoneRepository(Protocol):
    """Persistence contract for milestones"""

    async def find_by_id(self, milestone_id: str) -> Milestone | None: ...

    async def find_by_project_id(self, project_id: str) -> list[Milestone]: ...

    async def create(self, milestone: Milestone) -> Milestone: ...

    async def update(self, milestone_id: str, changes: dict[str, Any]) -> Milestone: ...


def _apply_changes(
    milestone: Milestone, changes: dict[str, Any], time_provider: TimeProvider
) -> Milestone:
    merged = {**milestone.model_dump(), **changes, "updated_at": time_provider.now()}
    merged["milestone_id"] = milestone.milestone_id
    return Milestone.model_validate(merged)


def _to_row(milestone: Milestone) -> dict[str, Any]:
    values = milestone.model_dump()
    values["sort_order"] = values.pop("order")
    return to_db_row(values)


def _from_row(row: Any) -> Milestone:
    values = dict(row)
    values["order"] = values.pop("sort_order")
    return Milestone.model_validate(values)


class InMemoryMilestoneRepository:
    """Dict-backed milestone store returning copies"""

    def __init__(self, time_provider: TimeProvider | None = None) -> None:
        self.time_provider = time_provider or default_time_provider
        self.milestones: dict[str, Milestone] = {}

    async def find_by_id(self, milestone_id: str) -> Milestone | None:
        milestone = self.milestones.get(milestone_id)
        return milestone.model_copy(deep=True) if milestone else None

    async def find_by_project_id(self, project_id: str) -> list[Milestone]:
        matches = [
            m.model_copy(deep=True) for m in self.milestones.values() if m.project_id == project_id
        ]
        return sorted(matches, key=lambda m: (m.order, m.created_at, m.milestone_id))

    async def create(self, milestone: Milestone) -> Milestone:
        self.milestones[milestone.milestone_id] = milestone.model_copy(deep=True)
        return milestone.model_copy(deep=True)

    async def update(self, milestone_id: str, changes: dict[str, Any]) -> Milestone:
        current = self.milestones.get(milestone_id)
        if current is None:
            raise MilestoneNotFound(milestone_id)
        updated = _apply_changes(current, changes, self.time_provider)
        self.milestones[milestone_id] = updated
        return updated.model_copy(deep=True)


class SQLiteMilestoneRepository:
    """Milestone store on the shared SQLite database"""

    def __init__(self, db: SQLiteDatabase, time_provider: TimeProvider | None = None) -> None:
        self.db = db
        self.time_provider = time_provider or default_time_provider

    async def find_by_id(self, milestone_id: str) -> Milestone | None:
        with self.db.connect() as conn:
            row = conn.execute(
                "SELECT * FROM milestones WHERE milestone_id = ?", (milestone_id,)
            ).fetchone()
        return _from_row(row) if row else None

    async def find_by_project_id(self, project_id: str) -> list[Milestone]:
        with self.db.connect() as conn:
            rows = conn.execute(
                "SELECT * FROM milestones WHERE project_id = ? "
                "ORDER BY sort_order, created_at, milestone_id",
                (project_id,),
            ).fetchall()
        return [_from_row(row) for row in rows]

    async def create(self, milestone: Milestone) -> Milestone:
        columns = ", ".join(MILESTONE_COLUMNS)
        placeholders = ", ".join(f":{c}" for c in MILESTONE_COLUMNS)
        with self.db.connect() as conn:
            conn.execute(
                f"INSERT INTO milestones ({columns}) VALUES ({placeholders})",
                _to_row(milestone),
            )
        return milestone

    async def update(self, milestone_id: str, changes: dict[str, Any]) -> Milestone:
        current = await self.find_by_id(milestone_id)
        if current is None:
            raise MilestoneNotFound(milestone_id)
        updated = _apply_changes(current, changes, self.time_provider)

        assignments = ", ".join(
            f"{c} = :{c}" for c in MILESTONE_COLUMNS if c != "milestone_id"
        )
        with self.db.connect() as conn:
            conn.execute(
                f"UPDATE milestones SET {assignments} WHERE milestone_id = :milestone_id",
                _to_row(updated),
            )
        return updated
