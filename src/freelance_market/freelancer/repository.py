"""
Freelancer repository

Read side used by bid ranking, plus registration.
"""

from typing import Protocol

from freelance_market.freelancer.models import Freelancer
from freelance_market.kernel.database import SQLiteDatabase, to_db_row

FREELANCER_COLUMNS = (
    "freelancer_id",
    "display_name",
    "hourly_rate",
    "availability_status",
    "portfolio_url",
    "rating",
    "completed_projects_count",
    "on_time_delivery_rate",
    "created_at",
    "updated_at",
)


class FreelancerRepository(Protocol):
    """Persistence contract for freelancer profiles"""

    async def find_by_id(self, freelancer_id: str) -> Freelancer | None: ...

    async def find_by_ids(self, freelancer_ids: list[str]) -> dict[str, Freelancer]: ...

    async def create(self, freelancer: Freelancer) -> Freelancer: ...


class InMemoryFreelancerRepository:
    """Dict-backed freelancer store returning copies"""

    def __init__(self) -> None:
        self.freelancers: dict[str, Freelancer] = {}

    async def find_by_id(self, freelancer_id: str) -> Freelancer | None:
        freelancer = self.freelancers.get(freelancer_id)
        return freelancer.model_copy(deep=True) if freelancer else None

    async def find_by_ids(self, freelancer_ids: list[str]) -> dict[str, Freelancer]:
        return {
            fid: self.freelancers[fid].model_copy(deep=True)
            for fid in set(freelancer_ids)
            if fid in self.freelancers
        }

    async def create(self, freelancer: Freelancer) -> Freelancer:
        self.freelancers[freelancer.freelancer_id] = freelancer.model_copy(deep=True)
        return freelancer.model_copy(deep=True)


class SQLiteFreelancerRepository:
    """Freelancer store on the shared SQLite database"""

    def __init__(self, db: SQLiteDatabase) -> None:
        self.db = db

    async def find_by_id(self, freelancer_id: str) -> Freelancer | None:
        with self.db.connect() as conn:
            row = conn.execute(
                "SELECT * FROM freelancers WHERE freelancer_id = ?", (freelancer_id,)
            ).fetchone()
        return Freelancer.model_validate(dict(row)) if row else None

    async def find_by_ids(self, freelancer_ids: list[str]) -> dict[str, Freelancer]:
        unique_ids = sorted(set(freelancer_ids))
        if not unique_ids:
            return {}
        placeholders = ", ".join("?" for _ in unique_ids)
        with self.db.connect() as conn:
            rows = conn.execute(
                f"SELECT * FROM freelancers WHERE freelancer_id IN ({placeholders})",
                unique_ids,
            ).fetchall()
        return {row["freelancer_id"]: Freelancer.model_validate(dict(row)) for row in rows}

    async def create(self, freelancer: Freelancer) -> Freelancer:
        columns = ", ".join(FREELANCER_COLUMNS)
        placeholders = ", ".join(f":{c}" for c in FREELANCER_COLUMNS)
        with self.db.connect() as conn:
            conn.execute(
                f"INSERT INTO freelancers ({columns}) VALUES ({placeholders})",
                to_db_row(freelancer.model_dump()),
            )
        return freelancer
