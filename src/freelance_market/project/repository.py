"""
Project repository

The services only see the ProjectRepository protocol. Two implementations:
an in-memory store (tests, embedding) and a SQLite store (CLI, façade).
"""

from contextlib import AbstractAsyncContextManager
from typing import Any, Protocol

from freelance_market.kernel.database import SQLiteDatabase, no_transaction, to_db_row
from freelance_market.kernel.errors import ProjectNotFound
from freelance_market.kernel.time import TimeProvider, default_time_provider
from freelance_market.project.models import Project, ProjectStatus

PROJECT_COLUMNS = (
    "project_id",
    "client_id",
    "freelancer_id",
    "title",
    "description",
    "budget_min",
    "budget_max",
    "deadline",
    "status",
    "project_type",
    "agreed_rate",
    "created_at",
    "updated_at",
)


class ProjectRepository(Protocol):
    """Persistence contract for Project records"""

    async def find_by_id(self, project_id: str) -> Project | None: ...

    async def find_by_client_id(self, client_id: str) -> list[Project]: ...

    async def find_by_freelancer_id(self, freelancer_id: str) -> list[Project]: ...

    async def find_by_status(self, status: ProjectStatus) -> list[Project]: ...

    async def create(self, project: Project) -> Project: ...

    async def update(self, project_id: str, changes: dict[str, Any]) -> Project: ...

    async def delete(self, project_id: str) -> None: ...

    def transaction(self) -> AbstractAsyncContextManager[None]: ...


def _apply_changes(project: Project, changes: dict[str, Any], time_provider: TimeProvider) -> Project:
    """Validate a partial update against the model and stamp updated_at"""
    merged = {**project.model_dump(), **changes, "updated_at": time_provider.now()}
    merged["project_id"] = project.project_id
    return Project.model_validate(merged)


def _ordered(projects: list[Project]) -> list[Project]:
    return sorted(projects, key=lambda p: (p.created_at, p.project_id))


class InMemoryProjectRepository:
    """
    Dict-backed project store

    Stores and returns copies so callers never share an instance with the
    store or with each other.
    """

    def __init__(self, time_provider: TimeProvider | None = None) -> None:
        self.time_provider = time_provider or default_time_provider
        self.projects: dict[str, Project] = {}

    async def find_by_id(self, project_id: str) -> Project | None:
        project = self.projects.get(project_id)
        return project.model_copy(deep=True) if project else None

    async def find_by_client_id(self, client_id: str) -> list[Project]:
        return self._select(lambda p: p.client_id == client_id)

    async def find_by_freelancer_id(self, freelancer_id: str) -> list[Project]:
        return self._select(lambda p: p.freelancer_id == freelancer_id)

    async def find_by_status(self, status: ProjectStatus) -> list[Project]:
        return self._select(lambda p: p.status == status)

    async def create(self, project: Project) -> Project:
        self.projects[project.project_id] = project.model_copy(deep=True)
        return project.model_copy(deep=True)

    async def update(self, project_id: str, changes: dict[str, Any]) -> Project:
        current = self.projects.get(project_id)
        if current is None:
            raise ProjectNotFound(project_id)
        updated = _apply_changes(current, changes, self.time_provider)
        self.projects[project_id] = updated
        return updated.model_copy(deep=True)

    async def delete(self, project_id: str) -> None:
        self.projects.pop(project_id, None)

    def transaction(self) -> AbstractAsyncContextManager[None]:
        return no_transaction()

    def _select(self, predicate: Any) -> list[Project]:
        return _ordered(
            [p.model_copy(deep=True) for p in self.projects.values() if predicate(p)]
        )


class SQLiteProjectRepository:
    """Project store on the shared SQLite database"""

    def __init__(self, db: SQLiteDatabase, time_provider: TimeProvider | None = None) -> None:
        self.db = db
        self.time_provider = time_provider or default_time_provider

    async def find_by_id(self, project_id: str) -> Project | None:
        with self.db.connect() as conn:
            row = conn.execute(
                "SELECT * FROM projects WHERE project_id = ?", (project_id,)
            ).fetchone()
        return Project.model_validate(dict(row)) if row else None

    async def find_by_client_id(self, client_id: str) -> list[Project]:
        return self._select("client_id = ?", (client_id,))

    async def find_by_freelancer_id(self, freelancer_id: str) -> list[Project]:
        return self._select("freelancer_id = ?", (freelancer_id,))

    async def find_by_status(self, status: ProjectStatus) -> list[Project]:
        return self._select("status = ?", (status.value,))

    async def create(self, project: Project) -> Project:
        columns = ", ".join(PROJECT_COLUMNS)
        placeholders = ", ".join(f":{c}" for c in PROJECT_COLUMNS)
        with self.db.connect() as conn:
            conn.execute(
                f"INSERT INTO projects ({columns}) VALUES ({placeholders})",
                to_db_row(project.model_dump()),
            )
        return project

    async def update(self, project_id: str, changes: dict[str, Any]) -> Project:
        current = await self.find_by_id(project_id)
        if current is None:
            raise ProjectNotFound(project_id)
        updated = _apply_changes(current, changes, self.time_provider)

        assignments = ", ".join(f"{c} = :{c}" for c in PROJECT_COLUMNS if c != "project_id")
        with self.db.connect() as conn:
            conn.execute(
                f"UPDATE projects SET {assignments} WHERE project_id = :project_id",
                to_db_row(updated.model_dump()),
            )
        return updated

    async def delete(self, project_id: str) -> None:
        with self.db.connect() as conn:
            conn.execute("DELETE FROM projects WHERE project_id = ?", (project_id,))

    def transaction(self) -> AbstractAsyncContextManager[None]:
        return self.db.transaction()

    def _select(self, where: str, params: tuple[Any, ...]) -> list[Project]:
        with self.db.connect() as conn:
            rows = conn.execute(
                f"SELECT * FROM projects WHERE {where} ORDER BY created_at, project_id",
                params,
            ).fetchall()
        return [Project.model_validate(dict(row)) for row in rows]
