"""
Project lifecycle service

Creation, lookup, search, status changes and deletion of projects.
Every mutation re-reads the project, checks ownership, applies the state
machine, then persists only the changed fields.
"""

from datetime import datetime
from decimal import Decimal

from freelance_market.kernel.errors import (
    InvalidInput,
    NotProjectOwner,
    ProjectNotDeletable,
    ProjectNotFound,
)
from freelance_market.kernel.ids import IdFactory, default_id_factory
from freelance_market.kernel.logging import LogOperation, get_logger
from freelance_market.kernel.metrics import project_transitions_total, track_operation
from freelance_market.kernel.money import to_decimal
from freelance_market.kernel.settings import MarketplaceSettings
from freelance_market.kernel.time import TimeProvider, default_time_provider
from freelance_market.project import state_machine
from freelance_market.project.models import (
    Project,
    ProjectPage,
    ProjectQuery,
    ProjectStatus,
    ProjectType,
)
from freelance_market.project.repository import ProjectRepository

logger = get_logger(__name__)

INITIAL_STATUSES = (ProjectStatus.DRAFT, ProjectStatus.OPEN)


def parse_project_status(value: ProjectStatus | str) -> ProjectStatus:
    """
    Coerce a status name into ProjectStatus

    Raises:
        InvalidInput: If value names no project status
    """
    if isinstance(value, ProjectStatus):
        return value
    try:
        return ProjectStatus(str(value).strip().upper())
    except ValueError:
        valid = ", ".join(s.value for s in ProjectStatus)
        raise InvalidInput(f"Unknown project status '{value}' (expected one of: {valid})") from None


class ProjectService:
    """
    Project operations for clients and freelancers

    Stateless apart from its collaborators: nothing is cached between calls.
    """

    def __init__(
        self,
        projects: ProjectRepository,
        time_provider: TimeProvider | None = None,
        id_factory: IdFactory | None = None,
        settings: MarketplaceSettings | None = None,
    ) -> None:
        self.projects = projects
        self.time_provider = time_provider or default_time_provider
        self.id_factory = id_factory or default_id_factory
        self.settings = settings or MarketplaceSettings()

    @track_operation("create_project")
    async def create(
        self,
        client_id: str,
        title: str,
        description: str,
        budget_min: Decimal,
        budget_max: Decimal,
        deadline: datetime,
        project_type: ProjectType | str,
        initial_status: ProjectStatus | str = ProjectStatus.DRAFT,
    ) -> Project:
        """
        Post a new project for a client

        The project starts in DRAFT unless the client opens it for bids
        straight away. Budget ordering (min <= max) is left to callers.

        Raises:
            InvalidInput: Blank title/description, negative budget, unknown
                project type, or an initial status other than DRAFT/OPEN
        """
        with LogOperation(logger, "create_project", client_id=client_id):
            status = parse_project_status(initial_status)
            if status not in INITIAL_STATUSES:
                raise InvalidInput("Projects can only be created as DRAFT or OPEN")
            if not title or not title.strip():
                raise InvalidInput("Project title cannot be empty")
            if not description or not description.strip():
                raise InvalidInput("Project description cannot be empty")
            low = to_decimal(budget_min, "budget_min")
            high = to_decimal(budget_max, "budget_max")
            if low < 0 or high < 0:
                raise InvalidInput("Budget bounds cannot be negative")
            try:
                kind = ProjectType(project_type)
            except ValueError:
                raise InvalidInput(f"Unknown project type '{project_type}'") from None

            now = self.time_provider.now()
            project = Project(
                project_id=self.id_factory.generate(),
                client_id=client_id,
                freelancer_id=None,
                title=title,
                description=description,
                budget_min=low,
                budget_max=high,
                deadline=deadline,
                status=status,
                project_type=kind,
                agreed_rate=None,
                created_at=now,
                updated_at=now,
            )
            return await self.projects.create(project)

    async def get(self, project_id: str) -> Project:
        """
        Load a project

        Raises:
            ProjectNotFound: If no project has this id
        """
        project = await self.projects.find_by_id(project_id)
        if project is None:
            raise ProjectNotFound(project_id)
        return project

    @track_operation("search_projects")
    async def search(self, query: ProjectQuery | None = None) -> ProjectPage:
        """
        Find projects by owner, assignee, status and budget overlap

        Selection precedence: client_id, then freelancer_id (each optionally
        narrowed by status), then status alone; with no filter only OPEN
        projects are listed. Total counts matches before paging.
        """
        query = query or ProjectQuery()

        if query.client_id:
            projects = await self.projects.find_by_client_id(query.client_id)
            if query.status:
                projects = [p for p in projects if p.status == query.status]
        elif query.freelancer_id:
            projects = await self.projects.find_by_freelancer_id(query.freelancer_id)
            if query.status:
                projects = [p for p in projects if p.status == query.status]
        elif query.status:
            projects = await self.projects.find_by_status(query.status)
        else:
            projects = await self.projects.find_by_status(ProjectStatus.OPEN)

        projects = [p for p in projects if p.overlaps_budget(query.budget_min, query.budget_max)]

        limit = min(query.limit or self.settings.default_page_size, self.settings.max_page_size)
        start = (query.page - 1) * limit
        return ProjectPage(
            data=projects[start : start + limit],
            total=len(projects),
            page=query.page,
            limit=limit,
        )

    @track_operation("change_project_status")
    async def change_status(
        self, project_id: str, new_status: ProjectStatus | str, client_id: str
    ) -> Project:
        """
        Move a project along its lifecycle on behalf of its client

        Only the status field is written.

        Raises:
            ProjectNotFound: If the project does not exist
            NotProjectOwner: If client_id does not own the project
            InvalidStateTransition: If the state machine refuses the move
        """
        with LogOperation(
            logger,
            "change_project_status",
            project_id=project_id,
            client_id=client_id,
            to_status=str(new_status),
        ):
            target = parse_project_status(new_status)
            project = await self._get_owned(project_id, client_id)
            state_machine.assert_transition(project.status, target)

            updated = await self.projects.update(project_id, {"status": target})
            project_transitions_total.labels(
                from_status=project.status.value, to_status=target.value
            ).inc()
            return updated

    @track_operation("delete_project")
    async def remove(self, project_id: str, client_id: str) -> None:
        """
        Delete a project that never left DRAFT

        Raises:
            ProjectNotFound: If the project does not exist
            NotProjectOwner: If client_id does not own the project
            ProjectNotDeletable: If the project is past DRAFT
        """
        with LogOperation(logger, "delete_project", project_id=project_id, client_id=client_id):
            project = await self._get_owned(project_id, client_id)
            if project.status != ProjectStatus.DRAFT:
                raise ProjectNotDeletable(project_id, project.status.value)
            await self.projects.delete(project_id)

    async def _get_owned(self, project_id: str, client_id: str) -> Project:
        project = await self.get(project_id)
        if project.client_id != client_id:
            raise NotProjectOwner(project_id, client_id)
        return project
