"""
Milestone service

Clients break their projects into ordered milestones; either party then
moves a milestone between PENDING, IN_PROGRESS and COMPLETED.
"""

from decimal import Decimal

from freelance_market.kernel.errors import (
    InvalidInput,
    MilestoneNotFound,
    NotProjectOwner,
    ProjectNotFound,
)
from freelance_market.kernel.ids import IdFactory, default_id_factory
from freelance_market.kernel.logging import LogOperation, get_logger
from freelance_market.kernel.metrics import track_operation
from freelance_market.kernel.money import to_decimal
from freelance_market.kernel.time import TimeProvider, default_time_provider
from freelance_market.milestone.models import Milestone, MilestoneStatus
from freelance_market.milestone.repository import MilestoneRepository
from freelance_market.project.repository import ProjectRepository

logger = get_logger(__name__)


def parse_milestone_status(value: MilestoneStatus | str) -> MilestoneStatus:
    """
    Raises:
        InvalidInput: If value names no milestone status
    """
    if isinstance(value, MilestoneStatus):
        return value
    try:
        return MilestoneStatus(str(value).strip().upper())
    except ValueError:
        valid = ", ".join(s.value for s in MilestoneStatus)
        raise InvalidInput(f"Unknown milestone status '{value}' (expected one of: {valid})") from None


class MilestoneService:
    def __init__(
        self,
        milestones: MilestoneRepository,
        projects: ProjectRepository,
        time_provider: TimeProvider | None = None,
        id_factory: IdFactory | None = None,
    ) -> None:
        self.milestones = milestones
        self.projects = projects
        self.time_provider = time_provider or default_time_provider
        self.id_factory = id_factory or default_id_factory

    @track_operation("create_milestone")
    async def create(
        self,
        project_id: str,
        client_id: str,
        title: str,
        amount: Decimal,
        order: int,
        description: str | None = None,
    ) -> Milestone:
        """
        Add a PENDING milestone due at the project deadline

        Raises:
            ProjectNotFound: If the project does not exist
            NotProjectOwner: If client_id does not own the project
            InvalidInput: Blank title, non-positive amount or negative order
        """
        with LogOperation(logger, "create_milestone", project_id=project_id, client_id=client_id):
            project = await self.projects.find_by_id(project_id)
            if project is None:
                raise ProjectNotFound(project_id)
            if project.client_id != client_id:
                raise NotProjectOwner(project_id, client_id)
            if not title or not title.strip():
                raise InvalidInput("Milestone title cannot be empty")
            value = to_decimal(amount, "amount")
            if value <= 0:
                raise InvalidInput("Milestone amount must be positive")
            if order < 0:
                raise InvalidInput("Milestone order cannot be negative")

            now = self.time_provider.now()
            return await self.milestones.create(
                Milestone(
                    milestone_id=self.id_factory.generate(),
                    project_id=project_id,
                    title=title,
                    description=description,
                    amount=value,
                    order=order,
                    due_date=project.deadline,
                    status=MilestoneStatus.PENDING,
                    created_at=now,
                    updated_at=now,
                )
            )

    async def list_for_project(self, project_id: str) -> list[Milestone]:
        """Milestones of a project, lowest order first"""
        return await self.milestones.find_by_project_id(project_id)

    @track_operation("change_milestone_status")
    async def change_status(self, milestone_id: str, status: MilestoneStatus | str) -> Milestone:
        """
        Set a milestone's status; any of the three statuses is allowed

        Raises:
            MilestoneNotFound: If the milestone does not exist
            InvalidInput: If status names no milestone status
        """
        with LogOperation(logger, "change_milestone_status", milestone_id=milestone_id):
            target = parse_milestone_status(status)
            if await self.milestones.find_by_id(milestone_id) is None:
                raise MilestoneNotFound(milestone_id)
            return await self.milestones.update(milestone_id, {"status": target})
