"""
Time tracking and billing

Freelancers log hours against a project; the amount owed is the
project's agreed rate times the logged hours, rounded half-up to cents.
"""

from datetime import datetime
from decimal import Decimal

from freelance_market.kernel.errors import InvalidInput, ProjectNotFound
from freelance_market.kernel.ids import IdFactory, default_id_factory
from freelance_market.kernel.logging import LogOperation, get_logger
from freelance_market.kernel.metrics import track_operation
from freelance_market.kernel.money import round_currency, to_decimal
from freelance_market.kernel.time import TimeProvider, default_time_provider
from freelance_market.project.repository import ProjectRepository
from freelance_market.time_entry.models import BillingSummary, TimeEntry
from freelance_market.time_entry.repository import TimeEntryRepository

logger = get_logger(__name__)


def calculate_total(rate: Decimal | int | float | str, hours: Decimal | int | float | str) -> Decimal:
    """
    Amount owed for hours at rate, rounded half-up to 2 decimal places

    Example:
        >>> calculate_total("199.99", "7.75")
        Decimal('1549.92')
    """
    return round_currency(to_decimal(rate, "rate") * to_decimal(hours, "hours"))


class TimeEntryService:
    def __init__(
        self,
        entries: TimeEntryRepository,
        projects: ProjectRepository,
        time_provider: TimeProvider | None = None,
        id_factory: IdFactory | None = None,
    ) -> None:
        self.entries = entries
        self.projects = projects
        self.time_provider = time_provider or default_time_provider
        self.id_factory = id_factory or default_id_factory

    @track_operation("log_time")
    async def log(
        self,
        project_id: str,
        freelancer_id: str,
        hours: Decimal,
        description: str,
        date: datetime,
        milestone_id: str | None = None,
    ) -> TimeEntry:
        """
        Record hours worked on a project

        Raises:
            ProjectNotFound: If the project does not exist
            InvalidInput: Non-positive hours or blank description
        """
        with LogOperation(
            logger, "log_time", project_id=project_id, freelancer_id=freelancer_id
        ):
            project = await self.projects.find_by_id(project_id)
            if project is None:
                raise ProjectNotFound(project_id)
            worked = to_decimal(hours, "hours")
            if worked <= 0:
                raise InvalidInput("Hours must be positive")
            if not description or not description.strip():
                raise InvalidInput("Description cannot be empty")

            now = self.time_provider.now()
            return await self.entries.create(
                TimeEntry(
                    entry_id=self.id_factory.generate(),
                    project_id=project_id,
                    freelancer_id=freelancer_id,
                    milestone_id=milestone_id,
                    hours=worked,
                    description=description,
                    date=date,
                    created_at=now,
                    updated_at=now,
                )
            )

    async def list_for_project(self, project_id: str) -> list[TimeEntry]:
        """Entries of a project, earliest work date first"""
        return await self.entries.find_by_project_id(project_id)

    @staticmethod
    def calculate_total(rate: Decimal, hours: Decimal) -> Decimal:
        return calculate_total(rate, hours)

    async def billing_summary(self, project_id: str) -> BillingSummary:
        """
        Total logged hours and, once a rate is agreed, the amount owed

        Raises:
            ProjectNotFound: If the project does not exist
        """
        project = await self.projects.find_by_id(project_id)
        if project is None:
            raise ProjectNotFound(project_id)

        entries = await self.entries.find_by_project_id(project_id)
        total_hours = sum((e.hours for e in entries), Decimal("0"))
        amount = (
            calculate_total(project.agreed_rate, total_hours)
            if project.agreed_rate is not None
            else None
        )
        return BillingSummary(
            project_id=project_id,
            entry_count=len(entries),
            total_hours=total_hours,
            agreed_rate=project.agreed_rate,
            amount=amount,
        )
