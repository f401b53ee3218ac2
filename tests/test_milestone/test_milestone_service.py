"""
Tests for milestones
"""

from decimal import Decimal

import pytest

from freelance_market.kernel.database import SQLiteDatabase
from freelance_market.kernel.errors import (
    InvalidInput,
    MilestoneNotFound,
    NotProjectOwner,
    ProjectNotFound,
)
from freelance_market.kernel.time import TestTimeProvider
from freelance_market.milestone.models import MilestoneStatus
from freelance_market.milestone.repository import SQLiteMilestoneRepository
from freelance_market.milestone.service import MilestoneService
from freelance_market.project.repository import SQLiteProjectRepository
from freelance_market.project.service import ProjectService
from tests.helpers import CLIENT, DEADLINE, OTHER_CLIENT, create_project


@pytest.mark.asyncio
async def test_create_copies_project_deadline(
    milestone_service: MilestoneService, project_service: ProjectService
) -> None:
    project = await create_project(project_service)

    milestone = await milestone_service.create(
        project.project_id, CLIENT, "Wireframes", Decimal("250"), 1, "Low fidelity"
    )

    assert milestone.status == MilestoneStatus.PENDING
    assert milestone.due_date == DEADLINE
    assert milestone.amount == Decimal("250")
    assert milestone.description == "Low fidelity"


@pytest.mark.asyncio
async def test_create_requires_existing_project(milestone_service: MilestoneService) -> None:
    with pytest.raises(ProjectNotFound):
        await milestone_service.create("missing", CLIENT, "Design", Decimal("10"), 0)


@pytest.mark.asyncio
async def test_create_requires_owner(
    milestone_service: MilestoneService, project_service: ProjectService
) -> None:
    project = await create_project(project_service)

    with pytest.raises(NotProjectOwner):
        await milestone_service.create(project.project_id, OTHER_CLIENT, "Design", Decimal("10"), 0)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "title,amount,order",
    [(" ", "10", 0), ("Design", "0", 0), ("Design", "-5", 0), ("Design", "10", -1)],
)
async def test_create_validates(
    milestone_service: MilestoneService,
    project_service: ProjectService,
    title: str,
    amount: str,
    order: int,
) -> None:
    project = await create_project(project_service)

    with pytest.raises(InvalidInput):
        await milestone_service.create(project.project_id, CLIENT, title, Decimal(amount), order)


@pytest.mark.asyncio
async def test_list_for_project_sorted_by_order(
    milestone_service: MilestoneService, project_service: ProjectService
) -> None:
    project = await create_project(project_service)
    for title, order in (("Launch", 3), ("Design", 1), ("Build", 2)):
        await milestone_service.create(project.project_id, CLIENT, title, Decimal("100"), order)

    milestones = await milestone_service.list_for_project(project.project_id)

    assert [m.title for m in milestones] == ["Design", "Build", "Launch"]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "target,expected",
    [
        (MilestoneStatus.COMPLETED, MilestoneStatus.COMPLETED),
        ("in_progress", MilestoneStatus.IN_PROGRESS),
        (MilestoneStatus.PENDING, MilestoneStatus.PENDING),
    ],
)
async def test_change_status_allows_any_status(
    milestone_service: MilestoneService, project_service: ProjectService, target, expected
) -> None:
    project = await create_project(project_service)
    milestone = await milestone_service.create(project.project_id, CLIENT, "Build", Decimal("100"), 0)

    updated = await milestone_service.change_status(milestone.milestone_id, target)

    assert updated.status == expected


@pytest.mark.asyncio
async def test_change_status_missing_or_unknown(
    milestone_service: MilestoneService, project_service: ProjectService
) -> None:
    project = await create_project(project_service)
    milestone = await milestone_service.create(project.project_id, CLIENT, "Build", Decimal("100"), 0)

    with pytest.raises(MilestoneNotFound):
        await milestone_service.change_status("missing", MilestoneStatus.COMPLETED)
    with pytest.raises(InvalidInput):
        await milestone_service.change_status(milestone.milestone_id, "DONE")


@pytest.mark.asyncio
async def test_sqlite_order_column_round_trip(
    sqlite_db: SQLiteDatabase, test_time: TestTimeProvider, id_factory
) -> None:
    projects = SQLiteProjectRepository(sqlite_db, test_time)
    project = await create_project(ProjectService(projects, test_time, id_factory))
    service = MilestoneService(
        SQLiteMilestoneRepository(sqlite_db, test_time), projects, test_time, id_factory
    )
    second = await service.create(project.project_id, CLIENT, "Second", Decimal("20.10"), 2)
    first = await service.create(project.project_id, CLIENT, "First", Decimal("10"), 1)

    await service.change_status(first.milestone_id, MilestoneStatus.COMPLETED)
    milestones = await service.list_for_project(project.project_id)

    assert [m.milestone_id for m in milestones] == [first.milestone_id, second.milestone_id]
    assert milestones[0].order == 1
    assert milestones[0].status == MilestoneStatus.COMPLETED
    assert milestones[1].amount == Decimal("20.10")
