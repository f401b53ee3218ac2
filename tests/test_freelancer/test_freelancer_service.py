"""
Tests for freelancer profiles
"""

from decimal import Decimal

import pytest

from freelance_market.freelancer.models import AvailabilityStatus
from freelance_market.freelancer.repository import SQLiteFreelancerRepository
from freelance_market.freelancer.service import FreelancerService
from freelance_market.kernel.database import SQLiteDatabase
from freelance_market.kernel.errors import Conflict, FreelancerNotFound, InvalidInput
from freelance_market.kernel.time import TestTimeProvider


@pytest.mark.asyncio
async def test_register_and_get(freelancer_service: FreelancerService, test_time: TestTimeProvider) -> None:
    freelancer = await freelancer_service.register(
        "f-1", "Ada", hourly_rate="95", rating=4.8, portfolio_url="https://ada.dev"
    )

    assert freelancer.hourly_rate == Decimal("95")
    assert freelancer.availability_status == AvailabilityStatus.AVAILABLE
    assert freelancer.completed_projects_count == 0
    assert freelancer.created_at == test_time.now()
    assert await freelancer_service.get("f-1") == freelancer


@pytest.mark.asyncio
async def test_register_twice_conflicts(freelancer_service: FreelancerService) -> None:
    await freelancer_service.register("f-1", "Ada")

    with pytest.raises(Conflict):
        await freelancer_service.register("f-1", "Ada again")


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "overrides",
    [
        {"display_name": " "},
        {"hourly_rate": "0"},
        {"rating": 5.5},
        {"rating": -0.1},
        {"availability_status": "ON_HOLIDAY"},
    ],
)
async def test_register_validates(freelancer_service: FreelancerService, overrides: dict) -> None:
    arguments = {"freelancer_id": "f-1", "display_name": "Ada", **overrides}
    with pytest.raises(InvalidInput):
        await freelancer_service.register(**arguments)


@pytest.mark.asyncio
async def test_get_missing(freelancer_service: FreelancerService) -> None:
    with pytest.raises(FreelancerNotFound):
        await freelancer_service.get("nobody")


@pytest.mark.asyncio
async def test_sqlite_find_by_ids(sqlite_db: SQLiteDatabase, test_time: TestTimeProvider) -> None:
    service = FreelancerService(SQLiteFreelancerRepository(sqlite_db), test_time)
    await service.register("f-1", "Ada", rating=4.5, availability_status="BUSY")
    await service.register("f-2", "Grace", hourly_rate=Decimal("120.25"))

    found = await service.freelancers.find_by_ids(["f-1", "f-2", "f-3", "f-1"])

    assert set(found) == {"f-1", "f-2"}
    assert found["f-1"].rating == 4.5
    assert found["f-1"].availability_status == AvailabilityStatus.BUSY
    assert found["f-2"].hourly_rate == Decimal("120.25")
    assert await service.freelancers.find_by_ids([]) == {}
