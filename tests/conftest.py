"""
Pytest configuration and shared fixtures

Services are wired onto in-memory repositories by default; tests that
need real transactions use the SQLite fixtures or the Marketplace façade.
"""

import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator

import pytest

from freelance_market.bid.repository import InMemoryBidRepository
from freelance_market.bid.service import BidService
from freelance_market.freelancer.repository import InMemoryFreelancerRepository
from freelance_market.freelancer.service import FreelancerService
from freelance_market.kernel.database import SQLiteDatabase
from freelance_market.kernel.ids import SequentialIdFactory
from freelance_market.kernel.settings import MarketplaceSettings
from freelance_market.kernel.time import TestTimeProvider
from freelance_market.marketplace import Marketplace
from freelance_market.milestone.repository import InMemoryMilestoneRepository
from freelance_market.milestone.service import MilestoneService
from freelance_market.project.repository import InMemoryProjectRepository
from freelance_market.project.service import ProjectService
from freelance_market.time_entry.repository import InMemoryTimeEntryRepository
from freelance_market.time_entry.service import TimeEntryService


@pytest.fixture
def temp_db() -> Iterator[Path]:
    """Provide a temporary database path that's cleaned up after test"""
    with tempfile.TemporaryDirectory() as tmp:
        yield Path(tmp) / "market.db"


@pytest.fixture
def test_time() -> TestTimeProvider:
    """
    Provide a controllable time provider for deterministic tests

    Default time: 2025-01-15 12:00:00 UTC
    """
    return TestTimeProvider(datetime(2025, 1, 15, 12, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def id_factory() -> SequentialIdFactory:
    return SequentialIdFactory("id")


@pytest.fixture
def settings() -> MarketplaceSettings:
    return MarketplaceSettings()


@pytest.fixture
def sqlite_db(temp_db: Path) -> SQLiteDatabase:
    """Fresh schema in a temporary file"""
    return SQLiteDatabase(temp_db)


@pytest.fixture
def market(temp_db: Path, test_time: TestTimeProvider, id_factory: SequentialIdFactory) -> Marketplace:
    """Marketplace façade on a temporary SQLite file"""
    return Marketplace(temp_db, time_provider=test_time, id_factory=id_factory)


# =============================================================================
# In-memory repositories
# =============================================================================


@pytest.fixture
def project_repo(test_time: TestTimeProvider) -> InMemoryProjectRepository:
    return InMemoryProjectRepository(test_time)


@pytest.fixture
def bid_repo(test_time: TestTimeProvider) -> InMemoryBidRepository:
    return InMemoryBidRepository(test_time)


@pytest.fixture
def freelancer_repo() -> InMemoryFreelancerRepository:
    return InMemoryFreelancerRepository()


@pytest.fixture
def milestone_repo(test_time: TestTimeProvider) -> InMemoryMilestoneRepository:
    return InMemoryMilestoneRepository(test_time)


@pytest.fixture
def time_entry_repo() -> InMemoryTimeEntryRepository:
    return InMemoryTimeEntryRepository()


# =============================================================================
# Services
# =============================================================================


@pytest.fixture
def project_service(
    project_repo: InMemoryProjectRepository,
    test_time: TestTimeProvider,
    id_factory: SequentialIdFactory,
    settings: MarketplaceSettings,
) -> ProjectService:
    return ProjectService(project_repo, test_time, id_factory, settings)


@pytest.fixture
def bid_service(
    bid_repo: InMemoryBidRepository,
    project_repo: InMemoryProjectRepository,
    freelancer_repo: InMemoryFreelancerRepository,
    test_time: TestTimeProvider,
    id_factory: SequentialIdFactory,
    settings: MarketplaceSettings,
) -> BidService:
    return BidService(bid_repo, project_repo, freelancer_repo, test_time, id_factory, settings)


@pytest.fixture
def freelancer_service(
    freelancer_repo: InMemoryFreelancerRepository, test_time: TestTimeProvider
) -> FreelancerService:
    return FreelancerService(freelancer_repo, test_time)


@pytest.fixture
def milestone_service(
    milestone_repo: InMemoryMilestoneRepository,
    project_repo: InMemoryProjectRepository,
    test_time: TestTimeProvider,
    id_factory: SequentialIdFactory,
) -> MilestoneService:
    return MilestoneService(milestone_repo, project_repo, test_time, id_factory)


@pytest.fixture
def time_entry_service(
    time_entry_repo: InMemoryTimeEntryRepository,
    project_repo: InMemoryProjectRepository,
    test_time: TestTimeProvider,
    id_factory: SequentialIdFactory,
) -> TimeEntryService:
    return TimeEntryService(time_entry_repo, project_repo, test_time, id_factory)
