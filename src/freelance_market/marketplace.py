"""
Marketplace - Main façade class

The primary interface for embedding the marketplace: one SQLite file,
one set of repositories, and the services wired onto them.

Example:
    >>> from freelance_market import Marketplace
    >>> market = Marketplace("market.db")
    >>> project = await market.projects.create("client-1", "Landing page", ...)
    >>> bid = await market.bids.submit(project.project_id, "dev-1", Decimal("75.5"), 30, "...")
    >>> await market.bids.accept(bid.bid_id, "client-1")
"""

from pathlib import Path

from freelance_market.bid.repository import SQLiteBidRepository
from freelance_market.bid.service import BidService
from freelance_market.freelancer.repository import SQLiteFreelancerRepository
from freelance_market.freelancer.service import FreelancerService
from freelance_market.kernel.database import SQLiteDatabase
from freelance_market.kernel.ids import IdFactory, default_id_factory
from freelance_market.kernel.settings import MarketplaceSettings
from freelance_market.kernel.time import RealTimeProvider, TimeProvider
from freelance_market.milestone.repository import SQLiteMilestoneRepository
from freelance_market.milestone.service import MilestoneService
from freelance_market.project.repository import SQLiteProjectRepository
from freelance_market.project.service import ProjectService
from freelance_market.time_entry.repository import SQLiteTimeEntryRepository
from freelance_market.time_entry.service import TimeEntryService


class Marketplace:
    """
    Freelance marketplace façade

    Services exposed as attributes:
    - projects: post, search, advance and delete projects
    - bids: submit, accept, reject and rank bids
    - freelancers: register and read profiles
    - milestones: plan and track project milestones
    - time_entries: log hours and compute billing
    """

    def __init__(
        self,
        sqlite_path: str | Path,
        settings: MarketplaceSettings | None = None,
        time_provider: TimeProvider | None = None,
        id_factory: IdFactory | None = None,
    ) -> None:
        """
        Args:
            sqlite_path: Path to SQLite database (created if missing)
            settings: Runtime settings (defaults if None)
            time_provider: Time provider (real time if None)
            id_factory: Id generator (time-ordered UUIDs if None)
        """
        self.sqlite_path = Path(sqlite_path)
        self.settings = settings or MarketplaceSettings()
        self.time_provider = time_provider or RealTimeProvider()
        self.id_factory = id_factory or default_id_factory

        # Storage
        self.db = SQLiteDatabase(self.sqlite_path)
        self.project_repo = SQLiteProjectRepository(self.db, self.time_provider)
        self.bid_repo = SQLiteBidRepository(self.db, self.time_provider)
        self.freelancer_repo = SQLiteFreelancerRepository(self.db)
        self.milestone_repo = SQLiteMilestoneRepository(self.db, self.time_provider)
        self.time_entry_repo = SQLiteTimeEntryRepository(self.db)

        # Services
        self.projects = ProjectService(
            self.project_repo, self.time_provider, self.id_factory, self.settings
        )
        self.bids = BidService(
            self.bid_repo,
            self.project_repo,
            self.freelancer_repo,
            self.time_provider,
            self.id_factory,
            self.settings,
        )
        self.freelancers = FreelancerService(self.freelancer_repo, self.time_provider)
        self.milestones = MilestoneService(
            self.milestone_repo, self.project_repo, self.time_provider, self.id_factory
        )
        self.time_entries = TimeEntryService(
            self.time_entry_repo, self.project_repo, self.time_provider, self.id_factory
        )

    def row_counts(self) -> dict[str, int]:
        """Number of stored records per table"""
        return self.db.count_rows()
