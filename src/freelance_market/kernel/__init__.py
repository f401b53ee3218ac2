"""
Kernel - Shared infrastructure for the marketplace modules

Errors, ids, clock, money helpers, settings, structured logging, metrics
and the SQLite database handle. Nothing here knows about projects or bids.
"""

from freelance_market.kernel.database import SQLiteDatabase
from freelance_market.kernel.errors import (
    BidNotFound,
    BidNotPending,
    Conflict,
    Forbidden,
    FreelancerNotFound,
    InvalidInput,
    InvalidStateTransition,
    MarketplaceError,
    MilestoneNotFound,
    NotFound,
    NotProjectOwner,
    ProjectNotDeletable,
    ProjectNotFound,
    ProjectNotOpenForBids,
    StorageError,
)
from freelance_market.kernel.ids import IdFactory, SequentialIdFactory, generate_id
from freelance_market.kernel.settings import MarketplaceSettings
from freelance_market.kernel.time import RealTimeProvider, TestTimeProvider, TimeProvider

__all__ = [
    # IDs
    "IdFactory",
    "SequentialIdFactory",
    "generate_id",
    # Time
    "TimeProvider",
    "RealTimeProvider",
    "TestTimeProvider",
    # Storage & settings
    "SQLiteDatabase",
    "MarketplaceSettings",
    # Errors
    "MarketplaceError",
    "StorageError",
    "InvalidInput",
    "NotFound",
    "ProjectNotFound",
    "BidNotFound",
    "MilestoneNotFound",
    "FreelancerNotFound",
    "Forbidden",
    "NotProjectOwner",
    "Conflict",
    "InvalidStateTransition",
    "ProjectNotOpenForBids",
    "BidNotPending",
    "ProjectNotDeletable",
]
