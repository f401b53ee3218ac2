"""
Bid Module

Bids placed by freelancers on OPEN projects, the rules deciding them,
and the strategies that rank them for the client.
"""

from freelance_market.bid.models import Bid, BidStatus, BidView
from freelance_market.bid.ranking import (
    STRATEGIES,
    RankBy,
    composite_score,
    get_strategy,
    rank_by_composite,
    rank_by_price,
    rank_by_rating,
)
from freelance_market.bid.repository import (
    BidRepository,
    InMemoryBidRepository,
    SQLiteBidRepository,
)
from freelance_market.bid.service import BidService

__all__ = [
    # Models
    "Bid",
    "BidStatus",
    "BidView",
    # Ranking
    "RankBy",
    "STRATEGIES",
    "composite_score",
    "get_strategy",
    "rank_by_price",
    "rank_by_rating",
    "rank_by_composite",
    # Persistence
    "BidRepository",
    "InMemoryBidRepository",
    "SQLiteBidRepository",
    # Service
    "BidService",
]
