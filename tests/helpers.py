"""
Test Helper Functions - Builders

Reusable builders for projects, bids and ranking views so tests state
only the values they care about.
"""

from datetime import datetime, timezone
from decimal import Decimal

from freelance_market.bid.models import Bid, BidStatus, BidView
from freelance_market.bid.service import BidService
from freelance_market.project.models import Project, ProjectStatus, ProjectType
from freelance_market.project.service import ProjectService

CLIENT = "client-1"
OTHER_CLIENT = "client-2"
DEADLINE = datetime(2025, 3, 1, tzinfo=timezone.utc)
FIXED_TIME = datetime(2025, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


async def create_project(
    service: ProjectService,
    client_id: str = CLIENT,
    status: ProjectStatus = ProjectStatus.OPEN,
    budget_min: Decimal = Decimal("500"),
    budget_max: Decimal = Decimal("1500"),
    title: str = "Landing page redesign",
    project_type: ProjectType = ProjectType.HOURLY,
) -> Project:
    """
    Builder for projects created through the service

    Example:
        >>> project = await create_project(project_service, status=ProjectStatus.DRAFT)
    """
    return await service.create(
        client_id=client_id,
        title=title,
        description="Rebuild the marketing site",
        budget_min=budget_min,
        budget_max=budget_max,
        deadline=DEADLINE,
        project_type=project_type,
        initial_status=status,
    )


async def submit_bid(
    service: BidService,
    project_id: str,
    freelancer_id: str = "freelancer-1",
    rate: str = "75.5",
    days: int = 30,
) -> Bid:
    """Builder for bids submitted through the service"""
    return await service.submit(
        project_id=project_id,
        freelancer_id=freelancer_id,
        proposed_rate=Decimal(rate),
        estimated_duration_days=days,
        cover_letter="I have built a dozen of these.",
    )


def make_bid(
    bid_id: str,
    rate: str,
    project_id: str = "project-1",
    freelancer_id: str | None = None,
    status: BidStatus = BidStatus.PENDING,
) -> Bid:
    """Builder for bid models without a service"""
    return Bid(
        bid_id=bid_id,
        project_id=project_id,
        freelancer_id=freelancer_id or f"freelancer-{bid_id}",
        proposed_rate=Decimal(rate),
        estimated_duration_days=10,
        cover_letter="Cover letter",
        status=status,
        created_at=FIXED_TIME,
        updated_at=FIXED_TIME,
    )


def make_view(bid_id: str, rate: str, rating: float) -> BidView:
    """Builder for ranking input"""
    return BidView(bid=make_bid(bid_id, rate), freelancer_rating=rating)


def rates(views: list[BidView]) -> list[Decimal]:
    return [v.proposed_rate for v in views]
