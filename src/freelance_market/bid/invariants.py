"""
Bid Lifecycle Invariants

Pure validation functions for the bid rules. Services call these after
loading entities and before writing anything.
"""

from decimal import Decimal

from freelance_market.bid.models import Bid, BidStatus
from freelance_market.kernel.errors import (
    BidNotPending,
    InvalidInput,
    NotProjectOwner,
    ProjectNotOpenForBids,
)
from freelance_market.project.models import Project, ProjectStatus


def validate_bid_terms(
    proposed_rate: Decimal, estimated_duration_days: int, cover_letter: str
) -> None:
    """
    Validate the freelancer-supplied terms of a bid

    Raises:
        InvalidInput: Non-positive rate, duration below one day, or blank cover letter
    """
    if proposed_rate <= 0:
        raise InvalidInput("Proposed rate must be positive")
    if isinstance(estimated_duration_days, bool) or not isinstance(estimated_duration_days, int):
        raise InvalidInput("Estimated duration must be a whole number of days")
    if estimated_duration_days < 1:
        raise InvalidInput("Estimated duration must be at least 1 day")
    if not cover_letter or not cover_letter.strip():
        raise InvalidInput("Cover letter cannot be empty")


def validate_project_open_for_bids(project: Project) -> None:
    """
    Bids may only be placed on OPEN projects

    Raises:
        ProjectNotOpenForBids: If project status is anything but OPEN
    """
    if project.status != ProjectStatus.OPEN:
        raise ProjectNotOpenForBids(project.project_id, project.status.value)


def validate_client_owns_project(project: Project | None, client_id: str, project_id: str) -> Project:
    """
    Only the owning client decides on a project's bids

    A missing project is treated the same as someone else's project and
    raises NotProjectOwner, never ProjectNotFound.

    Raises:
        NotProjectOwner: If the project is missing or owned by another client
    """
    if project is None or project.client_id != client_id:
        raise NotProjectOwner(project_id, client_id)
    return project


def validate_bid_pending(bid: Bid, action: str) -> None:
    """
    Accept and reject only apply to PENDING bids

    Args:
        bid: Bid being decided
        action: "accepted" or "rejected", used in the error message

    Raises:
        BidNotPending: If the bid already left PENDING
    """
    if bid.status != BidStatus.PENDING:
        raise BidNotPending(bid.bid_id, bid.status.value, action)


def pending_siblings(bids: list[Bid], accepted_bid_id: str) -> list[Bid]:
    """
    Bids to auto-reject when accepted_bid_id wins

    Excludes the winning bid itself and any bid that already left PENDING.
    """
    return [b for b in bids if b.bid_id != accepted_bid_id and b.status == BidStatus.PENDING]
