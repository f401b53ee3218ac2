"""
Bid lifecycle service

Submission, acceptance, rejection and ranked listing of bids. Accepting a
bid rejects its pending siblings first, then accepts the winner, then
moves the project to IN_PROGRESS, all inside one repository transaction.
"""

from decimal import Decimal

from freelance_market.bid import invariants
from freelance_market.bid.models import Bid, BidStatus, BidView
from freelance_market.bid.ranking import STRATEGIES, resolve_rank_by
from freelance_market.bid.repository import BidRepository
from freelance_market.freelancer.repository import FreelancerRepository
from freelance_market.kernel.errors import BidNotFound, ProjectNotFound
from freelance_market.kernel.ids import IdFactory, default_id_factory
from freelance_market.kernel.logging import LogOperation, get_logger
from freelance_market.kernel.metrics import (
    bid_decisions_total,
    bid_rankings_total,
    bids_submitted_total,
    project_transitions_total,
    track_operation,
)
from freelance_market.kernel.money import to_decimal
from freelance_market.kernel.settings import MarketplaceSettings
from freelance_market.kernel.time import TimeProvider, default_time_provider
from freelance_market.project import state_machine
from freelance_market.project.models import ProjectStatus
from freelance_market.project.repository import ProjectRepository

logger = get_logger(__name__)


class BidService:
    """
    Bid operations for freelancers (submit) and clients (decide, review)

    Entities are always re-read before a mutation; the PENDING check on
    the re-read bid is what stops two concurrent decisions on one bid.
    """

    def __init__(
        self,
        bids: BidRepository,
        projects: ProjectRepository,
        freelancers: FreelancerRepository | None = None,
        time_provider: TimeProvider | None = None,
        id_factory: IdFactory | None = None,
        settings: MarketplaceSettings | None = None,
    ) -> None:
        self.bids = bids
        self.projects = projects
        self.freelancers = freelancers
        self.time_provider = time_provider or default_time_provider
        self.id_factory = id_factory or default_id_factory
        self.settings = settings or MarketplaceSettings()

    @track_operation("submit_bid")
    async def submit(
        self,
        project_id: str,
        freelancer_id: str,
        proposed_rate: Decimal,
        estimated_duration_days: int,
        cover_letter: str,
    ) -> Bid:
        """
        Place a PENDING bid on an OPEN project

        A freelancer may bid more than once on the same project.

        Raises:
            InvalidInput: Non-positive rate, duration below one day, blank cover letter
            ProjectNotFound: If the project does not exist
            ProjectNotOpenForBids: If the project is not OPEN
        """
        with LogOperation(
            logger,
            "submit_bid",
            project_id=project_id,
            freelancer_id=freelancer_id,
            cover_letter=cover_letter,
        ):
            rate = to_decimal(proposed_rate, "proposed_rate")
            invariants.validate_bid_terms(rate, estimated_duration_days, cover_letter)

            project = await self.projects.find_by_id(project_id)
            if project is None:
                raise ProjectNotFound(project_id)
            invariants.validate_project_open_for_bids(project)

            now = self.time_provider.now()
            bid = Bid(
                bid_id=self.id_factory.generate(),
                project_id=project_id,
                freelancer_id=freelancer_id,
                proposed_rate=rate,
                estimated_duration_days=estimated_duration_days,
                cover_letter=cover_letter,
                status=BidStatus.PENDING,
                created_at=now,
                updated_at=now,
            )
            created = await self.bids.create(bid)
            bids_submitted_total.inc()
            return created

    async def get(self, bid_id: str) -> Bid:
        """
        Load a bid

        Raises:
            BidNotFound: If no bid has this id
        """
        bid = await self.bids.find_by_id(bid_id)
        if bid is None:
            raise BidNotFound(bid_id)
        return bid

    async def list_for_freelancer(self, freelancer_id: str) -> list[Bid]:
        """A freelancer's own bids in submission order"""
        return await self.bids.find_by_freelancer_id(freelancer_id)

    @track_operation("accept_bid")
    async def accept(self, bid_id: str, client_id: str) -> Bid:
        """
        Accept a bid on behalf of the project's client

        Every check runs before the first write, and runs again inside the
        transaction so that of two overlapping accepts on one project only
        the first to commit succeeds. Writes, in order:
        1. Remaining PENDING bids on the project become REJECTED
        2. The target bid becomes ACCEPTED
        3. The project becomes IN_PROGRESS with freelancer_id and
           agreed_rate taken from the accepted bid

        On a transactional store a failure rolls all three back. Without
        transactions a failure may leave siblings rejected and the target
        still PENDING; calling accept again completes the operation.

        Raises:
            BidNotFound: If the bid does not exist
            NotProjectOwner: If client_id does not own the bid's project
            BidNotPending: If the bid was already decided
            InvalidStateTransition: If the project cannot move to IN_PROGRESS
        """
        with LogOperation(logger, "accept_bid", bid_id=bid_id, client_id=client_id):
            bid = await self.get(bid_id)
            project = invariants.validate_client_owns_project(
                await self.projects.find_by_id(bid.project_id), client_id, bid.project_id
            )
            invariants.validate_bid_pending(bid, "accepted")
            state_machine.assert_transition(project.status, ProjectStatus.IN_PROGRESS)

            async with self.bids.transaction():
                # Re-checked under the write lock: a decision committed since
                # the first read must be seen before anything is written
                bid = await self.get(bid_id)
                invariants.validate_bid_pending(bid, "accepted")
                project = invariants.validate_client_owns_project(
                    await self.projects.find_by_id(bid.project_id), client_id, bid.project_id
                )
                state_machine.assert_transition(project.status, ProjectStatus.IN_PROGRESS)

                siblings = invariants.pending_siblings(
                    await self.bids.find_by_project_id(bid.project_id), bid.bid_id
                )
                for sibling in siblings:
                    await self.bids.update(sibling.bid_id, {"status": BidStatus.REJECTED})

                accepted = await self.bids.update(bid.bid_id, {"status": BidStatus.ACCEPTED})

                await self.projects.update(
                    project.project_id,
                    {
                        "status": ProjectStatus.IN_PROGRESS,
                        "freelancer_id": bid.freelancer_id,
                        "agreed_rate": bid.proposed_rate,
                    },
                )

            bid_decisions_total.labels(decision="accepted").inc()
            if siblings:
                bid_decisions_total.labels(decision="auto_rejected").inc(len(siblings))
            project_transitions_total.labels(
                from_status=project.status.value, to_status=ProjectStatus.IN_PROGRESS.value
            ).inc()
            logger.info(
                "Bid accepted",
                bid_id=bid_id,
                project_id=project.project_id,
                freelancer_id=bid.freelancer_id,
                auto_rejected=len(siblings),
            )
            return accepted

    @track_operation("reject_bid")
    async def reject(self, bid_id: str, client_id: str) -> Bid:
        """
        Reject a single PENDING bid; the project and sibling bids are untouched

        The PENDING check is repeated inside the transaction, so a reject
        racing an accept of the same bid fails instead of overwriting it.

        Raises:
            BidNotFound: If the bid does not exist
            NotProjectOwner: If client_id does not own the bid's project
            BidNotPending: If the bid was already decided
        """
        with LogOperation(logger, "reject_bid", bid_id=bid_id, client_id=client_id):
            bid = await self.get(bid_id)
            invariants.validate_client_owns_project(
                await self.projects.find_by_id(bid.project_id), client_id, bid.project_id
            )
            invariants.validate_bid_pending(bid, "rejected")

            async with self.bids.transaction():
                current = await self.get(bid_id)
                invariants.validate_bid_pending(current, "rejected")
                rejected = await self.bids.update(bid_id, {"status": BidStatus.REJECTED})
            bid_decisions_total.labels(decision="rejected").inc()
            return rejected

    @track_operation("list_ranked_bids")
    async def list_ranked(self, project_id: str, rank_by: str | None = None) -> list[BidView]:
        """
        All bids on a project, ordered by the named ranking strategy

        rank_by falls back to the configured default, and unknown names
        rank by composite score. Freelancers without a profile rate 0.0.
        """
        strategy = resolve_rank_by(rank_by or self.settings.default_rank_by)
        bids = await self.bids.find_by_project_id(project_id)

        ratings: dict[str, float] = {}
        if self.freelancers is not None and bids:
            profiles = await self.freelancers.find_by_ids([b.freelancer_id for b in bids])
            ratings = {fid: profile.rating for fid, profile in profiles.items()}

        views = [BidView(bid=b, freelancer_rating=ratings.get(b.freelancer_id, 0.0)) for b in bids]
        bid_rankings_total.labels(strategy=strategy.value).inc()
        return STRATEGIES[strategy](views)
