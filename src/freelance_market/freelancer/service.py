"""
Freelancer profile service
"""

from decimal import Decimal

from freelance_market.freelancer.models import AvailabilityStatus, Freelancer
from freelance_market.freelancer.repository import FreelancerRepository
from freelance_market.kernel.errors import Conflict, FreelancerNotFound, InvalidInput
from freelance_market.kernel.logging import LogOperation, get_logger
from freelance_market.kernel.metrics import track_operation
from freelance_market.kernel.money import to_decimal
from freelance_market.kernel.time import TimeProvider, default_time_provider

logger = get_logger(__name__)


class FreelancerService:
    """Registers and reads freelancer profiles"""

    def __init__(
        self,
        freelancers: FreelancerRepository,
        time_provider: TimeProvider | None = None,
    ) -> None:
        self.freelancers = freelancers
        self.time_provider = time_provider or default_time_provider

    @track_operation("register_freelancer")
    async def register(
        self,
        freelancer_id: str,
        display_name: str,
        hourly_rate: Decimal | str | None = None,
        rating: float = 0.0,
        portfolio_url: str | None = None,
        availability_status: AvailabilityStatus | str = AvailabilityStatus.AVAILABLE,
    ) -> Freelancer:
        """
        Create the profile for an authenticated freelancer account

        Raises:
            Conflict: If the freelancer already has a profile
            InvalidInput: Blank name, non-positive rate, rating outside 0-5
        """
        with LogOperation(logger, "register_freelancer", freelancer_id=freelancer_id):
            if await self.freelancers.find_by_id(freelancer_id) is not None:
                raise Conflict(f"Freelancer {freelancer_id} is already registered")
            if not display_name or not display_name.strip():
                raise InvalidInput("Display name cannot be empty")
            rate = to_decimal(hourly_rate, "hourly_rate") if hourly_rate is not None else None
            if rate is not None and rate <= 0:
                raise InvalidInput("Hourly rate must be positive")
            if not 0.0 <= rating <= 5.0:
                raise InvalidInput("Rating must be between 0.0 and 5.0")
            try:
                availability = AvailabilityStatus(availability_status)
            except ValueError:
                raise InvalidInput(f"Unknown availability status '{availability_status}'") from None

            now = self.time_provider.now()
            return await self.freelancers.create(
                Freelancer(
                    freelancer_id=freelancer_id,
                    display_name=display_name,
                    hourly_rate=rate,
                    availability_status=availability,
                    portfolio_url=portfolio_url,
                    rating=rating,
                    created_at=now,
                    updated_at=now,
                )
            )

    async def get(self, freelancer_id: str) -> Freelancer:
        """
        Raises:
            FreelancerNotFound: If no profile exists
        """
        freelancer = await self.freelancers.find_by_id(freelancer_id)
        if freelancer is None:
            raise FreelancerNotFound(freelancer_id)
        return freelancer
