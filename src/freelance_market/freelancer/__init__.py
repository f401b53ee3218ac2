"""
Freelancer Module

Freelancer profiles; their ratings drive bid ranking.
"""

from freelance_market.freelancer.models import AvailabilityStatus, Freelancer
from freelance_market.freelancer.repository import (
    FreelancerRepository,
    InMemoryFreelancerRepository,
    SQLiteFreelancerRepository,
)
from freelance_market.freelancer.service import FreelancerService

__all__ = [
    "AvailabilityStatus",
    "Freelancer",
    "FreelancerRepository",
    "InMemoryFreelancerRepository",
    "SQLiteFreelancerRepository",
    "FreelancerService",
]
