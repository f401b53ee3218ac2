"""
Milestone Module

Ordered, payable steps of an engaged project.
"""

from freelance_market.milestone.models import Milestone, MilestoneStatus
from freelance_market.milestone.repository import (
    InMemoryMilestoneRepository,
    MilestoneRepository,
    SQLiteMilestoneRepository,
)
from freelance_market.milestone.service import MilestoneService

__all__ = [
    "Milestone",
    "MilestoneStatus",
    "MilestoneRepository",
    "InMemoryMilestoneRepository",
    "SQLiteMilestoneRepository",
    "MilestoneService",
]
