"""
Time Entry Module

Hours logged on engaged projects and the billing totals derived from them.
"""

from freelance_market.time_entry.models import BillingSummary, TimeEntry
from freelance_market.time_entry.repository import (
    InMemoryTimeEntryRepository,
    SQLiteTimeEntryRepository,
    TimeEntryRepository,
)
from freelance_market.time_entry.service import TimeEntryService, calculate_total

__all__ = [
    "TimeEntry",
    "BillingSummary",
    "TimeEntryRepository",
    "InMemoryTimeEntryRepository",
    "SQLiteTimeEntryRepository",
    "TimeEntryService",
    "calculate_total",
]
