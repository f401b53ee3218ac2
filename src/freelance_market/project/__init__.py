"""
Project Module

Project aggregate, its lifecycle state machine, and the service clients
use to post, search, advance and delete projects.
"""

from freelance_market.project.models import (
    Project,
    ProjectPage,
    ProjectQuery,
    ProjectStatus,
    ProjectType,
)
from freelance_market.project.repository import (
    InMemoryProjectRepository,
    ProjectRepository,
    SQLiteProjectRepository,
)
from freelance_market.project.service import ProjectService
from freelance_market.project.state_machine import assert_transition, can_transition

__all__ = [
    # Models
    "Project",
    "ProjectStatus",
    "ProjectType",
    "ProjectQuery",
    "ProjectPage",
    # State machine
    "can_transition",
    "assert_transition",
    # Persistence
    "ProjectRepository",
    "InMemoryProjectRepository",
    "SQLiteProjectRepository",
    # Service
    "ProjectService",
]
