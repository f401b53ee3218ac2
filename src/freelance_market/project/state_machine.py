"""
Project State Machine

Flat transition table: each status maps to the set of statuses it may move
to. Pure lookups, no side effects; callers read the current status, assert
the transition, then persist.
"""

from freelance_market.kernel.errors import InvalidStateTransition
from freelance_market.project.models import ProjectStatus

TRANSITIONS: dict[ProjectStatus, frozenset[ProjectStatus]] = {
    ProjectStatus.DRAFT: frozenset({ProjectStatus.OPEN}),
    ProjectStatus.OPEN: frozenset({ProjectStatus.IN_PROGRESS, ProjectStatus.CANCELLED}),
    ProjectStatus.IN_PROGRESS: frozenset({ProjectStatus.REVIEW, ProjectStatus.DISPUTED}),
    ProjectStatus.REVIEW: frozenset({ProjectStatus.COMPLETED, ProjectStatus.IN_PROGRESS}),
    ProjectStatus.COMPLETED: frozenset(),
    ProjectStatus.CANCELLED: frozenset(),
    ProjectStatus.DISPUTED: frozenset(),
}

TERMINAL_STATUSES = frozenset(status for status, targets in TRANSITIONS.items() if not targets)


def can_transition(from_status: ProjectStatus, to_status: ProjectStatus) -> bool:
    """
    Check whether a project may move from one status to another

    Self-transitions are never legal since no status lists itself.

    Example:
        >>> can_transition(ProjectStatus.DRAFT, ProjectStatus.OPEN)
        True
        >>> can_transition(ProjectStatus.DRAFT, ProjectStatus.COMPLETED)
        False
    """
    return to_status in TRANSITIONS[from_status]


def assert_transition(from_status: ProjectStatus, to_status: ProjectStatus) -> None:
    """
    Require a legal transition

    Raises:
        InvalidStateTransition: If the table does not allow from_status → to_status
    """
    if not can_transition(from_status, to_status):
        raise InvalidStateTransition(from_status.value, to_status.value)


def allowed_transitions(from_status: ProjectStatus) -> frozenset[ProjectStatus]:
    """Statuses reachable in one step from from_status"""
    return TRANSITIONS[from_status]


def is_terminal(status: ProjectStatus) -> bool:
    """True for COMPLETED, CANCELLED and DISPUTED"""
    return status in TERMINAL_STATUSES
