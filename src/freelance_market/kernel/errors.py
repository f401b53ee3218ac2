"""
Custom exceptions for the freelance marketplace

Well-defined error hierarchy lets a transport layer map each kind to a
status code (NotFound → 404, Forbidden → 403, Conflict → 409,
InvalidInput → 400) without the domain knowing about HTTP.
"""


class MarketplaceError(Exception):
    """Base exception for all marketplace errors"""

    pass


class StorageError(MarketplaceError):
    """Raised when the underlying database fails"""

    pass


class InvalidInput(MarketplaceError):
    """Raised when operation arguments fail validation"""

    pass


# Not found


class NotFound(MarketplaceError):
    """Base class for missing entities"""

    def __init__(self, entity: str, entity_id: str) -> None:
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f'{entity} with id "{entity_id}" not found')


class ProjectNotFound(NotFound):
    """Raised when project does not exist"""

    def __init__(self, project_id: str) -> None:
        self.project_id = project_id
        super().__init__("Project", project_id)


class BidNotFound(NotFound):
    """Raised when bid does not exist"""

    def __init__(self, bid_id: str) -> None:
        self.bid_id = bid_id
        super().__init__("Bid", bid_id)


class MilestoneNotFound(NotFound):
    """Raised when milestone does not exist"""

    def __init__(self, milestone_id: str) -> None:
        self.milestone_id = milestone_id
        super().__init__("Milestone", milestone_id)


class FreelancerNotFound(NotFound):
    """Raised when freelancer profile does not exist"""

    def __init__(self, freelancer_id: str) -> None:
        self.freelancer_id = freelancer_id
        super().__init__("Freelancer", freelancer_id)


# Forbidden


class Forbidden(MarketplaceError):
    """Raised when the caller may not act on the entity"""

    pass


class NotProjectOwner(Forbidden):
    """Raised when a client acts on a project owned by someone else"""

    def __init__(self, project_id: str, client_id: str) -> None:
        self.project_id = project_id
        self.client_id = client_id
        super().__init__("You do not own this project")


# Conflict


class Conflict(MarketplaceError):
    """Raised when entity status forbids the requested operation"""

    pass


class InvalidStateTransition(Conflict):
    """
    Raised by the project state machine for an illegal transition

    Carries both status names so callers can report exactly which
    edge was refused.
    """

    def __init__(self, from_status: str, to_status: str) -> None:
        self.from_status = from_status
        self.to_status = to_status
        super().__init__(f"Invalid state transition: {from_status} → {to_status}")


class ProjectNotOpenForBids(Conflict):
    """Raised when a bid targets a project that is not OPEN"""

    def __init__(self, project_id: str, current_status: str) -> None:
        self.project_id = project_id
        self.current_status = current_status
        super().__init__("Bids can only be placed on OPEN projects")


class BidNotPending(Conflict):
    """Raised when accept/reject targets a bid that already left PENDING"""

    def __init__(self, bid_id: str, current_status: str, action: str) -> None:
        self.bid_id = bid_id
        self.current_status = current_status
        self.action = action
        super().__init__(f"Only PENDING bids can be {action}")


class ProjectNotDeletable(Conflict):
    """Raised when deleting a project that has left DRAFT"""

    def __init__(self, project_id: str, current_status: str) -> None:
        self.project_id = project_id
        self.current_status = current_status
        super().__init__("Only projects in DRAFT status can be deleted")
