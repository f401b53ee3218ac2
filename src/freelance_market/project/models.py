"""
Project Domain Models

A project is posted by a client, collects bids while OPEN, and moves
through its lifecycle once a freelancer is engaged.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field, field_validator


class ProjectStatus(str, Enum):
    """
    Project lifecycle states

    DRAFT → OPEN → IN_PROGRESS → REVIEW → COMPLETED
              ↓          ↓          ↓
          CANCELLED   DISPUTED   IN_PROGRESS (sent back for revision)
    """

    DRAFT = "DRAFT"  # Being prepared, not visible to freelancers
    OPEN = "OPEN"  # Accepting bids
    IN_PROGRESS = "IN_PROGRESS"  # Bid accepted, work underway
    REVIEW = "REVIEW"  # Work delivered, client reviewing
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"
    DISPUTED = "DISPUTED"


class ProjectType(str, Enum):
    """How the engaged freelancer is paid"""

    FIXED = "FIXED"
    HOURLY = "HOURLY"


class Project(BaseModel):
    """
    Project aggregate

    freelancer_id and agreed_rate stay None until a bid is accepted,
    then are set together and never reset.
    """

    project_id: str = Field(..., description="Unique project identifier")
    client_id: str = Field(..., description="Owning client")
    freelancer_id: str | None = Field(
        default=None, description="Engaged freelancer (set on bid acceptance)"
    )
    title: str = Field(..., description="Project title")
    description: str = Field(..., description="Project description")
    budget_min: Decimal = Field(..., ge=0, description="Lower end of budget range")
    budget_max: Decimal = Field(..., ge=0, description="Upper end of budget range")
    deadline: datetime = Field(..., description="Delivery deadline")
    status: ProjectStatus = Field(
        default=ProjectStatus.DRAFT, description="Current lifecycle status"
    )
    project_type: ProjectType = Field(..., description="FIXED or HOURLY")
    agreed_rate: Decimal | None = Field(
        default=None, description="Accepted bid's proposed rate"
    )
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime = Field(..., description="Last modification timestamp")

    @field_validator("title", "description")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("must not be empty")
        return v.strip()

    @property
    def is_engaged(self) -> bool:
        """True once a freelancer has been engaged through an accepted bid"""
        return self.freelancer_id is not None

    def overlaps_budget(
        self, budget_min: Decimal | None, budget_max: Decimal | None
    ) -> bool:
        """Check if the project's budget range overlaps [budget_min, budget_max]"""
        if budget_min is not None and self.budget_max < budget_min:
            return False
        if budget_max is not None and self.budget_min > budget_max:
            return False
        return True


class ProjectQuery(BaseModel):
    """Filters and paging for project search"""

    client_id: str | None = None
    freelancer_id: str | None = None
    status: ProjectStatus | None = None
    budget_min: Decimal | None = Field(default=None, ge=0)
    budget_max: Decimal | None = Field(default=None, ge=0)
    page: int = Field(default=1, ge=1)
    limit: int | None = Field(default=None, ge=1)


class ProjectPage(BaseModel):
    """One page of search results"""

    data: list[Project]
    total: int
    page: int
    limit: int
