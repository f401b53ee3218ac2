"""
Bid Domain Models

A bid is a freelancer's proposal against an OPEN project. Its status only
moves PENDING → ACCEPTED or PENDING → REJECTED.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class BidStatus(str, Enum):
    """
    Bid lifecycle states

    PENDING → ACCEPTED | REJECTED (both terminal)
    WITHDRAWN is recognised in stored data but no operation produces it.
    """

    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"
    WITHDRAWN = "WITHDRAWN"


class Bid(BaseModel):
    """Bid record"""

    bid_id: str = Field(..., description="Unique bid identifier")
    project_id: str = Field(..., description="Project bid on")
    freelancer_id: str = Field(..., description="Submitting freelancer")
    proposed_rate: Decimal = Field(..., gt=0, description="Proposed rate (positive)")
    estimated_duration_days: int = Field(..., ge=1, description="Estimated duration in days")
    cover_letter: str = Field(..., description="Pitch to the client")
    status: BidStatus = Field(default=BidStatus.PENDING)
    created_at: datetime
    updated_at: datetime

    @field_validator("cover_letter")
    @classmethod
    def validate_cover_letter(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Cover letter cannot be empty")
        return v


class BidView(BaseModel):
    """
    Bid paired with the rating of the freelancer who placed it

    The unit the ranking strategies order.
    """

    model_config = ConfigDict(frozen=True)

    bid: Bid
    freelancer_rating: float = Field(default=0.0, ge=0.0)

    @property
    def proposed_rate(self) -> Decimal:
        return self.bid.proposed_rate
