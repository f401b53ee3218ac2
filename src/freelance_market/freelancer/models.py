"""
Freelancer profile model

The profile's rating feeds bid ranking; the remaining fields are shown to
clients reviewing bids.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field, field_validator


class AvailabilityStatus(str, Enum):
    AVAILABLE = "AVAILABLE"
    BUSY = "BUSY"
    UNAVAILABLE = "UNAVAILABLE"


class Freelancer(BaseModel):
    """Freelancer profile"""

    freelancer_id: str = Field(..., description="Same id the freelancer bids with")
    display_name: str = Field(..., description="Public name")
    hourly_rate: Decimal | None = Field(default=None, gt=0, description="Advertised hourly rate")
    availability_status: AvailabilityStatus = Field(default=AvailabilityStatus.AVAILABLE)
    portfolio_url: str | None = Field(default=None)
    rating: float = Field(default=0.0, ge=0.0, le=5.0, description="Average client rating")
    completed_projects_count: int = Field(default=0, ge=0)
    on_time_delivery_rate: float = Field(default=0.0, ge=0.0, le=1.0)
    created_at: datetime
    updated_at: datetime

    @field_validator("display_name")
    @classmethod
    def validate_display_name(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Display name cannot be empty")
        return v.strip()
