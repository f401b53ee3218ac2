"""
Time Entry Domain Models

Hours a freelancer logs against an engaged project, optionally tied to a
milestone. Hours are Decimal so billing never drifts.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field, field_validator


class TimeEntry(BaseModel):
    """Logged work record"""

    entry_id: str = Field(..., description="Unique entry identifier")
    project_id: str
    freelancer_id: str
    milestone_id: str | None = None
    hours: Decimal = Field(..., gt=0, description="Hours worked")
    description: str
    date: datetime = Field(..., description="Day the work was performed")
    created_at: datetime
    updated_at: datetime

    @field_validator("description")
    @classmethod
    def validate_description(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Description cannot be empty")
        return v


class BillingSummary(BaseModel):
    """
    Hours and amount owed for a project

    amount is None until a bid has been accepted and agreed_rate is known.
    """

    project_id: str
    entry_count: int = Field(..., ge=0)
    total_hours: Decimal = Field(..., ge=0)
    agreed_rate: Decimal | None = None
    amount: Decimal | None = None
