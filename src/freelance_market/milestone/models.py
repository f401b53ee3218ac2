"""
Milestone Domain Models

Milestones split an engaged project into payable, ordered steps.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field, field_validator


class MilestoneStatus(str, Enum):
    """Milestone progress; any status may be set directly"""

    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"


class Milestone(BaseModel):
    """Milestone record"""

    milestone_id: str = Field(..., description="Unique milestone identifier")
    project_id: str = Field(..., description="Project the milestone belongs to")
    title: str
    description: str | None = None
    amount: Decimal = Field(..., gt=0, description="Amount paid on completion")
    order: int = Field(..., ge=0, description="Position within the project")
    due_date: datetime = Field(..., description="Copied from the project deadline")
    status: MilestoneStatus = Field(default=MilestoneStatus.PENDING)
    created_at: datetime
    updated_at: datetime

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Milestone title cannot be empty")
        return v
