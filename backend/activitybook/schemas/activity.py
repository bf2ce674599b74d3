"""
Pydantic schemas for Activity entity.
"""
from pydantic import BaseModel, Field
from typing import List
from activitybook.domain.activity import ActivityStatus
from activitybook.schemas.expense import ExpenseResponse


class ActivityCreate(BaseModel):
    """Schema for activity creation."""
    title: str = Field(min_length=1, max_length=200)
    participant_ids: List[int] = []


class ParticipantInvite(BaseModel):
    """Schema for participant invitation."""
    participant_ids: List[int] = Field(min_length=1)


class InviteResponse(BaseModel):
    """Schema for invitation result."""
    added: List[int]  # Ids that were not already participating
    participant_ids: List[int]


class ActivityResponse(BaseModel):
    """Schema for activity response."""
    id: int
    title: str
    status: ActivityStatus
    participant_ids: List[int]


class ActivityDetailResponse(ActivityResponse):
    """Schema for detailed activity response with expenses."""
    expenses: List[ExpenseResponse] = []
    total_spent: float
