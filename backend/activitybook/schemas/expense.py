"""
Pydantic schemas for Expense entity.
"""
from pydantic import BaseModel, Field
from typing import List
from activitybook.core.config import settings


class ExpenseCreate(BaseModel):
    """Schema for expense creation."""
    payer_id: int
    amount: float = Field(gt=0, le=settings.MAX_EXPENSE_AMOUNT, allow_inf_nan=False)


class ExpenseBatchCreate(BaseModel):
    """Schema for adding several expenses at once."""
    expenses: List[ExpenseCreate] = Field(min_length=1)


class ExpenseDelete(BaseModel):
    """Schema for soft-deleting expenses by 1-based position."""
    positions: List[int] = Field(min_length=1)


class ExpenseDeleteResponse(BaseModel):
    """Schema for soft-delete result."""
    deleted: List[int]  # Positions that were in range


class ExpenseResponse(BaseModel):
    """Schema for expense response."""
    position: int
    payer_id: int
    amount: float
    deleted: bool
