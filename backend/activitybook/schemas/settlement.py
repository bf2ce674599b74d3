"""
Pydantic schemas for Settlement entity.
"""
from pydantic import BaseModel
from typing import List, Dict


class Transfer(BaseModel):
    """Schema for a single transfer in settlement."""
    from_participant_id: int
    to_participant_id: int
    amount: float


class SettlementSummary(BaseModel):
    """Schema for settlement summary."""
    activity_id: int
    net_balances: Dict[int, float]  # participant id -> net balance (positive = owes)
    transfers: List[Transfer]
    transfer_matrix: List[List[float]]  # [i][j] < 0 means i pays j
    total_spent: float
    participant_count: int
    summary: str
