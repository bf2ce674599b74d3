"""
Expense model for the activity expense log.
"""
from sqlalchemy import Column, Float, Boolean, ForeignKey, Integer
from sqlalchemy.orm import relationship
from activitybook.db.base import BaseModel


class ExpenseRecord(BaseModel):
    """One entry of an activity's expense log."""
    __tablename__ = "activity_expenses"
    
    activity_id = Column(Integer, ForeignKey("activities.id"), nullable=False, index=True)
    position = Column(Integer, nullable=False)  # 1-based position in the log
    payer_id = Column(Integer, nullable=False, index=True)
    amount = Column(Float(precision=53), nullable=False)  # Double precision on every backend
    is_deleted = Column(Boolean, default=False, nullable=False)
    
    # Relationships
    activity = relationship("ActivityRecord", back_populates="expenses")
