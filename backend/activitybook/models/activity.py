"""
Activity models for persisting activities and their participants.
"""
from sqlalchemy import Column, String, ForeignKey, Integer
from sqlalchemy.orm import relationship
from activitybook.db.base import BaseModel


class ActivityRecord(BaseModel):
    """Stored activity. The id is the activity's own primary key."""
    __tablename__ = "activities"
    
    id = Column(Integer, primary_key=True, index=True, autoincrement=False)
    title = Column(String(200), nullable=False)
    
    # Relationships
    participants = relationship(
        "ActivityParticipantRecord",
        back_populates="activity",
        cascade="all, delete-orphan",
        order_by="ActivityParticipantRecord.position"
    )
    expenses = relationship(
        "ExpenseRecord",
        back_populates="activity",
        cascade="all, delete-orphan",
        order_by="ExpenseRecord.position"
    )


class ActivityParticipantRecord(BaseModel):
    """Participant of an activity, in invitation order."""
    __tablename__ = "activity_participants"
    
    activity_id = Column(Integer, ForeignKey("activities.id"), nullable=False, index=True)
    participant_id = Column(Integer, nullable=False, index=True)
    position = Column(Integer, nullable=False)
    joined_after = Column(Integer, nullable=False, default=0)  # Expenses recorded before joining
    
    # Relationships
    activity = relationship("ActivityRecord", back_populates="participants")
