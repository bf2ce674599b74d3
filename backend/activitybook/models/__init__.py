"""Models package - Import all models for SQLAlchemy registration."""
from activitybook.models.activity import ActivityRecord, ActivityParticipantRecord
from activitybook.models.expense import ExpenseRecord

__all__ = [
    "ActivityRecord",
    "ActivityParticipantRecord",
    "ExpenseRecord",
]
