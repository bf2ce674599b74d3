"""
Activity service: persisting activities and rehydrating them.
"""
import logging
from typing import List

from sqlalchemy import func
from sqlalchemy.orm import Session

from activitybook.core.exceptions import ActivityNotFound, DuplicateActivity
from activitybook.core.keys import PrimaryKeyAllocator
from activitybook.domain.activity import Activity, Expense
from activitybook.domain.book import ActivityBook
from activitybook.models.activity import ActivityRecord, ActivityParticipantRecord
from activitybook.models.expense import ExpenseRecord

logger = logging.getLogger(__name__)


def create_activity(activity: Activity, db: Session) -> ActivityRecord:
    """Store a new activity, raising DuplicateActivity if its key is taken."""
    exists = db.query(ActivityRecord.id).filter(ActivityRecord.id == activity.primary_key).first()
    if exists:
        logger.warning(f"Refusing to overwrite stored activity {activity.primary_key}")
        raise DuplicateActivity(activity.primary_key)
    return save_activity(activity, db)


def save_activity(activity: Activity, db: Session) -> ActivityRecord:
    """Insert or overwrite the stored copy of an activity."""
    record = db.query(ActivityRecord).filter(ActivityRecord.id == activity.primary_key).first()
    if record is None:
        record = ActivityRecord(id=activity.primary_key, title=activity.title)
        db.add(record)
    else:
        record.title = activity.title
        # Replace children wholesale
        record.participants.clear()
        record.expenses.clear()
        db.flush()

    for position, participant_id in enumerate(activity.participants()):
        record.participants.append(ActivityParticipantRecord(
            participant_id=participant_id,
            position=position,
            joined_after=activity.joined_after(participant_id)
        ))

    for position, expense in enumerate(activity.expenses(), start=1):
        record.expenses.append(ExpenseRecord(
            position=position,
            payer_id=expense.payer,
            amount=expense.amount,
            is_deleted=expense.deleted
        ))

    db.commit()
    db.refresh(record)
    logger.debug(f"Saved activity {activity.primary_key}")
    return record


def to_activity(record: ActivityRecord) -> Activity:
    """
    Rebuild an Activity from its stored record.

    Invites and expenses are replayed in their original interleaving so late
    joiners keep a clean slate, then soft-delete flags are re-applied.
    """
    activity = Activity(record.title, primary_key=record.id)
    expenses = sorted(record.expenses, key=lambda e: e.position)
    participants = sorted(record.participants, key=lambda p: p.position)

    replayed = 0
    for participant in participants:
        while replayed < min(participant.joined_after, len(expenses)):
            activity.add_expense(Expense(expenses[replayed].payer_id, expenses[replayed].amount))
            replayed += 1
        activity.invite(participant.participant_id)
    for expense in expenses[replayed:]:
        activity.add_expense(Expense(expense.payer_id, expense.amount))

    activity.delete_expense(*[e.position for e in expenses if e.is_deleted])
    return activity


def load_activity(activity_id: int, db: Session) -> Activity:
    """Load one activity, raising ActivityNotFound if it is not stored."""
    record = db.query(ActivityRecord).filter(ActivityRecord.id == activity_id).first()
    if not record:
        raise ActivityNotFound(activity_id)
    return to_activity(record)


def list_activities(db: Session) -> List[Activity]:
    """All stored activities ordered by primary key."""
    records = db.query(ActivityRecord).order_by(ActivityRecord.id).all()
    return [to_activity(record) for record in records]


def load_activity_book(db: Session) -> ActivityBook:
    return ActivityBook(list_activities(db))


def delete_activity(activity_id: int, db: Session) -> None:
    record = db.query(ActivityRecord).filter(ActivityRecord.id == activity_id).first()
    if not record:
        raise ActivityNotFound(activity_id)
    db.delete(record)
    db.commit()
    logger.info(f"Deleted activity {activity_id}")


def restore_primary_key_counter(db: Session, allocator: PrimaryKeyAllocator) -> int:
    """
    Move the allocator past every stored activity key.

    The counter is never lowered. Returns the allocator's new current key.
    """
    highest = db.query(func.max(ActivityRecord.id)).scalar()
    if highest is not None and highest + 1 > allocator.current():
        allocator.set(highest + 1)
        logger.info(f"Restored activity primary key counter to {highest + 1}")
    return allocator.current()
