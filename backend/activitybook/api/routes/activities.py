"""
Activity management routes.
"""
import logging
from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session
from typing import List
from activitybook.core.exceptions import ActivityNotFound, DuplicateActivity, PayerNotParticipant
from activitybook.core.keys import PrimaryKeyAllocator
from activitybook.db.session import get_db, get_primary_keys
from activitybook.domain.activity import Activity, Expense
from activitybook.schemas.activity import (
    ActivityCreate, ActivityResponse, ActivityDetailResponse,
    ParticipantInvite, InviteResponse
)
from activitybook.schemas.expense import (
    ExpenseBatchCreate, ExpenseDelete, ExpenseDeleteResponse, ExpenseResponse
)
from activitybook.services import activity_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/activities", tags=["activities"])


def get_activity_or_404(activity_id: int, db: Session) -> Activity:
    """Load an activity or raise 404."""
    try:
        return activity_service.load_activity(activity_id, db)
    except ActivityNotFound:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Activity not found"
        )


def to_response(activity: Activity) -> ActivityResponse:
    return ActivityResponse(
        id=activity.primary_key,
        title=activity.title,
        status=activity.status,
        participant_ids=list(activity.participants())
    )


def to_detail_response(activity: Activity) -> ActivityDetailResponse:
    expenses = [
        ExpenseResponse(
            position=position,
            payer_id=expense.payer,
            amount=expense.amount,
            deleted=expense.deleted
        )
        for position, expense in enumerate(activity.expenses(), start=1)
    ]
    return ActivityDetailResponse(
        **to_response(activity).model_dump(),
        expenses=expenses,
        total_spent=activity.total_spent()
    )


@router.post("", response_model=ActivityResponse, status_code=status.HTTP_201_CREATED)
async def create_activity(
    activity_data: ActivityCreate,
    db: Session = Depends(get_db),
    primary_keys: PrimaryKeyAllocator = Depends(get_primary_keys)
):
    """Create a new activity."""
    activity = Activity(activity_data.title, *activity_data.participant_ids, allocator=primary_keys)
    try:
        activity_service.create_activity(activity, db)
    except DuplicateActivity:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="An activity with this id already exists"
        )
    logger.info(f"Created activity {activity.primary_key} ({activity.title})")
    return to_response(activity)


@router.get("", response_model=List[ActivityResponse])
async def list_activities(db: Session = Depends(get_db)):
    """List all activities."""
    return [to_response(a) for a in activity_service.list_activities(db)]


@router.get("/by-participant/{participant_id}", response_model=List[ActivityResponse])
async def list_activities_for_participant(participant_id: int, db: Session = Depends(get_db)):
    """List activities a participant takes part in."""
    book = activity_service.load_activity_book(db)
    return [to_response(a) for a in book.find_by_participant(participant_id)]


@router.get("/{activity_id}", response_model=ActivityDetailResponse)
async def get_activity(activity_id: int, db: Session = Depends(get_db)):
    """Get activity details."""
    return to_detail_response(get_activity_or_404(activity_id, db))


@router.delete("/{activity_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_activity(activity_id: int, db: Session = Depends(get_db)):
    """Delete an activity."""
    try:
        activity_service.delete_activity(activity_id, db)
    except ActivityNotFound:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Activity not found"
        )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{activity_id}/participants", response_model=InviteResponse)
async def invite_participants(
    activity_id: int,
    invite: ParticipantInvite,
    db: Session = Depends(get_db)
):
    """Invite participants to the activity."""
    activity = get_activity_or_404(activity_id, db)
    added = activity.invite(*invite.participant_ids)
    if added:
        activity_service.save_activity(activity, db)
    return InviteResponse(added=added, participant_ids=list(activity.participants()))


@router.post(
    "/{activity_id}/expenses",
    response_model=ActivityDetailResponse,
    status_code=status.HTTP_201_CREATED
)
async def add_expenses(
    activity_id: int,
    batch: ExpenseBatchCreate,
    db: Session = Depends(get_db)
):
    """Add a batch of expenses. Nothing is recorded if any payer is not participating."""
    activity = get_activity_or_404(activity_id, db)
    try:
        activity.add_expense(*[Expense(e.payer_id, e.amount) for e in batch.expenses])
    except PayerNotParticipant as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Payer(s) not participating in this activity: {list(e.payer_ids)}"
        )
    activity_service.save_activity(activity, db)
    return to_detail_response(activity)


@router.post("/{activity_id}/expenses/delete", response_model=ExpenseDeleteResponse)
async def delete_expenses(
    activity_id: int,
    deletion: ExpenseDelete,
    db: Session = Depends(get_db)
):
    """Soft-delete expenses by 1-based position."""
    activity = get_activity_or_404(activity_id, db)
    deleted = activity.delete_expense(*deletion.positions)
    if deleted:
        activity_service.save_activity(activity, db)
    return ExpenseDeleteResponse(deleted=deleted)
