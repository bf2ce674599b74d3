"""
Settlement routes.
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from activitybook.core.exceptions import SettlementOverflow
from activitybook.db.session import get_db
from activitybook.schemas.settlement import SettlementSummary
from activitybook.services.settlement_service import build_settlement_summary
from activitybook.api.routes.activities import get_activity_or_404

router = APIRouter(prefix="/activities", tags=["settlement"])


@router.get("/{activity_id}/settlement", response_model=SettlementSummary)
async def get_settlement(activity_id: int, db: Session = Depends(get_db)):
    """Settle an activity and return balances and transfers."""
    activity = get_activity_or_404(activity_id, db)
    try:
        calculation_data = build_settlement_summary(activity)
    except SettlementOverflow:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Activity debts are too large to settle"
        )
    return SettlementSummary(activity_id=activity.primary_key, **calculation_data)
