from datetime import datetime
from uuid import UUID
import logging

from fastapi import APIRouter, Depends, HTTPException, Security
from sqlalchemy.orm import Session

from smokefree.auth.service import get_current_user_id
from smokefree.core.database import get_db
from smokefree.core.dependency import get_now
from smokefree.statistics.schemas import SmokeFreeTimer, UserStatistics
from smokefree.statistics.service import get_smoke_free_timer, get_user_statistics

router = APIRouter(prefix="/progress", tags=["Statistics"])
logger = logging.getLogger(__name__)

NO_PLAN_DETAIL = "No quit plan found. Please create a quit plan first."


@router.get(
    "/stats",
    response_model=UserStatistics,
    summary="Get progress statistics",
    description="Smoke-free time, money saved, cigarettes not smoked, life regained and streak.",
    responses={
        200: {"description": "Statistics computed."},
        401: {"description": "Unauthorized."},
        404: {"description": "No quit plan yet."},
        500: {"description": "Failed to compute statistics."},
    },
)
def read_statistics_route(
    db: Session = Depends(get_db),
    user_id: UUID = Security(get_current_user_id),
    now: datetime = Depends(get_now),
) -> UserStatistics:
    try:
        stats = get_user_statistics(db, user_id, now)
    except Exception as e:
        logger.error(f"Failed to compute statistics for user {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to compute statistics")
    if stats is None:
        raise HTTPException(status_code=404, detail=NO_PLAN_DETAIL)
    return stats


@router.get(
    "/timer",
    response_model=SmokeFreeTimer,
    summary="Get the smoke-free timer",
    responses={
        200: {"description": "Timer computed."},
        401: {"description": "Unauthorized."},
        404: {"description": "No quit plan yet."},
    },
)
def read_timer_route(
    db: Session = Depends(get_db),
    user_id: UUID = Security(get_current_user_id),
    now: datetime = Depends(get_now),
) -> SmokeFreeTimer:
    timer = get_smoke_free_timer(db, user_id, now)
    if timer is None:
        raise HTTPException(status_code=404, detail=NO_PLAN_DETAIL)
    return SmokeFreeTimer(smoke_free_time=timer, timestamp=now)
