from datetime import datetime
from uuid import UUID
from typing import List
import logging

from fastapi import APIRouter, Depends, HTTPException, Security
from sqlalchemy.orm import Session

from smokefree.auth.service import get_current_user_id
from smokefree.core.database import get_db
from smokefree.core.dependency import get_now
from smokefree.milestones.schemas import BestStreak, MilestoneBase, MilestoneProgress, UserMilestoneBase
from smokefree.milestones.service import (
    check_and_unlock_milestones,
    get_best_streak,
    get_milestone_progress,
    get_unlocked_milestones,
    list_catalog,
    share_milestone,
)

router = APIRouter(prefix="/progress", tags=["Milestones"])
logger = logging.getLogger(__name__)


@router.get(
    "/milestones",
    response_model=List[MilestoneProgress],
    summary="Get milestone progress",
    description=(
        "Unlocks every milestone whose threshold has been crossed, then returns the progress "
        "of each catalog milestone. Empty when the user has no quit plan yet."
    ),
    responses={
        200: {"description": "Milestone progress computed."},
        401: {"description": "Unauthorized."},
        500: {"description": "Failed to compute milestone progress."},
    },
)
def read_milestones_route(
    db: Session = Depends(get_db),
    user_id: UUID = Security(get_current_user_id),
    now: datetime = Depends(get_now),
) -> List[MilestoneProgress]:
    try:
        check_and_unlock_milestones(db, user_id, now)
        return get_milestone_progress(db, user_id, now)
    except Exception as e:
        logger.error(f"Failed to compute milestones for user {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to compute milestone progress")


@router.get(
    "/milestones/catalog",
    response_model=List[MilestoneBase],
    summary="List all milestones",
    responses={
        200: {"description": "Catalog retrieved."},
        401: {"description": "Unauthorized."},
    },
)
def read_catalog_route(
    db: Session = Depends(get_db),
    user_id: UUID = Security(get_current_user_id),
) -> List[MilestoneBase]:
    return list_catalog(db)


@router.get(
    "/milestones/unlocked",
    response_model=List[UserMilestoneBase],
    summary="Get unlocked milestones",
    description="Milestones the user has unlocked, most recent first.",
    responses={
        200: {"description": "Unlocked milestones retrieved."},
        401: {"description": "Unauthorized."},
        500: {"description": "Failed to retrieve unlocked milestones."},
    },
)
def read_unlocked_milestones_route(
    db: Session = Depends(get_db),
    user_id: UUID = Security(get_current_user_id),
) -> List[UserMilestoneBase]:
    try:
        return get_unlocked_milestones(db, user_id)
    except Exception as e:
        logger.error(f"Failed to fetch unlocked milestones for user {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to retrieve unlocked milestones")


@router.post(
    "/milestones/{milestone_id}/share",
    summary="Share an unlocked milestone",
    responses={
        200: {"description": "Milestone marked as shared."},
        401: {"description": "Unauthorized."},
        404: {"description": "Milestone not found or not unlocked."},
    },
)
def share_milestone_route(
    milestone_id: UUID,
    db: Session = Depends(get_db),
    user_id: UUID = Security(get_current_user_id),
):
    if not share_milestone(db, user_id, milestone_id):
        raise HTTPException(status_code=404, detail="Milestone not found or not unlocked")
    return {"message": "Milestone shared successfully"}


@router.get(
    "/streak",
    response_model=BestStreak,
    summary="Get best streak",
    description="Best smoke-free streak in days. Zero when there is no quit plan.",
    responses={
        200: {"description": "Streak computed."},
        401: {"description": "Unauthorized."},
    },
)
def read_best_streak_route(
    db: Session = Depends(get_db),
    user_id: UUID = Security(get_current_user_id),
    now: datetime = Depends(get_now),
) -> BestStreak:
    return BestStreak(best_streak=get_best_streak(db, user_id, now))
