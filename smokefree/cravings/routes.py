from datetime import datetime
from uuid import UUID
from typing import List
import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Security
from sqlalchemy.orm import Session

from smokefree.auth.service import get_current_user_id
from smokefree.core.database import get_db
from smokefree.core.dependency import get_now
from smokefree.cravings.schemas import (
    CravingAnalytics,
    CravingBase,
    CravingCreate,
    CravingUpdate,
    TriggerCount,
)
from smokefree.cravings.service import (
    create_craving,
    get_craving,
    get_craving_analytics,
    get_trigger_summary,
    list_cravings,
    update_craving,
)

router = APIRouter(prefix="/cravings", tags=["Cravings"])
logger = logging.getLogger(__name__)


@router.post(
    "",
    response_model=CravingBase,
    status_code=201,
    summary="Log a craving",
    responses={
        201: {"description": "Craving logged."},
        401: {"description": "Unauthorized."},
        500: {"description": "Failed to log craving."},
    },
)
def create_craving_route(
    craving: CravingCreate,
    db: Session = Depends(get_db),
    user_id: UUID = Security(get_current_user_id),
    now: datetime = Depends(get_now),
) -> CravingBase:
    try:
        return create_craving(db, user_id, craving, now)
    except Exception as e:
        logger.error(f"Failed to log craving for user {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to log craving")


@router.get(
    "",
    response_model=List[CravingBase],
    summary="Get craving history",
    description="Retrieve the user's cravings, newest first. Supports pagination.",
    responses={
        200: {"description": "Cravings retrieved."},
        401: {"description": "Unauthorized."},
        500: {"description": "Failed to retrieve cravings."},
    },
)
def read_cravings_route(
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
    user_id: UUID = Security(get_current_user_id),
) -> List[CravingBase]:
    try:
        return list_cravings(db, user_id, limit, offset)
    except Exception as e:
        logger.error(f"Failed to fetch cravings for user {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to retrieve cravings")


@router.get(
    "/analytics",
    response_model=CravingAnalytics,
    summary="Craving analytics",
    description="Totals, average intensity, top triggers and daily counts over the last `days` days.",
    responses={
        200: {"description": "Analytics computed."},
        401: {"description": "Unauthorized."},
        500: {"description": "Failed to compute analytics."},
    },
)
def craving_analytics_route(
    days: int = Query(30, ge=1, le=365),
    db: Session = Depends(get_db),
    user_id: UUID = Security(get_current_user_id),
    now: datetime = Depends(get_now),
) -> CravingAnalytics:
    try:
        return get_craving_analytics(db, user_id, days, now)
    except Exception as e:
        logger.error(f"Failed to compute craving analytics for user {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to compute analytics")


@router.get(
    "/triggers",
    response_model=List[TriggerCount],
    summary="Trigger summary",
    responses={
        200: {"description": "Trigger counts retrieved."},
        401: {"description": "Unauthorized."},
    },
)
def trigger_summary_route(
    db: Session = Depends(get_db),
    user_id: UUID = Security(get_current_user_id),
) -> List[TriggerCount]:
    try:
        return get_trigger_summary(db, user_id)
    except Exception as e:
        logger.error(f"Failed to summarize triggers for user {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to summarize triggers")


@router.get(
    "/{craving_id}",
    response_model=CravingBase,
    summary="Get a craving by ID",
    responses={
        200: {"description": "Craving retrieved."},
        401: {"description": "Unauthorized."},
        404: {"description": "Craving not found."},
    },
)
def read_craving_route(
    craving_id: UUID,
    db: Session = Depends(get_db),
    user_id: UUID = Security(get_current_user_id),
) -> CravingBase:
    craving = get_craving(db, user_id, craving_id)
    if craving is None:
        raise HTTPException(status_code=404, detail="Craving not found")
    return craving


@router.put(
    "/{craving_id}",
    response_model=CravingBase,
    summary="Update a craving",
    description="Mark a craving resolved or record its duration and relief techniques.",
    responses={
        200: {"description": "Craving updated."},
        401: {"description": "Unauthorized."},
        404: {"description": "Craving not found."},
        500: {"description": "Failed to update craving."},
    },
)
def update_craving_route(
    craving_id: UUID,
    craving: CravingUpdate,
    db: Session = Depends(get_db),
    user_id: UUID = Security(get_current_user_id),
) -> CravingBase:
    try:
        updated = update_craving(db, user_id, craving_id, craving)
        if updated is None:
            raise HTTPException(status_code=404, detail="Craving not found")
        return updated
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to update craving {craving_id} for user {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to update craving")
