from datetime import datetime
from uuid import UUID
import logging

from fastapi import APIRouter, Depends, HTTPException, Security
from sqlalchemy.orm import Session

from smokefree.auth.service import get_current_user_id
from smokefree.core.database import get_db
from smokefree.core.dependency import get_now
from smokefree.quit_plans.schemas import (
    QuitDateUpdate,
    QuitPlanCreate,
    QuitPlanResponse,
    QuitPlanUpdate,
)
from smokefree.quit_plans.service import (
    build_response,
    create_quit_plan,
    get_quit_plan,
    update_quit_date,
    update_quit_plan,
)

router = APIRouter(prefix="/quit-plan", tags=["Quit Plan"])
logger = logging.getLogger(__name__)


@router.post(
    "",
    response_model=QuitPlanResponse,
    status_code=201,
    summary="Create the quit plan",
    description="Create the authenticated user's quit plan. A user has at most one plan.",
    responses={
        201: {"description": "Quit plan created."},
        400: {"description": "Quit date outside the allowed window."},
        401: {"description": "Unauthorized."},
        409: {"description": "Quit plan already exists."},
        500: {"description": "Failed to create quit plan."},
    },
)
def create_quit_plan_route(
    plan: QuitPlanCreate,
    db: Session = Depends(get_db),
    user_id: UUID = Security(get_current_user_id),
    now: datetime = Depends(get_now),
) -> QuitPlanResponse:
    try:
        return build_response(create_quit_plan(db, user_id, plan, now))
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to create quit plan for user {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to create quit plan")


@router.get(
    "",
    response_model=QuitPlanResponse,
    summary="Get the quit plan",
    description="Retrieve the quit plan together with projected savings.",
    responses={
        200: {"description": "Quit plan retrieved."},
        401: {"description": "Unauthorized."},
        404: {"description": "Quit plan not found."},
    },
)
def read_quit_plan_route(
    db: Session = Depends(get_db),
    user_id: UUID = Security(get_current_user_id),
) -> QuitPlanResponse:
    plan = get_quit_plan(db, user_id)
    if plan is None:
        raise HTTPException(status_code=404, detail="Quit plan not found")
    return build_response(plan)


@router.put(
    "",
    response_model=QuitPlanResponse,
    summary="Update the quit plan",
    description="Update any subset of the quit plan fields.",
    responses={
        200: {"description": "Quit plan updated."},
        400: {"description": "Quit date outside the allowed window."},
        401: {"description": "Unauthorized."},
        404: {"description": "Quit plan not found."},
        500: {"description": "Failed to update quit plan."},
    },
)
def update_quit_plan_route(
    plan: QuitPlanUpdate,
    db: Session = Depends(get_db),
    user_id: UUID = Security(get_current_user_id),
    now: datetime = Depends(get_now),
) -> QuitPlanResponse:
    try:
        return build_response(update_quit_plan(db, user_id, plan, now))
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to update quit plan for user {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to update quit plan")


@router.put(
    "/quit-date",
    response_model=QuitPlanResponse,
    summary="Move the quit date",
    responses={
        200: {"description": "Quit date updated."},
        400: {"description": "Quit date outside the allowed window."},
        401: {"description": "Unauthorized."},
        404: {"description": "Quit plan not found."},
        500: {"description": "Failed to update quit date."},
    },
)
def update_quit_date_route(
    body: QuitDateUpdate,
    db: Session = Depends(get_db),
    user_id: UUID = Security(get_current_user_id),
    now: datetime = Depends(get_now),
) -> QuitPlanResponse:
    try:
        plan = update_quit_date(db, user_id, body.quit_date, now)
        return build_response(plan)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to update quit date for user {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to update quit date")
