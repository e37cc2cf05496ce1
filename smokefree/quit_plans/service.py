"""
Quit plan rules: the quit-date window, one plan per user, and projected savings.
"""

import logging
from datetime import datetime, timedelta
from typing import Optional
from uuid import UUID

from fastapi import HTTPException
from sqlalchemy.orm import Session

from smokefree.core.config import (
    DEFAULT_CIGARETTES_PER_PACK,
    QUIT_DATE_MAX_FUTURE_DAYS,
    QUIT_DATE_PAST_GRACE_HOURS,
)
from smokefree.core.dependency import to_utc_naive
from smokefree.quit_plans import db as quit_plan_db
from smokefree.quit_plans.models import QuitPlan
from smokefree.quit_plans.schemas import (
    QuitPlanBase,
    QuitPlanCreate,
    QuitPlanResponse,
    QuitPlanUpdate,
    Savings,
)
from smokefree.statistics.service import round_currency

logger = logging.getLogger(__name__)


def validate_quit_date(quit_date: datetime, now: datetime) -> datetime:
    """
    Checks a requested quit date against the planning window and returns it as naive UTC.

    The window is only enforced at write time; a stored plan may age past it.

    Raises:
        HTTPException: 400 when the date is too far ahead or too far back.
    """
    quit_date = to_utc_naive(quit_date)
    if quit_date > now + timedelta(days=QUIT_DATE_MAX_FUTURE_DAYS):
        raise HTTPException(
            status_code=400,
            detail=f"Quit date must be within the next {QUIT_DATE_MAX_FUTURE_DAYS} days",
        )
    if quit_date < now - timedelta(hours=QUIT_DATE_PAST_GRACE_HOURS):
        raise HTTPException(status_code=400, detail="Quit date cannot be in the past")
    return quit_date


def calculate_savings(plan: QuitPlan) -> Savings:
    """Projected savings per day, week, 30-day month and 365-day year."""
    packs_per_day = plan.cigarettes_per_day / plan.cigarettes_per_pack
    daily = packs_per_day * plan.cost_per_pack
    return Savings(
        daily=round_currency(daily),
        weekly=round_currency(daily * 7),
        monthly=round_currency(daily * 30),
        yearly=round_currency(daily * 365),
    )


def build_response(plan: QuitPlan) -> QuitPlanResponse:
    return QuitPlanResponse(
        quit_plan=QuitPlanBase.model_validate(plan),
        savings=calculate_savings(plan),
    )


def get_quit_plan(db: Session, user_id: UUID) -> Optional[QuitPlan]:
    return quit_plan_db.get_quit_plan(db, user_id)


def create_quit_plan(db: Session, user_id: UUID, data: QuitPlanCreate, now: datetime) -> QuitPlan:
    """
    Creates the user's quit plan.

    Raises:
        HTTPException: 409 if the user already has a plan, 400 for an invalid quit date.
    """
    if quit_plan_db.get_quit_plan(db, user_id) is not None:
        raise HTTPException(status_code=409, detail="Quit plan already exists. Use PUT to update.")

    values = data.model_dump()
    values["quit_date"] = validate_quit_date(data.quit_date, now)
    if values.get("cigarettes_per_pack") is None:
        values["cigarettes_per_pack"] = DEFAULT_CIGARETTES_PER_PACK

    plan = quit_plan_db.create_quit_plan(db, user_id, values, now)
    logger.info("Quit plan created for user %s (quit date %s)", user_id, plan.quit_date.isoformat())
    return plan


def update_quit_plan(db: Session, user_id: UUID, data: QuitPlanUpdate, now: datetime) -> QuitPlan:
    """
    Applies a partial update. An empty update returns the current plan unchanged.

    Raises:
        HTTPException: 404 when the user has no plan, 400 for an invalid quit date.
    """
    update_data = {k: v for k, v in data.model_dump(exclude_unset=True).items() if v is not None}
    if "quit_date" in update_data:
        update_data["quit_date"] = validate_quit_date(update_data["quit_date"], now)

    if not update_data:
        plan = quit_plan_db.get_quit_plan(db, user_id)
    else:
        plan = quit_plan_db.update_quit_plan(db, user_id, update_data, now)
    if plan is None:
        raise HTTPException(status_code=404, detail="Quit plan not found")

    if update_data:
        logger.info("Quit plan updated for user %s (%s)", user_id, ", ".join(sorted(update_data)))
    return plan


def update_quit_date(db: Session, user_id: UUID, quit_date: datetime, now: datetime) -> QuitPlan:
    return update_quit_plan(db, user_id, QuitPlanUpdate(quit_date=quit_date), now)
