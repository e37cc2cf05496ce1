"""
Statistics engine.

Pure functions that turn a quit date, the user's former smoking habit and an
explicit `now` into derived metrics: smoke-free time, money saved, cigarettes
not smoked and life regained. Nothing here reads the clock; the loaders at the
bottom fetch the quit plan and delegate to the pure functions.
"""

import logging
import math
from datetime import datetime, timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional
from uuid import UUID

from sqlalchemy.orm import Session

from smokefree.core.config import LIFE_MINUTES_PER_CIGARETTE
from smokefree.quit_plans import db as quit_plan_db
from smokefree.quit_plans.models import QuitPlan
from smokefree.statistics.schemas import LifeRegained, SmokeFreeDuration, UserStatistics

logger = logging.getLogger(__name__)

_CENT = Decimal("0.01")


def round_currency(amount: float) -> float:
    """Rounds to cents, half away from zero, on the decimal representation of `amount`."""
    return float(Decimal(str(amount)).quantize(_CENT, rounding=ROUND_HALF_UP))


def calculate_smoke_free_duration(quit_date: datetime, now: datetime) -> SmokeFreeDuration:
    """
    Elapsed time since the quit date, decomposed into days/hours/minutes/seconds.

    A quit date in the future yields an all-zero duration. Sub-second time is
    truncated, so days*86400 + hours*3600 + minutes*60 + seconds == total_seconds.
    """
    if quit_date > now:
        return SmokeFreeDuration()

    total_seconds = (now - quit_date) // timedelta(seconds=1)
    total_minutes = total_seconds // 60
    total_hours = total_minutes // 60
    total_days = total_hours // 24

    return SmokeFreeDuration(
        days=total_days,
        hours=total_hours % 24,
        minutes=total_minutes % 60,
        seconds=total_seconds % 60,
        total_seconds=total_seconds,
        total_minutes=total_minutes,
        total_hours=total_hours,
        total_days=total_days,
    )


def effective_days(duration: SmokeFreeDuration) -> float:
    """Whole days plus proportional credit for the hours of the current day."""
    return duration.total_days + duration.hours / 24


def calculate_money_saved(
    cigarettes_per_day: int,
    cost_per_pack: float,
    cigarettes_per_pack: int,
    duration: SmokeFreeDuration,
) -> float:
    cost_per_day = (cigarettes_per_day / cigarettes_per_pack) * cost_per_pack
    return round_currency(cost_per_day * effective_days(duration))


def calculate_cigarettes_not_smoked(cigarettes_per_day: int, duration: SmokeFreeDuration) -> int:
    return math.floor(cigarettes_per_day * effective_days(duration))


def calculate_life_regained(cigarettes_not_smoked: int) -> LifeRegained:
    total_minutes = cigarettes_not_smoked * LIFE_MINUTES_PER_CIGARETTE
    hours = total_minutes // 60
    return LifeRegained(minutes=total_minutes, hours=hours, days=hours // 24)


def build_statistics(plan: QuitPlan, now: datetime) -> UserStatistics:
    """Composes every metric for one quit plan at instant `now`."""
    duration = calculate_smoke_free_duration(plan.quit_date, now)
    money_saved = calculate_money_saved(
        plan.cigarettes_per_day,
        plan.cost_per_pack,
        plan.cigarettes_per_pack,
        duration,
    )
    cigarettes = calculate_cigarettes_not_smoked(plan.cigarettes_per_day, duration)

    return UserStatistics(
        smoke_free_time=duration,
        money_saved=money_saved,
        cigarettes_not_smoked=cigarettes,
        life_regained=calculate_life_regained(cigarettes),
        # No relapse model yet: the streak is the time since the quit date
        current_streak=duration.total_days,
        quit_date=plan.quit_date,
    )


def get_user_statistics(db: Session, user_id: UUID, now: datetime) -> Optional[UserStatistics]:
    """
    Statistics for the user's quit plan, or None when the user has no plan.

    None is not the same as zero statistics: callers report it as "not found".
    """
    plan = quit_plan_db.get_quit_plan(db, user_id)
    if plan is None:
        return None

    stats = build_statistics(plan, now)
    logger.debug(
        "Statistics calculated for user %s: %s days, %.2f saved",
        user_id, stats.smoke_free_time.total_days, stats.money_saved,
    )
    return stats


def get_smoke_free_timer(db: Session, user_id: UUID, now: datetime) -> Optional[SmokeFreeDuration]:
    plan = quit_plan_db.get_quit_plan(db, user_id)
    if plan is None:
        return None
    return calculate_smoke_free_duration(plan.quit_date, now)
