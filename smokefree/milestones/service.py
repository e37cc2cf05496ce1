"""
Milestone progress engine.

Projects every catalog milestone onto a user's quit plan and craving history
as a 0-100 progress score, and records unlocks exactly once per
(user, milestone). Progress is recomputed on every read; the only persisted
state is the unlock record.

Time and health milestones are measured in hours since the quit date.
Achievement milestones count resolved cravings and savings milestones count
money saved. Their threshold comes from `threshold_value`; catalog rows
without one fall back to the number embedded in the milestone name
("10 Cravings Overcome", "$500 Saved").
"""

import logging
import math
import re
from datetime import datetime, timedelta
from typing import List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from smokefree.cravings import db as craving_db
from smokefree.milestones import db as milestone_db
from smokefree.milestones.models import Milestone, UserMilestone
from smokefree.milestones.schemas import MilestoneBase, MilestoneProgress, TimeRemaining
from smokefree.quit_plans import db as quit_plan_db
from smokefree.statistics.service import build_statistics

logger = logging.getLogger(__name__)

TIMED_CATEGORIES = ("time", "health")

_CRAVING_COUNT_IN_NAME = re.compile(r"(\d+)\s+Cravings?\b", re.IGNORECASE)
_DOLLARS_IN_NAME = re.compile(r"\$\s*(\d+(?:\.\d+)?)")


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def resolve_threshold(milestone: Milestone) -> Optional[float]:
    """
    Threshold for an achievement or savings milestone.

    Prefers the explicit `threshold_value`; otherwise parses the display name.
    Returns None when neither yields a threshold, which keeps the milestone at 0%.
    """
    if milestone.threshold_value is not None:
        return milestone.threshold_value

    name = milestone.name or ""
    if milestone.category == "achievement":
        if "first craving" in name.lower():
            return 1
        match = _CRAVING_COUNT_IN_NAME.search(name)
        return float(match.group(1)) if match else None
    if milestone.category == "savings":
        match = _DOLLARS_IN_NAME.search(name)
        return float(match.group(1)) if match else None
    return None


def _ratio_percent(value: float, threshold: Optional[float]) -> float:
    if not threshold or threshold <= 0:
        return 0.0
    return min(100.0, value / threshold * 100)


def compute_progress(
    milestone: Milestone,
    *,
    hours_since_quit: float,
    resolved_cravings: int,
    money_saved: float,
    unlocked_at: Optional[datetime] = None,
) -> MilestoneProgress:
    """
    Progress of a single milestone.

    `hours_since_quit` is signed: negative while the quit date is still ahead.
    A zero-duration timed milestone completes as soon as the quit date is reached.
    """
    unlocked = unlocked_at is not None
    percent = 0.0
    time_remaining = None

    if milestone.category in TIMED_CATEGORIES:
        elapsed = max(0.0, hours_since_quit)
        duration = milestone.duration_hours or 0
        if duration > 0:
            percent = min(100.0, elapsed / duration * 100)
            if not unlocked and elapsed < duration:
                hours_remaining = duration - elapsed
                time_remaining = TimeRemaining(
                    hours=math.ceil(hours_remaining),
                    days=math.ceil(hours_remaining / 24),
                )
        else:
            percent = 100.0 if hours_since_quit >= 0 else 0.0
    elif milestone.category == "achievement":
        percent = _ratio_percent(resolved_cravings, resolve_threshold(milestone))
    elif milestone.category == "savings":
        percent = _ratio_percent(money_saved, resolve_threshold(milestone))

    return MilestoneProgress(
        milestone=MilestoneBase.model_validate(milestone),
        unlocked=unlocked,
        unlocked_at=unlocked_at,
        progress_percent=round_half_up(percent),
        time_remaining=time_remaining,
    )


def get_milestone_progress(db: Session, user_id: UUID, now: datetime) -> List[MilestoneProgress]:
    """
    Progress for every catalog milestone; empty when the user has no quit plan.

    `unlocked` reflects stored unlock records only, not whether progress reached 100.
    """
    plan = quit_plan_db.get_quit_plan(db, user_id)
    if plan is None:
        return []

    hours_since_quit = (now - plan.quit_date) / timedelta(hours=1)
    money_saved = build_statistics(plan, now).money_saved
    resolved_cravings = craving_db.count_resolved_cravings(db, user_id)
    unlocked_at = milestone_db.get_unlocked_at_by_milestone(db, user_id)

    return [
        compute_progress(
            milestone,
            hours_since_quit=hours_since_quit,
            resolved_cravings=resolved_cravings,
            money_saved=money_saved,
            unlocked_at=unlocked_at.get(milestone.id),
        )
        for milestone in milestone_db.list_milestones(db)
    ]


def check_and_unlock_milestones(db: Session, user_id: UUID, now: datetime) -> List[UserMilestone]:
    """
    Records an unlock for every milestone that reached 100% without one.

    Safe to call repeatedly or concurrently: a milestone unlocked by another
    call in the meantime is skipped silently.

    Returns:
        List[UserMilestone]: Only the unlocks created by this call.
    """
    newly_unlocked: List[UserMilestone] = []
    for item in get_milestone_progress(db, user_id, now):
        if item.unlocked or item.progress_percent < 100:
            continue
        record = milestone_db.insert_user_milestone_if_absent(db, user_id, item.milestone.id, now)
        if record is None:
            continue
        newly_unlocked.append(record)
        logger.info(
            "Milestone unlocked for user %s: %s (%s)",
            user_id, item.milestone.name, item.milestone.id,
        )
    return newly_unlocked


def get_unlocked_milestones(db: Session, user_id: UUID) -> List[UserMilestone]:
    return milestone_db.get_user_milestones(db, user_id)


def list_catalog(db: Session) -> List[Milestone]:
    return milestone_db.list_milestones(db)


def share_milestone(db: Session, user_id: UUID, milestone_id: UUID) -> bool:
    """Marks an unlocked milestone as shared. False when it is not unlocked."""
    shared = milestone_db.set_milestone_shared(db, user_id, milestone_id)
    if shared:
        logger.info("Milestone %s shared by user %s", milestone_id, user_id)
    return shared


def get_best_streak(db: Session, user_id: UUID, now: datetime) -> int:
    """Best smoke-free streak in days. Without relapse tracking this is the current streak."""
    plan = quit_plan_db.get_quit_plan(db, user_id)
    if plan is None:
        return 0
    return build_statistics(plan, now).current_streak
