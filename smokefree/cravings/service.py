"""
Craving log: recording cravings, marking them resolved and summarizing
triggers and intensity over a trailing window.
"""

import logging
from collections import Counter
from datetime import datetime, timedelta
from typing import Iterable, List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from smokefree.cravings import db as craving_db
from smokefree.cravings.models import Craving
from smokefree.cravings.schemas import (
    CravingAnalytics,
    CravingCreate,
    CravingUpdate,
    DayCount,
    TriggerCount,
)

logger = logging.getLogger(__name__)

TOP_TRIGGER_LIMIT = 10


def create_craving(db: Session, user_id: UUID, data: CravingCreate, now: datetime) -> Craving:
    craving = craving_db.create_craving(db, data, user_id, now)
    logger.info("Craving logged for user %s (intensity %s)", user_id, craving.intensity)
    return craving


def list_cravings(db: Session, user_id: UUID, limit: int = 50, offset: int = 0) -> List[Craving]:
    """Craving history, newest first."""
    return craving_db.get_user_cravings(db, user_id, skip=offset, limit=limit)


def get_craving(db: Session, user_id: UUID, craving_id: UUID) -> Optional[Craving]:
    return craving_db.get_craving(db, craving_id, user_id)


def update_craving(db: Session, user_id: UUID, craving_id: UUID, data: CravingUpdate) -> Optional[Craving]:
    """
    Updates the mutable part of a craving: resolved flag, duration and relief techniques.
    Only fields present in the request change; a null duration clears it.

    Returns None when the craving does not exist for this user.
    """
    update_data = data.model_dump(exclude_unset=True)
    if not update_data:
        return craving_db.get_craving(db, craving_id, user_id)
    craving = craving_db.update_craving(db, craving_id, update_data, user_id)
    if craving is not None and "resolved" in update_data:
        logger.info("Craving %s marked resolved=%s", craving_id, craving.resolved)
    return craving


def count_triggers(trigger_lists: Iterable[Iterable[str]]) -> List[TriggerCount]:
    """Counts trigger labels across cravings, most frequent first (ties alphabetical)."""
    counter = Counter(t for triggers in trigger_lists for t in triggers)
    ordered = sorted(counter.items(), key=lambda item: (-item[1], item[0]))
    return [TriggerCount(trigger=t, count=c) for t, c in ordered]


def summarize_cravings(cravings: List[Craving]) -> CravingAnalytics:
    total = len(cravings)
    if total == 0:
        return CravingAnalytics(
            total_cravings=0,
            average_intensity=0.0,
            most_common_triggers=[],
            cravings_by_day=[],
            resolution_rate=0.0,
        )

    average = sum(c.intensity for c in cravings) / total
    resolved = sum(1 for c in cravings if c.resolved)

    by_day = Counter(c.created_at.date().isoformat() for c in cravings)
    cravings_by_day = [DayCount(date=d, count=by_day[d]) for d in sorted(by_day, reverse=True)]

    return CravingAnalytics(
        total_cravings=total,
        average_intensity=round(average, 1),
        most_common_triggers=count_triggers(c.triggers for c in cravings)[:TOP_TRIGGER_LIMIT],
        cravings_by_day=cravings_by_day,
        resolution_rate=round(resolved / total * 100, 1),
    )


def get_craving_analytics(db: Session, user_id: UUID, days: int, now: datetime) -> CravingAnalytics:
    """Aggregates the cravings logged in the last `days` days."""
    since = now - timedelta(days=days)
    return summarize_cravings(craving_db.list_cravings_since(db, user_id, since))


def get_trigger_summary(db: Session, user_id: UUID) -> List[TriggerCount]:
    return count_triggers(craving_db.get_user_craving_triggers(db, user_id))
