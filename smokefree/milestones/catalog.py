"""
Seed data for the milestone catalog.

Time and health milestones unlock after `duration_hours` since the quit date.
Achievement milestones count resolved cravings, savings milestones count money
saved; their threshold is stored explicitly in `threshold_value`.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List
from uuid import uuid4

from sqlalchemy.orm import Session

from smokefree.milestones.models import Milestone

logger = logging.getLogger(__name__)

HOURS = "hours"
RESOLVED_CRAVINGS = "resolved_cravings"
DOLLARS = "dollars"


def _timed(name: str, description: str, hours: float, category: str, icon: str) -> Dict[str, Any]:
    return {
        "name": name,
        "description": description,
        "category": category,
        "duration_hours": hours,
        "threshold_value": hours,
        "threshold_unit": HOURS,
        "icon": icon,
    }


def _counted(name: str, description: str, category: str, threshold: float, unit: str, icon: str) -> Dict[str, Any]:
    return {
        "name": name,
        "description": description,
        "category": category,
        "duration_hours": 0,
        "threshold_value": threshold,
        "threshold_unit": unit,
        "icon": icon,
    }


MILESTONE_CATALOG: List[Dict[str, Any]] = [
    _timed("20 Minutes Smoke-Free", "Your heart rate and blood pressure begin to drop to normal levels", 0.33, "health", "heart"),
    _timed("8 Hours Smoke-Free", "Carbon monoxide level in your blood drops to normal", 8, "health", "lungs"),
    _timed("24 Hours Smoke-Free", "Your risk of heart attack begins to decrease", 24, "time", "trophy"),
    _timed("48 Hours Smoke-Free", "Nerve endings start to regrow, improving taste and smell", 48, "health", "nose"),
    _timed("72 Hours Smoke-Free", "Breathing becomes easier as bronchial tubes relax", 72, "health", "wind"),
    _timed("1 Week Smoke-Free", "You've made it through the hardest week!", 168, "time", "star"),
    _timed("2 Weeks Smoke-Free", "Circulation improves and lung function increases", 336, "health", "heart-pulse"),
    _timed("1 Month Smoke-Free", "Coughing and shortness of breath decrease significantly", 720, "time", "medal"),
    _timed("3 Months Smoke-Free", "Lung function continues to improve", 2160, "time", "award"),
    _timed("6 Months Smoke-Free", "Coughing, sinus congestion, and fatigue decrease", 4320, "time", "crown"),
    _timed("1 Year Smoke-Free", "Your risk of heart disease is half that of a smoker", 8760, "time", "diamond"),

    _counted("First Craving Logged", "You've taken the first step in tracking your cravings", "achievement", 1, RESOLVED_CRAVINGS, "clipboard"),
    _counted("10 Cravings Overcome", "You've successfully managed 10 cravings", "achievement", 10, RESOLVED_CRAVINGS, "shield"),
    _counted("50 Cravings Overcome", "You've successfully managed 50 cravings", "achievement", 50, RESOLVED_CRAVINGS, "shield-check"),
    _counted("100 Cravings Overcome", "You've successfully managed 100 cravings", "achievement", 100, RESOLVED_CRAVINGS, "shield-star"),

    _counted("$50 Saved", "You've saved your first $50 by not smoking", "savings", 50, DOLLARS, "dollar"),
    _counted("$100 Saved", "You've saved $100 by not smoking", "savings", 100, DOLLARS, "dollar"),
    _counted("$500 Saved", "You've saved $500 by not smoking", "savings", 500, DOLLARS, "piggy-bank"),
    _counted("$1000 Saved", "You've saved $1000 by not smoking", "savings", 1000, DOLLARS, "money-bag"),
]


def seed_milestones(db: Session, now: datetime) -> int:
    """
    Inserts catalog entries that are not in the database yet, matched by name.

    Existing rows are left untouched so their ids stay stable for unlock records.

    Returns:
        int: Number of milestones inserted.
    """
    existing = {name for (name,) in db.query(Milestone.name).all()}
    inserted = 0
    for entry in MILESTONE_CATALOG:
        if entry["name"] in existing:
            continue
        db.add(Milestone(id=uuid4(), created_at=now, **entry))
        inserted += 1
    if inserted:
        db.commit()
        logger.info("Seeded %d milestones", inserted)
    return inserted
