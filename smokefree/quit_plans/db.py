from datetime import datetime
from typing import Any, Dict, Optional
from uuid import UUID, uuid4

from sqlalchemy.orm import Session
from smokefree.quit_plans.models import QuitPlan


def get_quit_plan(db: Session, user_id: UUID) -> Optional[QuitPlan]:
    return db.query(QuitPlan).filter(QuitPlan.user_id == user_id).first()

def create_quit_plan(db: Session, user_id: UUID, data: Dict[str, Any], now: datetime) -> QuitPlan:
    new_plan = QuitPlan(
        id=uuid4(),
        user_id=user_id,
        quit_date=data["quit_date"],
        cigarettes_per_day=data["cigarettes_per_day"],
        cost_per_pack=data["cost_per_pack"],
        cigarettes_per_pack=data["cigarettes_per_pack"],
        motivations=list(data["motivations"]),
        created_at=now,
        updated_at=now,
    )
    db.add(new_plan)
    db.commit()
    db.refresh(new_plan)
    return new_plan

def update_quit_plan(db: Session, user_id: UUID, update_data: Dict[str, Any], now: datetime) -> Optional[QuitPlan]:
    plan = get_quit_plan(db, user_id)
    if plan:
        for field, value in update_data.items():
            setattr(plan, field, value)
        plan.updated_at = now
        db.commit()
        db.refresh(plan)
        return plan
    return None
