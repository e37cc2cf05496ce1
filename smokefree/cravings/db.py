from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID, uuid4

from sqlalchemy.orm import Session
from smokefree.cravings.models import Craving
from smokefree.cravings.schemas import CravingCreate


def create_craving(db: Session, craving: CravingCreate, user_id: UUID, now: datetime) -> Craving:
    new_craving = Craving(
        id=uuid4(),
        user_id=user_id,
        intensity=craving.intensity,
        triggers=list(craving.triggers),
        relief_techniques_used=list(craving.relief_techniques_used or []),
        notes=craving.notes,
        resolved=False,
        created_at=now,
    )
    db.add(new_craving)
    db.commit()
    db.refresh(new_craving)
    return new_craving

def get_craving(db: Session, craving_id: UUID, user_id: UUID) -> Optional[Craving]:
    return db.query(Craving).filter(
        Craving.id == craving_id,
        Craving.user_id == user_id
    ).first()

def get_user_cravings(db: Session, user_id: UUID, skip: int = 0, limit: int = 50) -> List[Craving]:
    return (
        db.query(Craving)
        .filter(Craving.user_id == user_id)
        .order_by(Craving.created_at.desc())
        .offset(skip)
        .limit(limit)
        .all()
    )

def list_cravings_since(db: Session, user_id: UUID, since: datetime) -> List[Craving]:
    return (
        db.query(Craving)
        .filter(Craving.user_id == user_id, Craving.created_at >= since)
        .order_by(Craving.created_at.desc())
        .all()
    )

def count_resolved_cravings(db: Session, user_id: UUID) -> int:
    return db.query(Craving).filter(
        Craving.user_id == user_id,
        Craving.resolved.is_(True)
    ).count()

def update_craving(db: Session, craving_id: UUID, update_data: Dict[str, Any], user_id: UUID) -> Optional[Craving]:
    craving = get_craving(db, craving_id, user_id)
    if craving:
        for field, value in update_data.items():
            setattr(craving, field, value)
        db.commit()
        db.refresh(craving)
        return craving
    return None

def get_user_craving_triggers(db: Session, user_id: UUID) -> List[List[str]]:
    rows = db.query(Craving.triggers).filter(Craving.user_id == user_id).all()
    return [row.triggers or [] for row in rows]
