from datetime import datetime
from typing import Any, Dict, Optional
from uuid import UUID

from sqlalchemy.orm import Session
from smokefree.auth.models import User
from smokefree.profile.models import UserPreferences


def get_preferences(db: Session, user_id: UUID) -> Optional[UserPreferences]:
    return db.query(UserPreferences).filter(UserPreferences.user_id == user_id).first()

def get_or_create_preferences(db: Session, user: User, now: datetime) -> UserPreferences:
    if user.preferences is None:
        user.preferences = UserPreferences(
            user_id=user.id,
            notifications_enabled=True,
            craving_alerts_enabled=True,
            created_at=now,
            updated_at=now,
        )
        db.commit()
        db.refresh(user.preferences)
    return user.preferences

def update_preferences(db: Session, prefs: UserPreferences, update_data: Dict[str, Any], now: datetime) -> UserPreferences:
    for field, value in update_data.items():
        setattr(prefs, field, value)
    prefs.updated_at = now
    db.commit()
    db.refresh(prefs)
    return prefs

def update_user_profile(db: Session, user: User, update_data: Dict[str, Any], now: datetime) -> User:
    for field, value in update_data.items():
        setattr(user, field, value)
    user.updated_at = now
    db.commit()
    db.refresh(user)
    return user
