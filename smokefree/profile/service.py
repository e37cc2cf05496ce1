"""
Account profile and app preferences.

Preferences are created with their defaults the first time they are read or
updated, so every account has exactly one row once it has used the profile.
"""

from datetime import datetime
from uuid import UUID
import logging

from fastapi import HTTPException
from sqlalchemy.orm import Session

from smokefree.auth import db as user_db
from smokefree.auth.models import User
from smokefree.profile import db as profile_db
from smokefree.profile.models import DEFAULT_CHATBOT_TONE
from smokefree.profile.schemas import PreferencesOut, PreferencesUpdate, ProfileOut, ProfileUpdate

logger = logging.getLogger(__name__)


def _load_user(db: Session, user_id: UUID) -> User:
    user = user_db.get_user(db, user_id)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return user


def get_profile(db: Session, user_id: UUID, now: datetime) -> ProfileOut:
    user = _load_user(db, user_id)
    profile_db.get_or_create_preferences(db, user, now)
    return ProfileOut.model_validate(user)


def update_profile(db: Session, user_id: UUID, data: ProfileUpdate, now: datetime) -> ProfileOut:
    user = _load_user(db, user_id)
    update_data = data.model_dump(exclude_unset=True)
    if "name" in update_data:
        update_data["name"] = update_data["name"].strip()
    if update_data.get("profile_picture_url") == "":
        update_data["profile_picture_url"] = None

    if update_data:
        profile_db.update_user_profile(db, user, update_data, now)
        logger.info(f"Profile updated for user {user_id}")
    profile_db.get_or_create_preferences(db, user, now)
    return ProfileOut.model_validate(user)


def update_preferences(db: Session, user_id: UUID, data: PreferencesUpdate, now: datetime) -> PreferencesOut:
    user = _load_user(db, user_id)
    prefs = profile_db.get_or_create_preferences(db, user, now)
    update_data = data.model_dump(exclude_unset=True)
    if "daily_check_in_time" in update_data and not update_data["daily_check_in_time"]:
        update_data["daily_check_in_time"] = None

    if update_data:
        prefs = profile_db.update_preferences(db, prefs, update_data, now)
        logger.info(f"Preferences updated for user {user_id}")
    return PreferencesOut.model_validate(prefs)


def get_chatbot_tone(db: Session, user_id: UUID) -> str:
    prefs = profile_db.get_preferences(db, user_id)
    return prefs.ai_chatbot_tone if prefs else DEFAULT_CHATBOT_TONE
