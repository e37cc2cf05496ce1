from datetime import datetime
from uuid import UUID
import logging

from fastapi import APIRouter, Depends, HTTPException, Security
from sqlalchemy.orm import Session

from smokefree.auth.service import get_current_user_id
from smokefree.core.database import get_db
from smokefree.core.dependency import get_now
from smokefree.profile.schemas import PreferencesOut, PreferencesUpdate, ProfileOut, ProfileUpdate
from smokefree.profile.service import get_profile, update_preferences, update_profile

router = APIRouter(prefix="/profile", tags=["Profile"])
logger = logging.getLogger(__name__)


@router.get(
    "",
    response_model=ProfileOut,
    summary="Get profile and preferences",
    responses={
        200: {"description": "Profile retrieved."},
        401: {"description": "Unauthorized."},
        404: {"description": "User not found."},
    },
)
def read_profile_route(
    db: Session = Depends(get_db),
    user_id: UUID = Security(get_current_user_id),
    now: datetime = Depends(get_now),
) -> ProfileOut:
    try:
        return get_profile(db, user_id, now)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to fetch profile for user {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to retrieve profile")


@router.put(
    "",
    response_model=ProfileOut,
    summary="Update profile",
    description="Changes the display name or profile picture. An empty picture URL removes the picture.",
    responses={
        200: {"description": "Profile updated."},
        401: {"description": "Unauthorized."},
        404: {"description": "User not found."},
        422: {"description": "Validation error."},
    },
)
def update_profile_route(
    req: ProfileUpdate,
    db: Session = Depends(get_db),
    user_id: UUID = Security(get_current_user_id),
    now: datetime = Depends(get_now),
) -> ProfileOut:
    try:
        return update_profile(db, user_id, req, now)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to update profile for user {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to update profile")


@router.put(
    "/preferences",
    response_model=PreferencesOut,
    summary="Update preferences",
    responses={
        200: {"description": "Preferences updated."},
        401: {"description": "Unauthorized."},
        404: {"description": "User not found."},
        422: {"description": "Validation error."},
    },
)
def update_preferences_route(
    req: PreferencesUpdate,
    db: Session = Depends(get_db),
    user_id: UUID = Security(get_current_user_id),
    now: datetime = Depends(get_now),
) -> PreferencesOut:
    try:
        return update_preferences(db, user_id, req, now)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to update preferences for user {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to update preferences")
