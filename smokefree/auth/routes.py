from datetime import datetime
from typing import Dict, Optional
import logging

from fastapi import APIRouter, Body, Cookie, Depends, HTTPException, Response
from sqlalchemy.orm import Session

from smokefree.auth.models import User
from smokefree.auth.mailer import ResetMailer
from smokefree.auth.schemas import (
    LoginRequest,
    PasswordReset,
    PasswordResetRequest,
    TokenResponse,
    UserCreate,
    UserOut,
)
from smokefree.auth.service import (
    delete_account,
    get_current_user,
    handle_login,
    handle_signup,
    handle_token_refresh,
    request_password_reset,
    reset_password,
)
from smokefree.core.database import get_db
from smokefree.core.dependency import get_now, get_reset_mailer

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/auth", tags=["Auth"])

REFRESH_COOKIE = "refresh_token"
REFRESH_COOKIE_PATH = "/auth/refresh"


def attach_refresh_cookie(response: Response, refresh_token: str) -> None:
    response.set_cookie(
        key=REFRESH_COOKIE,
        value=refresh_token,
        httponly=True,
        secure=True,
        samesite="strict",
        path=REFRESH_COOKIE_PATH,
    )


def clear_refresh_cookie(response: Response) -> None:
    response.delete_cookie(REFRESH_COOKIE, path=REFRESH_COOKIE_PATH)


@router.post(
    "/signup",
    response_model=TokenResponse,
    status_code=201,
    summary="Create an account",
    description="Registers the user and signs them in. The refresh token is set as an http-only cookie.",
    responses={
        201: {"description": "Account created."},
        409: {"description": "Email already registered."},
        500: {"description": "Signup failed."},
    },
)
def signup_route(
    response: Response,
    req: UserCreate = Body(...),
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
) -> TokenResponse:
    try:
        tokens, refresh_token = handle_signup(req, db, now)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Signup failed for {req.email}: {e}")
        raise HTTPException(status_code=500, detail="Signup failed")
    attach_refresh_cookie(response, refresh_token)
    return tokens


@router.post(
    "/login",
    response_model=TokenResponse,
    summary="Sign in with email and password",
    responses={
        200: {"description": "Signed in."},
        401: {"description": "Wrong email or password."},
        500: {"description": "Login failed."},
    },
)
def login_route(
    req: LoginRequest,
    response: Response,
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
) -> TokenResponse:
    try:
        tokens, refresh_token = handle_login(req, db, now)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Login failed for {req.email}: {e}")
        raise HTTPException(status_code=500, detail="Login failed")
    attach_refresh_cookie(response, refresh_token)
    return tokens


@router.post(
    "/refresh",
    response_model=TokenResponse,
    summary="Rotate the token pair",
    responses={
        200: {"description": "New access token issued."},
        401: {"description": "Missing or invalid refresh token."},
    },
)
def refresh_route(
    response: Response,
    refresh_token: Optional[str] = Cookie(None, alias=REFRESH_COOKIE),
    db: Session = Depends(get_db),
) -> TokenResponse:
    if not refresh_token:
        raise HTTPException(status_code=401, detail="No refresh token found")
    tokens, new_refresh_token = handle_token_refresh(refresh_token, db)
    attach_refresh_cookie(response, new_refresh_token)
    return tokens


@router.post("/logout", summary="Clear the refresh cookie")
def logout_route(response: Response) -> Dict[str, str]:
    clear_refresh_cookie(response)
    return {"detail": "Logged out"}


RESET_REQUESTED = "If the email exists, a reset link will be sent"


@router.post(
    "/request-password-reset",
    summary="Request a password reset",
    description="Always answers the same way so the response does not reveal whether the account exists.",
    responses={200: {"description": "Request accepted."}},
)
def request_password_reset_route(
    req: PasswordResetRequest,
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
    mailer: ResetMailer = Depends(get_reset_mailer),
) -> Dict[str, str]:
    try:
        request_password_reset(req.email, db, now, mailer)
    except Exception as e:
        logger.error(f"Password reset request failed: {e}")
    return {"detail": RESET_REQUESTED}


@router.post(
    "/reset-password",
    summary="Set a new password with a reset token",
    responses={
        200: {"description": "Password changed."},
        400: {"description": "Invalid or expired reset token."},
        422: {"description": "Password too short."},
        500: {"description": "Password reset failed."},
    },
)
def reset_password_route(
    req: PasswordReset,
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
) -> Dict[str, str]:
    try:
        reset_password(req.token, req.new_password, db, now)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Password reset failed: {e}")
        raise HTTPException(status_code=500, detail="Password reset failed")
    return {"detail": "Password reset successfully"}


@router.get(
    "/me",
    response_model=UserOut,
    summary="Current user",
    responses={401: {"description": "Unauthorized."}},
)
def me_route(user: User = Depends(get_current_user)) -> User:
    return user


@router.delete(
    "/account",
    response_model=Dict[str, str],
    summary="Delete the account",
    description="Permanently removes the user with their quit plan, cravings, milestones and chat history.",
    responses={
        200: {"description": "Account deleted."},
        401: {"description": "Unauthorized."},
        500: {"description": "Account deletion failed."},
    },
)
def delete_account_route(
    response: Response,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Dict[str, str]:
    try:
        delete_account(user, db)
    except Exception as e:
        logger.error(f"Failed to delete account {user.id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to delete account")
    clear_refresh_cookie(response)
    return {"detail": "Account deleted"}
