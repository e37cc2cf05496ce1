"""
Account plumbing: bcrypt password hashes and JWT access/refresh tokens.

Access tokens travel as bearer headers; refresh tokens live in an http-only
cookie scoped to /auth/refresh. Both carry a `type` claim so one can never be
used in place of the other.
"""

import hashlib
import hmac
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple
from uuid import UUID, uuid4

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from smokefree.auth import db as user_db
from smokefree.auth.mailer import ResetMailer
from smokefree.auth.models import User
from smokefree.auth.schemas import LoginRequest, TokenResponse, UserCreate, UserOut
from smokefree.core.config import (
    ACCESS_TOKEN_EXPIRE_MINUTES,
    ALGORITHM,
    PASSWORD_RESET_EXPIRE_MINUTES,
    REFRESH_TOKEN_EXPIRE_DAYS,
    SECRET_KEY,
)
from smokefree.core.database import get_db

logger = logging.getLogger(__name__)
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
bearer_scheme = HTTPBearer()

ACCESS = "access"
REFRESH = "refresh"
PASSWORD_RESET = "password_reset"

TOKEN_LIFETIMES = {
    ACCESS: timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES),
    REFRESH: timedelta(days=REFRESH_TOKEN_EXPIRE_DAYS),
    PASSWORD_RESET: timedelta(minutes=PASSWORD_RESET_EXPIRE_MINUTES),
}


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, password_hash: str) -> bool:
    return pwd_context.verify(plain_password, password_hash)


def normalize_email(email: str) -> str:
    return email.strip().lower()


def create_token(user_id: UUID, token_type: str = ACCESS, expires_delta: Optional[timedelta] = None) -> str:
    issued_at = datetime.now(timezone.utc)
    claims = {
        "sub": str(user_id),
        "type": token_type,
        "iat": int(issued_at.timestamp()),
        "jti": uuid4().hex,
        "exp": issued_at + (expires_delta or TOKEN_LIFETIMES[token_type]),
    }
    return jwt.encode(claims, SECRET_KEY, algorithm=ALGORITHM)


def decode_token(token: str, expected_type: str) -> UUID:
    """
    Validates signature, expiry and token type, and returns the user id.

    Raises:
        HTTPException: 401 for any token that is not a valid `expected_type` token.
    """
    try:
        claims = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        raise HTTPException(status_code=401, detail="Invalid or expired authentication token")

    if claims.get("type") != expected_type:
        raise HTTPException(status_code=401, detail=f"Invalid {expected_type} token")
    try:
        return UUID(claims.get("sub") or "")
    except ValueError:
        raise HTTPException(status_code=401, detail="Invalid user ID in token")


def issue_tokens(user: User) -> Tuple[TokenResponse, str]:
    """Access token with the user's profile, plus a fresh refresh token."""
    response = TokenResponse(
        access_token=create_token(user.id, ACCESS),
        user=UserOut.model_validate(user),
    )
    return response, create_token(user.id, REFRESH)


def get_current_user_id(creds: HTTPAuthorizationCredentials = Depends(bearer_scheme)) -> UUID:
    return decode_token(creds.credentials, ACCESS)


def get_current_user(
    user_id: UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
) -> User:
    user = user_db.get_user(db, user_id)
    if user is None:
        raise HTTPException(status_code=401, detail="User not found")
    return user


def handle_login(req: LoginRequest, db: Session, now: datetime) -> Tuple[TokenResponse, str]:
    user = user_db.get_user_by_email(db, normalize_email(req.email))
    if user is None or not verify_password(req.password, user.password):
        raise HTTPException(status_code=401, detail="Invalid email or password")

    user_db.record_login(db, user, now)
    logger.info("User %s logged in", user.id)
    return issue_tokens(user)


def handle_signup(req: UserCreate, db: Session, now: datetime) -> Tuple[TokenResponse, str]:
    """
    Registers a new account and signs it in.

    Raises:
        HTTPException: 409 when the e-mail is already registered.
    """
    email = normalize_email(req.email)
    if user_db.get_user_by_email(db, email) is not None:
        raise HTTPException(status_code=409, detail="Email already registered")

    user = user_db.create_user(db, email, req.name.strip(), hash_password(req.password), now)
    logger.info("User %s signed up", user.id)
    return issue_tokens(user)


def handle_token_refresh(refresh_token: str, db: Session) -> Tuple[TokenResponse, str]:
    """Rotates the token pair. The old refresh token is not revoked; it simply expires."""
    user = user_db.get_user(db, decode_token(refresh_token, REFRESH))
    if user is None:
        raise HTTPException(status_code=401, detail="User not found")
    return issue_tokens(user)


def delete_account(user: User, db: Session) -> None:
    user_id = user.id
    user_db.delete_user(db, user)
    logger.info("Account %s deleted with all of its data", user_id)


def hash_reset_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def request_password_reset(email: str, db: Session, now: datetime, mailer: ResetMailer) -> None:
    """
    Issues a one-hour reset token and hands it to the mailer.

    Only a digest of the token is stored, and a newer request replaces any
    outstanding token. Unknown addresses are ignored without error so the
    response never reveals whether an account exists.
    """
    user = user_db.get_user_by_email(db, normalize_email(email))
    if user is None:
        logger.info("Password reset requested for an unknown e-mail")
        return

    token = create_token(user.id, PASSWORD_RESET)
    user_db.set_password_reset(db, user, hash_reset_token(token), now + TOKEN_LIFETIMES[PASSWORD_RESET])
    mailer.send_reset(user.email, token)
    logger.info("Password reset token issued for user %s", user.id)


def reset_password(token: str, new_password: str, db: Session, now: datetime) -> None:
    """
    Redeems a reset token and sets the new password.

    Raises:
        HTTPException: 400 when the token is malformed, expired, superseded or already used.
    """
    invalid = HTTPException(status_code=400, detail="Invalid or expired reset token")
    try:
        user_id = decode_token(token, PASSWORD_RESET)
    except HTTPException:
        raise invalid

    user = user_db.get_user(db, user_id)
    if user is None or not user.password_reset_token_hash or user.password_reset_expires is None:
        raise invalid
    if now > user.password_reset_expires:
        raise invalid
    if not hmac.compare_digest(user.password_reset_token_hash, hash_reset_token(token)):
        raise invalid

    user_db.set_password(db, user, hash_password(new_password), now)
    logger.info("Password reset for user %s", user.id)
