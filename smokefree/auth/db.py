from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy.orm import Session
from smokefree.auth.models import User


def get_user(db: Session, user_id: UUID) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).first()

def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == email).first()

def create_user(db: Session, email: str, name: str, password_hash: str, now: datetime) -> User:
    user = User(id=uuid4(), email=email, name=name, password=password_hash, created_at=now)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user

def delete_user(db: Session, user: User) -> None:
    # ORM cascade removes plan, cravings, unlocks and chat history
    db.delete(user)
    db.commit()

def record_login(db: Session, user: User, now: datetime) -> None:
    user.last_login_at = now
    db.commit()

def set_password_reset(db: Session, user: User, token_hash: str, expires: datetime) -> None:
    user.password_reset_token_hash = token_hash
    user.password_reset_expires = expires
    db.commit()

def set_password(db: Session, user: User, password_hash: str, now: datetime) -> None:
    # Redeeming the token also consumes it
    user.password = password_hash
    user.password_reset_token_hash = None
    user.password_reset_expires = None
    user.updated_at = now
    db.commit()
