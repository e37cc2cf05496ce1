import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")

from datetime import datetime, timedelta
from typing import Any, Dict, List, Tuple
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from main import app
from smokefree.auth.mailer import ResetMailer
from smokefree.auth.models import User
from smokefree.auth.service import get_current_user_id
from smokefree.chat.coach import CoachService
from smokefree.core.database import Base, get_db
from smokefree.core.dependency import get_coach, get_now, get_reset_mailer
from smokefree.milestones.catalog import seed_milestones
from smokefree.quit_plans import db as quit_plan_db

NOW = datetime(2026, 3, 1, 12, 0, 0)


class Clock:
    def __init__(self, now: datetime):
        self.now = now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


class FakeCoach(CoachService):
    model_tag = "fake-coach"

    def __init__(self, answer: str = "You've got this. Take a slow breath."):
        self.answer = answer
        self.fail = False
        self.calls: List[List[Dict[str, str]]] = []

    def reply(self, messages: List[Dict[str, str]]) -> Tuple[str, Dict[str, Any]]:
        self.calls.append(messages)
        if self.fail:
            raise RuntimeError("coach offline")
        return self.answer, {"model": self.model_tag}


class RecordingMailer(ResetMailer):
    def __init__(self):
        self.sent: List[Tuple[str, str]] = []

    def send_reset(self, email: str, token: str) -> None:
        self.sent.append((email, token))


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)()
    seed_milestones(session, NOW)
    yield session
    session.close()


@pytest.fixture
def clock():
    return Clock(NOW)


@pytest.fixture
def coach():
    return FakeCoach()


@pytest.fixture
def mailer():
    return RecordingMailer()


@pytest.fixture
def user(db):
    user = User(id=uuid4(), email="sam@example.com", name="Sam", password="not-a-hash", created_at=NOW)
    db.add(user)
    db.commit()
    return user


@pytest.fixture
def make_plan(db, user):
    def _make_plan(quit_date, cigarettes_per_day=20, cost_per_pack=10.0, cigarettes_per_pack=20, owner=None):
        return quit_plan_db.create_quit_plan(
            db,
            (owner or user).id,
            {
                "quit_date": quit_date,
                "cigarettes_per_day": cigarettes_per_day,
                "cost_per_pack": cost_per_pack,
                "cigarettes_per_pack": cigarettes_per_pack,
                "motivations": ["health"],
            },
            NOW,
        )
    return _make_plan


@pytest.fixture
def anon_client(db, clock, coach, mailer):
    """Client with real token authentication."""
    app.dependency_overrides[get_db] = lambda: db
    app.dependency_overrides[get_now] = lambda: clock.now
    app.dependency_overrides[get_coach] = lambda: coach
    app.dependency_overrides[get_reset_mailer] = lambda: mailer
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def client(anon_client, user):
    """Client already authenticated as `user`."""
    app.dependency_overrides[get_current_user_id] = lambda: user.id
    return anon_client
