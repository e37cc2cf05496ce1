from datetime import timedelta

import main
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from smokefree.auth.routes import RESET_REQUESTED
from smokefree.milestones.models import Milestone
from tests.conftest import NOW


def bearer(token):
    return {"Authorization": f"Bearer {token}"}


def refresh_cookie(resp):
    set_cookie = resp.headers["set-cookie"]
    return set_cookie.split("refresh_token=", 1)[1].split(";", 1)[0]


def create_plan(client, hours_ago=20):
    resp = client.post("/quit-plan", json={
        "quit_date": (NOW - timedelta(hours=hours_ago)).isoformat(),
        "cigarettes_per_day": 20,
        "cost_per_pack": 10.0,
        "motivations": ["health"],
    })
    assert resp.status_code == 201
    return resp.json()


def test_health(anon_client):
    resp = anon_client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


def test_signup_login_refresh_and_me(anon_client):
    signup = anon_client.post("/auth/signup", json={
        "email": "Alex@Example.com", "name": "Alex", "password": "s3cret-pass",
    })
    assert signup.status_code == 201
    assert signup.json()["user"]["email"] == "alex@example.com"
    access = signup.json()["access_token"]

    me = anon_client.get("/auth/me", headers=bearer(access))
    assert me.status_code == 200
    assert me.json()["name"] == "Alex"

    duplicate = anon_client.post("/auth/signup", json={
        "email": "alex@example.com", "name": "Alex", "password": "another-pass",
    })
    assert duplicate.status_code == 409

    assert anon_client.post("/auth/login", json={"email": "alex@example.com", "password": "wrong-pass"}).status_code == 401
    login = anon_client.post("/auth/login", json={"email": "alex@example.com", "password": "s3cret-pass"})
    assert login.status_code == 200

    token = refresh_cookie(login)
    refreshed = anon_client.post("/auth/refresh", headers={"Cookie": f"refresh_token={token}"})
    assert refreshed.status_code == 200
    assert refreshed.json()["user"]["id"] == me.json()["id"]

    # An access token is not a refresh token
    rejected = anon_client.post("/auth/refresh", headers={"Cookie": f"refresh_token={access}"})
    assert rejected.status_code == 401


def test_refresh_token_cannot_authorize_requests(anon_client):
    signup = anon_client.post("/auth/signup", json={"email": "r@example.com", "name": "R", "password": "password123"})
    assert anon_client.get("/auth/me", headers=bearer(refresh_cookie(signup))).status_code == 401


def test_protected_routes_need_a_token(anon_client):
    assert anon_client.get("/progress/stats").status_code in (401, 403)
    assert anon_client.get("/progress/stats", headers=bearer("garbage")).status_code == 401


def test_statistics_need_a_plan(client):
    assert client.get("/progress/stats").status_code == 404
    assert client.get("/progress/timer").status_code == 404


def test_statistics(client, clock):
    create_plan(client, hours_ago=1)
    clock.advance(days=10, hours=-1)

    stats = client.get("/progress/stats").json()
    assert stats["money_saved"] == 100.0
    assert stats["cigarettes_not_smoked"] == 200
    assert stats["current_streak"] == 10
    assert stats["life_regained"] == {"minutes": 2200, "hours": 36, "days": 1}

    timer = client.get("/progress/timer").json()
    assert timer["smoke_free_time"]["total_days"] == 10
    assert timer["timestamp"] == clock.now.isoformat()


def test_milestones_flow(client):
    assert client.get("/progress/milestones").json() == []
    assert client.get("/progress/streak").json() == {"best_streak": 0}

    create_plan(client, hours_ago=23)
    catalog = client.get("/progress/milestones/catalog").json()
    assert len(catalog) == 19
    ids = {m["name"]: m["id"] for m in catalog}

    progress = {p["milestone"]["name"]: p for p in client.get("/progress/milestones").json()}
    assert progress["8 Hours Smoke-Free"]["unlocked"] is True
    assert progress["24 Hours Smoke-Free"]["unlocked"] is False
    assert progress["24 Hours Smoke-Free"]["time_remaining"] == {"hours": 1, "days": 1}

    unlocked = client.get("/progress/milestones/unlocked").json()
    assert {u["milestone"]["name"] for u in unlocked} == {"20 Minutes Smoke-Free", "8 Hours Smoke-Free"}

    assert client.post(f"/progress/milestones/{ids['24 Hours Smoke-Free']}/share").status_code == 404
    assert client.post(f"/progress/milestones/{ids['8 Hours Smoke-Free']}/share").status_code == 200
    shared = {u["milestone"]["name"]: u["shared"] for u in client.get("/progress/milestones/unlocked").json()}
    assert shared == {"20 Minutes Smoke-Free": False, "8 Hours Smoke-Free": True}

    # Reading again creates no duplicates
    client.get("/progress/milestones")
    assert len(client.get("/progress/milestones/unlocked").json()) == 2


def test_resolving_a_craving_unlocks_the_first_achievement(client):
    create_plan(client, hours_ago=1)
    craving = client.post("/cravings", json={"intensity": 6, "triggers": ["coffee"]}).json()
    client.put(f"/cravings/{craving['id']}", json={"resolved": True})

    progress = {p["milestone"]["name"]: p for p in client.get("/progress/milestones").json()}
    assert progress["First Craving Logged"]["unlocked"] is True
    assert progress["10 Cravings Overcome"]["progress_percent"] == 10


def test_delete_account_removes_everything(client, db, user):
    from smokefree.auth.models import User
    from smokefree.chat.models import ChatMessage
    from smokefree.cravings.models import Craving
    from smokefree.milestones.models import UserMilestone
    from smokefree.profile.models import UserPreferences
    from smokefree.quit_plans.models import QuitPlan

    create_plan(client)
    client.put("/profile/preferences", json={"theme": "dark"})
    client.post("/cravings", json={"intensity": 6, "triggers": ["coffee"]})
    client.get("/progress/milestones")
    client.post("/chat/message", json={"message": "hi"})

    assert client.delete("/auth/account").status_code == 200
    assert db.query(User).count() == 0
    assert db.query(QuitPlan).count() == 0
    assert db.query(Craving).count() == 0
    assert db.query(UserMilestone).count() == 0
    assert db.query(ChatMessage).count() == 0
    assert db.query(UserPreferences).count() == 0


def signup(client, email="reset@example.com", password="old-password"):
    resp = client.post("/auth/signup", json={"email": email, "name": "Robin", "password": password})
    assert resp.status_code == 201
    return resp.json()


def test_login_records_last_login(anon_client, clock):
    signup(anon_client)
    clock.advance(hours=3)
    login = anon_client.post("/auth/login", json={"email": "reset@example.com", "password": "old-password"})
    profile = anon_client.get("/profile", headers=bearer(login.json()["access_token"])).json()
    assert profile["last_login_at"] == clock.now.isoformat()


def test_password_reset_flow(anon_client, mailer):
    signup(anon_client)

    resp = anon_client.post("/auth/request-password-reset", json={"email": "Reset@Example.com"})
    assert resp.status_code == 200
    assert resp.json() == {"detail": RESET_REQUESTED}
    assert len(mailer.sent) == 1
    email, token = mailer.sent[0]
    assert email == "reset@example.com"

    short = anon_client.post("/auth/reset-password", json={"token": token, "new_password": "short"})
    assert short.status_code == 422
    assert anon_client.post("/auth/reset-password", json={"token": "garbage", "new_password": "new-password"}).status_code == 400

    done = anon_client.post("/auth/reset-password", json={"token": token, "new_password": "new-password"})
    assert done.status_code == 200
    assert anon_client.post("/auth/login", json={"email": "reset@example.com", "password": "old-password"}).status_code == 401
    assert anon_client.post("/auth/login", json={"email": "reset@example.com", "password": "new-password"}).status_code == 200

    # A token works only once
    again = anon_client.post("/auth/reset-password", json={"token": token, "new_password": "third-password"})
    assert again.status_code == 400
    assert again.json()["detail"] == "Invalid or expired reset token"


def test_password_reset_for_unknown_email_looks_the_same(anon_client, mailer):
    resp = anon_client.post("/auth/request-password-reset", json={"email": "nobody@example.com"})
    assert resp.status_code == 200
    assert resp.json() == {"detail": RESET_REQUESTED}
    assert mailer.sent == []


def test_reset_token_expires_after_an_hour(anon_client, mailer, clock):
    signup(anon_client)
    anon_client.post("/auth/request-password-reset", json={"email": "reset@example.com"})
    clock.advance(hours=1, minutes=1)
    token = mailer.sent[0][1]
    assert anon_client.post("/auth/reset-password", json={"token": token, "new_password": "new-password"}).status_code == 400


def test_newer_reset_request_supersedes_the_old_token(anon_client, mailer):
    signup(anon_client)
    anon_client.post("/auth/request-password-reset", json={"email": "reset@example.com"})
    anon_client.post("/auth/request-password-reset", json={"email": "reset@example.com"})
    first, second = mailer.sent[0][1], mailer.sent[1][1]
    assert first != second
    assert anon_client.post("/auth/reset-password", json={"token": first, "new_password": "new-password"}).status_code == 400
    assert anon_client.post("/auth/reset-password", json={"token": second, "new_password": "new-password"}).status_code == 200


def test_startup_creates_tables_and_seeds_catalog(engine, monkeypatch):
    monkeypatch.setattr(main, "engine", engine)
    monkeypatch.setattr(main, "SessionLocal", sessionmaker(bind=engine, autoflush=False, expire_on_commit=False))

    with TestClient(main.app) as client:
        assert client.get("/health").status_code == 200

    session = sessionmaker(bind=engine)()
    try:
        assert session.query(Milestone).count() == 19
    finally:
        session.close()
