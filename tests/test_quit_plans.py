from datetime import timedelta, timezone, datetime

import pytest
from fastapi import HTTPException

from smokefree.quit_plans.service import calculate_savings, validate_quit_date
from tests.conftest import NOW


def plan_payload(**overrides):
    payload = {
        "quit_date": (NOW - timedelta(hours=2)).isoformat(),
        "cigarettes_per_day": 20,
        "cost_per_pack": 10.0,
        "motivations": ["health", "family"],
    }
    payload.update(overrides)
    return payload


def test_quit_date_window():
    assert validate_quit_date(NOW + timedelta(days=14), NOW) == NOW + timedelta(days=14)
    assert validate_quit_date(NOW - timedelta(hours=23), NOW) == NOW - timedelta(hours=23)
    for bad in (NOW + timedelta(days=15), NOW - timedelta(hours=25)):
        with pytest.raises(HTTPException) as exc:
            validate_quit_date(bad, NOW)
        assert exc.value.status_code == 400


def test_quit_date_is_normalized_to_utc():
    aware = datetime(2026, 3, 1, 14, 0, tzinfo=timezone(timedelta(hours=2)))
    assert validate_quit_date(aware, NOW) == datetime(2026, 3, 1, 12, 0)


def test_savings_projection(make_plan):
    savings = calculate_savings(make_plan(NOW, cigarettes_per_day=15, cost_per_pack=8.5))
    assert savings.daily == 6.38
    assert savings.weekly == 44.63
    assert savings.monthly == 191.25
    assert savings.yearly == 2326.88


def test_create_and_read_plan(client):
    assert client.get("/quit-plan").status_code == 404

    resp = client.post("/quit-plan", json=plan_payload())
    assert resp.status_code == 201
    body = resp.json()
    assert body["quit_plan"]["cigarettes_per_pack"] == 20
    assert body["quit_plan"]["motivations"] == ["health", "family"]
    assert body["savings"] == {"daily": 10.0, "weekly": 70.0, "monthly": 300.0, "yearly": 3650.0}

    assert client.get("/quit-plan").json()["quit_plan"]["id"] == body["quit_plan"]["id"]


def test_second_plan_is_rejected(client):
    assert client.post("/quit-plan", json=plan_payload()).status_code == 201
    assert client.post("/quit-plan", json=plan_payload()).status_code == 409


def test_quit_date_outside_window_is_rejected(client):
    resp = client.post("/quit-plan", json=plan_payload(quit_date=(NOW + timedelta(days=30)).isoformat()))
    assert resp.status_code == 400


@pytest.mark.parametrize("overrides", [
    {"cigarettes_per_day": 0},
    {"cigarettes_per_day": 201},
    {"cost_per_pack": 0},
    {"cigarettes_per_pack": 60},
    {"motivations": []},
])
def test_invalid_habits_are_rejected(client, overrides):
    assert client.post("/quit-plan", json=plan_payload(**overrides)).status_code == 422


def test_partial_update(client, clock):
    client.post("/quit-plan", json=plan_payload())
    clock.advance(hours=1)

    resp = client.put("/quit-plan", json={"cost_per_pack": 12.0})
    assert resp.status_code == 200
    plan = resp.json()["quit_plan"]
    assert plan["cost_per_pack"] == 12.0
    assert plan["cigarettes_per_day"] == 20
    assert plan["updated_at"] != plan["created_at"]

    unchanged = client.put("/quit-plan", json={})
    assert unchanged.status_code == 200
    assert unchanged.json()["quit_plan"]["cost_per_pack"] == 12.0


def test_update_without_plan_is_not_found(client):
    assert client.put("/quit-plan", json={"cost_per_pack": 12.0}).status_code == 404


def test_move_quit_date(client):
    client.post("/quit-plan", json=plan_payload())
    new_date = NOW + timedelta(days=3)
    resp = client.put("/quit-plan/quit-date", json={"quit_date": new_date.isoformat()})
    assert resp.status_code == 200
    assert resp.json()["quit_plan"]["quit_date"] == new_date.isoformat()

    too_far = client.put("/quit-plan/quit-date", json={"quit_date": (NOW + timedelta(days=20)).isoformat()})
    assert too_far.status_code == 400
