from datetime import timedelta

import pytest

from smokefree.statistics.service import (
    build_statistics,
    calculate_cigarettes_not_smoked,
    calculate_life_regained,
    calculate_money_saved,
    calculate_smoke_free_duration,
    get_user_statistics,
    round_currency,
)
from tests.conftest import NOW


def test_future_quit_date_yields_zero_duration():
    duration = calculate_smoke_free_duration(NOW + timedelta(days=2), NOW)
    assert duration.model_dump() == {
        "days": 0, "hours": 0, "minutes": 0, "seconds": 0,
        "total_seconds": 0, "total_minutes": 0, "total_hours": 0, "total_days": 0,
    }


@pytest.mark.parametrize("elapsed", [
    timedelta(0),
    timedelta(seconds=59),
    timedelta(hours=25),
    timedelta(days=3, hours=5, minutes=7, seconds=9, microseconds=999999),
    timedelta(days=400, minutes=1),
])
def test_duration_decomposition_is_consistent(elapsed):
    d = calculate_smoke_free_duration(NOW - elapsed, NOW)
    assert d.days * 86400 + d.hours * 3600 + d.minutes * 60 + d.seconds == d.total_seconds
    assert d.total_seconds == int(elapsed.total_seconds())
    assert 0 <= d.hours < 24 and 0 <= d.minutes < 60 and 0 <= d.seconds < 60


def test_ten_days_of_a_pack_a_day():
    duration = calculate_smoke_free_duration(NOW - timedelta(days=10), NOW)
    assert calculate_money_saved(20, 10, 20, duration) == 100.00
    assert calculate_cigarettes_not_smoked(20, duration) == 200


def test_partial_day_counts_proportionally():
    duration = calculate_smoke_free_duration(NOW - timedelta(days=1, hours=12), NOW)
    assert calculate_money_saved(20, 10, 20, duration) == 15.00
    assert calculate_cigarettes_not_smoked(20, duration) == 30


def test_cigarettes_not_smoked_is_floored():
    duration = calculate_smoke_free_duration(NOW - timedelta(hours=25), NOW)
    # 20 * (1 + 1/24) = 20.83
    assert calculate_cigarettes_not_smoked(20, duration) == 20


def test_money_saved_never_decreases():
    quit_date = NOW - timedelta(days=3)
    previous = -1.0
    for minutes in range(0, 60 * 24 * 3, 37):
        now = quit_date + timedelta(minutes=minutes)
        saved = calculate_money_saved(17, 12.49, 20, calculate_smoke_free_duration(quit_date, now))
        assert saved >= previous
        previous = saved


@pytest.mark.parametrize("amount,expected", [
    (2.675, 2.68),
    (1.005, 1.01),
    (6.374, 6.37),
    (0, 0.0),
])
def test_round_currency_rounds_half_up(amount, expected):
    assert round_currency(amount) == expected


def test_life_regained():
    life = calculate_life_regained(200)
    assert (life.minutes, life.hours, life.days) == (2200, 36, 1)


def test_build_statistics_streak_matches_days(make_plan):
    plan = make_plan(NOW - timedelta(days=10, hours=3))
    stats = build_statistics(plan, NOW)
    assert stats.current_streak == 10
    assert stats.smoke_free_time.total_days == 10
    assert stats.quit_date == plan.quit_date
    assert stats.money_saved == round_currency(10 * (10 + 3 / 24))


def test_statistics_absent_without_plan(db, user):
    assert get_user_statistics(db, user.id, NOW) is None


def test_statistics_for_future_quit_date(make_plan, db, user):
    make_plan(NOW + timedelta(days=3))
    stats = get_user_statistics(db, user.id, NOW)
    assert stats.money_saved == 0
    assert stats.cigarettes_not_smoked == 0
    assert stats.current_streak == 0
