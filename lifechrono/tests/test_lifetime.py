"""Lifetime statistics built from weekly snapshots."""

from datetime import date, datetime, timedelta

import pytest

pytestmark = pytest.mark.integration

from lifechrono.domains.entries.services import create_entry
from lifechrono.domains.lifetime.services import get_monthly, get_mood_correlation, get_stats
from lifechrono.domains.snapshots.models.snapshot_models import WeeklySnapshot
from lifechrono.extensions import db
from lifechrono.tests.helpers import span


def _snapshot(user_id, week_start, productive=0.0, restoration=0.0, consistency=0.0, mood=None):
    snap = WeeklySnapshot(
        user_id=user_id,
        week_start=week_start,
        productive_hrs=productive,
        leisure_hrs=0.0,
        restoration_hrs=restoration,
        neutral_hrs=0.0,
        total_logged_hrs=productive + restoration,
        avg_mood_score=mood,
        consistency_score=consistency,
    )
    db.session.add(snap)
    db.session.commit()
    return snap


def test_stats_totals_and_records(app, make_user):
    user = make_user(name="River", created_at=datetime(2026, 1, 1))
    _snapshot(user.id, date(2026, 1, 5), productive=20, restoration=50, consistency=57.14)
    _snapshot(user.id, date(2026, 1, 12), productive=30, restoration=50, consistency=100)
    _snapshot(user.id, date(2026, 1, 19), productive=30, restoration=40, consistency=42.86)

    stats = get_stats(user.id)
    assert stats["userName"] == "River"
    assert stats["memberSince"] == "2026-01-01"
    assert stats["memberDays"] >= 0
    assert stats["weeksTracked"] == 3
    assert stats["totals"]["productive"] == 80
    assert stats["totals"]["total"] == 220
    assert stats["avgConsistency"] == 66.7

    records = stats["records"]
    # Ties go to the earliest week.
    assert records["bestProductiveWeek"] == {"value": 30, "weekStart": "2026-01-12"}
    assert records["bestRestorationWeek"] == {"value": 50, "weekStart": "2026-01-05"}
    assert records["bestConsistencyWeek"] == {"value": 100, "weekStart": "2026-01-12"}


def test_zero_weeks_are_not_records(app, user):
    _snapshot(user.id, date(2026, 1, 5))
    records = get_stats(user.id)["records"]
    assert records["bestProductiveWeek"] is None
    assert records["bestConsistencyWeek"] is None
    assert records["longestStreak"] == {"value": 0, "startDate": None, "endDate": None}


def test_longest_streak_from_entries(app, user):
    first = date(2026, 2, 1)
    for offset in (0, 1, 2, 5, 6):
        start, end = span(first + timedelta(days=offset), 9, 30)
        create_entry(user.id, title="Log", category="neutral", start_time=start, end_time=end)
    assert get_stats(user.id)["records"]["longestStreak"] == {
        "value": 3,
        "startDate": "2026-02-01",
        "endDate": "2026-02-03",
    }


def test_monthly_buckets_by_week_start(app, user):
    _snapshot(user.id, date(2026, 1, 26), productive=10)
    _snapshot(user.id, date(2026, 2, 2), productive=5, restoration=2.25)
    _snapshot(user.id, date(2025, 12, 29), productive=99)

    months = get_monthly(user.id, 2026)
    assert len(months) == 12
    assert months[0]["month"] == "Jan"
    assert months[0]["productive"] == 10
    assert months[1]["monthIndex"] == 1
    assert months[1]["restoration"] == 2.3
    assert months[1]["totalLogged"] == 7.3
    assert months[11]["totalLogged"] == 0


def test_mood_correlation_window(app, user):
    start = date(2025, 1, 6)
    for week in range(30):
        _snapshot(user.id, start + timedelta(weeks=week), productive=week, mood=3.0 if week % 2 == 0 else None)
    series = get_mood_correlation(user.id, limit=5)
    weeks = [row["weekStart"] for row in series]
    assert weeks == sorted(weeks)
    assert len(series) == 5
    assert series[-1]["weekStart"] == (start + timedelta(weeks=28)).isoformat()


def test_lifetime_api(client, headers):
    assert client.get("/api/lifetime/stats", headers=headers).get_json()["stats"]["weeksTracked"] == 0
    monthly = client.get("/api/lifetime/monthly?year=2026", headers=headers).get_json()
    assert monthly["year"] == 2026
    assert len(monthly["months"]) == 12
    assert client.get("/api/lifetime/monthly?year=12", headers=headers).status_code == 400
    assert client.get("/api/lifetime/mood-correlation", headers=headers).get_json()["weeks"] == []
