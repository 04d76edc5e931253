"""Lifetime views over weekly snapshots."""

from __future__ import annotations

import calendar
from datetime import date
from typing import Callable, Optional

from lifechrono.core.users.services import get_me
from lifechrono.core.utils.dates import iso, utc_now
from lifechrono.core.utils.numbers import round_half_up
from lifechrono.domains.dashboard.services import longest_streak
from lifechrono.domains.entries import services as entry_services
from lifechrono.domains.snapshots.models.snapshot_models import WeeklySnapshot
from lifechrono.domains.snapshots.services import list_snapshots

MOOD_CORRELATION_WEEKS = 24


def _record(snapshots, value_of: Callable[[WeeklySnapshot], float]) -> Optional[dict]:
    """Snapshot with the strictly greatest positive value; earliest wins ties."""
    best = None
    for snap in snapshots:
        if value_of(snap) > (value_of(best) if best is not None else 0):
            best = snap
    if best is None:
        return None
    return {"value": round_half_up(value_of(best), 1), "weekStart": iso(best.week_start)}


def get_stats(user_id: int) -> dict:
    user = get_me(user_id)
    snapshots = list_snapshots(user_id)

    totals = {
        "productive": sum(s.productive_hrs for s in snapshots),
        "leisure": sum(s.leisure_hrs for s in snapshots),
        "restoration": sum(s.restoration_hrs for s in snapshots),
        "neutral": sum(s.neutral_hrs for s in snapshots),
        "total": sum(s.total_logged_hrs for s in snapshots),
    }
    avg_consistency = (
        sum(s.consistency_score for s in snapshots) / len(snapshots) if snapshots else 0
    )
    member_since = user.created_at or utc_now()
    streak = longest_streak(entry_services.logged_dates(user_id))

    return {
        "userName": user.name,
        "memberSince": iso(member_since.date()),
        "memberDays": (utc_now() - member_since).days,
        "weeksTracked": len(snapshots),
        "totals": {key: round_half_up(value, 1) for key, value in totals.items()},
        "avgConsistency": round_half_up(avg_consistency, 1),
        "records": {
            "bestProductiveWeek": _record(snapshots, lambda s: s.productive_hrs),
            "bestRestorationWeek": _record(snapshots, lambda s: s.restoration_hrs),
            "bestConsistencyWeek": _record(snapshots, lambda s: s.consistency_score),
            "longestStreak": {
                "value": streak["days"],
                "startDate": iso(streak["start_date"]),
                "endDate": iso(streak["end_date"]),
            },
        },
    }


def get_monthly(user_id: int, year: int) -> list:
    """Twelve month slots of snapshot hours, bucketed by each week's start month."""
    months = [
        {
            "month": calendar.month_abbr[i + 1],
            "monthIndex": i,
            "productive": 0.0,
            "leisure": 0.0,
            "restoration": 0.0,
            "neutral": 0.0,
            "totalLogged": 0.0,
        }
        for i in range(12)
    ]
    for snap in list_snapshots(user_id, date(year, 1, 1), date(year, 12, 31)):
        slot = months[snap.week_start.month - 1]
        slot["productive"] += snap.productive_hrs
        slot["leisure"] += snap.leisure_hrs
        slot["restoration"] += snap.restoration_hrs
        slot["neutral"] += snap.neutral_hrs
        slot["totalLogged"] += snap.total_logged_hrs

    for slot in months:
        for key in ("productive", "leisure", "restoration", "neutral", "totalLogged"):
            slot[key] = round_half_up(slot[key], 1)
    return months


def get_mood_correlation(user_id: int, limit: int = MOOD_CORRELATION_WEEKS) -> list:
    recent = (
        WeeklySnapshot.query.filter(
            WeeklySnapshot.user_id == user_id,
            WeeklySnapshot.avg_mood_score.isnot(None),
        )
        .order_by(WeeklySnapshot.week_start.desc())
        .limit(limit)
        .all()
    )
    return [
        {
            "weekStart": iso(s.week_start),
            "avgMoodScore": round_half_up(s.avg_mood_score, 2),
            "productiveHrs": round_half_up(s.productive_hrs, 1),
            "totalLoggedHrs": round_half_up(s.total_logged_hrs, 1),
            "consistencyScore": round_half_up(s.consistency_score, 1),
        }
        for s in reversed(recent)
    ]
