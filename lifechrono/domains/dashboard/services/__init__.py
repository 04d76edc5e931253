"""Weekly dashboard aggregation and logging streaks."""

from __future__ import annotations

from datetime import date, timedelta
from typing import Dict, Iterable, Optional

from lifechrono.core.categories import CATEGORIES, keyed, sum_minutes, to_hours
from lifechrono.core.users.services import get_me, resolve_goals
from lifechrono.core.utils.dates import HOURS_PER_WEEK, group_by_day, iso, utc_today, week_start_for
from lifechrono.core.utils.numbers import round_half_up, round_int
from lifechrono.domains.entries import services as entry_services
from lifechrono.domains.mood import services as mood_services

STREAK_GREEN = "green"
STREAK_AMBER = "amber"
STREAK_NONE = "none"


def compute_streak(logged: Iterable[date], today: date) -> Dict[str, object]:
    """Consecutive logged days ending today, or ending yesterday as a grace day.

    Logging today gives a green streak counted from today. Without an entry
    today, a streak that reaches yesterday is still alive (amber) and is
    counted from yesterday. Anything else is no streak.
    """
    days = set(logged)
    if today in days:
        cursor, status = today, STREAK_GREEN
    elif today - timedelta(days=1) in days:
        cursor, status = today - timedelta(days=1), STREAK_AMBER
    else:
        return {"days": 0, "status": STREAK_NONE}

    count = 0
    while cursor in days:
        count += 1
        cursor -= timedelta(days=1)
    return {"days": count, "status": status}


def longest_streak(logged: Iterable[date]) -> Dict[str, Optional[object]]:
    """Longest run of consecutive distinct days; the earliest run wins ties."""
    days = sorted(set(logged))
    if not days:
        return {"days": 0, "start_date": None, "end_date": None}

    best_len, best_start, best_end = 1, days[0], days[0]
    run_len, run_start = 1, days[0]
    for prev, current in zip(days, days[1:]):
        if current - prev == timedelta(days=1):
            run_len += 1
        else:
            run_len, run_start = 1, current
        if run_len > best_len:
            best_len, best_start, best_end = run_len, run_start, current
    return {"days": best_len, "start_date": best_start, "end_date": best_end}


def current_streak(user_id: int, today: Optional[date] = None) -> Dict[str, object]:
    return compute_streak(entry_services.logged_dates(user_id), today or utc_today())


def goal_progress(logged_hours: float, goal: float) -> Dict[str, object]:
    return {
        "logged": round_half_up(logged_hours, 2),
        "goal": goal,
        "percent": round_int(logged_hours / goal * 100) if goal > 0 else 0,
        "remaining": round_half_up(goal - logged_hours, 2),
        "met": logged_hours >= goal,
    }


def get_weekly_dashboard(user_id: int, week_start: Optional[date] = None, today: Optional[date] = None) -> dict:
    today = today or utc_today()
    week_start = week_start_for(week_start or today)
    user = get_me(user_id)

    entries = entry_services.get_by_week(user_id, week_start)
    minutes = sum_minutes(entries)
    breakdown = to_hours(minutes)
    logged_hours = sum(minutes.values()) / 60
    goals = resolve_goals(user)

    daily = []
    for day, day_entries in group_by_day(entries, week_start, 7).items():
        daily.append({"date": day.isoformat(), **keyed(to_hours(sum_minutes(day_entries)))})

    today_entries = [e for e in entries if e.date == today]
    today_minutes = sum_minutes(today_entries)
    today_summary = {
        "date": today.isoformat(),
        **keyed(to_hours(today_minutes)),
        "totalLogged": round_half_up(sum(today_minutes.values()) / 60, 2),
        "entryCount": len(today_entries),
        "missing": [c.value for c in CATEGORIES if today_minutes[c] == 0],
    }

    moods = mood_services.get_by_range(user_id, week_start, week_start + timedelta(days=6))
    avg_mood = mood_services.average_score(moods)

    return {
        "weekStart": iso(week_start),
        "weekEnd": iso(week_start + timedelta(days=6)),
        "totalHours": HOURS_PER_WEEK,
        "loggedHours": round_half_up(logged_hours, 2),
        "unloggedHours": round_half_up(HOURS_PER_WEEK - logged_hours, 2),
        "breakdown": keyed(breakdown),
        "goals": keyed(goals),
        "goalProgress": {
            c.value: goal_progress(minutes[c] / 60, goals[c]) for c in CATEGORIES
        },
        "dailyBreakdown": daily,
        "todaySummary": today_summary,
        "avgMoodScore": round_half_up(avg_mood, 1) if avg_mood is not None else None,
        "streak": current_streak(user_id, today),
    }
