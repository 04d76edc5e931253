"""Context assembly for insight generation.

Everything here is a pure read of stored entries, mood logs and goals for
one user and one period. The resulting ``InsightContext`` is what both the
narrative styles and the generative model prompt are built from.
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Dict, List, Optional

from lifechrono.core.categories import CATEGORIES, Category, keyed, sum_minutes
from lifechrono.core.insights.models import PERIOD_MONTH, PERIOD_WEEK
from lifechrono.core.users.services import get_me, resolve_goals
from lifechrono.core.utils.dates import HOURS_PER_WEEK, group_by_day, iso, utc_today
from lifechrono.core.utils.numbers import round_half_up
from lifechrono.domains.dashboard.services import current_streak
from lifechrono.domains.entries import services as entry_services
from lifechrono.domains.mood import services as mood_services


@dataclass
class DayContext:
    day: date
    hours: Dict[Category, float]
    total_logged: float
    mood_avg: Optional[float] = None
    mood_rounded: Optional[int] = None
    mood_count: int = 0
    mood_note: Optional[str] = None

    @property
    def label(self) -> str:
        return calendar.day_abbr[self.day.weekday()]

    @property
    def weekday_name(self) -> str:
        return calendar.day_name[self.day.weekday()]

    def to_dict(self) -> dict:
        return {
            "day": self.label,
            "date": iso(self.day),
            **keyed(self.hours),
            "totalLogged": self.total_logged,
            "mood": self.mood_avg,
            "moodRounded": self.mood_rounded,
            "moodCount": self.mood_count,
            "moodNote": self.mood_note,
        }


@dataclass
class InsightContext:
    user_name: str
    period: str
    period_start: date
    period_end: date
    member_since: Optional[date]
    goals: Dict[Category, float]
    actual_hours: Dict[Category, float]
    daily: List[DayContext]
    logged_hours: float
    unlogged_hours: float
    period_hours: int
    coverage: float
    days_with_entries: int
    mood_days: int
    avg_mood: Optional[float]
    streak_days: int
    previous_period_hours: Dict[Category, float] = field(default_factory=dict)

    @property
    def period_days(self) -> int:
        return (self.period_end - self.period_start).days + 1

    @property
    def period_label(self) -> str:
        return "month" if self.period == PERIOD_MONTH else "week"

    @property
    def dominant_category(self) -> Optional[Category]:
        """Category with the most hours; None when nothing was logged."""
        if self.logged_hours <= 0:
            return None
        return max(CATEGORIES, key=lambda c: self.actual_hours[c])

    def to_prompt_dict(self) -> dict:
        return {
            "userName": self.user_name,
            "period": self.period,
            "periodStart": iso(self.period_start),
            "periodEnd": iso(self.period_end),
            "memberSince": iso(self.member_since),
            "weeklyGoals": keyed(self.goals),
            "actualHours": keyed(self.actual_hours),
            "loggedHours": self.logged_hours,
            "unloggedHours": self.unlogged_hours,
            "periodHours": self.period_hours,
            "trackingCoverage": f"{self.coverage:.1f}%",
            "daysWithEntries": self.days_with_entries,
            "moodDays": self.mood_days,
            "avgMood": self.avg_mood,
            "dailyBreakdown": [day.to_dict() for day in self.daily],
            "previousPeriodHours": keyed(self.previous_period_hours),
            "streakDays": self.streak_days,
        }


def previous_period(period: str, start: date, end: date) -> tuple[date, date]:
    """The period immediately before ``start``: prior week or prior calendar month."""
    if period == PERIOD_MONTH:
        prev_end = start - timedelta(days=1)
        return prev_end.replace(day=1), prev_end
    length = (end - start).days + 1
    return start - timedelta(days=length), start - timedelta(days=1)


def _hours(entries) -> Dict[Category, float]:
    return {c: round_half_up(m / 60, 2) for c, m in sum_minutes(entries).items()}


def assemble_context(
    user_id: int,
    start: date,
    end: date,
    period: str = PERIOD_WEEK,
    today: Optional[date] = None,
) -> InsightContext:
    user = get_me(user_id)
    entries = entry_services.get_by_range(user_id, start, end)
    days = (end - start).days + 1
    moods = mood_services.daily_summaries(user_id, start, end)

    daily: List[DayContext] = []
    for day, day_entries in group_by_day(entries, start, days).items():
        minutes = sum_minutes(day_entries)
        mood = moods.get(day)
        daily.append(
            DayContext(
                day=day,
                hours={c: round_half_up(m / 60, 2) for c, m in minutes.items()},
                total_logged=round_half_up(sum(minutes.values()) / 60, 2),
                mood_avg=mood["avg_score"] if mood else None,
                mood_rounded=mood["rounded_score"] if mood else None,
                mood_count=mood["count"] if mood else 0,
                mood_note=mood["latest_note"] if mood else None,
            )
        )

    logged_minutes = sum(e.duration_minutes for e in entries)
    logged_hours = logged_minutes / 60
    period_hours = days * 24
    all_moods = [log for summary in moods.values() for log in summary["logs"]]
    avg_mood = mood_services.average_score(all_moods)
    prev_start, prev_end = previous_period(period, start, end)

    return InsightContext(
        user_name=user.name or "there",
        period=period,
        period_start=start,
        period_end=end,
        member_since=user.created_at.date() if user.created_at else None,
        goals=resolve_goals(user),
        actual_hours=_hours(entries),
        daily=daily,
        logged_hours=round_half_up(logged_hours, 2),
        unlogged_hours=round_half_up(HOURS_PER_WEEK - logged_hours, 2),
        period_hours=period_hours,
        coverage=logged_hours / period_hours * 100,
        days_with_entries=len({e.date for e in entries}),
        mood_days=len(moods),
        avg_mood=round_half_up(avg_mood, 1) if avg_mood is not None else None,
        streak_days=int(current_streak(user_id, today or utc_today())["days"]),
        previous_period_hours=_hours(entry_services.get_by_range(user_id, prev_start, prev_end)),
    )
