"""Mood log services: append check-ins, summarize per day."""

from __future__ import annotations

from collections import OrderedDict
from datetime import date
from typing import Dict, Iterable, List, Optional

from lifechrono.core.errors import ValidationError
from lifechrono.core.utils.dates import utc_today
from lifechrono.core.utils.numbers import clamp, round_half_up, round_int
from lifechrono.domains.mood.models.mood_models import MoodLog
from lifechrono.extensions import db

MIN_SCORE = 1
MAX_SCORE = 5


def log_mood(user_id: int, score: int, note: Optional[str] = None, today: Optional[date] = None) -> MoodLog:
    """Append a mood check-in dated today (UTC)."""
    if isinstance(score, bool) or not isinstance(score, int) or not MIN_SCORE <= score <= MAX_SCORE:
        raise ValidationError("Mood score must be an integer between 1 and 5")
    log = MoodLog(
        user_id=user_id,
        date=today or utc_today(),
        score=score,
        note=(note or "").strip() or None,
    )
    db.session.add(log)
    db.session.commit()
    return log


def list_moods(user_id: int) -> List[MoodLog]:
    return (
        MoodLog.query.filter_by(user_id=user_id)
        .order_by(MoodLog.date.desc(), MoodLog.created_at.desc(), MoodLog.id.desc())
        .all()
    )


def get_by_range(user_id: int, start: date, end: date) -> List[MoodLog]:
    return (
        MoodLog.query.filter(
            MoodLog.user_id == user_id,
            MoodLog.date >= start,
            MoodLog.date <= end,
        )
        .order_by(MoodLog.date.asc(), MoodLog.created_at.asc(), MoodLog.id.asc())
        .all()
    )


def average_score(logs: Iterable[MoodLog]) -> Optional[float]:
    scores = [log.score for log in logs]
    if not scores:
        return None
    return sum(scores) / len(scores)


def summarize_day(day: date, logs: List[MoodLog]) -> Optional[dict]:
    """Daily summary of a day's check-ins, or None when there are none.

    ``logs`` must be in chronological order; the latest note wins.
    """
    avg = average_score(logs)
    if avg is None:
        return None
    notes = [log.note for log in logs if log.note]
    return {
        "date": day,
        "avg_score": round_half_up(avg, 1),
        "rounded_score": int(clamp(round_int(avg), MIN_SCORE, MAX_SCORE)),
        "count": len(logs),
        "latest_note": notes[-1] if notes else None,
        "logs": logs,
    }


def daily_summaries(user_id: int, start: date, end: date) -> Dict[date, dict]:
    """Summaries keyed by day for every day in range that has check-ins."""
    by_day: Dict[date, List[MoodLog]] = OrderedDict()
    for log in get_by_range(user_id, start, end):
        by_day.setdefault(log.date, []).append(log)
    return {day: summarize_day(day, logs) for day, logs in by_day.items()}


def get_today_summary(user_id: int, today: Optional[date] = None) -> Optional[dict]:
    today = today or utc_today()
    return summarize_day(today, get_by_range(user_id, today, today))
