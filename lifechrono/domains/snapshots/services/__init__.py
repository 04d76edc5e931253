"""Snapshot roller: per-user weekly aggregates, upserted idempotently."""

from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from lifechrono.core.categories import Category, sum_minutes
from lifechrono.core.users.models import User
from lifechrono.core.utils.dates import start_of_week, utc_now
from lifechrono.core.utils.numbers import round_half_up
from lifechrono.domains.entries import services as entry_services
from lifechrono.domains.mood import services as mood_services
from lifechrono.domains.snapshots.models.snapshot_models import WeeklySnapshot
from lifechrono.extensions import db

logger = logging.getLogger(__name__)


def aggregate_week(entries, moods) -> dict:
    """Column values for a snapshot from one week's entries and mood logs."""
    hours = {c: m / 60 for c, m in sum_minutes(entries).items()}
    total = sum(hours.values())
    avg_mood = mood_services.average_score(moods)
    days_with_entries = len({e.date for e in entries})
    return {
        "productive_hrs": round_half_up(hours[Category.PRODUCTIVE], 2),
        "leisure_hrs": round_half_up(hours[Category.LEISURE], 2),
        "restoration_hrs": round_half_up(hours[Category.RESTORATION], 2),
        "neutral_hrs": round_half_up(hours[Category.NEUTRAL], 2),
        "total_logged_hrs": round_half_up(total, 2),
        "avg_mood_score": round_half_up(avg_mood, 2) if avg_mood is not None else None,
        "consistency_score": round_half_up(days_with_entries / 7 * 100, 2),
    }


def compute_snapshot_for_user(user_id: int, week_start: date) -> WeeklySnapshot:
    """Aggregate [week_start, week_start + 6] and upsert the user's snapshot row.

    Does not commit; the caller owns the transaction.
    """
    week_end = week_start + timedelta(days=6)
    values = aggregate_week(
        entry_services.get_by_range(user_id, week_start, week_end),
        mood_services.get_by_range(user_id, week_start, week_end),
    )
    snapshot = WeeklySnapshot.query.filter_by(user_id=user_id, week_start=week_start).first()
    if snapshot is None:
        snapshot = WeeklySnapshot(user_id=user_id, week_start=week_start)
        db.session.add(snapshot)
    for key, value in values.items():
        setattr(snapshot, key, value)
    snapshot.computed_at = utc_now()
    db.session.flush()
    return snapshot


def roll_weekly_snapshots(weeks_back: int = 0, today: Optional[date] = None) -> dict:
    """Snapshot every user for the ISO week ``weeks_back`` weeks ago.

    Each user runs in its own transaction; a failure is logged, rolled back
    and counted without stopping the batch.
    """
    week_start = start_of_week(-weeks_back, today).date()
    week_end = week_start + timedelta(days=6)
    user_ids = [row[0] for row in db.session.query(User.id).order_by(User.id.asc()).all()]

    success = failed = 0
    for user_id in user_ids:
        try:
            compute_snapshot_for_user(user_id, week_start)
            db.session.commit()
            success += 1
        except SQLAlchemyError:
            db.session.rollback()
            logger.exception("Snapshot failed for user %s (week %s)", user_id, week_start)
            failed += 1
        except Exception:
            db.session.rollback()
            logger.exception("Unexpected snapshot error for user %s (week %s)", user_id, week_start)
            failed += 1

    logger.info(
        "Weekly snapshots for %s done: %s success, %s failed", week_start, success, failed
    )
    return {
        "successCount": success,
        "failedCount": failed,
        "weekStart": week_start.isoformat(),
        "weekEnd": week_end.isoformat(),
    }


def list_snapshots(user_id: int, start: Optional[date] = None, end: Optional[date] = None):
    query = WeeklySnapshot.query.filter(WeeklySnapshot.user_id == user_id)
    if start is not None:
        query = query.filter(WeeklySnapshot.week_start >= start)
    if end is not None:
        query = query.filter(WeeklySnapshot.week_start <= end)
    return query.order_by(WeeklySnapshot.week_start.asc()).all()
