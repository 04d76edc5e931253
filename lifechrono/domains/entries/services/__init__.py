"""Interval store: time entry CRUD with overlap protection.

Entries of one user on one calendar day never overlap under half-open
``[start, end)`` semantics. The check-then-write sequence for a day runs
inside a per-(user, day) critical section: an in-process keyed lock plus a
``SELECT ... FOR UPDATE`` on that day's lock row, so two concurrent writers
for the same day are serialized both within a process and across processes
on databases with row locks.
"""

from __future__ import annotations

import logging
import math
from contextlib import contextmanager
from datetime import date, datetime, timedelta
from typing import Iterable, Iterator, List, Optional

from sqlalchemy.exc import IntegrityError

from lifechrono.core.categories import Category
from lifechrono.core.errors import AuthorizationError, NotFoundError, ValidationError
from lifechrono.core.utils.dates import to_utc_naive
from lifechrono.core.utils.locks import KeyedLock
from lifechrono.domains.entries.models.entry_models import EntryDayLock, TimeEntry
from lifechrono.domains.recurring.models.recurring_models import RecurringTaskTemplate
from lifechrono.extensions import db

logger = logging.getLogger(__name__)

MIN_DURATION_MINUTES = 1
MAX_DURATION_MINUTES = 1440

_day_locks = KeyedLock()


def compute_duration_minutes(start: datetime, end: datetime) -> int:
    """Whole minutes between two instants, halves rounded up."""
    return math.floor((end - start).total_seconds() / 60 + 0.5)


def intervals_overlap(
    start: datetime, end: datetime, other_start: datetime, other_end: datetime
) -> bool:
    """Half-open overlap test; touching boundaries do not overlap."""
    return start < other_end and end > other_start


def _validated_window(start: datetime, end: datetime) -> tuple[datetime, datetime, int]:
    start, end = to_utc_naive(start), to_utc_naive(end)
    duration = compute_duration_minutes(start, end)
    if duration < MIN_DURATION_MINUTES:
        raise ValidationError("Min 1 minute")
    if duration > MAX_DURATION_MINUTES:
        raise ValidationError("Max 24 hours")
    return start, end, duration


def find_overlap(
    user_id: int,
    day: date,
    start: datetime,
    end: datetime,
    exclude_id: Optional[int] = None,
) -> Optional[TimeEntry]:
    query = TimeEntry.query.filter_by(user_id=user_id, date=day)
    if exclude_id is not None:
        query = query.filter(TimeEntry.id != exclude_id)
    for existing in query.order_by(TimeEntry.start_time.asc()).all():
        if intervals_overlap(start, end, existing.start_time, existing.end_time):
            return existing
    return None


def _ensure_no_overlap(
    user_id: int, start: datetime, end: datetime, exclude_id: Optional[int] = None
) -> None:
    conflict = find_overlap(user_id, start.date(), start, end, exclude_id)
    if conflict:
        raise ValidationError(
            f'Time entry overlaps with existing entry: "{conflict.title}" '
            f"({conflict.start_time:%H:%M} - {conflict.end_time:%H:%M} UTC)"
        )


def _lock_day_row(user_id: int, day: date) -> None:
    query = EntryDayLock.query.filter_by(user_id=user_id, day=day).with_for_update()
    if query.first() is not None:
        return
    db.session.add(EntryDayLock(user_id=user_id, day=day))
    try:
        db.session.flush()
    except IntegrityError:
        # Another process inserted the row first; lock that one instead.
        db.session.rollback()
        query.first()


@contextmanager
def day_guard(user_id: int, days: Iterable[date]) -> Iterator[None]:
    """Serialize mutations of a user's entries on the given days."""
    keys = sorted(set(days))
    with _day_locks.hold_many((user_id, day) for day in keys):
        try:
            for day in keys:
                _lock_day_row(user_id, day)
            yield
        except Exception:
            db.session.rollback()
            raise


def _owned_template(user_id: int, template_id: int) -> RecurringTaskTemplate:
    template = db.session.get(RecurringTaskTemplate, template_id)
    if not template or template.user_id != user_id:
        raise NotFoundError("Recurring task not found")
    return template


def create_entry(
    user_id: int,
    *,
    title: str,
    category: Category | str,
    start_time: datetime,
    end_time: datetime,
    sub_category: str | None = None,
    note: str | None = None,
    recurring_task_id: int | None = None,
) -> TimeEntry:
    title_norm = (title or "").strip()
    if not title_norm:
        raise ValidationError("Title is required")
    start, end, duration = _validated_window(start_time, end_time)
    if recurring_task_id is not None:
        _owned_template(user_id, recurring_task_id)

    with day_guard(user_id, [start.date()]):
        _ensure_no_overlap(user_id, start, end)
        entry = TimeEntry(
            user_id=user_id,
            title=title_norm,
            category=Category(category),
            sub_category=(sub_category or "").strip() or None,
            start_time=start,
            end_time=end,
            duration_minutes=duration,
            date=start.date(),
            note=(note or "").strip() or None,
            is_recurring=recurring_task_id is not None,
            recurring_task_id=recurring_task_id,
        )
        db.session.add(entry)
        db.session.commit()
    logger.debug("Created entry %s for user %s on %s", entry.id, user_id, entry.date)
    return entry


def _owned_entry(user_id: int, entry_id: int) -> TimeEntry:
    entry = db.session.get(TimeEntry, entry_id)
    if not entry:
        raise NotFoundError("Entry not found")
    if entry.user_id != user_id:
        raise AuthorizationError("Access denied")
    return entry


def update_entry(user_id: int, entry_id: int, **fields) -> TimeEntry:
    entry = _owned_entry(user_id, entry_id)

    start = fields.get("start_time") or entry.start_time
    end = fields.get("end_time") or entry.end_time
    times_changed = fields.get("start_time") is not None or fields.get("end_time") is not None

    if "title" in fields and fields["title"] is not None and not fields["title"].strip():
        raise ValidationError("Title is required")

    days = [entry.date]
    if times_changed:
        start, end, duration = _validated_window(start, end)
        days.append(start.date())

    with day_guard(user_id, days):
        if times_changed:
            _ensure_no_overlap(user_id, start, end, exclude_id=entry.id)
            entry.start_time = start
            entry.end_time = end
            entry.duration_minutes = duration
            entry.date = start.date()
        if fields.get("title") is not None:
            entry.title = fields["title"].strip()
        for key in ("sub_category", "note"):
            if fields.get(key) is not None:
                setattr(entry, key, fields[key].strip() or None)
        if fields.get("category") is not None:
            entry.category = Category(fields["category"])
        db.session.commit()
    return entry


def delete_entry(user_id: int, entry_id: int) -> bool:
    entry = _owned_entry(user_id, entry_id)
    db.session.delete(entry)
    db.session.commit()
    return True


def get_by_date(user_id: int, day: date) -> List[TimeEntry]:
    return (
        TimeEntry.query.filter_by(user_id=user_id, date=day)
        .order_by(TimeEntry.start_time.asc())
        .all()
    )


def get_by_range(user_id: int, start: date, end: date) -> List[TimeEntry]:
    """Entries whose calendar day falls within [start, end], inclusive."""
    return (
        TimeEntry.query.filter(
            TimeEntry.user_id == user_id,
            TimeEntry.date >= start,
            TimeEntry.date <= end,
        )
        .order_by(TimeEntry.start_time.asc())
        .all()
    )


def get_by_week(user_id: int, week_start: date) -> List[TimeEntry]:
    return get_by_range(user_id, week_start, week_start + timedelta(days=6))


def logged_dates(user_id: int) -> List[date]:
    """Distinct calendar days with at least one entry, ascending."""
    rows = (
        db.session.query(TimeEntry.date)
        .filter(TimeEntry.user_id == user_id)
        .distinct()
        .order_by(TimeEntry.date.asc())
        .all()
    )
    return [row[0] for row in rows]
