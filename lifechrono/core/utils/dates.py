"""Calendar bucketing: ISO week and calendar month bounds in UTC.

All values are naive and expressed in UTC, matching how timestamps are
stored. Week and month bounds are only used as query ranges and grouping
keys; nothing here shifts into a local timezone.
"""

from __future__ import annotations

import calendar
from collections import OrderedDict
from datetime import date, datetime, time, timedelta, timezone
from typing import Dict, Iterable, List, Optional, Protocol, TypeVar

HOURS_PER_WEEK = 168
DAY_LABELS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
# 23:59:59.999, the last millisecond of a day.
END_OF_DAY = time(23, 59, 59, 999000)


def utc_now() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def utc_today() -> date:
    return utc_now().date()


def to_utc_naive(value: datetime) -> datetime:
    """Convert an aware datetime to naive UTC; naive values are assumed UTC."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def week_start_for(day: date) -> date:
    """Monday of the ISO week containing ``day``."""
    return day - timedelta(days=day.weekday())


def start_of_week(offset_weeks: int = 0, today: Optional[date] = None) -> datetime:
    """Most recent Monday 00:00 UTC, shifted by ``offset_weeks`` weeks."""
    today = today or utc_today()
    monday = week_start_for(today) + timedelta(days=7 * offset_weeks)
    return datetime.combine(monday, time.min)


def end_of_week(offset_weeks: int = 0, today: Optional[date] = None) -> datetime:
    start = start_of_week(offset_weeks, today)
    return datetime.combine(start.date() + timedelta(days=6), END_OF_DAY)


def _shift_month(year: int, month: int, offset: int) -> tuple[int, int]:
    index = year * 12 + (month - 1) + offset
    return index // 12, index % 12 + 1


def start_of_month(offset_months: int = 0, today: Optional[date] = None) -> datetime:
    today = today or utc_today()
    year, month = _shift_month(today.year, today.month, offset_months)
    return datetime(year, month, 1)


def end_of_month(offset_months: int = 0, today: Optional[date] = None) -> datetime:
    today = today or utc_today()
    year, month = _shift_month(today.year, today.month, offset_months)
    last_day = calendar.monthrange(year, month)[1]
    return datetime.combine(date(year, month, last_day), END_OF_DAY)


def days_in_range(start: date, end: date) -> List[date]:
    """Inclusive list of calendar days between two dates."""
    if end < start:
        return []
    return [start + timedelta(days=i) for i in range((end - start).days + 1)]


class _Dated(Protocol):
    date: date


T = TypeVar("T", bound=_Dated)


def group_by_day(items: Iterable[T], start: date, days: int = 7) -> Dict[date, List[T]]:
    """Bucket dated records into ``days`` consecutive slots starting at ``start``.

    Every slot is present (possibly empty) and slots keep calendar order;
    records outside the window are ignored.
    """
    buckets: Dict[date, List[T]] = OrderedDict(
        (start + timedelta(days=i), []) for i in range(days)
    )
    for item in items:
        bucket = buckets.get(item.date)
        if bucket is not None:
            bucket.append(item)
    return buckets


def iso(day: Optional[date]) -> Optional[str]:
    return day.isoformat() if day else None
