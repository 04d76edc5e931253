"""Recurring task templates and the daily suggestion matcher."""

from __future__ import annotations

from datetime import date
from typing import List, Sequence

from lifechrono.core.categories import Category
from lifechrono.core.errors import AuthorizationError, NotFoundError, ValidationError
from lifechrono.domains.entries.models.entry_models import TimeEntry
from lifechrono.domains.recurring.models.recurring_models import RecurringTaskTemplate
from lifechrono.extensions import db


def sunday_weekday(day: date) -> int:
    """Weekday number with Sunday=0 .. Saturday=6."""
    return day.isoweekday() % 7


def _clean_days(days: Sequence[int]) -> List[int]:
    days = sorted(set(int(d) for d in days))
    if any(d < 0 or d > 6 for d in days):
        raise ValidationError("days_of_week values must be between 0 and 6")
    return days


def _check_duration(minutes: int) -> int:
    if not 1 <= minutes <= 1440:
        raise ValidationError("default_duration must be between 1 and 1440 minutes")
    return minutes


def create_template(
    user_id: int,
    *,
    title: str,
    category: Category | str,
    default_duration: int,
    days_of_week: Sequence[int] = (),
) -> RecurringTaskTemplate:
    title = (title or "").strip()
    if not title:
        raise ValidationError("Title is required")
    template = RecurringTaskTemplate(
        user_id=user_id,
        title=title,
        category=Category(category),
        default_duration=_check_duration(default_duration),
        days_of_week=_clean_days(days_of_week),
        is_active=True,
    )
    db.session.add(template)
    db.session.commit()
    return template


def list_templates(user_id: int) -> List[RecurringTaskTemplate]:
    return (
        RecurringTaskTemplate.query.filter_by(user_id=user_id)
        .order_by(RecurringTaskTemplate.id.asc())
        .all()
    )


def _owned(user_id: int, template_id: int) -> RecurringTaskTemplate:
    template = db.session.get(RecurringTaskTemplate, template_id)
    if not template:
        raise NotFoundError("Task not found")
    if template.user_id != user_id:
        raise AuthorizationError("Access denied")
    return template


def update_template(user_id: int, template_id: int, **fields) -> RecurringTaskTemplate:
    template = _owned(user_id, template_id)
    if fields.get("title") is not None:
        title = fields["title"].strip()
        if not title:
            raise ValidationError("Title is required")
        template.title = title
    if fields.get("category") is not None:
        template.category = Category(fields["category"])
    if fields.get("default_duration") is not None:
        template.default_duration = _check_duration(fields["default_duration"])
    if fields.get("days_of_week") is not None:
        template.days_of_week = _clean_days(fields["days_of_week"])
    if fields.get("is_active") is not None:
        template.is_active = bool(fields["is_active"])
    db.session.commit()
    return template


def delete_template(user_id: int, template_id: int) -> bool:
    template = _owned(user_id, template_id)
    # Entries keep their history; the reference is cleared.
    TimeEntry.query.filter_by(recurring_task_id=template.id).update(
        {TimeEntry.recurring_task_id: None}, synchronize_session=False
    )
    db.session.delete(template)
    db.session.commit()
    return True


def get_suggestions(user_id: int, day: date) -> List[RecurringTaskTemplate]:
    """Active templates scheduled on ``day`` that have no entry that day yet."""
    weekday = sunday_weekday(day)
    templates = [
        t
        for t in RecurringTaskTemplate.query.filter_by(user_id=user_id, is_active=True)
        .order_by(RecurringTaskTemplate.id.asc())
        .all()
        if t.runs_on(weekday)
    ]
    if not templates:
        return []
    logged_ids = {
        row[0]
        for row in db.session.query(TimeEntry.recurring_task_id)
        .filter(
            TimeEntry.user_id == user_id,
            TimeEntry.date == day,
            TimeEntry.recurring_task_id.in_([t.id for t in templates]),
        )
        .all()
    }
    return [t for t in templates if t.id not in logged_ids]
