"""User service layer: profile lookups and weekly goals."""

from __future__ import annotations

from typing import Dict, Mapping, Optional

from lifechrono.core.categories import CATEGORIES, DEFAULT_WEEKLY_GOALS, Category
from lifechrono.core.errors import NotFoundError, ValidationError
from lifechrono.core.utils.dates import HOURS_PER_WEEK
from lifechrono.core.users.models import User
from lifechrono.extensions import db


def get_user(user_id: int) -> Optional[User]:
    return db.session.get(User, user_id)


def get_me(user_id: int) -> User:
    user = get_user(user_id)
    if not user:
        raise NotFoundError("User not found")
    return user


def resolve_goals(user: Optional[User]) -> Dict[Category, float]:
    """Declared weekly goals with per-category defaults filled in."""
    stored = (user.weekly_goals if user else None) or {}
    return {
        category: float(stored.get(category.value, DEFAULT_WEEKLY_GOALS[category]))
        for category in CATEGORIES
    }


def validate_weekly_goals(goals: Mapping[str, float]) -> Dict[str, float]:
    values = {category.value: float(goals.get(category.value, 0) or 0) for category in CATEGORIES}
    if any(v < 0 for v in values.values()):
        raise ValidationError("Goal values cannot be negative")
    total = sum(values.values())
    if total > HOURS_PER_WEEK:
        raise ValidationError(
            f"Total hours cannot exceed {HOURS_PER_WEEK}. Current sum: {total:g}"
        )
    return values


def update_weekly_goals(user_id: int, goals: Mapping[str, float]) -> User:
    user = get_me(user_id)
    user.weekly_goals = validate_weekly_goals(goals)
    db.session.commit()
    return user
