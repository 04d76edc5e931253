"""The four fixed activity categories."""

from __future__ import annotations

import enum
from typing import Dict, Iterable, TypeVar

from lifechrono.core.utils.numbers import round_half_up

V = TypeVar("V")


class Category(str, enum.Enum):
    PRODUCTIVE = "productive"
    LEISURE = "leisure"
    RESTORATION = "restoration"
    NEUTRAL = "neutral"

    @property
    def label(self) -> str:
        return self.value.capitalize()


CATEGORIES = tuple(Category)

# Targets used whenever a user has not declared weekly goals.
DEFAULT_WEEKLY_GOALS: Dict[Category, float] = {
    Category.PRODUCTIVE: 40,
    Category.LEISURE: 28,
    Category.RESTORATION: 56,
    Category.NEUTRAL: 20,
}


def per_category(value: V) -> Dict[Category, V]:
    """A mapping with one slot for every category."""
    return {category: value for category in CATEGORIES}


def sum_minutes(entries: Iterable) -> Dict[Category, int]:
    totals = per_category(0)
    for entry in entries:
        totals[Category(entry.category)] += entry.duration_minutes
    return totals


def to_hours(minutes: Dict[Category, int], ndigits: int = 2) -> Dict[Category, float]:
    return {category: round_half_up(value / 60, ndigits) for category, value in minutes.items()}


def keyed(mapping: Dict[Category, V]) -> Dict[str, V]:
    """JSON-friendly copy keyed by category value."""
    return {category.value: mapping[category] for category in CATEGORIES}
