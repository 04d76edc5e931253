"""Shared test helpers."""

from __future__ import annotations

from datetime import datetime, timedelta

from lifechrono.core.auth.services import issue_tokens


def auth_headers(user) -> dict[str, str]:
    tokens = issue_tokens(user)
    return {"Authorization": f"Bearer {tokens['access_token']}"}


def at(day, hour: int, minute: int = 0) -> datetime:
    """Naive UTC datetime on ``day`` at hour:minute."""
    return datetime(day.year, day.month, day.day, hour, minute)


def span(day, hour: int, minutes: int, minute: int = 0) -> tuple[datetime, datetime]:
    start = at(day, hour, minute)
    return start, start + timedelta(minutes=minutes)
