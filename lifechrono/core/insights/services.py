"""Insight generation, persistence and period lookups."""

from __future__ import annotations

import json
import logging
from datetime import date
from typing import List, Optional, Tuple

from flask import current_app
from sqlalchemy.exc import IntegrityError

from lifechrono.core.errors import ExternalServiceError
from lifechrono.core.insights.ai_client import client_from_config, parse_insight_payload
from lifechrono.core.insights.context import InsightContext, assemble_context
from lifechrono.core.insights.models import (
    PERIOD_MONTH,
    PERIOD_WEEK,
    SOURCE_FALLBACK,
    SOURCE_MODEL,
    Insight,
)
from lifechrono.core.insights.narrative import NarrativeStyle, get_style
from lifechrono.core.insights.schemas import InsightPayload
from lifechrono.core.utils.dates import end_of_month, end_of_week, start_of_month, start_of_week
from lifechrono.extensions import db

logger = logging.getLogger(__name__)

WEEKLY_HISTORY_WEEKS = 4
MONTHLY_HISTORY_MONTHS = 3
LATEST_LIMIT = 4


def current_style() -> NarrativeStyle:
    return get_style(current_app.config.get("INSIGHT_NARRATIVE_STYLE"))


def generate_payload(ctx: InsightContext, style: NarrativeStyle) -> Tuple[InsightPayload, str]:
    """Ask the model when configured; fall back to the style's analyzer on any failure."""
    client = client_from_config(current_app.config)
    if client is not None:
        prompt = style.build_prompt(ctx, json.dumps(ctx.to_prompt_dict(), indent=2))
        try:
            return parse_insight_payload(client.generate(prompt)), SOURCE_MODEL
        except ExternalServiceError as exc:
            logger.warning("Insight model call failed, using fallback analyzer: %s", exc)
    return style.analyze(ctx), SOURCE_FALLBACK


def find_insight(user_id: int, period: str, start: date) -> Optional[Insight]:
    return Insight.query.filter_by(user_id=user_id, period=period, week_start=start).first()


def get_or_generate(
    user_id: int, start: date, end: date, period: str = PERIOD_WEEK, today: Optional[date] = None
) -> Insight:
    """Stored insight for the period, generating and persisting it when absent.

    Two concurrent first requests race on the unique (user, period, start)
    constraint; the loser rolls back and returns the winner's row.
    """
    existing = find_insight(user_id, period, start)
    if existing:
        return existing

    style = current_style()
    ctx = assemble_context(user_id, start, end, period, today=today)
    payload, source = generate_payload(ctx, style)
    insight = Insight(
        user_id=user_id,
        period=period,
        week_start=start,
        week_end=end,
        summary=payload.summary,
        balance_score=payload.balance_score,
        recommendations=payload.recommendations,
        source=source,
        narrative_style=style.name,
    )
    db.session.add(insight)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        winner = find_insight(user_id, period, start)
        if winner is None:
            raise
        return winner
    logger.info("Generated %s insight for user %s (%s, source=%s)", period, user_id, start, source)
    return insight


def _week_bounds(weeks_back: int, today: Optional[date]) -> Tuple[date, date]:
    return start_of_week(-weeks_back, today).date(), end_of_week(-weeks_back, today).date()


def _month_bounds(months_back: int, today: Optional[date]) -> Tuple[date, date]:
    return start_of_month(-months_back, today).date(), end_of_month(-months_back, today).date()


def get_current_week_insight(user_id: int, today: Optional[date] = None) -> Insight:
    start, end = _week_bounds(0, today)
    return get_or_generate(user_id, start, end, PERIOD_WEEK, today)


def reset_current_week(user_id: int, today: Optional[date] = None) -> Insight:
    start, _ = _week_bounds(0, today)
    Insight.query.filter_by(user_id=user_id, period=PERIOD_WEEK, week_start=start).delete()
    db.session.commit()
    return get_current_week_insight(user_id, today)


def generate_week_insight(user_id: int, weeks_back: int, today: Optional[date] = None) -> Insight:
    start, end = _week_bounds(weeks_back, today)
    return get_or_generate(user_id, start, end, PERIOD_WEEK, today)


def generate_month_insight(user_id: int, months_back: int, today: Optional[date] = None) -> Insight:
    start, end = _month_bounds(months_back, today)
    return get_or_generate(user_id, start, end, PERIOD_MONTH, today)


def get_weekly_history(user_id: int, today: Optional[date] = None) -> List[dict]:
    """The previous four weeks, each with its stored insight or None."""
    history = []
    for weeks_back in range(1, WEEKLY_HISTORY_WEEKS + 1):
        start, end = _week_bounds(weeks_back, today)
        history.append(
            {
                "weekStart": start,
                "weekEnd": end,
                "label": f"Week of {start:%b} {start.day}",
                "insight": find_insight(user_id, PERIOD_WEEK, start),
            }
        )
    return history


def get_monthly_history(user_id: int, today: Optional[date] = None) -> List[dict]:
    history = []
    for months_back in range(1, MONTHLY_HISTORY_MONTHS + 1):
        start, end = _month_bounds(months_back, today)
        history.append(
            {
                "monthStart": start,
                "monthEnd": end,
                "label": f"{start:%B %Y}",
                "insight": find_insight(user_id, PERIOD_MONTH, start),
            }
        )
    return history


def get_latest_insights(user_id: int, limit: int = LATEST_LIMIT) -> List[Insight]:
    return (
        Insight.query.filter_by(user_id=user_id)
        .order_by(Insight.week_start.desc(), Insight.generated_at.desc())
        .limit(limit)
        .all()
    )


def test_model_connection() -> dict:
    client = client_from_config(current_app.config)
    if client is None:
        return {"connected": False, "error": "GEMINI_API_KEY is not set"}
    return client.test_connection()
