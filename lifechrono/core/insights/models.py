"""Insight persistence models."""

from __future__ import annotations

import datetime as dt

from sqlalchemy.orm import Mapped, mapped_column

from lifechrono.extensions import db

PERIOD_WEEK = "week"
PERIOD_MONTH = "month"

SOURCE_MODEL = "model"
SOURCE_FALLBACK = "fallback"


class Insight(db.Model):
    __tablename__ = "insight_record"
    __table_args__ = (
        db.UniqueConstraint("user_id", "period", "week_start", name="uq_insight_record_user_period_start"),
        db.Index("ix_insight_record_user_week_start", "user_id", "week_start"),
        db.CheckConstraint("balance_score >= 0 AND balance_score <= 100", name="ck_insight_record_balance"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(db.ForeignKey("user.id", ondelete="CASCADE"), nullable=False)
    period: Mapped[str] = mapped_column(db.String(8), nullable=False, default=PERIOD_WEEK)
    # Period bounds; for month insights these are the month's first and last day.
    week_start: Mapped[dt.date] = mapped_column(nullable=False)
    week_end: Mapped[dt.date] = mapped_column(nullable=False)
    summary: Mapped[str] = mapped_column(db.Text, nullable=False, default="")
    balance_score: Mapped[int] = mapped_column(db.Integer, nullable=False, default=0)
    recommendations: Mapped[list] = mapped_column(db.JSON, nullable=False, default=list)
    source: Mapped[str] = mapped_column(db.String(16), nullable=False, default=SOURCE_FALLBACK)
    narrative_style: Mapped[str] = mapped_column(db.String(16), nullable=False, default="observer")
    generated_at: Mapped[dt.datetime] = mapped_column(default=dt.datetime.utcnow, index=True)
