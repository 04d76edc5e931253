"""Mood log model: many check-ins per user per day, averaged on read."""

from __future__ import annotations

import datetime as dt

from sqlalchemy.orm import Mapped, mapped_column

from lifechrono.extensions import db


class MoodLog(db.Model):
    __tablename__ = "mood_log"
    __table_args__ = (
        db.Index("ix_mood_log_user_date", "user_id", "date"),
        db.CheckConstraint("score >= 1 AND score <= 5", name="ck_mood_log_score"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(db.ForeignKey("user.id", ondelete="CASCADE"), nullable=False)
    # Server-generated UTC calendar day
    date: Mapped[dt.date] = mapped_column(nullable=False)
    score: Mapped[int] = mapped_column(db.Integer, nullable=False)
    note: Mapped[str | None] = mapped_column(db.String(500))
    created_at: Mapped[dt.datetime] = mapped_column(default=dt.datetime.utcnow)
