"""Weekly snapshot: one aggregate row per user per ISO week."""

from __future__ import annotations

import datetime as dt

from sqlalchemy.orm import Mapped, mapped_column

from lifechrono.extensions import db


class WeeklySnapshot(db.Model):
    __tablename__ = "snapshots_weekly"
    __table_args__ = (
        db.UniqueConstraint("user_id", "week_start", name="uq_snapshots_weekly_user_week"),
        db.Index("ix_snapshots_weekly_user_week", "user_id", "week_start"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(db.ForeignKey("user.id", ondelete="CASCADE"), nullable=False)
    week_start: Mapped[dt.date] = mapped_column(nullable=False)
    productive_hrs: Mapped[float] = mapped_column(db.Float, default=0.0)
    leisure_hrs: Mapped[float] = mapped_column(db.Float, default=0.0)
    restoration_hrs: Mapped[float] = mapped_column(db.Float, default=0.0)
    neutral_hrs: Mapped[float] = mapped_column(db.Float, default=0.0)
    total_logged_hrs: Mapped[float] = mapped_column(db.Float, default=0.0)
    avg_mood_score: Mapped[float | None] = mapped_column(db.Float)
    consistency_score: Mapped[float] = mapped_column(db.Float, default=0.0)
    computed_at: Mapped[dt.datetime] = mapped_column(default=dt.datetime.utcnow)
