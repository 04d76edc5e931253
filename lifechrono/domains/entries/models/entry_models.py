"""Time entry models with prefixed tables."""

from __future__ import annotations

import datetime as dt

from sqlalchemy.orm import Mapped, mapped_column

from lifechrono.core.categories import Category
from lifechrono.extensions import db


class TimeEntry(db.Model):
    __tablename__ = "entries_time_entry"
    __table_args__ = (
        db.Index("ix_entries_time_entry_user_date", "user_id", "date"),
        db.Index("ix_entries_time_entry_user_start", "user_id", "start_time"),
        db.CheckConstraint(
            "duration_minutes >= 1 AND duration_minutes <= 1440",
            name="ck_entries_time_entry_duration",
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(db.ForeignKey("user.id", ondelete="CASCADE"), index=True, nullable=False)
    title: Mapped[str] = mapped_column(db.String(255), nullable=False)
    category: Mapped[Category] = mapped_column(
        db.Enum(Category, values_callable=lambda e: [m.value for m in e], native_enum=False, length=16),
        nullable=False,
    )
    sub_category: Mapped[str | None] = mapped_column(db.String(64))
    start_time: Mapped[dt.datetime] = mapped_column(nullable=False)
    end_time: Mapped[dt.datetime] = mapped_column(nullable=False)
    duration_minutes: Mapped[int] = mapped_column(db.Integer, nullable=False)
    # UTC calendar day of start_time; grouping key only.
    date: Mapped[dt.date] = mapped_column(nullable=False)
    note: Mapped[str | None] = mapped_column(db.Text)
    is_recurring: Mapped[bool] = mapped_column(default=False)
    recurring_task_id: Mapped[int | None] = mapped_column(
        db.ForeignKey("recurring_task_template.id", ondelete="SET NULL"), nullable=True, index=True
    )
    created_at: Mapped[dt.datetime] = mapped_column(default=dt.datetime.utcnow)
    updated_at: Mapped[dt.datetime] = mapped_column(default=dt.datetime.utcnow, onupdate=dt.datetime.utcnow)

    @property
    def hours(self) -> float:
        return self.duration_minutes / 60


class EntryDayLock(db.Model):
    """One row per (user, day); locked FOR UPDATE while that day's entries change."""

    __tablename__ = "entries_day_lock"
    __table_args__ = (db.UniqueConstraint("user_id", "day", name="uq_entries_day_lock_user_day"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(db.ForeignKey("user.id", ondelete="CASCADE"), nullable=False)
    day: Mapped[dt.date] = mapped_column(nullable=False)
