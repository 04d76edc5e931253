"""Recurring task templates."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy.orm import Mapped, mapped_column

from lifechrono.core.categories import Category
from lifechrono.extensions import db


class RecurringTaskTemplate(db.Model):
    __tablename__ = "recurring_task_template"
    __table_args__ = (
        db.Index("ix_recurring_task_template_user_active", "user_id", "is_active"),
        db.CheckConstraint(
            "default_duration >= 1 AND default_duration <= 1440",
            name="ck_recurring_task_template_duration",
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(db.ForeignKey("user.id", ondelete="CASCADE"), index=True, nullable=False)
    title: Mapped[str] = mapped_column(db.String(255), nullable=False)
    category: Mapped[Category] = mapped_column(
        db.Enum(Category, values_callable=lambda e: [m.value for m in e], native_enum=False, length=16),
        nullable=False,
    )
    default_duration: Mapped[int] = mapped_column(db.Integer, nullable=False)
    # Weekday numbers, Sunday=0 .. Saturday=6
    days_of_week: Mapped[list] = mapped_column(db.JSON, nullable=False, default=list)
    is_active: Mapped[bool] = mapped_column(default=True)
    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow)

    def runs_on(self, weekday: int) -> bool:
        return weekday in (self.days_of_week or [])
