"""User models."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy.orm import Mapped, mapped_column

from lifechrono.extensions import db


class TimestampMixin:
    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(default=datetime.utcnow, onupdate=datetime.utcnow)


class User(db.Model, TimestampMixin):
    __tablename__ = "user"

    id: Mapped[int] = mapped_column(primary_key=True)
    email: Mapped[str] = mapped_column(db.String(255), unique=True, nullable=False, index=True)
    password_hash: Mapped[str] = mapped_column(db.String(255), nullable=False)
    name: Mapped[str | None] = mapped_column(db.String(255))
    timezone: Mapped[str] = mapped_column(db.String(64), default="UTC")
    # {"productive": 40, "leisure": 28, ...}; null means defaults apply.
    weekly_goals: Mapped[dict | None] = mapped_column(db.JSON, nullable=True)
    is_super_admin: Mapped[bool] = mapped_column(default=False)

    @property
    def role_codes(self) -> list[str]:
        return ["user", "super_admin"] if self.is_super_admin else ["user"]
