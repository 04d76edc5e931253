"""Authentication models."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy.orm import Mapped, mapped_column

from lifechrono.extensions import db


class RevokedToken(db.Model):
    """Persistent JWT revocation list shared by every app instance."""

    __tablename__ = "auth_revoked_token"

    id: Mapped[int] = mapped_column(primary_key=True)
    jti: Mapped[str] = mapped_column(db.String(64), unique=True, nullable=False)
    user_id: Mapped[int | None] = mapped_column(db.ForeignKey("user.id", ondelete="CASCADE"), index=True)
    token_type: Mapped[str] = mapped_column(db.String(16), nullable=False, default="refresh")
    revoked_at: Mapped[datetime] = mapped_column(default=datetime.utcnow)
