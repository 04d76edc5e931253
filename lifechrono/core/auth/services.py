"""Authentication service layer."""

from __future__ import annotations

from typing import Optional

from flask_jwt_extended import create_access_token, create_refresh_token
from sqlalchemy import func

from lifechrono.core.auth.models import RevokedToken
from lifechrono.core.auth.password import hash_password, verify_password
from lifechrono.core.errors import ValidationError
from lifechrono.core.users.models import User
from lifechrono.core.users.schemas import UserCreateRequest
from lifechrono.extensions import db

DEFAULT_TIMEZONE = "UTC"


def register_user(payload: UserCreateRequest) -> User:
    normalized_email = payload.email.strip().lower()
    existing = User.query.filter(func.lower(User.email) == normalized_email).first()
    if existing:
        raise ValidationError("email_already_exists")
    user = User(
        email=normalized_email,
        name=(payload.name or "").strip() or None,
        timezone=payload.timezone or DEFAULT_TIMEZONE,
        password_hash=hash_password(payload.password),
    )
    db.session.add(user)
    db.session.commit()
    return user


def authenticate_user(email: str, password: str) -> Optional[User]:
    """Return the user if credentials are valid."""
    user = User.query.filter(func.lower(User.email) == email.strip().lower()).first()
    if not user:
        return None
    if not verify_password(password, user.password_hash):
        return None
    return user


def issue_tokens(user: User) -> dict[str, str]:
    """Create access and refresh tokens for a user."""
    identity = str(user.id)
    claims = {"roles": user.role_codes}
    return {
        "access_token": create_access_token(identity=identity, additional_claims=claims),
        "refresh_token": create_refresh_token(identity=identity, additional_claims=claims),
    }


def revoke_token(jti: str, user_id: int | None, token_type: str = "refresh") -> None:
    if is_token_revoked(jti):
        return
    db.session.add(RevokedToken(jti=jti, user_id=user_id, token_type=token_type))
    db.session.commit()


def is_token_revoked(jti: str) -> bool:
    if not jti:
        return False
    return db.session.query(RevokedToken.id).filter_by(jti=jti).first() is not None
