"""Typed schemas for user IO."""

from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional, TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, EmailStr, Field

if TYPE_CHECKING:
    from lifechrono.core.users.models import User


class UserCreateRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=8)
    name: Optional[str] = Field(default=None, max_length=255)
    timezone: Optional[str] = Field(default=None, max_length=64)


class LoginRequest(BaseModel):
    email: str
    password: str


class WeeklyGoalsUpdate(BaseModel):
    """Whole-hour targets per category; the 168h ceiling is checked by the service."""

    productive: int = Field(ge=0, le=168)
    leisure: int = Field(ge=0, le=168)
    restoration: int = Field(ge=0, le=168)
    neutral: int = Field(ge=0, le=168)


class UserResponse(BaseModel):
    id: int
    email: str
    name: Optional[str] = None
    timezone: Optional[str] = None
    weekly_goals: Dict[str, float]
    created_at: Optional[datetime] = None
    role_codes: List[str] = []

    model_config = ConfigDict(from_attributes=True)


def serialize_user(user: "User") -> UserResponse:
    from lifechrono.core.categories import keyed
    from lifechrono.core.users.services import resolve_goals

    return UserResponse(
        id=user.id,
        email=user.email,
        name=user.name,
        timezone=user.timezone,
        weekly_goals=keyed(resolve_goals(user)),
        created_at=user.created_at,
        role_codes=user.role_codes,
    )
