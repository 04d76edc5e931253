"""Recurring template DTOs."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, List, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, Field

from lifechrono.core.categories import Category


def _normalize_days(value: List[int]) -> List[int]:
    if any(day < 0 or day > 6 for day in value):
        raise ValueError("days_of_week values must be between 0 (Sunday) and 6 (Saturday)")
    return sorted(set(value))


DaysOfWeek = Annotated[List[int], AfterValidator(_normalize_days)]


class RecurringCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    category: Category
    default_duration: int = Field(ge=1, le=1440)
    days_of_week: DaysOfWeek = Field(default_factory=list)


class RecurringUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    category: Optional[Category] = None
    default_duration: Optional[int] = Field(default=None, ge=1, le=1440)
    days_of_week: Optional[DaysOfWeek] = None
    is_active: Optional[bool] = None


class RecurringResponse(BaseModel):
    id: int
    title: str
    category: Category
    default_duration: int
    days_of_week: List[int]
    is_active: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
