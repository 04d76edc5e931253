"""Time entry DTOs and schemas."""

from __future__ import annotations

import datetime as dt
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from lifechrono.core.categories import Category


class EntryCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    category: Category
    sub_category: Optional[str] = Field(default=None, max_length=64)
    start_time: dt.datetime
    end_time: dt.datetime
    note: Optional[str] = Field(default=None, max_length=4096)
    recurring_task_id: Optional[int] = None


class EntryUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    category: Optional[Category] = None
    sub_category: Optional[str] = Field(default=None, max_length=64)
    start_time: Optional[dt.datetime] = None
    end_time: Optional[dt.datetime] = None
    note: Optional[str] = Field(default=None, max_length=4096)


class EntryResponse(BaseModel):
    id: int
    title: str
    category: Category
    sub_category: Optional[str]
    start_time: dt.datetime
    end_time: dt.datetime
    duration_minutes: int
    date: dt.date
    note: Optional[str]
    is_recurring: bool
    recurring_task_id: Optional[int]

    model_config = ConfigDict(from_attributes=True)
