"""Mood log DTOs."""

from __future__ import annotations

import datetime as dt
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class MoodLogCreate(BaseModel):
    score: int = Field(ge=1, le=5, strict=True)
    note: Optional[str] = Field(default=None, max_length=500)


class MoodLogResponse(BaseModel):
    id: int
    date: dt.date
    score: int
    note: Optional[str]
    created_at: dt.datetime

    model_config = ConfigDict(from_attributes=True)


class MoodDaySummary(BaseModel):
    date: dt.date
    avg_score: float = Field(serialization_alias="avgScore")
    rounded_score: int = Field(serialization_alias="roundedScore")
    count: int
    latest_note: Optional[str] = Field(default=None, serialization_alias="latestNote")
    logs: List[MoodLogResponse] = Field(default_factory=list)
