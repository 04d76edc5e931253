"""Insight payload contract and response DTOs."""

from __future__ import annotations

import datetime as dt
import math
from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator

from lifechrono.core.utils.numbers import clamp, round_int

MAX_RECOMMENDATIONS = 3


class InsightPayload(BaseModel):
    """What a narrative style or the generative model must produce."""

    summary: str = Field(min_length=1)
    balance_score: int = Field(alias="balanceScore")
    recommendations: List[str]

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("balance_score", mode="before")
    @classmethod
    def _clamp_score(cls, value):
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError("balanceScore must be a number")
        if isinstance(value, int):
            return int(clamp(value, 0, 100))
        if not math.isfinite(value):
            raise ValueError("balanceScore must be finite")
        return int(clamp(round_int(value), 0, 100))

    @field_validator("recommendations")
    @classmethod
    def _cap_recommendations(cls, value: List[str]) -> List[str]:
        return [str(item) for item in value][:MAX_RECOMMENDATIONS]


class InsightResponse(BaseModel):
    id: int
    period: str
    week_start: dt.date = Field(serialization_alias="weekStart")
    week_end: dt.date = Field(serialization_alias="weekEnd")
    summary: str
    balance_score: int = Field(serialization_alias="balanceScore")
    recommendations: List[str]
    source: str
    narrative_style: str = Field(serialization_alias="narrativeStyle")
    generated_at: dt.datetime = Field(serialization_alias="generatedAt")

    model_config = ConfigDict(from_attributes=True)
