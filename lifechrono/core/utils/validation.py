"""Input validation helpers for query-string arguments."""

from __future__ import annotations

from datetime import date
from typing import Optional

from lifechrono.core.errors import ValidationError


def parse_date_arg(value: Optional[str], field: str) -> Optional[date]:
    """Parse a YYYY-MM-DD (or full ISO timestamp) query argument."""
    if value in (None, ""):
        return None
    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        raise ValidationError(f"Invalid date for {field}: {value}") from None


def parse_int_arg(value: Optional[str], field: str, default: int = 0) -> int:
    if value in (None, ""):
        return default
    try:
        return int(value)
    except ValueError:
        raise ValidationError(f"Invalid integer for {field}: {value}") from None
