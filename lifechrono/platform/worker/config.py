"""Configuration helpers for the snapshot scheduler worker."""

from __future__ import annotations

import os
from dataclasses import dataclass


@dataclass
class SchedulerConfig:
    """Runtime knobs for the scheduler loop."""

    poll_interval: float
    weeks_back: int
    run_on_start: bool

    @classmethod
    def from_env(cls) -> "SchedulerConfig":
        """Build config from environment with sensible defaults."""
        return cls(
            poll_interval=float(os.environ.get("SNAPSHOT_POLL_SECONDS", "60")),
            weeks_back=int(os.environ.get("SNAPSHOT_WEEKS_BACK", "1")),
            run_on_start=os.environ.get("SNAPSHOT_ROLL_ON_START", "false").lower() in ("1", "true", "yes"),
        )
