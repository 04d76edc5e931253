"""Weekly snapshot scheduler loop.

Fires once at every ISO week boundary (Monday 00:00 UTC) and rolls the week
that just closed. The loop polls instead of sleeping until the boundary so a
suspended host catches up on wake.
"""

from __future__ import annotations

import logging
import time
from datetime import datetime, time as dtime
from typing import Callable, Optional

from lifechrono.core.utils.dates import utc_now, week_start_for
from lifechrono.domains.snapshots.services import roll_weekly_snapshots
from lifechrono.platform.worker.config import SchedulerConfig

logger = logging.getLogger(__name__)

RollFn = Callable[..., dict]


def week_boundary(now: datetime) -> datetime:
    """Most recent Monday 00:00 UTC at or before ``now``."""
    return datetime.combine(week_start_for(now.date()), dtime.min)


def _roll(roll_fn: RollFn, weeks_back: int, boundary: datetime) -> None:
    """Run one roll; a crash is logged so the loop keeps its schedule."""
    try:
        result = roll_fn(weeks_back, today=boundary.date())
        logger.info("Snapshot roll finished: %s", result)
    except Exception:
        logger.exception("Snapshot roll crashed at boundary %s", boundary)


def tick(
    last_boundary: datetime,
    config: SchedulerConfig,
    now: Optional[datetime] = None,
    roll_fn: RollFn = roll_weekly_snapshots,
) -> datetime:
    """Roll snapshots if a boundary passed since ``last_boundary``; return the new boundary."""
    boundary = week_boundary(now or utc_now())
    if boundary <= last_boundary:
        return last_boundary
    logger.info("Week boundary %s reached; rolling snapshots (weeks_back=%s)", boundary, config.weeks_back)
    _roll(roll_fn, config.weeks_back, boundary)
    return boundary


def run_scheduler(config: Optional[SchedulerConfig] = None, roll_fn: RollFn = roll_weekly_snapshots) -> None:
    cfg = config or SchedulerConfig.from_env()
    logger.info(
        "Starting snapshot scheduler (poll_interval=%ss, weeks_back=%s, run_on_start=%s)",
        cfg.poll_interval,
        cfg.weeks_back,
        cfg.run_on_start,
    )
    last_boundary = week_boundary(utc_now())
    if cfg.run_on_start:
        _roll(roll_fn, cfg.weeks_back, last_boundary)

    try:
        while True:
            last_boundary = tick(last_boundary, cfg, roll_fn=roll_fn)
            time.sleep(cfg.poll_interval)
    except KeyboardInterrupt:
        logger.info("Scheduler stopped by user")
