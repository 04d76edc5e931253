"""CLI entrypoint to run the weekly snapshot scheduler."""

from __future__ import annotations

import logging
import os

from lifechrono import create_app
from lifechrono.platform.worker.config import SchedulerConfig
from lifechrono.platform.worker.scheduler import run_scheduler


def main() -> None:
    logging.basicConfig(level=os.environ.get("WORKER_LOGLEVEL", "INFO"))
    env = os.environ.get("APP_ENV", "development")
    app = create_app(env)
    with app.app_context():
        run_scheduler(SchedulerConfig.from_env())


if __name__ == "__main__":
    main()
