"""
Gunicorn configuration for the LifeChrono API.

Run with: gunicorn -c deploy/gunicorn.conf.py lifechrono.wsgi:app
The weekly snapshot scheduler runs as its own process
(python -m lifechrono.platform.worker.run), never inside web workers.
"""

from __future__ import annotations

import logging
import multiprocessing
import os

bind = os.environ.get("GUNICORN_BIND", "0.0.0.0:8000")
worker_class = os.environ.get("GUNICORN_WORKER_CLASS", "gthread")
workers = int(os.environ.get("GUNICORN_WORKERS", str(multiprocessing.cpu_count() * 2 + 1)))
threads = int(os.environ.get("GUNICORN_THREADS", "4"))

# Insight generation may wait on the model for INSIGHT_AI_TIMEOUT_SECONDS;
# the worker timeout stays above it so the fallback path gets to run.
_ai_timeout = float(os.environ.get("INSIGHT_AI_TIMEOUT_SECONDS", "20"))
timeout = int(os.environ.get("GUNICORN_TIMEOUT", str(int(_ai_timeout) + 40)))
graceful_timeout = int(os.environ.get("GUNICORN_GRACEFUL_TIMEOUT", "30"))
keepalive = int(os.environ.get("GUNICORN_KEEPALIVE", "5"))

accesslog = os.environ.get("GUNICORN_ACCESSLOG", "-")
errorlog = os.environ.get("GUNICORN_ERRORLOG", "-")
loglevel = os.environ.get("GUNICORN_LOGLEVEL", "info")
capture_output = True

preload_app = os.environ.get("GUNICORN_PRELOAD", "false").lower() in ("1", "true", "yes")
forwarded_allow_ips = os.environ.get("GUNICORN_FORWARDED_ALLOW_IPS", "*")
proc_name = os.environ.get("GUNICORN_PROC_NAME", "lifechrono")


def on_starting(server):
    logging.getLogger(__name__).info(
        "Gunicorn starting: workers=%s, threads=%s, timeout=%ss", workers, threads, timeout
    )


def worker_abort(worker):
    logging.getLogger(__name__).warning("Worker %s timed out (>%ss), aborting", worker.pid, timeout)
