"""
Interval job scheduling for the detection service.

Wraps an APScheduler ``BackgroundScheduler``. Every job runs at most one
instance at a time and missed runs are coalesced into one. A failing run is
logged and the job keeps its schedule.
"""

from __future__ import annotations

import logging
import threading
from collections import Counter
from typing import Callable, List

from apscheduler.events import EVENT_JOB_ERROR, EVENT_JOB_EXECUTED, JobExecutionEvent
from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.background import BackgroundScheduler

logger = logging.getLogger(__name__)


class IntervalScheduler:
    """
    Owner of a background scheduler and its interval jobs.

    Notes:
    - Jobs are keyed by a stable id; adding an existing id replaces the job.
    - The one-instance limit is tracked per id, so a run left over from a
      removed job still blocks its replacement from overlapping it.
    - Once shut down, the scheduler cannot be restarted.
    """

    def __init__(self) -> None:
        self._scheduler = BackgroundScheduler(
            job_defaults={"max_instances": 1, "coalesce": True},
        )
        self._scheduler.add_listener(self._on_job_event, EVENT_JOB_EXECUTED | EVENT_JOB_ERROR)
        self._counts_lock = threading.Lock()
        self._run_counts: Counter = Counter()
        self._error_counts: Counter = Counter()
        self._shutdown = False

    @property
    def running(self) -> bool:
        return self._scheduler.running

    def start(self) -> None:
        if self._shutdown:
            raise RuntimeError("Scheduler has been shut down")
        if not self._scheduler.running:
            self._scheduler.start()
            logger.debug("Background scheduler started")

    def add_interval_job(self, job_id: str, interval_ms: int, func: Callable[[], None]) -> None:
        """Schedule ``func`` every ``interval_ms``; the first run is one interval away."""
        if interval_ms <= 0:
            raise ValueError("interval_ms must be positive")
        self._scheduler.add_job(
            func,
            "interval",
            seconds=interval_ms / 1000.0,
            id=job_id,
            name=job_id,
            replace_existing=True,
        )
        logger.debug("Scheduled job %s every %dms", job_id, interval_ms)

    def remove_job(self, job_id: str) -> bool:
        try:
            self._scheduler.remove_job(job_id)
        except JobLookupError:
            return False
        logger.debug("Removed job %s", job_id)
        return True

    def job_ids(self) -> List[str]:
        return [job.id for job in self._scheduler.get_jobs()]

    def run_count(self, job_id: str) -> int:
        with self._counts_lock:
            return self._run_counts[job_id]

    def error_count(self, job_id: str) -> int:
        with self._counts_lock:
            return self._error_counts[job_id]

    def shutdown(self, wait: bool = True) -> None:
        """Stop the scheduler, waiting for running jobs by default. Idempotent."""
        self._shutdown = True
        if self._scheduler.running:
            self._scheduler.shutdown(wait=wait)
            logger.debug("Background scheduler shut down")

    def _on_job_event(self, event: JobExecutionEvent) -> None:
        with self._counts_lock:
            self._run_counts[event.job_id] += 1
            if event.exception is not None:
                self._error_counts[event.job_id] += 1
        if event.exception is not None:
            logger.error(
                "Scheduled job %s failed; continuing on next tick: %r",
                event.job_id,
                event.exception,
            )
