"""Cancellable repeating stock check for one notification center, run as an APScheduler job."""
import logging
import threading
from datetime import datetime, timezone
from typing import Optional

from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.background import BackgroundScheduler
from django.conf import settings
from django.db import close_old_connections

logger = logging.getLogger(__name__)

JOB_DEFAULTS = {
    'coalesce': True,
    'max_instances': 1,
}


def create_background_scheduler() -> BackgroundScheduler:
    """Thread-pool scheduler for in-process interval jobs (not started)"""
    return BackgroundScheduler(job_defaults=JOB_DEFAULTS, timezone=timezone.utc)


class AlertScheduler:
    """
    Runs ``center.run_cycle()`` once on start and then every ``interval`` seconds.

    The task is an interval job with ``max_instances=1`` whose first run
    time is the moment of ``start()``. When ``scheduler`` is given the job
    lives on that shared ``BackgroundScheduler``; otherwise the scheduler
    creates and owns a private one per start. ``stop()`` removes the job, so
    no further tick fires; a cycle already in progress is allowed to finish.
    """

    def __init__(self, center, interval: Optional[float] = None, name: str = 'stock-alerts',
                 scheduler: Optional[BackgroundScheduler] = None):
        self.center = center
        self.interval = interval if interval is not None else settings.STOCK_ALERTS.get('INTERVAL_SECONDS', 300)
        self.name = name
        self._scheduler = scheduler
        self._owns_scheduler = scheduler is None
        self._job = None
        self._lock = threading.Lock()
        self.cycles_run = 0

    @property
    def is_running(self) -> bool:
        return self._job is not None

    def start(self) -> None:
        with self._lock:
            if self._job is not None:
                return
            if self._owns_scheduler:
                self._scheduler = create_background_scheduler()
            if not self._scheduler.running:
                self._scheduler.start()
            self._job = self._scheduler.add_job(
                self._run_cycle,
                'interval',
                seconds=self.interval,
                id=self.name,
                name=self.name,
                next_run_time=datetime.now(timezone.utc),
                misfire_grace_time=None,
                replace_existing=True,
            )
        logger.info(f"Stock alert scheduler '{self.name}' started (every {self.interval}s)")

    def stop(self, wait: bool = True) -> None:
        """Remove the job. ``wait`` joins in-flight cycles when the scheduler is private."""
        with self._lock:
            job, self._job = self._job, None
            scheduler = self._scheduler
        if job is None:
            return
        try:
            job.remove()
        except JobLookupError:
            logger.debug(f"Stock alert job '{self.name}' was already removed")
        if self._owns_scheduler and scheduler.running:
            scheduler.shutdown(wait=wait)
        logger.info(f"Stock alert scheduler '{self.name}' stopped")

    def _run_cycle(self) -> None:
        try:
            self.center.run_cycle()
        except Exception:
            # Unexpected failure: keep the job scheduled for the next tick
            logger.exception(f"Stock alert cycle failed in '{self.name}'")
        finally:
            self.cycles_run += 1
            close_old_connections()
