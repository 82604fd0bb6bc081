from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional

from apscheduler.schedulers.background import BackgroundScheduler

from ..common.datetime_utils import now_local
from .cleanup import CleanupEngine
from .model import CleanupResult
from .tracker import ArchiveStatusTracker
from .windows import is_cleanup_window

logger = logging.getLogger(__name__)

JOB_ID = "monthly_cleanup_check"


class CleanupScheduler:
    """Hourly trigger for the monthly cleanup.

    Each tick is a no-op unless we are in the cleanup window, the admin has
    confirmed the archive, and cleanup has not already run for that month.
    """

    def __init__(
        self,
        engine: CleanupEngine,
        tracker: ArchiveStatusTracker,
        *,
        clock: Callable[[], datetime] = now_local,
        scheduler: Optional[BackgroundScheduler] = None,
    ):
        self._engine = engine
        self._tracker = tracker
        self._clock = clock
        self._scheduler = scheduler

    def run_check(self) -> dict:
        today = self._clock().date()
        if not is_cleanup_window(today):
            logger.debug("Not in cleanup window (day %s); skipping", today.day)
            return {"ran": False, "reason": "outside_window"}

        status = self._tracker.get_status()
        if status.error:
            logger.error("Archive status unavailable: %s", status.error)
            return {"ran": False, "reason": "status_error", "error": status.error}
        if not status.completed:
            logger.info("Archive %s not marked complete; skipping cleanup", status.month)
            return {"ran": False, "reason": "archive_not_complete", "month": status.month}
        if status.cleanup_executed:
            logger.debug("Cleanup for %s already executed", status.month)
            return {"ran": False, "reason": "already_cleaned", "month": status.month}

        result: CleanupResult = self._engine.execute_monthly_cleanup()
        if result.success:
            logger.info("Scheduled cleanup finished: %s", result.message)
        else:
            logger.warning("Scheduled cleanup did not complete: %s", result.error or result.message)
        return {"ran": True, "result": result.to_dict()}

    def _tick(self) -> None:
        try:
            self.run_check()
        except Exception:
            logger.exception("Error during scheduled cleanup check")

    def start(self) -> None:
        if self._scheduler is None:
            self._scheduler = BackgroundScheduler()
        self._scheduler.add_job(
            func=self._tick,
            trigger="cron",
            minute=0,
            id=JOB_ID,
            name="Monthly archive cleanup check",
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )
        if not self._scheduler.running:
            self._scheduler.start()
        logger.info("Cleanup scheduler started: hourly check, runs on days 1-3 once the archive is confirmed")

    def stop(self) -> None:
        if self._scheduler is not None and self._scheduler.running:
            self._scheduler.shutdown(wait=False)
            logger.info("Cleanup scheduler stopped")
