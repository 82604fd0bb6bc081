from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional

from ..common.calendar_month import CalendarMonth
from ..common.datetime_utils import now_local
from .model import ArchiveStatusView, CleanupCounts
from .repository import ArchiveStatusRepository

logger = logging.getLogger(__name__)


class ArchiveStatusTracker:
    """Per-month archive checklist.

    The month of interest is always the one before the clock's current
    month: that is the month an admin exports and confirms.
    """

    def __init__(self, statuses: ArchiveStatusRepository, *, clock: Callable[[], datetime] = now_local):
        self._statuses = statuses
        self._clock = clock

    def previous_month(self) -> CalendarMonth:
        return CalendarMonth.from_date(self._clock().date()).previous()

    def get_status(self, month: Optional[CalendarMonth] = None) -> ArchiveStatusView:
        month = month or self.previous_month()
        try:
            record = self._statuses.get(month.key)
        except Exception as e:
            logger.exception("Error checking archive status for %s", month.key)
            return ArchiveStatusView(month=month.key, completed=False, error=str(e))

        if record is None:
            return ArchiveStatusView(
                month=month.key,
                completed=False,
                message="Archive not started for previous month",
            )
        return ArchiveStatusView.from_record(record)

    def mark_complete(self, admin_id: int, admin_name: str) -> dict:
        month = self.previous_month()
        try:
            self._statuses.upsert_completion(
                month_key=month.key,
                admin_id=int(admin_id),
                admin_name=(admin_name or "").strip() or str(admin_id),
                completed_at=self._clock(),
            )
        except Exception as e:
            logger.exception("Error marking archive complete for %s", month.key)
            return {"success": False, "month": month.key, "error": str(e)}

        logger.info("Admin %s (%s) marked archive %s complete", admin_id, admin_name, month.key)
        return {"success": True, "month": month.key, "message": "Archive marked as complete"}

    def record_cleanup(self, month: CalendarMonth, counts: CleanupCounts) -> None:
        self._statuses.record_cleanup(month_key=month.key, cleanup_at=self._clock(), counts=counts)
