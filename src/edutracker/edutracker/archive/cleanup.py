from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Iterable

from ..assessments.repository import AssessmentRepository
from ..attendance.model import AttendanceSession
from ..attendance.repository import AttendanceRepository
from ..common.calendar_month import CalendarMonth
from ..common.datetime_utils import now_local
from ..images.store import ImageStore
from .model import CleanupCounts, CleanupResult, ImageCleanupOutcome
from .repository import ArchiveStatusRepository
from .tracker import ArchiveStatusTracker
from .windows import get_days_until_month_end, is_cleanup_window, should_remind_admin

logger = logging.getLogger(__name__)


class CleanupEngine:
    """Month-end deletion of archived attendance and assessment records.

    Deletion runs in two phases: images first (best effort, failures are
    counted), then the records themselves. Nothing is rolled back if a
    later step fails; a re-run picks up whatever is left.
    """

    def __init__(
        self,
        tracker: ArchiveStatusTracker,
        sessions: AttendanceRepository,
        assessments: AssessmentRepository,
        statuses: ArchiveStatusRepository,
        images: ImageStore,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._tracker = tracker
        self._sessions = sessions
        self._assessments = assessments
        self._statuses = statuses
        self._images = images
        self._clock = clock

    def _destroy_images(self, sessions: Iterable[AttendanceSession]) -> ImageCleanupOutcome:
        deleted = missing = failed = 0
        for session in sessions:
            for public_id in session.image_public_ids():
                try:
                    if self._images.destroy(public_id):
                        deleted += 1
                    else:
                        missing += 1
                except Exception as e:
                    failed += 1
                    logger.warning("Could not delete image %s of session %s: %s", public_id, session.session_id, e)
        if missing:
            logger.info("%d images were already gone", missing)
        return ImageCleanupOutcome(deleted=deleted, missing=missing, failed=failed)

    @staticmethod
    def cutoff_for(archived_month: CalendarMonth) -> datetime:
        """Records strictly before this instant belong to the archived month or earlier."""

        return archived_month.next().first_instant()

    def mark_archive_complete(self, admin_id: int, admin_name: str) -> dict:
        return self._tracker.mark_complete(admin_id, admin_name)

    def execute_monthly_cleanup(self) -> CleanupResult:
        month = self._tracker.previous_month()
        status = self._tracker.get_status(month)

        if status.error:
            return CleanupResult(
                success=False,
                message="Could not read archive status",
                archived_month=month.key,
                error=status.error,
            )

        if not status.completed:
            logger.info("Cleanup refused: archive %s not marked complete", month.key)
            return CleanupResult(
                success=False,
                message="Admin has not completed the archive process.",
                archived_month=month.key,
                requires_admin=True,
            )

        cutoff = self.cutoff_for(month)
        logger.info("Archive %s confirmed; deleting records before %s", month.key, cutoff.isoformat())

        try:
            sessions = list(self._sessions.list_started_before(cutoff))
            image_outcome = self._destroy_images(sessions)

            attendance_count = self._sessions.delete_by_ids([s.session_id for s in sessions])
            assessment_count = self._assessments.delete_created_before(cutoff)

            counts = CleanupCounts(
                attendance=attendance_count,
                assessments=assessment_count,
                images=image_outcome.deleted,
                image_failures=image_outcome.failed,
            )
            self._tracker.record_cleanup(month, counts)
        except Exception as e:
            logger.exception("Monthly cleanup for %s failed", month.key)
            return CleanupResult(success=False, message="Cleanup failed", archived_month=month.key, error=str(e))

        logger.info(
            "Cleanup %s done: %d sessions, %d assessments, %d images (%d image failures)",
            month.key,
            counts.attendance,
            counts.assessments,
            counts.images,
            counts.image_failures,
        )
        return CleanupResult(
            success=True,
            message=(
                f"Cleanup completed. Deleted {counts.attendance} attendance records "
                f"and {counts.assessments} assessments."
            ),
            archived_month=month.key,
            deleted=counts,
        )

    def clear_all_data_keep_accounts(self, admin_id: int, admin_name: str) -> CleanupResult:
        """Emergency reset: wipes sessions, assessments and archive statuses.

        Ignores the archive gate entirely. User accounts are not touched.
        """

        cleared_by = {"admin_id": admin_id, "admin_name": admin_name}
        logger.warning("Admin %s (%s) requested a full data wipe", admin_id, admin_name)
        try:
            image_outcome = self._destroy_images(self._sessions.list_all())
            attendance_count = self._sessions.delete_all()
            assessment_count = self._assessments.delete_all()
            status_count = self._statuses.delete_all()
        except Exception as e:
            logger.exception("Full data wipe failed")
            return CleanupResult(success=False, message="Error clearing data", error=str(e), cleared_by=cleared_by)

        counts = CleanupCounts(
            attendance=attendance_count,
            assessments=assessment_count,
            images=image_outcome.deleted,
            image_failures=image_outcome.failed,
        )
        logger.warning(
            "Full wipe done: %d sessions, %d assessments, %d archive statuses, %d images",
            attendance_count,
            assessment_count,
            status_count,
            image_outcome.deleted,
        )
        return CleanupResult(
            success=True,
            message=(
                f"All data cleared. Deleted {attendance_count} attendance records, "
                f"{assessment_count} assessments and {status_count} archive records. User accounts were kept."
            ),
            deleted=counts,
            cleared_by=cleared_by,
        )

    def get_cleanup_summary(self) -> dict:
        """Read-only dashboard payload; errors end up in ``error``."""

        try:
            today = self._clock().date()
            current = CalendarMonth.from_date(today)
            status = self._tracker.get_status(current.previous())
            return {
                "archive_status": status.to_dict(),
                "days_until_month_end": get_days_until_month_end(today),
                "is_cleanup_window": is_cleanup_window(today),
                "should_show_reminder": should_remind_admin(today),
                "current_month": current.key,
                "previous_month": current.previous().key,
                "current_records": {
                    "attendance": self._sessions.count_all(),
                    "assessments": self._assessments.count_all(),
                },
            }
        except Exception as e:
            logger.exception("Error getting cleanup summary")
            return {"error": str(e)}
