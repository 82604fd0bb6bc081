from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Callable, Optional

from ..common.calendar_month import CalendarMonth
from ..common.datetime_utils import end_of_day, now_local, start_of_day, start_of_week
from ..common.validators import optional_text, require_non_empty
from ..core.constants import DEFAULT_HISTORY_PAGE_SIZE, MAX_HISTORY_PAGE_SIZE, MAX_NOTES_LENGTH
from ..core.enums import SessionStatus
from ..core.exceptions import NotFoundError, ValidationError
from ..images.store import ImageStore
from .model import AttendanceSession, SessionHistoryQuery, SessionPage
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UploadedImage:
    data: bytes
    filename: str


class AttendanceSessionService:
    """Professor-facing lifecycle of attendance sessions.

    A session starts ``ongoing`` with a start photograph and becomes
    ``completed`` once an end photograph is supplied.
    """

    def __init__(
        self,
        sessions: AttendanceRepository,
        images: ImageStore,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._sessions = sessions
        self._images = images
        self._clock = clock

    def _owned(self, professor_id: int, session_id: int) -> AttendanceSession:
        session = self._sessions.get_by_id(int(session_id))
        if not session or session.professor_id != int(professor_id):
            raise NotFoundError("Attendance session not found")
        return session

    def start_session(
        self,
        *,
        professor_id: int,
        subject: str,
        section: str,
        image: Optional[UploadedImage],
        class_room: str = "",
        notes: str = "",
    ) -> AttendanceSession:
        subject = require_non_empty(subject, "Subject")
        section = require_non_empty(section, "Section")
        class_room_v = optional_text(class_room, "Class room")
        notes_v = optional_text(notes, "Notes", max_len=MAX_NOTES_LENGTH)
        if image is None:
            raise ValidationError("Start image is required")

        start_image = self._images.save(image.data, filename=image.filename, folder=f"attendance/{int(professor_id)}")
        session_id = self._sessions.create_session(
            professor_id=int(professor_id),
            subject=subject,
            section=section,
            class_room=class_room_v,
            notes=notes_v,
            start_time=self._clock(),
            start_image=start_image,
        )
        logger.info("Professor %s started session %s (%s/%s)", professor_id, session_id, subject, section)
        return self._owned(professor_id, session_id)

    def end_session(self, *, professor_id: int, session_id: int, image: Optional[UploadedImage]) -> AttendanceSession:
        if image is None:
            raise ValidationError("End image is required")

        session = self._owned(professor_id, session_id)
        if session.status != SessionStatus.ONGOING:
            raise NotFoundError("Active attendance session not found")

        end_time = self._clock()
        if end_time <= session.start_time:
            raise ValidationError("End time must be after start time")

        end_image = self._images.save(image.data, filename=image.filename, folder=f"attendance/{int(professor_id)}")
        duration = int((end_time - session.start_time).total_seconds())
        ok = self._sessions.complete_session(
            session_id=session.session_id,
            end_time=end_time,
            duration_seconds=duration,
            end_image=end_image,
        )
        if not ok:
            # Lost a race with another end request; drop the orphaned upload.
            self._destroy_quietly(end_image.public_id)
            raise NotFoundError("Active attendance session not found")

        logger.info("Professor %s ended session %s after %ss", professor_id, session.session_id, duration)
        return self._owned(professor_id, session.session_id)

    def delete_session(self, *, professor_id: int, session_id: int) -> dict:
        session = self._owned(professor_id, session_id)

        failed = [pid for pid in session.image_public_ids() if not self._destroy_quietly(pid)]
        self._sessions.delete_by_ids([session.session_id])

        logger.info("Professor %s deleted session %s", professor_id, session.session_id)
        return {"session_id": session.session_id, "image_failures": len(failed)}

    def _destroy_quietly(self, public_id: str) -> bool:
        try:
            self._images.destroy(public_id)
            return True
        except Exception as e:
            logger.warning("Image cleanup failed for %s: %s", public_id, e)
            return False

    def list_today(self, *, professor_id: int) -> list[AttendanceSession]:
        today = self._clock().date()
        return list(
            self._sessions.list_for_professor_between(
                int(professor_id), start=start_of_day(today), end=end_of_day(today)
            )
        )

    def history(
        self,
        *,
        professor_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        subject: str = "",
        section: str = "",
        status: str = "",
        page: int = 1,
        limit: int = DEFAULT_HISTORY_PAGE_SIZE,
    ) -> SessionPage:
        page = max(int(page), 1)
        limit = min(max(int(limit), 1), MAX_HISTORY_PAGE_SIZE)

        status_v: Optional[SessionStatus] = None
        if status:
            try:
                status_v = SessionStatus(status)
            except ValueError:
                raise ValidationError(f"Unknown status: {status}")

        query = SessionHistoryQuery(
            professor_id=int(professor_id),
            start=start_of_day(start_date) if start_date else None,
            end=end_of_day(end_date) if end_date else None,
            subject=(subject or "").strip() or None,
            section=(section or "").strip() or None,
            status=status_v,
        )
        items = self._sessions.search(query, offset=(page - 1) * limit, limit=limit)
        total = self._sessions.count_matching(query)
        return SessionPage(items=list(items), total=total, page=page, limit=limit)

    def stats(self, *, professor_id: int) -> dict:
        today = self._clock().date()
        completed = SessionStatus.COMPLETED
        return {
            "total_classes": self._sessions.count_for_professor(int(professor_id), status=completed),
            "this_week": self._sessions.count_for_professor(
                int(professor_id), status=completed, since=start_of_week(today)
            ),
            "this_month": self._sessions.count_for_professor(
                int(professor_id), status=completed, since=CalendarMonth.from_date(today).first_instant()
            ),
        }
