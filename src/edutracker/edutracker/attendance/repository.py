from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import SessionStatus
from ..images.store import ImageRef
from .model import AttendanceSession, SessionHistoryQuery


class AttendanceRepository(Protocol):
    def get_by_id(self, session_id: int) -> Optional[AttendanceSession]:
        raise NotImplementedError

    def create_session(
        self,
        *,
        professor_id: int,
        subject: str,
        section: str,
        class_room: Optional[str],
        notes: Optional[str],
        start_time: datetime,
        start_image: ImageRef,
    ) -> int:
        raise NotImplementedError

    def complete_session(
        self,
        *,
        session_id: int,
        end_time: datetime,
        duration_seconds: int,
        end_image: ImageRef,
    ) -> bool:
        """Only transitions sessions that are still ongoing."""

        raise NotImplementedError

    def list_for_professor_between(self, professor_id: int, *, start: datetime, end: datetime) -> Sequence[AttendanceSession]:
        raise NotImplementedError

    def search(self, query: SessionHistoryQuery, *, offset: int, limit: int) -> Sequence[AttendanceSession]:
        raise NotImplementedError

    def count_matching(self, query: SessionHistoryQuery) -> int:
        raise NotImplementedError

    def count_for_professor(
        self,
        professor_id: int,
        *,
        status: Optional[SessionStatus] = None,
        since: Optional[datetime] = None,
    ) -> int:
        raise NotImplementedError

    # Bulk operations used by the archive cleanup.

    def list_started_before(self, cutoff: datetime) -> Sequence[AttendanceSession]:
        raise NotImplementedError

    def list_all(self) -> Sequence[AttendanceSession]:
        raise NotImplementedError

    def count_all(self) -> int:
        raise NotImplementedError

    def delete_by_ids(self, session_ids: Sequence[int]) -> int:
        raise NotImplementedError

    def delete_all(self) -> int:
        raise NotImplementedError
