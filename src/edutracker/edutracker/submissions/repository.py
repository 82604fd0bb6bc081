from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from .model import StudentSubmission, SubmissionFilter


class SubmissionRepository(Protocol):
    def upsert(
        self,
        *,
        student_id: int,
        student_name: str,
        student_email: str,
        professor_id: Optional[int],
        subject: str,
        section: Optional[str],
        class_date: date,
        google_docs_url: str,
        submitted_at: datetime,
    ) -> StudentSubmission:
        raise NotImplementedError

    def list_for_student(self, student_id: int) -> Sequence[StudentSubmission]:
        raise NotImplementedError

    def search(self, flt: SubmissionFilter) -> Sequence[StudentSubmission]:
        raise NotImplementedError
