from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Callable, Optional
from urllib.parse import urlparse

from ..common.datetime_utils import now_local
from ..common.validators import optional_text, require_non_empty
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, ValidationError
from ..users.repository import UserRepository
from .model import StudentSubmission, SubmissionFilter
from .repository import SubmissionRepository

logger = logging.getLogger(__name__)


def _require_google_docs_url(value: str) -> str:
    url = (value or "").strip()
    parsed = urlparse(url)
    if parsed.scheme not in {"http", "https"} or parsed.netloc != "docs.google.com":
        raise ValidationError("Please provide a valid Google Docs link")
    return url


class SubmissionService:
    def __init__(
        self,
        submissions: SubmissionRepository,
        users: UserRepository,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._submissions = submissions
        self._users = users
        self._clock = clock

    def upload(
        self,
        *,
        current_role: Role,
        student_id: int,
        subject: str,
        class_date: date,
        google_docs_url: str,
        professor_id: Optional[int] = None,
        section: str = "",
    ) -> StudentSubmission:
        if current_role != Role.STUDENT:
            raise AuthorizationError("Only students can upload attendance")

        url = _require_google_docs_url(google_docs_url)
        student = self._users.get_by_id(int(student_id))
        if not student:
            raise ValidationError("Student account not found")

        submission = self._submissions.upsert(
            student_id=student.user_id,
            student_name=student.full_name,
            student_email=student.email,
            professor_id=int(professor_id) if professor_id else None,
            subject=require_non_empty(subject, "Subject"),
            section=optional_text(section, "Section"),
            class_date=class_date,
            google_docs_url=url,
            submitted_at=self._clock(),
        )
        logger.info("Student %s uploaded attendance link for %s on %s", student.user_id, submission.subject, class_date)
        return submission

    def list_mine(self, *, current_role: Role, student_id: int) -> list[StudentSubmission]:
        if current_role != Role.STUDENT:
            raise AuthorizationError("Only students can view their submissions")
        return list(self._submissions.list_for_student(int(student_id)))

    def list_all(
        self,
        *,
        current_role: Role,
        section: str = "",
        subject: str = "",
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[StudentSubmission]:
        if current_role == Role.STUDENT:
            raise AuthorizationError("Access denied")
        if start_date and end_date and end_date < start_date:
            raise ValidationError("End date must be on or after start date")

        flt = SubmissionFilter(
            section=(section or "").strip() or None,
            subject=(subject or "").strip() or None,
            start_date=start_date,
            end_date=end_date,
        )
        return list(self._submissions.search(flt))
