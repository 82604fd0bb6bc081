from __future__ import annotations

import logging
import math
from datetime import datetime
from typing import Callable, Mapping, Optional

from ..common.datetime_utils import now_local
from ..common.validators import optional_text, require_non_empty
from ..core.constants import MAX_RATING, MIN_RATING
from ..core.enums import OfficerRole, Role
from ..core.exceptions import AuthorizationError, ValidationError
from ..users.repository import UserRepository
from .model import Assessment, NewAssessment
from .repository import AssessmentRepository

logger = logging.getLogger(__name__)


def score_ratings(ratings: Mapping[str, object]) -> tuple[dict[str, float], float, float]:
    """Validate ratings and return (normalized, total, average rounded to 2 places)."""

    if not ratings:
        raise ValidationError("At least one rating is required")

    normalized: dict[str, float] = {}
    for name, raw in ratings.items():
        key = str(name).strip()
        if not key:
            raise ValidationError("Rating names cannot be empty")
        if isinstance(raw, bool):
            raise ValidationError(f"Rating '{key}' must be a number")
        try:
            value = float(raw)
        except (TypeError, ValueError):
            raise ValidationError(f"Rating '{key}' must be a number")
        if math.isnan(value) or not MIN_RATING <= value <= MAX_RATING:
            raise ValidationError(f"Rating '{key}' must be between {MIN_RATING} and {MAX_RATING}")
        normalized[key] = value

    total = round(sum(normalized.values()), 2)
    average = round(total / len(normalized), 2)
    return normalized, total, average


class AssessmentService:
    def __init__(
        self,
        assessments: AssessmentRepository,
        users: UserRepository,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._assessments = assessments
        self._users = users
        self._clock = clock

    def submit(
        self,
        *,
        current_role: Role,
        student_id: int,
        professor_id: int,
        subject: str,
        class_datetime: datetime,
        student_role: str,
        ratings: Mapping[str, object],
        academic_year: str,
        comments: Optional[str] = None,
    ) -> int:
        if current_role != Role.STUDENT:
            raise AuthorizationError("Only students can submit assessments")

        student = self._users.get_by_id(int(student_id))
        if not student or student.role != Role.STUDENT:
            raise ValidationError("Student account not found")

        professor = self._users.get_by_id(int(professor_id))
        if not professor or professor.role != Role.PROFESSOR:
            raise ValidationError("Professor not found")

        try:
            officer_role = OfficerRole(student_role)
        except ValueError:
            raise ValidationError("Student role must be president, vp or secretary")

        normalized, total, average = score_ratings(ratings)

        assessment_id = self._assessments.create(
            NewAssessment(
                professor_id=professor.user_id,
                professor_name=professor.full_name,
                professor_email=professor.email,
                subject=require_non_empty(subject, "Subject"),
                class_datetime=class_datetime,
                student_id=student.user_id,
                student_name=student.full_name,
                student_email=student.email,
                student_role=officer_role,
                ratings=normalized,
                total_score=total,
                average_rating=average,
                academic_year=require_non_empty(academic_year, "Academic year"),
                comments=optional_text(comments, "Comments"),
                created_at=self._clock(),
            )
        )
        logger.info("Student %s assessed professor %s (avg=%.2f)", student.user_id, professor.user_id, average)
        return assessment_id

    def list_for_student(self, *, student_id: int) -> list[Assessment]:
        return list(self._assessments.list_for_student(int(student_id)))

    def list_for_professor(self, *, current_role: Role, current_user_id: int, professor_id: int) -> list[Assessment]:
        if current_role == Role.PROFESSOR and int(current_user_id) != int(professor_id):
            raise AuthorizationError("Professors can only view their own assessments")
        if current_role == Role.STUDENT:
            raise AuthorizationError("Access denied")
        return list(self._assessments.list_for_professor(int(professor_id)))
