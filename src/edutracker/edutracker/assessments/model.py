from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..core.enums import OfficerRole


@dataclass(frozen=True)
class Assessment:
    """A student's rating of a professor's class. Never updated once stored."""

    assessment_id: int
    professor_id: int
    professor_name: str
    professor_email: str
    subject: str
    class_datetime: datetime
    student_id: int
    student_name: str
    student_email: str
    student_role: OfficerRole
    total_score: float
    average_rating: float
    academic_year: str
    created_at: datetime
    ratings: dict[str, float] = field(default_factory=dict)
    comments: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "assessment_id": self.assessment_id,
            "professor_id": self.professor_id,
            "professor_name": self.professor_name,
            "professor_email": self.professor_email,
            "subject": self.subject,
            "class_datetime": self.class_datetime.isoformat(),
            "student_id": self.student_id,
            "student_name": self.student_name,
            "student_email": self.student_email,
            "student_role": self.student_role.value,
            "ratings": dict(self.ratings),
            "total_score": self.total_score,
            "average_rating": self.average_rating,
            "comments": self.comments,
            "academic_year": self.academic_year,
            "created_at": self.created_at.isoformat(),
        }


@dataclass(frozen=True)
class NewAssessment:
    professor_id: int
    professor_name: str
    professor_email: str
    subject: str
    class_datetime: datetime
    student_id: int
    student_name: str
    student_email: str
    student_role: OfficerRole
    ratings: dict[str, float]
    total_score: float
    average_rating: float
    academic_year: str
    created_at: datetime
    comments: Optional[str] = None
