from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional


@dataclass(frozen=True)
class StudentSubmission:
    """A student's attendance sheet link for one class.

    Keyed by (student_id, class_date, subject); uploading again replaces the link.
    """

    submission_id: int
    student_id: int
    student_name: str
    student_email: str
    subject: str
    class_date: date
    google_docs_url: str
    submitted_at: datetime
    professor_id: Optional[int] = None
    section: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "submission_id": self.submission_id,
            "student_id": self.student_id,
            "student_name": self.student_name,
            "student_email": self.student_email,
            "professor_id": self.professor_id,
            "subject": self.subject,
            "section": self.section,
            "class_date": self.class_date.isoformat(),
            "google_docs_url": self.google_docs_url,
            "submitted_at": self.submitted_at.isoformat(),
        }


@dataclass(frozen=True)
class SubmissionFilter:
    section: Optional[str] = None
    subject: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
