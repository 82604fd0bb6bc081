from __future__ import annotations

from datetime import datetime
from typing import Protocol, Sequence

from .model import Assessment, NewAssessment


class AssessmentRepository(Protocol):
    def create(self, data: NewAssessment) -> int:
        raise NotImplementedError

    def list_for_student(self, student_id: int) -> Sequence[Assessment]:
        raise NotImplementedError

    def list_for_professor(self, professor_id: int) -> Sequence[Assessment]:
        raise NotImplementedError

    def count_all(self) -> int:
        raise NotImplementedError

    def delete_created_before(self, cutoff: datetime) -> int:
        raise NotImplementedError

    def delete_all(self) -> int:
        raise NotImplementedError
