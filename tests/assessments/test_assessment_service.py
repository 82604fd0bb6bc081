from __future__ import annotations

from datetime import datetime

import pytest

from src.edutracker.edutracker.assessments.service import AssessmentService, score_ratings
from src.edutracker.edutracker.core.enums import OfficerRole, Role
from src.edutracker.edutracker.core.exceptions import AuthorizationError, ValidationError


@pytest.fixture
def people(users):
    professor = users.add(full_name="Dr. Reyes", email="reyes@school.edu", role=Role.PROFESSOR)
    student = users.add(full_name="Ana Cruz", email="ana@school.edu", role=Role.STUDENT)
    return professor, student


@pytest.fixture
def service(assessments, users, clock):
    return AssessmentService(assessments, users, clock=clock)


def _submit(service, professor, student, **overrides):
    kwargs = dict(
        current_role=Role.STUDENT,
        student_id=student.user_id,
        professor_id=professor.user_id,
        subject="Math",
        class_datetime=datetime(2026, 2, 14, 9, 0, 0),
        student_role="president",
        ratings={"clarity": 5, "punctuality": 4, "engagement": 4},
        academic_year="2025-2026",
    )
    kwargs.update(overrides)
    return service.submit(**kwargs)


def test_score_ratings_total_and_average():
    normalized, total, avg = score_ratings({"a": 5, "b": 4, "c": 4})

    assert normalized == {"a": 5.0, "b": 4.0, "c": 4.0}
    assert total == 13.0
    assert avg == 4.33


@pytest.mark.parametrize(
    "ratings",
    [{}, {"a": 0}, {"a": 6}, {"a": "x"}, {"a": True}, {"a": float("nan")}, {"  ": 3}],
)
def test_score_ratings_rejects_bad_input(ratings):
    with pytest.raises(ValidationError):
        score_ratings(ratings)


def test_student_submits_assessment(service, assessments, people, clock):
    professor, student = people

    assessment_id = _submit(service, professor, student, comments="Great class")

    stored = assessments.rows[assessment_id]
    assert stored.professor_name == "Dr. Reyes"
    assert stored.student_email == "ana@school.edu"
    assert stored.student_role == OfficerRole.PRESIDENT
    assert stored.average_rating == 4.33
    assert stored.created_at == clock.now
    assert stored.to_dict()["student_role"] == "president"


def test_only_students_submit(service, people):
    professor, student = people

    with pytest.raises(AuthorizationError):
        _submit(service, professor, student, current_role=Role.PROFESSOR)


def test_unknown_officer_role_rejected(service, people):
    professor, student = people

    with pytest.raises(ValidationError):
        _submit(service, professor, student, student_role="treasurer")


def test_professor_must_exist(service, people):
    professor, student = people

    with pytest.raises(ValidationError):
        _submit(service, professor, student, professor_id=student.user_id)


def test_professor_sees_only_own_assessments(service, people):
    professor, student = people
    _submit(service, professor, student)

    assert len(service.list_for_professor(current_role=Role.PROFESSOR, current_user_id=professor.user_id, professor_id=professor.user_id)) == 1
    assert len(service.list_for_professor(current_role=Role.ADMIN, current_user_id=99, professor_id=professor.user_id)) == 1
    with pytest.raises(AuthorizationError):
        service.list_for_professor(current_role=Role.PROFESSOR, current_user_id=42, professor_id=professor.user_id)
    with pytest.raises(AuthorizationError):
        service.list_for_professor(current_role=Role.STUDENT, current_user_id=student.user_id, professor_id=professor.user_id)


def test_student_lists_own_assessments(service, people):
    professor, student = people
    _submit(service, professor, student)

    assert [a.student_id for a in service.list_for_student(student_id=student.user_id)] == [student.user_id]
