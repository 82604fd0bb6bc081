from __future__ import annotations

import json
from datetime import datetime
from typing import Sequence

from ..core.enums import OfficerRole
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, load_json_map
from .model import Assessment, NewAssessment
from .repository import AssessmentRepository

_COLUMNS = """
    assessment_id, professor_id, professor_name, professor_email, subject, class_datetime,
    student_id, student_name, student_email, student_role, ratings,
    total_score, average_rating, comments, academic_year, created_at
"""


def _to_assessment(r: dict) -> Assessment:
    return Assessment(
        assessment_id=int(r["assessment_id"]),
        professor_id=int(r["professor_id"]),
        professor_name=r["professor_name"],
        professor_email=r["professor_email"],
        subject=r["subject"],
        class_datetime=r["class_datetime"],
        student_id=int(r["student_id"]),
        student_name=r["student_name"],
        student_email=r["student_email"],
        student_role=OfficerRole(r["student_role"]),
        ratings=load_json_map(r.get("ratings")),
        total_score=float(r["total_score"]),
        average_rating=float(r["average_rating"]),
        comments=r.get("comments"),
        academic_year=r["academic_year"],
        created_at=r["created_at"],
    )


class MySQLAssessmentRepository(AssessmentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, data: NewAssessment) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO assessments(
                    professor_id, professor_name, professor_email, subject, class_datetime,
                    student_id, student_name, student_email, student_role, ratings,
                    total_score, average_rating, comments, academic_year, created_at
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(data.professor_id),
                    data.professor_name,
                    data.professor_email,
                    data.subject,
                    data.class_datetime,
                    int(data.student_id),
                    data.student_name,
                    data.student_email,
                    data.student_role.value,
                    json.dumps(data.ratings),
                    data.total_score,
                    data.average_rating,
                    data.comments,
                    data.academic_year,
                    data.created_at,
                ),
            )
            return int(cur.lastrowid)

    def list_for_student(self, student_id: int) -> Sequence[Assessment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM assessments WHERE student_id=%s ORDER BY created_at DESC",
                (int(student_id),),
            )
            return [_to_assessment(r) for r in fetchall(cur)]

    def list_for_professor(self, professor_id: int) -> Sequence[Assessment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM assessments WHERE professor_id=%s ORDER BY created_at DESC",
                (int(professor_id),),
            )
            return [_to_assessment(r) for r in fetchall(cur)]

    def count_all(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM assessments")
            return int(fetchone(cur)["n"])

    def delete_created_before(self, cutoff: datetime) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM assessments WHERE created_at < %s", (cutoff,))
            return int(cur.rowcount)

    def delete_all(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM assessments")
            return int(cur.rowcount)
