from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import StudentSubmission, SubmissionFilter
from .repository import SubmissionRepository

_COLUMNS = """
    submission_id, student_id, student_name, student_email, professor_id,
    subject, section, class_date, google_docs_url, submitted_at
"""


def _to_submission(r: dict) -> StudentSubmission:
    return StudentSubmission(
        submission_id=int(r["submission_id"]),
        student_id=int(r["student_id"]),
        student_name=r["student_name"],
        student_email=r["student_email"],
        professor_id=int(r["professor_id"]) if r.get("professor_id") is not None else None,
        subject=r["subject"],
        section=r.get("section"),
        class_date=r["class_date"],
        google_docs_url=r["google_docs_url"],
        submitted_at=r["submitted_at"],
    )


class MySQLSubmissionRepository(SubmissionRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO student_submissions(
                    student_id, student_name, student_email, professor_id,
                    subject, section, class_date, google_docs_url, submitted_at
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    student_name=VALUES(student_name),
                    student_email=VALUES(student_email),
                    professor_id=VALUES(professor_id),
                    section=VALUES(section),
                    google_docs_url=VALUES(google_docs_url),
                    submitted_at=VALUES(submitted_at)
                """,
                (
                    int(student_id),
                    student_name,
                    student_email,
                    professor_id,
                    subject,
                    section,
                    class_date,
                    google_docs_url,
                    submitted_at,
                ),
            )
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM student_submissions
                WHERE student_id=%s AND class_date=%s AND subject=%s
                """,
                (int(student_id), class_date, subject),
            )
            return _to_submission(fetchone(cur))

    def list_for_student(self, student_id: int) -> Sequence[StudentSubmission]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM student_submissions WHERE student_id=%s ORDER BY submitted_at DESC",
                (int(student_id),),
            )
            return [_to_submission(r) for r in fetchall(cur)]

    def search(self, flt: SubmissionFilter) -> Sequence[StudentSubmission]:
        clauses = ["1=1"]
        params: list[object] = []
        if flt.section:
            clauses.append("section=%s")
            params.append(flt.section)
        if flt.subject:
            clauses.append("subject=%s")
            params.append(flt.subject)
        if flt.start_date and flt.end_date:
            clauses.append("class_date BETWEEN %s AND %s")
            params.extend([flt.start_date, flt.end_date])

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM student_submissions WHERE {' AND '.join(clauses)} ORDER BY submitted_at DESC",
                tuple(params),
            )
            return [_to_submission(r) for r in fetchall(cur)]
