from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import SessionStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause
from ..images.store import ImageRef
from .model import AttendanceSession, SessionHistoryQuery
from .repository import AttendanceRepository

_COLUMNS = """
    session_id, professor_id, subject, section, class_room, notes,
    start_time, end_time, duration_seconds,
    start_image_url, start_image_public_id, end_image_url, end_image_public_id,
    status
"""


def _image(url: Optional[str], public_id: Optional[str]) -> Optional[ImageRef]:
    if not url and not public_id:
        return None
    return ImageRef(url=url or "", public_id=public_id or "")


def _to_session(r: dict) -> AttendanceSession:
    duration = r.get("duration_seconds")
    return AttendanceSession(
        session_id=int(r["session_id"]),
        professor_id=int(r["professor_id"]),
        subject=r["subject"],
        section=r["section"],
        class_room=r.get("class_room"),
        notes=r.get("notes"),
        start_time=r["start_time"],
        end_time=r.get("end_time"),
        duration_seconds=int(duration) if duration is not None else None,
        start_image=_image(r.get("start_image_url"), r.get("start_image_public_id")),
        end_image=_image(r.get("end_image_url"), r.get("end_image_public_id")),
        status=SessionStatus(r["status"]),
    )


def _where(query: SessionHistoryQuery) -> tuple[str, list[object]]:
    clauses = ["professor_id=%s"]
    params: list[object] = [int(query.professor_id)]

    if query.start is not None:
        clauses.append("start_time >= %s")
        params.append(query.start)
    if query.end is not None:
        clauses.append("start_time <= %s")
        params.append(query.end)
    if query.subject:
        clauses.append("subject=%s")
        params.append(query.subject)
    if query.section:
        clauses.append("section=%s")
        params.append(query.section)
    if query.status is not None:
        clauses.append("status=%s")
        params.append(query.status.value)

    return " AND ".join(clauses), params


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, session_id: int) -> Optional[AttendanceSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_sessions WHERE session_id=%s", (int(session_id),))
            r = fetchone(cur)
            return _to_session(r) if r else None

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_sessions(
                    professor_id, subject, section, class_room, notes,
                    start_time, start_image_url, start_image_public_id, status
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(professor_id),
                    subject,
                    section,
                    class_room,
                    notes,
                    start_time,
                    start_image.url,
                    start_image.public_id,
                    SessionStatus.ONGOING.value,
                ),
            )
            return int(cur.lastrowid)

    def complete_session(
        self,
        *,
        session_id: int,
        end_time: datetime,
        duration_seconds: int,
        end_image: ImageRef,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_sessions
                SET end_time=%s, duration_seconds=%s, end_image_url=%s, end_image_public_id=%s, status=%s
                WHERE session_id=%s AND status=%s
                """,
                (
                    end_time,
                    int(duration_seconds),
                    end_image.url,
                    end_image.public_id,
                    SessionStatus.COMPLETED.value,
                    int(session_id),
                    SessionStatus.ONGOING.value,
                ),
            )
            return cur.rowcount > 0

    def list_for_professor_between(self, professor_id: int, *, start: datetime, end: datetime) -> Sequence[AttendanceSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_sessions
                WHERE professor_id=%s AND start_time BETWEEN %s AND %s
                ORDER BY start_time DESC
                """,
                (int(professor_id), start, end),
            )
            return [_to_session(r) for r in fetchall(cur)]

    def search(self, query: SessionHistoryQuery, *, offset: int, limit: int) -> Sequence[AttendanceSession]:
        where, params = _where(query)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_sessions
                WHERE {where}
                ORDER BY start_time DESC
                LIMIT %s OFFSET %s
                """,
                tuple(params + [int(limit), int(offset)]),
            )
            return [_to_session(r) for r in fetchall(cur)]

    def count_matching(self, query: SessionHistoryQuery) -> int:
        where, params = _where(query)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS n FROM attendance_sessions WHERE {where}", tuple(params))
            return int(fetchone(cur)["n"])

    def count_for_professor(
        self,
        professor_id: int,
        *,
        status: Optional[SessionStatus] = None,
        since: Optional[datetime] = None,
    ) -> int:
        clauses = ["professor_id=%s"]
        params: list[object] = [int(professor_id)]
        if status is not None:
            clauses.append("status=%s")
            params.append(status.value)
        if since is not None:
            clauses.append("start_time >= %s")
            params.append(since)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS n FROM attendance_sessions WHERE {' AND '.join(clauses)}", tuple(params))
            return int(fetchone(cur)["n"])

    def list_started_before(self, cutoff: datetime) -> Sequence[AttendanceSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_sessions WHERE start_time < %s ORDER BY start_time",
                (cutoff,),
            )
            return [_to_session(r) for r in fetchall(cur)]

    def list_all(self) -> Sequence[AttendanceSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_sessions ORDER BY start_time")
            return [_to_session(r) for r in fetchall(cur)]

    def count_all(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM attendance_sessions")
            return int(fetchone(cur)["n"])

    def delete_by_ids(self, session_ids: Sequence[int]) -> int:
        ids = [int(i) for i in session_ids]
        if not ids:
            return 0
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"DELETE FROM attendance_sessions WHERE session_id IN ({in_clause(ids)})", tuple(ids))
            return int(cur.rowcount)

    def delete_all(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM attendance_sessions")
            return int(cur.rowcount)
