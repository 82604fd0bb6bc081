from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import ArchiveStatus, CleanupCounts
from .repository import ArchiveStatusRepository


class MySQLArchiveStatusRepository(ArchiveStatusRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, month_key: str) -> Optional[ArchiveStatus]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT month_key, archive_completed, completed_by, completed_by_name, completed_at,
                       cleanup_executed, cleanup_at, deleted_attendance, deleted_assessments, deleted_images
                FROM archive_statuses
                WHERE month_key=%s
                """,
                (month_key,),
            )
            r = fetchone(cur)
            if not r:
                return None
            return ArchiveStatus(
                month=r["month_key"],
                archive_completed=bool(r["archive_completed"]),
                completed_by=int(r["completed_by"]) if r.get("completed_by") is not None else None,
                completed_by_name=r.get("completed_by_name"),
                completed_at=r.get("completed_at"),
                cleanup_executed=bool(r["cleanup_executed"]),
                cleanup_at=r.get("cleanup_at"),
                deleted_attendance=int(r.get("deleted_attendance") or 0),
                deleted_assessments=int(r.get("deleted_assessments") or 0),
                deleted_images=int(r.get("deleted_images") or 0),
            )

    def upsert_completion(self, *, month_key: str, admin_id: int, admin_name: str, completed_at: datetime) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO archive_statuses(month_key, archive_completed, completed_by, completed_by_name, completed_at)
                VALUES(%s, 1, %s, %s, %s)
                ON DUPLICATE KEY UPDATE
                    archive_completed=1,
                    completed_by=VALUES(completed_by),
                    completed_by_name=VALUES(completed_by_name),
                    completed_at=VALUES(completed_at)
                """,
                (month_key, int(admin_id), admin_name, completed_at),
            )

    def record_cleanup(self, *, month_key: str, cleanup_at: datetime, counts: CleanupCounts) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO archive_statuses(
                    month_key, cleanup_executed, cleanup_at,
                    deleted_attendance, deleted_assessments, deleted_images
                )
                VALUES(%s, 1, %s, %s, %s, %s)
                ON DUPLICATE KEY UPDATE
                    cleanup_executed=1,
                    cleanup_at=VALUES(cleanup_at),
                    deleted_attendance=VALUES(deleted_attendance),
                    deleted_assessments=VALUES(deleted_assessments),
                    deleted_images=VALUES(deleted_images)
                """,
                (month_key, cleanup_at, counts.attendance, counts.assessments, counts.images),
            )

    def delete_all(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM archive_statuses")
            return int(cur.rowcount)
