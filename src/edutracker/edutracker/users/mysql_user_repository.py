from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import OfficerRole, Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import User
from .repository import UserRepository

_COLUMNS = "user_id, full_name, email, password_hash, role, is_active, department, subject, officer_role, created_at"


def _to_user(row: dict) -> User:
    return User(
        user_id=int(row["user_id"]),
        full_name=row["full_name"],
        email=row["email"],
        password_hash=row["password_hash"],
        role=Role(row["role"]),
        is_active=bool(row.get("is_active", True)),
        department=row.get("department"),
        subject=row.get("subject"),
        officer_role=OfficerRole(row["officer_role"]) if row.get("officer_role") else None,
        created_at=row.get("created_at"),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE user_id=%s", (int(user_id),))
            row = fetchone(cur)
            return _to_user(row) if row else None

    def get_by_email(self, email: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE email=%s", (email.strip().lower(),))
            row = fetchone(cur)
            return _to_user(row) if row else None

    def create_user(
        self,
        *,
        full_name: str,
        email: str,
        password_hash: str,
        role: Role,
        department: Optional[str] = None,
        subject: Optional[str] = None,
        officer_role: Optional[OfficerRole] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO users(full_name, email, password_hash, role, department, subject, officer_role)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    full_name,
                    email.strip().lower(),
                    password_hash,
                    role.value,
                    department,
                    subject,
                    officer_role.value if officer_role else None,
                ),
            )
            return int(cur.lastrowid)

    def update_password(self, user_id: int, *, password_hash: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE users SET password_hash=%s, is_active=1 WHERE user_id=%s",
                (password_hash, int(user_id)),
            )
            return cur.rowcount > 0

    def update_profile(
        self,
        user_id: int,
        *,
        full_name: str,
        email: str,
        department: Optional[str],
        subject: Optional[str],
    ) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE users
                SET full_name=%s, email=%s, department=%s, subject=%s
                WHERE user_id=%s
                """,
                (full_name, email.strip().lower(), department, subject, int(user_id)),
            )

    def list_by_role(self, role: Role) -> Sequence[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM users WHERE role=%s ORDER BY created_at DESC, user_id DESC",
                (role.value,),
            )
            return [_to_user(r) for r in fetchall(cur)]

    def delete_user(self, user_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM users WHERE user_id=%s", (int(user_id),))
            return cur.rowcount > 0
