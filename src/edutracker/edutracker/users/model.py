from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import OfficerRole, Role


@dataclass(frozen=True)
class User:
    """Domain entity: an account (admin, professor or student).

    Plain data object; no DB access here. ``department`` and ``subject``
    are only set for professors, ``officer_role`` only for students.
    """

    user_id: int
    full_name: str
    email: str
    password_hash: str
    role: Role
    is_active: bool = True
    department: Optional[str] = None
    subject: Optional[str] = None
    officer_role: Optional[OfficerRole] = None
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "user_id": self.user_id,
            "full_name": self.full_name,
            "email": self.email,
            "role": self.role.value,
            "is_active": self.is_active,
            "department": self.department,
            "subject": self.subject,
            "officer_role": self.officer_role.value if self.officer_role else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
