from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User roles used for authorization."""

    ADMIN = "admin"
    PROFESSOR = "professor"
    STUDENT = "student"


class SessionStatus(str, Enum):
    """Lifecycle of a professor's attendance session."""

    ONGOING = "ongoing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class OfficerRole(str, Enum):
    """Class officer positions that can be assessed."""

    PRESIDENT = "president"
    VP = "vp"
    SECRETARY = "secretary"
