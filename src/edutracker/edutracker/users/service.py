from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..attendance.repository import AttendanceRepository
from ..common.validators import optional_text, require_min_length, require_non_empty
from ..core.enums import OfficerRole, Role
from ..core.exceptions import AuthenticationError, AuthorizationError, NotFoundError, ValidationError
from .model import User
from .repository import UserRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionUser:
    """What we store into the Flask session after login."""

    user_id: int
    full_name: str
    email: str
    role: Role

    def to_dict(self) -> dict:
        return {
            "user_id": self.user_id,
            "full_name": self.full_name,
            "email": self.email,
            "role": self.role.value,
        }


class AuthService:
    """Use case: authenticate a user (login)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def authenticate(self, email: str, password: str) -> SessionUser:
        user = self._users.get_by_email((email or "").strip().lower())
        if not user or not user.is_active:
            raise AuthenticationError("Invalid email or password")

        try:
            ok = check_password_hash(user.password_hash, password or "")
        except ValueError:
            # placeholder or corrupted hashes
            ok = False

        if not ok:
            raise AuthenticationError("Invalid email or password")

        return SessionUser(user_id=user.user_id, full_name=user.full_name, email=user.email, role=user.role)


def _normalize_email(email: str) -> str:
    email = require_non_empty(email, "Email").lower()
    local, _, domain = email.partition("@")
    if not local or "." not in domain:
        raise ValidationError("Email is not valid")
    return email


class UserService:
    """Use case: manage accounts.

    Admins create professor and student accounts with a temporary
    password; admin accounts only come from ``ensure_admin``.
    """

    def __init__(self, users: UserRepository, sessions: Optional[AttendanceRepository] = None):
        self._users = users
        self._sessions = sessions

    def ensure_admin(self, *, full_name: str, email: str, password: str) -> int:
        """Create the admin account, or reset its password if it already exists."""

        full_name = require_non_empty(full_name, "Full name")
        email = _normalize_email(email)
        require_min_length(password, "Password", 6)

        password_hash = generate_password_hash(password)
        existing = self._users.get_by_email(email)
        if existing:
            if existing.role != Role.ADMIN:
                raise ValidationError(f"{email} already belongs to a {existing.role.value} account")
            self._users.update_password(existing.user_id, password_hash=password_hash)
            logger.info("Reset password for admin %s", email)
            return existing.user_id

        user_id = self._users.create_user(full_name=full_name, email=email, password_hash=password_hash, role=Role.ADMIN)
        logger.info("Created admin %s (id=%s)", email, user_id)
        return user_id

    def _create_account(self, *, role: Role, full_name: str, email: str, temporary_password: str, **profile) -> User:
        full_name = require_non_empty(full_name, "Full name")
        email = _normalize_email(email)
        require_min_length(temporary_password, "Temporary password", 6)

        if self._users.get_by_email(email):
            raise ValidationError("Email already registered")

        user_id = self._users.create_user(
            full_name=full_name,
            email=email,
            password_hash=generate_password_hash(temporary_password),
            role=role,
            **profile,
        )
        logger.info("Created %s account %s (id=%s)", role.value, email, user_id)
        return self._users.get_by_id(user_id)

    def create_professor(
        self,
        *,
        full_name: str,
        email: str,
        temporary_password: str,
        department: str = "",
        subject: str = "",
    ) -> User:
        return self._create_account(
            role=Role.PROFESSOR,
            full_name=full_name,
            email=email,
            temporary_password=temporary_password,
            department=optional_text(department, "Department"),
            subject=optional_text(subject, "Subject"),
        )

    def create_student(self, *, full_name: str, email: str, temporary_password: str, officer_role: str = "") -> User:
        officer: Optional[OfficerRole] = None
        if officer_role:
            try:
                officer = OfficerRole(officer_role)
            except ValueError:
                raise ValidationError("Student role must be president, vp or secretary")

        return self._create_account(
            role=Role.STUDENT,
            full_name=full_name,
            email=email,
            temporary_password=temporary_password,
            officer_role=officer,
        )

    def update_professor(
        self,
        user_id: int,
        *,
        full_name: str,
        email: str,
        department: str = "",
        subject: str = "",
    ) -> User:
        professor = self._users.get_by_id(int(user_id))
        if not professor:
            raise NotFoundError("Professor not found")
        if professor.role != Role.PROFESSOR:
            raise ValidationError("User is not a professor")

        email = _normalize_email(email)
        if email != professor.email:
            other = self._users.get_by_email(email)
            if other and other.user_id != professor.user_id:
                raise ValidationError("Email already in use")

        self._users.update_profile(
            professor.user_id,
            full_name=require_non_empty(full_name, "Full name"),
            email=email,
            department=optional_text(department, "Department"),
            subject=optional_text(subject, "Subject"),
        )
        logger.info("Updated professor %s", professor.user_id)
        return self._users.get_by_id(professor.user_id)

    def list_by_role(self, role: Role) -> list[User]:
        return list(self._users.list_by_role(role))

    def professor_directory(self) -> list[dict]:
        """Name, subject and email of every professor, sorted by name."""

        professors = sorted(self._users.list_by_role(Role.PROFESSOR), key=lambda u: u.full_name.lower())
        return [
            {"user_id": p.user_id, "full_name": p.full_name, "subject": p.subject, "email": p.email}
            for p in professors
        ]

    def delete_user(self, user_id: int) -> None:
        user = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFoundError("User not found")
        if user.role == Role.ADMIN:
            raise AuthorizationError("Cannot delete admin users")
        if (
            user.role == Role.PROFESSOR
            and self._sessions is not None
            and self._sessions.count_for_professor(user.user_id)
        ):
            raise ValidationError("Professor still has attendance sessions; delete or archive them first")

        self._users.delete_user(user.user_id)
        logger.info("Deleted %s account %s", user.role.value, user.user_id)
