from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import OfficerRole, Role
from .model import User


class UserRepository(Protocol):
    """Repository interface for accounts.

    Services depend on this interface, never on a concrete database.
    """

    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[User]:
        raise NotImplementedError

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
        raise NotImplementedError

    def update_password(self, user_id: int, *, password_hash: str) -> bool:
        raise NotImplementedError

    def update_profile(
        self,
        user_id: int,
        *,
        full_name: str,
        email: str,
        department: Optional[str],
        subject: Optional[str],
    ) -> None:
        raise NotImplementedError

    def list_by_role(self, role: Role) -> Sequence[User]:
        """Newest accounts first."""

        raise NotImplementedError

    def delete_user(self, user_id: int) -> bool:
        raise NotImplementedError
