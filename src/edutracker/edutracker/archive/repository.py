from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol

from .model import ArchiveStatus, CleanupCounts


class ArchiveStatusRepository(Protocol):
    """One row per month key. Upserts must be atomic at the storage layer."""

    def get(self, month_key: str) -> Optional[ArchiveStatus]:
        raise NotImplementedError

    def upsert_completion(self, *, month_key: str, admin_id: int, admin_name: str, completed_at: datetime) -> None:
        """Set the completion fields; must leave cleanup fields untouched."""

        raise NotImplementedError

    def record_cleanup(self, *, month_key: str, cleanup_at: datetime, counts: CleanupCounts) -> None:
        raise NotImplementedError

    def delete_all(self) -> int:
        raise NotImplementedError
