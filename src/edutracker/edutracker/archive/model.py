from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


@dataclass(frozen=True)
class ArchiveStatus:
    """Persisted checklist for one calendar month (not-started -> archived -> cleaned)."""

    month: str
    archive_completed: bool = False
    completed_by: Optional[int] = None
    completed_by_name: Optional[str] = None
    completed_at: Optional[datetime] = None
    cleanup_executed: bool = False
    cleanup_at: Optional[datetime] = None
    deleted_attendance: int = 0
    deleted_assessments: int = 0
    deleted_images: int = 0


@dataclass(frozen=True)
class ArchiveStatusView:
    """Read model returned by the tracker; synthetic when no record exists."""

    month: str
    completed: bool
    completed_by: Optional[int] = None
    completed_by_name: Optional[str] = None
    completed_at: Optional[datetime] = None
    cleanup_executed: bool = False
    cleanup_at: Optional[datetime] = None
    message: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def from_record(cls, record: ArchiveStatus) -> "ArchiveStatusView":
        return cls(
            month=record.month,
            completed=bool(record.archive_completed),
            completed_by=record.completed_by,
            completed_by_name=record.completed_by_name,
            completed_at=record.completed_at,
            cleanup_executed=bool(record.cleanup_executed),
            cleanup_at=record.cleanup_at,
        )

    def to_dict(self) -> dict:
        out = {
            "month": self.month,
            "completed": self.completed,
            "completed_by": self.completed_by,
            "completed_by_name": self.completed_by_name,
            "completed_at": _iso(self.completed_at),
            "cleanup_executed": self.cleanup_executed,
            "cleanup_at": _iso(self.cleanup_at),
        }
        if self.message:
            out["message"] = self.message
        if self.error:
            out["error"] = self.error
        return out


@dataclass(frozen=True)
class CleanupCounts:
    attendance: int = 0
    assessments: int = 0
    images: int = 0
    image_failures: int = 0

    def to_dict(self) -> dict:
        return {
            "attendance": self.attendance,
            "assessments": self.assessments,
            "images": self.images,
            "image_failures": self.image_failures,
        }


@dataclass(frozen=True)
class ImageCleanupOutcome:
    """Result of the best-effort image phase, reported apart from record deletion."""

    deleted: int = 0
    missing: int = 0
    failed: int = 0


@dataclass(frozen=True)
class CleanupResult:
    success: bool
    message: str
    archived_month: Optional[str] = None
    deleted: Optional[CleanupCounts] = None
    requires_admin: bool = False
    error: Optional[str] = None
    cleared_by: Optional[dict] = None

    def to_dict(self) -> dict:
        out: dict = {"success": self.success, "message": self.message, "requires_admin": self.requires_admin}
        if self.archived_month:
            out["archived_month"] = self.archived_month
        if self.deleted is not None:
            out["deleted"] = self.deleted.to_dict()
        if self.error:
            out["error"] = self.error
        if self.cleared_by is not None:
            out["cleared_by"] = self.cleared_by
        return out
