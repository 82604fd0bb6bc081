from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..core.enums import SessionStatus
from ..images.store import ImageRef


def format_duration(seconds: Optional[int]) -> Optional[str]:
    if not seconds:
        return None
    hours, rest = divmod(int(seconds), 3600)
    minutes, secs = divmod(rest, 60)
    if hours > 0:
        return f"{hours}h {minutes}m {secs}s"
    if minutes > 0:
        return f"{minutes}m {secs}s"
    return f"{secs}s"


@dataclass(frozen=True)
class AttendanceSession:
    """Domain entity: one class session opened and closed by a professor."""

    session_id: int
    professor_id: int
    subject: str
    section: str
    start_time: datetime
    status: SessionStatus
    class_room: Optional[str] = None
    notes: Optional[str] = None
    end_time: Optional[datetime] = None
    duration_seconds: Optional[int] = None
    start_image: Optional[ImageRef] = None
    end_image: Optional[ImageRef] = None

    def image_public_ids(self) -> list[str]:
        return [img.public_id for img in (self.start_image, self.end_image) if img and img.public_id]

    def to_dict(self) -> dict:
        return {
            "session_id": self.session_id,
            "professor_id": self.professor_id,
            "subject": self.subject,
            "section": self.section,
            "class_room": self.class_room,
            "notes": self.notes,
            "start_time": self.start_time.isoformat(),
            "end_time": self.end_time.isoformat() if self.end_time else None,
            "duration": self.duration_seconds,
            "formatted_duration": format_duration(self.duration_seconds),
            "start_image": self.start_image.to_dict() if self.start_image else None,
            "end_image": self.end_image.to_dict() if self.end_image else None,
            "status": self.status.value,
        }


@dataclass(frozen=True)
class SessionHistoryQuery:
    professor_id: int
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    subject: Optional[str] = None
    section: Optional[str] = None
    status: Optional[SessionStatus] = None


@dataclass(frozen=True)
class SessionPage:
    items: list[AttendanceSession] = field(default_factory=list)
    total: int = 0
    page: int = 1
    limit: int = 10

    def to_dict(self) -> dict:
        total_pages = (self.total + self.limit - 1) // self.limit if self.limit else 0
        return {
            "data": [s.to_dict() for s in self.items],
            "pagination": {
                "current_page": self.page,
                "total_pages": total_pages,
                "total_records": self.total,
                "records_per_page": self.limit,
            },
        }
