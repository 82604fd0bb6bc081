from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Optional

import pytest
from werkzeug.security import generate_password_hash

from src.edutracker.edutracker.archive.cleanup import CleanupEngine
from src.edutracker.edutracker.archive.model import ArchiveStatus, CleanupCounts
from src.edutracker.edutracker.archive.tracker import ArchiveStatusTracker
from src.edutracker.edutracker.assessments.model import Assessment, NewAssessment
from src.edutracker.edutracker.attendance.model import AttendanceSession, SessionHistoryQuery
from src.edutracker.edutracker.core.enums import OfficerRole, Role, SessionStatus
from src.edutracker.edutracker.images.store import ImageRef, ImageStoreError
from src.edutracker.edutracker.submissions.model import StudentSubmission, SubmissionFilter
from src.edutracker.edutracker.users.model import User


class FixedClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


class StorageDown(Exception):
    pass


class InMemoryUsers:
    def __init__(self):
        self.by_id: dict[int, User] = {}

    def add(self, *, full_name: str, email: str, role: Role, password: str = "secret123", is_active: bool = True) -> User:
        user = User(
            user_id=max(self.by_id, default=0) + 1,
            full_name=full_name,
            email=email.lower(),
            password_hash=generate_password_hash(password),
            role=role,
            is_active=is_active,
        )
        self.by_id[user.user_id] = user
        return user

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self.by_id.get(int(user_id))

    def get_by_email(self, email: str) -> Optional[User]:
        return next((u for u in self.by_id.values() if u.email == email.strip().lower()), None)

    def create_user(self, *, full_name, email, password_hash, role, department=None, subject=None, officer_role=None) -> int:
        user_id = max(self.by_id, default=0) + 1
        self.by_id[user_id] = User(
            user_id,
            full_name,
            email.lower(),
            password_hash,
            role,
            department=department,
            subject=subject,
            officer_role=officer_role,
        )
        return user_id

    def update_password(self, user_id, *, password_hash) -> bool:
        user = self.by_id.get(int(user_id))
        if not user:
            return False
        self.by_id[user.user_id] = replace(user, password_hash=password_hash, is_active=True)
        return True

    def update_profile(self, user_id, *, full_name, email, department, subject) -> None:
        user = self.by_id[int(user_id)]
        self.by_id[user.user_id] = replace(user, full_name=full_name, email=email.lower(), department=department, subject=subject)

    def list_by_role(self, role):
        return [u for u in reversed(list(self.by_id.values())) if u.role == role]

    def delete_user(self, user_id) -> bool:
        return self.by_id.pop(int(user_id), None) is not None


class InMemoryAttendance:
    def __init__(self):
        self.rows: dict[int, AttendanceSession] = {}
        self._id = 0
        self.fail_deletes = False

    def add(
        self,
        *,
        start_time: datetime,
        professor_id: int = 1,
        subject: str = "Math",
        section: str = "A",
        status: SessionStatus = SessionStatus.COMPLETED,
        start_image: Optional[ImageRef] = None,
        end_image: Optional[ImageRef] = None,
    ) -> AttendanceSession:
        self._id += 1
        session = AttendanceSession(
            session_id=self._id,
            professor_id=professor_id,
            subject=subject,
            section=section,
            start_time=start_time,
            status=status,
            start_image=start_image,
            end_image=end_image,
        )
        self.rows[self._id] = session
        return session

    def get_by_id(self, session_id):
        return self.rows.get(int(session_id))

    def create_session(self, *, professor_id, subject, section, class_room, notes, start_time, start_image) -> int:
        session = self.add(
            start_time=start_time,
            professor_id=professor_id,
            subject=subject,
            section=section,
            status=SessionStatus.ONGOING,
            start_image=start_image,
        )
        self.rows[session.session_id] = replace(session, class_room=class_room, notes=notes)
        return session.session_id

    def complete_session(self, *, session_id, end_time, duration_seconds, end_image) -> bool:
        session = self.rows.get(int(session_id))
        if not session or session.status != SessionStatus.ONGOING:
            return False
        self.rows[session.session_id] = replace(
            session,
            end_time=end_time,
            duration_seconds=duration_seconds,
            end_image=end_image,
            status=SessionStatus.COMPLETED,
        )
        return True

    def list_for_professor_between(self, professor_id, *, start, end):
        items = [s for s in self.rows.values() if s.professor_id == professor_id and start <= s.start_time <= end]
        return sorted(items, key=lambda s: s.start_time, reverse=True)

    def _matching(self, q: SessionHistoryQuery):
        items = [s for s in self.rows.values() if s.professor_id == q.professor_id]
        if q.start:
            items = [s for s in items if s.start_time >= q.start]
        if q.end:
            items = [s for s in items if s.start_time <= q.end]
        if q.subject:
            items = [s for s in items if s.subject == q.subject]
        if q.section:
            items = [s for s in items if s.section == q.section]
        if q.status:
            items = [s for s in items if s.status == q.status]
        return sorted(items, key=lambda s: s.start_time, reverse=True)

    def search(self, query, *, offset, limit):
        return self._matching(query)[offset : offset + limit]

    def count_matching(self, query) -> int:
        return len(self._matching(query))

    def count_for_professor(self, professor_id, *, status=None, since=None) -> int:
        items = [s for s in self.rows.values() if s.professor_id == professor_id]
        if status is not None:
            items = [s for s in items if s.status == status]
        if since is not None:
            items = [s for s in items if s.start_time >= since]
        return len(items)

    def list_started_before(self, cutoff):
        return sorted((s for s in self.rows.values() if s.start_time < cutoff), key=lambda s: s.start_time)

    def list_all(self):
        return list(self.rows.values())

    def count_all(self) -> int:
        return len(self.rows)

    def delete_by_ids(self, session_ids) -> int:
        if self.fail_deletes:
            raise StorageDown("database unavailable")
        deleted = 0
        for sid in session_ids:
            if self.rows.pop(int(sid), None) is not None:
                deleted += 1
        return deleted

    def delete_all(self) -> int:
        n = len(self.rows)
        self.rows.clear()
        return n


class InMemoryAssessments:
    def __init__(self):
        self.rows: dict[int, Assessment] = {}
        self._id = 0

    def create(self, data: NewAssessment) -> int:
        self._id += 1
        self.rows[self._id] = Assessment(assessment_id=self._id, **data.__dict__)
        return self._id

    def add(self, *, created_at: datetime, professor_id: int = 1, student_id: int = 2) -> Assessment:
        assessment_id = self.create(
            NewAssessment(
                professor_id=professor_id,
                professor_name="Prof",
                professor_email="prof@school.edu",
                subject="Math",
                class_datetime=created_at,
                student_id=student_id,
                student_name="Stu",
                student_email="stu@school.edu",
                student_role=OfficerRole.PRESIDENT,
                ratings={"clarity": 4.0},
                total_score=4.0,
                average_rating=4.0,
                academic_year="2025-2026",
                created_at=created_at,
            )
        )
        return self.rows[assessment_id]

    def list_for_student(self, student_id):
        return sorted((a for a in self.rows.values() if a.student_id == student_id), key=lambda a: a.created_at, reverse=True)

    def list_for_professor(self, professor_id):
        return sorted((a for a in self.rows.values() if a.professor_id == professor_id), key=lambda a: a.created_at, reverse=True)

    def count_all(self) -> int:
        return len(self.rows)

    def delete_created_before(self, cutoff) -> int:
        doomed = [k for k, a in self.rows.items() if a.created_at < cutoff]
        for k in doomed:
            del self.rows[k]
        return len(doomed)

    def delete_all(self) -> int:
        n = len(self.rows)
        self.rows.clear()
        return n


class InMemoryArchiveStatuses:
    def __init__(self):
        self.rows: dict[str, ArchiveStatus] = {}
        self.fail_reads = False

    def get(self, month_key):
        if self.fail_reads:
            raise StorageDown("database unavailable")
        return self.rows.get(month_key)

    def upsert_completion(self, *, month_key, admin_id, admin_name, completed_at) -> None:
        current = self.rows.get(month_key) or ArchiveStatus(month=month_key)
        self.rows[month_key] = replace(
            current,
            archive_completed=True,
            completed_by=admin_id,
            completed_by_name=admin_name,
            completed_at=completed_at,
        )

    def record_cleanup(self, *, month_key, cleanup_at, counts: CleanupCounts) -> None:
        current = self.rows.get(month_key) or ArchiveStatus(month=month_key)
        self.rows[month_key] = replace(
            current,
            cleanup_executed=True,
            cleanup_at=cleanup_at,
            deleted_attendance=counts.attendance,
            deleted_assessments=counts.assessments,
            deleted_images=counts.images,
        )

    def delete_all(self) -> int:
        n = len(self.rows)
        self.rows.clear()
        return n


class FakeImageStore:
    def __init__(self):
        self.stored: set[str] = set()
        self.destroyed: list[str] = []
        self.broken: set[str] = set()
        self.crashing: set[str] = set()
        self._n = 0

    def ref(self, public_id: str) -> ImageRef:
        self.stored.add(public_id)
        return ImageRef(url=f"/uploads/{public_id}", public_id=public_id)

    def save(self, data: bytes, *, filename: str, folder: str) -> ImageRef:
        self._n += 1
        return self.ref(f"{folder}/img-{self._n}.jpg")

    def destroy(self, public_id: str) -> bool:
        if public_id in self.broken:
            raise ImageStoreError(f"cannot delete {public_id}")
        if public_id in self.crashing:
            raise OSError(f"backend unreachable for {public_id}")
        self.destroyed.append(public_id)
        if public_id in self.stored:
            self.stored.discard(public_id)
            return True
        return False


class InMemorySubmissions:
    def __init__(self):
        self.rows: dict[tuple, StudentSubmission] = {}

    def upsert(self, *, student_id, student_name, student_email, professor_id, subject, section, class_date, google_docs_url, submitted_at):
        key = (student_id, class_date, subject)
        existing = self.rows.get(key)
        self.rows[key] = StudentSubmission(
            submission_id=existing.submission_id if existing else len(self.rows) + 1,
            student_id=student_id,
            student_name=student_name,
            student_email=student_email,
            professor_id=professor_id,
            subject=subject,
            section=section,
            class_date=class_date,
            google_docs_url=google_docs_url,
            submitted_at=submitted_at,
        )
        return self.rows[key]

    def list_for_student(self, student_id):
        return sorted((s for s in self.rows.values() if s.student_id == student_id), key=lambda s: s.submitted_at, reverse=True)

    def search(self, flt: SubmissionFilter):
        items = list(self.rows.values())
        if flt.section:
            items = [s for s in items if s.section == flt.section]
        if flt.subject:
            items = [s for s in items if s.subject == flt.subject]
        if flt.start_date and flt.end_date:
            items = [s for s in items if flt.start_date <= s.class_date <= flt.end_date]
        return sorted(items, key=lambda s: s.submitted_at, reverse=True)


@pytest.fixture
def clock():
    return FixedClock(datetime(2026, 2, 15, 10, 0, 0))


@pytest.fixture
def users():
    return InMemoryUsers()


@pytest.fixture
def sessions():
    return InMemoryAttendance()


@pytest.fixture
def assessments():
    return InMemoryAssessments()


@pytest.fixture
def statuses():
    return InMemoryArchiveStatuses()


@pytest.fixture
def images():
    return FakeImageStore()


@pytest.fixture
def submissions():
    return InMemorySubmissions()


@pytest.fixture
def tracker(statuses, clock):
    return ArchiveStatusTracker(statuses, clock=clock)


@pytest.fixture
def engine(tracker, sessions, assessments, statuses, images, clock):
    return CleanupEngine(tracker, sessions, assessments, statuses, images, clock=clock)
