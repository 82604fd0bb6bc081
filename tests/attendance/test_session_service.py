from __future__ import annotations

from datetime import date, datetime, timedelta

import pytest

from src.edutracker.edutracker.attendance.model import format_duration
from src.edutracker.edutracker.attendance.service import AttendanceSessionService, UploadedImage
from src.edutracker.edutracker.core.enums import SessionStatus
from src.edutracker.edutracker.core.exceptions import NotFoundError, ValidationError

PHOTO = UploadedImage(data=b"\xff\xd8jpeg", filename="class.jpg")


@pytest.fixture
def service(sessions, images, clock):
    return AttendanceSessionService(sessions, images, clock=clock)


def test_format_duration():
    assert format_duration(None) is None
    assert format_duration(0) is None
    assert format_duration(45) == "45s"
    assert format_duration(125) == "2m 5s"
    assert format_duration(3725) == "1h 2m 5s"


def test_start_session_requires_image(service):
    with pytest.raises(ValidationError):
        service.start_session(professor_id=1, subject="Math", section="A", image=None)


def test_start_session_requires_subject(service):
    with pytest.raises(ValidationError):
        service.start_session(professor_id=1, subject="  ", section="A", image=PHOTO)


def test_notes_are_limited(service):
    with pytest.raises(ValidationError):
        service.start_session(professor_id=1, subject="Math", section="A", image=PHOTO, notes="x" * 501)


def test_start_then_end_session(service, clock):
    started = service.start_session(professor_id=1, subject="Math", section="A", image=PHOTO, class_room="R101")

    assert started.status == SessionStatus.ONGOING
    assert started.start_time == clock.now
    assert started.start_image is not None
    assert started.start_image.public_id.startswith("attendance/1/")

    clock.now = clock.now + timedelta(hours=1, minutes=30)
    ended = service.end_session(professor_id=1, session_id=started.session_id, image=PHOTO)

    assert ended.status == SessionStatus.COMPLETED
    assert ended.duration_seconds == 5400
    assert ended.end_image is not None
    assert ended.to_dict()["formatted_duration"] == "1h 30m 0s"


def test_end_requires_later_time(service):
    started = service.start_session(professor_id=1, subject="Math", section="A", image=PHOTO)

    with pytest.raises(ValidationError):
        service.end_session(professor_id=1, session_id=started.session_id, image=PHOTO)


def test_cannot_end_other_professors_session(service, clock):
    started = service.start_session(professor_id=1, subject="Math", section="A", image=PHOTO)
    clock.now = clock.now + timedelta(minutes=5)

    with pytest.raises(NotFoundError):
        service.end_session(professor_id=2, session_id=started.session_id, image=PHOTO)


def test_cannot_end_completed_session_twice(service, clock):
    started = service.start_session(professor_id=1, subject="Math", section="A", image=PHOTO)
    clock.now = clock.now + timedelta(minutes=5)
    service.end_session(professor_id=1, session_id=started.session_id, image=PHOTO)

    with pytest.raises(NotFoundError):
        service.end_session(professor_id=1, session_id=started.session_id, image=PHOTO)


def test_delete_session_removes_images(service, sessions, images, clock):
    started = service.start_session(professor_id=1, subject="Math", section="A", image=PHOTO)
    clock.now = clock.now + timedelta(minutes=5)
    service.end_session(professor_id=1, session_id=started.session_id, image=PHOTO)

    result = service.delete_session(professor_id=1, session_id=started.session_id)

    assert result == {"session_id": started.session_id, "image_failures": 0}
    assert sessions.count_all() == 0
    assert images.stored == set()


def test_delete_session_survives_image_errors(service, sessions, images):
    started = service.start_session(professor_id=1, subject="Math", section="A", image=PHOTO)
    images.broken.add(started.start_image.public_id)

    result = service.delete_session(professor_id=1, session_id=started.session_id)

    assert result["image_failures"] == 1
    assert sessions.count_all() == 0


def test_list_today_only_returns_todays_sessions(service, sessions, clock):
    sessions.add(start_time=datetime(2026, 2, 15, 8, 0, 0))
    sessions.add(start_time=datetime(2026, 2, 14, 8, 0, 0))
    sessions.add(start_time=datetime(2026, 2, 15, 9, 0, 0), professor_id=2)

    today = service.list_today(professor_id=1)

    assert [s.start_time for s in today] == [datetime(2026, 2, 15, 8, 0, 0)]


def test_history_filters_and_paginates(service, sessions):
    for day in range(1, 13):
        sessions.add(start_time=datetime(2026, 2, day, 9, 0, 0), subject="Math" if day % 2 else "Physics")

    page = service.history(professor_id=1, subject="Math", page=2, limit=4)
    payload = page.to_dict()

    assert page.total == 6
    assert len(page.items) == 2
    assert payload["pagination"] == {
        "current_page": 2,
        "total_pages": 2,
        "total_records": 6,
        "records_per_page": 4,
    }

    ranged = service.history(professor_id=1, start_date=date(2026, 2, 10), end_date=date(2026, 2, 12))
    assert ranged.total == 3


def test_history_rejects_unknown_status(service):
    with pytest.raises(ValidationError):
        service.history(professor_id=1, status="paused")


def test_stats_counts_completed_sessions(service, sessions):
    sessions.add(start_time=datetime(2026, 2, 15, 8, 0, 0))
    sessions.add(start_time=datetime(2026, 2, 3, 8, 0, 0))
    sessions.add(start_time=datetime(2026, 1, 20, 8, 0, 0))
    sessions.add(start_time=datetime(2026, 2, 15, 9, 0, 0), status=SessionStatus.ONGOING)

    assert service.stats(professor_id=1) == {"total_classes": 3, "this_week": 1, "this_month": 2}


def test_delete_session_counts_any_backend_error(service, sessions, images, clock):
    started = service.start_session(professor_id=1, subject="Math", section="A", image=PHOTO)
    clock.now = clock.now + timedelta(minutes=5)
    service.end_session(professor_id=1, session_id=started.session_id, image=PHOTO)
    images.crashing.add(started.start_image.public_id)

    result = service.delete_session(professor_id=1, session_id=started.session_id)

    assert result["image_failures"] == 1
    assert sessions.count_all() == 0
    assert len(images.stored) == 1


def test_end_shortly_after_start_keeps_fractional_seconds(service, clock):
    clock.now = datetime(2026, 2, 15, 10, 0, 0, 200000)
    started = service.start_session(professor_id=1, subject="Math", section="A", image=PHOTO)
    clock.now = datetime(2026, 2, 15, 10, 0, 0, 600000)

    ended = service.end_session(professor_id=1, session_id=started.session_id, image=PHOTO)

    assert ended.status == SessionStatus.COMPLETED
    assert ended.end_time - ended.start_time == timedelta(microseconds=400000)
