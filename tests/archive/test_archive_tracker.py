from __future__ import annotations

from datetime import datetime

from src.edutracker.edutracker.archive.model import CleanupCounts
from src.edutracker.edutracker.common.calendar_month import CalendarMonth


def test_previous_month_follows_clock(tracker, clock):
    assert tracker.previous_month() == CalendarMonth(2026, 1)
    clock.now = datetime(2026, 1, 2, 8, 0, 0)
    assert tracker.previous_month() == CalendarMonth(2025, 12)


def test_status_without_record_is_not_completed(tracker):
    status = tracker.get_status()
    assert status.month == "2026-01"
    assert status.completed is False
    assert status.cleanup_executed is False
    assert status.message == "Archive not started for previous month"
    assert status.error is None


def test_mark_complete_targets_previous_month(tracker, statuses, clock):
    result = tracker.mark_complete(7, "Admin One")

    assert result == {"success": True, "month": "2026-01", "message": "Archive marked as complete"}
    record = statuses.rows["2026-01"]
    assert record.archive_completed is True
    assert record.completed_by == 7
    assert record.completed_by_name == "Admin One"
    assert record.completed_at == clock.now

    status = tracker.get_status()
    assert status.completed is True
    assert status.message is None


def test_mark_complete_again_keeps_cleanup_flag(tracker, statuses, clock):
    tracker.mark_complete(7, "Admin One")
    tracker.record_cleanup(CalendarMonth(2026, 1), CleanupCounts(attendance=3, assessments=1, images=6))

    clock.now = datetime(2026, 2, 16, 9, 0, 0)
    result = tracker.mark_complete(8, "Admin Two")

    assert result["success"] is True
    record = statuses.rows["2026-01"]
    assert record.cleanup_executed is True
    assert record.deleted_attendance == 3
    assert record.completed_by == 8
    assert record.completed_at == datetime(2026, 2, 16, 9, 0, 0)


def test_status_lookup_failure_is_reported_not_raised(tracker, statuses):
    statuses.fail_reads = True

    status = tracker.get_status()

    assert status.completed is False
    assert status.month == "2026-01"
    assert "database unavailable" in status.error
    assert status.to_dict()["error"] == status.error


def test_explicit_month_lookup(tracker, statuses, clock):
    statuses.upsert_completion(month_key="2025-11", admin_id=1, admin_name="A", completed_at=clock.now)

    assert tracker.get_status(CalendarMonth(2025, 11)).completed is True
    assert tracker.get_status().completed is False
