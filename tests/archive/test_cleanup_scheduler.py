from __future__ import annotations

from datetime import datetime

from src.edutracker.edutracker.archive.scheduler import JOB_ID, CleanupScheduler


class FakeBackgroundScheduler:
    def __init__(self):
        self.jobs: dict[str, dict] = {}
        self.running = False

    def add_job(self, **kwargs):
        self.jobs[kwargs["id"]] = kwargs

    def start(self):
        self.running = True

    def shutdown(self, wait=True):
        self.running = False


def _scheduler(engine, tracker, clock, backend=None):
    return CleanupScheduler(engine, tracker, clock=clock, scheduler=backend)


def test_outside_window_does_nothing(engine, tracker, clock, sessions, statuses):
    statuses.upsert_completion(month_key="2026-01", admin_id=1, admin_name="A", completed_at=clock.now)
    sessions.add(start_time=datetime(2026, 1, 10, 9, 0, 0))

    outcome = _scheduler(engine, tracker, clock).run_check()

    assert outcome == {"ran": False, "reason": "outside_window"}
    assert sessions.count_all() == 1


def test_unconfirmed_archive_is_skipped(engine, tracker, clock, sessions):
    clock.now = datetime(2026, 2, 1, 0, 0, 0)
    sessions.add(start_time=datetime(2026, 1, 10, 9, 0, 0))

    outcome = _scheduler(engine, tracker, clock).run_check()

    assert outcome == {"ran": False, "reason": "archive_not_complete", "month": "2026-01"}
    assert sessions.count_all() == 1


def test_confirmed_archive_is_cleaned_once(engine, tracker, clock, sessions, statuses):
    clock.now = datetime(2026, 2, 2, 13, 0, 0)
    statuses.upsert_completion(month_key="2026-01", admin_id=1, admin_name="A", completed_at=clock.now)
    sessions.add(start_time=datetime(2026, 1, 10, 9, 0, 0))
    sched = _scheduler(engine, tracker, clock)

    first = sched.run_check()
    second = sched.run_check()

    assert first["ran"] is True
    assert first["result"]["success"] is True
    assert first["result"]["deleted"]["attendance"] == 1
    assert second == {"ran": False, "reason": "already_cleaned", "month": "2026-01"}


def test_status_error_is_reported(engine, tracker, clock, statuses):
    clock.now = datetime(2026, 2, 3, 23, 0, 0)
    statuses.fail_reads = True

    outcome = _scheduler(engine, tracker, clock).run_check()

    assert outcome["ran"] is False
    assert outcome["reason"] == "status_error"


def test_tick_swallows_unexpected_errors(engine, tracker, clock):
    clock.now = datetime(2026, 2, 1, 0, 0, 0)
    sched = _scheduler(engine, tracker, clock)

    def boom():
        raise RuntimeError("unexpected")

    sched.run_check = boom
    sched._tick()


def test_start_registers_hourly_job_and_stop_shuts_down(engine, tracker, clock):
    backend = FakeBackgroundScheduler()
    sched = _scheduler(engine, tracker, clock, backend)

    sched.start()

    job = backend.jobs[JOB_ID]
    assert backend.running is True
    assert job["trigger"] == "cron"
    assert job["minute"] == 0
    assert job["max_instances"] == 1
    assert job["coalesce"] is True

    sched.stop()
    assert backend.running is False
