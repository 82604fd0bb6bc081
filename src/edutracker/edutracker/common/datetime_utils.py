from __future__ import annotations

from datetime import date, datetime, timedelta


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so services can take it as their default clock and
    tests can pass a fixed one.
    """
    return datetime.now()


def start_of_day(d: date) -> datetime:
    return datetime(d.year, d.month, d.day)


def end_of_day(d: date) -> datetime:
    return start_of_day(d) + timedelta(days=1) - timedelta(microseconds=1)


def start_of_week(d: date) -> datetime:
    """Sunday 00:00 of the week containing ``d``."""
    days_since_sunday = (d.weekday() + 1) % 7
    return start_of_day(d - timedelta(days=days_since_sunday))
