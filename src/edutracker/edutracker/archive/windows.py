"""Calendar predicates for the monthly archive workflow. No I/O."""

from __future__ import annotations

from datetime import date
from typing import Optional

from ..common.calendar_month import CalendarMonth
from ..common.datetime_utils import now_local
from ..core.constants import ADMIN_REMINDER_FROM_DAY, CLEANUP_WINDOW_FIRST_DAY, CLEANUP_WINDOW_LAST_DAY


def _today(today: Optional[date]) -> date:
    return today if today is not None else now_local().date()


def is_cleanup_window(today: Optional[date] = None) -> bool:
    return CLEANUP_WINDOW_FIRST_DAY <= _today(today).day <= CLEANUP_WINDOW_LAST_DAY


def should_remind_admin(today: Optional[date] = None) -> bool:
    return _today(today).day >= ADMIN_REMINDER_FROM_DAY


def get_days_until_month_end(today: Optional[date] = None) -> int:
    d = _today(today)
    return CalendarMonth.from_date(d).last_day() - d.day
