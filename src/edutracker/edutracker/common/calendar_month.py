from __future__ import annotations

import calendar
import re
from dataclasses import dataclass
from datetime import date, datetime

from ..core.exceptions import ValidationError

_KEY_RE = re.compile(r"^(\d{4})-(\d{2})$")


@dataclass(frozen=True, order=True)
class CalendarMonth:
    """A calendar month such as 2026-01.

    Archive status records are keyed by ``key``. Ordering follows
    (year, month) so months compare chronologically.
    """

    year: int
    month: int

    def __post_init__(self) -> None:
        if not 1 <= int(self.month) <= 12:
            raise ValidationError(f"Invalid month: {self.month!r}")
        if not 1 <= int(self.year) <= 9999:
            raise ValidationError(f"Invalid year: {self.year!r}")

    @classmethod
    def from_date(cls, value: date) -> "CalendarMonth":
        return cls(value.year, value.month)

    @classmethod
    def parse(cls, key: str) -> "CalendarMonth":
        m = _KEY_RE.match((key or "").strip())
        if not m:
            raise ValidationError(f"Invalid month key (YYYY-MM): {key!r}")
        return cls(int(m.group(1)), int(m.group(2)))

    @property
    def key(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"

    def previous(self) -> "CalendarMonth":
        if self.month == 1:
            return CalendarMonth(self.year - 1, 12)
        return CalendarMonth(self.year, self.month - 1)

    def next(self) -> "CalendarMonth":
        if self.month == 12:
            return CalendarMonth(self.year + 1, 1)
        return CalendarMonth(self.year, self.month + 1)

    def first_instant(self) -> datetime:
        """Local midnight on the first day of the month."""
        return datetime(self.year, self.month, 1)

    def last_day(self) -> int:
        return calendar.monthrange(self.year, self.month)[1]

    def contains(self, value: date) -> bool:
        return value.year == self.year and value.month == self.month

    def __str__(self) -> str:
        return self.key
