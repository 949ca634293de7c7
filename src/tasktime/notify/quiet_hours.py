# src/tasktime/notify/quiet_hours.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time

from ..errors import ValidationError


def parse_hhmm(raw: str) -> int:
    """'HH:MM' -> minute of day."""
    try:
        hh, mm = (int(x) for x in (raw or "").strip().split(":"))
    except ValueError:
        raise ValidationError(f"Invalid time of day {raw!r}; expected HH:MM") from None
    if not (0 <= hh < 24 and 0 <= mm < 60):
        raise ValidationError(f"Invalid time of day {raw!r}; expected HH:MM")
    return hh * 60 + mm


def minute_of_day(now: datetime | time) -> int:
    return now.hour * 60 + now.minute


def in_quiet_hours(now: datetime | time, start: int, end: int) -> bool:
    """
    True if `now` falls inside [start, end), both given as minute of day.

    start >= end means the window crosses midnight (22:00-06:00). Note that
    start == end is treated as a full-day window.
    """
    current = minute_of_day(now)
    if start < end:
        return start <= current < end
    return current >= start or current < end


@dataclass(slots=True, frozen=True)
class QuietHours:
    start: int
    end: int

    @classmethod
    def from_strings(cls, start: str, end: str) -> QuietHours:
        return cls(start=parse_hhmm(start), end=parse_hhmm(end))

    def contains(self, now: datetime | time) -> bool:
        return in_quiet_hours(now, self.start, self.end)
