# src/tasktime/tasks/task_models.py

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from enum import Enum, StrEnum
from typing import Any

from ..errors import ValidationError

DEADLINE_FORMATS = ("%Y-%m-%d %H:%M", "%Y-%m-%d %H:%M:%S")
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def parse_deadline(raw: str) -> datetime:
    """Parse a user-supplied deadline ("YYYY-MM-DD HH:MM[:SS]")."""
    text = (raw or "").strip()
    for fmt in DEADLINE_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    raise ValidationError(f"Invalid deadline {raw!r}; expected YYYY-MM-DD HH:MM")


def format_deadline(value: datetime) -> str:
    return value.strftime(DEADLINE_FORMATS[0])


def parse_priority(raw: str | int) -> int:
    try:
        value = int(str(raw).strip())
    except ValueError:
        raise ValidationError(f"Priority must be a positive integer, got {raw!r}") from None
    if value <= 0:
        raise ValidationError(f"Priority must be a positive integer, got {raw!r}")
    return value


def parse_description(raw: str) -> str:
    text = (raw or "").strip()
    if not text:
        raise ValidationError("description is required")
    return text


class TaskStatus(StrEnum):
    """Task lifecycle status. The only allowed transition is pending -> completed."""

    PENDING = "pending"
    COMPLETED = "completed"

    @classmethod
    def parse(cls, raw: str) -> TaskStatus:
        try:
            return cls((raw or "").strip().lower())
        except ValueError:
            raise ValidationError(f"Unknown status {raw!r}") from None


class Recurrence(StrEnum):
    NONE = "none"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"

    @classmethod
    def parse(cls, raw: str) -> Recurrence:
        try:
            return cls((raw or "").strip().lower())
        except ValueError:
            allowed = ", ".join(r.value for r in cls)
            raise ValidationError(f"Unknown recurrence {raw!r}; expected one of: {allowed}") from None


class TaskField(Enum):
    """
    Fields that update-task may change.

    Each member carries the validator that turns raw user text into the stored value,
    so an update can never write an unvalidated value into the table.
    """

    DESCRIPTION = ("description", parse_description)
    DEADLINE = ("deadline", parse_deadline)
    PRIORITY = ("priority", parse_priority)
    RECURRENCE = ("recurrence", Recurrence.parse)

    def __init__(self, field_name: str, parser: Callable[[str], Any]) -> None:
        self.field_name = field_name
        self.parser = parser

    def parse_value(self, raw: str) -> Any:
        return self.parser(raw)

    @classmethod
    def from_name(cls, raw: str) -> TaskField:
        name = (raw or "").strip().lower()
        for member in cls:
            if member.field_name == name:
                return member
        allowed = ", ".join(m.field_name for m in cls)
        raise ValidationError(f"Unknown field {raw!r}; updatable fields: {allowed}")


@dataclass(slots=True)
class Task:
    id: int
    description: str
    deadline: datetime
    priority: int
    recurrence: Recurrence
    status: TaskStatus = TaskStatus.PENDING

    @property
    def is_recurring(self) -> bool:
        return self.recurrence != Recurrence.NONE


class SessionAction(StrEnum):
    START = "start"
    PAUSE = "pause"
    END = "end"


@dataclass(slots=True, frozen=True)
class SessionEvent:
    """
    One line of the event log.

    `at` is epoch seconds, or None when the stored timestamp could not be parsed
    (the accounting engine skips such events).
    """

    task_id: int
    action: SessionAction
    at: float | None
