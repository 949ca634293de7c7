# src/tasktime/errors.py

from __future__ import annotations


class TasktimeError(Exception):
    """Base class for errors reported to the user as a one-line message."""


class ValidationError(TasktimeError, ValueError):
    """Malformed user input (bad date, unknown field, non-numeric priority...)."""


class TaskNotFoundError(TasktimeError, LookupError):
    pass


class TaskStoreError(TasktimeError):
    """The task table could not be read or written."""


class EventLogError(TasktimeError):
    """The session event log could not be read or written."""


class MalformedLogError(EventLogError):
    """Raised by the accounting engine when the double-start policy is 'error'."""


class CronInstallError(TasktimeError):
    """The cron daemon rejected (or could not receive) the new job table."""


class SlotExhaustedError(TasktimeError):
    """Every minute of the day is already claimed for a slot pattern."""


class DependencyMissingError(TasktimeError):
    """A required external program is not installed."""
