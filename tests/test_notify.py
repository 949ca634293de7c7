# tests/test_notify.py

from __future__ import annotations

from datetime import datetime, time, timedelta

import pytest

from tasktime.errors import ValidationError
from tasktime.notify.notifier import Notifier
from tasktime.notify.quiet_hours import QuietHours, in_quiet_hours, parse_hhmm
from tasktime.notify.throttle import NotificationThrottle

from .fakes import FakeTransport

NOON = datetime(2025, 3, 10, 12, 0, 0)


def test_parse_hhmm() -> None:
    assert parse_hhmm("22:00") == 1320
    assert parse_hhmm("06:05") == 365
    for bad in ("24:00", "7", "aa:bb", ""):
        with pytest.raises(ValidationError):
            parse_hhmm(bad)


def test_quiet_hours_wrapping_midnight() -> None:
    start, end = parse_hhmm("22:00"), parse_hhmm("06:00")
    assert in_quiet_hours(time(23, 30), start, end)
    assert in_quiet_hours(time(5, 0), start, end)
    assert in_quiet_hours(time(22, 0), start, end)
    assert not in_quiet_hours(time(6, 0), start, end)
    assert not in_quiet_hours(time(12, 0), start, end)


def test_quiet_hours_same_day_window() -> None:
    quiet = QuietHours.from_strings("13:00", "15:00")
    assert quiet.contains(datetime(2025, 3, 10, 13, 0))
    assert quiet.contains(datetime(2025, 3, 10, 14, 59))
    assert not quiet.contains(datetime(2025, 3, 10, 15, 0))
    assert not quiet.contains(datetime(2025, 3, 10, 12, 59))


def test_throttle_suppresses_within_threshold() -> None:
    throttle = NotificationThrottle(threshold_seconds=30)
    assert throttle.should_notify("task_start", NOON)
    assert not throttle.should_notify("task_start", NOON + timedelta(seconds=5))


def test_throttle_allows_after_threshold() -> None:
    throttle = NotificationThrottle(threshold_seconds=30)
    assert throttle.should_notify("task_start", NOON)
    assert throttle.should_notify("task_start", NOON + timedelta(seconds=31))


def test_suppressed_attempt_does_not_extend_window() -> None:
    throttle = NotificationThrottle(threshold_seconds=30)
    assert throttle.should_notify("task_start", NOON)
    assert not throttle.should_notify("task_start", NOON + timedelta(seconds=20))
    assert throttle.should_notify("task_start", NOON + timedelta(seconds=30))


def test_categories_are_independent() -> None:
    throttle = NotificationThrottle(threshold_seconds=30)
    assert throttle.should_notify("task_start", NOON)
    assert throttle.should_notify("task_end", NOON + timedelta(seconds=1))


def test_quiet_hours_suppression_still_counts_against_throttle() -> None:
    throttle = NotificationThrottle(threshold_seconds=600, quiet_hours=QuietHours.from_strings("22:00", "06:00"))
    late = datetime(2025, 3, 10, 5, 58)

    assert not throttle.should_notify("task_start", late)
    assert throttle.last_fired("task_start") == late
    # quiet hours are over, but the throttle window opened at 05:58 still applies
    assert not throttle.should_notify("task_start", late + timedelta(minutes=3))
    assert throttle.should_notify("task_start", late + timedelta(minutes=10))


def test_notifier_fans_out_and_survives_transport_failure() -> None:
    broken = FakeTransport(name="broken", fail=True)
    ok = FakeTransport(name="ok")
    notifier = Notifier(NotificationThrottle(threshold_seconds=30), [broken, ok])

    assert notifier.notify("task_end", "Task ended", "Write report", now=NOON)
    assert [(n.title, n.body) for n in ok.sent] == [("Task ended", "Write report")]


def test_notifier_respects_gate() -> None:
    ok = FakeTransport()
    notifier = Notifier(
        NotificationThrottle(threshold_seconds=30, quiet_hours=QuietHours.from_strings("22:00", "06:00")),
        [ok],
        clock=lambda: datetime(2025, 3, 10, 23, 30),
    )
    assert not notifier.notify("task_start", "Task started", "x")
    assert ok.sent == []
