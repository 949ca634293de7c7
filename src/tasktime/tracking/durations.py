# src/tasktime/tracking/durations.py

"""
Time-on-task accounting.

compute_duration() rebuilds active intervals for one task from the event log:
start opens an interval, pause/end closes it, and an interval still open at the
end of the log counts up to `now`.

DurationCache keeps one snapshot of every task's tally, tagged with the log's
freshness marker. Any change to the log invalidates the whole snapshot.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from enum import StrEnum

from ..errors import MalformedLogError
from ..tasks.task_models import SessionAction, SessionEvent
from .event_log import EventLog, FreshnessMarker

logger = logging.getLogger(__name__)


class DoubleStartPolicy(StrEnum):
    """What to do with a `start` that arrives while an interval is already open."""

    DISCARD = "discard"  # restart the interval; earlier open time is lost
    MERGE = "merge"  # keep the earlier start; the second start is a no-op
    ERROR = "error"  # raise MalformedLogError


@dataclass(slots=True)
class DurationTally:
    closed_seconds: int = 0
    open_since: float | None = None

    def total(self, now: float) -> int:
        total = self.closed_seconds
        if self.open_since is not None:
            total += max(0, int(now - self.open_since))
        return total


def _apply(tally: DurationTally, event: SessionEvent, policy: DoubleStartPolicy) -> None:
    if event.at is None:
        return

    if event.action == SessionAction.START:
        if tally.open_since is not None:
            if policy == DoubleStartPolicy.ERROR:
                raise MalformedLogError(f"Task {event.task_id}: start while an interval is already open")
            if policy == DoubleStartPolicy.MERGE:
                return
            logger.debug("Task %s: double start, discarding open interval", event.task_id)
        tally.open_since = event.at
        return

    # pause / end
    if tally.open_since is None:
        return
    tally.closed_seconds += max(0, int(event.at - tally.open_since))
    tally.open_since = None


def tally_events(
    task_id: int,
    events: Iterable[SessionEvent],
    *,
    policy: DoubleStartPolicy = DoubleStartPolicy.DISCARD,
) -> DurationTally:
    tally = DurationTally()
    for event in events:
        if event.task_id == task_id:
            _apply(tally, event, policy)
    return tally


def tally_all(
    events: Iterable[SessionEvent],
    *,
    policy: DoubleStartPolicy = DoubleStartPolicy.DISCARD,
) -> dict[int, DurationTally]:
    """Single pass over the log; same result as tally_events() per distinct task id."""
    tallies: dict[int, DurationTally] = {}
    for event in events:
        tally = tallies.setdefault(event.task_id, DurationTally())
        _apply(tally, event, policy)
    return tallies


def compute_duration(
    task_id: int,
    events: Iterable[SessionEvent],
    now: float,
    *,
    policy: DoubleStartPolicy = DoubleStartPolicy.DISCARD,
) -> int:
    """Accumulated active seconds for task_id (never negative)."""
    return tally_events(task_id, events, policy=policy).total(now)


class DurationCache:
    """
    Per-run cache of task durations backed by the event log.

    get_duration() compares the log's freshness marker with the one stored at
    the last rebuild. On a match the snapshot is served without reading the log;
    on any mismatch every task is recomputed. Read errors propagate.
    """

    def __init__(
        self,
        log: EventLog,
        *,
        policy: DoubleStartPolicy = DoubleStartPolicy.DISCARD,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._log = log
        self._policy = policy
        self._clock = clock
        self._lock = threading.Lock()
        self._marker: FreshnessMarker | None = None
        self._snapshot: dict[int, DurationTally] | None = None
        self.rebuild_count = 0

    def invalidate(self) -> None:
        with self._lock:
            self._marker = None
            self._snapshot = None

    def _ensure_fresh(self) -> dict[int, DurationTally]:
        # The marker is taken before the read: if the log changes mid-scan the
        # stored marker is already stale and the next call rebuilds again.
        marker = self._log.freshness_marker()
        if self._snapshot is not None and marker == self._marker:
            return self._snapshot

        events = self._log.read_events()
        snapshot = tally_all(events, policy=self._policy)
        self._snapshot = snapshot
        self._marker = marker
        self.rebuild_count += 1
        logger.debug("Duration cache rebuilt: %d tasks, %d events", len(snapshot), len(events))
        return snapshot

    def get_duration(self, task_id: int, now: float | None = None) -> int:
        now_ts = self._clock() if now is None else now
        with self._lock:
            snapshot = self._ensure_fresh()
            tally = snapshot.get(int(task_id))
        return tally.total(now_ts) if tally is not None else 0

    def all_durations(self, now: float | None = None) -> dict[int, int]:
        now_ts = self._clock() if now is None else now
        with self._lock:
            snapshot = self._ensure_fresh()
            return {task_id: tally.total(now_ts) for task_id, tally in snapshot.items()}

    def is_running(self, task_id: int) -> bool:
        with self._lock:
            tally = self._ensure_fresh().get(int(task_id))
        return tally is not None and tally.open_since is not None
