# src/tasktime/tracking/event_log.py

from __future__ import annotations

import logging
import time
from collections.abc import Iterator
from datetime import datetime
from pathlib import Path

from ..errors import EventLogError
from ..tasks.task_models import TIMESTAMP_FORMAT, SessionAction, SessionEvent

logger = logging.getLogger(__name__)

DELIMITER = "|"

# (inode, size, mtime_ns): an append always changes size, a rewrite changes inode.
FreshnessMarker = tuple[int, int, int]


def parse_timestamp(raw: str) -> float | None:
    try:
        return datetime.strptime(raw.strip(), TIMESTAMP_FORMAT).timestamp()
    except ValueError:
        return None


def format_timestamp(ts: float) -> str:
    return datetime.fromtimestamp(ts).strftime(TIMESTAMP_FORMAT)


class EventLog:
    """
    Append-only session log, one event per line:

        <task_id>|<start|pause|end>|YYYY-MM-DD HH:MM:SS

    Lines are read back in write order; that order is treated as chronological
    and is never re-sorted.
    """

    def __init__(self, path: str | Path = "tasks.log") -> None:
        self._path = Path(path)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        try:
            self._path.touch(exist_ok=True)
        except OSError as e:
            raise EventLogError(f"Cannot create event log {self._path}: {e}") from e

    @property
    def path(self) -> Path:
        return self._path

    def freshness_marker(self) -> FreshnessMarker:
        try:
            st = self._path.stat()
        except OSError as e:
            raise EventLogError(f"Cannot stat event log {self._path}: {e}") from e
        return (st.st_ino, st.st_size, st.st_mtime_ns)

    def append(self, task_id: int, action: SessionAction, at: float | None = None) -> SessionEvent:
        ts = time.time() if at is None else float(at)
        # Whole seconds: that is the resolution of the stored timestamp.
        ts = float(int(ts))
        line = f"{int(task_id)}{DELIMITER}{action.value}{DELIMITER}{format_timestamp(ts)}\n"
        try:
            with self._path.open("a", encoding="utf-8") as fh:
                fh.write(line)
        except OSError as e:
            raise EventLogError(f"Cannot append to event log {self._path}: {e}") from e
        logger.debug("Event appended task_id=%s action=%s", task_id, action.value)
        return SessionEvent(task_id=int(task_id), action=action, at=ts)

    def read_events(self) -> list[SessionEvent]:
        try:
            data = self._path.read_bytes()
        except OSError as e:
            raise EventLogError(f"Cannot read event log {self._path}: {e}") from e
        return list(self._parse_lines(data))

    def _parse_lines(self, data: bytes) -> Iterator[SessionEvent]:
        # Decoded per line: one corrupt line must not hide the rest of the log.
        for lineno, raw in enumerate(data.splitlines(), start=1):
            try:
                line = raw.decode("utf-8")
            except UnicodeDecodeError:
                logger.warning("%s:%d: skipping undecodable log line %r", self._path, lineno, raw)
                continue
            if not line.strip():
                continue
            parts = line.split(DELIMITER)
            if len(parts) != 3:
                logger.warning("%s:%d: skipping malformed log line %r", self._path, lineno, line)
                continue
            raw_id, raw_action, raw_ts = parts
            try:
                task_id = int(raw_id.strip())
                action = SessionAction(raw_action.strip())
            except ValueError:
                logger.warning("%s:%d: skipping malformed log line %r", self._path, lineno, line)
                continue
            at = parse_timestamp(raw_ts)
            if at is None:
                logger.warning("%s:%d: unparseable timestamp %r", self._path, lineno, raw_ts)
            yield SessionEvent(task_id=task_id, action=action, at=at)
