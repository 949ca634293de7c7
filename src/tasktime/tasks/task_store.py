# src/tasktime/tasks/task_store.py

from __future__ import annotations

import contextlib
import csv
import io
import logging
import os
import time
from pathlib import Path

from ..errors import TaskNotFoundError, TaskStoreError, ValidationError
from .task_models import (
    Recurrence,
    Task,
    TaskField,
    TaskStatus,
    format_deadline,
    parse_deadline,
    parse_description,
    parse_priority,
)

logger = logging.getLogger(__name__)

DELIMITER = "|"
FIELD_COUNT = 6


class TaskStore:
    """
    Plain-text task table.

    One row per task, `|`-delimited:
        id|description|deadline|priority|recurrence|status

    Every mutation loads the whole table, applies the change in memory and
    rewrites the file atomically (temp file + os.replace). No locking across
    processes.
    """

    def __init__(self, path: str | Path = "tasks.db") -> None:
        self._path = Path(path)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        try:
            self._path.touch(exist_ok=True)
        except OSError as e:
            raise TaskStoreError(f"Cannot create task table {self._path}: {e}") from e
        logger.debug("TaskStore ready path=%s", self._path)

    @property
    def path(self) -> Path:
        return self._path

    # ---- low-level helpers ----

    @staticmethod
    def _row_to_task(row: list[str]) -> Task:
        if len(row) != FIELD_COUNT:
            raise ValidationError(f"expected {FIELD_COUNT} fields, got {len(row)}")
        raw_id, description, deadline, priority, recurrence, status = row
        try:
            task_id = int(raw_id)
        except ValueError:
            raise ValidationError(f"task id {raw_id!r} is not an integer") from None
        return Task(
            id=task_id,
            description=parse_description(description),
            deadline=parse_deadline(deadline),
            priority=parse_priority(priority),
            recurrence=Recurrence.parse(recurrence),
            status=TaskStatus.parse(status),
        )

    @staticmethod
    def _task_to_row(task: Task) -> list[str]:
        return [
            str(task.id),
            task.description,
            format_deadline(task.deadline),
            str(task.priority),
            task.recurrence.value,
            task.status.value,
        ]

    def _load(self, *, skip_invalid: bool = False) -> list[Task]:
        try:
            text = self._path.read_text("utf-8")
        except OSError as e:
            raise TaskStoreError(f"Cannot read task table {self._path}: {e}") from e

        tasks: list[Task] = []
        reader = csv.reader(io.StringIO(text), delimiter=DELIMITER)
        for lineno, row in enumerate(reader, start=1):
            if not row or all(not cell.strip() for cell in row):
                continue
            try:
                tasks.append(self._row_to_task(row))
            except ValidationError as e:
                if skip_invalid:
                    logger.warning("%s:%d: skipping malformed task row: %s", self._path, lineno, e)
                    continue
                raise TaskStoreError(f"{self._path}:{lineno}: malformed task row: {e}") from e
        return tasks

    def _save(self, tasks: list[Task]) -> None:
        buf = io.StringIO()
        writer = csv.writer(buf, delimiter=DELIMITER, lineterminator="\n")
        for task in tasks:
            writer.writerow(self._task_to_row(task))

        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        try:
            tmp.write_text(buf.getvalue(), "utf-8")
            os.replace(tmp, self._path)
        except OSError as e:
            with contextlib.suppress(OSError):
                tmp.unlink()
            raise TaskStoreError(f"Cannot write task table {self._path}: {e}") from e

    @staticmethod
    def _index_of(tasks: list[Task], task_id: int) -> int:
        for i, t in enumerate(tasks):
            if t.id == task_id:
                return i
        raise TaskNotFoundError(f"No task with id {task_id}")

    # ---- public API ----

    def list_tasks(self, *, skip_invalid: bool = False) -> list[Task]:
        """
        All tasks in table order.

        skip_invalid=True drops malformed rows with a warning instead of failing,
        for callers (scheduling) where one bad record must not block the rest.
        """
        return self._load(skip_invalid=skip_invalid)

    def get_task(self, task_id: int) -> Task:
        tasks = self._load()
        return tasks[self._index_of(tasks, int(task_id))]

    def find_by_description(self, query: str) -> list[Task]:
        """Case-insensitive substring match on description."""
        needle = (query or "").strip().lower()
        if not needle:
            return []
        return [t for t in self._load() if needle in t.description.lower()]

    def add_task(
        self,
        *,
        description: str,
        deadline: str,
        priority: str | int,
        recurrence: str = "none",
        now_ts: float | None = None,
    ) -> Task:
        # Validate everything before touching the file.
        task = Task(
            id=0,
            description=parse_description(description),
            deadline=parse_deadline(deadline),
            priority=parse_priority(priority),
            recurrence=Recurrence.parse(recurrence),
        )

        tasks = self._load()
        now = time.time() if now_ts is None else now_ts
        # Time-derived, strictly increasing ids; never reused after delete as long
        # as the clock moves forward.
        last_id = max((t.id for t in tasks), default=0)
        task.id = max(int(now), last_id + 1)

        tasks.append(task)
        self._save(tasks)
        logger.info(
            "Task added id=%s priority=%s recurrence=%s deadline=%s",
            task.id,
            task.priority,
            task.recurrence.value,
            format_deadline(task.deadline),
        )
        return task

    def update_task(self, task_id: int, field: TaskField, raw_value: str) -> Task:
        value = field.parse_value(raw_value)

        tasks = self._load()
        idx = self._index_of(tasks, int(task_id))
        task = tasks[idx]
        setattr(task, field.field_name, value)
        self._save(tasks)
        logger.info("Task updated id=%s field=%s", task.id, field.field_name)
        return task

    def mark_completed(self, task_id: int) -> Task:
        return self.set_status(task_id, TaskStatus.COMPLETED)

    def set_status(self, task_id: int, status: TaskStatus) -> Task:
        """Status may only move forward (pending -> completed)."""
        tasks = self._load()
        task = tasks[self._index_of(tasks, int(task_id))]
        if task.status == TaskStatus.COMPLETED and status != TaskStatus.COMPLETED:
            raise ValidationError(f"Task {task.id} is completed; status cannot go back to {status.value}")
        if task.status != status:
            task.status = status
            self._save(tasks)
            logger.info("Task status id=%s -> %s", task.id, status.value)
        return task

    def delete_task(self, task_id: int) -> Task:
        tasks = self._load()
        task = tasks.pop(self._index_of(tasks, int(task_id)))
        self._save(tasks)
        logger.info("Task deleted id=%s", task.id)
        return task
