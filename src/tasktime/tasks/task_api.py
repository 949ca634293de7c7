# src/tasktime/tasks/task_api.py

from __future__ import annotations

import logging
import shlex
import time
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from ..core.state import AppState
from ..errors import TaskNotFoundError, ValidationError
from ..scheduling.slot_assigner import JobEntry, assign_slots
from .task_models import SessionAction, Task, TaskStatus, format_deadline

logger = logging.getLogger(__name__)


def resolve_task(state: AppState, query: str) -> Task:
    """
    Select a task by id or by description substring.

    A description query must match exactly one task.
    """
    q = (query or "").strip()
    if not q:
        raise ValidationError("A task id or description is required")

    if q.isdigit():
        try:
            return state.task_store.get_task(int(q))
        except TaskNotFoundError:
            pass

    matches = state.task_store.find_by_description(q)
    if not matches:
        raise TaskNotFoundError(f"No task matches {q!r}")
    if len(matches) > 1:
        listing = ", ".join(f"{t.id} ({t.description})" for t in matches)
        raise ValidationError(f"{q!r} matches several tasks: {listing}")
    return matches[0]


def _record(
    state: AppState,
    task: Task,
    action: SessionAction,
    category: str,
    title: str,
    now_ts: float | None,
) -> None:
    ts = time.time() if now_ts is None else now_ts
    state.event_log.append(task.id, action, ts)
    state.notifier.notify(category, title, task.description, now=datetime.fromtimestamp(ts))


def start_task(state: AppState, query: str, *, now_ts: float | None = None) -> Task:
    task = resolve_task(state, query)
    if task.status == TaskStatus.COMPLETED:
        raise ValidationError(f"Task {task.id} is already completed")
    _record(state, task, SessionAction.START, "task_start", "Task started", now_ts)
    logger.info("Task %s started", task.id)
    return task


def resume_task(state: AppState, query: str, *, now_ts: float | None = None) -> Task:
    task = resolve_task(state, query)
    if task.status == TaskStatus.COMPLETED:
        raise ValidationError(f"Task {task.id} is already completed")
    _record(state, task, SessionAction.START, "task_resume", "Task resumed", now_ts)
    logger.info("Task %s resumed", task.id)
    return task


def pause_task(state: AppState, query: str, *, now_ts: float | None = None) -> Task:
    task = resolve_task(state, query)
    _record(state, task, SessionAction.PAUSE, "task_pause", "Task paused", now_ts)
    logger.info("Task %s paused", task.id)
    return task


def end_task(state: AppState, query: str, *, now_ts: float | None = None) -> Task:
    task = resolve_task(state, query)
    _record(state, task, SessionAction.END, "task_end", "Task ended", now_ts)
    task = state.task_store.mark_completed(task.id)
    logger.info("Task %s ended", task.id)
    return task


def remind_task(state: AppState, task_id: int, *, now: datetime | None = None) -> bool:
    """Reminder fired by an installed cron job."""
    task = state.task_store.get_task(task_id)
    body = f"{task.description} (deadline {format_deadline(task.deadline)}, priority {task.priority})"
    return state.notifier.notify("task_reminder", "Task reminder", body, now=now)


@dataclass(slots=True, frozen=True)
class DurationRow:
    task: Task
    seconds: int
    running: bool


def duration_report(state: AppState, *, now_ts: float | None = None) -> list[DurationRow]:
    ts = time.time() if now_ts is None else now_ts
    rows: list[DurationRow] = []
    for task in state.task_store.list_tasks():
        rows.append(
            DurationRow(
                task=task,
                seconds=state.durations.get_duration(task.id, now=ts),
                running=state.durations.is_running(task.id),
            )
        )
    return rows


def job_environment(settings) -> str:
    """
    Env assignments prefixed to every job command.

    cron starts jobs in $HOME with a bare environment, so the job must be told
    where this task table and event log live.
    """
    data_dir = Path(settings.data_dir).resolve()
    env = {"TASKTIME_DATA_DIR": data_dir}
    tasks_path = Path(settings.tasks_path).resolve()
    if tasks_path != data_dir / "tasks.db":
        env["TASKTIME_TASKS_PATH"] = tasks_path
    events_path = Path(settings.events_path).resolve()
    if events_path != data_dir / "tasks.log":
        env["TASKTIME_EVENTS_PATH"] = events_path
    return " ".join(f"{name}={shlex.quote(str(value))}" for name, value in env.items())


def plan_schedule(state: AppState) -> list[JobEntry]:
    tasks = state.task_store.list_tasks(skip_invalid=True)
    template = state.cron_command
    env = job_environment(state.settings)
    return assign_slots(
        tasks,
        command_for=lambda t: f"{env} {template.format(task_id=t.id)}",
        order=state.priority_order,
    )


def schedule_recurring(state: AppState, *, dry_run: bool = False) -> list[JobEntry]:
    """Recompute every recurring slot and (unless dry_run) replace the installed jobs."""
    entries = plan_schedule(state)
    if not dry_run:
        state.cron_table.install(entries)
    return entries


def format_seconds(seconds: int) -> str:
    h, rem = divmod(max(0, int(seconds)), 3600)
    m, s = divmod(rem, 60)
    return f"{h:02d}:{m:02d}:{s:02d}"
