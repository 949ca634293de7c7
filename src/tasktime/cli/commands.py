# src/tasktime/cli/commands.py

from __future__ import annotations

import logging
from collections.abc import Callable

from ..core.state import AppState
from ..errors import ValidationError
from ..tasks import task_api
from ..tasks.task_models import TaskField, format_deadline

CommandHandler = Callable[[AppState, list[str]], str]

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Command registry used by the CLI entrypoint (help, add-task, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(self, state: AppState, argv: list[str]) -> str:
        """
        Run `argv[0]` with the remaining arguments and return its output text.

        Raises ValidationError for an empty or unknown command.
        """
        if not argv:
            raise ValidationError("No command given. Use 'help' to list available commands.")

        name = argv[0].lower()
        handler = self._handlers.get(name)
        if not handler:
            raise ValidationError(f"Unknown command: {name}. Use 'help' to list available commands.")
        return handler(state, argv[1:])

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  {name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def _require(args: list[str], count: int, usage: str) -> None:
    if len(args) < count:
        raise ValidationError(f"Usage: {usage}")


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str]) -> str:
    s = state.settings
    transports = ", ".join(t.name for t in state.notifier.transports) or "none"
    return (
        "Status:\n"
        f"  Task table: {s.tasks_path}\n"
        f"  Event log: {s.events_path}\n"
        f"  Notifications: {transports}\n"
        f"  Alert threshold: {s.alert_threshold}s, quiet hours {s.quiet_hours_start}-{s.quiet_hours_end}\n"
        f"  Slot priority order: {state.priority_order.value}\n"
        f"  Double-start policy: {s.double_start_policy}"
    )


def cmd_add_task(state: AppState, args: list[str]) -> str:
    """add-task DESCRIPTION DEADLINE PRIORITY [RECURRENCE]"""
    _require(args, 3, 'add-task "DESCRIPTION" "YYYY-MM-DD HH:MM" PRIORITY [none|daily|weekly|monthly]')
    recurrence = args[3] if len(args) > 3 else "none"
    task = state.task_store.add_task(
        description=args[0], deadline=args[1], priority=args[2], recurrence=recurrence
    )
    return f"Task added with ID {task.id}."


def cmd_update_task(state: AppState, args: list[str]) -> str:
    """update-task QUERY FIELD VALUE"""
    _require(args, 3, "update-task QUERY description|deadline|priority|recurrence VALUE")
    field = TaskField.from_name(args[1])
    task = task_api.resolve_task(state, args[0])
    state.task_store.update_task(task.id, field, " ".join(args[2:]))
    return f"Task {task.id} updated ({field.field_name})."


def cmd_delete_task(state: AppState, args: list[str]) -> str:
    _require(args, 1, "delete-task QUERY")
    task = task_api.resolve_task(state, " ".join(args))
    state.task_store.delete_task(task.id)
    return f"Task {task.id} deleted."


def cmd_start_task(state: AppState, args: list[str]) -> str:
    _require(args, 1, "start-task QUERY")
    task = task_api.start_task(state, " ".join(args))
    return f"Task {task.id} started."


def cmd_resume_task(state: AppState, args: list[str]) -> str:
    _require(args, 1, "resume-task QUERY")
    task = task_api.resume_task(state, " ".join(args))
    return f"Task {task.id} resumed."


def cmd_pause_task(state: AppState, args: list[str]) -> str:
    _require(args, 1, "pause-task QUERY")
    task = task_api.pause_task(state, " ".join(args))
    return f"Task {task.id} paused."


def cmd_end_task(state: AppState, args: list[str]) -> str:
    _require(args, 1, "end-task QUERY")
    task = task_api.end_task(state, " ".join(args))
    total = state.durations.get_duration(task.id)
    return f"Task {task.id} ended. Total time: {task_api.format_seconds(total)}."


def cmd_list_tasks(state: AppState, args: list[str]) -> str:
    tasks = state.task_store.list_tasks()
    if not tasks:
        return "No tasks."
    lines = [f"{'ID':<12} {'DEADLINE':<16} {'PRI':>3} {'RECUR':<8} {'STATUS':<10} DESCRIPTION"]
    for t in tasks:
        lines.append(
            f"{t.id:<12} {format_deadline(t.deadline):<16} {t.priority:>3} "
            f"{t.recurrence.value:<8} {t.status.value:<10} {t.description}"
        )
    return "\n".join(lines)


def cmd_report(state: AppState, args: list[str]) -> str:
    rows = task_api.duration_report(state)
    if not rows:
        return "No tasks."
    lines = ["Time on task:"]
    for row in rows:
        marker = " (running)" if row.running else ""
        lines.append(f"  {row.task.id} {task_api.format_seconds(row.seconds)} {row.task.description}{marker}")
    return "\n".join(lines)


def cmd_schedule_tasks(state: AppState, args: list[str]) -> str:
    """schedule-tasks [--dry-run]"""
    dry_run = "--dry-run" in args
    entries = task_api.schedule_recurring(state, dry_run=dry_run)
    if not entries:
        return "No recurring tasks to schedule."
    head = "Planned jobs (not installed):" if dry_run else "Installed jobs:"
    lines = [head] + [f"  {e.slot.to_cron()} {e.command}" for e in entries]
    return "\n".join(lines)


def cmd_remind(state: AppState, args: list[str]) -> str:
    _require(args, 1, "remind TASK_ID")
    try:
        task_id = int(args[0])
    except ValueError:
        raise ValidationError(f"Task id must be an integer, got {args[0]!r}") from None
    sent = task_api.remind_task(state, task_id)
    return "Reminder sent." if sent else "Reminder suppressed (throttled or quiet hours)."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["-h", "--help"])
registry.register("status", cmd_status, help_text="Show paths and notification settings.")
registry.register("add-task", cmd_add_task, help_text='Add a task: "DESC" "YYYY-MM-DD HH:MM" PRIORITY [RECURRENCE].')
registry.register("update-task", cmd_update_task, help_text="Update a task field: QUERY FIELD VALUE.")
registry.register("delete-task", cmd_delete_task, help_text="Delete a task (by id or description).")
registry.register("start-task", cmd_start_task, help_text="Start a work session on a task.")
registry.register("pause-task", cmd_pause_task, help_text="Pause the active session of a task.")
registry.register("resume-task", cmd_resume_task, help_text="Resume a paused task.")
registry.register("end-task", cmd_end_task, help_text="End a task and mark it completed.")
registry.register("list-tasks", cmd_list_tasks, help_text="List all tasks.", aliases=["ls"])
registry.register("report", cmd_report, help_text="Show accumulated time per task.")
registry.register(
    "schedule-tasks", cmd_schedule_tasks, help_text="Install cron jobs for recurring tasks [--dry-run]."
)
registry.register("remind", cmd_remind, help_text="Send the reminder for a task (used by cron jobs).")
