# src/tasktime/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the session service and the CLI.

The service depends on Protocols instead of concrete implementations, so the
task table, event log and delivery transports can be swapped in tests.
"""

from typing import Any, Protocol


class NotificationTransport(Protocol):
    """Delivery channel (desktop, email, messaging webhook). Decides HOW, never WHETHER."""

    name: str

    def send(self, title: str, body: str) -> None: ...


class TaskRepo(Protocol):
    def list_tasks(self, *, skip_invalid: bool = False) -> list[Any]: ...
    def get_task(self, task_id: int) -> Any: ...
    def find_by_description(self, query: str) -> list[Any]: ...
    def add_task(
            self,
            *,
            description: str,
            deadline: str,
            priority: str | int,
            recurrence: str = "none",
            now_ts: float | None = None,
    ) -> Any: ...
    def update_task(self, task_id: int, field: Any, raw_value: str) -> Any: ...
    def mark_completed(self, task_id: int) -> Any: ...
    def delete_task(self, task_id: int) -> Any: ...


class EventSink(Protocol):
    def append(self, task_id: int, action: Any, at: float | None = None) -> Any: ...
