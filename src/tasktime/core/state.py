# src/tasktime/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..core.ports import EventSink, TaskRepo
from ..notify.notifier import Notifier
from ..scheduling.crontab import CronTable
from ..scheduling.slot_assigner import PriorityOrder
from ..tracking.durations import DurationCache


@dataclass
class AppState:
    # Store Settings on the state for easy access in other modules.
    settings: Any

    task_store: TaskRepo
    event_log: EventSink
    durations: DurationCache
    notifier: Notifier
    cron_table: CronTable

    priority_order: PriorityOrder = PriorityOrder.HIGHER_WINS
    cron_command: str = "tasktime remind {task_id}"
