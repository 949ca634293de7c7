# src/tasktime/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- checks which external programs are available,
- wires concrete implementations into AppState (task table, event log, cache,
  notifier, cron table).
"""

from __future__ import annotations

import logging
import shutil

from ..config import get_settings
from ..core.ports import NotificationTransport
from ..core.state import AppState
from ..notify.notifier import Notifier
from ..notify.quiet_hours import QuietHours
from ..notify.throttle import NotificationThrottle
from ..notify.transports import DesktopTransport, EmailTransport, WebhookTransport
from ..scheduling.crontab import CronTable
from ..scheduling.slot_assigner import PriorityOrder
from ..tasks.task_store import TaskStore
from ..tracking.durations import DoubleStartPolicy, DurationCache
from ..tracking.event_log import EventLog

logger = logging.getLogger(__name__)

REQUIRED_TOOLS = ("crontab",)
OPTIONAL_TOOLS = {
    "notify-send": "desktop notifications",
    "mail": "email notifications",
}


def check_capabilities() -> dict[str, bool]:
    """
    Report which external programs exist.

    Missing tools are logged once here; commands that need them fail only when invoked.
    """
    found: dict[str, bool] = {}
    for tool in REQUIRED_TOOLS:
        found[tool] = shutil.which(tool) is not None
        if not found[tool]:
            logger.warning("'%s' is not installed; schedule-tasks will not work.", tool)
    for tool, purpose in OPTIONAL_TOOLS.items():
        found[tool] = shutil.which(tool) is not None
        if not found[tool]:
            logger.debug("'%s' not found; %s disabled.", tool, purpose)
    return found


def build_transports(settings, capabilities: dict[str, bool] | None = None) -> list[NotificationTransport]:
    caps = capabilities or {}
    transports: list[NotificationTransport] = []

    if settings.notify_desktop and caps.get("notify-send", True):
        transports.append(DesktopTransport())

    if settings.notify_email:
        if not settings.email_recipient:
            logger.warning("Email notifications enabled but no recipient configured.")
        elif caps.get("mail", True):
            transports.append(EmailTransport(settings.email_recipient))

    if settings.notify_messaging:
        if not settings.messaging_api_url:
            logger.warning("Messaging notifications enabled but no webhook URL configured.")
        else:
            transports.append(WebhookTransport(settings.messaging_api_url))

    return transports


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.tasks_path.parent.mkdir(parents=True, exist_ok=True)
    settings.events_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None, capabilities: dict[str, bool] | None = None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    quiet = QuietHours.from_strings(settings.quiet_hours_start, settings.quiet_hours_end)
    throttle = NotificationThrottle(threshold_seconds=settings.alert_threshold, quiet_hours=quiet)
    event_log = EventLog(settings.events_path)

    return AppState(
        settings=settings,
        task_store=TaskStore(settings.tasks_path),
        event_log=event_log,
        durations=DurationCache(event_log, policy=DoubleStartPolicy(settings.double_start_policy)),
        notifier=Notifier(throttle, build_transports(settings, capabilities)),
        cron_table=CronTable(marker=settings.cron_marker),
        priority_order=PriorityOrder(settings.priority_order),
        cron_command=settings.cron_command,
    )
