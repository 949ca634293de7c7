# src/tasktime/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- No external service credentials required at import time.
- Notification defaults mirror the classic shell tool (30s throttle, 22:00-06:00 quiet hours).
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

ENV_PREFIX = "TASKTIME"

logger = logging.getLogger(__name__)


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _load_dotenv_if_available() -> None:
    """Load .env locally if python-dotenv is installed. Safe no-op otherwise."""
    try:
        from dotenv import load_dotenv  # type: ignore
    except Exception:
        return
    load_dotenv(override=False)


_load_dotenv_if_available()


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    # Absolute, so scheduled jobs (run by cron from $HOME) see the same files.
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default.expanduser().resolve()
    return Path(raw).expanduser().resolve()


def _env_choice(name: str, default: str, choices: set[str]) -> str:
    raw = (os.getenv(name) or "").strip().lower()
    if not raw:
        return default
    if raw not in choices:
        logger.warning(
            "Ignoring %s=%r (expected one of %s); using %r.", name, raw, ", ".join(sorted(choices)), default
        )
        return default
    return raw


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Local data paths ----
    data_dir: Path
    tasks_path: Path
    events_path: Path

    # ---- Notification transports ----
    notify_desktop: bool
    notify_email: bool
    email_recipient: str
    notify_messaging: bool
    messaging_api_url: str

    # ---- Throttle / quiet hours ----
    alert_threshold: int
    quiet_hours_start: str
    quiet_hours_end: str

    # ---- Accounting / scheduling policy ----
    priority_order: str
    double_start_policy: str
    cron_marker: str
    cron_command: str

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "tasktime") or "tasktime"
        log_level = _env(_k("LOG_LEVEL"), "WARNING")

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/tasktime"))
        tasks_path = _env_path(_k("TASKS_PATH"), data_dir / "tasks.db")
        events_path = _env_path(_k("EVENTS_PATH"), data_dir / "tasks.log")

        notify_desktop = _env_bool(_k("NOTIFY_DESKTOP"), True)
        notify_email = _env_bool(_k("NOTIFY_EMAIL"), False)
        email_recipient = _env(_k("EMAIL_RECIPIENT"), "").strip()
        notify_messaging = _env_bool(_k("NOTIFY_MESSAGING"), False)
        messaging_api_url = _env(_k("MESSAGING_API_URL"), "").strip()

        alert_threshold = max(0, _env_int(_k("ALERT_THRESHOLD"), 30))
        quiet_hours_start = _env(_k("QUIET_HOURS_START"), "22:00").strip()
        quiet_hours_end = _env(_k("QUIET_HOURS_END"), "06:00").strip()

        priority_order = _env_choice(_k("PRIORITY_ORDER"), "higher_wins", {"higher_wins", "lower_wins"})
        double_start_policy = _env_choice(
            _k("DOUBLE_START_POLICY"), "discard", {"discard", "merge", "error"}
        )
        cron_marker = _env(_k("CRON_MARKER"), "tasktime-managed").strip() or "tasktime-managed"
        cron_command = _env(_k("CRON_COMMAND"), "tasktime remind {task_id}")

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            tasks_path=tasks_path,
            events_path=events_path,
            notify_desktop=notify_desktop,
            notify_email=notify_email,
            email_recipient=email_recipient,
            notify_messaging=notify_messaging,
            messaging_api_url=messaging_api_url,
            alert_threshold=alert_threshold,
            quiet_hours_start=quiet_hours_start,
            quiet_hours_end=quiet_hours_end,
            priority_order=priority_order,
            double_start_policy=double_start_policy,
            cron_marker=cron_marker,
            cron_command=cron_command,
        )


_SETTINGS: Settings | None = None


def get_settings() -> Settings:
    global _SETTINGS
    if _SETTINGS is None:
        _SETTINGS = Settings.from_env()
    return _SETTINGS
