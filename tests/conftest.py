# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from tasktime.cli.bootstrap import create_initial_state
from tasktime.core.state import AppState
from tasktime.scheduling.crontab import CronTable

from .fakes import FakeCronRunner, FakeTransport

NO_TOOLS = {"crontab": False, "notify-send": False, "mail": False}


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with create_initial_state().

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the developer's environment / .env.
    """
    return SimpleNamespace(
        app_name="tasktime-test",
        log_level="DEBUG",
        data_dir=tmp_path,
        tasks_path=tmp_path / "tasks.db",
        events_path=tmp_path / "tasks.log",
        notify_desktop=False,
        notify_email=False,
        email_recipient="",
        notify_messaging=False,
        messaging_api_url="",
        alert_threshold=30,
        quiet_hours_start="22:00",
        quiet_hours_end="06:00",
        priority_order="higher_wins",
        double_start_policy="discard",
        cron_marker="tasktime-test",
        cron_command="tasktime remind {task_id}",
    )


@pytest.fixture()
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture()
def cron_runner() -> FakeCronRunner:
    return FakeCronRunner()


@pytest.fixture()
def state(settings: SimpleNamespace, transport: FakeTransport, cron_runner: FakeCronRunner) -> AppState:
    """
    AppState wired with real file-backed stores and fake side effects
    (notification transport, crontab binary).
    """
    st = create_initial_state(settings=settings, capabilities=NO_TOOLS)
    st.notifier.transports = [transport]
    st.cron_table = CronTable(marker=settings.cron_marker, runner=cron_runner)
    return st
