# tests/test_main.py

from __future__ import annotations

import logging

import pytest

from tasktime.cli import main as cli_main
from tasktime.cli.bootstrap import check_capabilities

NO_TOOLS = {"crontab": False, "notify-send": False, "mail": False}


@pytest.fixture()
def run(monkeypatch, settings):
    """
    Call main() against the tmp_path settings.

    setup_logging is stubbed so the root logger (and caplog) stay untouched.
    """
    monkeypatch.setattr(cli_main, "get_settings", lambda: settings)
    monkeypatch.setattr(cli_main, "setup_logging", lambda **kwargs: None)
    monkeypatch.setattr(cli_main, "check_capabilities", lambda: dict(NO_TOOLS))
    return cli_main.main


def test_no_args_prints_help(run, capsys) -> None:
    assert run([]) == 0
    assert "Available commands:" in capsys.readouterr().out


def test_command_output_goes_to_stdout(run, capsys) -> None:
    assert run(["add-task", "Write report", "2025-03-15 14:00", "2"]) == 0
    out = capsys.readouterr().out
    assert out.startswith("Task added with ID ")


def test_domain_error_is_one_line_on_stderr(run, capsys) -> None:
    assert run(["delete-task", "999"]) == 1

    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err.startswith("Error: ")
    assert captured.err.count("\n") == 1
    assert "Traceback" not in captured.err


def test_unknown_command_exits_1(run, capsys) -> None:
    assert run(["frobnicate"]) == 1
    assert "Unknown command: frobnicate" in capsys.readouterr().err


def test_unexpected_failure_is_logged_with_traceback(run, monkeypatch, capsys, caplog) -> None:
    def boom(state, argv):
        raise RuntimeError("disk on fire")

    monkeypatch.setattr(cli_main.registry, "handle", boom)
    caplog.set_level(logging.ERROR, logger="tasktime.cli.main")

    assert run(["status"]) == 1

    assert "unexpected failure" in capsys.readouterr().err
    (rec,) = [r for r in caplog.records if r.name == "tasktime.cli.main"]
    assert rec.levelno == logging.ERROR
    assert rec.exc_info is not None and rec.exc_info[0] is RuntimeError


def test_missing_crontab_warns(monkeypatch, caplog) -> None:
    monkeypatch.setattr("tasktime.cli.bootstrap.shutil.which", lambda name: None)
    caplog.set_level(logging.DEBUG, logger="tasktime.cli.bootstrap")

    caps = check_capabilities()

    assert caps == {"crontab": False, "notify-send": False, "mail": False}
    warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
    assert len(warnings) == 1
    assert "crontab" in warnings[0].getMessage()


def test_other_commands_work_without_crontab(monkeypatch, settings, capsys, caplog) -> None:
    monkeypatch.setattr("tasktime.cli.bootstrap.shutil.which", lambda name: None)
    monkeypatch.setattr(cli_main, "get_settings", lambda: settings)
    monkeypatch.setattr(cli_main, "setup_logging", lambda **kwargs: None)
    caplog.set_level(logging.WARNING, logger="tasktime.cli.bootstrap")

    assert cli_main.main(["add-task", "Standup", "2025-03-10 09:30", "1", "daily"]) == 0
    assert cli_main.main(["list-tasks"]) == 0

    assert "Standup" in capsys.readouterr().out
    assert "crontab" in caplog.text
