# tests/test_crontab.py

from __future__ import annotations

import pytest

from tasktime.errors import CronInstallError, DependencyMissingError
from tasktime.scheduling.crontab import CronTable, merge_table, render_entries, render_entry
from tasktime.scheduling.slot_assigner import JobEntry, Slot

from .fakes import FakeCronRunner

MARKER = "tasktime-test"


def entries() -> list[JobEntry]:
    return [
        JobEntry(slot=Slot(minute=15, hour=9), task_id=1, command="tasktime remind 1", priority=2),
        JobEntry(slot=Slot(minute=0, hour=8, weekday="1"), task_id=2, command="tasktime remind 2", priority=1),
    ]


def test_render_entries_tags_every_line() -> None:
    assert render_entries(entries(), MARKER) == [
        "15 9 * * * tasktime remind 1 # tasktime-test",
        "0 8 * * 1 tasktime remind 2 # tasktime-test",
    ]


def test_render_escapes_percent() -> None:
    entry = JobEntry(slot=Slot(minute=0, hour=7), task_id=3, command="date +%H:%M; tasktime remind 3", priority=1)
    assert render_entry(entry, MARKER) == r"0 7 * * * date +\%H:\%M; tasktime remind 3 # tasktime-test"


def test_merge_replaces_only_managed_lines() -> None:
    current = (
        "MAILTO=me@example.com\n"
        "0 0 * * * backup.sh\n"
        "1 1 * * * tasktime remind 99 # tasktime-test\n"
    )
    merged = merge_table(current, ["5 5 * * * tasktime remind 1 # tasktime-test"], MARKER)
    assert merged == (
        "MAILTO=me@example.com\n"
        "0 0 * * * backup.sh\n"
        "5 5 * * * tasktime remind 1 # tasktime-test\n"
    )


def test_merge_with_nothing_left_is_empty() -> None:
    assert merge_table("1 1 * * * x # tasktime-test\n", [], MARKER) == ""


def test_install_on_fresh_account() -> None:
    runner = FakeCronRunner(table=None)
    table = CronTable(marker=MARKER, runner=runner)

    table.install(entries())

    assert runner.table == (
        "15 9 * * * tasktime remind 1 # tasktime-test\n"
        "0 8 * * 1 tasktime remind 2 # tasktime-test\n"
    )


def test_reinstall_replaces_previous_generation() -> None:
    runner = FakeCronRunner(table="0 0 * * * backup.sh\n")
    table = CronTable(marker=MARKER, runner=runner)

    table.install(entries())
    table.install(entries()[:1])

    assert runner.table == "0 0 * * * backup.sh\n15 9 * * * tasktime remind 1 # tasktime-test\n"


def test_rejected_install_raises_and_leaves_table_untouched() -> None:
    runner = FakeCronRunner(table="0 0 * * * backup.sh\n", reject_install=True)
    table = CronTable(marker=MARKER, runner=runner)

    with pytest.raises(CronInstallError):
        table.install(entries())

    assert runner.table == "0 0 * * * backup.sh\n"


def test_missing_binary_is_reported() -> None:
    def runner(cmd, **kwargs):
        raise FileNotFoundError(cmd[0])

    with pytest.raises(DependencyMissingError):
        CronTable(marker=MARKER, runner=runner).read()
