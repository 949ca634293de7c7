# src/tasktime/scheduling/crontab.py

from __future__ import annotations

import contextlib
import logging
import os
import subprocess
import tempfile
from collections.abc import Callable, Iterable
from typing import Any

from ..errors import CronInstallError, DependencyMissingError
from .slot_assigner import JobEntry

logger = logging.getLogger(__name__)

DEFAULT_MARKER = "tasktime-managed"

Runner = Callable[..., subprocess.CompletedProcess[Any]]


def render_entry(entry: JobEntry, marker: str = DEFAULT_MARKER) -> str:
    # cron turns a bare % in the command into a newline.
    command = entry.command.replace("%", r"\%")
    return f"{entry.slot.to_cron()} {command} # {marker}"


def render_entries(entries: Iterable[JobEntry], marker: str = DEFAULT_MARKER) -> list[str]:
    return [render_entry(e, marker) for e in entries]


def is_managed_line(line: str, marker: str = DEFAULT_MARKER) -> bool:
    return line.rstrip().endswith(f"# {marker}")


def merge_table(current: str, new_lines: list[str], marker: str = DEFAULT_MARKER) -> str:
    """Drop every previously generated line and append the new ones; other jobs are untouched."""
    kept = [line for line in current.splitlines() if not is_managed_line(line, marker)]
    while kept and not kept[-1].strip():
        kept.pop()
    out = kept + list(new_lines)
    return "\n".join(out) + "\n" if out else ""


class CronTable:
    """
    The user's crontab, accessed through the `crontab` binary.

    install() replaces all marker-tagged lines in one `crontab <file>` call, so
    either the whole new table is accepted or nothing changes.
    """

    def __init__(
        self,
        *,
        marker: str = DEFAULT_MARKER,
        binary: str = "crontab",
        runner: Runner = subprocess.run,
    ) -> None:
        self.marker = marker
        self._binary = binary
        self._run = runner

    def read(self) -> str:
        try:
            proc = self._run([self._binary, "-l"], capture_output=True, text=True, timeout=30)
        except FileNotFoundError as e:
            raise DependencyMissingError(f"'{self._binary}' is not installed; cannot schedule tasks") from e
        except (OSError, subprocess.SubprocessError) as e:
            raise CronInstallError(f"Cannot read crontab: {e}") from e
        if proc.returncode != 0:
            # `crontab -l` exits 1 with "no crontab for <user>" on a fresh account.
            if "no crontab" in (proc.stderr or "").lower():
                return ""
            raise CronInstallError(f"crontab -l failed: {(proc.stderr or '').strip()}")
        return proc.stdout or ""

    def install(self, entries: list[JobEntry]) -> str:
        """Install `entries`, replacing earlier generated ones. Returns the new table text."""
        table = merge_table(self.read(), render_entries(entries, self.marker), self.marker)

        fd, tmp_path = tempfile.mkstemp(prefix="tasktime-cron-", suffix=".txt")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(table)
            try:
                proc = self._run([self._binary, tmp_path], capture_output=True, text=True, timeout=30)
            except (OSError, subprocess.SubprocessError) as e:
                raise CronInstallError(f"Cannot install crontab: {e}") from e
            if proc.returncode != 0:
                raise CronInstallError(f"crontab rejected the new table: {(proc.stderr or '').strip()}")
        finally:
            with contextlib.suppress(OSError):
                os.unlink(tmp_path)

        logger.info("Installed %d scheduled job(s) (marker=%s)", len(entries), self.marker)
        return table
