# src/tasktime/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path

LOG_FILE_NAME = "tasktime.log"

_FORMAT = logging.Formatter(
    fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)


class _ConsoleNoiseFilter(logging.Filter):
    """Console shows tasktime records; anything else (httpx, py.warnings) only at ERROR+."""

    def filter(self, record: logging.LogRecord) -> bool:
        return record.name.startswith("tasktime.") or record.levelno >= logging.ERROR


def _attach(root: logging.Logger, handler: logging.Handler, level: int) -> None:
    handler.setLevel(level)
    handler.setFormatter(_FORMAT)
    root.addHandler(handler)


def setup_logging(
    *,
    log_dir: str | Path = ".local/tasktime",
    console_level: int = logging.WARNING,
    file_level: int = logging.DEBUG,
) -> Path:
    """
    Route logs to stderr (filtered) and to <log_dir>/tasktime.log (everything).

    Call once per process, before the first record. Returns the log file path.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / LOG_FILE_NAME

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for h in list(root.handlers):
        root.removeHandler(h)

    console = logging.StreamHandler(sys.stderr)
    console.addFilter(_ConsoleNoiseFilter())
    _attach(root, console, console_level)
    _attach(root, logging.FileHandler(str(log_file), encoding="utf-8"), file_level)

    # warnings.warn(...) arrives as 'py.warnings' records.
    logging.captureWarnings(True)
    for noisy in ("httpx", "httpcore"):
        logging.getLogger(noisy).setLevel(logging.WARNING)
    return log_file
