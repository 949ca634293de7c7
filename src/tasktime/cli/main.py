# src/tasktime/cli/main.py

"""
CLI entrypoint.

Initializes logging, runs the capability check, builds AppState and runs a
single command.
"""

from __future__ import annotations

import logging
import sys

from ..cli.bootstrap import check_capabilities, create_initial_state
from ..cli.commands import registry
from ..config import get_settings
from ..errors import TasktimeError
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    settings = get_settings()

    # console log level from settings.log_level; the file always gets DEBUG
    level_name = str(getattr(settings, "log_level", "WARNING")).upper()
    console_level = getattr(logging, level_name, logging.WARNING)
    setup_logging(log_dir=settings.data_dir, console_level=console_level)

    if not args:
        print(registry.build_help())
        return 0

    logger.info("%s %s", settings.app_name, " ".join(args))

    try:
        state = create_initial_state(settings=settings, capabilities=check_capabilities())
        output = registry.handle(state, args)
    except TasktimeError as e:
        logger.debug("Command failed: %s", e, exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except Exception:
        logger.exception("Unexpected failure running %r", args)
        print("Error: unexpected failure (see log file for details).", file=sys.stderr)
        return 1

    if output:
        print(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
