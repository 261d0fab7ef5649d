"""Entry-point for launching the CLI application."""
from __future__ import annotations

import logging
import os
import sys

from .presentation.cli.app import main as cli_main

_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging() -> None:
    """Attach a stderr handler; STORYSIM_LOG_LEVEL wins over STORYSIM_DEBUG."""
    level = logging.DEBUG if os.getenv("STORYSIM_DEBUG") == "1" else logging.WARNING
    level_name = os.getenv("STORYSIM_LOG_LEVEL")
    if level_name:
        level = logging.getLevelName(level_name.upper())
        if not isinstance(level, int):
            level = logging.WARNING
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(_LOG_FORMAT))
    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(level)


def main() -> None:
    """Run the CLI presentation layer."""
    configure_logging()
    try:
        cli_main()
    except (KeyboardInterrupt, EOFError):
        print("\nSession ended.")


if __name__ == "__main__":
    main()
