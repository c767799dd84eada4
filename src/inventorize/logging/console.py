"""Console logging setup for the command-line front end."""

from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


def configure_console_logging(verbosity: int = 0) -> None:
    """Route log records to stderr; any verbosity above zero enables DEBUG."""
    level = logging.DEBUG if verbosity > 0 else logging.INFO
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stderr)],
    )
