from __future__ import annotations

import logging

from rich.logging import RichHandler

LOG_FORMAT = "%(name)s: %(message)s"


def setup_logging(level: str = "WARNING") -> None:
    """Route library logging through rich; safe to call more than once."""
    logging.basicConfig(
        level=level.upper(),
        format=LOG_FORMAT,
        handlers=[RichHandler(rich_tracebacks=False, show_path=False)],
        force=True,
    )
