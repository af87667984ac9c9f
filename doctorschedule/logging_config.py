"""
Logging setup rendering standard library log records through rich.
"""

import logging

from rich.console import Console
from rich.logging import RichHandler


def setup_logging(log_level: str = "WARNING", console: Console | None = None) -> None:
    """
    Configure the ``doctorschedule`` loggers.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        console: Rich console to write to (stderr by default)
    """
    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))

    logger = logging.getLogger("doctorschedule")
    logger.handlers.clear()
    logger.addHandler(handler)
    logger.setLevel(getattr(logging, log_level.upper()))
    logger.propagate = False
