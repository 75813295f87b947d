"""Logging setup using rich."""

import logging

from rich.console import Console
from rich.logging import RichHandler


def configure_logging(level: str = "INFO", console: Console = None) -> None:
    """Route all ``bookocr`` loggers through a rich handler.

    Args:
        level: Logging level name, e.g. 'INFO' or 'DEBUG'.
        console: Console to write to (stderr by default).
    """
    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        markup=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))

    logger = logging.getLogger("bookocr")
    logger.handlers.clear()
    logger.addHandler(handler)
    logger.setLevel(level.upper())
