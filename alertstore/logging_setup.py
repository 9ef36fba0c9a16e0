"""Logging configuration for the command line."""

import logging

from rich.console import Console
from rich.logging import RichHandler


def setup_logging(level: str | int = logging.WARNING, console: Console | None = None) -> None:
    """Route alertstore log records through rich.

    Calling it again replaces the previous handler.
    """
    logger = logging.getLogger("alertstore")
    logger.setLevel(level)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = RichHandler(console=console, show_path=False, markup=False)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
