"""Logging setup for lazymove.

Diagnostics go to stderr through a ``RichHandler``; stdout stays empty.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = 'lazymove'

stderr_console = Console(stderr=True)


def configure_logging(verbose: bool = False, console: Console = stderr_console) -> logging.Logger:
    """Attach a single rich handler to the package logger.

    Calling this again only adjusts the level.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.INFO if verbose else logging.WARNING)
    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        handler = RichHandler(console=console, show_time=False, show_path=False, markup=False)
        handler.setFormatter(logging.Formatter('%(message)s'))
        logger.addHandler(handler)
        logger.propagate = False
    return logger
