"""Logging setup for the commitchain command line."""

import logging
from typing import Union

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "commitchain"


def configure_logging(level: Union[int, str] = logging.WARNING) -> logging.Logger:
    """Send ``commitchain`` log records to stderr through rich.

    Calling this again replaces the handler installed by the previous call.
    """
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)

    handler = RichHandler(
        console=Console(stderr=True), show_path=False, rich_tracebacks=True
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.setLevel(level)
    return logger
