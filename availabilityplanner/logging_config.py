"""
Logging setup shared by the CLI and embedding applications.
"""

import logging

from rich.console import Console
from rich.logging import RichHandler

_HANDLER_NAME = "availabilityplanner"


def configure_logging(level: str = "INFO", console: Console | None = None) -> logging.Logger:
    """
    Route the package's log records through a rich handler.

    Calling this more than once only updates the level.
    """
    logger = logging.getLogger("availabilityplanner")
    logger.setLevel(level.upper())

    if not any(handler.get_name() == _HANDLER_NAME for handler in logger.handlers):
        handler = RichHandler(
            console=console or Console(stderr=True),
            show_path=False,
            rich_tracebacks=False,
        )
        handler.set_name(_HANDLER_NAME)
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)
        logger.propagate = False

    return logger
