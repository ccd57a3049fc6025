"""
Tests for the rich logging setup.
"""

import io
import logging

from rich.console import Console

from availabilityplanner.logging_config import configure_logging


def test_configure_logging_is_idempotent():
    logger = configure_logging("warning", console=Console(file=io.StringIO()))
    configure_logging("debug")

    handlers = [h for h in logger.handlers if h.get_name() == "availabilityplanner"]
    assert len(handlers) == 1
    assert logger.level == logging.DEBUG
    assert logger.propagate is False


def test_package_loggers_reach_the_handler():
    buffer = io.StringIO()
    logger = configure_logging("INFO")
    for handler in logger.handlers:
        if handler.get_name() == "availabilityplanner":
            handler.console = Console(file=buffer, width=120)

    logging.getLogger("availabilityplanner.services.availability_store").info("hello from the store")

    assert "hello from the store" in buffer.getvalue()
