from __future__ import annotations

import logging

from task_manager_api.app.logging_setup import PACKAGE_LOGGER, configure_logging


def test_configure_logging_adds_one_handler() -> None:
    configure_logging("INFO")
    configure_logging("DEBUG")

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    stream_handlers = [
        handler
        for handler in package_logger.handlers
        if isinstance(handler, logging.StreamHandler)
    ]
    assert len(stream_handlers) == 1
    assert package_logger.level == logging.DEBUG

    configure_logging("WARNING")
    assert package_logger.level == logging.WARNING
