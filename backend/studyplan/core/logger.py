"""
Logging setup shared by services and infrastructure.

Only the package logger owns a handler; module loggers propagate to it.
"""

import logging
import sys

from studyplan.core.config import get_settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
PACKAGE_LOGGER = "studyplan"


def _configure_package_logger() -> logging.Logger:
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    if not package_logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        package_logger.addHandler(handler)
    return package_logger


def setup_logger(name: str) -> logging.Logger:
    """
    Get a logger with the application's level applied.

    Output goes through the single handler on the package logger, so each
    record is written once however many module loggers exist.
    """
    _configure_package_logger()
    log = logging.getLogger(name)
    settings = get_settings()
    log.setLevel(logging.DEBUG if settings.DEBUG else logging.INFO)
    return log


logger = setup_logger(PACKAGE_LOGGER)
