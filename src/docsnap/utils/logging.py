"""Logging setup utilities for docsnap.

Configures the ``docsnap`` logger hierarchy from the logging section of
the settings.
"""

from __future__ import annotations

import logging
import sys

from docsnap.config.settings import LoggingConfig

# Chatty client libraries that log every HTTP request at INFO.
NOISY_LOGGERS = ("httpx", "openai", "uvicorn.access")


def setup_logging(config: LoggingConfig | None = None) -> logging.Logger:
    """Configure logging for the docsnap application.

    Safe to call more than once: handlers installed by an earlier call
    are replaced rather than duplicated.

    Args:
        config: Logging configuration. If None, uses defaults
                (INFO level, stderr output).

    Returns:
        The configured ``docsnap`` logger.
    """
    if config is None:
        config = LoggingConfig()

    level = getattr(logging, config.level.upper(), logging.INFO)
    app_logger = logging.getLogger("docsnap")
    app_logger.setLevel(level)

    for handler in list(app_logger.handlers):
        app_logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(config.format)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    app_logger.addHandler(console_handler)

    if config.file:
        file_handler = logging.FileHandler(config.file)
        file_handler.setFormatter(formatter)
        app_logger.addHandler(file_handler)

    if level > logging.DEBUG:
        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    app_logger.debug("Logging initialized at %s level", config.level)
    return app_logger
