"""Logging utilities for rteupload modules."""

import logging

PACKAGE_LOGGER = 'rteupload'


def get_logger(name: str) -> logging.Logger:
    """Get a package logger that inherits from the root logger.

    Loggers work with basicConfig() without an explicit setup_logging()
    call. The logger will:
    - Live under the 'rteupload' namespace
    - Propagate to root logger (default behavior)
    - Only set a default level if root logger has no handlers

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured logger instance
    """
    if name != PACKAGE_LOGGER and not name.startswith(PACKAGE_LOGGER + '.'):
        name = f"{PACKAGE_LOGGER}.{name}"
    logger = logging.getLogger(name)
    logger.propagate = True

    # basicConfig hasn't been called yet
    root_logger = logging.getLogger()
    if not root_logger.handlers and logger.level == logging.NOTSET:
        logger.setLevel(logging.WARNING)

    return logger


def setup_logging(level: int = logging.INFO) -> logging.Logger:
    """
    Configure logging for rteupload modules.

    Sets the level on the package logger and every module logger under it,
    and keeps them propagating. Output goes wherever the application's root
    handlers send it (e.g. after logging.basicConfig()).

    Args:
        level: Logging level (default: logging.INFO)

    Returns:
        The package root logger
    """
    loggers = [PACKAGE_LOGGER] + [
        name for name in list(logging.Logger.manager.loggerDict)
        if name.startswith(PACKAGE_LOGGER + '.')
    ]

    for logger_name in loggers:
        logger = logging.getLogger(logger_name)
        logger.setLevel(level)
        # Ensure propagation is enabled
        logger.propagate = True

    return logging.getLogger(PACKAGE_LOGGER)
