"""Logging utilities for gaiapy modules."""

import logging


PACKAGE_LOGGERS = (
    'gaiapy',
    'gaiapy.client',
    'gaiapy.api',
    'gaiapy.api.connector',
    'gaiapy.session',
    'gaiapy.storage',
    'gaiapy.batch',
)


def get_logger(name: str) -> logging.Logger:
    """Get a logger that automatically inherits from root logger.

    The logger propagates to the root logger and only falls back to
    WARNING when the root logger has no handlers (i.e. ``basicConfig()``
    has not been called yet).

    Args:
        name: Logger name (typically one of ``PACKAGE_LOGGERS``)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    logger.propagate = True

    root_logger = logging.getLogger()
    if not root_logger.handlers:
        logger.setLevel(logging.WARNING)

    return logger
