# sparse_fiber/logging_config.py
import logging
from typing import Optional

from .constants import LOG_DATE_FORMAT, LOG_FORMAT

PACKAGE_LOGGER = "sparse_fiber"


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> logging.Logger:
    """
    Route sparse_fiber log records to the console and optionally a file.

    Only the package logger is touched; modules log through
    logging.getLogger(__name__) and propagate here. Calling again replaces
    the handlers installed by the previous call.

    Args:
        level: Logging level for the package logger.
        log_file: Optional path to a file for logging output.

    Returns:
        The package logger.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
    handlers = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    return logger
