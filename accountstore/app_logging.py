"""JSON logging for processes that use the account store."""

import logging

from pythonjsonlogger.json import JsonFormatter

from . import config


def setup_logger(level: str = config.LOG_LEVEL) -> logging.Logger:
    """Send records from all loggers to stderr as JSON."""
    logHandler = logging.StreamHandler()
    formatter = JsonFormatter(
        '%(asctime)s %(levelname)s %(name)s %(message)s',
        rename_fields={'levelname': 'level', 'asctime': 'timestamp'}
    )
    logHandler.setFormatter(formatter)
    logger = logging.getLogger()
    logger.addHandler(logHandler)
    logger.setLevel(level)
    return logger
