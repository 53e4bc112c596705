"""Structured (JSON) logging for the videousers service."""

import logging
from typing import Union

from pythonjsonlogger import jsonlogger

FORMAT = '%(asctime)s %(levelname)s %(name)s %(message)s'


def setup_logger(level: Union[int, str] = logging.INFO) -> None:
    """Send log records from all loggers to stderr, formatted as JSON."""
    logger = logging.getLogger()
    logger.setLevel(level)
    # Application factories may run more than once per process.
    if any(isinstance(handler.formatter, jsonlogger.JsonFormatter)
           for handler in logger.handlers):
        return
    log_handler = logging.StreamHandler()
    formatter = jsonlogger.JsonFormatter(
        FORMAT, rename_fields={'levelname': 'level', 'asctime': 'timestamp'}
    )
    log_handler.setFormatter(formatter)
    logger.addHandler(log_handler)
