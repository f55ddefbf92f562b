"""Logging setup; log records are written to stderr as JSON."""

import logging
from typing import Union

from pythonjsonlogger.json import JsonFormatter

FORMAT = '%(asctime)s %(levelname)s %(name)s %(message)s'


def setup_logger(level: Union[int, str] = logging.INFO) -> None:
    """Install a JSON handler on the root logger, once."""
    logger = logging.getLogger()
    if isinstance(level, str) and level.isdigit():
        level = int(level)
    logger.setLevel(level)
    if any(getattr(handler, '_restapi', False)
           for handler in logger.handlers):
        return
    handler = logging.StreamHandler()
    formatter = JsonFormatter(
        FORMAT,
        rename_fields={'levelname': 'level', 'asctime': 'timestamp'}
    )
    handler.setFormatter(formatter)
    handler._restapi = True     # type: ignore
    logger.addHandler(handler)
