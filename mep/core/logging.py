"""
Logging configuration for MEP.

Every module logs through ``get_logger(__name__)``-style names under
``mep.``. The level comes from ``logging.level`` in config.yaml unless one
is passed explicitly.
"""

import logging
import sys
from typing import Dict, Optional, Union

LOG_FORMAT = "%(asctime)s [%(name)s] %(levelname)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_loggers: Dict[str, logging.Logger] = {}


def _parse_level(level: Optional[Union[int, str]]) -> int:
    """Numeric level for an int, a level name, or None (configured level)."""
    if isinstance(level, int):
        return level

    if level is None:
        from mep.core.config import get_log_level_name

        try:
            level = get_log_level_name()
        except FileNotFoundError:
            return logging.INFO

    number = logging.getLevelName(str(level).upper())
    return number if isinstance(number, int) else logging.INFO


def _stdout_handler(level: int) -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    return handler


def get_logger(name: str, level: Optional[Union[int, str]] = None) -> logging.Logger:
    """
    Get a configured logger for a module.

    Args:
        name: Logger name (e.g., 'mep.engineering.hvac')
        level: Level number or name; defaults to the configured level

    Returns:
        The cached logger for ``name``. Later calls ignore ``level``.
    """
    if name in _loggers:
        return _loggers[name]

    numeric = _parse_level(level)
    logger = logging.getLogger(name)
    logger.setLevel(numeric)

    if not logger.handlers:
        logger.addHandler(_stdout_handler(numeric))

    _loggers[name] = logger
    return logger
