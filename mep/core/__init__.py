"""
MEP Core - Shared services for all modules.

Usage:
    from mep.core import get_config, get_config_value, get_logger
"""

from mep.core.config import get_config, get_config_value, get_discipline_defaults
from mep.core.logging import get_logger

__all__ = [
    "get_config",
    "get_config_value",
    "get_discipline_defaults",
    "get_logger",
]
