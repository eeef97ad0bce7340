"""
Runtime settings for the MEP engine.

config.yaml sits inside the mep package and has three sections:
``logging`` (level), ``output`` (default CLI format) and ``defaults``
(one input record per discipline). The file is read once and cached.
"""

import yaml
from pathlib import Path
from typing import Any, Dict, Optional

CONFIG_PATH = Path(__file__).resolve().parent.parent / "config.yaml"

_config_cache: Optional[Dict[str, Any]] = None


def get_config(reload: bool = False) -> Dict[str, Any]:
    """
    Settings from config.yaml, cached after the first read.

    Args:
        reload: Re-read the file even if cached

    Raises:
        FileNotFoundError: If config.yaml is missing
        yaml.YAMLError: If config.yaml is not valid YAML
    """
    global _config_cache

    if _config_cache is None or reload:
        if not CONFIG_PATH.exists():
            raise FileNotFoundError(f"Config file not found: {CONFIG_PATH}")
        with open(CONFIG_PATH, "r", encoding="utf-8") as f:
            _config_cache = yaml.safe_load(f) or {}

    return _config_cache


def get_config_value(*keys: str, default: Any = None) -> Any:
    """
    Walk nested sections and return the value at the end of the path.

    ``default`` is returned as soon as a key is missing or an intermediate
    section is not a mapping.

    Example:
        level = get_config_value('logging', 'level', default='INFO')
    """
    node: Any = get_config()

    for key in keys:
        if not isinstance(node, dict) or key not in node:
            return default
        node = node[key]

    return node


def get_discipline_defaults(discipline: str) -> Dict[str, Any]:
    """
    Default input record for a discipline from the ``defaults`` section.

    Returns a copy so callers can merge overrides into it; a missing or
    malformed section gives an empty dict.
    """
    section = get_config_value("defaults", discipline, default={})
    if not isinstance(section, dict):
        return {}
    return dict(section)


def get_log_level_name() -> str:
    """Configured log level name, upper-cased ('INFO' when unset)."""
    return str(get_config_value("logging", "level", default="INFO")).strip().upper()


def get_output_format_name() -> str:
    """Configured default output format, lower-cased ('human' when unset)."""
    return str(get_config_value("output", "format", default="human")).strip().lower()
