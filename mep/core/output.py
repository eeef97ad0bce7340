"""
Output formatters for CLI display.

Supports human-readable, JSON, and markdown output modes. Nested dicts
(load breakdowns, sub-system results) render as indented sections.
"""

import json
from dataclasses import asdict, is_dataclass
from enum import Enum
from typing import Any, Dict, List, Optional


class OutputFormat(str, Enum):
    HUMAN = "human"
    JSON = "json"
    MARKDOWN = "markdown"


def format_result(
    result: Any,
    fmt: OutputFormat = OutputFormat.HUMAN,
    title: Optional[str] = None,
) -> str:
    """Format a result object for display."""
    if fmt == OutputFormat.JSON:
        return _format_json(result)
    elif fmt == OutputFormat.MARKDOWN:
        return _format_markdown(result, title)
    else:
        return _format_human(result, title)


def resolve_format(fmt: Optional[OutputFormat] = None) -> OutputFormat:
    """Explicit format if given, else ``output.format`` from config, else human."""
    if fmt is not None:
        return fmt
    from mep.core.config import get_output_format_name

    try:
        return OutputFormat(get_output_format_name())
    except (ValueError, FileNotFoundError):
        return OutputFormat.HUMAN


def _to_dict(result: Any) -> Dict:
    if is_dataclass(result) and not isinstance(result, type):
        return asdict(result)
    elif isinstance(result, dict):
        return result
    elif hasattr(result, "__dict__"):
        return result.__dict__
    return {"value": str(result)}


def _label(key: Any) -> str:
    return str(key).replace("_", " ").title()


def _format_scalar(value: Any) -> str:
    if isinstance(value, bool):
        return str(value)
    if isinstance(value, float):
        return f"{value:.3f}" if abs(value) < 100 else f"{value:,.1f}"
    if isinstance(value, int):
        return f"{value:,}" if abs(value) >= 10000 else str(value)
    return str(value)


def _format_json(result: Any) -> str:
    return json.dumps(_to_dict(result), indent=2, default=str)


def _human_lines(data: Dict, indent: int = 0) -> List[str]:
    lines = []
    pad = " " * indent
    max_key_len = max(len(_label(k)) for k in data.keys()) if data else 0

    for key, value in data.items():
        label = _label(key)
        if is_dataclass(value) and not isinstance(value, type):
            value = asdict(value)

        if isinstance(value, dict):
            lines.append(f"{pad}{label}:")
            lines.extend(_human_lines(value, indent + 2))
            continue

        if isinstance(value, list):
            formatted = "\n".join(f"{pad}  - {v}" for v in value) if value else "(none)"
            if value:
                formatted = "\n" + formatted
        else:
            formatted = _format_scalar(value)
        lines.append(f"{pad}{label:<{max_key_len + 2}}: {formatted}")

    return lines


def _format_human(result: Any, title: Optional[str] = None) -> str:
    lines = []
    if title:
        lines.extend([title, "=" * len(title), ""])

    lines.extend(_human_lines(_to_dict(result)))
    return "\n".join(lines)


def _markdown_rows(data: Dict, prefix: str = "") -> List[str]:
    rows = []
    for key, value in data.items():
        label = f"{prefix}{_label(key)}"
        if is_dataclass(value) and not isinstance(value, type):
            value = asdict(value)

        if isinstance(value, dict):
            rows.extend(_markdown_rows(value, prefix=f"{label} / "))
            continue

        if isinstance(value, list):
            formatted = ", ".join(str(v) for v in value) if value else "-"
        else:
            formatted = _format_scalar(value)
        rows.append(f"| {label} | {formatted} |")
    return rows


def _format_markdown(result: Any, title: Optional[str] = None) -> str:
    lines = []
    if title:
        lines.extend([f"# {title}", ""])

    lines.extend(["| Parameter | Value |", "|-----------|-------|"])
    lines.extend(_markdown_rows(_to_dict(result)))

    return "\n".join(lines)
