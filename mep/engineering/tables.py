"""
Lookup Tables and Numeric Helpers
=================================

Shared building blocks for the discipline engines:

- StandardSizeTable: ordered (threshold, label) ladder with
  "next size up" and "closest size" selection
- ConstantTable: read-only keyed coefficients with an explicit default
- Rounding and arithmetic helpers that never raise on degenerate input

The engines are total over their numeric domain. A zero divisor gives
+/-inf (or NaN for 0/0), the square root of a negative number gives NaN,
and the rounding helpers pass non-finite values through unchanged.
"""

import math
from dataclasses import dataclass
from types import MappingProxyType
from typing import (
    Any, Callable, Dict, Hashable, Iterable, Iterator, List, Mapping,
    Optional, Tuple, Union,
)

from mep.core.logging import get_logger

logger = get_logger("mep.engineering.tables")

Number = Union[int, float]


# ============================================================================
# NUMERIC HELPERS
# ============================================================================

def safe_divide(numerator: float, denominator: float) -> float:
    """Divide, returning +/-inf or NaN instead of raising on a zero divisor."""
    if denominator == 0:
        if numerator == 0 or math.isnan(numerator):
            return math.nan
        return math.copysign(math.inf, numerator)
    return numerator / denominator


def safe_sqrt(value: float) -> float:
    """Square root; NaN for negative input."""
    if math.isnan(value) or value < 0:
        return math.nan
    return math.sqrt(value)


def round_half_up(value: float, digits: int = 0) -> float:
    """
    Round half toward positive infinity: ``floor(x * 10^n + 0.5) / 10^n``.

    Unlike round(), 2.5 -> 3 and -2.5 -> -2.
    """
    factor = 10 ** digits
    scaled = value * factor
    if not math.isfinite(scaled):
        return value
    return math.floor(scaled + 0.5) / factor


def round_int(value: float) -> Number:
    """Round half up to an int; non-finite values are returned as floats."""
    if not math.isfinite(value):
        return value
    return int(math.floor(value + 0.5))


def ceil_int(value: float) -> Number:
    """Ceiling as an int; non-finite values are returned as floats."""
    if not math.isfinite(value):
        return value
    return int(math.ceil(value))


def ceil_to_multiple(value: float, increment: float) -> float:
    """Round up to the next multiple of increment."""
    if not math.isfinite(value) or increment <= 0:
        return value
    steps = value / increment
    if not math.isfinite(steps):
        return value
    return math.ceil(steps) * increment


def safe_pow(base: float, exponent: float) -> float:
    """Power; +/-inf on overflow and NaN where there is no real result."""
    try:
        return math.pow(base, exponent)
    except OverflowError:
        if base < 0 and float(exponent).is_integer() and exponent % 2:
            return -math.inf
        return math.inf
    except ValueError:
        return math.nan


def clamp(value: float, min_val: float, max_val: float) -> float:
    """Clamp a value between min and max."""
    return max(min_val, min(value, max_val))


# ============================================================================
# STANDARD SIZE LADDERS
# ============================================================================

@dataclass(frozen=True)
class SizeStep:
    """One rung of a standard size ladder."""
    threshold: float
    label: Any


class StandardSizeTable:
    """
    Ordered ladder of manufacturable sizes.

    Thresholds must be strictly increasing. ``select`` returns the first
    label whose threshold is >= the requirement; when nothing qualifies
    (including a NaN requirement) the largest label is returned rather than
    raising or extrapolating.

    Example:
        >>> BREAKERS = StandardSizeTable.from_values("breaker", [15, 20, 30])
        >>> BREAKERS.select(17.5)
        20
        >>> BREAKERS.select(45)
        30
    """

    def __init__(self, name: str, steps: Iterable[Tuple[float, Any]]):
        self.name = name
        self._steps: Tuple[SizeStep, ...] = tuple(
            SizeStep(float(threshold), label) for threshold, label in steps
        )
        if not self._steps:
            raise ValueError(f"Size table '{name}' is empty")
        for lower, upper in zip(self._steps, self._steps[1:]):
            if not upper.threshold > lower.threshold:
                raise ValueError(
                    f"Size table '{name}' thresholds must be strictly increasing: "
                    f"{lower.threshold} then {upper.threshold}"
                )

    @classmethod
    def from_values(cls, name: str, values: Iterable[Number]) -> "StandardSizeTable":
        """Ladder where each size is its own threshold."""
        return cls(name, ((v, v) for v in values))

    def __len__(self) -> int:
        return len(self._steps)

    def __iter__(self) -> Iterator[SizeStep]:
        return iter(self._steps)

    def __repr__(self) -> str:
        return f"StandardSizeTable({self.name!r}, {len(self._steps)} sizes)"

    @property
    def labels(self) -> List[Any]:
        return [step.label for step in self._steps]

    @property
    def largest(self) -> Any:
        return self._steps[-1].label

    def select(self, requirement: float, inclusive: bool = True) -> Any:
        """
        First label whose threshold >= requirement, else the largest label.

        With ``inclusive=False`` the threshold must be strictly greater,
        for breakpoint ladders read as "below 100 -> 2 in".
        """
        for step in self._steps:
            if step.threshold > requirement or (inclusive and step.threshold == requirement):
                return step.label

        logger.debug(
            "%s ladder exhausted for requirement %s; using largest size %s",
            self.name, requirement, self.largest,
        )
        return self.largest

    def closest(self, value: float) -> Any:
        """Label whose threshold is nearest to value; ties keep the smaller size."""
        best = self._steps[0]
        for step in self._steps[1:]:
            if abs(step.threshold - value) < abs(best.threshold - value):
                best = step
        return best.label

    def next_larger(self, label: Any) -> Any:
        """Label one rung above ``label``; the top rung maps to itself."""
        labels = self.labels
        index = labels.index(label)
        if index < len(labels) - 1:
            return labels[index + 1]
        return label


# ============================================================================
# CONSTANT TABLES
# ============================================================================

class ConstantTable(Mapping):
    """
    Read-only keyed coefficients with a visible fallback.

    ``lookup`` returns the documented default for keys that are not in the
    table (after ``normalize``) and logs the miss at DEBUG. Plain mapping
    access (``table[key]``) still raises KeyError.
    """

    def __init__(
        self,
        name: str,
        entries: Dict[Hashable, Any],
        default_key: Optional[Hashable] = None,
        default: Any = None,
        normalize: Optional[Callable[[Any], Hashable]] = None,
    ):
        self.name = name
        self._entries = MappingProxyType(dict(entries))
        self._normalize = normalize

        if default_key is not None:
            if default_key not in self._entries:
                raise ValueError(f"Default key {default_key!r} not in table '{name}'")
            default = self._entries[default_key]
        self.default_key = default_key
        self.default = default

    def __getitem__(self, key: Hashable) -> Any:
        return self._entries[key]

    def __iter__(self) -> Iterator[Hashable]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"ConstantTable({self.name!r}, {len(self._entries)} entries)"

    def _key(self, key: Any) -> Any:
        if self._normalize is None:
            return key
        try:
            return self._normalize(key)
        except (AttributeError, TypeError, ValueError, OverflowError):
            return key

    def lookup(self, key: Any) -> Any:
        """Value for key, or the table default when the key is unknown."""
        normalized = self._key(key)
        try:
            return self._entries[normalized]
        except (KeyError, TypeError):
            logger.debug(
                "Unknown %s %r; falling back to %r",
                self.name, key,
                self.default_key if self.default_key is not None else self.default,
            )
            return self.default

    def contains(self, key: Any) -> bool:
        """Whether lookup(key) hits a real entry rather than the default."""
        try:
            return self._key(key) in self._entries
        except TypeError:
            return False
