"""
Base classes for engineering discipline calculators.

All discipline modules implement DisciplineCalculator: a name, the list of
calculation types it knows, and a dispatcher that runs one of them against
a flat parameter dict.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List

RunFunction = Callable[[Dict[str, Any]], Dict[str, Any]]


@dataclass
class CalculationResult:
    discipline: str = ""
    calculation_type: str = ""
    data: Dict[str, Any] = field(default_factory=dict)
    warnings: List[str] = field(default_factory=list)
    notes: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        d = {
            "discipline": self.discipline,
            "calculation_type": self.calculation_type,
            "warnings": list(self.warnings),
            "notes": list(self.notes),
        }
        # Flatten data into top-level for convenience
        d.update(self.data)
        return d


class DisciplineCalculator(ABC):
    """Abstract base class for discipline calculators."""

    @property
    @abstractmethod
    def discipline_name(self) -> str:
        pass

    @property
    @abstractmethod
    def dispatch(self) -> Dict[str, RunFunction]:
        """Mapping of calculation type to its run_*() entry function."""

    def available_calculations(self) -> List[str]:
        return list(self.dispatch.keys())

    def run_calculation(
        self, calculation_type: str, params: Dict[str, Any]
    ) -> CalculationResult:
        """
        Dispatch to the appropriate run_*() function.

        Args:
            calculation_type: One of available_calculations().
            params: Input parameters dict.

        Returns:
            CalculationResult with data populated.

        Raises:
            ValueError: If calculation_type is unknown.
        """
        func = self.dispatch.get(calculation_type)
        if func is None:
            raise ValueError(
                f"Unknown calculation type: {calculation_type}. "
                f"Available: {', '.join(self.available_calculations())}"
            )

        data = dict(func(params))
        notes = data.pop("notes", [])
        warnings = data.pop("warnings", [])

        return CalculationResult(
            discipline=self.discipline_name,
            calculation_type=calculation_type,
            data=data,
            warnings=list(warnings),
            notes=list(notes),
        )
