"""
MEP Engineering - discipline calculation engines.

Usage:
    from mep.engineering import get_calculator

    result = get_calculator("hvac").run_calculation("zone", {"area": 2500})
"""

from typing import Dict

from mep.engineering.base import CalculationResult, DisciplineCalculator
from mep.engineering.electrical import ElectricalCalculator
from mep.engineering.fire import FireProtectionCalculator
from mep.engineering.hvac import HVACCalculator
from mep.engineering.plumbing import PlumbingCalculator

CALCULATORS: Dict[str, DisciplineCalculator] = {
    calc.discipline_name: calc
    for calc in (
        HVACCalculator(),
        ElectricalCalculator(),
        PlumbingCalculator(),
        FireProtectionCalculator(),
    )
}


def get_calculator(discipline: str) -> DisciplineCalculator:
    """
    Calculator for a discipline name ('hvac', 'electrical', 'plumbing', 'fire').

    Raises:
        ValueError: If the discipline is unknown.
    """
    calc = CALCULATORS.get(discipline.lower())
    if calc is None:
        raise ValueError(
            f"Unknown discipline: {discipline}. "
            f"Available: {', '.join(CALCULATORS)}"
        )
    return calc


__all__ = [
    "CALCULATORS",
    "CalculationResult",
    "DisciplineCalculator",
    "ElectricalCalculator",
    "FireProtectionCalculator",
    "HVACCalculator",
    "PlumbingCalculator",
    "get_calculator",
]
