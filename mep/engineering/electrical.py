"""
Electrical Engine
=================

Simplified NEC-style electrical calculations:
- Demand load (NEC Article 220 demand factors)
- Load current, single and three phase
- Overcurrent device sizing (NEC 210.20, 80% continuous rule)
- Conductor sizing from NEC Table 310.16 ampacities
- Voltage drop (NEC 210.19 informational note)
- Available short-circuit current at a transformer secondary

Units: watts, volts, amperes, feet, kVA, percent impedance.
"""

import math
from functools import lru_cache
from typing import Any, Dict, List

from mep.core.logging import get_logger
from mep.engineering.base import DisciplineCalculator, RunFunction
from mep.engineering.tables import (
    ConstantTable,
    StandardSizeTable,
    round_half_up,
    round_int,
    safe_divide,
)

logger = get_logger("mep.engineering.electrical")


# ============================================================================
# CONSTANTS
# ============================================================================

SQRT_3 = math.sqrt(3)
CONTINUOUS_LOAD_FACTOR = 0.8     # continuous loads limited to 80% of rating
DEFAULT_POWER_FACTOR = 0.85
DEFAULT_IMPEDANCE_PCT = 5.75
VOLTAGE_DROP_LIMIT_PCT = 3.0     # recommended branch/feeder limit

STANDARD_BREAKER_SIZES = StandardSizeTable.from_values(
    "breaker rating",
    [15, 20, 25, 30, 35, 40, 45, 50, 60, 70, 80, 90, 100,
     110, 125, 150, 175, 200, 225, 250, 300, 350, 400,
     450, 500, 600, 700, 800, 1000, 1200],
)

# NEC Table 310.16, 75 °C copper in raceway (A), smallest conductor first
COPPER_AMPACITY_75C = (
    ("14", 20),
    ("12", 25),
    ("10", 35),
    ("8", 50),
    ("6", 65),
    ("4", 85),
    ("3", 100),
    ("2", 115),
    ("1", 130),
    ("1/0", 150),
    ("2/0", 175),
    ("3/0", 200),
    ("4/0", 230),
    ("250", 255),
    ("300", 285),
    ("350", 310),
    ("400", 335),
    ("500", 380),
    ("600", 420),
    ("750", 475),
    ("1000", 545),
)

# kcmil sizes start above 4/0
KCMIL_SIZES = frozenset(("250", "300", "350", "400", "500", "600", "750", "1000"))

# Conductor ampacity relative to copper; unknown materials are rated as aluminum
MATERIAL_FACTORS = ConstantTable(
    "conductor material",
    {"copper": 1.0, "aluminum": 0.62},
    default_key="aluminum",
    normalize=lambda key: str(key).strip().lower().replace("aluminium", "aluminum"),
)

def _rating_key(key: Any) -> Any:
    """75, 75.0 and '75' share a key; fractional ratings stay unmatched."""
    rating = float(key)
    return int(rating) if rating.is_integer() else rating


# Insulation temperature rating correction relative to the 75 °C column
TEMPERATURE_FACTORS = ConstantTable(
    "temperature rating",
    {60: 0.88, 75: 1.0, 90: 1.04},
    default=1.0,
    normalize=_rating_key,
)

# Copper conductor resistance at 75 °C (ohms per 1000 ft)
RESISTANCE_PER_1000FT = ConstantTable(
    "conductor size",
    {
        "14": 3.07,
        "12": 1.93,
        "10": 1.21,
        "8": 0.764,
        "6": 0.491,
        "4": 0.308,
        "3": 0.245,
        "2": 0.194,
        "1": 0.154,
        "1/0": 0.122,
        "2/0": 0.0967,
        "3/0": 0.0766,
        "4/0": 0.0608,
        "250": 0.0515,
        "300": 0.0429,
        "350": 0.0367,
        "400": 0.0321,
        "500": 0.0258,
    },
    default=0.1,
    normalize=lambda key: str(key).replace(" AWG", "").replace(" kcmil", "").strip(),
)


def conductor_label(size: str) -> str:
    """'12' -> '12 AWG', '250' -> '250 kcmil'."""
    return f"{size} kcmil" if size in KCMIL_SIZES else f"{size} AWG"


@lru_cache(maxsize=32)
def ampacity_table(material: str = "copper", temp_rating: int = 75) -> StandardSizeTable:
    """Conductor ladder keyed on corrected ampacity for a material and rating."""
    material_factor = MATERIAL_FACTORS.lookup(material)
    temp_factor = TEMPERATURE_FACTORS.lookup(temp_rating)

    steps = []
    for size, copper_amps in COPPER_AMPACITY_75C:
        amps = copper_amps if material_factor == 1.0 else round_int(copper_amps * material_factor)
        steps.append((amps * temp_factor, conductor_label(size)))

    return StandardSizeTable(f"{material} {temp_rating}C conductor", steps)


# ============================================================================
# CALCULATIONS
# ============================================================================

def demand_load(connected_load_w: float, demand_factor: float) -> int:
    """Demand load (W) = connected load x demand factor, rounded."""
    return round_int(connected_load_w * demand_factor)


def current(
    load_w: float,
    voltage: float,
    phases: int,
    power_factor: float = DEFAULT_POWER_FACTOR,
) -> float:
    """
    Load current in amperes, to one decimal.

    Three phase: I = P / (sqrt(3) x V x PF). Anything else is treated as
    single phase: I = P / (V x PF).
    """
    if phases == 3:
        amps = safe_divide(load_w, SQRT_3 * voltage * power_factor)
    else:
        amps = safe_divide(load_w, voltage * power_factor)
    return round_half_up(amps, 1)


def breaker_size(current_a: float, continuous: bool = True) -> int:
    """
    Next standard breaker rating at or above the required rating.

    Continuous loads need current / 0.8. Beyond 1200 A the largest rating
    is returned.
    """
    required = current_a / CONTINUOUS_LOAD_FACTOR if continuous else current_a
    return STANDARD_BREAKER_SIZES.select(required)


def wire_size(current_a: float, material: str = "copper", temp_rating: int = 75) -> str:
    """
    Smallest conductor whose corrected ampacity carries current / 0.8.

    Args:
        current_a: Load current (A)
        material: 'copper' or 'aluminum'
        temp_rating: Insulation rating (60, 75 or 90 °C)

    Returns:
        Size label, e.g. '6 AWG' or '250 kcmil'. '1000 kcmil' when no
        tabulated conductor is large enough.
    """
    required_ampacity = current_a / CONTINUOUS_LOAD_FACTOR
    return ampacity_table(material, temp_rating).select(required_ampacity)


def voltage_drop(
    current_a: float,
    distance_ft: float,
    voltage: float,
    wire_size: str,
    phases: int,
) -> float:
    """
    Voltage drop as a percentage of nominal voltage, to two decimals.

    Three phase: Vd = sqrt(3) x I x R x L/1000.
    Single phase: Vd = 2 x I x R x L/1000 (out and back).
    Sizes without a tabulated resistance use 0.1 ohm/1000 ft.
    """
    resistance = RESISTANCE_PER_1000FT.lookup(wire_size)
    length_kft = distance_ft / 1000

    if phases == 3:
        drop_v = SQRT_3 * current_a * resistance * length_kft
    else:
        drop_v = 2 * current_a * resistance * length_kft

    return round_half_up(safe_divide(drop_v, voltage) * 100, 2)


def short_circuit_current(
    transformer_kva: float,
    voltage: float,
    impedance_pct: float = DEFAULT_IMPEDANCE_PCT,
) -> int:
    """Infinite-bus fault current: (kVA x 1000) / (sqrt(3) x V x Z%/100)."""
    fault_a = safe_divide(transformer_kva * 1000, SQRT_3 * voltage * (impedance_pct / 100))
    return round_int(fault_a)


# ============================================================================
# ENTRY FUNCTIONS
# ============================================================================

def run_demand_load(params: Dict[str, Any]) -> Dict[str, Any]:
    connected = params.get("connected_load_w", 50000)
    factor = params.get("demand_factor", 0.8)
    return {
        "connected_load_w": connected,
        "demand_factor": factor,
        "demand_load_w": demand_load(connected, factor),
    }


def run_current(params: Dict[str, Any]) -> Dict[str, Any]:
    load = params.get("load_w", 40000)
    voltage = params.get("voltage", 480)
    phases = params.get("phases", 3)
    power_factor = params.get("power_factor", DEFAULT_POWER_FACTOR)
    return {
        "load_w": load,
        "voltage": voltage,
        "phases": phases,
        "power_factor": power_factor,
        "current_a": current(load, voltage, phases, power_factor),
    }


def run_breaker(params: Dict[str, Any]) -> Dict[str, Any]:
    amps = params.get("current_a", 50)
    continuous = params.get("continuous", True)
    return {
        "current_a": amps,
        "continuous": continuous,
        "breaker_size_a": breaker_size(amps, continuous),
    }


def run_wire(params: Dict[str, Any]) -> Dict[str, Any]:
    amps = params.get("current_a", 50)
    material = params.get("material", "copper")
    temp_rating = params.get("temp_rating", 75)
    notes: List[str] = []
    if not MATERIAL_FACTORS.contains(material):
        notes.append(f"Unknown conductor material '{material}', rated as aluminum")
    if not TEMPERATURE_FACTORS.contains(temp_rating):
        notes.append(f"No correction for {temp_rating}C rating, 75C ampacity used")

    return {
        "current_a": amps,
        "material": material,
        "temp_rating": temp_rating,
        "wire_size": wire_size(amps, material, temp_rating),
        "notes": notes,
    }


def run_voltage_drop(params: Dict[str, Any]) -> Dict[str, Any]:
    size = params.get("wire_size", "6 AWG")
    drop = voltage_drop(
        params.get("current_a", 50),
        params.get("distance_ft", 150),
        params.get("voltage", 480),
        size,
        params.get("phases", 3),
    )
    warnings: List[str] = []
    if drop > VOLTAGE_DROP_LIMIT_PCT:
        warnings.append(f"Voltage drop {drop}% exceeds {VOLTAGE_DROP_LIMIT_PCT}% recommendation")
    return {
        "wire_size": size,
        "voltage_drop_pct": drop,
        "warnings": warnings,
    }


def run_short_circuit(params: Dict[str, Any]) -> Dict[str, Any]:
    kva = params.get("transformer_kva", 500)
    voltage = params.get("voltage", 480)
    impedance = params.get("impedance_pct", DEFAULT_IMPEDANCE_PCT)
    return {
        "transformer_kva": kva,
        "voltage": voltage,
        "impedance_pct": impedance,
        "short_circuit_current_a": short_circuit_current(kva, voltage, impedance),
    }


def run_feeder(params: Dict[str, Any]) -> Dict[str, Any]:
    """
    Size a feeder end to end.

    Demand load -> current -> breaker (continuous) -> conductor ->
    voltage drop on the selected conductor -> transformer fault current.
    """
    voltage = params.get("voltage", 480)
    phases = params.get("phases", 3)
    material = params.get("material", "copper")

    demand = demand_load(params.get("connected_load_w", 50000), params.get("demand_factor", 0.8))
    amps = current(demand, voltage, phases, params.get("power_factor", DEFAULT_POWER_FACTOR))
    conductor = wire_size(amps, material, params.get("temp_rating", 75))
    drop = voltage_drop(amps, params.get("distance_ft", 150), voltage, conductor, phases)

    warnings: List[str] = []
    if drop > VOLTAGE_DROP_LIMIT_PCT:
        warnings.append(f"Voltage drop {drop}% exceeds {VOLTAGE_DROP_LIMIT_PCT}% recommendation")

    result = {
        "demand_load_w": demand,
        "current_a": amps,
        "breaker_size_a": breaker_size(amps, continuous=True),
        "wire_size": conductor,
        "voltage_drop_pct": drop,
        "short_circuit_current_a": short_circuit_current(
            params.get("transformer_kva", 500),
            voltage,
            params.get("impedance_pct", DEFAULT_IMPEDANCE_PCT),
        ),
        "warnings": warnings,
    }
    logger.info(
        "Feeder %s W demand: %s A, %s A breaker, %s",
        demand, amps, result["breaker_size_a"], conductor,
    )
    return result


# ============================================================================
# DisciplineCalculator implementation
# ============================================================================

_CALC_DISPATCH: Dict[str, RunFunction] = {
    "demand-load": run_demand_load,
    "current": run_current,
    "breaker": run_breaker,
    "wire": run_wire,
    "voltage-drop": run_voltage_drop,
    "short-circuit": run_short_circuit,
    "feeder": run_feeder,
}


class ElectricalCalculator(DisciplineCalculator):
    """Electrical discipline calculator."""

    @property
    def discipline_name(self) -> str:
        return "electrical"

    @property
    def dispatch(self) -> Dict[str, RunFunction]:
        return _CALC_DISPATCH
