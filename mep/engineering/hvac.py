"""
HVAC Engine
===========

Simplified ASHRAE-style HVAC calculations:
- Heating load (envelope + infiltration - occupant gain)
- Cooling load (CLTD-style solar/conduction + infiltration + internal gains)
- Outdoor air ventilation per ASHRAE 62.1 rates
- Equipment capacity in tons
- Round duct sizing against a standard duct ladder

Units: area ft², temperatures °F, loads BTU/hr, airflow CFM, velocity FPM,
duct diameter inches.
"""

import math
from dataclasses import asdict, dataclass
from typing import Any, Dict, List

from mep.core.logging import get_logger
from mep.engineering.base import DisciplineCalculator, RunFunction
from mep.engineering.tables import (
    ConstantTable,
    StandardSizeTable,
    ceil_to_multiple,
    round_half_up,
    round_int,
    safe_divide,
    safe_sqrt,
)

logger = get_logger("mep.engineering.hvac")


# ============================================================================
# CONSTANTS
# ============================================================================

TON_BTU_HR = 12000        # BTU/hr per ton of refrigeration
WATTS_TO_BTU_HR = 3.412   # BTU/hr per watt

# Heating
ENVELOPE_LOSS_BTUH_PER_SQFT = 30   # at a 70 °F design difference
HEATING_REFERENCE_DELTA_T = 70
INFILTRATION_BTUH_PER_SQFT_F = 0.018
OCCUPANT_HEAT_BTUH = 250

# Cooling
SOLAR_GAIN_BTUH_PER_SQFT = 40
CONDUCTION_GAIN_BTUH_PER_SQFT = 15
COOLING_REFERENCE_DELTA_T = 20
LIGHTING_W_PER_SQFT = 1.5
EQUIPMENT_W_PER_SQFT = 1.0
OCCUPANT_SENSIBLE_BTUH = 250
OCCUPANT_LATENT_BTUH = 200

DEFAULT_DUCT_VELOCITY_FPM = 1000


@dataclass(frozen=True)
class VentilationRate:
    """ASHRAE 62.1 breathing-zone outdoor air rates."""
    per_person: float  # CFM/person
    per_area: float    # CFM/ft²


VENTILATION_RATES = ConstantTable(
    "space type",
    {
        "office": VentilationRate(5, 0.06),
        "classroom": VentilationRate(10, 0.12),
        "retail": VentilationRate(7.5, 0.12),
        "restaurant": VentilationRate(7.5, 0.18),
        "warehouse": VentilationRate(0, 0.06),
        "gym": VentilationRate(20, 0.06),
    },
    default_key="office",
    normalize=lambda key: str(key).strip().lower(),
)

STANDARD_DUCT_SIZES = StandardSizeTable.from_values(
    "duct diameter",
    [6, 8, 10, 12, 14, 16, 18, 20, 24, 30, 36, 42, 48],
)


# ============================================================================
# RESULT TYPES
# ============================================================================

@dataclass(frozen=True)
class HeatingLoadBreakdown:
    """Additive components of the heating load (BTU/hr, unrounded)."""
    envelope: float
    infiltration: float
    occupancy: float  # negative: people offset heat loss

    @property
    def total(self) -> int:
        """Rounded load, floored at zero."""
        return max(0, round_int(self.envelope + self.infiltration + self.occupancy))


@dataclass(frozen=True)
class CoolingLoadBreakdown:
    """Additive components of the cooling load (BTU/hr, unrounded)."""
    solar: float
    conduction: float
    infiltration: float
    internal: float
    occupant_sensible: float
    occupant_latent: float

    @property
    def total(self) -> int:
        return round_int(
            self.solar + self.conduction + self.infiltration + self.internal
            + self.occupant_sensible + self.occupant_latent
        )


# ============================================================================
# CALCULATIONS
# ============================================================================

def heating_load_breakdown(
    area: float,
    occupancy: float,
    outdoor_temp: float = 0,
    indoor_temp: float = 70,
) -> HeatingLoadBreakdown:
    """Components of the design heating load."""
    delta_t = indoor_temp - outdoor_temp
    temp_factor = delta_t / HEATING_REFERENCE_DELTA_T

    return HeatingLoadBreakdown(
        envelope=area * ENVELOPE_LOSS_BTUH_PER_SQFT * temp_factor,
        infiltration=area * INFILTRATION_BTUH_PER_SQFT_F * delta_t,
        occupancy=occupancy * -OCCUPANT_HEAT_BTUH,
    )


def heating_load(
    area: float,
    occupancy: float,
    outdoor_temp: float = 0,
    indoor_temp: float = 70,
) -> int:
    """
    Design heating load using a simplified ASHRAE method.

    Args:
        area: Floor area (ft²)
        occupancy: Number of occupants
        outdoor_temp: Design outdoor temperature (°F)
        indoor_temp: Design indoor temperature (°F)

    Returns:
        Heating load (BTU/hr), rounded and never negative.
    """
    return heating_load_breakdown(area, occupancy, outdoor_temp, indoor_temp).total


def cooling_load_breakdown(
    area: float,
    occupancy: float,
    outdoor_temp: float = 95,
    indoor_temp: float = 75,
) -> CoolingLoadBreakdown:
    """Components of the design cooling load."""
    delta_t = outdoor_temp - indoor_temp
    temp_factor = delta_t / COOLING_REFERENCE_DELTA_T

    lighting_w = area * LIGHTING_W_PER_SQFT
    equipment_w = area * EQUIPMENT_W_PER_SQFT

    return CoolingLoadBreakdown(
        solar=area * SOLAR_GAIN_BTUH_PER_SQFT * temp_factor,
        conduction=area * CONDUCTION_GAIN_BTUH_PER_SQFT * temp_factor,
        infiltration=area * INFILTRATION_BTUH_PER_SQFT_F * delta_t,
        internal=(lighting_w + equipment_w) * WATTS_TO_BTU_HR,
        occupant_sensible=occupancy * OCCUPANT_SENSIBLE_BTUH,
        occupant_latent=occupancy * OCCUPANT_LATENT_BTUH,
    )


def cooling_load(
    area: float,
    occupancy: float,
    outdoor_temp: float = 95,
    indoor_temp: float = 75,
) -> int:
    """
    Design cooling load using a simplified ASHRAE (CLTD) method.

    Args:
        area: Floor area (ft²)
        occupancy: Number of occupants
        outdoor_temp: Design outdoor temperature (°F)
        indoor_temp: Design indoor temperature (°F)

    Returns:
        Cooling load (BTU/hr), rounded. Not clamped.
    """
    return cooling_load_breakdown(area, occupancy, outdoor_temp, indoor_temp).total


def ventilation_rate(area: float, occupancy: float, space_type: str = "office") -> int:
    """
    Outdoor air requirement per ASHRAE 62.1.

    Unknown space types use office rates.

    Returns:
        Ventilation (CFM), rounded.
    """
    rates = VENTILATION_RATES.lookup(space_type)
    return round_int(occupancy * rates.per_person + area * rates.per_area)


def equipment_capacity(cooling_load_btuh: float) -> float:
    """Equipment size in tons, rounded up to the next 0.5 ton."""
    tons = cooling_load_btuh / TON_BTU_HR
    return ceil_to_multiple(tons, 0.5)


def duct_diameter(airflow_cfm: float, velocity_fpm: float = DEFAULT_DUCT_VELOCITY_FPM) -> float:
    """Exact round duct diameter (inches) for the airflow at the design velocity."""
    area_sqft = safe_divide(airflow_cfm, velocity_fpm)
    return 2 * safe_sqrt(area_sqft / math.pi) * 12


def duct_size(airflow_cfm: float, velocity_fpm: float = DEFAULT_DUCT_VELOCITY_FPM) -> int:
    """
    Round duct size snapped to the closest standard diameter.

    Closest, not next larger: 11.2" -> 12", 10.9" -> 10".
    """
    return STANDARD_DUCT_SIZES.closest(duct_diameter(airflow_cfm, velocity_fpm))


# ============================================================================
# ENTRY FUNCTIONS
# ============================================================================

def run_heating_load(params: Dict[str, Any]) -> Dict[str, Any]:
    """
    Params:
        area: Floor area (ft²)
        occupancy: Occupants
        outdoor_temp: Winter design outdoor temperature (°F), default 0
        indoor_temp: Indoor design temperature (°F), default 70
    """
    breakdown = heating_load_breakdown(
        area=params.get("area", 1000),
        occupancy=params.get("occupancy", 10),
        outdoor_temp=params.get("outdoor_temp", 0),
        indoor_temp=params.get("indoor_temp", 70),
    )
    return {
        "heating_load_btuh": breakdown.total,
        "breakdown": {k: round_half_up(v) for k, v in asdict(breakdown).items()},
    }


def run_cooling_load(params: Dict[str, Any]) -> Dict[str, Any]:
    """
    Params:
        area: Floor area (ft²)
        occupancy: Occupants
        outdoor_temp: Summer design outdoor temperature (°F), default 95
        indoor_temp: Indoor design temperature (°F), default 75
    """
    breakdown = cooling_load_breakdown(
        area=params.get("area", 1000),
        occupancy=params.get("occupancy", 10),
        outdoor_temp=params.get("outdoor_temp", 95),
        indoor_temp=params.get("indoor_temp", 75),
    )
    total = breakdown.total
    return {
        "cooling_load_btuh": total,
        "equipment_capacity_tons": equipment_capacity(total),
        "breakdown": {k: round_half_up(v) for k, v in asdict(breakdown).items()},
    }


def run_ventilation(params: Dict[str, Any]) -> Dict[str, Any]:
    space_type = params.get("space_type", "office")
    notes: List[str] = []
    if not VENTILATION_RATES.contains(space_type):
        notes.append(f"Unknown space type '{space_type}', office rates used")

    return {
        "space_type": space_type,
        "ventilation_cfm": ventilation_rate(
            area=params.get("area", 1000),
            occupancy=params.get("occupancy", 10),
            space_type=space_type,
        ),
        "notes": notes,
    }


def run_equipment_capacity(params: Dict[str, Any]) -> Dict[str, Any]:
    load = params.get("cooling_load_btuh", 0)
    return {
        "cooling_load_btuh": load,
        "equipment_capacity_tons": equipment_capacity(load),
    }


def run_duct_size(params: Dict[str, Any]) -> Dict[str, Any]:
    airflow = params.get("airflow_cfm", 1200)
    velocity = params.get("velocity_fpm", DEFAULT_DUCT_VELOCITY_FPM)
    return {
        "airflow_cfm": airflow,
        "velocity_fpm": velocity,
        "calculated_diameter_in": round_half_up(duct_diameter(airflow, velocity), 2),
        "duct_size_in": duct_size(airflow, velocity),
    }


def run_zone(params: Dict[str, Any]) -> Dict[str, Any]:
    """
    Full zone calculation: loads, ventilation, equipment and main duct.

    Heating and cooling use separate design temperatures
    (``heating_outdoor_temp`` / ``cooling_outdoor_temp``); a plain
    ``outdoor_temp`` applies to both, as the dashboard form did.
    """
    area = params.get("area", 1000)
    occupancy = params.get("occupancy", 10)
    indoor = params.get("indoor_temp")
    outdoor = params.get("outdoor_temp")

    heating = heating_load_breakdown(
        area,
        occupancy,
        outdoor_temp=params.get("heating_outdoor_temp", outdoor if outdoor is not None else 0),
        indoor_temp=params.get("heating_indoor_temp", indoor if indoor is not None else 70),
    )
    cooling = cooling_load_breakdown(
        area,
        occupancy,
        outdoor_temp=params.get("cooling_outdoor_temp", outdoor if outdoor is not None else 95),
        indoor_temp=params.get("cooling_indoor_temp", indoor if indoor is not None else 75),
    )
    airflow = params.get("airflow_cfm", 1200)
    velocity = params.get("velocity_fpm", DEFAULT_DUCT_VELOCITY_FPM)

    result = {
        "heating_load_btuh": heating.total,
        "cooling_load_btuh": cooling.total,
        "ventilation_cfm": ventilation_rate(area, occupancy, params.get("space_type", "office")),
        "equipment_capacity_tons": equipment_capacity(cooling.total),
        "duct_size_in": duct_size(airflow, velocity),
    }
    logger.info(
        "Zone %.0f ft2: heating %s BTU/hr, cooling %s BTU/hr",
        area, result["heating_load_btuh"], result["cooling_load_btuh"],
    )
    return result


# ============================================================================
# DisciplineCalculator implementation
# ============================================================================

_CALC_DISPATCH: Dict[str, RunFunction] = {
    "heating-load": run_heating_load,
    "cooling-load": run_cooling_load,
    "ventilation": run_ventilation,
    "equipment-capacity": run_equipment_capacity,
    "duct-size": run_duct_size,
    "zone": run_zone,
}


class HVACCalculator(DisciplineCalculator):
    """HVAC discipline calculator."""

    @property
    def discipline_name(self) -> str:
        return "hvac"

    @property
    def dispatch(self) -> Dict[str, RunFunction]:
        return _CALC_DISPATCH
