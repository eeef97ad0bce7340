"""
Fire Protection Engine
======================

Simplified NFPA fire protection calculations:
- Sprinkler system demand (NFPA 13 density/area method)
- Standpipe system (NFPA 14, Class I)
- Fire pump sizing (NFPA 20, 150% capacity point)
- Required fire flow for hydrants (ISO-style construction factor)
- Sprinkler head spacing from coverage area

Units: ft², ft, GPM, PSI, HP.
"""

import math
from dataclasses import asdict, dataclass
from typing import Any, Dict, List

from mep.core.logging import get_logger
from mep.engineering.base import DisciplineCalculator, RunFunction
from mep.engineering.tables import (
    ConstantTable,
    StandardSizeTable,
    ceil_int,
    ceil_to_multiple,
    clamp,
    round_half_up,
    round_int,
    safe_divide,
    safe_sqrt,
)

logger = get_logger("mep.engineering.fire")


# ============================================================================
# CONSTANTS
# ============================================================================

PSI_PER_FT_ELEVATION = 0.433
MIN_DESIGN_AREA_SQFT = 1500
DESIGN_AREA_HEADS = 5
SPRINKLER_FRICTION_ALLOWANCE = 0.3   # fraction of base pressure

STANDPIPE_SYSTEM_TYPE = 'Class I (2.5" hose)'
STANDPIPE_BASE_FLOW_GPM = 500
STANDPIPE_ADDITIONAL_FLOW_GPM = 250
STANDPIPE_MAX_FLOW_GPM = 1250
STANDPIPE_RESIDUAL_PSI = 100
STANDPIPE_FRICTION_PSI_PER_FT = 0.1

PUMP_CAPACITY_FACTOR = 1.5            # rated at 150% of demand
PUMP_FRICTION_PSI_PER_FT = 0.15
PUMP_EFFICIENCY = 0.70
HP_CONSTANT = 1714                    # GPM x PSI per HP

MIN_FIRE_FLOW_GPM = 500
MAX_FIRE_FLOW_GPM = 12000
FIRE_FLOW_COEFFICIENT = 18
FIRE_FLOW_INCREMENT = 250


@dataclass(frozen=True)
class HazardClass:
    """NFPA 13 occupancy hazard design basis."""
    density: float        # GPM/ft²
    coverage: float       # ft² per head
    base_pressure: float  # PSI at the most remote head


HAZARD_CLASSES = ConstantTable(
    "hazard class",
    {
        "light": HazardClass(density=0.10, coverage=225, base_pressure=7),
        "ordinary i": HazardClass(density=0.15, coverage=130, base_pressure=10),
        "ordinary ii": HazardClass(density=0.20, coverage=130, base_pressure=15),
        "extra": HazardClass(density=0.30, coverage=100, base_pressure=20),
    },
    default_key="ordinary i",
    normalize=lambda key: " ".join(str(key).split()).lower(),
)

# Sprinkler main size by system flow: below 100 GPM -> 2", ... , 2000+ -> 8"
SPRINKLER_MAIN_SIZES = StandardSizeTable(
    "sprinkler main",
    [
        (100, 2),
        (200, 2.5),
        (400, 3),
        (750, 4),
        (1200, 5),
        (2000, 6),
        (math.inf, 8),
    ],
)

CONSTRUCTION_FACTORS = ConstantTable(
    "construction type",
    {
        "type i": 0.6,     # fire resistive
        "type ii": 0.8,    # noncombustible
        "type iii": 1.0,   # ordinary
        "type iv": 0.8,    # heavy timber
        "type v": 1.2,     # wood frame
    },
    default=1.0,
    normalize=lambda key: " ".join(str(key).split()).lower(),
)


# ============================================================================
# RESULT TYPES
# ============================================================================

@dataclass(frozen=True)
class SprinklerSystem:
    hazard_class: str
    coverage_sqft: float
    density_gpm_per_sqft: float
    head_count: int
    design_area_sqft: float
    flow_rate_gpm: int
    pressure_psi: int
    pipe_size_in: float


@dataclass(frozen=True)
class StandpipeSystem:
    system_type: str
    flow_rate_gpm: int
    pressure_psi: int
    pipe_size_in: float
    hose_connections: int


@dataclass(frozen=True)
class FirePump:
    pump_capacity_gpm: int
    pump_pressure_psi: int
    horsepower: int
    pump_type: str


@dataclass(frozen=True)
class HeadSpacing:
    max_spacing_ft: float
    max_distance_ft: float   # from wall


# ============================================================================
# CALCULATIONS
# ============================================================================

def sprinkler_system(
    area: float,
    hazard_class: str,
    ceiling_height_ft: float = 12,
) -> SprinklerSystem:
    """
    Sprinkler system demand per NFPA 13 (density/area method).

    Args:
        area: Protected floor area (ft²)
        hazard_class: 'Light', 'Ordinary I', 'Ordinary II' or 'Extra';
            anything else is designed as Ordinary I
        ceiling_height_ft: Ceiling height (ft), for elevation pressure

    Returns:
        SprinklerSystem. Design area is the larger of 1500 ft² and five
        heads; pressure adds elevation and a 30% friction allowance to the
        hazard's remote-head pressure.
    """
    hazard = HAZARD_CLASSES.lookup(hazard_class)

    head_count = ceil_int(safe_divide(area, hazard.coverage))
    design_area = max(MIN_DESIGN_AREA_SQFT, hazard.coverage * DESIGN_AREA_HEADS)
    flow_rate = round_int(design_area * hazard.density)

    elevation_pressure = ceiling_height_ft * PSI_PER_FT_ELEVATION
    friction_allowance = hazard.base_pressure * SPRINKLER_FRICTION_ALLOWANCE
    pressure = round_int(hazard.base_pressure + elevation_pressure + friction_allowance)

    return SprinklerSystem(
        hazard_class=hazard_class,
        coverage_sqft=hazard.coverage,
        density_gpm_per_sqft=hazard.density,
        head_count=head_count,
        design_area_sqft=design_area,
        flow_rate_gpm=flow_rate,
        pressure_psi=pressure,
        pipe_size_in=SPRINKLER_MAIN_SIZES.select(flow_rate, inclusive=False),
    )


def standpipe_system(floors: int, building_height_ft: float) -> StandpipeSystem:
    """
    Class I standpipe per NFPA 14.

    500 GPM for the first standpipe, 250 GPM for each floor above three,
    capped at 1250 GPM. Pressure is 100 psi residual plus elevation plus
    0.1 psi/ft friction.
    """
    if floors <= 3:
        flow_rate = STANDPIPE_BASE_FLOW_GPM
    else:
        flow_rate = min(
            STANDPIPE_MAX_FLOW_GPM,
            STANDPIPE_BASE_FLOW_GPM + (floors - 3) * STANDPIPE_ADDITIONAL_FLOW_GPM,
        )

    pressure = round_int(
        STANDPIPE_RESIDUAL_PSI
        + building_height_ft * PSI_PER_FT_ELEVATION
        + building_height_ft * STANDPIPE_FRICTION_PSI_PER_FT
    )

    return StandpipeSystem(
        system_type=STANDPIPE_SYSTEM_TYPE,
        flow_rate_gpm=flow_rate,
        pressure_psi=pressure,
        pipe_size_in=4 if floors <= 5 else 6,
        hose_connections=floors,
    )


def pump_type(capacity_gpm: float, pressure_psi: float) -> str:
    """Pump arrangement for a rated capacity and boost pressure."""
    if capacity_gpm <= 1500 and pressure_psi <= 100:
        return "Horizontal Split Case"
    if capacity_gpm <= 1000 and pressure_psi > 100:
        return "Vertical Turbine"
    return "Horizontal Split Case (Large)"


def fire_pump(
    total_flow_gpm: float,
    static_pressure_psi: float,
    required_pressure_psi: float,
    elevation_ft: float,
) -> FirePump:
    """
    Fire pump rating per NFPA 20.

    Capacity is 150% of demand rounded up to 100 GPM. Pressure is the
    deficit (required - static + elevation + 0.15 psi/ft friction), never
    below zero, rounded up to 5 psi. Horsepower assumes 70% efficiency,
    rounded up to 5 HP.
    """
    capacity = ceil_to_multiple(total_flow_gpm * PUMP_CAPACITY_FACTOR, 100)

    deficit = (
        required_pressure_psi
        - static_pressure_psi
        + elevation_ft * PSI_PER_FT_ELEVATION
        + elevation_ft * PUMP_FRICTION_PSI_PER_FT
    )
    pressure = ceil_to_multiple(max(0, deficit), 5)

    horsepower = ceil_to_multiple(capacity * pressure / (HP_CONSTANT * PUMP_EFFICIENCY), 5)

    return FirePump(
        pump_capacity_gpm=capacity,
        pump_pressure_psi=pressure,
        horsepower=horsepower,
        pump_type=pump_type(capacity, pressure),
    )


def hydrant_flow(building_area_ft2: float, construction_type: str) -> int:
    """
    Required fire flow (GPM): C x sqrt(area) x 18.

    Clamped to 500-12,000 GPM and rounded to the nearest 250 GPM.
    Unknown construction types use C = 1.0.
    """
    factor = CONSTRUCTION_FACTORS.lookup(construction_type)
    fire_flow = factor * safe_sqrt(building_area_ft2) * FIRE_FLOW_COEFFICIENT
    fire_flow = clamp(fire_flow, MIN_FIRE_FLOW_GPM, MAX_FIRE_FLOW_GPM)
    return round_int(fire_flow / FIRE_FLOW_INCREMENT) * FIRE_FLOW_INCREMENT


def head_spacing(coverage: float) -> HeadSpacing:
    """Maximum head-to-head spacing and distance to wall for a coverage area."""
    max_spacing = safe_sqrt(coverage)
    return HeadSpacing(
        max_spacing_ft=round_half_up(max_spacing, 1),
        max_distance_ft=round_half_up(max_spacing / 2, 1),
    )


# ============================================================================
# ENTRY FUNCTIONS
# ============================================================================

def _hazard_notes(hazard_class: str) -> List[str]:
    if HAZARD_CLASSES.contains(hazard_class):
        return []
    return [f"Unknown hazard class '{hazard_class}', designed as Ordinary I"]


def run_sprinkler(params: Dict[str, Any]) -> Dict[str, Any]:
    hazard_class = params.get("hazard_class", "Ordinary I")
    result = asdict(sprinkler_system(
        params.get("area", 20000),
        hazard_class,
        params.get("ceiling_height_ft", 12),
    ))
    result["notes"] = _hazard_notes(hazard_class)
    return result


def run_standpipe(params: Dict[str, Any]) -> Dict[str, Any]:
    return asdict(standpipe_system(
        params.get("floors", 5),
        params.get("building_height_ft", 70),
    ))


def run_fire_pump(params: Dict[str, Any]) -> Dict[str, Any]:
    return asdict(fire_pump(
        params.get("total_flow_gpm", 1000),
        params.get("static_pressure_psi", 60),
        params.get("required_pressure_psi", 120),
        params.get("elevation_ft", 30),
    ))


def run_hydrant_flow(params: Dict[str, Any]) -> Dict[str, Any]:
    construction = params.get("construction_type", "Type III")
    notes: List[str] = []
    if not CONSTRUCTION_FACTORS.contains(construction):
        notes.append(f"Unknown construction type '{construction}', factor 1.0 used")
    return {
        "building_area_sqft": params.get("area", 20000),
        "construction_type": construction,
        "fire_flow_gpm": hydrant_flow(params.get("area", 20000), construction),
        "notes": notes,
    }


def run_head_spacing(params: Dict[str, Any]) -> Dict[str, Any]:
    return asdict(head_spacing(params.get("coverage_sqft", 130)))


def run_fire_protection(params: Dict[str, Any]) -> Dict[str, Any]:
    """
    Building fire protection: sprinklers, standpipes, a fire pump sized
    for their combined demand, hydrant fire flow and head spacing.
    """
    area = params.get("area", 20000)
    hazard_class = params.get("hazard_class", "Ordinary I")

    sprinkler = sprinkler_system(area, hazard_class, params.get("ceiling_height_ft", 12))
    standpipe = standpipe_system(
        params.get("floors", 5),
        params.get("building_height_ft", 70),
    )
    total_flow = sprinkler.flow_rate_gpm + standpipe.flow_rate_gpm
    pump = fire_pump(
        total_flow,
        params.get("static_pressure_psi", 60),
        params.get("required_pressure_psi", 120),
        params.get("elevation_ft", 30),
    )

    result = {
        "sprinkler": asdict(sprinkler),
        "standpipe": asdict(standpipe),
        "total_demand_gpm": total_flow,
        "fire_pump": asdict(pump),
        "hydrant_flow_gpm": hydrant_flow(area, params.get("construction_type", "Type III")),
        "head_spacing": asdict(head_spacing(sprinkler.coverage_sqft)),
        "notes": _hazard_notes(hazard_class),
    }
    logger.info(
        "Fire protection %.0f ft2 %s: %s GPM demand, %s HP pump",
        area, hazard_class, total_flow, pump.horsepower,
    )
    return result


# ============================================================================
# DisciplineCalculator implementation
# ============================================================================

_CALC_DISPATCH: Dict[str, RunFunction] = {
    "sprinkler": run_sprinkler,
    "standpipe": run_standpipe,
    "fire-pump": run_fire_pump,
    "hydrant-flow": run_hydrant_flow,
    "head-spacing": run_head_spacing,
    "fire-protection": run_fire_protection,
}


class FireProtectionCalculator(DisciplineCalculator):
    """Fire protection discipline calculator."""

    @property
    def discipline_name(self) -> str:
        return "fire"

    @property
    def dispatch(self) -> Dict[str, RunFunction]:
        return _CALC_DISPATCH
