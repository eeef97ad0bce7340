"""
Plumbing Engine
===============

Simplified UPC/IPC plumbing calculations:
- Water supply fixture units (UPC Table 6-3)
- Fixture units to demand flow (Hunter's curve approximation)
- Domestic water pipe sizing at a 5 fps design velocity
- Hazen-Williams friction loss for copper
- Drain sizing by drainage fixture units (UPC Table 7-6)
- Storage water heater sizing

Units: GPM, inches, feet, PSI, gallons.
"""

import math
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Mapping

from mep.core.logging import get_logger
from mep.engineering.base import DisciplineCalculator, RunFunction
from mep.engineering.tables import (
    ConstantTable,
    StandardSizeTable,
    ceil_int,
    ceil_to_multiple,
    round_half_up,
    safe_divide,
    safe_pow,
    safe_sqrt,
)

logger = get_logger("mep.engineering.plumbing")


# ============================================================================
# CONSTANTS
# ============================================================================

GALLONS_PER_CUFT = 7.48
PSI_PER_FT_HEAD = 0.433
HAZEN_WILLIAMS_C_COPPER = 140
TARGET_VELOCITY_FPS = 5            # domestic water, 4-8 fps range
PRESSURE_LOSS_LIMIT = 0.5          # fraction of available pressure
BASELINE_DRAIN_SLOPE = 0.25        # in/ft

GALLONS_PER_FIXTURE = 12
HEATER_RECOVERY_FRACTION = 0.7

# Water supply fixture units per UPC Table 6-3
FIXTURE_UNITS = ConstantTable(
    "fixture type",
    {
        "water closet (tank)": 3,
        "water closet (flush valve)": 5,
        "urinal (flush valve)": 5,
        "urinal (tank)": 3,
        "lavatory": 1,
        "sink (kitchen)": 2,
        "sink (service)": 3,
        "bathtub": 3,
        "shower": 2,
        "dishwasher (domestic)": 2,
        "washing machine": 3,
        "drinking fountain": 0.5,
        "hose bibb": 3,
    },
    default=1,
    normalize=lambda key: str(key).strip().lower(),
)

# Type L copper nominal sizes (in)
STANDARD_PIPE_SIZES = StandardSizeTable.from_values(
    "copper pipe",
    [0.5, 0.75, 1, 1.25, 1.5, 2, 2.5, 3, 4, 5, 6, 8, 10, 12],
)

# Maximum DFU per drain size, UPC Table 7-6 (dfu capacity, size in)
DRAIN_CAPACITIES = StandardSizeTable(
    "drain DFU capacity",
    [
        (3, 1.5),
        (6, 2),
        (12, 2.5),
        (20, 3),
        (160, 4),
        (360, 5),
        (620, 6),
        (1400, 8),
        (2500, 10),
        (3900, 12),
    ],
)


@dataclass(frozen=True)
class WaterHeaterSize:
    tank_capacity_gal: int
    recovery_rate_gph: int


# ============================================================================
# CALCULATIONS
# ============================================================================

def total_fixture_units(fixture_counts: Mapping[str, float]) -> float:
    """
    Total water supply fixture units.

    Args:
        fixture_counts: Fixture name -> count, e.g. {'Lavatory': 4}.
            Unlisted fixture types count 1 WSFU each.
    """
    total = 0
    for fixture, count in fixture_counts.items():
        total += FIXTURE_UNITS.lookup(fixture) * count
    return total


def fixture_units_to_gpm(wsfu: float) -> float:
    """
    Demand flow from fixture units (Hunter's curve, flush tank systems).

    Piecewise fit:
        wsfu <= 0    -> 0
        wsfu <= 10   -> sqrt(wsfu) * 3.5
        wsfu <= 50   -> wsfu^0.45 * 8
        wsfu <= 200  -> wsfu^0.38 * 15
        otherwise    -> wsfu^0.35 * 20
    """
    if not wsfu > 0:
        return 0.0
    if wsfu <= 10:
        return math.sqrt(wsfu) * 3.5
    if wsfu <= 50:
        return math.pow(wsfu, 0.45) * 8
    if wsfu <= 200:
        return math.pow(wsfu, 0.38) * 15
    return math.pow(wsfu, 0.35) * 20


def friction_loss(flow_gpm: float, diameter_in: float, length_ft: float = 100) -> float:
    """
    Friction loss in PSI per 100 ft (Hazen-Williams, C = 140 copper).

    h = 4.52 x Q^1.85 / (C^1.85 x d^4.87), converted at 0.433 PSI/ft.
    The result is a gradient; ``length_ft`` does not scale it. No flow
    gives 0.0. Flow through a zero bore is infinite loss, and a negative
    bore gives NaN.
    """
    if not flow_gpm > 0:
        return 0.0

    head_loss_ft = safe_divide(
        4.52 * safe_pow(flow_gpm, 1.85),
        safe_pow(HAZEN_WILLIAMS_C_COPPER, 1.85) * safe_pow(diameter_in, 4.87),
    )
    return round_half_up(head_loss_ft * PSI_PER_FT_HEAD, 2)


def required_diameter(flow_gpm: float) -> float:
    """Bore (in) that carries the flow at the 5 fps design velocity."""
    flow_cfs = flow_gpm / (GALLONS_PER_CUFT * 60)
    area_sqft = flow_cfs / TARGET_VELOCITY_FPS
    return safe_sqrt((4 * area_sqft) / math.pi) * 12


def pipe_size(
    fixture_units: float,
    length_ft: float,
    pressure_available_psi: float = 50,
) -> float:
    """
    Domestic water pipe size (in).

    Selects the first copper size at or above the bore needed for 5 fps.
    If the estimated loss over the run (at that bore) exceeds half the
    available pressure, the next larger size is used, once.
    """
    flow = fixture_units_to_gpm(fixture_units)
    diameter = required_diameter(flow)

    pressure_loss = friction_loss(flow, diameter, length_ft) * length_ft / 100
    selected = STANDARD_PIPE_SIZES.select(diameter)

    if pressure_loss > pressure_available_psi * PRESSURE_LOSS_LIMIT:
        logger.debug(
            "Pressure loss %.2f psi over %s ft exceeds %.0f%% of %s psi; upsizing from %s\"",
            pressure_loss, length_ft, PRESSURE_LOSS_LIMIT * 100, pressure_available_psi, selected,
        )
        selected = STANDARD_PIPE_SIZES.next_larger(selected)

    return selected


def drain_pipe_size(dfu: float, slope: float = BASELINE_DRAIN_SLOPE) -> float:
    """
    Drain size (in) by drainage fixture units.

    Capacities are for 1/4 in/ft; other slopes scale the load by
    sqrt(slope / 0.25). Loads past the 12" capacity return 12".
    """
    slope_factor = safe_sqrt(slope / BASELINE_DRAIN_SLOPE)
    adjusted_dfu = safe_divide(dfu, slope_factor)
    return DRAIN_CAPACITIES.select(adjusted_dfu)


def water_heater_size(fixture_count: float, peak_demand: float = 0.4) -> WaterHeaterSize:
    """
    Storage water heater by the 12 gal/fixture rule of thumb.

    Tank is rounded up to the next 10 gal; recovery covers 70% of the
    peak draw per hour, rounded up to a whole GPH.
    """
    base_capacity = fixture_count * GALLONS_PER_FIXTURE
    tank = ceil_to_multiple(base_capacity * peak_demand, 10)
    recovery = ceil_int(base_capacity * peak_demand * HEATER_RECOVERY_FRACTION)
    return WaterHeaterSize(tank_capacity_gal=tank, recovery_rate_gph=recovery)


# ============================================================================
# ENTRY FUNCTIONS
# ============================================================================

def _fixture_units_from(params: Dict[str, Any]) -> float:
    fixtures = params.get("fixtures")
    if fixtures:
        return total_fixture_units(fixtures)
    return params.get("fixture_units", 40)


def run_fixture_units(params: Dict[str, Any]) -> Dict[str, Any]:
    fixtures = params.get("fixtures") or {}
    unknown = [name for name in fixtures if not FIXTURE_UNITS.contains(name)]
    notes: List[str] = [f"Unknown fixture '{name}' counted as 1 WSFU" for name in unknown]
    return {
        "fixture_units": total_fixture_units(fixtures),
        "fixture_count": sum(fixtures.values()),
        "notes": notes,
    }


def run_flow_rate(params: Dict[str, Any]) -> Dict[str, Any]:
    wsfu = _fixture_units_from(params)
    return {
        "fixture_units": wsfu,
        "flow_rate_gpm": round_half_up(fixture_units_to_gpm(wsfu), 2),
    }


def run_pipe_size(params: Dict[str, Any]) -> Dict[str, Any]:
    wsfu = _fixture_units_from(params)
    length = params.get("length_ft", 120)
    flow = fixture_units_to_gpm(wsfu)
    return {
        "fixture_units": wsfu,
        "flow_rate_gpm": round_half_up(flow, 2),
        "calculated_diameter_in": round_half_up(required_diameter(flow), 3),
        "pipe_size_in": pipe_size(wsfu, length, params.get("pressure_available_psi", 50)),
    }


def run_friction_loss(params: Dict[str, Any]) -> Dict[str, Any]:
    flow = params.get("flow_rate_gpm", 40)
    diameter = params.get("diameter_in", 2)
    length = params.get("length_ft", 100)
    gradient = friction_loss(flow, diameter, length)
    return {
        "friction_loss_psi_per_100ft": gradient,
        "pressure_loss_psi": round_half_up(gradient * length / 100, 2),
    }


def run_drain_size(params: Dict[str, Any]) -> Dict[str, Any]:
    dfu = params.get("drainage_fixture_units", 60)
    slope = params.get("slope", BASELINE_DRAIN_SLOPE)
    return {
        "drainage_fixture_units": dfu,
        "slope_in_per_ft": slope,
        "drain_pipe_size_in": drain_pipe_size(dfu, slope),
    }


def run_water_heater(params: Dict[str, Any]) -> Dict[str, Any]:
    heater = water_heater_size(params.get("fixture_count", 25), params.get("peak_demand", 0.4))
    return asdict(heater)


def run_domestic_water(params: Dict[str, Any]) -> Dict[str, Any]:
    """
    Domestic water service: demand flow, supply pipe, friction at the
    selected size, building drain and water heater.

    ``fixtures`` (name -> count) takes precedence over a direct
    ``fixture_units`` total and also supplies the heater fixture count.
    """
    fixtures = params.get("fixtures") or {}
    wsfu = _fixture_units_from(params)
    length = params.get("length_ft", 120)
    pressure = params.get("pressure_available_psi", 50)
    fixture_count = params.get("fixture_count", sum(fixtures.values()) if fixtures else 25)

    flow = fixture_units_to_gpm(wsfu)
    supply = pipe_size(wsfu, length, pressure)
    gradient = friction_loss(flow, supply, length)
    pressure_loss = round_half_up(gradient * length / 100, 2)

    warnings: List[str] = []
    if pressure_loss > pressure * PRESSURE_LOSS_LIMIT:
        warnings.append(
            f"Friction loss {pressure_loss} psi exceeds half of {pressure} psi available"
        )

    result = {
        "fixture_units": wsfu,
        "flow_rate_gpm": round_half_up(flow, 2),
        "pipe_size_in": supply,
        "friction_loss_psi_per_100ft": gradient,
        "pressure_loss_psi": pressure_loss,
        "drain_pipe_size_in": drain_pipe_size(
            params.get("drainage_fixture_units", 60),
            params.get("slope", BASELINE_DRAIN_SLOPE),
        ),
        "water_heater": asdict(water_heater_size(fixture_count, params.get("peak_demand", 0.4))),
        "warnings": warnings,
    }
    logger.info("Domestic water %s WSFU: %.1f GPM on %s\" pipe", wsfu, flow, supply)
    return result


# ============================================================================
# DisciplineCalculator implementation
# ============================================================================

_CALC_DISPATCH: Dict[str, RunFunction] = {
    "fixture-units": run_fixture_units,
    "flow-rate": run_flow_rate,
    "pipe-size": run_pipe_size,
    "friction-loss": run_friction_loss,
    "drain-size": run_drain_size,
    "water-heater": run_water_heater,
    "domestic-water": run_domestic_water,
}


class PlumbingCalculator(DisciplineCalculator):
    """Plumbing discipline calculator."""

    @property
    def discipline_name(self) -> str:
        return "plumbing"

    @property
    def dispatch(self) -> Dict[str, RunFunction]:
        return _CALC_DISPATCH
