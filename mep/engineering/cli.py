"""Engineering CLI sub-commands."""

from typing import Any, Dict, List, Optional

import typer
import yaml

from mep.core.output import OutputFormat, resolve_format

app = typer.Typer(no_args_is_help=True)

FORMAT_HELP = "Output format: human, json, markdown (default from config)"


def _parse_params(pairs: List[str]) -> Dict[str, Any]:
    """Parse ``key=value`` pairs; values are read as YAML scalars or mappings."""
    params: Dict[str, Any] = {}
    for pair in pairs:
        key, sep, raw = pair.partition("=")
        if not sep or not key.strip():
            raise typer.BadParameter(f"Expected key=value, got '{pair}'", param_hint="--param")
        try:
            params[key.strip()] = yaml.safe_load(raw) if raw.strip() else ""
        except yaml.YAMLError:
            params[key.strip()] = raw
    return params


def _run(
    discipline: str,
    calculation_type: str,
    overrides: Dict[str, Any],
    fmt: Optional[OutputFormat],
    title: str,
) -> None:
    """Merge overrides over config defaults, run one calculation and print it."""
    from mep.core.config import get_discipline_defaults
    from mep.core import output
    from mep.engineering import get_calculator

    try:
        calc = get_calculator(discipline)
        params = get_discipline_defaults(calc.discipline_name)
        params.update({k: v for k, v in overrides.items() if v is not None})
        result = calc.run_calculation(calculation_type, params)
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    typer.echo(output.format_result(result.to_dict(), resolve_format(fmt), title=title))


@app.command("list")
def list_calculations():
    """List disciplines and their calculation types."""
    from mep.engineering import CALCULATORS

    for name, calc in CALCULATORS.items():
        typer.echo(f"{name}:")
        for calc_type in calc.available_calculations():
            typer.echo(f"  {calc_type}")


@app.command()
def calc(
    discipline: str = typer.Argument(..., help="hvac, electrical, plumbing or fire"),
    calculation_type: str = typer.Argument(..., help="Calculation type (see 'list')"),
    param: Optional[List[str]] = typer.Option(None, "--param", "-p", help="Input as key=value (repeatable)"),
    fmt: Optional[OutputFormat] = typer.Option(None, "--format", "-f", help=FORMAT_HELP),
):
    """Run any single calculation with key=value inputs."""
    _run(
        discipline,
        calculation_type,
        _parse_params(param or []),
        fmt,
        title=f"{discipline.upper()} {calculation_type}",
    )


# ---------------------------------------------------------------------------
# Discipline commands
# ---------------------------------------------------------------------------

@app.command()
def hvac(
    area: Optional[float] = typer.Option(None, help="Floor area (ft2)"),
    occupancy: Optional[int] = typer.Option(None, help="Number of occupants"),
    heating_outdoor_temp: Optional[float] = typer.Option(None, help="Winter design outdoor temperature (F)"),
    heating_indoor_temp: Optional[float] = typer.Option(None, help="Heating setpoint (F)"),
    cooling_outdoor_temp: Optional[float] = typer.Option(None, help="Summer design outdoor temperature (F)"),
    cooling_indoor_temp: Optional[float] = typer.Option(None, help="Cooling setpoint (F)"),
    space_type: Optional[str] = typer.Option(None, help="office, classroom, retail, restaurant, warehouse, gym"),
    airflow_cfm: Optional[float] = typer.Option(None, help="Supply airflow (CFM)"),
    velocity_fpm: Optional[float] = typer.Option(None, help="Duct design velocity (FPM)"),
    fmt: Optional[OutputFormat] = typer.Option(None, "--format", "-f", help=FORMAT_HELP),
):
    """Zone loads, ventilation, equipment and duct size."""
    _run("hvac", "zone", {
        'area': area,
        'occupancy': occupancy,
        'heating_outdoor_temp': heating_outdoor_temp,
        'heating_indoor_temp': heating_indoor_temp,
        'cooling_outdoor_temp': cooling_outdoor_temp,
        'cooling_indoor_temp': cooling_indoor_temp,
        'space_type': space_type,
        'airflow_cfm': airflow_cfm,
        'velocity_fpm': velocity_fpm,
    }, fmt, title="HVAC Zone Results")


@app.command()
def electrical(
    connected_load_w: Optional[float] = typer.Option(None, help="Connected load (W)"),
    demand_factor: Optional[float] = typer.Option(None, help="Demand factor (0-1)"),
    voltage: Optional[float] = typer.Option(None, help="System voltage (V)"),
    phases: Optional[int] = typer.Option(None, help="1 or 3"),
    power_factor: Optional[float] = typer.Option(None, help="Power factor"),
    distance_ft: Optional[float] = typer.Option(None, help="One-way feeder length (ft)"),
    material: Optional[str] = typer.Option(None, help="copper or aluminum"),
    temp_rating: Optional[int] = typer.Option(None, help="Insulation rating: 60, 75, 90 (C)"),
    transformer_kva: Optional[float] = typer.Option(None, help="Transformer rating (kVA)"),
    impedance_pct: Optional[float] = typer.Option(None, help="Transformer impedance (%)"),
    fmt: Optional[OutputFormat] = typer.Option(None, "--format", "-f", help=FORMAT_HELP),
):
    """Feeder: demand, current, breaker, conductor, voltage drop, fault current."""
    _run("electrical", "feeder", {
        'connected_load_w': connected_load_w,
        'demand_factor': demand_factor,
        'voltage': voltage,
        'phases': phases,
        'power_factor': power_factor,
        'distance_ft': distance_ft,
        'material': material,
        'temp_rating': temp_rating,
        'transformer_kva': transformer_kva,
        'impedance_pct': impedance_pct,
    }, fmt, title="Electrical Feeder Results")


@app.command()
def plumbing(
    fixture_units: Optional[float] = typer.Option(None, help="Water supply fixture units"),
    length_ft: Optional[float] = typer.Option(None, help="Developed pipe length (ft)"),
    pressure_available_psi: Optional[float] = typer.Option(None, help="Available pressure (psi)"),
    fixture_count: Optional[int] = typer.Option(None, help="Fixtures served by the water heater"),
    drainage_fixture_units: Optional[float] = typer.Option(None, help="Drainage fixture units"),
    slope: Optional[float] = typer.Option(None, help="Drain slope (in/ft)"),
    fmt: Optional[OutputFormat] = typer.Option(None, "--format", "-f", help=FORMAT_HELP),
):
    """Domestic water: flow, supply pipe, drain and water heater."""
    _run("plumbing", "domestic-water", {
        'fixture_units': fixture_units,
        'length_ft': length_ft,
        'pressure_available_psi': pressure_available_psi,
        'fixture_count': fixture_count,
        'drainage_fixture_units': drainage_fixture_units,
        'slope': slope,
    }, fmt, title="Domestic Water Results")


@app.command()
def fire(
    area: Optional[float] = typer.Option(None, help="Building area (ft2)"),
    hazard_class: Optional[str] = typer.Option(None, help="Light, Ordinary I, Ordinary II, Extra"),
    ceiling_height_ft: Optional[float] = typer.Option(None, help="Ceiling height (ft)"),
    floors: Optional[int] = typer.Option(None, help="Number of floors"),
    building_height_ft: Optional[float] = typer.Option(None, help="Building height (ft)"),
    static_pressure_psi: Optional[float] = typer.Option(None, help="Water supply static pressure (psi)"),
    required_pressure_psi: Optional[float] = typer.Option(None, help="System required pressure (psi)"),
    elevation_ft: Optional[float] = typer.Option(None, help="Elevation to highest outlet (ft)"),
    construction_type: Optional[str] = typer.Option(None, help="Type I through Type V"),
    fmt: Optional[OutputFormat] = typer.Option(None, "--format", "-f", help=FORMAT_HELP),
):
    """Sprinklers, standpipe, fire pump, hydrant flow and head spacing."""
    _run("fire", "fire-protection", {
        'area': area,
        'hazard_class': hazard_class,
        'ceiling_height_ft': ceiling_height_ft,
        'floors': floors,
        'building_height_ft': building_height_ft,
        'static_pressure_psi': static_pressure_psi,
        'required_pressure_psi': required_pressure_psi,
        'elevation_ft': elevation_ft,
        'construction_type': construction_type,
    }, fmt, title="Fire Protection Results")
