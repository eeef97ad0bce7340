"""Tests for engineering CLI commands via Typer CliRunner."""

import json

from mep.engineering.cli import app as eng_app


def test_list_command(cli_runner):
    result = cli_runner.invoke(eng_app, ["list"])
    assert result.exit_code == 0, result.output
    assert "hvac:" in result.output
    assert "  fire-protection" in result.output


def test_hvac_command(cli_runner):
    result = cli_runner.invoke(eng_app, ["hvac", "--format", "json"])
    assert result.exit_code == 0, result.output
    data = json.loads(result.output)
    assert data["discipline"] == "hvac"
    assert data["calculation_type"] == "zone"
    assert data["heating_load_btuh"] == 28760
    assert data["cooling_load_btuh"] == 68390


def test_hvac_option_overrides_default(cli_runner):
    result = cli_runner.invoke(eng_app, ["hvac", "--area", "2000", "--format", "json"])
    assert result.exit_code == 0, result.output
    assert json.loads(result.output)["heating_load_btuh"] > 28760


def test_electrical_command(cli_runner):
    result = cli_runner.invoke(eng_app, ["electrical", "--format", "json"])
    assert result.exit_code == 0, result.output
    data = json.loads(result.output)
    assert data["breaker_size_a"] == 80
    assert data["wire_size"] == "4 AWG"


def test_plumbing_command(cli_runner):
    result = cli_runner.invoke(eng_app, ["plumbing", "--fixture-units", "40"])
    assert result.exit_code == 0, result.output
    assert "Domestic Water Results" in result.output
    assert "Water Heater:" in result.output


def test_fire_command(cli_runner):
    result = cli_runner.invoke(eng_app, ["fire", "--format", "markdown"])
    assert result.exit_code == 0, result.output
    assert "| Parameter | Value |" in result.output
    assert "Fire Pump / Horsepower" in result.output


def test_calc_with_params(cli_runner):
    result = cli_runner.invoke(eng_app, [
        "calc", "electrical", "current",
        "--param", "load_w=50000", "--param", "phases=3",
        "--format", "json",
    ])
    assert result.exit_code == 0, result.output
    assert json.loads(result.output)["current_a"] == 70.8


def test_calc_mapping_param(cli_runner):
    result = cli_runner.invoke(eng_app, [
        "calc", "plumbing", "fixture-units",
        "--param", "fixtures={Lavatory: 4, Shower: 2}",
        "--format", "json",
    ])
    assert result.exit_code == 0, result.output
    assert json.loads(result.output)["fixture_units"] == 8


def test_calc_notes_surface(cli_runner):
    result = cli_runner.invoke(eng_app, [
        "calc", "fire", "hydrant-flow", "-p", "construction_type=Type VI", "-f", "json",
    ])
    assert result.exit_code == 0, result.output
    assert json.loads(result.output)["notes"]


def test_calc_unknown_discipline(cli_runner):
    result = cli_runner.invoke(eng_app, ["calc", "structural", "beam"])
    assert result.exit_code == 1
    assert "Unknown discipline" in result.output


def test_calc_unknown_type(cli_runner):
    result = cli_runner.invoke(eng_app, ["calc", "hvac", "bogus"])
    assert result.exit_code == 1
    assert "Unknown calculation type" in result.output


def test_calc_malformed_param(cli_runner):
    result = cli_runner.invoke(eng_app, ["calc", "hvac", "zone", "--param", "area"])
    assert result.exit_code != 0


def test_hvac_velocity_option(cli_runner):
    result = cli_runner.invoke(eng_app, ["hvac", "--velocity-fpm", "500", "--format", "json"])
    assert result.exit_code == 0, result.output
    assert json.loads(result.output)["duct_size_in"] == 20


def test_calc_current_uses_configured_load(cli_runner, temp_config):
    temp_config("defaults:\n  electrical:\n    load_w: 10000\n")
    result = cli_runner.invoke(eng_app, ["calc", "electrical", "current", "-f", "json"])
    assert result.exit_code == 0, result.output
    data = json.loads(result.output)
    assert data["load_w"] == 10000
    assert data["current_a"] == 14.2
