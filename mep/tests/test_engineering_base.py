"""Tests for engineering base classes and the calculator registry."""

from typing import Dict

import pytest

from mep.engineering import CALCULATORS, get_calculator
from mep.engineering.base import CalculationResult, DisciplineCalculator, RunFunction


def _run_echo(params):
    return {"value": params.get("value", 1), "notes": ["n1"], "warnings": ["w1"]}


class _EchoCalculator(DisciplineCalculator):
    @property
    def discipline_name(self) -> str:
        return "echo"

    @property
    def dispatch(self) -> Dict[str, RunFunction]:
        return {"echo": _run_echo}


def test_calculation_result_to_dict():
    r = CalculationResult(calculation_type="test", warnings=["w1"], notes=[])
    d = r.to_dict()
    assert d["calculation_type"] == "test"
    assert d["warnings"] == ["w1"]
    assert d["notes"] == []


def test_calculation_result_flattens_data():
    r = CalculationResult(discipline="hvac", data={"duct_size_in": 14})
    assert r.to_dict()["duct_size_in"] == 14


def test_discipline_calculator_is_abstract():
    with pytest.raises(TypeError):
        DisciplineCalculator()


def test_run_calculation_splits_notes_and_warnings():
    result = _EchoCalculator().run_calculation("echo", {"value": 7})
    assert result.discipline == "echo"
    assert result.data == {"value": 7}
    assert result.notes == ["n1"]
    assert result.warnings == ["w1"]


def test_unknown_calculation_lists_available():
    with pytest.raises(ValueError, match="Available: echo"):
        _EchoCalculator().run_calculation("bogus", {})


def test_registry_has_four_disciplines():
    assert set(CALCULATORS) == {"hvac", "electrical", "plumbing", "fire"}


def test_get_calculator_case_insensitive():
    assert get_calculator("HVAC").discipline_name == "hvac"


def test_get_calculator_unknown():
    with pytest.raises(ValueError, match="Unknown discipline"):
        get_calculator("structural")


@pytest.mark.parametrize("discipline", ["hvac", "electrical", "plumbing", "fire"])
def test_every_calculation_runs_with_defaults(discipline):
    calc = get_calculator(discipline)
    for calc_type in calc.available_calculations():
        result = calc.run_calculation(calc_type, {})
        assert result.calculation_type == calc_type
        assert result.data
