"""Tests for electrical demand, conductor and protection sizing."""

import math

import pytest

from mep.engineering.electrical import (
    ElectricalCalculator,
    STANDARD_BREAKER_SIZES,
    ampacity_table,
    breaker_size,
    conductor_label,
    current,
    demand_load,
    run_feeder,
    run_voltage_drop,
    run_wire,
    short_circuit_current,
    voltage_drop,
    wire_size,
)


class TestElectricalCalculator:
    def test_discipline_name(self):
        assert ElectricalCalculator().discipline_name == "electrical"

    def test_available_calculations(self):
        calcs = ElectricalCalculator().available_calculations()
        assert set(calcs) == {
            "demand-load", "current", "breaker", "wire",
            "voltage-drop", "short-circuit", "feeder",
        }

    def test_dispatch_returns_result(self):
        result = ElectricalCalculator().run_calculation("current", {"load_w": 50000})
        assert result.to_dict()["current_a"] == 70.8


class TestDemandAndCurrent:
    def test_demand_load(self):
        assert demand_load(50000, 0.8) == 40000

    def test_three_phase_current(self):
        assert current(50000, 480, 3, 0.85) == 70.8

    def test_single_phase_current(self):
        assert current(12000, 240, 1, 1.0) == 50.0

    def test_other_phase_counts_single_phase(self):
        assert current(12000, 240, 2, 1.0) == 50.0

    def test_zero_voltage_is_infinite(self):
        assert current(50000, 0, 3) == math.inf

    def test_zero_over_zero_is_nan(self):
        assert math.isnan(current(0, 0, 1))

    def test_overflowing_rounding_does_not_raise(self):
        assert current(1e308, 1, 1, 1.0) == 1e308


class TestBreakerSize:
    def test_continuous_load(self):
        assert breaker_size(50) == 70

    def test_non_continuous_load(self):
        assert breaker_size(50, continuous=False) == 50

    def test_exact_rating(self):
        assert breaker_size(16) == 20

    def test_beyond_largest(self):
        assert breaker_size(2000) == 1200

    def test_result_always_standard(self):
        for amps in range(0, 1000, 37):
            assert breaker_size(amps) in STANDARD_BREAKER_SIZES.labels


class TestWireSize:
    def test_copper_75c(self):
        assert wire_size(50) == "6 AWG"
        assert wire_size(100) == "1 AWG"

    def test_kcmil_label(self):
        assert wire_size(200) == "250 kcmil"

    def test_aluminum_needs_larger_conductor(self):
        assert wire_size(50, material="aluminum") == "2 AWG"

    def test_unknown_material_rated_as_aluminum(self):
        assert wire_size(50, material="unobtainium") == wire_size(50, material="aluminum")

    def test_90c_rating_allows_smaller_conductor(self):
        assert wire_size(53.6, temp_rating=75) == "4 AWG"
        assert wire_size(53.6, temp_rating=90) == "6 AWG"

    def test_60c_rating_needs_larger_conductor(self):
        assert wire_size(50, temp_rating=60) == "4 AWG"

    def test_fractional_rating_uses_75c_column(self):
        assert wire_size(50, temp_rating=60.9) == wire_size(50, temp_rating=75)
        assert run_wire({"temp_rating": 60.9})["notes"]

    def test_whole_number_rating_forms_match(self):
        assert wire_size(50, temp_rating=60.0) == "4 AWG"
        assert wire_size(50, temp_rating="60") == "4 AWG"

    def test_ampacity_cache_is_bounded(self):
        assert ampacity_table.cache_info().maxsize is not None

    def test_beyond_table_returns_largest(self):
        assert wire_size(1000) == "1000 kcmil"

    def test_ampacity_grows_with_current(self):
        table = ampacity_table("copper", 75)
        sizes = [wire_size(a) for a in range(5, 500, 15)]
        ranks = [table.labels.index(s) for s in sizes]
        assert ranks == sorted(ranks)

    def test_aluminum_ladder_strictly_increasing(self):
        thresholds = [step.threshold for step in ampacity_table("aluminum", 90)]
        assert thresholds == sorted(set(thresholds))

    def test_conductor_label(self):
        assert conductor_label("4/0") == "4/0 AWG"
        assert conductor_label("500") == "500 kcmil"

    def test_run_notes_unknown_inputs(self):
        result = run_wire({"material": "silver", "temp_rating": 105})
        assert len(result["notes"]) == 2


class TestVoltageDrop:
    def test_three_phase(self):
        assert voltage_drop(56.6, 150, 480, "4 AWG", 3) == 0.94

    def test_single_phase(self):
        assert voltage_drop(20, 100, 120, "12 AWG", 1) == 6.43

    def test_bare_size_accepted(self):
        assert voltage_drop(20, 100, 120, "12", 1) == 6.43

    def test_overflowing_rounding_does_not_raise(self):
        drop = voltage_drop(1e306, 1000, 1, "4 AWG", 1)
        assert math.isfinite(drop)
        assert drop > 1e307

    def test_unknown_size_uses_default_resistance(self):
        assert voltage_drop(10, 1000, 100, "999 AWG", 1) == 2.0

    def test_longer_run_more_drop(self):
        drops = [voltage_drop(50, d, 480, "6 AWG", 3) for d in (50, 100, 200, 400)]
        assert drops == sorted(drops)

    def test_warning_above_three_percent(self):
        result = run_voltage_drop({"current_a": 20, "distance_ft": 100, "voltage": 120,
                                   "wire_size": "12 AWG", "phases": 1})
        assert result["warnings"]

    def test_no_warning_when_within_limit(self):
        assert run_voltage_drop({})["warnings"] == []


class TestShortCircuit:
    def test_500kva_480v(self):
        assert short_circuit_current(500, 480, 5.75) == pytest.approx(10459, abs=1)

    def test_zero_impedance_is_infinite(self):
        assert short_circuit_current(500, 480, 0) == math.inf


class TestFeeder:
    def test_defaults(self):
        result = run_feeder({})
        assert result["demand_load_w"] == 40000
        assert result["current_a"] == 56.6
        assert result["breaker_size_a"] == 80
        assert result["wire_size"] == "4 AWG"
        assert result["voltage_drop_pct"] == 0.94
        assert result["warnings"] == []

    def test_long_run_warns(self):
        result = run_feeder({"distance_ft": 2000})
        assert result["voltage_drop_pct"] > 3.0
        assert result["warnings"]
