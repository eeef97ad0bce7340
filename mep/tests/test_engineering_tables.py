"""Tests for size ladders, constant tables and numeric helpers."""

import math

import pytest

from mep.engineering.tables import (
    ConstantTable,
    StandardSizeTable,
    ceil_int,
    ceil_to_multiple,
    clamp,
    round_half_up,
    round_int,
    safe_divide,
    safe_pow,
    safe_sqrt,
)


class TestNumericHelpers:
    def test_divide_by_zero_is_infinite(self):
        assert safe_divide(1, 0) == math.inf
        assert safe_divide(-1, 0) == -math.inf

    def test_zero_over_zero_is_nan(self):
        assert math.isnan(safe_divide(0, 0))

    def test_divide_normal(self):
        assert safe_divide(9, 3) == 3

    def test_sqrt_negative_is_nan(self):
        assert math.isnan(safe_sqrt(-4))
        assert safe_sqrt(16) == 4

    def test_round_half_up(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(-2.5) == -2
        assert round_half_up(70.755, 1) == 70.8
        assert round_half_up(0.125, 2) == 0.13

    def test_round_int_type(self):
        assert round_int(28759.5) == 28760
        assert isinstance(round_int(3.2), int)

    def test_non_finite_passes_through(self):
        assert round_half_up(math.inf, 2) == math.inf
        assert round_int(-math.inf) == -math.inf
        assert math.isnan(round_int(math.nan))
        assert ceil_int(math.inf) == math.inf
        assert math.isnan(ceil_to_multiple(math.nan, 5))

    def test_scaled_overflow_passes_through(self):
        assert round_half_up(1e308, 1) == 1e308
        assert ceil_to_multiple(1e308, 1e-10) == 1e308

    def test_pow(self):
        assert safe_pow(2, 3) == 8
        assert safe_pow(1e200, 1.85) == math.inf
        assert safe_pow(-1e200, 3) == -math.inf
        assert math.isnan(safe_pow(-1, 0.5))
        assert safe_pow(1e-80, 4.87) == 0

    def test_ceil_to_multiple(self):
        assert ceil_to_multiple(4.0, 0.5) == 4.0
        assert ceil_to_multiple(4.01, 0.5) == 4.5
        assert ceil_to_multiple(1837.5, 100) == 1900

    def test_ceil_int(self):
        assert ceil_int(153.8) == 154
        assert ceil_int(154) == 154

    def test_clamp(self):
        assert clamp(5, 0, 10) == 5
        assert clamp(-1, 0, 10) == 0
        assert clamp(11, 0, 10) == 10


class TestStandardSizeTable:
    @pytest.fixture
    def ladder(self):
        return StandardSizeTable.from_values("test", [15, 20, 30])

    def test_select_next_size_up(self, ladder):
        assert ladder.select(17.5) == 20

    def test_select_exact_match(self, ladder):
        assert ladder.select(20) == 20

    def test_select_exclusive(self, ladder):
        assert ladder.select(20, inclusive=False) == 30

    def test_select_below_smallest(self, ladder):
        assert ladder.select(0) == 15
        assert ladder.select(-10) == 15

    def test_exhausted_returns_largest(self, ladder):
        assert ladder.select(45) == 30
        assert ladder.select(math.inf) == 30

    def test_nan_returns_largest(self, ladder):
        assert ladder.select(math.nan) == 30

    def test_select_is_monotonic(self, ladder):
        picks = [ladder.select(x) for x in range(0, 40)]
        assert picks == sorted(picks)

    def test_closest(self):
        ducts = StandardSizeTable.from_values("duct", [6, 8, 10, 12, 14])
        assert ducts.closest(11.2) == 12
        assert ducts.closest(10.9) == 10

    def test_closest_tie_keeps_smaller(self):
        ducts = StandardSizeTable.from_values("duct", [10, 12])
        assert ducts.closest(11) == 10

    def test_next_larger(self, ladder):
        assert ladder.next_larger(15) == 20
        assert ladder.next_larger(30) == 30

    def test_labels_differ_from_thresholds(self):
        drains = StandardSizeTable("drain", [(3, 1.5), (6, 2), (12, 2.5)])
        assert drains.select(5) == 2
        assert drains.labels == [1.5, 2, 2.5]
        assert drains.largest == 2.5

    def test_rejects_unsorted(self):
        with pytest.raises(ValueError, match="strictly increasing"):
            StandardSizeTable.from_values("bad", [10, 5])

    def test_rejects_duplicates(self):
        with pytest.raises(ValueError):
            StandardSizeTable.from_values("bad", [10, 10])

    def test_rejects_empty(self):
        with pytest.raises(ValueError, match="empty"):
            StandardSizeTable("empty", [])


class TestConstantTable:
    @pytest.fixture
    def table(self):
        return ConstantTable(
            "space type",
            {"office": 5, "classroom": 10},
            default_key="office",
            normalize=lambda key: str(key).strip().lower(),
        )

    def test_lookup_hit(self, table):
        assert table.lookup("classroom") == 10

    def test_lookup_normalized(self, table):
        assert table.lookup("  Classroom ") == 10

    def test_lookup_miss_uses_default(self, table):
        assert table.lookup("spaceship") == 5

    def test_contains(self, table):
        assert table.contains("OFFICE")
        assert not table.contains("spaceship")

    def test_mapping_access_still_strict(self, table):
        with pytest.raises(KeyError):
            table["spaceship"]

    def test_read_only(self, table):
        with pytest.raises(TypeError):
            table._entries["gym"] = 20

    def test_default_value_without_key(self):
        table = ConstantTable("resistance", {"12": 1.93}, default=0.1)
        assert table.lookup("999") == 0.1
        assert table.default_key is None

    def test_bad_default_key(self):
        with pytest.raises(ValueError, match="Default key"):
            ConstantTable("bad", {"a": 1}, default_key="b")

    def test_normalize_failure_falls_back(self):
        table = ConstantTable("rating", {75: 1.0}, default=1.0, normalize=int)
        assert table.lookup("hot") == 1.0
        assert not table.contains("hot")

    def test_mapping_protocol(self, table):
        assert len(table) == 2
        assert set(table) == {"office", "classroom"}
