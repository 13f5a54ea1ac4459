"""Tests for csp_engine.schedule.block_schedule — period value tables."""

from __future__ import annotations

import numpy as np
import pytest

from csp_engine.exceptions import ErrorKind, RangeError, ShapeError, SizeError
from csp_engine.schedule.block_schedule import (
    OperatingSchedule,
    PeriodValueTable,
    PricingSchedule,
)


# ======================================================================
# PeriodValueTable
# ======================================================================


class TestPeriodValueTable:
    """Tests for PeriodValueTable validation and access."""

    def test_validate_returns_id_range(self, weekday_ones, weekend_twos):
        table = PeriodValueTable(["a", "b"])
        table.set_values("a", [1.0, 2.0])
        table.set_values("b", [3.0, 4.0, 5.0])
        assert table.validate(weekday_ones, weekend_twos) == (1, 2)

    def test_short_array_names_label(self, weekday_ones, weekend_twos):
        """SizeError names the array that does not cover the max id."""
        table = PeriodValueTable(["a", "b"])
        table.set_values("a", [1.0, 2.0])
        table.set_values("b", [1.0])
        with pytest.raises(SizeError) as excinfo:
            table.validate(weekday_ones, weekend_twos)
        assert excinfo.value.label == "b"
        assert excinfo.value.max_period == 2
        assert excinfo.value.size == 1
        assert "b array contains 1 elements" in str(excinfo.value)

    def test_period_below_one_raises(self, weekday_ones):
        table = PeriodValueTable(["a"])
        table.set_values("a", [1.0])
        bad = weekday_ones.copy()
        bad[3, 7] = 0
        with pytest.raises(RangeError, match="cannot be less than 1") as excinfo:
            table.validate(bad, weekday_ones)
        assert excinfo.value.kind is ErrorKind.RANGE

    def test_unknown_label_raises(self):
        table = PeriodValueTable(["a"])
        with pytest.raises(KeyError, match="Unknown value array"):
            table.set_values("z", [1.0])

    def test_value_is_one_based(self):
        table = PeriodValueTable(["a"])
        table.set_values("a", [0.5, 0.75])
        assert table.value("a", 1) == 0.5
        assert table.value("a", 2) == 0.75

    def test_freeze_makes_arrays_read_only(self):
        table = PeriodValueTable(["a"])
        table.set_values("a", [1.0])
        table.freeze()
        with pytest.raises(ValueError):
            table["a"][0] = 2.0

    def test_frozen_table_rejects_new_values(self):
        table = PeriodValueTable(["a"])
        table.set_values("a", [1.0, 2.0])
        table.freeze()
        with pytest.raises(RuntimeError, match="frozen"):
            table.set_values("a", [1.0])
        with pytest.raises(RuntimeError, match="frozen"):
            table.fill_uniform()
        assert len(table["a"]) == 2

    def test_copy_is_writable(self):
        table = PeriodValueTable(["a"])
        table.set_values("a", [1.0])
        table.freeze()
        other = table.copy()
        assert not other.is_frozen
        other.set_values("a", [3.0, 4.0])
        assert table.value("a", 1) == 1.0


# ======================================================================
# BlockSchedule
# ======================================================================


class TestBlockSchedule:
    """Tests for BlockSchedule.init()."""

    def test_init_builds_read_only_hourly(self, weekday_ones, weekend_twos):
        sched = OperatingSchedule(
            weekday_ones, weekend_twos, {"Turbine Fraction": [1.0, 0.5]}
        )
        sched.init(is_leapyear=False)
        assert sched.n_hours == 8760
        assert not sched.hourly.flags.writeable

    def test_repeated_init_is_identical(self, random_schedule):
        weekdays, weekends = random_schedule
        sched = PricingSchedule(weekdays, weekends, {"Price Multiplier": np.ones(9)})
        sched.init(False)
        first = sched.hourly.copy()
        sched.init(False)
        np.testing.assert_array_equal(first, sched.hourly)

    def test_leap_flag_change_rebuilds(self, weekday_ones, weekend_twos):
        sched = OperatingSchedule(
            weekday_ones, weekend_twos, {"Turbine Fraction": [1.0, 1.0]}
        )
        sched.init(True)
        assert sched.n_hours == 8784
        sched.init(False)
        assert sched.n_hours == 8760

    def test_shape_error_before_allocation(self, weekend_twos):
        """An 11-row matrix fails and leaves no usable array."""
        sched = OperatingSchedule(
            np.ones((11, 24)), weekend_twos, {"Turbine Fraction": [1.0, 1.0]}
        )
        with pytest.raises(ShapeError):
            sched.init()
        assert not sched.is_initialized
        with pytest.raises(RuntimeError, match="not initialised"):
            _ = sched.hourly

    def test_failed_reinit_discards_previous_array(self, weekday_ones, weekend_twos):
        sched = OperatingSchedule(
            weekday_ones, weekend_twos, {"Turbine Fraction": [1.0, 1.0]}
        )
        sched.init()
        sched.set_values("Turbine Fraction", [1.0])
        with pytest.raises(SizeError):
            sched.init()
        assert not sched.is_initialized

    def test_missing_matrix_is_shape_error(self):
        sched = PricingSchedule(values={"Price Multiplier": [1.0]})
        with pytest.raises(ShapeError):
            sched.init()

    def test_setup_uniform(self):
        sched = PricingSchedule()
        sched.setup_uniform()
        sched.init()
        assert np.all(sched.hourly == 1)
        assert sched.table.value("Price Multiplier", 1) == 1.0

    def test_table_values_frozen_after_init(self, weekday_ones, weekend_twos):
        """Mutating the table in place cannot shrink an initialised schedule."""
        sched = OperatingSchedule(
            weekday_ones, weekend_twos, {"Turbine Fraction": [0.8, 1.05]}
        )
        sched.init()
        with pytest.raises(RuntimeError, match="frozen"):
            sched.table.set_values("Turbine Fraction", [1.0])
        assert sched.is_initialized
        assert sched.table.value("Turbine Fraction", sched.period_at(5 * 24)) == 1.05

    def test_set_values_after_init_requires_reinit(self, weekday_ones, weekend_twos):
        sched = OperatingSchedule(
            weekday_ones, weekend_twos, {"Turbine Fraction": [0.8, 1.05]}
        )
        sched.init()
        sched.set_values("Turbine Fraction", [0.5, 0.6])
        assert not sched.is_initialized
        with pytest.raises(RuntimeError, match="not initialised"):
            sched.period_at(0)
        sched.init()
        assert sched.table.value("Turbine Fraction", sched.period_at(0)) == 0.5

    def test_set_values_unknown_label_keeps_schedule(self, weekday_ones, weekend_twos):
        sched = OperatingSchedule(
            weekday_ones, weekend_twos, {"Turbine Fraction": [0.8, 1.05]}
        )
        sched.init()
        with pytest.raises(KeyError):
            sched.set_values("Price Multiplier", [1.0])
        assert sched.is_initialized
