"""Tests for csp_engine.htf.properties — specific-heat lookups."""

from __future__ import annotations

import numpy as np
import pytest

from csp_engine.exceptions import ConfigError, ErrorKind, TableShapeError
from csp_engine.htf.properties import KELVIN_OFFSET, FluidId, HTFProperties


def _k(t_c: float) -> float:
    return t_c + KELVIN_OFFSET


class TestLibraryFluids:
    """Polynomial cp correlations."""

    @pytest.mark.parametrize("fluid", [f for f in FluidId if f is not FluidId.USER_DEFINED])
    def test_cp_positive_over_operating_range(self, fluid):
        props = HTFProperties(fluid)
        temps = np.array([_k(t) for t in (50.0, 150.0, 250.0)])
        assert np.all(props.cp(temps) > 0)

    def test_nitrate_salt_linear(self):
        props = HTFProperties(FluidId.NITRATE_SALT)
        assert props.cp(_k(0.0)) == pytest.approx(1.443)
        assert props.cp(_k(500.0)) == pytest.approx(1.443 + 0.086)

    def test_cp_ave_of_linear_cp_is_midpoint(self):
        props = HTFProperties(FluidId.NITRATE_SALT)
        assert props.cp_ave(_k(250.0), _k(300.0)) == pytest.approx(props.cp(_k(275.0)))

    def test_cp_ave_equal_temperatures(self):
        props = HTFProperties(FluidId.HITEC)
        assert props.cp_ave(_k(300.0), _k(300.0)) == pytest.approx(1.56)

    def test_cp_ave_symmetric(self):
        props = HTFProperties(FluidId.THERMINOL_VP1)
        a = props.cp_ave(_k(100.0), _k(350.0))
        b = props.cp_ave(_k(350.0), _k(100.0))
        assert a == pytest.approx(b)

    def test_unknown_code(self):
        with pytest.raises(ConfigError) as excinfo:
            HTFProperties(7)
        assert excinfo.value.field == "fluid"


class TestUserDefined:
    """User-supplied property tables."""

    def test_interpolates_cp(self, user_fluid_table):
        props = HTFProperties(FluidId.USER_DEFINED, user_fluid_table)
        assert props.cp(_k(350.0)) == pytest.approx(1.65)

    @pytest.mark.parametrize("shape", [(2, 7), (5, 6), (3, 8)])
    def test_wrong_shape(self, shape):
        with pytest.raises(TableShapeError) as excinfo:
            HTFProperties(FluidId.USER_DEFINED, np.ones(shape))
        assert (excinfo.value.n_rows, excinfo.value.n_cols) == shape
        assert excinfo.value.kind is ErrorKind.TABLE_SHAPE

    def test_missing_table(self):
        with pytest.raises(TableShapeError):
            HTFProperties(FluidId.USER_DEFINED)

    def test_non_increasing_temperatures(self, user_fluid_table):
        table = user_fluid_table[::-1]
        with pytest.raises(ConfigError, match="increasing"):
            HTFProperties(FluidId.USER_DEFINED, table)
