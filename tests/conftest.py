"""Shared test fixtures for csp_engine schedule, reporting and component tests."""

from __future__ import annotations

import numpy as np
import pytest
from numpy.typing import NDArray


# ======================================================================
# Block schedule fixtures
# ======================================================================

@pytest.fixture
def weekday_ones() -> NDArray[np.int64]:
    """12 x 24 weekday matrix, period 1 everywhere."""
    return np.ones((12, 24), dtype=np.int64)


@pytest.fixture
def weekend_twos() -> NDArray[np.int64]:
    """12 x 24 weekend matrix, period 2 everywhere."""
    return np.full((12, 24), 2, dtype=np.int64)


@pytest.fixture
def random_schedule() -> tuple[NDArray[np.int64], NDArray[np.int64]]:
    """Deterministic weekday/weekend matrices with period ids 1 -- 9."""
    rng = np.random.default_rng(42)
    weekdays = rng.integers(1, 10, size=(12, 24))
    weekends = rng.integers(1, 10, size=(12, 24))
    return weekdays, weekends


@pytest.fixture
def scenario_a_config(weekday_ones, weekend_twos) -> dict:
    """Weekdays in period 1, weekends in period 2, non-leap year."""
    return {
        "is_leapyear": False,
        "operating": {
            "weekdays": weekday_ones,
            "weekends": weekend_twos,
            "values": {"Turbine Fraction": [0.8, 1.05]},
        },
        "pricing": {
            "weekdays": weekday_ones,
            "weekends": weekend_twos,
            "values": {"Price Multiplier": [1.2, 0.7]},
        },
    }


# ======================================================================
# Component fixtures
# ======================================================================

@pytest.fixture
def heat_sink_config() -> dict:
    """10 MWt nitrate-salt heat sink, 300 -> 250 C."""
    return {
        "hot_temp_design": 300.0,
        "cold_temp_design": 250.0,
        "thermal_duty_design": 10.0,
        "pump_power_coefficient": 0.5,
    }


@pytest.fixture
def user_fluid_table() -> NDArray[np.float64]:
    """Seven-column property table with linear cp from 1.5 to 1.7 kJ/kg-K."""
    temps = np.array([200.0, 300.0, 400.0])
    cp = np.array([1.5, 1.6, 1.7])
    rho = np.full(3, 1800.0)
    mu = np.full(3, 2.0e-3)
    nu = mu / rho
    k = np.full(3, 0.5)
    h = cp * temps
    return np.column_stack([temps, cp, rho, mu, nu, k, h])
