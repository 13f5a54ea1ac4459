"""
Expansion of 12 x 24 weekday/weekend block schedules into annual hourly arrays.

A block schedule assigns a period id to every (month, hour-of-day) pair,
separately for weekdays and weekends.  :func:`expand_block_schedule`
walks the Gregorian calendar day by day and produces the flat
hour-of-year array used for timestep lookups.
"""

from __future__ import annotations

import logging

import numpy as np
from numpy.typing import ArrayLike, NDArray

from csp_engine.exceptions import RangeError, ShapeError

logger = logging.getLogger(__name__)

# ======================================================================
# Constants
# ======================================================================

N_MONTHS: int = 12
N_HOURS_PER_DAY: int = 24
SCHEDULE_SHAPE: tuple[int, int] = (N_MONTHS, N_HOURS_PER_DAY)

HOURS_PER_YEAR: int = 8760

_DAYS_PER_MONTH = (31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)

# First-day cursor value.  The cursor counts down once per day; a day is a
# weekend while the cursor is <= 0.  This reproduces a Monday start with
# a five-weekday / two-weekend-day cycle.
_WEEKDAY_CURSOR_START: int = 5


# ======================================================================
# Helpers
# ======================================================================

def hours_in_year(is_leapyear: bool) -> int:
    """Number of hours in the simulated year (8760 or 8784)."""
    return HOURS_PER_YEAR + (N_HOURS_PER_DAY if is_leapyear else 0)


def days_per_month(is_leapyear: bool) -> tuple[int, ...]:
    """Gregorian day counts, with February extended on leap years."""
    if is_leapyear:
        return _DAYS_PER_MONTH[:1] + (29,) + _DAYS_PER_MONTH[2:]
    return _DAYS_PER_MONTH


def weekend_day_mask(is_leapyear: bool) -> NDArray[np.bool_]:
    """Return a per-day boolean array, ``True`` where the day is a weekend.

    The cursor rule is kept exactly as the dispatch calendar has always
    applied it: start at 5, flag the day as a weekend when the cursor is
    non-positive, decrement while non-negative, otherwise wrap to 5.  It
    has not been checked against an external reference calendar.
    """
    n_days = sum(days_per_month(is_leapyear))
    mask = np.zeros(n_days, dtype=bool)

    wday = _WEEKDAY_CURSOR_START
    for day in range(n_days):
        mask[day] = wday <= 0
        if wday >= 0:
            wday -= 1
        else:
            wday = _WEEKDAY_CURSOR_START

    return mask


def as_schedule_matrix(matrix: ArrayLike, name: str) -> NDArray[np.int64]:
    """Coerce *matrix* to a 12 x 24 integer array.

    Raises
    ------
    ShapeError
        If *matrix* is ragged or is not exactly 12 x 24.
    RangeError
        If any cell is not a finite whole number.
    """
    try:
        arr = np.asarray(matrix, dtype=np.float64)
    except (TypeError, ValueError):
        raise ShapeError(name, (len(matrix),) if hasattr(matrix, "__len__") else ()) from None

    if arr.shape != SCHEDULE_SHAPE:
        raise ShapeError(name, arr.shape)

    bad = ~np.isfinite(arr) | (arr != np.round(arr))
    if bad.any():
        month, hour = (int(i) for i in np.argwhere(bad)[0])
        raise RangeError(
            f"The {name} schedule must hold integer period ids; "
            f"found {float(arr[month, hour])} at month {month + 1}, hour {hour}"
        )

    return arr.astype(np.int64)


# ======================================================================
# Expansion
# ======================================================================

def expand_block_schedule(
    weekdays: ArrayLike,
    weekends: ArrayLike,
    is_leapyear: bool = False,
) -> NDArray[np.int64]:
    """Expand weekday/weekend block schedules into an hour-of-year array.

    Parameters
    ----------
    weekdays : array_like
        12 x 24 matrix of period ids (>= 1) applied on weekdays.
    weekends : array_like
        12 x 24 matrix of period ids applied on weekend days.
    is_leapyear : bool
        Adds February 29th, giving 8784 hours instead of 8760.

    Returns
    -------
    NDArray[np.int64]
        Shape ``(8760,)`` or ``(8784,)``; element ``i`` is the period id
        active during hour ``i`` of the year.

    Raises
    ------
    ShapeError
        If either matrix is not 12 x 24.  Both shapes are checked before
        the output is allocated.
    """
    wd = as_schedule_matrix(weekdays, "weekday")
    we = as_schedule_matrix(weekends, "weekend")

    n_hours = hours_in_year(is_leapyear)
    hourly = np.empty(n_hours, dtype=np.int64)
    weekend = weekend_day_mask(is_leapyear)

    n_cells = N_MONTHS * N_HOURS_PER_DAY
    i = 0
    day = 0
    for month, n_days in enumerate(days_per_month(is_leapyear)):
        for _ in range(n_days):
            source = we if weekend[day] else wd
            day += 1
            # Never read past the 288 schedule cells or the end of the year.
            n = min(N_HOURS_PER_DAY, n_hours - i, n_cells - month * N_HOURS_PER_DAY)
            hourly[i:i + n] = source[month, :n]
            i += n

    logger.debug("Expanded block schedule to %d hours (leap=%s)", i, is_leapyear)
    return hourly
