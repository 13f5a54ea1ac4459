"""Block schedules and their per-period value tables.

A :class:`BlockSchedule` couples weekday/weekend period matrices with a
:class:`PeriodValueTable` holding one array per purpose (turbine fraction,
price multiplier, ...).  ``values[label][k]`` is the scalar for period
``k + 1``.
"""

from __future__ import annotations

import logging
from typing import ClassVar, Dict, Iterator, Sequence

import numpy as np
from numpy.typing import ArrayLike, NDArray

from csp_engine.exceptions import RangeError, SizeError
from csp_engine.schedule.calendar import (
    SCHEDULE_SHAPE,
    as_schedule_matrix,
    expand_block_schedule,
)

logger = logging.getLogger(__name__)


# ======================================================================
# Period-value table
# ======================================================================

class PeriodValueTable:
    """Named value arrays indexed by ``period_id - 1``.

    Parameters
    ----------
    labels : Sequence[str]
        One label per array, in index order.  Arrays start empty and are
        filled by configuration through :meth:`set_values`.
    """

    def __init__(self, labels: Sequence[str]) -> None:
        self.labels: tuple[str, ...] = tuple(labels)
        self._arrays: Dict[str, NDArray[np.float64]] = {
            label: np.empty(0, dtype=np.float64) for label in self.labels
        }
        self._frozen = False

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def set_values(self, label: str, values: ArrayLike) -> None:
        """Replace the array stored under *label*."""
        self._check_not_frozen()
        if label not in self._arrays:
            raise KeyError(
                f"Unknown value array '{label}'. Available: {list(self.labels)}"
            )
        self._arrays[label] = np.array(values, dtype=np.float64).reshape(-1)

    def fill_uniform(self, n_periods: int = 1, value: float = 1.0) -> None:
        """Set every array to *n_periods* copies of *value*."""
        self._check_not_frozen()
        for label in self.labels:
            self._arrays[label] = np.full(n_periods, value, dtype=np.float64)

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def validate(self, *matrices: NDArray[np.int64]) -> tuple[int, int]:
        """Check every array covers the period ids used in *matrices*.

        Returns
        -------
        tuple[int, int]
            Smallest and largest period id found.

        Raises
        ------
        RangeError
            If any period id is below 1.
        SizeError
            If an array holds fewer entries than the largest period id.
            The error names the offending array.
        """
        id_min = min(int(m.min()) for m in matrices)
        id_max = max(int(m.max()) for m in matrices)

        if id_min < 1:
            raise RangeError(
                f"Smallest TOU period cannot be less than 1, found {id_min}"
            )

        for label in self.labels:
            size = len(self._arrays[label])
            if size < id_max:
                raise SizeError(label, id_max, size)

        return id_min, id_max

    def freeze(self) -> None:
        """Mark every array read-only."""
        for arr in self._arrays.values():
            arr.setflags(write=False)
        self._frozen = True

    @property
    def is_frozen(self) -> bool:
        return self._frozen

    def copy(self) -> "PeriodValueTable":
        """Writable copy of the labels and arrays."""
        other = PeriodValueTable(self.labels)
        for label, arr in self._arrays.items():
            other._arrays[label] = arr.copy()
        return other

    def _check_not_frozen(self) -> None:
        if self._frozen:
            raise RuntimeError(
                "Period values are frozen once the schedule is initialised; "
                "use BlockSchedule.set_values() to reconfigure."
            )

    # ------------------------------------------------------------------
    # Access
    # ------------------------------------------------------------------

    def value(self, label: str, period_id: int) -> float:
        """Scalar for *period_id* (1-based) in array *label*."""
        return float(self._arrays[label][period_id - 1])

    def __getitem__(self, label: str) -> NDArray[np.float64]:
        return self._arrays[label]

    def __iter__(self) -> Iterator[str]:
        return iter(self.labels)

    def __len__(self) -> int:
        return len(self.labels)


# ======================================================================
# Block schedule
# ======================================================================

class BlockSchedule:
    """Weekday/weekend 12 x 24 schedule plus its expanded hourly array.

    Subclasses set :attr:`LABELS` to name the value arrays they carry.
    Values are frozen by :meth:`init`; :meth:`set_values` swaps in a new
    table and drops the expanded array, which every call to :meth:`init`
    rebuilds wholesale.
    """

    LABELS: ClassVar[tuple[str, ...]] = ()

    def __init__(
        self,
        weekdays: ArrayLike | None = None,
        weekends: ArrayLike | None = None,
        values: Dict[str, ArrayLike] | None = None,
    ) -> None:
        self.weekdays: ArrayLike | None = weekdays
        self.weekends: ArrayLike | None = weekends
        self._table = PeriodValueTable(self.LABELS)
        for label, arr in (values or {}).items():
            self._table.set_values(label, arr)

        self._hourly: NDArray[np.int64] | None = None
        self._is_leapyear: bool | None = None

    # ------------------------------------------------------------------
    # Set-up
    # ------------------------------------------------------------------

    def init(self, is_leapyear: bool = False) -> None:
        """Validate the schedule and build the hour-of-year array.

        Raises
        ------
        ShapeError
            A matrix is not 12 x 24 (checked before anything is built).
        RangeError
            A period id is below 1.
        SizeError
            A value array does not cover the largest period id.
        """
        # Any failure leaves the schedule unusable.
        self.invalidate()

        wd = as_schedule_matrix(self.weekdays, "weekday")
        we = as_schedule_matrix(self.weekends, "weekend")
        self._table.validate(wd, we)

        hourly = expand_block_schedule(wd, we, is_leapyear)
        hourly.setflags(write=False)
        self._table.freeze()

        self._hourly = hourly
        self._is_leapyear = is_leapyear
        logger.debug(
            "Initialised %s with %d hourly entries",
            type(self).__name__,
            len(hourly),
            extra={"hours": len(hourly)},
        )

    def invalidate(self) -> None:
        """Drop the expanded array; lookups fail until the next init."""
        self._hourly = None
        self._is_leapyear = None

    def set_values(self, label: str, values: ArrayLike) -> None:
        """Replace the value array *label*.

        A frozen table is copied first and the expanded array dropped, so
        lookups fail cleanly until the next :meth:`init` re-validates.
        """
        table = self._table.copy() if self._table.is_frozen else self._table
        table.set_values(label, values)
        if table is not self._table:
            self.invalidate()
            self._table = table

    def setup_uniform(self) -> None:
        """Replace matrices and values with a single period at 1.0."""
        self.invalidate()
        self.weekdays = np.ones(SCHEDULE_SHAPE, dtype=np.int64)
        self.weekends = np.ones(SCHEDULE_SHAPE, dtype=np.int64)
        self._table = PeriodValueTable(self.LABELS)
        self._table.fill_uniform(n_periods=1, value=1.0)

    # ------------------------------------------------------------------
    # Access
    # ------------------------------------------------------------------

    @property
    def table(self) -> PeriodValueTable:
        return self._table

    @property
    def is_initialized(self) -> bool:
        return self._hourly is not None

    @property
    def hourly(self) -> NDArray[np.int64]:
        """Read-only hour-of-year period array.

        Raises
        ------
        RuntimeError
            If :meth:`init` has not completed successfully.
        """
        if self._hourly is None:
            raise RuntimeError(
                f"{type(self).__name__} is not initialised. Call init() first."
            )
        return self._hourly

    @property
    def n_hours(self) -> int:
        return len(self.hourly)

    def period_at(self, hour_index: int) -> int:
        """Period id active during 0-based hour *hour_index*."""
        return int(self.hourly[hour_index])

    def __repr__(self) -> str:
        state = f"{self.n_hours} h" if self.is_initialized else "uninitialised"
        return f"{type(self).__name__}(labels={list(self.LABELS)}, {state})"


class OperatingSchedule(BlockSchedule):
    """Operating-mode schedule; index 0 holds the turbine output fraction."""

    TURB_FRAC: ClassVar[int] = 0
    LABELS = ("Turbine Fraction",)


class PricingSchedule(BlockSchedule):
    """Pricing schedule; index 0 holds the price multiplier."""

    MULT_PRICE: ClassVar[int] = 0
    LABELS = ("Price Multiplier",)
