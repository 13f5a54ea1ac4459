"""
Per-timestep consolidation of component outputs.

A component may be evaluated several times within one solver timestep.
Each evaluation records its instantaneous outputs with :meth:`record`;
when the timestep is accepted, :meth:`close_interval` reduces the samples
of every quantity to a single committed value.  Committed series are
append-only.

Committed timestep values can be further mapped onto coarser reporting
intervals with :meth:`report_interval`.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import Dict, Hashable, Iterable, List, MutableSequence

import numpy as np
from numpy.typing import NDArray

from csp_engine.config import settings
from csp_engine.exceptions import TimeOrderError

logger = logging.getLogger(__name__)


class AggregationKind(enum.Enum):
    """How samples within one interval are reduced."""

    TS_WEIGHTED_AVE = "weighted_ave"
    TS_LAST = "last"
    TS_MAX = "max"


@dataclass(frozen=True)
class OutputInfo:
    """Registration entry for one reported quantity."""

    id: Hashable
    kind: AggregationKind = AggregationKind.TS_WEIGHTED_AVE


@dataclass
class ReportedQuantity:
    """Accumulator and committed series for one quantity.

    The accumulator fields are only meaningful while an interval is open.
    """

    id: Hashable
    kind: AggregationKind = AggregationKind.TS_WEIGHTED_AVE

    # --- Open-interval accumulator ---------------------------------------
    weighted_sum: float = field(default=0.0, repr=False)
    total_duration: float = field(default=0.0, repr=False)
    n_samples: int = field(default=0, repr=False)
    last_sample: float = field(default=0.0, repr=False)
    max_sample: float = field(default=-np.inf, repr=False)

    # --- Committed data --------------------------------------------------
    values: List[float] = field(default_factory=list, repr=False)
    reporting: List[float] = field(default_factory=list, repr=False)

    def add(self, value: float, duration: float) -> None:
        self.weighted_sum += value * duration
        self.total_duration += duration
        self.n_samples += 1
        self.last_sample = value
        if value > self.max_sample:
            self.max_sample = value

    def reduce(self) -> float | None:
        """Reduced value of the open interval, ``None`` when empty."""
        if self.n_samples == 0:
            return None
        if self.kind is AggregationKind.TS_LAST:
            return self.last_sample
        if self.kind is AggregationKind.TS_MAX:
            return self.max_sample
        if self.total_duration <= 0.0:
            return self.last_sample
        return self.weighted_sum / self.total_duration

    def reset(self) -> None:
        self.weighted_sum = 0.0
        self.total_duration = 0.0
        self.n_samples = 0
        self.last_sample = 0.0
        self.max_sample = -np.inf


class ReportedOutputs:
    """Time-weighted aggregator for a component's reported quantities.

    Parameters
    ----------
    output_info : Iterable[OutputInfo]
        Quantities to track, in export order.

    Notes
    -----
    One instance belongs to one component and is written from that
    component's thread only.
    """

    def __init__(self, output_info: Iterable[OutputInfo]) -> None:
        self._quantities: Dict[Hashable, ReportedQuantity] = {}
        for info in output_info:
            if info.id in self._quantities:
                raise ValueError(f"Duplicate reported output id {info.id!r}")
            self._quantities[info.id] = ReportedQuantity(id=info.id, kind=info.kind)
        self._order: List[Hashable] = list(self._quantities)

        # (start, end) of every committed interval.
        self._intervals: List[tuple[float, float]] = []

    # ------------------------------------------------------------------
    # Recording
    # ------------------------------------------------------------------

    def record(self, quantity_id: Hashable, value: float, duration: float) -> None:
        """Add a sample weighted by *duration* to the open interval.

        Raises
        ------
        KeyError
            If *quantity_id* was not registered.
        ValueError
            If *duration* is negative.
        """
        if duration < 0:
            raise ValueError(f"duration must be >= 0, got {duration}")
        try:
            quantity = self._quantities[quantity_id]
        except KeyError:
            raise KeyError(f"Unknown reported output id {quantity_id!r}") from None
        quantity.add(float(value), float(duration))

    def close_interval(self, start: float, end: float) -> None:
        """Commit one value per quantity for the interval ``[start, end]``.

        Quantities without samples repeat their last committed value
        (0.0 before the first commit) so the series has no gaps.

        Raises
        ------
        TimeOrderError
            If ``end < start`` or *start* precedes the previous interval's
            end.
        """
        previous_end = self._intervals[-1][1] if self._intervals else None
        if end < start or (previous_end is not None and start < previous_end):
            raise TimeOrderError(start, end, previous_end)

        for quantity in self._quantities.values():
            value = quantity.reduce()
            if value is None:
                value = self._fill_value(quantity)
                logger.debug(
                    "No samples for %r in [%s, %s]; filled with %s",
                    quantity.id, start, end, value,
                )
            quantity.values.append(float(value))
            quantity.reset()

        self._intervals.append((float(start), float(end)))

    @staticmethod
    def _fill_value(quantity: ReportedQuantity) -> float:
        if settings.fill_missing_with_last and quantity.values:
            return quantity.values[-1]
        return 0.0

    # ------------------------------------------------------------------
    # Reporting intervals
    # ------------------------------------------------------------------

    def report_interval(self, report_start: float, report_end: float) -> None:
        """Average committed timestep values onto ``[report_start, report_end]``.

        Each committed interval contributes in proportion to its overlap
        with the reporting interval.  Reporting intervals with no overlap
        repeat the last reporting value (0.0 if none).
        """
        if report_end < report_start:
            raise TimeOrderError(report_start, report_end)

        bounds = np.array(self._intervals, dtype=np.float64).reshape(-1, 2)
        overlap = np.clip(
            np.minimum(bounds[:, 1], report_end) - np.maximum(bounds[:, 0], report_start),
            0.0,
            None,
        )
        total = float(overlap.sum())

        for quantity in self._quantities.values():
            if total > 0.0:
                value = float(np.dot(overlap, quantity.values) / total)
            elif quantity.reporting:
                value = quantity.reporting[-1]
            else:
                value = 0.0
            quantity.reporting.append(value)

    # ------------------------------------------------------------------
    # Access
    # ------------------------------------------------------------------

    @property
    def n_intervals(self) -> int:
        return len(self._intervals)

    @property
    def ids(self) -> List[Hashable]:
        return list(self._order)

    def series(self, quantity_id: Hashable) -> NDArray[np.float64]:
        """Read-only copy of the committed timestep series."""
        arr = np.array(self._quantities[quantity_id].values, dtype=np.float64)
        arr.setflags(write=False)
        return arr

    def reporting_series(self, quantity_id: Hashable) -> NDArray[np.float64]:
        """Read-only copy of the reporting-interval series."""
        arr = np.array(self._quantities[quantity_id].reporting, dtype=np.float64)
        arr.setflags(write=False)
        return arr

    def export(
        self,
        index: int,
        destination: MutableSequence[float],
        capacity: int,
    ) -> int:
        """Copy the committed series of the *index*-th quantity.

        Writes at most ``min(capacity, len(destination))`` values.  An
        out-of-range *index* writes nothing.

        Returns
        -------
        int
            Number of values written.
        """
        if index < 0 or index >= len(self._order):
            return 0

        values = self._quantities[self._order[index]].values
        n = max(0, min(len(values), int(capacity), len(destination)))
        destination[:n] = values[:n]
        return n

    def __repr__(self) -> str:
        return f"ReportedOutputs(ids={self._order!r}, intervals={self.n_intervals})"
