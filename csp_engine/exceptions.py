"""Error taxonomy for schedule, reporting, and component set-up failures.

Every error raised here reflects a configuration defect rather than a
transient condition, so nothing is retried.  Each class carries an
:class:`ErrorKind` in ``.kind`` so callers can branch on the kind of
failure without matching on class names or message text.
"""

from __future__ import annotations

import enum
from typing import Sequence


class ErrorKind(enum.Enum):
    """Distinguished failure categories."""

    SHAPE = "shape"
    RANGE = "range"
    SIZE = "size"
    TABLE_SHAPE = "table_shape"
    CONFIG = "config"
    TIME_ORDER = "time_order"


class CspEngineError(Exception):
    """Base exception for all csp_engine errors."""

    kind: ErrorKind

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ScheduleError(CspEngineError, ValueError):
    """Base for block-schedule failures.

    ``schedule`` names the schedule (``"operating"`` or ``"pricing"``)
    once the dispatch facade has tagged the error.
    """

    def __init__(self, message: str, *, schedule: str | None = None) -> None:
        self.schedule = schedule
        super().__init__(message)

    def __str__(self) -> str:
        if self.schedule:
            return f"The {self.schedule} schedule: {self.message}"
        return self.message


class ShapeError(ScheduleError):
    """Raised when a block-schedule matrix is not exactly 12 x 24."""

    kind = ErrorKind.SHAPE

    def __init__(
        self,
        matrix: str,
        actual: Sequence[int],
        expected: Sequence[int] = (12, 24),
        *,
        schedule: str | None = None,
    ) -> None:
        self.matrix = matrix
        self.actual = tuple(actual)
        self.expected = tuple(expected)
        super().__init__(
            f"TOU schedules require {expected[0]} rows and {expected[1]} columns. "
            f"The loaded {matrix} schedule has shape {self.actual}.",
            schedule=schedule,
        )


class RangeError(ScheduleError):
    """Raised when a period id or an hour index falls outside its range."""

    kind = ErrorKind.RANGE


class SizeError(ScheduleError):
    """Raised when a value array is shorter than the largest period id."""

    kind = ErrorKind.SIZE

    def __init__(
        self, label: str, max_period: int, size: int, *, schedule: str | None = None
    ) -> None:
        self.label = label
        self.max_period = max_period
        self.size = size
        super().__init__(
            f"TOU schedule contains TOU period = {max_period}, while the "
            f"{label} array contains {size} elements",
            schedule=schedule,
        )


class ConfigError(CspEngineError, ValueError):
    """Raised when a required design parameter is missing or invalid."""

    kind = ErrorKind.CONFIG

    def __init__(self, field: str, reason: str = "was not set prior to init()") -> None:
        self.field = field
        super().__init__(f"Parameter '{field}' {reason}")


class TableShapeError(CspEngineError, ValueError):
    """Raised when a user-defined fluid property table has the wrong shape."""

    kind = ErrorKind.TABLE_SHAPE

    def __init__(self, n_rows: int, n_cols: int) -> None:
        self.n_rows = n_rows
        self.n_cols = n_cols
        super().__init__(
            "The user defined HTF table must contain at least 3 rows and "
            f"exactly 7 columns. The current table contains {n_rows} row(s) "
            f"and {n_cols} column(s)"
        )


class TimeOrderError(CspEngineError, ValueError):
    """Raised when reporting intervals are closed out of time order."""

    kind = ErrorKind.TIME_ORDER

    def __init__(self, start: float, end: float, previous_end: float | None = None) -> None:
        self.start = start
        self.end = end
        self.previous_end = previous_end
        if end < start:
            msg = f"Interval end {end} precedes its start {start}"
        else:
            msg = f"Interval start {start} precedes the previous interval end {previous_end}"
        super().__init__(msg)
