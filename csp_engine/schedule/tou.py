"""
Time-of-use dispatch schedule facade.

``TOUBlockSchedules`` bundles the operating-mode and pricing block
schedules.  After :meth:`TOUBlockSchedules.init`, a single
:meth:`~TOUBlockSchedules.lookup` returns the active periods and their
multipliers for an elapsed simulation time.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Mapping

from csp_engine.config import settings
from csp_engine.exceptions import RangeError, ScheduleError
from csp_engine.schedule.block_schedule import OperatingSchedule, PricingSchedule

logger = logging.getLogger(__name__)

SECONDS_PER_HOUR: float = 3600.0


@dataclass(frozen=True)
class DispatchTimestepResult:
    """Active periods and multipliers for one timestep.

    Parameters
    ----------
    csp_op_tou : int
        1-based operating-mode period id.
    pricing_tou : int
        1-based pricing period id.
    f_turbine : float
        Turbine output fraction for the operating period.
    price_mult : float
        Price multiplier for the pricing period.
    """

    csp_op_tou: int
    pricing_tou: int
    f_turbine: float
    price_mult: float


class TOUBlockSchedules:
    """Operating and pricing block schedules with hourly lookup.

    Parameters
    ----------
    operating : OperatingSchedule, optional
        Operating-mode schedule.  A blank one is created if omitted.
    pricing : PricingSchedule, optional
        Pricing schedule.  A blank one is created if omitted.
    is_leapyear : bool, optional
        Simulated year has 8784 hours.  Defaults to
        ``settings.default_is_leapyear``.

    Example
    -------
    >>> tou = TOUBlockSchedules()
    >>> tou.uniform_bypass()
    >>> tou.lookup(3600.0).price_mult
    1.0
    """

    def __init__(
        self,
        operating: OperatingSchedule | None = None,
        pricing: PricingSchedule | None = None,
        is_leapyear: bool | None = None,
    ) -> None:
        self.operating = operating if operating is not None else OperatingSchedule()
        self.pricing = pricing if pricing is not None else PricingSchedule()
        self.is_leapyear = (
            settings.default_is_leapyear if is_leapyear is None else is_leapyear
        )

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------

    @classmethod
    def from_config(cls, cfg: Mapping[str, Any]) -> "TOUBlockSchedules":
        """Build (but do not initialise) schedules from a configuration dict.

        Expected keys::

            {
                "is_leapyear": False,
                "operating": {"weekdays": [[...]], "weekends": [[...]],
                              "values": {"Turbine Fraction": [...]}},
                "pricing":   {"weekdays": [[...]], "weekends": [[...]],
                              "values": {"Price Multiplier": [...]}},
            }
        """
        op_cfg = cfg.get("operating", {})
        pr_cfg = cfg.get("pricing", {})
        return cls(
            operating=OperatingSchedule(
                weekdays=op_cfg.get("weekdays"),
                weekends=op_cfg.get("weekends"),
                values=op_cfg.get("values"),
            ),
            pricing=PricingSchedule(
                weekdays=pr_cfg.get("weekdays"),
                weekends=pr_cfg.get("weekends"),
                values=pr_cfg.get("values"),
            ),
            is_leapyear=cfg.get("is_leapyear"),
        )

    # ------------------------------------------------------------------
    # Set-up
    # ------------------------------------------------------------------

    def init(self) -> None:
        """Validate and expand both schedules.

        Raises
        ------
        ShapeError, RangeError, SizeError
            Re-raised from the failing schedule with ``.schedule`` set to
            ``"operating"`` or ``"pricing"``.
        """
        for name, schedule in (("operating", self.operating), ("pricing", self.pricing)):
            try:
                schedule.init(self.is_leapyear)
            except ScheduleError as exc:
                exc.schedule = name
                self.operating.invalidate()
                self.pricing.invalidate()
                logger.error("TOU block schedule initialization failed: %s", exc)
                raise

        logger.info(
            "TOU block schedules initialised (%d hours, leap=%s)",
            self.total_hours,
            self.is_leapyear,
            extra={"hours": self.total_hours},
        )

    def uniform_bypass(self) -> None:
        """Replace both schedules with one all-day period at multiplier 1.0.

        Used when dispatch is not time-dependent; the result behaves like
        any other initialised schedule.
        """
        self.operating.setup_uniform()
        self.pricing.setup_uniform()
        self.init()

    # ------------------------------------------------------------------
    # Timestep lookup
    # ------------------------------------------------------------------

    @property
    def total_hours(self) -> int:
        return self.operating.n_hours

    @staticmethod
    def hour_index(time_s: float) -> int:
        """0-based hour index for an elapsed time at the end of a step.

        A small epsilon keeps times that land exactly on an hour boundary
        in the hour that just ended.
        """
        return int(math.ceil(time_s / SECONDS_PER_HOUR - settings.lookup_epsilon_hours) - 1)

    def lookup(self, time_s: float) -> DispatchTimestepResult:
        """Return active periods and multipliers at *time_s* seconds.

        Raises
        ------
        RangeError
            If the resulting hour lies outside the simulated year.
        """
        i_hour = self.hour_index(time_s)
        n_hours = self.total_hours

        if i_hour < 0 or i_hour > n_hours - 1:
            raise RangeError(
                f"The hour input to the TOU schedule must be from 1 to {n_hours}. "
                f"The input hour was {i_hour + 1}."
            )

        csp_op_tou = self.operating.period_at(i_hour)
        pricing_tou = self.pricing.period_at(i_hour)

        return DispatchTimestepResult(
            csp_op_tou=csp_op_tou,
            pricing_tou=pricing_tou,
            f_turbine=self.operating.table.value(
                OperatingSchedule.LABELS[OperatingSchedule.TURB_FRAC], csp_op_tou
            ),
            price_mult=self.pricing.table.value(
                PricingSchedule.LABELS[PricingSchedule.MULT_PRICE], pricing_tou
            ),
        )

    call = lookup

    def __repr__(self) -> str:
        return (
            f"TOUBlockSchedules(operating={self.operating!r}, "
            f"pricing={self.pricing!r}, is_leapyear={self.is_leapyear})"
        )
