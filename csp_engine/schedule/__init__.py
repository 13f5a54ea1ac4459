"""TOU block schedules -- calendar expansion, period value tables, dispatch lookup."""

from .calendar import expand_block_schedule, hours_in_year, weekend_day_mask
from .block_schedule import (
    BlockSchedule,
    OperatingSchedule,
    PeriodValueTable,
    PricingSchedule,
)
from .tou import DispatchTimestepResult, TOUBlockSchedules

__all__ = [
    "expand_block_schedule",
    "hours_in_year",
    "weekend_day_mask",
    "BlockSchedule",
    "OperatingSchedule",
    "PeriodValueTable",
    "PricingSchedule",
    "DispatchTimestepResult",
    "TOUBlockSchedules",
]
