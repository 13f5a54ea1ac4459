"""Power-cycle component contract and reference models."""

from .base import (
    ComponentState,
    ControlInputs,
    HTFState,
    OperatingMode,
    PowerCycle,
    PowerCycleSolverOutputs,
    SimInfo,
    SolvedParams,
)
from .heat_sink import HeatSink, HeatSinkOutput, HeatSinkParams

__all__ = [
    "ComponentState",
    "ControlInputs",
    "HTFState",
    "OperatingMode",
    "PowerCycle",
    "PowerCycleSolverOutputs",
    "SimInfo",
    "SolvedParams",
    "HeatSink",
    "HeatSinkOutput",
    "HeatSinkParams",
]
