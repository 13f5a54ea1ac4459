"""
Standard lifecycle shared by every power-cycle component model.

The outer solver holds a collection of :class:`PowerCycle` objects and
drives each one through::

    init()                      # once, at set-up
    call(...)  [0..n times]     # per timestep, while iterating
    converged([sim_info])       # once per accepted timestep

Design-query accessors let the solver size dispatch decisions without
knowing which physical model sits behind the interface.
"""

from __future__ import annotations

import enum
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Mapping, MutableSequence


class ComponentState(enum.Enum):
    """Lifecycle states of a component model."""

    UNCONFIGURED = "unconfigured"
    INITIALIZED = "initialized"
    EVALUATING = "evaluating"
    CONVERGED = "converged"


class OperatingMode(enum.IntEnum):
    """Power-cycle operating modes reported to the dispatch layer."""

    STARTUP = 0
    ON = 1
    STANDBY = 2
    OFF = 3
    STARTUP_CONTROLLED = 4


# ======================================================================
# Data exchanged with the solver
# ======================================================================

@dataclass(frozen=True)
class SolvedParams:
    """Design-point results published by :meth:`PowerCycle.init`.

    Parameters
    ----------
    w_dot_des : float
        Design electric output (MWe).
    eta_des : float
        Design thermal-to-electric efficiency (-).
    q_dot_des : float
        Design thermal input (MWt).
    q_startup : float
        Startup energy (MWt-hr).
    max_frac : float
        Maximum turbine over-design fraction (-).
    cutoff_frac : float
        Minimum turbine fraction (-).
    sb_frac : float
        Standby fraction (-).
    t_htf_hot_ref : float
        Design HTF inlet temperature (C).
    m_dot_design : float
        Design HTF mass flow (kg/hr).
    m_dot_min, m_dot_max : float
        Mass-flow bounds (kg/hr).
    """

    w_dot_des: float
    eta_des: float
    q_dot_des: float
    q_startup: float
    max_frac: float
    cutoff_frac: float
    sb_frac: float
    t_htf_hot_ref: float
    m_dot_design: float
    m_dot_min: float
    m_dot_max: float


@dataclass(frozen=True)
class HTFState:
    """Thermodynamic state of the HTF entering the component."""

    temp: float  # [C]


@dataclass(frozen=True)
class ControlInputs:
    """Solver control inputs for one call."""

    m_dot: float  # [kg/hr]
    standby_control: OperatingMode = OperatingMode.ON


@dataclass(frozen=True)
class SimInfo:
    """Timestep bookkeeping supplied by the solver.

    ``time`` is the elapsed time at the *end* of the step.
    """

    time: float  # [s]
    step: float  # [s]
    ncall: int = 0


@dataclass(frozen=True)
class PowerCycleSolverOutputs:
    """Values the solver needs back from one call."""

    p_cycle: float           # [MWe]
    t_htf_cold: float        # [C]
    m_dot_htf: float         # [kg/hr]
    w_cool_par: float        # [MWe]
    time_required_su: float  # [s]
    q_dot_htf: float         # [MWt]
    w_dot_htf_pump: float    # [MWe]
    was_method_successful: bool


# ======================================================================
# Interface
# ======================================================================

class PowerCycle(ABC):
    """Interface every power-cycle model must implement."""

    @abstractmethod
    def init(self) -> SolvedParams:
        """Validate parameters and solve the design point."""

    @abstractmethod
    def call(
        self,
        htf_state_in: HTFState,
        inputs: ControlInputs,
        sim_info: SimInfo,
        weather: Mapping[str, Any] | None = None,
    ) -> PowerCycleSolverOutputs:
        """Evaluate the model for the current timestep."""

    @abstractmethod
    def converged(self, sim_info: SimInfo | None = None) -> None:
        """Commit the accepted timestep.

        *sim_info* carries the timestep bounds when no call was made.
        """

    @abstractmethod
    def write_output_intervals(self, report_start: float, report_end: float) -> None:
        """Map committed timestep outputs onto a reporting interval."""

    @abstractmethod
    def assign(self, index: int, destination: MutableSequence[float], capacity: int) -> int:
        """Copy one reported output series into *destination*."""

    # --- Design queries -------------------------------------------------

    @abstractmethod
    def get_operating_state(self) -> OperatingMode: ...

    @abstractmethod
    def get_cold_startup_time(self) -> float: ...

    @abstractmethod
    def get_warm_startup_time(self) -> float: ...

    @abstractmethod
    def get_hot_startup_time(self) -> float: ...

    @abstractmethod
    def get_standby_energy_requirement(self) -> float: ...

    @abstractmethod
    def get_cold_startup_energy(self) -> float: ...

    @abstractmethod
    def get_warm_startup_energy(self) -> float: ...

    @abstractmethod
    def get_hot_startup_energy(self) -> float: ...

    @abstractmethod
    def get_max_thermal_power(self) -> float: ...

    @abstractmethod
    def get_min_thermal_power(self) -> float: ...

    @abstractmethod
    def get_max_q_pc_startup(self) -> float: ...

    @abstractmethod
    def get_htf_pumping_parasitic_coef(self) -> float: ...

    @abstractmethod
    def get_efficiency_at_TPH(
        self, t_degc: float, p_atm: float, relhum_pct: float
    ) -> tuple[float, float]: ...

    @abstractmethod
    def get_efficiency_at_load(self, load_frac: float) -> tuple[float, float]: ...
