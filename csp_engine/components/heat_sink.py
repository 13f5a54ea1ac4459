"""
Heat-sink power-cycle model.

The heat sink accepts whatever thermal power the collector field or
storage delivers and returns the HTF at its design cold temperature.  It
generates no electricity, needs no startup, and has no thermal inertia,
so every output is a pure function of the current call's inputs and the
design parameters.
"""

from __future__ import annotations

import enum
import logging
import math
from dataclasses import dataclass, fields
from typing import Any, Mapping, MutableSequence

import numpy as np
from numpy.typing import ArrayLike

from csp_engine.components.base import (
    ComponentState,
    ControlInputs,
    HTFState,
    OperatingMode,
    PowerCycle,
    PowerCycleSolverOutputs,
    SimInfo,
    SolvedParams,
)
from csp_engine.exceptions import ConfigError
from csp_engine.htf.properties import KELVIN_OFFSET, FluidId, HTFProperties
from csp_engine.reporting.reported_outputs import (
    AggregationKind,
    OutputInfo,
    ReportedOutputs,
)

logger = logging.getLogger(__name__)

# Large enough that the heat sink never limits collector output.
MAX_FRAC: float = 100.0

# Points used when averaging cp across a temperature span.
_CP_AVE_POINTS: int = 5


class HeatSinkOutput(enum.IntEnum):
    """Reported output ids."""

    Q_DOT_HEAT_SINK = 0  # [MWt]
    W_DOT_PUMPING = 1    # [MWe]
    M_DOT_HTF = 2        # [kg/s]


_OUTPUT_INFO = (
    OutputInfo(HeatSinkOutput.Q_DOT_HEAT_SINK, AggregationKind.TS_WEIGHTED_AVE),
    OutputInfo(HeatSinkOutput.W_DOT_PUMPING, AggregationKind.TS_WEIGHTED_AVE),
    OutputInfo(HeatSinkOutput.M_DOT_HTF, AggregationKind.TS_WEIGHTED_AVE),
)


@dataclass
class HeatSinkParams:
    """Design inputs for :class:`HeatSink`.

    Parameters
    ----------
    hot_temp_design : float
        Design HTF inlet temperature (C).
    cold_temp_design : float
        Design HTF outlet temperature (C).
    thermal_duty_design : float
        Design thermal input (MWt).
    pump_power_coefficient : float
        HTF pumping power per unit mass flow (kW/(kg/s)).
    fluid : int
        HTF code, see :class:`FluidId`.  Default nitrate salt.
    fluid_props : array_like, optional
        User property table, required when ``fluid`` is
        ``FluidId.USER_DEFINED``.
    """

    hot_temp_design: float | None = None
    cold_temp_design: float | None = None
    thermal_duty_design: float | None = None
    pump_power_coefficient: float | None = None
    fluid: int = FluidId.NITRATE_SALT
    fluid_props: ArrayLike | None = None

    REQUIRED = (
        "hot_temp_design",
        "cold_temp_design",
        "thermal_duty_design",
        "pump_power_coefficient",
    )

    @classmethod
    def from_dict(cls, cfg: Mapping[str, Any]) -> "HeatSinkParams":
        """Build from a parameter-store mapping, ignoring unknown keys."""
        names = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in cfg.items() if k in names})

    def check_required(self) -> None:
        """Raise :class:`ConfigError` naming the first unset field."""
        for name in self.REQUIRED:
            value = getattr(self, name)
            if value is None or not math.isfinite(float(value)):
                raise ConfigError(name)


class HeatSink(PowerCycle):
    """Memoryless thermal sink satisfying the :class:`PowerCycle` contract.

    Parameters
    ----------
    params : HeatSinkParams
        Design inputs.  Validated by :meth:`init`, not by the constructor,
        so a parameter store may fill them in after construction.
    """

    def __init__(self, params: HeatSinkParams | None = None) -> None:
        self.params: HeatSinkParams = params if params is not None else HeatSinkParams()
        self.reported_outputs = ReportedOutputs(_OUTPUT_INFO)
        self.state: ComponentState = ComponentState.UNCONFIGURED

        self._htf: HTFProperties | None = None
        self._m_dot_htf_des: float = float("nan")  # [kg/s]
        self._solved: SolvedParams | None = None
        self._last_sim_info: SimInfo | None = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def init(self) -> SolvedParams:
        """Validate design inputs, resolve the HTF and size the design flow.

        Raises
        ------
        ConfigError
            A required field is unset, or the fluid code is unknown.
        TableShapeError
            The user-defined fluid table is not >= 3 x 7.
        """
        # A failed init leaves no design data from an earlier one.
        self.state = ComponentState.UNCONFIGURED
        self._htf = None
        self._m_dot_htf_des = float("nan")
        self._solved = None
        self._last_sim_info = None

        p = self.params
        p.check_required()

        htf = HTFProperties(p.fluid, p.fluid_props)

        t_hot = float(p.hot_temp_design)
        t_cold = float(p.cold_temp_design)
        q_dot_des = float(p.thermal_duty_design)
        if t_hot <= t_cold:
            raise ConfigError(
                "hot_temp_design",
                f"must exceed cold_temp_design ({t_hot} <= {t_cold})",
            )

        cp_des = htf.cp_ave(t_cold + KELVIN_OFFSET, t_hot + KELVIN_OFFSET, _CP_AVE_POINTS)
        m_dot_des = q_dot_des * 1.0e3 / (cp_des * (t_hot - t_cold))  # [kg/s]

        m_dot_design_hr = m_dot_des * 3600.0
        cutoff_frac = 0.0
        solved = SolvedParams(
            w_dot_des=0.0,            # no electricity generation
            eta_des=0.0,
            q_dot_des=q_dot_des,
            q_startup=0.0,            # no startup energy
            max_frac=MAX_FRAC,
            cutoff_frac=cutoff_frac,
            sb_frac=0.0,
            t_htf_hot_ref=t_hot,
            m_dot_design=m_dot_design_hr,
            m_dot_min=m_dot_design_hr * cutoff_frac,
            m_dot_max=m_dot_design_hr * MAX_FRAC,
        )

        self._htf = htf
        self._m_dot_htf_des = m_dot_des
        self._solved = solved
        self._last_sim_info = None
        self.state = ComponentState.INITIALIZED

        logger.info(
            "Heat sink design: q_dot=%.3f MWt, cp=%.4f kJ/kg-K, m_dot=%.3f kg/s",
            q_dot_des,
            cp_des,
            m_dot_des,
            extra={"component": "heat_sink"},
        )
        return solved

    def call(
        self,
        htf_state_in: HTFState,
        inputs: ControlInputs,
        sim_info: SimInfo,
        weather: Mapping[str, Any] | None = None,
    ) -> PowerCycleSolverOutputs:
        """Evaluate delivered duty and pumping power for one call.

        The HTF is assumed to leave at the design cold temperature.  May be
        called any number of times before :meth:`converged`.
        """
        if self._htf is None or self.state is ComponentState.UNCONFIGURED:
            raise RuntimeError("Heat sink is not initialised. Call init() before call().")

        t_cold = float(self.params.cold_temp_design)
        t_hot = htf_state_in.temp
        m_dot_htf = inputs.m_dot / 3600.0  # [kg/s]

        cp_htf = self._htf.cp_ave(t_cold + KELVIN_OFFSET, t_hot + KELVIN_OFFSET, _CP_AVE_POINTS)
        q_dot_htf = m_dot_htf * cp_htf * (t_hot - t_cold) / 1.0e3  # [MWt]
        w_dot_pump = float(self.params.pump_power_coefficient) * m_dot_htf / 1.0e3  # [MWe]

        out = PowerCycleSolverOutputs(
            p_cycle=0.0,
            t_htf_cold=t_cold,
            m_dot_htf=m_dot_htf * 3600.0,
            w_cool_par=0.0,
            time_required_su=0.0,
            q_dot_htf=q_dot_htf,
            w_dot_htf_pump=w_dot_pump,
            was_method_successful=True,
        )

        ro = self.reported_outputs
        ro.record(HeatSinkOutput.Q_DOT_HEAT_SINK, q_dot_htf, sim_info.step)
        ro.record(HeatSinkOutput.W_DOT_PUMPING, w_dot_pump, sim_info.step)
        ro.record(HeatSinkOutput.M_DOT_HTF, m_dot_htf, sim_info.step)

        self._last_sim_info = sim_info
        self.state = ComponentState.EVALUATING
        return out

    def converged(self, sim_info: SimInfo | None = None) -> None:
        """Commit the aggregated outputs of the current timestep.

        *sim_info* gives the timestep bounds and is required when the
        timestep had no :meth:`call`; quantities then repeat their last
        committed value.  Without it, the bounds of the last call are used.
        """
        if self.state is ComponentState.UNCONFIGURED:
            raise RuntimeError("Heat sink is not initialised. Call init() before converged().")

        info = sim_info
        if info is None and self.state is ComponentState.EVALUATING:
            info = self._last_sim_info
        if info is None:
            raise RuntimeError(
                "converged() needs sim_info when no call() was made in the current timestep."
            )

        self.reported_outputs.close_interval(info.time - info.step, info.time)
        self.state = ComponentState.CONVERGED

    def write_output_intervals(self, report_start: float, report_end: float) -> None:
        self.reported_outputs.report_interval(report_start, report_end)

    def assign(self, index: int, destination: MutableSequence[float], capacity: int) -> int:
        return self.reported_outputs.export(index, destination, capacity)

    # ------------------------------------------------------------------
    # Design queries
    # ------------------------------------------------------------------

    @property
    def solved_params(self) -> SolvedParams | None:
        return self._solved

    @property
    def m_dot_htf_des(self) -> float:
        """Design HTF mass flow (kg/s); NaN before :meth:`init`."""
        return self._m_dot_htf_des

    def get_operating_state(self) -> OperatingMode:
        # Always able to accept thermal power.
        return OperatingMode.ON

    def get_cold_startup_time(self) -> float:
        return 0.0

    def get_warm_startup_time(self) -> float:
        return 0.0

    def get_hot_startup_time(self) -> float:
        return 0.0

    def get_standby_energy_requirement(self) -> float:
        return 0.0  # [MWt]

    def get_cold_startup_energy(self) -> float:
        return 0.0  # [MWh]

    def get_warm_startup_energy(self) -> float:
        return 0.0  # [MWh]

    def get_hot_startup_energy(self) -> float:
        return 0.0  # [MWh]

    def get_max_thermal_power(self) -> float:
        return MAX_FRAC * float(self.params.thermal_duty_design)  # [MWt]

    def get_min_thermal_power(self) -> float:
        return 0.0  # [MWt]

    def get_max_q_pc_startup(self) -> float:
        return 0.0  # [MWt]

    def get_htf_pumping_parasitic_coef(self) -> float:
        """Pumping parasitic per unit thermal duty at design (kWe/kWt)."""
        return (
            float(self.params.pump_power_coefficient)
            * self._m_dot_htf_des
            / (float(self.params.thermal_duty_design) * 1.0e3)
        )

    def get_efficiency_at_TPH(
        self, t_degc: float, p_atm: float, relhum_pct: float
    ) -> tuple[float, float]:
        raise NotImplementedError("HeatSink does not generate electricity")

    def get_efficiency_at_load(self, load_frac: float) -> tuple[float, float]:
        raise NotImplementedError("HeatSink does not generate electricity")

    def __repr__(self) -> str:
        m_dot = "nan" if np.isnan(self._m_dot_htf_des) else f"{self._m_dot_htf_des:.3f}"
        return f"HeatSink(state={self.state.value}, m_dot_des={m_dot} kg/s)"
