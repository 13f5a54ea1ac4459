"""
Heat-transfer-fluid (HTF) property model.

Library fluids are described by specific-heat polynomials in degC; a
user-defined fluid is supplied as a property table.  Temperatures passed
to the public methods are in Kelvin, matching the convention of the
component models that call them.
"""

from __future__ import annotations

import enum
import logging
from typing import Dict, Tuple

import numpy as np
from numpy.typing import ArrayLike, NDArray
from scipy.integrate import simpson

from csp_engine.exceptions import ConfigError, TableShapeError

logger = logging.getLogger(__name__)

KELVIN_OFFSET: float = 273.15

# User table columns: T [C], cp [kJ/kg-K], rho [kg/m3], mu [Pa-s],
# nu [m2/s], k [W/m-K], h [kJ/kg]
USER_TABLE_COLUMNS: int = 7
USER_TABLE_MIN_ROWS: int = 3


class FluidId(enum.IntEnum):
    """Library fluid codes."""

    WATER_LIQUID = 3
    NITRATE_SALT = 18
    CALORIA_HT_43 = 19
    HITEC_XL = 20
    THERMINOL_VP1 = 21
    HITEC = 22
    USER_DEFINED = 50


# cp [kJ/kg-K] = c0 + c1*T + c2*T^2 + ... with T in degC
_CP_COEFFS: Dict[FluidId, Tuple[float, ...]] = {
    FluidId.WATER_LIQUID: (4.18,),
    FluidId.NITRATE_SALT: (1.443, 1.72e-4),
    FluidId.CALORIA_HT_43: (1.94, 3.4e-3),
    FluidId.HITEC_XL: (1.536, -2.624e-4),
    FluidId.THERMINOL_VP1: (1.498, 2.414e-3, 5.9591e-6, -2.9879e-8, 4.4172e-11),
    FluidId.HITEC: (1.56,),
}


class HTFProperties:
    """Specific-heat lookups for a library or user-defined fluid.

    Parameters
    ----------
    fluid : int
        A :class:`FluidId` code.
    user_table : array_like, optional
        Required when ``fluid`` is :attr:`FluidId.USER_DEFINED`.  At least
        three rows of seven columns, temperatures strictly increasing.

    Raises
    ------
    ConfigError
        If the fluid code is not recognised, or the user table has
        non-increasing temperatures.
    TableShapeError
        If the user table is not >= 3 rows x exactly 7 columns.
    """

    def __init__(self, fluid: int, user_table: ArrayLike | None = None) -> None:
        try:
            self.fluid = FluidId(int(fluid))
        except ValueError:
            raise ConfigError("fluid", f"code {fluid} is not recognized") from None

        self._coeffs: NDArray[np.float64] | None = None
        self._table: NDArray[np.float64] | None = None

        if self.fluid is FluidId.USER_DEFINED:
            self._table = self._check_user_table(user_table)
        else:
            # np.polyval expects highest order first.
            self._coeffs = np.array(_CP_COEFFS[self.fluid][::-1], dtype=np.float64)

        logger.debug("Resolved HTF properties for %s", self.fluid.name)

    @staticmethod
    def _check_user_table(user_table: ArrayLike | None) -> NDArray[np.float64]:
        if user_table is None:
            raise TableShapeError(0, 0)
        table = np.asarray(user_table, dtype=np.float64)
        if table.ndim != 2:
            raise TableShapeError(table.shape[0] if table.ndim else 0, 0)

        n_rows, n_cols = table.shape
        if n_rows < USER_TABLE_MIN_ROWS or n_cols != USER_TABLE_COLUMNS:
            raise TableShapeError(n_rows, n_cols)

        if np.any(np.diff(table[:, 0]) <= 0):
            raise ConfigError(
                "fluid_props", "must list temperatures in strictly increasing order"
            )
        return table

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    def cp(self, temp_k: float | NDArray[np.float64]) -> float | NDArray[np.float64]:
        """Specific heat [kJ/kg-K] at *temp_k* Kelvin."""
        t_c = np.asarray(temp_k, dtype=np.float64) - KELVIN_OFFSET
        if self._table is not None:
            result = np.interp(t_c, self._table[:, 0], self._table[:, 1])
        else:
            result = np.polyval(self._coeffs, t_c)
        if np.ndim(result) == 0:
            return float(result)
        return result

    def cp_ave(self, t1_k: float, t2_k: float, n_points: int = 5) -> float:
        """Mean specific heat [kJ/kg-K] between two temperatures in Kelvin.

        Integrates cp over *n_points* evenly spaced temperatures with
        Simpson's rule and divides by the span.  Equal temperatures return
        the point value.
        """
        if abs(t2_k - t1_k) < 1.0e-9:
            return float(self.cp(t1_k))
        temps = np.linspace(t1_k, t2_k, max(int(n_points), 3))
        return float(simpson(self.cp(temps), x=temps) / (t2_k - t1_k))

    def __repr__(self) -> str:
        return f"HTFProperties(fluid={self.fluid.name})"
