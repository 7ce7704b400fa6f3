"""
Multi-asset log-normal process with time-dependent rate and volatility.

[T1] Per asset i, with r_i(t) and σ_i(t) read from term-structure curves:
    S_i(t+dt) = S_i(t) * exp((r_i(t+dt) - σ_i(t+dt)²/2) dt + σ_i(t+dt) √dt Z_i)

Curves are evaluated at the end of each step (the model's clock is
advanced before the update). Assets are independent: each step consumes
exactly one normal per asset, in asset order.

See: Glasserman (2003) Section 3.2 - Geometric Brownian motion
"""

import math
from collections.abc import Sequence
from typing import Optional

from aad_pricing.aad import ops
from aad_pricing.aad.ops import Scalar
from aad_pricing.curves.base import Curve1D
from aad_pricing.curves.interpolation import LinearInterpolation
from aad_pricing.errors import DimensionMismatchError, InvalidConfigurationError
from aad_pricing.models.base import Model


class LogNormalProcess(Model):
    """
    Log-normal process driven by per-asset rate and volatility curves.

    Parameters
    ----------
    rate_curves : Sequence[Curve1D]
        Interest rate curve per asset
    vol_curves : Sequence[Curve1D]
        Volatility curve per asset
    initial_values : Sequence[Scalar]
        Starting level per asset; may be a 1-D active tensor

    Raises
    ------
    InvalidConfigurationError
        If the three sequences differ in length or a curve is missing
    """

    def __init__(
        self,
        rate_curves: Sequence[Optional[Curve1D]],
        vol_curves: Sequence[Optional[Curve1D]],
        initial_values: Sequence[Scalar],
    ):
        if len(rate_curves) != len(vol_curves) or len(rate_curves) != len(initial_values):
            raise InvalidConfigurationError(
                f"CRITICAL: rate curves ({len(rate_curves)}), vol curves ({len(vol_curves)}) "
                f"and initial values ({len(initial_values)}) must have the same size"
            )
        if any(curve is None for curve in rate_curves):
            raise InvalidConfigurationError("CRITICAL: interest rate curves cannot be None")
        if any(curve is None for curve in vol_curves):
            raise InvalidConfigurationError("CRITICAL: volatility curves cannot be None")

        self._rate_curves = tuple(rate_curves)
        self._vol_curves = tuple(vol_curves)
        self._initial_values = tuple(initial_values[i] for i in range(len(initial_values)))
        self._state: list[Scalar] = list(self._initial_values)
        self._current_time = 0.0

    @classmethod
    def from_curve_ordinates(
        cls,
        time_points: Sequence[float],
        initial_values: Sequence[Scalar],
        rates: Sequence[Sequence[Scalar]],
        vols: Sequence[Sequence[Scalar]],
    ) -> "LogNormalProcess":
        """
        Build the model from raw curve ordinates on a shared time grid.

        Each entry of ``rates`` and ``vols`` becomes a LinearInterpolation
        over ``time_points``.
        """
        rate_curves = [LinearInterpolation(time_points, r) for r in rates]
        vol_curves = [LinearInterpolation(time_points, v) for v in vols]
        return cls(rate_curves, vol_curves, initial_values)

    @property
    def current_time(self) -> float:
        """Time reached by the last evolve() call (0 after reset)."""
        return self._current_time

    @property
    def initial_values(self) -> tuple[Scalar, ...]:
        """Starting level per asset."""
        return self._initial_values

    def dims(self) -> int:
        return len(self._initial_values)

    def reset(self) -> None:
        self._state = list(self._initial_values)
        self._current_time = 0.0

    def evolve(self, dt: float, normals: Sequence[float]) -> None:
        """
        Advance every asset by ``dt``.

        Raises
        ------
        DimensionMismatchError
            If ``len(normals) != dims()``
        OutOfDomainError
            If the new time falls outside a curve's table
        """
        if len(normals) != self.dims():
            raise DimensionMismatchError(
                f"CRITICAL: normal vector size must match the number of dimensions. "
                f"Got {len(normals)}, expected {self.dims()}"
            )

        self._current_time += dt
        sqrt_dt = math.sqrt(dt)

        for i in range(len(self._state)):
            r_t = self._rate_curves[i](self._current_time)
            vol_t = self._vol_curves[i](self._current_time)

            drift = (r_t - 0.5 * vol_t * vol_t) * dt
            diffusion = vol_t * sqrt_dt * float(normals[i])
            self._state[i] = self._state[i] * ops.exp(drift + diffusion)

    def get_state(self) -> tuple[Scalar, ...]:
        return tuple(self._state)
