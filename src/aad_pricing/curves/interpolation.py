"""
Piecewise-linear term-structure curve.

[T1] For domain[i-1] < x <= domain[i]:
    y(x) = y[i-1] + t * (y[i] - y[i-1]),  t = (x - x[i-1]) / (x[i] - x[i-1])

Ordinates may be active numbers (torch tensors under a recording) so
that the gradient of any result with respect to every pillar is
available after the reverse sweep. Abscissae are plain floats: time
points are never differentiated.

No extrapolation is performed. Flat extension would silently hide a
time grid that runs past the last pillar.
"""

import math
from collections.abc import Sequence

import numpy as np
import torch

from aad_pricing.aad.ops import Scalar
from aad_pricing.curves.base import Curve1D
from aad_pricing.errors import (
    DegenerateCurveError,
    InvalidConfigurationError,
    OutOfDomainError,
)


class LinearInterpolation(Curve1D):
    """
    Linear interpolation over tabulated (time, value) points.

    Parameters
    ----------
    x : Sequence[float]
        Domain points, strictly increasing
    y : Sequence[Scalar] or torch.Tensor
        Range values, same length as ``x``

    Raises
    ------
    InvalidConfigurationError
        If ``x`` and ``y`` differ in length or ``x`` is not strictly increasing

    Examples
    --------
    >>> curve = LinearInterpolation([0.0, 1.0], [1.0, 3.0])
    >>> curve(0.5)
    2.0
    """

    def __init__(self, x: Sequence[float], y: Sequence[Scalar]):
        if len(x) != len(y):
            raise InvalidConfigurationError(
                f"CRITICAL: X and Y vectors must be of the same size. "
                f"Got x={len(x)}, y={len(y)}"
            )

        domain = np.array([float(v) for v in x], dtype=np.float64)
        if domain.size > 1 and not np.all(np.diff(domain) > 0):
            raise InvalidConfigurationError(
                "CRITICAL: interpolation domain must be strictly increasing"
            )
        domain.setflags(write=False)

        self._x = domain
        self._y = y if isinstance(y, torch.Tensor) else tuple(y)

    @property
    def domain(self) -> tuple[float, ...]:
        """Domain points."""
        return tuple(float(v) for v in self._x)

    @property
    def size(self) -> int:
        """Number of tabulated points."""
        return int(self._x.size)

    @property
    def t_min(self) -> float:
        """First domain point."""
        self._check_not_empty()
        return float(self._x[0])

    @property
    def t_max(self) -> float:
        """Last domain point."""
        self._check_not_empty()
        return float(self._x[-1])

    def evaluate(self, x: float) -> Scalar:
        """
        Evaluate the curve at ``x``.

        Raises
        ------
        DegenerateCurveError
            If the curve has no points
        OutOfDomainError
            If ``x`` lies outside [t_min, t_max]
        """
        self._check_not_empty()

        x = float(x)
        if math.isnan(x) or x < self._x[0] or x > self._x[-1]:
            raise OutOfDomainError(
                f"CRITICAL: x={x} out of interpolation range "
                f"[{self._x[0]}, {self._x[-1]}]"
            )

        # Lower bound: first domain point not less than x
        idx = int(np.searchsorted(self._x, x, side="left"))
        # On a pillar the interpolation weight is exactly 1, so return the ordinate itself
        if idx == 0 or self._x[idx] == x:
            return self._y[idx]

        x_lo = float(self._x[idx - 1])
        x_hi = float(self._x[idx])
        t = (x - x_lo) / (x_hi - x_lo)
        y_lo = self._y[idx - 1]
        y_hi = self._y[idx]
        return y_lo + t * (y_hi - y_lo)

    def _check_not_empty(self) -> None:
        if self._x.size == 0:
            raise DegenerateCurveError("CRITICAL: interpolation vectors are empty")

    def __repr__(self) -> str:
        if self._x.size == 0:
            return "LinearInterpolation(<empty>)"
        return f"LinearInterpolation(n={self.size}, domain=[{self._x[0]}, {self._x[-1]}])"
