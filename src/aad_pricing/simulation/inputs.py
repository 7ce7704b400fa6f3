"""
Market inputs for Monte Carlo AAD pricing.

Every scalar the price is differentiated against lives here as a plain
float: initial asset levels, rate-curve ordinates and volatility-curve
ordinates. All curves share one time grid.

Flat ordering (used by gradient vectors and reports):
    [S_0 .. S_{D-1}, r_0[0..K-1], .., r_{D-1}[0..K-1], vol_0[0..K-1], .., vol_{D-1}[0..K-1]]
"""

from collections.abc import Iterator, Sequence
from dataclasses import dataclass, replace
from enum import Enum
from typing import NamedTuple

import numpy as np

from aad_pricing.errors import InvalidConfigurationError


class InputKind(Enum):
    """Kind of differentiable market input."""

    INITIAL_VALUE = "initial_value"
    RATE = "rate"
    VOL = "vol"


class InputKey(NamedTuple):
    """Position of one scalar input."""

    kind: InputKind
    asset: int
    index: int = 0

    @property
    def label(self) -> str:
        """Short display label, e.g. 'S0', 'r1[3]', 'vol0[12]'."""
        if self.kind == InputKind.INITIAL_VALUE:
            return f"S{self.asset}"
        prefix = "r" if self.kind == InputKind.RATE else "vol"
        return f"{prefix}{self.asset}[{self.index}]"


def _as_float_tuple(values: Sequence[float]) -> tuple[float, ...]:
    return tuple(float(v) for v in values)


@dataclass(frozen=True)
class MarketInputs:
    """
    Immutable pricing inputs.

    Attributes
    ----------
    initial_values : tuple[float, ...]
        Starting level per asset (D values)
    time_points : tuple[float, ...]
        Curve pillars in years, strictly increasing (K values)
    rates : tuple[tuple[float, ...], ...]
        Rate ordinates per asset, each of length K
    vols : tuple[tuple[float, ...], ...]
        Volatility ordinates per asset, each of length K

    Raises
    ------
    InvalidConfigurationError
        On any shape mismatch or a non-increasing time grid
    """

    initial_values: tuple[float, ...]
    time_points: tuple[float, ...]
    rates: tuple[tuple[float, ...], ...]
    vols: tuple[tuple[float, ...], ...]

    def __post_init__(self) -> None:
        """Normalize to float tuples and validate shapes."""
        # Frozen dataclass workaround: use object.__setattr__
        object.__setattr__(self, "initial_values", _as_float_tuple(self.initial_values))
        object.__setattr__(self, "time_points", _as_float_tuple(self.time_points))
        object.__setattr__(self, "rates", tuple(_as_float_tuple(r) for r in self.rates))
        object.__setattr__(self, "vols", tuple(_as_float_tuple(v) for v in self.vols))

        n_assets = len(self.initial_values)
        if n_assets == 0:
            raise InvalidConfigurationError("CRITICAL: at least one asset is required")
        if len(self.rates) != n_assets or len(self.vols) != n_assets:
            raise InvalidConfigurationError(
                f"CRITICAL: need one rate and one vol curve per asset. Got "
                f"assets={n_assets}, rate curves={len(self.rates)}, vol curves={len(self.vols)}"
            )
        if len(self.time_points) == 0:
            raise InvalidConfigurationError("CRITICAL: time grid cannot be empty")
        if not np.all(np.diff(self.time_points) > 0):
            raise InvalidConfigurationError("CRITICAL: time points must be strictly increasing")
        for name, curves in (("rate", self.rates), ("vol", self.vols)):
            for asset, ordinates in enumerate(curves):
                if len(ordinates) != len(self.time_points):
                    raise InvalidConfigurationError(
                        f"CRITICAL: {name} curve {asset} has {len(ordinates)} ordinates, "
                        f"expected {len(self.time_points)}"
                    )

    @property
    def n_assets(self) -> int:
        """Number of assets (D)."""
        return len(self.initial_values)

    @property
    def n_pillars(self) -> int:
        """Number of curve pillars (K)."""
        return len(self.time_points)

    @property
    def n_inputs(self) -> int:
        """Total number of differentiable scalars: D + 2·D·K."""
        return self.n_assets * (1 + 2 * self.n_pillars)

    @property
    def horizon(self) -> float:
        """Last curve pillar; simulations must not run past it."""
        return self.time_points[-1]

    def keys(self) -> Iterator[InputKey]:
        """All input positions in flat order."""
        for asset in range(self.n_assets):
            yield InputKey(InputKind.INITIAL_VALUE, asset)
        for kind in (InputKind.RATE, InputKind.VOL):
            for asset in range(self.n_assets):
                for index in range(self.n_pillars):
                    yield InputKey(kind, asset, index)

    def value_of(self, key: InputKey) -> float:
        """Current value of one input."""
        if key.kind == InputKind.INITIAL_VALUE:
            return self.initial_values[key.asset]
        curves = self.rates if key.kind == InputKind.RATE else self.vols
        return curves[key.asset][key.index]

    def flatten(self) -> np.ndarray:
        """All inputs as one vector in flat order."""
        return np.concatenate(
            [
                np.asarray(self.initial_values),
                np.asarray(self.rates).ravel(),
                np.asarray(self.vols).ravel(),
            ]
        )

    def bumped(self, key: InputKey, bump: float) -> "MarketInputs":
        """
        Copy with one input shifted by ``bump`` (absolute).

        Parameters
        ----------
        key : InputKey
            Input to shift
        bump : float
            Absolute shift (may be negative)
        """
        if not 0 <= key.asset < self.n_assets:
            raise InvalidConfigurationError(
                f"CRITICAL: asset {key.asset} out of range [0, {self.n_assets})"
            )
        if key.kind == InputKind.INITIAL_VALUE:
            values = list(self.initial_values)
            values[key.asset] += bump
            return replace(self, initial_values=tuple(values))

        if not 0 <= key.index < self.n_pillars:
            raise InvalidConfigurationError(
                f"CRITICAL: pillar {key.index} out of range [0, {self.n_pillars})"
            )
        field_name = "rates" if key.kind == InputKind.RATE else "vols"
        curves = [list(c) for c in getattr(self, field_name)]
        curves[key.asset][key.index] += bump
        return replace(self, **{field_name: tuple(tuple(c) for c in curves)})

    @classmethod
    def flat(
        cls,
        initial_values: Sequence[float],
        time_points: Sequence[float],
        rate: float,
        vol: float,
    ) -> "MarketInputs":
        """Inputs with constant rate and vol curves for every asset."""
        n_assets = len(initial_values)
        n_pillars = len(time_points)
        return cls(
            initial_values=tuple(initial_values),
            time_points=tuple(time_points),
            rates=tuple((rate,) * n_pillars for _ in range(n_assets)),
            vols=tuple((vol,) * n_pillars for _ in range(n_assets)),
        )
