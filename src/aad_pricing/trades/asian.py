"""
Arithmetic-average (Asian) call option.

[T1] Payoff: max(A - K, 0), A = mean of S_asset(t) over observation
times t in [start_time, end_time] (both ends inclusive).

A window that never overlaps the simulated grid has no observations and
pays exactly 0.
"""

from collections.abc import Sequence

from aad_pricing.aad import ops
from aad_pricing.aad.ops import Scalar
from aad_pricing.errors import DimensionMismatchError, InvalidConfigurationError
from aad_pricing.trades.base import Trade


class AsianOption(Trade):
    """
    Asian call on one asset of a multi-asset model.

    Parameters
    ----------
    asset_id : int
        Index of the underlying in the model state
    strike : float
        Strike price
    start_time : float
        Start of the averaging window (years)
    end_time : float
        End of the averaging window (years)

    Examples
    --------
    >>> option = AsianOption(asset_id=0, strike=100.0, start_time=0.0, end_time=1.0)
    >>> option.evolve(0.5, (110.0,))
    >>> option.evolve(0.6, (120.0,))
    >>> option.payoff()
    15.0
    """

    def __init__(self, asset_id: int, strike: float, start_time: float, end_time: float):
        if asset_id < 0:
            raise InvalidConfigurationError(f"CRITICAL: asset_id must be >= 0, got {asset_id}")

        self.asset_id = int(asset_id)
        self.strike = float(strike)
        self.start_time = float(start_time)
        self.end_time = float(end_time)

        self.sum_observed: Scalar = 0.0
        self.observation_count = 0

    def reset(self) -> None:
        self.sum_observed = 0.0
        self.observation_count = 0

    def evolve(self, t: float, state: Sequence[Scalar]) -> None:
        """
        Record the price if ``t`` is inside the averaging window.

        Raises
        ------
        DimensionMismatchError
            If the state has no component ``asset_id``
        """
        if self.asset_id >= len(state):
            raise DimensionMismatchError(
                f"CRITICAL: asset_id {self.asset_id} out of range for state of size {len(state)}"
            )
        if self.start_time <= t <= self.end_time:
            self.sum_observed = self.sum_observed + state[self.asset_id]
            self.observation_count += 1

    def payoff(self) -> Scalar:
        if self.observation_count == 0:
            return 0.0
        average_price = self.sum_observed / self.observation_count
        return ops.maximum(average_price - self.strike, 0.0)

    def required_dims(self) -> int:
        return self.asset_id + 1

    def __repr__(self) -> str:
        return (
            f"AsianOption(asset_id={self.asset_id}, strike={self.strike}, "
            f"window=[{self.start_time}, {self.end_time}])"
        )
