"""
Base class for path-dependent trades.

A trade observes model state snapshots handed to it by the simulation
driver and produces a payoff at the end of the path. Trades never mutate
the model.
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence

from aad_pricing.aad.ops import Scalar


class Trade(ABC):
    """
    Abstract path-dependent trade.

    Lifecycle per path: reset() → evolve(t, state) once per time step →
    payoff() once after the last step.
    """

    @abstractmethod
    def evolve(self, t: float, state: Sequence[Scalar]) -> None:
        """
        Observe the model state at time ``t``.

        Parameters
        ----------
        t : float
            Observation time in years
        state : Sequence[Scalar]
            Model state snapshot (read-only)
        """
        pass

    @abstractmethod
    def payoff(self) -> Scalar:
        """Payoff of the path observed since the last reset()."""
        pass

    def reset(self) -> None:
        """Clear path-dependent accumulators."""
        pass

    def required_dims(self) -> int:
        """Minimum model dimension this trade can observe."""
        return 0
