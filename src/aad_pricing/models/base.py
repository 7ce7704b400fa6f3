"""
Base class for stochastic models.

A model owns a fixed-length state vector (one component per simulated
asset) and advances it one time step at a time given independent
standard normal draws.
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence

from aad_pricing.aad.ops import Scalar


class Model(ABC):
    """
    Abstract multi-dimensional stochastic model.

    Lifecycle per path: reset() → evolve(dt, normals) × n_steps, with
    get_state() read after each step.
    """

    @abstractmethod
    def evolve(self, dt: float, normals: Sequence[float]) -> None:
        """
        Advance the state by one time step.

        Parameters
        ----------
        dt : float
            Time step in years
        normals : Sequence[float]
            One independent standard normal draw per dimension
        """
        pass

    @abstractmethod
    def get_state(self) -> tuple[Scalar, ...]:
        """Current state, one value per dimension. Read-only."""
        pass

    @abstractmethod
    def dims(self) -> int:
        """Number of simulated dimensions."""
        pass

    def reset(self) -> None:
        """Restore the state the model had immediately after construction."""
        pass
