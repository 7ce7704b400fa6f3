"""
Base class for term-structure curves.

A curve maps a time (years) to a scalar such as a short rate or a
volatility. Curves are immutable after construction and may be shared
read-only by any number of models.
"""

from abc import ABC, abstractmethod

from aad_pricing.aad.ops import Scalar


class Curve1D(ABC):
    """
    Abstract one-dimensional curve.

    All curve implementations must:
    1. Implement evaluate()
    2. Refuse to extrapolate (raise OutOfDomainError outside the table)
    3. Never mutate their tabulated data
    """

    @abstractmethod
    def evaluate(self, x: float) -> Scalar:
        """
        Evaluate the curve at time ``x``.

        Parameters
        ----------
        x : float
            Time in years

        Returns
        -------
        Scalar
            Curve value; active if the ordinates are active
        """
        pass

    def __call__(self, x: float) -> Scalar:
        return self.evaluate(x)
