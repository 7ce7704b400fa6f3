"""
Exception hierarchy for the pricing core.

Every error is fatal for a pricing run: nothing is caught and retried
inside the engine, and a Monte Carlo estimate is never returned once a
single path has failed.

All classes derive from ValueError so that callers already matching on
the ``ValueError("CRITICAL: ...")`` convention used for argument
validation keep working.
"""


class PricingError(ValueError):
    """Base class for all pricing-core errors."""


class InvalidConfigurationError(PricingError):
    """Raised at construction time for shape mismatches or missing curves."""


class DegenerateCurveError(InvalidConfigurationError):
    """Raised when a curve with no tabulated points is evaluated."""


class DimensionMismatchError(PricingError):
    """Raised when a runtime argument has the wrong number of components."""


class OutOfDomainError(PricingError):
    """Raised when a curve is evaluated outside its tabulated range."""


class RecordingError(PricingError):
    """Raised when recording scopes on a tape are nested or misused."""
