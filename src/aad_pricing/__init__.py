"""
aad-pricing: Monte Carlo pricing of path-dependent trades with adjoint Greeks.

Quick Start
-----------
>>> from aad_pricing import MonteCarloAADEngine, oscillating_market, reference_trades
>>> engine = MonteCarloAADEngine(n_paths=1000, seed=17)
>>> result = engine.price(oscillating_market(), reference_trades())
>>> result.to_frame().head()

Version: 0.1.0
"""

__version__ = "0.1.0"

# =============================================================================
# Errors
# =============================================================================
from aad_pricing.errors import (
    DegenerateCurveError,
    DimensionMismatchError,
    InvalidConfigurationError,
    OutOfDomainError,
    PricingError,
    RecordingError,
)

# =============================================================================
# Differentiation Substrate
# =============================================================================
from aad_pricing.aad.tape import Recording, Tape

# =============================================================================
# Curves, Models, Trades
# =============================================================================
from aad_pricing.curves import Curve1D, LinearInterpolation
from aad_pricing.models import LogNormalProcess, Model
from aad_pricing.trades import AsianOption, Trade

# =============================================================================
# Simulation
# =============================================================================
from aad_pricing.simulation import (
    GradientCheckReport,
    InputKey,
    InputKind,
    MarketInputs,
    MonteCarloAADEngine,
    PricingResult,
    check_gradients,
    convergence_analysis,
    finite_difference_gradient,
    multi_seed_analysis,
    price_asian_basket,
)

# =============================================================================
# Reference Scenario
# =============================================================================
from aad_pricing.scenarios import oscillating_market, reference_trades, weekly_time_grid

# =============================================================================
# Configuration
# =============================================================================
from aad_pricing.config.settings import SETTINGS

__all__ = [
    # Version
    "__version__",
    # Errors
    "PricingError",
    "InvalidConfigurationError",
    "DegenerateCurveError",
    "DimensionMismatchError",
    "OutOfDomainError",
    "RecordingError",
    # Substrate
    "Tape",
    "Recording",
    # Building blocks
    "Curve1D",
    "LinearInterpolation",
    "Model",
    "LogNormalProcess",
    "Trade",
    "AsianOption",
    # Simulation
    "MarketInputs",
    "InputKey",
    "InputKind",
    "MonteCarloAADEngine",
    "PricingResult",
    "price_asian_basket",
    "GradientCheckReport",
    "check_gradients",
    "finite_difference_gradient",
    "convergence_analysis",
    "multi_seed_analysis",
    # Scenario
    "weekly_time_grid",
    "oscillating_market",
    "reference_trades",
    # Config
    "SETTINGS",
]
