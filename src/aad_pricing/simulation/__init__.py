"""
Monte Carlo simulation with per-path adjoint Greeks.

Provides:
- Market inputs (initial values, rate and vol curve ordinates)
- Monte Carlo AAD pricing engine
- Finite-difference, convergence and multi-seed validation tools
"""

from aad_pricing.simulation.driver import (
    MonteCarloAADEngine,
    PricingResult,
    price_asian_basket,
)
from aad_pricing.simulation.inputs import InputKey, InputKind, MarketInputs
from aad_pricing.simulation.validation import (
    GradientCheckReport,
    check_gradients,
    convergence_analysis,
    finite_difference_gradient,
    multi_seed_analysis,
)

__all__ = [
    # Inputs
    "InputKey",
    "InputKind",
    "MarketInputs",
    # Engine
    "MonteCarloAADEngine",
    "PricingResult",
    "price_asian_basket",
    # Validation
    "GradientCheckReport",
    "check_gradients",
    "convergence_analysis",
    "finite_difference_gradient",
    "multi_seed_analysis",
]
