"""
Centralized tolerance framework for Monte Carlo AAD pricing.

Tolerance Tiers:
    Tier 1 (Analytical): Deterministic results, machine precision
    Tier 2 (Gradient): Adjoint vs finite-difference agreement
    Tier 3 (Stochastic): CLT-derived, path-dependent calculations

References:
    [T1] Higham (2002) "Accuracy and Stability of Numerical Algorithms"
    [T1] Glasserman (2003) Ch. 3-4, 7 - Monte Carlo error bounds, pathwise derivatives
"""

from typing import Final

import numpy as np

# =============================================================================
# Tier 1: Analytical Tolerances (Deterministic)
# =============================================================================

#: Curve interpolation against hand-computed affine segments
INTERPOLATION_TOLERANCE: Final[float] = 1e-12

#: Payoff floor: Asian call payoff is never negative
ANTI_PATTERN_TOLERANCE: Final[float] = 1e-10


# =============================================================================
# Tier 2: Gradient Tolerances (Adjoint vs Finite Difference)
# =============================================================================
# Central differences have O(ε²) truncation error plus O(δ/ε) cancellation
# error; with ε = 1e-5 on O(100) payoffs both terms sit near 1e-6.

#: Relative tolerance between adjoint and central-difference sensitivities
FD_GRADIENT_REL_TOLERANCE: Final[float] = 1e-4

#: Absolute tolerance for sensitivities that are (nearly) zero
FD_GRADIENT_ABS_TOLERANCE: Final[float] = 1e-6


# =============================================================================
# Tier 3: Stochastic Tolerances (CLT-Derived)
# =============================================================================


def mc_tolerance(n_paths: int, sigma: float = 10.0, confidence: float = 3.0) -> float:
    """
    Calculate CLT-derived Monte Carlo tolerance.

    [T1] Standard error of MC estimate is σ/√N.
    3σ gives 99.7% confidence interval.

    Parameters
    ----------
    n_paths : int
        Number of Monte Carlo paths
    sigma : float
        Estimated standard deviation of the path payoff (default 10.0,
        typical of an at-the-money Asian call on a 100 spot)
    confidence : float
        Number of standard deviations (default 3 for 99.7% CI)

    Returns
    -------
    float
        Absolute tolerance for comparing two MC estimates

    Examples
    --------
    >>> mc_tolerance(10_000)
    0.3
    """
    if n_paths <= 0:
        raise ValueError(f"CRITICAL: n_paths must be > 0, got {n_paths}")
    return confidence * sigma / np.sqrt(n_paths)


#: Expected log-log slope of standard error against path count
CONVERGENCE_RATE: Final[float] = -0.5

#: Allowed deviation of the fitted slope from -0.5
CONVERGENCE_RATE_TOLERANCE: Final[float] = 0.1

#: Number of standard errors two independent estimates may differ by
SEED_AGREEMENT_SIGMAS: Final[float] = 4.0


# =============================================================================
# Tolerance Registry (For Dynamic Access)
# =============================================================================

TOLERANCE_REGISTRY: dict[str, float] = {
    # Tier 1: Analytical
    "interpolation": INTERPOLATION_TOLERANCE,
    "anti_pattern": ANTI_PATTERN_TOLERANCE,
    # Tier 2: Gradient
    "fd_gradient_rel": FD_GRADIENT_REL_TOLERANCE,
    "fd_gradient_abs": FD_GRADIENT_ABS_TOLERANCE,
    # Tier 3: Stochastic
    "convergence_rate": CONVERGENCE_RATE_TOLERANCE,
    "seed_agreement_sigmas": SEED_AGREEMENT_SIGMAS,
}


def get_tolerance(name: str) -> float:
    """
    Get tolerance by name from registry.

    Raises
    ------
    KeyError
        If tolerance name not found
    """
    if name not in TOLERANCE_REGISTRY:
        available = ", ".join(sorted(TOLERANCE_REGISTRY.keys()))
        raise KeyError(f"Unknown tolerance '{name}'. Available: {available}")
    return TOLERANCE_REGISTRY[name]
