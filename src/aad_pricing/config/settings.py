"""
Frozen configuration settings for Monte Carlo AAD pricing.

All configuration is immutable (frozen dataclasses) to ensure reproducibility.
Defaults reproduce the reference two-asset Asian basket run: 10,000 paths,
252 daily steps over one year, seed 17.
"""

import os
from dataclasses import dataclass, field

# Import centralized tolerances
from aad_pricing.config.tolerances import (
    FD_GRADIENT_ABS_TOLERANCE,
    FD_GRADIENT_REL_TOLERANCE,
)

# =============================================================================
# Environment overrides
# =============================================================================


def _resolve_int(env_var: str, default: int) -> int:
    """
    Resolve an integer setting with environment variable override.

    Priority:
    1. Environment variable (if set and non-empty)
    2. Default value

    Raises
    ------
    ValueError
        If the environment variable is set but is not an integer
    """
    raw = os.environ.get(env_var)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"CRITICAL: {env_var} must be an integer, got {raw!r}") from None


# =============================================================================
# Simulation Configuration
# =============================================================================


@dataclass(frozen=True)
class SimulationConfig:
    """
    Immutable Monte Carlo configuration.

    Attributes
    ----------
    n_paths : int
        Number of Monte Carlo paths. Override with AAD_PRICING_PATHS.
    n_steps : int
        Number of time steps per path (trading days)
    horizon : float
        Simulated horizon in years; dt = horizon / n_steps
    seed : int
        Random seed for reproducibility. Override with AAD_PRICING_SEED.
    progress_fraction : float
        Fraction of paths between debug progress messages
    """

    n_paths: int = field(default_factory=lambda: _resolve_int("AAD_PRICING_PATHS", 10_000))
    n_steps: int = 252
    horizon: float = 1.0
    seed: int = field(default_factory=lambda: _resolve_int("AAD_PRICING_SEED", 17))
    progress_fraction: float = 0.10

    @property
    def dt(self) -> float:
        """Time step in years."""
        return self.horizon / self.n_steps


# =============================================================================
# Gradient Check Configuration
# =============================================================================


@dataclass(frozen=True)
class GradientCheckConfig:
    """
    Immutable finite-difference gradient check configuration.

    Attributes
    ----------
    bump : float
        Absolute bump for central differences
    rtol : float
        Relative tolerance between adjoint and finite-difference values
    atol : float
        Absolute tolerance (dominates for near-zero sensitivities)
    """

    bump: float = 1e-5
    rtol: float = FD_GRADIENT_REL_TOLERANCE
    atol: float = FD_GRADIENT_ABS_TOLERANCE


# =============================================================================
# Reference Scenario Configuration
# =============================================================================


@dataclass(frozen=True)
class ReferenceScenarioConfig:
    """
    Immutable reference scenario configuration.

    Attributes
    ----------
    initial_values : tuple[float, ...]
        Starting asset levels
    weeks : int
        Number of weekly curve pillars after t=0 (grid has weeks + 1 points)
    base_rates : tuple[float, ...]
        Rate level per asset, oscillated by rate_amplitude * sin(2πt)
    base_vols : tuple[float, ...]
        Vol level per asset, raised by vol_bump * (1 - cos(2πt))
    strike : float
        Strike of both Asian options
    """

    initial_values: tuple[float, ...] = (100.0, 100.0)
    weeks: int = 52
    base_rates: tuple[float, ...] = (0.01, 0.02)
    rate_amplitude: float = 0.005
    base_vols: tuple[float, ...] = (0.15, 0.20)
    vol_bump: float = 0.10
    strike: float = 100.0


# =============================================================================
# Master Configuration
# =============================================================================


@dataclass(frozen=True)
class Settings:
    """
    Master frozen configuration combining all sub-configs.

    Usage
    -----
    >>> from aad_pricing.config.settings import SETTINGS
    >>> SETTINGS.simulation.n_paths
    10000
    """

    simulation: SimulationConfig = field(default_factory=SimulationConfig)
    gradient_check: GradientCheckConfig = field(default_factory=GradientCheckConfig)
    scenario: ReferenceScenarioConfig = field(default_factory=ReferenceScenarioConfig)


# Singleton instance - import this
SETTINGS = Settings()
