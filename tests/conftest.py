"""
Centralized pytest fixtures for aad-pricing test suite.

Fixture Categories:
1. Market Inputs - Flat single-asset and two-asset curves
2. Trades - Asian options over full and partial windows
3. Engines - Small, fast Monte Carlo engines with fixed seeds
4. Tolerances - Tiered tolerance settings

Step counts are powers of two (or 12/63/126/252) so that accumulating
dt = 1/n_steps lands on or below the final curve pillar at t = 1.0; the
engine rejects step counts whose clock overshoots it before simulating.
"""

from dataclasses import dataclass

import pytest

from aad_pricing.aad.tape import Tape
from aad_pricing.config.settings import ReferenceScenarioConfig
from aad_pricing.scenarios import oscillating_market, reference_trades
from aad_pricing.simulation.driver import MonteCarloAADEngine
from aad_pricing.simulation.inputs import MarketInputs
from aad_pricing.trades.asian import AsianOption

# =============================================================================
# TOLERANCE TIERS
# =============================================================================


@dataclass(frozen=True)
class ToleranceTiers:
    """
    Tiered tolerance framework for different test types.

    Derived from precision requirements, not ad hoc.
    """

    # Deterministic arithmetic
    analytical: float = 1e-12

    # Adjoint vs finite difference (relative)
    gradient_rel: float = 1e-4

    # Adjoint vs finite difference (absolute, near-zero sensitivities)
    gradient_abs: float = 1e-6


TOLERANCES = ToleranceTiers()


@pytest.fixture(scope="session")
def tolerances() -> ToleranceTiers:
    """Provide tiered tolerance settings for all tests."""
    return TOLERANCES


# =============================================================================
# MARKET INPUTS
# =============================================================================

#: Quarterly pillars over one year
QUARTERLY_GRID: tuple[float, ...] = (0.0, 0.25, 0.5, 0.75, 1.0)


@pytest.fixture
def flat_inputs() -> MarketInputs:
    """Single asset at 100, flat 2% rate, flat 20% vol, quarterly pillars."""
    return MarketInputs.flat([100.0], QUARTERLY_GRID, rate=0.02, vol=0.20)


@pytest.fixture
def sloped_inputs() -> MarketInputs:
    """Single asset with upward-sloping rates and humped vols."""
    return MarketInputs(
        initial_values=(100.0,),
        time_points=QUARTERLY_GRID,
        rates=((0.010, 0.015, 0.020, 0.025, 0.030),),
        vols=((0.15, 0.22, 0.28, 0.22, 0.15),),
    )


@pytest.fixture
def two_asset_inputs() -> MarketInputs:
    """Reference oscillating market on a quarterly grid (2 assets, 5 pillars)."""
    return oscillating_market(ReferenceScenarioConfig(weeks=4))


# =============================================================================
# TRADES
# =============================================================================


@pytest.fixture
def atm_asian() -> AsianOption:
    """At-the-money Asian call on asset 0 over the full year."""
    return AsianOption(asset_id=0, strike=100.0, start_time=0.0, end_time=1.0)


@pytest.fixture
def basket_trades() -> list[AsianOption]:
    """Reference pair of Asian options (asset 0 full year, asset 1 mid-year)."""
    return reference_trades()


# =============================================================================
# ENGINES
# =============================================================================


@pytest.fixture
def small_engine() -> MonteCarloAADEngine:
    """64 paths x 8 steps, seed 42."""
    return MonteCarloAADEngine(n_paths=64, n_steps=8, horizon=1.0, seed=42)


@pytest.fixture
def tape() -> Tape:
    """Fresh differentiation tape."""
    return Tape()
