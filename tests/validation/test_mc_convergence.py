"""
Monte Carlo convergence and seed-stability validation.

[T1] MC standard error decays as σ/√N (CLT), so the log-log slope of SE
against N should be close to -0.5, and estimates from independent seeds
should agree within a few standard errors.

See: Glasserman (2003) Ch. 1.1 - Monte Carlo error
"""

import pandas as pd
import pytest

from aad_pricing.config.tolerances import (
    CONVERGENCE_RATE,
    CONVERGENCE_RATE_TOLERANCE,
    SEED_AGREEMENT_SIGMAS,
    mc_tolerance,
)
from aad_pricing.simulation.validation import convergence_analysis, multi_seed_analysis


@pytest.mark.validation
@pytest.mark.slow
class TestConvergenceRate:
    """SE ∝ N^(-1/2)."""

    def test_standard_error_slope(self, flat_inputs, atm_asian):
        analysis = convergence_analysis(
            flat_inputs, [atm_asian], path_counts=(500, 2000, 8000), n_steps=4, seed=42
        )
        assert abs(analysis["convergence_rate"] - CONVERGENCE_RATE) < CONVERGENCE_RATE_TOLERANCE
        assert analysis["r_squared"] > 0.95

    def test_standard_error_decreases(self, flat_inputs, atm_asian):
        analysis = convergence_analysis(
            flat_inputs, [atm_asian], path_counts=(200, 3200), n_steps=4, seed=5
        )
        small, large = analysis["results"]
        assert large["standard_error"] < small["standard_error"]
        assert large["ci_width"] < small["ci_width"]

    def test_needs_two_path_counts(self, flat_inputs, atm_asian):
        with pytest.raises(ValueError, match="at least two path counts"):
            convergence_analysis(flat_inputs, [atm_asian], path_counts=(100,))


@pytest.mark.validation
class TestSeedStability:
    """Independent seeds agree within the CLT band."""

    def test_multi_seed_agreement(self, flat_inputs, atm_asian):
        frame = multi_seed_analysis(
            flat_inputs, [atm_asian], seeds=[1, 2, 3, 4, 5], n_paths=400, n_steps=4
        )
        assert isinstance(frame, pd.DataFrame)
        assert list(frame.columns) == ["seed", "price", "standard_error", "z_score"]
        assert (frame["z_score"].abs() < SEED_AGREEMENT_SIGMAS).all()

    def test_spread_within_mc_tolerance(self, flat_inputs, atm_asian):
        frame = multi_seed_analysis(
            flat_inputs, [atm_asian], seeds=[10, 20, 30], n_paths=400, n_steps=4
        )
        sigma = float((frame["standard_error"] * 20.0).max())
        spread = frame["price"].max() - frame["price"].min()
        assert spread < 2 * mc_tolerance(400, sigma=sigma, confidence=SEED_AGREEMENT_SIGMAS)

    @pytest.mark.parametrize("n_paths", [0, 1])
    def test_needs_two_paths_per_seed(self, flat_inputs, atm_asian, n_paths):
        """A single path has no standard error to scale the z-score by."""
        with pytest.raises(ValueError, match="at least two paths per seed"):
            multi_seed_analysis(flat_inputs, [atm_asian], seeds=[1, 2], n_paths=n_paths)
