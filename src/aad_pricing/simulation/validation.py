"""
Validation tools for Monte Carlo AAD pricing.

- Finite-difference gradient check: adjoint sensitivities against central
  differences under matched random draws (same seed, same draw order).
- Convergence analysis: standard error against path count, expected to
  decay as 1/√N.
- Multi-seed analysis: independent estimates agree within a few standard
  errors.

[T1] Central difference: (P(x+ε) - P(x-ε)) / 2ε, truncation error O(ε²)
[T1] MC error ~ σ/√N (CLT)

See: Glasserman (2003) Ch. 7 - Estimating sensitivities
"""

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Optional

import numpy as np
import pandas as pd
from scipy import stats

from aad_pricing.config.settings import SETTINGS
from aad_pricing.simulation.driver import MonteCarloAADEngine
from aad_pricing.simulation.inputs import InputKey, MarketInputs
from aad_pricing.trades.base import Trade

logger = logging.getLogger(__name__)


# =============================================================================
# Finite-Difference Gradient Check
# =============================================================================


def finite_difference_gradient(
    engine: MonteCarloAADEngine,
    inputs: MarketInputs,
    trades: Sequence[Trade],
    key: InputKey,
    bump: Optional[float] = None,
) -> float:
    """
    Central finite-difference sensitivity of the price to one input.

    Both bumped runs use the engine's seed, so they consume identical
    normal draws and the difference isolates the input's effect.

    Parameters
    ----------
    engine : MonteCarloAADEngine
        Engine (its seed fixes the draws)
    inputs : MarketInputs
        Base inputs
    trades : Sequence[Trade]
        Trades priced together
    key : InputKey
        Input to bump
    bump : float, optional
        Absolute bump ε (default SETTINGS.gradient_check.bump)

    Returns
    -------
    float
        (price(x+ε) - price(x-ε)) / 2ε
    """
    eps = SETTINGS.gradient_check.bump if bump is None else bump
    if eps <= 0:
        raise ValueError(f"CRITICAL: bump must be > 0, got {eps}")

    up = engine.price_only(inputs.bumped(key, eps), trades).price
    down = engine.price_only(inputs.bumped(key, -eps), trades).price
    return (up - down) / (2.0 * eps)


@dataclass(frozen=True)
class GradientCheckReport:
    """
    Adjoint vs finite-difference comparison.

    Attributes
    ----------
    frame : pd.DataFrame
        One row per checked input: label, adjoint, finite_difference,
        abs_error, within_tolerance
    price : float
        Base price
    rtol : float
        Relative tolerance used
    atol : float
        Absolute tolerance used
    """

    frame: pd.DataFrame
    price: float
    rtol: float
    atol: float

    @property
    def passed(self) -> bool:
        """True if every checked input is within tolerance."""
        return bool(self.frame["within_tolerance"].all())

    @property
    def max_abs_error(self) -> float:
        """Largest |adjoint - finite difference|."""
        return float(self.frame["abs_error"].max())

    @property
    def failures(self) -> pd.DataFrame:
        """Rows outside tolerance."""
        return self.frame[~self.frame["within_tolerance"]]


def check_gradients(
    engine: MonteCarloAADEngine,
    inputs: MarketInputs,
    trades: Sequence[Trade],
    keys: Optional[Iterable[InputKey]] = None,
    bump: Optional[float] = None,
    rtol: Optional[float] = None,
    atol: Optional[float] = None,
) -> GradientCheckReport:
    """
    Compare adjoint sensitivities with central finite differences.

    Parameters
    ----------
    engine : MonteCarloAADEngine
        Engine used for both the adjoint run and the bumped runs
    inputs : MarketInputs
        Base inputs
    trades : Sequence[Trade]
        Trades priced together
    keys : Iterable[InputKey], optional
        Inputs to check (default: all). Each costs two extra pricing runs.
    bump, rtol, atol : float, optional
        Defaults from SETTINGS.gradient_check

    Returns
    -------
    GradientCheckReport
        Per-input comparison; ``passed`` if all within
        atol + rtol * |finite difference|
    """
    config = SETTINGS.gradient_check
    rtol = config.rtol if rtol is None else rtol
    atol = config.atol if atol is None else atol

    base = engine.price(inputs, trades)
    selected = list(inputs.keys() if keys is None else keys)
    logger.info(f"Checking {len(selected)} sensitivities against finite differences")

    rows = []
    for key in selected:
        adjoint = base.sensitivity(key)
        fd = finite_difference_gradient(engine, inputs, trades, key, bump)
        abs_error = abs(adjoint - fd)
        rows.append(
            {
                "label": key.label,
                "adjoint": adjoint,
                "finite_difference": fd,
                "abs_error": abs_error,
                "within_tolerance": abs_error <= atol + rtol * abs(fd),
            }
        )

    report = GradientCheckReport(
        frame=pd.DataFrame(rows), price=base.price, rtol=rtol, atol=atol
    )
    if not report.passed:
        logger.warning(
            f"{len(report.failures)} sensitivities outside tolerance "
            f"(max abs error {report.max_abs_error:.3e})"
        )
    return report


# =============================================================================
# Convergence Analysis
# =============================================================================


def convergence_analysis(
    inputs: MarketInputs,
    trades: Sequence[Trade],
    path_counts: Sequence[int] = (250, 1000, 4000),
    n_steps: int = 12,
    horizon: float = 1.0,
    seed: int = 42,
) -> dict:
    """
    Standard error as a function of path count.

    [T1] SE ∝ N^(-1/2), so the log-log slope should be close to -0.5.

    Parameters
    ----------
    inputs : MarketInputs
        Market inputs
    trades : Sequence[Trade]
        Trades priced together
    path_counts : Sequence[int]
        Path counts to run (at least two)
    n_steps : int
        Time steps per path
    horizon : float
        Simulated horizon in years
    seed : int
        Random seed

    Returns
    -------
    dict
        {"results": list of per-N dicts, "convergence_rate": fitted slope,
        "r_squared": fit quality}
    """
    if len(path_counts) < 2:
        raise ValueError(f"CRITICAL: need at least two path counts, got {len(path_counts)}")

    results = []
    for n in path_counts:
        engine = MonteCarloAADEngine(n_paths=n, n_steps=n_steps, horizon=horizon, seed=seed)
        mc_result = engine.price_only(inputs, trades)
        results.append(
            {
                "n_paths": n,
                "price": mc_result.price,
                "standard_error": mc_result.standard_error,
                "ci_width": mc_result.ci_width,
            }
        )

    fit = stats.linregress(
        np.log([r["n_paths"] for r in results]),
        np.log([r["standard_error"] for r in results]),
    )
    return {
        "results": results,
        "convergence_rate": float(fit.slope),
        "r_squared": float(fit.rvalue**2),
    }


# =============================================================================
# Multi-Seed Analysis
# =============================================================================


def multi_seed_analysis(
    inputs: MarketInputs,
    trades: Sequence[Trade],
    seeds: Sequence[int],
    n_paths: int = 1000,
    n_steps: int = 12,
    horizon: float = 1.0,
) -> pd.DataFrame:
    """
    Price under several seeds and compare against the pooled mean.

    Returns
    -------
    pd.DataFrame
        One row per seed: seed, price, standard_error, z_score, where
        z_score = (price - pooled mean) / standard_error
    """
    if n_paths < 2:
        raise ValueError(
            f"CRITICAL: need at least two paths per seed for a standard error, got {n_paths}"
        )

    rows = []
    for seed in seeds:
        engine = MonteCarloAADEngine(n_paths=n_paths, n_steps=n_steps, horizon=horizon, seed=seed)
        result = engine.price_only(inputs, trades)
        rows.append(
            {"seed": seed, "price": result.price, "standard_error": result.standard_error}
        )

    frame = pd.DataFrame(rows)
    pooled = frame["price"].mean()
    frame["z_score"] = (frame["price"] - pooled) / frame["standard_error"]
    return frame
