"""
Reference scenario: two-asset Asian basket on oscillating curves.

- Weekly curve pillars over one year (53 points)
- Rates oscillate: r_i(t) = base_i + 0.005 sin(2πt)
- Vols peak mid-year: σ_i(t) = base_i + 0.10 (1 - cos 2πt)
- Asian call on asset 0 averaged over [0, 1]
- Asian call on asset 1 averaged over [0.25, 0.75]
- Both struck at 100 with spots at 100
"""

import math
from typing import Optional

from aad_pricing.config.settings import SETTINGS, ReferenceScenarioConfig
from aad_pricing.simulation.inputs import MarketInputs
from aad_pricing.trades.asian import AsianOption


def weekly_time_grid(weeks: int = 52) -> tuple[float, ...]:
    """Pillars at week / weeks for week = 0..weeks."""
    if weeks <= 0:
        raise ValueError(f"CRITICAL: weeks must be > 0, got {weeks}")
    return tuple(week / weeks for week in range(weeks + 1))


def oscillating_market(config: Optional[ReferenceScenarioConfig] = None) -> MarketInputs:
    """
    Market inputs with sinusoidal rates and mid-year volatility peaks.

    Parameters
    ----------
    config : ReferenceScenarioConfig, optional
        Scenario parameters (default SETTINGS.scenario)
    """
    config = SETTINGS.scenario if config is None else config
    time_points = weekly_time_grid(config.weeks)

    rates = tuple(
        tuple(base + config.rate_amplitude * math.sin(2 * math.pi * t) for t in time_points)
        for base in config.base_rates
    )
    vols = tuple(
        tuple(base + config.vol_bump * (1 - math.cos(2 * math.pi * t)) for t in time_points)
        for base in config.base_vols
    )
    return MarketInputs(
        initial_values=config.initial_values,
        time_points=time_points,
        rates=rates,
        vols=vols,
    )


def reference_trades(strike: Optional[float] = None) -> list[AsianOption]:
    """The two Asian options of the reference run."""
    strike = SETTINGS.scenario.strike if strike is None else strike
    return [
        AsianOption(asset_id=0, strike=strike, start_time=0.0, end_time=1.0),
        AsianOption(asset_id=1, strike=strike, start_time=0.25, end_time=0.75),
    ]
