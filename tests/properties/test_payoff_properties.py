"""
Property-based tests for the Asian call payoff and its adjoints.

Properties tested:
1. Non-negativity: payoff >= 0
2. Strike monotonicity: payoff is non-increasing in the strike
3. Pathwise delta: ∂payoff/∂S_k = 1{A > K} / n for every observation
4. Window filtering: observations outside [start, end] have no effect

References:
    [T1] Glasserman (2003) Section 7.2 - Pathwise derivative estimates
"""

import numpy as np
from hypothesis import given, settings
from hypothesis import strategies as st

from aad_pricing.aad.tape import Tape
from aad_pricing.config.tolerances import ANTI_PATTERN_TOLERANCE
from aad_pricing.trades.asian import AsianOption

# =============================================================================
# Strategy Definitions
# =============================================================================

price_strategy = st.floats(min_value=1.0, max_value=500.0, allow_nan=False, allow_infinity=False)
strike_strategy = st.floats(min_value=1.0, max_value=500.0, allow_nan=False, allow_infinity=False)
path_strategy = st.lists(price_strategy, min_size=1, max_size=30)


def _observe(option: AsianOption, prices) -> None:
    n = len(prices)
    for i, price in enumerate(prices):
        option.evolve(i / n, (price,))


# =============================================================================
# Value Properties
# =============================================================================


class TestPayoffBounds:
    """[T1] max(A - K, 0) is non-negative and capped by the average."""

    @given(prices=path_strategy, strike=strike_strategy)
    @settings(max_examples=200)
    def test_non_negative(self, prices, strike):
        option = AsianOption(0, strike, 0.0, 1.0)
        _observe(option, prices)
        assert option.payoff() >= -ANTI_PATTERN_TOLERANCE

    @given(prices=path_strategy, strike=strike_strategy)
    @settings(max_examples=200)
    def test_matches_closed_form(self, prices, strike):
        option = AsianOption(0, strike, 0.0, 1.0)
        _observe(option, prices)
        expected = max(float(np.mean(prices)) - strike, 0.0)
        assert abs(option.payoff() - expected) <= 1e-9


class TestStrikeMonotonicity:
    """Raising the strike never raises the payoff."""

    @given(prices=path_strategy, k1=strike_strategy, k2=strike_strategy)
    @settings(max_examples=200)
    def test_non_increasing_in_strike(self, prices, k1, k2):
        low, high = min(k1, k2), max(k1, k2)
        cheap = AsianOption(0, high, 0.0, 1.0)
        rich = AsianOption(0, low, 0.0, 1.0)
        _observe(cheap, prices)
        _observe(rich, prices)
        assert cheap.payoff() <= rich.payoff() + ANTI_PATTERN_TOLERANCE


class TestWindowFiltering:
    """Observations outside the window are ignored."""

    @given(
        inside=st.lists(price_strategy, min_size=1, max_size=10),
        outside=st.lists(price_strategy, min_size=1, max_size=10),
        strike=strike_strategy,
    )
    @settings(max_examples=100)
    def test_outside_prices_ignored(self, inside, outside, strike):
        option = AsianOption(0, strike, 0.25, 0.75)
        for price in outside:
            option.evolve(0.1, (price,))
        for price in inside:
            option.evolve(0.5, (price,))
        for price in outside:
            option.evolve(0.9, (price,))

        reference = AsianOption(0, strike, 0.0, 1.0)
        for price in inside:
            reference.evolve(0.5, (price,))
        assert option.payoff() == reference.payoff()


# =============================================================================
# Adjoint Properties
# =============================================================================


class TestPathwiseDelta:
    """∂payoff/∂S_k = 1{A > K} / n."""

    @given(prices=path_strategy, strike=strike_strategy)
    @settings(max_examples=50, deadline=None)
    def test_observation_adjoints(self, prices, strike):
        n = len(prices)
        average = float(np.mean(prices))
        # Skip ties at the kink where the one-sided derivative is ambiguous
        if abs(average - strike) < 1e-9:
            return

        option = AsianOption(0, strike, 0.0, 1.0)
        tape = Tape()
        with tape.recording() as rec:
            active = rec.wrap(prices)
            _observe(option, [active[i] for i in range(n)])
            rec.backward(option.payoff())
            grad = rec.read_gradient(active)

        expected = (1.0 / n) if average > strike else 0.0
        np.testing.assert_allclose(grad, np.full(n, expected), rtol=1e-12, atol=1e-15)
