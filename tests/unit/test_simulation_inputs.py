"""
Tests for market inputs and their flat ordering.
"""

import numpy as np
import pytest

from aad_pricing.errors import InvalidConfigurationError
from aad_pricing.simulation.inputs import InputKey, InputKind, MarketInputs


@pytest.fixture
def small_inputs() -> MarketInputs:
    """Two assets on three pillars with distinct ordinates."""
    return MarketInputs(
        initial_values=(100.0, 90.0),
        time_points=(0.0, 0.5, 1.0),
        rates=((0.01, 0.02, 0.03), (0.04, 0.05, 0.06)),
        vols=((0.11, 0.12, 0.13), (0.21, 0.22, 0.23)),
    )


class TestInputKey:
    """Tests for InputKey labels."""

    @pytest.mark.parametrize(
        "key, label",
        [
            (InputKey(InputKind.INITIAL_VALUE, 0), "S0"),
            (InputKey(InputKind.RATE, 1, 3), "r1[3]"),
            (InputKey(InputKind.VOL, 0, 12), "vol0[12]"),
        ],
    )
    def test_label(self, key, label):
        assert key.label == label


class TestValidation:
    """Tests for shape validation."""

    def test_normalizes_to_floats(self):
        inputs = MarketInputs([100], [0, 1], [[0, 0]], [[1, 1]])
        assert inputs.initial_values == (100.0,)
        assert isinstance(inputs.rates[0][0], float)

    def test_no_assets(self):
        with pytest.raises(InvalidConfigurationError, match="at least one asset"):
            MarketInputs((), (0.0, 1.0), (), ())

    def test_missing_curve(self):
        with pytest.raises(InvalidConfigurationError, match="one rate and one vol curve"):
            MarketInputs((100.0, 100.0), (0.0, 1.0), ((0.01, 0.01),), ((0.2, 0.2),))

    def test_empty_grid(self):
        with pytest.raises(InvalidConfigurationError, match="cannot be empty"):
            MarketInputs((100.0,), (), ((),), ((),))

    def test_non_increasing_grid(self):
        with pytest.raises(InvalidConfigurationError, match="strictly increasing"):
            MarketInputs((100.0,), (0.0, 1.0, 0.5), ((0.0,) * 3,), ((0.2,) * 3,))

    def test_ordinate_count(self):
        with pytest.raises(InvalidConfigurationError, match="vol curve 0 has 2 ordinates"):
            MarketInputs((100.0,), (0.0, 0.5, 1.0), ((0.0,) * 3,), ((0.2,) * 2,))

    def test_frozen(self, small_inputs):
        with pytest.raises(AttributeError):
            small_inputs.initial_values = (1.0,)


class TestShape:
    """Tests for counts and flat ordering."""

    def test_counts(self, small_inputs):
        assert small_inputs.n_assets == 2
        assert small_inputs.n_pillars == 3
        assert small_inputs.n_inputs == 2 + 2 * 2 * 3
        assert small_inputs.horizon == 1.0

    def test_keys_order(self, small_inputs):
        labels = [key.label for key in small_inputs.keys()]
        assert labels[:2] == ["S0", "S1"]
        assert labels[2:5] == ["r0[0]", "r0[1]", "r0[2]"]
        assert labels[5:8] == ["r1[0]", "r1[1]", "r1[2]"]
        assert labels[8] == "vol0[0]"
        assert labels[-1] == "vol1[2]"
        assert len(labels) == small_inputs.n_inputs

    def test_flatten_matches_keys(self, small_inputs):
        flat = small_inputs.flatten()
        expected = [small_inputs.value_of(key) for key in small_inputs.keys()]
        np.testing.assert_array_equal(flat, expected)

    def test_flat_constructor(self):
        inputs = MarketInputs.flat([100.0, 50.0], [0.0, 0.5, 1.0], rate=0.03, vol=0.25)
        assert inputs.rates == ((0.03,) * 3,) * 2
        assert inputs.vols == ((0.25,) * 3,) * 2


class TestBumped:
    """Tests for single-input shifts."""

    def test_bump_initial_value(self, small_inputs):
        bumped = small_inputs.bumped(InputKey(InputKind.INITIAL_VALUE, 1), 2.0)
        assert bumped.initial_values == (100.0, 92.0)
        assert small_inputs.initial_values == (100.0, 90.0)

    def test_bump_rate_pillar(self, small_inputs):
        key = InputKey(InputKind.RATE, 1, 2)
        bumped = small_inputs.bumped(key, -0.01)
        assert bumped.value_of(key) == pytest.approx(0.05)
        assert bumped.rates[0] == small_inputs.rates[0]
        assert bumped.vols == small_inputs.vols

    def test_bump_changes_exactly_one_entry(self, small_inputs):
        key = InputKey(InputKind.VOL, 0, 1)
        diff = small_inputs.bumped(key, 0.01).flatten() - small_inputs.flatten()
        assert np.count_nonzero(diff) == 1

    def test_asset_out_of_range(self, small_inputs):
        with pytest.raises(InvalidConfigurationError, match="asset 2"):
            small_inputs.bumped(InputKey(InputKind.RATE, 2, 0), 0.01)

    def test_pillar_out_of_range(self, small_inputs):
        with pytest.raises(InvalidConfigurationError, match="pillar 3"):
            small_inputs.bumped(InputKey(InputKind.VOL, 0, 3), 0.01)
