"""Tests for efficiency bias sampling."""

import numpy as np
import pytest

from oligosim.simulate.pcr.bias import BiasSampler, sample_efficiencies
from oligosim.simulate.pcr.config import BiasParams
from oligosim.simulate.pcr.errors import ConfigError


class TestBiasSampler:
    """Truncated normal draws."""

    def test_length_and_bounds(self, rng):
        values = BiasSampler().sample(5000, 1.0, 2.0, 1.9, 0.2, rng)
        assert values.shape == (5000,)
        assert values.min() >= 1.0
        assert values.max() <= 2.0

    def test_mean_inside_wide_bounds(self, rng):
        values = BiasSampler().sample(10000, 1.0, 2.0, 1.5, 0.1, rng)
        assert abs(values.mean() - 1.5) < 0.01

    def test_reproducible(self):
        a = BiasSampler().sample(100, 1.0, 2.0, 1.8, 0.1, np.random.default_rng(3))
        b = BiasSampler().sample(100, 1.0, 2.0, 1.8, 0.1, np.random.default_rng(3))
        np.testing.assert_array_equal(a, b)

    def test_zero_sd_returns_mean(self, rng):
        values = BiasSampler().sample(4, 1.0, 2.0, 1.75, 0.0, rng)
        np.testing.assert_array_equal(values, [1.75] * 4)

    def test_empty(self, rng):
        assert BiasSampler().sample(0, 1.0, 2.0, 1.5, 0.1, rng).size == 0

    def test_mean_far_outside_window(self, rng):
        values = BiasSampler().sample(500, 1.0, 2.0, 2.5, 0.05, rng)
        assert values.min() >= 1.0
        assert values.max() <= 2.0
        assert values.mean() > 1.9

    @pytest.mark.parametrize("low,high,sd", [(2.0, 1.0, 0.1), (1.5, 1.5, 0.1), (1.0, 2.0, -0.1)])
    def test_invalid_parameters(self, rng, low, high, sd):
        with pytest.raises(ConfigError):
            BiasSampler().sample(10, low, high, 1.5, sd, rng)

    def test_zero_sd_mean_outside_bounds(self, rng):
        with pytest.raises(ConfigError):
            BiasSampler().sample(10, 1.0, 2.0, 2.5, 0.0, rng)


def test_sample_efficiencies_uses_params(rng):
    values = sample_efficiencies(200, BiasParams(mean=1.9, sd=0.05, low=1.8, high=2.0), rng)
    assert values.min() >= 1.8
    assert values.max() <= 2.0
