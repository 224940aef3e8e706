"""Tests for temperature jitter noise."""

import numpy as np
from py_hexmap.core.noise import NOISE_CHANNELS, noise_channels, value_noise


class TestValueNoise:
    def test_shape_and_range(self):
        field = value_noise(30, 20, seed=5)
        assert field.shape == (20, 30)
        assert field.min() >= 0.0
        assert field.max() <= 1.0

    def test_seeded(self):
        np.testing.assert_array_equal(value_noise(10, 10, seed=3), value_noise(10, 10, seed=3))
        assert not np.array_equal(value_noise(10, 10, seed=3), value_noise(10, 10, seed=4))

    def test_smooth_between_neighbors(self):
        field = value_noise(40, 40, seed=1, octaves=1)
        assert np.abs(np.diff(field, axis=1)).max() < 0.5

    def test_channels(self):
        channels = noise_channels(10, 5, seed=2**32 - 1)
        assert len(channels) == NOISE_CHANNELS
        assert all(channel.shape == (50,) for channel in channels)
        assert not np.array_equal(channels[0], channels[1])
