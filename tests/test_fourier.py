"""Tests for Fourier layout helpers."""

import numpy as np
import pytest

from oilib.utils import (
    centered_coords,
    fft_coords,
    frequency_support,
    to_centered,
    to_origin,
)


class TestCoordinates:
    """Tests for coordinate vectors in both layouts."""

    def test_fft_coords(self):
        """FFT-order coordinates start at zero."""
        np.testing.assert_allclose(fft_coords(4, 0.5), [0.0, 0.5, -1.0, -0.5])

    def test_centered_coords_zero_at_middle(self):
        """Centered coordinates put zero at n // 2."""
        x = centered_coords(8, 0.25)
        assert x[4] == 0.0
        assert x[0] == -1.0
        assert x[-1] == 0.75

    def test_layouts_agree(self):
        """Shifting centered coordinates gives FFT order."""
        np.testing.assert_allclose(to_origin(centered_coords(6)[None, :])[0], fft_coords(6))

    def test_frequency_support(self):
        """Frequency support in both layouts."""
        f = frequency_support(4, 0.5)
        np.testing.assert_allclose(f, [0.0, 0.5, -1.0, -0.5])
        np.testing.assert_allclose(frequency_support(4, 0.5, centered=True), [-1.0, -0.5, 0.0, 0.5])


class TestShifts:
    """Tests for moving the zero sample between layouts."""

    @pytest.mark.parametrize("n", [6, 7])
    def test_round_trip(self, n):
        """Shifts invert exactly for even and odd sizes."""
        x = np.random.default_rng(0).normal(size=(3, n, n))
        np.testing.assert_array_equal(to_origin(to_centered(x)), x)

    def test_only_last_two_axes(self):
        """Leading axes are not shifted."""
        x = np.zeros((2, 4, 4))
        x[1, 0, 0] = 1.0
        y = to_centered(x)
        assert y[1, 2, 2] == 1.0
        assert y[0].sum() == 0.0
