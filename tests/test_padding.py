"""Tests for working-buffer padding and pad policies."""

import numpy as np
import pytest

from oilib import UnsupportedPadPolicy
from oilib.core import ComputeConfig
from oilib.utils.padding import PadPolicy, pad_band, plan_padding, square_split


class TestPlanPadding:
    """Tests for the padding geometry."""

    def test_64x48_split(self):
        """A 64x48 image pads to an 80x80 buffer."""
        plan = plan_padding(64, 48)
        assert plan.square == ((0, 0), (8, 8))
        assert plan.margin == (8, 8)
        assert plan.size == 80
        assert plan.offset == (8, 16)

    def test_wide_image_pads_rows(self):
        """Wide images are squared by padding rows."""
        plan = plan_padding(48, 64)
        assert plan.square == ((8, 8), (0, 0))
        assert plan.offset == (16, 8)

    def test_odd_difference_extra_pixel_after(self):
        """An odd difference puts the extra pixel after."""
        assert square_split(5) == (2, 3)
        plan = plan_padding(10, 7)
        assert plan.square == ((0, 0), (1, 2))

    def test_working_size_even(self):
        """The working size is forced even."""
        plan = plan_padding(9, 9)
        assert plan.margin == (1, 2)
        assert plan.size == 12

    def test_margin_rounds_half_up(self):
        """Margins round half up."""
        # 20 * 0.125 = 2.5
        assert plan_padding(20, 20).margin == (3, 3)

    def test_zero_margin(self):
        """A zero margin fraction only squares."""
        plan = plan_padding(16, 16, margin_fraction=0.0)
        assert plan.size == 16
        assert plan.offset == (0, 0)

    def test_invalid_extent(self):
        """Empty extents are rejected."""
        with pytest.raises(ValueError):
            plan_padding(0, 10)


class TestPadBand:
    """Tests for filling the working buffer."""

    @pytest.fixture
    def band(self):
        rng = np.random.default_rng(0)
        return rng.uniform(1.0, 2.0, size=(64, 48))

    @pytest.mark.parametrize("policy", ["zero", "mean", "border"])
    def test_crop_restores_band(self, band, policy):
        """Cropping the buffer returns the band exactly."""
        plan = plan_padding(*band.shape)
        buffer = pad_band(band, plan, policy)
        assert buffer.shape == (80, 80)
        np.testing.assert_array_equal(plan.crop(buffer), band)

    def test_zero_policy(self, band):
        """Zero padding adds no light."""
        plan = plan_padding(*band.shape)
        buffer = pad_band(band, plan, "zero")
        assert buffer.sum() == pytest.approx(band.sum())
        assert np.all(buffer[:8] == 0)

    def test_mean_policy_fills_border_mean(self):
        """Mean padding uses the band's border mean."""
        band = np.zeros((8, 8))
        band[0, :] = band[-1, :] = band[:, 0] = band[:, -1] = 3.0
        plan = plan_padding(8, 8, margin_fraction=0.25)
        buffer = pad_band(band, plan, PadPolicy.MEAN)
        np.testing.assert_allclose(buffer[0], 3.0)
        np.testing.assert_allclose(buffer[:, -1], 3.0)

    def test_border_policy_replicates_edges(self):
        """Border padding replicates the edge pixels."""
        band = np.arange(16, dtype=float).reshape(4, 4)
        plan = plan_padding(4, 4, margin_fraction=0.5)
        buffer = pad_band(band, plan, "border")
        np.testing.assert_array_equal(buffer[0, 2:6], band[0])
        np.testing.assert_array_equal(buffer[2:6, 0], band[:, 0])

    def test_square_strips_are_zero(self, band):
        """Squaring strips stay zero under border padding."""
        plan = plan_padding(*band.shape)
        buffer = pad_band(band, plan, "border")
        # Zero strips from squaring are replicated into the margin
        assert np.all(buffer[:, :16] == 0)

    def test_shape_mismatch(self, band):
        """The band must match the plan."""
        with pytest.raises(ValueError):
            pad_band(band, plan_padding(48, 64))

    def test_crop_wrong_buffer(self, band):
        """Crop rejects a buffer of the wrong size."""
        with pytest.raises(ValueError):
            plan_padding(*band.shape).crop(np.zeros((10, 10)))


class TestPadPolicy:
    """Tests for pad policy parsing."""

    def test_parse_case_insensitive(self):
        """Policies parse case-insensitively."""
        assert PadPolicy.parse("MEAN") is PadPolicy.MEAN
        assert PadPolicy.parse(PadPolicy.BORDER) is PadPolicy.BORDER

    def test_unknown_token(self):
        """Unknown policies raise UnsupportedPadPolicy."""
        with pytest.raises(UnsupportedPadPolicy):
            PadPolicy.parse("reflect")
        with pytest.raises(UnsupportedPadPolicy):
            pad_band(np.ones((4, 4)), plan_padding(4, 4), "symmetric")

    def test_unsupported_is_value_error(self):
        """UnsupportedPadPolicy is a ValueError."""
        with pytest.raises(ValueError):
            ComputeConfig(pad_policy="wrap")


class TestComputeConfig:
    """Tests for engine configuration."""

    def test_defaults(self):
        """Default configuration values."""
        config = ComputeConfig()
        assert config.pad_policy is PadPolicy.ZERO
        assert config.margin_fraction == 0.125
        assert config.device == "cpu"
        assert config.workers >= 1

    def test_validate(self):
        """Negative margins and zero workers are rejected."""
        with pytest.raises(ValueError):
            ComputeConfig(margin_fraction=-0.1).validate()
        with pytest.raises(ValueError):
            ComputeConfig(max_workers=0).validate()
