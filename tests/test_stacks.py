"""Tests for PSF/OTF stacks and their layout conversions."""

import numpy as np
import pytest

from oilib import CenteredOTFStack, InvalidOpticsSpec, OTFStack, PSFStack, PhysicalLength
from oilib.psf import normalize_dc


@pytest.fixture
def gaussian_psf():
    """Two Gaussian kernels of different width, peak at n // 2."""
    n = 32
    x = np.arange(n) - n // 2
    xx, yy = np.meshgrid(x, x)
    kernels = np.stack([np.exp(-(xx**2 + yy**2) / (2 * s**2)) for s in (1.5, 3.0)])
    kernels /= kernels.sum(axis=(1, 2), keepdims=True)
    return PSFStack((450.0, 650.0), kernels, PhysicalLength(2, "um"))


class TestWavelengthStack:
    """Tests for the mapping protocol shared by all stacks."""

    def test_mapping_protocol(self, gaussian_psf):
        """Stacks behave as read-only wavelength mappings."""
        assert len(gaussian_psf) == 2
        assert list(gaussian_psf) == [450.0, 650.0]
        assert 650.0 in gaussian_psf
        assert 550.0 not in gaussian_psf
        assert gaussian_psf[650.0].shape == (32, 32)
        assert gaussian_psf.size == 32
        for wavelength, plane in gaussian_psf.items():
            np.testing.assert_array_equal(plane, gaussian_psf[wavelength])

    def test_missing_wavelength(self, gaussian_psf):
        """Missing wavelengths raise KeyError."""
        with pytest.raises(KeyError):
            gaussian_psf[550.0]

    def test_data_read_only(self, gaussian_psf):
        """Stack data is read-only."""
        with pytest.raises(ValueError):
            gaussian_psf.data[0, 0, 0] = 1.0

    def test_source_array_copied(self):
        """Stacks copy their input array."""
        data = np.ones((1, 4, 4))
        stack = PSFStack((550.0,), data, PhysicalLength(1, "um"))
        data[0, 0, 0] = 5.0
        assert stack[550.0][0, 0] == 1.0

    def test_single_plane_promoted(self):
        """A single 2D plane becomes a one-wavelength stack."""
        stack = PSFStack(550.0, np.ones((4, 4)), PhysicalLength(1, "um"))
        assert stack.wavelengths == (550.0,)
        assert stack.data.shape == (1, 4, 4)

    def test_shape_validation(self):
        """Bad shapes, counts and spacing types are rejected."""
        with pytest.raises(ValueError):
            PSFStack((550.0,), np.ones((1, 4, 5)), PhysicalLength(1, "um"))
        with pytest.raises(ValueError):
            PSFStack((450.0, 550.0), np.ones((1, 4, 4)), PhysicalLength(1, "um"))
        with pytest.raises(TypeError):
            PSFStack((550.0,), np.ones((1, 4, 4)), 1e-6)


class TestConventions:
    """Tests for conversions between PSF and the two OTF layouts."""

    def test_convention_tags(self, gaussian_psf):
        """Each stack declares its layout."""
        otf = gaussian_psf.to_otf()
        assert gaussian_psf.convention == "centered"
        assert otf.convention == "origin"
        assert otf.to_centered().convention == "centered"

    def test_dc_is_one(self, gaussian_psf):
        """OTF DC is one in both layouts."""
        otf = gaussian_psf.to_otf()
        np.testing.assert_allclose(otf.data[:, 0, 0], 1.0)
        centered = otf.to_centered()
        np.testing.assert_allclose(centered.data[:, 16, 16], 1.0)

    def test_centered_origin_round_trip_exact(self, gaussian_psf):
        """Centered and origin layouts convert exactly."""
        otf = gaussian_psf.to_otf()
        back = otf.to_centered().to_origin()
        assert isinstance(back, OTFStack)
        np.testing.assert_array_equal(back.data, otf.data)

    def test_psf_round_trip(self, gaussian_psf):
        """PSF to OTF and back recovers the kernels."""
        psf = gaussian_psf.to_otf().to_psf()
        np.testing.assert_allclose(psf.data, gaussian_psf.data, atol=1e-14)

    def test_symmetric_psf_has_real_otf(self, gaussian_psf):
        """Symmetric kernels have real OTFs."""
        otf = gaussian_psf.to_otf()
        assert np.abs(otf.data.imag).max() < 1e-12

    def test_frequency_support(self, gaussian_psf):
        """Frequency axes in both layouts."""
        otf = gaussian_psf.to_otf()
        assert otf.frequency_spacing == pytest.approx(1.0 / (32 * 0.002))
        assert otf.support("mm")[0] == 0.0
        centered = otf.to_centered().support("mm")
        assert centered[16] == 0.0
        assert np.all(np.diff(centered) > 0)

    def test_mtf(self, gaussian_psf):
        """Narrower kernels pass more contrast."""
        otf = gaussian_psf.to_otf()
        mtf = otf.mtf(450.0)
        assert mtf[0, 0] == pytest.approx(1.0)
        assert mtf[0, 8] > otf.mtf(650.0)[0, 8]

    def test_mtf_keeps_stack_layout(self, gaussian_psf):
        """MTF planes follow the layout of the stack they come from."""
        otf = gaussian_psf.to_otf()
        centered = otf.to_centered()
        assert centered.mtf(450.0)[16, 16] == pytest.approx(1.0)
        np.testing.assert_array_equal(
            centered.mtf(450.0), np.fft.fftshift(otf.mtf(450.0))
        )

    def test_stored_centered_otf(self, gaussian_psf):
        """Stored centered data converts to the origin layout."""
        centered = CenteredOTFStack(
            gaussian_psf.wavelengths,
            gaussian_psf.to_otf().to_centered().data,
            gaussian_psf.spacing,
        )
        np.testing.assert_array_equal(
            centered.to_origin().data, gaussian_psf.to_otf().data
        )


class TestNormalizeDC:
    """Tests for DC normalization."""

    def test_scales_to_one(self):
        """DC is scaled to one."""
        otf = np.full((2, 4, 4), 2.0 + 0j)
        np.testing.assert_allclose(normalize_dc(otf)[:, 0, 0], 1.0)

    def test_zero_dc_raises(self):
        """Zero DC cannot be normalized."""
        with pytest.raises(InvalidOpticsSpec):
            normalize_dc(np.zeros((1, 4, 4), dtype=complex))
