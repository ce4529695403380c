"""Tests for matching wavefront sampling to an image grid."""

import logging

import pytest

from oilib import IncompatibleGrid, InvalidOpticsSpec, PhysicalLength, WavefrontSpec
from oilib.psf import (
    airy_radius,
    match_sampling,
    otf_frequency_spacing,
    psf_sample_spacing,
    pupil_sample_spacing,
)


@pytest.fixture
def spec():
    return WavefrontSpec(
        pupil_diameter_mm=3.0,
        focal_length_m=0.017,
        wavelengths=(450.0, 550.0, 650.0),
    )


class TestMatchSampling:
    """Tests for match_sampling."""

    def test_conjugate_identity(self, spec):
        """Pupil spacing is lambda f over pitch times N."""
        matched = match_sampling(spec, PhysicalLength(2, "um"), 128)
        # pupil spacing = λ f / (pitch N)
        expected = 550e-6 * 17.0 / (0.002 * 128)
        assert matched.pupil_sample_spacing_mm == pytest.approx(expected)
        assert matched.field_size_mm == pytest.approx(expected * 128)
        assert matched.spatial_samples == 128

    def test_psf_spacing_equals_pitch(self, spec):
        """Matched PSF spacing equals the target pitch."""
        pitch = PhysicalLength(1.4, "um")
        matched = match_sampling(spec, pitch, 96)
        assert psf_sample_spacing(matched).isclose(pitch)
        assert otf_frequency_spacing(matched) == pytest.approx(1.0 / (96 * pitch.mm))

    def test_returns_new_spec(self, spec):
        """The input spec is left unchanged."""
        matched = match_sampling(spec, PhysicalLength(2, "um"), 64)
        assert matched is not spec
        assert spec.spatial_samples == 256
        assert matched.pupil_diameter_mm == spec.pupil_diameter_mm
        assert matched.wavelengths == spec.wavelengths

    def test_reference_wavelength(self, spec):
        """Sampling can be referenced to another wavelength."""
        pitch = PhysicalLength(2, "um")
        matched = match_sampling(spec, pitch, 64, reference_wavelength_nm=450.0)
        assert matched.measured_wavelength_nm == 450.0
        assert psf_sample_spacing(matched).isclose(pitch)

    def test_pupil_spacing_per_wavelength(self, spec):
        """Pupil spacing scales with wavelength."""
        matched = match_sampling(spec, PhysicalLength(2, "um"), 128)
        s450 = pupil_sample_spacing(matched, 450.0).mm
        s550 = pupil_sample_spacing(matched).mm
        assert s450 / s550 == pytest.approx(450.0 / 550.0)

    def test_odd_size(self, spec):
        """Odd working sizes are incompatible."""
        with pytest.raises(IncompatibleGrid):
            match_sampling(spec, PhysicalLength(2, "um"), 127)

    @pytest.mark.parametrize(
        "pitch, size",
        [
            (PhysicalLength(0, "um"), 64),
            (PhysicalLength(-2, "um"), 64),
            (PhysicalLength(float("nan"), "um"), 64),
            (PhysicalLength(2, "um"), 0),
        ],
    )
    def test_invalid_geometry(self, spec, pitch, size):
        """Non-positive or NaN pitch and size are rejected."""
        with pytest.raises(InvalidOpticsSpec):
            match_sampling(spec, pitch, size)

    def test_pitch_needs_units(self, spec):
        """Pitch must carry units."""
        with pytest.raises(TypeError):
            match_sampling(spec, 2e-6, 64)

    def test_logs_geometry(self, spec, caplog):
        """Pupil geometry is logged at DEBUG."""
        with caplog.at_level(logging.DEBUG, logger="oilib.psf.sampling"):
            match_sampling(spec, PhysicalLength(2, "um"), 64)
        assert "pupil spacing" in caplog.text


class TestAiryRadius:
    """Tests for airy_radius."""

    def test_eye_value(self):
        """Airy radius for the 3 mm, 17 mm eye."""
        r = airy_radius(550, PhysicalLength(17, "mm"), PhysicalLength(3, "mm"))
        assert r.unit == "um"
        assert r.um == pytest.approx(1.22 * 0.55 * 17 / 3)

    def test_inverse_in_diameter(self):
        """Airy radius is inverse in pupil diameter."""
        f = PhysicalLength(17, "mm")
        wide = airy_radius(550, f, PhysicalLength(4, "mm"))
        narrow = airy_radius(550, f, PhysicalLength(2, "mm"))
        assert narrow / wide == pytest.approx(2.0)
