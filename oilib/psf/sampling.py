"""Matching wavefront sampling to an image grid.

Image-plane and pupil-plane sampling are Fourier conjugates. For N samples
per side, focal length f and wavelength λ:

    pupil spacing  = λ f / (image spacing × N)
    pupil extent   = pupil spacing × N = λ f / image spacing

:func:`match_sampling` is the one place this identity is applied.
"""

import dataclasses
import logging
from typing import Optional

from ..errors import IncompatibleGrid, InvalidOpticsSpec
from ..utils.units import PhysicalLength
from .optics import WavefrontSpec

__all__ = [
    "match_sampling",
    "psf_sample_spacing",
    "pupil_sample_spacing",
    "otf_frequency_spacing",
    "airy_radius",
]

logger = logging.getLogger(__name__)


def _require_length(value, name: str) -> PhysicalLength:
    if not isinstance(value, PhysicalLength):
        raise TypeError(f"{name} must be a PhysicalLength, got {type(value).__name__}")
    return value


def match_sampling(
    spec: WavefrontSpec,
    target_pitch: PhysicalLength,
    target_size: int,
    reference_wavelength_nm: Optional[float] = None,
) -> WavefrontSpec:
    """Return a spec whose PSF is sampled at ``target_pitch`` on a
    ``target_size`` grid.

    Args:
        spec: Wavefront description to adapt.
        target_pitch: Image-plane sample spacing to match (e.g. pixel pitch).
        target_size: Samples per side of the PSF (the working buffer size).
        reference_wavelength_nm: Wavelength at which the pupil extent is
            set. Defaults to the spec's measured wavelength. Every other
            wavelength's pupil extent scales with λ, so all kernels share
            ``target_pitch``.

    Returns:
        New WavefrontSpec with ``field_size_mm``, ``spatial_samples`` and
        ``measured_wavelength_nm`` replaced.

    Raises:
        InvalidOpticsSpec: Non-positive pitch, size or wavelength.
        IncompatibleGrid: Odd ``target_size``.

    Example:
        ```python
        matched = match_sampling(spec, PhysicalLength(2, "um"), 128)
        psf_sample_spacing(matched).um  # 2.0
        ```
    """
    target_pitch = _require_length(target_pitch, "target_pitch")
    if not target_pitch.value > 0:
        raise InvalidOpticsSpec(f"Target pitch must be positive, got {target_pitch}")
    if target_size <= 0:
        raise InvalidOpticsSpec(f"Target size must be positive, got {target_size}")
    if target_size % 2:
        raise IncompatibleGrid(f"Target size must be even, got {target_size}")

    if reference_wavelength_nm is None:
        reference_wavelength_nm = spec.measured_wavelength_nm
    if not reference_wavelength_nm > 0:
        raise InvalidOpticsSpec(
            f"Reference wavelength must be positive, got {reference_wavelength_nm}"
        )

    wavelength_mm = reference_wavelength_nm * 1e-6
    pupil_spacing_mm = (wavelength_mm * spec.focal_length_mm) / (
        target_pitch.mm * target_size
    )
    field_size_mm = pupil_spacing_mm * target_size

    logger.debug(
        "Matched %s pitch on %d samples: pupil spacing %.4g mm, field %.4g mm",
        target_pitch,
        target_size,
        pupil_spacing_mm,
        field_size_mm,
    )
    return dataclasses.replace(
        spec,
        field_size_mm=field_size_mm,
        spatial_samples=int(target_size),
        measured_wavelength_nm=float(reference_wavelength_nm),
    )


def psf_sample_spacing(spec: WavefrontSpec) -> PhysicalLength:
    """Image-plane sample spacing of every PSF computed from ``spec``."""
    spacing_mm = (
        spec.measured_wavelength_nm * 1e-6 * spec.focal_length_mm / spec.field_size_mm
    )
    return PhysicalLength(spacing_mm, "mm")


def pupil_sample_spacing(
    spec: WavefrontSpec, wavelength_nm: Optional[float] = None
) -> PhysicalLength:
    """Pupil-plane sample spacing at ``wavelength_nm`` (default: measured)."""
    if wavelength_nm is None:
        wavelength_nm = spec.measured_wavelength_nm
    size_mm = spec.pupil_plane_size_mm(wavelength_nm)
    return PhysicalLength(size_mm / spec.spatial_samples, "mm")


def otf_frequency_spacing(spec: WavefrontSpec) -> float:
    """OTF frequency sample spacing in cycles/mm."""
    return 1.0 / (spec.spatial_samples * psf_sample_spacing(spec).mm)


def airy_radius(
    wavelength_nm: float,
    focal_length: PhysicalLength,
    pupil_diameter: PhysicalLength,
) -> PhysicalLength:
    """Radius of the first dark ring of the Airy pattern, 1.22 λ f / D.

    Example:
        ```python
        airy_radius(550, PhysicalLength(17, "mm"), PhysicalLength(3, "mm")).um  # ~3.80
        ```
    """
    focal_length = _require_length(focal_length, "focal_length")
    pupil_diameter = _require_length(pupil_diameter, "pupil_diameter")
    radius_m = 1.22 * wavelength_nm * 1e-9 * focal_length.m / pupil_diameter.m
    return PhysicalLength(radius_m * 1e6, "um")
