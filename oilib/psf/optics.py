"""Wavefront model parameters and pupil-plane geometry."""

import logging
from dataclasses import dataclass, field
from typing import Mapping, Sequence, Tuple, Union

import numpy as np

from ..errors import InvalidOpticsSpec
from ..utils.fourier import centered_coords
from ..utils.zernike import coefficient_vector

__all__ = ["WavefrontSpec", "PupilGrid", "make_pupil_grid"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WavefrontSpec:
    """Immutable description of an optical system's wavefront.

    Pupil dimensions are in millimeters, the focal length in meters,
    wavelengths in nanometers and Zernike coefficients in microns. Use
    ``dataclasses.replace`` to derive a modified spec.

    Attributes:
        pupil_diameter_mm: Diameter of the calculation pupil.
        focal_length_m: Focal length.
        wavelengths: Wavelengths to compute, in nm.
        field_size_mm: Extent of the pupil plane at the measured wavelength.
        spatial_samples: Pupil-plane samples per side (even).
        measured_wavelength_nm: Wavelength at which ``field_size_mm`` holds
            and Zernike coefficients were measured.
        zernike_coeffs: OSA-ordered coefficients (microns), or a mapping
            keyed by OSA index, ZernikeMode or mode name.
        measured_pupil_mm: Pupil diameter over which the Zernike
            coefficients are defined. Defaults to ``pupil_diameter_mm``.
        aberrations: Additional Aberration objects applied to the pupil.

    Example:
        ```python
        spec = WavefrontSpec(
            pupil_diameter_mm=3.0,
            focal_length_m=0.017,
            wavelengths=(450.0, 550.0, 650.0),
            field_size_mm=16.0,
            spatial_samples=128,
            zernike_coeffs={"defocus": 0.25},
        )
        spec.pupil_sample_spacing_mm  # 0.125
        ```
    """

    pupil_diameter_mm: float
    focal_length_m: float
    wavelengths: Tuple[float, ...]
    field_size_mm: float = 16.0
    spatial_samples: int = 256
    measured_wavelength_nm: float = 550.0
    zernike_coeffs: Union[Sequence[float], Mapping] = ()
    measured_pupil_mm: float = None
    aberrations: tuple = field(default_factory=tuple)

    def __post_init__(self) -> None:
        """Validate and normalize fields."""
        wavelengths = tuple(float(w) for w in np.atleast_1d(self.wavelengths))
        object.__setattr__(self, "wavelengths", wavelengths)
        object.__setattr__(
            self, "zernike_coeffs", coefficient_vector(self.zernike_coeffs)
        )
        object.__setattr__(self, "aberrations", tuple(self.aberrations))
        if self.measured_pupil_mm is None:
            object.__setattr__(self, "measured_pupil_mm", self.pupil_diameter_mm)

        if not self.pupil_diameter_mm > 0:
            raise InvalidOpticsSpec(
                f"Pupil diameter must be positive, got {self.pupil_diameter_mm} mm"
            )
        if not self.focal_length_m > 0:
            raise InvalidOpticsSpec(
                f"Focal length must be positive, got {self.focal_length_m} m"
            )
        if not wavelengths:
            raise InvalidOpticsSpec("At least one wavelength is required")
        if not all(w > 0 for w in wavelengths):
            raise InvalidOpticsSpec(f"Wavelengths must be positive, got {wavelengths}")
        if not self.measured_wavelength_nm > 0:
            raise InvalidOpticsSpec(
                "Measured wavelength must be positive, got "
                f"{self.measured_wavelength_nm} nm"
            )
        if not self.field_size_mm > 0:
            raise InvalidOpticsSpec(
                f"Field size must be positive, got {self.field_size_mm} mm"
            )
        if self.spatial_samples <= 0 or self.spatial_samples % 2:
            raise InvalidOpticsSpec(
                f"Spatial samples must be a positive even number, got "
                f"{self.spatial_samples}"
            )
        if self.pupil_diameter_mm > self.measured_pupil_mm:
            raise InvalidOpticsSpec(
                f"Calculation pupil ({self.pupil_diameter_mm} mm) exceeds the "
                f"measured pupil ({self.measured_pupil_mm} mm)"
            )

    @property
    def focal_length_mm(self) -> float:
        return self.focal_length_m * 1e3

    @property
    def f_number(self) -> float:
        """Focal length over pupil diameter."""
        return self.focal_length_mm / self.pupil_diameter_mm

    @property
    def pupil_sample_spacing_mm(self) -> float:
        """Pupil-plane sample spacing at the measured wavelength."""
        return self.field_size_mm / self.spatial_samples

    def pupil_plane_size_mm(self, wavelength_nm: float) -> float:
        """Pupil-plane extent at ``wavelength_nm``.

        The extent scales with wavelength so that every wavelength's PSF
        has the same image-plane sample spacing.
        """
        return self.field_size_mm * wavelength_nm / self.measured_wavelength_nm


@dataclass(frozen=True)
class PupilGrid:
    """Pupil-plane coordinates for one wavelength, centered layout.

    Attributes:
        x: 2D array of x positions in the pupil plane (mm).
        y: 2D array of y positions in the pupil plane (mm).
        rho: 2D radial coordinate normalized by the measured pupil radius.
        phi: 2D azimuthal angle (radians).
        mask: 2D boolean array, True inside the calculation pupil.
        wavelength_nm: Wavelength the grid was built for.
        pupil_radius_mm: Calculation pupil radius.
    """

    x: np.ndarray
    y: np.ndarray
    rho: np.ndarray
    phi: np.ndarray
    mask: np.ndarray
    wavelength_nm: float
    pupil_radius_mm: float

    @property
    def shape(self) -> Tuple[int, int]:
        return self.mask.shape

    @property
    def spacing_mm(self) -> float:
        return float(self.x[0, 1] - self.x[0, 0])


def make_pupil_grid(spec: WavefrontSpec, wavelength_nm: float) -> PupilGrid:
    """Compute pupil-plane geometry for one wavelength.

    The grid has ``spec.spatial_samples`` points per side with the optical
    axis at index ``n // 2``.

    Args:
        spec: Wavefront description.
        wavelength_nm: Wavelength in nm.

    Returns:
        PupilGrid for that wavelength.
    """
    if not wavelength_nm > 0:
        raise InvalidOpticsSpec(f"Wavelength must be positive, got {wavelength_nm}")

    n = spec.spatial_samples
    size_mm = spec.pupil_plane_size_mm(wavelength_nm)
    coords = centered_coords(n, size_mm / n)
    x, y = np.meshgrid(coords, coords, indexing="xy")

    r = np.sqrt(x**2 + y**2)
    radius = spec.pupil_diameter_mm / 2.0
    mask = r <= radius

    if radius > coords[-1]:
        logger.warning(
            "Pupil (%.3g mm) does not fit in the %.3g mm pupil plane at %g nm; "
            "the PSF is undersampled",
            spec.pupil_diameter_mm,
            size_mm,
            wavelength_nm,
        )

    rho = r / (spec.measured_pupil_mm / 2.0)
    phi = np.arctan2(y, x)

    return PupilGrid(
        x=x,
        y=y,
        rho=rho,
        phi=phi,
        mask=mask,
        wavelength_nm=float(wavelength_nm),
        pupil_radius_mm=radius,
    )
