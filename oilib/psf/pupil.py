"""Pupil function construction."""

from typing import Optional

import numpy as np

from ..utils.zernike import zernike_wavefront
from .aberrations import total_wavefront
from .aperture import ApertureMask
from .optics import PupilGrid, WavefrontSpec

__all__ = ["make_pupil", "pupil_amplitude", "pupil_wavefront"]


def pupil_amplitude(
    grid: PupilGrid, aperture: Optional[ApertureMask] = None
) -> np.ndarray:
    """Real amplitude: uniform disk, optionally times an aperture mask."""
    amplitude = grid.mask.astype(np.float64)
    if aperture is not None:
        radius = grid.pupil_radius_mm
        amplitude = amplitude * aperture(grid.x / radius, grid.y / radius)
    return amplitude


def pupil_wavefront(grid: PupilGrid, spec: WavefrontSpec) -> np.ndarray:
    """Wavefront aberration in microns from Zernike terms and extra aberrations."""
    w = zernike_wavefront(spec.zernike_coeffs, grid.rho, grid.phi)
    if spec.aberrations:
        w = w + total_wavefront(grid, spec, spec.aberrations)
    return w * grid.mask


def make_pupil(
    grid: PupilGrid,
    spec: WavefrontSpec,
    aperture: Optional[ApertureMask] = None,
) -> np.ndarray:
    """Create the complex pupil function for one wavelength.

    Args:
        grid: Pupil geometry from make_pupil_grid().
        spec: Wavefront description (aberrations).
        aperture: Optional amplitude mask (blades, dust, scratches).

    Returns:
        Complex pupil array in centered layout, zero outside the pupil.

    Physics:
        P(x, y) = A(x, y) * exp(2πi W(x, y) / λ)
    """
    amplitude = pupil_amplitude(grid, aperture)
    wavelength_um = grid.wavelength_nm * 1e-3
    phase = 2.0 * np.pi * pupil_wavefront(grid, spec) / wavelength_um
    return amplitude * np.exp(1j * phase)
