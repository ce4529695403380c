"""Aberrations described by Zernike coefficients or sampled wavefront maps."""

from typing import Mapping, Sequence, Union

import numpy as np

from ...utils.zernike import coefficient_vector, zernike_wavefront
from ..aperture import sample_normalized
from ..optics import PupilGrid, WavefrontSpec
from .base import Aberration

__all__ = ["ZernikeAberration", "WavefrontMap"]


class ZernikeAberration(Aberration):
    """Wavefront expanded in orthonormal OSA Zernike polynomials.

    Coefficients are in microns, defined over the measured pupil.

    Args:
        coeffs: Sequence in OSA order, or mapping keyed by OSA index,
            ZernikeMode or mode name.

    Example:
        ```python
        aberr = ZernikeAberration({"defocus": 0.5, "vertical_astigmatism": -0.2})
        ```
    """

    def __init__(self, coeffs: Union[Sequence[float], Mapping]):
        self.coeffs = coefficient_vector(coeffs)

    def wavefront(self, grid: PupilGrid, spec: WavefrontSpec) -> np.ndarray:
        return zernike_wavefront(self.coeffs, grid.rho, grid.phi)

    def __repr__(self) -> str:
        return f"ZernikeAberration(coeffs={self.coeffs})"


class WavefrontMap(Aberration):
    """Directly sampled wavefront over the measured pupil.

    The map covers the square circumscribing the measured pupil: index 0
    and index -1 along each axis sit at -1 and +1 pupil radii. Values are
    interpolated bilinearly onto each pupil grid.

    Args:
        opd_um: 2D optical path difference in microns.
    """

    def __init__(self, opd_um: np.ndarray):
        opd_um = np.asarray(opd_um, dtype=np.float64)
        if opd_um.ndim != 2 or min(opd_um.shape) < 2:
            raise ValueError(f"Wavefront map must be 2D, got shape {opd_um.shape}")
        self.opd_um = opd_um

    def wavefront(self, grid: PupilGrid, spec: WavefrontSpec) -> np.ndarray:
        radius = spec.measured_pupil_mm / 2.0
        return sample_normalized(self.opd_um, grid.x / radius, grid.y / radius)

    def __repr__(self) -> str:
        return f"WavefrontMap(shape={self.opd_um.shape})"

