"""Defocus and chromatic aberrations."""

import numpy as np

from ...utils.zernike import ZernikeMode, zernike_polynomial
from ..optics import PupilGrid, WavefrontSpec
from .base import Aberration

__all__ = [
    "Defocus",
    "HumanLCA",
    "defocus_diopters_to_microns",
    "human_lca_diopters",
]


def defocus_diopters_to_microns(diopters: float, pupil_diameter_mm: float) -> float:
    """Zernike defocus coefficient (microns) equivalent to a defocus in diopters.

    c = D * d^2 / (16 * sqrt(3)), with d the pupil diameter in mm.
    """
    return diopters * pupil_diameter_mm**2 / (16.0 * np.sqrt(3.0))


def human_lca_diopters(reference_nm: float, wavelength_nm: float) -> float:
    """Longitudinal chromatic aberration of the human eye.

    Difference in refraction between ``reference_nm`` and ``wavelength_nm``
    from the chromatic-eye model of Thibos et al. (1992). Zero at the
    reference wavelength.

    Reference:
        Thibos, L.N. et al. "The chromatic eye: a new reduced-eye model of
        ocular chromatic aberration in humans." Appl. Opt. 31 (1992).
    """
    p, c = 0.63346, 0.2141
    return p / (reference_nm * 1e-3 - c) - p / (wavelength_nm * 1e-3 - c)


class Defocus(Aberration):
    """Pure defocus given in diopters.

    Args:
        diopters: Defocus, positive for a myopic (focus in front) error.

    Example:
        ```python
        aberr = Defocus(diopters=0.5)
        ```
    """

    def __init__(self, diopters: float):
        self.diopters = diopters

    def wavefront(self, grid: PupilGrid, spec: WavefrontSpec) -> np.ndarray:
        c = defocus_diopters_to_microns(self.diopters, spec.measured_pupil_mm)
        return c * zernike_polynomial(ZernikeMode.DEFOCUS, grid.rho, grid.phi)

    def __repr__(self) -> str:
        return f"Defocus(diopters={self.diopters})"


class HumanLCA(Aberration):
    """Wavelength-dependent defocus of the human eye.

    The eye is in focus at the spec's measured wavelength; other
    wavelengths receive the defocus given by :func:`human_lca_diopters`.
    """

    def wavefront(self, grid: PupilGrid, spec: WavefrontSpec) -> np.ndarray:
        diopters = -human_lca_diopters(spec.measured_wavelength_nm, grid.wavelength_nm)
        c = defocus_diopters_to_microns(diopters, spec.measured_pupil_mm)
        return c * zernike_polynomial(ZernikeMode.DEFOCUS, grid.rho, grid.phi)

    def __repr__(self) -> str:
        return "HumanLCA()"
