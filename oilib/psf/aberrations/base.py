"""Base class for wavefront aberrations."""

from abc import ABC, abstractmethod

import numpy as np

from ..optics import PupilGrid, WavefrontSpec

__all__ = ["Aberration", "apply_aberrations", "total_wavefront"]


class Aberration(ABC):
    """Abstract base class for pupil aberrations.

    An aberration contributes an optical path difference (microns) over
    the pupil. Calling it returns the complex phase factor
    ``exp(2πi W / λ)`` to multiply with the pupil.

    Example:
        ```python
        aberr = Defocus(diopters=0.5)
        pupil_aberrated = pupil * aberr(grid, spec)
        ```
    """

    @abstractmethod
    def wavefront(self, grid: PupilGrid, spec: WavefrontSpec) -> np.ndarray:
        """Optical path difference in microns, same shape as the grid."""

    def __call__(self, grid: PupilGrid, spec: WavefrontSpec) -> np.ndarray:
        wavelength_um = grid.wavelength_nm * 1e-3
        phase = 2.0 * np.pi * self.wavefront(grid, spec) / wavelength_um
        return np.exp(1j * phase)


def total_wavefront(grid: PupilGrid, spec: WavefrontSpec, aberrations) -> np.ndarray:
    """Sum of the wavefronts of several aberrations (microns)."""
    w = np.zeros(grid.shape, dtype=np.float64)
    for aberr in aberrations:
        w += aberr.wavefront(grid, spec)
    return w


def apply_aberrations(
    pupil: np.ndarray,
    grid: PupilGrid,
    spec: WavefrontSpec,
    aberrations: list[Aberration],
) -> np.ndarray:
    """Apply a sequence of aberrations to a pupil function.

    Aberrations compose by multiplication (wavefronts add).
    """
    if not aberrations:
        return pupil.copy()
    w = total_wavefront(grid, spec, aberrations)
    wavelength_um = grid.wavelength_nm * 1e-3
    return pupil * np.exp(2j * np.pi * w / wavelength_um)
