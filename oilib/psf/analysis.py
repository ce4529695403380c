"""Measurements on PSF kernels: line slices, FWHM, Airy first null."""

import numpy as np

from ..utils.fourier import centered_coords
from ..utils.units import PhysicalLength
from .stacks import PSFStack

__all__ = ["psf_line", "measure_fwhm", "first_null_radius"]


def psf_line(
    psf: PSFStack, wavelength: float, axis: str = "x", unit: str = "um"
) -> tuple[np.ndarray, np.ndarray]:
    """Slice through the optical axis of one PSF kernel.

    Args:
        psf: PSF stack.
        wavelength: Wavelength (nm) of the kernel.
        axis: ``"x"`` for the central row, ``"y"`` for the central column.
        unit: Length unit of the returned sample positions.

    Returns:
        (positions, values), positions zero on the optical axis.
    """
    kernel = psf[wavelength]
    center = psf.size // 2
    if axis == "x":
        values = kernel[center, :]
    elif axis == "y":
        values = kernel[:, center]
    else:
        raise ValueError(f"axis must be 'x' or 'y', got {axis!r}")
    positions = centered_coords(psf.size, psf.spacing.to(unit))
    return positions, np.array(values)


def _peak_row(kernel: np.ndarray) -> tuple[np.ndarray, int]:
    row, col = np.unravel_index(np.argmax(kernel), kernel.shape)
    return kernel[row, :], int(col)


def measure_fwhm(kernel: np.ndarray, spacing: PhysicalLength) -> PhysicalLength:
    """Full width at half maximum along the row through the peak.

    Half-maximum crossings are located by linear interpolation between
    samples.
    """
    profile, peak = _peak_row(np.asarray(kernel, dtype=np.float64))
    half = profile[peak] / 2.0

    def crossing(step: int) -> float:
        k = peak
        while 0 <= k + step < profile.size and profile[k + step] > half:
            k += step
        if not 0 <= k + step < profile.size:
            raise ValueError("PSF does not fall to half maximum inside the kernel")
        a, b = profile[k], profile[k + step]
        return k + step * (a - half) / (a - b)

    width = crossing(1) - crossing(-1)
    return PhysicalLength(width * spacing.value, spacing.unit)


def first_null_radius(kernel: np.ndarray, spacing: PhysicalLength) -> PhysicalLength:
    """Distance from the peak to the first local minimum along the peak row."""
    profile, peak = _peak_row(np.asarray(kernel, dtype=np.float64))
    for k in range(peak + 1, profile.size - 1):
        if profile[k] <= profile[k - 1] and profile[k] <= profile[k + 1]:
            return PhysicalLength((k - peak) * spacing.value, spacing.unit)
    raise ValueError("No local minimum found to the right of the PSF peak")
