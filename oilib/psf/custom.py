"""Resampling of stored (custom) OTF data onto an image's frequency grid."""

import logging
from typing import Sequence, Union

import numpy as np
from scipy.interpolate import RegularGridInterpolator

from ..utils.fourier import frequency_support
from ..utils.units import PhysicalLength
from .stacks import CenteredOTFStack, OTFStack, normalize_dc

__all__ = ["resample_otf"]

logger = logging.getLogger(__name__)


def _interpolate_plane(
    plane: np.ndarray, support: np.ndarray, fy: np.ndarray, fx: np.ndarray
) -> np.ndarray:
    """Linear interpolation of one centered complex plane, zero outside."""
    points = np.stack([fy.ravel(), fx.ravel()], axis=-1)
    parts = [
        RegularGridInterpolator(
            (support, support), part, method="linear", bounds_error=False, fill_value=0.0
        )(points)
        for part in (plane.real, plane.imag)
    ]
    return (parts[0] + 1j * parts[1]).reshape(fy.shape)


def _wavelength_weights(
    source: Sequence[float], wavelength: float
) -> list[tuple[int, float]]:
    """(index, weight) pairs for linear interpolation in wavelength, clamped."""
    order = np.argsort(source)
    waves = np.asarray(source)[order]
    if wavelength <= waves[0]:
        return [(int(order[0]), 1.0)]
    if wavelength >= waves[-1]:
        return [(int(order[-1]), 1.0)]
    hi = int(np.searchsorted(waves, wavelength))
    lo = hi - 1
    t = (wavelength - waves[lo]) / (waves[hi] - waves[lo])
    return [(int(order[lo]), 1.0 - t), (int(order[hi]), t)]


def resample_otf(
    otf: Union[CenteredOTFStack, OTFStack],
    wavelengths: Sequence[float],
    size: int,
    spacing: PhysicalLength,
) -> OTFStack:
    """Resample a stored OTF to the frequency grid of a working buffer.

    Args:
        otf: Stored OTF data. An origin-layout stack is converted to the
            centered layout first.
        wavelengths: Target wavelengths (nm). Between stored wavelengths
            the OTF is interpolated linearly; outside, the nearest stored
            plane is used.
        size: Samples per side of the working buffer.
        spacing: Image-plane sample spacing of the working buffer.

    Returns:
        OTFStack on the target grid, DC at origin, DC = 1. Frequencies
        beyond the stored support are zero.
    """
    if isinstance(otf, OTFStack):
        otf = otf.to_centered()

    support = otf.support("mm")
    target = frequency_support(size, spacing.mm)
    fy, fx = np.meshgrid(target, target, indexing="ij")

    if target.max() > support.max():
        logger.debug(
            "Target frequencies up to %.4g cyc/mm exceed stored support %.4g cyc/mm",
            target.max(),
            support.max(),
        )

    planes = {}
    data = np.zeros((len(wavelengths), size, size), dtype=np.complex128)
    for i, wavelength in enumerate(wavelengths):
        for j, weight in _wavelength_weights(otf.wavelengths, wavelength):
            if j not in planes:
                planes[j] = _interpolate_plane(otf.data[j], support, fy, fx)
            data[i] += weight * planes[j]

    return OTFStack(tuple(wavelengths), normalize_dc(data), spacing)
