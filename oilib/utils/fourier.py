"""Fourier transform utilities and index-layout conversions.

Two layouts are used throughout the package:

- **origin**: the zero sample (DC) sits at index 0, the natural FFT layout.
- **centered**: the zero sample sits at index ``n // 2``, the layout used for
  display, interpolation and spatially centered PSF kernels.

``to_centered`` and ``to_origin`` are exact inverses for both even and odd
sizes.
"""

import numpy as np
from numpy.fft import fftfreq

__all__ = [
    "fft_coords",
    "centered_coords",
    "frequency_support",
    "to_centered",
    "to_origin",
]


def fft_coords(n: int, spacing: float = 1.0) -> np.ndarray:
    """Real-space coordinates in origin layout.

    Returns:
        ``[0, d, 2d, ..., -2d, -d]`` for spacing ``d``.

    Example:
        ```python
        fft_coords(4, 0.5)  # [ 0. ,  0.5, -1. , -0.5]
        ```
    """
    return fftfreq(n) * n * spacing


def centered_coords(n: int, spacing: float = 1.0) -> np.ndarray:
    """Coordinates in centered layout, zero at index ``n // 2``."""
    return (np.arange(n) - n // 2) * spacing


def frequency_support(n: int, spacing: float, centered: bool = False) -> np.ndarray:
    """Spatial frequencies sampled by an ``n``-point FFT.

    Args:
        n: Number of samples.
        spacing: Real-space sample spacing.
        centered: If True, return the centered layout (DC at ``n // 2``).

    Returns:
        1D array of frequencies in cycles per unit of ``spacing``.
    """
    freq = fftfreq(n, d=spacing)
    if centered:
        freq = np.fft.fftshift(freq)
    return freq


def to_centered(x: np.ndarray) -> np.ndarray:
    """Move the zero sample of the last two axes from index 0 to ``n // 2``."""
    return np.fft.fftshift(x, axes=(-2, -1))


def to_origin(x: np.ndarray) -> np.ndarray:
    """Move the zero sample of the last two axes from ``n // 2`` to index 0."""
    return np.fft.ifftshift(x, axes=(-2, -1))
