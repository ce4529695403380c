"""Aperture amplitude masks.

Masks are evaluated on coordinates normalized by the calculation pupil
radius, so one mask applies unchanged at every wavelength and pupil-plane
sampling. The circular pupil boundary is applied separately by
:func:`oilib.psf.pupil.make_pupil`.
"""

from abc import ABC, abstractmethod
from typing import Optional

import numpy as np
from scipy import ndimage

__all__ = [
    "ApertureMask",
    "PolygonAperture",
    "ArrayAperture",
    "make_flare_aperture",
    "sample_normalized",
]


def sample_normalized(data: np.ndarray, u: np.ndarray, v: np.ndarray) -> np.ndarray:
    """Bilinear lookup of ``data`` at normalized coordinates in [-1, 1].

    ``u`` runs along columns and ``v`` along rows; index 0 and -1 of each
    axis sit at -1 and +1. Points outside the square read as zero.
    """
    ny, nx = data.shape
    cols = (np.asarray(u) + 1.0) * 0.5 * (nx - 1)
    rows = (np.asarray(v) + 1.0) * 0.5 * (ny - 1)
    return ndimage.map_coordinates(
        data, [rows, cols], order=1, mode="constant", cval=0.0
    )


class ApertureMask(ABC):
    """Amplitude transmission over the pupil, values in [0, 1]."""

    @abstractmethod
    def __call__(self, u: np.ndarray, v: np.ndarray) -> np.ndarray:
        """Evaluate the mask at normalized pupil coordinates (u, v)."""


class PolygonAperture(ApertureMask):
    """Regular polygon inscribed in the pupil circle (diaphragm blades).

    Args:
        n_sides: Number of blades. Zero gives a fully open circular aperture.
        rotation: Rotation of the first vertex from the +u axis (radians).
    """

    def __init__(self, n_sides: int, rotation: float = 0.0):
        if n_sides != 0 and n_sides < 3:
            raise ValueError(f"A polygon needs at least 3 sides, got {n_sides}")
        self.n_sides = n_sides
        self.rotation = rotation

    def __call__(self, u: np.ndarray, v: np.ndarray) -> np.ndarray:
        u = np.asarray(u, dtype=np.float64)
        v = np.asarray(v, dtype=np.float64)
        if self.n_sides == 0:
            return np.ones(np.broadcast(u, v).shape)

        apothem = np.cos(np.pi / self.n_sides)
        inside = np.ones(np.broadcast(u, v).shape, dtype=bool)
        for k in range(self.n_sides):
            normal = self.rotation + np.pi / self.n_sides + 2 * np.pi * k / self.n_sides
            inside &= u * np.cos(normal) + v * np.sin(normal) <= apothem + 1e-12
        return inside.astype(np.float64)

    def __repr__(self) -> str:
        return f"PolygonAperture(n_sides={self.n_sides}, rotation={self.rotation})"


class ArrayAperture(ApertureMask):
    """Directly sampled amplitude map over the square circumscribing the pupil.

    Args:
        amplitude: 2D array of transmission values in [0, 1].
    """

    def __init__(self, amplitude: np.ndarray):
        amplitude = np.asarray(amplitude, dtype=np.float64)
        if amplitude.ndim != 2 or min(amplitude.shape) < 2:
            raise ValueError(f"Aperture must be a 2D array, got shape {amplitude.shape}")
        if amplitude.min() < 0 or amplitude.max() > 1:
            raise ValueError("Aperture amplitude must lie in [0, 1]")
        self.amplitude = amplitude

    def __call__(self, u: np.ndarray, v: np.ndarray) -> np.ndarray:
        return sample_normalized(self.amplitude, u, v)

    def __repr__(self) -> str:
        return f"ArrayAperture(shape={self.amplitude.shape})"


def make_flare_aperture(
    n_sides: int = 0,
    rotation: float = 0.0,
    dot_mean: float = 20.0,
    dot_sd: float = 3.0,
    dot_opacity: float = 0.5,
    dot_radius: float = 1.0 / 30.0,
    line_mean: float = 20.0,
    line_sd: float = 2.0,
    line_opacity: float = 0.5,
    line_width: float = 0.005,
    resolution: int = 512,
    seed: Optional[int] = None,
) -> ArrayAperture:
    """Aperture with diaphragm blades, dust and scratches, a source of flare.

    The number of dots and of lines are drawn from normal distributions
    (absolute value, rounded). Dots are disks of random radius up to
    ``dot_radius``; lines are segments between random points. Each defect
    multiplies the local transmission by ``1 - opacity``. Lengths are in
    units of the pupil radius.

    Args:
        n_sides: Diaphragm blades (0 for a circular aperture).
        rotation: Blade rotation (radians).
        dot_mean, dot_sd: Distribution of the number of dust dots.
        dot_opacity: Opacity of each dot, in [0, 1].
        dot_radius: Maximum dot radius.
        line_mean, line_sd: Distribution of the number of scratches.
        line_opacity: Opacity of each scratch, in [0, 1].
        line_width: Scratch width.
        resolution: Samples per side of the generated map.
        seed: Seed for ``numpy.random.default_rng``.

    Returns:
        ArrayAperture holding the generated map.

    Example:
        ```python
        aperture = make_flare_aperture(n_sides=6, seed=0)
        psf = compute_psf(spec, aperture=aperture)
        ```
    """
    for name, value in (("dot_opacity", dot_opacity), ("line_opacity", line_opacity)):
        if not 0.0 <= value <= 1.0:
            raise ValueError(f"{name} must be in [0, 1], got {value}")

    rng = np.random.default_rng(seed)
    coords = np.linspace(-1.0, 1.0, resolution)
    u, v = np.meshgrid(coords, coords, indexing="xy")

    amplitude = PolygonAperture(n_sides, rotation)(u, v)

    n_dots = int(round(abs(rng.normal(dot_mean, dot_sd))))
    for _ in range(n_dots):
        cu, cv = rng.uniform(-1.0, 1.0, size=2)
        radius = rng.uniform(0.0, dot_radius)
        inside = (u - cu) ** 2 + (v - cv) ** 2 <= radius**2
        amplitude[inside] *= 1.0 - dot_opacity

    n_lines = int(round(abs(rng.normal(line_mean, line_sd))))
    for _ in range(n_lines):
        start = rng.uniform(-1.0, 1.0, size=2)
        end = rng.uniform(-1.0, 1.0, size=2)
        inside = _segment_distance(u, v, start, end) <= line_width / 2.0
        amplitude[inside] *= 1.0 - line_opacity

    return ArrayAperture(amplitude)


def _segment_distance(u, v, start, end) -> np.ndarray:
    """Distance from each (u, v) point to the segment start-end."""
    d = end - start
    length_sq = float(d @ d)
    if length_sq == 0.0:
        return np.hypot(u - start[0], v - start[1])
    t = np.clip(((u - start[0]) * d[0] + (v - start[1]) * d[1]) / length_sq, 0.0, 1.0)
    return np.hypot(u - (start[0] + t * d[0]), v - (start[1] + t * d[1]))
