"""Zernike polynomial computation.

Uses OSA/ANSI standard indexing (0-based):
    j = (n * (n + 2) + m) / 2

where n is radial order and m is azimuthal frequency. Polynomials are
orthonormal over the unit disk, so a coefficient is the RMS wavefront of
its mode.

Reference:
    Thibos et al. (2002), "Standards for Reporting the Optical
    Aberrations of Eyes", J. Refractive Surgery 18(5): S652-S660
"""

from enum import IntEnum
from functools import lru_cache
from math import factorial
from typing import Mapping, Sequence, Union

import numpy as np

__all__ = [
    "ZernikeMode",
    "ansi_to_nm",
    "nm_to_ansi",
    "noll_to_ansi",
    "zernike_polynomial",
    "zernike_wavefront",
    "coefficient_vector",
]


class ZernikeMode(IntEnum):
    """Named low-order modes, valued by their OSA/ANSI index."""

    PISTON = 0
    VERTICAL_TILT = 1
    HORIZONTAL_TILT = 2
    OBLIQUE_ASTIGMATISM = 3
    DEFOCUS = 4
    VERTICAL_ASTIGMATISM = 5
    VERTICAL_TREFOIL = 6
    VERTICAL_COMA = 7
    HORIZONTAL_COMA = 8
    OBLIQUE_TREFOIL = 9
    OBLIQUE_QUADRAFOIL = 10
    OBLIQUE_SECONDARY_ASTIGMATISM = 11
    PRIMARY_SPHERICAL = 12
    VERTICAL_SECONDARY_ASTIGMATISM = 13
    VERTICAL_QUADRAFOIL = 14

    @classmethod
    def from_name(cls, name: str) -> "ZernikeMode":
        """Look up a mode by name, e.g. ``"defocus"`` or ``"vertical_coma"``."""
        key = name.strip().upper().replace(" ", "_").replace("-", "_")
        try:
            return cls[key]
        except KeyError:
            raise ValueError(f"Unknown Zernike mode name: {name!r}") from None


def ansi_to_nm(j: int) -> tuple[int, int]:
    """Convert ANSI single index j to (n, m) radial/azimuthal orders.

    Example:
        >>> ansi_to_nm(4)  # Defocus
        (2, 0)
        >>> ansi_to_nm(12)  # Spherical
        (4, 0)
    """
    if j < 0:
        raise ValueError(f"ANSI index must be >= 0, got {j}")
    n = int(np.ceil((-3 + np.sqrt(9 + 8 * j)) / 2))
    m = 2 * j - n * (n + 2)
    return n, m


def nm_to_ansi(n: int, m: int) -> int:
    """Convert (n, m) orders to the ANSI single index."""
    if abs(m) > n or (n - m) % 2:
        raise ValueError(f"Invalid Zernike orders (n={n}, m={m})")
    return (n * (n + 2) + m) // 2


def noll_to_ansi(noll_index: int) -> int:
    """Convert Noll index (1-based) to ANSI index (0-based).

    Noll assigns even indices to cosine (m > 0) terms and odd indices to
    sine (m < 0) terms within each radial order.

    Example:
        >>> noll_to_ansi(4)  # Defocus
        4
        >>> noll_to_ansi(11)  # Spherical
        12
    """
    if noll_index < 1:
        raise ValueError(f"Noll index must be >= 1, got {noll_index}")

    n = int(np.ceil((-3 + np.sqrt(1 + 8 * noll_index)) / 2))
    rank = noll_index - n * (n + 1) // 2
    if n % 2 == 0:
        m = 2 * (rank // 2)
    else:
        m = 2 * ((rank + 1) // 2) - 1
    if m != 0 and noll_index % 2:
        m = -m
    return nm_to_ansi(n, m)


@lru_cache(maxsize=256)
def _radial_coefficients(m: int, n: int) -> tuple:
    """Coefficients and powers of the radial polynomial R_n^m."""
    coeffs = []
    for k in range((n - m) // 2 + 1):
        numerator = (-1) ** k * factorial(n - k)
        denominator = (
            factorial(k)
            * factorial((n + m) // 2 - k)
            * factorial((n - m) // 2 - k)
        )
        coeffs.append((numerator / denominator, n - 2 * k))
    return tuple(coeffs)


def zernike_polynomial(j: int, rho: np.ndarray, phi: np.ndarray) -> np.ndarray:
    """Evaluate the orthonormal Zernike polynomial Z_j.

    Args:
        j: ANSI/OSA single index.
        rho: Normalized radial coordinate (0 to 1 within pupil).
        phi: Azimuthal angle (radians).

    Returns:
        Z_j evaluated at each (rho, phi) point.
    """
    n, m = ansi_to_nm(j)
    norm = np.sqrt(2.0 * (n + 1) / (1.0 + float(m == 0)))

    radial = np.zeros_like(rho, dtype=np.float64)
    for coeff, power in _radial_coefficients(abs(m), n):
        radial += coeff * np.power(rho, power)

    if m >= 0:
        return norm * radial * np.cos(m * phi)
    return norm * radial * np.sin(abs(m) * phi)


ZernikeKey = Union[int, str, ZernikeMode]


def coefficient_vector(
    coeffs: Union[Sequence[float], Mapping[ZernikeKey, float], None],
) -> tuple[float, ...]:
    """Normalize Zernike coefficients to a tuple in OSA order.

    Accepts a sequence already in OSA order, or a mapping keyed by OSA
    index, :class:`ZernikeMode` or mode name. Trailing zeros are dropped.

    Example:
        >>> coefficient_vector({"defocus": 0.5})
        (0.0, 0.0, 0.0, 0.0, 0.5)
    """
    if coeffs is None:
        return ()
    if isinstance(coeffs, Mapping):
        indexed = {}
        for key, value in coeffs.items():
            j = ZernikeMode.from_name(key) if isinstance(key, str) else int(key)
            if j < 0:
                raise ValueError(f"Zernike index must be >= 0, got {j}")
            indexed[int(j)] = float(value)
        vector = [0.0] * (max(indexed, default=-1) + 1)
        for j, value in indexed.items():
            vector[j] = value
    else:
        vector = [float(c) for c in coeffs]

    while vector and vector[-1] == 0.0:
        vector.pop()
    return tuple(vector)


def zernike_wavefront(
    coeffs: Sequence[float], rho: np.ndarray, phi: np.ndarray
) -> np.ndarray:
    """Sum of coefficient-weighted Zernike polynomials.

    Args:
        coeffs: Coefficients in OSA order, in the unit of the returned
            wavefront (microns throughout oilib).
        rho: Normalized radial coordinate.
        phi: Azimuthal angle (radians).
    """
    wavefront = np.zeros(np.shape(rho), dtype=np.float64)
    for j, c in enumerate(coeffs):
        if c != 0.0:
            wavefront += c * zernike_polynomial(j, rho, phi)
    return wavefront
