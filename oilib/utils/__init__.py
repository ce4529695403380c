"""Mathematical utilities: Fourier layouts, Zernike polynomials, units, padding."""

from .fourier import (
    fft_coords,
    centered_coords,
    frequency_support,
    to_centered,
    to_origin,
)
from .zernike import (
    ZernikeMode,
    ansi_to_nm,
    nm_to_ansi,
    noll_to_ansi,
    zernike_polynomial,
    zernike_wavefront,
    coefficient_vector,
)
from .units import PhysicalLength, length, convert
from .padding import PadPolicy, PadPlan, plan_padding, pad_band, square_split

__all__ = [
    # Fourier utilities
    "fft_coords",
    "centered_coords",
    "frequency_support",
    "to_centered",
    "to_origin",
    # Zernike polynomials
    "ZernikeMode",
    "ansi_to_nm",
    "nm_to_ansi",
    "noll_to_ansi",
    "zernike_polynomial",
    "zernike_wavefront",
    "coefficient_vector",
    # Units
    "PhysicalLength",
    "length",
    "convert",
    # Padding
    "PadPolicy",
    "PadPlan",
    "plan_padding",
    "pad_band",
    "square_split",
]
