"""Wavefront aberrations applied to the pupil function."""

from .base import Aberration, apply_aberrations, total_wavefront
from .zernike import ZernikeAberration, WavefrontMap
from .geometric import (
    Defocus,
    HumanLCA,
    defocus_diopters_to_microns,
    human_lca_diopters,
)

__all__ = [
    "Aberration",
    "apply_aberrations",
    "total_wavefront",
    "ZernikeAberration",
    "WavefrontMap",
    "Defocus",
    "HumanLCA",
    "defocus_diopters_to_microns",
    "human_lca_diopters",
]
