"""Wavelength-keyed PSF and OTF stacks.

Layouts are part of the type:

- :class:`PSFStack` holds spatial kernels with the peak (optical axis) at
  index ``(n // 2, n // 2)``.
- :class:`OTFStack` holds frequency data with DC at index ``(0, 0)``, the
  layout consumed by FFT convolution.
- :class:`CenteredOTFStack` holds frequency data with DC at
  ``(n // 2, n // 2)``, the layout used for display and interpolation.

``OTFStack.to_centered`` and ``CenteredOTFStack.to_origin`` convert
between the two OTF layouts exactly.
"""

from dataclasses import dataclass
from typing import Iterator, Tuple

import numpy as np

from ..errors import InvalidOpticsSpec
from ..utils.fourier import frequency_support, to_centered, to_origin
from ..utils.units import PhysicalLength

__all__ = ["PSFStack", "OTFStack", "CenteredOTFStack", "normalize_dc"]


def normalize_dc(otf: np.ndarray) -> np.ndarray:
    """Scale each plane of an origin-layout OTF so that |OTF[0, 0]| = 1."""
    dc = np.abs(otf[..., 0, 0])
    if np.any(dc <= 0):
        raise InvalidOpticsSpec("OTF has zero DC: the PSF carries no energy")
    return otf / dc[..., np.newaxis, np.newaxis]


@dataclass(frozen=True, eq=False)
class _WavelengthStack:
    """Read-only (nwave, n, n) array keyed by wavelength in nm."""

    wavelengths: Tuple[float, ...]
    data: np.ndarray
    spacing: PhysicalLength

    convention = None

    def __post_init__(self) -> None:
        wavelengths = tuple(float(w) for w in np.atleast_1d(self.wavelengths))
        data = np.array(self.data, copy=True)
        if data.ndim == 2:
            data = data[np.newaxis]
        if data.ndim != 3 or data.shape[1] != data.shape[2]:
            raise ValueError(
                f"Stack data must have shape (nwave, n, n), got {data.shape}"
            )
        if data.shape[0] != len(wavelengths):
            raise ValueError(
                f"{len(wavelengths)} wavelengths for {data.shape[0]} planes"
            )
        if not isinstance(self.spacing, PhysicalLength):
            raise TypeError(
                f"spacing must be a PhysicalLength, got {type(self.spacing).__name__}"
            )
        data.flags.writeable = False
        object.__setattr__(self, "wavelengths", wavelengths)
        object.__setattr__(self, "data", data)

    @property
    def size(self) -> int:
        """Samples per side of each plane."""
        return self.data.shape[-1]

    def index(self, wavelength: float) -> int:
        """Plane index of ``wavelength`` (nm)."""
        matches = np.flatnonzero(np.isclose(self.wavelengths, wavelength, atol=1e-6))
        if matches.size == 0:
            raise KeyError(f"No plane for wavelength {wavelength} nm")
        return int(matches[0])

    def __contains__(self, wavelength: float) -> bool:
        return bool(np.any(np.isclose(self.wavelengths, wavelength, atol=1e-6)))

    def __getitem__(self, wavelength: float) -> np.ndarray:
        return self.data[self.index(wavelength)]

    def __iter__(self) -> Iterator[float]:
        return iter(self.wavelengths)

    def __len__(self) -> int:
        return len(self.wavelengths)

    def items(self):
        return zip(self.wavelengths, self.data)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(wavelengths={self.wavelengths}, "
            f"size={self.size}, spacing={self.spacing})"
        )


class PSFStack(_WavelengthStack):
    """Spatial PSF kernels, peak at ``(n // 2, n // 2)``.

    Attributes:
        wavelengths: Wavelengths in nm.
        data: Real kernels, shape (nwave, n, n).
        spacing: Image-plane sample spacing.
    """

    convention = "centered"

    def to_otf(self) -> "OTFStack":
        """Fourier transform of each kernel, DC at origin, DC = 1."""
        otf = np.fft.fft2(to_origin(self.data), axes=(-2, -1))
        return OTFStack(self.wavelengths, normalize_dc(otf), self.spacing)


class _OTFStackBase(_WavelengthStack):
    @property
    def frequency_spacing(self) -> float:
        """Frequency sample spacing in cycles/mm."""
        return 1.0 / (self.size * self.spacing.mm)

    def mtf(self, wavelength: float) -> np.ndarray:
        """Modulation transfer function |OTF| at ``wavelength``.

        The plane keeps this stack's layout: DC at ``(0, 0)`` for an
        OTFStack, DC at ``(n // 2, n // 2)`` for a CenteredOTFStack. See
        ``convention``.
        """
        return np.abs(self[wavelength])


class OTFStack(_OTFStackBase):
    """OTF planes with DC at index ``(0, 0)``."""

    convention = "origin"

    def support(self, unit: str = "mm") -> np.ndarray:
        """Frequencies (cycles/unit) along each axis, origin layout."""
        return frequency_support(self.size, self.spacing.to(unit))

    def to_centered(self) -> "CenteredOTFStack":
        return CenteredOTFStack(self.wavelengths, to_centered(self.data), self.spacing)

    def to_psf(self) -> PSFStack:
        """Inverse transform to centered spatial kernels."""
        psf = np.real(np.fft.ifft2(self.data, axes=(-2, -1)))
        return PSFStack(self.wavelengths, to_centered(psf), self.spacing)


class CenteredOTFStack(_OTFStackBase):
    """OTF planes with DC at index ``(n // 2, n // 2)``."""

    convention = "centered"

    def support(self, unit: str = "mm") -> np.ndarray:
        """Frequencies (cycles/unit) along each axis, centered layout."""
        return frequency_support(self.size, self.spacing.to(unit), centered=True)

    def to_origin(self) -> OTFStack:
        return OTFStack(self.wavelengths, to_origin(self.data), self.spacing)
