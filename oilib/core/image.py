"""Spectral image container and the diagnostics attached by the engine."""

from dataclasses import dataclass, field
from functools import cached_property
from typing import Optional, Tuple

import numpy as np

from ..psf.stacks import CenteredOTFStack, OTFStack, PSFStack
from ..utils.padding import PadPlan, PadPolicy
from ..utils.units import PhysicalLength

__all__ = ["SpectralImage", "OpticalDiagnostics"]


@dataclass(eq=False)
class OpticalDiagnostics:
    """OTF data used by one apply operation.

    Derived views are computed on first access and cached on this object.
    Every apply operation attaches a new instance, so nothing carries over
    to a later call with different optics.

    Attributes:
        otf: OTF stack actually multiplied into the bands, DC at origin.
        plan: Padding geometry of the working buffer.
        pad_policy: Margin fill used.
    """

    otf: OTFStack
    plan: PadPlan
    pad_policy: PadPolicy

    @property
    def convention(self) -> str:
        return self.otf.convention

    @property
    def wavelengths(self) -> Tuple[float, ...]:
        return self.otf.wavelengths

    @cached_property
    def centered_otf(self) -> CenteredOTFStack:
        """The OTF in DC-centered layout, for plotting."""
        return self.otf.to_centered()

    @cached_property
    def psf(self) -> PSFStack:
        """Spatial kernels equivalent to the OTF, peak at the center."""
        return self.otf.to_psf()

    def mtf(self, wavelength: float) -> np.ndarray:
        """|OTF| at ``wavelength``, DC-centered layout."""
        return np.abs(self.centered_otf[wavelength])


@dataclass(eq=False)
class SpectralImage:
    """Photon array sampled in space and wavelength.

    Attributes:
        photons: Non-negative array of shape (rows, cols, nwave).
        wavelengths: Wavelength of each band (nm).
        pitch: Spatial sample spacing.
        diagnostics: OTF bundle from the last apply operation, if any.

    Example:
        ```python
        image = SpectralImage(
            photons=np.ones((64, 48, 3)),
            wavelengths=(450.0, 550.0, 650.0),
            pitch=PhysicalLength(2, "um"),
        )
        ```
    """

    photons: np.ndarray
    wavelengths: Tuple[float, ...]
    pitch: PhysicalLength
    diagnostics: Optional[OpticalDiagnostics] = field(default=None, repr=False)

    def __post_init__(self) -> None:
        self.photons = np.asarray(self.photons, dtype=np.float64)
        if self.photons.ndim == 2:
            self.photons = self.photons[:, :, np.newaxis]
        self.wavelengths = tuple(float(w) for w in np.atleast_1d(self.wavelengths))

        if self.photons.ndim != 3:
            raise ValueError(
                f"Photons must have shape (rows, cols, nwave), got {self.photons.shape}"
            )
        if self.photons.shape[2] != len(self.wavelengths):
            raise ValueError(
                f"{len(self.wavelengths)} wavelengths for "
                f"{self.photons.shape[2]} photon bands"
            )
        if not isinstance(self.pitch, PhysicalLength):
            raise TypeError(
                f"pitch must be a PhysicalLength, got {type(self.pitch).__name__}"
            )
        if not self.pitch.value > 0:
            raise ValueError(f"pitch must be positive, got {self.pitch}")

    @property
    def shape(self) -> Tuple[int, int]:
        """(rows, cols)."""
        return self.photons.shape[:2]

    @property
    def n_wavelengths(self) -> int:
        return self.photons.shape[2]

    def band(self, wavelength: float) -> np.ndarray:
        """Photon plane at ``wavelength`` (nm)."""
        matches = np.flatnonzero(np.isclose(self.wavelengths, wavelength, atol=1e-6))
        if matches.size == 0:
            raise KeyError(f"No band for wavelength {wavelength} nm")
        return self.photons[:, :, int(matches[0])]

    def total_photons(self) -> float:
        return float(self.photons.sum())

    def copy(self) -> "SpectralImage":
        """Deep copy of the photon data; diagnostics are not copied."""
        return SpectralImage(self.photons.copy(), self.wavelengths, self.pitch)
