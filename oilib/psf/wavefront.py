"""PSF/OTF computation from a wavefront description."""

import logging
from typing import Optional

import numpy as np

from ..errors import InvalidOpticsSpec
from ..utils.fourier import to_centered, to_origin
from .aperture import ApertureMask
from .optics import WavefrontSpec, make_pupil_grid
from .pupil import make_pupil
from .sampling import psf_sample_spacing
from .stacks import OTFStack, PSFStack

__all__ = ["pupil_function", "compute_psf", "compute_otf", "psf_to_otf"]

logger = logging.getLogger(__name__)


def pupil_function(
    spec: WavefrontSpec,
    wavelength_nm: float,
    aperture: Optional[ApertureMask] = None,
) -> np.ndarray:
    """Complex pupil function at one wavelength, centered layout.

    Args:
        spec: Wavefront description.
        wavelength_nm: Wavelength in nm.
        aperture: Optional amplitude mask.

    Returns:
        Complex array of shape (spec.spatial_samples, spec.spatial_samples).
    """
    grid = make_pupil_grid(spec, wavelength_nm)
    return make_pupil(grid, spec, aperture)


def compute_psf(
    spec: WavefrontSpec,
    aperture: Optional[ApertureMask] = None,
) -> PSFStack:
    """Compute the intensity PSF at every wavelength of ``spec``.

    Args:
        spec: Wavefront description.
        aperture: Optional amplitude mask applied at every wavelength.

    Returns:
        PSFStack of kernels, shape (nwave, n, n), each summing to 1 with
        the peak at ``(n // 2, n // 2)``.

    Physics:
        PSF_A(x, y) = IFFT{ P(u, v) }
        PSF(x, y) = |PSF_A|²

    Raises:
        InvalidOpticsSpec: If a PSF carries no energy.

    Example:
        ```python
        spec = match_sampling(spec, PhysicalLength(2, "um"), 128)
        psf = compute_psf(spec)
        psf[550.0].sum()  # 1.0
        ```
    """
    n = spec.spatial_samples
    kernels = np.empty((len(spec.wavelengths), n, n), dtype=np.float64)

    for i, wavelength in enumerate(spec.wavelengths):
        pupil = pupil_function(spec, wavelength, aperture)

        # Pupil is in frequency space; ifftshift puts the axis at index 0
        amplitude = np.fft.ifft2(to_origin(pupil))
        psf = to_centered(np.abs(amplitude) ** 2)

        total = psf.sum()
        if total <= 0:
            raise InvalidOpticsSpec(f"PSF at {wavelength} nm carries no energy")
        kernels[i] = psf / total

    spacing = psf_sample_spacing(spec)
    logger.debug(
        "Computed %d PSF kernels of %dx%d at %.4g um spacing",
        len(spec.wavelengths),
        n,
        n,
        spacing.um,
    )
    return PSFStack(spec.wavelengths, kernels, spacing)


def psf_to_otf(psf: PSFStack) -> OTFStack:
    """Convert centered PSF kernels to a DC-at-origin OTF with DC = 1."""
    return psf.to_otf()


def compute_otf(
    spec: WavefrontSpec,
    aperture: Optional[ApertureMask] = None,
) -> OTFStack:
    """Compute the OTF at every wavelength of ``spec``.

    The OTF is the Fourier transform of the PSF, equivalent to the
    autocorrelation of the pupil function.

    Returns:
        OTFStack, DC at ``(0, 0)`` and normalized so OTF[0, 0] = 1.
    """
    return psf_to_otf(compute_psf(spec, aperture))
