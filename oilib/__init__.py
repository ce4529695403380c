"""oilib - Spectral optical image formation with wavefront PSFs.

A library for computing point spread functions (PSF) and optical transfer
functions (OTF) from a wavefront model and applying them, wavelength by
wavelength, to spectral photon images.

The library is organized into these modules:

- **psf**: NumPy-based wavefront, PSF/OTF computation and grid matching
- **convolution**: PyTorch-based FFT application of PSF stacks to images
- **core**: Spectral image container, diagnostics and engine configuration
- **optics**: Optical-model dispatcher (skip, diffraction-limited,
  shift-invariant, human eye)
- **utils**: Shared utilities (Fourier layouts, Zernike, units, padding)

Example:
    >>> import numpy as np
    >>> from oilib import OpticalSystem, SpectralImage, compute_optical_image
    >>> from oilib import PhysicalLength
    >>>
    >>> image = SpectralImage(
    ...     photons=np.random.rand(64, 48, 3),
    ...     wavelengths=(450.0, 550.0, 650.0),
    ...     pitch=PhysicalLength(2, "um"),
    ... )
    >>> optics = OpticalSystem.diffraction_limited(
    ...     focal_length=PhysicalLength(4, "mm"),
    ...     f_number=8.0,
    ... )
    >>> image = compute_optical_image(image, optics)
    >>> image.diagnostics.otf.convention
    'origin'

Reference:
    Goodman, J.W. "Introduction to Fourier Optics." 3rd ed., Roberts &
    Company (2005), chapter 6.
"""

__version__ = "0.1.0"

# =============================================================================
# Errors
# =============================================================================
from .errors import (
    OpticsError,
    InvalidOpticsSpec,
    IncompatibleGrid,
    UnsupportedModel,
    UnsupportedPadPolicy,
)

# =============================================================================
# PSF Module - Wavefront model and PSF/OTF computation
# =============================================================================
from .psf import (
    # Core data structures
    WavefrontSpec,
    # Apertures
    ApertureMask,
    PolygonAperture,
    ArrayAperture,
    make_flare_aperture,
    # PSF/OTF
    PSFStack,
    OTFStack,
    CenteredOTFStack,
    pupil_function,
    compute_psf,
    compute_otf,
    psf_to_otf,
    # Sampling
    match_sampling,
    airy_radius,
    resample_otf,
    # Aberrations
    ZernikeAberration,
    WavefrontMap,
    Defocus,
    HumanLCA,
)

# =============================================================================
# Core and convolution - Images and the application engine
# =============================================================================
from .core import ComputeConfig, PadPolicy, SpectralImage, OpticalDiagnostics
from .convolution import apply_psf, working_size

# =============================================================================
# Dispatcher
# =============================================================================
from .optics import (
    OpticalModel,
    OpticalSystem,
    build_wavefront,
    compute_optical_image,
)

# =============================================================================
# Utils Module
# =============================================================================
from .utils import PhysicalLength, ZernikeMode, plan_padding

__all__ = [
    # Version
    "__version__",
    # Errors
    "OpticsError",
    "InvalidOpticsSpec",
    "IncompatibleGrid",
    "UnsupportedModel",
    "UnsupportedPadPolicy",
    # Wavefront model
    "WavefrontSpec",
    "ApertureMask",
    "PolygonAperture",
    "ArrayAperture",
    "make_flare_aperture",
    # PSF/OTF computation
    "PSFStack",
    "OTFStack",
    "CenteredOTFStack",
    "pupil_function",
    "compute_psf",
    "compute_otf",
    "psf_to_otf",
    "match_sampling",
    "airy_radius",
    "resample_otf",
    # Aberrations
    "ZernikeAberration",
    "WavefrontMap",
    "Defocus",
    "HumanLCA",
    # Images and engine
    "ComputeConfig",
    "PadPolicy",
    "SpectralImage",
    "OpticalDiagnostics",
    "apply_psf",
    "working_size",
    # Dispatcher
    "OpticalModel",
    "OpticalSystem",
    "build_wavefront",
    "compute_optical_image",
    # Utilities
    "PhysicalLength",
    "ZernikeMode",
    "plan_padding",
]
