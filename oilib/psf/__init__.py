"""Wavefront model: pupil functions, PSF/OTF stacks and grid matching.

Example:
    >>> from oilib.psf import WavefrontSpec, match_sampling, compute_psf
    >>> from oilib.utils import PhysicalLength
    >>>
    >>> spec = WavefrontSpec(
    ...     pupil_diameter_mm=3.0,
    ...     focal_length_m=0.017,
    ...     wavelengths=(450.0, 550.0, 650.0),
    ... )
    >>> spec = match_sampling(spec, PhysicalLength(2, "um"), 128)
    >>> psf = compute_psf(spec)
    >>> otf = psf.to_otf()  # DC at origin, DC = 1
"""

# Core data structures
from .optics import (
    WavefrontSpec,
    PupilGrid,
    make_pupil_grid,
)

# Pupil functions and apertures
from .aperture import (
    ApertureMask,
    PolygonAperture,
    ArrayAperture,
    make_flare_aperture,
)
from .pupil import (
    make_pupil,
    pupil_amplitude,
    pupil_wavefront,
)

# PSF/OTF stacks and computation
from .stacks import (
    PSFStack,
    OTFStack,
    CenteredOTFStack,
    normalize_dc,
)
from .wavefront import (
    pupil_function,
    compute_psf,
    compute_otf,
    psf_to_otf,
)

# Sampling
from .sampling import (
    match_sampling,
    psf_sample_spacing,
    pupil_sample_spacing,
    otf_frequency_spacing,
    airy_radius,
)
from .custom import resample_otf
from .analysis import psf_line, measure_fwhm, first_null_radius

# Aberrations
from .aberrations import (
    Aberration,
    apply_aberrations,
    ZernikeAberration,
    WavefrontMap,
    Defocus,
    HumanLCA,
)

__all__ = [
    # Core data structures
    "WavefrontSpec",
    "PupilGrid",
    "make_pupil_grid",
    # Pupil functions and apertures
    "ApertureMask",
    "PolygonAperture",
    "ArrayAperture",
    "make_flare_aperture",
    "make_pupil",
    "pupil_amplitude",
    "pupil_wavefront",
    # PSF/OTF
    "PSFStack",
    "OTFStack",
    "CenteredOTFStack",
    "normalize_dc",
    "pupil_function",
    "compute_psf",
    "compute_otf",
    "psf_to_otf",
    # Sampling
    "match_sampling",
    "psf_sample_spacing",
    "pupil_sample_spacing",
    "otf_frequency_spacing",
    "airy_radius",
    "resample_otf",
    # Diagnostics
    "psf_line",
    "measure_fwhm",
    "first_null_radius",
    # Aberrations
    "Aberration",
    "apply_aberrations",
    "ZernikeAberration",
    "WavefrontMap",
    "Defocus",
    "HumanLCA",
]
