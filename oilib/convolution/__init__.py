"""Frequency-domain application of PSF/OTF stacks to spectral images.

Example:
    >>> from oilib.convolution import apply_psf, working_size
    >>> n = working_size(*image.shape)
    >>> spec = match_sampling(spec, image.pitch, n)
    >>> apply_psf(image, compute_psf(spec), ComputeConfig(pad_policy="mean"))
"""

from .operators import make_otf_convolver, make_psf_convolver
from .engine import apply_psf, working_size

__all__ = [
    "make_otf_convolver",
    "make_psf_convolver",
    "apply_psf",
    "working_size",
]
