"""Spectral PSF/OTF application engine.

Each wavelength band is padded into a square working buffer, multiplied by
its OTF in the frequency domain, transformed back and cropped to the
original extent. Bands are independent and run in a thread pool; each
writes its own slice of the output.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Optional, Union

import numpy as np

from ..core.config import ComputeConfig
from ..core.image import OpticalDiagnostics, SpectralImage
from ..errors import IncompatibleGrid
from ..psf.stacks import CenteredOTFStack, OTFStack, PSFStack
from ..utils.padding import PadPlan, pad_band, plan_padding
from .operators import make_otf_convolver

__all__ = ["apply_psf", "working_size"]

logger = logging.getLogger(__name__)

Stack = Union[PSFStack, OTFStack, CenteredOTFStack]


def working_size(rows: int, cols: int, margin_fraction: float = 0.125) -> int:
    """Side of the square working buffer for a (rows, cols) image.

    A PSF stack applied to such an image must have this many samples per
    side; pass it as ``target_size`` to :func:`oilib.psf.match_sampling`.
    """
    return plan_padding(rows, cols, margin_fraction).size


def _as_origin_otf(stack: Stack) -> OTFStack:
    """Frequency-domain stack with DC at origin."""
    if isinstance(stack, PSFStack):
        return stack.to_otf()
    if isinstance(stack, CenteredOTFStack):
        return stack.to_origin()
    if isinstance(stack, OTFStack):
        return stack
    raise TypeError(
        f"Expected PSFStack, OTFStack or CenteredOTFStack, got {type(stack).__name__}"
    )


def _select_bands(otf: OTFStack, image: SpectralImage, plan: PadPlan) -> OTFStack:
    """Check the stack against the image grid; return planes in band order."""
    if otf.size != plan.size:
        raise IncompatibleGrid(
            f"Kernel size {otf.size} does not match working buffer size "
            f"{plan.size} for a {plan.rows}x{plan.cols} image"
        )
    if not otf.spacing.isclose(image.pitch, rtol=1e-6):
        raise IncompatibleGrid(
            f"Kernel spacing {otf.spacing} does not match image pitch {image.pitch}"
        )
    missing = [w for w in image.wavelengths if w not in otf]
    if missing:
        raise IncompatibleGrid(f"No kernel for wavelengths {missing} nm")

    planes = np.stack([otf[w] for w in image.wavelengths])
    return OTFStack(image.wavelengths, planes, otf.spacing)


def apply_psf(
    image: SpectralImage,
    stack: Stack,
    config: Optional[ComputeConfig] = None,
) -> SpectralImage:
    """Blur every wavelength band of ``image`` with the matching kernel.

    The image is modified in place: photons are overwritten with the
    blurred photons and a new :class:`OpticalDiagnostics` is attached.

    Args:
        image: Spectral image to blur.
        stack: PSFStack (centered kernels), OTFStack (DC at origin) or
            CenteredOTFStack (shifted to the origin before use). Its size
            must equal ``working_size(rows, cols, config.margin_fraction)``
            and its spacing the image pitch.
        config: Pad policy, margin, worker count and device.

    Returns:
        The same image object.

    Raises:
        IncompatibleGrid: Stack size, spacing or wavelengths do not match.
        UnsupportedPadPolicy: Unknown pad policy token.
    """
    config = config or ComputeConfig()
    config.validate()

    rows, cols = image.shape
    plan = plan_padding(rows, cols, config.margin_fraction)
    otf = _select_bands(_as_origin_otf(stack), image, plan)

    logger.debug(
        "Applying %d-band OTF: image %dx%d, working size %d, square pad %s, "
        "margin %s, policy %s",
        len(otf),
        rows,
        cols,
        plan.size,
        plan.square,
        plan.margin,
        config.pad_policy.value,
    )

    output = np.empty_like(image.photons)

    def blur_band(k: int) -> None:
        convolve = make_otf_convolver(otf.data[k], device=config.device)
        buffer = pad_band(image.photons[:, :, k], plan, config.pad_policy)
        output[:, :, k] = plan.crop(convolve(buffer))

    workers = min(config.workers, image.n_wavelengths)
    with ThreadPoolExecutor(max_workers=workers) as pool:
        list(pool.map(blur_band, range(image.n_wavelengths)))

    image.photons[...] = output
    image.diagnostics = OpticalDiagnostics(
        otf=otf, plan=plan, pad_policy=config.pad_policy
    )
    return image
