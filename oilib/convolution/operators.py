"""FFT convolution operators for applying an OTF to image bands.

Operators are built from NumPy OTF planes and run their transforms with
PyTorch, so the same code path serves CPU and GPU devices.
"""

from typing import Callable

import numpy as np
import torch

__all__ = ["make_otf_convolver", "make_psf_convolver"]

_COMPLEX = {torch.float32: torch.complex64, torch.float64: torch.complex128}


def make_otf_convolver(
    otf: np.ndarray,
    device: str = "cpu",
    dtype: torch.dtype = torch.float64,
) -> Callable[[np.ndarray], np.ndarray]:
    """Create a 2D FFT convolution operator from an OTF plane.

    Args:
        otf: Complex 2D OTF, shape (N, N), DC at index (0, 0).
        device: PyTorch device ("cpu", "cuda", "cuda:0", etc.).
        dtype: Real PyTorch dtype of the computation. Default float64.

    Returns:
        Function mapping a real (N, N) NumPy array to its circular
        convolution with the PSF, as a NumPy array.

    Example:
        >>> otf = psf_stack.to_otf()[550.0]
        >>> C = make_otf_convolver(otf)
        >>> blurred = C(padded_band)
    """
    if dtype not in _COMPLEX:
        raise ValueError(f"dtype must be torch.float32 or torch.float64, got {dtype}")
    shape = otf.shape

    # Copy: stack planes are read-only and torch.from_numpy needs a writable array
    otf_tensor = torch.from_numpy(np.array(otf, dtype=np.complex128)).to(
        device=device, dtype=_COMPLEX[dtype]
    )

    def forward(x: np.ndarray) -> np.ndarray:
        """Apply convolution: y = PSF ⊛ x."""
        if x.shape != shape:
            raise ValueError(f"Input shape {x.shape} does not match OTF shape {shape}")
        x_tensor = torch.from_numpy(np.array(x, dtype=np.float64)).to(
            device=device, dtype=dtype
        )
        x_ft = torch.fft.fft2(x_tensor)
        y = torch.fft.ifft2(x_ft * otf_tensor).real
        return y.cpu().numpy().astype(np.float64)

    return forward


def make_psf_convolver(
    psf: np.ndarray,
    device: str = "cpu",
    dtype: torch.dtype = torch.float64,
) -> Callable[[np.ndarray], np.ndarray]:
    """Create a convolution operator from a centered PSF kernel.

    The kernel peak must sit at index ``(N // 2, N // 2)``. It is
    normalized to unit sum and moved to the origin before transforming.
    """
    psf = np.asarray(psf, dtype=np.float64)
    total = psf.sum()
    if total <= 0:
        raise ValueError("PSF must have a positive sum")
    otf = np.fft.fft2(np.fft.ifftshift(psf / total))
    return make_otf_convolver(otf, device=device, dtype=dtype)
