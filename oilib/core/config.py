"""Configuration for the PSF application engine."""

import os
from dataclasses import dataclass
from typing import Optional

from ..utils.padding import PadPolicy

__all__ = ["PadPolicy", "ComputeConfig"]


@dataclass
class ComputeConfig:
    """Parameters controlling how a PSF stack is applied to an image.

    Attributes:
        pad_policy: Margin fill, ``"zero"``, ``"mean"`` or ``"border"``.
        margin_fraction: Margin per side as a fraction of the longer image
            side, bounding circular-convolution wraparound.
        max_workers: Threads used to process wavelength bands. ``None``
            uses ``os.cpu_count()``.
        device: PyTorch device for the FFTs ("cpu", "cuda", ...).
    """

    pad_policy: PadPolicy = PadPolicy.ZERO
    margin_fraction: float = 0.125
    max_workers: Optional[int] = None
    device: str = "cpu"

    def __post_init__(self) -> None:
        self.pad_policy = PadPolicy.parse(self.pad_policy)

    def validate(self) -> None:
        """Raise if any parameter is out of range."""
        self.pad_policy = PadPolicy.parse(self.pad_policy)
        if self.margin_fraction < 0:
            raise ValueError(
                f"margin_fraction must be >= 0, got {self.margin_fraction}"
            )
        if self.max_workers is not None and self.max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {self.max_workers}")

    @property
    def workers(self) -> int:
        """Resolved number of worker threads."""
        return self.max_workers or os.cpu_count() or 1
