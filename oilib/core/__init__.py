"""Core data containers and engine configuration."""

from .config import ComputeConfig, PadPolicy
from .image import SpectralImage, OpticalDiagnostics

__all__ = [
    "ComputeConfig",
    "PadPolicy",
    "SpectralImage",
    "OpticalDiagnostics",
]
