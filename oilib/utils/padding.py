"""Padding of image bands for FFT convolution.

A band of shape (rows, cols) is placed in a square, even-sized working
buffer in two steps:

1. The shorter axis is zero-padded to make the band square. For a size
   difference ``delta`` the split is ``delta // 2`` before and
   ``delta - delta // 2`` after, so an odd difference puts the extra pixel
   after the image.
2. A margin of ``round(max(rows, cols) * margin_fraction)`` pixels is added
   on every side, filled according to the pad policy. When the total is
   odd, one extra trailing row and column make it even.

:meth:`PadPlan.crop` undoes both steps.
"""

from dataclasses import dataclass
from enum import Enum

import numpy as np

from ..errors import UnsupportedPadPolicy

__all__ = ["PadPolicy", "PadPlan", "plan_padding", "pad_band", "square_split"]


class PadPolicy(Enum):
    """Fill used for the margin around a band."""

    ZERO = "zero"      # Constant zero photons
    MEAN = "mean"      # Constant mean of the band border
    BORDER = "border"  # Replicate the edge pixels

    @classmethod
    def parse(cls, token) -> "PadPolicy":
        """Return the policy for a member or its token (case-insensitive)."""
        if isinstance(token, cls):
            return token
        if isinstance(token, str):
            try:
                return cls(token.strip().lower())
            except ValueError:
                pass
        raise UnsupportedPadPolicy(
            f"Unknown pad policy: {token!r}. Use one of "
            f"{[p.value for p in cls]}"
        )


def square_split(delta: int) -> tuple[int, int]:
    """Split ``delta`` padding pixels into (before, after).

    Example:
        >>> square_split(16)
        (8, 8)
        >>> square_split(5)
        (2, 3)
    """
    before = delta // 2
    return before, delta - before


@dataclass(frozen=True)
class PadPlan:
    """Geometry of the working buffer for one image extent.

    Attributes:
        rows: Original band height.
        cols: Original band width.
        square: ((top, bottom), (left, right)) zero padding of step 1.
        margin: (before, after) policy padding of step 2, same on both axes.
    """

    rows: int
    cols: int
    square: tuple[tuple[int, int], tuple[int, int]]
    margin: tuple[int, int]

    @property
    def size(self) -> int:
        """Side of the square working buffer."""
        return max(self.rows, self.cols) + sum(self.margin)

    @property
    def offset(self) -> tuple[int, int]:
        """(row, col) of the original band's first pixel in the buffer."""
        before = self.margin[0]
        return before + self.square[0][0], before + self.square[1][0]

    def crop(self, buffer: np.ndarray) -> np.ndarray:
        """Extract the original (rows, cols) region from a working buffer."""
        if buffer.shape[:2] != (self.size, self.size):
            raise ValueError(
                f"Buffer shape {buffer.shape[:2]} does not match working "
                f"size {self.size}"
            )
        r0, c0 = self.offset
        return buffer[r0:r0 + self.rows, c0:c0 + self.cols]


def plan_padding(rows: int, cols: int, margin_fraction: float = 0.125) -> PadPlan:
    """Compute the padding geometry for a (rows, cols) band.

    Args:
        rows: Band height.
        cols: Band width.
        margin_fraction: Margin per side as a fraction of the longer side.

    Returns:
        PadPlan describing both padding steps.

    Example:
        >>> plan = plan_padding(64, 48)
        >>> plan.square
        ((0, 0), (8, 8))
        >>> plan.size
        80
    """
    if rows <= 0 or cols <= 0:
        raise ValueError(f"Band extent must be positive, got ({rows}, {cols})")
    if margin_fraction < 0:
        raise ValueError(f"margin_fraction must be >= 0, got {margin_fraction}")

    delta = abs(rows - cols)
    split = square_split(delta)
    if rows < cols:
        square = (split, (0, 0))
    else:
        square = ((0, 0), split)

    n = max(rows, cols)
    # Half-up rounding; Python's round() would round half to even.
    margin = int(np.floor(n * margin_fraction + 0.5))
    extra = (n + 2 * margin) % 2
    return PadPlan(rows=rows, cols=cols, square=square, margin=(margin, margin + extra))


def _border_mean(band: np.ndarray) -> float:
    """Mean of the outermost pixels of a 2D band."""
    if band.shape[0] <= 2 or band.shape[1] <= 2:
        return float(band.mean())
    border = np.concatenate(
        [band[0, :], band[-1, :], band[1:-1, 0], band[1:-1, -1]]
    )
    return float(border.mean())


def pad_band(band: np.ndarray, plan: PadPlan, policy="zero") -> np.ndarray:
    """Place a 2D band into its working buffer.

    Args:
        band: Array of shape (plan.rows, plan.cols).
        plan: Padding geometry from :func:`plan_padding`.
        policy: ``"zero"``, ``"mean"`` (constant mean of the band's border
            pixels) or ``"border"`` (edge replication), or a PadPolicy.

    Returns:
        Square array of side ``plan.size``.

    Raises:
        UnsupportedPadPolicy: If ``policy`` is not one of the three tokens.
    """
    policy = PadPolicy.parse(policy)
    if band.shape != (plan.rows, plan.cols):
        raise ValueError(
            f"Band shape {band.shape} does not match plan ({plan.rows}, {plan.cols})"
        )

    squared = np.pad(band, plan.square, mode="constant", constant_values=0.0)
    margin = (plan.margin, plan.margin)

    if policy is PadPolicy.ZERO:
        return np.pad(squared, margin, mode="constant", constant_values=0.0)
    if policy is PadPolicy.MEAN:
        return np.pad(
            squared, margin, mode="constant", constant_values=_border_mean(band)
        )
    return np.pad(squared, margin, mode="edge")
