"""Error taxonomy for optical image computation.

All errors derive from ``ValueError`` as well as :class:`OpticsError`, so
callers that only guard against bad parameters keep working.
"""

__all__ = [
    "OpticsError",
    "InvalidOpticsSpec",
    "IncompatibleGrid",
    "UnsupportedModel",
    "UnsupportedPadPolicy",
]


class OpticsError(Exception):
    """Base class for errors raised by oilib."""


class InvalidOpticsSpec(OpticsError, ValueError):
    """Physical parameters of an optical system are invalid."""


class IncompatibleGrid(OpticsError, ValueError):
    """A PSF/OTF stack does not match the image working grid.

    Re-run :func:`oilib.psf.match_sampling` with the working size of the
    image to obtain a compatible stack.
    """


class UnsupportedModel(OpticsError, ValueError):
    """Unknown optical model tag."""


class UnsupportedPadPolicy(OpticsError, ValueError):
    """Unknown padding policy token."""
