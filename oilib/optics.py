"""Optical-model dispatcher.

An :class:`OpticalSystem` names one of four optical models and carries the
parameters that model needs. :func:`compute_optical_image` turns it into a
PSF stack on the image's working grid and applies it.

Example:
    ```python
    optics = OpticalSystem.diffraction_limited(
        focal_length=PhysicalLength(4, "mm"), f_number=8.0
    )
    image = compute_optical_image(image, optics, ComputeConfig(pad_policy="mean"))
    image.diagnostics.mtf(550.0)
    ```
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Optional, Sequence, Union

from .convolution.engine import apply_psf, working_size
from .core.config import ComputeConfig
from .core.image import SpectralImage
from .errors import InvalidOpticsSpec, UnsupportedModel
from .psf.aberrations import HumanLCA
from .psf.aperture import ApertureMask
from .psf.custom import resample_otf
from .psf.optics import WavefrontSpec
from .psf.sampling import match_sampling
from .psf.stacks import CenteredOTFStack
from .psf.wavefront import compute_psf
from .utils.units import PhysicalLength

__all__ = [
    "OpticalModel",
    "OpticalSystem",
    "build_wavefront",
    "compute_optical_image",
]

logger = logging.getLogger(__name__)


class OpticalModel(Enum):
    """Optical models understood by :func:`compute_optical_image`."""

    SKIP = "skip"
    DIFFRACTION_LIMITED = "diffractionlimited"
    SHIFT_INVARIANT = "shiftinvariant"
    HUMAN = "human"

    @classmethod
    def parse(cls, tag) -> "OpticalModel":
        """Return the model for a member or a tag such as ``"dlmtf"``.

        Tags are matched case-insensitively, ignoring spaces, dashes and
        underscores.
        """
        if isinstance(tag, cls):
            return tag
        if isinstance(tag, str):
            key = "".join(ch for ch in tag.lower() if ch not in " -_")
            if key in _MODEL_TAGS:
                return _MODEL_TAGS[key]
        raise UnsupportedModel(f"Unknown optical model: {tag!r}")


_MODEL_TAGS = {
    "skip": OpticalModel.SKIP,
    "skipotf": OpticalModel.SKIP,
    "diffractionlimited": OpticalModel.DIFFRACTION_LIMITED,
    "dlmtf": OpticalModel.DIFFRACTION_LIMITED,
    "shiftinvariant": OpticalModel.SHIFT_INVARIANT,
    "custom": OpticalModel.SHIFT_INVARIANT,
    "human": OpticalModel.HUMAN,
    "humanotf": OpticalModel.HUMAN,
}

# (focal length, f-number) used when a system leaves them unset
_LENS_GEOMETRY = (PhysicalLength(4.0, "mm"), 4.0)
_DEFAULT_GEOMETRY = {
    OpticalModel.HUMAN: (PhysicalLength(17.0, "mm"), 17.0 / 3.0),
}


@dataclass(frozen=True)
class OpticalSystem:
    """Optical model selection and parameters.

    Attributes:
        model: Optical model, an OpticalModel or one of its tags.
        focal_length: Focal length. Defaults to 17 mm for the human eye
            and 4 mm otherwise.
        f_number: Focal length over entrance pupil diameter. Defaults to
            17/3 (a 3 mm pupil) for the human eye and 4 otherwise.
        zernike_coeffs: OSA-ordered Zernike coefficients in microns, or a
            mapping keyed by OSA index or mode name.
        aberrations: Additional Aberration objects. The human eye always
            carries a HumanLCA.
        aperture: Optional amplitude mask over the pupil.
        custom_otf: Stored DC-centered OTF data. When set, a shift-invariant
            system uses it instead of computing the OTF from the wavefront.
        measured_wavelength_nm: Wavelength at which Zernike coefficients
            were measured and, for the human eye, the in-focus wavelength.

    Use the factories for the common cases:

        ```python
        OpticalSystem.diffraction_limited(PhysicalLength(4, "mm"), 4.0)
        OpticalSystem.shift_invariant(
            PhysicalLength(4, "mm"), 4.0, zernike_coeffs={"defocus": 0.2}
        )
        OpticalSystem.human()
        OpticalSystem.skip()
        ```
    """

    model: OpticalModel
    focal_length: Optional[PhysicalLength] = None
    f_number: Optional[float] = None
    zernike_coeffs: Union[Sequence[float], Mapping] = ()
    aberrations: tuple = ()
    aperture: Optional[ApertureMask] = None
    custom_otf: Optional[CenteredOTFStack] = None
    measured_wavelength_nm: float = 550.0

    def __post_init__(self) -> None:
        model = OpticalModel.parse(self.model)
        object.__setattr__(self, "model", model)

        focal_length, f_number = _DEFAULT_GEOMETRY.get(model, _LENS_GEOMETRY)
        if self.focal_length is None:
            object.__setattr__(self, "focal_length", focal_length)
        if self.f_number is None:
            object.__setattr__(self, "f_number", f_number)

        aberrations = tuple(self.aberrations)
        if model is OpticalModel.HUMAN and not any(
            isinstance(a, HumanLCA) for a in aberrations
        ):
            aberrations = (HumanLCA(),) + aberrations
        object.__setattr__(self, "aberrations", aberrations)

        if not isinstance(self.focal_length, PhysicalLength):
            raise TypeError(
                "focal_length must be a PhysicalLength, got "
                f"{type(self.focal_length).__name__}"
            )
        if model is OpticalModel.SKIP:
            return
        if not self.focal_length.value > 0:
            raise InvalidOpticsSpec(
                f"Focal length must be positive, got {self.focal_length}"
            )
        if not self.f_number > 0:
            raise InvalidOpticsSpec(f"f-number must be positive, got {self.f_number}")
        if self.custom_otf is not None and not isinstance(
            self.custom_otf, CenteredOTFStack
        ):
            raise TypeError(
                "custom_otf must be a CenteredOTFStack, got "
                f"{type(self.custom_otf).__name__}"
            )

    @property
    def pupil_diameter(self) -> PhysicalLength:
        """Entrance pupil diameter, focal length / f-number."""
        return self.focal_length / self.f_number

    @classmethod
    def skip(cls) -> "OpticalSystem":
        """System that leaves the image untouched."""
        return cls(model=OpticalModel.SKIP)

    @classmethod
    def diffraction_limited(
        cls,
        focal_length: PhysicalLength = PhysicalLength(4.0, "mm"),
        f_number: float = 4.0,
        aperture: Optional[ApertureMask] = None,
    ) -> "OpticalSystem":
        """Aberration-free system with a circular pupil of diameter f/N."""
        return cls(
            model=OpticalModel.DIFFRACTION_LIMITED,
            focal_length=focal_length,
            f_number=f_number,
            aperture=aperture,
        )

    @classmethod
    def shift_invariant(
        cls,
        focal_length: PhysicalLength = PhysicalLength(4.0, "mm"),
        f_number: float = 4.0,
        zernike_coeffs: Union[Sequence[float], Mapping] = (),
        aberrations: Sequence = (),
        aperture: Optional[ApertureMask] = None,
        custom_otf: Optional[CenteredOTFStack] = None,
        measured_wavelength_nm: float = 550.0,
    ) -> "OpticalSystem":
        """Shift-invariant system described by a wavefront or stored OTF."""
        return cls(
            model=OpticalModel.SHIFT_INVARIANT,
            focal_length=focal_length,
            f_number=f_number,
            zernike_coeffs=zernike_coeffs,
            aberrations=tuple(aberrations),
            aperture=aperture,
            custom_otf=custom_otf,
            measured_wavelength_nm=measured_wavelength_nm,
        )

    @classmethod
    def human(
        cls,
        pupil_diameter_mm: float = 3.0,
        focal_length: PhysicalLength = PhysicalLength(17.0, "mm"),
        zernike_coeffs: Union[Sequence[float], Mapping] = (),
        measured_wavelength_nm: float = 550.0,
    ) -> "OpticalSystem":
        """Human eye: diffraction, chromatic defocus and optional Zernikes.

        Args:
            pupil_diameter_mm: Pupil diameter. Default 3 mm.
            focal_length: Posterior focal length. Default 17 mm.
            zernike_coeffs: Monochromatic aberrations in microns.
            measured_wavelength_nm: In-focus wavelength. Default 550 nm.
        """
        if not pupil_diameter_mm > 0:
            raise InvalidOpticsSpec(
                f"Pupil diameter must be positive, got {pupil_diameter_mm} mm"
            )
        return cls(
            model=OpticalModel.HUMAN,
            focal_length=focal_length,
            f_number=focal_length.mm / pupil_diameter_mm,
            zernike_coeffs=zernike_coeffs,
            measured_wavelength_nm=measured_wavelength_nm,
        )


def build_wavefront(
    optics: OpticalSystem, wavelengths: Sequence[float]
) -> WavefrontSpec:
    """Wavefront description of ``optics`` before grid matching.

    Raises:
        UnsupportedModel: For SKIP, which has no wavefront.
    """
    optics_model = optics.model
    if optics_model is OpticalModel.SKIP:
        raise UnsupportedModel("The skip model has no wavefront")

    if optics_model is OpticalModel.DIFFRACTION_LIMITED:
        zernike_coeffs, aberrations = (), ()
    else:
        zernike_coeffs, aberrations = optics.zernike_coeffs, optics.aberrations

    return WavefrontSpec(
        pupil_diameter_mm=optics.pupil_diameter.mm,
        focal_length_m=optics.focal_length.m,
        wavelengths=tuple(wavelengths),
        measured_wavelength_nm=optics.measured_wavelength_nm,
        zernike_coeffs=zernike_coeffs,
        aberrations=aberrations,
    )


def _skip(image, optics, config):
    image.diagnostics = None
    return image


def _from_wavefront(image, optics, config):
    n = working_size(*image.shape, config.margin_fraction)
    spec = match_sampling(build_wavefront(optics, image.wavelengths), image.pitch, n)
    return apply_psf(image, compute_psf(spec, optics.aperture), config)


def _shift_invariant(image, optics, config):
    if optics.custom_otf is None:
        return _from_wavefront(image, optics, config)
    n = working_size(*image.shape, config.margin_fraction)
    otf = resample_otf(optics.custom_otf, image.wavelengths, n, image.pitch)
    return apply_psf(image, otf, config)


_HANDLERS = {
    OpticalModel.SKIP: _skip,
    OpticalModel.DIFFRACTION_LIMITED: _from_wavefront,
    OpticalModel.SHIFT_INVARIANT: _shift_invariant,
    OpticalModel.HUMAN: _from_wavefront,
}


def compute_optical_image(
    image: SpectralImage,
    optics: Union[OpticalSystem, str],
    config: Optional[ComputeConfig] = None,
) -> SpectralImage:
    """Blur a spectral image by the optics.

    The PSF stack is recomputed for the image's pitch, extent and
    wavelengths on every call.

    Args:
        image: Spectral image, modified in place.
        optics: Optical system. A bare model tag is accepted for ``"skip"``
            and for the models whose defaults suffice.
        config: Engine configuration.

    Returns:
        The same image with blurred photons and fresh diagnostics
        (diagnostics cleared for SKIP).

    Raises:
        UnsupportedModel: Unknown model tag.
        IncompatibleGrid: Working grid cannot be matched.
    """
    if not isinstance(optics, OpticalSystem):
        optics = OpticalSystem(model=optics)
    config = config or ComputeConfig()

    logger.info(
        "Computing optical image with model %s for %dx%d image, %d bands",
        optics.model.name,
        *image.shape,
        image.n_wavelengths,
    )
    return _HANDLERS[optics.model](image, optics, config)
