"""Physical length values with explicit units."""

from dataclasses import dataclass
from typing import Union

__all__ = ["PhysicalLength", "length", "units", "scale", "convert"]

_LENGTH_UNITS = {
    "m": 1.0,
    "cm": 1e-2,
    "mm": 1e-3,
    "um": 1e-6,
    "nm": 1e-9,
}


def units() -> list[str]:
    """Return the supported length units."""
    return list(_LENGTH_UNITS)


def scale(unit: str) -> float:
    """Return the size of ``unit`` in meters."""
    try:
        return _LENGTH_UNITS[unit]
    except KeyError:
        raise ValueError(
            f"Unknown length unit: {unit!r}. Use one of {units()}"
        ) from None


def convert(value: float, from_: str, to: str) -> float:
    """Convert a length ``value`` from unit ``from_`` to unit ``to``.

    Example:
        >>> convert(2.0, "um", "mm")
        0.002
    """
    return value * (scale(from_) / scale(to))


@dataclass(frozen=True)
class PhysicalLength:
    """Immutable length carrying its unit.

    Attributes:
        value: Magnitude in ``unit``.
        unit: One of ``m``, ``cm``, ``mm``, ``um``, ``nm``.

    Example:
        ```python
        pitch = PhysicalLength(2.0, "um")
        pitch.mm   # 0.002
        pitch.to("nm")  # 2000.0
        ```
    """

    value: float
    unit: str = "m"

    def __post_init__(self) -> None:
        scale(self.unit)
        object.__setattr__(self, "value", float(self.value))

    def to(self, unit: str) -> float:
        """Magnitude expressed in ``unit``."""
        return convert(self.value, self.unit, unit)

    def as_unit(self, unit: str) -> "PhysicalLength":
        """Same length, re-expressed in ``unit``."""
        return PhysicalLength(self.to(unit), unit)

    @property
    def m(self) -> float:
        return self.to("m")

    @property
    def mm(self) -> float:
        return self.to("mm")

    @property
    def um(self) -> float:
        return self.to("um")

    @property
    def nm(self) -> float:
        return self.to("nm")

    def isclose(self, other: "PhysicalLength", rtol: float = 1e-9) -> bool:
        """True if both lengths agree to relative tolerance ``rtol``."""
        a, b = self.m, other.m
        return abs(a - b) <= rtol * max(abs(a), abs(b))

    def __mul__(self, factor: float) -> "PhysicalLength":
        return PhysicalLength(self.value * factor, self.unit)

    __rmul__ = __mul__

    def __truediv__(self, other: Union[float, "PhysicalLength"]):
        if isinstance(other, PhysicalLength):
            return self.m / other.m
        return PhysicalLength(self.value / other, self.unit)

    def __repr__(self) -> str:
        return f"PhysicalLength({self.value:g}, {self.unit!r})"


def length(value: float, unit: str) -> PhysicalLength:
    """Shorthand constructor: ``length(2, "um")``."""
    return PhysicalLength(value, unit)
