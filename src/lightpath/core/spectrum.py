"""RGB radiance representation.

Radiance is carried as a non-negative (red, green, blue) triple. Conversion to
8-bit output clamps each channel to [0, 1], scales by 255 and floors.

Example:
    >>> from src.lightpath.core.spectrum import Spectrum
    >>> red = Spectrum(1.0, 0.0, 0.0)
    >>> (red * 0.5 + Spectrum(0.0, 0.25, 0.0)).to_tuple()
    (0.5, 0.25, 0.0)
    >>> Spectrum(2.0, 0.5, -1.0).to_rgb8()
    (255, 127, 0)
"""

from __future__ import annotations

import math
from dataclasses import dataclass


def _clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return max(low, min(high, value))


@dataclass(frozen=True)
class Spectrum:
    """An RGB radiance triple.

    Attributes:
        red: Red channel.
        green: Green channel.
        blue: Blue channel.
    """

    red: float
    green: float
    blue: float

    @classmethod
    def gray(cls, value: float) -> Spectrum:
        return cls(value, value, value)

    def is_black(self) -> bool:
        return self.red <= 0.0 and self.green <= 0.0 and self.blue <= 0.0

    def is_finite(self) -> bool:
        return math.isfinite(self.red) and math.isfinite(self.green) and math.isfinite(self.blue)

    @property
    def amplitude(self) -> float:
        """Mean of the three channels."""
        return (self.red + self.green + self.blue) / 3.0

    @property
    def max_component(self) -> float:
        return max(self.red, self.green, self.blue)

    def clamp(self, low: float = 0.0, high: float = 1.0) -> Spectrum:
        return Spectrum(
            _clamp(self.red, low, high),
            _clamp(self.green, low, high),
            _clamp(self.blue, low, high),
        )

    def to_tuple(self) -> tuple[float, float, float]:
        return (self.red, self.green, self.blue)

    def to_rgb8(self) -> tuple[int, int, int]:
        """Convert to 8-bit channels: clamp to [0, 1], scale by 255, floor."""
        c = self.clamp()
        return (
            int(math.floor(c.red * 255.0)),
            int(math.floor(c.green * 255.0)),
            int(math.floor(c.blue * 255.0)),
        )

    def __add__(self, other: Spectrum) -> Spectrum:
        return Spectrum(self.red + other.red, self.green + other.green, self.blue + other.blue)

    def __mul__(self, other: Spectrum | float) -> Spectrum:
        if isinstance(other, Spectrum):
            return Spectrum(self.red * other.red, self.green * other.green, self.blue * other.blue)
        return Spectrum(self.red * other, self.green * other, self.blue * other)

    __rmul__ = __mul__

    def __truediv__(self, scalar: float) -> Spectrum:
        return Spectrum(self.red / scalar, self.green / scalar, self.blue / scalar)


BLACK = Spectrum(0.0, 0.0, 0.0)
WHITE = Spectrum(1.0, 1.0, 1.0)
