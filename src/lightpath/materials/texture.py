"""Textures: spatially varying color lookups for BSDFs.

BSDFs only ever call ``texture.evaluate(surface) -> Spectrum``. Two simple
implementations are provided: a constant color and a two-color checkerboard
over the surface parameterization.

Example:
    >>> from src.lightpath.core.spectrum import Spectrum
    >>> from src.lightpath.materials.texture import CheckerboardTexture, ConstantTexture
    >>> checker = CheckerboardTexture(
    ...     ConstantTexture(Spectrum(1.0, 1.0, 1.0)),
    ...     ConstantTexture(Spectrum(0.0, 0.0, 0.0)),
    ... )
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, replace

from src.lightpath.core.spectrum import Spectrum
from src.lightpath.core.vector import Point2D
from src.lightpath.geometry.surface import SurfaceDescriptor


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


@dataclass(frozen=True)
class LinearTextureMapping:
    """Linear rescale of surface parameters from [0, 1] to [min, max] per axis."""

    min_u: float = 0.0
    min_v: float = 0.0
    max_u: float = 1.0
    max_v: float = 1.0

    def map(self, param: Point2D) -> Point2D:
        return Point2D(
            param.x * (self.max_u - self.min_u) + self.min_u,
            param.y * (self.max_v - self.min_v) + self.min_v,
        )


class Texture(ABC):
    """Maps a surface point to a color."""

    def __init__(self, mapping: LinearTextureMapping | None = None) -> None:
        self.mapping = mapping or LinearTextureMapping()

    @abstractmethod
    def evaluate(self, surface: SurfaceDescriptor) -> Spectrum:
        """Color at the given surface point."""


class ConstantTexture(Texture):
    """The same color everywhere."""

    def __init__(self, color: Spectrum) -> None:
        super().__init__()
        self.color = color

    def evaluate(self, surface: SurfaceDescriptor) -> Spectrum:
        return self.color

    def __repr__(self) -> str:
        return f"ConstantTexture({self.color!r})"


class CheckerboardTexture(Texture):
    """Alternates between two textures on a unit grid in parameter space.

    The cell index is ``(round|u| + round|v|) % 2`` after mapping, with
    halves rounded up.
    """

    def __init__(
        self,
        even: Texture,
        odd: Texture,
        mapping: LinearTextureMapping | None = None,
    ) -> None:
        super().__init__(mapping)
        self._textures = (even, odd)

    def texture_index(self, param: Point2D) -> int:
        return (_round_half_up(abs(param.x)) + _round_half_up(abs(param.y))) % len(self._textures)

    def evaluate(self, surface: SurfaceDescriptor) -> Spectrum:
        mapped = self.mapping.map(surface.param)
        return self._textures[self.texture_index(mapped)].evaluate(replace(surface, param=mapped))
