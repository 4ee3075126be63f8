"""Explicit light sources.

Lights are not part of the geometry: rays never hit them. Integrators reach
them by sampling a vector from the light toward a shading point and tracing
a shadow ray to check visibility.

Three lights are provided:

- PointLight: infinitesimal source at its local origin
- SphereLight: samples points on the hemisphere of a sphere that faces the
  receiver
- InfiniteLight: parallel light along its local -Y axis, without falloff

Example:
    >>> from src.lightpath.core.spectrum import Spectrum
    >>> from src.lightpath.core.transform import TranslationTransform
    >>> from src.lightpath.scene.light import PointLight
    >>> lamp = PointLight(Spectrum(10.0, 10.0, 10.0), [TranslationTransform(0.0, 5.0, 0.0)])
    >>> lamp.position.y
    5.0
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from enum import Enum
from typing import TYPE_CHECKING, Iterable

from src.lightpath.core.spectrum import BLACK, Spectrum
from src.lightpath.core.transform import Transform, Transformable
from src.lightpath.core.vector import ORIGIN, VECTOR_J, Point, Vector

if TYPE_CHECKING:
    from src.lightpath.sampling.streams import RandomStream


class FalloffType(Enum):
    """How a light's radiance diminishes with distance."""

    CONSTANT = "constant"
    LINEAR = "linear"
    QUADRATIC = "quadratic"

    def calculate(self, distance: float) -> float:
        """Fraction of unit radiance remaining at ``distance``."""
        if self is FalloffType.CONSTANT:
            return 1.0
        if self is FalloffType.LINEAR:
            return 1.0 / distance
        return 1.0 / (distance * distance)


class Light(Transformable, ABC):
    """A source of radiance placed by a transform chain.

    Args:
        unit_radiance: Radiance per unit solid angle at unit distance.
        transforms: Local-to-world transform chain.
        falloff: Distance falloff model.
    """

    def __init__(
        self,
        unit_radiance: Spectrum,
        transforms: Iterable[Transform] = (),
        falloff: FalloffType = FalloffType.QUADRATIC,
    ) -> None:
        super().__init__(transforms)
        self.unit_radiance = unit_radiance
        self.falloff = falloff

    @property
    def position(self) -> Point:
        """World-space position of the light's local origin."""
        return self.local_to_world(ORIGIN)

    @property
    def power(self) -> Spectrum:
        """Total power radiated over the whole sphere of directions."""
        return self.unit_radiance * (4.0 * math.pi)

    @abstractmethod
    def sample_light_vector(self, towards: Point, stream: RandomStream) -> Vector:
        """Un-normalized vector from a point on the light to ``towards``.

        Its magnitude is the distance between the two points.
        """

    def probability_sample_vector(self, towards: Point, sampled: Vector) -> float:
        """Density of having drawn ``sampled``; 1 for the lights defined here."""
        return 1.0

    def radiance_at(self, light_vector: Vector) -> Spectrum:
        """Radiance delivered along ``light_vector``, including falloff."""
        if self.unit_radiance.is_black():
            return BLACK
        distance = light_vector.magnitude
        if distance == 0.0:
            return BLACK
        return self.unit_radiance * self.falloff.calculate(distance)

    def is_infinite(self) -> bool:
        return False


class PointLight(Light):
    """Infinitesimal light at its local origin."""

    def sample_light_vector(self, towards: Point, stream: RandomStream) -> Vector:
        return Vector.between(self.position, towards)


class SphereLight(Light):
    """Light emitted from the surface of a sphere.

    Raises:
        ValueError: If the radius is not positive.
    """

    def __init__(
        self,
        unit_radiance: Spectrum,
        transforms: Iterable[Transform] = (),
        radius: float = 0.5,
        falloff: FalloffType = FalloffType.QUADRATIC,
    ) -> None:
        if not radius > 0.0:
            raise ValueError(f"SphereLight radius must be positive, got {radius}")
        super().__init__(unit_radiance, transforms, falloff)
        self.radius = float(radius)

    def sample_light_vector(self, towards: Point, stream: RandomStream) -> Vector:
        local_towards = self.world_to_local(towards).to_vector()
        if local_towards.magnitude == 0.0:
            return Vector.between(self.position, towards)

        # Frame with J pointing from the light toward the receiver
        j = local_towards.normalize()
        i = j.orthogonal()
        k = i.cross(j)

        u, v = stream.next_2d()
        x = 2.0 * u - 1.0
        z = 2.0 * v - 1.0
        y = stream.next_float()
        offset = i * x + j * y + k * z
        if offset.magnitude == 0.0:
            offset = j
        local_point = ORIGIN + offset.normalize() * self.radius
        return Vector.between(self.local_to_world(local_point), towards)


class InfiniteLight(Light):
    """Parallel light shining along local -J, with no distance falloff."""

    def __init__(self, unit_radiance: Spectrum, transforms: Iterable[Transform] = ()) -> None:
        super().__init__(unit_radiance, transforms, FalloffType.CONSTANT)

    def sample_light_vector(self, towards: Point, stream: RandomStream) -> Vector:
        return self.local_to_world(-VECTOR_J).normalize()

    def radiance_at(self, light_vector: Vector) -> Spectrum:
        return self.unit_radiance

    def is_infinite(self) -> bool:
        return True
