"""The World: an unordered collection of primitives and lights.

A World is built fully formed before rendering and never mutated while a
render is running, so any number of worker threads may query it at once.

Queries:
    - interacting_candidates: primitives whose cheap test accepts a ray
    - closest_interaction: nearest exact hit along a ray
    - is_visible / is_unoccluded: shadow-ray visibility tests

Example:
    >>> from src.lightpath.core.spectrum import Spectrum
    >>> from src.lightpath.geometry.sphere import Sphere
    >>> from src.lightpath.materials.lambertian import LambertianBSDF
    >>> from src.lightpath.materials.texture import ConstantTexture
    >>> from src.lightpath.scene.primitive import Primitive
    >>> from src.lightpath.scene.world import World
    >>> world = World([Primitive(Sphere(1.0), LambertianBSDF(ConstantTexture(Spectrum(1, 0, 0))))])
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Iterable

from src.lightpath.core.ray import Ray
from src.lightpath.core.vector import Point, Vector

if TYPE_CHECKING:
    from src.lightpath.geometry.surface import Interaction
    from src.lightpath.scene.light import Light
    from src.lightpath.scene.primitive import Primitive


class World:
    """Scene container.

    Args:
        primitives: Geometry with attached BSDFs.
        lights: Explicit light sources.
    """

    def __init__(
        self,
        primitives: Iterable[Primitive] = (),
        lights: Iterable[Light] = (),
    ) -> None:
        self._primitives: tuple[Primitive, ...] = tuple(primitives)
        self._lights: tuple[Light, ...] = tuple(lights)
        self._emissives = tuple(p for p in self._primitives if p.is_emissive)

    @property
    def primitives(self) -> tuple[Primitive, ...]:
        return self._primitives

    @property
    def lights(self) -> tuple[Light, ...]:
        return self._lights

    @property
    def emissives(self) -> tuple[Primitive, ...]:
        """Primitives whose BSDF emits light."""
        return self._emissives

    def interacting_candidates(self, ray: Ray) -> list[Primitive]:
        """Primitives not rejected by their cheap interaction test."""
        return [p for p in self._primitives if p.is_interacting(ray)]

    def closest_interaction(self, ray: Ray) -> Interaction | None:
        """Nearest hit along the ray, or None if it escapes the scene."""
        closest: Interaction | None = None
        for primitive in self.interacting_candidates(ray):
            interaction = primitive.get_intersection(ray)
            if interaction is None:
                continue
            if closest is None or interaction.distance < closest.distance:
                closest = interaction
        return closest

    def is_unoccluded(self, ray: Ray, distance: float = math.inf) -> bool:
        """True if nothing lies along ``ray`` closer than ``distance``."""
        for primitive in self.interacting_candidates(ray):
            interaction = primitive.get_intersection(ray)
            if interaction is not None and interaction.distance < distance:
                return False
        return True

    def is_visible(self, from_point: Point, to_point: Point) -> bool:
        """True if the segment between two points is unobstructed."""
        to_target = Vector.between(from_point, to_point)
        distance = to_target.magnitude
        if distance == 0.0:
            return True
        return self.is_unoccluded(Ray(from_point, to_target), distance)

    def __repr__(self) -> str:
        return f"World(primitives={len(self._primitives)}, lights={len(self._lights)})"
