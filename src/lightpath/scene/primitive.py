"""Primitive: one Shape bound to one BSDF.

Primitives are the unit a World stores and intersects against. They compare
by identity, so an integrator can check whether a shadow ray reached the
same emitter it was aimed at.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from src.lightpath.core.ray import Ray
    from src.lightpath.core.vector import Point
    from src.lightpath.geometry.shape import Shape
    from src.lightpath.geometry.surface import Interaction
    from src.lightpath.materials.bsdf import BSDF
    from src.lightpath.sampling.streams import RandomStream


@dataclass(eq=False)
class Primitive:
    """A shape with a scattering model.

    Attributes:
        shape: Geometry of the primitive.
        bsdf: Surface-scattering model.
    """

    shape: Shape
    bsdf: BSDF

    @property
    def is_emissive(self) -> bool:
        return self.bsdf.is_emissive

    def is_interacting(self, ray: Ray) -> bool:
        return self.shape.is_interacting(ray)

    def get_intersection(self, ray: Ray) -> Interaction | None:
        """Intersect the shape and attach this primitive to the hit."""
        interaction = self.shape.get_intersection(ray)
        if interaction is None:
            return None
        return interaction.with_primitive(self)

    def sample_surface_point(self, stream: RandomStream, facing: Point | None = None) -> Point:
        return self.shape.sample_surface_point(stream, facing)

    def compute_solid_angle(self, viewed_from: Point) -> float:
        return self.shape.compute_solid_angle(viewed_from)
