"""Surface descriptors and ray-surface interactions.

A SurfaceDescriptor is a point on a surface with its normal and 2-D
parameterization. An Interaction extends it with the Ray that found the
point and the Primitive that owns the surface. Interactions are created
fresh per intersection query and discarded once radiance has been computed
for them.

The ``front_face`` flag records which side of the geometric surface the ray
arrived from. It is fixed when the interaction is created and survives
``facing_eye()``, so dielectrics can tell entering from exiting.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

from src.lightpath.core.config import RAY_EPSILON
from src.lightpath.core.ray import Ray
from src.lightpath.core.vector import Normal, Point, Point2D, Vector

if TYPE_CHECKING:
    from src.lightpath.materials.bsdf import BSDF
    from src.lightpath.scene.primitive import Primitive


@dataclass(frozen=True)
class SurfaceDescriptor:
    """A point on a surface, in world coordinates.

    Attributes:
        point: Surface location.
        normal: Unit surface normal.
        param: Surface parameterization (u, v).
    """

    point: Point
    normal: Normal
    param: Point2D


@dataclass(frozen=True)
class Interaction(SurfaceDescriptor):
    """A SurfaceDescriptor found by tracing a Ray.

    Attributes:
        ray: The incident ray, with ``t`` set to the hit distance.
        primitive: Owning primitive (None until a Primitive claims the hit).
        front_face: True if the ray arrived on the side the geometric normal
            points to.
    """

    ray: Ray
    primitive: Primitive | None = None
    front_face: bool = True

    @classmethod
    def from_surface(cls, surface: SurfaceDescriptor, ray: Ray) -> Interaction:
        front_face = surface.normal.dot(ray.direction) <= 0.0
        return cls(
            point=surface.point,
            normal=surface.normal,
            param=surface.param,
            ray=ray,
            front_face=front_face,
        )

    @property
    def eye(self) -> Vector:
        """Unit vector from the surface back toward the ray origin."""
        return -self.ray.direction

    @property
    def bsdf(self) -> BSDF:
        if self.primitive is None:
            raise RuntimeError("Interaction has no owning primitive")
        return self.primitive.bsdf

    @property
    def distance(self) -> float:
        return self.ray.t

    def with_primitive(self, primitive: Primitive) -> Interaction:
        return replace(self, primitive=primitive)

    def facing_eye(self) -> Interaction:
        """Return this interaction with its normal flipped toward the eye if needed."""
        if self.normal.dot(self.eye) < 0.0:
            return replace(self, normal=-self.normal)
        return self

    def offset_origin(self, direction: Vector) -> Point:
        """Nudge the hit point off the surface on the side ``direction`` leaves by."""
        offset = self.normal.as_vector() * RAY_EPSILON
        if direction.dot(self.normal) < 0.0:
            offset = -offset
        return self.point + offset

    def spawn_ray(self, direction: Vector, *, weight: float = 1.0) -> Ray:
        """Child ray leaving this surface along ``direction``."""
        return self.ray.spawn(self.offset_origin(direction), direction, weight=weight)
