"""Sphere primitive centered at its local origin.

Ray-sphere intersection uses the geometric form of the quadratic solution:
project the origin-to-center vector onto the ray (t_ca), compare the squared
distance of closest approach (d²) against r², then step back and forth by
t_hc = sqrt(r² - d²) to reach the two roots.

The surface is parameterized as (atan2(z, x), acos(y / r)).

Example:
    >>> from src.lightpath.geometry.sphere import Sphere
    >>> from src.lightpath.core.ray import Ray
    >>> from src.lightpath.core.transform import TranslationTransform
    >>> from src.lightpath.core.vector import Point, Vector
    >>> sphere = Sphere(1.0, [TranslationTransform(0.0, 0.0, -5.0)])
    >>> hit = sphere.get_intersection(Ray(Point(0.0, 0.0, 0.0), Vector(0.0, 0.0, -1.0)))
    >>> round(hit.distance, 6)
    4.0
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Iterable

from src.lightpath.core.vector import (
    DOUBLE_TOLERANCE,
    ORIGIN,
    VECTOR_J,
    Normal,
    Point,
    Point2D,
    Vector,
)
from src.lightpath.geometry.aabb import AABB
from src.lightpath.geometry.shape import Shape
from src.lightpath.geometry.surface import SurfaceDescriptor

if TYPE_CHECKING:
    from src.lightpath.core.ray import Ray
    from src.lightpath.core.transform import Transform
    from src.lightpath.sampling.streams import RandomStream


class Sphere(Shape):
    """A sphere of the given radius about the local origin.

    Raises:
        ValueError: If the radius is not a positive finite number.
    """

    def __init__(self, radius: float = 1.0, transforms: Iterable[Transform] = ()) -> None:
        if not math.isfinite(radius) or radius <= 0.0:
            raise ValueError(f"Sphere radius must be positive, got {radius}")
        self.radius = float(radius)
        super().__init__(transforms)

    def _compute_bounds(self) -> AABB:
        r = self.radius
        return AABB.from_local(Point(-r, -r, -r), Point(r, r, r), self.transforms)

    # =========================================================================
    # Intersection
    # =========================================================================

    def get_local_intersection(self, ray: Ray) -> SurfaceDescriptor | None:
        to_center = -ray.origin.to_vector()
        t_ca = to_center.dot(ray.direction)
        d2 = to_center.magnitude_squared - t_ca * t_ca
        r2 = self.radius * self.radius
        if d2 > r2:
            return None

        t_hc = math.sqrt(r2 - d2)
        t0 = t_ca - t_hc
        t1 = t_ca + t_hc
        if t0 > DOUBLE_TOLERANCE:
            t = t0
        elif t1 > DOUBLE_TOLERANCE:
            t = t1
        else:
            return None

        return self._local_surface_at(ray.point_at(t))

    def _local_surface_at(self, point: Point) -> SurfaceDescriptor:
        normal = Normal.from_vector(point.to_vector().normalize())
        return SurfaceDescriptor(point=point, normal=normal, param=self.param_from_local_surface(point))

    def param_from_local_surface(self, point: Point) -> Point2D:
        cos_theta = max(-1.0, min(1.0, point.y / self.radius))
        return Point2D(math.atan2(point.z, point.x), math.acos(cos_theta))

    def local_surface_from_param(self, param: Point2D) -> SurfaceDescriptor:
        phi, theta = param.x, param.y
        r = self.radius
        sin_theta = math.sin(theta)
        point = Point(r * sin_theta * math.cos(phi), r * math.cos(theta), r * sin_theta * math.sin(phi))
        return self._local_surface_at(point)

    def local_surface_nearest_to(self, point: Point) -> SurfaceDescriptor:
        v = point.to_vector()
        direction = VECTOR_J if v.magnitude == 0.0 else v.normalize()
        return self._local_surface_at(ORIGIN + direction * self.radius)

    # =========================================================================
    # Sampling
    # =========================================================================

    def sample_local_surface_point(self, stream: RandomStream) -> Point:
        u, v = stream.next_2d()
        # Inverse CDF for uniform area over the sphere
        y = 1.0 - 2.0 * u
        ring = math.sqrt(max(0.0, 1.0 - y * y))
        phi = 2.0 * math.pi * v
        r = self.radius
        return Point(r * ring * math.cos(phi), r * y, r * ring * math.sin(phi))

    def sample_local_surface_point_facing(self, stream: RandomStream, facing: Point) -> Point:
        toward = facing.to_vector()
        if toward.magnitude <= self.radius:
            return self.sample_local_surface_point(stream)

        # Frame with J pointing at the external point
        j = toward.normalize()
        i = j.orthogonal()
        k = i.cross(j)

        u, v = stream.next_2d()
        cos_theta = u
        sin_theta = math.sqrt(max(0.0, 1.0 - cos_theta * cos_theta))
        phi = 2.0 * math.pi * v
        direction = (
            i * (sin_theta * math.cos(phi)) + j * cos_theta + k * (sin_theta * math.sin(phi))
        )
        return ORIGIN + direction * self.radius

    def world_radius(self) -> float:
        """Largest world-space extent of the (possibly scaled) radius."""
        center = self.local_to_world(ORIGIN)
        r = self.radius
        return max(
            Vector.between(center, self.local_to_world(p)).magnitude
            for p in (Point(r, 0.0, 0.0), Point(0.0, r, 0.0), Point(0.0, 0.0, r))
        )

    def compute_solid_angle(self, viewed_from: Point) -> float:
        center = self.local_to_world(ORIGIN)
        d = viewed_from.distance_to(center)
        r = self.world_radius()
        if d <= r:
            return 4.0 * math.pi
        return 2.0 * math.pi * (1.0 - math.sqrt(d * d - r * r) / d)
