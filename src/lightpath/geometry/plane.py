"""Unbounded plane through the local origin with normal +Y.

The plane has no bounding box. Its cheap rejection test instead checks that
the local ray points toward the plane: origin and direction y-components must
have opposite signs, and the direction must not be parallel to the plane.

The surface is parameterized by its local (x, z) coordinates.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Iterable

from src.lightpath.core.vector import (
    DOUBLE_TOLERANCE,
    VECTOR_J,
    Normal,
    Point,
    Point2D,
    is_near,
)
from src.lightpath.geometry.shape import Shape
from src.lightpath.geometry.surface import SurfaceDescriptor

if TYPE_CHECKING:
    from src.lightpath.core.ray import Ray
    from src.lightpath.core.transform import Transform
    from src.lightpath.sampling.streams import RandomStream

# Half-width of the square region used when sampling points on the plane
DEFAULT_SAMPLE_EXTENT = 1.0e3

_LOCAL_NORMAL = Normal.from_vector(VECTOR_J)


class Plane(Shape):
    """The local plane y = 0.

    Args:
        transforms: Local-to-world transform chain.
        sample_extent: Surface samples are drawn from the square
            [-extent, extent] in local x and z.
    """

    def __init__(
        self,
        transforms: Iterable[Transform] = (),
        sample_extent: float = DEFAULT_SAMPLE_EXTENT,
    ) -> None:
        if not sample_extent > 0.0:
            raise ValueError(f"Plane sample extent must be positive, got {sample_extent}")
        self.sample_extent = float(sample_extent)
        super().__init__(transforms)

    def is_interacting(self, ray: Ray) -> bool:
        local = self.world_to_local(ray)
        dy = local.direction.y
        return not is_near(dy, 0.0) and local.origin.y * dy < 0.0

    def get_local_intersection(self, ray: Ray) -> SurfaceDescriptor | None:
        dy = ray.direction.y
        if is_near(dy, 0.0):
            return None
        t = -ray.origin.y / dy
        if math.isnan(t) or t < DOUBLE_TOLERANCE:
            return None
        return self._local_surface_at(ray.point_at(t))

    def _local_surface_at(self, point: Point) -> SurfaceDescriptor:
        return SurfaceDescriptor(
            point=Point(point.x, 0.0, point.z),
            normal=_LOCAL_NORMAL,
            param=Point2D(point.x, point.z),
        )

    def local_surface_from_param(self, param: Point2D) -> SurfaceDescriptor:
        return self._local_surface_at(Point(param.x, 0.0, param.y))

    def local_surface_nearest_to(self, point: Point) -> SurfaceDescriptor:
        return self._local_surface_at(point)

    def sample_local_surface_point(self, stream: RandomStream) -> Point:
        u, v = stream.next_2d()
        e = self.sample_extent
        return Point((2.0 * u - 1.0) * e, 0.0, (2.0 * v - 1.0) * e)

    def sample_local_surface_point_facing(self, stream: RandomStream, facing: Point) -> Point:
        # Every point of a plane faces the same half-space
        return self.sample_local_surface_point(stream)

    def compute_solid_angle(self, viewed_from: Point) -> float:
        if is_near(self.world_to_local(viewed_from).y, 0.0):
            return 0.0
        return 2.0 * math.pi
