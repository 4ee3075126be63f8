"""Abstract base for procedural shapes.

A Shape is defined in its own local frame and placed in the world through a
TransformChain. Subclasses implement the local-space math (intersection,
closest point, surface sampling); this base class handles the conversion
between frames and the bounding-box rejection test.

Intersection queries never raise: a miss is reported as None.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Iterable

from src.lightpath.core.transform import Transform, Transformable
from src.lightpath.core.vector import DOUBLE_TOLERANCE, Point, Point2D, Vector
from src.lightpath.geometry.surface import Interaction, SurfaceDescriptor

if TYPE_CHECKING:
    from src.lightpath.core.ray import Ray
    from src.lightpath.geometry.aabb import AABB
    from src.lightpath.sampling.streams import RandomStream


class Shape(Transformable, ABC):
    """A geometric surface with its own local-to-world transform chain."""

    def __init__(self, transforms: Iterable[Transform] = ()) -> None:
        super().__init__(transforms)
        self._bounds = self._compute_bounds()

    # =========================================================================
    # Bounds
    # =========================================================================

    @property
    def bounding_box(self) -> AABB | None:
        """World-space bounds, or None for unbounded shapes."""
        return self._bounds

    def _compute_bounds(self) -> AABB | None:
        return None

    def _on_transforms_changed(self) -> None:
        self._bounds = self._compute_bounds()

    def is_interacting(self, ray: Ray) -> bool:
        """Cheap test that may reject rays which certainly miss this shape."""
        if self._bounds is None:
            return True
        return self._bounds.is_intersecting(ray)

    # =========================================================================
    # Intersection
    # =========================================================================

    def get_intersection(self, ray: Ray) -> Interaction | None:
        """Find where a world-space ray first meets this shape.

        The hit is found in local space and mapped back to the world; the
        returned interaction's ray records the world-space hit distance.

        Args:
            ray: World-space ray.

        Returns:
            An Interaction (with no primitive attached), or None on a miss.
        """
        local_surface = self.get_local_intersection(self.world_to_local(ray))
        if local_surface is None:
            return None
        surface = self._surface_to_world(local_surface)
        t = Vector.between(ray.origin, surface.point).dot(ray.direction)
        if t < DOUBLE_TOLERANCE or not ray.in_range(t):
            return None
        return Interaction.from_surface(surface, ray.with_t(t))

    @abstractmethod
    def get_local_intersection(self, ray: Ray) -> SurfaceDescriptor | None:
        """Intersect a local-space ray; returns a local-space surface or None."""

    def _surface_to_world(self, surface: SurfaceDescriptor) -> SurfaceDescriptor:
        return SurfaceDescriptor(
            point=self.local_to_world(surface.point),
            normal=self.local_to_world(surface.normal).normalize(),
            param=surface.param,
        )

    # =========================================================================
    # Surface Queries
    # =========================================================================

    def surface_nearest_to(self, point: Point) -> SurfaceDescriptor:
        """World-space surface point closest to a world-space point."""
        return self._surface_to_world(self.local_surface_nearest_to(self.world_to_local(point)))

    @abstractmethod
    def local_surface_nearest_to(self, point: Point) -> SurfaceDescriptor:
        """Local-space counterpart of surface_nearest_to."""

    def surface_from_param(self, param: Point2D) -> SurfaceDescriptor:
        """World-space surface point for a 2-D parameterization."""
        return self._surface_to_world(self.local_surface_from_param(param))

    @abstractmethod
    def local_surface_from_param(self, param: Point2D) -> SurfaceDescriptor:
        """Local-space surface point for a 2-D parameterization."""

    def sample_surface_point(self, stream: RandomStream, facing: Point | None = None) -> Point:
        """Sample a world-space point on the surface.

        Args:
            stream: Source of uniform random numbers.
            facing: If given, only the part of the surface oriented toward
                this world-space point is sampled.

        Returns:
            World-space surface point.
        """
        if facing is None:
            local = self.sample_local_surface_point(stream)
        else:
            local = self.sample_local_surface_point_facing(stream, self.world_to_local(facing))
        return self.local_to_world(local)

    @abstractmethod
    def sample_local_surface_point(self, stream: RandomStream) -> Point:
        """Uniform-area sample over the whole local surface."""

    @abstractmethod
    def sample_local_surface_point_facing(self, stream: RandomStream, facing: Point) -> Point:
        """Sample the local surface region oriented toward ``facing``."""

    @abstractmethod
    def compute_solid_angle(self, viewed_from: Point) -> float:
        """Approximate solid angle (steradians) subtended from a world point."""
