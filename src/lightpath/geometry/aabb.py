"""Axis-aligned bounding boxes for cheap ray rejection.

An AABB is always expressed in world coordinates. Shapes build theirs by
transforming the eight corners of a local-space box to world space and
taking the bounds of the result.

Example:
    >>> from src.lightpath.geometry.aabb import AABB
    >>> from src.lightpath.core.ray import Ray
    >>> from src.lightpath.core.vector import Point, Vector
    >>> box = AABB(Point(-1.0, -1.0, -1.0), Point(1.0, 1.0, 1.0))
    >>> box.is_intersecting(Ray(Point(0.0, 0.0, 5.0), Vector(0.0, 0.0, -1.0)))
    True
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from itertools import product
from typing import TYPE_CHECKING, Iterable

from src.lightpath.core.vector import Point

if TYPE_CHECKING:
    from src.lightpath.core.ray import Ray
    from src.lightpath.core.transform import TransformChain


@dataclass(frozen=True)
class AABB:
    """Axis-aligned box between two corner points.

    Attributes:
        min_point: Corner with the smallest coordinates.
        max_point: Corner with the largest coordinates.
    """

    min_point: Point
    max_point: Point

    def __post_init__(self) -> None:
        lo, hi = self.min_point, self.max_point
        if lo.x > hi.x or lo.y > hi.y or lo.z > hi.z:
            raise ValueError(f"AABB min corner {lo} exceeds max corner {hi}")

    @classmethod
    def from_points(cls, points: Iterable[Point]) -> AABB:
        """Smallest box containing all points.

        Raises:
            ValueError: If no points are given.
        """
        pts = list(points)
        if not pts:
            raise ValueError("Cannot build an AABB from zero points")
        return cls(
            Point(min(p.x for p in pts), min(p.y for p in pts), min(p.z for p in pts)),
            Point(max(p.x for p in pts), max(p.y for p in pts), max(p.z for p in pts)),
        )

    @classmethod
    def from_local(cls, local_min: Point, local_max: Point, chain: TransformChain) -> AABB:
        """World-space box enclosing a local-space box under a transform chain."""
        corners = (
            Point(x, y, z)
            for x, y, z in product(
                (local_min.x, local_max.x),
                (local_min.y, local_max.y),
                (local_min.z, local_max.z),
            )
        )
        return cls.from_points(chain.local_to_world(c) for c in corners)

    @staticmethod
    def union(*boxes: AABB) -> AABB:
        """Smallest box containing all given boxes."""
        if not boxes:
            raise ValueError("Cannot take the union of zero AABBs")
        return AABB.from_points(p for box in boxes for p in (box.min_point, box.max_point))

    @property
    def corners(self) -> list[Point]:
        lo, hi = self.min_point, self.max_point
        return [Point(x, y, z) for x, y, z in product((lo.x, hi.x), (lo.y, hi.y), (lo.z, hi.z))]

    def contains(self, point: Point) -> bool:
        lo, hi = self.min_point, self.max_point
        return lo.x <= point.x <= hi.x and lo.y <= point.y <= hi.y and lo.z <= point.z <= hi.z

    def is_intersecting(self, ray: Ray) -> bool:
        """Slab test: does the ray pass through the box ahead of its origin?"""
        t_near, t_far = -math.inf, math.inf
        for origin, direction, lo, hi in (
            (ray.origin.x, ray.direction.x, self.min_point.x, self.max_point.x),
            (ray.origin.y, ray.direction.y, self.min_point.y, self.max_point.y),
            (ray.origin.z, ray.direction.z, self.min_point.z, self.max_point.z),
        ):
            if direction == 0.0:
                # Parallel to this slab: must already lie within it
                if origin < lo or origin > hi:
                    return False
                continue
            t0 = (lo - origin) / direction
            t1 = (hi - origin) / direction
            if t0 > t1:
                t0, t1 = t1, t0
            t_near = max(t_near, t0)
            t_far = min(t_far, t1)
            if t_near > t_far:
                return False
        return t_far >= 0.0
