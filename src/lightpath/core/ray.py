"""Ray data structure for recursive light-transport evaluation.

A Ray is immutable. Its direction is normalized on construction, and a ray
that is spawned from another (a reflection, a refraction or a shadow ray)
records one more level of recursion depth and carries forward the parent's
accumulated weight.

Example:
    >>> from src.lightpath.core.ray import Ray
    >>> from src.lightpath.core.vector import Point, Vector
    >>> ray = Ray(Point(0.0, 0.0, 0.0), Vector(0.0, 0.0, -2.0))
    >>> ray.direction.z
    -1.0
    >>> ray.point_at(5.0).z  # Point 5 units along the ray
    -5.0
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace

from src.lightpath.core.vector import DOUBLE_TOLERANCE, Point, Vector


@dataclass(frozen=True)
class Ray:
    """A ray with origin, normalized direction and traversal state.

    Attributes:
        origin: Starting point of the ray.
        direction: Unit direction vector.
        depth: Recursion depth; camera rays start at 0.
        t: Parametric distance of the current hit (0 until one is recorded).
        t_min: Smallest parametric distance accepted as a hit.
        t_max: Largest parametric distance accepted as a hit.
        weight: Accumulated importance weight.
    """

    origin: Point
    direction: Vector
    depth: int = 0
    t: float = 0.0
    t_min: float = DOUBLE_TOLERANCE
    t_max: float = math.inf
    weight: float = 1.0

    def __post_init__(self) -> None:
        if self.direction.magnitude == 0.0:
            raise ValueError(f"Ray direction must be non-zero, got {self.direction}")
        if self.depth < 0:
            raise ValueError(f"Ray depth must be non-negative, got {self.depth}")
        if self.t_min > self.t_max:
            raise ValueError(f"Ray bounds are inverted: t_min={self.t_min} > t_max={self.t_max}")
        object.__setattr__(self, "direction", self.direction.normalize())

    def point_at(self, t: float) -> Point:
        """Compute origin + t * direction."""
        return self.origin + self.direction * t

    @property
    def hit_point(self) -> Point:
        """Point at the currently recorded hit distance."""
        return self.point_at(self.t)

    def with_t(self, t: float) -> Ray:
        """Return a copy recording a hit at parametric distance t."""
        return replace(self, t=t)

    def in_range(self, t: float) -> bool:
        return self.t_min <= t <= self.t_max

    def spawn(
        self,
        origin: Point,
        direction: Vector,
        *,
        weight: float = 1.0,
        t_max: float = math.inf,
    ) -> Ray:
        """Create a child ray one level deeper than this one.

        Args:
            origin: Child ray origin.
            direction: Child ray direction (normalized on construction).
            weight: Extra weight factor multiplied into the parent's weight.
            t_max: Upper parametric bound for the child.

        Returns:
            A new Ray with depth + 1 and weight self.weight * weight.
        """
        return Ray(
            origin=origin,
            direction=direction,
            depth=self.depth + 1,
            t_max=t_max,
            weight=self.weight * weight,
        )
