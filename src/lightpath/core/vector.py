"""Immutable 3-D value types for points, directions and surface normals.

This module provides the coordinate types used throughout the renderer:

- Vector: a direction with magnitude (supports dot, cross, normalize)
- Point: a location in space (Point - Point gives a Vector)
- Normal: a surface normal, which transforms by the inverse-transpose of a
  linear map rather than by the map itself
- Point2D: a 2-D surface parameterization

All types are frozen dataclasses. Vector magnitude is computed on first use
and memoized with ``functools.cached_property`` (single assignment, safe to
share between threads).

Example:
    >>> from src.lightpath.core.vector import Point, Vector
    >>> p = Point(1.0, 2.0, 3.0)
    >>> v = Vector(0.0, 0.0, 2.0)
    >>> (p + v).z
    5.0
    >>> v.normalize().magnitude
    1.0
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from functools import cached_property
from typing import Sequence

# =============================================================================
# Tolerance
# =============================================================================

# Absolute tolerance for "nearly equal" comparisons. Must stay well above the
# spacing of doubles near 1.0 (~2.2e-16) or comparisons of unit vectors
# degenerate to exact equality.
DOUBLE_TOLERANCE = 1e-9


def is_near(a: float, b: float, tolerance: float = DOUBLE_TOLERANCE) -> bool:
    """Check whether two floats are equal within an absolute tolerance.

    Args:
        a: First value.
        b: Second value.
        tolerance: Maximum allowed absolute difference.

    Returns:
        True if |a - b| <= tolerance.
    """
    return abs(a - b) <= tolerance


def _components_from_sequence(values: Sequence[float], kind: str) -> tuple[float, float, float, float]:
    if len(values) == 3:
        return float(values[0]), float(values[1]), float(values[2]), 1.0
    if len(values) == 4:
        return float(values[0]), float(values[1]), float(values[2]), float(values[3])
    raise ValueError(f"{kind} requires 3 or 4 components, got {len(values)}")


# =============================================================================
# Vector
# =============================================================================


@dataclass(frozen=True)
class Vector:
    """A 3-D direction with magnitude.

    Attributes:
        x: X component.
        y: Y component.
        z: Z component.
    """

    x: float
    y: float
    z: float

    @classmethod
    def from_homogeneous(cls, x: float, y: float, z: float, w: float) -> Vector:
        """Build a Vector from homogeneous coordinates.

        Divides by w unless w is (nearly) zero, in which case the input is
        already a pure direction.
        """
        if is_near(w, 0.0):
            return cls(x, y, z)
        return cls(x / w, y / w, z / w)

    @classmethod
    def from_sequence(cls, values: Sequence[float]) -> Vector:
        """Build a Vector from 3 or 4 components.

        Raises:
            ValueError: If values does not have 3 or 4 components.
        """
        x, y, z, w = _components_from_sequence(values, "Vector")
        if len(values) == 3:
            return cls(x, y, z)
        return cls.from_homogeneous(x, y, z, w)

    @classmethod
    def between(cls, start: Point, end: Point) -> Vector:
        """Vector pointing from start to end."""
        return cls(end.x - start.x, end.y - start.y, end.z - start.z)

    @cached_property
    def magnitude_squared(self) -> float:
        return self.x * self.x + self.y * self.y + self.z * self.z

    @cached_property
    def magnitude(self) -> float:
        return math.sqrt(self.magnitude_squared)

    def normalize(self) -> Vector:
        """Return a unit vector with the same direction.

        Raises:
            ValueError: If the vector has zero length.
        """
        mag = self.magnitude
        if mag == 0.0:
            raise ValueError("Cannot normalize a zero-length vector")
        return Vector(self.x / mag, self.y / mag, self.z / mag)

    def dot(self, other: Vector | Normal) -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: Vector | Normal) -> Vector:
        return Vector(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x,
        )

    def orthogonal(self) -> Vector:
        """Return an arbitrary unit vector orthogonal to this one.

        Crosses against whichever world axis is least aligned with this
        vector, so the result is never degenerate.

        Raises:
            ValueError: If the vector has zero length.
        """
        ax, ay, az = abs(self.x), abs(self.y), abs(self.z)
        if ax <= ay and ax <= az:
            axis = Vector(1.0, 0.0, 0.0)
        elif ay <= az:
            axis = Vector(0.0, 1.0, 0.0)
        else:
            axis = Vector(0.0, 0.0, 1.0)
        return self.cross(axis).normalize()

    def is_near(self, other: Vector, tolerance: float = DOUBLE_TOLERANCE) -> bool:
        return (
            is_near(self.x, other.x, tolerance)
            and is_near(self.y, other.y, tolerance)
            and is_near(self.z, other.z, tolerance)
        )

    def to_tuple(self) -> tuple[float, float, float]:
        return (self.x, self.y, self.z)

    def __add__(self, other: Vector) -> Vector:
        return Vector(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Vector) -> Vector:
        return Vector(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, scalar: float) -> Vector:
        return Vector(self.x * scalar, self.y * scalar, self.z * scalar)

    __rmul__ = __mul__

    def __truediv__(self, scalar: float) -> Vector:
        return Vector(self.x / scalar, self.y / scalar, self.z / scalar)

    def __neg__(self) -> Vector:
        return Vector(-self.x, -self.y, -self.z)


# Unit axes
VECTOR_I = Vector(1.0, 0.0, 0.0)
VECTOR_J = Vector(0.0, 1.0, 0.0)
VECTOR_K = Vector(0.0, 0.0, 1.0)


# =============================================================================
# Point
# =============================================================================


@dataclass(frozen=True)
class Point:
    """A location in 3-D space.

    Attributes:
        x: X coordinate.
        y: Y coordinate.
        z: Z coordinate.
    """

    x: float
    y: float
    z: float

    @classmethod
    def from_homogeneous(cls, x: float, y: float, z: float, w: float) -> Point:
        """Build a Point from homogeneous coordinates, dividing by w unless w ~ 0."""
        if is_near(w, 0.0):
            return cls(x, y, z)
        return cls(x / w, y / w, z / w)

    @classmethod
    def from_sequence(cls, values: Sequence[float]) -> Point:
        """Build a Point from 3 or 4 components.

        Raises:
            ValueError: If values does not have 3 or 4 components.
        """
        x, y, z, w = _components_from_sequence(values, "Point")
        return cls.from_homogeneous(x, y, z, w)

    def to_vector(self) -> Vector:
        """Position vector from the origin to this point."""
        return Vector(self.x, self.y, self.z)

    def distance_to(self, other: Point) -> float:
        return Vector.between(self, other).magnitude

    def is_near(self, other: Point, tolerance: float = DOUBLE_TOLERANCE) -> bool:
        return (
            is_near(self.x, other.x, tolerance)
            and is_near(self.y, other.y, tolerance)
            and is_near(self.z, other.z, tolerance)
        )

    def to_tuple(self) -> tuple[float, float, float]:
        return (self.x, self.y, self.z)

    def __add__(self, other: Vector) -> Point:
        return Point(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Point | Vector) -> Vector | Point:
        if isinstance(other, Point):
            return Vector(self.x - other.x, self.y - other.y, self.z - other.z)
        return Point(self.x - other.x, self.y - other.y, self.z - other.z)


ORIGIN = Point(0.0, 0.0, 0.0)


# =============================================================================
# Normal
# =============================================================================


@dataclass(frozen=True)
class Normal:
    """A surface normal.

    Kept distinct from Vector because a Normal maps through the
    inverse-transpose of a transform's linear part.
    """

    x: float
    y: float
    z: float

    @classmethod
    def from_vector(cls, vector: Vector) -> Normal:
        return cls(vector.x, vector.y, vector.z)

    def as_vector(self) -> Vector:
        return Vector(self.x, self.y, self.z)

    def normalize(self) -> Normal:
        """Return a unit-length normal.

        Raises:
            ValueError: If the normal has zero length.
        """
        return Normal.from_vector(self.as_vector().normalize())

    def dot(self, other: Vector | Normal) -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z

    def is_near(self, other: Normal, tolerance: float = DOUBLE_TOLERANCE) -> bool:
        return self.as_vector().is_near(other.as_vector(), tolerance)

    def __neg__(self) -> Normal:
        return Normal(-self.x, -self.y, -self.z)


# =============================================================================
# Point2D
# =============================================================================


@dataclass(frozen=True)
class Point2D:
    """A 2-D coordinate, used for surface parameterizations."""

    x: float
    y: float
