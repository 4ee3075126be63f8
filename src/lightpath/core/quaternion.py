"""Quaternion arithmetic for rotations.

A unit quaternion q rotates a vector v as ``q * v * conj(q)``, treating v as
the pure quaternion (0, v). Composition is a single Hamilton product, which
avoids the gimbal problems of chained Euler-angle matrices.

Example:
    >>> from src.lightpath.core.quaternion import Quaternion
    >>> from src.lightpath.core.vector import Vector
    >>> q = Quaternion.from_axis_angle(Vector(0.0, 0.0, 1.0), 90.0)
    >>> x, y, z = q.rotate((1.0, 0.0, 0.0))
    >>> round(y, 6)
    1.0
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from functools import cached_property

import numpy as np
import numpy.typing as npt

from src.lightpath.core.vector import Vector


@dataclass(frozen=True)
class Quaternion:
    """A quaternion a + bi + cj + dk.

    Attributes:
        a: Real (scalar) part.
        b: i component.
        c: j component.
        d: k component.
    """

    a: float
    b: float
    c: float
    d: float

    @classmethod
    def from_axis_angle(cls, axis: Vector, degrees: float) -> Quaternion:
        """Build the unit quaternion rotating by ``degrees`` about ``axis``.

        Args:
            axis: Rotation axis (need not be normalized).
            degrees: Rotation angle in degrees, counter-clockwise looking down
                the axis toward the origin.

        Raises:
            ValueError: If the axis has zero length.
        """
        if axis.magnitude == 0.0:
            raise ValueError("Rotation axis must have non-zero length")
        unit = axis.normalize()
        half = math.radians(degrees) / 2.0
        s = math.sin(half)
        return cls(math.cos(half), unit.x * s, unit.y * s, unit.z * s)

    @cached_property
    def norm(self) -> float:
        return math.sqrt(self.a * self.a + self.b * self.b + self.c * self.c + self.d * self.d)

    def normalize(self) -> Quaternion:
        n = self.norm
        if n == 0.0:
            raise ValueError("Cannot normalize a zero quaternion")
        return Quaternion(self.a / n, self.b / n, self.c / n, self.d / n)

    def conjugate(self) -> Quaternion:
        return Quaternion(self.a, -self.b, -self.c, -self.d)

    def reciprocal(self) -> Quaternion:
        n2 = self.norm * self.norm
        if n2 == 0.0:
            raise ValueError("Zero quaternion has no reciprocal")
        conj = self.conjugate()
        return Quaternion(conj.a / n2, conj.b / n2, conj.c / n2, conj.d / n2)

    def __mul__(self, other: Quaternion) -> Quaternion:
        # Hamilton product
        return Quaternion(
            self.a * other.a - self.b * other.b - self.c * other.c - self.d * other.d,
            self.a * other.b + self.b * other.a + self.c * other.d - self.d * other.c,
            self.a * other.c - self.b * other.d + self.c * other.a + self.d * other.b,
            self.a * other.d + self.b * other.c - self.c * other.b + self.d * other.a,
        )

    def rotate(self, xyz: tuple[float, float, float]) -> tuple[float, float, float]:
        """Rotate a 3-tuple by this (unit) quaternion."""
        p = Quaternion(0.0, xyz[0], xyz[1], xyz[2])
        r = self * p * self.conjugate()
        return (r.b, r.c, r.d)

    def to_matrix(self) -> npt.NDArray[np.float64]:
        """Return the equivalent 4x4 homogeneous rotation matrix."""
        q = self.normalize()
        a, b, c, d = q.a, q.b, q.c, q.d
        return np.array(
            [
                [1 - 2 * (c * c + d * d), 2 * (b * c - a * d), 2 * (b * d + a * c), 0.0],
                [2 * (b * c + a * d), 1 - 2 * (b * b + d * d), 2 * (c * d - a * b), 0.0],
                [2 * (b * d - a * c), 2 * (c * d + a * b), 1 - 2 * (b * b + c * c), 0.0],
                [0.0, 0.0, 0.0, 1.0],
            ],
            dtype=np.float64,
        )
