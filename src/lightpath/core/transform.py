"""Invertible affine transforms between object-local and world frames.

Every transform is specified in its local-to-world sense: a
``TranslationTransform(2, 0, 0)`` moves an object's local origin to world
x = 2. The inverse mapping (world-to-local) is always available.

Transforms act on four kinds of value:

- Point: full affine map (translation applies)
- Vector: linear part only (translation is a no-op)
- Normal: inverse-transpose of the linear part
- Ray: origin as a Point, direction as a Vector

A TransformChain composes several transforms. Local-to-world applies them
head-first (in list order); world-to-local applies their inverses tail-first.

Example:
    >>> from src.lightpath.core.transform import (
    ...     RotationTransform, ScaleTransform, TransformChain, TranslationTransform
    ... )
    >>> from src.lightpath.core.vector import Point, Vector
    >>> chain = TransformChain([
    ...     ScaleTransform(2.0, 2.0, 2.0),
    ...     RotationTransform(Vector(0.0, 1.0, 0.0), 90.0),
    ...     TranslationTransform(0.0, 0.0, -5.0),
    ... ])
    >>> world = chain.local_to_world(Point(1.0, 0.0, 0.0))
    >>> chain.world_to_local(world).is_near(Point(1.0, 0.0, 0.0), 1e-9)
    True
"""

from __future__ import annotations

from dataclasses import replace
from functools import reduce
from typing import Iterable, Iterator, TypeVar

import numpy as np
import numpy.typing as npt

from src.lightpath.core.quaternion import Quaternion
from src.lightpath.core.ray import Ray
from src.lightpath.core.vector import Normal, Point, Vector

Transformed = TypeVar("Transformed", Point, Vector, Normal, Ray)

# Determinant magnitude below which a matrix is treated as singular
SINGULAR_DETERMINANT = 1e-12


def as_matrix(values: npt.ArrayLike) -> npt.NDArray[np.float64]:
    """Convert input to a 4x4 float64 matrix.

    Raises:
        ValueError: If the input is not 4x4.
    """
    matrix = np.asarray(values, dtype=np.float64)
    if matrix.shape != (4, 4):
        raise ValueError(f"Transform matrix must be 4x4, got shape {matrix.shape}")
    return matrix


# =============================================================================
# Transform Base
# =============================================================================


class Transform:
    """An invertible affine transform held as a pair of 4x4 matrices.

    Subclasses with cheap closed forms (translation, scale, rotation)
    override the per-type hooks; the base class falls back to matrix
    multiplication.

    Attributes:
        matrix: Local-to-world 4x4 matrix.
        inverse_matrix: World-to-local 4x4 matrix.
    """

    def __init__(
        self,
        matrix: npt.ArrayLike,
        inverse: npt.ArrayLike | None = None,
    ) -> None:
        self._matrix = as_matrix(matrix)
        if inverse is None:
            det = float(np.linalg.det(self._matrix))
            if abs(det) < SINGULAR_DETERMINANT:
                raise ValueError(f"Transform matrix is singular (determinant={det})")
            inverse = np.linalg.inv(self._matrix)
        self._inverse = as_matrix(inverse)

    @property
    def matrix(self) -> npt.NDArray[np.float64]:
        return self._matrix.copy()

    @property
    def inverse_matrix(self) -> npt.NDArray[np.float64]:
        return self._inverse.copy()

    def local_to_world(self, value: Transformed) -> Transformed:
        return self._map(value, forward=True)

    def world_to_local(self, value: Transformed) -> Transformed:
        return self._map(value, forward=False)

    def inverse(self) -> Transform:
        """Return the transform that undoes this one."""
        return Transform(self._inverse, self._matrix)

    def _map(self, value: Transformed, forward: bool) -> Transformed:
        if isinstance(value, Ray):
            return replace(
                value,
                origin=self._map_point(value.origin, forward),
                direction=self._map_vector(value.direction, forward),
            )
        if isinstance(value, Point):
            return self._map_point(value, forward)
        if isinstance(value, Normal):
            return self._map_normal(value, forward)
        if isinstance(value, Vector):
            return self._map_vector(value, forward)
        raise TypeError(f"Cannot transform value of type {type(value).__name__}")

    def _map_point(self, point: Point, forward: bool) -> Point:
        m = self._matrix if forward else self._inverse
        h = m @ np.array([point.x, point.y, point.z, 1.0])
        return Point.from_homogeneous(float(h[0]), float(h[1]), float(h[2]), float(h[3]))

    def _map_vector(self, vector: Vector, forward: bool) -> Vector:
        m = self._matrix if forward else self._inverse
        h = m @ np.array([vector.x, vector.y, vector.z, 0.0])
        return Vector(float(h[0]), float(h[1]), float(h[2]))

    def _map_normal(self, normal: Normal, forward: bool) -> Normal:
        # Normals use the inverse-transpose of the forward map
        m = self._inverse.T if forward else self._matrix.T
        h = m @ np.array([normal.x, normal.y, normal.z, 0.0])
        return Normal(float(h[0]), float(h[1]), float(h[2]))

    def __repr__(self) -> str:
        return f"{type(self).__name__}(matrix={self._matrix.tolist()})"


# =============================================================================
# Concrete Transforms
# =============================================================================


class TranslationTransform(Transform):
    """Shift by (dx, dy, dz). Vectors and normals pass through unchanged."""

    def __init__(self, dx: float, dy: float, dz: float) -> None:
        self.dx, self.dy, self.dz = float(dx), float(dy), float(dz)
        matrix = np.identity(4)
        matrix[:3, 3] = (self.dx, self.dy, self.dz)
        inverse = np.identity(4)
        inverse[:3, 3] = (-self.dx, -self.dy, -self.dz)
        super().__init__(matrix, inverse)

    def _map_point(self, point: Point, forward: bool) -> Point:
        sign = 1.0 if forward else -1.0
        return Point(point.x + sign * self.dx, point.y + sign * self.dy, point.z + sign * self.dz)

    def _map_vector(self, vector: Vector, forward: bool) -> Vector:
        return vector

    def _map_normal(self, normal: Normal, forward: bool) -> Normal:
        return normal

    def __repr__(self) -> str:
        return f"TranslationTransform({self.dx}, {self.dy}, {self.dz})"


class ScaleTransform(Transform):
    """Per-axis scale by (sx, sy, sz).

    Raises:
        ValueError: If any scale factor is zero (the inverse would divide by
            zero).
    """

    def __init__(self, sx: float, sy: float, sz: float) -> None:
        if sx == 0.0 or sy == 0.0 or sz == 0.0:
            raise ValueError(f"Scale factors must be non-zero, got ({sx}, {sy}, {sz})")
        self.sx, self.sy, self.sz = float(sx), float(sy), float(sz)
        super().__init__(
            np.diag([self.sx, self.sy, self.sz, 1.0]),
            np.diag([1.0 / self.sx, 1.0 / self.sy, 1.0 / self.sz, 1.0]),
        )

    def _scale(self, x: float, y: float, z: float, forward: bool) -> tuple[float, float, float]:
        if forward:
            return x * self.sx, y * self.sy, z * self.sz
        return x / self.sx, y / self.sy, z / self.sz

    def _map_point(self, point: Point, forward: bool) -> Point:
        return Point(*self._scale(point.x, point.y, point.z, forward))

    def _map_vector(self, vector: Vector, forward: bool) -> Vector:
        return Vector(*self._scale(vector.x, vector.y, vector.z, forward))

    def _map_normal(self, normal: Normal, forward: bool) -> Normal:
        # Inverse-transpose of a diagonal matrix is the reciprocal diagonal
        return Normal(*self._scale(normal.x, normal.y, normal.z, not forward))

    def __repr__(self) -> str:
        return f"ScaleTransform({self.sx}, {self.sy}, {self.sz})"


class RotationTransform(Transform):
    """Rotation by an angle (degrees) about an axis through the origin.

    Applied through a unit quaternion. Rotations are orthogonal, so normals
    rotate exactly like vectors.
    """

    def __init__(self, axis: Vector, degrees: float) -> None:
        self.axis = axis
        self.degrees = float(degrees)
        self._quaternion = Quaternion.from_axis_angle(axis, degrees)
        self._conjugate = self._quaternion.conjugate()
        matrix = self._quaternion.to_matrix()
        super().__init__(matrix, matrix.T)

    @property
    def quaternion(self) -> Quaternion:
        return self._quaternion

    def _rotate(self, xyz: tuple[float, float, float], forward: bool) -> tuple[float, float, float]:
        q = self._quaternion if forward else self._conjugate
        return q.rotate(xyz)

    def _map_point(self, point: Point, forward: bool) -> Point:
        return Point(*self._rotate(point.to_tuple(), forward))

    def _map_vector(self, vector: Vector, forward: bool) -> Vector:
        return Vector(*self._rotate(vector.to_tuple(), forward))

    def _map_normal(self, normal: Normal, forward: bool) -> Normal:
        return Normal(*self._rotate((normal.x, normal.y, normal.z), forward))

    def __repr__(self) -> str:
        return f"RotationTransform({self.axis}, {self.degrees})"


# =============================================================================
# Transform Chains
# =============================================================================


class TransformChain:
    """An ordered, immutable sequence of transforms.

    ``local_to_world`` applies the transforms head-first;
    ``world_to_local`` applies their inverses tail-first, so the two are
    exact inverses of each other.
    """

    def __init__(self, transforms: Iterable[Transform] = ()) -> None:
        self._transforms: tuple[Transform, ...] = tuple(transforms)

    @property
    def transforms(self) -> tuple[Transform, ...]:
        return self._transforms

    def appended(self, transform: Transform) -> TransformChain:
        """Return a new chain with ``transform`` applied last (in world terms)."""
        return TransformChain((*self._transforms, transform))

    def local_to_world(self, value: Transformed) -> Transformed:
        for transform in self._transforms:
            value = transform.local_to_world(value)
        return value

    def world_to_local(self, value: Transformed) -> Transformed:
        for transform in reversed(self._transforms):
            value = transform.world_to_local(value)
        return value

    @property
    def matrix(self) -> npt.NDArray[np.float64]:
        """Composite local-to-world matrix."""
        return reduce(lambda acc, t: t.matrix @ acc, self._transforms, np.identity(4))

    def __len__(self) -> int:
        return len(self._transforms)

    def __iter__(self) -> Iterator[Transform]:
        return iter(self._transforms)

    def __repr__(self) -> str:
        return f"TransformChain({list(self._transforms)!r})"


class Transformable:
    """Mixin for objects placed in the world through a TransformChain."""

    def __init__(self, transforms: Iterable[Transform] = ()) -> None:
        self._chain = TransformChain(transforms)

    @property
    def transforms(self) -> TransformChain:
        return self._chain

    def append_transform(self, transform: Transform) -> None:
        """Apply ``transform`` after all existing transforms."""
        self._chain = self._chain.appended(transform)
        self._on_transforms_changed()

    def local_to_world(self, value: Transformed) -> Transformed:
        return self._chain.local_to_world(value)

    def world_to_local(self, value: Transformed) -> Transformed:
        return self._chain.world_to_local(value)

    def _on_transforms_changed(self) -> None:
        """Hook for subclasses that cache world-space data."""
