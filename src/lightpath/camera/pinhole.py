"""Pinhole camera model for perspective projection ray generation.

This module implements a pinhole camera that turns Samples into primary
rays. The camera supports:
- Look-at positioning (lookfrom, lookat, vup)
- Vertical field of view in degrees
- Aspect ratio taken from the image size

The camera builds an orthonormal basis (u, v, w) from the view parameters:
- w: points from lookat toward lookfrom (opposite view direction)
- u: points right in the image plane
- v: points up in the image plane

A Sample's continuous image coordinates are divided by the image size to get
normalized viewport coordinates; image y = 0 is the bottom row. Lens
coordinates have no effect on a pinhole.

Example:
    >>> from src.lightpath.camera.pinhole import PinholeCamera
    >>> from src.lightpath.sampling.sample import Sample
    >>>
    >>> # Create camera looking at origin from z=3
    >>> camera = PinholeCamera(
    ...     lookfrom=(0.0, 0.0, 3.0),
    ...     lookat=(0.0, 0.0, 0.0),
    ...     vup=(0.0, 1.0, 0.0),
    ...     vfov=60.0,
    ...     image_width=64,
    ...     image_height=64,
    ... )
    >>> ray = camera.get_ray(Sample(image_x=32.0, image_y=32.0))  # Ray through image center
    >>> round(ray.direction.z, 6)
    -1.0
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field

import numpy as np
import numpy.typing as npt

from src.lightpath.core.ray import Ray
from src.lightpath.core.vector import Point, Vector
from src.lightpath.sampling.sample import Sample


def _unit(v: npt.NDArray[np.float64], name: str) -> npt.NDArray[np.float64]:
    norm = float(np.linalg.norm(v))
    if norm == 0.0:
        raise ValueError(f"Camera {name} vector is degenerate")
    return v / norm


@dataclass
class PinholeCamera:
    """A pinhole (perspective) camera.

    A pinhole camera produces perfect perspective projection with no
    depth of field effects. It is the simplest camera model for ray tracing.

    Attributes:
        lookfrom: Camera position in world space (x, y, z).
        lookat: Point the camera is looking at in world space (x, y, z).
        vup: Up direction vector for camera orientation (typically (0, 1, 0)).
        vfov: Vertical field of view in degrees (typically 40-90).
        image_width: Image width in pixels.
        image_height: Image height in pixels.

    Raises:
        ValueError: If the field of view or image size is out of range, or
            the view direction is parallel to vup.
    """

    lookfrom: tuple[float, float, float]
    lookat: tuple[float, float, float]
    vup: tuple[float, float, float]
    vfov: float
    image_width: int
    image_height: int
    _origin: Point = field(init=False, repr=False)
    _lower_left: npt.NDArray[np.float64] = field(init=False, repr=False)
    _horizontal: npt.NDArray[np.float64] = field(init=False, repr=False)
    _vertical: npt.NDArray[np.float64] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if not 0.0 < self.vfov < 180.0:
            raise ValueError(f"vfov must be in (0, 180) degrees, got {self.vfov}")
        if self.image_width < 1 or self.image_height < 1:
            raise ValueError(
                f"Image size must be positive, got {self.image_width}x{self.image_height}"
            )

        # Viewport dimensions at unit distance
        h = math.tan(math.radians(self.vfov) / 2.0)
        viewport_height = 2.0 * h
        viewport_width = (self.image_width / self.image_height) * viewport_height

        lookfrom = np.array(self.lookfrom, dtype=np.float64)
        lookat = np.array(self.lookat, dtype=np.float64)
        vup = np.array(self.vup, dtype=np.float64)

        # w points from lookat toward lookfrom (backward)
        w = _unit(lookfrom - lookat, "view")
        # u points right (perpendicular to w and vup)
        u = _unit(np.cross(vup, w), "up")
        # v points up in the camera's frame
        v = np.cross(w, u)

        self._horizontal = viewport_width * u
        self._vertical = viewport_height * v
        self._lower_left = lookfrom - w - self._horizontal / 2.0 - self._vertical / 2.0
        self._origin = Point(*(float(c) for c in lookfrom))

    @property
    def aspect_ratio(self) -> float:
        return self.image_width / self.image_height

    def get_ray_uv(self, u: float, v: float) -> Ray:
        """Ray through normalized viewport coordinates.

        Args:
            u: Horizontal coordinate in [0, 1] (left to right).
            v: Vertical coordinate in [0, 1] (bottom to top).
        """
        target = self._lower_left + u * self._horizontal + v * self._vertical
        direction = Vector(
            float(target[0]) - self._origin.x,
            float(target[1]) - self._origin.y,
            float(target[2]) - self._origin.z,
        )
        return Ray(self._origin, direction)

    def get_ray(self, sample: Sample) -> Ray:
        """Primary ray for a Sample's image-plane position."""
        return self.get_ray_uv(sample.image_x / self.image_width, sample.image_y / self.image_height)
