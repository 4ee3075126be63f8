"""Geometry module for shapes and ray intersection.

Components:
    aabb: Axis-aligned bounding boxes for cheap ray rejection
    surface: SurfaceDescriptor and the Interaction produced by a hit
    shape: Abstract Shape with its local-to-world transform chain
    sphere: Sphere centered at its local origin
    plane: Infinite plane y = 0 in local coordinates

Every shape intersects in its local frame and converts the result back to
world coordinates. A miss returns None; intersection queries never raise.
"""

from .aabb import AABB
from .plane import Plane
from .shape import Shape
from .sphere import Sphere
from .surface import Interaction, SurfaceDescriptor

__all__ = [
    "AABB",
    "SurfaceDescriptor",
    "Interaction",
    "Shape",
    "Sphere",
    "Plane",
]
