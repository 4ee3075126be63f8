"""Core building blocks.

Components:
    vector: Point, Vector, Normal and Point2D value types
    quaternion: Unit quaternions for rotation
    transform: Invertible affine transforms and transform chains
    ray: Immutable rays with depth, bounds and weight
    spectrum: RGB radiance values
    config: RenderConfig and rendering constants
    render: Top-level render entry point

Vectors, points and normals are immutable. Normals are mapped by the
inverse-transpose of a transform, so they stay perpendicular to surfaces
under non-uniform scaling.
"""

from .config import RenderConfig
from .quaternion import Quaternion
from .ray import Ray
from .spectrum import BLACK, WHITE, Spectrum
from .transform import (
    RotationTransform,
    ScaleTransform,
    Transform,
    Transformable,
    TransformChain,
    TranslationTransform,
)
from .vector import (
    DOUBLE_TOLERANCE,
    ORIGIN,
    VECTOR_I,
    VECTOR_J,
    VECTOR_K,
    Normal,
    Point,
    Point2D,
    Vector,
    is_near,
)

# Note: render is NOT imported here to avoid circular imports.
# Use: from src.lightpath.core.render import render

__all__ = [
    # Vector algebra
    "DOUBLE_TOLERANCE",
    "is_near",
    "Vector",
    "Point",
    "Normal",
    "Point2D",
    "ORIGIN",
    "VECTOR_I",
    "VECTOR_J",
    "VECTOR_K",
    "Quaternion",
    # Transforms
    "Transform",
    "TranslationTransform",
    "ScaleTransform",
    "RotationTransform",
    "TransformChain",
    "Transformable",
    # Rays and radiance
    "Ray",
    "Spectrum",
    "BLACK",
    "WHITE",
    # Configuration
    "RenderConfig",
]
