"""Scene module: primitives, lights and the World container.

Components:
    primitive: A Shape bound to a BSDF
    light: Point, sphere and infinite light sources
    world: Read-only collection queried by the integrators

The World is built before rendering and never changes during a render,
so worker threads query it without locking.
"""

from .light import FalloffType, InfiniteLight, Light, PointLight, SphereLight
from .primitive import Primitive
from .world import World

__all__ = [
    "Primitive",
    "World",
    "Light",
    "FalloffType",
    "PointLight",
    "SphereLight",
    "InfiniteLight",
]
