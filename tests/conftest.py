"""Pytest configuration for renderer tests.

This module provides shared fixtures for all test modules: random streams,
samples with a root stream attached, and a small scene of one red diffuse
sphere lit from directly above.
"""

import numpy as np
import pytest


@pytest.fixture
def uniform_stream():
    """A seeded uniform stream for BSDF and shape sampling."""
    from src.lightpath.sampling.streams import UniformStream

    return UniformStream(np.random.default_rng(1234))


@pytest.fixture
def make_sample():
    """Factory for Samples carrying a seeded root stream."""
    from src.lightpath.sampling.sample import Sample
    from src.lightpath.sampling.streams import UniformStream

    def _make(image_x=0.5, image_y=0.5, seed=0, **kwargs):
        return Sample(
            image_x=image_x,
            image_y=image_y,
            random=UniformStream(np.random.default_rng(seed)),
            **kwargs,
        )

    return _make


@pytest.fixture
def make_interaction():
    """Factory for an Interaction at a point, hit by a ray along ``direction``.

    ``front_face`` follows from the normal and the ray direction, the same
    way a shape reports it.
    """
    from src.lightpath.core.ray import Ray
    from src.lightpath.core.vector import Normal, Point, Point2D, Vector
    from src.lightpath.geometry.surface import Interaction, SurfaceDescriptor

    def _make(direction=(0.0, -1.0, 0.0), normal=(0.0, 1.0, 0.0), point=(0.0, 0.0, 0.0)):
        hit = Point(*point)
        d = Vector(*direction).normalize()
        ray = Ray(hit - d, d).with_t(1.0)
        surface = SurfaceDescriptor(hit, Normal(*normal).normalize(), Point2D(0.0, 0.0))
        return Interaction.from_surface(surface, ray)

    return _make


@pytest.fixture
def red_sphere_world():
    """A unit red Lambertian sphere at the origin with a point light at y = 10."""
    from src.lightpath.core.spectrum import Spectrum
    from src.lightpath.core.transform import TranslationTransform
    from src.lightpath.geometry.sphere import Sphere
    from src.lightpath.materials.lambertian import LambertianBSDF
    from src.lightpath.materials.texture import ConstantTexture
    from src.lightpath.scene.light import PointLight
    from src.lightpath.scene.primitive import Primitive
    from src.lightpath.scene.world import World

    sphere = Primitive(Sphere(1.0), LambertianBSDF(ConstantTexture(Spectrum(1.0, 0.0, 0.0))))
    light = PointLight(Spectrum(100.0, 100.0, 100.0), [TranslationTransform(0.0, 10.0, 0.0)])
    return World([sphere], [light])


@pytest.fixture
def top_down_camera():
    """Factory for a camera at y = 5 looking straight down at the origin."""
    from src.lightpath.camera.pinhole import PinholeCamera

    def _make(width=9, height=9, vfov=30.0):
        return PinholeCamera(
            lookfrom=(0.0, 5.0, 0.0),
            lookat=(0.0, 0.0, 0.0),
            vup=(0.0, 0.0, -1.0),
            vfov=vfov,
            image_width=width,
            image_height=height,
        )

    return _make
