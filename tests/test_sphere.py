"""Unit tests for the sphere shape.

Tests cover:
- Ray-sphere intersection from outside, inside and on a miss
- Hit normals and world-space distances under transforms
- Surface parameterization round trip
- Surface sampling (whole sphere and facing hemisphere)
- Solid angle
"""

import math

import numpy as np
import pytest


class TestSphereIntersection:
    """Tests for Sphere.get_intersection."""

    def test_invalid_radius(self):
        """Test non-positive radii are rejected."""
        from src.lightpath.geometry.sphere import Sphere

        with pytest.raises(ValueError, match="positive"):
            Sphere(0.0)
        with pytest.raises(ValueError, match="positive"):
            Sphere(-1.0)

    def test_hit_from_outside(self):
        """Test a ray toward the center hits the near side."""
        from src.lightpath.core.ray import Ray
        from src.lightpath.core.vector import Normal, Point, Vector
        from src.lightpath.geometry.sphere import Sphere

        hit = Sphere(1.0).get_intersection(Ray(Point(0.0, 0.0, 5.0), Vector(0.0, 0.0, -1.0)))
        assert hit is not None
        assert hit.distance == pytest.approx(4.0)
        assert hit.point.is_near(Point(0.0, 0.0, 1.0))
        assert hit.normal.is_near(Normal(0.0, 0.0, 1.0))
        assert hit.front_face

    def test_miss_returns_none(self):
        """Test a ray passing beside the sphere reports no hit."""
        from src.lightpath.core.ray import Ray
        from src.lightpath.core.vector import Point, Vector
        from src.lightpath.geometry.sphere import Sphere

        assert Sphere(1.0).get_intersection(Ray(Point(2.0, 0.0, 5.0), Vector(0.0, 0.0, -1.0))) is None

    def test_sphere_behind_ray(self):
        """Test a sphere behind the ray origin is not hit."""
        from src.lightpath.core.ray import Ray
        from src.lightpath.core.vector import Point, Vector
        from src.lightpath.geometry.sphere import Sphere

        assert Sphere(1.0).get_intersection(Ray(Point(0.0, 0.0, 5.0), Vector(0.0, 0.0, 1.0))) is None

    def test_hit_from_inside(self):
        """Test a ray from the center exits through the far side."""
        from src.lightpath.core.ray import Ray
        from src.lightpath.core.vector import Point, Vector
        from src.lightpath.geometry.sphere import Sphere

        hit = Sphere(2.0).get_intersection(Ray(Point(0.0, 0.0, 0.0), Vector(1.0, 0.0, 0.0)))
        assert hit is not None
        assert hit.distance == pytest.approx(2.0)
        assert not hit.front_face

    @pytest.mark.parametrize("seed", range(5))
    def test_hits_from_center_land_on_surface(self, seed):
        """Test rays from the center hit at distance R with normal = hit point / R."""
        from src.lightpath.core.ray import Ray
        from src.lightpath.core.vector import Normal, Point, Vector
        from src.lightpath.geometry.sphere import Sphere

        rng = np.random.default_rng(seed)
        radius = float(rng.uniform(0.5, 10.0))
        sphere = Sphere(radius)
        for _ in range(20):
            direction = Vector(*(float(c) for c in rng.normal(size=3)))
            hit = sphere.get_intersection(Ray(Point(0.0, 0.0, 0.0), direction))
            assert hit is not None
            assert abs(hit.distance - radius) < 1e-5
            expected = Normal.from_vector(hit.point.to_vector().normalize())
            assert hit.normal.is_near(expected, 1e-9)

    def test_translated_and_scaled(self):
        """Test world distances are reported after scale and translation."""
        from src.lightpath.core.ray import Ray
        from src.lightpath.core.transform import ScaleTransform, TranslationTransform
        from src.lightpath.core.vector import Point, Vector
        from src.lightpath.geometry.sphere import Sphere

        sphere = Sphere(1.0, [ScaleTransform(2.0, 2.0, 2.0), TranslationTransform(0.0, 0.0, -10.0)])
        hit = sphere.get_intersection(Ray(Point(0.0, 0.0, 0.0), Vector(0.0, 0.0, -1.0)))
        assert hit is not None
        assert hit.distance == pytest.approx(8.0)
        assert hit.point.is_near(Point(0.0, 0.0, -8.0), 1e-9)

    def test_t_max_limits_hits(self):
        """Test hits beyond the ray's t_max are rejected."""
        from src.lightpath.core.ray import Ray
        from src.lightpath.core.vector import Point, Vector
        from src.lightpath.geometry.sphere import Sphere

        ray = Ray(Point(0.0, 0.0, 5.0), Vector(0.0, 0.0, -1.0), t_max=3.0)
        assert Sphere(1.0).get_intersection(ray) is None

    def test_bounds_enclose_transformed_sphere(self):
        """Test the bounding box follows the sphere's transforms."""
        from src.lightpath.core.transform import TranslationTransform
        from src.lightpath.core.vector import Point
        from src.lightpath.geometry.sphere import Sphere

        box = Sphere(1.0, [TranslationTransform(5.0, 0.0, 0.0)]).bounding_box
        assert box.min_point.is_near(Point(4.0, -1.0, -1.0))
        assert box.max_point.is_near(Point(6.0, 1.0, 1.0))


class TestSphereSurface:
    """Tests for parameterization, sampling and solid angle."""

    def test_param_round_trip(self):
        """Test surface_from_param inverts param_from_local_surface."""
        from src.lightpath.core.vector import Point2D
        from src.lightpath.geometry.sphere import Sphere

        sphere = Sphere(2.0)
        surface = sphere.surface_from_param(Point2D(0.7, 1.1))
        param = sphere.param_from_local_surface(surface.point)
        assert param.x == pytest.approx(0.7)
        assert param.y == pytest.approx(1.1)

    def test_nearest_surface_point(self):
        """Test the nearest surface point lies along the line to the center."""
        from src.lightpath.core.vector import Point
        from src.lightpath.geometry.sphere import Sphere

        surface = Sphere(1.0).surface_nearest_to(Point(0.0, 10.0, 0.0))
        assert surface.point.is_near(Point(0.0, 1.0, 0.0))

    def test_samples_lie_on_surface(self, uniform_stream):
        """Test sampled points are at radius distance from the center."""
        from src.lightpath.core.vector import ORIGIN
        from src.lightpath.geometry.sphere import Sphere

        sphere = Sphere(3.0)
        for _ in range(50):
            point = sphere.sample_surface_point(uniform_stream)
            assert point.distance_to(ORIGIN) == pytest.approx(3.0)

    def test_facing_samples_on_near_hemisphere(self, uniform_stream):
        """Test facing samples lie on the hemisphere toward the viewer."""
        from src.lightpath.core.vector import Point
        from src.lightpath.geometry.sphere import Sphere

        sphere = Sphere(1.0)
        for _ in range(50):
            point = sphere.sample_surface_point(uniform_stream, facing=Point(0.0, 0.0, 10.0))
            assert point.z >= -1e-12

    def test_solid_angle(self):
        """Test the cone solid angle of a sphere seen from outside and inside."""
        from src.lightpath.core.vector import Point
        from src.lightpath.geometry.sphere import Sphere

        sphere = Sphere(1.0)
        expected = 2.0 * math.pi * (1.0 - math.sqrt(3.0) / 2.0)
        assert sphere.compute_solid_angle(Point(2.0, 0.0, 0.0)) == pytest.approx(expected)
        assert sphere.compute_solid_angle(Point(0.5, 0.0, 0.0)) == pytest.approx(4.0 * math.pi)
