"""Unit tests for explicit light sources.

Tests cover:
- Falloff models
- Point light vectors and radiance
- Sphere light sampling on the facing hemisphere
- Infinite (directional) lights
"""

import math

import pytest


class TestFalloff:
    """Tests for FalloffType."""

    @pytest.mark.parametrize(
        "falloff,expected",
        [("CONSTANT", 1.0), ("LINEAR", 0.25), ("QUADRATIC", 0.0625)],
    )
    def test_calculate(self, falloff, expected):
        """Test the fraction remaining at distance 4."""
        from src.lightpath.scene.light import FalloffType

        assert FalloffType[falloff].calculate(4.0) == pytest.approx(expected)


class TestPointLight:
    """Tests for PointLight."""

    def test_position_from_transforms(self):
        """Test the light sits at its transformed local origin."""
        from src.lightpath.core.spectrum import WHITE
        from src.lightpath.core.transform import TranslationTransform
        from src.lightpath.core.vector import Point
        from src.lightpath.scene.light import PointLight

        light = PointLight(WHITE, [TranslationTransform(1.0, 2.0, 3.0)])
        assert light.position == Point(1.0, 2.0, 3.0)

    def test_light_vector_points_at_receiver(self, uniform_stream):
        """Test the vector runs from the light to the receiver with the full distance."""
        from src.lightpath.core.spectrum import WHITE
        from src.lightpath.core.transform import TranslationTransform
        from src.lightpath.core.vector import Point, Vector
        from src.lightpath.scene.light import PointLight

        light = PointLight(WHITE, [TranslationTransform(0.0, 10.0, 0.0)])
        vector = light.sample_light_vector(Point(0.0, 0.0, 0.0), uniform_stream)
        assert vector == Vector(0.0, -10.0, 0.0)
        assert light.probability_sample_vector(Point(0.0, 0.0, 0.0), vector) == 1.0

    def test_radiance_falls_off(self):
        """Test quadratic falloff of a point light."""
        from src.lightpath.core.spectrum import Spectrum
        from src.lightpath.core.vector import Vector
        from src.lightpath.scene.light import PointLight

        light = PointLight(Spectrum(100.0, 50.0, 0.0))
        radiance = light.radiance_at(Vector(0.0, -10.0, 0.0))
        assert radiance.red == pytest.approx(1.0)
        assert radiance.green == pytest.approx(0.5)
        assert radiance.blue == 0.0

    def test_zero_distance_is_black(self):
        """Test a receiver at the light's position receives nothing."""
        from src.lightpath.core.spectrum import BLACK, WHITE
        from src.lightpath.core.vector import Vector
        from src.lightpath.scene.light import PointLight

        assert PointLight(WHITE).radiance_at(Vector(0.0, 0.0, 0.0)) == BLACK

    def test_power(self):
        """Test total power integrates unit radiance over the sphere."""
        from src.lightpath.core.spectrum import WHITE
        from src.lightpath.scene.light import PointLight

        assert PointLight(WHITE).power.red == pytest.approx(4.0 * math.pi)


class TestSphereLight:
    """Tests for SphereLight."""

    def test_invalid_radius(self):
        """Test a non-positive radius is rejected."""
        from src.lightpath.core.spectrum import WHITE
        from src.lightpath.scene.light import SphereLight

        with pytest.raises(ValueError, match="radius"):
            SphereLight(WHITE, radius=0.0)

    def test_samples_on_facing_hemisphere(self, uniform_stream):
        """Test sampled points lie on the sphere on the receiver's side."""
        from src.lightpath.core.spectrum import WHITE
        from src.lightpath.core.transform import TranslationTransform
        from src.lightpath.core.vector import Point, Vector
        from src.lightpath.scene.light import SphereLight

        light = SphereLight(WHITE, [TranslationTransform(0.0, 5.0, 0.0)], radius=0.5)
        receiver = Point(0.0, 0.0, 0.0)
        for _ in range(50):
            vector = light.sample_light_vector(receiver, uniform_stream)
            source = receiver - vector
            assert Vector.between(light.position, source).magnitude == pytest.approx(0.5)
            assert source.y <= 5.0 + 1e-12


class TestInfiniteLight:
    """Tests for InfiniteLight."""

    def test_direction_and_radiance(self, uniform_stream):
        """Test parallel light along world -Y with no falloff."""
        from src.lightpath.core.spectrum import Spectrum
        from src.lightpath.core.vector import Point, Vector
        from src.lightpath.scene.light import InfiniteLight

        light = InfiniteLight(Spectrum(2.0, 2.0, 2.0))
        assert light.is_infinite()
        vector = light.sample_light_vector(Point(5.0, 0.0, 5.0), uniform_stream)
        assert vector.is_near(Vector(0.0, -1.0, 0.0))
        assert light.radiance_at(vector) == Spectrum(2.0, 2.0, 2.0)

    def test_rotated_direction(self, uniform_stream):
        """Test rotation re-aims the parallel light."""
        from src.lightpath.core.spectrum import WHITE
        from src.lightpath.core.transform import RotationTransform
        from src.lightpath.core.vector import VECTOR_K, Point, Vector
        from src.lightpath.scene.light import InfiniteLight

        light = InfiniteLight(WHITE, [RotationTransform(VECTOR_K, 90.0)])
        vector = light.sample_light_vector(Point(0.0, 0.0, 0.0), uniform_stream)
        assert vector.is_near(Vector(1.0, 0.0, 0.0), 1e-9)
