"""Unit tests for the perfect specular BSDF.

Tests cover:
- Reflection direction
- Density 1 for the ideal direction and 0 elsewhere
- Scatter value tint / cos, zero off the ideal direction
"""

import math

import pytest


def _mirror(tint=(0.9, 0.9, 0.9)):
    from src.lightpath.core.spectrum import Spectrum
    from src.lightpath.materials.specular import PerfectSpecularBSDF
    from src.lightpath.materials.texture import ConstantTexture

    return PerfectSpecularBSDF(ConstantTexture(Spectrum(*tint)))


class TestPerfectSpecular:
    """Tests for PerfectSpecularBSDF."""

    def test_reflection_direction(self, make_interaction, make_sample):
        """Test the sampled direction is the mirror of the incoming ray."""
        from src.lightpath.core.vector import Vector

        interaction = make_interaction(direction=(1.0, -1.0, 0.0))
        sample = make_sample()
        direction = _mirror().sample_scatter_direction(interaction, sample, sample.stream("x"))
        assert direction.is_near(Vector(1.0, 1.0, 0.0).normalize())

    def test_perfect_specular_reflection_helper(self):
        """Test the reflection helper for a head-on eye vector."""
        from src.lightpath.core.vector import Normal, Vector
        from src.lightpath.materials.bsdf import perfect_specular_reflection

        reflected = perfect_specular_reflection(Vector(0.0, 2.0, 0.0), Normal(0.0, 1.0, 0.0))
        assert reflected.is_near(Vector(0.0, 1.0, 0.0))

    def test_density(self, make_interaction):
        """Test density 1 for the ideal direction and 0 for any other."""
        from src.lightpath.core.vector import Vector

        interaction = make_interaction(direction=(1.0, -1.0, 0.0))
        mirror = _mirror()
        assert mirror.scatter_density(interaction, Vector(1.0, 1.0, 0.0)) == 1.0
        assert mirror.scatter_density(interaction, Vector(0.0, 1.0, 0.0)) == 0.0
        assert mirror.scatter_density(interaction, Vector(1.0, 1.001, 0.0)) == 0.0

    def test_value_off_ideal_is_black(self, make_interaction):
        """Test non-ideal directions carry no light."""
        from src.lightpath.core.spectrum import BLACK
        from src.lightpath.core.vector import Vector

        interaction = make_interaction(direction=(1.0, -1.0, 0.0))
        assert _mirror().scatter_value(interaction, Vector(-1.0, 1.0, 0.0)) == BLACK

    def test_estimator_reduces_to_tint(self, make_interaction):
        """Test f_r * cos / pdf equals the tint for the ideal direction."""
        from src.lightpath.materials.bsdf import BSDF

        interaction = make_interaction(direction=(1.0, -2.0, 0.5))
        mirror = _mirror(tint=(0.9, 0.5, 0.1))
        direction = mirror.reflection(interaction)
        value = mirror.scatter_value(interaction, direction)
        cos = BSDF.cosine_term(interaction, direction)
        pdf = mirror.scatter_density(interaction, direction)
        estimate = value * (cos / pdf)
        assert estimate.red == pytest.approx(0.9)
        assert estimate.green == pytest.approx(0.5)
        assert estimate.blue == pytest.approx(0.1)

    def test_head_on_value(self, make_interaction):
        """Test the value at normal incidence is the tint itself (cos = 1)."""
        from src.lightpath.core.vector import Vector

        value = _mirror().scatter_value(make_interaction(), Vector(0.0, 1.0, 0.0))
        assert math.isclose(value.red, 0.9)
