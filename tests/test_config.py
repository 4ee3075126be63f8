"""Unit tests for render configuration.

Tests cover:
- Defaults and validation of every field
- Dictionary round trip and unknown keys
- Sampler and integrator factories
"""

import pytest


class TestRenderConfig:
    """Tests for RenderConfig."""

    def test_defaults(self):
        """Test the default configuration is valid."""
        from src.lightpath.core.config import DEFAULT_MAX_DEPTH, RenderConfig

        config = RenderConfig()
        assert config.max_depth == DEFAULT_MAX_DEPTH
        assert config.sampler == "stratified"
        assert config.integrator == "path"
        assert config.workers == 1

    @pytest.mark.parametrize(
        "field_name", ["width", "height", "samples_per_pixel", "samples_per_interaction", "workers"]
    )
    def test_positive_fields(self, field_name):
        """Test counts must be positive."""
        from src.lightpath.core.config import RenderConfig

        with pytest.raises(ValueError, match=field_name):
            RenderConfig(**{field_name: 0})

    def test_negative_depth(self):
        """Test max_depth may be zero but not negative."""
        from src.lightpath.core.config import RenderConfig

        assert RenderConfig(max_depth=0).max_depth == 0
        with pytest.raises(ValueError, match="max_depth"):
            RenderConfig(max_depth=-1)

    def test_unknown_strategy(self):
        """Test unknown sampler and integrator names are rejected."""
        from src.lightpath.core.config import RenderConfig

        with pytest.raises(ValueError, match="sampler"):
            RenderConfig(sampler="halton")
        with pytest.raises(ValueError, match="integrator"):
            RenderConfig(integrator="bidirectional")

    def test_dict_round_trip(self):
        """Test to_dict/from_dict preserve every field."""
        from src.lightpath.core.config import RenderConfig

        config = RenderConfig(width=32, height=16, seed=9, sampler="best-candidate", workers=3)
        assert RenderConfig.from_dict(config.to_dict()) == config

    def test_from_dict_partial(self):
        """Test missing keys take their defaults."""
        from src.lightpath.core.config import RenderConfig

        config = RenderConfig.from_dict({"width": 10})
        assert config.width == 10
        assert config.height == RenderConfig().height

    def test_from_dict_unknown_key(self):
        """Test unknown keys are reported."""
        from src.lightpath.core.config import RenderConfig

        with pytest.raises(ValueError, match="colour"):
            RenderConfig.from_dict({"colour": "red"})


class TestFactories:
    """Tests for building samplers and integrators from a configuration."""

    @pytest.mark.parametrize(
        "name,class_name",
        [
            ("pseudorandom", "PseudorandomSampler"),
            ("stratified", "StratifiedSampler"),
            ("best-candidate", "BestCandidateSampler"),
        ],
    )
    def test_create_single_sampler(self, name, class_name):
        """Test one worker gets one sampler covering the whole image."""
        from src.lightpath.core.config import RenderConfig
        from src.lightpath.core.render import create_samplers

        samplers = create_samplers(RenderConfig(width=8, height=4, sampler=name, seed=1))
        assert len(samplers) == 1
        assert type(samplers[0]).__name__ == class_name
        assert samplers[0].total_samples == 8 * 4 * RenderConfig().samples_per_pixel

    def test_create_split_samplers(self):
        """Test several workers split the image into disjoint samplers."""
        from src.lightpath.core.config import RenderConfig
        from src.lightpath.core.render import create_samplers

        config = RenderConfig(width=16, height=16, samples_per_pixel=1, workers=3, seed=1)
        samplers = create_samplers(config)
        assert len(samplers) == 4
        assert sum(s.total_samples for s in samplers) == 256

    @pytest.mark.parametrize(
        "name,class_name",
        [
            ("whitted", "WhittedIntegrator"),
            ("path", "PathTracingIntegrator"),
            ("importance", "ImportanceIntegrator"),
        ],
    )
    def test_create_integrator(self, name, class_name, top_down_camera):
        """Test the integrator name selects the integrator class."""
        from src.lightpath.core.config import RenderConfig
        from src.lightpath.core.render import create_integrator, create_samplers
        from src.lightpath.film.film import ImageFilm

        config = RenderConfig(width=9, height=9, integrator=name, max_depth=2, seed=0)
        integrator = create_integrator(
            config, top_down_camera(), ImageFilm(9, 9), create_samplers(config)
        )
        assert type(integrator).__name__ == class_name
        assert integrator.max_depth == 2
