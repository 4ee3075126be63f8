"""Unit tests for samplers and samples.

Tests cover:
- Per-pixel coverage: every pixel gets exactly samples_per_pixel samples
- Sample coordinates fall inside their pixel
- Stratified image positions cover each grid cell once per pixel
- Splitting into disjoint sub-samplers and recursive subdivision
- Pre-generation on a producer thread
- Named sample streams
"""

import threading
from collections import Counter

import numpy as np
import pytest

SAMPLER_CLASSES = [
    ("src.lightpath.sampling.pseudorandom", "PseudorandomSampler"),
    ("src.lightpath.sampling.stratified", "StratifiedSampler"),
    ("src.lightpath.sampling.best_candidate", "BestCandidateSampler"),
]


def _sampler_class(module_name, class_name):
    import importlib

    return getattr(importlib.import_module(module_name), class_name)


class TestSamplerConstruction:
    """Tests for sampler validation and geometry."""

    def test_empty_bounds_rejected(self):
        """Test an inverted rectangle is rejected."""
        from src.lightpath.sampling.pseudorandom import PseudorandomSampler

        with pytest.raises(ValueError, match="empty"):
            PseudorandomSampler(2, 0, 1, 3)

    def test_invalid_samples_per_pixel(self):
        """Test zero samples per pixel is rejected."""
        from src.lightpath.sampling.pseudorandom import PseudorandomSampler

        with pytest.raises(ValueError, match="samples_per_pixel"):
            PseudorandomSampler(0, 0, 1, 1, samples_per_pixel=0)

    def test_total_samples(self):
        """Test total_samples is width x height x spp."""
        from src.lightpath.sampling.pseudorandom import PseudorandomSampler

        sampler = PseudorandomSampler(0, 0, 4, 2, samples_per_pixel=3)
        assert sampler.width == 5
        assert sampler.height == 3
        assert sampler.total_samples == 45


class TestSamplerCoverage:
    """Tests that every sampler covers its pixels exactly."""

    @pytest.mark.parametrize("module_name,class_name", SAMPLER_CLASSES)
    @pytest.mark.parametrize("spp", [1, 4, 5])
    def test_exact_per_pixel_counts(self, module_name, class_name, spp):
        """Test each pixel receives exactly spp samples, all inside the pixel."""
        cls = _sampler_class(module_name, class_name)
        sampler = cls(1, 2, 4, 4, samples_per_pixel=spp, seed=7)

        counts = Counter()
        for sample in sampler:
            assert sample.pixel_x <= sample.image_x < sample.pixel_x + 1
            assert sample.pixel_y <= sample.image_y < sample.pixel_y + 1
            assert 0.0 <= sample.lens_u < 1.0
            assert 0.0 <= sample.t < 1.0
            assert sample.samples_per_pixel == spp
            counts[(sample.pixel_x, sample.pixel_y)] += 1

        expected = {(x, y): spp for x in range(1, 5) for y in range(2, 5)}
        assert dict(counts) == expected
        assert sampler.samples_generated == sampler.total_samples
        assert sampler.next_sample() is None

    @pytest.mark.parametrize("seed", range(3))
    def test_stratified_cells_covered(self, seed):
        """Test a perfect-square spp places one image sample in each cell."""
        from src.lightpath.sampling.stratified import StratifiedSampler

        sampler = StratifiedSampler(0, 0, 0, 0, samples_per_pixel=9, seed=seed)
        cells = {(int(s.image_x * 3), int(s.image_y * 3)) for s in sampler}
        assert cells == {(i, j) for i in range(3) for j in range(3)}

    def test_same_seed_same_samples(self):
        """Test equal seeds reproduce the same sample positions."""
        from src.lightpath.sampling.best_candidate import BestCandidateSampler

        a = [(s.image_x, s.image_y) for s in BestCandidateSampler(0, 0, 1, 1, 4, seed=3)]
        b = [(s.image_x, s.image_y) for s in BestCandidateSampler(0, 0, 1, 1, 4, seed=3)]
        assert a == b

    def test_concurrent_consumers_cover_once(self):
        """Test threads sharing one sampler never receive duplicate work."""
        from src.lightpath.sampling.pseudorandom import PseudorandomSampler

        sampler = PseudorandomSampler(0, 0, 7, 7, samples_per_pixel=2, seed=1)
        counts = Counter()
        lock = threading.Lock()

        def consume():
            for sample in sampler:
                with lock:
                    counts[(sample.pixel_x, sample.pixel_y)] += 1

        threads = [threading.Thread(target=consume) for _ in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        assert sum(counts.values()) == 128
        assert set(counts.values()) == {2}


class TestSamplerSplitting:
    """Tests for split() and recursively_subdivide()."""

    def test_split_partitions_pixels(self):
        """Test the two halves are disjoint and together cover the parent."""
        from src.lightpath.sampling.stratified import StratifiedSampler

        parent = StratifiedSampler(0, 0, 6, 3, samples_per_pixel=2, seed=0, buffer_capacity=8)
        left, right = parent.split()

        def pixels(s):
            return {(x, y) for x in range(s.min_x, s.max_x + 1) for y in range(s.min_y, s.max_y + 1)}

        assert pixels(left).isdisjoint(pixels(right))
        assert pixels(left) | pixels(right) == pixels(parent)
        assert isinstance(left, StratifiedSampler)
        assert left.samples_per_pixel == 2
        assert left.buffer_capacity == 4

    def test_split_longer_axis(self):
        """Test a tall rectangle splits along y."""
        from src.lightpath.sampling.pseudorandom import PseudorandomSampler

        top, bottom = PseudorandomSampler(0, 0, 1, 9).split()
        assert (top.min_x, top.max_x) == (0, 1)
        assert top.max_y + 1 == bottom.min_y

    def test_single_pixel_does_not_split(self):
        """Test a single-pixel sampler has no sub-samplers."""
        from src.lightpath.sampling.pseudorandom import PseudorandomSampler

        sampler = PseudorandomSampler(3, 3, 3, 3)
        assert not sampler.has_sub_samplers()
        assert sampler.split() == []
        assert sampler.recursively_subdivide(4) == [sampler]

    def test_recursively_subdivide(self):
        """Test n levels give up to 2^n leaves covering every pixel once."""
        from src.lightpath.sampling.pseudorandom import PseudorandomSampler

        leaves = PseudorandomSampler(0, 0, 7, 7, seed=0).recursively_subdivide(3)
        assert len(leaves) == 8
        assert sum(leaf.total_samples for leaf in leaves) == 64

    def test_sub_samplers_use_distinct_streams(self):
        """Test the halves draw different jitter."""
        from src.lightpath.sampling.pseudorandom import PseudorandomSampler

        left, right = PseudorandomSampler(0, 0, 1, 0, seed=0).split()
        a = left.next_sample()
        b = right.next_sample()
        assert a.image_x - a.pixel_x != b.image_x - b.pixel_x


class TestPregeneration:
    """Tests for pre-generating samples on a producer thread."""

    def test_pregenerated_samples_cover_pixels(self):
        """Test the queue delivers every sample and then ends."""
        from src.lightpath.sampling.stratified import StratifiedSampler

        sampler = StratifiedSampler(0, 0, 3, 3, samples_per_pixel=3, seed=2, buffer_capacity=4)
        thread = sampler.start_pregeneration()
        samples = list(sampler)
        thread.join(timeout=5.0)
        assert len(samples) == 48
        assert not thread.is_alive()
        assert sampler.next_sample() is None

    def test_double_start_rejected(self):
        """Test pre-generation can only start once."""
        from src.lightpath.sampling.pseudorandom import PseudorandomSampler

        sampler = PseudorandomSampler(0, 0, 0, 0)
        sampler.start_pregeneration()
        with pytest.raises(RuntimeError, match="already started"):
            sampler.start_pregeneration()

    def test_cancel_unblocks_producer(self):
        """Test a cancelled producer stops even when the queue is full."""
        from src.lightpath.sampling.pseudorandom import PseudorandomSampler

        cancel = threading.Event()
        sampler = PseudorandomSampler(0, 0, 9, 9, samples_per_pixel=4, buffer_capacity=1)
        thread = sampler.start_pregeneration(cancel)
        cancel.set()
        thread.join(timeout=5.0)
        assert not thread.is_alive()


class TestSampleStreams:
    """Tests for Sample.stream()."""

    def test_stream_is_cached_by_name(self, make_sample):
        """Test the same name and period return the same stream."""
        sample = make_sample()
        assert sample.stream("light-position", 4) is sample.stream("light-position", 4)
        assert sample.stream("light-position", 4) is not sample.stream("scatter-direction", 4)

    def test_stream_requires_root(self):
        """Test samples without a root stream cannot fork."""
        from src.lightpath.sampling.sample import Sample

        with pytest.raises(RuntimeError, match="random stream"):
            Sample(image_x=0.5, image_y=0.5).stream("anything")

    def test_stream_period_applied(self, make_sample):
        """Test forked streams carry the requested period."""
        assert make_sample().stream("x", 9).period == 9

    def test_pixel_conversion(self):
        """Test continuous coordinates floor to pixel indices."""
        from src.lightpath.sampling.sample import (
            Sample,
            continuous_to_discrete,
            discrete_to_continuous,
        )

        assert continuous_to_discrete(3.99) == 3
        assert discrete_to_continuous(3) == 3.5
        assert Sample(image_x=2.2, image_y=0.7).pixel_x == 2
        assert np.isclose(Sample(image_x=2.2, image_y=0.7).image_y, 0.7)
