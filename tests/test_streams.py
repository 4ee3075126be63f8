"""Unit tests for random streams.

Tests cover:
- Values stay inside [0, 1)
- Stratified streams place one value per bin in each period
- 2-D stratification over an n x n grid
- Best-candidate spacing relative to uniform draws
- Forking produces independent, reproducible children
"""

import numpy as np
import pytest


class TestStreamHelpers:
    """Tests for the array helpers behind the streams."""

    def test_stratified_1d_one_per_bin(self):
        """Test each bin gets exactly one value."""
        from src.lightpath.sampling.streams import stratified_1d

        values = stratified_1d(np.random.default_rng(0), 8)
        assert list((values * 8).astype(int)) == list(range(8))

    def test_stratified_2d_covers_grid(self):
        """Test every grid cell holds exactly one point."""
        from src.lightpath.sampling.streams import stratified_2d

        points = stratified_2d(np.random.default_rng(0), 3)
        cells = {(int(u * 3), int(v * 3)) for u, v in points}
        assert len(points) == 9
        assert cells == {(i, j) for i in range(3) for j in range(3)}

    def test_farthest_candidate(self):
        """Test the candidate farthest from existing values is chosen."""
        from src.lightpath.sampling.streams import farthest_candidate

        candidates = np.array([[0.1], [0.9], [0.5]])
        existing = np.array([[0.0], [0.4]])
        assert farthest_candidate(candidates, existing)[0] == 0.9

    def test_farthest_candidate_empty_board(self):
        """Test the first candidate is taken when nothing exists yet."""
        from src.lightpath.sampling.streams import farthest_candidate

        candidates = np.array([[0.3, 0.3], [0.7, 0.7]])
        assert list(farthest_candidate(candidates, np.empty((0, 2)))) == [0.3, 0.3]


class TestStreams:
    """Tests for the RandomStream implementations."""

    def test_invalid_period(self):
        """Test a period below 1 is rejected."""
        from src.lightpath.sampling.streams import UniformStream

        with pytest.raises(ValueError, match="period"):
            UniformStream(np.random.default_rng(0), period=0)

    @pytest.mark.parametrize("kind", ["UniformStream", "StratifiedStream", "BestCandidateStream"])
    def test_values_in_unit_interval(self, kind):
        """Test every stream draws from [0, 1)."""
        from src.lightpath.sampling import streams

        stream = getattr(streams, kind)(np.random.default_rng(3), period=5)
        for _ in range(40):
            assert 0.0 <= stream.next_float() < 1.0
            u, v = stream.next_2d()
            assert 0.0 <= u < 1.0
            assert 0.0 <= v < 1.0

    @pytest.mark.parametrize("seed", range(5))
    def test_stratified_one_per_bin_each_period(self, seed):
        """Test each block of `period` draws covers every bin once."""
        from src.lightpath.sampling.streams import StratifiedStream

        period = 7
        stream = StratifiedStream(np.random.default_rng(seed), period=period)
        for _ in range(3):
            bins = sorted(int(stream.next_float() * period) for _ in range(period))
            assert bins == list(range(period))

    @pytest.mark.parametrize("seed", range(5))
    def test_stratified_2d_one_per_cell(self, seed):
        """Test each block of side² 2-D draws covers every grid cell once."""
        from src.lightpath.sampling.streams import StratifiedStream

        stream = StratifiedStream(np.random.default_rng(seed), period=9)
        assert stream.side == 3
        for _ in range(2):
            cells = {tuple(int(c * 3) for c in stream.next_2d()) for _ in range(9)}
            assert len(cells) == 9

    def test_stratified_side_rounds_up(self):
        """Test a non-square period rounds the grid side up."""
        from src.lightpath.sampling.streams import StratifiedStream

        assert StratifiedStream(np.random.default_rng(0), period=5).side == 3
        assert StratifiedStream(np.random.default_rng(0), period=1).side == 1

    def test_best_candidate_spreads_values(self):
        """Test best-candidate draws never repeat within a period."""
        from src.lightpath.sampling.streams import BestCandidateStream

        stream = BestCandidateStream(np.random.default_rng(11), period=16)
        values = np.sort([stream.next_float() for _ in range(16)])
        assert np.min(np.diff(values)) > 0.0

    def test_best_candidate_board_clears(self):
        """Test the board resets after each period."""
        from src.lightpath.sampling.streams import BestCandidateStream

        stream = BestCandidateStream(np.random.default_rng(0), period=2)
        for _ in range(5):
            stream.next_float()
        assert len(stream._board_1d) == 1

    def test_fork_is_reproducible(self):
        """Test forks of equally-seeded streams produce the same values."""
        from src.lightpath.sampling.streams import UniformStream

        a = UniformStream(np.random.default_rng(42)).fork()
        b = UniformStream(np.random.default_rng(42)).fork()
        assert [a.next_float() for _ in range(5)] == [b.next_float() for _ in range(5)]

    def test_fork_keeps_kind_and_sets_period(self):
        """Test forks keep the stream type and accept a new period."""
        from src.lightpath.sampling.streams import StratifiedStream

        child = StratifiedStream(np.random.default_rng(0), period=4).fork(period=16)
        assert isinstance(child, StratifiedStream)
        assert child.period == 16
        assert child.side == 4

    def test_fork_is_independent_of_parent(self):
        """Test a child does not replay the parent's sequence."""
        from src.lightpath.sampling.streams import UniformStream

        parent = UniformStream(np.random.default_rng(5))
        child = parent.fork()
        assert [child.next_float() for _ in range(3)] != [parent.next_float() for _ in range(3)]
