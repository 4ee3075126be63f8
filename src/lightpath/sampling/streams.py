"""Random-number streams that feed samplers, BSDFs and lights.

A RandomStream hands out uniform numbers in [0, 1) one or two at a time and
can ``fork`` an independent child stream. The child has its own generator
spawned from the parent's, so a fixed seed reproduces the whole tree of
streams. Each stream is owned by one thread at a time; forking is how work
gets its own stream.

Three distributions are provided:

- UniformStream: independent pseudorandom draws
- StratifiedStream: jittered strata, re-stratified and re-shuffled each
  time the pool of ``period`` values is used up
- BestCandidateStream: dart throwing that keeps the candidate farthest from
  the values already handed out in the current period

Example:
    >>> import numpy as np
    >>> from src.lightpath.sampling.streams import StratifiedStream
    >>> stream = StratifiedStream(np.random.default_rng(7), period=4)
    >>> sorted(int(stream.next_float() * 4) for _ in range(4))
    [0, 1, 2, 3]
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod

import numpy as np
import numpy.typing as npt


def stratified_1d(rng: np.random.Generator, n: int) -> npt.NDArray[np.float64]:
    """One jittered value in each of n equal-width bins over [0, 1), in bin order."""
    return (np.arange(n) + rng.random(n)) / n


def stratified_2d(rng: np.random.Generator, side: int) -> npt.NDArray[np.float64]:
    """One jittered point in each cell of a side x side grid; shape (side², 2)."""
    cells = np.stack(np.meshgrid(np.arange(side), np.arange(side), indexing="ij"), axis=-1)
    cells = cells.reshape(-1, 2)
    return (cells + rng.random(cells.shape)) / side


def farthest_candidate(
    candidates: npt.NDArray[np.float64],
    existing: npt.NDArray[np.float64],
) -> npt.NDArray[np.float64]:
    """Pick the candidate row whose nearest existing row is farthest away.

    Args:
        candidates: Array of shape (k, d).
        existing: Array of shape (m, d); may be empty.

    Returns:
        The chosen candidate row, shape (d,).
    """
    if len(existing) == 0:
        return candidates[0]
    distances = np.linalg.norm(candidates[:, None, :] - existing[None, :, :], axis=2)
    return candidates[int(np.argmax(distances.min(axis=1)))]


class RandomStream(ABC):
    """Source of uniform [0, 1) numbers.

    Args:
        rng: Generator owned by this stream.
        period: Number of draws after which structured streams restart
            their distribution.
    """

    def __init__(self, rng: np.random.Generator, period: int = 1) -> None:
        if period < 1:
            raise ValueError(f"Stream period must be at least 1, got {period}")
        self._rng = rng
        self.period = period

    @abstractmethod
    def next_float(self) -> float:
        """Next value in [0, 1)."""

    @abstractmethod
    def next_2d(self) -> tuple[float, float]:
        """Next point in [0, 1)²."""

    def fork(self, period: int | None = None) -> RandomStream:
        """Independent child stream of the same kind.

        Args:
            period: Period of the child (defaults to this stream's).
        """
        child = self._rng.spawn(1)[0]
        return type(self)(child, self.period if period is None else period)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(period={self.period})"


class UniformStream(RandomStream):
    """Independent pseudorandom draws; the period is ignored."""

    def next_float(self) -> float:
        return float(self._rng.random())

    def next_2d(self) -> tuple[float, float]:
        u, v = self._rng.random(2)
        return float(u), float(v)


class StratifiedStream(RandomStream):
    """Jittered stratified draws.

    1-D values come from ``period`` equal bins; 2-D points from an n x n grid
    with n = ceil(sqrt(period)). Each pool is shuffled, then regenerated once
    it has been used up.
    """

    def __init__(self, rng: np.random.Generator, period: int = 1) -> None:
        super().__init__(rng, period)
        self.side = math.isqrt(period - 1) + 1
        self._pool_1d = np.empty(0)
        self._pool_2d = np.empty((0, 2))
        self._next_1d = 0
        self._next_2d = 0

    def next_float(self) -> float:
        if self._next_1d >= len(self._pool_1d):
            self._pool_1d = self._rng.permutation(stratified_1d(self._rng, self.period))
            self._next_1d = 0
        value = self._pool_1d[self._next_1d]
        self._next_1d += 1
        return float(value)

    def next_2d(self) -> tuple[float, float]:
        if self._next_2d >= len(self._pool_2d):
            self._pool_2d = self._rng.permutation(stratified_2d(self._rng, self.side))
            self._next_2d = 0
        u, v = self._pool_2d[self._next_2d]
        self._next_2d += 1
        return float(u), float(v)


class BestCandidateStream(RandomStream):
    """Dart-throwing draws with blue-noise-like spacing.

    The first value of each period is uniform. Every later value throws one
    dart per value already on the board and keeps the dart farthest from
    its nearest neighbor there. The board clears every ``period`` draws.
    """

    def __init__(self, rng: np.random.Generator, period: int = 1) -> None:
        super().__init__(rng, period)
        self._board_1d: list[float] = []
        self._board_2d: list[tuple[float, float]] = []

    def next_float(self) -> float:
        if len(self._board_1d) >= self.period:
            self._board_1d.clear()
        darts = self._rng.random((max(1, len(self._board_1d)), 1))
        existing = np.array(self._board_1d).reshape(-1, 1)
        value = float(farthest_candidate(darts, existing)[0])
        self._board_1d.append(value)
        return value

    def next_2d(self) -> tuple[float, float]:
        if len(self._board_2d) >= self.period:
            self._board_2d.clear()
        darts = self._rng.random((max(1, len(self._board_2d)), 2))
        existing = np.array(self._board_2d).reshape(-1, 2)
        u, v = farthest_candidate(darts, existing)
        point = (float(u), float(v))
        self._board_2d.append(point)
        return point
