"""Best-candidate (dart-throwing) sampler.

Within each pixel the sampler remembers every sample it has produced,
bucketed by cell of an n x n grid (n = ceil(sqrt(samples_per_pixel))). The
first sample of a pixel is uniform. Each later sample throws one dart per
sample already taken in the pixel and keeps the dart whose nearest
neighbor, among the samples in its own and the eight surrounding cells, is
farthest away. Lens and time coordinates are chosen the same way against
the neighbors of the chosen image cell.

This gives blue-noise-like spacing at O(k) comparisons per sample, with k
growing as the pixel fills.
"""

from __future__ import annotations

import math
from collections import defaultdict

import numpy as np
import numpy.typing as npt

from src.lightpath.sampling.sample import Sample
from src.lightpath.sampling.sampler import Sampler
from src.lightpath.sampling.streams import BestCandidateStream, farthest_candidate

# Columns of a recorded sample: image dx, image dy, lens u, lens v, time
_IMAGE = slice(0, 2)
_LENS = slice(2, 4)
_TIME = slice(4, 5)


class BestCandidateSampler(Sampler):
    """Blue-noise sampling by keeping the farthest of several darts."""

    @property
    def grid_side(self) -> int:
        return math.isqrt(self.samples_per_pixel - 1) + 1

    def _begin_pixel(self, pixel_x: int, pixel_y: int) -> None:
        self._history: defaultdict[tuple[int, int], list[npt.NDArray[np.float64]]] = (
            defaultdict(list)
        )
        self._taken = 0

    def _cell(self, dx: float, dy: float) -> tuple[int, int]:
        side = self.grid_side
        return min(int(dx * side), side - 1), min(int(dy * side), side - 1)

    def _neighbors(self, cell: tuple[int, int]) -> npt.NDArray[np.float64]:
        ci, cj = cell
        rows = [
            row
            for i in range(ci - 1, ci + 2)
            for j in range(cj - 1, cj + 2)
            for row in self._history.get((i, j), ())
        ]
        if not rows:
            return np.empty((0, 5))
        return np.array(rows)

    def _choose(self, count: int, columns: slice, neighbors: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
        width = columns.stop - columns.start
        darts = self._rng.random((count, width))
        return farthest_candidate(darts, neighbors[:, columns])

    def generate_sample(self, pixel_x: int, pixel_y: int) -> Sample:
        darts = max(1, self._taken)
        if self._taken == 0:
            record = self._rng.random(5)
        else:
            # Image position first: each dart is judged against its own neighborhood
            candidates = self._rng.random((darts, 2))
            best_image, best_distance = candidates[0], -1.0
            for candidate in candidates:
                neighbors = self._neighbors(self._cell(*candidate))[:, _IMAGE]
                if len(neighbors) == 0:
                    best_image = candidate
                    break
                distance = float(np.linalg.norm(neighbors - candidate, axis=1).min())
                if distance > best_distance:
                    best_image, best_distance = candidate, distance

            neighbors = self._neighbors(self._cell(*best_image))
            lens = self._choose(darts, _LENS, neighbors)
            time = self._choose(darts, _TIME, neighbors)
            record = np.concatenate([best_image, lens, time])

        self._history[self._cell(record[0], record[1])].append(record)
        self._taken += 1

        dx, dy, lens_u, lens_v, t = (float(v) for v in record)
        return Sample(
            image_x=pixel_x + dx,
            image_y=pixel_y + dy,
            lens_u=lens_u,
            lens_v=lens_v,
            t=t,
            random=BestCandidateStream(self._new_rng(), 1),
            sampler=self,
        )
