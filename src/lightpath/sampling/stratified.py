"""Stratified jittered sampler.

Each pixel's unit square is divided into an n x n grid, n =
ceil(sqrt(samples_per_pixel)), with one jittered point per cell. Lens
positions use their own grid and times their own 1-D strata. The grid order
is shuffled so consecutive samples do not sweep the pixel row by row, and
it is regenerated whenever it runs out.

Auxiliary streams handed to BSDFs and lights are StratifiedStreams too, so
the directions drawn deep in the recursion are stratified with the period
their consumer asks for.
"""

from __future__ import annotations

import math

from src.lightpath.sampling.sample import Sample
from src.lightpath.sampling.sampler import Sampler
from src.lightpath.sampling.streams import StratifiedStream


class StratifiedSampler(Sampler):
    """Jittered-grid sampling within each pixel."""

    @property
    def grid_side(self) -> int:
        """n: side length of the per-pixel grid."""
        return math.isqrt(self.samples_per_pixel - 1) + 1

    def _begin_pixel(self, pixel_x: int, pixel_y: int) -> None:
        period = self.samples_per_pixel
        self._image_stream = StratifiedStream(self._new_rng(), period)
        self._lens_stream = StratifiedStream(self._new_rng(), period)
        self._time_stream = StratifiedStream(self._new_rng(), period)

    def generate_sample(self, pixel_x: int, pixel_y: int) -> Sample:
        dx, dy = self._image_stream.next_2d()
        lens_u, lens_v = self._lens_stream.next_2d()
        return Sample(
            image_x=pixel_x + dx,
            image_y=pixel_y + dy,
            lens_u=lens_u,
            lens_v=lens_v,
            t=self._time_stream.next_float(),
            random=StratifiedStream(self._new_rng(), 1),
            sampler=self,
        )
