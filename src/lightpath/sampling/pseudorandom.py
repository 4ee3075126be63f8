"""Pure pseudorandom sampler: independent uniform coordinates per sample."""

from __future__ import annotations

from src.lightpath.sampling.sample import Sample
from src.lightpath.sampling.sampler import Sampler
from src.lightpath.sampling.streams import UniformStream


class PseudorandomSampler(Sampler):
    """Every coordinate of every sample is an independent uniform draw."""

    def generate_sample(self, pixel_x: int, pixel_y: int) -> Sample:
        rng = self._new_rng()
        dx, dy, lens_u, lens_v, t = (float(u) for u in rng.random(5))
        return Sample(
            image_x=pixel_x + dx,
            image_y=pixel_y + dy,
            lens_u=lens_u,
            lens_v=lens_v,
            t=t,
            random=UniformStream(rng),
            sampler=self,
        )
