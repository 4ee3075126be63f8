"""A Sample: every random coordinate needed to trace one eye path.

Samples are produced by a Sampler and are read-only afterward. Beyond the
top-level coordinates (image position, lens position, time, optional
wavelength filter), a Sample carries a RandomStream for the randomness
consumed deeper in the recursion. ``Sample.stream(name, period)`` forks a
named child stream on first use and returns the same stream thereafter, so
every draw made for one purpose along one path comes from one
(stratified or best-candidate) sequence.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from src.lightpath.core.spectrum import Spectrum
    from src.lightpath.sampling.sampler import Sampler
    from src.lightpath.sampling.streams import RandomStream


def continuous_to_discrete(coordinate: float) -> int:
    """Pixel index containing a continuous image coordinate."""
    return int(math.floor(coordinate))


def discrete_to_continuous(index: int) -> float:
    """Continuous coordinate of a pixel's center."""
    return index + 0.5


@dataclass(frozen=True)
class Sample:
    """Random coordinates for one eye path.

    Attributes:
        image_x: Continuous image-plane x coordinate.
        image_y: Continuous image-plane y coordinate.
        lens_u: Lens coordinate in [0, 1).
        lens_v: Lens coordinate in [0, 1).
        t: Time in [0, 1).
        wavelength: Optional per-channel filter applied to emitted and
            scattered light.
        random: Root stream for auxiliary sub-samples.
        sampler: The Sampler that produced this sample.
    """

    image_x: float
    image_y: float
    lens_u: float = 0.5
    lens_v: float = 0.5
    t: float = 0.0
    wavelength: Spectrum | None = None
    random: RandomStream | None = field(default=None, compare=False, repr=False)
    sampler: Sampler | None = field(default=None, compare=False, repr=False)
    _streams: dict[tuple[str, int], RandomStream] = field(
        default_factory=dict, init=False, compare=False, repr=False
    )

    @property
    def pixel_x(self) -> int:
        return continuous_to_discrete(self.image_x)

    @property
    def pixel_y(self) -> int:
        return continuous_to_discrete(self.image_y)

    @property
    def samples_per_pixel(self) -> int:
        return 1 if self.sampler is None else self.sampler.samples_per_pixel

    def stream(self, name: str, period: int = 1) -> RandomStream:
        """Named auxiliary stream, forked from ``random`` on first use.

        Args:
            name: Purpose of the stream (e.g. "bsdf-direction").
            period: Re-stratification period of the stream.

        Raises:
            RuntimeError: If the sample was built without a root stream.
        """
        key = (name, period)
        stream = self._streams.get(key)
        if stream is None:
            if self.random is None:
                raise RuntimeError("Sample was created without a random stream")
            stream = self.random.fork(period)
            self._streams[key] = stream
        return stream
