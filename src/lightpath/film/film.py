"""Image film: the render's only mutable shared state.

Worker threads compute radiance independently and then call
``add_sample``, which adds the contribution into a float64 accumulation
buffer. The lock covers only that addition.

Samples already carry a 1 / samples_per_pixel factor, so the accumulated
value of a fully rendered pixel is its mean radiance.

Example:
    >>> from src.lightpath.core.spectrum import Spectrum
    >>> from src.lightpath.film.film import ImageFilm
    >>> from src.lightpath.sampling.sample import Sample
    >>> film = ImageFilm(4, 3)
    >>> film.add_sample(Sample(image_x=1.7, image_y=0.2), Spectrum(0.5, 0.0, 0.0))
    >>> film.get_image_numpy().shape
    (3, 4, 3)
"""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt

from src.lightpath.sampling.sample import continuous_to_discrete

if TYPE_CHECKING:
    from src.lightpath.core.spectrum import Spectrum
    from src.lightpath.sampling.sample import Sample


class ImageFilm:
    """Accumulates radiance samples into pixels.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
    """

    def __init__(self, width: int, height: int) -> None:
        if width < 1 or height < 1:
            raise ValueError(f"Film size must be positive, got {width}x{height}")
        self.width = width
        self.height = height
        # Indexed [x, y, channel], y = 0 at the bottom
        self._buffer = np.zeros((width, height, 3), dtype=np.float64)
        self._sample_count = 0
        self._lock = threading.Lock()

    @property
    def sample_count(self) -> int:
        return self._sample_count

    def add_sample(self, sample: Sample, radiance: Spectrum) -> None:
        """Add one radiance contribution at the sample's pixel.

        Raises:
            ValueError: If the sample lies outside the film.
        """
        x = continuous_to_discrete(sample.image_x)
        y = continuous_to_discrete(sample.image_y)
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise ValueError(
                f"Sample ({sample.image_x}, {sample.image_y}) is outside the "
                f"{self.width}x{self.height} film"
            )
        contribution = radiance.to_tuple()
        with self._lock:
            self._buffer[x, y] += contribution
            self._sample_count += 1

    def reset(self) -> None:
        """Clear all accumulated radiance."""
        with self._lock:
            self._buffer.fill(0.0)
            self._sample_count = 0

    def get_pixel(self, x: int, y: int) -> tuple[float, float, float]:
        """Accumulated (red, green, blue) at a pixel."""
        r, g, b = self._buffer[x, y]
        return float(r), float(g), float(b)

    def get_image_numpy(self) -> npt.NDArray[np.float64]:
        """Linear radiance as an array of shape (height, width, 3), top row first."""
        with self._lock:
            image = self._buffer.copy()
        return np.flipud(image.transpose(1, 0, 2))

    def get_image_uint8(self) -> npt.NDArray[np.uint8]:
        """8-bit image: clamp to [0, 1], scale by 255, floor."""
        from src.lightpath.film.export import image_to_uint8

        return image_to_uint8(self.get_image_numpy())

    def __repr__(self) -> str:
        return f"ImageFilm(width={self.width}, height={self.height}, samples={self._sample_count})"
