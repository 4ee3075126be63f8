"""Base class for sample-generation strategies.

A Sampler covers an inclusive rectangle of pixels [min_x, max_x] x
[min_y, max_y] and produces exactly ``samples_per_pixel`` Samples for every
pixel before it is exhausted. Pixels are visited column by column (y varies
fastest). ``next_sample()`` is safe to call from several threads.

Samplers can be split into sub-samplers over a non-overlapping partition of
their pixels, for parallel dispatch. Splitting halves the longer axis and
hands each half its own seed and half the buffer capacity.

A sampler may also pre-generate its samples on a dedicated thread into a
bounded queue (``start_pregeneration``). Consumers then pull from the queue,
blocking while it is empty; the producer blocks while it is full.

Example:
    >>> from src.lightpath.sampling.pseudorandom import PseudorandomSampler
    >>> sampler = PseudorandomSampler(0, 0, 3, 1, samples_per_pixel=2, seed=1)
    >>> sampler.total_samples
    16
    >>> len(list(sampler))
    16
"""

from __future__ import annotations

import itertools
import logging
import queue
import threading
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Iterator

import numpy as np

from src.lightpath.core.config import DEFAULT_BUFFER_CAPACITY

if TYPE_CHECKING:
    from src.lightpath.core.spectrum import Spectrum
    from src.lightpath.sampling.sample import Sample

logger = logging.getLogger(__name__)

# Seconds between cancellation checks while blocked on the sample queue
QUEUE_POLL_INTERVAL = 0.05

# Marks the end of a pre-generated sample queue
_END_OF_SAMPLES = object()


class Sampler(ABC):
    """Produces Samples covering a rectangle of pixels.

    Args:
        min_x: Smallest pixel x (inclusive).
        min_y: Smallest pixel y (inclusive).
        max_x: Largest pixel x (inclusive).
        max_y: Largest pixel y (inclusive).
        samples_per_pixel: Samples generated for each pixel.
        seed: Integer seed or SeedSequence; None draws fresh entropy.
        buffer_capacity: Size of the pre-generation queue.

    Raises:
        ValueError: If the rectangle is empty or any count is not positive.
    """

    def __init__(
        self,
        min_x: int,
        min_y: int,
        max_x: int,
        max_y: int,
        samples_per_pixel: int = 1,
        *,
        seed: int | np.random.SeedSequence | None = None,
        buffer_capacity: int = DEFAULT_BUFFER_CAPACITY,
    ) -> None:
        if max_x < min_x or max_y < min_y:
            raise ValueError(
                f"Sampler bounds are empty: x in [{min_x}, {max_x}], y in [{min_y}, {max_y}]"
            )
        if samples_per_pixel < 1:
            raise ValueError(f"samples_per_pixel must be at least 1, got {samples_per_pixel}")
        if buffer_capacity < 1:
            raise ValueError(f"buffer_capacity must be at least 1, got {buffer_capacity}")

        self.min_x, self.min_y = min_x, min_y
        self.max_x, self.max_y = max_x, max_y
        self.samples_per_pixel = samples_per_pixel
        self.buffer_capacity = buffer_capacity

        if isinstance(seed, np.random.SeedSequence):
            self._seed_sequence = seed
        else:
            self._seed_sequence = np.random.SeedSequence(seed)
        self._rng = np.random.default_rng(self._seed_sequence)

        self._lock = threading.Lock()
        self._pixels = itertools.product(range(min_x, max_x + 1), range(min_y, max_y + 1))
        self._pixel: tuple[int, int] | None = None
        self._remaining_in_pixel = 0
        self._generated = 0

        self._queue: queue.Queue[object] | None = None
        self._pregeneration_thread: threading.Thread | None = None

    # =========================================================================
    # Geometry
    # =========================================================================

    @property
    def width(self) -> int:
        return self.max_x - self.min_x + 1

    @property
    def height(self) -> int:
        return self.max_y - self.min_y + 1

    @property
    def total_samples(self) -> int:
        return self.width * self.height * self.samples_per_pixel

    @property
    def samples_generated(self) -> int:
        return self._generated

    # =========================================================================
    # Generation
    # =========================================================================

    def next_sample(self, cancel_event: threading.Event | None = None) -> Sample | None:
        """Return the next Sample, or None once every pixel is covered.

        Args:
            cancel_event: When set, a consumer waiting on the pre-generation
                queue gives up and receives None.
        """
        if self._queue is not None:
            return self._take_pregenerated(cancel_event)
        return self._locked_generate()

    def __iter__(self) -> Iterator[Sample]:
        while (sample := self.next_sample()) is not None:
            yield sample

    def _locked_generate(self) -> Sample | None:
        with self._lock:
            if self._remaining_in_pixel == 0:
                pixel = next(self._pixels, None)
                if pixel is None:
                    return None
                self._pixel = pixel
                self._remaining_in_pixel = self.samples_per_pixel
                self._begin_pixel(*pixel)
            self._remaining_in_pixel -= 1
            self._generated += 1
            return self.generate_sample(*self._pixel)

    def _begin_pixel(self, pixel_x: int, pixel_y: int) -> None:
        """Hook called before the first sample of each pixel."""

    @abstractmethod
    def generate_sample(self, pixel_x: int, pixel_y: int) -> Sample:
        """Build one Sample inside the given pixel. Called under the lock."""

    def _new_rng(self) -> np.random.Generator:
        """Independent generator for one sample, spawned deterministically."""
        return self._rng.spawn(1)[0]

    def is_sample_acceptable(self, sample: Sample, radiance: Spectrum) -> bool:
        """Rejection hook applied before a result reaches the film."""
        return True

    # =========================================================================
    # Splitting
    # =========================================================================

    def has_sub_samplers(self) -> bool:
        """True if the rectangle is more than one pixel wide or tall."""
        return self.width > 1 or self.height > 1

    def split(self) -> list[Sampler]:
        """Halve the rectangle along its longer axis.

        Returns:
            Two sub-samplers covering disjoint halves, or an empty list if
            the rectangle is a single pixel.
        """
        if not self.has_sub_samplers():
            return []
        first_seed, second_seed = self._seed_sequence.spawn(2)
        capacity = max(1, self.buffer_capacity // 2)

        if self.width >= self.height:
            mid = (self.max_x - self.min_x) // 2 + self.min_x
            regions = (
                (self.min_x, self.min_y, mid, self.max_y),
                (mid + 1, self.min_y, self.max_x, self.max_y),
            )
        else:
            mid = (self.max_y - self.min_y) // 2 + self.min_y
            regions = (
                (self.min_x, self.min_y, self.max_x, mid),
                (self.min_x, mid + 1, self.max_x, self.max_y),
            )
        return [
            self._make_sub_sampler(*region, seed=seed, buffer_capacity=capacity)
            for region, seed in zip(regions, (first_seed, second_seed))
        ]

    def _make_sub_sampler(
        self,
        min_x: int,
        min_y: int,
        max_x: int,
        max_y: int,
        *,
        seed: np.random.SeedSequence,
        buffer_capacity: int,
    ) -> Sampler:
        return type(self)(
            min_x,
            min_y,
            max_x,
            max_y,
            self.samples_per_pixel,
            seed=seed,
            buffer_capacity=buffer_capacity,
        )

    def recursively_subdivide(self, levels: int) -> list[Sampler]:
        """Split ``levels`` times (where possible) and return the leaves."""
        if levels <= 0 or not self.has_sub_samplers():
            return [self]
        return [leaf for child in self.split() for leaf in child.recursively_subdivide(levels - 1)]

    # =========================================================================
    # Pre-generation
    # =========================================================================

    def start_pregeneration(self, cancel_event: threading.Event | None = None) -> threading.Thread:
        """Generate samples ahead of time on a dedicated thread.

        Returns:
            The started producer thread.

        Raises:
            RuntimeError: If pre-generation was already started.
        """
        if self._queue is not None:
            raise RuntimeError(f"Pre-generation already started for {self!r}")
        self._queue = queue.Queue(maxsize=self.buffer_capacity)
        thread = threading.Thread(
            target=self._pregenerate,
            args=(cancel_event,),
            name=f"pregenerate-{self.min_x}-{self.min_y}",
            daemon=True,
        )
        self._pregeneration_thread = thread
        thread.start()
        return thread

    def _pregenerate(self, cancel_event: threading.Event | None) -> None:
        try:
            while (sample := self._locked_generate()) is not None:
                if not self._offer(sample, cancel_event):
                    logger.warning("Sample pre-generation cancelled for %r", self)
                    return
        except Exception:
            logger.exception("Sample pre-generation failed for %r", self)
        finally:
            self._offer(_END_OF_SAMPLES, cancel_event)

    def _offer(self, item: object, cancel_event: threading.Event | None) -> bool:
        assert self._queue is not None
        while True:
            try:
                self._queue.put(item, timeout=QUEUE_POLL_INTERVAL)
                return True
            except queue.Full:
                if cancel_event is not None and cancel_event.is_set():
                    return False

    def _take_pregenerated(self, cancel_event: threading.Event | None) -> Sample | None:
        assert self._queue is not None
        while True:
            try:
                item = self._queue.get(timeout=QUEUE_POLL_INTERVAL)
            except queue.Empty:
                if cancel_event is not None and cancel_event.is_set():
                    return None
                continue
            if item is _END_OF_SAMPLES:
                # Leave the marker for any other consumer
                self._queue.put(item)
                return None
            return item  # type: ignore[return-value]

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(x=[{self.min_x}, {self.max_x}], "
            f"y=[{self.min_y}, {self.max_y}], samples_per_pixel={self.samples_per_pixel})"
        )
