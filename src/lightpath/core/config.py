"""Render configuration and shared rendering constants.

RenderConfig gathers every knob that controls one render: image size,
sampling density, recursion depth, the sampler and integrator strategies,
and the worker count. It validates itself on construction and round-trips
through plain dictionaries for JSON storage.

Example:
    >>> from src.lightpath.core.config import RenderConfig
    >>> config = RenderConfig(width=64, height=48, samples_per_pixel=4)
    >>> RenderConfig.from_dict(config.to_dict()) == config
    True
"""

from __future__ import annotations

import os
from dataclasses import asdict, dataclass, fields
from typing import Any

# =============================================================================
# Rendering Constants
# =============================================================================

# Default maximum ray recursion depth
DEFAULT_MAX_DEPTH = 5

# Ray offset epsilon to avoid self-intersection
RAY_EPSILON = 1e-4

# Minimum bounces before Russian roulette can terminate paths
MIN_BOUNCES_BEFORE_RR = 3

# Russian roulette survival probability cap
MAX_RR_PROBABILITY = 0.95

# Default number of samples in flight / buffered per render
DEFAULT_BUFFER_CAPACITY = 2 * (os.cpu_count() or 1)

SAMPLER_NAMES = ("pseudorandom", "stratified", "best-candidate")
INTEGRATOR_NAMES = ("whitted", "path", "importance")


@dataclass(frozen=True)
class RenderConfig:
    """Configuration for a single render.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        samples_per_pixel: Samples taken for every pixel.
        max_depth: Ray depth at which no further recursive rays are spawned.
        samples_per_interaction: Directions sampled per interaction by the
            importance-sampling integrator.
        sampler: Sampling strategy name (see SAMPLER_NAMES).
        integrator: Integrator name (see INTEGRATOR_NAMES).
        workers: Worker threads; 1 renders on the calling thread.
        seed: Seed for every random stream, or None for fresh entropy.
        buffer_capacity: Samples buffered or in flight at once.
        pregenerate: Generate samples ahead on dedicated threads.
    """

    width: int = 320
    height: int = 240
    samples_per_pixel: int = 4
    max_depth: int = DEFAULT_MAX_DEPTH
    samples_per_interaction: int = 4
    sampler: str = "stratified"
    integrator: str = "path"
    workers: int = 1
    seed: int | None = None
    buffer_capacity: int = DEFAULT_BUFFER_CAPACITY
    pregenerate: bool = False

    def __post_init__(self) -> None:
        for name in ("width", "height", "samples_per_pixel", "samples_per_interaction",
                     "workers", "buffer_capacity"):
            value = getattr(self, name)
            if not isinstance(value, int) or value < 1:
                raise ValueError(f"{name} must be a positive integer, got {value!r}")
        if not isinstance(self.max_depth, int) or self.max_depth < 0:
            raise ValueError(f"max_depth must be a non-negative integer, got {self.max_depth!r}")
        if self.sampler not in SAMPLER_NAMES:
            raise ValueError(f"Unknown sampler {self.sampler!r}; expected one of {SAMPLER_NAMES}")
        if self.integrator not in INTEGRATOR_NAMES:
            raise ValueError(
                f"Unknown integrator {self.integrator!r}; expected one of {INTEGRATOR_NAMES}"
            )

    def to_dict(self) -> dict[str, Any]:
        """Export the configuration to a dictionary (for JSON serialization)."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RenderConfig:
        """Load a configuration from a dictionary.

        Missing keys take their defaults.

        Raises:
            ValueError: If the dictionary contains unknown keys or invalid
                values.
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown render configuration keys: {unknown}")
        return cls(**data)
