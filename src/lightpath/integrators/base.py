"""Shared render loop and lighting helpers for all integrators.

An Integrator pulls Samples from one or more Samplers, turns each into a
camera ray, evaluates the radiance arriving along it with ``follow_ray``,
and adds the result to the film. Subclasses differ only in how
``follow_ray`` combines emitted, direct and indirect light.

Threading:
    - Without an executor every sample is evaluated on the calling thread,
      in sampler order. With a fixed seed the result is reproducible
      bit-for-bit.
    - With an executor, samples are submitted as independent tasks and at
      most ``buffer_capacity`` of them are in flight at once.
    - The film's lock covers only the final accumulation.
    - A cancellation event is checked before every sample pull and at
      every ``follow_ray`` entry.

Failure policy:
    - A sample whose evaluation raises is logged and contributes zero.
    - NaN or infinite radiance is replaced by zero.
    - Cancellation stops the render, leaving the film partially filled.

Example:
    >>> from src.lightpath.integrators.path_tracing import PathTracingIntegrator
    >>> from src.lightpath.sampling.stratified import StratifiedSampler
    >>> sampler = StratifiedSampler(0, 0, 63, 47, samples_per_pixel=4, seed=1)
    >>> integrator = PathTracingIntegrator(camera, film, sampler, max_depth=4)
    >>> integrator.render(world)
"""

from __future__ import annotations

import logging
import math
import threading
from abc import ABC, abstractmethod
from concurrent.futures import FIRST_COMPLETED, Executor, Future, wait
from typing import TYPE_CHECKING, Iterable, Iterator

from src.lightpath.core.config import DEFAULT_MAX_DEPTH
from src.lightpath.core.ray import Ray
from src.lightpath.core.spectrum import BLACK, Spectrum
from src.lightpath.core.vector import Vector
from src.lightpath.sampling.sampler import Sampler

if TYPE_CHECKING:
    from src.lightpath.camera.pinhole import PinholeCamera
    from src.lightpath.film.film import ImageFilm
    from src.lightpath.geometry.surface import Interaction
    from src.lightpath.sampling.sample import Sample
    from src.lightpath.scene.primitive import Primitive
    from src.lightpath.scene.world import World

logger = logging.getLogger(__name__)


class RenderCancelled(Exception):
    """Raised inside path evaluation once the render has been cancelled."""


class Integrator(ABC):
    """Base class for light-transport integrators.

    Args:
        camera: Turns samples into primary rays.
        film: Receives the radiance of every sample.
        samplers: One sampler, or several covering disjoint pixel regions.
        max_depth: Ray depth at which no further recursive rays are spawned.
        executor: Executor for parallel sample evaluation; None renders on
            the calling thread.
        cancel_event: Cancellation token shared with the caller.
        pregenerate: Start each sampler's pre-generation thread before
            rendering.

    Raises:
        ValueError: If no sampler is given or max_depth is negative.
    """

    def __init__(
        self,
        camera: PinholeCamera,
        film: ImageFilm,
        samplers: Sampler | Iterable[Sampler],
        max_depth: int = DEFAULT_MAX_DEPTH,
        *,
        executor: Executor | None = None,
        cancel_event: threading.Event | None = None,
        pregenerate: bool = False,
    ) -> None:
        self.samplers: tuple[Sampler, ...] = (
            (samplers,) if isinstance(samplers, Sampler) else tuple(samplers)
        )
        if not self.samplers:
            raise ValueError("An integrator needs at least one sampler")
        if max_depth < 0:
            raise ValueError(f"max_depth must be non-negative, got {max_depth}")

        self.camera = camera
        self.film = film
        self.max_depth = max_depth
        self.executor = executor
        self.cancel_event = cancel_event if cancel_event is not None else threading.Event()
        self.pregenerate = pregenerate

    @property
    def buffer_capacity(self) -> int:
        """Maximum number of samples in flight on the executor."""
        return sum(sampler.buffer_capacity for sampler in self.samplers)

    @property
    def is_cancelled(self) -> bool:
        return self.cancel_event.is_set()

    def cancel(self) -> None:
        """Ask a running render to stop."""
        self.cancel_event.set()

    def check_cancelled(self) -> None:
        """Raise RenderCancelled if cancellation has been requested."""
        if self.cancel_event.is_set():
            raise RenderCancelled()

    # =========================================================================
    # Render loop
    # =========================================================================

    def render(self, world: World) -> ImageFilm:
        """Render every sample of every sampler into the film.

        Returns:
            The film, complete unless the render was cancelled.
        """
        logger.info(
            "Rendering %d samples with %s over %d sampler(s)%s",
            sum(s.total_samples for s in self.samplers),
            type(self).__name__,
            len(self.samplers),
            "" if self.executor is None else " in parallel",
        )
        if self.pregenerate:
            for sampler in self.samplers:
                sampler.start_pregeneration(self.cancel_event)

        if self.executor is None:
            self._render_serial(world)
        else:
            self._render_parallel(world, self.executor)

        if self.is_cancelled:
            logger.warning("Render cancelled after %d samples", self.film.sample_count)
        else:
            logger.info("Render finished: %d samples", self.film.sample_count)
        return self.film

    def _samples(self) -> Iterator[Sample]:
        for sampler in self.samplers:
            logger.debug("Pulling samples from %r", sampler)
            while not self.is_cancelled:
                sample = sampler.next_sample(self.cancel_event)
                if sample is None:
                    break
                yield sample

    def _render_serial(self, world: World) -> None:
        for sample in self._samples():
            try:
                self.evaluate_sample(sample, world)
            except RenderCancelled:
                break

    def _render_parallel(self, world: World, executor: Executor) -> None:
        capacity = self.buffer_capacity
        pending: set[Future[None]] = set()
        for sample in self._samples():
            if len(pending) >= capacity:
                done, pending = wait(pending, return_when=FIRST_COMPLETED)
                self._collect(done)
            pending.add(executor.submit(self.evaluate_sample, sample, world))
        done, _ = wait(pending)
        self._collect(done)

    @staticmethod
    def _collect(done: Iterable[Future[None]]) -> None:
        for future in done:
            try:
                future.result()
            except RenderCancelled:
                logger.debug("Sample abandoned after cancellation")

    def evaluate_sample(self, sample: Sample, world: World) -> None:
        """Compute one sample's radiance and add it to the film.

        Raises:
            RenderCancelled: If the render is cancelled mid-evaluation.
        """
        try:
            radiance = self.render_sample(sample, world) / sample.samples_per_pixel
        except RenderCancelled:
            raise
        except Exception:
            logger.exception(
                "Sample at (%.3f, %.3f) failed; it contributes zero",
                sample.image_x,
                sample.image_y,
            )
            radiance = BLACK

        if not radiance.is_finite():
            logger.debug("Non-finite radiance at (%.3f, %.3f)", sample.image_x, sample.image_y)
            radiance = BLACK

        if sample.sampler is not None and not sample.sampler.is_sample_acceptable(sample, radiance):
            return
        self.film.add_sample(sample, radiance)

    def render_sample(self, sample: Sample, world: World) -> Spectrum:
        """Radiance arriving at the camera through one sample."""
        return self.follow_ray(self.camera.get_ray(sample), world, sample)

    @abstractmethod
    def follow_ray(self, ray: Ray, world: World, sample: Sample) -> Spectrum:
        """Radiance arriving along ``ray``; black if it escapes the scene."""

    # =========================================================================
    # Shared lighting terms
    # =========================================================================

    def closest_interaction(self, ray: Ray, world: World) -> Interaction | None:
        """Nearest hit along ``ray``, with its normal facing the eye."""
        self.check_cancelled()
        interaction = world.closest_interaction(ray)
        if interaction is None:
            return None
        return interaction.facing_eye()

    def can_recurse(self, ray: Ray) -> bool:
        return ray.depth < self.max_depth

    def light_radiance(self, interaction: Interaction, world: World, sample: Sample) -> Spectrum:
        """Direct light from explicit lights, each checked with a shadow ray."""
        bsdf = interaction.bsdf
        stream = sample.stream("light-position", sample.samples_per_pixel)
        total = BLACK
        for light in world.lights:
            light_vector = light.sample_light_vector(interaction.point, stream)
            if light_vector.magnitude == 0.0:
                continue
            to_light = (-light_vector).normalize()
            cos = bsdf.cosine_term(interaction, to_light)
            if cos <= 0.0:
                continue

            distance = math.inf if light.is_infinite() else light_vector.magnitude
            if not world.is_unoccluded(interaction.spawn_ray(to_light), distance):
                continue

            density = light.probability_sample_vector(interaction.point, light_vector)
            if density <= 0.0:
                continue
            f = bsdf.scatter_value(interaction, to_light, sample)
            total = total + f * light.radiance_at(light_vector) * (cos / density)
        return total

    def sample_emissive(
        self,
        interaction: Interaction,
        world: World,
        emissive: Primitive,
        sample: Sample,
        period: int = 1,
    ) -> tuple[Spectrum, Vector] | None:
        """Direct light from one point on an emissive primitive.

        A point is drawn on the side of the emitter facing the interaction
        and a shadow ray is traced toward it. The emitter's radiance falls
        off with the square of the distance.

        Returns:
            (f * Le * cos / d², direction to the emitter), or None if the
            point is behind the surface or the shadow ray hits something
            else first.
        """
        if emissive is interaction.primitive:
            return None
        stream = sample.stream("emissive-surface", period)
        target = emissive.sample_surface_point(stream, interaction.point)
        to_target = Vector.between(interaction.point, target)
        if to_target.magnitude == 0.0:
            return None
        direction = to_target.normalize()
        bsdf = interaction.bsdf
        cos = bsdf.cosine_term(interaction, direction)
        if cos <= 0.0:
            return None

        hit = world.closest_interaction(interaction.spawn_ray(direction))
        if hit is None or hit.primitive is not emissive:
            return None
        distance = hit.distance
        emitted = emissive.bsdf.emitted_radiance(hit, sample)
        f = bsdf.scatter_value(interaction, direction, sample)
        return f * emitted * (cos / (distance * distance)), direction

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(max_depth={self.max_depth}, "
            f"samplers={len(self.samplers)})"
        )
