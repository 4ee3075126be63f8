"""Monte-Carlo integrator with importance-weighted averaging.

At every interaction two estimates are formed from
``samples_per_interaction`` draws each:

Direct (D):
    Points are drawn on the side of every emissive primitive facing the
    interaction. A draw counts only if its shadow ray reaches that same
    emitter. Its density is the BSDF density scaled by the fraction of the
    hemisphere the emitter subtends, ``pdf * solid_angle / 2π``. Explicit
    lights are summed on top of the weighted emitter average, never
    averaged against it.

Indirect (I):
    Directions are drawn from the BSDF and followed recursively. Russian
    roulette on the largest component of ``f * cos`` culls paths that
    would contribute little; survivors are divided by that probability
    and culled draws enter the average as zero.

Each estimate is ``Σ(c_k / p_k) / Σ(1 / p_k)``: every contribution is
weighted by its inverse density and the total is normalized by the sum of
those weights, rather than taking a plain mean. Draws with zero density
are skipped. The result is ``Le + (D + I) / 2`` while the ray may still
recurse and ``Le + D`` once it has reached ``max_depth``.

Example:
    >>> integrator = ImportanceIntegrator(
    ...     camera, film, sampler, max_depth=4, samples_per_interaction=8
    ... )
"""

from __future__ import annotations

import math
import threading
from concurrent.futures import Executor
from typing import TYPE_CHECKING, Iterable

from src.lightpath.core.config import DEFAULT_MAX_DEPTH
from src.lightpath.core.spectrum import BLACK, Spectrum
from src.lightpath.core.vector import DOUBLE_TOLERANCE
from src.lightpath.integrators.base import Integrator

if TYPE_CHECKING:
    from src.lightpath.camera.pinhole import PinholeCamera
    from src.lightpath.core.ray import Ray
    from src.lightpath.film.film import ImageFilm
    from src.lightpath.geometry.surface import Interaction
    from src.lightpath.sampling.sample import Sample
    from src.lightpath.sampling.sampler import Sampler
    from src.lightpath.scene.world import World


class _WeightedEstimate:
    """Running Σ(c / p) and Σ(1 / p)."""

    def __init__(self) -> None:
        self.total = BLACK
        self.weight = 0.0

    def add(self, contribution: Spectrum, density: float) -> None:
        if density <= DOUBLE_TOLERANCE:
            return
        inverse = 1.0 / density
        self.total = self.total + contribution * inverse
        self.weight += inverse

    def value(self) -> Spectrum:
        if self.weight == 0.0:
            return BLACK
        return self.total / self.weight


class ImportanceIntegrator(Integrator):
    """Importance-sampled direct and indirect lighting.

    Args:
        samples_per_interaction: Draws per estimate at each interaction.
        See Integrator for the remaining arguments.

    Raises:
        ValueError: If samples_per_interaction is less than 1.
    """

    def __init__(
        self,
        camera: PinholeCamera,
        film: ImageFilm,
        samplers: Sampler | Iterable[Sampler],
        max_depth: int = DEFAULT_MAX_DEPTH,
        samples_per_interaction: int = 4,
        *,
        executor: Executor | None = None,
        cancel_event: threading.Event | None = None,
        pregenerate: bool = False,
    ) -> None:
        if samples_per_interaction < 1:
            raise ValueError(
                f"samples_per_interaction must be at least 1, got {samples_per_interaction}"
            )
        super().__init__(
            camera,
            film,
            samplers,
            max_depth,
            executor=executor,
            cancel_event=cancel_event,
            pregenerate=pregenerate,
        )
        self.samples_per_interaction = samples_per_interaction

    def follow_ray(self, ray: Ray, world: World, sample: Sample) -> Spectrum:
        interaction = self.closest_interaction(ray, world)
        if interaction is None:
            return BLACK

        emitted = interaction.bsdf.emitted_radiance(interaction, sample)
        direct = self._direct_estimate(interaction, world, sample)
        if not self.can_recurse(ray):
            # No indirect estimate at max_depth, so direct is not halved
            return emitted + direct

        indirect = self._indirect_estimate(interaction, world, sample)
        return emitted + (direct + indirect) / 2.0

    def _direct_estimate(self, interaction: Interaction, world: World, sample: Sample) -> Spectrum:
        bsdf = interaction.bsdf
        estimate = _WeightedEstimate()

        for emissive in world.emissives:
            for _ in range(self.samples_per_interaction):
                found = self.sample_emissive(
                    interaction, world, emissive, sample, self.samples_per_interaction
                )
                if found is None:
                    continue
                contribution, direction = found
                solid_angle = emissive.compute_solid_angle(interaction.point)
                density = bsdf.scatter_density(interaction, direction) * (
                    solid_angle / (2.0 * math.pi)
                )
                estimate.add(contribution, density)

        return estimate.value() + self.light_radiance(interaction, world, sample)

    def _indirect_estimate(
        self,
        interaction: Interaction,
        world: World,
        sample: Sample,
    ) -> Spectrum:
        bsdf = interaction.bsdf
        period = self.samples_per_interaction
        directions = sample.stream("scatter-direction", period)
        roulette = sample.stream("russian-roulette", period)
        estimate = _WeightedEstimate()

        for _ in range(self.samples_per_interaction):
            direction = bsdf.sample_scatter_direction(interaction, sample, directions)
            density = bsdf.scatter_density(interaction, direction)
            if density <= DOUBLE_TOLERANCE:
                continue

            weight = bsdf.scatter_value(interaction, direction, sample) * abs(
                bsdf.cosine_term(interaction, direction)
            )
            survival = min(weight.max_component, 1.0)
            if survival <= 0.0 or roulette.next_float() >= survival:
                # A culled draw still counts toward Σ(1 / p)
                estimate.add(BLACK, density)
                continue
            weight = weight / survival

            incoming = self.follow_ray(interaction.spawn_ray(direction), world, sample)
            estimate.add(weight * incoming, density)
        return estimate.value()
