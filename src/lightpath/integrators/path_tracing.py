"""Unbiased path tracing integrator.

At each interaction the radiance estimate is:

    L = Le + L_lights + f(wi) * L(wi) * cos(wi) / pdf(wi)

where ``L_lights`` is direct light from explicit lights (shadow-ray
tested) and the last term continues the path along one direction drawn
from the BSDF. Emissive surfaces contribute only when a path hits them,
so no light is counted twice.

Paths end when they miss the scene, reach ``max_depth``, or are cut by
Russian roulette. Roulette starts after MIN_BOUNCES_BEFORE_RR bounces;
surviving paths are divided by their survival probability, which keeps
the estimator unbiased.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from src.lightpath.core.config import MAX_RR_PROBABILITY, MIN_BOUNCES_BEFORE_RR
from src.lightpath.core.spectrum import BLACK, Spectrum
from src.lightpath.integrators.base import Integrator

if TYPE_CHECKING:
    from src.lightpath.core.ray import Ray
    from src.lightpath.geometry.surface import Interaction
    from src.lightpath.sampling.sample import Sample
    from src.lightpath.scene.world import World


class PathTracingIntegrator(Integrator):
    """Monte-Carlo path tracer with one scattered ray per bounce."""

    def follow_ray(self, ray: Ray, world: World, sample: Sample) -> Spectrum:
        interaction = self.closest_interaction(ray, world)
        if interaction is None:
            return BLACK

        bsdf = interaction.bsdf
        radiance = bsdf.emitted_radiance(interaction, sample)
        radiance = radiance + self.light_radiance(interaction, world, sample)

        if self.can_recurse(ray):
            radiance = radiance + self._indirect_radiance(ray, interaction, world, sample)
        return radiance

    def _indirect_radiance(
        self,
        ray: Ray,
        interaction: Interaction,
        world: World,
        sample: Sample,
    ) -> Spectrum:
        bsdf = interaction.bsdf
        period = sample.samples_per_pixel
        direction = bsdf.sample_scatter_direction(
            interaction, sample, sample.stream("scatter-direction", period)
        )
        density = bsdf.scatter_density(interaction, direction)
        if density <= 0.0:
            return BLACK

        cos = abs(bsdf.cosine_term(interaction, direction))
        throughput = bsdf.scatter_value(interaction, direction, sample) * (cos / density)
        if throughput.is_black():
            return BLACK

        if ray.depth >= MIN_BOUNCES_BEFORE_RR:
            survival = min(throughput.max_component, MAX_RR_PROBABILITY)
            if sample.stream("russian-roulette", period).next_float() >= survival:
                return BLACK
            throughput = throughput / survival

        incoming = self.follow_ray(interaction.spawn_ray(direction), world, sample)
        return throughput * incoming
