"""Whitted-style recursive ray tracer.

Direct light is gathered from explicit lights and from one point on each
emissive primitive. Only ideal specular reflection and transmission are
followed recursively; diffuse interreflection is ignored. Each recursive
ray is weighted by ``f * |cos|``, which for the mirror and dielectric
models is the Fresnel fraction times the tint.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from src.lightpath.core.spectrum import BLACK, Spectrum
from src.lightpath.integrators.base import Integrator
from src.lightpath.materials.bsdf import BSDFProperty, perfect_specular_reflection

if TYPE_CHECKING:
    from src.lightpath.core.ray import Ray
    from src.lightpath.core.vector import Vector
    from src.lightpath.geometry.surface import Interaction
    from src.lightpath.sampling.sample import Sample
    from src.lightpath.scene.world import World


class WhittedIntegrator(Integrator):
    """Deterministic specular recursion plus direct lighting."""

    def follow_ray(self, ray: Ray, world: World, sample: Sample) -> Spectrum:
        interaction = self.closest_interaction(ray, world)
        if interaction is None:
            return BLACK

        bsdf = interaction.bsdf
        radiance = bsdf.emitted_radiance(interaction, sample)
        radiance = radiance + self.light_radiance(interaction, world, sample)
        for emissive in world.emissives:
            contribution = self.sample_emissive(interaction, world, emissive, sample)
            if contribution is not None:
                radiance = radiance + contribution[0]

        if not self.can_recurse(ray):
            return radiance

        if bsdf.has_property(BSDFProperty.REFLECT_SPECULAR):
            reflected = perfect_specular_reflection(interaction.eye, interaction.normal)
            radiance = radiance + self._follow_specular(interaction, reflected, world, sample)
        if bsdf.has_property(BSDFProperty.TRANSMIT):
            transmitted = bsdf.transmitted_direction(interaction)
            if transmitted is not None:
                radiance = radiance + self._follow_specular(interaction, transmitted, world, sample)
        return radiance

    def _follow_specular(
        self,
        interaction: Interaction,
        direction: Vector,
        world: World,
        sample: Sample,
    ) -> Spectrum:
        bsdf = interaction.bsdf
        weight = bsdf.scatter_value(interaction, direction, sample) * abs(
            bsdf.cosine_term(interaction, direction)
        )
        if weight.is_black():
            return BLACK
        return weight * self.follow_ray(interaction.spawn_ray(direction), world, sample)
