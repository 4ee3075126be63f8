"""Lambertian (ideal diffuse) BSDF.

Incident light is scattered equally into every direction of the hemisphere
around the normal. The BRDF is:
    f_r(wi, wo) = albedo / pi

Directions are drawn uniformly over the hemisphere, so the density is the
constant:
    pdf(wi) = 1 / (2 pi)

A Lambertian surface may also be an emitter, in which case it radiates the
color of its emissive texture.

Example:
    >>> from src.lightpath.core.spectrum import Spectrum
    >>> from src.lightpath.materials.lambertian import LambertianBSDF
    >>> from src.lightpath.materials.texture import ConstantTexture
    >>> red = LambertianBSDF(ConstantTexture(Spectrum(0.8, 0.1, 0.1)))
    >>> lamp = LambertianBSDF(ConstantTexture(Spectrum(0.0, 0.0, 0.0)),
    ...                       emissive=ConstantTexture(Spectrum(4.0, 4.0, 4.0)))
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from src.lightpath.core.spectrum import Spectrum
from src.lightpath.materials.bsdf import BSDF, BSDFProperty, apply_wavelength_filter

if TYPE_CHECKING:
    from src.lightpath.core.vector import Vector
    from src.lightpath.geometry.surface import Interaction
    from src.lightpath.materials.texture import Texture
    from src.lightpath.sampling.sample import Sample
    from src.lightpath.sampling.streams import RandomStream

UNIFORM_HEMISPHERE_DENSITY = 1.0 / (2.0 * math.pi)


class LambertianBSDF(BSDF):
    """Ideal diffuse reflector.

    Args:
        texture: Diffuse albedo.
        emissive: Optional emission texture.
    """

    properties = frozenset({BSDFProperty.REFLECT_DIFFUSE})

    def __init__(self, texture: Texture, emissive: Texture | None = None) -> None:
        super().__init__(index_of_refraction=1.0, emissive=emissive)
        self.texture = texture

    def sample_scatter_direction(
        self,
        interaction: Interaction,
        sample: Sample,
        stream: RandomStream,
    ) -> Vector:
        u1, u2 = stream.next_2d()

        # Uniform hemisphere: cos(theta) is itself uniform
        cos_theta = u1
        sin_theta = math.sqrt(max(0.0, 1.0 - cos_theta * cos_theta))
        phi = 2.0 * math.pi * u2

        # Local frame with j along the normal
        j = interaction.normal.normalize().as_vector()
        i = j.orthogonal()
        k = i.cross(j)
        return (
            i * (sin_theta * math.cos(phi)) + j * cos_theta + k * (sin_theta * math.sin(phi))
        ).normalize()

    def scatter_density(self, interaction: Interaction, direction: Vector) -> float:
        return UNIFORM_HEMISPHERE_DENSITY

    def scatter_value(
        self,
        interaction: Interaction,
        direction: Vector,
        sample: Sample | None = None,
    ) -> Spectrum:
        return apply_wavelength_filter(self.texture.evaluate(interaction), sample) / math.pi

    def __repr__(self) -> str:
        return f"LambertianBSDF(texture={self.texture!r}, emissive={self.emissive!r})"
