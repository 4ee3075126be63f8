"""Perfect specular (mirror) BSDF.

A mirror scatters all light into the single direction of perfect reflection.
Its sampling density is 1 for that direction and 0 for any other, compared
within the global tolerance.

The scatter value for the ideal direction is ``tint / cos(theta)``, so that
``f_r * cos / pdf`` reduces to the tint for a Monte-Carlo estimator.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from src.lightpath.core.spectrum import BLACK, Spectrum
from src.lightpath.core.vector import DOUBLE_TOLERANCE
from src.lightpath.materials.bsdf import (
    BSDF,
    BSDFProperty,
    apply_wavelength_filter,
    perfect_specular_reflection,
)

if TYPE_CHECKING:
    from src.lightpath.core.vector import Vector
    from src.lightpath.geometry.surface import Interaction
    from src.lightpath.materials.texture import Texture
    from src.lightpath.sampling.sample import Sample
    from src.lightpath.sampling.streams import RandomStream


class PerfectSpecularBSDF(BSDF):
    """Ideal mirror.

    Args:
        texture: Tint applied to reflected light.
        emissive: Optional emission texture.
    """

    properties = frozenset({BSDFProperty.REFLECT_SPECULAR})

    def __init__(self, texture: Texture, emissive: Texture | None = None) -> None:
        super().__init__(index_of_refraction=1.0, emissive=emissive)
        self.texture = texture

    def reflection(self, interaction: Interaction) -> Vector:
        return perfect_specular_reflection(interaction.eye, interaction.normal)

    def is_ideal(self, interaction: Interaction, direction: Vector) -> bool:
        return direction.normalize().is_near(self.reflection(interaction), DOUBLE_TOLERANCE)

    def sample_scatter_direction(
        self,
        interaction: Interaction,
        sample: Sample,
        stream: RandomStream,
    ) -> Vector:
        return self.reflection(interaction)

    def scatter_density(self, interaction: Interaction, direction: Vector) -> float:
        return 1.0 if self.is_ideal(interaction, direction) else 0.0

    def scatter_value(
        self,
        interaction: Interaction,
        direction: Vector,
        sample: Sample | None = None,
    ) -> Spectrum:
        if not self.is_ideal(interaction, direction):
            return BLACK
        cos = self.cosine_term(interaction, direction)
        if cos <= 0.0:
            return BLACK
        return apply_wavelength_filter(self.texture.evaluate(interaction), sample) / cos

    def __repr__(self) -> str:
        return f"PerfectSpecularBSDF(texture={self.texture!r})"
