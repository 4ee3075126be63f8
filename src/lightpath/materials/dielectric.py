"""Dielectric (glass/water) BSDF.

This module implements a smooth dielectric interface that splits incident
light between a mirror reflection and a refraction, using the exact Fresnel
equations from ``fresnel.py``.

Key physics:
    - Snell's law for refraction: n1 * sin(theta1) = n2 * sin(theta2)
    - Exact Fresnel reflectance (average of s- and p-polarizations)
    - Total internal reflection when sin²(theta_t) > 1

Sampling picks reflection with probability R and transmission with
probability T = 1 - R, so the density of each ideal direction is R or T.

Example:
    >>> from src.lightpath.materials.dielectric import DielectricBSDF
    >>> glass = DielectricBSDF(index_of_refraction=1.5)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from src.lightpath.core.spectrum import BLACK, WHITE, Spectrum
from src.lightpath.core.vector import DOUBLE_TOLERANCE
from src.lightpath.materials.bsdf import BSDF, BSDFProperty, apply_wavelength_filter
from src.lightpath.materials.fresnel import FresnelResult, fresnel
from src.lightpath.materials.texture import ConstantTexture

if TYPE_CHECKING:
    from src.lightpath.core.vector import Vector
    from src.lightpath.geometry.surface import Interaction
    from src.lightpath.materials.texture import Texture
    from src.lightpath.sampling.sample import Sample
    from src.lightpath.sampling.streams import RandomStream

# Refractive index of the medium surrounding every object
AMBIENT_INDEX_OF_REFRACTION = 1.0


class DielectricBSDF(BSDF):
    """Smooth transparent interface.

    Args:
        index_of_refraction: Index inside the object. Common values:
            - Water: 1.33
            - Glass: 1.5
            - Diamond: 2.4
        texture: Tint applied to both reflected and transmitted light
            (white by default).
        emissive: Optional emission texture.
    """

    properties = frozenset(
        {BSDFProperty.REFLECT_SPECULAR, BSDFProperty.TRANSMIT, BSDFProperty.DIELECTRIC}
    )

    def __init__(
        self,
        index_of_refraction: float = 1.5,
        texture: Texture | None = None,
        emissive: Texture | None = None,
    ) -> None:
        super().__init__(index_of_refraction=index_of_refraction, emissive=emissive)
        self.texture = texture or ConstantTexture(WHITE)

    def indices(self, interaction: Interaction) -> tuple[float, float]:
        """(n1, n2): index on the eye's side, then on the far side."""
        if interaction.front_face:
            return AMBIENT_INDEX_OF_REFRACTION, self.index_of_refraction
        return self.index_of_refraction, AMBIENT_INDEX_OF_REFRACTION

    def fresnel(self, interaction: Interaction) -> FresnelResult:
        oriented = interaction.facing_eye()
        n1, n2 = self.indices(oriented)
        return fresnel(oriented.eye, oriented.normal, n1, n2)

    def _fraction_for(self, interaction: Interaction, direction: Vector) -> float:
        result = self.fresnel(interaction)
        d = direction.normalize()
        if d.is_near(result.reflected_direction, DOUBLE_TOLERANCE):
            return result.reflectance
        transmitted = result.transmitted_direction
        if transmitted is not None and d.is_near(transmitted, DOUBLE_TOLERANCE):
            return result.transmittance
        return 0.0

    def sample_scatter_direction(
        self,
        interaction: Interaction,
        sample: Sample,
        stream: RandomStream,
    ) -> Vector:
        result = self.fresnel(interaction)
        if result.transmitted_direction is None or stream.next_float() < result.reflectance:
            return result.reflected_direction
        return result.transmitted_direction

    def scatter_density(self, interaction: Interaction, direction: Vector) -> float:
        return self._fraction_for(interaction, direction)

    def scatter_value(
        self,
        interaction: Interaction,
        direction: Vector,
        sample: Sample | None = None,
    ) -> Spectrum:
        fraction = self._fraction_for(interaction, direction)
        cos = abs(self.cosine_term(interaction, direction))
        if fraction == 0.0 or cos == 0.0:
            return BLACK
        tint = apply_wavelength_filter(self.texture.evaluate(interaction), sample)
        return tint * (fraction / cos)

    def transmitted_direction(self, interaction: Interaction) -> Vector | None:
        return self.fresnel(interaction).transmitted_direction

    def __repr__(self) -> str:
        return f"DielectricBSDF(index_of_refraction={self.index_of_refraction})"
