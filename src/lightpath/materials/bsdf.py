"""Base interface for surface-scattering models (BSDFs).

Every BSDF answers the same five questions about an Interaction:

- emitted_radiance: light the surface gives off on its own
- sample_scatter_direction: draw an outgoing direction by the model's
  importance strategy
- scatter_density: probability density that a direction would be drawn
- scatter_value: the f_r term for a direction
- cosine_term: Lambert's cosine between the normal and a direction

Integrators decide which of these to call by looking at the BSDF's
declared ``properties``, a subset of BSDFProperty.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import IntEnum
from typing import TYPE_CHECKING

from src.lightpath.core.spectrum import BLACK, Spectrum
from src.lightpath.core.vector import Normal, Vector

if TYPE_CHECKING:
    from src.lightpath.geometry.surface import Interaction
    from src.lightpath.materials.texture import Texture
    from src.lightpath.sampling.sample import Sample
    from src.lightpath.sampling.streams import RandomStream


class BSDFProperty(IntEnum):
    """Scattering behaviors a BSDF may declare.

    Used by integrators to decide which sampling strategies to invoke.
    """

    REFLECT_DIFFUSE = 0
    REFLECT_SPECULAR = 1
    TRANSMIT = 2
    DIELECTRIC = 3
    GLOSSY = 4


def perfect_specular_reflection(eye: Vector, normal: Normal) -> Vector:
    """Mirror the eye vector about the normal.

    Args:
        eye: Vector from the surface toward the viewer.
        normal: Surface normal.

    Returns:
        Unit reflected direction, leaving the surface on the eye's side.
    """
    i = eye.normalize()
    n = normal.normalize().as_vector()
    return (-i + n * (2.0 * n.dot(i))).normalize()


def apply_wavelength_filter(spectrum: Spectrum, sample: Sample | None) -> Spectrum:
    """Multiply by the sample's wavelength filter, if it carries one."""
    if sample is None or sample.wavelength is None:
        return spectrum
    return spectrum * sample.wavelength


class BSDF(ABC):
    """Abstract scattering model.

    Attributes:
        properties: Declared scattering behaviors.
        index_of_refraction: Refractive index of the material beneath the
            surface (1.0 for opaque materials).
        emissive: Texture giving emitted radiance, or None for non-emitters.
    """

    properties: frozenset[BSDFProperty] = frozenset()

    def __init__(self, index_of_refraction: float = 1.0, emissive: Texture | None = None) -> None:
        if not index_of_refraction > 0.0:
            raise ValueError(f"Index of refraction must be positive, got {index_of_refraction}")
        self.index_of_refraction = float(index_of_refraction)
        self.emissive = emissive

    def has_property(self, prop: BSDFProperty) -> bool:
        return prop in self.properties

    @property
    def is_emissive(self) -> bool:
        return self.emissive is not None

    def emitted_radiance(self, interaction: Interaction, sample: Sample | None = None) -> Spectrum:
        """Radiance emitted at the interaction (black for non-emitters)."""
        if self.emissive is None:
            return BLACK
        return apply_wavelength_filter(self.emissive.evaluate(interaction), sample)

    @abstractmethod
    def sample_scatter_direction(
        self,
        interaction: Interaction,
        sample: Sample,
        stream: RandomStream,
    ) -> Vector:
        """Draw an outgoing direction by this model's importance strategy."""

    @abstractmethod
    def scatter_density(self, interaction: Interaction, direction: Vector) -> float:
        """Probability density that ``direction`` would have been drawn."""

    @abstractmethod
    def scatter_value(
        self,
        interaction: Interaction,
        direction: Vector,
        sample: Sample | None = None,
    ) -> Spectrum:
        """Bidirectional scattering value f_r for ``direction``."""

    def transmitted_direction(self, interaction: Interaction) -> Vector | None:
        """Direction of ideal transmission, or None if the model has none."""
        return None

    @staticmethod
    def cosine_term(interaction: Interaction, direction: Vector) -> float:
        """Dot product of the normalized normal and normalized direction."""
        return interaction.normal.normalize().dot(direction.normalize())
