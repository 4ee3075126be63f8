"""Materials module for textures and BSDF models.

Components:
    texture: Constant and checkerboard textures over surface parameters
    bsdf: Abstract BSDF and the BSDFProperty vocabulary
    fresnel: Exact Fresnel equations (and Schlick's approximation)
    lambertian: Ideal diffuse reflection
    specular: Perfect mirror reflection
    dielectric: Glass-like reflect/transmit split

Each BSDF provides:
    - emitted_radiance(): Light given off by the surface
    - sample_scatter_direction(): Importance sample an outgoing direction
    - scatter_density(): Probability density of a direction
    - scatter_value(): The f_r term for a direction
"""

from .bsdf import BSDF, BSDFProperty, perfect_specular_reflection
from .dielectric import AMBIENT_INDEX_OF_REFRACTION, DielectricBSDF
from .fresnel import FresnelResult, fresnel, schlick_reflectance
from .lambertian import LambertianBSDF
from .specular import PerfectSpecularBSDF
from .texture import CheckerboardTexture, ConstantTexture, LinearTextureMapping, Texture

__all__ = [
    # Textures
    "Texture",
    "ConstantTexture",
    "CheckerboardTexture",
    "LinearTextureMapping",
    # BSDFs
    "BSDF",
    "BSDFProperty",
    "perfect_specular_reflection",
    "LambertianBSDF",
    "PerfectSpecularBSDF",
    "DielectricBSDF",
    "AMBIENT_INDEX_OF_REFRACTION",
    # Fresnel
    "FresnelResult",
    "fresnel",
    "schlick_reflectance",
]
