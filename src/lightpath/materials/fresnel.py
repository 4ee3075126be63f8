"""Fresnel equations for dielectric interfaces.

Two reflectance models are provided:

- fresnel: the exact Fresnel equations, averaging the s- and p-polarized
  reflection coefficients. This is what the dielectric BSDF uses.
- schlick_reflectance: Schlick's polynomial approximation. It agrees with
  the exact form at normal incidence but drifts at grazing angles.

Key physics:
    - Snell's law: n1 * sin(theta_i) = n2 * sin(theta_t)
    - Total internal reflection when sin²(theta_t) = (n1/n2)² (1 - cos²(theta_i)) > 1
    - Reflectance + transmittance = 1

Example:
    >>> from src.lightpath.materials.fresnel import fresnel
    >>> from src.lightpath.core.vector import Normal, Vector
    >>> result = fresnel(Vector(0.0, 1.0, 0.0), Normal(0.0, 1.0, 0.0), 1.0, 1.5)
    >>> round(result.reflectance, 4)  # ((1 - 1.5) / (1 + 1.5))² at normal incidence
    0.04
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from src.lightpath.core.vector import Normal, Vector
from src.lightpath.materials.bsdf import perfect_specular_reflection


@dataclass(frozen=True)
class FresnelResult:
    """Outcome of a Fresnel evaluation.

    Attributes:
        reflectance: Fraction of energy reflected, in [0, 1].
        transmittance: Fraction transmitted; always 1 - reflectance.
        reflected_direction: Unit mirror-reflection direction.
        transmitted_direction: Unit refracted direction, or None under total
            internal reflection.
    """

    reflectance: float
    transmittance: float
    reflected_direction: Vector
    transmitted_direction: Vector | None

    @property
    def is_total_internal_reflection(self) -> bool:
        return self.transmitted_direction is None


def fresnel(eye: Vector, normal: Normal, n1: float, n2: float) -> FresnelResult:
    """Evaluate the exact Fresnel equations at an interface.

    Args:
        eye: Vector from the surface toward the viewer (normalized here).
        normal: Normal on the eye's side of the surface (normalized here).
        n1: Refractive index on the eye's side.
        n2: Refractive index on the far side.

    Returns:
        Reflectance/transmittance split with both outgoing directions.
    """
    i = eye.normalize()
    n = normal.normalize().as_vector()
    reflected = perfect_specular_reflection(i, normal)

    n0 = n1 / n2
    cos_i = n.dot(i)
    sin2_t = n0 * n0 * (1.0 - cos_i * cos_i)
    if sin2_t > 1.0:
        return FresnelResult(1.0, 0.0, reflected, None)

    cos_t = math.sqrt(1.0 - sin2_t)
    r_perp = (n1 * cos_i - n2 * cos_t) / (n1 * cos_i + n2 * cos_t)
    r_par = (n2 * cos_i - n1 * cos_t) / (n2 * cos_i + n1 * cos_t)
    reflectance = min(1.0, max(0.0, (r_perp * r_perp + r_par * r_par) / 2.0))

    transmitted = (-i * n0 + n * (n0 * cos_i - cos_t)).normalize()
    return FresnelResult(reflectance, 1.0 - reflectance, reflected, transmitted)


def schlick_reflectance(cos_i: float, n1: float, n2: float) -> float:
    """Schlick's approximation to Fresnel reflectance.

    Not used by the dielectric BSDF; kept for comparison against the exact
    form.

    Args:
        cos_i: Cosine of the incident angle.
        n1: Refractive index on the incident side.
        n2: Refractive index on the far side.

    Returns:
        Approximate reflectance in [0, 1] (1 under total internal reflection).
    """
    r0 = ((n1 - n2) / (n1 + n2)) ** 2
    cosine = cos_i
    if n1 > n2:
        n0 = n1 / n2
        sin2_t = n0 * n0 * (1.0 - cos_i * cos_i)
        if sin2_t > 1.0:
            return 1.0
        cosine = math.sqrt(1.0 - sin2_t)
    return r0 + (1.0 - r0) * (1.0 - cosine) ** 5
