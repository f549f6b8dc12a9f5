"""Materials module for surface scattering models.

Components:
    lambertian: Ideal diffuse (Lambertian) reflection

Each material variant provides:
    - scatter_direction(): sample an outgoing direction at a hit point
    - attenuation(): the color factor applied to light arriving along it

The set of material variants is closed; both dispatch functions below need a
branch for every variant.
"""

from typing import Union

from diffuse_tracer.core.ray import Color, Vector
from diffuse_tracer.core.sampler import XorShiftSampler

from .lambertian import LambertianMaterial, attenuation_lambertian, scatter_lambertian

# Every material variant the renderer understands
Material = Union[LambertianMaterial]


def scatter_direction(normal: Vector, material: Material, rng: XorShiftSampler) -> Vector:
    """Sample the direction of the next path segment.

    Raises:
        TypeError: If the material is not a known variant.
    """
    if isinstance(material, LambertianMaterial):
        return scatter_lambertian(normal, rng)
    raise TypeError(f"Unsupported material type: {type(material).__name__}")


def attenuation(material: Material) -> Color:
    """Get the color factor a material applies to each bounce.

    Raises:
        TypeError: If the material is not a known variant.
    """
    if isinstance(material, LambertianMaterial):
        return attenuation_lambertian(material)
    raise TypeError(f"Unsupported material type: {type(material).__name__}")


__all__ = [
    "Material",
    "LambertianMaterial",
    "scatter_lambertian",
    "attenuation_lambertian",
    "scatter_direction",
    "attenuation",
]
