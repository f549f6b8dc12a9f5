"""Lambertian (ideal diffuse) material implementation.

A Lambertian surface scatters incoming light around the surface normal. The
scattered direction is the normal offset by a point drawn uniformly inside
the unit ball, then renormalized, which gives a cosine-weighted-like lobe
without building a tangent frame.

Each bounce multiplies the carried radiance by the albedo, so the energy lost
per bounce is (1 - albedo) per channel.

Example:
    >>> from diffuse_tracer.core.ray import vec3
    >>> from diffuse_tracer.core.sampler import XorShiftSampler
    >>> from diffuse_tracer.materials.lambertian import (
    ...     LambertianMaterial, scatter_lambertian
    ... )
    >>> material = LambertianMaterial(albedo=vec3(0.8, 0.3, 0.3))
    >>> direction = scatter_lambertian(vec3(0.0, 1.0, 0.0), XorShiftSampler(1))
"""

from dataclasses import dataclass

from diffuse_tracer.core.ray import Color, Vector, as_vec3, normalize
from diffuse_tracer.core.sampler import XorShiftSampler


@dataclass(frozen=True)
class LambertianMaterial:
    """Lambertian (ideal diffuse) material properties.

    Attributes:
        albedo: The diffuse reflectance color (RGB, each component in [0, 1]).
            Represents the fraction of light reflected for each color channel.
    """

    albedo: Color

    def __post_init__(self) -> None:
        albedo = as_vec3(self.albedo)
        # Validate albedo for energy conservation
        for i, component in enumerate(albedo):
            if component < 0.0 or component > 1.0:
                raise ValueError(
                    f"Albedo component {i} = {component} is outside [0, 1]. "
                    "This would violate energy conservation."
                )
        object.__setattr__(self, "albedo", albedo)


def scatter_lambertian(normal: Vector, rng: XorShiftSampler) -> Vector:
    """Sample a scattered direction for a Lambertian surface.

    Args:
        normal: The surface normal at the hit point (unit length, facing
            the incoming ray).
        rng: The sampler stream of the current pixel.

    Returns:
        The normalized scatter direction. It is the zero vector in the
        degenerate case where the ball sample cancels the normal.
    """
    return normalize(normal + rng.unit_ball_point())


def attenuation_lambertian(material: LambertianMaterial) -> Color:
    """Get the per-bounce attenuation of a Lambertian surface (its albedo)."""
    return material.albedo
