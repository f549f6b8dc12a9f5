"""Path tracing integrator for diffuse light transport.

This module estimates the radiance arriving along a ray in a scene made of
purely diffuse, non-emissive surfaces lit by a constant-radiance environment.

Each path segment is traced against the scene:
    - depth exhausted: the path carries no light (black)
    - miss: the path picks up the ambient light color
    - hit: the material picks a new direction and attenuates the path

The recursive estimator
    L(ray, depth) = attenuation * L(scattered_ray, depth - 1)
is evaluated as a loop carrying the running attenuation product, so the
bounce limit never turns into Python recursion depth.

There is no Russian roulette: paths end only at max_depth or on a miss.

Example:
    >>> from diffuse_tracer.core.integrator import trace
    >>> from diffuse_tracer.core.sampler import XorShiftSampler
    >>> color = trace(scene, camera.back_project(64.0, 64.0), XorShiftSampler(1), 10)
"""

import numpy as np

from diffuse_tracer.core.ray import Color, Ray, length_squared, zeros
from diffuse_tracer.core.sampler import XorShiftSampler
from diffuse_tracer.materials import attenuation, scatter_direction
from diffuse_tracer.scene.intersection import MIN_DISTANCE, Scene

# Default maximum number of path segments per sample
MAX_DEPTH = 10


def trace(
    scene: Scene,
    ray: Ray,
    rng: XorShiftSampler,
    depth: int,
    min_distance: float = MIN_DISTANCE,
) -> Color:
    """Trace a single path and return its radiance estimate.

    Args:
        scene: The scene to trace against.
        ray: The ray to follow (direction should be normalized).
        rng: The sampler stream used for scattering decisions.
        depth: Remaining number of path segments. Zero returns black.
        min_distance: Smallest ray parameter accepted as a hit.

    Returns:
        Linear radiance (RGB), unbounded above.
    """
    # Throughput: product of the attenuations along the path so far
    throughput = np.ones(3, dtype=np.float64)

    for _ in range(depth):
        hit = scene.nearest_hit(ray, min_distance)

        if hit is None:
            return throughput * scene.ambient_light_color

        record, obj = hit
        direction = scatter_direction(record.surface_normal, obj.material, rng)
        if length_squared(direction) == 0.0:
            # Ball sample cancelled the normal exactly
            direction = record.surface_normal

        throughput = throughput * attenuation(obj.material)
        ray = Ray(origin=record.intersection_point, direction=direction)

    return zeros()
