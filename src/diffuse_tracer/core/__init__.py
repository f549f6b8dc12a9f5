"""Core rendering module.

This module contains the fundamental building blocks for path tracing:

Components:
    ray: Ray data structure and vector utilities
    sampler: Deterministic xorshift random streams
    image: Image buffer and gamma correction
    integrator: Diffuse path tracing estimator
    renderer: Per-pixel render pass
    parallel: Fork-join averaging of render passes
    accelerated: Taichi kernel implementing the render pass
    shader: Deterministic debug shaders
"""

from .image import Image, gamma_correct
from .ray import (
    Ray,
    as_vec3,
    clamp,
    cos_angle,
    cross,
    dot,
    length,
    length_squared,
    normalize,
    ray_at,
    squared_distance,
    vec2,
    vec3,
    zeros,
)
from .sampler import XorShiftSampler, derive_seed, hash32, xorshift32

# Note: integrator, renderer and accelerated are NOT imported here to avoid
# circular imports with the scene package. Import them directly, e.g.
#   from diffuse_tracer.core.renderer import Renderer

__all__ = [
    "Ray",
    "ray_at",
    "vec2",
    "vec3",
    "as_vec3",
    "zeros",
    "dot",
    "cross",
    "length",
    "length_squared",
    "normalize",
    "squared_distance",
    "cos_angle",
    "clamp",
    "XorShiftSampler",
    "derive_seed",
    "hash32",
    "xorshift32",
    "Image",
    "gamma_correct",
]
