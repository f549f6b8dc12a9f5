"""Geometry module for shape primitives.

This module provides the surface variants a scene object can carry and the
dispatch that intersects a ray with any of them:

Components:
    sphere: Sphere primitive with ray-sphere intersection

The set of surface variants is closed. Adding a variant means adding a
dataclass and a branch in intersect_surface().

Ray-surface intersection follows the pattern:
    record = intersect_surface(surface, ray, min_distance)  # HitRecord | None
"""

from __future__ import annotations

from typing import Union

from diffuse_tracer.core.ray import Ray

from .sphere import HitRecord, Sphere, hit_sphere

# Every surface variant the renderer understands
Surface = Union[Sphere]


def intersect_surface(surface: Surface, ray: Ray, min_distance: float) -> HitRecord | None:
    """Intersect a ray with any surface variant.

    Raises:
        TypeError: If the surface is not a known variant.
    """
    if isinstance(surface, Sphere):
        return hit_sphere(ray, surface, min_distance)
    raise TypeError(f"Unsupported surface type: {type(surface).__name__}")


__all__ = [
    "Surface",
    "Sphere",
    "HitRecord",
    "hit_sphere",
    "intersect_surface",
]
