"""Scene container and scene-level ray intersection.

A Scene is an immutable list of objects, each pairing one surface with one
material, plus the constant ambient (background) radiance seen by rays that
escape. nearest_hit() scans every object linearly and keeps the hit closest
to the ray origin.

Scenes are shared read-only between render workers, so nothing here mutates
after construction.

Example:
    >>> from diffuse_tracer.core.ray import Ray, vec3
    >>> from diffuse_tracer.geometry import Sphere
    >>> from diffuse_tracer.materials import LambertianMaterial
    >>> from diffuse_tracer.scene.intersection import Scene, SceneObject
    >>> scene = Scene(
    ...     objects=(SceneObject(Sphere(vec3(0, 0, -1), 0.5),
    ...                          LambertianMaterial(vec3(0.5, 0.5, 0.5))),),
    ...     ambient_light_color=vec3(1.0, 1.0, 1.0),
    ... )
    >>> hit = scene.nearest_hit(Ray(vec3(0, 0, 0), vec3(0, 0, -1)), 1e-3)
"""

from __future__ import annotations

from dataclasses import dataclass

from diffuse_tracer.core.ray import Color, Ray, as_vec3, squared_distance
from diffuse_tracer.geometry import HitRecord, Surface, intersect_surface
from diffuse_tracer.materials import Material

# Default ray offset below which intersections count as the ray's own origin
MIN_DISTANCE = 1e-3


@dataclass(frozen=True)
class SceneObject:
    """A renderable object: one surface bound to one material.

    Attributes:
        surface: The geometric surface (e.g. a Sphere).
        material: The material used to shade the surface.
    """

    surface: Surface
    material: Material

    def intersect(self, ray: Ray, min_distance: float) -> HitRecord | None:
        """Intersect a ray with this object's surface."""
        return intersect_surface(self.surface, ray, min_distance)


@dataclass(frozen=True)
class Scene:
    """Objects plus the ambient light that illuminates them.

    Attributes:
        objects: The objects in the scene, scanned in order.
        ambient_light_color: Constant radiance returned by escaping rays.
    """

    objects: tuple[SceneObject, ...]
    ambient_light_color: Color

    def __post_init__(self) -> None:
        object.__setattr__(self, "objects", tuple(self.objects))
        object.__setattr__(self, "ambient_light_color", as_vec3(self.ambient_light_color))

    def __len__(self) -> int:
        return len(self.objects)

    def nearest_hit(
        self, ray: Ray, min_distance: float = MIN_DISTANCE
    ) -> tuple[HitRecord, SceneObject] | None:
        """Find the closest intersection along a ray.

        Args:
            ray: The ray to trace.
            min_distance: Smallest ray parameter accepted as a hit.

        Returns:
            The hit record and the object it belongs to, or None on a miss.
        """
        closest: tuple[HitRecord, SceneObject] | None = None
        closest_distance = 0.0

        for obj in self.objects:
            record = obj.intersect(ray, min_distance)
            if record is None:
                continue
            distance = squared_distance(ray.origin, record.intersection_point)
            if closest is None or distance < closest_distance:
                closest = (record, obj)
                closest_distance = distance

        return closest
