"""Sphere primitive with ray-sphere intersection.

The ray-sphere intersection is found by solving:
    |ray_origin + t * ray_direction - center|^2 = radius^2

With a normalized direction and the half-b formulation this becomes:
    t^2 + 2*h*t + c = 0
where:
    oc = origin - center
    h = dot(direction, oc)  (half of the traditional 'b')
    c = dot(oc, oc) - radius^2
    discriminant = h^2 - c

Example:
    >>> from diffuse_tracer.core.ray import Ray, vec3
    >>> from diffuse_tracer.geometry.sphere import Sphere, hit_sphere
    >>> sphere = Sphere(center=vec3(0.0, 0.0, -1.0), radius=0.5)
    >>> ray = Ray(origin=vec3(0.0, 0.0, 0.0), direction=vec3(0.0, 0.0, -1.0))
    >>> record = hit_sphere(ray, sphere, 1e-3)
    >>> record.intersection_point
    array([ 0. ,  0. , -0.5])
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from diffuse_tracer.core.ray import Ray, Vector, as_vec3, dot, normalize, ray_at


@dataclass(frozen=True)
class Sphere:
    """A sphere defined by center point and radius.

    Attributes:
        center: The center point of the sphere.
        radius: The radius of the sphere (positive).
    """

    center: Vector
    radius: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "center", as_vec3(self.center))
        object.__setattr__(self, "radius", float(self.radius))
        if not self.radius > 0.0:
            raise ValueError(f"Sphere radius must be positive, got {self.radius}")


@dataclass(frozen=True)
class HitRecord:
    """Record of a ray-surface intersection.

    Attributes:
        t: The parameter value along the ray of the intersection.
        intersection_point: The 3D point where the ray met the surface.
        surface_normal: Unit surface normal, oriented against the incoming
            ray direction (it faces the viewer whether the ray started
            outside or inside the surface).
    """

    t: float
    intersection_point: Vector
    surface_normal: Vector


def hit_sphere(ray: Ray, sphere: Sphere, min_distance: float) -> HitRecord | None:
    """Test for ray-sphere intersection.

    The nearer root is preferred; if it lies within min_distance of the ray
    origin the farther root is used instead, which handles rays starting
    inside the sphere and rays leaving the sphere's own surface.

    Args:
        ray: The ray to test. The direction is expected to be normalized.
        sphere: The sphere to test intersection against.
        min_distance: Smallest t accepted as a hit (avoids self-intersection).

    Returns:
        A HitRecord for the first valid intersection, or None on a miss.
    """
    # Vector from sphere center to ray origin
    oc = ray.origin - sphere.center

    half_b = dot(ray.direction, oc)
    c = dot(oc, oc) - sphere.radius * sphere.radius
    discriminant = half_b * half_b - c

    if discriminant < 0.0:
        return None

    sqrt_d = math.sqrt(discriminant)
    t1 = -half_b - sqrt_d
    t2 = -half_b + sqrt_d

    if t1 > min_distance:
        t = t1
    elif t2 > min_distance:
        t = t2
    else:
        return None

    point = ray_at(ray, t)
    normal = normalize(point - sphere.center)
    if dot(normal, ray.direction) > 0.0:
        # Ray is inside the sphere, hitting the back face
        normal = -normal

    return HitRecord(t=t, intersection_point=point, surface_normal=normal)
