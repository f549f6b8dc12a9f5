"""Ray data structure and vector utilities.

This module provides the Ray dataclass and the small set of vector helpers the
path tracer needs. Vectors are plain NumPy ``float64`` arrays of shape (3,)
(or (2,) for sensor coordinates); every helper returns a new array and never
modifies its arguments, so vectors behave as values.

Example:
    >>> from diffuse_tracer.core.ray import Ray, ray_at, vec3
    >>> ray = Ray(origin=vec3(0.0, 0.0, 0.0), direction=vec3(0.0, 0.0, -1.0))
    >>> ray_at(ray, 5.0)
    array([ 0.,  0., -5.])
"""

from dataclasses import dataclass

import numpy as np
import numpy.typing as npt

# Type alias for 3D (and 2D) vectors
Vector = npt.NDArray[np.float64]

# Colors share the vector representation; components are linear radiance
Color = Vector


def vec3(x: float, y: float, z: float) -> Vector:
    """Create a 3D vector from its components."""
    return np.array((x, y, z), dtype=np.float64)


def vec2(x: float, y: float) -> Vector:
    """Create a 2D vector from its components."""
    return np.array((x, y), dtype=np.float64)


def as_vec3(value) -> Vector:
    """Convert a sequence of three numbers to a vector.

    Raises:
        ValueError: If the value does not have exactly three components.
    """
    v = np.asarray(value, dtype=np.float64)
    if v.shape != (3,):
        raise ValueError(f"Expected 3 components, got shape {v.shape}")
    return v.copy()


def zeros() -> Vector:
    """Return the zero vector (also black)."""
    return np.zeros(3, dtype=np.float64)


@dataclass(frozen=True)
class Ray:
    """A ray with an origin point and direction vector.

    Attributes:
        origin: The starting point of the ray.
        direction: The direction vector of the ray. Should be normalized
            when the ray is used for shading angles; this is not enforced.
    """

    origin: Vector
    direction: Vector


def ray_at(ray: Ray, t: float) -> Vector:
    """Compute the point ``origin + t * direction`` along the ray."""
    return ray.origin + t * ray.direction


# =============================================================================
# Vector Utility Functions
# =============================================================================


def dot(a: Vector, b: Vector) -> float:
    """Compute the dot product of two vectors."""
    return float(np.dot(a, b))


def cross(a: Vector, b: Vector) -> Vector:
    """Compute the cross product a x b."""
    return np.cross(a, b)


def length_squared(v: Vector) -> float:
    """Compute the squared length of a vector.

    Cheaper than length() when only comparing magnitudes.
    """
    return float(np.dot(v, v))


def length(v: Vector) -> float:
    """Compute the Euclidean length of a vector."""
    return float(np.sqrt(np.dot(v, v)))


def normalize(v: Vector) -> Vector:
    """Normalize a vector to unit length.

    Args:
        v: The input vector.

    Returns:
        A unit vector in the same direction as v. A zero-length (or
        non-finite length) vector yields the zero vector instead of NaNs.
    """
    n = length(v)
    if n == 0.0 or not np.isfinite(n):
        return np.zeros_like(v, dtype=np.float64)
    return v / n


def squared_distance(a: Vector, b: Vector) -> float:
    """Compute the squared distance between two points."""
    d = a - b
    return float(np.dot(d, d))


def cos_angle(a: Vector, b: Vector) -> float:
    """Cosine of the angle between two vectors.

    Returns 0.0 if either vector has zero length.
    """
    denom = length(a) * length(b)
    if denom == 0.0:
        return 0.0
    return dot(a, b) / denom


def clamp(v: Vector, low: float = 0.0, high: float = 1.0) -> Vector:
    """Clamp every component of a vector to [low, high]."""
    return np.clip(v, low, high)
