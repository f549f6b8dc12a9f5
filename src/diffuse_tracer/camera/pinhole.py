"""Pinhole camera model for perspective projection ray generation.

This module implements a pinhole camera that turns sensor pixel coordinates
into primary rays. The camera sits at the world origin; it is oriented by a
forward direction and an up hint and has a field of view tied to one sensor
axis (the larger one by default).

The camera builds an orthonormal basis (forward, up, right):
- forward: the viewing direction
- right: normalize(forward x up_hint)
- up: normalize(right x forward), re-orthogonalized so the basis is
  orthonormal whatever up hint was supplied

Sensor coordinates are in pixels: x grows to the right, y grows downward
(image row order), and the center of pixel (i, j) is at (i, j). Sub-pixel
coordinates are allowed, which is how jittered anti-aliasing samples are
projected.

Example:
    >>> import math
    >>> from diffuse_tracer.camera.pinhole import PinholeCamera
    >>> camera = PinholeCamera.create(
    ...     forward=(0.0, 0.0, -1.0),
    ...     up_hint=(0.0, 1.0, 0.0),
    ...     fov_radians=math.radians(90.0),
    ...     sensor_size_px=(256, 256),
    ... )
    >>> ray = camera.back_project(127.5, 127.5)  # straight down -z
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Literal

import numpy as np

from diffuse_tracer.core.ray import (
    Ray,
    Vector,
    as_vec3,
    cross,
    length,
    normalize,
    vec2,
    zeros,
)

# Which sensor axis the field of view spans
FovAxis = Literal["max", "horizontal", "vertical"]

# Sine of the smallest angle allowed between forward and the up hint
_MIN_UP_SINE = 1e-6


@dataclass(frozen=True)
class PinholeCamera:
    """A pinhole (perspective) camera at the world origin.

    Use PinholeCamera.create() to build one; the constructor takes the
    already-derived basis and intrinsics.

    Attributes:
        forward: Unit viewing direction.
        up: Unit up direction, orthogonal to forward.
        right: Unit right direction, orthogonal to forward and up.
        focal_length: Distance of the image plane in pixel units.
        principal_point: Sensor position (pixels) of the optical axis.
        sensor_size_px: Sensor (image) size as (width, height).
    """

    forward: Vector
    up: Vector
    right: Vector
    focal_length: float
    principal_point: Vector
    sensor_size_px: tuple[int, int]

    @classmethod
    def create(
        cls,
        forward,
        up_hint,
        fov_radians: float,
        sensor_size_px: tuple[int, int],
        fov_axis: FovAxis = "max",
    ) -> PinholeCamera:
        """Build a camera from a view direction and field of view.

        The focal length is chosen so that the centers of the outermost
        pixels along the field-of-view axis lie at +/- fov/2 from forward:
            focal_length = 0.5 * (extent - 1) / tan(fov / 2)

        Args:
            forward: Viewing direction (normalized internally).
            up_hint: Approximate up direction; must not be parallel to forward.
            fov_radians: Field of view in radians, in (0, pi).
            sensor_size_px: Sensor size as (width, height) in pixels.
            fov_axis: Sensor axis the field of view spans: "max" (the larger
                dimension), "horizontal" or "vertical".

        Returns:
            A new immutable camera.

        Raises:
            ValueError: If any parameter is degenerate.
        """
        width, height = (int(sensor_size_px[0]), int(sensor_size_px[1]))
        if width <= 0 or height <= 0:
            raise ValueError(f"Sensor size must be positive, got {width}x{height}")
        if not 0.0 < fov_radians < math.pi:
            raise ValueError(f"Field of view must be in (0, pi), got {fov_radians}")

        forward_v = as_vec3(forward)
        up_v = as_vec3(up_hint)
        if length(forward_v) == 0.0:
            raise ValueError("Forward vector must be non-zero")
        forward_v = normalize(forward_v)

        right_raw = cross(forward_v, up_v)
        if length(right_raw) <= _MIN_UP_SINE * max(length(up_v), 1e-300):
            raise ValueError("Up hint must not be zero or parallel to forward")
        right_v = normalize(right_raw)
        up_v = normalize(cross(right_v, forward_v))

        if fov_axis == "max":
            extent = max(width, height)
        elif fov_axis == "horizontal":
            extent = width
        elif fov_axis == "vertical":
            extent = height
        else:
            raise ValueError(f"Unknown field of view axis: {fov_axis}")

        # A single-pixel axis has no spread; keep the focal length positive
        span = max(extent - 1, 1)
        focal_length = abs(0.5 * span / math.tan(0.5 * fov_radians))
        principal_point = vec2(width / 2.0 - 0.5, height / 2.0 - 0.5)

        return cls(
            forward=forward_v,
            up=up_v,
            right=right_v,
            focal_length=focal_length,
            principal_point=principal_point,
            sensor_size_px=(width, height),
        )

    @property
    def width(self) -> int:
        """Sensor width in pixels."""
        return self.sensor_size_px[0]

    @property
    def height(self) -> int:
        """Sensor height in pixels."""
        return self.sensor_size_px[1]

    def back_project(self, x: float, y: float) -> Ray:
        """Generate the ray through sensor coordinates (x, y).

        The vertical axis is flipped because image rows grow downward while
        the up vector points up in world space.

        Args:
            x: Horizontal sensor coordinate in pixels (sub-pixel allowed).
            y: Vertical sensor coordinate in pixels (sub-pixel allowed).

        Returns:
            A ray from the world origin with a normalized direction.
        """
        x_ndc = x - self.principal_point[0]
        y_ndc = -(y - self.principal_point[1])
        direction = normalize(
            self.forward * self.focal_length + self.right * x_ndc + self.up * y_ndc
        )
        return Ray(origin=zeros(), direction=direction)


# =============================================================================
# Utility Functions
# =============================================================================


def get_camera_info(camera: PinholeCamera) -> dict[str, Any]:
    """Get camera state as plain tuples for debugging.

    Returns:
        Dictionary with forward, up, right, focal_length, principal_point
        and sensor_size_px.
    """

    def as_tuple(v: Vector) -> tuple[float, ...]:
        return tuple(float(c) for c in np.asarray(v))

    return {
        "forward": as_tuple(camera.forward),
        "up": as_tuple(camera.up),
        "right": as_tuple(camera.right),
        "focal_length": float(camera.focal_length),
        "principal_point": as_tuple(camera.principal_point),
        "sensor_size_px": (camera.sensor_size_px[0], camera.sensor_size_px[1]),
    }
