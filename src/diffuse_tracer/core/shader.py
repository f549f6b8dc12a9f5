"""Deterministic per-pixel shaders for debugging the camera model.

A shader maps a pixel to a color without sampling. RayDirectionShader shows
the primary ray direction through each pixel center, which makes camera
orientation and field-of-view mistakes visible at a glance.
"""

from __future__ import annotations

from typing import Protocol

from diffuse_tracer.camera.pinhole import PinholeCamera
from diffuse_tracer.core.image import Image
from diffuse_tracer.core.ray import Color, vec3


class Shader(Protocol):
    """Computes one color per pixel."""

    def compute_color(self, x: int, y: int) -> Color: ...


class RayDirectionShader:
    """Visualize primary ray directions.

    The color is ((dx + 1) / 2, (dy + 1) / 2, -dz): red grows to the right,
    green upward, and blue is the component along -z.
    """

    def __init__(self, camera: PinholeCamera) -> None:
        self.camera = camera

    def compute_color(self, x: int, y: int) -> Color:
        direction = self.camera.back_project(float(x), float(y)).direction
        return vec3(
            (direction[0] + 1.0) * 0.5,
            (direction[1] + 1.0) * 0.5,
            -direction[2],
        )


def apply_shader(shader: Shader, image: Image) -> Image:
    """Fill every pixel of an image with the shader's color.

    Returns:
        The same image, for chaining.
    """
    for y in range(image.height):
        for x in range(image.width):
            image.pixels[y, x] = shader.compute_color(x, y)
    return image
