"""Per-pixel renderer built on the path tracing integrator.

The Renderer owns the immutable inputs of a render (scene, camera, settings)
and produces one complete image per seed:

    for every pixel (x, y):
        rng = XorShiftSampler.for_pixel(seed, x, y)
        repeat samples_per_pixel times:
            ray = camera.back_project(x + rng.uniform() - 0.5,
                                      y + rng.uniform() - 0.5)
            color += trace(scene, ray, rng, max_depth)
        pixel = clamp(gamma_correct(color / samples_per_pixel), 0, 1)

Because every pixel derives its own stream from (seed, x, y), a seed always
reproduces the same image and passes with different seeds are independent.

Example:
    >>> from diffuse_tracer.core.renderer import Renderer, RenderSettings
    >>> from diffuse_tracer.scene.presets import create_default_scene
    >>> scene, camera, settings = create_default_scene(width=64, height=48)
    >>> renderer = Renderer(scene, camera, settings)
    >>> image = renderer.render(seed=1)
    >>> averaged = renderer.average_render(seeds=[1, 2, 3, 4])
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from diffuse_tracer.camera.pinhole import PinholeCamera
from diffuse_tracer.core.image import Image, gamma_correct
from diffuse_tracer.core.integrator import MAX_DEPTH, trace
from diffuse_tracer.core.parallel import Executor, ProgressCallback, average_render
from diffuse_tracer.core.ray import Color, Ray, clamp, zeros
from diffuse_tracer.core.sampler import XorShiftSampler
from diffuse_tracer.scene.intersection import MIN_DISTANCE, Scene

logger = logging.getLogger(__name__)

# Default number of jittered samples per pixel and pass
SAMPLES_PER_PIXEL = 16


@dataclass(frozen=True)
class RenderSettings:
    """Sampling configuration of a render.

    Attributes:
        max_depth: Maximum number of path segments per sample.
        samples_per_pixel: Jittered samples averaged per pixel and pass.
        min_distance: Smallest ray parameter accepted as a hit.
    """

    max_depth: int = MAX_DEPTH
    samples_per_pixel: int = SAMPLES_PER_PIXEL
    min_distance: float = MIN_DISTANCE

    def __post_init__(self) -> None:
        if self.max_depth < 0:
            raise ValueError(f"max_depth must be non-negative, got {self.max_depth}")
        if self.samples_per_pixel <= 0:
            raise ValueError(
                f"samples_per_pixel must be positive, got {self.samples_per_pixel}"
            )
        if not self.min_distance >= 0.0:
            raise ValueError(f"min_distance must be non-negative, got {self.min_distance}")


class Renderer:
    """Renders a scene through a camera, one independent pass per seed.

    The renderer holds no mutable state, so one instance can serve several
    threads at once.

    Attributes:
        scene: The scene to render.
        camera: The camera producing primary rays; its sensor size is the
            image size.
        settings: Sampling configuration.
    """

    def __init__(
        self,
        scene: Scene,
        camera: PinholeCamera,
        settings: RenderSettings | None = None,
    ) -> None:
        self._scene = scene
        self._camera = camera
        self._settings = settings if settings is not None else RenderSettings()

    @property
    def scene(self) -> Scene:
        """Get the scene."""
        return self._scene

    @property
    def camera(self) -> PinholeCamera:
        """Get the camera."""
        return self._camera

    @property
    def settings(self) -> RenderSettings:
        """Get the sampling settings."""
        return self._settings

    @property
    def width(self) -> int:
        """Get the image width."""
        return self._camera.width

    @property
    def height(self) -> int:
        """Get the image height."""
        return self._camera.height

    def trace_ray(self, ray: Ray, rng: XorShiftSampler, depth: int | None = None) -> Color:
        """Trace one ray with this renderer's scene and settings."""
        if depth is None:
            depth = self._settings.max_depth
        return trace(self._scene, ray, rng, depth, self._settings.min_distance)

    def compute_color_for_pixel(self, x: int, y: int, rng: XorShiftSampler) -> Color:
        """Estimate the display color of one pixel.

        Args:
            x: Pixel column.
            y: Pixel row (0 = top).
            rng: The pixel's sampler stream; advanced by the call.

        Returns:
            Gamma-corrected color clamped to [0, 1].
        """
        settings = self._settings
        color = zeros()
        for _ in range(settings.samples_per_pixel):
            sample_x = x + (rng.uniform() - 0.5)
            sample_y = y + (rng.uniform() - 0.5)
            ray = self._camera.back_project(sample_x, sample_y)
            color += self.trace_ray(ray, rng)

        return clamp(gamma_correct(color / settings.samples_per_pixel), 0.0, 1.0)

    def render(self, seed: int) -> Image:
        """Render one full pass.

        Args:
            seed: Pass seed; the same seed always yields the same image.

        Returns:
            A new, fully populated image of the camera's sensor size.
        """
        image = Image(self.width, self.height)
        logger.debug(
            "Rendering pass seed=%d (%dx%d, %d spp)",
            seed,
            self.width,
            self.height,
            self._settings.samples_per_pixel,
        )

        for y in range(self.height):
            for x in range(self.width):
                rng = XorShiftSampler.for_pixel(seed, x, y)
                image.pixels[y, x] = self.compute_color_for_pixel(x, y, rng)

        return image

    def average_render(
        self,
        seeds: Iterable[int],
        executor: Executor | None = None,
        callback: ProgressCallback | None = None,
    ) -> Image:
        """Render one pass per seed in parallel and average them.

        See diffuse_tracer.core.parallel.average_render().
        """
        return average_render(self, seeds, executor=executor, callback=callback)

    def __repr__(self) -> str:
        return (
            f"Renderer(width={self.width}, height={self.height}, "
            f"objects={len(self._scene)}, settings={self._settings})"
        )
