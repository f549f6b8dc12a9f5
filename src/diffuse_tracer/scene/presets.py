"""Preset demo scenes.

The default scene is the classic "spheres on a ground sphere" setup: a huge
sphere acting as the floor and three spheres of different albedo in front
of the camera, under a pale blue sky.

Example:
    >>> from diffuse_tracer.scene.presets import create_default_scene
    >>> from diffuse_tracer.core.renderer import Renderer
    >>> scene, camera, settings = create_default_scene(width=320, height=240)
    >>> image = Renderer(scene, camera, settings).render(seed=0)
"""

from __future__ import annotations

import math

from diffuse_tracer.camera.pinhole import FovAxis, PinholeCamera
from diffuse_tracer.core.renderer import RenderSettings
from diffuse_tracer.scene.intersection import Scene
from diffuse_tracer.scene.manager import SceneManager

# Camera looks down -z with +y up
DEFAULT_FORWARD = (0.0, 0.0, -1.0)
DEFAULT_UP = (0.0, 1.0, 0.0)

DEFAULT_FOV_DEGREES = 90.0
DEFAULT_AMBIENT = (0.7, 0.8, 1.0)


def create_default_scene_manager(
    ambient_light_color=DEFAULT_AMBIENT,
    max_depth: int = RenderSettings.max_depth,
    samples_per_pixel: int = RenderSettings.samples_per_pixel,
) -> SceneManager:
    """Populate a SceneManager with the default spheres."""
    manager = SceneManager(
        ambient_light_color=ambient_light_color,
        max_depth=max_depth,
        samples_per_pixel=samples_per_pixel,
    )

    # Ground
    manager.add_lambertian_sphere(center=(0.0, -100.5, -1.0), radius=100.0, albedo=(0.5, 0.5, 0.5))

    manager.add_lambertian_sphere(center=(0.0, 0.0, -1.0), radius=0.5, albedo=(0.7, 0.3, 0.3))
    manager.add_lambertian_sphere(center=(-1.0, 0.0, -1.0), radius=0.5, albedo=(0.3, 0.7, 0.3))
    manager.add_lambertian_sphere(center=(1.0, 0.0, -1.0), radius=0.5, albedo=(0.3, 0.3, 0.7))

    return manager


def create_default_camera(
    width: int,
    height: int,
    fov_degrees: float = DEFAULT_FOV_DEGREES,
    fov_axis: FovAxis = "max",
) -> PinholeCamera:
    """Create the camera used with the default scene."""
    return PinholeCamera.create(
        forward=DEFAULT_FORWARD,
        up_hint=DEFAULT_UP,
        fov_radians=math.radians(fov_degrees),
        sensor_size_px=(width, height),
        fov_axis=fov_axis,
    )


def create_default_scene(
    width: int = 320,
    height: int = 240,
    fov_degrees: float = DEFAULT_FOV_DEGREES,
    max_depth: int = RenderSettings.max_depth,
    samples_per_pixel: int = RenderSettings.samples_per_pixel,
) -> tuple[Scene, PinholeCamera, RenderSettings]:
    """Create the default scene, its camera and render settings.

    Args:
        width: Image width in pixels.
        height: Image height in pixels.
        fov_degrees: Field of view across the larger image axis.
        max_depth: Maximum number of path segments per sample.
        samples_per_pixel: Jittered samples per pixel and pass.

    Returns:
        Tuple of (scene, camera, settings).
    """
    manager = create_default_scene_manager(
        max_depth=max_depth, samples_per_pixel=samples_per_pixel
    )
    scene, settings = manager.build()
    camera = create_default_camera(width, height, fov_degrees)
    return scene, camera, settings
