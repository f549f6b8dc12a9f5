"""Pytest configuration for diffuse tracer tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls which can cause
    segmentation faults due to Taichi runtime conflicts.
    """
    ti.init(arch=ti.cpu, random_seed=42)
    yield


@pytest.fixture
def gray_sphere_scene():
    """A single gray sphere one unit in front of the camera under white light."""
    from diffuse_tracer.core.ray import vec3
    from diffuse_tracer.geometry import Sphere
    from diffuse_tracer.materials import LambertianMaterial
    from diffuse_tracer.scene.intersection import Scene, SceneObject

    return Scene(
        objects=(
            SceneObject(
                Sphere(center=vec3(0.0, 0.0, -1.0), radius=0.5),
                LambertianMaterial(albedo=vec3(0.5, 0.5, 0.5)),
            ),
        ),
        ambient_light_color=vec3(1.0, 1.0, 1.0),
    )


@pytest.fixture
def small_default_scene():
    """The default preset scene at a tiny resolution for fast renders."""
    from diffuse_tracer.scene.presets import create_default_scene

    return create_default_scene(width=8, height=6, max_depth=4, samples_per_pixel=2)
