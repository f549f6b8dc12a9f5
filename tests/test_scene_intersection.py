"""Unit tests for scene-level intersection.

Tests cover:
- Nearest hit selection among several spheres
- Misses and empty scenes
- Minimum distance handling
"""

import numpy as np
import pytest

from diffuse_tracer.core.ray import Ray, vec3, zeros
from diffuse_tracer.geometry import Sphere
from diffuse_tracer.materials import LambertianMaterial
from diffuse_tracer.scene.intersection import Scene, SceneObject


def make_object(center, radius, albedo=(0.5, 0.5, 0.5)):
    return SceneObject(Sphere(center=center, radius=radius), LambertianMaterial(albedo=albedo))


class TestNearestHit:
    """Tests for Scene.nearest_hit."""

    def test_picks_closer_of_two_spheres(self):
        """Test that the closest sphere wins regardless of list order."""
        far = make_object((0.0, 0.0, -5.0), 1.0, albedo=(1.0, 0.0, 0.0))
        near = make_object((0.0, 0.0, -2.0), 0.5, albedo=(0.0, 1.0, 0.0))
        scene = Scene(objects=(far, near), ambient_light_color=(1.0, 1.0, 1.0))

        hit = scene.nearest_hit(Ray(origin=zeros(), direction=vec3(0.0, 0.0, -1.0)))

        assert hit is not None
        record, obj = hit
        assert obj is near
        np.testing.assert_allclose(record.intersection_point, [0.0, 0.0, -1.5])

    def test_miss_returns_none(self):
        """Test that a ray missing every object returns None."""
        scene = Scene(
            objects=[make_object((0.0, 0.0, -2.0), 0.5)],
            ambient_light_color=(1.0, 1.0, 1.0),
        )
        assert scene.nearest_hit(Ray(origin=zeros(), direction=vec3(0.0, 1.0, 0.0))) is None

    def test_empty_scene(self):
        """Test that an empty scene never reports a hit."""
        scene = Scene(objects=(), ambient_light_color=(0.2, 0.2, 0.2))
        assert len(scene) == 0
        assert scene.nearest_hit(Ray(origin=zeros(), direction=vec3(0.0, 0.0, -1.0))) is None

    def test_min_distance_is_respected(self):
        """Test that hits closer than min_distance are ignored."""
        scene = Scene(
            objects=(make_object((0.0, 0.0, -1.0), 0.5),),
            ambient_light_color=(1.0, 1.0, 1.0),
        )
        ray = Ray(origin=zeros(), direction=vec3(0.0, 0.0, -1.0))

        record, _ = scene.nearest_hit(ray, min_distance=0.75)
        assert record.t == pytest.approx(1.5)

    def test_scene_normalizes_inputs(self):
        """Test that objects become a tuple and the ambient color a vector."""
        scene = Scene(objects=[make_object((0.0, 0.0, -1.0), 0.5)], ambient_light_color=[1, 0, 0])
        assert isinstance(scene.objects, tuple)
        np.testing.assert_allclose(scene.ambient_light_color, [1.0, 0.0, 0.0])
