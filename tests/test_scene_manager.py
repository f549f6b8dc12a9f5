"""Unit tests for the SceneManager.

Tests cover:
- Material registration and lookup
- Sphere addition with materials
- Building immutable scenes and render settings
- Scene serialization (to_config, from_config, to_dict, from_dict)
- Preset scenes
"""

import json

import numpy as np
import pytest


@pytest.fixture
def fresh_scene():
    """Create a fresh SceneManager for each test."""
    from diffuse_tracer.scene.manager import SceneManager

    scene = SceneManager()
    yield scene
    scene.clear()


class TestMaterialRegistration:
    """Tests for material registration."""

    def test_add_lambertian_material(self, fresh_scene):
        """Test adding a Lambertian material."""
        mat_id = fresh_scene.add_lambertian_material(albedo=(0.8, 0.3, 0.3))
        assert mat_id == 0
        assert fresh_scene.get_material_count() == 1

    def test_material_ids_are_sequential(self, fresh_scene):
        """Test that material IDs count up from zero."""
        ids = [fresh_scene.add_lambertian_material((0.1 * i, 0.1, 0.1)) for i in range(4)]
        assert ids == [0, 1, 2, 3]

    def test_material_info(self, fresh_scene):
        """Test looking up material information."""
        from diffuse_tracer.scene.manager import MaterialType

        mat_id = fresh_scene.add_lambertian_material(albedo=(0.8, 0.3, 0.3))
        info = fresh_scene.get_material_info(mat_id)

        assert info.material_type == MaterialType.LAMBERTIAN
        assert info.params["albedo"] == pytest.approx((0.8, 0.3, 0.3))
        assert fresh_scene.get_material_info(99) is None

    def test_invalid_albedo(self, fresh_scene):
        """Test that invalid albedo is rejected at registration."""
        with pytest.raises(ValueError):
            fresh_scene.add_lambertian_material(albedo=(1.5, 0.0, 0.0))
        assert fresh_scene.get_material_count() == 0


class TestSpheres:
    """Tests for adding spheres."""

    def test_add_sphere(self, fresh_scene):
        """Test adding a sphere bound to a material."""
        mat_id = fresh_scene.add_lambertian_material(albedo=(0.5, 0.5, 0.5))
        index = fresh_scene.add_sphere(center=(0.0, 0.0, -1.0), radius=0.5, material_id=mat_id)
        assert index == 0
        assert fresh_scene.get_sphere_count() == 1
        assert fresh_scene.spheres[0].material_id == mat_id

    def test_add_sphere_invalid_material(self, fresh_scene):
        """Test that an unknown material ID is rejected."""
        with pytest.raises(ValueError, match="Invalid material_id"):
            fresh_scene.add_sphere(center=(0.0, 0.0, -1.0), radius=0.5, material_id=0)

    def test_add_sphere_invalid_radius(self, fresh_scene):
        """Test that a non-positive radius is rejected."""
        mat_id = fresh_scene.add_lambertian_material(albedo=(0.5, 0.5, 0.5))
        with pytest.raises(ValueError):
            fresh_scene.add_sphere(center=(0.0, 0.0, -1.0), radius=0.0, material_id=mat_id)

    def test_add_lambertian_sphere(self, fresh_scene):
        """Test the one-call convenience method."""
        sphere_index, material_id = fresh_scene.add_lambertian_sphere(
            center=(0.0, 0.0, -1.0), radius=0.5, albedo=(0.7, 0.3, 0.3)
        )
        assert (sphere_index, material_id) == (0, 0)
        assert fresh_scene.get_sphere_count() == 1
        assert fresh_scene.get_material_count() == 1

    def test_clear(self, fresh_scene):
        """Test that clear removes materials and spheres."""
        fresh_scene.add_lambertian_sphere(center=(0.0, 0.0, -1.0), radius=0.5, albedo=(0.7, 0.3, 0.3))
        fresh_scene.clear()
        assert fresh_scene.get_sphere_count() == 0
        assert fresh_scene.get_material_count() == 0


class TestBuild:
    """Tests for building scenes."""

    def test_build_scene(self, fresh_scene):
        """Test that build() produces objects bound to their materials."""
        red = fresh_scene.add_lambertian_material(albedo=(0.8, 0.1, 0.1))
        blue = fresh_scene.add_lambertian_material(albedo=(0.1, 0.1, 0.8))
        fresh_scene.add_sphere(center=(0.0, 0.0, -1.0), radius=0.5, material_id=blue)
        fresh_scene.add_sphere(center=(1.0, 0.0, -1.0), radius=0.5, material_id=red)
        fresh_scene.ambient_light_color = (0.5, 0.5, 0.5)

        scene, settings = fresh_scene.build()

        assert len(scene) == 2
        np.testing.assert_allclose(scene.objects[0].material.albedo, [0.1, 0.1, 0.8])
        np.testing.assert_allclose(scene.objects[1].surface.center, [1.0, 0.0, -1.0])
        np.testing.assert_allclose(scene.ambient_light_color, [0.5, 0.5, 0.5])
        assert settings.max_depth == fresh_scene.max_depth

    def test_build_validates_settings(self):
        """Test that invalid render settings fail at build time."""
        from diffuse_tracer.scene.manager import SceneManager

        manager = SceneManager(samples_per_pixel=0)
        with pytest.raises(ValueError):
            manager.build()


class TestSerialization:
    """Tests for configuration round trips."""

    def _populate(self, manager):
        manager.add_lambertian_sphere(center=(0.0, -100.5, -1.0), radius=100.0, albedo=(0.5, 0.5, 0.5))
        shared = manager.add_lambertian_material(albedo=(0.2, 0.4, 0.6))
        manager.add_sphere(center=(0.0, 0.0, -1.0), radius=0.5, material_id=shared)
        manager.add_sphere(center=(1.0, 0.0, -1.0), radius=0.25, material_id=shared)
        manager.ambient_light_color = (0.7, 0.8, 1.0)
        manager.max_depth = 6
        manager.samples_per_pixel = 4
        manager.min_distance = 1e-4

    def test_config_round_trip(self, fresh_scene):
        """Test to_config followed by from_config."""
        from diffuse_tracer.scene.manager import SceneManager

        self._populate(fresh_scene)
        config = fresh_scene.to_config()

        restored = SceneManager()
        restored.from_config(config)

        assert restored.to_config() == config

    def test_dict_round_trip_through_json(self, fresh_scene):
        """Test that to_dict output survives JSON and rebuilds the same scene."""
        from diffuse_tracer.scene.manager import SceneManager

        self._populate(fresh_scene)
        data = json.loads(json.dumps(fresh_scene.to_dict()))
        restored = SceneManager.from_dict_new(data)

        assert restored.to_dict() == fresh_scene.to_dict()
        scene, settings = restored.build()
        assert len(scene) == 3
        assert settings.max_depth == 6
        assert settings.samples_per_pixel == 4
        assert settings.min_distance == pytest.approx(1e-4)

    def test_from_dict_defaults(self):
        """Test that missing settings fall back to defaults."""
        from diffuse_tracer.core.renderer import RenderSettings
        from diffuse_tracer.scene.manager import SceneManager

        manager = SceneManager.from_dict_new({"materials": [], "spheres": []})
        _, settings = manager.build()
        assert settings == RenderSettings()

    def test_unknown_material_type(self, fresh_scene):
        """Test that unknown material types are rejected."""
        with pytest.raises(ValueError, match="Unknown material type"):
            fresh_scene.from_dict({"materials": [{"type": "metal", "albedo": [1, 1, 1]}]})

    def test_invalid_config_leaves_manager_unchanged(self, fresh_scene):
        """Test that a rejected config does not half-populate the manager."""
        fresh_scene.add_lambertian_sphere(center=(0.0, 0.0, -1.0), radius=0.5, albedo=(0.5, 0.5, 0.5))
        before = fresh_scene.to_dict()

        data = {
            "materials": [{"type": "lambertian", "albedo": [0.2, 0.2, 0.2]}],
            "spheres": [
                {"center": [0, 0, -2], "radius": 1.0, "material_id": 0},
                {"center": [0, 0, -3], "radius": 1.0, "material_id": 5},
            ],
            "max_depth": 3,
        }
        with pytest.raises(ValueError, match="Invalid material_id"):
            fresh_scene.from_dict(data)

        assert fresh_scene.to_dict() == before
        assert fresh_scene.get_sphere_count() == 1


class TestPresets:
    """Tests for the preset scenes."""

    def test_default_scene(self):
        """Test the default scene layout."""
        from diffuse_tracer.scene.presets import create_default_scene

        scene, camera, settings = create_default_scene(width=64, height=48, samples_per_pixel=3)

        assert len(scene) == 4
        assert (camera.width, camera.height) == (64, 48)
        assert settings.samples_per_pixel == 3

    def test_default_camera_sees_center_sphere(self):
        """Test that the center ray of the default camera hits a sphere."""
        from diffuse_tracer.scene.presets import create_default_scene

        scene, camera, _ = create_default_scene(width=33, height=33)
        hit = scene.nearest_hit(camera.back_project(16.0, 16.0))

        assert hit is not None
        record, _ = hit
        np.testing.assert_allclose(record.intersection_point, [0.0, 0.0, -0.5], atol=1e-9)
