"""Unit tests for the Lambertian material.

Tests cover:
- Albedo validation
- Scatter directions lie in the normal's hemisphere and are normalized
- Attenuation equals albedo
- Material dispatch
"""

import numpy as np
import pytest

from diffuse_tracer.core.ray import dot, length, normalize, vec3
from diffuse_tracer.core.sampler import XorShiftSampler


class TestLambertianMaterial:
    """Tests for the LambertianMaterial dataclass."""

    def test_valid_albedo(self):
        """Test that albedo components in [0, 1] are accepted."""
        from diffuse_tracer.materials.lambertian import LambertianMaterial

        material = LambertianMaterial(albedo=(0.0, 0.5, 1.0))
        np.testing.assert_allclose(material.albedo, [0.0, 0.5, 1.0])

    @pytest.mark.parametrize("albedo", [(1.1, 0.5, 0.5), (0.5, -0.1, 0.5)])
    def test_invalid_albedo(self, albedo):
        """Test that albedo outside [0, 1] is rejected."""
        from diffuse_tracer.materials.lambertian import LambertianMaterial

        with pytest.raises(ValueError, match="energy conservation"):
            LambertianMaterial(albedo=albedo)


class TestLambertianScatter:
    """Tests for Lambertian scattering."""

    def test_scatter_in_normal_hemisphere(self):
        """Test that scattered directions never point into the surface."""
        from diffuse_tracer.materials.lambertian import scatter_lambertian

        rng = XorShiftSampler(11)
        normal = normalize(vec3(1.0, 2.0, -0.5))
        for _ in range(1000):
            direction = scatter_lambertian(normal, rng)
            assert dot(direction, normal) > 0.0
            assert length(direction) == pytest.approx(1.0)

    def test_scatter_mean_follows_normal(self):
        """Test that the average scatter direction is aligned with the normal."""
        from diffuse_tracer.materials.lambertian import scatter_lambertian

        rng = XorShiftSampler(3)
        normal = vec3(0.0, 1.0, 0.0)
        mean = np.mean([scatter_lambertian(normal, rng) for _ in range(2000)], axis=0)
        assert mean[1] > 0.5
        assert abs(mean[0]) < 0.05
        assert abs(mean[2]) < 0.05

    def test_attenuation_is_albedo(self):
        """Test that the attenuation of a Lambertian surface is its albedo."""
        from diffuse_tracer.materials.lambertian import LambertianMaterial, attenuation_lambertian

        material = LambertianMaterial(albedo=(0.2, 0.4, 0.6))
        np.testing.assert_allclose(attenuation_lambertian(material), [0.2, 0.4, 0.6])


class TestMaterialDispatch:
    """Tests for scatter_direction and attenuation dispatch."""

    def test_dispatch_matches_lambertian(self):
        """Test that dispatch gives the same result as the direct call."""
        from diffuse_tracer.materials import LambertianMaterial, attenuation, scatter_direction
        from diffuse_tracer.materials.lambertian import scatter_lambertian

        material = LambertianMaterial(albedo=(0.5, 0.5, 0.5))
        normal = vec3(0.0, 0.0, 1.0)
        np.testing.assert_array_equal(
            scatter_direction(normal, material, XorShiftSampler(8)),
            scatter_lambertian(normal, XorShiftSampler(8)),
        )
        np.testing.assert_allclose(attenuation(material), [0.5, 0.5, 0.5])

    def test_unknown_material(self):
        """Test that unknown material types raise TypeError."""
        from diffuse_tracer.materials import attenuation, scatter_direction

        with pytest.raises(TypeError):
            scatter_direction(vec3(0.0, 0.0, 1.0), object(), XorShiftSampler(1))
        with pytest.raises(TypeError):
            attenuation(object())
