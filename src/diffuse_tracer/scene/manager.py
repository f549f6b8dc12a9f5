"""Scene manager for building scenes and their render configuration.

The SceneManager provides a high-level API for assembling a scene: materials
are registered first and receive integer material IDs, spheres then refer to
those IDs. build() freezes the current state into an immutable Scene plus the
RenderSettings that go with it.

The complete configuration surface of a render is
    {materials, spheres, ambient_light_color, max_depth, samples_per_pixel,
     min_distance}
and round-trips through SceneConfig / plain dictionaries, which is how scenes
are stored as JSON by the example script.

Example:
    >>> from diffuse_tracer.scene.manager import SceneManager
    >>> scene = SceneManager(ambient_light_color=(0.9, 0.9, 1.0))
    >>> red = scene.add_lambertian_material(albedo=(0.8, 0.3, 0.3))
    >>> scene.add_sphere(center=(0, 0, -1), radius=0.5, material_id=red)
    0
    >>> world, settings = scene.build()
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from diffuse_tracer.core.ray import as_vec3
from diffuse_tracer.core.renderer import RenderSettings
from diffuse_tracer.geometry import Sphere
from diffuse_tracer.materials import LambertianMaterial, Material
from diffuse_tracer.scene.intersection import Scene, SceneObject

Vec3Tuple = tuple[float, float, float]

# Default environment radiance
DEFAULT_AMBIENT_LIGHT = (1.0, 1.0, 1.0)


class MaterialType(str, Enum):
    """Enumeration of supported material types (the serialized ``type`` key)."""

    LAMBERTIAN = "lambertian"


@dataclass
class MaterialInfo:
    """Information about a registered material.

    Attributes:
        material_id: The material ID.
        material_type: The type of material.
        params: The material parameters as provided during creation.
    """

    material_id: int
    material_type: MaterialType
    params: dict[str, Any]


@dataclass
class SphereInfo:
    """Information about a sphere in the scene.

    Attributes:
        sphere_index: The position of the sphere in the object list.
        center: The center of the sphere.
        radius: The radius of the sphere.
        material_id: The material ID assigned to the sphere.
    """

    sphere_index: int
    center: Vec3Tuple
    radius: float
    material_id: int


@dataclass
class SceneConfig:
    """Serializable configuration of a scene and its render settings.

    Attributes:
        materials: List of material configurations.
        spheres: List of sphere configurations.
        ambient_light_color: Radiance returned by escaping rays.
        max_depth: Maximum number of path segments per sample.
        samples_per_pixel: Jittered samples per pixel and pass.
        min_distance: Self-intersection epsilon.
    """

    materials: list[dict[str, Any]] = field(default_factory=list)
    spheres: list[dict[str, Any]] = field(default_factory=list)
    ambient_light_color: Vec3Tuple = DEFAULT_AMBIENT_LIGHT
    max_depth: int = RenderSettings.max_depth
    samples_per_pixel: int = RenderSettings.samples_per_pixel
    min_distance: float = RenderSettings.min_distance


def _as_tuple(value) -> Vec3Tuple:
    v = as_vec3(value)
    return (float(v[0]), float(v[1]), float(v[2]))


class SceneManager:
    """Builds scenes from materials and spheres.

    Attributes:
        materials: List of MaterialInfo for all registered materials.
        spheres: List of SphereInfo for all spheres in the scene.
        ambient_light_color: Radiance returned by escaping rays.
        max_depth: Maximum number of path segments per sample.
        samples_per_pixel: Jittered samples per pixel and pass.
        min_distance: Self-intersection epsilon.
    """

    def __init__(
        self,
        ambient_light_color=DEFAULT_AMBIENT_LIGHT,
        max_depth: int = RenderSettings.max_depth,
        samples_per_pixel: int = RenderSettings.samples_per_pixel,
        min_distance: float = RenderSettings.min_distance,
    ) -> None:
        """Initialize an empty scene."""
        self.materials: list[MaterialInfo] = []
        self.spheres: list[SphereInfo] = []
        self._material_objects: list[Material] = []
        self._sphere_objects: list[Sphere] = []
        self.ambient_light_color = _as_tuple(ambient_light_color)
        self.max_depth = max_depth
        self.samples_per_pixel = samples_per_pixel
        self.min_distance = min_distance

    def clear(self) -> None:
        """Remove all materials and spheres (settings are kept)."""
        self.materials.clear()
        self.spheres.clear()
        self._material_objects.clear()
        self._sphere_objects.clear()

    # =========================================================================
    # Material Management
    # =========================================================================

    def add_lambertian_material(self, albedo) -> int:
        """Add a Lambertian (diffuse) material to the scene.

        Args:
            albedo: The diffuse reflectance color as (R, G, B).
                Each component must be in [0, 1] for energy conservation.

        Returns:
            The material ID for this material.

        Raises:
            ValueError: If any albedo component is outside [0, 1].
        """
        material = LambertianMaterial(albedo=albedo)
        material_id = len(self._material_objects)
        self._material_objects.append(material)
        self.materials.append(
            MaterialInfo(
                material_id=material_id,
                material_type=MaterialType.LAMBERTIAN,
                params={"albedo": _as_tuple(albedo)},
            )
        )
        return material_id

    def get_material_count(self) -> int:
        """Get the number of registered materials."""
        return len(self._material_objects)

    def get_material_info(self, material_id: int) -> MaterialInfo | None:
        """Get information about a material, or None for an unknown ID."""
        if 0 <= material_id < len(self.materials):
            return self.materials[material_id]
        return None

    # =========================================================================
    # Primitive Management
    # =========================================================================

    def add_sphere(self, center, radius: float, material_id: int) -> int:
        """Add a sphere bound to a registered material.

        Args:
            center: The center of the sphere as (x, y, z).
            radius: The radius of the sphere (must be positive).
            material_id: ID returned by one of the add_*_material methods.

        Returns:
            The index of the sphere in the object list.

        Raises:
            ValueError: If material_id is unknown or the radius is invalid.
        """
        if not 0 <= material_id < len(self._material_objects):
            raise ValueError(f"Invalid material_id: {material_id}")

        sphere = Sphere(center=center, radius=radius)
        sphere_index = len(self._sphere_objects)
        self._sphere_objects.append(sphere)
        self.spheres.append(
            SphereInfo(
                sphere_index=sphere_index,
                center=_as_tuple(center),
                radius=float(radius),
                material_id=material_id,
            )
        )
        return sphere_index

    def add_lambertian_sphere(self, center, radius: float, albedo) -> tuple[int, int]:
        """Add a sphere with a new Lambertian material in one call.

        Returns:
            Tuple of (sphere_index, material_id).
        """
        material_id = self.add_lambertian_material(albedo)
        sphere_index = self.add_sphere(center, radius, material_id)
        return sphere_index, material_id

    def get_sphere_count(self) -> int:
        """Get the number of spheres in the scene."""
        return len(self._sphere_objects)

    # =========================================================================
    # Building
    # =========================================================================

    def build_scene(self) -> Scene:
        """Freeze the objects and ambient light into an immutable Scene."""
        objects = tuple(
            SceneObject(surface=sphere, material=self._material_objects[info.material_id])
            for sphere, info in zip(self._sphere_objects, self.spheres)
        )
        return Scene(objects=objects, ambient_light_color=self.ambient_light_color)

    def build_settings(self) -> RenderSettings:
        """Create the RenderSettings for this scene.

        Raises:
            ValueError: If a setting is out of range.
        """
        return RenderSettings(
            max_depth=self.max_depth,
            samples_per_pixel=self.samples_per_pixel,
            min_distance=self.min_distance,
        )

    def build(self) -> tuple[Scene, RenderSettings]:
        """Build the scene and its render settings."""
        return self.build_scene(), self.build_settings()

    # =========================================================================
    # Serialization
    # =========================================================================

    def to_config(self) -> SceneConfig:
        """Export the scene to a SceneConfig."""
        materials = [
            {"type": info.material_type.value, **info.params} for info in self.materials
        ]
        spheres = [
            {"center": info.center, "radius": info.radius, "material_id": info.material_id}
            for info in self.spheres
        ]
        return SceneConfig(
            materials=materials,
            spheres=spheres,
            ambient_light_color=self.ambient_light_color,
            max_depth=self.max_depth,
            samples_per_pixel=self.samples_per_pixel,
            min_distance=self.min_distance,
        )

    def from_config(self, config: SceneConfig) -> None:
        """Replace the scene contents with a SceneConfig.

        The config is loaded into a fresh manager first, so an invalid entry
        leaves this manager unchanged.

        Raises:
            ValueError: If a material type is unknown or an entry is invalid.
        """
        staged = SceneManager(
            ambient_light_color=config.ambient_light_color,
            max_depth=int(config.max_depth),
            samples_per_pixel=int(config.samples_per_pixel),
            min_distance=float(config.min_distance),
        )

        for mat in config.materials:
            mat_type = mat.get("type")
            if mat_type == MaterialType.LAMBERTIAN.value:
                staged.add_lambertian_material(mat["albedo"])
            else:
                raise ValueError(f"Unknown material type: {mat_type}")

        for sphere in config.spheres:
            staged.add_sphere(sphere["center"], sphere["radius"], int(sphere["material_id"]))

        self.materials = staged.materials
        self.spheres = staged.spheres
        self._material_objects = staged._material_objects
        self._sphere_objects = staged._sphere_objects
        self.ambient_light_color = staged.ambient_light_color
        self.max_depth = staged.max_depth
        self.samples_per_pixel = staged.samples_per_pixel
        self.min_distance = staged.min_distance

    def to_dict(self) -> dict[str, Any]:
        """Export the scene to a plain dictionary (JSON-compatible)."""
        config = self.to_config()
        return {
            "materials": [
                {key: list(value) if isinstance(value, tuple) else value for key, value in m.items()}
                for m in config.materials
            ],
            "spheres": [
                {**s, "center": list(s["center"])} for s in config.spheres
            ],
            "ambient_light_color": list(config.ambient_light_color),
            "max_depth": config.max_depth,
            "samples_per_pixel": config.samples_per_pixel,
            "min_distance": config.min_distance,
        }

    def from_dict(self, data: dict[str, Any]) -> None:
        """Replace the scene contents with a dictionary from to_dict().

        Missing settings fall back to the defaults.
        """
        defaults = SceneConfig()
        config = SceneConfig(
            materials=list(data.get("materials", [])),
            spheres=list(data.get("spheres", [])),
            ambient_light_color=tuple(
                data.get("ambient_light_color", defaults.ambient_light_color)
            ),
            max_depth=data.get("max_depth", defaults.max_depth),
            samples_per_pixel=data.get("samples_per_pixel", defaults.samples_per_pixel),
            min_distance=data.get("min_distance", defaults.min_distance),
        )
        self.from_config(config)

    @classmethod
    def from_dict_new(cls, data: dict[str, Any]) -> SceneManager:
        """Create a new SceneManager from a dictionary."""
        manager = cls()
        manager.from_dict(data)
        return manager

    def __repr__(self) -> str:
        return (
            f"SceneManager(materials={len(self.materials)}, spheres={len(self.spheres)}, "
            f"ambient_light_color={self.ambient_light_color})"
        )
