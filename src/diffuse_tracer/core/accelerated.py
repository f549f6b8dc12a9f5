"""Taichi-accelerated render pass.

TaichiRenderer renders the same image model as diffuse_tracer.core.renderer
in one Taichi kernel, with every pixel processed in parallel:

    - identical per-pixel stream seeding (Wang hash of seed, x, y)
    - identical xorshift32 draws in identical order (jitter x, jitter y,
      then three draws per unit-ball rejection attempt)
    - loop-form integrator with the same depth cutoff and ambient miss color

Geometry runs in float32, so images match the NumPy renderer statistically
rather than bit for bit. The output for a given seed is deterministic.

Scene and camera data are packed into NumPy arrays and passed to the kernel
as ndarrays; no global Taichi fields are used. The Taichi runtime is
process-wide, so kernel launches are serialized with a lock and the renderer
can be handed to average_render() like the NumPy one.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from diffuse_tracer.core.accelerated import TaichiRenderer
    >>> renderer = TaichiRenderer(scene, camera, settings)
    >>> image = renderer.render(seed=1)
"""

import logging
import threading
from collections.abc import Iterable

import numpy as np
import taichi as ti
import taichi.math as tm

from diffuse_tracer.camera.pinhole import PinholeCamera
from diffuse_tracer.core.image import Image
from diffuse_tracer.core.parallel import Executor, ProgressCallback, average_render
from diffuse_tracer.core.renderer import RenderSettings
from diffuse_tracer.core.sampler import (
    FIXED_POINT_PERTURBATION,
    MASK32,
    MAX_REJECTION_ATTEMPTS,
    UNIFORM_SCALE,
)
from diffuse_tracer.geometry import Sphere
from diffuse_tracer.materials import LambertianMaterial
from diffuse_tracer.scene.intersection import Scene

logger = logging.getLogger(__name__)

# Type alias for 3D vectors
vec3 = tm.vec3

# Kernel launches share one process-wide Taichi runtime
_LAUNCH_LOCK = threading.Lock()


# =============================================================================
# Random Number Generation
# =============================================================================


@ti.func
def _hash32(value: ti.u32) -> ti.u32:
    """Thomas Wang's integer hash on u32 (wrapping arithmetic)."""
    x = value
    x = (x ^ ti.u32(61)) ^ (x >> ti.u32(16))
    x = x * ti.u32(9)
    x = x ^ (x >> ti.u32(4))
    x = x * ti.u32(0x27D4EB2D)
    x = x ^ (x >> ti.u32(15))
    return x


@ti.func
def _derive_seed(seed: ti.u32, x: ti.u32, y: ti.u32) -> ti.u32:
    h = _hash32(seed)
    h = _hash32(h ^ x)
    h = _hash32(h ^ y)
    return h


@ti.func
def _xorshift32(state: ti.u32) -> ti.u32:
    x = state
    x = x ^ (x << ti.u32(13))
    x = x ^ (x >> ti.u32(17))
    x = x ^ (x << ti.u32(5))
    if x == state:
        x = x ^ ti.u32(FIXED_POINT_PERTURBATION)
    return x


@ti.func
def _uniform(state: ti.u32):
    """Draw a uniform float in [0, 1).

    Returns:
        A tuple of (value, new_state).
    """
    new_state = _xorshift32(state)
    value = ti.cast(new_state >> ti.u32(8), ti.f32) * UNIFORM_SCALE
    return value, new_state


@ti.func
def _unit_ball_point(state: ti.u32):
    """Rejection-sample a point inside the unit ball.

    Returns:
        A tuple of (point, new_state). The point is the origin if every
        attempt was rejected.
    """
    p = vec3(0.0, 0.0, 0.0)
    s = state
    found = 0
    for _ in range(MAX_REJECTION_ATTEMPTS):
        if found == 0:
            u0, s = _uniform(s)
            u1, s = _uniform(s)
            u2, s = _uniform(s)
            candidate = vec3(2.0 * u0 - 1.0, 2.0 * u1 - 1.0, 2.0 * u2 - 1.0)
            if tm.dot(candidate, candidate) < 1.0:
                p = candidate
                found = 1
    return p, s


# =============================================================================
# Geometry
# =============================================================================


@ti.func
def _safe_normalize(v: vec3) -> vec3:
    """Normalize v, mapping the zero vector to itself."""
    n = tm.length(v)
    result = vec3(0.0, 0.0, 0.0)
    if n > 0.0:
        result = v / n
    return result


@ti.func
def _hit_sphere(origin: vec3, direction: vec3, center: vec3, radius: ti.f32, min_distance: ti.f32):
    """Ray-sphere intersection, half-b form.

    Returns:
        A tuple of (hit, t) where hit is 1 for a valid intersection.
    """
    oc = origin - center
    half_b = tm.dot(direction, oc)
    c = tm.dot(oc, oc) - radius * radius
    discriminant = half_b * half_b - c

    did_hit = 0
    t = 0.0
    if discriminant >= 0.0:
        sqrt_d = ti.sqrt(discriminant)
        t1 = -half_b - sqrt_d
        t2 = -half_b + sqrt_d
        if t1 > min_distance:
            t = t1
            did_hit = 1
        elif t2 > min_distance:
            t = t2
            did_hit = 1
    return did_hit, t


# =============================================================================
# Rendering Kernel
# =============================================================================


@ti.kernel
def _render_pass_kernel(
    out: ti.types.ndarray(dtype=ti.f32, ndim=3),
    centers: ti.types.ndarray(dtype=ti.f32, ndim=2),
    radii: ti.types.ndarray(dtype=ti.f32, ndim=1),
    albedos: ti.types.ndarray(dtype=ti.f32, ndim=2),
    num_spheres: ti.i32,
    camera: ti.types.ndarray(dtype=ti.f32, ndim=2),
    ambient: ti.types.ndarray(dtype=ti.f32, ndim=1),
    seed: ti.u32,
    width: ti.i32,
    height: ti.i32,
    samples_per_pixel: ti.i32,
    max_depth: ti.i32,
    min_distance: ti.f32,
):
    """Render one pass into ``out`` (height, width, 3).

    ``camera`` rows are forward, right, up and (focal_length, px, py).
    """
    for y, x in ti.ndrange(height, width):
        forward = vec3(camera[0, 0], camera[0, 1], camera[0, 2])
        right = vec3(camera[1, 0], camera[1, 1], camera[1, 2])
        up = vec3(camera[2, 0], camera[2, 1], camera[2, 2])
        focal_length = camera[3, 0]
        principal_x = camera[3, 1]
        principal_y = camera[3, 2]
        ambient_color = vec3(ambient[0], ambient[1], ambient[2])

        state = _derive_seed(seed, ti.cast(x, ti.u32), ti.cast(y, ti.u32))
        color = vec3(0.0, 0.0, 0.0)

        for _sample in range(samples_per_pixel):
            # Jittered primary ray
            jitter_x, state = _uniform(state)
            jitter_y, state = _uniform(state)
            x_ndc = ti.cast(x, ti.f32) + (jitter_x - 0.5) - principal_x
            y_ndc = -(ti.cast(y, ti.f32) + (jitter_y - 0.5) - principal_y)
            origin = vec3(0.0, 0.0, 0.0)
            direction = _safe_normalize(forward * focal_length + right * x_ndc + up * y_ndc)

            throughput = vec3(1.0, 1.0, 1.0)
            radiance = vec3(0.0, 0.0, 0.0)
            active = 1

            for _depth in range(max_depth):
                if active == 1:
                    # Nearest hit by squared distance from the ray origin
                    best = -1
                    best_distance = 0.0
                    best_point = vec3(0.0, 0.0, 0.0)
                    for i in range(num_spheres):
                        center = vec3(centers[i, 0], centers[i, 1], centers[i, 2])
                        hit, t = _hit_sphere(origin, direction, center, radii[i], min_distance)
                        if hit == 1:
                            point = origin + t * direction
                            offset = point - origin
                            distance = tm.dot(offset, offset)
                            if best == -1 or distance < best_distance:
                                best = i
                                best_distance = distance
                                best_point = point

                    if best == -1:
                        radiance = throughput * ambient_color
                        active = 0
                    else:
                        center = vec3(centers[best, 0], centers[best, 1], centers[best, 2])
                        normal = _safe_normalize(best_point - center)
                        if tm.dot(normal, direction) > 0.0:
                            normal = -normal

                        ball, state = _unit_ball_point(state)
                        scattered = _safe_normalize(normal + ball)
                        if tm.dot(scattered, scattered) == 0.0:
                            scattered = normal

                        albedo = vec3(albedos[best, 0], albedos[best, 1], albedos[best, 2])
                        throughput = throughput * albedo
                        origin = best_point
                        direction = scattered

            color += radiance

        mean = color / ti.cast(samples_per_pixel, ti.f32)
        display = tm.clamp(ti.sqrt(ti.max(mean, 0.0)), 0.0, 1.0)
        for c in ti.static(range(3)):
            out[y, x, c] = display[c]


# =============================================================================
# Scene Packing
# =============================================================================


def pack_scene(scene: Scene) -> tuple[np.ndarray, np.ndarray, np.ndarray, int]:
    """Pack a scene into float32 arrays for the kernel.

    Arrays always hold at least one row so an empty scene still produces
    valid kernel arguments; the returned count is the real object count.

    Returns:
        A tuple of (centers (N, 3), radii (N,), albedos (N, 3), count).

    Raises:
        TypeError: If the scene holds a surface or material this backend
            does not support.
    """
    count = len(scene.objects)
    rows = max(count, 1)
    centers = np.zeros((rows, 3), dtype=np.float32)
    radii = np.ones(rows, dtype=np.float32)
    albedos = np.zeros((rows, 3), dtype=np.float32)

    for i, obj in enumerate(scene.objects):
        if not isinstance(obj.surface, Sphere):
            raise TypeError(f"Unsupported surface type: {type(obj.surface).__name__}")
        if not isinstance(obj.material, LambertianMaterial):
            raise TypeError(f"Unsupported material type: {type(obj.material).__name__}")
        centers[i] = obj.surface.center
        radii[i] = obj.surface.radius
        albedos[i] = obj.material.albedo

    return centers, radii, albedos, count


def pack_camera(camera: PinholeCamera) -> np.ndarray:
    """Pack the camera basis and intrinsics into a (4, 3) float32 array."""
    packed = np.zeros((4, 3), dtype=np.float32)
    packed[0] = camera.forward
    packed[1] = camera.right
    packed[2] = camera.up
    packed[3] = (
        camera.focal_length,
        camera.principal_point[0],
        camera.principal_point[1],
    )
    return packed


class TaichiRenderer:
    """Renders passes with the Taichi kernel.

    Taichi must be initialized (ti.init) before the first render.

    Attributes:
        scene: The scene to render.
        camera: The camera; its sensor size is the image size.
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

        self._centers, self._radii, self._albedos, self._num_spheres = pack_scene(scene)
        self._camera_data = pack_camera(camera)
        self._ambient = np.asarray(scene.ambient_light_color, dtype=np.float32).copy()

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

    def render(self, seed: int) -> Image:
        """Render one full pass on the Taichi backend.

        Args:
            seed: Pass seed; the same seed always yields the same image.

        Returns:
            A new image of the camera's sensor size.
        """
        out = np.zeros((self.height, self.width, 3), dtype=np.float32)
        settings = self._settings

        logger.debug("Launching Taichi pass seed=%d (%dx%d)", seed, self.width, self.height)
        with _LAUNCH_LOCK:
            _render_pass_kernel(
                out,
                self._centers,
                self._radii,
                self._albedos,
                self._num_spheres,
                self._camera_data,
                self._ambient,
                seed & MASK32,
                self.width,
                self.height,
                settings.samples_per_pixel,
                settings.max_depth,
                settings.min_distance,
            )

        return Image.from_array(out)

    def average_render(
        self,
        seeds: Iterable[int],
        executor: Executor | None = None,
        callback: ProgressCallback | None = None,
    ) -> Image:
        """Render one pass per seed and average them.

        See diffuse_tracer.core.parallel.average_render().
        """
        return average_render(self, seeds, executor=executor, callback=callback)

    def __repr__(self) -> str:
        return (
            f"TaichiRenderer(width={self.width}, height={self.height}, "
            f"objects={self._num_spheres}, settings={self._settings})"
        )
