"""Monte Carlo path tracer for diffuse spheres.

This package renders scenes of Lambertian spheres under a constant ambient
light, with support for:
- Deterministic, per-seed render passes
- Averaging independent passes in parallel worker threads
- A Taichi-accelerated render pass for larger images
- PPM and PNG image output

Subpackages:
    core: Vector utilities, sampler, image buffer, integrator and renderers
    geometry: Sphere primitive and surface dispatch
    materials: Lambertian material and material dispatch
    scene: Scene container, scene manager and preset scenes
    camera: Pinhole camera with primary ray generation
    preview: Image export and Matplotlib display
"""

__version__ = "0.1.0"
