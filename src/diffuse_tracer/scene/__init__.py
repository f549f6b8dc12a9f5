"""Scene module for scene representation and configuration.

Components:
    intersection: Immutable Scene container and nearest-hit query
    manager: SceneManager building scenes and render settings
    presets: Ready-made demo scenes

Scenes are immutable once built and are shared read-only by render workers.
"""

from .intersection import MIN_DISTANCE, Scene, SceneObject

# Note: manager and presets depend on core.renderer, which itself imports
# scene.intersection, so they are not imported here. Use e.g.
#   from diffuse_tracer.scene.manager import SceneManager

__all__ = [
    "Scene",
    "SceneObject",
    "MIN_DISTANCE",
]
