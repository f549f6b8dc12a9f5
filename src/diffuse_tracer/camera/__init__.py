"""Camera module for primary ray generation.

Components:
    pinhole: Pinhole (perspective) camera at the world origin

Sensor coordinates are pixels: x to the right, y downward, with the center
of pixel (i, j) at (i, j).
"""

from .pinhole import FovAxis, PinholeCamera, get_camera_info

__all__ = [
    "PinholeCamera",
    "FovAxis",
    "get_camera_info",
]
