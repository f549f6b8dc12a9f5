"""Preview module for output and visualization.

Components:
    export: PPM and PNG image export
    display: Matplotlib-based preview display

Example:
    >>> from diffuse_tracer.preview import save_ppm, show_image
    >>> save_ppm(image, "output.ppm")
    >>> show_image(image)
"""

from diffuse_tracer.preview.display import show_comparison, show_image
from diffuse_tracer.preview.export import (
    compute_rmse,
    image_to_uint8,
    save_image,
    save_png,
    save_ppm,
    to_ppm,
)

__all__ = [
    # Display functions
    "show_image",
    "show_comparison",
    # Export functions
    "to_ppm",
    "save_ppm",
    "save_png",
    "save_image",
    "image_to_uint8",
    "compute_rmse",
]
