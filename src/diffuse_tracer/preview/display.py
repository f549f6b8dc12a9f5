"""Matplotlib-based preview display for rendered images.

Matplotlib is imported inside the functions so that rendering and export
work on machines without a display backend.

Example:
    >>> from diffuse_tracer.preview.display import show_image
    >>> image = renderer.average_render(seeds=range(8))
    >>> show_image(image, title="8 passes")
"""

from __future__ import annotations

import numpy as np

from diffuse_tracer.core.image import Image
from diffuse_tracer.preview.export import ImageLike, as_pixel_array, compute_rmse


def show_image(
    image: Image,
    *,
    title: str | None = None,
    figsize: tuple[float, float] = (8, 6),
    block: bool = True,
) -> None:
    """Display a rendered image as a Matplotlib figure.

    Args:
        image: The image to display (gamma corrected, values in [0, 1]).
        title: Custom title (default shows the image size).
        figsize: Figure size in inches (width, height).
        block: Whether to block execution until figure is closed.
    """
    import matplotlib.pyplot as plt

    fig, ax = plt.subplots(1, 1, figsize=figsize)
    ax.imshow(np.clip(image.pixels, 0.0, 1.0))
    ax.axis("off")
    ax.set_title(title if title is not None else f"Render {image.width}x{image.height}")

    plt.tight_layout()
    plt.show(block=block)


def show_comparison(
    image_a: ImageLike,
    image_b: ImageLike,
    *,
    labels: tuple[str, str] = ("A", "B"),
    diff_scale: float = 10.0,
    figsize: tuple[float, float] = (16, 6),
    block: bool = True,
) -> float:
    """Display side-by-side comparison of two images with difference view.

    Useful for comparing a single pass against an averaged render, or the
    NumPy renderer against the Taichi one.

    Args:
        image_a: First image.
        image_b: Second image.
        labels: Labels for the two images.
        diff_scale: Scale factor for difference amplification.
        figsize: Figure size in inches.
        block: Whether to block execution until figure is closed.

    Returns:
        RMSE between the two images.

    Raises:
        ValueError: If image shapes don't match.
    """
    import matplotlib.pyplot as plt

    rmse = compute_rmse(image_a, image_b)

    display_a = np.clip(as_pixel_array(image_a), 0.0, 1.0)
    display_b = np.clip(as_pixel_array(image_b), 0.0, 1.0)
    diff_amplified = np.clip(np.abs(display_a - display_b) * diff_scale, 0.0, 1.0)

    fig, axes = plt.subplots(1, 3, figsize=figsize)

    axes[0].imshow(display_a)
    axes[0].set_title(labels[0])
    axes[0].axis("off")

    axes[1].imshow(display_b)
    axes[1].set_title(labels[1])
    axes[1].axis("off")

    axes[2].imshow(diff_amplified)
    axes[2].set_title(f"Difference ({diff_scale}x) - RMSE: {rmse:.6f}")
    axes[2].axis("off")

    plt.tight_layout()
    plt.show(block=block)

    return rmse
