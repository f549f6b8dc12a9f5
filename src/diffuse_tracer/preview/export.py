"""Image export utilities for rendered images.

Rendered images are already gamma corrected and clamped, so export only
quantizes each channel to 8 bits: byte = round(clamp(c, 0, 1) * 255).

Supported formats:
    - PPM (binary P6, written directly)
    - PNG (8-bit RGB via Pillow)

The PPM layout is the ASCII header "P6 <width> <height> 255 " followed by
width * height * 3 bytes of row-major RGB data.

Example:
    >>> from diffuse_tracer.preview.export import save_ppm, save_png
    >>> image = renderer.average_render(seeds=range(8))
    >>> save_ppm(image, "output.ppm")
    >>> save_png(image, "output.png")
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Union

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

from diffuse_tracer.core.image import Image

logger = logging.getLogger(__name__)

ImageLike = Union[Image, npt.NDArray[np.floating]]


def as_pixel_array(image: ImageLike) -> npt.NDArray[np.float64]:
    """Get the (H, W, 3) float array behind an Image or array."""
    if isinstance(image, Image):
        return image.pixels
    return np.asarray(image, dtype=np.float64)


def image_to_uint8(image: ImageLike) -> npt.NDArray[np.uint8]:
    """Quantize an image to 8 bits per channel.

    Values are clamped to [0, 1] and rounded half up.

    Args:
        image: An Image or an (H, W, 3) float array.

    Returns:
        8-bit image array of shape (H, W, 3) with dtype uint8.
    """
    pixels = np.clip(as_pixel_array(image), 0.0, 1.0)
    return np.floor(pixels * 255.0 + 0.5).astype(np.uint8)


def to_ppm(image: Image) -> bytes:
    """Encode an image as binary PPM (P6) bytes."""
    header = f"P6 {image.width} {image.height} 255 ".encode("ascii")
    return header + image_to_uint8(image).tobytes()


def save_ppm(image: Image, filepath: str | Path) -> None:
    """Save an image as a binary PPM file.

    The file is created or truncated.

    Raises:
        OSError: If the file cannot be written.
    """
    data = to_ppm(image)
    with open(filepath, "wb") as f:
        f.write(data)
    logger.info("Wrote %dx%d PPM to %s", image.width, image.height, filepath)


def save_png(image: ImageLike, filepath: str | Path) -> None:
    """Save an image as an 8-bit RGB PNG file.

    Args:
        image: An Image or an (H, W, 3) float array in [0, 1].
        filepath: Output file path (should end in .png).
    """
    pil_image = PILImage.fromarray(image_to_uint8(image))
    pil_image.save(filepath)
    logger.info("Wrote PNG to %s", filepath)


def save_image(image: Image, filepath: str | Path) -> None:
    """Save an image, choosing the format from the file extension.

    ".png" is written with Pillow; every other extension is written as PPM.
    """
    if Path(filepath).suffix.lower() == ".png":
        save_png(image, filepath)
    else:
        save_ppm(image, filepath)


def compute_rmse(image_a: ImageLike, image_b: ImageLike) -> float:
    """Compute root mean squared error between two images.

    Args:
        image_a: First image.
        image_b: Second image (must have same shape as image_a).

    Returns:
        RMSE value (lower is more similar).

    Raises:
        ValueError: If image shapes don't match.
    """
    a = as_pixel_array(image_a)
    b = as_pixel_array(image_b)
    if a.shape != b.shape:
        raise ValueError(f"Image shapes must match: {a.shape} vs {b.shape}")

    diff = a - b
    return float(np.sqrt(np.mean(diff**2)))
