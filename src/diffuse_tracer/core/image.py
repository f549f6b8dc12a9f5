"""Image buffer for rendered color samples.

An Image holds one linear (or, after the renderer's output stage,
gamma-corrected) color per pixel in a NumPy array of shape (height, width, 3).
The flat ``data`` view is row-major, so pixel (x, y) lives at index
``y * width + x``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import numpy as np
import numpy.typing as npt

from diffuse_tracer.core.ray import Color


def gamma_correct(color: Color) -> Color:
    """Apply display gamma (square root, roughly gamma 2.0) to a color.

    Negative components are treated as zero.
    """
    return np.sqrt(np.maximum(color, 0.0))


@dataclass
class Image:
    """A width x height grid of RGB colors.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        pixels: Color array of shape (height, width, 3), dtype float64.
    """

    width: int
    height: int
    pixels: npt.NDArray[np.float64] | None = field(repr=False, default=None)

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(
                f"Image dimensions must be positive, got {self.width}x{self.height}"
            )
        if self.pixels is None:
            self.pixels = np.zeros((self.height, self.width, 3), dtype=np.float64)
        elif self.pixels.shape != (self.height, self.width, 3):
            raise ValueError(
                f"Pixel array shape {self.pixels.shape} does not match "
                f"{self.width}x{self.height}"
            )

    @classmethod
    def from_array(cls, array: npt.ArrayLike) -> Image:
        """Wrap an (H, W, 3) array as an Image (the data is copied)."""
        pixels = np.array(array, dtype=np.float64)
        if pixels.ndim != 3 or pixels.shape[2] != 3:
            raise ValueError(f"Expected an (H, W, 3) array, got shape {pixels.shape}")
        return cls(width=pixels.shape[1], height=pixels.shape[0], pixels=pixels)

    @property
    def data(self) -> npt.NDArray[np.float64]:
        """Row-major (width * height, 3) view of the pixels."""
        return self.pixels.reshape(-1, 3)

    def get_pixel(self, x: int, y: int) -> Color:
        """Get a copy of the color at pixel (x, y)."""
        return self.pixels[y, x].copy()

    def set_pixel(self, x: int, y: int, color: Color) -> None:
        """Set the color at pixel (x, y)."""
        self.pixels[y, x] = color

    def fill(self, color: Color) -> None:
        """Set every pixel to the same color."""
        self.pixels[:, :] = color

    def save(self, filepath: str | Path) -> None:
        """Save the image as a binary PPM file.

        Raises:
            OSError: If the file cannot be written.
        """
        from diffuse_tracer.preview.export import save_ppm

        save_ppm(self, filepath)
