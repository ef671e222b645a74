"""Drawable output surfaces.

The render loop writes through a minimal surface interface:

    surface.width, surface.height
    surface.set_pixel(x, y, r, g, b, a)     # integer channels in [0, 255]

Pixels whose primary ray escapes the scene are never written, so they keep
whatever the surface held before the render. ImageSurface starts filled with
a configurable color, typically the render's background color.

Pixel coordinates follow the camera: x = 0 is the left column and y = 0 the
bottom row. to_image() flips rows so the saved picture is upright.

Example:
    >>> from whitted.preview.surface import ImageSurface
    >>> surface = ImageSurface(4, 3, fill=(0.0, 0.0, 0.0))
    >>> surface.set_pixel(1, 2, 255, 128, 0, 255)
    >>> surface.get_pixel(1, 2)
    (255, 128, 0, 255)
"""

from __future__ import annotations

from typing import Protocol

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage


class Surface(Protocol):
    """Anything the render loop can draw into."""

    @property
    def width(self) -> int: ...

    @property
    def height(self) -> int: ...

    def set_pixel(self, x: int, y: int, r: int, g: int, b: int, a: int) -> None: ...


class ImageSurface:
    """In-memory RGBA surface backed by a NumPy array.

    Attributes:
        width: Surface width in pixels.
        height: Surface height in pixels.
    """

    def __init__(
        self,
        width: int,
        height: int,
        *,
        fill: tuple[float, float, float] = (0.0, 0.0, 0.0),
    ) -> None:
        """Create a surface filled with an opaque color.

        Args:
            width: Surface width in pixels.
            height: Surface height in pixels.
            fill: Initial RGB color with components in [0, 1].

        Raises:
            ValueError: If width or height is not positive.
        """
        if width <= 0 or height <= 0:
            raise ValueError(f"Surface dimensions must be positive, got {width}x{height}")

        self._width = width
        self._height = height
        self._pixels: npt.NDArray[np.uint8] = np.zeros((height, width, 4), dtype=np.uint8)
        self.clear(fill)

    @property
    def width(self) -> int:
        """Get the surface width."""
        return self._width

    @property
    def height(self) -> int:
        """Get the surface height."""
        return self._height

    def clear(self, fill: tuple[float, float, float]) -> None:
        """Fill every pixel with an opaque color.

        Args:
            fill: RGB color with components in [0, 1] (clamped).
        """
        rgb = np.clip(np.asarray(fill, dtype=np.float64), 0.0, 1.0)
        self._pixels[:, :, :3] = np.round(rgb * 255.0).astype(np.uint8)
        self._pixels[:, :, 3] = 255

    def set_pixel(self, x: int, y: int, r: int, g: int, b: int, a: int) -> None:
        """Write one pixel.

        Args:
            x: Column (0 = left).
            y: Row (0 = bottom).
            r, g, b, a: Channel values in [0, 255].

        Raises:
            IndexError: If (x, y) lies outside the surface.
        """
        if not (0 <= x < self._width and 0 <= y < self._height):
            raise IndexError(f"Pixel ({x}, {y}) outside {self._width}x{self._height} surface")
        self._pixels[y, x] = (r, g, b, a)

    def get_pixel(self, x: int, y: int) -> tuple[int, int, int, int]:
        """Read one pixel as (r, g, b, a)."""
        r, g, b, a = self._pixels[y, x]
        return int(r), int(g), int(b), int(a)

    def to_array(self) -> npt.NDArray[np.uint8]:
        """Copy of the RGBA buffer, shape (height, width, 4), row 0 = bottom."""
        return self._pixels.copy()

    def to_image(self) -> PILImage.Image:
        """Convert to an upright Pillow RGBA image."""
        return PILImage.fromarray(np.ascontiguousarray(np.flipud(self._pixels)), mode="RGBA")

    def save(self, filepath: str) -> None:
        """Save the surface to an image file (format from the extension)."""
        self.to_image().save(filepath)

    def __repr__(self) -> str:
        """Return a string representation of the surface."""
        return f"ImageSurface(width={self.width}, height={self.height})"
