"""Image export utilities for rendered surfaces.

Supported formats:
    - PNG (8-bit via Pillow)

Example:
    >>> from whitted.preview.export import save_png
    >>> from whitted.preview.surface import ImageSurface
    >>> surface = ImageSurface(64, 64)
    >>> save_png(surface, "output.png")
"""

from __future__ import annotations

from whitted.preview.surface import ImageSurface


def save_png(surface: ImageSurface, filepath: str) -> None:
    """Save a rendered surface as an upright RGBA PNG.

    Args:
        surface: The surface to save.
        filepath: Output file path (should end in .png).
    """
    surface.to_image().save(filepath, format="PNG")
