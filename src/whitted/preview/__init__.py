"""Preview module for output and visualization.

Components:
    surface: Drawable surfaces the render loop writes pixels into
    display: Clamping and 8-bit conversion of traced colors
    export: PNG export
    interactive: Taichi GGUI-based interactive preview window

Example:
    >>> from whitted.preview import ImageSurface, save_png
    >>> from whitted.core.render import Renderer
    >>>
    >>> renderer = Renderer(scene)
    >>> surface = ImageSurface(512, 512, fill=renderer.config.background_color)
    >>> renderer.render(surface)
    >>> save_png(surface, "output.png")

For interactive GGUI preview:
    >>> from whitted.preview import InteractivePreview
    >>> preview = InteractivePreview(512, 512)
    >>> preview.run_reactive(renderer)
"""

from whitted.preview.display import colors_to_uint8
from whitted.preview.export import save_png
from whitted.preview.interactive import InteractivePreview
from whitted.preview.surface import ImageSurface, Surface

__all__ = [
    # Surfaces
    "Surface",
    "ImageSurface",
    # Interactive preview
    "InteractivePreview",
    # Display functions
    "colors_to_uint8",
    # Export functions
    "save_png",
]
