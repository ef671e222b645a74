"""Per-pixel render loop.

Every pixel of the surface gets one primary ray from the pinhole camera,
traced from depth 0. Pixels run in parallel inside a single Taichi kernel;
each one only reads the scene and writes its own buffer cell.

The kernel stores the unclamped color and a found flag per pixel. On the host
the colors are clamped to [0, 1], scaled to 8 bits and written to the surface
with set_pixel(). Pixels whose ray escaped the scene are skipped, so they keep
whatever the surface already held.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.core.render import Renderer
    >>> from whitted.preview.surface import ImageSurface
    >>> from whitted.scene.presets import create_demo_scene
    >>>
    >>> renderer = Renderer(create_demo_scene())
    >>> surface = ImageSurface(320, 240, fill=renderer.config.background_color)
    >>> renderer.render(surface)
    True
"""

import dataclasses
from typing import TYPE_CHECKING, Any

import numpy as np
import taichi as ti
import taichi.math as tm

from whitted.camera.pinhole import get_ray, setup_camera
from whitted.core.config import RenderConfig
from whitted.core.tracer import make_settings, settings_args, trace
from whitted.preview.display import colors_to_uint8

if TYPE_CHECKING:
    from whitted.preview.surface import Surface
    from whitted.scene.manager import SceneManager

# Type alias for 3D vectors
vec3 = tm.vec3

# =============================================================================
# Render Target
# =============================================================================

# Maximum supported image dimensions (preallocated to avoid kernel recompilation)
MAX_IMAGE_WIDTH = 2048
MAX_IMAGE_HEIGHT = 2048

_color_buffer = ti.Vector.field(3, dtype=ti.f32, shape=(MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT))
_found_mask = ti.field(dtype=ti.i32, shape=(MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT))


def _check_dimensions(width: int, height: int) -> None:
    if width > MAX_IMAGE_WIDTH or height > MAX_IMAGE_HEIGHT:
        raise ValueError(
            f"Image dimensions ({width}x{height}) exceed maximum supported "
            f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
        )


# =============================================================================
# Kernels
# =============================================================================


@ti.kernel
def _render_kernel(
    width: ti.i32,
    height: ti.i32,
    max_depth: ti.i32,
    bg_r: ti.f32,
    bg_g: ti.f32,
    bg_b: ti.f32,
    ambient: ti.i32,
    diffuse: ti.i32,
    specular: ti.i32,
    reflection: ti.i32,
    bias: ti.f32,
):
    """Trace one primary ray per pixel into the render target."""
    settings = make_settings(
        max_depth, bg_r, bg_g, bg_b, ambient, diffuse, specular, reflection, bias
    )
    for x, y in ti.ndrange(width, height):
        ray = get_ray(x, y)
        result = trace(ray.origin, ray.direction, 0, settings)
        _found_mask[x, y] = result.found
        _color_buffer[x, y] = result.color


_pixel_color = ti.Vector.field(3, dtype=ti.f32, shape=())
_pixel_found = ti.field(dtype=ti.i32, shape=())


@ti.kernel
def _render_single_pixel(
    x: ti.i32,
    y: ti.i32,
    max_depth: ti.i32,
    bg_r: ti.f32,
    bg_g: ti.f32,
    bg_b: ti.f32,
    ambient: ti.i32,
    diffuse: ti.i32,
    specular: ti.i32,
    reflection: ti.i32,
    bias: ti.f32,
):
    settings = make_settings(
        max_depth, bg_r, bg_g, bg_b, ambient, diffuse, specular, reflection, bias
    )
    ray = get_ray(x, y)
    result = trace(ray.origin, ray.direction, 0, settings)
    _pixel_found[None] = result.found
    _pixel_color[None] = result.color


# =============================================================================
# Public Rendering API
# =============================================================================


def trace_pixel(x: int, y: int, config: RenderConfig) -> tuple[float, float, float] | None:
    """Trace the primary ray of a single pixel.

    Uses the camera and scene currently uploaded to the Taichi fields. Intended
    for tests and debugging; render() handles whole images.

    Args:
        x: Pixel column (0 = left).
        y: Pixel row (0 = bottom).
        config: Render configuration.

    Returns:
        The unclamped (R, G, B) color, or None if the ray escaped the scene.
    """
    _render_single_pixel(x, y, *settings_args(config))
    if _pixel_found[None] == 0:
        return None
    c = _pixel_color[None]
    return (float(c[0]), float(c[1]), float(c[2]))


def render(
    surface: "Surface",
    scene: "SceneManager | None",
    config: RenderConfig,
) -> bool:
    """Render a scene into a surface.

    The scene's camera is resized to the surface before rays are generated.

    Args:
        surface: Destination surface.
        scene: The scene to render. Nothing happens when it is None.
        config: Render configuration.

    Returns:
        True if a render ran, False if there was no scene.

    Raises:
        ValueError: If the surface is smaller than 2x2 or larger than the
            preallocated render target.
    """
    if scene is None:
        return False

    width, height = surface.width, surface.height
    _check_dimensions(width, height)

    camera = dataclasses.replace(scene.camera, width=width, height=height)
    setup_camera(camera)
    scene.upload()

    _render_kernel(width, height, *settings_args(config))

    found = _found_mask.to_numpy()[:width, :height]
    colors = _color_buffer.to_numpy()[:width, :height, :]
    pixels = colors_to_uint8(colors)

    for x, y in zip(*np.nonzero(found)):
        r, g, b = pixels[x, y]
        surface.set_pixel(int(x), int(y), int(r), int(g), int(b), 255)

    return True


class Renderer:
    """Render session holding a scene and the current render configuration.

    The configuration is immutable; update_config() swaps in a modified copy,
    so a render always sees one consistent set of parameters.

    Attributes:
        scene: The loaded scene, or None.
        config: The current RenderConfig.

    Example:
        >>> renderer = Renderer()
        >>> renderer.load_scene("scenes/demo.json")
        >>> renderer.update_config(max_depth=3, specular_enabled=False)
        >>> renderer.render(surface)
    """

    def __init__(
        self,
        scene: "SceneManager | None" = None,
        config: RenderConfig | None = None,
    ) -> None:
        self.scene = scene
        self.config = config if config is not None else RenderConfig()
        self._render_count = 0

    @property
    def render_count(self) -> int:
        """Number of renders completed by this session."""
        return self._render_count

    def load_scene(self, scene: "SceneManager | str") -> "SceneManager":
        """Replace the current scene.

        Args:
            scene: A SceneManager, or a path to a JSON scene document.

        Returns:
            The loaded scene.
        """
        if isinstance(scene, str):
            from whitted.scene.manager import load_scene

            scene = load_scene(scene)
        self.scene = scene
        return scene

    def update_config(self, **changes: Any) -> RenderConfig:
        """Replace the configuration with a modified copy.

        Args:
            **changes: RenderConfig fields to change.

        Returns:
            The new configuration.

        Raises:
            ValueError: If the resulting configuration is invalid.
            TypeError: If a keyword is not a RenderConfig field.
        """
        self.config = dataclasses.replace(self.config, **changes)
        return self.config

    def render(self, surface: "Surface") -> bool:
        """Render the current scene into a surface.

        Returns:
            True if a render ran, False if no scene is loaded.
        """
        rendered = render(surface, self.scene, self.config)
        if rendered:
            self._render_count += 1
        return rendered

    def __repr__(self) -> str:
        """Return a string representation of the renderer."""
        return f"Renderer(scene={self.scene!r}, config={self.config!r})"
