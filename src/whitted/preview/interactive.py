"""Interactive preview window using Taichi GGUI.

The window shows the current render and a control panel with the classic
Whitted toggles:

    - Ambient / Diffuse / Specular / Reflection checkboxes
    - Max Depth slider
    - Export PNG button

A Whitted render is deterministic, so a frame is only re-rendered when a
control changes. Each change builds a new RenderConfig through
Renderer.update_config() before the next render starts.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.core.render import Renderer
    >>> from whitted.preview.interactive import InteractivePreview
    >>> from whitted.scene.presets import create_demo_scene
    >>>
    >>> preview = InteractivePreview(640, 480)
    >>> preview.run_reactive(Renderer(create_demo_scene()))  # Blocks until closed
"""

from __future__ import annotations

import os
import sys
from datetime import datetime
from typing import TYPE_CHECKING

import numpy as np
import taichi as ti

from whitted.core.config import MAX_DEPTH_LIMIT
from whitted.preview.surface import ImageSurface

if TYPE_CHECKING:
    import numpy.typing as npt

    from whitted.core.render import Renderer

# Upper end of the depth slider; deeper settings are available through the CLI
SLIDER_MAX_DEPTH = min(10, MAX_DEPTH_LIMIT)


class InteractivePreview:
    """Interactive preview window using Taichi GGUI.

    Attributes:
        width: Window width in pixels.
        height: Window height in pixels.
        surface: The ImageSurface renders are drawn into.
        display_image: Taichi field storing the display image (RGB float).
    """

    def __init__(
        self,
        width: int,
        height: int,
        *,
        title: str = "Whitted Ray Tracer - Interactive Preview",
    ) -> None:
        """Initialize the interactive preview.

        Args:
            width: Window width in pixels.
            height: Window height in pixels.
            title: Window title.

        Note:
            The window is created lazily, on first access or in
            run_reactive(), so the preview can be driven headless.
        """
        self.width = width
        self.height = height
        self._title = title

        self._window: ti.ui.Window | None = None
        self._canvas: ti.ui.Canvas | None = None

        self.surface = ImageSurface(width, height)
        self.display_image: ti.MatrixField = ti.Vector.field(
            3, dtype=ti.f32, shape=(width, height)
        )

        self._renderer: Renderer | None = None
        self._needs_render = True
        self._frame_count = 0

    def _initialize_window(self) -> None:
        """Open the GGUI window on first use."""
        if self._window is not None:
            return

        self._window = ti.ui.Window(name=self._title, res=(self.width, self.height), vsync=True)
        self._canvas = self._window.get_canvas()

    @property
    def window(self) -> ti.ui.Window:
        """The GGUI window, opened on first access."""
        self._initialize_window()
        assert self._window is not None
        return self._window

    @property
    def canvas(self) -> ti.ui.Canvas:
        """Canvas of the GGUI window."""
        self._initialize_window()
        assert self._canvas is not None
        return self._canvas

    @property
    def frame_count(self) -> int:
        """Number of frames rendered since the preview was created."""
        return self._frame_count

    def update_image(self, image: npt.NDArray[np.float32]) -> None:
        """Update the display image from a NumPy array.

        Args:
            image: Array of shape (height, width, 3), values in [0, 1], row 0
                at the top.

        Raises:
            ValueError: If image shape doesn't match (height, width, 3).
        """
        expected_shape = (self.height, self.width, 3)
        if image.shape != expected_shape:
            raise ValueError(
                f"Image shape {image.shape} doesn't match expected {expected_shape}"
            )

        # Taichi fields are (x, y) with the origin at the bottom-left
        image_transposed = np.ascontiguousarray(
            np.transpose(np.flipud(image), (1, 0, 2)).astype(np.float32)
        )
        self.display_image.from_numpy(image_transposed)

    def update_image_from_surface(self) -> None:
        """Copy the surface's pixels into the display image."""
        rgb = self.surface.to_array()[:, :, :3].astype(np.float32) / 255.0
        # Surface rows already run bottom to top
        self.display_image.from_numpy(np.ascontiguousarray(np.transpose(rgb, (1, 0, 2))))

    def set_renderer(self, renderer: Renderer) -> None:
        """Attach the render session driven by the controls."""
        self._renderer = renderer
        self._needs_render = True

    def apply_controls(
        self,
        *,
        ambient: bool,
        diffuse: bool,
        specular: bool,
        reflection: bool,
        max_depth: int,
    ) -> bool:
        """Apply control values to the renderer's configuration.

        Args:
            ambient: Ambient checkbox state.
            diffuse: Diffuse checkbox state.
            specular: Specular checkbox state.
            reflection: Reflection checkbox state.
            max_depth: Max depth slider value.

        Returns:
            True if the configuration changed and a re-render is pending.

        Raises:
            RuntimeError: If no renderer is attached.
        """
        if self._renderer is None:
            raise RuntimeError("No renderer attached. Call set_renderer() first.")

        config = self._renderer.config
        changes = {
            "ambient_enabled": ambient,
            "diffuse_enabled": diffuse,
            "specular_enabled": specular,
            "reflection_enabled": reflection,
            "max_depth": max_depth,
        }
        changed = {name: value for name, value in changes.items() if getattr(config, name) != value}
        if not changed:
            return False

        self._renderer.update_config(**changed)
        self._needs_render = True
        return True

    def render_frame(self) -> bool:
        """Re-render into the surface if a render is pending.

        Returns:
            True if a frame was rendered.
        """
        if self._renderer is None or not self._needs_render:
            return False

        self.surface.clear(self._renderer.config.background_color)
        rendered = self._renderer.render(self.surface)
        self._needs_render = False
        if rendered:
            self._frame_count += 1
            self.update_image_from_surface()
        return rendered

    def is_running(self) -> bool:
        """Check if the window is still open."""
        return self.window.running

    def show_frame(self) -> None:
        """Present the current display image."""
        self.canvas.set_image(self.display_image)
        self.window.show()

    def run_reactive(self, renderer: Renderer) -> None:
        """Run the interactive loop until the window is closed.

        Args:
            renderer: The render session to drive.
        """
        self._initialize_window()
        self.set_renderer(renderer)

        while self.is_running():
            self._draw_gui_panel()
            if self.render_frame():
                print(f"Rendered frame {self._frame_count}: {renderer.config}")
            self.show_frame()

    def close(self) -> None:
        """Close the preview window."""
        if self._window is not None:
            self._window.running = False

    @staticmethod
    def is_display_available() -> bool:
        """Whether a GGUI window can be opened here.

        Windows always has a desktop. macOS has one unless this is an SSH
        session without X forwarding. Elsewhere an X11 or Wayland display
        must be set.
        """
        if sys.platform == "win32":
            return True

        has_display = bool(os.environ.get("DISPLAY"))
        if sys.platform == "darwin":
            return has_display or not os.environ.get("SSH_CONNECTION")

        return has_display or bool(os.environ.get("WAYLAND_DISPLAY"))

    def _draw_gui_panel(self) -> None:
        """Draw the shading controls and the export button."""
        assert self._renderer is not None
        config = self._renderer.config

        with self.window.GUI.sub_window("Shading", 0.02, 0.02, 0.25, 0.24) as gui:
            ambient = gui.checkbox("Ambient", config.ambient_enabled)
            diffuse = gui.checkbox("Diffuse", config.diffuse_enabled)
            specular = gui.checkbox("Specular", config.specular_enabled)
            reflection = gui.checkbox("Reflection", config.reflection_enabled)
            max_depth = gui.slider_int(
                "Max Depth", config.max_depth, minimum=0, maximum=SLIDER_MAX_DEPTH
            )

        self.apply_controls(
            ambient=ambient,
            diffuse=diffuse,
            specular=specular,
            reflection=reflection,
            max_depth=max_depth,
        )

        with self.window.GUI.sub_window("Export", 0.02, 0.28, 0.25, 0.08) as gui:
            if gui.button("Export PNG"):
                self.export_png()

    def export_png(self, filename: str | None = None) -> str:
        """Save the current surface as a PNG.

        Args:
            filename: Output path. Defaults to whitted_YYYYMMDD_HHMMSS.png.

        Returns:
            The path written.
        """
        from whitted.preview.export import save_png

        if filename is None:
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            filename = f"whitted_{timestamp}.png"

        save_png(self.surface, filename)
        print(f"Exported: {filename}")
        return filename
