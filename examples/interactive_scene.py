#!/usr/bin/env python3
"""Interactive Whitted renderer with live shading controls.

Launches a preview window showing the demo scene (or a JSON scene document
given as the only argument) and re-renders whenever a control changes.

Usage:
    python -m examples.interactive_scene [scene.json]

Controls:
    - Ambient / Diffuse / Specular / Reflection: toggle shading terms
    - Max Depth: number of mirror bounces after the primary hit
    - Export PNG: save the current render with a timestamp
"""

from __future__ import annotations

import platform
import sys
from pathlib import Path

# Ensure the source tree is importable for direct execution
_src_root = Path(__file__).parent.parent / "src"
if str(_src_root) not in sys.path:
    sys.path.insert(0, str(_src_root))

import taichi as ti  # noqa: E402


def initialize_taichi() -> str:
    """Initialize Taichi with the best available backend.

    On macOS, prefers Metal. Falls back to CPU if GPU is unavailable.

    Returns:
        Name of the backend being used.
    """
    if platform.system() == "Darwin":
        try:
            ti.init(arch=ti.metal)
            return "Metal (GPU)"
        except Exception:
            pass

    try:
        ti.init(arch=ti.gpu)
        return "GPU"
    except Exception:
        pass

    ti.init(arch=ti.cpu)
    return "CPU"


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the interactive renderer.

    Returns:
        Exit code (0 for success, non-zero for error).
    """
    argv = sys.argv[1:] if argv is None else argv

    # Initialize Taichi first (before importing modules that use ti.kernel)
    backend = initialize_taichi()
    print(f"Taichi backend: {backend}")

    from whitted.core.render import Renderer
    from whitted.preview.interactive import InteractivePreview
    from whitted.scene.presets import create_demo_scene

    if not InteractivePreview.is_display_available():
        print("Error: No display available. Cannot run interactive preview.")
        print("This script requires a graphical display environment.")
        return 1

    renderer = Renderer()
    try:
        if argv:
            print(f"Loading scene from {argv[0]}...")
            renderer.load_scene(argv[0])
        else:
            renderer.load_scene(create_demo_scene())
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print("Creating interactive preview window (640x480)...")
    preview = InteractivePreview(640, 480)

    print("Starting interactive rendering...")
    print("  - Toggle shading terms and adjust max depth in the Shading panel")
    print("  - Click 'Export PNG' to save current render")
    print("  - Close window to exit")
    print()

    try:
        preview.run_reactive(renderer)
    except KeyboardInterrupt:
        print("\nInterrupted by user.")
    finally:
        preview.close()
        print("Preview window closed.")

    return 0


if __name__ == "__main__":
    sys.exit(main())
