#!/usr/bin/env python3
"""Render a scene to a PNG file.

Renders either a JSON scene document or the built-in demo scene with the
Whitted ray tracer and saves the result.

Usage:
    python -m examples.render_scene [options]

Options:
    --scene PATH        JSON scene document (default: built-in demo scene)
    --width WIDTH       Image width in pixels (default: 512)
    --height HEIGHT     Image height in pixels (default: 512)
    --max-depth DEPTH   Mirror bounces after the primary hit (default: 1)
    --bias BIAS         Hit point offset along the ray (default: 0.001)
    --no-ambient        Disable the ambient term
    --no-diffuse        Disable the diffuse term
    --no-specular       Disable the specular term
    --no-reflection     Disable mirror reflections
    --output OUTPUT     Output file path (default: whitted.png)
    --quiet             Suppress progress output

Example:
    python -m examples.render_scene --scene examples/scenes/demo.json --max-depth 4
"""

from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path

# Ensure the source tree is importable for direct execution
_src_root = Path(__file__).parent.parent / "src"
if str(_src_root) not in sys.path:
    sys.path.insert(0, str(_src_root))

import taichi as ti  # noqa: E402

from whitted.core.config import DEFAULT_BIAS, DEFAULT_MAX_DEPTH, RenderConfig  # noqa: E402


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render a scene with the Whitted ray tracer.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--scene",
        type=str,
        default=None,
        help="JSON scene document (default: built-in demo scene)",
    )
    parser.add_argument(
        "--width",
        type=int,
        default=512,
        help="Image width in pixels (default: 512)",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=512,
        help="Image height in pixels (default: 512)",
    )
    parser.add_argument(
        "--max-depth",
        type=int,
        default=DEFAULT_MAX_DEPTH,
        help=f"Mirror bounces after the primary hit (default: {DEFAULT_MAX_DEPTH})",
    )
    parser.add_argument(
        "--bias",
        type=float,
        default=DEFAULT_BIAS,
        help=f"Hit point offset along the ray (default: {DEFAULT_BIAS})",
    )
    parser.add_argument("--no-ambient", action="store_true", help="Disable the ambient term")
    parser.add_argument("--no-diffuse", action="store_true", help="Disable the diffuse term")
    parser.add_argument("--no-specular", action="store_true", help="Disable the specular term")
    parser.add_argument(
        "--no-reflection", action="store_true", help="Disable mirror reflections"
    )
    parser.add_argument(
        "--output",
        type=str,
        default="whitted.png",
        help="Output file path (default: whitted.png)",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output",
    )
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> RenderConfig:
    """Map parsed arguments onto a RenderConfig.

    Raises:
        ValueError: If the resulting configuration is invalid.
    """
    return RenderConfig(
        max_depth=args.max_depth,
        ambient_enabled=not args.no_ambient,
        diffuse_enabled=not args.no_diffuse,
        specular_enabled=not args.no_specular,
        reflection_enabled=not args.no_reflection,
        bias=args.bias,
    )


def render_scene(
    config: RenderConfig,
    scene_path: str | None = None,
    width: int = 512,
    height: int = 512,
    output_path: str = "whitted.png",
    quiet: bool = False,
) -> Path:
    """Render a scene and save it to file.

    Args:
        config: Render configuration.
        scene_path: JSON scene document, or None for the demo scene.
        width: Image width in pixels.
        height: Image height in pixels.
        output_path: Output file path (PNG).
        quiet: If True, suppress progress output.

    Returns:
        Path to the saved image file.
    """
    # Lazy imports to allow Taichi initialization first
    from whitted.core.render import Renderer
    from whitted.preview.export import save_png
    from whitted.preview.surface import ImageSurface
    from whitted.scene.presets import create_demo_scene

    renderer = Renderer(config=config)
    if scene_path is not None:
        if not quiet:
            print(f"Loading scene from {scene_path}...")
        renderer.load_scene(scene_path)
    else:
        if not quiet:
            print("Creating demo scene...")
        renderer.load_scene(create_demo_scene())

    if not quiet:
        print(f"Rendering {width}x{height} (max depth {config.max_depth})...")

    start_time = time.time()
    surface = ImageSurface(width, height, fill=config.background_color)
    renderer.render(surface)

    output_file = Path(output_path)
    save_png(surface, str(output_file))

    total_time = time.time() - start_time
    if not quiet:
        print(f"Saved to: {output_file.absolute()}")
        print(f"Total time: {total_time:.2f}s")

    return output_file


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    # Use GPU if available, fall back to CPU
    try:
        ti.init(arch=ti.gpu)
        if not args.quiet:
            print("Using GPU backend")
    except Exception:
        ti.init(arch=ti.cpu)
        if not args.quiet:
            print("Using CPU backend")

    try:
        render_scene(
            build_config(args),
            scene_path=args.scene,
            width=args.width,
            height=args.height,
            output_path=args.output,
            quiet=args.quiet,
        )
        return 0
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
