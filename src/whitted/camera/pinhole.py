"""Pinhole camera model for primary ray generation.

The camera is described by a position, a look-at target, a horizontal field
of view and the output image size. setup_camera() derives an orthonormal view
basis on the host with NumPy:

    eye   = normalize(target - position)
    right = normalize(cross(eye, world_up))     world_up = (0, 1, 0)
    up    = normalize(cross(right, eye))

and the image plane at unit distance along eye:

    half_width   = tan(fov / 2)
    half_height  = (height / width) * half_width
    pixel_width  = 2 * half_width / (width - 1)
    pixel_height = 2 * half_height / (height - 1)

Pixel (x, y) maps to the direction
    normalize(eye + right * (x * pixel_width - half_width)
                  + up * (y * pixel_height - half_height))
so the image plane spans the full field of view from the first to the last
pixel, and y = 0 is the bottom row.

Looking straight up or down (eye parallel to world_up) leaves right
undefined; such cameras are not supported.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.camera.pinhole import Camera, setup_camera, get_ray
    >>>
    >>> camera = Camera(
    ...     position=(0.0, 0.0, 0.0),
    ...     direction=(0.0, 0.0, -1.0),
    ...     fov=90.0,
    ...     width=320,
    ...     height=240,
    ... )
    >>> setup_camera(camera)
    >>>
    >>> @ti.kernel
    ... def render():
    ...     ray = get_ray(160, 120)
"""

import math
from dataclasses import dataclass

import numpy as np
import taichi as ti
import taichi.math as tm

from whitted.core.ray import Ray, make_ray, vec3

WORLD_UP = (0.0, 1.0, 0.0)

# =============================================================================
# Camera Data Structures
# =============================================================================


@dataclass
class Camera:
    """Configuration for a pinhole camera.

    Attributes:
        position: Camera position in world space (x, y, z).
        direction: Point the camera looks at in world space (x, y, z).
        fov: Field of view across the image width, in degrees.
        width: Output image width in pixels (at least 2).
        height: Output image height in pixels (at least 2).
    """

    position: tuple[float, float, float]
    direction: tuple[float, float, float]
    fov: float
    width: int = 512
    height: int = 512


# =============================================================================
# Taichi Fields for Camera State
# =============================================================================

_camera_origin = ti.Vector.field(3, dtype=ti.f32, shape=())

# Orthonormal view basis
_camera_eye = ti.Vector.field(3, dtype=ti.f32, shape=())  # Forward
_camera_right = ti.Vector.field(3, dtype=ti.f32, shape=())
_camera_up = ti.Vector.field(3, dtype=ti.f32, shape=())

# Image plane extents and per-pixel steps
_half_width = ti.field(dtype=ti.f32, shape=())
_half_height = ti.field(dtype=ti.f32, shape=())
_pixel_width = ti.field(dtype=ti.f32, shape=())
_pixel_height = ti.field(dtype=ti.f32, shape=())


# =============================================================================
# Camera Setup (Python-side)
# =============================================================================


def setup_camera(camera: Camera) -> None:
    """Initialize camera state from configuration.

    Computes the view basis and image plane geometry and stores them in
    Taichi fields. Must be called before any ray is generated.

    Args:
        camera: Camera configuration.

    Raises:
        ValueError: If width or height is below 2 pixels.
    """
    if camera.width < 2 or camera.height < 2:
        raise ValueError(
            f"Camera image must be at least 2x2 pixels, got {camera.width}x{camera.height}"
        )

    position = np.array(camera.position, dtype=np.float64)
    target = np.array(camera.direction, dtype=np.float64)
    world_up = np.array(WORLD_UP, dtype=np.float64)

    eye = target - position
    eye = eye / np.linalg.norm(eye)

    right = np.cross(eye, world_up)
    right = right / np.linalg.norm(right)

    up = np.cross(right, eye)
    up = up / np.linalg.norm(up)

    half_width = math.tan(math.radians(camera.fov) / 2.0)
    half_height = (camera.height / camera.width) * half_width

    _camera_origin[None] = position.tolist()
    _camera_eye[None] = eye.tolist()
    _camera_right[None] = right.tolist()
    _camera_up[None] = up.tolist()

    _half_width[None] = half_width
    _half_height[None] = half_height
    _pixel_width[None] = (half_width * 2.0) / (camera.width - 1)
    _pixel_height[None] = (half_height * 2.0) / (camera.height - 1)


# =============================================================================
# Ray Generation (Taichi-compatible)
# =============================================================================


@ti.func
def get_ray(x: ti.i32, y: ti.i32) -> Ray:
    """Generate the primary ray through pixel (x, y).

    Args:
        x: Pixel column (0 = left).
        y: Pixel row (0 = bottom).

    Returns:
        A Ray from the camera position with a unit direction.
    """
    vx = _camera_right[None] * (ti.cast(x, ti.f32) * _pixel_width[None] - _half_width[None])
    vy = _camera_up[None] * (ti.cast(y, ti.f32) * _pixel_height[None] - _half_height[None])
    direction = tm.normalize(_camera_eye[None] + vx + vy)
    return make_ray(_camera_origin[None], direction)


@ti.func
def get_camera_origin() -> vec3:
    """Get the camera position in world space."""
    return _camera_origin[None]


# =============================================================================
# Utility Functions
# =============================================================================


def get_camera_info() -> dict[str, tuple[float, float, float] | float]:
    """Get current camera state for debugging.

    Returns:
        Dictionary with origin, eye, right, up (vectors) and half_width,
        half_height, pixel_width, pixel_height (scalars).
    """
    info: dict[str, tuple[float, float, float] | float] = {}
    vectors = {
        "origin": _camera_origin,
        "eye": _camera_eye,
        "right": _camera_right,
        "up": _camera_up,
    }
    for name, field in vectors.items():
        vec = field[None]
        info[name] = (float(vec[0]), float(vec[1]), float(vec[2]))

    info["half_width"] = float(_half_width[None])
    info["half_height"] = float(_half_height[None])
    info["pixel_width"] = float(_pixel_width[None])
    info["pixel_height"] = float(_pixel_height[None])
    return info
