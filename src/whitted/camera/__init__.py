"""Camera module for view and primary ray generation.

Components:
    pinhole: Pinhole camera with look-at positioning

Camera responsibilities:
    - Build the view basis (eye, right, up) from position and look-at target
    - Map integer pixel coordinates to unit ray directions
    - Keep the image plane spanning exactly the configured field of view

Pixel coordinates:
    x in [0, width - 1]: left to right across image
    y in [0, height - 1]: bottom to top across image
"""

from .pinhole import (
    WORLD_UP,
    Camera,
    get_camera_info,
    get_camera_origin,
    get_ray,
    setup_camera,
)

__all__ = [
    "Camera",
    "WORLD_UP",
    "setup_camera",
    "get_ray",
    "get_camera_origin",
    "get_camera_info",
]
