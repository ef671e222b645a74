"""Scene module for scene storage and ray-scene queries.

Components:
    intersection: Object and light tables, closest-hit traversal
    manager: Host-side scene description and JSON scene documents
    presets: Ready-made demo scene

Scene data is organized for efficient Taichi access:
    - Structure-of-Arrays layout for geometric and material data
    - One object table for all primitive kinds, visited in insertion order
"""

from .intersection import (
    MAX_LIGHTS,
    MAX_OBJECTS,
    ObjectKind,
    SceneHit,
    add_light,
    add_plane,
    add_sphere,
    clear_scene,
    get_light_count,
    get_object_count,
    intersect_object,
    intersect_objects,
    object_normal,
)
from .manager import (
    DEFAULT_CAMERA,
    LightInfo,
    PlaneInfo,
    SceneManager,
    SphereInfo,
    load_scene,
)
from .presets import create_demo_scene

__all__ = [
    # Intersection module
    "SceneHit",
    "ObjectKind",
    "add_sphere",
    "add_plane",
    "add_light",
    "clear_scene",
    "get_object_count",
    "get_light_count",
    "intersect_object",
    "intersect_objects",
    "object_normal",
    "MAX_OBJECTS",
    "MAX_LIGHTS",
    # Manager module
    "SceneManager",
    "SphereInfo",
    "PlaneInfo",
    "LightInfo",
    "DEFAULT_CAMERA",
    "load_scene",
    # Presets
    "create_demo_scene",
]
