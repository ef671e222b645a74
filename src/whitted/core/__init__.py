"""Core rendering module.

Components:
    ray: Ray data structure and vector utilities
    config: Immutable render configuration
    tracer: Shadow tests, local shading and the bounded recursive tracer
    render: Per-pixel render loop and the Renderer session

All compute-intensive operations run inside Taichi kernels.
"""

from .config import (
    DEFAULT_BACKGROUND_COLOR,
    DEFAULT_BIAS,
    DEFAULT_MAX_DEPTH,
    MAX_DEPTH_LIMIT,
    RenderConfig,
)
from .ray import (
    Ray,
    add,
    cross,
    dot,
    length,
    make_ray,
    mult,
    normalize,
    ray_at,
    reflect,
    sub,
    vec3,
)

# Note: tracer and render are NOT imported here to avoid circular imports.
# Import directly from whitted.core.tracer or whitted.core.render when needed.

__all__ = [
    "Ray",
    "ray_at",
    "make_ray",
    "vec3",
    "add",
    "sub",
    "mult",
    "length",
    "normalize",
    "dot",
    "cross",
    "reflect",
    "RenderConfig",
    "DEFAULT_MAX_DEPTH",
    "DEFAULT_BACKGROUND_COLOR",
    "DEFAULT_BIAS",
    "MAX_DEPTH_LIMIT",
]
