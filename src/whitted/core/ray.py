"""Rays and the vector helpers used by the Whitted tracer.

Every helper is a Taichi function, callable from the render kernel and from
any other @ti.func. They never modify their arguments.

normalize() does not guard against zero-length input. The tracer only
normalizes surface normals, light directions and reflected directions, none
of which can vanish for valid scenes.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.core.ray import make_ray, ray_at, vec3
    >>> @ti.kernel
    ... def walk() -> vec3:
    ...     ray = make_ray(vec3(0.0, 0.0, 5.0), vec3(0.0, 0.0, -1.0))
    ...     return ray_at(ray, 2.0)
    >>> walk()  # (0, 0, 3)
"""

import taichi as ti
import taichi.math as tm

vec3 = tm.vec3


@ti.dataclass
class Ray:
    """Half-line from origin along direction.

    Attributes:
        origin: Where the ray starts.
        direction: Unit direction. Intersection routines assume |direction| = 1
            when they report distances.
    """

    origin: vec3
    direction: vec3


@ti.func
def ray_at(ray: Ray, t: ti.f32) -> vec3:
    """Point at distance t along the ray (origin + t * direction)."""
    return ray.origin + t * ray.direction


@ti.func
def make_ray(origin: vec3, direction: vec3) -> Ray:
    return Ray(origin=origin, direction=direction)


# =============================================================================
# Vector Operations
# =============================================================================


@ti.func
def add(a: vec3, b: vec3) -> vec3:
    """Component-wise sum a + b."""
    return a + b


@ti.func
def sub(a: vec3, b: vec3) -> vec3:
    """Component-wise difference a - b."""
    return a - b


@ti.func
def mult(v: vec3, s: ti.f32) -> vec3:
    """Scale a vector by a scalar."""
    return v * s


@ti.func
def dot(a: vec3, b: vec3) -> ti.f32:
    return tm.dot(a, b)


@ti.func
def cross(a: vec3, b: vec3) -> vec3:
    """Right-handed cross product a x b."""
    return tm.cross(a, b)


@ti.func
def length(v: vec3) -> ti.f32:
    """Euclidean norm sqrt(v . v)."""
    return tm.sqrt(tm.dot(v, v))


@ti.func
def normalize(v: vec3) -> vec3:
    """Scale v to unit length.

    A zero vector gives non-finite components; there is no runtime check on
    the per-ray path.
    """
    return v / length(v)


@ti.func
def reflect(incident: vec3, normal: vec3) -> vec3:
    """Mirror direction of incident about normal.

    Computes normalize(d - 2 (d . n) n), which equals reflecting the reversed
    incident vector -d about n: 2 n (-d . n) + d.

    Args:
        incident: Direction travelling toward the surface.
        normal: Unit surface normal. Its orientation does not matter.

    Returns:
        The unit reflected direction, pointing away from the surface.
    """
    return normalize(incident - 2.0 * tm.dot(incident, normal) * normal)
