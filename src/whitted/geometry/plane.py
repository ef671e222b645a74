"""Infinite plane primitive with ray-plane intersection.

A plane is defined by any point on it (center) and a normal vector. The
normal is stored as given and normalized on use, so scene documents may carry
non-unit normals.

Ray-plane intersection solves
    t = dot(center - origin, n) / dot(direction, n)
and rejects rays parallel to the plane and hits behind the ray origin.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.geometry.plane import Plane, intersect_plane
    >>> # Floor at y = -1
    >>> floor = Plane(center=ti.math.vec3(0, -1, 0), normal=ti.math.vec3(0, 1, 0))
    >>> # Use intersect_plane within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

from .sphere import Intersection

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# |dot(direction, normal)| at or below this counts as parallel
PARALLEL_EPSILON = 1e-8


@ti.dataclass
class Plane:
    """An infinite plane through a point.

    Attributes:
        center: Any point on the plane (vec3).
        normal: The plane normal (vec3, need not be unit length).
    """

    center: vec3
    normal: vec3


@ti.func
def plane_normal(plane: Plane) -> vec3:
    """Unit normal of the plane."""
    return tm.normalize(plane.normal)


@ti.func
def intersect_plane(
    ray_origin: vec3,
    ray_direction: vec3,
    plane: Plane,
    bias: ti.f32,
) -> Intersection:
    """Test for ray-plane intersection.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The unit direction of the ray.
        plane: The plane to test against.
        bias: Distance the hit point is pulled back along the ray.

    Returns:
        An Intersection; hit is 0 for parallel rays and for planes behind
        the ray origin.
    """
    normal = plane_normal(plane)
    denom = tm.dot(normal, ray_direction)

    did_hit = 0
    hit_t = 0.0
    hit_point = vec3(0.0, 0.0, 0.0)

    if ti.abs(denom) > PARALLEL_EPSILON:
        t = tm.dot(plane.center - ray_origin, normal) / denom
        if t > 0.0:
            did_hit = 1
            hit_t = t
            hit_point = ray_origin + t * ray_direction - bias * ray_direction

    return Intersection(hit=did_hit, distance=hit_t, point=hit_point)


@ti.func
def make_plane(center: vec3, normal: vec3) -> Plane:
    """Create a plane from a point and a normal.

    Args:
        center: A point on the plane.
        normal: The plane normal.

    Returns:
        A new Plane instance.
    """
    return Plane(center=center, normal=normal)
