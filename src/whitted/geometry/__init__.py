"""Geometry module for shape primitives.

This module provides geometric primitives and their intersection routines:

Components:
    sphere: Sphere primitive, the shared Intersection record, ray-sphere test
    plane: Infinite plane primitive with ray-plane test

All intersection routines are implemented as Taichi functions (@ti.func)
and follow the pattern:
    record = intersect_shape(ray_origin, ray_direction, shape, bias)

A miss is reported through record.hit == 0 rather than a sentinel distance.
"""

from .plane import PARALLEL_EPSILON, Plane, intersect_plane, make_plane, plane_normal
from .sphere import (
    Intersection,
    Sphere,
    coordinate_greater,
    intersect_sphere,
    make_miss,
    make_sphere,
    point_greater,
    sphere_normal,
)

__all__ = [
    "Intersection",
    "make_miss",
    "Sphere",
    "intersect_sphere",
    "make_sphere",
    "sphere_normal",
    "point_greater",
    "coordinate_greater",
    "Plane",
    "intersect_plane",
    "make_plane",
    "plane_normal",
    "PARALLEL_EPSILON",
]
