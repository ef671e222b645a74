"""Scene object storage and closest-hit traversal.

Scene objects (spheres and planes) share a single object table so traversal
visits them in insertion order, whatever their kind. Each row carries a kind
tag, the geometry of both primitive kinds (only the fields of its own kind are
meaningful) and the object's material constants. Point lights live in a
second table.

Traversal is a linear scan with no acceleration structure. The same query
serves primary rays, reflection rays and shadow rays.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.materials.phong import Material
    >>> from whitted.scene.intersection import (
    ...     add_sphere, add_plane, add_light, clear_scene, intersect_objects
    ... )
    >>> clear_scene()
    >>> add_sphere((0, 0, -5), 1.0, Material(diffuse_k=1.0))
    >>> add_plane((0, -1, 0), (0, 1, 0), Material(ambient_k=0.2))
    >>> add_light((0, 5, -5))
    >>> # Use intersect_objects within a Taichi kernel
"""

from enum import IntEnum

import taichi as ti
import taichi.math as tm

from whitted.geometry.plane import intersect_plane, make_plane, plane_normal
from whitted.geometry.sphere import (
    Intersection,
    intersect_sphere,
    make_miss,
    make_sphere,
    sphere_normal,
)
from whitted.materials.phong import Material

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


class ObjectKind(IntEnum):
    """Tag of a row in the object table."""

    SPHERE = 0
    PLANE = 1


@ti.dataclass
class SceneHit:
    """Closest intersection along a ray and the object that produced it.

    Attributes:
        hit: 1 if any object was hit, 0 otherwise.
        distance: Parametric distance of the hit. Only valid if hit == 1.
        point: Biased world-space hit point. Only valid if hit == 1.
        object_id: Row of the hit object in the object table, -1 on a miss.
    """

    hit: ti.i32
    distance: ti.f32
    point: vec3
    object_id: ti.i32


# Maximum number of objects and lights supported in the scene
MAX_OBJECTS = 1024
MAX_LIGHTS = 64

# Object table: Structure of Arrays layout
object_kinds = ti.field(dtype=ti.i32, shape=MAX_OBJECTS)
object_centers = ti.Vector.field(3, dtype=ti.f32, shape=MAX_OBJECTS)
object_radii = ti.field(dtype=ti.f32, shape=MAX_OBJECTS)
object_normals = ti.Vector.field(3, dtype=ti.f32, shape=MAX_OBJECTS)

# Material constants, one row per object
object_colors = ti.Vector.field(3, dtype=ti.f32, shape=MAX_OBJECTS)
object_ambient_k = ti.field(dtype=ti.f32, shape=MAX_OBJECTS)
object_diffuse_k = ti.field(dtype=ti.f32, shape=MAX_OBJECTS)
object_specular_k = ti.field(dtype=ti.f32, shape=MAX_OBJECTS)
object_reflective_k = ti.field(dtype=ti.f32, shape=MAX_OBJECTS)
object_specular_exponents = ti.field(dtype=ti.f32, shape=MAX_OBJECTS)
num_objects = ti.field(dtype=ti.i32, shape=())

# Point lights
light_positions = ti.Vector.field(3, dtype=ti.f32, shape=MAX_LIGHTS)
num_lights = ti.field(dtype=ti.i32, shape=())


def clear_scene() -> None:
    """Remove all objects and lights.

    Resets the counts to zero. The field data is not cleared but will be
    overwritten when new rows are added.
    """
    num_objects[None] = 0
    num_lights[None] = 0


def _add_object(
    kind: ObjectKind,
    center: tuple[float, float, float],
    radius: float,
    normal: tuple[float, float, float],
    material: Material,
) -> int:
    idx = num_objects[None]
    if idx >= MAX_OBJECTS:
        raise RuntimeError(f"Maximum number of objects ({MAX_OBJECTS}) exceeded")

    object_kinds[idx] = int(kind)
    object_centers[idx] = [center[0], center[1], center[2]]
    object_radii[idx] = radius
    object_normals[idx] = [normal[0], normal[1], normal[2]]

    object_colors[idx] = [material.color[0], material.color[1], material.color[2]]
    object_ambient_k[idx] = material.ambient_k
    object_diffuse_k[idx] = material.diffuse_k
    object_specular_k[idx] = material.specular_k
    object_reflective_k[idx] = material.reflective_k
    object_specular_exponents[idx] = material.specular_exponent

    num_objects[None] = idx + 1
    return idx


def add_sphere(
    center: tuple[float, float, float],
    radius: float,
    material: Material,
) -> int:
    """Append a sphere to the object table.

    Args:
        center: The center point of the sphere.
        radius: The radius of the sphere (should be positive).
        material: The sphere's material constants.

    Returns:
        The object id of the added sphere.

    Raises:
        RuntimeError: If the maximum number of objects is exceeded.
    """
    return _add_object(ObjectKind.SPHERE, center, radius, (0.0, 0.0, 0.0), material)


def add_plane(
    center: tuple[float, float, float],
    normal: tuple[float, float, float],
    material: Material,
) -> int:
    """Append a plane to the object table.

    Args:
        center: Any point on the plane.
        normal: The plane normal (need not be unit length).
        material: The plane's material constants.

    Returns:
        The object id of the added plane.

    Raises:
        RuntimeError: If the maximum number of objects is exceeded.
    """
    return _add_object(ObjectKind.PLANE, center, 0.0, normal, material)


def add_light(position: tuple[float, float, float]) -> int:
    """Append a point light.

    Args:
        position: The light position in world space.

    Returns:
        The index of the added light.

    Raises:
        RuntimeError: If the maximum number of lights is exceeded.
    """
    idx = num_lights[None]
    if idx >= MAX_LIGHTS:
        raise RuntimeError(f"Maximum number of lights ({MAX_LIGHTS}) exceeded")
    light_positions[idx] = [position[0], position[1], position[2]]
    num_lights[None] = idx + 1
    return idx


def get_object_count() -> int:
    """Get the number of objects in the scene."""
    return int(num_objects[None])


def get_light_count() -> int:
    """Get the number of lights in the scene."""
    return int(num_lights[None])


# =============================================================================
# Per-object dispatch
# =============================================================================


@ti.func
def intersect_object(
    object_id: ti.i32,
    ray_origin: vec3,
    ray_direction: vec3,
    bias: ti.f32,
) -> Intersection:
    """Intersect a ray with one row of the object table.

    Dispatches on the row's kind tag.

    Args:
        object_id: Row in the object table.
        ray_origin: The starting point of the ray.
        ray_direction: The unit direction of the ray.
        bias: Distance the hit point is pulled back along the ray.

    Returns:
        The primitive's Intersection record.
    """
    result = make_miss()
    kind = object_kinds[object_id]
    if kind == int(ObjectKind.SPHERE):
        sphere = make_sphere(object_centers[object_id], object_radii[object_id])
        result = intersect_sphere(ray_origin, ray_direction, sphere, bias)
    elif kind == int(ObjectKind.PLANE):
        plane = make_plane(object_centers[object_id], object_normals[object_id])
        result = intersect_plane(ray_origin, ray_direction, plane, bias)
    return result


@ti.func
def object_normal(object_id: ti.i32, point: vec3) -> vec3:
    """Unit surface normal of an object at a point.

    Spheres use the direction from their center; planes use their stored
    normal regardless of the point.
    """
    normal = vec3(0.0, 0.0, 0.0)
    kind = object_kinds[object_id]
    if kind == int(ObjectKind.SPHERE):
        sphere = make_sphere(object_centers[object_id], object_radii[object_id])
        normal = sphere_normal(sphere, point)
    elif kind == int(ObjectKind.PLANE):
        plane = make_plane(object_centers[object_id], object_normals[object_id])
        normal = plane_normal(plane)
    return normal


# =============================================================================
# Scene traversal
# =============================================================================


@ti.func
def _make_miss_record() -> SceneHit:
    """Create a SceneHit indicating no intersection."""
    return SceneHit(hit=0, distance=0.0, point=vec3(0.0, 0.0, 0.0), object_id=-1)


@ti.func
def intersect_objects(
    ray_origin: vec3,
    ray_direction: vec3,
    bias: ti.f32,
) -> SceneHit:
    """Find the closest object hit by a ray.

    Scans every object in insertion order and keeps the intersection with the
    strictly smallest distance, so on an exact tie the earlier object wins.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The unit direction of the ray.
        bias: Distance hit points are pulled back along the ray.

    Returns:
        The closest SceneHit, or a miss record (hit == 0, object_id == -1).
    """
    closest_distance = tm.inf
    result = _make_miss_record()

    # Serial even when inlined as a kernel's outermost loop
    ti.loop_config(serialize=True)
    for i in range(num_objects[None]):
        rec = intersect_object(i, ray_origin, ray_direction, bias)
        if rec.hit == 1 and rec.distance < closest_distance:
            closest_distance = rec.distance
            result = SceneHit(hit=1, distance=rec.distance, point=rec.point, object_id=i)

    return result
