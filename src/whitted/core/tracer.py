"""Recursive Whitted-style tracer: shadow tests, local shading, reflections.

The tracer is defined recursively:

    trace(ray, depth):
        depth > max_depth  -> background color
        no hit             -> nothing (the ray escaped the scene)
        hit                -> shade(ray, hit, depth)

    shade(ray, hit, depth):
        local = object color * (ambient + diffuse + specular)
        if depth < max_depth and reflections are enabled:
            r = trace(reflected ray, depth + 1)
            if r exists: return local + reflective_k * r
        return local

Taichi functions cannot recurse, so shade() unrolls the chain of reflection
bounces into a loop carrying the product of reflective coefficients seen so
far. Each loop iteration is one trace frame of the recursive definition and
the loop ends exactly where the recursion would return, so colors and frame
counts match the recursive form.

Render parameters travel as a RenderSettings struct built from a RenderConfig
inside each kernel; nothing here reads global configuration.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.core.config import RenderConfig
    >>> from whitted.core.tracer import trace_ray
    >>> outcome = trace_ray((0, 0, 0), (0, 0, -1), RenderConfig())
    >>> outcome.color is None  # empty scene: the ray escapes
    True
"""

from dataclasses import dataclass

import taichi as ti
import taichi.math as tm

from whitted.core.config import RenderConfig
from whitted.core.ray import normalize, reflect
from whitted.materials.phong import diffuse_term, specular_term
from whitted.scene.intersection import (
    SceneHit,
    intersect_objects,
    light_positions,
    num_lights,
    object_ambient_k,
    object_colors,
    object_diffuse_k,
    object_normal,
    object_reflective_k,
    object_specular_exponents,
    object_specular_k,
)

# Type alias for 3D vectors
vec3 = tm.vec3


@ti.dataclass
class RenderSettings:
    """Kernel-side copy of a RenderConfig.

    Toggles are stored as integers (1 = enabled).
    """

    max_depth: ti.i32
    background: vec3
    ambient: ti.i32
    diffuse: ti.i32
    specular: ti.i32
    reflection: ti.i32
    bias: ti.f32


@ti.dataclass
class TraceResult:
    """Result of a trace or shade call.

    Attributes:
        found: 1 if a color was produced, 0 if the ray escaped the scene.
        color: The unclamped RGB color. Only valid if found == 1.
        evaluations: Number of trace frames evaluated to produce it.
    """

    found: ti.i32
    color: vec3
    evaluations: ti.i32


def settings_args(config: RenderConfig) -> tuple:
    """Flatten a RenderConfig into kernel arguments.

    The order matches make_settings(): max_depth, background r/g/b, the four
    toggles, bias.
    """
    return (
        config.max_depth,
        config.background_color[0],
        config.background_color[1],
        config.background_color[2],
        int(config.ambient_enabled),
        int(config.diffuse_enabled),
        int(config.specular_enabled),
        int(config.reflection_enabled),
        config.bias,
    )


@ti.func
def make_settings(
    max_depth: ti.i32,
    bg_r: ti.f32,
    bg_g: ti.f32,
    bg_b: ti.f32,
    ambient: ti.i32,
    diffuse: ti.i32,
    specular: ti.i32,
    reflection: ti.i32,
    bias: ti.f32,
) -> RenderSettings:
    """Build RenderSettings from the arguments produced by settings_args()."""
    return RenderSettings(
        max_depth=max_depth,
        background=vec3(bg_r, bg_g, bg_b),
        ambient=ambient,
        diffuse=diffuse,
        specular=specular,
        reflection=reflection,
        bias=bias,
    )


# =============================================================================
# Shadows
# =============================================================================


@ti.func
def is_in_shadow(point: vec3, light_position: vec3, bias: ti.f32) -> ti.i32:
    """Test whether anything lies along the ray from a point toward a light.

    Any hit with positive distance counts as an occluder. The occluder is not
    required to lie between the point and the light: objects beyond the light
    along the same ray also cast a shadow.

    Args:
        point: The (biased) surface point being shaded.
        light_position: The light position.
        bias: Hit point bias for the shadow ray.

    Returns:
        1 if the point is occluded, 0 otherwise.
    """
    direction = normalize(light_position - point)
    hit = intersect_objects(point, direction, bias)
    occluded = 0
    if hit.hit == 1 and hit.distance > 0.0:
        occluded = 1
    return occluded


# =============================================================================
# Shading
# =============================================================================


@ti.func
def local_color(
    ray_direction: vec3,
    hit: SceneHit,
    normal: vec3,
    settings: RenderSettings,
) -> vec3:
    """Ambient, diffuse and specular shading of a hit, without reflections.

    Diffuse and specular contributions are summed over every light that is
    not in shadow. Disabled terms contribute nothing.

    Args:
        ray_direction: Unit direction of the ray that produced the hit.
        hit: The hit being shaded.
        normal: Unit surface normal at the hit point.
        settings: Render settings.

    Returns:
        The object color scaled by the combined intensity.
    """
    obj = hit.object_id
    diffuse = 0.0
    specular = 0.0

    ti.loop_config(serialize=True)
    for i in range(num_lights[None]):
        light_position = light_positions[i]
        if is_in_shadow(hit.point, light_position, settings.bias) == 0:
            light_direction = normalize(light_position - hit.point)
            diffuse += diffuse_term(object_diffuse_k[obj], light_direction, normal)
            specular += specular_term(
                object_specular_k[obj],
                object_specular_exponents[obj],
                light_direction,
                ray_direction,
                normal,
            )

    total = 0.0
    if settings.ambient == 1:
        total += object_ambient_k[obj]
    if settings.diffuse == 1:
        total += diffuse
    if settings.specular == 1:
        total += specular

    return object_colors[obj] * total


@ti.func
def shade(
    ray_origin: vec3,
    ray_direction: vec3,
    hit: SceneHit,
    depth: ti.i32,
    settings: RenderSettings,
) -> TraceResult:
    """Shade a hit and follow its mirror reflections.

    Args:
        ray_origin: Origin of the ray that produced the hit.
        ray_direction: Unit direction of that ray.
        hit: The hit to shade (hit.hit must be 1).
        depth: Number of bounces already taken by the ray.
        settings: Render settings.

    Returns:
        A TraceResult with found == 1. evaluations counts the reflection
        traces started from this hit.
    """
    normal = object_normal(hit.object_id, hit.point)
    color = local_color(ray_direction, hit, normal, settings)

    # State of the innermost frame of the unrolled recursion
    weight = 1.0
    level = depth
    current = hit
    current_normal = normal
    direction = ray_direction
    evaluations = 0

    active = 1
    while active == 1:
        active = 0
        if level < settings.max_depth and settings.reflection == 1:
            reflected_origin = current.point
            reflected_direction = reflect(direction, current_normal)
            level += 1
            evaluations += 1

            next_hit = intersect_objects(reflected_origin, reflected_direction, settings.bias)
            if next_hit.hit == 1:
                weight *= object_reflective_k[current.object_id]
                next_normal = object_normal(next_hit.object_id, next_hit.point)
                color += weight * local_color(reflected_direction, next_hit, next_normal, settings)

                current = next_hit
                current_normal = next_normal
                direction = reflected_direction
                active = 1

    return TraceResult(found=1, color=color, evaluations=evaluations)


@ti.func
def trace(
    ray_origin: vec3,
    ray_direction: vec3,
    depth: ti.i32,
    settings: RenderSettings,
) -> TraceResult:
    """Trace a ray into the scene.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The unit direction of the ray.
        depth: Number of bounces already taken (0 for primary rays).
        settings: Render settings.

    Returns:
        The background color if depth exceeds max_depth, the shaded color on
        a hit, or a result with found == 0 if the ray escaped.
    """
    found = 0
    color = vec3(0.0, 0.0, 0.0)
    evaluations = 1

    if depth > settings.max_depth:
        found = 1
        color = settings.background
    else:
        hit = intersect_objects(ray_origin, ray_direction, settings.bias)
        if hit.hit == 1:
            shaded = shade(ray_origin, ray_direction, hit, depth, settings)
            found = 1
            color = shaded.color
            evaluations += shaded.evaluations

    return TraceResult(found=found, color=color, evaluations=evaluations)


# =============================================================================
# Python-callable queries (testing and debugging)
# =============================================================================


@dataclass
class TraceOutcome:
    """Host-side result of trace_ray().

    Attributes:
        color: The traced RGB color, or None if the ray escaped.
        evaluations: Number of trace frames evaluated.
    """

    color: tuple[float, float, float] | None
    evaluations: int


_trace_color = ti.Vector.field(3, dtype=ti.f32, shape=())
_trace_found = ti.field(dtype=ti.i32, shape=())
_trace_evaluations = ti.field(dtype=ti.i32, shape=())


@ti.kernel
def _trace_ray_kernel(
    ox: ti.f32,
    oy: ti.f32,
    oz: ti.f32,
    dx: ti.f32,
    dy: ti.f32,
    dz: ti.f32,
    depth: ti.i32,
    max_depth: ti.i32,
    bg_r: ti.f32,
    bg_g: ti.f32,
    bg_b: ti.f32,
    ambient: ti.i32,
    diffuse: ti.i32,
    specular: ti.i32,
    reflection: ti.i32,
    bias: ti.f32,
):
    settings = make_settings(
        max_depth, bg_r, bg_g, bg_b, ambient, diffuse, specular, reflection, bias
    )
    direction = normalize(vec3(dx, dy, dz))
    result = trace(vec3(ox, oy, oz), direction, depth, settings)
    _trace_found[None] = result.found
    _trace_color[None] = result.color
    _trace_evaluations[None] = result.evaluations


def trace_ray(
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
    config: RenderConfig,
    depth: int = 0,
) -> TraceOutcome:
    """Trace a single ray against the current scene.

    Args:
        origin: Ray origin.
        direction: Ray direction (normalized before tracing).
        config: Render configuration.
        depth: Starting bounce depth.

    Returns:
        A TraceOutcome; color is None when the ray escaped the scene.
    """
    _trace_ray_kernel(
        origin[0],
        origin[1],
        origin[2],
        direction[0],
        direction[1],
        direction[2],
        depth,
        *settings_args(config),
    )
    color = None
    if _trace_found[None] == 1:
        c = _trace_color[None]
        color = (float(c[0]), float(c[1]), float(c[2]))
    return TraceOutcome(color=color, evaluations=int(_trace_evaluations[None]))


_shadow_result = ti.field(dtype=ti.i32, shape=())


@ti.kernel
def _shadow_kernel(
    px: ti.f32, py: ti.f32, pz: ti.f32, lx: ti.f32, ly: ti.f32, lz: ti.f32, bias: ti.f32
):
    _shadow_result[None] = is_in_shadow(vec3(px, py, pz), vec3(lx, ly, lz), bias)


def point_in_shadow(
    point: tuple[float, float, float],
    light_position: tuple[float, float, float],
    bias: float,
) -> bool:
    """Python-side shadow query against the current scene."""
    _shadow_kernel(
        point[0], point[1], point[2], light_position[0], light_position[1], light_position[2], bias
    )
    return bool(_shadow_result[None])
