"""Ready-made scenes.

create_demo_scene() builds a small showcase for the Whitted model: a floor
plane and a back wall, three spheres of different finish, and two point
lights. Every shading term contributes something visible, so each of the
interactive toggles changes the picture.

The coordinate system is right-handed with Y up. The floor is the plane
y = 0 and the camera looks toward -Z.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.scene.presets import create_demo_scene
    >>> scene = create_demo_scene()
    >>> scene.get_sphere_count(), scene.get_plane_count()
    (3, 2)
"""

from whitted.materials.phong import Material
from whitted.scene.manager import SceneManager

# =============================================================================
# Demo Scene Constants
# =============================================================================

FLOOR_MATERIAL = Material(
    color=(0.75, 0.75, 0.72),
    ambient_k=0.15,
    diffuse_k=0.7,
    specular_k=0.0,
    reflective_k=0.25,
)
WALL_MATERIAL = Material(
    color=(0.55, 0.65, 0.8),
    ambient_k=0.2,
    diffuse_k=0.6,
)

# Spheres
MATTE_MATERIAL = Material(
    color=(0.85, 0.2, 0.15),
    ambient_k=0.1,
    diffuse_k=0.8,
    specular_k=0.1,
    specular_exponent=5.0,
)
GLOSSY_MATERIAL = Material(
    color=(0.2, 0.4, 0.9),
    ambient_k=0.1,
    diffuse_k=0.6,
    specular_k=0.6,
    reflective_k=0.2,
    specular_exponent=60.0,
)
MIRROR_MATERIAL = Material(
    color=(0.9, 0.9, 0.9),
    ambient_k=0.05,
    diffuse_k=0.1,
    specular_k=0.8,
    reflective_k=0.8,
    specular_exponent=200.0,
)

SPHERE_RADIUS = 1.0

LIGHT_POSITIONS = (
    (-4.0, 6.0, 4.0),
    (5.0, 4.0, 2.0),
)


# =============================================================================
# Demo Scene Factory
# =============================================================================


def create_demo_scene(sphere_radius: float = SPHERE_RADIUS) -> SceneManager:
    """Create the demo scene.

    Args:
        sphere_radius: Radius of the three spheres. Spheres rest on the floor
            whatever their size.

    Returns:
        A SceneManager holding the camera, lights and objects.

    Raises:
        ValueError: If sphere_radius is not positive.
    """
    scene = SceneManager()

    # Camera slightly above the floor, looking at the middle sphere
    scene.set_camera(
        position=(0.0, 2.0, 7.0),
        direction=(0.0, sphere_radius, 0.0),
        fov=60.0,
    )

    # Floor and back wall
    scene.add_plane(center=(0.0, 0.0, 0.0), normal=(0.0, 1.0, 0.0), material=FLOOR_MATERIAL)
    scene.add_plane(center=(0.0, 0.0, -6.0), normal=(0.0, 0.0, 1.0), material=WALL_MATERIAL)

    spacing = 2.5 * sphere_radius
    scene.add_sphere(
        center=(-spacing, sphere_radius, 0.0),
        radius=sphere_radius,
        material=MATTE_MATERIAL,
    )
    scene.add_sphere(
        center=(0.0, sphere_radius, -1.0),
        radius=sphere_radius,
        material=MIRROR_MATERIAL,
    )
    scene.add_sphere(
        center=(spacing, sphere_radius, 0.0),
        radius=sphere_radius,
        material=GLOSSY_MATERIAL,
    )

    for position in LIGHT_POSITIONS:
        scene.add_light(position)

    return scene
