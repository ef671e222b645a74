"""Scene manager: camera, lights and objects of one renderable scene.

The SceneManager keeps a host-side record of everything in the scene and
mirrors it into the Taichi object and light tables of
whitted.scene.intersection. Objects keep their insertion order, which is the
order traversal visits them in.

Several managers may exist at once but the Taichi tables hold only one scene;
upload() rewrites the tables from a manager's records, and render() calls it
before every frame.

Scenes are exchanged as JSON documents of the form:

    {
        "camera": {"position": [0, 0, 5], "direction": [0, 0, 0], "fov": 60},
        "lights": [{"position": [5, 5, 5]}],
        "objects": [
            {"type": "sphere", "center": [0, 0, 0], "radius": 1,
             "color": [1, 0, 0], "ambientK": 0.1, "diffuseK": 0.7,
             "specularK": 0.3, "reflectiveK": 0.2, "specularExponent": 20},
            {"type": "plane", "center": [0, -1, 0], "normal": [0, 1, 0], ...}
        ]
    }

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.materials.phong import Material
    >>> from whitted.scene.manager import SceneManager
    >>> scene = SceneManager()
    >>> scene.add_sphere((0, 0, -5), 1.0, Material(color=(1, 0, 0), diffuse_k=0.8))
    0
    >>> scene.add_light((5, 5, 0))
    0
"""

import json
from dataclasses import dataclass
from typing import Any

from whitted.camera.pinhole import Camera
from whitted.materials.phong import Material
from whitted.scene.intersection import (
    MAX_LIGHTS,
    MAX_OBJECTS,
    add_light,
    add_plane,
    add_sphere,
    clear_scene,
    get_light_count,
    get_object_count,
)

# Camera used until a scene sets its own
DEFAULT_CAMERA = Camera(position=(0.0, 0.0, 0.0), direction=(0.0, 0.0, -1.0), fov=60.0)


def _vec3(values: Any, name: str) -> tuple[float, float, float]:
    """Convert a three-element sequence from a scene document."""
    try:
        count = len(values)
    except TypeError:
        count = None
    if count != 3:
        raise ValueError(f"{name} must have 3 components, got {values!r}")
    return (float(values[0]), float(values[1]), float(values[2]))


def _document_color_scale(objects: list[dict[str, Any]]) -> float:
    """Scale that maps the document's colors into [0, 1].

    Documents written with 8-bit channels carry colors such as [255, 0, 0].
    If any object color has a component above 1, every color in the
    document is read on the 0-255 scale.
    """
    for obj in objects:
        if any(float(c) > 1.0 for c in obj.get("color", ())):
            return 1.0 / 255.0
    return 1.0


@dataclass
class SphereInfo:
    """Information about a sphere in the scene.

    Attributes:
        object_id: Row of the sphere in the object table.
        center: The center of the sphere.
        radius: The radius of the sphere.
        material: The sphere's material constants.
    """

    object_id: int
    center: tuple[float, float, float]
    radius: float
    material: Material


@dataclass
class PlaneInfo:
    """Information about a plane in the scene.

    Attributes:
        object_id: Row of the plane in the object table.
        center: Any point on the plane.
        normal: The plane normal as given (not normalized).
        material: The plane's material constants.
    """

    object_id: int
    center: tuple[float, float, float]
    normal: tuple[float, float, float]
    material: Material


@dataclass
class LightInfo:
    """Information about a point light.

    Attributes:
        light_index: Row of the light in the light table.
        position: The light position in world space.
    """

    light_index: int
    position: tuple[float, float, float]


class SceneManager:
    """Host-side scene description mirrored into the Taichi scene tables.

    Attributes:
        camera: The scene camera. Its width and height are replaced by the
            output surface size at render time.
        objects: SphereInfo and PlaneInfo records in insertion order.
        lights: LightInfo records in insertion order.

    Example:
        >>> scene = SceneManager()
        >>> scene.set_camera(position=(0, 1, 5), direction=(0, 0, 0), fov=45)
        >>> scene.add_plane((0, -1, 0), (0, 1, 0), Material(ambient_k=0.2, diffuse_k=0.6))
        >>> scene.add_sphere((0, 0, 0), 1.0, Material(color=(0.9, 0.2, 0.2), diffuse_k=0.7))
        >>> scene.add_light((4, 6, 4))
    """

    def __init__(self, camera: Camera | None = None) -> None:
        """Initialize an empty scene."""
        self.camera = camera if camera is not None else DEFAULT_CAMERA
        self.objects: list[SphereInfo | PlaneInfo] = []
        self.lights: list[LightInfo] = []
        self._clear_all()

    def _clear_all(self) -> None:
        """Clear the Taichi tables and local tracking."""
        clear_scene()
        self.objects.clear()
        self.lights.clear()

    def clear(self) -> None:
        """Remove every object and light. The camera is kept."""
        self._clear_all()

    # =========================================================================
    # Camera
    # =========================================================================

    def set_camera(
        self,
        position: tuple[float, float, float],
        direction: tuple[float, float, float],
        fov: float,
    ) -> Camera:
        """Set the camera position, look-at target and field of view.

        Args:
            position: Camera position in world space.
            direction: Point the camera looks at.
            fov: Horizontal field of view in degrees, in (0, 180).

        Returns:
            The new camera.

        Raises:
            ValueError: If fov is out of range or position equals direction.
        """
        if not 0.0 < fov < 180.0:
            raise ValueError(f"fov must be in (0, 180) degrees, got {fov}")
        if tuple(position) == tuple(direction):
            raise ValueError("Camera position and look-at target must differ")

        self.camera = Camera(
            position=_vec3(position, "camera position"),
            direction=_vec3(direction, "camera direction"),
            fov=float(fov),
            width=self.camera.width,
            height=self.camera.height,
        )
        return self.camera

    # =========================================================================
    # Primitive Management
    # =========================================================================

    def add_sphere(
        self,
        center: tuple[float, float, float],
        radius: float,
        material: Material,
    ) -> int:
        """Add a sphere to the scene.

        Args:
            center: The center point of the sphere as (x, y, z).
            radius: The radius of the sphere.
            material: The sphere's material constants.

        Returns:
            The object id of the added sphere.

        Raises:
            RuntimeError: If the maximum number of objects is exceeded.
            ValueError: If the radius is not positive or the material is invalid.
        """
        if radius <= 0.0:
            raise ValueError(f"Sphere radius must be positive, got {radius}")
        material.validate()

        object_id = add_sphere(center, radius, material)
        self.objects.append(
            SphereInfo(object_id=object_id, center=center, radius=radius, material=material)
        )
        return object_id

    def add_plane(
        self,
        center: tuple[float, float, float],
        normal: tuple[float, float, float],
        material: Material,
    ) -> int:
        """Add an infinite plane to the scene.

        Args:
            center: Any point on the plane as (x, y, z).
            normal: The plane normal; normalized when used.
            material: The plane's material constants.

        Returns:
            The object id of the added plane.

        Raises:
            RuntimeError: If the maximum number of objects is exceeded.
            ValueError: If the normal is the zero vector or the material is
                invalid.
        """
        if all(component == 0.0 for component in normal):
            raise ValueError("Plane normal must be non-zero")
        material.validate()

        object_id = add_plane(center, normal, material)
        self.objects.append(
            PlaneInfo(object_id=object_id, center=center, normal=normal, material=material)
        )
        return object_id

    def add_light(self, position: tuple[float, float, float]) -> int:
        """Add a point light to the scene.

        Returns:
            The index of the added light.

        Raises:
            RuntimeError: If the maximum number of lights is exceeded.
        """
        light_index = add_light(position)
        self.lights.append(LightInfo(light_index=light_index, position=position))
        return light_index

    def upload(self) -> None:
        """Rewrite the Taichi scene tables from this scene's records.

        Object ids are reassigned in insertion order.
        """
        clear_scene()
        for info in self.objects:
            if isinstance(info, SphereInfo):
                info.object_id = add_sphere(info.center, info.radius, info.material)
            else:
                info.object_id = add_plane(info.center, info.normal, info.material)
        for light in self.lights:
            light.light_index = add_light(light.position)

    # =========================================================================
    # Scene Queries
    # =========================================================================

    def get_object_count(self) -> int:
        """Get the number of objects in the Taichi object table."""
        return get_object_count()

    def get_light_count(self) -> int:
        """Get the number of lights in the Taichi light table."""
        return get_light_count()

    def get_sphere_count(self) -> int:
        """Get the number of spheres in the scene."""
        return sum(1 for info in self.objects if isinstance(info, SphereInfo))

    def get_plane_count(self) -> int:
        """Get the number of planes in the scene."""
        return sum(1 for info in self.objects if isinstance(info, PlaneInfo))

    # =========================================================================
    # Scene Serialization
    # =========================================================================

    def to_dict(self) -> dict[str, Any]:
        """Export the scene as a JSON-compatible scene document."""
        objects: list[dict[str, Any]] = []
        for info in self.objects:
            if isinstance(info, SphereInfo):
                entry: dict[str, Any] = {
                    "type": "sphere",
                    "center": list(info.center),
                    "radius": info.radius,
                }
            else:
                entry = {
                    "type": "plane",
                    "center": list(info.center),
                    "normal": list(info.normal),
                }
            entry.update(info.material.to_dict())
            objects.append(entry)

        return {
            "camera": {
                "position": list(self.camera.position),
                "direction": list(self.camera.direction),
                "fov": self.camera.fov,
            },
            "lights": [{"position": list(light.position)} for light in self.lights],
            "objects": objects,
        }

    def from_dict(self, data: dict[str, Any]) -> None:
        """Load a scene document, replacing the current scene.

        Args:
            data: Dictionary with 'camera', 'lights' and 'objects' keys.

        Raises:
            ValueError: If the document is malformed, names an unknown object
                type or gives a non-positive sphere radius.

        Colors are read on the 0-255 scale when any object color has a
        component above 1.
        """
        self.clear()

        camera = data.get("camera")
        if camera is not None:
            self.set_camera(
                position=_vec3(camera.get("position"), "camera position"),
                direction=_vec3(camera.get("direction"), "camera direction"),
                fov=float(camera.get("fov", DEFAULT_CAMERA.fov)),
            )

        for light in data.get("lights", []):
            self.add_light(_vec3(light.get("position"), "light position"))

        objects = data.get("objects", [])
        color_scale = _document_color_scale(objects)
        for obj in objects:
            obj_type = str(obj.get("type", "")).lower()
            material = Material.from_dict(obj, color_scale)
            center = _vec3(obj.get("center"), f"{obj_type} center")
            if obj_type == "sphere":
                self.add_sphere(center, float(obj.get("radius", 0.0)), material)
            elif obj_type == "plane":
                self.add_plane(center, _vec3(obj.get("normal"), "plane normal"), material)
            else:
                raise ValueError(f"Unknown object type: {obj_type!r}")

    def save(self, filepath: str) -> None:
        """Write the scene document to a JSON file."""
        with open(filepath, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2)

    # =========================================================================
    # Capacity Information
    # =========================================================================

    @staticmethod
    def get_max_objects() -> int:
        """Get the maximum number of objects supported."""
        return MAX_OBJECTS

    @staticmethod
    def get_max_lights() -> int:
        """Get the maximum number of lights supported."""
        return MAX_LIGHTS

    def __repr__(self) -> str:
        """Return a string representation of the scene."""
        return f"SceneManager(objects={len(self.objects)}, lights={len(self.lights)})"


def load_scene(filepath: str) -> SceneManager:
    """Load a scene from a JSON scene document.

    Args:
        filepath: Path to the JSON file.

    Returns:
        A new SceneManager holding the scene.

    Raises:
        OSError: If the file cannot be read.
        json.JSONDecodeError: If the file is not valid JSON.
        ValueError: If the document is not a valid scene.
    """
    with open(filepath, encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"Scene document must be a JSON object, got {type(data).__name__}")

    scene = SceneManager()
    scene.from_dict(data)
    return scene
