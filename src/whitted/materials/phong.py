"""Phong-style surface material with mirror reflectivity.

Every scene object carries one of these materials. The shading model is the
classic local illumination model:

    intensity = ka + sum_lights(kd * max(dot(l, n), 0))
                   + sum_lights(ks * max(dot(h, n), 0) ^ e)
    color     = base_color * intensity

where l is the unit direction to the light, n the surface normal and
h = normalize(l - d) the half vector between the light and the viewer. Mirror
reflections are weighted by the scalar reflective coefficient kr.

Example:
    >>> from whitted.materials.phong import Material
    >>> chrome = Material(color=(0.8, 0.8, 0.8), specular_k=0.6, reflective_k=0.8)
    >>> chrome.validate()
"""

from dataclasses import dataclass
from typing import Any

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors
vec3 = tm.vec3


@dataclass(frozen=True)
class Material:
    """Material constants of a scene object.

    Attributes:
        color: Base RGB color, each component in [0, 1].
        ambient_k: Ambient coefficient (ka).
        diffuse_k: Diffuse coefficient (kd).
        specular_k: Specular coefficient (ks).
        reflective_k: Mirror reflection weight (kr).
        specular_exponent: Phong exponent (e); larger values give tighter
            highlights.
    """

    color: tuple[float, float, float] = (1.0, 1.0, 1.0)
    ambient_k: float = 0.0
    diffuse_k: float = 0.0
    specular_k: float = 0.0
    reflective_k: float = 0.0
    specular_exponent: float = 1.0

    def validate(self) -> None:
        """Check the material constants.

        Raises:
            ValueError: If the color is not three components in [0, 1], or
                any coefficient or the exponent is negative.
        """
        if len(self.color) != 3:
            raise ValueError(f"Color must have 3 components, got {len(self.color)}")
        for component in self.color:
            if not 0.0 <= component <= 1.0:
                raise ValueError(f"Color components must be in [0, 1], got {self.color}")

        coefficients = {
            "ambient_k": self.ambient_k,
            "diffuse_k": self.diffuse_k,
            "specular_k": self.specular_k,
            "reflective_k": self.reflective_k,
            "specular_exponent": self.specular_exponent,
        }
        for name, value in coefficients.items():
            if value < 0.0:
                raise ValueError(f"{name} must be non-negative, got {value}")

    def to_dict(self) -> dict[str, Any]:
        """Export using the scene document field names."""
        return {
            "color": list(self.color),
            "ambientK": self.ambient_k,
            "diffuseK": self.diffuse_k,
            "specularK": self.specular_k,
            "reflectiveK": self.reflective_k,
            "specularExponent": self.specular_exponent,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any], color_scale: float = 1.0) -> "Material":
        """Build a material from scene document fields.

        Missing coefficients default to zero, a missing color to white.

        Args:
            data: One object entry of a scene document.
            color_scale: Factor applied to the document color, 1/255 for
                documents written with 8-bit channels.
        """
        color_list = data.get("color", [1.0, 1.0, 1.0])
        return cls(
            color=tuple(float(c) * color_scale for c in color_list[:3]),
            ambient_k=float(data.get("ambientK", 0.0)),
            diffuse_k=float(data.get("diffuseK", 0.0)),
            specular_k=float(data.get("specularK", 0.0)),
            reflective_k=float(data.get("reflectiveK", 0.0)),
            specular_exponent=float(data.get("specularExponent", 1.0)),
        )


@ti.func
def diffuse_term(diffuse_k: ti.f32, light_direction: vec3, normal: vec3) -> ti.f32:
    """Lambert diffuse contribution of one light.

    Args:
        diffuse_k: The diffuse coefficient.
        light_direction: Unit vector from the surface point to the light.
        normal: Unit surface normal.

    Returns:
        kd * max(dot(l, n), 0).
    """
    return diffuse_k * tm.max(tm.dot(light_direction, normal), 0.0)


@ti.func
def specular_term(
    specular_k: ti.f32,
    specular_exponent: ti.f32,
    light_direction: vec3,
    ray_direction: vec3,
    normal: vec3,
) -> ti.f32:
    """Blinn half-vector specular contribution of one light.

    The cosine is clamped at zero before exponentiation; a negative base with
    a fractional exponent has no real value.

    Args:
        specular_k: The specular coefficient.
        specular_exponent: The highlight exponent.
        light_direction: Unit vector from the surface point to the light.
        ray_direction: Unit direction of the incoming (viewing) ray.
        normal: Unit surface normal.

    Returns:
        ks * max(dot(h, n), 0) ^ e with h = normalize(l - d).
    """
    half_vector = tm.normalize(light_direction - ray_direction)
    cos_h = tm.max(tm.dot(half_vector, normal), 0.0)
    return specular_k * cos_h**specular_exponent
