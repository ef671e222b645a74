"""Materials module for surface shading constants.

Components:
    phong: Per-object material (color, ambient/diffuse/specular/reflective
        coefficients, specular exponent) and the local illumination terms

The diffuse and specular terms are Taichi functions evaluated per light
inside the shading code; the Material dataclass is the host-side value used
when building scenes.
"""

from .phong import Material, diffuse_term, specular_term

__all__ = [
    "Material",
    "diffuse_term",
    "specular_term",
]
