"""Taichi-based Whitted-style recursive ray tracer.

This package renders scenes of spheres and planes lit by point lights, with:
- Ambient, diffuse and specular local shading
- Hard shadows
- Mirror reflections to a bounded depth

Subpackages:
    core: Vector utilities, render configuration, tracer and render loop
    geometry: Sphere and plane primitives and their intersection tests
    materials: Phong-style material constants and shading terms
    scene: Object storage, closest-hit traversal and scene documents
    camera: Pinhole camera with primary ray generation
    preview: Output surfaces, image export and interactive preview
"""

__version__ = "0.1.0"
