"""Pytest configuration for ray tracer tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls, which would
    invalidate the module-level fields of already imported modules.
    """
    ti.init(arch=ti.cpu, random_seed=42)
    yield


@pytest.fixture(autouse=True)
def clear_all_scene_data():
    """Clear the object and light tables before and after each test."""
    # Import here so Taichi is initialized first
    from whitted.scene.intersection import clear_scene

    clear_scene()
    yield
    clear_scene()


@pytest.fixture
def single_sphere_scene():
    """The reference scene: one diffuse sphere lit from above.

    Sphere at (0, 0, -5) with radius 1 and diffuse_k = 1 (all other
    coefficients zero), one light at (0, 5, -5), and a camera at the origin
    looking down -z with a 90 degree field of view.
    """
    from whitted.materials.phong import Material
    from whitted.scene.manager import SceneManager

    scene = SceneManager()
    scene.set_camera(position=(0.0, 0.0, 0.0), direction=(0.0, 0.0, -1.0), fov=90.0)
    scene.add_sphere((0.0, 0.0, -5.0), 1.0, Material(color=(1.0, 1.0, 1.0), diffuse_k=1.0))
    scene.add_light((0.0, 5.0, -5.0))
    return scene
