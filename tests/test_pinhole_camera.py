"""Tests for the pinhole camera.

Tests cover:
- View basis construction from position and look-at target
- Image plane extents and pixel steps
- Primary ray generation across the field of view
- Input validation
"""

import math

import pytest
import taichi as ti


def _rays_for(pixels):
    """Generate primary rays for a list of (x, y) pixels."""
    from whitted.camera.pinhole import get_ray

    n = len(pixels)
    xs = ti.field(dtype=ti.i32, shape=n)
    ys = ti.field(dtype=ti.i32, shape=n)
    origins = ti.Vector.field(3, dtype=ti.f32, shape=n)
    directions = ti.Vector.field(3, dtype=ti.f32, shape=n)
    for i, (x, y) in enumerate(pixels):
        xs[i] = x
        ys[i] = y

    @ti.kernel
    def test_kernel():
        for i in range(n):
            ray = get_ray(xs[i], ys[i])
            origins[i] = ray.origin
            directions[i] = ray.direction

    test_kernel()
    return (
        [tuple(origins[i][k] for k in range(3)) for i in range(n)],
        [tuple(directions[i][k] for k in range(3)) for i in range(n)],
    )


class TestCameraSetup:
    """Tests for setup_camera."""

    def test_orthonormal_basis(self):
        """Test eye, right and up are unit length and mutually orthogonal."""
        from whitted.camera.pinhole import Camera, get_camera_info, setup_camera

        setup_camera(Camera(position=(1.0, 2.0, 3.0), direction=(-2.0, 0.5, -4.0), fov=70.0))
        info = get_camera_info()

        vectors = [info["eye"], info["right"], info["up"]]
        for v in vectors:
            assert math.sqrt(sum(c * c for c in v)) == pytest.approx(1.0, abs=1e-5)
        for a, b in ((0, 1), (0, 2), (1, 2)):
            dot = sum(x * y for x, y in zip(vectors[a], vectors[b]))
            assert abs(dot) < 1e-5

    def test_basis_looking_down_negative_z(self):
        """Test the standard orientation gives right = +x and up = +y."""
        from whitted.camera.pinhole import Camera, get_camera_info, setup_camera

        setup_camera(Camera(position=(0.0, 0.0, 0.0), direction=(0.0, 0.0, -1.0), fov=90.0))
        info = get_camera_info()

        assert info["eye"] == pytest.approx((0.0, 0.0, -1.0), abs=1e-6)
        assert info["right"] == pytest.approx((1.0, 0.0, 0.0), abs=1e-6)
        assert info["up"] == pytest.approx((0.0, 1.0, 0.0), abs=1e-6)

    def test_image_plane_extents(self):
        """Test half extents and pixel steps for a 90 degree, 5x3 camera."""
        from whitted.camera.pinhole import Camera, get_camera_info, setup_camera

        setup_camera(
            Camera(position=(0.0, 0.0, 0.0), direction=(0.0, 0.0, -1.0), fov=90.0, width=5, height=3)
        )
        info = get_camera_info()

        assert info["half_width"] == pytest.approx(1.0, abs=1e-6)
        assert info["half_height"] == pytest.approx(0.6, abs=1e-6)
        assert info["pixel_width"] == pytest.approx(0.5, abs=1e-6)
        assert info["pixel_height"] == pytest.approx(0.6, abs=1e-6)

    @pytest.mark.parametrize("width, height", [(1, 10), (10, 1), (0, 0)])
    def test_too_small_image_raises(self, width, height):
        """Test images narrower or shorter than 2 pixels are rejected."""
        from whitted.camera.pinhole import Camera, setup_camera

        camera = Camera(
            position=(0.0, 0.0, 0.0), direction=(0.0, 0.0, -1.0), fov=60.0, width=width, height=height
        )
        with pytest.raises(ValueError, match="at least 2x2"):
            setup_camera(camera)


class TestRayGeneration:
    """Tests for get_ray."""

    def test_center_ray_direction(self):
        """Test the middle pixel of an odd-sized image looks straight ahead."""
        from whitted.camera.pinhole import Camera, setup_camera

        setup_camera(
            Camera(position=(0.0, 0.0, 0.0), direction=(0.0, 0.0, -1.0), fov=60.0, width=5, height=5)
        )
        _, directions = _rays_for([(2, 2)])

        assert directions[0] == pytest.approx((0.0, 0.0, -1.0), abs=1e-6)

    def test_edge_pixels_span_field_of_view(self):
        """Test the first and last columns sit at -fov/2 and +fov/2."""
        from whitted.camera.pinhole import Camera, setup_camera

        setup_camera(
            Camera(position=(0.0, 0.0, 0.0), direction=(0.0, 0.0, -1.0), fov=90.0, width=3, height=3)
        )
        _, directions = _rays_for([(0, 1), (2, 1)])

        s = 1.0 / math.sqrt(2.0)
        assert directions[0] == pytest.approx((-s, 0.0, -s), abs=1e-6)
        assert directions[1] == pytest.approx((s, 0.0, -s), abs=1e-6)

    def test_row_zero_is_bottom(self):
        """Test y = 0 produces a downward-looking ray."""
        from whitted.camera.pinhole import Camera, setup_camera

        setup_camera(
            Camera(position=(0.0, 0.0, 0.0), direction=(0.0, 0.0, -1.0), fov=90.0, width=3, height=3)
        )
        _, directions = _rays_for([(1, 0), (1, 2)])

        assert directions[0][1] < 0.0
        assert directions[1][1] > 0.0

    def test_rays_start_at_camera_and_are_normalized(self):
        """Test every ray starts at the camera position with unit direction."""
        from whitted.camera.pinhole import Camera, setup_camera

        setup_camera(
            Camera(position=(1.0, 2.0, 3.0), direction=(0.0, 0.0, 0.0), fov=45.0, width=8, height=6)
        )
        origins, directions = _rays_for([(0, 0), (7, 5), (3, 2), (7, 0)])

        for origin, direction in zip(origins, directions):
            assert origin == pytest.approx((1.0, 2.0, 3.0), abs=1e-6)
            assert math.sqrt(sum(c * c for c in direction)) == pytest.approx(1.0, abs=1e-5)

    def test_get_camera_origin(self):
        """Test get_camera_origin returns the configured position."""
        from whitted.camera.pinhole import Camera, get_camera_origin, setup_camera

        setup_camera(Camera(position=(4.0, -1.0, 2.0), direction=(0.0, 0.0, 0.0), fov=50.0))
        result = ti.Vector.field(3, dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = get_camera_origin()

        test_kernel()
        r = result[None]
        assert (r[0], r[1], r[2]) == pytest.approx((4.0, -1.0, 2.0), abs=1e-6)
