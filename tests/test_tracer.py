"""Tests for shading and the bounded recursive tracer.

Tests cover:
- Escaped rays and rays started beyond the depth limit
- Local shading terms and their toggles
- Shadow tests, including occluders beyond the light
- Mirror reflections and the termination bound
"""

import math

import pytest

BIAS = 0.001


def _add_facing_sphere(material):
    """Sphere at (0, 0, 5) lit head-on from -z, viewed from the origin."""
    from whitted.scene.intersection import add_light, add_sphere

    add_sphere((0.0, 0.0, 5.0), 1.0, material)
    add_light((0.0, 0.0, -10.0))


def _trace_facing_sphere(config):
    from whitted.core.tracer import trace_ray

    return trace_ray((0.0, 0.0, 0.0), (0.0, 0.0, 1.0), config)


def _add_mirror_corridor(ambient_k=0.5, reflective_k=0.5):
    """Two facing mirrors at z = 0 and z = -10; rays bounce between them forever."""
    from whitted.materials.phong import Material
    from whitted.scene.intersection import add_plane

    mirror = Material(color=(1.0, 1.0, 1.0), ambient_k=ambient_k, reflective_k=reflective_k)
    add_plane((0.0, 0.0, 0.0), (0.0, 0.0, 1.0), mirror)
    add_plane((0.0, 0.0, -10.0), (0.0, 0.0, 1.0), mirror)


class TestTraceBasics:
    """Tests for trace results without shading."""

    def test_empty_scene_escapes(self):
        """Test a ray into an empty scene produces no color."""
        from whitted.core.config import RenderConfig
        from whitted.core.tracer import trace_ray

        outcome = trace_ray((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), RenderConfig())

        assert outcome.color is None
        assert outcome.evaluations == 1

    def test_beyond_max_depth_returns_background(self):
        """Test a trace started past max_depth returns the background."""
        from whitted.core.config import RenderConfig
        from whitted.core.tracer import trace_ray

        config = RenderConfig(max_depth=2, background_color=(0.1, 0.2, 0.3))
        outcome = trace_ray((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), config, depth=3)

        assert outcome.color is not None
        assert outcome.color == pytest.approx((0.1, 0.2, 0.3), abs=1e-6)
        assert outcome.evaluations == 1

    def test_at_max_depth_still_traces(self):
        """Test a trace started exactly at max_depth still hits objects."""
        from whitted.core.config import RenderConfig
        from whitted.core.tracer import trace_ray
        from whitted.materials.phong import Material
        from whitted.scene.intersection import add_sphere

        add_sphere((0.0, 0.0, -5.0), 1.0, Material(ambient_k=1.0))
        config = RenderConfig(max_depth=2)
        outcome = trace_ray((0.0, 0.0, -10.0), (0.0, 0.0, 1.0), config, depth=2)

        assert outcome.color == pytest.approx((1.0, 1.0, 1.0), abs=1e-6)
        assert outcome.evaluations == 1


class TestLocalShading:
    """Tests for ambient, diffuse and specular terms."""

    MATERIAL_ARGS = dict(
        color=(0.5, 0.25, 1.0),
        ambient_k=0.1,
        diffuse_k=0.6,
        specular_k=0.3,
        specular_exponent=1.0,
    )

    def test_full_shading(self):
        """Test a head-on light gives ka + kd + ks times the color."""
        from whitted.core.config import RenderConfig
        from whitted.materials.phong import Material

        _add_facing_sphere(Material(**self.MATERIAL_ARGS))
        outcome = _trace_facing_sphere(RenderConfig())

        assert outcome.color == pytest.approx((0.5, 0.25, 1.0), abs=1e-4)
        # Primary trace plus one reflection trace that escapes
        assert outcome.evaluations == 2

    @pytest.mark.parametrize(
        "enabled, scale",
        [
            ("ambient_enabled", 0.1),
            ("diffuse_enabled", 0.6),
            ("specular_enabled", 0.3),
        ],
    )
    def test_single_term(self, enabled, scale):
        """Test each term alone contributes its own coefficient."""
        from whitted.core.config import RenderConfig
        from whitted.materials.phong import Material

        _add_facing_sphere(Material(**self.MATERIAL_ARGS))
        flags = dict(
            ambient_enabled=False,
            diffuse_enabled=False,
            specular_enabled=False,
            reflection_enabled=False,
        )
        flags[enabled] = True
        outcome = _trace_facing_sphere(RenderConfig(**flags))

        expected = tuple(c * scale for c in self.MATERIAL_ARGS["color"])
        assert outcome.color == pytest.approx(expected, abs=1e-4)

    def test_all_terms_disabled_is_black(self):
        """Test disabling every term yields black, not an escaped ray."""
        from whitted.core.config import RenderConfig
        from whitted.materials.phong import Material

        _add_facing_sphere(Material(**self.MATERIAL_ARGS))
        config = RenderConfig(
            ambient_enabled=False,
            diffuse_enabled=False,
            specular_enabled=False,
            reflection_enabled=False,
        )
        outcome = _trace_facing_sphere(config)

        assert outcome.color == pytest.approx((0.0, 0.0, 0.0), abs=1e-6)

    def test_terms_sum_to_full_color(self):
        """Test the separately traced terms add up to the full shading."""
        from whitted.core.config import RenderConfig
        from whitted.materials.phong import Material

        _add_facing_sphere(
            Material(
                color=(0.9, 0.6, 0.3),
                ambient_k=0.2,
                diffuse_k=0.5,
                specular_k=0.4,
                specular_exponent=8.0,
            )
        )
        # Light off-axis so diffuse and specular differ from their coefficients
        from whitted.scene.intersection import add_light

        add_light((3.0, 4.0, -2.0))

        off = dict(
            ambient_enabled=False,
            diffuse_enabled=False,
            specular_enabled=False,
            reflection_enabled=False,
        )
        parts = [
            _trace_facing_sphere(RenderConfig(**{**off, name: True})).color
            for name in ("ambient_enabled", "diffuse_enabled", "specular_enabled")
        ]
        full = _trace_facing_sphere(RenderConfig(reflection_enabled=False)).color

        for i in range(3):
            assert full[i] == pytest.approx(sum(p[i] for p in parts), abs=1e-4)

    def test_light_behind_surface_adds_nothing(self):
        """Test diffuse and specular are clamped for lights behind the surface."""
        from whitted.core.config import RenderConfig
        from whitted.core.tracer import trace_ray
        from whitted.materials.phong import Material
        from whitted.scene.intersection import add_light, add_sphere

        add_sphere(
            (0.0, 0.0, 5.0), 1.0, Material(ambient_k=0.25, diffuse_k=1.0, specular_k=1.0)
        )
        # Light on the far side of the sphere, where it is also in shadow
        add_light((0.0, 0.0, 20.0))

        outcome = trace_ray(
            (0.0, 0.0, 0.0), (0.0, 0.0, 1.0), RenderConfig(reflection_enabled=False)
        )

        assert outcome.color == pytest.approx((0.25, 0.25, 0.25), abs=1e-5)


class TestShadows:
    """Tests for the shadow test and its effect on shading."""

    def test_occluder_between_point_and_light(self):
        """Test a sphere between the point and the light casts a shadow."""
        from whitted.core.tracer import point_in_shadow
        from whitted.materials.phong import Material
        from whitted.scene.intersection import add_sphere, clear_scene

        add_sphere((0.0, 5.0, 0.0), 1.0, Material())
        assert point_in_shadow((0.0, 0.0, 0.0), (0.0, 10.0, 0.0), BIAS) is True

        clear_scene()
        assert point_in_shadow((0.0, 0.0, 0.0), (0.0, 10.0, 0.0), BIAS) is False

    def test_occluder_beyond_light_still_shadows(self):
        """Test occluders are not limited to the segment toward the light."""
        from whitted.core.tracer import point_in_shadow
        from whitted.materials.phong import Material
        from whitted.scene.intersection import add_sphere

        add_sphere((0.0, 5.0, 0.0), 1.0, Material())

        assert point_in_shadow((0.0, 0.0, 0.0), (0.0, 3.0, 0.0), BIAS) is True

    def test_occluder_darkens_shading(self):
        """Test removing an occluder makes the shaded point strictly brighter."""
        from whitted.core.config import RenderConfig
        from whitted.core.tracer import trace_ray
        from whitted.materials.phong import Material
        from whitted.scene.intersection import add_light, add_plane, add_sphere, clear_scene

        floor = Material(color=(1.0, 1.0, 1.0), ambient_k=0.1, diffuse_k=0.9)
        origin = (3.0, 1.0, 0.0)
        direction = (-3.0 / math.sqrt(10.0), -1.0 / math.sqrt(10.0), 0.0)
        config = RenderConfig()

        add_plane((0.0, 0.0, 0.0), (0.0, 1.0, 0.0), floor)
        add_sphere((0.0, 5.0, 0.0), 1.0, Material(ambient_k=1.0))
        add_light((0.0, 10.0, 0.0))
        shadowed = trace_ray(origin, direction, config).color

        clear_scene()
        add_plane((0.0, 0.0, 0.0), (0.0, 1.0, 0.0), floor)
        add_light((0.0, 10.0, 0.0))
        lit = trace_ray(origin, direction, config).color

        assert shadowed == pytest.approx((0.1, 0.1, 0.1), abs=1e-4)
        assert all(lit[i] > shadowed[i] for i in range(3))


class TestReflections:
    """Tests for mirror reflections and recursion depth."""

    def test_reflections_accumulate_geometrically(self):
        """Test two bounces add kr and kr^2 weighted local colors."""
        from whitted.core.config import RenderConfig
        from whitted.core.tracer import trace_ray

        _add_mirror_corridor(ambient_k=0.5, reflective_k=0.5)
        outcome = trace_ray((0.0, 0.0, -5.0), (0.0, 0.0, -1.0), RenderConfig(max_depth=2))

        # 0.5 + 0.5 * (0.5 + 0.5 * 0.5)
        assert outcome.color == pytest.approx((0.875, 0.875, 0.875), abs=1e-4)
        assert outcome.evaluations == 3

    def test_reflection_disabled(self):
        """Test disabling reflection stops after the primary hit."""
        from whitted.core.config import RenderConfig
        from whitted.core.tracer import trace_ray

        _add_mirror_corridor()
        config = RenderConfig(max_depth=5, reflection_enabled=False)
        outcome = trace_ray((0.0, 0.0, -5.0), (0.0, 0.0, -1.0), config)

        assert outcome.color == pytest.approx((0.5, 0.5, 0.5), abs=1e-5)
        assert outcome.evaluations == 1

    @pytest.mark.parametrize("max_depth", [0, 1, 3, 8])
    def test_termination_bound(self, max_depth):
        """Test an endless mirror corridor evaluates exactly max_depth + 1 frames."""
        from whitted.core.config import RenderConfig
        from whitted.core.tracer import trace_ray

        _add_mirror_corridor(ambient_k=0.1, reflective_k=1.0)
        outcome = trace_ray(
            (0.0, 0.0, -5.0), (0.0, 0.0, -1.0), RenderConfig(max_depth=max_depth)
        )

        assert outcome.evaluations == max_depth + 1
        # Every bounce adds the same ambient color at full weight
        assert outcome.color == pytest.approx((0.1 * (max_depth + 1),) * 3, abs=1e-4)

    def test_escaped_reflection_keeps_local_color(self):
        """Test a reflection that escapes the scene leaves the local color."""
        from whitted.core.config import RenderConfig
        from whitted.core.tracer import trace_ray
        from whitted.materials.phong import Material
        from whitted.scene.intersection import add_plane

        add_plane(
            (0.0, 0.0, -10.0),
            (0.0, 0.0, 1.0),
            Material(color=(0.2, 0.4, 0.6), ambient_k=1.0, reflective_k=1.0),
        )
        outcome = trace_ray((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), RenderConfig(max_depth=4))

        assert outcome.color == pytest.approx((0.2, 0.4, 0.6), abs=1e-5)
        assert outcome.evaluations == 2
