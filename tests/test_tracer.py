"""Unit tests for recursive ray tracing.

Tests cover:
- Background color for rays that hit nothing
- Local shading for matte spheres
- Reflection blending and the recursion budget
- Termination between facing mirrors
"""

import math

import pytest
import taichi as ti


def _trace(buffers, origin, direction, depth, t_min=1.0, t_max=math.inf):
    """Run trace_ray in a kernel and return the color as a list."""
    from whitted.core.ray import make_ray, vec3
    from whitted.core.tracer import trace_ray

    result = ti.Vector.field(3, dtype=ti.f64, shape=())

    @ti.kernel
    def test_kernel(
        scene: ti.template(), o: vec3, d: vec3, lo: ti.f64, hi: ti.f64, depth: ti.i32
    ):
        result[None] = trace_ray(scene, make_ray(o, d), lo, hi, depth)

    test_kernel(buffers, vec3(*origin), vec3(*direction), t_min, t_max, depth)
    return list(result[None].to_numpy())


def _mirror_scene(front_reflective, background=(0, 0, 0), with_back=True, back_reflective=0.0):
    """A sphere in front of the origin and, optionally, one behind it.

    The front sphere at z=5 faces the back sphere at z=-5, so a ray along +z
    from the origin bounces straight back and forth between them.
    """
    from whitted.scene.model import AmbientLight, Scene, Sphere

    spheres = [
        Sphere(center=(0, 0, 5), radius=1, color=(100, 100, 100), reflective=front_reflective)
    ]
    if with_back:
        spheres.append(
            Sphere(center=(0, 0, -5), radius=1, color=(0, 200, 0), reflective=back_reflective)
        )
    return Scene(spheres=tuple(spheres), lights=(AmbientLight(1.0),), background=background)


class TestTraceRay:
    """Tests for trace_ray."""

    def test_miss_returns_background(self, make_buffers):
        """Test a ray that hits nothing returns the background color."""
        buffers = make_buffers(_mirror_scene(0.0, background=(10, 20, 30)))
        color = _trace(buffers, (0, 0, 0), (0, 1, 0), depth=3)
        assert color == pytest.approx([10.0, 20.0, 30.0])

    def test_matte_sphere_returns_local_color(self, make_buffers):
        """Test a non-reflective sphere returns intensity times its color."""
        from whitted.scene.presets import create_single_sphere_scene

        scene, _, _ = create_single_sphere_scene(ambient=0.2)
        buffers = make_buffers(scene)
        color = _trace(buffers, (0, 0, 0), (0, 0, 1), depth=3)
        assert color == pytest.approx([51.0, 0.0, 0.0], abs=1e-3)

    def test_depth_zero_disables_reflection(self, make_buffers):
        """Test depth 0 returns the local color even for a mirror."""
        buffers = make_buffers(_mirror_scene(0.5))
        color = _trace(buffers, (0, 0, 0), (0, 0, 1), depth=0)
        assert color == pytest.approx([100.0, 100.0, 100.0], abs=1e-3)

    def test_reflection_blend(self, make_buffers):
        """Test the color is local * (1 - r) + reflected * r."""
        buffers = make_buffers(_mirror_scene(0.5))
        color = _trace(buffers, (0, 0, 0), (0, 0, 1), depth=1)
        # 0.5 * (100, 100, 100) + 0.5 * (0, 200, 0)
        assert color == pytest.approx([50.0, 150.0, 50.0], abs=1e-3)

    def test_reflection_into_background(self, make_buffers):
        """Test a reflected ray that escapes picks up the background."""
        buffers = make_buffers(_mirror_scene(0.5, background=(200, 0, 0), with_back=False))
        color = _trace(buffers, (0, 0, 0), (0, 0, 1), depth=1)
        assert color == pytest.approx([150.0, 50.0, 50.0], abs=1e-3)

    def test_reflected_ray_uses_own_range(self, make_buffers):
        """Test reflected rays search (epsilon, inf), not the primary range.

        The back sphere is 8 units from the reflection point, beyond the
        primary t_max of 5, and is still found by the reflected ray.
        """
        buffers = make_buffers(_mirror_scene(0.5))
        color = _trace(buffers, (0, 0, 0), (0, 0, 1), depth=1, t_min=1.0, t_max=5.0)
        assert color == pytest.approx([50.0, 150.0, 50.0], abs=1e-3)

    @pytest.mark.parametrize(
        "depth,expected",
        [
            (0, [100.0, 100.0, 100.0]),
            (1, [0.0, 200.0, 0.0]),
            (2, [100.0, 100.0, 100.0]),
            (3, [0.0, 200.0, 0.0]),
            (8, [100.0, 100.0, 100.0]),
        ],
    )
    def test_facing_mirrors_terminate(self, make_buffers, depth, expected):
        """Test perfect mirrors facing each other stop at the depth limit.

        With reflectivity 1 every bounce contributes nothing locally, so the
        color is the local color of whichever mirror the last bounce reaches.
        """
        buffers = make_buffers(_mirror_scene(1.0, back_reflective=1.0))
        color = _trace(buffers, (0, 0, 0), (0, 0, 1), depth=depth)
        assert color == pytest.approx(expected, abs=1e-3)

    def test_result_is_not_clamped(self, make_buffers):
        """Test trace_ray leaves out-of-range colors for the renderer to clamp."""
        from whitted.scene.model import AmbientLight, Scene, Sphere

        scene = Scene(
            spheres=(Sphere(center=(0, 0, 5), radius=1, color=(200, 0, 0)),),
            lights=(AmbientLight(2.0),),
        )
        buffers = make_buffers(scene)
        color = _trace(buffers, (0, 0, 0), (0, 0, 1), depth=0)
        assert color[0] == pytest.approx(400.0, abs=1e-3)


class TestLargeSphereReflection:
    """Tests for reflections off the huge floor sphere of the demo scene."""

    def _floor_scene(self):
        from whitted.scene.model import AmbientLight, Scene, Sphere

        floor = Sphere(center=(0, -5001, 0), radius=5000, color=(255, 255, 0), reflective=0.5)
        return Scene(spheres=(floor,), lights=(AmbientLight(1.0),))

    @pytest.mark.parametrize("direction", [(0, -1, 2), (0.3, -1, 2), (1, -0.2, 2)])
    def test_reflection_escapes_floor(self, make_buffers, direction):
        """Test a reflected ray leaves the floor and picks up the background.

        A reflected ray that re-hits the floor adds more floor color on each
        remaining bounce instead of the black background.
        """
        buffers = make_buffers(self._floor_scene())
        color = _trace(buffers, (3, 2, -7), direction, depth=3)
        assert color == pytest.approx([127.5, 127.5, 0.0], abs=1e-3)
