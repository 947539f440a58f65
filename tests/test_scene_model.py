"""Unit tests for the host-side scene records.

Tests cover:
- Sphere validation and normalization
- Light variants and their validation
- Scene construction and helpers
"""

import dataclasses
import math

import pytest


class TestSphere:
    """Tests for the Sphere record."""

    def test_defaults(self):
        """Test a sphere with only center and radius."""
        from whitted.scene.model import Sphere

        sphere = Sphere(center=(0, 0, 5), radius=1)
        assert sphere.center == (0.0, 0.0, 5.0)
        assert sphere.radius == 1.0
        assert sphere.color == (255.0, 255.0, 255.0)
        assert sphere.specular is None
        assert sphere.reflective == 0.0

    def test_values_are_floats(self):
        """Test integer inputs are stored as floats."""
        from whitted.scene.model import Sphere

        sphere = Sphere(center=[1, 2, 3], radius=2, color=[10, 20, 30], specular=500)
        assert sphere.center == (1.0, 2.0, 3.0)
        assert isinstance(sphere.radius, float)
        assert sphere.specular == 500.0

    @pytest.mark.parametrize("radius", [0, -1.0, math.nan])
    def test_rejects_bad_radius(self, radius):
        """Test radius must be positive."""
        from whitted.scene.model import Sphere

        with pytest.raises(ValueError, match="radius"):
            Sphere(center=(0, 0, 0), radius=radius)

    @pytest.mark.parametrize("specular", [0, -10])
    def test_rejects_bad_specular(self, specular):
        """Test a given specular exponent must be positive."""
        from whitted.scene.model import Sphere

        with pytest.raises(ValueError, match="specular"):
            Sphere(center=(0, 0, 0), radius=1, specular=specular)

    @pytest.mark.parametrize("reflective", [-0.1, 1.5])
    def test_rejects_bad_reflective(self, reflective):
        """Test reflectivity must lie in [0, 1]."""
        from whitted.scene.model import Sphere

        with pytest.raises(ValueError, match="reflectivity"):
            Sphere(center=(0, 0, 0), radius=1, reflective=reflective)

    def test_reflective_bounds_allowed(self):
        """Test 0 and 1 are both valid reflectivities."""
        from whitted.scene.model import Sphere

        assert Sphere(center=(0, 0, 0), radius=1, reflective=0).reflective == 0.0
        assert Sphere(center=(0, 0, 0), radius=1, reflective=1).reflective == 1.0

    def test_rejects_wrong_arity(self):
        """Test vectors must have exactly three components."""
        from whitted.scene.model import Sphere

        with pytest.raises(ValueError):
            Sphere(center=(0, 0), radius=1)
        with pytest.raises(ValueError):
            Sphere(center=(0, 0, 0), radius=1, color=(1, 2, 3, 4))

    @pytest.mark.parametrize(
        "fields,match",
        [
            ({"radius": None}, "radius"),
            ({"radius": "big"}, "radius"),
            ({"specular": [10]}, "specular"),
            ({"reflective": None}, "reflectivity"),
            ({"center": (0, None, 0)}, "center"),
            ({"center": 5}, "center"),
            ({"color": None}, "color"),
        ],
    )
    def test_rejects_non_numbers(self, fields, match):
        """Test wrongly typed fields raise ValueError naming the field."""
        from whitted.scene.model import Sphere

        values = {"center": (0, 0, 0), "radius": 1}
        values.update(fields)
        with pytest.raises(ValueError, match=match):
            Sphere(**values)

    def test_out_of_range_color_allowed(self):
        """Test colors outside [0, 255] are kept for the renderer to clamp."""
        from whitted.scene.model import Sphere

        assert Sphere(center=(0, 0, 0), radius=1, color=(300, -5, 0)).color == (300.0, -5.0, 0.0)

    def test_frozen(self):
        """Test spheres are immutable."""
        from whitted.scene.model import Sphere

        sphere = Sphere(center=(0, 0, 0), radius=1)
        with pytest.raises(dataclasses.FrozenInstanceError):
            sphere.radius = 2.0


class TestLights:
    """Tests for the light records."""

    def test_kinds(self):
        """Test each variant reports its kind code."""
        from whitted.scene.model import (
            AmbientLight,
            DirectionalLight,
            LightKind,
            PointLight,
        )

        assert AmbientLight(0.2).kind == LightKind.AMBIENT
        assert PointLight(0.6, position=(2, 1, 0)).kind == LightKind.POINT
        assert DirectionalLight(0.2, direction=(1, 4, 4)).kind == LightKind.DIRECTIONAL

    def test_light_vector(self):
        """Test light_vector picks the position or direction."""
        from whitted.scene.model import (
            AmbientLight,
            DirectionalLight,
            PointLight,
            light_vector,
        )

        assert light_vector(AmbientLight(0.2)) == (0.0, 0.0, 0.0)
        assert light_vector(PointLight(0.6, position=(2, 1, 0))) == (2.0, 1.0, 0.0)
        assert light_vector(DirectionalLight(0.2, direction=(1, 4, 4))) == (1.0, 4.0, 4.0)

    def test_rejects_negative_intensity(self):
        """Test intensities must be non-negative."""
        from whitted.scene.model import AmbientLight, PointLight

        with pytest.raises(ValueError, match="intensity"):
            AmbientLight(-0.1)
        with pytest.raises(ValueError, match="intensity"):
            PointLight(-1.0, position=(0, 0, 0))

    def test_rejects_non_numeric_intensity(self):
        """Test a null intensity raises ValueError, not TypeError."""
        from whitted.scene.model import AmbientLight, PointLight

        with pytest.raises(ValueError, match="intensity"):
            AmbientLight(None)
        with pytest.raises(ValueError, match="position"):
            PointLight(0.5, position=None)

    def test_zero_intensity_allowed(self):
        """Test a zero-intensity light is valid."""
        from whitted.scene.model import AmbientLight

        assert AmbientLight(0).intensity == 0.0

    def test_rejects_zero_direction(self):
        """Test directional lights need a non-zero direction."""
        from whitted.scene.model import DirectionalLight

        with pytest.raises(ValueError, match="non-zero"):
            DirectionalLight(0.5, direction=(0, 0, 0))


class TestScene:
    """Tests for the Scene record."""

    def test_empty_scene(self):
        """Test a scene with nothing in it."""
        from whitted.scene.model import Scene

        scene = Scene()
        assert scene.sphere_count == 0
        assert scene.light_count == 0
        assert scene.background == (0.0, 0.0, 0.0)
        assert scene.total_ambient() == 0.0

    def test_lists_become_tuples(self):
        """Test sphere and light lists are stored as tuples in order."""
        from whitted.scene.model import AmbientLight, Scene, Sphere

        a = Sphere(center=(0, 0, 5), radius=1)
        b = Sphere(center=(0, 0, 9), radius=2)
        scene = Scene(spheres=[a, b], lights=[AmbientLight(0.2)])
        assert scene.spheres == (a, b)
        assert scene.sphere_count == 2
        assert scene.light_count == 1

    def test_total_ambient(self):
        """Test total_ambient sums only ambient lights."""
        from whitted.scene.model import AmbientLight, PointLight, Scene

        scene = Scene(
            lights=(AmbientLight(0.2), PointLight(0.6, position=(0, 0, 0)), AmbientLight(0.1))
        )
        assert scene.total_ambient() == pytest.approx(0.3)

    def test_rejects_foreign_records(self):
        """Test spheres and lights must be the right record types."""
        from whitted.scene.model import AmbientLight, Scene

        with pytest.raises(ValueError):
            Scene(spheres=(AmbientLight(0.2),))
        with pytest.raises(ValueError):
            Scene(lights=({"type": "ambient", "intensity": 0.2},))

    def test_rejects_bad_background(self):
        """Test the background must be a 3-component color."""
        from whitted.scene.model import Scene

        with pytest.raises(ValueError):
            Scene(background=(0, 0))
