"""Import checks for modules that define Taichi functions and kernels.

Taichi reads argument and return annotations when @ti.func and @ti.kernel
run, so these modules must import cleanly and keep real annotation objects.
"""

import __future__
import importlib

import pytest

TAICHI_MODULES = [
    "whitted.core.ray",
    "whitted.core.lighting",
    "whitted.core.tracer",
    "whitted.core.renderer",
    "whitted.camera.viewport",
    "whitted.geometry.sphere",
    "whitted.scene.intersection",
    "whitted.scene.buffers",
]


class TestTaichiModules:
    """Tests for modules with Taichi-compiled code."""

    @pytest.mark.parametrize("name", TAICHI_MODULES)
    def test_annotations_not_postponed(self, name):
        """Test the module does not turn annotations into strings."""
        module = importlib.import_module(name)
        assert getattr(module, "annotations", None) is not __future__.annotations

    @pytest.mark.parametrize(
        "name",
        [
            "whitted.camera",
            "whitted.scene.config",
            "whitted.scene.presets",
            "examples.render_scene",
        ],
    )
    def test_dependent_modules_import(self, name):
        """Test modules built on the camera and renderer import."""
        assert importlib.import_module(name) is not None
