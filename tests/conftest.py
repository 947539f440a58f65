"""Pytest configuration for whitted tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls which can cause
    segmentation faults due to Taichi runtime conflicts.
    """
    ti.init(arch=ti.cpu, default_fp=ti.f64, random_seed=42)
    yield
    # Note: We don't call ti.reset() here as it can cause issues
    # with subsequent tests if any cleanup happens after


@pytest.fixture
def make_buffers():
    """Build SceneBuffers for a Scene and release them after the test.

    Every test gets its own buffers, so tests are isolated from each other
    without any module-level scene state to clear.
    """
    # Import here so Taichi is initialized before any fields are created
    from whitted.scene.buffers import SceneBuffers

    created = []

    def _make(scene):
        buffers = SceneBuffers(scene)
        created.append(buffers)
        return buffers

    yield _make

    for buffers in created:
        buffers.destroy()
