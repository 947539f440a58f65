"""Demo scene configuration.

The demo scene is a small arrangement of colored spheres on a huge yellow
"floor" sphere, lit by one ambient, one point and one directional light and
viewed from a camera yawed 20 degrees to the left:

- Red, blue and green spheres with increasing reflectivity
- Three small olive spheres in the foreground
- A radius-5000 sphere acting as the ground plane

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from whitted.scene.presets import create_demo_scene
    >>> from whitted.core.renderer import render
    >>>
    >>> scene, camera, settings = create_demo_scene()
    >>> frame = render(scene, camera, settings)
"""

from __future__ import annotations

from dataclasses import replace

from whitted.camera.viewport import Camera, RenderSettings
from whitted.scene.model import AmbientLight, DirectionalLight, PointLight, Scene, Sphere

# =============================================================================
# Demo Scene Constants
# =============================================================================

DEMO_CAMERA_POSITION = (3.0, 2.0, -7.0)
DEMO_CAMERA_YAW_DEGREES = -20.0

DEMO_SPHERES = (
    Sphere(center=(0, 3, 3), radius=0.75, color=(255, 0, 0), specular=500, reflective=0.2),
    Sphere(center=(2, 4, 4), radius=1, color=(0, 0, 255), specular=500, reflective=0.3),
    Sphere(center=(-2, 4, 4), radius=1, color=(0, 255, 0), specular=10, reflective=0.4),
    Sphere(
        center=(0, -5001, 0), radius=5000, color=(255, 255, 0), specular=1000, reflective=0.5
    ),
    Sphere(center=(0, 1, 4), radius=0.5, color=(100, 100, 50), specular=1000, reflective=0.5),
    Sphere(center=(1, 1.25, 4), radius=0.5, color=(100, 100, 50), specular=1000, reflective=0.5),
    Sphere(center=(-1, 1.25, 4), radius=0.5, color=(100, 100, 50), specular=1000, reflective=0.5),
)

DEMO_LIGHTS = (
    AmbientLight(0.2),
    PointLight(0.6, position=(2, 1, 0)),
    DirectionalLight(0.2, direction=(1, 4, 4)),
)


# =============================================================================
# Demo Scene Factory
# =============================================================================


def create_demo_scene(
    width: int = 600,
    height: int = 600,
    max_depth: int = 3,
) -> tuple[Scene, Camera, RenderSettings]:
    """Create the demo scene with its camera and render settings.

    Args:
        width: Canvas width in pixels.
        height: Canvas height in pixels.
        max_depth: Reflection recursion budget.

    Returns:
        A tuple of (Scene, Camera, RenderSettings).
    """
    scene = Scene(spheres=DEMO_SPHERES, lights=DEMO_LIGHTS, background=(0, 0, 0))
    camera = Camera.from_yaw(DEMO_CAMERA_POSITION, DEMO_CAMERA_YAW_DEGREES)
    settings = RenderSettings(
        canvas_width=width,
        canvas_height=height,
        viewport_size=1.0,
        projection_plane_z=1.0,
        max_depth=max_depth,
    )
    return scene, camera, settings


def create_single_sphere_scene(
    ambient: float = 0.2,
    color: tuple[float, float, float] = (255.0, 0.0, 0.0),
) -> tuple[Scene, Camera, RenderSettings]:
    """Create a one-sphere scene lit only by ambient light.

    A matte sphere of radius 1 sits at (0, 0, 5) in front of a camera at the
    origin looking down +z. Every visible pixel of the sphere has exactly
    ``ambient * color``; everything else is black.

    Returns:
        A tuple of (Scene, Camera, RenderSettings).
    """
    scene = Scene(
        spheres=(Sphere(center=(0, 0, 5), radius=1, color=color, specular=None, reflective=0),),
        lights=(AmbientLight(ambient),),
    )
    settings = replace(RenderSettings(), canvas_width=64, canvas_height=64)
    return scene, Camera(), settings
