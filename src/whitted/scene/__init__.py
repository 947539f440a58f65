"""Scene module for scene description and ray-scene queries.

Components:
    model: Immutable Sphere, light and Scene records with validation
    buffers: Per-scene Taichi field mirror used by kernels
    intersection: Closest-hit and any-hit queries over a scene
    config: JSON render configuration documents
    presets: Ready-made demo scenes

Scene data is organized for efficient device access:
    - Structure-of-Arrays layout for sphere and light data
    - One SNode tree per scene, released after the render
"""

from .buffers import SceneBuffers
from .config import (
    load_render_config,
    parse_render_config,
    render_config_to_dict,
    save_render_config,
)
from .intersection import SphereHit, any_intersection, closest_intersection
from .model import (
    AmbientLight,
    DirectionalLight,
    Light,
    LightKind,
    PointLight,
    Scene,
    Sphere,
    light_vector,
)
from .presets import create_demo_scene, create_single_sphere_scene

__all__ = [
    # Model
    "Scene",
    "Sphere",
    "Light",
    "LightKind",
    "AmbientLight",
    "PointLight",
    "DirectionalLight",
    "light_vector",
    # Device buffers and queries
    "SceneBuffers",
    "SphereHit",
    "closest_intersection",
    "any_intersection",
    # Configuration
    "load_render_config",
    "parse_render_config",
    "render_config_to_dict",
    "save_render_config",
    # Presets
    "create_demo_scene",
    "create_single_sphere_scene",
]
