"""Core rendering module.

Components:
    ray: Ray data structure and vector/matrix utilities
    lighting: Local lighting with hard shadows
    tracer: Ray tracing with bounded mirror reflections
    renderer: Frame driver, Frame and pixel sinks

All per-ray operations are Taichi functions so the frame driver can run the
whole image in a single parallel kernel.
"""

from .ray import (
    COLOR_MAX,
    INF,
    Ray,
    add,
    clamp_color,
    dot,
    magnitude,
    make_ray,
    mat3,
    mat_mul3,
    normalize,
    ray_at,
    real,
    reflect,
    scale,
    subtract,
    vec2,
    vec3,
)

# Note: lighting, tracer and renderer are NOT imported here to avoid circular imports.
# Import directly from whitted.core.renderer when needed:
#   from whitted.core.renderer import Renderer, render

__all__ = [
    "Ray",
    "ray_at",
    "make_ray",
    "real",
    "vec2",
    "vec3",
    "mat3",
    "INF",
    "COLOR_MAX",
    "dot",
    "magnitude",
    "add",
    "subtract",
    "scale",
    "normalize",
    "mat_mul3",
    "reflect",
    "clamp_color",
]
