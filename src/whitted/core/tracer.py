"""Whitted-style tracer: local shading blended with mirror reflections.

The color of a ray is defined recursively:

    trace(ray, depth):
        miss                             -> background
        local = lighting(P, N, -D) * color
        depth <= 0 or reflective <= 0    -> local
        otherwise                        -> (1 - r) * local
                                            + r * trace(reflected, depth - 1)

Taichi functions cannot recurse, so trace_ray() unrolls the definition into
a loop of at most depth + 1 bounces. A running weight holds the product of
the reflectivities seen so far; each bounce adds its share of local color
and hands the remaining weight to the reflected ray. The budget decreases on
every bounce, so mutually reflecting spheres still terminate.
"""

import taichi as ti

from whitted.core.lighting import compute_lighting
from whitted.core.ray import INF, Ray, make_ray, normalize, ray_at, real, reflect, vec3
from whitted.scene.intersection import closest_intersection

# =============================================================================
# Tracing Constants
# =============================================================================

# Start offset for reflected rays to avoid self-intersection ("acne")
REFLECTION_EPSILON = 0.001

# Default reflection recursion budget
DEFAULT_MAX_DEPTH = 3


@ti.func
def shade_local(
    scene: ti.template(),
    sphere_index: ti.i32,
    point: vec3,
    normal: vec3,
    view: vec3,
) -> vec3:
    """Local color of a sphere at a point: lighting times base color.

    The result is not clamped.
    """
    intensity = compute_lighting(scene, point, normal, view, sphere_index)
    return intensity * scene.sphere_colors[sphere_index]


@ti.func
def trace_ray(scene: ti.template(), ray: Ray, t_min: real, t_max: real, depth: ti.i32) -> vec3:
    """Compute the color seen along a ray.

    Args:
        scene: SceneBuffers to trace against.
        ray: The primary ray. Its direction must be non-zero.
        t_min: Exclusive lower bound on the first hit's t.
        t_max: Exclusive upper bound on the first hit's t.
        depth: Number of reflection bounces still allowed. 0 disables
            reflections entirely.

    Returns:
        The unclamped color (R, G, B).
    """
    color = vec3(0.0, 0.0, 0.0)
    weight = ti.cast(1.0, real)

    ray_origin = ray.origin
    ray_direction = ray.direction
    lo = t_min
    hi = t_max
    remaining = depth

    # Active flag for bounce continuation (avoids break in ti.func loops)
    active = 1

    for _ in range(depth + 1):
        if active == 1:
            current = make_ray(ray_origin, ray_direction)
            rec = closest_intersection(scene, current, lo, hi)

            if rec.hit == 0:
                color += weight * scene.background[0]
                active = 0
            else:
                idx = rec.sphere_index
                point = ray_at(current, rec.t)
                normal = normalize(point - scene.sphere_centers[idx])
                view = -ray_direction

                local = shade_local(scene, idx, point, normal, view)
                reflectivity = scene.sphere_reflective[idx]

                if remaining <= 0 or reflectivity <= 0.0:
                    color += weight * local
                    active = 0
                else:
                    color += weight * (1.0 - reflectivity) * local
                    weight *= reflectivity

                    ray_origin = point
                    ray_direction = reflect(view, normal)
                    lo = REFLECTION_EPSILON
                    hi = INF
                    remaining -= 1

    return color
