"""Local Phong-style lighting with hard shadows.

compute_lighting() returns a single scalar intensity for a surface point. The
tracer multiplies the sphere's base color by it, so lighting is achromatic.

Per light:
    - Ambient: adds its intensity unconditionally.
    - Point: L = position - point, shadow ray bounded by t_max = 1 (the light
      sits at parameter 1 along the unnormalized L).
    - Directional: L = direction, shadow ray unbounded.

A point or directional light blocked by any sphere in (SHADOW_EPSILON, t_max)
contributes nothing at all. Otherwise it adds a diffuse term
    I * dot(N, L) / (|N| |L|)              when dot(N, L) > 0
and, for spheres with a specular exponent, a specular term
    I * (dot(R, V) / (|R| |V|))^specular  when dot(R, V) > 0
where R = reflect(L, N).
"""

import taichi as ti

from whitted.core.ray import INF, dot, magnitude, make_ray, real, reflect, vec3
from whitted.scene.intersection import any_intersection
from whitted.scene.model import LightKind

# Start offset for shadow rays so a surface does not shadow itself
SHADOW_EPSILON = 0.001


@ti.func
def _light_direction(scene: ti.template(), light_index: ti.i32, point: vec3):
    """Get the unnormalized direction to a light and the shadow-ray bound.

    Returns:
        Tuple of (light_direction, t_max).
    """
    light_direction = scene.light_vectors[light_index]
    t_max = ti.cast(INF, real)
    if scene.light_kinds[light_index] == int(LightKind.POINT):
        light_direction = scene.light_vectors[light_index] - point
        t_max = 1.0
    return light_direction, t_max


@ti.func
def compute_lighting(
    scene: ti.template(),
    point: vec3,
    normal: vec3,
    view: vec3,
    sphere_index: ti.i32,
) -> real:
    """Compute the scalar light intensity arriving at a surface point.

    Args:
        scene: SceneBuffers holding lights and occluders.
        point: The surface point being shaded.
        normal: The surface normal at the point.
        view: Vector from the point toward the viewer.
        sphere_index: Index of the shaded sphere, selecting its specular
            exponent.

    Returns:
        The summed, non-negative intensity.
    """
    intensity = ti.cast(0.0, real)
    has_specular = scene.sphere_has_specular[sphere_index]
    specular = scene.sphere_specular[sphere_index]

    for i in range(scene.num_lights):
        light_intensity = scene.light_intensities[i]

        if scene.light_kinds[i] == int(LightKind.AMBIENT):
            intensity += light_intensity
        else:
            light_direction, t_max = _light_direction(scene, i, point)
            shadow_ray = make_ray(point, light_direction)

            # Hard shadow: any blocker removes this light entirely
            if any_intersection(scene, shadow_ray, SHADOW_EPSILON, t_max) == 0:
                n_dot_l = dot(normal, light_direction)
                if n_dot_l > 0.0:
                    intensity += (
                        light_intensity
                        * n_dot_l
                        / (magnitude(normal) * magnitude(light_direction))
                    )

                if has_specular == 1:
                    reflected = reflect(light_direction, normal)
                    r_dot_v = dot(reflected, view)
                    if r_dot_v > 0.0:
                        intensity += light_intensity * ti.pow(
                            r_dot_v / (magnitude(reflected) * magnitude(view)), specular
                        )

    return intensity
