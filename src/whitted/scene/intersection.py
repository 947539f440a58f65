"""Scene-level ray intersection queries.

Every query is a brute-force scan over the scene's spheres in list order.
The scan keeps the strictly smallest root inside the open range
(t_min, t_max), so when two spheres are hit at exactly the same t the one
listed first is returned. Rendered output of tangent and coincident cases
depends on this ordering.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from whitted.scene.intersection import closest_intersection
    >>> # Inside a Taichi kernel, with buffers passed as ti.template():
    >>> # rec = closest_intersection(buffers, make_ray(origin, direction), 1.0, INF)
    >>> # if rec.hit == 1: ... rec.sphere_index, rec.t ...
"""

import taichi as ti

from whitted.core.ray import INF, Ray, real
from whitted.geometry.sphere import Sphere, intersect_ray_sphere, make_sphere


@ti.dataclass
class SphereHit:
    """Result of a closest-hit query.

    Attributes:
        hit: 1 if any sphere has a root inside the range, 0 otherwise.
        sphere_index: Index of the hit sphere in scene order (-1 on a miss).
        t: Ray parameter of the hit (+inf on a miss).
    """

    hit: ti.i32
    sphere_index: ti.i32
    t: real


@ti.func
def _in_range(t: real, t_min: real, t_max: real) -> ti.i32:
    return t > t_min and t < t_max


@ti.func
def _scene_sphere(scene: ti.template(), i: ti.i32) -> Sphere:
    return make_sphere(scene.sphere_centers[i], scene.sphere_radii[i])


@ti.func
def closest_intersection(scene: ti.template(), ray: Ray, t_min: real, t_max: real) -> SphereHit:
    """Find the nearest sphere hit by a ray within (t_min, t_max).

    Args:
        scene: SceneBuffers to query.
        ray: The ray to trace. t is measured in multiples of its direction.
        t_min: Exclusive lower bound on t.
        t_max: Exclusive upper bound on t.

    Returns:
        A SphereHit. ``hit`` is 0 when no root of any sphere lies in range.
    """
    closest_t = ti.cast(INF, real)
    closest_index = -1

    for i in range(scene.num_spheres):
        t1, t2 = intersect_ray_sphere(ray, _scene_sphere(scene, i))
        if _in_range(t1, t_min, t_max) and t1 < closest_t:
            closest_t = t1
            closest_index = i
        if _in_range(t2, t_min, t_max) and t2 < closest_t:
            closest_t = t2
            closest_index = i

    return SphereHit(
        hit=ti.select(closest_index >= 0, 1, 0),
        sphere_index=closest_index,
        t=closest_t,
    )


@ti.func
def any_intersection(scene: ti.template(), ray: Ray, t_min: real, t_max: real) -> ti.i32:
    """Test if a ray hits any sphere within (t_min, t_max) (shadow query).

    Returns the same answer as ``closest_intersection(...).hit`` but stops
    testing once a blocker is found.

    Returns:
        1 if any sphere was hit, 0 otherwise.
    """
    hit_any = 0

    for i in range(scene.num_spheres):
        if hit_any == 0:
            t1, t2 = intersect_ray_sphere(ray, _scene_sphere(scene, i))
            if _in_range(t1, t_min, t_max) or _in_range(t2, t_min, t_max):
                hit_any = 1

    return hit_any
