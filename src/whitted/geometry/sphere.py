"""Sphere primitive and closed-form ray-sphere intersection.

The ray-sphere intersection is found by solving:
    |origin + t * direction - center|^2 = radius^2

Expanding and rearranging gives the quadratic equation:
    a*t^2 + 2*h*t + c = 0

where:
    a = dot(direction, direction)
    h = dot(direction, oc)  (half of traditional b)
    c = dot(oc, oc) - radius^2
    oc = origin - center

Both roots are returned; callers decide which of them fall inside their
parametric range. A negative discriminant is an ordinary miss and yields two
infinite roots, which no finite range accepts.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from whitted.core.ray import Ray, vec3
    >>> from whitted.geometry.sphere import Sphere, intersect_ray_sphere
    >>> sphere = Sphere(center=vec3(0, 0, 5), radius=1.0)
    >>> # Inside a Taichi kernel:
    >>> # t_near, t_far = intersect_ray_sphere(ray, sphere)
"""

import taichi as ti

from whitted.core.ray import INF, Ray, dot, real, vec3


@ti.dataclass
class Sphere:
    """Geometric part of a sphere.

    Shading attributes (color, specular, reflectivity) live in the scene
    buffers next to the geometry; intersection only needs these two fields.

    Attributes:
        center: The center point of the sphere (vec3).
        radius: The radius of the sphere (positive float).
    """

    center: vec3
    radius: real


@ti.func
def _solve_quadratic_robust(h: real, a: real, c: real, sqrt_d: real):
    """Solve a*t^2 + 2*h*t + c = 0 for a non-negative discriminant.

    Uses the sign of h to avoid catastrophic cancellation when h*h is nearly
    equal to a*c.

    Args:
        h: Half of the linear coefficient.
        a: Quadratic coefficient.
        c: Constant term.
        sqrt_d: Square root of discriminant (h^2 - a*c).

    Returns:
        Tuple of (t0, t1) where t0 <= t1.
    """
    sign_h = ti.select(h < 0.0, -1.0, 1.0)
    q = -(h + sign_h * sqrt_d)

    t0 = ti.cast(0.0, real)
    t1 = ti.cast(0.0, real)

    if ti.abs(q) < 1e-10:
        # Ray origin on the sphere's center plane, tangent or grazing
        t0 = (-h - sqrt_d) / a
        t1 = (-h + sqrt_d) / a
    else:
        t0 = q / a
        t1 = c / q

    if t0 > t1:
        temp = t0
        t0 = t1
        t1 = temp

    return t0, t1


@ti.func
def intersect_ray_sphere(ray: Ray, sphere: Sphere):
    """Solve for both parameters at which a ray meets a sphere.

    Args:
        ray: The ray to test. Its direction need not be normalized but must
            be non-zero.
        sphere: The sphere to test against.

    Returns:
        Tuple (t_near, t_far) with t_near <= t_far. Both are +inf when the
        ray's line misses the sphere. A tangent ray returns two equal roots.
    """
    oc = ray.origin - sphere.center

    a = dot(ray.direction, ray.direction)
    h = dot(ray.direction, oc)
    c = dot(oc, oc) - sphere.radius * sphere.radius

    discriminant = h * h - a * c

    t_near = ti.cast(INF, real)
    t_far = ti.cast(INF, real)

    if discriminant >= 0.0:
        sqrt_d = ti.sqrt(discriminant)
        t_near, t_far = _solve_quadratic_robust(h, a, c, sqrt_d)

    return t_near, t_far


@ti.func
def make_sphere(center: vec3, radius: real) -> Sphere:
    """Create a sphere from center and radius."""
    return Sphere(center=center, radius=radius)
