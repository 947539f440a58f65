"""Ray data structure and vector utilities for the sphere ray tracer.

This module provides the Ray dataclass and the small set of vector and matrix
helpers the tracer is built from. All operations are Taichi functions so they
can be called from inside render kernels.

Vectors are not assumed to be unit length unless a function says so. In
particular, ray directions keep their magnitude because the parametric range
(t_min, t_max) of a query is measured in multiples of the direction vector.

All device math is double precision. Hit points on very large spheres (the
demo floor has radius 5000) carry too much rounding error in single precision
for the 0.001 ray offsets to keep secondary rays off their own surface.
Initialize Taichi with ``default_fp=ti.f64`` so float literals inside kernels
share this precision.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> origin = vec3(0.0, 0.0, 0.0)
    >>> direction = vec3(0.0, 0.0, 1.0)
    >>> ray = Ray(origin=origin, direction=direction)
    >>> point = ray_at(ray, 5.0)  # Point 5 units along the ray
"""

import taichi as ti
import taichi.math as tm

# Scalar, vector and matrix types for all device math
real = ti.f64
vec2 = ti.types.vector(2, real)
vec3 = ti.types.vector(3, real)
mat3 = ti.types.matrix(3, 3, real)

# Sentinel for "no intersection" and for unbounded parametric ranges
INF = float("inf")

# Largest value a color channel may take after clamping
COLOR_MAX = 255.0


@ti.dataclass
class Ray:
    """A ray with an origin point and direction vector.

    Attributes:
        origin: The starting point of the ray (vec3).
        direction: The direction vector of the ray (vec3). Its magnitude sets
            the scale of the ray parameter t.
    """

    origin: vec3
    direction: vec3


@ti.func
def ray_at(ray: Ray, t: real) -> vec3:
    """Compute the point along the ray at parameter t.

    Args:
        ray: The ray to evaluate.
        t: The parameter value. Positive values are in front of the origin.

    Returns:
        The point ray.origin + t * ray.direction.
    """
    return ray.origin + t * ray.direction


@ti.func
def make_ray(origin: vec3, direction: vec3) -> Ray:
    """Create a ray from origin and direction."""
    return Ray(origin=origin, direction=direction)


# =============================================================================
# Vector Utility Functions
# =============================================================================


@ti.func
def dot(a: vec3, b: vec3) -> real:
    """Compute the dot product a . b."""
    return a.x * b.x + a.y * b.y + a.z * b.z


@ti.func
def magnitude(v: vec3) -> real:
    """Compute the Euclidean length of a vector.

    Args:
        v: The input vector.

    Returns:
        sqrt(dot(v, v)). A zero vector has magnitude 0.
    """
    return ti.sqrt(dot(v, v))


@ti.func
def add(a: vec3, b: vec3) -> vec3:
    return a + b


@ti.func
def subtract(a: vec3, b: vec3) -> vec3:
    return a - b


@ti.func
def scale(n: real, v: vec3) -> vec3:
    """Multiply every component of v by the scalar n."""
    return n * v


@ti.func
def normalize(v: vec3) -> vec3:
    """Scale a vector to unit length.

    A zero-length input means a geometry construction bug upstream (camera
    rays, light directions and surface normals are never zero for a valid
    scene). The assertion fires when Taichi runs with debug=True.

    Args:
        v: The input vector (must be non-zero).

    Returns:
        A unit vector in the same direction as v.
    """
    length = magnitude(v)
    assert length > 0.0, "normalize() called with a zero-length vector"
    return v / length


@ti.func
def mat_mul3(m: mat3, v: vec3) -> vec3:
    """Multiply a 3x3 matrix by a column vector.

    Args:
        m: The matrix, indexed m[row, column].
        v: The vector.

    Returns:
        The vector whose i-th component is sum_j m[i, j] * v[j].
    """
    result = vec3(0.0, 0.0, 0.0)
    for i in ti.static(range(3)):
        for j in ti.static(range(3)):
            result[i] += m[i, j] * v[j]
    return result


@ti.func
def reflect(ray: vec3, normal: vec3) -> vec3:
    """Reflect a vector about a normal.

    Computes 2 * dot(normal, ray) * normal - ray. Unlike the mirror-bounce
    convention of path tracers, ``ray`` points away from the surface (toward
    the viewer or the light), and so does the result.

    Args:
        ray: The vector to reflect.
        normal: The surface normal. The result is a true reflection only when
            the normal is unit length.

    Returns:
        The reflected vector.
    """
    return 2.0 * dot(normal, ray) * normal - ray


@ti.func
def clamp_color(color: vec3) -> vec3:
    """Clamp each channel of a color into [0, 255] independently."""
    result = color
    for c in ti.static(range(3)):
        result[c] = tm.clamp(color[c], 0.0, COLOR_MAX)
    return result
