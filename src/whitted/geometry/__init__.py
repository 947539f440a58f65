"""Geometry module for shape primitives.

Components:
    sphere: Sphere primitive with closed-form ray-sphere intersection

Intersection routines are Taichi functions (@ti.func) returning both roots
of the ray parameter; range checks happen in the scene-level queries.
"""

from .sphere import Sphere, intersect_ray_sphere, make_sphere

__all__ = [
    "Sphere",
    "intersect_ray_sphere",
    "make_sphere",
]
