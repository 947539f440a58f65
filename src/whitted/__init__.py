"""Whitted-style sphere ray tracer built on Taichi.

This package renders static scenes of spheres and lights with:
- Closed-form ray-sphere intersection with order-stable closest-hit queries
- Phong-style local lighting from ambient, point and directional lights
- Hard shadows
- Mirror reflections with a bounded recursion budget

Subpackages:
    core: Vector utilities, lighting, the tracer and the frame driver
    geometry: Sphere primitive and intersection
    scene: Scene records, device buffers, intersection queries, configuration
    camera: Viewport camera and primary ray generation
    preview: Image export and preview utilities
"""

__version__ = "0.1.0"
