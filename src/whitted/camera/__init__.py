"""Camera module for view and ray generation.

Components:
    viewport: Camera record, render settings and primary ray generation

Ray generation uses centered canvas coordinates:
    x in [-width/2, width/2): left to right across the image
    y in [-height/2, height/2): bottom to top across the image
"""

from .viewport import (
    IDENTITY,
    Camera,
    RenderSettings,
    camera_position_vec,
    camera_rotation_mat,
    canvas_to_viewport,
    pixel_to_canvas,
    primary_ray_direction,
)

__all__ = [
    "Camera",
    "RenderSettings",
    "IDENTITY",
    "canvas_to_viewport",
    "primary_ray_direction",
    "pixel_to_canvas",
    "camera_position_vec",
    "camera_rotation_mat",
]
