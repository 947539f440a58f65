"""Preview module for output and visualization.

Components:
    display: Matplotlib-based preview display
    export: PNG export utilities

Example:
    >>> from whitted.preview import show_preview, save_png
    >>> frame = render(scene, camera, settings)
    >>> show_preview(frame)
    >>> save_png(frame, "output.png")
"""

from whitted.preview.display import show_preview
from whitted.preview.export import (
    compute_rmse,
    image_to_uint8,
    save_png,
    save_png_from_array,
)

__all__ = [
    "show_preview",
    "save_png",
    "save_png_from_array",
    "image_to_uint8",
    "compute_rmse",
]
