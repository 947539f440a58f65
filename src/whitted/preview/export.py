"""Image export utilities for rendered frames.

Frames already hold display-ready colors in [0, 255], so export only converts
them to 8-bit and writes them with Pillow.

Supported formats:
    - PNG, or any other format Pillow infers from the file extension

Example:
    >>> from whitted.core.renderer import render
    >>> from whitted.preview.export import save_png
    >>>
    >>> frame = render(scene, camera, settings)
    >>> save_png(frame, "output.png")
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

if TYPE_CHECKING:
    from whitted.core.renderer import Frame


def image_to_uint8(image: npt.NDArray[np.floating]) -> npt.NDArray[np.uint8]:
    """Convert a (H, W, 3) image with channels in [0, 255] to uint8.

    Values are rounded to the nearest integer and clamped first, so
    out-of-range input cannot wrap around.
    """
    if image.ndim != 3 or image.shape[2] != 3:
        raise ValueError(f"Expected an image of shape (H, W, 3), got {image.shape}")
    return np.clip(np.rint(image), 0, 255).astype(np.uint8)


def save_png_from_array(image: npt.NDArray[np.floating], filepath: str | Path) -> None:
    """Save a (H, W, 3) array with channels in [0, 255] as an image file.

    Args:
        image: Image array, top row first.
        filepath: Output file path (should end in .png).
    """
    pil_image = PILImage.fromarray(image_to_uint8(image))
    pil_image.save(filepath)


def save_png(frame: Frame, filepath: str | Path) -> None:
    """Save a rendered frame as an 8-bit RGB image file.

    Args:
        frame: The frame to save.
        filepath: Output file path (should end in .png).
    """
    save_png_from_array(frame.to_numpy(), filepath)


def compute_rmse(
    image_a: npt.NDArray[np.floating],
    image_b: npt.NDArray[np.floating],
) -> float:
    """Compute root mean squared error between two images.

    Args:
        image_a: First image array.
        image_b: Second image array (must have same shape as image_a).

    Returns:
        RMSE value (lower is more similar).

    Raises:
        ValueError: If image shapes don't match.
    """
    if image_a.shape != image_b.shape:
        raise ValueError(f"Image shapes must match: {image_a.shape} vs {image_b.shape}")

    diff = image_a.astype(np.float64) - image_b.astype(np.float64)
    return float(np.sqrt(np.mean(diff**2)))
