"""Matplotlib-based preview display for rendered frames.

Example:
    >>> from whitted.preview.display import show_preview
    >>> frame = render(scene, camera, settings)
    >>> show_preview(frame)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from whitted.core.renderer import Frame


def show_preview(
    frame: Frame,
    *,
    title: str | None = None,
    figsize: tuple[float, float] = (8, 8),
    block: bool = True,
) -> None:
    """Display a rendered frame as a Matplotlib figure.

    Args:
        frame: The frame to display.
        title: Custom title (default shows the canvas size).
        figsize: Figure size in inches (width, height).
        block: Whether to block execution until figure is closed.
    """
    import matplotlib.pyplot as plt

    # imshow expects floats in [0, 1]
    display_image = np.clip(frame.to_numpy() / 255.0, 0.0, 1.0)

    fig, ax = plt.subplots(1, 1, figsize=figsize)

    ax.imshow(display_image)
    ax.axis("off")

    if title is None:
        title = f"Render Preview - {frame.width}x{frame.height}"
    ax.set_title(title)

    plt.tight_layout()
    plt.show(block=block)
