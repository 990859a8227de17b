"""
Module: core.geometry.viewport

Purpose:
    Fit the fixed-size logical canvas into the space left on screen.
    Display only: nothing here feeds back into partitioning, the
    constraint solver or export.

Key Functions:
    - available_area(): Window size minus sidebar and chrome padding
    - compute_scale(): Uniform scale that fits the canvas
    - scaled_canvas_size(): On-screen size of the scaled canvas
"""

from __future__ import annotations

from typing import Tuple

from .constraints import Size

DEFAULT_SIDEBAR_WIDTH = 256
DEFAULT_CHROME_PADDING = 32  # 16px on each side


def available_area(
    window_width: float,
    window_height: float,
    sidebar_width: float = DEFAULT_SIDEBAR_WIDTH,
    chrome_padding: float = DEFAULT_CHROME_PADDING,
) -> Size:
    """Space left for the canvas once the fixed chrome is taken out."""
    return Size(
        max(0.0, window_width - sidebar_width - chrome_padding),
        max(0.0, window_height - chrome_padding),
    )


def compute_scale(available: Size, canvas_width: float, aspect_ratio: float) -> float:
    """
    Largest uniform scale at which the canvas fits the available area.

    Args:
        available: On-screen area for the canvas
        canvas_width: Logical canvas width
        aspect_ratio: Canvas width / height

    Returns:
        ``min(aw / W, ah / H)`` with ``H = W / aspect_ratio``; 0.0 when
        there is no room at all.

    Raises:
        ValueError: If canvas_width or aspect_ratio is not positive
    """
    if canvas_width <= 0:
        raise ValueError(f"canvas_width must be positive: {canvas_width}")
    if aspect_ratio <= 0:
        raise ValueError(f"aspect_ratio must be positive: {aspect_ratio}")

    canvas_height = canvas_width / aspect_ratio
    scale = min(available.width / canvas_width, available.height / canvas_height)
    return max(0.0, scale)


def scaled_canvas_size(scale: float, canvas_width: float, aspect_ratio: float) -> Tuple[int, int]:
    """On-screen (width, height) of the canvas at ``scale``, in whole pixels."""
    return (
        round(canvas_width * scale),
        round(canvas_width / aspect_ratio * scale),
    )
