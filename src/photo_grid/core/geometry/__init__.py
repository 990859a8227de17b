"""
Module: core.geometry

Purpose:
    Pure geometry for the composer: per-cell pan/zoom constraints,
    partitioning a layout tree into cell rectangles, and fitting the
    canvas on screen.

Key Functions:
    - compute_constraints(), reconcile(), initial_fit()
    - apply_zoom_delta(), apply_pan_delta()
    - partition(), gap_area(), cell_at()
    - compute_scale(), available_area()

Dependencies:
    - core.models: Layout tree and image state

Used By:
    - composer.renderer
    - gui.models.composition
    - gui.widgets.canvas
"""

from .constraints import (
    PAN_TOLERANCE,
    ZOOM_SENSITIVITY,
    CellConstraints,
    Size,
    apply_pan_delta,
    apply_zoom_delta,
    compute_constraints,
    initial_fit,
    is_settled,
    reconcile,
    visible_source_box,
)
from .partition import Rect, cell_at, content_rect, gap_area, partition
from .viewport import available_area, compute_scale, scaled_canvas_size

__all__ = [
    "PAN_TOLERANCE",
    "ZOOM_SENSITIVITY",
    "CellConstraints",
    "Size",
    "apply_pan_delta",
    "apply_zoom_delta",
    "compute_constraints",
    "initial_fit",
    "is_settled",
    "reconcile",
    "visible_source_box",
    "Rect",
    "cell_at",
    "content_rect",
    "gap_area",
    "partition",
    "available_area",
    "compute_scale",
    "scaled_canvas_size",
]
