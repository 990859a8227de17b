"""
Module: composer.renderer

Purpose:
    Flatten a composition into a single Pillow image at the canvas's full
    logical resolution. Uses the same partition as the on-screen canvas
    and the same visible-region math as the solver, so what is exported
    is what the user framed, independent of on-screen scale.

Key Functions:
    - render_composition(): Layout + image states + bitmaps -> PIL Image
    - render_cell(): One cell's pixels

Dependencies:
    - PIL: Drawing and resampling
    - core.geometry: partition, reconcile, visible_source_box

Used By:
    - composer.export: Capture step
    - gui.main_window: Export action
    - cli: render command
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, Mapping, Optional

from PIL import Image

from photo_grid.core.geometry import Rect, Size, partition, reconcile, visible_source_box
from photo_grid.core.models import ImageState, Layout

from .config import ComposerConfig
from .ingest import open_bitmap

logger = logging.getLogger(__name__)


def load_bitmaps(images: Mapping[str, ImageState], leaf_ids: Iterable[str]) -> Dict[str, Image.Image]:
    """
    Decode the bitmaps for the given leaves.

    Leaves without an image are skipped; orphaned entries in ``images``
    are never decoded.

    Raises:
        ImageDecodeError: A source can no longer be read
    """
    bitmaps: Dict[str, Image.Image] = {}
    for leaf_id in leaf_ids:
        state = images.get(leaf_id)
        if state is not None:
            bitmaps[leaf_id] = open_bitmap(state.url)
    return bitmaps


def render_cell(
    bitmap: Image.Image,
    state: ImageState,
    cell: Rect,
) -> Optional[Image.Image]:
    """
    Render one cell.

    The state is reconciled against the cell first, so a stale zoom or
    pan can never leave background showing through.

    Args:
        bitmap: Decoded source image
        state: Image state for the cell
        cell: Cell rectangle in canvas pixels

    Returns:
        Image sized to the cell's rounded pixel box, or None when the
        cell has no area.
    """
    left, top, right, bottom = cell.rounded()
    out_w, out_h = right - left, bottom - top
    if out_w <= 0 or out_h <= 0:
        return None

    container = Size(out_w, out_h)
    natural = Size(*bitmap.size)
    settled = reconcile(state, container, natural)
    box = visible_source_box(settled, container, natural)
    if box is None:
        return None

    return bitmap.resize((out_w, out_h), Image.Resampling.LANCZOS, box=box)


def render_composition(
    layout: Layout,
    images: Mapping[str, ImageState],
    bitmaps: Mapping[str, Image.Image],
    padding: int,
    config: Optional[ComposerConfig] = None,
) -> Image.Image:
    """
    Render the whole canvas.

    Args:
        layout: Active layout
        images: Image states keyed by leaf id (orphans are ignored)
        bitmaps: Decoded bitmaps keyed by leaf id
        padding: Gap between cells and outer margin
        config: Composer configuration (defaults used if None)

    Returns:
        RGB image of size config.canvas_size(layout.aspect_ratio).
        Cells without an image or bitmap show the background.

    Example:
        >>> img = render_composition(layout, store.images, bitmaps, padding=10)
        >>> img.size
        (800, 400)
    """
    config = config or ComposerConfig()
    width, height = config.canvas_size(layout.aspect_ratio)
    canvas = Image.new("RGB", (width, height), config.background)

    rects = partition(layout.root, width, height, gap=padding)
    for leaf_id, rect in rects.items():
        state = images.get(leaf_id)
        bitmap = bitmaps.get(leaf_id)
        if state is None or bitmap is None:
            continue
        cell_img = render_cell(bitmap, state, rect)
        if cell_img is None:
            logger.debug(f"Cell {leaf_id} has no area at padding {padding}, skipped")
            continue
        left, top, _right, _bottom = rect.rounded()
        if cell_img.mode == "RGBA":
            canvas.paste(cell_img, (left, top), cell_img)
        else:
            canvas.paste(cell_img, (left, top))

    return canvas
