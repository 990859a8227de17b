"""
Composition state model for the GUI.

Holds the active layout, the per-cell image states, natural image sizes,
cell sizes and padding. The geometry is computed in photo_grid.core;
this store only records inputs and pushes every change through
reconcile() before anyone sees it.

Image decoding is asynchronous: drop_file() records the new image and
the decoded size arrives later through on_image_decoded(). Until then
the cell has no constraints and interaction with it is a no-op.
"""
from __future__ import annotations

import logging
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Set, Union

from PIL import Image
from PySide6.QtCore import QObject, Signal

from photo_grid.composer.config import ComposerConfig
from photo_grid.composer.ingest import is_image_file, read_natural_size
from photo_grid.composer.renderer import load_bitmaps, render_composition
from photo_grid.core.geometry import (
    Rect,
    Size,
    apply_pan_delta,
    apply_zoom_delta,
    initial_fit,
    is_settled,
    partition,
    reconcile,
)
from photo_grid.core.models import ImageState, Layout, LayoutNode, merge_images

logger = logging.getLogger(__name__)


class CompositionStore(QObject):
    """Central owner of the composition's mutable state."""

    layoutChanged = Signal(str)   # layout id
    imageChanged = Signal(str)    # leaf id
    paddingChanged = Signal(int)

    def __init__(self, layout: Layout, config: Optional[ComposerConfig] = None) -> None:
        super().__init__()
        self.config = config or ComposerConfig()
        self._layout = layout
        self._padding = self.config.default_padding
        self._images: Dict[str, ImageState] = {}
        self._natural_sizes: Dict[str, Size] = {}
        self._cell_rects: Dict[str, Rect] = {}
        # Decoded but not yet touched by the user: a resize refits these
        self._fresh: Set[str] = set()
        self._relayout()

    # ─────────────────────────────────────────────────────────────────────────
    # Read access
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def layout(self) -> Layout:
        return self._layout

    @property
    def padding(self) -> int:
        return self._padding

    @property
    def images(self) -> Mapping[str, ImageState]:
        """All image states, including orphans from earlier layouts."""
        return MappingProxyType(self._images)

    @property
    def cell_rects(self) -> Mapping[str, Rect]:
        """Cell rectangles of the active layout in logical canvas pixels."""
        return MappingProxyType(self._cell_rects)

    @property
    def canvas_size(self) -> tuple[int, int]:
        return self.config.canvas_size(self._layout.aspect_ratio)

    def image_for(self, leaf_id: str) -> Optional[ImageState]:
        return self._images.get(leaf_id)

    def natural_size(self, leaf_id: str) -> Optional[Size]:
        return self._natural_sizes.get(leaf_id)

    def cell_size(self, leaf_id: str) -> Optional[Size]:
        rect = self._cell_rects.get(leaf_id)
        return rect.size if rect is not None else None

    def merged_root(self) -> LayoutNode:
        """Active layout tree with each leaf's image injected."""
        return merge_images(self._layout.root, self._images)

    # ─────────────────────────────────────────────────────────────────────────
    # Event hooks
    # ─────────────────────────────────────────────────────────────────────────

    def select_layout(self, layout: Layout) -> None:
        """
        Swap the active layout wholesale.

        Images stay keyed by leaf id: ids reused by the new layout keep
        their image, others become inert until a layout uses them again.
        """
        if layout.id == self._layout.id and layout == self._layout:
            return
        self._layout = layout
        orphaned = set(self._images) - set(layout.leaf_ids)
        if orphaned:
            logger.debug(f"Layout {layout.id}: keeping {len(orphaned)} unused image(s)")
        self._relayout()
        self.layoutChanged.emit(layout.id)

    def set_padding(self, value: int) -> None:
        padding = self.config.clamp_padding(value)
        if padding == self._padding:
            return
        self._padding = padding
        self._relayout()
        self.paddingChanged.emit(padding)

    def drop_file(self, leaf_id: str, path: Union[str, Path]) -> bool:
        """
        Assign a file to a cell.

        Non-image files are ignored without error. Otherwise the cell's
        state is replaced outright; zoom and pan are reset once the
        image has been decoded (see on_image_decoded).

        Returns:
            True if the file was accepted
        """
        if not is_image_file(path):
            logger.debug(f"Ignoring non-image drop on {leaf_id}: {path}")
            return False
        self._images[leaf_id] = ImageState(url=str(path))
        self._natural_sizes.pop(leaf_id, None)
        self._fresh.discard(leaf_id)
        logger.info(f"Assigned {Path(path).name} to {leaf_id}")
        self.imageChanged.emit(leaf_id)
        return True

    def load_file(self, leaf_id: str, path: Union[str, Path]) -> bool:
        """
        drop_file() followed by a synchronous decode.

        Raises:
            ImageDecodeError: File is typed as an image but unreadable
        """
        if not self.drop_file(leaf_id, path):
            return False
        self.on_image_decoded(leaf_id, read_natural_size(path), url=str(path))
        return True

    def on_image_decoded(self, leaf_id: str, size: Size, url: Optional[str] = None) -> None:
        """
        Record a decoded image's natural size and fit it to its cell.

        Args:
            leaf_id: Cell the image belongs to
            size: Natural pixel size
            url: Source that was decoded; results for a source that has
                 since been replaced are discarded
        """
        state = self._images.get(leaf_id)
        if state is None or (url is not None and url != state.url):
            logger.debug(f"Discarding stale decode for {leaf_id}: {url}")
            return
        if not size.is_measurable:
            logger.debug(f"Decoded image for {leaf_id} has no area, waiting")
            return
        if leaf_id in self._natural_sizes:
            # Same source dropped twice: this drop was already fitted, keep the user's framing
            self._natural_sizes[leaf_id] = size
            self._fit_or_reconcile(leaf_id)
            return
        self._natural_sizes[leaf_id] = size
        self._fresh.add(leaf_id)
        self._fit_or_reconcile(leaf_id)

    def on_container_resized(self, leaf_id: str, size: Size) -> None:
        """Cell changed size (layout switch, padding change)."""
        rect = self._cell_rects.get(leaf_id)
        x, y = (rect.x, rect.y) if rect is not None else (0.0, 0.0)
        self._cell_rects[leaf_id] = Rect(x, y, size.width, size.height)
        self._fit_or_reconcile(leaf_id)

    def on_zoom_requested(self, leaf_id: str, delta_y: float) -> None:
        """Wheel zoom; negative delta zooms in."""
        state, container, natural = self._inputs(leaf_id)
        if state is None or container is None or natural is None:
            return
        self._fresh.discard(leaf_id)
        zoomed = apply_zoom_delta(state, delta_y, container, natural, self.config.zoom_sensitivity)
        self._commit(leaf_id, reconcile(zoomed, container, natural))

    def on_pan_requested(self, leaf_id: str, dx: float, dy: float) -> None:
        """Drag pan by (dx, dy) logical pixels."""
        state, container, natural = self._inputs(leaf_id)
        if state is None or container is None or natural is None:
            return
        self._fresh.discard(leaf_id)
        moved = apply_pan_delta(state, dx, dy)
        self._commit(leaf_id, reconcile(moved, container, natural))

    # ─────────────────────────────────────────────────────────────────────────
    # Export
    # ─────────────────────────────────────────────────────────────────────────

    def render(self) -> Image.Image:
        """
        Flatten the active composition at full logical resolution.

        Raises:
            ImageDecodeError: An assigned source can no longer be read
        """
        bitmaps = load_bitmaps(self._images, self._layout.leaf_ids)
        return render_composition(self._layout, self._images, bitmaps, self._padding, self.config)

    # ─────────────────────────────────────────────────────────────────────────
    # Internals
    # ─────────────────────────────────────────────────────────────────────────

    def _inputs(self, leaf_id: str):
        return self._images.get(leaf_id), self.cell_size(leaf_id), self._natural_sizes.get(leaf_id)

    def _relayout(self) -> None:
        width, height = self.canvas_size
        self._cell_rects = partition(self._layout.root, width, height, gap=self._padding)
        for leaf_id in self._cell_rects:
            self._fit_or_reconcile(leaf_id)

    def _fit_or_reconcile(self, leaf_id: str) -> None:
        state, container, natural = self._inputs(leaf_id)
        if state is None or container is None or natural is None:
            return
        if leaf_id in self._fresh:
            fitted = initial_fit(natural, container, state.url)
            if fitted is not None:
                self._commit(leaf_id, fitted)
            return
        self._commit(leaf_id, reconcile(state, container, natural))

    def _commit(self, leaf_id: str, state: ImageState) -> None:
        previous = self._images.get(leaf_id)
        self._images[leaf_id] = state
        if previous is None or not is_settled(previous, state, self.config.pan_tolerance):
            self.imageChanged.emit(leaf_id)
