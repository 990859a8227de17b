"""
Composition canvas widget.

Paints the active layout at logical resolution scaled by a display-only
factor, and turns mouse/drag events into CompositionStore hooks. All
geometry comes from the store's cell rectangles and the core solver, so
the canvas never keeps its own idea of zoom or pan.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from PySide6.QtCore import QPointF, QRectF, Qt, QThread, Signal
from PySide6.QtGui import QColor, QImage, QImageReader, QPainter, QPen, QPixmap
from PySide6.QtWidgets import QApplication, QWidget

from photo_grid.core.geometry import Size, cell_at, scaled_canvas_size, visible_source_box
from photo_grid.gui.models.composition import CompositionStore

logger = logging.getLogger(__name__)

EMPTY_CELL_COLOR = QColor("#f3f4f6")
EMPTY_CELL_BORDER = QColor("#d1d5db")
EMPTY_CELL_TEXT = QColor("#9ca3af")
HOVER_CELL_COLOR = QColor("#eff6ff")
HOVER_CELL_BORDER = QColor("#3b82f6")

# Qt reports 120 units per wheel notch; browsers report ~100 pixels
WHEEL_UNITS_PER_NOTCH = 120
WHEEL_DELTA_PER_NOTCH = 100


class DecodeWorker(QThread):
    """Background decode of one image file."""

    decoded = Signal(str, str, QImage)  # leaf id, url, image (null on failure)

    def __init__(self, leaf_id: str, url: str, parent=None):
        super().__init__(parent)
        self.leaf_id = leaf_id
        self.url = url

    def run(self):
        reader = QImageReader(self.url)
        reader.setAutoTransform(True)
        image = reader.read()
        if image.isNull():
            logger.warning(f"Failed to decode {self.url}: {reader.errorString()}")
        self.decoded.emit(self.leaf_id, self.url, image)


class CompositionCanvas(QWidget):
    """
    Canvas that shows the composition and handles drop, drag-pan and
    wheel-zoom on its cells.

    Implements the PresentationSurface protocol used by the exporter.
    """

    fileRequested = Signal(str)  # leaf id of an empty cell that was clicked

    def __init__(self, store: CompositionStore, parent=None):
        super().__init__(parent)
        self.store = store
        self._scale = 1.0
        self._pixmaps: Dict[str, Tuple[str, QPixmap]] = {}
        self._workers: List[DecodeWorker] = []
        self._pan_leaf: Optional[str] = None
        self._press_leaf: Optional[str] = None
        self._last_pos: Optional[QPointF] = None
        self._hover_leaf: Optional[str] = None

        self.setAcceptDrops(True)
        self.setMouseTracking(True)

        store.layoutChanged.connect(self._on_geometry_changed)
        store.paddingChanged.connect(self._on_geometry_changed)
        store.imageChanged.connect(lambda _leaf_id: self.update())
        self._apply_size()

    # ─────────────────────────────────────────────────────────────────────────
    # Presentation scale
    # ─────────────────────────────────────────────────────────────────────────

    def presentation_scale(self) -> float:
        return self._scale

    def set_presentation_scale(self, scale: float) -> None:
        if scale == self._scale:
            return
        self._scale = scale
        self._apply_size()
        self.update()

    def settle(self) -> None:
        QApplication.processEvents()

    def _apply_size(self) -> None:
        width, height = scaled_canvas_size(
            self._scale, self.store.config.canvas_width, self.store.layout.aspect_ratio
        )
        self.setFixedSize(max(1, width), max(1, height))

    def _on_geometry_changed(self, *_args) -> None:
        self._apply_size()
        self.update()

    def _to_logical(self, pos: QPointF) -> Tuple[float, float]:
        if self._scale <= 0:
            return (-1.0, -1.0)
        return pos.x() / self._scale, pos.y() / self._scale

    def leaf_at(self, pos: QPointF) -> Optional[str]:
        """Cell under a widget-space point, or None over gaps."""
        x, y = self._to_logical(pos)
        return cell_at(self.store.cell_rects, x, y)

    # ─────────────────────────────────────────────────────────────────────────
    # Image assignment
    # ─────────────────────────────────────────────────────────────────────────

    def assign_file(self, leaf_id: str, path: str) -> bool:
        """Hand a file to the store and start decoding it."""
        if not self.store.drop_file(leaf_id, path):
            return False
        self._pixmaps.pop(leaf_id, None)
        worker = DecodeWorker(leaf_id, str(path), self)
        worker.decoded.connect(self._on_decoded)
        worker.finished.connect(lambda w=worker: self._release_worker(w))
        self._workers.append(worker)
        worker.start()
        return True

    def _release_worker(self, worker: DecodeWorker) -> None:
        if worker in self._workers:
            self._workers.remove(worker)
        worker.deleteLater()

    def _on_decoded(self, leaf_id: str, url: str, image: QImage) -> None:
        if image.isNull():
            return
        state = self.store.image_for(leaf_id)
        if state is None or state.url != url:
            return
        self._pixmaps[leaf_id] = (url, QPixmap.fromImage(image))
        self.store.on_image_decoded(leaf_id, Size(image.width(), image.height()), url=url)
        self.update()

    def _pixmap_for(self, leaf_id: str) -> Optional[QPixmap]:
        state = self.store.image_for(leaf_id)
        cached = self._pixmaps.get(leaf_id)
        if state is None or cached is None or cached[0] != state.url:
            return None
        return cached[1]

    # ─────────────────────────────────────────────────────────────────────────
    # Painting
    # ─────────────────────────────────────────────────────────────────────────

    def paintEvent(self, event):
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.SmoothPixmapTransform)
        painter.scale(self._scale, self._scale)

        width, height = self.store.canvas_size
        painter.fillRect(QRectF(0, 0, width, height), QColor(self.store.config.background))

        for leaf_id, rect in self.store.cell_rects.items():
            target = QRectF(rect.x, rect.y, rect.width, rect.height)
            if target.isEmpty():
                continue
            state = self.store.image_for(leaf_id)
            natural = self.store.natural_size(leaf_id)
            pixmap = self._pixmap_for(leaf_id)
            box = None
            if state is not None and natural is not None and pixmap is not None:
                box = visible_source_box(state, rect.size, natural)
            if box is None:
                self._paint_empty(painter, leaf_id, target, loading=state is not None)
                continue
            left, top, right, bottom = box
            painter.drawPixmap(target, pixmap, QRectF(left, top, right - left, bottom - top))

        painter.end()

    def _paint_empty(self, painter: QPainter, leaf_id: str, target: QRectF, loading: bool) -> None:
        hovered = leaf_id == self._hover_leaf
        painter.fillRect(target, HOVER_CELL_COLOR if hovered else EMPTY_CELL_COLOR)
        pen = QPen(HOVER_CELL_BORDER if hovered else EMPTY_CELL_BORDER)
        pen.setWidthF(2.0)
        pen.setStyle(Qt.PenStyle.DashLine)
        painter.setPen(pen)
        painter.drawRect(target.adjusted(1, 1, -1, -1))
        painter.setPen(EMPTY_CELL_TEXT)
        text = "Loading..." if loading else "Drop Image Here"
        painter.drawText(target, Qt.AlignmentFlag.AlignCenter, text)

    # ─────────────────────────────────────────────────────────────────────────
    # Mouse
    # ─────────────────────────────────────────────────────────────────────────

    def wheelEvent(self, event):
        leaf_id = self.leaf_at(event.position())
        if leaf_id is None or self.store.image_for(leaf_id) is None:
            event.ignore()
            return
        event.accept()
        delta_y = -event.angleDelta().y() * WHEEL_DELTA_PER_NOTCH / WHEEL_UNITS_PER_NOTCH
        self.store.on_zoom_requested(leaf_id, delta_y)

    def mousePressEvent(self, event):
        if event.button() != Qt.MouseButton.LeftButton:
            return
        leaf_id = self.leaf_at(event.position())
        self._press_leaf = leaf_id
        if leaf_id is not None and self.store.image_for(leaf_id) is not None:
            self._pan_leaf = leaf_id
            self._last_pos = event.position()
            self.setCursor(Qt.CursorShape.ClosedHandCursor)

    def mouseMoveEvent(self, event):
        if self._pan_leaf is not None and self._last_pos is not None:
            pos = event.position()
            dx = (pos.x() - self._last_pos.x()) / self._scale
            dy = (pos.y() - self._last_pos.y()) / self._scale
            self._last_pos = pos
            self.store.on_pan_requested(self._pan_leaf, dx, dy)
            return

        leaf_id = self.leaf_at(event.position())
        if leaf_id != self._hover_leaf:
            self._hover_leaf = leaf_id
            self.update()
        if leaf_id is not None and self.store.image_for(leaf_id) is not None:
            self.setCursor(Qt.CursorShape.OpenHandCursor)
        elif leaf_id is not None:
            self.setCursor(Qt.CursorShape.PointingHandCursor)
        else:
            self.unsetCursor()

    def mouseReleaseEvent(self, event):
        if event.button() != Qt.MouseButton.LeftButton:
            return
        was_panning = self._pan_leaf is not None
        self._pan_leaf = None
        self._last_pos = None
        self.unsetCursor()

        leaf_id = self.leaf_at(event.position())
        if not was_panning and leaf_id is not None and leaf_id == self._press_leaf:
            if self.store.image_for(leaf_id) is None:
                self.fileRequested.emit(leaf_id)
        self._press_leaf = None

    def leaveEvent(self, event):
        self._pan_leaf = None
        self._last_pos = None
        if self._hover_leaf is not None:
            self._hover_leaf = None
            self.update()
        super().leaveEvent(event)

    # ─────────────────────────────────────────────────────────────────────────
    # Drag and drop
    # ─────────────────────────────────────────────────────────────────────────

    def dragEnterEvent(self, event):
        if event.mimeData().hasUrls():
            event.acceptProposedAction()
        else:
            event.ignore()

    def dragMoveEvent(self, event):
        leaf_id = self.leaf_at(event.position())
        if leaf_id != self._hover_leaf:
            self._hover_leaf = leaf_id
            self.update()
        if leaf_id is None:
            event.ignore()
        else:
            event.acceptProposedAction()

    def dragLeaveEvent(self, event):
        self._hover_leaf = None
        self.update()

    def dropEvent(self, event):
        self._hover_leaf = None
        leaf_id = self.leaf_at(event.position())
        urls = [url for url in event.mimeData().urls() if url.isLocalFile()]
        if leaf_id is None or not urls:
            event.ignore()
            self.update()
            return
        path = urls[0].toLocalFile()
        if self.assign_file(leaf_id, path):
            event.acceptProposedAction()
        else:
            logger.debug(f"Dropped file {Path(path).name} is not an image")
            event.ignore()
        self.update()
