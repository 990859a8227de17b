"""
Main Window for the Photo Grid GUI.

Sidebar with the layout catalog, padding slider and export button; the
composition canvas fills the rest, scaled to fit.
"""
import logging
from pathlib import Path
from typing import Optional, Tuple

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QFileDialog, QFrame, QGridLayout, QHBoxLayout, QLabel, QMainWindow,
    QMessageBox, QPushButton, QSlider, QVBoxLayout, QWidget,
)

from photo_grid import __version__
from photo_grid.composer.catalog import DEFAULT_LAYOUTS, default_layout
from photo_grid.composer.config import ComposerConfig
from photo_grid.composer.export import CaptureError, CompositionExporter, ExportInProgressError
from photo_grid.core.geometry import available_area, compute_scale
from photo_grid.core.models import Layout
from photo_grid.gui.models.composition import CompositionStore
from photo_grid.gui.widgets.canvas import CompositionCanvas

logger = logging.getLogger(__name__)

IMAGE_FILE_FILTER = "Images (*.png *.jpg *.jpeg *.gif *.bmp *.webp *.tif *.tiff)"

SIDEBAR_STYLE = """
QFrame#sidebar { background-color: #111827; border-right: 1px solid #1f2937; }
QLabel { color: #d1d5db; }
QLabel#title { color: white; font-size: 18px; font-weight: bold; }
QLabel#section { color: #9ca3af; font-size: 11px; font-weight: 600; text-transform: uppercase; }
QPushButton[layoutButton="true"] {
    background-color: #1f2937; color: #d1d5db; border: none;
    border-radius: 6px; padding: 8px 10px; text-align: left;
}
QPushButton[layoutButton="true"]:checked { background-color: #2563eb; color: white; }
QPushButton#exportButton {
    background-color: #16a34a; color: white; border: none;
    border-radius: 8px; padding: 12px; font-weight: 600;
}
QPushButton#exportButton:hover { background-color: #22c55e; }
"""


class MainWindow(QMainWindow):
    def __init__(
        self,
        config: Optional[ComposerConfig] = None,
        layouts: Tuple[Layout, ...] = DEFAULT_LAYOUTS,
    ):
        super().__init__()
        self.config = config or ComposerConfig()
        self.layouts = layouts
        self.store = CompositionStore(self._initial_layout(), self.config)
        self.exporter = CompositionExporter()

        self.setWindowTitle("Photo Grid")
        self.resize(1280, 860)
        self.setMinimumSize(640, 480)

        central = QWidget()
        root_layout = QHBoxLayout(central)
        root_layout.setContentsMargins(0, 0, 0, 0)
        root_layout.setSpacing(0)

        root_layout.addWidget(self._build_sidebar())

        self.canvas_host = QWidget()
        self.canvas_host.setStyleSheet("background-color: #030712;")
        host_layout = QVBoxLayout(self.canvas_host)
        half_chrome = self.config.chrome_padding // 2
        host_layout.setContentsMargins(half_chrome, half_chrome, half_chrome, half_chrome)
        self.canvas = CompositionCanvas(self.store)
        self.canvas.fileRequested.connect(self._pick_file_for)
        host_layout.addWidget(self.canvas, alignment=Qt.AlignmentFlag.AlignCenter)
        root_layout.addWidget(self.canvas_host, 1)

        self.setCentralWidget(central)
        self.statusBar().showMessage(f"Photo Grid v{__version__}", 3000)

        self.store.layoutChanged.connect(self._on_layout_changed)
        self._update_scale()

    def _initial_layout(self) -> Layout:
        for layout in self.layouts:
            if layout.id == default_layout().id:
                return layout
        return self.layouts[0]

    # ─────────────────────────────────────────────────────────────────────────
    # Sidebar
    # ─────────────────────────────────────────────────────────────────────────

    def _build_sidebar(self) -> QWidget:
        sidebar = QFrame()
        sidebar.setObjectName("sidebar")
        sidebar.setFixedWidth(self.config.sidebar_width)
        sidebar.setStyleSheet(SIDEBAR_STYLE)

        layout = QVBoxLayout(sidebar)
        layout.setContentsMargins(24, 24, 24, 24)
        layout.setSpacing(16)

        title = QLabel("Photo Grid")
        title.setObjectName("title")
        layout.addWidget(title)

        layouts_label = QLabel("Layouts")
        layouts_label.setObjectName("section")
        layout.addWidget(layouts_label)

        grid = QGridLayout()
        grid.setSpacing(8)
        self.layout_buttons = {}
        for index, item in enumerate(self.layouts):
            button = QPushButton(item.name)
            button.setProperty("layoutButton", True)
            button.setCheckable(True)
            button.setChecked(item.id == self.store.layout.id)
            button.clicked.connect(lambda _checked=False, chosen=item: self.store.select_layout(chosen))
            grid.addWidget(button, index // 2, index % 2)
            self.layout_buttons[item.id] = button
        layout.addLayout(grid)

        spacing_label = QLabel("Spacing")
        spacing_label.setObjectName("section")
        layout.addWidget(spacing_label)

        self.padding_label = QLabel()
        layout.addWidget(self.padding_label)
        self.padding_slider = QSlider(Qt.Orientation.Horizontal)
        self.padding_slider.setRange(0, self.config.max_padding)
        self.padding_slider.setValue(self.store.padding)
        self.padding_slider.valueChanged.connect(self.store.set_padding)
        self.store.paddingChanged.connect(self._on_padding_changed)
        layout.addWidget(self.padding_slider)
        self._on_padding_changed(self.store.padding)

        layout.addStretch(1)

        self.export_button = QPushButton("Export Image")
        self.export_button.setObjectName("exportButton")
        self.export_button.clicked.connect(self._export)
        layout.addWidget(self.export_button)

        return sidebar

    def _on_padding_changed(self, value: int) -> None:
        self.padding_label.setText(f"Padding ({value}px)")
        if self.padding_slider.value() != value:
            self.padding_slider.setValue(value)

    def _on_layout_changed(self, layout_id: str) -> None:
        for item_id, button in self.layout_buttons.items():
            button.setChecked(item_id == layout_id)
        self._update_scale()

    # ─────────────────────────────────────────────────────────────────────────
    # Viewport
    # ─────────────────────────────────────────────────────────────────────────

    def resizeEvent(self, event):
        super().resizeEvent(event)
        self._update_scale()

    def _update_scale(self) -> None:
        area = available_area(
            self.width(),
            self.height() - self.statusBar().height(),
            self.config.sidebar_width,
            self.config.chrome_padding,
        )
        scale = compute_scale(area, self.config.canvas_width, self.store.layout.aspect_ratio)
        self.canvas.set_presentation_scale(scale)

    # ─────────────────────────────────────────────────────────────────────────
    # Actions
    # ─────────────────────────────────────────────────────────────────────────

    def _pick_file_for(self, leaf_id: str) -> None:
        path, _ = QFileDialog.getOpenFileName(self, "Choose Image", "", IMAGE_FILE_FILTER)
        if path:
            self.canvas.assign_file(leaf_id, path)

    def _export(self) -> None:
        path, _ = QFileDialog.getSaveFileName(
            self, "Export Image", self.config.export_filename, "PNG Image (*.png)"
        )
        if not path:
            return
        self.export_to(Path(path))

    def export_to(self, path: Path) -> Optional[Path]:
        """Export the composition, reporting failures to the user."""
        try:
            written = self.exporter.export(self.canvas, self.store.render, path)
        except ExportInProgressError:
            self.statusBar().showMessage("Export already in progress", 3000)
            return None
        except CaptureError as e:
            logger.error("Failed to export image", exc_info=True)
            QMessageBox.critical(self, "Export Failed", f"Failed to export image.\n\n{e}")
            return None
        self.statusBar().showMessage(f"Exported {written.name}", 5000)
        return written
