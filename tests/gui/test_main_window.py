"""Tests for the main window wiring."""

import pytest
from PIL import Image

from photo_grid.composer import ComposerConfig
from photo_grid.gui.main_window import MainWindow


@pytest.fixture
def window(qtbot):
    win = MainWindow()
    qtbot.addWidget(win)
    with qtbot.waitExposed(win):
        win.show()
    return win


class TestSidebar:
    """Tests for layout buttons and the padding slider."""

    def test_default_layout_button_checked(self, window):
        """Two columns is selected at start."""
        assert window.store.layout.id == "2x1"
        assert window.layout_buttons["2x1"].isChecked()
        assert not window.layout_buttons["2x2"].isChecked()

    def test_layout_button_switches_layout(self, window):
        """Clicking a layout button swaps the store's layout."""
        window.layout_buttons["2x2"].click()

        assert window.store.layout.id == "2x2"
        assert window.layout_buttons["2x2"].isChecked()
        assert not window.layout_buttons["2x1"].isChecked()

    def test_slider_sets_padding(self, window):
        """Slider drives the store padding and the label follows."""
        window.padding_slider.setValue(30)

        assert window.store.padding == 30
        assert window.padding_label.text() == "Padding (30px)"

    def test_slider_range_follows_config(self, qtbot):
        """Slider maximum is the configured max padding."""
        win = MainWindow(config=ComposerConfig(max_padding=20, default_padding=5))
        qtbot.addWidget(win)

        assert win.padding_slider.maximum() == 20
        assert win.padding_slider.value() == 5


class TestExport:
    """Tests for export_to()."""

    def test_export_writes_full_resolution_png(self, window, tmp_path, sample_image):
        """Export is at logical size whatever the on-screen scale."""
        window.store.load_file("cell-1", sample_image)
        window.canvas.set_presentation_scale(0.4)

        written = window.export_to(tmp_path / "grid.png")

        assert written == tmp_path / "grid.png"
        with Image.open(written) as img:
            assert img.size == (800, 400)
        assert window.canvas.presentation_scale() == 0.4

    def test_export_failure_reports_and_restores_scale(self, window, tmp_path, monkeypatch):
        """Capture errors are shown to the user; the canvas scale is put back."""
        shown = []
        monkeypatch.setattr(
            "photo_grid.gui.main_window.QMessageBox.critical",
            lambda *args, **kwargs: shown.append(args),
        )

        def broken():
            raise OSError("disk on fire")

        monkeypatch.setattr(window.store, "render", broken)
        window.canvas.set_presentation_scale(0.4)

        assert window.export_to(tmp_path / "grid.png") is None
        assert len(shown) == 1
        assert "disk on fire" in shown[0][2]
        assert window.canvas.presentation_scale() == 0.4
        assert not window.exporter.in_flight
