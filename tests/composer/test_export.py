"""
Unit tests for PNG export and presentation scale handling.
"""

import pytest
from PIL import Image

from photo_grid.composer import (
    CaptureError,
    CompositionExporter,
    ExportInProgressError,
    HeadlessSurface,
    ImageDecodeError,
)


@pytest.fixture
def exporter():
    return CompositionExporter()


def _solid(width=80, height=40):
    return Image.new("RGB", (width, height), "green")


class TestCompositionExporter:
    """Tests for CompositionExporter.export()."""

    def test_export_when_capture_succeeds_then_writes_png(self, exporter, tmp_path):
        out = tmp_path / "nested" / "grid.png"

        result = exporter.export(HeadlessSurface(), _solid, out)

        assert result == out
        with Image.open(out) as written:
            assert written.format == "PNG"
            assert written.size == (80, 40)

    def test_export_when_scaled_then_captures_at_full_scale(self, exporter, tmp_path):
        surface = HeadlessSurface(scale=0.5)
        seen = []

        def capture():
            seen.append(surface.presentation_scale())
            return _solid()

        exporter.export(surface, capture, tmp_path / "out.png")

        assert seen == [1.0]
        assert surface.presentation_scale() == 0.5

    @pytest.mark.parametrize("error", [
        OSError("disk"),
        ImageDecodeError("gone"),
        ValueError("bad"),
        Image.DecompressionBombError("too big"),
    ])
    def test_export_when_capture_fails_then_raises_and_restores_scale(self, exporter, tmp_path, error):
        surface = HeadlessSurface(scale=0.75)

        def capture():
            raise error

        with pytest.raises(CaptureError, match="Failed to capture"):
            exporter.export(surface, capture, tmp_path / "out.png")

        assert surface.presentation_scale() == 0.75
        assert not exporter.in_flight
        assert not (tmp_path / "out.png").exists()

    def test_export_when_write_fails_then_raises_capture_error(self, exporter, tmp_path):
        surface = HeadlessSurface(scale=0.75)
        target = tmp_path / "taken"
        target.mkdir()

        with pytest.raises(CaptureError, match="Failed to write"):
            exporter.export(surface, _solid, target)

        assert surface.presentation_scale() == 0.75

    def test_export_when_parent_is_a_file_then_raises_capture_error(self, exporter, tmp_path):
        surface = HeadlessSurface(scale=0.5)
        blocker = tmp_path / "file.txt"
        blocker.write_text("in the way")

        with pytest.raises(CaptureError, match="Failed to write"):
            exporter.export(surface, _solid, blocker / "out.png")

        assert surface.presentation_scale() == 0.5
        assert not exporter.in_flight

    def test_export_when_already_running_then_second_request_rejected(self, exporter, tmp_path):
        surface = HeadlessSurface(scale=0.5)
        rejected = []

        def capture():
            assert exporter.in_flight
            with pytest.raises(ExportInProgressError):
                exporter.export(surface, _solid, tmp_path / "second.png")
            rejected.append(True)
            return _solid()

        exporter.export(surface, capture, tmp_path / "first.png")

        assert rejected == [True]
        assert (tmp_path / "first.png").exists()
        assert not (tmp_path / "second.png").exists()
        assert surface.presentation_scale() == 0.5
        assert not exporter.in_flight

    def test_export_when_previous_failed_then_next_runs(self, exporter, tmp_path):
        def broken():
            raise OSError("boom")

        with pytest.raises(CaptureError):
            exporter.export(HeadlessSurface(), broken, tmp_path / "a.png")

        exporter.export(HeadlessSurface(), _solid, tmp_path / "b.png")
        assert (tmp_path / "b.png").exists()
