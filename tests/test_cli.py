"""
Tests for the photo-grid command line.
"""

import json
import logging

import pytest
from PIL import Image

from photo_grid.cli import EXIT_CAPTURE_ERROR, EXIT_OK, EXIT_USAGE, main
from photo_grid.core.models import Layout, Leaf


@pytest.fixture(autouse=True)
def restore_package_logger():
    """main() configures the package logger; undo it after each test."""
    logger = logging.getLogger("photo_grid")
    saved = (list(logger.handlers), logger.level, logger.propagate)
    yield
    for handler in list(logger.handlers):
        if handler not in saved[0]:
            logger.removeHandler(handler)
            handler.close()
    logger.level, logger.propagate = saved[1], saved[2]


class TestLayoutsCommand:
    """Tests for ``photo-grid layouts``."""

    def test_layouts_when_run_then_lists_every_template(self, capsys):
        assert main(["layouts"]) == EXIT_OK

        out = capsys.readouterr().out.splitlines()
        assert [line.split()[0] for line in out] == ["single", "2x1", "1x2", "2x2", "complex-1"]
        assert "cell-1, cell-2, cell-3, cell-4" in out[3]

    def test_layouts_when_catalog_then_extra_layout_listed(self, capsys, tmp_path):
        catalog = tmp_path / "extra.json"
        catalog.write_text(json.dumps([Layout("strip", "Strip", 4.0, Leaf("cell-1")).to_dict()]))

        assert main(["--catalog", str(catalog), "layouts"]) == EXIT_OK

        assert capsys.readouterr().out.splitlines()[-1].startswith("strip")

    def test_layouts_when_catalog_broken_then_usage_error(self, capsys, tmp_path):
        catalog = tmp_path / "extra.json"
        catalog.write_text("{}")

        assert main(["--catalog", str(catalog), "layouts"]) == EXIT_USAGE
        assert "must contain a list" in capsys.readouterr().err

    @pytest.mark.parametrize("payload", [
        [1],
        [{"id": "x", "aspect_ratio": "wide", "root": {"type": "leaf", "id": "a"}}],
        [{"id": "x", "aspect_ratio": 1.0, "root": "leaf"}],
    ])
    def test_layouts_when_catalog_item_malformed_then_usage_error(self, capsys, tmp_path, payload):
        catalog = tmp_path / "extra.json"
        catalog.write_text(json.dumps(payload))

        assert main(["--catalog", str(catalog), "layouts"]) == EXIT_USAGE
        assert capsys.readouterr().err.startswith("error:")


class TestRenderCommand:
    """Tests for ``photo-grid render``."""

    def test_render_when_images_assigned_then_writes_png(self, capsys, tmp_path, make_image):
        red = make_image(400, 400)
        blue = make_image(300, 600, color="blue")
        out = tmp_path / "grid.png"

        code = main([
            "render", "--layout", "2x1",
            "--image", f"cell-1={red}", "--image", f"cell-2={blue}",
            "--padding", "0", "-o", str(out),
        ])

        assert code == EXIT_OK
        assert capsys.readouterr().out.strip() == str(out)
        with Image.open(out) as img:
            assert img.size == (800, 400)
            assert img.convert("RGB").getpixel((200, 200)) == (255, 0, 0)
            assert img.convert("RGB").getpixel((600, 200)) == (0, 0, 255)

    def test_render_when_padding_above_max_then_clamped(self, tmp_path, make_image):
        out = tmp_path / "grid.png"

        assert main(["render", "--layout", "single", "--image", f"cell-1={make_image(10, 10)}",
                     "--padding", "500", "-o", str(out)]) == EXIT_OK

        with Image.open(out) as img:
            rgb = img.convert("RGB")
            assert rgb.getpixel((49, 400)) == (255, 255, 255)
            assert rgb.getpixel((51, 400)) == (255, 0, 0)

    def test_render_when_unknown_layout_then_usage_error(self, capsys, tmp_path):
        assert main(["render", "--layout", "9x9", "-o", str(tmp_path / "x.png")]) == EXIT_USAGE
        assert "Unknown layout" in capsys.readouterr().err

    def test_render_when_image_unreadable_then_capture_error(self, capsys, tmp_path):
        fake = tmp_path / "fake.png"
        fake.write_bytes(b"not a png")

        code = main(["render", "--layout", "single", "--image", f"cell-1={fake}",
                     "-o", str(tmp_path / "x.png")])

        assert code == EXIT_CAPTURE_ERROR
        assert not (tmp_path / "x.png").exists()

    def test_render_when_non_image_then_skipped(self, tmp_path):
        notes = tmp_path / "notes.txt"
        notes.write_text("hello")
        out = tmp_path / "grid.png"

        assert main(["render", "--layout", "single", "--image", f"cell-1={notes}",
                     "-o", str(out)]) == EXIT_OK
        assert out.exists()

    def test_render_when_assignment_malformed_then_argparse_exits(self, tmp_path):
        with pytest.raises(SystemExit) as excinfo:
            main(["render", "--layout", "single", "--image", "no-equals-sign"])
        assert excinfo.value.code == 2

    def test_render_when_image_over_pixel_limit_then_capture_error(self, monkeypatch, tmp_path, make_image):
        path = make_image(100, 100)
        monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 10)

        code = main(["render", "--layout", "single", "--image", f"cell-1={path}",
                     "-o", str(tmp_path / "x.png")])

        assert code == EXIT_CAPTURE_ERROR
        assert not (tmp_path / "x.png").exists()
