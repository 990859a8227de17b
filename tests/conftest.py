import os
import sys
from pathlib import Path

import pytest
from PIL import Image

# Add src to sys.path so we can import photo_grid
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

# Widget tests run without a display
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")


# Common test fixtures
@pytest.fixture
def make_image(tmp_path: Path):
    """Factory that writes a solid-colour PNG of the given size."""
    def _make(width: int, height: int, color="red", name: str = None) -> Path:
        path = tmp_path / (name or f"img_{width}x{height}_{color}.png")
        Image.new("RGB", (width, height), color=color).save(path)
        return path
    return _make


@pytest.fixture
def sample_image(make_image):
    """A 400x400 test image."""
    return make_image(400, 400)
