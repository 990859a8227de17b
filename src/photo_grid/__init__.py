"""Top-level package for Photo Grid.

Provides subpackages:
- photo_grid.core – layout tree, cell geometry and viewport math
- photo_grid.composer – layout catalog, ingestion, raster rendering and export
- photo_grid.gui – PySide6 app
"""

import re
from importlib.metadata import PackageNotFoundError, version as _dist_version
from pathlib import Path

_PYPROJECT = Path(__file__).resolve().parents[2] / "pyproject.toml"
_VERSION_LINE = re.compile(r'^version\s*=\s*["\']([^"\']+)["\']', re.MULTILINE)


def _get_version() -> str:
    """Version of the source checkout, else of the installed distribution."""
    try:
        match = _VERSION_LINE.search(_PYPROJECT.read_text(encoding="utf-8"))
    except OSError:
        match = None
    if match:
        return match.group(1)
    try:
        return _dist_version("photo-grid")
    except PackageNotFoundError:
        return "0.0.0"


__version__ = _get_version()
__all__: list[str] = ["__version__"]
