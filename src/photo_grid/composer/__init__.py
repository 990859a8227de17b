"""
Module: composer

Purpose:
    Everything between the pure geometry and the GUI: configuration,
    the built-in layout catalog, image ingestion, flattening the
    composition with Pillow, and exporting it as PNG.

Key Functions:
    - get_layout(): Catalog lookup
    - is_image_file(), read_natural_size(): Ingestion
    - render_composition(): Flatten to a PIL Image

Key Classes:
    - ComposerConfig: Configuration
    - CompositionExporter: Export with presentation scale handling
    - CaptureError: Export failure

Dependencies:
    - PIL: Decoding, resampling, PNG encoding
    - photo_grid.core: Models and geometry

Used By:
    - photo_grid.gui
    - photo_grid.cli
"""

from .config import ComposerConfig
from .catalog import (
    DEFAULT_LAYOUTS,
    DEFAULT_LAYOUT_ID,
    default_layout,
    get_layout,
    load_catalog,
    merge_catalogs,
)
from .ingest import ImageDecodeError, is_image_file, open_bitmap, read_natural_size
from .renderer import load_bitmaps, render_cell, render_composition
from .export import (
    CaptureError,
    CompositionExporter,
    ExportInProgressError,
    HeadlessSurface,
    PresentationSurface,
)

__all__ = [
    # Config
    "ComposerConfig",
    # Catalog
    "DEFAULT_LAYOUTS",
    "DEFAULT_LAYOUT_ID",
    "default_layout",
    "get_layout",
    "load_catalog",
    "merge_catalogs",
    # Ingestion
    "ImageDecodeError",
    "is_image_file",
    "open_bitmap",
    "read_natural_size",
    # Rendering
    "load_bitmaps",
    "render_cell",
    "render_composition",
    # Export
    "CaptureError",
    "CompositionExporter",
    "ExportInProgressError",
    "HeadlessSurface",
    "PresentationSurface",
]
