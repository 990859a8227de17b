"""
Command-line interface for Photo Grid.

Renders a composition without opening the GUI, using the same store,
renderer and exporter as the app. Images are placed at their cover-fit,
centered framing.

Usage:
    photo-grid layouts
    photo-grid render --layout 2x2 --image cell-1=a.jpg --image cell-2=b.jpg -o grid.png
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, Tuple

from photo_grid.composer.catalog import DEFAULT_LAYOUTS, get_layout, load_catalog, merge_catalogs
from photo_grid.composer.config import ComposerConfig
from photo_grid.composer.export import CaptureError, CompositionExporter, HeadlessSurface
from photo_grid.composer.ingest import ImageDecodeError
from photo_grid.core.models import Layout, LayoutError

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_CAPTURE_ERROR = 1
EXIT_USAGE = 2


def _parse_assignment(value: str) -> Tuple[str, Path]:
    """Parse ``CELL=PATH``."""
    leaf_id, sep, path = value.partition("=")
    if not sep or not leaf_id or not path:
        raise argparse.ArgumentTypeError(f"expected CELL=PATH, got {value!r}")
    return leaf_id, Path(path)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="photo-grid", description="Photo collage composer")
    parser.add_argument("--catalog", type=Path, help="JSON file with additional layouts")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("layouts", help="List available layouts")

    render = sub.add_parser("render", help="Render a composition to PNG")
    render.add_argument("--layout", required=True, help="Layout id")
    render.add_argument(
        "--image",
        dest="images",
        action="append",
        default=[],
        type=_parse_assignment,
        metavar="CELL=PATH",
        help="Assign an image to a cell (repeatable)",
    )
    render.add_argument("--padding", type=int, default=None, help="Gap and outer margin in pixels")
    render.add_argument("-o", "--output", type=Path, default=None, help="Output PNG path")
    return parser


def _load_layouts(catalog: Optional[Path]) -> Tuple[Layout, ...]:
    if catalog is None:
        return DEFAULT_LAYOUTS
    return merge_catalogs(DEFAULT_LAYOUTS, load_catalog(catalog))


def _cmd_layouts(layouts: Tuple[Layout, ...]) -> int:
    for layout in layouts:
        cells = ", ".join(layout.leaf_ids)
        print(f"{layout.id:<12} {layout.name:<14} {layout.aspect_ratio:g}  [{cells}]")
    return EXIT_OK


def _cmd_render(args: argparse.Namespace, layouts: Tuple[Layout, ...], config: ComposerConfig) -> int:
    # Qt is only needed once there is something to render
    from photo_grid.gui.models.composition import CompositionStore

    try:
        layout = get_layout(args.layout, layouts)
    except KeyError as e:
        print(f"error: {e.args[0]}", file=sys.stderr)
        return EXIT_USAGE

    store = CompositionStore(layout, config)
    if args.padding is not None:
        store.set_padding(args.padding)

    for leaf_id, path in args.images:
        if leaf_id not in layout.leaf_ids:
            logger.warning(f"Layout {layout.id} has no cell {leaf_id!r}; image {path} unused")
        try:
            accepted = store.load_file(leaf_id, path)
        except ImageDecodeError as e:
            print(f"error: {e}", file=sys.stderr)
            return EXIT_CAPTURE_ERROR
        if not accepted:
            logger.warning(f"Skipping {path}: not an image file")

    output = args.output or Path(config.export_filename)
    try:
        CompositionExporter().export(HeadlessSurface(), store.render, output)
    except CaptureError as e:
        logger.error("Failed to export image", exc_info=True)
        print(f"error: {e}", file=sys.stderr)
        return EXIT_CAPTURE_ERROR
    print(output)
    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    from photo_grid.gui.utils.logging_utils import configure_logging

    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(logging.DEBUG if args.verbose else logging.WARNING)

    try:
        layouts = _load_layouts(args.catalog)
    except (OSError, LayoutError) as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_USAGE

    config = ComposerConfig()
    if args.command == "layouts":
        return _cmd_layouts(layouts)
    return _cmd_render(args, layouts, config)


if __name__ == "__main__":
    raise SystemExit(main())
