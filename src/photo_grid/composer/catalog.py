"""
Module: composer.catalog

Purpose:
    Built-in layout templates. Leaf ids are shared between templates
    ("cell-1" is always the top-left cell) so that images carry over
    when the user switches layouts.

Key Functions:
    - get_layout(): Look up a template by id
    - load_catalog(): Read additional templates from a JSON file

Dependencies:
    - json (std)
    - core.models.layout

Used By:
    - gui.main_window: Layout buttons
    - cli: --layout option
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, Tuple

from photo_grid.core.models.layout import Layout, LayoutError, LayoutNode, Leaf, Split, SplitDirection

logger = logging.getLogger(__name__)


def _leaf(leaf_id: str) -> Leaf:
    return Leaf(leaf_id)


def _split(
    node_id: str,
    direction: SplitDirection,
    first: LayoutNode,
    second: LayoutNode,
    ratio: float = 0.5,
) -> Split:
    return Split(node_id, direction, (first, second), ratio)


_H = SplitDirection.HORIZONTAL
_V = SplitDirection.VERTICAL

DEFAULT_LAYOUTS: Tuple[Layout, ...] = (
    Layout(
        id="single",
        name="Single",
        aspect_ratio=1.0,
        root=_leaf("cell-1"),
    ),
    Layout(
        id="2x1",
        name="2 Columns",
        aspect_ratio=2.0,
        root=_split("split-1", _H, _leaf("cell-1"), _leaf("cell-2")),
    ),
    Layout(
        id="1x2",
        name="2 Rows",
        aspect_ratio=0.5,
        root=_split("split-1", _V, _leaf("cell-1"), _leaf("cell-2")),
    ),
    Layout(
        id="2x2",
        name="2x2 Grid",
        aspect_ratio=1.0,
        root=_split(
            "split-main", _V,
            _split("split-top", _H, _leaf("cell-1"), _leaf("cell-2")),
            _split("split-bottom", _H, _leaf("cell-3"), _leaf("cell-4")),
        ),
    ),
    Layout(
        id="complex-1",
        name="Complex 1",
        aspect_ratio=1.0,
        root=_split(
            "split-main", _H,
            _leaf("cell-1"),
            _split("split-right", _V, _leaf("cell-2"), _leaf("cell-3")),
        ),
    ),
)

DEFAULT_LAYOUT_ID = "2x1"


def layouts_by_id(layouts: Tuple[Layout, ...] = DEFAULT_LAYOUTS) -> Dict[str, Layout]:
    return {layout.id: layout for layout in layouts}


def get_layout(layout_id: str, layouts: Tuple[Layout, ...] = DEFAULT_LAYOUTS) -> Layout:
    """
    Look up a template by id.

    Raises:
        KeyError: Unknown id (message lists the known ids)
    """
    catalog = layouts_by_id(layouts)
    try:
        return catalog[layout_id]
    except KeyError:
        known = ", ".join(catalog)
        raise KeyError(f"Unknown layout {layout_id!r} (known: {known})") from None


def default_layout() -> Layout:
    return get_layout(DEFAULT_LAYOUT_ID)


def load_catalog(path: Path) -> Tuple[Layout, ...]:
    """
    Load templates from a JSON file.

    The file holds a list of layout objects in the shape produced by
    Layout.to_dict().

    Raises:
        LayoutError: File is not a list, or a layout is malformed
        OSError: File cannot be read
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise LayoutError(f"Layout catalog {path} is not valid JSON: {e}") from e
    if not isinstance(data, list):
        raise LayoutError(f"Layout catalog {path} must contain a list of layouts")

    layouts = tuple(Layout.from_dict(item) for item in data)
    ids = [layout.id for layout in layouts]
    if len(set(ids)) != len(ids):
        raise LayoutError(f"Layout catalog {path} has duplicate layout ids")
    logger.info(f"Loaded {len(layouts)} layouts from {path}")
    return layouts


def merge_catalogs(base: Tuple[Layout, ...], extra: Tuple[Layout, ...]) -> Tuple[Layout, ...]:
    """Append ``extra`` to ``base``; an extra layout replaces a base layout with the same id."""
    merged = layouts_by_id(base)
    merged.update(layouts_by_id(extra))
    return tuple(merged.values())
