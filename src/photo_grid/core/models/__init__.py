"""
Core Models Package

Immutable data models for the composer. All models are frozen
dataclasses: updates always produce new instances, so a tree or an
image state handed to the renderer can never change underneath it.
"""

from .image import ImageState, Pan
from .layout import (
    Layout,
    LayoutError,
    LayoutNode,
    Leaf,
    Split,
    SplitDirection,
    find_leaf,
    iter_leaves,
    leaf_ids,
    merge_images,
    validate_tree,
)

__all__ = [
    "ImageState",
    "Pan",
    "Layout",
    "LayoutError",
    "LayoutNode",
    "Leaf",
    "Split",
    "SplitDirection",
    "find_leaf",
    "iter_leaves",
    "leaf_ids",
    "merge_images",
    "validate_tree",
]
