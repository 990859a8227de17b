"""
Module: core.geometry.partition

Purpose:
    Assign a pixel rectangle to every leaf of a layout tree. Works in the
    canvas's logical coordinate system, so the on-screen canvas and the
    exported PNG are cut identically; viewport scaling is applied later
    and only for display.

Algorithm:
    The outer margin is removed once around the canvas. Each split then
    takes the gap off its split axis and divides what is left between
    its children as ratio : (1 - ratio), the way a flex row/column with
    ``flex: r 1 0`` children and ``gap`` would. Leaves keep whatever
    rectangle reaches them.

Key Functions:
    - partition(): Leaf id -> Rect
    - gap_area(): Total area consumed by gaps between siblings
    - cell_at(): Hit-test a point against partitioned cells

Key Classes:
    - Rect: Float rectangle (x, y, width, height)

Dependencies:
    - core.models.layout

Used By:
    - composer.renderer: Export raster
    - gui.widgets.canvas: Painting and hit-testing
    - gui.models.composition: Cell sizes for the solver
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterator, Mapping, Optional, Tuple

from photo_grid.core.models.layout import Leaf, LayoutNode, SplitDirection

from .constraints import Size


@dataclass(frozen=True, slots=True)
class Rect:
    """
    Axis-aligned rectangle in logical canvas pixels.

    Width and height are never negative; partition() clamps them at zero
    when the gap is larger than the space available.
    """

    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def area(self) -> float:
        return self.width * self.height

    @property
    def size(self) -> Size:
        return Size(self.width, self.height)

    def inset(self, margin: float) -> Rect:
        """Shrink by ``margin`` on every side."""
        return Rect(
            self.x + margin,
            self.y + margin,
            max(0.0, self.width - 2 * margin),
            max(0.0, self.height - 2 * margin),
        )

    def contains(self, px: float, py: float) -> bool:
        """Right and bottom edges are exclusive."""
        return self.x <= px < self.right and self.y <= py < self.bottom

    def rounded(self) -> Tuple[int, int, int, int]:
        """
        Integer pixel box (left, top, right, bottom).

        Edges are rounded rather than sizes, so neighbouring cells never
        overlap or leave a one-pixel seam.
        """
        return (round(self.x), round(self.y), round(self.right), round(self.bottom))


def _split_rect(rect: Rect, direction: SplitDirection, ratio: float, gap: float) -> Tuple[Rect, Rect, Rect]:
    """Return (first, gap_strip, second) for one split."""
    if direction == SplitDirection.HORIZONTAL:
        available = max(0.0, rect.width - gap)
        first_w = available * ratio
        second_w = available - first_w
        strip_w = rect.width - available
        first = Rect(rect.x, rect.y, first_w, rect.height)
        strip = Rect(rect.x + first_w, rect.y, strip_w, rect.height)
        second = Rect(rect.x + first_w + strip_w, rect.y, second_w, rect.height)
    else:
        available = max(0.0, rect.height - gap)
        first_h = available * ratio
        second_h = available - first_h
        strip_h = rect.height - available
        first = Rect(rect.x, rect.y, rect.width, first_h)
        strip = Rect(rect.x, rect.y + first_h, rect.width, strip_h)
        second = Rect(rect.x, rect.y + first_h + strip_h, rect.width, second_h)
    return first, strip, second


def _walk(node: LayoutNode, rect: Rect, gap: float) -> Iterator[Tuple[LayoutNode, Rect, Optional[Rect]]]:
    """Yield (node, rect, gap strip or None) for every node, pre-order."""
    if isinstance(node, Leaf):
        yield node, rect, None
        return
    first, strip, second = _split_rect(rect, node.direction, node.ratio, gap)
    yield node, rect, strip
    yield from _walk(node.first, first, gap)
    yield from _walk(node.second, second, gap)


def content_rect(width: float, height: float, margin: float) -> Rect:
    """Canvas rectangle with the outer margin removed."""
    return Rect(0.0, 0.0, width, height).inset(margin)


def partition(
    root: LayoutNode,
    width: float,
    height: float,
    gap: float,
    margin: Optional[float] = None,
) -> Dict[str, Rect]:
    """
    Assign a rectangle to every leaf.

    Args:
        root: Layout tree
        width: Logical canvas width
        height: Logical canvas height
        gap: Spacing between the two children of every split
        margin: Outer margin around the canvas (defaults to ``gap``)

    Returns:
        Dict mapping leaf id -> Rect, in tree order

    Raises:
        ValueError: If gap or margin is negative

    Example:
        >>> rects = partition(two_by_two, 800, 800, gap=10)
        >>> rects["cell-1"]
        Rect(x=10.0, y=10.0, width=385.0, height=385.0)
    """
    if margin is None:
        margin = gap
    if gap < 0:
        raise ValueError(f"gap must be >= 0: {gap}")
    if margin < 0:
        raise ValueError(f"margin must be >= 0: {margin}")

    rects: Dict[str, Rect] = {}
    for node, rect, _strip in _walk(root, content_rect(width, height, margin), gap):
        if isinstance(node, Leaf):
            rects[node.id] = rect
    return rects


def gap_area(
    root: LayoutNode,
    width: float,
    height: float,
    gap: float,
    margin: Optional[float] = None,
) -> float:
    """Total area of the gap strips between siblings (outer margin excluded)."""
    if margin is None:
        margin = gap
    return sum(
        strip.area
        for _node, _rect, strip in _walk(root, content_rect(width, height, margin), gap)
        if strip is not None
    )


def cell_at(rects: Mapping[str, Rect], x: float, y: float) -> Optional[str]:
    """Id of the cell containing (x, y), or None for gaps and margins."""
    for leaf_id, rect in rects.items():
        if rect.contains(x, y):
            return leaf_id
    return None
