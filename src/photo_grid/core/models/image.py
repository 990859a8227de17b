"""
Module: core.models.image

Purpose:
    Per-cell image state: which bitmap fills a leaf, at what zoom and
    with what pan offset. Immutable; updates go through dataclasses.replace.

Key Classes:
    - Pan: Offset of the image center from the cell center
    - ImageState: Bitmap reference + zoom + pan

Dependencies:
    - dataclasses (std)

Used By:
    - core.models.layout: Leaf.image
    - core.geometry.constraints: Solver inputs and outputs
    - gui.models.composition: Central store
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace


@dataclass(frozen=True, slots=True)
class Pan:
    """
    Offset of the image center from the cell center, in cell pixels.

    Both axes are independent. Positive x moves the image right,
    positive y moves it down.
    """

    x: float = 0.0
    y: float = 0.0

    def moved(self, dx: float, dy: float) -> Pan:
        """Return a new Pan shifted by (dx, dy)."""
        return Pan(self.x + dx, self.y + dy)


CENTERED = Pan()


@dataclass(frozen=True, slots=True)
class ImageState:
    """
    Image assigned to a leaf cell.

    Attributes:
        url: Reference to the bitmap source (usually a file path)
        zoom: Scale applied to the natural image size. Only honoured
              once it is at least the cell's cover-fit minimum.
        pan: Center offset from the cell center

    Example:
        >>> state = ImageState("beach.jpg")
        >>> state.with_zoom(1.5).zoom
        1.5
    """

    url: str
    zoom: float = 1.0
    pan: Pan = field(default=CENTERED)

    def with_zoom(self, zoom: float) -> ImageState:
        return replace(self, zoom=zoom)

    def with_pan(self, pan: Pan) -> ImageState:
        return replace(self, pan=pan)
