"""
Module: core.geometry.constraints

Purpose:
    Cover-fit constraint solver for a single cell. Given the cell's pixel
    size and the image's natural size, works out the smallest zoom at
    which the image still covers the whole cell and how far the image
    may be panned before background shows through.

    Every mutation (zoom, pan, resize, new image) is provisional until
    reconcile() has been applied to it.

Key Functions:
    - compute_constraints(): min zoom, effective zoom and pan limits
    - apply_zoom_delta(): Wheel-style zoom step, floored at min zoom
    - apply_pan_delta(): Raw pan move (unclamped)
    - reconcile(): Idempotent correction back into the valid region
    - initial_fit(): Cover-fit, centered state for a freshly decoded image
    - visible_source_box(): Region of the source bitmap seen through the cell

Key Classes:
    - Size: Width/height pair
    - CellConstraints: Solver output

Dependencies:
    - core.models.image: ImageState, Pan

Used By:
    - composer.renderer: Cropping source bitmaps
    - gui.models.composition: Event hooks
    - gui.widgets.canvas: On-screen painting
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from photo_grid.core.models.image import CENTERED, ImageState, Pan

# Wheel delta units to zoom units
ZOOM_SENSITIVITY = 0.001
# Pan differences below this are float noise, not a real change (pixels)
PAN_TOLERANCE = 0.1


@dataclass(frozen=True, slots=True)
class Size:
    """Width/height pair in pixels."""

    width: float
    height: float

    @property
    def is_measurable(self) -> bool:
        """Both dimensions are positive."""
        return self.width > 0 and self.height > 0

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height


@dataclass(frozen=True, slots=True)
class CellConstraints:
    """
    Valid zoom/pan region for one image in one cell.

    Attributes:
        min_zoom: Smallest zoom at which the image covers the cell
        max_pan_x: Largest allowed |pan.x| at current_zoom
        max_pan_y: Largest allowed |pan.y| at current_zoom
        current_zoom: Stored zoom raised to min_zoom if it was below it
    """

    min_zoom: float
    max_pan_x: float
    max_pan_y: float
    current_zoom: float

    def clamp_pan(self, pan: Pan) -> Pan:
        return Pan(
            _clamp(pan.x, -self.max_pan_x, self.max_pan_x),
            _clamp(pan.y, -self.max_pan_y, self.max_pan_y),
        )


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def compute_constraints(
    container: Size,
    image: Size,
    zoom: float = 0.0,
) -> Optional[CellConstraints]:
    """
    Compute the cover-fit constraints for an image inside a cell.

    min_zoom is the CSS ``background-size: cover`` scale:
    ``max(cw / iw, ch / ih)``. Pan limits are derived from the current
    zoom: the rendered half-width minus the container half-width.

    Args:
        container: Cell size in pixels
        image: Natural image size in pixels
        zoom: Stored zoom; values below min_zoom are not honoured

    Returns:
        CellConstraints, or None when either size has a zero dimension
        (image not decoded yet or cell not laid out). None means "retry
        later", never an error.

    Example:
        >>> c = compute_constraints(Size(200, 100), Size(400, 400), zoom=1.0)
        >>> (c.min_zoom, c.current_zoom, c.max_pan_x, c.max_pan_y)
        (0.5, 1.0, 100.0, 150.0)
    """
    if not container.is_measurable or not image.is_measurable:
        return None

    min_zoom = max(container.width / image.width, container.height / image.height)
    current_zoom = max(zoom, min_zoom)

    max_pan_x = (image.width * current_zoom - container.width) / 2
    max_pan_y = (image.height * current_zoom - container.height) / 2

    return CellConstraints(
        min_zoom=min_zoom,
        max_pan_x=max(0.0, max_pan_x),
        max_pan_y=max(0.0, max_pan_y),
        current_zoom=current_zoom,
    )


def apply_zoom_delta(
    state: ImageState,
    delta_y: float,
    container: Size,
    image: Size,
    sensitivity: float = ZOOM_SENSITIVITY,
) -> ImageState:
    """
    Zoom by a wheel delta. Negative deltas zoom in.

    The new zoom never drops below min_zoom. There is no upper bound.
    Pan is left alone; reconcile() pulls it back in range afterwards.
    """
    constraints = compute_constraints(container, image, state.zoom)
    if constraints is None:
        return state
    new_zoom = max(constraints.min_zoom, state.zoom - delta_y * sensitivity)
    return state.with_zoom(new_zoom)


def apply_pan_delta(state: ImageState, dx: float, dy: float) -> ImageState:
    """Move the pan by exactly (dx, dy). Out-of-range results are expected."""
    return state.with_pan(state.pan.moved(dx, dy))


def reconcile(state: ImageState, container: Size, image: Size) -> ImageState:
    """
    Pull a state back into the valid region for its cell.

    Raises zoom to min_zoom when below it, then clamps pan into the
    limits computed from that zoom. Returns the same object when nothing
    needed correcting, so ``reconcile(reconcile(s)) == reconcile(s)``.

    Args:
        state: Possibly out-of-range state
        container: Cell size in pixels
        image: Natural image size in pixels

    Returns:
        Corrected state (unchanged when unmeasurable)
    """
    constraints = compute_constraints(container, image, state.zoom)
    if constraints is None:
        return state

    result = state
    if state.zoom < constraints.min_zoom:
        result = result.with_zoom(constraints.min_zoom)

    clamped = constraints.clamp_pan(state.pan)
    if clamped != state.pan:
        result = result.with_pan(clamped)
    return result


def is_settled(before: ImageState, after: ImageState, tolerance: float = PAN_TOLERANCE) -> bool:
    """
    True when ``after`` differs from ``before`` only by float noise.

    Used to decide whether a reconcile produced a change worth
    announcing; comparing pans exactly would ping-pong on rounding.
    """
    if before.url != after.url or before.zoom != after.zoom:
        return False
    return (
        abs(before.pan.x - after.pan.x) <= tolerance
        and abs(before.pan.y - after.pan.y) <= tolerance
    )


def initial_fit(image: Size, container: Size, url: str) -> Optional[ImageState]:
    """
    Cover-fit, centered state for a freshly decoded image.

    Returns:
        ImageState with zoom = min_zoom and pan = (0, 0), or None when
        either size is not measurable yet.
    """
    constraints = compute_constraints(container, image)
    if constraints is None:
        return None
    return ImageState(url=url, zoom=constraints.min_zoom, pan=CENTERED)


def visible_source_box(
    state: ImageState,
    container: Size,
    image: Size,
) -> Optional[Tuple[float, float, float, float]]:
    """
    Region of the source bitmap visible through the cell.

    Uses the effective zoom (never below min_zoom). The image center sits
    at the cell center shifted by pan, so the cell's left edge maps to
    ``(iw / 2) - (cw / 2 + pan.x) / zoom`` in source pixels.

    Returns:
        (left, top, right, bottom) in source pixels, clipped to the image,
        or None when unmeasurable.
    """
    constraints = compute_constraints(container, image, state.zoom)
    if constraints is None:
        return None
    zoom = constraints.current_zoom

    left = image.width / 2 - (container.width / 2 + state.pan.x) / zoom
    top = image.height / 2 - (container.height / 2 + state.pan.y) / zoom
    right = left + container.width / zoom
    bottom = top + container.height / zoom

    return (
        _clamp(left, 0.0, image.width),
        _clamp(top, 0.0, image.height),
        _clamp(right, 0.0, image.width),
        _clamp(bottom, 0.0, image.height),
    )
