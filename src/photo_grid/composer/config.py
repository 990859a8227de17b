"""
Module: composer.config

Purpose:
    Configuration for the composer. Defines the logical canvas size,
    padding bounds, interaction tuning and export settings.

Key Classes:
    - ComposerConfig: Immutable composer configuration

Dependencies:
    - dataclasses (std)

Used By:
    - composer.renderer: Canvas size, background
    - composer.export: Output file name
    - gui.models.composition: Padding bounds, zoom sensitivity
    - gui.main_window: Sidebar width, chrome padding
"""

from __future__ import annotations

from dataclasses import dataclass

from photo_grid.core.geometry.constraints import PAN_TOLERANCE, ZOOM_SENSITIVITY
from photo_grid.core.geometry.viewport import DEFAULT_CHROME_PADDING, DEFAULT_SIDEBAR_WIDTH


# Design resolution of the canvas; height follows from the layout's aspect ratio
DEFAULT_CANVAS_WIDTH_PX = 800
DEFAULT_PADDING_PX = 10
MAX_PADDING_PX = 50
DEFAULT_EXPORT_FILENAME = "photo-grid.png"


@dataclass(frozen=True)
class ComposerConfig:
    """
    Configuration for composing and exporting (immutable).

    Attributes:
        canvas_width: Logical canvas width in pixels (export width)
        default_padding: Gap/margin applied when the app starts
        max_padding: Upper bound for the padding control
        zoom_sensitivity: Zoom units per wheel delta unit
        pan_tolerance: Pan changes at or below this are treated as noise
        sidebar_width: Width of the control sidebar (viewport fitting)
        chrome_padding: Padding around the canvas area (viewport fitting)
        background: Canvas colour behind cells and gaps
        export_filename: Default name for the exported PNG

    Example:
        >>> config = ComposerConfig()
        >>> config.clamp_padding(80)
        50
    """

    # Canvas
    canvas_width: int = DEFAULT_CANVAS_WIDTH_PX
    background: str = "#ffffff"

    # Padding
    default_padding: int = DEFAULT_PADDING_PX
    max_padding: int = MAX_PADDING_PX

    # Interaction
    zoom_sensitivity: float = ZOOM_SENSITIVITY
    pan_tolerance: float = PAN_TOLERANCE

    # Viewport
    sidebar_width: int = DEFAULT_SIDEBAR_WIDTH
    chrome_padding: int = DEFAULT_CHROME_PADDING

    # Export
    export_filename: str = DEFAULT_EXPORT_FILENAME

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if self.canvas_width <= 0:
            raise ValueError(f"canvas_width must be positive: {self.canvas_width}")
        if self.max_padding < 0:
            raise ValueError(f"max_padding must be >= 0: {self.max_padding}")
        if not 0 <= self.default_padding <= self.max_padding:
            raise ValueError(
                f"default_padding must be within [0, {self.max_padding}]: {self.default_padding}"
            )
        if self.zoom_sensitivity <= 0:
            raise ValueError(f"zoom_sensitivity must be positive: {self.zoom_sensitivity}")
        if self.pan_tolerance < 0:
            raise ValueError(f"pan_tolerance must be >= 0: {self.pan_tolerance}")
        if not self.export_filename.lower().endswith(".png"):
            raise ValueError(f"export_filename must be a .png file: {self.export_filename}")

    def clamp_padding(self, value: int) -> int:
        """Clamp a requested padding into [0, max_padding]."""
        return max(0, min(self.max_padding, int(value)))

    def canvas_size(self, aspect_ratio: float) -> tuple[int, int]:
        """Export size (width, height) for a layout's aspect ratio."""
        return self.canvas_width, round(self.canvas_width / aspect_ratio)
