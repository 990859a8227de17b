"""
Module: composer.export

Purpose:
    Export the composition as a PNG at full logical resolution.
    Any presentation-only scale on the live canvas is switched off for
    the duration of the capture and put back afterwards, whether the
    capture worked or not.

Key Classes:
    - PresentationSurface: What the exporter needs from a live canvas
    - HeadlessSurface: Surface with no display (CLI, tests)
    - CompositionExporter: Runs one export at a time
    - CaptureError: Capture or write failed
    - ExportInProgressError: Export requested while one is running

Dependencies:
    - PIL: PNG encoding
    - composer.ingest: ImageDecodeError is a capture failure

Used By:
    - gui.main_window: Export button
    - cli: render command
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Protocol

from PIL import Image

from .ingest import ImageDecodeError

logger = logging.getLogger(__name__)


class CaptureError(Exception):
    """Error capturing or writing the exported image."""
    pass


class ExportInProgressError(CaptureError):
    """An export is already running; the new request was rejected."""
    pass


class PresentationSurface(Protocol):
    """Live canvas with a display-only scale."""

    def presentation_scale(self) -> float: ...

    def set_presentation_scale(self, scale: float) -> None: ...

    def settle(self) -> None:
        """Give the display one turn to apply a scale change."""
        ...


class HeadlessSurface:
    """Surface for exports with nothing on screen."""

    def __init__(self, scale: float = 1.0) -> None:
        self.scale = scale

    def presentation_scale(self) -> float:
        return self.scale

    def set_presentation_scale(self, scale: float) -> None:
        self.scale = scale

    def settle(self) -> None:
        pass


Capture = Callable[[], Image.Image]


class CompositionExporter:
    """
    Capture the composition and write it as PNG.

    Only one export runs at a time. Export is synchronous, but
    settle() may process pending GUI events, which can deliver a second
    export click while the first is still capturing; that request is
    rejected with ExportInProgressError instead of racing the first.

    Example:
        >>> exporter = CompositionExporter()
        >>> exporter.export(canvas, lambda: render_composition(...), Path("out.png"))
        PosixPath('out.png')
    """

    def __init__(self) -> None:
        self._in_flight = False

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    def export(self, surface: PresentationSurface, capture: Capture, output_path: Path) -> Path:
        """
        Run one export.

        Steps: remember the surface's scale, set it to 1.0, let the
        display settle, capture, write PNG, restore the scale.

        Args:
            surface: Live canvas (or HeadlessSurface)
            capture: Produces the full-resolution image
            output_path: Destination PNG path

        Returns:
            The written path

        Raises:
            ExportInProgressError: Another export is running
            CaptureError: Capture or write failed. The surface's scale
                          has been restored.
        """
        if self._in_flight:
            raise ExportInProgressError("An export is already in progress")

        self._in_flight = True
        original_scale = surface.presentation_scale()
        try:
            surface.set_presentation_scale(1.0)
            surface.settle()
            try:
                image = capture()
            except (ImageDecodeError, Image.DecompressionBombError, OSError, ValueError) as e:
                raise CaptureError(f"Failed to capture composition: {e}") from e

            try:
                output_path.parent.mkdir(parents=True, exist_ok=True)
                image.save(output_path, format="PNG")
            except (OSError, ValueError) as e:
                raise CaptureError(f"Failed to write {output_path}: {e}") from e
        finally:
            surface.set_presentation_scale(original_scale)
            self._in_flight = False

        logger.info(f"Exported {image.width}x{image.height} composition to {output_path}")
        return output_path
