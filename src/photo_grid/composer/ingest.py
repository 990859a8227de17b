"""
Module: composer.ingest

Purpose:
    Accept image files for cells and read their natural size.
    Anything that is not an image by MIME type is turned away quietly;
    the caller decides whether that is worth mentioning (it isn't).

Key Functions:
    - is_image_file(): MIME-type check
    - read_natural_size(): Decode header and return pixel size
    - open_bitmap(): Load a bitmap for rendering

Key Classes:
    - ImageDecodeError: File claims to be an image but cannot be read

Dependencies:
    - PIL: Decoding
    - mimetypes (std)
"""

from __future__ import annotations

import logging
import mimetypes
from pathlib import Path
from typing import Union

from PIL import Image, ImageOps, UnidentifiedImageError

from photo_grid.core.geometry.constraints import Size

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class ImageDecodeError(Exception):
    """Image file could not be decoded."""
    pass


def is_image_file(path: PathLike) -> bool:
    """True when the file's MIME type is ``image/*``."""
    mime, _encoding = mimetypes.guess_type(str(path))
    return mime is not None and mime.startswith("image/")


def read_natural_size(path: PathLike) -> Size:
    """
    Natural pixel size of an image file.

    Only the header is read. EXIF orientation is applied, so a portrait
    photo stored sideways reports its upright size.

    Raises:
        ImageDecodeError: Missing, unreadable or not an image
    """
    try:
        with Image.open(path) as img:
            width, height = img.size
            orientation = img.getexif().get(0x0112, 1)
    except (OSError, UnidentifiedImageError, Image.DecompressionBombError) as e:
        raise ImageDecodeError(f"Cannot read image {path}: {e}") from e

    # Orientations 5-8 rotate by 90 degrees
    if orientation in (5, 6, 7, 8):
        width, height = height, width
    return Size(width, height)


def open_bitmap(path: PathLike) -> Image.Image:
    """
    Load an image fully into memory, upright, in RGB(A).

    Raises:
        ImageDecodeError: Missing, unreadable or not an image
    """
    try:
        with Image.open(path) as img:
            img = ImageOps.exif_transpose(img)
            if img.mode not in ("RGB", "RGBA"):
                img = img.convert("RGBA" if "A" in img.getbands() else "RGB")
            img.load()
            return img
    except (OSError, UnidentifiedImageError, Image.DecompressionBombError) as e:
        raise ImageDecodeError(f"Cannot read image {path}: {e}") from e
