"""
Stretch resampling to a fixed model input resolution.

The image is mapped directly onto the target size: no aspect preservation,
no letterboxing.
"""

from __future__ import annotations

import logging
from typing import Optional

import cv2

from models.errors import PreprocessError
from models.image import Image

INTERPOLATIONS = {
    "area": cv2.INTER_AREA,
    "linear": cv2.INTER_LINEAR,
    "cubic": cv2.INTER_CUBIC,
}


def choose_interpolation(src_w: int, src_h: int, dst_w: int, dst_h: int, mode: str = "auto") -> int:
    """
    Pick an OpenCV interpolation flag.

    "auto" uses INTER_AREA when shrinking in both axes (anti-aliased) and
    INTER_LINEAR otherwise.
    """
    if mode != "auto":
        try:
            return INTERPOLATIONS[mode]
        except KeyError:
            raise PreprocessError(f"Unknown interpolation mode: {mode}") from None
    if dst_w <= src_w and dst_h <= src_h:
        return cv2.INTER_AREA
    return cv2.INTER_LINEAR


def resample(
    image: Image,
    target_width: int,
    target_height: int,
    interpolation: Optional[str] = "auto",
) -> Image:
    """
    Resize an image to exactly (target_width, target_height).

    Args:
        image: Source image (not modified).
        target_width: Output width in pixels.
        target_height: Output height in pixels.
        interpolation: "auto", "area", "linear" or "cubic".

    Returns:
        A new Image of the target size.

    Raises:
        PreprocessError: If a target dimension is not positive or the source
            has zero pixels.
    """
    if target_width <= 0 or target_height <= 0:
        raise PreprocessError(f"Invalid target size {target_width}x{target_height}")
    if image.is_empty:
        raise PreprocessError("Source image has zero pixels")

    if image.size == (target_width, target_height):
        return Image.from_numpy(image.pixels)

    flag = choose_interpolation(image.width, image.height, target_width, target_height, interpolation or "auto")
    resized = cv2.resize(image.pixels, (target_width, target_height), interpolation=flag)
    logging.debug(
        f"Resampled {image.width}x{image.height} -> {target_width}x{target_height} (flag={flag})"
    )
    return Image.from_numpy(resized)
