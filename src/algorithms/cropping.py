"""
Region cropping.
"""

from __future__ import annotations

import math
from typing import Optional, Tuple

from models.detection import PixelRect
from models.image import Image


def _round_edge(value: float, limit: int) -> int:
    # Half-up rounding absorbs float32 error in model boxes (44.9999 -> 45).
    return min(max(int(math.floor(value + 0.5)), 0), limit)


def clamp_rect(rect: PixelRect, image_width: int, image_height: int) -> Tuple[int, int, int, int]:
    """
    Round a pixel rectangle's edges to integers and clamp them inside the image.

    Returns:
        (x, y, width, height) with width/height >= 0.
    """
    x1, y1, x2, y2 = rect.as_xyxy()
    left = _round_edge(x1, image_width)
    top = _round_edge(y1, image_height)
    right = _round_edge(x2, image_width)
    bottom = _round_edge(y2, image_height)
    return (left, top, max(right - left, 0), max(bottom - top, 0))


def crop(image: Image, rect: PixelRect) -> Optional[Image]:
    """
    Extract the pixel sub-grid covered by rect.

    Returns:
        A new Image, or None when the clamped rectangle is empty.
    """
    if not all(math.isfinite(v) for v in rect.as_tuple()):
        return None

    x, y, w, h = clamp_rect(rect, image.width, image.height)
    if w == 0 or h == 0:
        return None
    return Image.from_numpy(image.pixels[y:y + h, x:x + w])
