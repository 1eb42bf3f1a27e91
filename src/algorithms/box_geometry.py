"""
Box geometry.

Pure coordinate math between normalized boxes and pixel rectangles.
"""

from __future__ import annotations

from models.detection import BoundingBox, PixelRect


def clip_unit(value: float) -> float:
    """Clip a coordinate to [0, 1]."""
    return min(max(float(value), 0.0), 1.0)


def clip_box(box: BoundingBox) -> BoundingBox:
    """Clip each coordinate of a normalized box to [0, 1] independently."""
    return BoundingBox(
        y_min=clip_unit(box.y_min),
        x_min=clip_unit(box.x_min),
        y_max=clip_unit(box.y_max),
        x_max=clip_unit(box.x_max),
        score=box.score,
    )


def denormalize(box: BoundingBox, image_width: int, image_height: int) -> PixelRect:
    """
    Convert a normalized box into a pixel rectangle.

    x/width scale with image_width, y/height with image_height. Degenerate
    boxes give zero or negative sizes; callers treat those as no usable region.
    """
    return PixelRect(
        x=box.x_min * image_width,
        y=box.y_min * image_height,
        width=(box.x_max - box.x_min) * image_width,
        height=(box.y_max - box.y_min) * image_height,
    )
