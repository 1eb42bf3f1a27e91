"""
Geometry algorithms: box clipping, denormalization and cropping.
"""

from .box_geometry import clip_box, clip_unit, denormalize
from .cropping import clamp_rect, crop

__all__ = [
    "clip_box",
    "clip_unit",
    "denormalize",
    "clamp_rect",
    "crop",
]
