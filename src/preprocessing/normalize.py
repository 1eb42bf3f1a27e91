"""
Tensor normalization: RGBA bytes to interleaved RGB float32 in [0, 1].
"""

from __future__ import annotations

from typing import Optional

import numpy as np

from models.errors import PreprocessError
from models.image import Image
from models.tensor import Tensor
from .pixels import extract_rgba


def normalize_rgba(rgba: np.ndarray) -> Tensor:
    """
    Normalize an HxWx4 uint8 grid into an HxWx3 float32 tensor.

    Flat element (row*W + col)*3 + c equals byte[c] / 255 for c in R, G, B;
    the alpha byte is dropped.
    """
    if rgba.ndim != 3 or rgba.shape[2] != 4 or rgba.dtype != np.uint8:
        raise PreprocessError(f"Expected HxWx4 uint8 pixels, got {rgba.shape} {rgba.dtype}")
    rgb = rgba[..., :3].astype(np.float32) / np.float32(255.0)
    return Tensor.from_array(rgb)


def normalize(image: Image) -> Tensor:
    """Normalize an Image without resizing it."""
    return normalize_rgba(image.pixels)


def prepare_input(
    image: Image,
    target_width: int,
    target_height: int,
    flatten_alpha: bool = True,
    interpolation: Optional[str] = "auto",
) -> Tensor:
    """Resample, extract and normalize an image into a model input tensor."""
    rgba = extract_rgba(
        image,
        target_width,
        target_height,
        flatten=flatten_alpha,
        interpolation=interpolation,
    )
    return normalize_rgba(rgba)
