"""
Pixel extraction: decoding source images and producing RGBA byte grids.
"""

from __future__ import annotations

import os
from typing import Optional

import cv2
import numpy as np

from models.errors import PreprocessError
from models.image import Image
from .resample import resample


def image_from_bgr(arr: np.ndarray) -> Image:
    """Convert an OpenCV-ordered gray/BGR/BGRA array into an RGBA Image."""
    if arr is None or arr.size == 0:
        raise PreprocessError("Decoded image is empty")
    if arr.dtype == np.uint16:
        # 16-bit PNG/TIFF sources
        arr = (arr >> 8).astype(np.uint8)
    elif arr.dtype != np.uint8:
        raise PreprocessError(f"Unsupported pixel depth: {arr.dtype}")

    if arr.ndim == 2:
        rgba = cv2.cvtColor(arr, cv2.COLOR_GRAY2RGBA)
    elif arr.shape[2] == 4:
        rgba = cv2.cvtColor(arr, cv2.COLOR_BGRA2RGBA)
    elif arr.shape[2] == 3:
        rgba = cv2.cvtColor(arr, cv2.COLOR_BGR2RGBA)
    else:
        raise PreprocessError(f"Unsupported channel count: {arr.shape[2]}")
    return Image.from_numpy(rgba)


def image_to_bgra(image: Image) -> np.ndarray:
    """Convert an Image to an OpenCV BGRA array (for cv2.imwrite)."""
    return cv2.cvtColor(image.pixels, cv2.COLOR_RGBA2BGRA)


def load_image(path: str) -> Image:
    """
    Load an image file as RGBA.

    Raises:
        PreprocessError: If the file is missing or cannot be decoded.
    """
    if not os.path.exists(path):
        raise PreprocessError(f"Image not found: {path}")
    arr = cv2.imread(path, cv2.IMREAD_UNCHANGED)
    if arr is None:
        raise PreprocessError(f"Failed to decode image: {path}")
    return image_from_bgr(arr)


def image_from_bytes(data: bytes) -> Image:
    """Decode an encoded image (PNG, JPEG, ...) held in memory."""
    buf = np.frombuffer(data, dtype=np.uint8)
    if buf.size == 0:
        raise PreprocessError("Empty image buffer")
    arr = cv2.imdecode(buf, cv2.IMREAD_UNCHANGED)
    if arr is None:
        raise PreprocessError("Failed to decode image buffer")
    return image_from_bgr(arr)


def flatten_alpha(rgba: np.ndarray) -> np.ndarray:
    """
    Composite RGBA onto an opaque black background.

    Equivalent to drawing into an opaque premultiplied-alpha bitmap: color
    channels are scaled by alpha and alpha becomes 255.
    """
    out = rgba.copy()
    alpha = rgba[..., 3:4].astype(np.uint16)
    out[..., :3] = ((rgba[..., :3].astype(np.uint16) * alpha + 127) // 255).astype(np.uint8)
    out[..., 3] = 255
    return out


def extract_rgba(
    image: Image,
    target_width: int,
    target_height: int,
    flatten: bool = True,
    interpolation: Optional[str] = "auto",
) -> np.ndarray:
    """
    Obtain the raw RGBA byte grid of an image at a target resolution.

    Args:
        image: Source image (any size).
        target_width: Output width.
        target_height: Output height.
        flatten: Composite alpha onto opaque black before returning.
        interpolation: Resampling mode, see preprocessing.resample.

    Returns:
        HxWx4 uint8 array owned by the caller.
    """
    resized = resample(image, target_width, target_height, interpolation=interpolation)
    if flatten:
        return flatten_alpha(resized.pixels)
    return resized.pixels.copy()
