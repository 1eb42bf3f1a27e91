"""
Image model: an immutable RGBA pixel grid.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

import numpy as np

from .errors import PreprocessError


def _to_rgba(pixels: np.ndarray) -> np.ndarray:
    """Return an owned HxWx4 uint8 copy of a gray, RGB or RGBA array."""
    arr = np.asarray(pixels)
    if arr.dtype != np.uint8:
        raise PreprocessError(f"Image pixels must be uint8, got {arr.dtype}")

    if arr.ndim == 2:
        arr = np.stack([arr, arr, arr], axis=-1)
    if arr.ndim != 3 or arr.shape[2] not in (3, 4):
        raise PreprocessError(f"Unsupported pixel array shape {arr.shape}")

    if arr.shape[2] == 3:
        alpha = np.full(arr.shape[:2] + (1,), 255, dtype=np.uint8)
        arr = np.concatenate([arr, alpha], axis=2)

    out = np.ascontiguousarray(arr).copy()
    out.setflags(write=False)
    return out


@dataclass(frozen=True)
class Image:
    """
    Immutable pixel grid with per-pixel (R, G, B, A) bytes.

    Origin is top-left, row-major. The backing array is read-only, so stages
    can borrow an Image without copying and must build a new one to change it.

    Attributes:
        pixels: HxWx4 uint8 array (read-only).
    """
    pixels: np.ndarray

    @classmethod
    def from_numpy(cls, pixels: np.ndarray) -> "Image":
        """Create an Image from a gray, RGB or RGBA uint8 array (always copies)."""
        return cls(pixels=_to_rgba(pixels))

    @classmethod
    def solid(cls, width: int, height: int, rgba: Tuple[int, int, int, int]) -> "Image":
        """Create a single-color image."""
        arr = np.empty((height, width, 4), dtype=np.uint8)
        arr[...] = np.asarray(rgba, dtype=np.uint8)
        return cls.from_numpy(arr)

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def size(self) -> Tuple[int, int]:
        """Return (width, height)."""
        return (self.width, self.height)

    @property
    def is_empty(self) -> bool:
        return self.width == 0 or self.height == 0

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Image):
            return NotImplemented
        return self.pixels.shape == other.pixels.shape and bool(np.array_equal(self.pixels, other.pixels))

    def __hash__(self) -> int:
        return hash((self.pixels.shape, self.pixels.tobytes()))
