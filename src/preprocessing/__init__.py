"""
Preprocessing for model inputs.

- resample: stretch-to-fit resizing
- pixels: source decoding and RGBA extraction
- normalize: RGBA bytes to float32 tensors
"""

from .resample import resample
from .pixels import load_image, image_from_bytes, image_from_bgr, image_to_bgra, extract_rgba
from .normalize import normalize, normalize_rgba, prepare_input

__all__ = [
    "resample",
    "load_image",
    "image_from_bytes",
    "image_from_bgr",
    "image_to_bgra",
    "extract_rgba",
    "normalize",
    "normalize_rgba",
    "prepare_input",
]
