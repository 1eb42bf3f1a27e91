"""
Observation layer for pluggable image sources.

Each source implements the ImageSource interface and yields (name, Image)
pairs to the pipeline.
"""

from .base import ImageSource, ImageSourceConfig
from .file_source import FileImageSource, FileImageSourceConfig

__all__ = [
    "ImageSource",
    "ImageSourceConfig",
    "FileImageSource",
    "FileImageSourceConfig",
]
