"""
File-based image source.

Reads individual image files and/or every image in a directory, in sorted
order.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import List, Optional

from preprocessing.pixels import load_image
from .base import ImageSource, ImageSourceConfig, SourceItem

IMAGE_EXTENSIONS = (".jpg", ".jpeg", ".png", ".bmp", ".tif", ".tiff", ".webp")


@dataclass
class FileImageSourceConfig(ImageSourceConfig):
    """
    Attributes:
        paths: Image files or directories to read.
        extensions: File extensions picked up when scanning directories.
    """
    paths: List[str] = field(default_factory=list)
    extensions: tuple = IMAGE_EXTENSIONS


class FileImageSource(ImageSource):
    def __init__(self, config: FileImageSourceConfig):
        super().__init__(config)
        self._files: List[str] = []
        self._pos = 0

    @property
    def files(self) -> List[str]:
        return list(self._files)

    def open(self) -> None:
        files: List[str] = []
        for path in self._config.paths:
            if os.path.isdir(path):
                for name in sorted(os.listdir(path)):
                    if name.lower().endswith(tuple(self._config.extensions)):
                        files.append(os.path.join(path, name))
            elif os.path.exists(path):
                files.append(path)
            else:
                raise RuntimeError(f"Image path not found: {path}")

        self._files = files
        self._pos = 0
        self._index = 0
        self._is_open = True
        logging.info(f"Image source {self.source_id} opened: {len(files)} file(s)")

    def read(self) -> Optional[SourceItem]:
        if not self._is_open or self._pos >= len(self._files):
            return None

        path = self._files[self._pos]
        self._pos += 1
        self._index += 1
        return path, load_image(path)

    def close(self) -> None:
        self._is_open = False
