"""
ImageSource interface for pluggable photo sources.

The pipeline only needs a pixel grid; where it comes from (file, directory,
camera roll, upload) is the source's concern.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterator, Optional, Tuple

from models.image import Image

SourceItem = Tuple[str, Image]


@dataclass
class ImageSourceConfig:
    """
    Base configuration for image sources.

    Attributes:
        source_id: Identifier used in logs.
    """
    source_id: str = "default"


class ImageSource(ABC):
    """
    Abstract base class for image sources.

    Lifecycle:
        1. Create instance with config
        2. Call open() to initialize the source
        3. Call read() repeatedly to get (name, Image) pairs
        4. Call close() to release resources

    Can also be used as a context manager:
        with FileImageSource(config) as source:
            for name, image in source:
                process(image)
    """

    def __init__(self, config: ImageSourceConfig):
        self._config = config
        self._is_open = False
        self._index = 0

    @property
    def source_id(self) -> str:
        return self._config.source_id

    @property
    def is_open(self) -> bool:
        return self._is_open

    @property
    def index(self) -> int:
        """Number of items read since open."""
        return self._index

    @abstractmethod
    def open(self) -> None:
        """
        Open/initialize the source.

        Raises:
            RuntimeError: If the source cannot be opened.
        """

    @abstractmethod
    def read(self) -> Optional[SourceItem]:
        """
        Read the next image.

        Returns:
            (name, Image), or None when the source is exhausted.

        Raises:
            PreprocessError: If the next item exists but cannot be decoded.
        """

    @abstractmethod
    def close(self) -> None:
        """Release resources. Safe to call multiple times."""

    def __enter__(self) -> "ImageSource":
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __iter__(self) -> Iterator[SourceItem]:
        if not self._is_open:
            raise RuntimeError("Source must be open before iterating")

        while True:
            item = self.read()
            if item is None:
                break
            yield item
