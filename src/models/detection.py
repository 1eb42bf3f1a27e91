"""
Detection models: raw detector output and box types.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Tuple

import numpy as np

from .errors import InferenceError


@dataclass(frozen=True)
class BoundingBox:
    """
    A bounding box in normalized image-fraction coordinates.

    Field order follows the detector's row layout [yMin, xMin, yMax, xMax].
    Degenerate boxes (x_max <= x_min or y_max <= y_min) are allowed.

    Attributes:
        y_min: Top edge as a fraction of image height.
        x_min: Left edge as a fraction of image width.
        y_max: Bottom edge as a fraction of image height.
        x_max: Right edge as a fraction of image width.
        score: Confidence of the candidate this box came from.
    """
    y_min: float
    x_min: float
    y_max: float
    x_max: float
    score: float = 1.0

    @property
    def width(self) -> float:
        return self.x_max - self.x_min

    @property
    def height(self) -> float:
        return self.y_max - self.y_min

    @property
    def is_degenerate(self) -> bool:
        return self.width <= 0 or self.height <= 0

    def as_tuple(self) -> Tuple[float, float, float, float]:
        """Return as (y_min, x_min, y_max, x_max) tuple."""
        return (self.y_min, self.x_min, self.y_max, self.x_max)

    @classmethod
    def from_row(cls, row: Sequence[float], score: float = 1.0) -> "BoundingBox":
        """Create from a [yMin, xMin, yMax, xMax] row."""
        return cls(
            y_min=float(row[0]),
            x_min=float(row[1]),
            y_max=float(row[2]),
            x_max=float(row[3]),
            score=float(score),
        )


@dataclass(frozen=True)
class PixelRect:
    """
    A rectangle in absolute pixel units.

    Width and height may be zero or negative for degenerate boxes.
    """
    x: float
    y: float
    width: float
    height: float

    @property
    def area(self) -> float:
        return max(self.width, 0.0) * max(self.height, 0.0)

    def as_tuple(self) -> Tuple[float, float, float, float]:
        """Return as (x, y, width, height) tuple."""
        return (self.x, self.y, self.width, self.height)

    def as_xyxy(self) -> Tuple[float, float, float, float]:
        """Return as (x1, y1, x2, y2) tuple."""
        return (self.x, self.y, self.x + self.width, self.y + self.height)


@dataclass(frozen=True)
class DetectionOutput:
    """
    Raw detector output for one image.

    Attributes:
        scores: 1-D float64 array of N candidate scores.
        boxes: Nx4 float64 array, rows [yMin, xMin, yMax, xMax].
    """
    scores: np.ndarray
    boxes: np.ndarray

    @classmethod
    def from_flat(cls, scores: Sequence[float], boxes: Sequence[float]) -> "DetectionOutput":
        """
        Build from a flat score vector and a flat N*4 box vector.

        Raises:
            InferenceError: If len(scores) * 4 != len(boxes)
                or any score is NaN or infinite.
        """
        s = np.asarray(scores, dtype=np.float64).reshape(-1)
        b = np.asarray(boxes, dtype=np.float64).reshape(-1)
        if s.size * 4 != b.size:
            raise InferenceError(
                f"Detector returned {s.size} scores but {b.size} box values "
                f"(expected {s.size * 4})"
            )
        if not np.isfinite(s).all():
            raise InferenceError("Detector returned a non-finite score")
        s = s.copy()
        b = b.reshape(s.size, 4).copy()
        s.setflags(write=False)
        b.setflags(write=False)
        return cls(scores=s, boxes=b)

    def __len__(self) -> int:
        return int(self.scores.size)
