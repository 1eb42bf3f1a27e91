"""
Result models for one pipeline invocation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from .detection import BoundingBox, PixelRect
from .image import Image


class PipelineState(str, Enum):
    """States of the two-stage inspection pipeline."""
    IDLE = "idle"
    DETECTING = "detecting"
    BOX_FOUND = "box_found"
    NO_BOX = "no_box"
    CROPPING = "cropping"
    CROPPED = "cropped"
    CROP_FAILED = "crop_failed"
    CLASSIFYING = "classifying"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True)
class ClassificationResult:
    """Positive-class probability produced by the classifier."""
    probability: float


@dataclass
class InspectionResult:
    """
    Outcome of one pipeline run.

    Attributes:
        state: Terminal state (DONE or FAILED).
        classification: Classifier output when state is DONE.
        reason: Human-readable failure reason when state is FAILED.
        detail: Error message behind the failure, for logs.
        box: Clipped normalized box chosen by the decoder, if any.
        rect: Pixel rectangle in original-image coordinates, if any.
        crop: Cropped region fed to the classifier, if any.
        used_full_image: True when the no-detection fallback classified the
            whole image.
        history: States visited, in order.
    """
    state: PipelineState
    classification: Optional[ClassificationResult] = None
    reason: Optional[str] = None
    detail: Optional[str] = None
    box: Optional[BoundingBox] = None
    rect: Optional[PixelRect] = None
    crop: Optional[Image] = None
    used_full_image: bool = False
    history: List[PipelineState] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.state == PipelineState.DONE

    @property
    def probability(self) -> Optional[float]:
        return self.classification.probability if self.classification else None

    def describe(self) -> str:
        """Return the human-readable result line."""
        if self.ok:
            text = f"Result: {self.probability:.4f}"
            if self.used_full_image:
                text += " (whole image)"
            return text
        return f"Failed: {self.reason}"
