"""
Detection output decoding.

Selects the single highest-scoring candidate from a detector's raw score and
box tensors and returns it as a clipped normalized box. No confidence
threshold is applied: any non-empty score vector yields a box.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

import numpy as np

from algorithms.box_geometry import clip_box
from models.detection import BoundingBox, DetectionOutput
from models.errors import InferenceError
from models.image import Image
from models.tensor import Tensor, as_tensor

SCORES_OUTPUT_INDEX = 0
BOXES_OUTPUT_INDEX = 1


def detection_output_from_tensors(outputs: Sequence[Tensor]) -> DetectionOutput:
    """
    Build a DetectionOutput from engine outputs [scores, boxes].

    Raises:
        InferenceError: If fewer than two outputs are present or their
            lengths disagree.
    """
    if len(outputs) < 2:
        raise InferenceError(f"Detector returned {len(outputs)} outputs, expected scores and boxes")
    scores = as_tensor(outputs[SCORES_OUTPUT_INDEX]).flat()
    boxes = as_tensor(outputs[BOXES_OUTPUT_INDEX]).flat()
    return DetectionOutput.from_flat(scores, boxes)


def decode(output: DetectionOutput, reference_image: Optional[Image] = None) -> Optional[BoundingBox]:
    """
    Pick the best detection.

    Args:
        output: Raw detector output.
        reference_image: Accepted for callers that have it at hand; the box
            stays normalized, so its size is not used here.

    Returns:
        The clipped box of the first highest-scoring candidate, or None when
        the score vector is empty.
    """
    if len(output) == 0:
        return None

    # np.argmax returns the first index on ties
    best = int(np.argmax(output.scores))
    raw = BoundingBox.from_row(output.boxes[best], score=float(output.scores[best]))
    box = clip_box(raw)
    logging.debug(
        f"Decoded detection {best}/{len(output)}: score={box.score:.3f} "
        f"raw={raw.as_tuple()} clipped={box.as_tuple()}"
    )
    return box
