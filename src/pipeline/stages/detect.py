"""
Detect stage: locate the vehicle in the source image.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from detection.decoder import decode, detection_output_from_tensors
from inference.backend import LoadedModel
from models.detection import BoundingBox
from models.image import Image
from preprocessing.normalize import prepare_input


@dataclass
class DetectStageConfig:
    """
    Configuration for the detect stage.

    Attributes:
        flatten_alpha: Composite alpha onto black before normalizing.
        interpolation: Resampling mode for the detector input.
    """
    flatten_alpha: bool = True
    interpolation: str = "auto"


class DetectStage:
    """
    Pipeline stage that runs the detector and decodes its best box.

    The returned box is normalized to the detector input, which is a stretch
    of the whole source image, so it applies to the original image as-is.
    """

    def __init__(self, model: LoadedModel, config: Optional[DetectStageConfig] = None):
        self._model = model
        self._config = config or DetectStageConfig()

    @property
    def model(self) -> LoadedModel:
        return self._model

    def process(self, image: Image) -> Optional[BoundingBox]:
        """
        Detect on one image.

        Returns:
            The best clipped box, or None if the detector found no candidates.

        Raises:
            PreprocessError: If the image cannot be resampled.
            InferenceError: If the detector fails or its outputs are malformed.
        """
        width, height = self._model.input_size
        tensor = prepare_input(
            image,
            width,
            height,
            flatten_alpha=self._config.flatten_alpha,
            interpolation=self._config.interpolation,
        )
        logging.debug(f"[DETECT] input tensor shape={tensor.shape}")

        outputs = self._model.invoke(tensor)
        detection_output = detection_output_from_tensors(outputs)
        return decode(detection_output, image)
