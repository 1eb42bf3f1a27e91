"""
Classify stage: score a cropped region.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Optional

from inference.backend import LoadedModel
from models.errors import InferenceError
from models.image import Image
from models.result import ClassificationResult
from preprocessing.normalize import prepare_input


@dataclass
class ClassifyStageConfig:
    flatten_alpha: bool = True
    interpolation: str = "auto"


class ClassifyStage:
    """Pipeline stage that resamples a crop and reads the classifier probability."""

    def __init__(self, model: LoadedModel, config: Optional[ClassifyStageConfig] = None):
        self._model = model
        self._config = config or ClassifyStageConfig()

    @property
    def model(self) -> LoadedModel:
        return self._model

    def process(self, image: Image) -> ClassificationResult:
        """
        Classify one image.

        Raises:
            PreprocessError: If the image cannot be resampled.
            InferenceError: If the classifier fails or returns an empty output or a
                value outside [0, 1].
        """
        width, height = self._model.input_size
        tensor = prepare_input(
            image,
            width,
            height,
            flatten_alpha=self._config.flatten_alpha,
            interpolation=self._config.interpolation,
        )
        logging.debug(f"[CLASSIFY] input tensor shape={tensor.shape}")

        outputs = self._model.invoke(tensor)
        if not outputs or outputs[0].size == 0:
            raise InferenceError(f"{self._model.name} returned an empty output")

        probability = float(outputs[0].flat()[0])
        if not math.isfinite(probability) or not 0.0 <= probability <= 1.0:
            raise InferenceError(f"{self._model.name} returned {probability}, not a probability in [0, 1]")
        return ClassificationResult(probability=probability)
