"""
Pipeline engine for the vehicle inspection system.

Runs one image through the two-stage flow:
resample + normalize -> detect -> decode box -> crop original image ->
resample + normalize crop -> classify -> probability.

Each invocation is synchronous and self-contained; the engine holds only its
config and the two models it was given.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from algorithms.box_geometry import denormalize
from algorithms.cropping import crop
from inference import InferenceEngine, LoadedModel, create_engine, load_model
from models.config import Config
from models.errors import DegenerateBoxError, InspectionError, NoDetectionError
from models.image import Image
from models.result import InspectionResult, PipelineState
from pipeline.stages.classify import ClassifyStage, ClassifyStageConfig
from pipeline.stages.detect import DetectStage, DetectStageConfig

NO_DETECTION_POLICIES = ("fail", "full_image")


@dataclass
class PipelineConfig:
    """
    Configuration for the pipeline engine.

    Attributes:
        flatten_alpha: Composite alpha onto black before normalizing.
        interpolation: Resampling mode ("auto", "area", "linear", "cubic").
        no_detection_policy: "fail" ends the run when the detector finds
            nothing; "full_image" classifies the whole image instead.
    """
    flatten_alpha: bool = True
    interpolation: str = "auto"
    no_detection_policy: str = "fail"


class InspectionPipeline:
    """
    Two-stage detect-then-classify pipeline.

    Example:
        detector = load_model(engine, "vehicle_det.tflite", "detector", (320, 320))
        classifier = load_model(engine, "exposure_cls.tflite", "classifier", (256, 256))
        with InspectionPipeline(detector, classifier) as pipeline:
            result = pipeline.run(image)
            print(result.describe())
    """

    def __init__(
        self,
        detector: LoadedModel,
        classifier: LoadedModel,
        config: Optional[PipelineConfig] = None,
    ):
        self.config = config or PipelineConfig()
        if self.config.no_detection_policy not in NO_DETECTION_POLICIES:
            raise ValueError(f"Unknown no_detection_policy: {self.config.no_detection_policy}")

        self._detect_stage = DetectStage(
            detector,
            DetectStageConfig(
                flatten_alpha=self.config.flatten_alpha,
                interpolation=self.config.interpolation,
            ),
        )
        self._classify_stage = ClassifyStage(
            classifier,
            ClassifyStageConfig(
                flatten_alpha=self.config.flatten_alpha,
                interpolation=self.config.interpolation,
            ),
        )

    def run(self, image: Image) -> InspectionResult:
        """
        Run the pipeline on one image.

        Never raises for inspection failures: the result ends in DONE with a
        probability or in FAILED with a reason.
        """
        result = InspectionResult(state=PipelineState.IDLE, history=[PipelineState.IDLE])
        try:
            self._execute(image, result)
        except InspectionError as e:
            result.reason = e.reason
            result.detail = str(e) or e.reason
            self._transition(result, PipelineState.FAILED)
            logging.warning(f"Inspection failed: {result.reason} ({result.detail})")
        return result

    def classify(self, image: Image) -> float:
        """
        Run the pipeline and return the probability.

        Raises:
            NoDetectionError, DegenerateBoxError, PreprocessError,
            InferenceError: On the corresponding terminal failure.
        """
        result = InspectionResult(state=PipelineState.IDLE, history=[PipelineState.IDLE])
        self._execute(image, result)
        return result.probability

    def _execute(self, image: Image, result: InspectionResult) -> None:
        self._transition(result, PipelineState.DETECTING)
        box = self._detect_stage.process(image)

        if box is None:
            self._transition(result, PipelineState.NO_BOX)
            if self.config.no_detection_policy != "full_image":
                raise NoDetectionError("detector returned no candidates")
            logging.info("No detection, classifying the whole image")
            result.used_full_image = True
            region = image
        else:
            self._transition(result, PipelineState.BOX_FOUND)
            result.box = box

            self._transition(result, PipelineState.CROPPING)
            result.rect = denormalize(box, image.width, image.height)
            region = crop(image, result.rect)
            if region is None:
                self._transition(result, PipelineState.CROP_FAILED)
                raise DegenerateBoxError(
                    f"box {box.as_tuple()} maps to empty region {result.rect.as_tuple()} "
                    f"in {image.width}x{image.height} image"
                )
            self._transition(result, PipelineState.CROPPED)

        result.crop = region
        self._transition(result, PipelineState.CLASSIFYING)
        result.classification = self._classify_stage.process(region)
        self._transition(result, PipelineState.DONE)

    def _transition(self, result: InspectionResult, state: PipelineState) -> None:
        logging.debug(f"[PIPELINE] {result.state.value} -> {state.value}")
        result.state = state
        result.history.append(state)

    def close(self) -> None:
        """Release both engine handles."""
        for model in (self._detect_stage.model, self._classify_stage.model):
            try:
                model.close()
            except Exception as e:
                logging.warning(f"Error releasing {model.name} model: {e}")

    def __enter__(self) -> "InspectionPipeline":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


def create_pipeline_from_config(
    config: Dict[str, Any],
    engine: Optional[InferenceEngine] = None,
) -> InspectionPipeline:
    """
    Factory function to create an InspectionPipeline from a config dict.

    Loads both models up front so a missing or corrupt model is reported
    once, here, rather than on every image.

    Args:
        config: Full application config dict.
        engine: Engine to load models into; built from config if omitted.

    Raises:
        ModelLoadError: If either model cannot be loaded.
    """
    cfg = Config.from_dict(config)
    if engine is None:
        engine = create_engine(cfg.inference.backend, num_threads=cfg.inference.num_threads)

    detector = load_model(engine, cfg.detector.model_path, "detector", (cfg.detector.width, cfg.detector.height))
    classifier = load_model(
        engine, cfg.classifier.model_path, "classifier", (cfg.classifier.width, cfg.classifier.height)
    )

    pipeline_config = PipelineConfig(
        flatten_alpha=cfg.preprocessing.flatten_alpha,
        interpolation=cfg.preprocessing.interpolation,
        no_detection_policy=cfg.pipeline.no_detection_policy,
    )
    return InspectionPipeline(detector, classifier, pipeline_config)
