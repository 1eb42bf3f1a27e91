"""
Pipeline module for the vehicle inspection system.

The pipeline orchestrates the full processing flow:
- Detector input preparation and inference (DetectStage)
- Box decoding, denormalization and cropping
- Classifier input preparation and inference (ClassifyStage)
"""

from .engine import InspectionPipeline, PipelineConfig, create_pipeline_from_config
from .stages.detect import DetectStage, DetectStageConfig
from .stages.classify import ClassifyStage, ClassifyStageConfig

__all__ = [
    "InspectionPipeline",
    "PipelineConfig",
    "create_pipeline_from_config",
    "DetectStage",
    "DetectStageConfig",
    "ClassifyStage",
    "ClassifyStageConfig",
]
