"""
Pipeline stages for the inspection pipeline.

Each stage handles one model:
- detect: vehicle localization
- classify: issue probability for the cropped vehicle
"""

from .detect import DetectStage, DetectStageConfig
from .classify import ClassifyStage, ClassifyStageConfig

__all__ = ["DetectStage", "DetectStageConfig", "ClassifyStage", "ClassifyStageConfig"]
