"""
Typed models for the vehicle inspection pipeline.

Images and tensors are immutable values; every stage returns new ones.
"""

from .image import Image
from .tensor import Tensor, as_tensor
from .detection import BoundingBox, PixelRect, DetectionOutput
from .result import ClassificationResult, InspectionResult, PipelineState
from .errors import (
    InspectionError,
    ModelLoadError,
    PreprocessError,
    NoDetectionError,
    DegenerateBoxError,
    InferenceError,
)
from .config import (
    Config,
    InferenceConfig,
    ModelConfig,
    PreprocessingConfig,
    PipelineSettings,
    OutputConfig,
)

__all__ = [
    # Pixels / tensors
    "Image",
    "Tensor",
    "as_tensor",
    # Detection
    "BoundingBox",
    "PixelRect",
    "DetectionOutput",
    # Results
    "ClassificationResult",
    "InspectionResult",
    "PipelineState",
    # Errors
    "InspectionError",
    "ModelLoadError",
    "PreprocessError",
    "NoDetectionError",
    "DegenerateBoxError",
    "InferenceError",
    # Config
    "Config",
    "InferenceConfig",
    "ModelConfig",
    "PreprocessingConfig",
    "PipelineSettings",
    "OutputConfig",
]
