"""
Typed configuration models matching the YAML config structure.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List


@dataclass
class InferenceConfig:
    """Inference engine configuration."""
    backend: str = "tflite"
    num_threads: int = 2

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "InferenceConfig":
        return cls(
            backend=d.get("backend", "tflite"),
            num_threads=d.get("num_threads", 2),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "backend": self.backend,
            "num_threads": self.num_threads,
        }


@dataclass
class ModelConfig:
    """A single model file and its fixed input resolution [width, height]."""
    model_path: str = ""
    input_size: List[int] = field(default_factory=lambda: [256, 256])

    @classmethod
    def from_dict(cls, d: Dict[str, Any], default_size: List[int]) -> "ModelConfig":
        return cls(
            model_path=d.get("model_path", ""),
            input_size=list(d.get("input_size", default_size)),
        )

    @property
    def width(self) -> int:
        return int(self.input_size[0])

    @property
    def height(self) -> int:
        return int(self.input_size[1])

    def to_dict(self) -> Dict[str, Any]:
        return {
            "model_path": self.model_path,
            "input_size": list(self.input_size),
        }


DETECTOR_INPUT_SIZE = [320, 320]
CLASSIFIER_INPUT_SIZE = [256, 256]


@dataclass
class PreprocessingConfig:
    """Preprocessing options shared by both model inputs."""
    flatten_alpha: bool = True
    interpolation: str = "auto"

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "PreprocessingConfig":
        return cls(
            flatten_alpha=d.get("flatten_alpha", True),
            interpolation=d.get("interpolation", "auto"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "flatten_alpha": self.flatten_alpha,
            "interpolation": self.interpolation,
        }


@dataclass
class PipelineSettings:
    """Pipeline policy settings."""
    no_detection_policy: str = "fail"

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "PipelineSettings":
        return cls(no_detection_policy=d.get("no_detection_policy", "fail"))

    def to_dict(self) -> Dict[str, Any]:
        return {"no_detection_policy": self.no_detection_policy}


@dataclass
class OutputConfig:
    """Result sink options."""
    save_crops: bool = False
    crop_dir: str = "output/crops"

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "OutputConfig":
        return cls(
            save_crops=d.get("save_crops", False),
            crop_dir=d.get("crop_dir", "output/crops"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "save_crops": self.save_crops,
            "crop_dir": self.crop_dir,
        }


@dataclass
class Config:
    """
    Complete application configuration.

    This is a typed representation of the YAML config structure.
    """
    inference: InferenceConfig = field(default_factory=InferenceConfig)
    detector: ModelConfig = field(default_factory=lambda: ModelConfig(input_size=list(DETECTOR_INPUT_SIZE)))
    classifier: ModelConfig = field(default_factory=lambda: ModelConfig(input_size=list(CLASSIFIER_INPUT_SIZE)))
    preprocessing: PreprocessingConfig = field(default_factory=PreprocessingConfig)
    pipeline: PipelineSettings = field(default_factory=PipelineSettings)
    output: OutputConfig = field(default_factory=OutputConfig)
    log_path: str = "logs/inspection.log"
    log_level: str = "INFO"

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Config":
        """Adapter: Create Config from raw dictionary (e.g., from load_config)."""
        return cls(
            inference=InferenceConfig.from_dict(d.get("inference", {}) or {}),
            detector=ModelConfig.from_dict(d.get("detector", {}) or {}, DETECTOR_INPUT_SIZE),
            classifier=ModelConfig.from_dict(d.get("classifier", {}) or {}, CLASSIFIER_INPUT_SIZE),
            preprocessing=PreprocessingConfig.from_dict(d.get("preprocessing", {}) or {}),
            pipeline=PipelineSettings.from_dict(d.get("pipeline", {}) or {}),
            output=OutputConfig.from_dict(d.get("output", {}) or {}),
            log_path=d.get("log_path", "logs/inspection.log"),
            log_level=d.get("log_level", "INFO"),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert back to dictionary (for saving or logging)."""
        return {
            "inference": self.inference.to_dict(),
            "detector": self.detector.to_dict(),
            "classifier": self.classifier.to_dict(),
            "preprocessing": self.preprocessing.to_dict(),
            "pipeline": self.pipeline.to_dict(),
            "output": self.output.to_dict(),
            "log_path": self.log_path,
            "log_level": self.log_level,
        }
