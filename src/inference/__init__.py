"""
Inference engine boundary.

Engines are created from config and passed into the pipeline explicitly;
nothing here keeps a global handle.
"""

from __future__ import annotations

from .backend import EngineHandle, InferenceEngine, LoadedModel, load_model

BACKENDS = ("tflite",)


def create_engine(backend: str, num_threads: int = 2) -> InferenceEngine:
    """Factory for the configured inference backend."""
    if backend == "tflite":
        from .tflite_backend import TFLiteConfig, TFLiteEngine

        return TFLiteEngine(TFLiteConfig(num_threads=num_threads))
    raise ValueError(f"Unknown inference backend: {backend}")


__all__ = [
    "BACKENDS",
    "EngineHandle",
    "InferenceEngine",
    "LoadedModel",
    "create_engine",
    "load_model",
]
