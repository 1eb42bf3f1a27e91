"""
TensorFlow Lite inference backend.

Uses tflite_runtime if installed. The import is deferred to construction so
the rest of the project (and its tests) run without it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, List

import numpy as np

from models.errors import InferenceError, ModelLoadError
from models.tensor import Tensor
from .backend import InferenceEngine


@dataclass(frozen=True)
class TFLiteConfig:
    num_threads: int = 2


class TFLiteEngine(InferenceEngine):
    def __init__(self, cfg: TFLiteConfig):
        self.cfg = cfg
        try:
            from tflite_runtime.interpreter import Interpreter  # type: ignore
        except Exception as e:  # pragma: no cover
            raise ModelLoadError(
                "tflite_runtime is not installed. Install with `pip install tflite-runtime` "
                "or choose another inference.backend."
            ) from e

        self._interpreter_cls = Interpreter

    def load_model(self, path: str) -> Any:
        interpreter = self._interpreter_cls(model_path=path, num_threads=self.cfg.num_threads)
        interpreter.allocate_tensors()
        inp = interpreter.get_input_details()[0]
        logging.debug(f"TFLite model {path}: input shape={inp['shape']} dtype={inp['dtype']}")
        return interpreter

    def invoke(self, handle: Any, tensor: Tensor) -> List[Tensor]:
        interpreter = handle
        inp = interpreter.get_input_details()[0]
        shape = tuple(int(d) for d in inp["shape"])
        if int(np.prod(shape)) != tensor.size:
            raise InferenceError(
                f"Input tensor has {tensor.size} elements, model expects shape {shape}"
            )

        if np.dtype(inp["dtype"]) != np.float32:
            raise InferenceError(
                f"Model expects {np.dtype(inp['dtype'])} input; only float32 input models are supported"
            )

        x = tensor.data.reshape(shape).astype(np.float32, copy=True)
        interpreter.set_tensor(inp["index"], x)
        interpreter.invoke()

        outputs: List[Tensor] = []
        for detail in interpreter.get_output_details():
            raw = interpreter.get_tensor(detail["index"])
            outputs.append(Tensor.from_array(_dequantize(raw, detail)))
        return outputs

    def release(self, handle: Any) -> None:
        # Interpreters free their arenas when garbage collected.
        return None


def _dequantize(raw: np.ndarray, detail: dict) -> np.ndarray:
    """Convert quantized integer outputs to float using the tensor's scale/zero point."""
    if raw.dtype in (np.uint8, np.int8):
        scale, zero_point = detail.get("quantization", (0.0, 0))
        if scale:
            return (raw.astype(np.float32) - zero_point) * scale
    return raw.astype(np.float32)
