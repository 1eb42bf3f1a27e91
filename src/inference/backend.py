"""
Inference engine interface.

The pipeline depends only on this narrow contract:
load_model(path) -> handle, invoke(handle, tensor) -> [tensor].
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any, List, Protocol, Tuple

from models.errors import InferenceError, InspectionError, ModelLoadError
from models.tensor import Tensor, as_tensor

EngineHandle = Any


class InferenceEngine(Protocol):
    def load_model(self, path: str) -> EngineHandle:
        ...

    def invoke(self, handle: EngineHandle, tensor: Tensor) -> List[Any]:
        ...

    def release(self, handle: EngineHandle) -> None:
        ...


@dataclass
class LoadedModel:
    """
    A model loaded into an engine, owned by whoever constructed it.

    Attributes:
        name: Label used in logs and error messages.
        engine: Engine that produced the handle.
        handle: Engine-specific model handle.
        input_size: Expected input (width, height).
    """
    name: str
    engine: InferenceEngine
    handle: EngineHandle
    input_size: Tuple[int, int]

    def invoke(self, tensor: Tensor) -> List[Tensor]:
        """
        Run the model once.

        Raises:
            InferenceError: If the engine fails or returns something that is
                not a float32 tensor.
        """
        try:
            outputs = self.engine.invoke(self.handle, tensor)
        except InspectionError:
            raise
        except Exception as e:
            raise InferenceError(f"{self.name} inference failed: {e}") from e

        if outputs is None:
            raise InferenceError(f"{self.name} returned no outputs")
        return [as_tensor(o) for o in outputs]

    def close(self) -> None:
        release = getattr(self.engine, "release", None)
        if release is not None:
            release(self.handle)


def load_model(engine: InferenceEngine, path: str, name: str, input_size: Tuple[int, int]) -> LoadedModel:
    """
    Load a model file into an engine.

    Raises:
        ModelLoadError: If the file is missing or the engine cannot load it.
    """
    if not path or not os.path.exists(path):
        raise ModelLoadError(f"{name} model not found: {path!r}")
    try:
        handle = engine.load_model(path)
    except ModelLoadError:
        raise
    except Exception as e:
        raise ModelLoadError(f"Failed to load {name} model {path}: {e}") from e

    logging.info(f"Loaded {name} model: {path} (input {input_size[0]}x{input_size[1]})")
    return LoadedModel(name=name, engine=engine, handle=handle, input_size=tuple(input_size))
