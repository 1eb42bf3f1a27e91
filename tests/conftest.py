"""
Pytest configuration and shared fixtures.
"""

import os
import sys

import numpy as np
import pytest

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from inference.backend import LoadedModel  # noqa: E402
from models.image import Image  # noqa: E402
from models.tensor import Tensor  # noqa: E402


class StubEngine:
    """In-memory engine returning fixed outputs and recording inputs."""

    def __init__(self, outputs=None, error=None, load_error=None):
        self._outputs = outputs if outputs is not None else []
        self._error = error
        self._load_error = load_error
        self.loaded = []
        self.inputs = []
        self.released = []

    def load_model(self, path):
        if self._load_error is not None:
            raise self._load_error
        self.loaded.append(path)
        return f"handle:{path}"

    def invoke(self, handle, tensor):
        self.inputs.append(tensor)
        if self._error is not None:
            raise self._error
        if callable(self._outputs):
            return self._outputs(tensor)
        return list(self._outputs)

    def release(self, handle):
        self.released.append(handle)


def make_model(engine, name, size):
    return LoadedModel(name=name, engine=engine, handle=f"handle:{name}", input_size=size)


@pytest.fixture
def solid_image():
    """50x50 opaque mid-gray image."""
    return Image.solid(50, 50, (120, 60, 200, 255))


@pytest.fixture
def gradient_image():
    """80x60 image with distinct values per pixel."""
    h, w = 60, 80
    arr = np.zeros((h, w, 4), dtype=np.uint8)
    arr[..., 0] = np.arange(w, dtype=np.uint8)[None, :]
    arr[..., 1] = np.arange(h, dtype=np.uint8)[:, None]
    arr[..., 2] = 7
    arr[..., 3] = 255
    return Image.from_numpy(arr)


@pytest.fixture
def detector_engine():
    """Detector stub: one candidate covering the central 80%."""
    return StubEngine(outputs=[
        Tensor.from_array([1.0]),
        Tensor.from_array([0.1, 0.1, 0.9, 0.9]),
    ])


@pytest.fixture
def classifier_engine():
    """Classifier stub always returning 0.75."""
    return StubEngine(outputs=[Tensor.from_array([0.75])])


@pytest.fixture
def detector_model(detector_engine):
    return make_model(detector_engine, "detector", (320, 320))


@pytest.fixture
def classifier_model(classifier_engine):
    return make_model(classifier_engine, "classifier", (256, 256))


@pytest.fixture
def valid_config(tmp_path):
    """Return a valid configuration dictionary with existing model files."""
    det = tmp_path / "vehicle_det.tflite"
    cls = tmp_path / "exposure_cls.tflite"
    det.write_bytes(b"det")
    cls.write_bytes(b"cls")
    return {
        "inference": {"backend": "tflite", "num_threads": 2},
        "detector": {"model_path": str(det), "input_size": [320, 320]},
        "classifier": {"model_path": str(cls), "input_size": [256, 256]},
        "preprocessing": {"flatten_alpha": True, "interpolation": "auto"},
        "pipeline": {"no_detection_policy": "fail"},
        "output": {"save_crops": False, "crop_dir": str(tmp_path / "crops")},
        "log_path": str(tmp_path / "logs" / "test.log"),
        "log_level": "INFO",
    }


@pytest.fixture
def temp_config_dir(tmp_path):
    """Create a temporary config directory with default.yaml."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()

    default_yaml = config_dir / "default.yaml"
    default_yaml.write_text("""
inference:
  backend: "tflite"
  num_threads: 2

detector:
  model_path: "models/vehicle_det.tflite"
  input_size: [320, 320]

classifier:
  model_path: "models/exposure_cls.tflite"
  input_size: [256, 256]

log_path: "logs/test.log"
log_level: "INFO"
""")

    return config_dir
