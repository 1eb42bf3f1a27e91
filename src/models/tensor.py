"""
Typed float32 tensor exchanged with inference engines.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Sequence, Tuple

import numpy as np

from .errors import InferenceError

FLOAT32_SIZE = np.dtype(np.float32).itemsize


@dataclass(frozen=True)
class Tensor:
    """
    A fixed-shape float32 buffer.

    Attributes:
        data: Contiguous float32 array (read-only) of the given shape.
    """
    data: np.ndarray

    @classmethod
    def from_array(cls, arr: Any, shape: Optional[Sequence[int]] = None) -> "Tensor":
        """Copy any numeric array-like into a float32 tensor."""
        try:
            data = np.array(arr, dtype=np.float32, copy=True)
        except (TypeError, ValueError) as e:
            raise InferenceError(f"Cannot convert output to float32 tensor: {e}") from e

        if shape is not None:
            expected = int(np.prod(shape))
            if data.size != expected:
                raise InferenceError(
                    f"Tensor has {data.size} elements, expected {expected} for shape {tuple(shape)}"
                )
            data = data.reshape(tuple(shape))

        data = np.ascontiguousarray(data)
        data.setflags(write=False)
        return cls(data=data)

    @classmethod
    def from_bytes(cls, buf: bytes, shape: Optional[Sequence[int]] = None) -> "Tensor":
        """
        Decode a raw little-endian float32 buffer.

        Raises:
            InferenceError: If the byte length is not a multiple of the float32
                size, or does not match the requested shape.
        """
        raw = bytes(buf)
        if len(raw) % FLOAT32_SIZE != 0:
            raise InferenceError(
                f"Output buffer of {len(raw)} bytes is not a multiple of {FLOAT32_SIZE}"
            )
        values = np.frombuffer(raw, dtype="<f4")
        return cls.from_array(values, shape=shape)

    @property
    def shape(self) -> Tuple[int, ...]:
        return tuple(self.data.shape)

    @property
    def size(self) -> int:
        return int(self.data.size)

    def flat(self) -> np.ndarray:
        """Return the row-major flattened view."""
        return self.data.reshape(-1)

    def __len__(self) -> int:
        return self.size


def as_tensor(value: Any) -> Tensor:
    """Coerce an engine output (Tensor, ndarray, sequence or raw bytes) to a Tensor."""
    if isinstance(value, Tensor):
        return value
    if isinstance(value, (bytes, bytearray, memoryview)):
        return Tensor.from_bytes(value)
    return Tensor.from_array(value)
