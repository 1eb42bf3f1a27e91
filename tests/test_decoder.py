"""
Tests for detection output decoding.
"""

import struct

import numpy as np
import pytest

from detection.decoder import decode, detection_output_from_tensors
from models.detection import DetectionOutput
from models.errors import InferenceError
from models.tensor import Tensor


def test_selects_highest_score():
    out = DetectionOutput.from_flat(
        [0.1, 0.9, 0.3],
        [0, 0, 0.1, 0.1, 0.2, 0.2, 0.8, 0.9, 0.5, 0.5, 0.6, 0.6],
    )
    box = decode(out)
    assert box.as_tuple() == (0.2, 0.2, 0.8, 0.9)
    assert box.score == pytest.approx(0.9)


def test_empty_scores_return_none():
    assert decode(DetectionOutput.from_flat([], [])) is None


def test_first_index_wins_ties():
    out = DetectionOutput.from_flat(
        [0.5, 0.5],
        [0.0, 0.0, 0.2, 0.2, 0.4, 0.4, 0.8, 0.8],
    )
    assert decode(out).as_tuple() == (0.0, 0.0, 0.2, 0.2)


def test_coordinates_are_clipped():
    out = DetectionOutput.from_flat([0.7], [-0.1, 1.5, 1.2, 2.0])
    box = decode(out)
    assert box.x_min == 1.0
    assert box.y_min == 0.0
    assert box.y_max == 1.0
    assert box.x_max == 1.0


def test_low_score_still_yields_box():
    out = DetectionOutput.from_flat([0.001], [0.1, 0.1, 0.2, 0.2])
    assert decode(out) is not None


def test_reference_image_does_not_change_box(solid_image):
    out = DetectionOutput.from_flat([1.0], [0.1, 0.2, 0.3, 0.4])
    assert decode(out, solid_image) == decode(out)


class TestFromTensors:
    def test_builds_output(self):
        out = detection_output_from_tensors([
            Tensor.from_array([[0.2, 0.4]]),
            Tensor.from_array([[[0, 0, 1, 1], [0.1, 0.1, 0.5, 0.5]]]),
        ])
        assert len(out) == 2
        assert out.boxes[1].tolist() == pytest.approx([0.1, 0.1, 0.5, 0.5])

    def test_accepts_raw_buffers(self):
        out = detection_output_from_tensors([
            struct.pack("<f", 0.6),
            struct.pack("<4f", 0.0, 0.25, 0.5, 0.75),
        ])
        assert decode(out).as_tuple() == (0.0, 0.25, 0.5, 0.75)

    def test_missing_box_output(self):
        with pytest.raises(InferenceError):
            detection_output_from_tensors([Tensor.from_array([0.5])])

    def test_length_mismatch(self):
        with pytest.raises(InferenceError):
            detection_output_from_tensors([
                Tensor.from_array([0.5, 0.6]),
                Tensor.from_array(np.zeros(5)),
            ])

    @pytest.mark.parametrize("bad", [np.nan, np.inf])
    def test_non_finite_score_rejected(self, bad):
        with pytest.raises(InferenceError):
            detection_output_from_tensors([
                Tensor.from_array([bad, 0.9]),
                Tensor.from_array([0, 0, 0.1, 0.1, 0.2, 0.2, 0.8, 0.9]),
            ])


def test_nan_score_cannot_win_selection():
    with pytest.raises(InferenceError):
        DetectionOutput.from_flat([np.nan, 0.9], [0, 0, 0.1, 0.1, 0.2, 0.2, 0.8, 0.9])
