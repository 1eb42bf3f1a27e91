"""
Detection output decoding.

Turns the detector's raw score and box tensors into the single best
normalized box.
"""

from .decoder import decode, detection_output_from_tensors

__all__ = ["decode", "detection_output_from_tensors"]
