"""
Error types raised by the inspection stages.

Each stage raises one of these instead of returning a partial result; the
pipeline maps them onto its terminal FAILED state.
"""

from __future__ import annotations


class InspectionError(Exception):
    """Base class for all inspection failures."""

    reason = "inspection failed"


class ModelLoadError(InspectionError):
    """A model file is missing or cannot be loaded by the engine."""

    reason = "model unavailable"


class PreprocessError(InspectionError):
    """Invalid target dimensions or an empty/unreadable source image."""

    reason = "preprocessing failed"


class NoDetectionError(InspectionError):
    """The detector returned an empty score vector."""

    reason = "no detection"


class DegenerateBoxError(InspectionError):
    """The selected box maps to a zero-area crop region."""

    reason = "degenerate box"


class InferenceError(InspectionError):
    """An engine invoke failed or returned malformed output."""

    reason = "inference failed"
