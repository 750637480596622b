"""
Vision Layer - Frames in, observations out.

The classifier is a black box that sees generic objects. The vision
layer only defines the boundary shapes and a few adapters:

    Camera -> Frame -> Detector -> [Observation] -> (session) -> [TrackedDetection]

Vision is NON-AUTHORITATIVE: it reports what the classifier saw,
the recognition layer decides what equipment that probably is.
"""

from .observation import (
    BoundingBox,
    Observation,
    TrackedDetection,
    ConfidenceLevel,
    confidence_level,
    detection_id_for,
)
from .camera import Camera, Frame, StaticCamera
from .detector import (
    Detector,
    ScriptedDetector,
    LAB_RELEVANT_CLASSES,
    as_observations,
    filter_by_threshold,
    filter_by_class,
)
from .feed import PredictionFeed

__all__ = [
    "BoundingBox",
    "Observation",
    "TrackedDetection",
    "ConfidenceLevel",
    "confidence_level",
    "detection_id_for",
    "Camera",
    "Frame",
    "StaticCamera",
    "Detector",
    "ScriptedDetector",
    "LAB_RELEVANT_CLASSES",
    "as_observations",
    "filter_by_threshold",
    "filter_by_class",
    "PredictionFeed",
]
