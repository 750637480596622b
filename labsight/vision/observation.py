"""
Observation Types - Data structures crossing the detector boundary.

The detector produces raw predictions in the COCO-SSD shape:

    {"class": "cup", "score": 0.83, "bbox": [x, y, width, height]}

These become Observations (consumed once, never mutated). After
belief fusion each surviving observation becomes a TrackedDetection,
keyed by a tick-scoped detection id.

Detection ids come from the batch position plus the raw label
(det_<index>_<label>). They are NOT tracked across ticks.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Sequence


class ConfidenceLevel(Enum):
    """Confidence levels for display."""
    HIGH = "high"  # >=90%
    MEDIUM = "medium"  # 60-90%
    LOW = "low"  # 30-60%
    UNCERTAIN = "uncertain"  # <30%


def confidence_level(score: float) -> ConfidenceLevel:
    """Bucket a score in [0, 1] into a ConfidenceLevel."""
    if score >= 0.9:
        return ConfidenceLevel.HIGH
    if score >= 0.6:
        return ConfidenceLevel.MEDIUM
    if score >= 0.3:
        return ConfidenceLevel.LOW
    return ConfidenceLevel.UNCERTAIN


@dataclass(frozen=True)
class BoundingBox:
    """Box in image pixels: top-left corner plus size."""
    x: float
    y: float
    width: float
    height: float

    @classmethod
    def from_sequence(cls, values: Sequence[float]) -> BoundingBox:
        """Build from [x, y, width, height]."""
        if len(values) != 4:
            raise ValueError(f"Bounding box needs 4 values, got {len(values)}")
        x, y, width, height = (float(v) for v in values)
        return cls(x=x, y=y, width=width, height=height)

    def as_list(self) -> list[float]:
        return [self.x, self.y, self.width, self.height]


@dataclass(frozen=True)
class Observation:
    """
    One detector result for one tick.
    """
    label: str
    confidence: float  # 0-1
    bbox: BoundingBox

    @classmethod
    def from_prediction(cls, prediction: Mapping[str, Any]) -> Observation:
        """
        Convert a raw {"class", "score", "bbox"} prediction.

        Raises ValueError (or KeyError) if the prediction is malformed.
        """
        return cls(
            label=str(prediction["class"]),
            confidence=float(prediction.get("score") or 0.0),
            bbox=BoundingBox.from_sequence(prediction["bbox"]),
        )


def detection_id_for(index: int, label: str) -> str:
    """Tick-scoped id of the observation at a batch position."""
    return f"det_{index}_{label}"


@dataclass
class TrackedDetection:
    """
    An observation after belief fusion.

    Tick-scoped: the whole set is replaced on every tick.
    """
    detection_id: str
    bbox: BoundingBox

    # What the classifier said
    detected_class: str
    class_confidence: float

    # What the belief engine concluded
    equipment: str
    equipment_confidence: float

    # Full ranked posterior for this observation
    beliefs: dict[str, float] = field(default_factory=dict)

    @property
    def confidence_level(self) -> ConfidenceLevel:
        return confidence_level(self.equipment_confidence)
