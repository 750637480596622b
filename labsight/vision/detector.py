"""
Detector Boundary - The object classifier as a black box.

The classifier (e.g. COCO-SSD) returns labeled boxes with a score.
It knows generic objects, not lab equipment; the belief engine does
the mapping. Detection may suspend and may fail.

Implementations:
- ScriptedDetector: replays recorded batches (testing, simulation)
- PredictionFeed: batches pushed by a remote client (see feed.py)
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Any, Iterable, Sequence

from .camera import Frame
from .observation import Observation


# Classifier labels worth considering in a laboratory
LAB_RELEVANT_CLASSES: tuple[str, ...] = (
    "bottle",
    "cup",
    "scissors",
    "knife",
    "spoon",
    "fork",
    "plate",
    "bowl",
    "clock",
    "lamp",
    "microscope",
    "telescope",
    "beaker",
    "flask",
    "test tube",
    "pipette",
    "burette",
    "tripod",
    "bunsen burner",
)


class Detector(ABC):
    """
    Abstract base class for object detectors.
    """

    @abstractmethod
    async def detect(self, frame: Frame) -> list[Observation]:
        """
        Run detection on one frame.

        May raise; the session treats a failure as an empty batch.
        """
        pass


def as_observations(items: Iterable[Any]) -> list[Observation]:
    """
    Normalize a detector batch: Observations pass through, raw
    {"class", "score", "bbox"} predictions are parsed.

    Raises ValueError, KeyError or TypeError on a malformed item.
    """
    return [
        item if isinstance(item, Observation) else Observation.from_prediction(item)
        for item in items
    ]


def filter_by_threshold(
    observations: Iterable[Observation],
    threshold: float,
) -> list[Observation]:
    """Keep observations with confidence >= threshold, in order."""
    return [o for o in observations if o.confidence >= threshold]


def filter_by_class(
    observations: Iterable[Observation],
    classes: str | Iterable[str],
) -> list[Observation]:
    """Keep observations whose label is one of classes."""
    allowed = {classes} if isinstance(classes, str) else set(classes)
    return [o for o in observations if o.label in allowed]


class ScriptedDetector(Detector):
    """
    Detector that replays pre-recorded batches, one per call.

    A batch may hold Observations or raw prediction dicts. A batch
    that is an exception instance is raised instead of returned.
    Once the script runs out every call returns an empty batch.
    """

    def __init__(self, batches: Sequence[Any] | None = None):
        self._batches = list(batches or [])
        self.calls = 0
        self.frames: list[Frame] = []

    def queue(self, batch: Any) -> None:
        """Append a batch to the end of the script."""
        self._batches.append(batch)

    @property
    def remaining(self) -> int:
        return len(self._batches)

    async def detect(self, frame: Frame) -> list[Observation]:
        self.calls += 1
        self.frames.append(frame)

        if not self._batches:
            return []

        batch = self._batches.pop(0)
        if isinstance(batch, BaseException):
            raise batch

        return as_observations(batch)
