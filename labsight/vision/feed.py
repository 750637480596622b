"""
Prediction Feed - Camera and detector for remote clients.

A mobile or browser client runs the classifier itself and pushes its
predictions. The feed stands in for both collaborators:

    client --push()--> PredictionFeed --capture_frame()/detect()--> session

The latest batch acts as the current frame. A frame older than
max_age yields no observations, so a client that stops pushing ends
up with a cleared overlay instead of frozen markers.
"""

from __future__ import annotations
from typing import Any, Callable, Iterable, Mapping
import time

from .camera import Camera, Frame
from .detector import Detector, as_observations
from .observation import Observation


class PredictionFeed(Camera, Detector):
    """
    Push-based frame source.

    Usage:
        feed = PredictionFeed(max_age=2.0)
        feed.push([{"class": "cup", "score": 0.8, "bbox": [10, 20, 30, 40]}])

        frame = feed.capture_frame()
        observations = await feed.detect(frame)
    """

    def __init__(
        self,
        max_age: float = 2.0,
        clock: Callable[[], float] = time.time,
    ):
        self.max_age = max_age
        self._clock = clock
        self._frame_count = 0
        self._latest = Frame(frame_id=0, captured_at=0.0, data=[])

    @property
    def frame_count(self) -> int:
        """Number of batches pushed so far."""
        return self._frame_count

    def push(self, predictions: Iterable[Observation | Mapping[str, Any]]) -> Frame:
        """
        Store a new batch as the current frame.

        Raw predictions are parsed immediately so malformed input is
        rejected here (ValueError/KeyError), not inside the tick.
        """
        observations = as_observations(predictions)
        self._frame_count += 1
        self._latest = Frame(
            frame_id=self._frame_count,
            captured_at=self._clock(),
            data=observations,
        )
        return self._latest

    def capture_frame(self) -> Frame:
        return self._latest

    async def detect(self, frame: Frame) -> list[Observation]:
        if frame.frame_id == 0:
            return []
        if self._clock() - frame.captured_at > self.max_age:
            return []
        return list(frame.data)
