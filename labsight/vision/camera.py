"""
Camera Boundary - Frame acquisition.

Frame capture itself (device access, resolution, torch) lives outside
the engine. The session only needs one frame handle per tick.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any
import itertools
import time


@dataclass(frozen=True)
class Frame:
    """An opaque frame handle with capture metadata."""
    frame_id: int
    captured_at: float
    data: Any = None


class Camera(ABC):
    """
    Abstract base class for frame sources.

    Assumed always available while a session is running. A camera
    that raises is treated by the session as an empty tick.
    """

    @abstractmethod
    def capture_frame(self) -> Frame:
        """Capture the current frame."""
        pass


class StaticCamera(Camera):
    """
    Camera that returns the same payload on every capture.

    Used for testing and for simulations where the detector
    ignores pixels.
    """

    def __init__(self, data: Any = None):
        self.data = data
        self._ids = itertools.count(1)

    def capture_frame(self) -> Frame:
        return Frame(frame_id=next(self._ids), captured_at=time.time(), data=self.data)
