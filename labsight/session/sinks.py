"""
Output Sinks - Where the session sends its results.

Three collaborators receive output from the detection loop:
- OverlaySink: on-screen markers keyed by detection id
- InfoSink: the single top detection, for name/description/warnings
- VoiceSink: plain-text announcements (fire-and-forget)

Rendering, speech synthesis and UI wiring live outside the engine.
The in-memory implementations here back the API and the tests.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from ..catalog import EquipmentCatalog, EquipmentEntry
from ..vision.observation import BoundingBox, TrackedDetection


@dataclass(frozen=True)
class OverlayMarker:
    """What the overlay draws for one detection."""
    bbox: BoundingBox
    identity: str
    score: float


# =============================================================================
# Boundaries
# =============================================================================

class OverlaySink(ABC):
    """On-screen markers, one per detection id."""

    @abstractmethod
    def add_detection(self, detection_id: str, marker: OverlayMarker) -> None:
        pass

    @abstractmethod
    def remove_detection(self, detection_id: str) -> None:
        pass

    @abstractmethod
    def clear_all(self) -> None:
        pass

    def start_animation(self) -> None:
        """Begin the render loop. Optional."""

    def stop_animation(self) -> None:
        """End the render loop. Optional."""


class InfoSink(ABC):
    """Displays reference information for the top detection."""

    @abstractmethod
    def show_detection(self, detection: TrackedDetection) -> None:
        pass

    @abstractmethod
    def clear(self) -> None:
        pass


class VoiceSink(ABC):
    """Speaks announcements. The session never waits on it."""

    @abstractmethod
    async def speak(self, text: str) -> None:
        pass


# =============================================================================
# In-memory implementations
# =============================================================================

class OverlayBoard(OverlaySink):
    """
    Overlay that keeps markers in memory.

    Records every call in events as (operation, detection_id) so
    callers can inspect exactly what the session asked for.
    """

    def __init__(self):
        self.markers: dict[str, OverlayMarker] = {}
        self.animating = False
        self.events: list[tuple[str, str | None]] = []

    def add_detection(self, detection_id: str, marker: OverlayMarker) -> None:
        self.markers[detection_id] = marker
        self.events.append(("add", detection_id))

    def remove_detection(self, detection_id: str) -> None:
        self.markers.pop(detection_id, None)
        self.events.append(("remove", detection_id))

    def clear_all(self) -> None:
        self.markers.clear()
        self.events.append(("clear", None))

    def start_animation(self) -> None:
        self.animating = True

    def stop_animation(self) -> None:
        self.animating = False

    def count(self, operation: str) -> int:
        """Number of recorded events of one kind ("add", "remove", "clear")."""
        return sum(1 for op, _ in self.events if op == operation)


class InfoPanel(InfoSink):
    """
    Info display that keeps the current top detection in memory,
    resolved against the catalog.
    """

    def __init__(self, catalog: EquipmentCatalog | None = None):
        self.catalog = catalog
        self.detection: TrackedDetection | None = None
        self.entry: EquipmentEntry | None = None
        self.updates = 0

    def show_detection(self, detection: TrackedDetection) -> None:
        self.detection = detection
        self.entry = self.catalog.get(detection.equipment) if self.catalog else None
        self.updates += 1

    def clear(self) -> None:
        self.detection = None
        self.entry = None

    def snapshot(self) -> dict[str, Any]:
        """Current display contents as plain data."""
        if self.detection is None:
            return {"message": "No equipment detected"}
        data: dict[str, Any] = {
            "equipment": self.detection.equipment,
            "confidence": self.detection.equipment_confidence,
        }
        if self.entry:
            data.update(
                name=self.entry.name,
                description=self.entry.description,
                safety_warnings=list(self.entry.safety_warnings),
                usage=list(self.entry.usage),
            )
        return data


@dataclass
class VoiceLog(VoiceSink):
    """Voice sink that records what would have been spoken."""
    spoken: list[str] = field(default_factory=list)

    async def speak(self, text: str) -> None:
        self.spoken.append(text)
