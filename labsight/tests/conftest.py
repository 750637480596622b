"""
Pytest fixtures for LabSight tests.
"""

import asyncio

import pytest

from ..catalog import EquipmentCatalog, create_lab_catalog
from ..config import SessionConfig
from ..recognition import BeliefEngine, HistoryLedger
from ..session import DetectionSession, InfoPanel, OverlayBoard, VoiceLog
from ..vision import Camera, Detector, Frame, ScriptedDetector, StaticCamera


def prediction(label: str, score: float, bbox=(10, 20, 30, 40)) -> dict:
    """Raw classifier prediction."""
    return {"class": label, "score": score, "bbox": list(bbox)}


class GatedDetector(Detector):
    """
    Detector that holds every call until released.

    Lets a test keep a tick in flight while it stops the session
    or fires another tick.
    """

    def __init__(self, batch=None):
        self.batch = batch or []
        self.calls = 0
        self.entered = asyncio.Event()
        self.gate = asyncio.Event()

    async def detect(self, frame: Frame):
        self.calls += 1
        self.entered.set()
        await self.gate.wait()
        return list(self.batch)


class BrokenCamera(Camera):
    """Camera that always fails."""

    def capture_frame(self) -> Frame:
        raise RuntimeError("camera unplugged")


class FailingVoice(VoiceLog):
    """Voice sink whose speech always fails."""

    async def speak(self, text: str) -> None:
        raise RuntimeError("no audio device")


class SlowVoice(VoiceLog):
    """Voice sink that takes a while per line and records overlapping speech."""

    def __init__(self):
        super().__init__()
        self.active = 0
        self.max_active = 0

    async def speak(self, text: str) -> None:
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        await asyncio.sleep(0.005)
        self.spoken.append(text)
        self.active -= 1


@pytest.fixture
def lab_catalog() -> EquipmentCatalog:
    """Built-in laboratory catalog."""
    return create_lab_catalog()


@pytest.fixture
def small_catalog() -> EquipmentCatalog:
    """Two-entry catalog: beaker and flask."""
    return EquipmentCatalog.from_dict({
        "beaker": {
            "name": "Beaker",
            "description": "A cylindrical glass container.",
            "safetyWarnings": ["Glass can break"],
            "usage": ["Mixing liquids"],
            "steps": ["Inspect for cracks", "Place on a flat surface"],
        },
        "flask": {
            "name": "Flask",
            "description": "A conical glass flask.",
        },
    })


@pytest.fixture
def engine() -> BeliefEngine:
    """Fresh belief engine without priors."""
    return BeliefEngine()


@pytest.fixture
def ledger() -> HistoryLedger:
    """History ledger with a deterministic clock."""
    ticks = iter(range(1, 10_000))
    return HistoryLedger(clock=lambda: float(next(ticks)))


@pytest.fixture
def make_session(small_catalog):
    """
    Factory for sessions wired to in-memory sinks.

    Returns (session, overlay, info, voice).
    """
    def _make(
        detector=None,
        camera=None,
        catalog=None,
        voice=None,
        **config_overrides,
    ):
        catalog = catalog or small_catalog
        overlay = OverlayBoard()
        info = InfoPanel(catalog)
        voice = voice or VoiceLog()
        config = SessionConfig(**{"tick_interval": 60.0, **config_overrides})
        session = DetectionSession(
            camera=camera or StaticCamera(),
            detector=detector or ScriptedDetector(),
            identities=catalog.identities,
            overlay=overlay,
            info=info,
            voice=voice,
            config=config,
            catalog=catalog,
        )
        return session, overlay, info, voice

    return _make
