"""
Detection Session - The timer-driven identification loop.

States:
    IDLE --start()--> RUNNING --stop()--> IDLE

While RUNNING, a tick fires every tick_interval seconds:
1. Capture one frame from the camera
2. Ask the detector for observations (may suspend); raw predictions
   are parsed, a malformed one fails the batch
3. Drop observations below the detection threshold, and labels outside
   LAB_RELEVANT_CLASSES when lab_classes_only is set
4. Nothing left: clear the previous tick's markers and stop there
5. Otherwise rank every observation against the catalog, record the
   winner in the history ledger, build a TrackedDetection
6. Diff against the previous tick: remove ids that vanished, add ids
   that are new, leave ids present in both untouched
7. Replace the tracked set wholesale
8. Show the first (top) detection on the info display

Concurrency rules:
- Single flight. A tick that is due while another is still in flight
  is skipped, never queued. skipped_ticks counts them.
- stop() wins. A detector call that completes after stop() is
  discarded; the tick checks the session state before applying.
- Nothing escapes a tick. Camera/detector failures count as an empty
  batch; other failures are logged and the session keeps running.
- One voice. Announcements are spoken one at a time, in call order.

Markers for an id that survives between ticks are never updated in
place, so a static object keeps the confidence from its first tick.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable
import asyncio
import logging

from ..config import SessionConfig
from ..catalog import EquipmentCatalog
from ..recognition import BeliefEngine, HistoryLedger, HistoryStatistics, HistoryVerdict
from ..recognition.belief import is_probability
from ..vision.camera import Camera
from ..vision.detector import (
    LAB_RELEVANT_CLASSES,
    Detector,
    as_observations,
    filter_by_class,
    filter_by_threshold,
)
from ..vision.observation import Observation, TrackedDetection, detection_id_for
from .sinks import InfoSink, OverlayMarker, OverlaySink, VoiceSink


logger = logging.getLogger(__name__)


UNKNOWN_EQUIPMENT = "unknown"


class SessionState(Enum):
    """State of a detection session."""
    IDLE = "idle"
    RUNNING = "running"


@dataclass
class OverlayDiff:
    """Marker changes made by one tick."""
    added: list[str] = field(default_factory=list)
    removed: list[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.added and not self.removed


@dataclass
class TickResult:
    """
    Outcome of one completed tick.
    """
    tick_number: int
    observation_count: int  # before thresholding
    detections: list[TrackedDetection] = field(default_factory=list)
    diff: OverlayDiff = field(default_factory=OverlayDiff)

    # First detection of the tick, shown on the info display
    top: TrackedDetection | None = None

    # Set when the camera or detector failed this tick
    error: str | None = None


class DetectionSession:
    """
    Drives the belief engine on a fixed cadence and keeps the overlay
    in sync with the current beliefs.

    Usage:
        session = DetectionSession(
            camera=camera,
            detector=detector,
            identities=catalog.identities,
            overlay=OverlayBoard(),
            info=InfoPanel(catalog),
            voice=VoiceLog(),
        )

        await session.start()
        ...
        await session.stop()

    tick() runs a single pipeline pass and can be called directly.

    An engine created by the session is primed over identities with
    the configured base likelihood. A supplied engine is used as it
    is; set_catalog() and reset_beliefs() prime it later.
    """

    START_ANNOUNCEMENT = "AR system started. Initializing detection."
    STOP_ANNOUNCEMENT = "AR system stopped"

    def __init__(
        self,
        camera: Camera,
        detector: Detector,
        identities: Iterable[str],
        overlay: OverlaySink,
        info: InfoSink,
        voice: VoiceSink,
        config: SessionConfig | None = None,
        engine: BeliefEngine | None = None,
        history: HistoryLedger | None = None,
        catalog: EquipmentCatalog | None = None,
    ):
        self.config = config or SessionConfig()

        # Collaborators
        self.camera = camera
        self.detector = detector
        self.overlay = overlay
        self.info = info
        self.voice = voice
        self.catalog = catalog

        # Beliefs
        self.history = history or HistoryLedger(capacity=self.config.history_capacity)
        self._identities: tuple[str, ...] = tuple(identities)
        if engine is None:
            engine = BeliefEngine()
            engine.prime(self._identities, self.config.base_likelihood)
        self.engine = engine

        self._detection_threshold = self.config.detection_threshold
        self._state = SessionState.IDLE

        # Current overlay set, replaced every tick
        self._tracked: dict[str, TrackedDetection] = {}

        # Scheduling
        self._timer_task: asyncio.Task | None = None
        self._tick_task: asyncio.Task | None = None
        self._tick_in_flight = False
        self._announcements: set[asyncio.Future] = set()
        self._last_announcement: asyncio.Future | None = None

        # Bumped on every start() so a tick can tell it outlived its run
        self._generation = 0

        self.tick_count = 0
        self.skipped_ticks = 0
        self.last_result: TickResult | None = None

    # =========================================================================
    # Properties & configuration
    # =========================================================================

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._state is SessionState.RUNNING

    @property
    def tick_in_flight(self) -> bool:
        return self._tick_in_flight

    @property
    def identities(self) -> tuple[str, ...]:
        return self._identities

    @property
    def tracked(self) -> dict[str, TrackedDetection]:
        """Copy of the current tracked detections, in tick order."""
        return dict(self._tracked)

    @property
    def detection_threshold(self) -> float:
        return self._detection_threshold

    def set_detection_threshold(self, threshold: float) -> bool:
        """Change the threshold from the next tick on. Ignores values outside [0, 1]."""
        if not is_probability(threshold):
            return False
        self._detection_threshold = float(threshold)
        return True

    def set_catalog(self, identities: Iterable[str]) -> None:
        """
        Replace the candidate identities.

        Beliefs are re-primed for the new catalog; the change applies
        from the next tick.
        """
        self._identities = tuple(identities)
        self.engine.prime(self._identities, self.config.base_likelihood)
        logger.info("Catalog set to %d identities", len(self._identities))

    def reset_beliefs(self) -> None:
        """Start over: fresh priors/likelihoods, no posteriors, no history."""
        self.engine.reset()
        self.engine.prime(self._identities, self.config.base_likelihood)
        self.history.clear()

    # =========================================================================
    # Lifecycle
    # =========================================================================

    async def start(self) -> bool:
        """
        Begin ticking. No-op (returns False) if already running.
        """
        if self._state is SessionState.RUNNING:
            return False

        self._state = SessionState.RUNNING
        self._generation += 1
        self.overlay.start_animation()
        self._announce(self.START_ANNOUNCEMENT)
        self._timer_task = asyncio.ensure_future(self._run_timer())

        logger.info(
            "Detection session started (interval=%.3fs, threshold=%.2f)",
            self.config.tick_interval,
            self._detection_threshold,
        )
        return True

    async def stop(self) -> bool:
        """
        Stop ticking and clear everything on screen.

        No-op (returns False) if already idle. An in-flight tick is
        cancelled; if its detector call still completes, the result
        is discarded.

        Teardown is complete before the first await; a start() during
        the wind-down begins a clean run.
        """
        if self._state is SessionState.IDLE:
            return False

        self._state = SessionState.IDLE

        current = asyncio.current_task()
        tasks = [
            task for task in (self._timer_task, self._tick_task)
            if task is not None and task is not current and not task.done()
        ]
        self._timer_task = None
        self._tick_task = None
        for task in tasks:
            task.cancel()

        self.overlay.stop_animation()
        self.clear_detections()
        self.history.clear()
        self._announce(self.STOP_ANNOUNCEMENT)
        logger.info("Detection session stopped after %d ticks", self.tick_count)

        await asyncio.gather(*tasks, return_exceptions=True)
        return True

    def clear_detections(self) -> None:
        """Remove all markers, tracked detections and the info display."""
        self.overlay.clear_all()
        self._tracked = {}
        self.info.clear()

    async def drain_announcements(self) -> None:
        """Wait for pending announcements to finish."""
        if self._announcements:
            await asyncio.gather(*list(self._announcements), return_exceptions=True)

    async def announce_guidance(self, identity: str) -> bool:
        """
        Speak the catalog guidance for an identity.

        Returns False if there is no catalog or the identity is unknown.
        """
        entry = self.catalog.get(identity) if self.catalog else None
        if entry is None:
            return False
        self._announce(*entry.guidance_script())
        return True

    # =========================================================================
    # Beliefs
    # =========================================================================

    def most_likely(self) -> HistoryVerdict:
        return self.history.most_likely()

    def statistics(self) -> HistoryStatistics:
        return self.history.statistics(self.engine.posteriors)

    # =========================================================================
    # Tick pipeline
    # =========================================================================

    async def tick(self) -> TickResult | None:
        """
        Run one pass of the detection pipeline.

        Returns None if the session is idle, another tick is in flight,
        the session was stopped mid-tick, or the tick failed.
        """
        if self._state is not SessionState.RUNNING:
            return None

        if self._tick_in_flight:
            self.skipped_ticks += 1
            logger.debug("Tick skipped: previous tick still in flight")
            return None

        self._tick_in_flight = True
        try:
            result = await self._run_pipeline()
        except Exception:
            logger.exception("Detection tick failed")
            result = None
        finally:
            self._tick_in_flight = False

        if result is not None:
            self.last_result = result
        return result

    async def _run_pipeline(self) -> TickResult | None:
        self.tick_count += 1
        tick_number = self.tick_count
        generation = self._generation

        observations, error = await self._acquire_observations()

        if self._state is not SessionState.RUNNING or self._generation != generation:
            logger.debug("Tick %d completed after stop; discarded", tick_number)
            return None

        surviving = filter_by_threshold(observations, self._detection_threshold)
        if self.config.lab_classes_only:
            surviving = filter_by_class(surviving, LAB_RELEVANT_CLASSES)

        if not surviving:
            diff = OverlayDiff()
            if self._tracked:
                diff.removed = list(self._tracked)
                for detection_id in diff.removed:
                    self.overlay.remove_detection(detection_id)
                self._tracked = {}
                self.info.clear()
            return TickResult(
                tick_number=tick_number,
                observation_count=len(observations),
                diff=diff,
                error=error,
            )

        new_tracked = self._fuse(surviving)
        diff = self._apply_overlay_diff(new_tracked)
        self._tracked = new_tracked

        top = next(iter(new_tracked.values()))
        self.info.show_detection(top)

        return TickResult(
            tick_number=tick_number,
            observation_count=len(observations),
            detections=list(new_tracked.values()),
            diff=diff,
            top=top,
        )

    async def _acquire_observations(self) -> tuple[list[Observation], str | None]:
        """Frame + detection. Any failure, a malformed prediction included, yields an empty batch."""
        try:
            frame = self.camera.capture_frame()
            observations = as_observations(await self.detector.detect(frame))
        except Exception as e:
            logger.warning("Detection failed, treating tick as empty: %s", e, exc_info=True)
            return [], str(e) or type(e).__name__
        return observations, None

    def _fuse(self, observations: list[Observation]) -> dict[str, TrackedDetection]:
        """Rank each observation against the catalog, in batch order."""
        identities = self._identities
        tracked: dict[str, TrackedDetection] = {}

        for index, observation in enumerate(observations):
            detection_id = detection_id_for(index, observation.label)

            beliefs = self.engine.update_belief(
                observation.label,
                observation.confidence,
                identities,
            )
            equipment, probability = next(iter(beliefs.items()), (UNKNOWN_EQUIPMENT, 0.0))

            self.history.add(equipment, observation.confidence * probability)

            tracked[detection_id] = TrackedDetection(
                detection_id=detection_id,
                bbox=observation.bbox,
                detected_class=observation.label,
                class_confidence=observation.confidence,
                equipment=equipment,
                equipment_confidence=probability,
                beliefs=beliefs,
            )

        return tracked

    def _apply_overlay_diff(self, new_tracked: dict[str, TrackedDetection]) -> OverlayDiff:
        """Remove vanished ids, add new ones, leave the rest alone."""
        diff = OverlayDiff(
            added=[i for i in new_tracked if i not in self._tracked],
            removed=[i for i in self._tracked if i not in new_tracked],
        )

        for detection_id in diff.removed:
            self.overlay.remove_detection(detection_id)

        for detection_id in diff.added:
            detection = new_tracked[detection_id]
            self.overlay.add_detection(
                detection_id,
                OverlayMarker(
                    bbox=detection.bbox,
                    identity=detection.equipment,
                    score=detection.equipment_confidence,
                ),
            )

        return diff

    # =========================================================================
    # Scheduling
    # =========================================================================

    async def _run_timer(self) -> None:
        """Fire a tick every tick_interval while running, first one after a full interval."""
        while True:
            await asyncio.sleep(self.config.tick_interval)
            if self._state is not SessionState.RUNNING:
                return
            self._schedule_tick()

    def _schedule_tick(self) -> None:
        if self._tick_task is not None and not self._tick_task.done():
            self.skipped_ticks += 1
            logger.debug("Tick skipped: previous tick still in flight")
            return
        self._tick_task = asyncio.ensure_future(self.tick())

    def _announce(self, *lines: str) -> None:
        """Fire-and-forget speech, one announcement at a time in call order."""
        task = asyncio.ensure_future(self._speak(lines, self._last_announcement))
        self._last_announcement = task
        self._announcements.add(task)
        task.add_done_callback(self._announcement_done)

    def _announcement_done(self, task: asyncio.Future) -> None:
        self._announcements.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.warning("Announcement failed: %s", error)

    async def _speak(self, lines: tuple[str, ...], previous: asyncio.Future | None) -> None:
        # One voice: wait for the previous announcement, whatever its outcome
        if previous is not None and not previous.done():
            await asyncio.wait([previous])
        for line in lines:
            await self.voice.speak(line)
