"""
Session Manager - Creates and manages detection sessions.

A managed session is one client's identification run:
- Created when a client connects
- Fed with classifier predictions pushed by that client
- Ticks on its own timer while started
- Destroyed when the client ends it

Sessions are EPHEMERAL:
- No persistence of beliefs, history or markers
- Ending a session stops it and drops all of its state
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from typing import Any
import logging
import time
import uuid

from ..config import SessionConfig
from ..catalog import EquipmentCatalog, create_lab_catalog
from ..vision.feed import PredictionFeed
from .detection_session import DetectionSession
from .sinks import InfoPanel, OverlayBoard, VoiceLog


logger = logging.getLogger(__name__)


@dataclass
class ManagedSession:
    """
    A detection session together with its in-memory collaborators.
    """
    session_id: str
    created_at: float
    session: DetectionSession
    feed: PredictionFeed
    overlay: OverlayBoard
    info: InfoPanel
    voice: VoiceLog

    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def is_running(self) -> bool:
        return self.session.is_running


class SessionManager:
    """
    Manages detection sessions.

    Responsibilities:
    - Create sessions wired to a prediction feed and in-memory sinks
    - Track sessions by id
    - Stop and drop ended or stale sessions

    No persistence - sessions are in-memory only.
    """

    def __init__(
        self,
        catalog: EquipmentCatalog | None = None,
        config: SessionConfig | None = None,
    ):
        self.catalog = catalog or create_lab_catalog()
        self.config = config or SessionConfig()
        self._sessions: dict[str, ManagedSession] = {}

    def create_session(
        self,
        detection_threshold: float | None = None,
        tick_interval: float | None = None,
        lab_classes_only: bool | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> ManagedSession:
        """
        Create a new, idle detection session.

        Args:
            detection_threshold: Override the default threshold
            tick_interval: Override the default tick interval (seconds)
            lab_classes_only: Keep only lab-relevant classifier labels
            metadata: Free-form client data kept with the session

        Returns:
            New ManagedSession, not yet started
        """
        config = self.config
        if detection_threshold is not None:
            config = replace(config, detection_threshold=detection_threshold)
        if tick_interval is not None:
            config = replace(config, tick_interval=tick_interval)
        if lab_classes_only is not None:
            config = replace(config, lab_classes_only=lab_classes_only)

        feed = PredictionFeed(max_age=config.feed_max_age)
        overlay = OverlayBoard()
        info = InfoPanel(self.catalog)
        voice = VoiceLog()

        session = DetectionSession(
            camera=feed,
            detector=feed,
            identities=self.catalog.identities,
            overlay=overlay,
            info=info,
            voice=voice,
            config=config,
            catalog=self.catalog,
        )

        managed = ManagedSession(
            session_id=str(uuid.uuid4()),
            created_at=time.time(),
            session=session,
            feed=feed,
            overlay=overlay,
            info=info,
            voice=voice,
            metadata=metadata or {},
        )
        self._sessions[managed.session_id] = managed
        logger.info("Created session %s", managed.session_id)
        return managed

    def get_session(self, session_id: str) -> ManagedSession | None:
        """Get a session by ID."""
        return self._sessions.get(session_id)

    async def end_session(self, session_id: str) -> bool:
        """
        Stop a session and forget it.

        Returns False if the session does not exist.
        """
        managed = self._sessions.pop(session_id, None)
        if managed is None:
            return False
        await managed.session.stop()
        logger.info("Ended session %s", session_id)
        return True

    def list_sessions(self) -> list[str]:
        """List IDs of all sessions."""
        return list(self._sessions)

    async def cleanup_stale_sessions(self, max_age_seconds: float = 3600) -> list[str]:
        """
        End idle sessions older than max_age_seconds.

        Returns the ids that were removed.
        """
        now = time.time()
        stale = [
            session_id for session_id, managed in self._sessions.items()
            if now - managed.created_at > max_age_seconds and not managed.is_running
        ]
        for session_id in stale:
            await self.end_session(session_id)
        return stale

    async def stop_all(self) -> None:
        """Stop every running session (application shutdown)."""
        for managed in list(self._sessions.values()):
            await managed.session.stop()
