"""
API Service - Business logic layer between API and engine.

The service:
1. Translates API requests to session and engine calls
2. Manages sessions
3. Accepts prediction batches from clients
4. Formats responses

This layer is framework-agnostic (can be used with FastAPI, Flask, etc.)
Lookups that fail return an ErrorResponse instead of raising.
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging

from .schemas import (
    # Requests
    CreateSessionRequest,
    PredictionBatchRequest,
    ThresholdRequest,
    IdentifyRequest,
    GuidanceRequest,
    # Responses
    SessionResponse,
    FeedResponse,
    StatisticsResponse,
    IdentifyResponse,
    CatalogResponse,
    AnnouncementsResponse,
    ErrorResponse,
    # Shared
    BeliefInfo,
    DetectionInfo,
    EquipmentInfo,
    MarkerInfo,
    VerdictInfo,
    # Enums
    ErrorCode,
    SessionStatus,
    ConfidenceLevel,
)
from ..catalog import EquipmentCatalog, EquipmentEntry
from ..config import SessionConfig
from ..recognition import BeliefEngine
from ..session import SessionManager, ManagedSession
from ..vision.observation import TrackedDetection


logger = logging.getLogger(__name__)


@dataclass
class APIService:
    """
    Main API service.

    Usage:
        service = APIService()

        # Create and start a session
        session = await service.create_session(CreateSessionRequest())
        await service.start_session(session.session_id)

        # Push predictions from the client's classifier
        service.push_predictions(session.session_id, batch)

        # Read what the session currently believes
        service.get_session(session.session_id)
    """
    session_manager: SessionManager = field(default_factory=SessionManager)

    @property
    def catalog(self) -> EquipmentCatalog:
        return self.session_manager.catalog

    @property
    def config(self) -> SessionConfig:
        return self.session_manager.config

    # =========================================================================
    # Catalog
    # =========================================================================

    def get_catalog(self) -> CatalogResponse:
        equipment = [self._entry_to_info(entry) for entry in self.catalog]
        return CatalogResponse(equipment=equipment, count=len(equipment))

    def get_equipment(self, identity: str) -> EquipmentInfo | ErrorResponse:
        entry = self.catalog.get(identity)
        if entry is None:
            return ErrorResponse(
                error=f"Unknown equipment: {identity}",
                error_code=ErrorCode.EQUIPMENT_NOT_FOUND,
            )
        return self._entry_to_info(entry)

    def identify(self, request: IdentifyRequest) -> IdentifyResponse:
        """
        Rank one label against the catalog.

        Uses a fresh engine so no session's beliefs are touched.
        """
        engine = BeliefEngine()
        engine.prime(self.catalog.identities, self.config.base_likelihood)
        ranked = engine.update_belief(request.label, request.confidence, self.catalog.identities)

        beliefs = [BeliefInfo(identity=i, posterior=p) for i, p in ranked.items()]
        if request.top is not None:
            beliefs = beliefs[:request.top]

        return IdentifyResponse(
            label=request.label,
            confidence=request.confidence,
            beliefs=beliefs,
            best=beliefs[0] if beliefs else None,
        )

    # =========================================================================
    # Sessions
    # =========================================================================

    async def create_session(self, request: CreateSessionRequest) -> SessionResponse:
        managed = self.session_manager.create_session(
            detection_threshold=request.detection_threshold,
            tick_interval=request.tick_interval,
            lab_classes_only=request.lab_classes_only,
        )
        if request.autostart:
            await managed.session.start()
        return self._session_to_response(managed)

    def get_session(self, session_id: str) -> SessionResponse | ErrorResponse:
        managed = self.session_manager.get_session(session_id)
        if managed is None:
            return self._session_not_found(session_id)
        return self._session_to_response(managed)

    async def start_session(self, session_id: str) -> SessionResponse | ErrorResponse:
        managed = self.session_manager.get_session(session_id)
        if managed is None:
            return self._session_not_found(session_id)
        await managed.session.start()
        return self._session_to_response(managed)

    async def stop_session(self, session_id: str) -> SessionResponse | ErrorResponse:
        managed = self.session_manager.get_session(session_id)
        if managed is None:
            return self._session_not_found(session_id)
        await managed.session.stop()
        return self._session_to_response(managed)

    async def end_session(self, session_id: str) -> bool:
        return await self.session_manager.end_session(session_id)

    def list_sessions(self) -> list[str]:
        return self.session_manager.list_sessions()

    async def tick(self, session_id: str) -> SessionResponse | ErrorResponse:
        """Run one tick right away, outside the timer."""
        managed = self.session_manager.get_session(session_id)
        if managed is None:
            return self._session_not_found(session_id)
        await managed.session.tick()
        return self._session_to_response(managed)

    # =========================================================================
    # Session input
    # =========================================================================

    def push_predictions(
        self,
        session_id: str,
        request: PredictionBatchRequest,
    ) -> FeedResponse | ErrorResponse:
        managed = self.session_manager.get_session(session_id)
        if managed is None:
            return self._session_not_found(session_id)

        frame = managed.feed.push([p.to_raw() for p in request.predictions])
        logger.debug(
            "Session %s frame %d: %d predictions",
            session_id, frame.frame_id, len(request.predictions),
        )
        return FeedResponse(
            session_id=session_id,
            frame_id=frame.frame_id,
            accepted=len(request.predictions),
        )

    def set_threshold(
        self,
        session_id: str,
        request: ThresholdRequest,
    ) -> SessionResponse | ErrorResponse:
        managed = self.session_manager.get_session(session_id)
        if managed is None:
            return self._session_not_found(session_id)

        if not managed.session.set_detection_threshold(request.detection_threshold):
            return ErrorResponse(
                error=f"Invalid threshold: {request.detection_threshold}",
                error_code=ErrorCode.VALIDATION_ERROR,
            )
        return self._session_to_response(managed)

    def clear_detections(self, session_id: str) -> SessionResponse | ErrorResponse:
        managed = self.session_manager.get_session(session_id)
        if managed is None:
            return self._session_not_found(session_id)
        managed.session.clear_detections()
        return self._session_to_response(managed)

    def reset_beliefs(self, session_id: str) -> SessionResponse | ErrorResponse:
        managed = self.session_manager.get_session(session_id)
        if managed is None:
            return self._session_not_found(session_id)
        managed.session.reset_beliefs()
        return self._session_to_response(managed)

    async def speak_guidance(
        self,
        session_id: str,
        request: GuidanceRequest,
    ) -> AnnouncementsResponse | ErrorResponse:
        """
        Speak catalog guidance for an identity, or for the current
        top detection when no identity is given.
        """
        managed = self.session_manager.get_session(session_id)
        if managed is None:
            return self._session_not_found(session_id)

        identity = request.identity
        if identity is None and managed.info.detection is not None:
            identity = managed.info.detection.equipment

        if identity is None or not await managed.session.announce_guidance(identity):
            return ErrorResponse(
                error=f"No guidance available for: {identity}",
                error_code=ErrorCode.EQUIPMENT_NOT_FOUND,
            )

        await managed.session.drain_announcements()
        return self.get_announcements(session_id)

    # =========================================================================
    # Session output
    # =========================================================================

    def get_statistics(self, session_id: str) -> StatisticsResponse | ErrorResponse:
        managed = self.session_manager.get_session(session_id)
        if managed is None:
            return self._session_not_found(session_id)

        stats = managed.session.statistics()
        return StatisticsResponse(
            session_id=session_id,
            total_count=stats.total_count,
            unique_identity_count=stats.unique_identity_count,
            most_likely=VerdictInfo(
                identity=stats.most_likely.identity,
                score=stats.most_likely.score,
            ),
            current_posteriors=stats.current_posteriors,
        )

    def get_announcements(self, session_id: str) -> AnnouncementsResponse | ErrorResponse:
        managed = self.session_manager.get_session(session_id)
        if managed is None:
            return self._session_not_found(session_id)
        return AnnouncementsResponse(
            session_id=session_id,
            announcements=list(managed.voice.spoken),
        )

    # =========================================================================
    # Helper methods
    # =========================================================================

    def _session_not_found(self, session_id: str) -> ErrorResponse:
        return ErrorResponse(
            error=f"Session {session_id} not found",
            error_code=ErrorCode.SESSION_NOT_FOUND,
        )

    def _session_to_response(self, managed: ManagedSession) -> SessionResponse:
        """Convert ManagedSession to SessionResponse."""
        session = managed.session
        detections = [self._detection_to_info(d) for d in session.tracked.values()]

        top = managed.info.detection
        return SessionResponse(
            session_id=managed.session_id,
            status=SessionStatus(session.state.value),
            created_at=managed.created_at,
            detection_threshold=session.detection_threshold,
            tick_interval=session.config.tick_interval,
            lab_classes_only=session.config.lab_classes_only,
            tick_count=session.tick_count,
            skipped_ticks=session.skipped_ticks,
            frames_received=managed.feed.frame_count,
            detections=detections,
            markers=[
                MarkerInfo(
                    detection_id=detection_id,
                    bbox=marker.bbox.as_list(),
                    identity=marker.identity,
                    score=marker.score,
                )
                for detection_id, marker in managed.overlay.markers.items()
            ],
            top_detection=self._detection_to_info(top) if top else None,
            equipment=self._entry_to_info(managed.info.entry) if managed.info.entry else None,
        )

    def _detection_to_info(self, detection: TrackedDetection) -> DetectionInfo:
        return DetectionInfo(
            detection_id=detection.detection_id,
            bbox=detection.bbox.as_list(),
            detected_class=detection.detected_class,
            class_confidence=detection.class_confidence,
            equipment=detection.equipment,
            equipment_confidence=detection.equipment_confidence,
            confidence_level=ConfidenceLevel(detection.confidence_level.value),
            beliefs=[
                BeliefInfo(identity=identity, posterior=posterior)
                for identity, posterior in detection.beliefs.items()
            ],
        )

    def _entry_to_info(self, entry: EquipmentEntry) -> EquipmentInfo:
        return EquipmentInfo(
            identity=entry.identity,
            name=entry.name,
            description=entry.description,
            aliases=list(entry.aliases),
            safety_warnings=list(entry.safety_warnings),
            usage=list(entry.usage),
            steps=list(entry.steps),
        )
