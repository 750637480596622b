"""
FastAPI Application - REST API for camera clients.

Endpoints:
    GET    /api/v1/catalog                        List known equipment
    GET    /api/v1/catalog/{identity}             Get one equipment entry
    POST   /api/v1/identify                       Rank a single label
    POST   /api/v1/sessions                       Create detection session
    GET    /api/v1/sessions                       List sessions
    GET    /api/v1/sessions/{id}                  Get session snapshot
    DELETE /api/v1/sessions/{id}                  End session
    POST   /api/v1/sessions/{id}/start            Start ticking
    POST   /api/v1/sessions/{id}/stop             Stop ticking
    POST   /api/v1/sessions/{id}/predictions      Push a prediction batch
    POST   /api/v1/sessions/{id}/tick             Run one tick now
    PUT    /api/v1/sessions/{id}/threshold        Change detection threshold
    POST   /api/v1/sessions/{id}/clear            Clear detections
    POST   /api/v1/sessions/{id}/reset            Reset beliefs and history
    GET    /api/v1/sessions/{id}/statistics       History statistics
    GET    /api/v1/sessions/{id}/announcements    Spoken announcements
    POST   /api/v1/sessions/{id}/guidance         Speak equipment guidance
    WS     /api/v1/sessions/{id}/ws               Session snapshots

Detection Flow:
    1. Client runs the object classifier on its camera frames
    2. Client pushes predictions to /predictions as they arrive
    3. The session ticks on its own timer, ranking the latest batch
    4. Client reads markers and the top detection from the snapshot

All responses are JSON with explicit Pydantic schemas.
"""

from contextlib import asynccontextmanager
from typing import Optional, Union
import json
import logging
import os

from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .service import APIService
from .schemas import (
    # Request models
    CreateSessionRequest,
    PredictionBatchRequest,
    ThresholdRequest,
    IdentifyRequest,
    GuidanceRequest,
    # Response models
    SessionResponse,
    FeedResponse,
    StatisticsResponse,
    IdentifyResponse,
    CatalogResponse,
    AnnouncementsResponse,
    EquipmentInfo,
    ErrorResponse,
    SessionListResponse,
    EndSessionResponse,
    HealthResponse,
    # Enums
    ErrorCode,
)
from .. import __version__
from ..config import SessionConfig, configure_logging
from ..session import SessionManager


# Environment configuration
LABSIGHT_ENV = os.getenv("LABSIGHT_ENV", "development")
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*").split(",")

logger = logging.getLogger(__name__)


def create_app(service: Optional[APIService] = None) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        service: Optional APIService instance (creates one from the
            environment configuration if not provided)

    Returns:
        FastAPI application instance
    """
    configure_logging()

    api_service = service or APIService(
        session_manager=SessionManager(config=SessionConfig.from_env())
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("LabSight API starting (env=%s)", LABSIGHT_ENV)
        yield
        await api_service.session_manager.stop_all()
        logger.info("LabSight API stopped")

    app = FastAPI(
        title="LabSight API",
        description="""
Laboratory equipment identification from object-classifier output.

A generic classifier sees "cup" or "bottle"; LabSight re-ranks those
guesses against a catalog of lab equipment with Bayesian belief fusion
and keeps on-screen markers in sync with the current beliefs.

## Error Codes

| Code | Description |
|------|-------------|
| `SESSION_NOT_FOUND` | Session does not exist |
| `EQUIPMENT_NOT_FOUND` | Identity is not in the catalog |
| `VALIDATION_ERROR` | Request failed validation |
        """,
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # =========================================================================
    # Error helpers
    # =========================================================================

    def make_error_response(
        error: ErrorResponse,
        status_code: Optional[int] = None,
    ) -> JSONResponse:
        """Create a standardized error response."""
        if status_code is None:
            status_code = 404 if error.error_code in (
                ErrorCode.SESSION_NOT_FOUND,
                ErrorCode.EQUIPMENT_NOT_FOUND,
            ) else 400
        return JSONResponse(
            status_code=status_code,
            content=error.model_dump(mode="json"),
        )

    def respond(result):
        if isinstance(result, ErrorResponse):
            return make_error_response(result)
        return result

    # =========================================================================
    # Catalog Endpoints
    # =========================================================================

    @app.get(
        "/api/v1/catalog",
        response_model=CatalogResponse,
        tags=["Catalog"],
        summary="List known equipment",
    )
    async def get_catalog() -> CatalogResponse:
        return api_service.get_catalog()

    @app.get(
        "/api/v1/catalog/{identity}",
        response_model=EquipmentInfo,
        responses={404: {"model": ErrorResponse}},
        tags=["Catalog"],
        summary="Get one equipment entry",
    )
    async def get_equipment(identity: str) -> Union[EquipmentInfo, JSONResponse]:
        return respond(api_service.get_equipment(identity))

    @app.post(
        "/api/v1/identify",
        response_model=IdentifyResponse,
        tags=["Catalog"],
        summary="Rank a single classifier label against the catalog",
    )
    async def identify(body: IdentifyRequest) -> IdentifyResponse:
        """
        Stateless ranking. Does not touch any session's beliefs.
        """
        return api_service.identify(body)

    # =========================================================================
    # Session Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/sessions",
        response_model=SessionResponse,
        tags=["Sessions"],
        summary="Create a detection session",
    )
    async def create_session(body: CreateSessionRequest) -> SessionResponse:
        """
        Create a new detection session.

        Set `autostart=true` to begin ticking immediately.
        """
        return await api_service.create_session(body)

    @app.get(
        "/api/v1/sessions",
        response_model=SessionListResponse,
        tags=["Sessions"],
        summary="List sessions",
    )
    async def list_sessions() -> SessionListResponse:
        sessions = api_service.list_sessions()
        return SessionListResponse(sessions=sessions, count=len(sessions))

    @app.get(
        "/api/v1/sessions/{session_id}",
        response_model=SessionResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Sessions"],
        summary="Get session snapshot",
    )
    async def get_session(session_id: str) -> Union[SessionResponse, JSONResponse]:
        return respond(api_service.get_session(session_id))

    @app.delete(
        "/api/v1/sessions/{session_id}",
        response_model=EndSessionResponse,
        tags=["Sessions"],
        summary="End a detection session",
    )
    async def end_session(session_id: str) -> EndSessionResponse:
        """Stop a session and release its state."""
        success = await api_service.end_session(session_id)
        return EndSessionResponse(success=success, session_id=session_id)

    @app.post(
        "/api/v1/sessions/{session_id}/start",
        response_model=SessionResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Sessions"],
        summary="Start detection",
    )
    async def start_session(session_id: str) -> Union[SessionResponse, JSONResponse]:
        return respond(await api_service.start_session(session_id))

    @app.post(
        "/api/v1/sessions/{session_id}/stop",
        response_model=SessionResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Sessions"],
        summary="Stop detection",
    )
    async def stop_session(session_id: str) -> Union[SessionResponse, JSONResponse]:
        return respond(await api_service.stop_session(session_id))

    # =========================================================================
    # Detection Loop Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/sessions/{session_id}/predictions",
        response_model=FeedResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Detection Loop"],
        summary="Push classifier predictions for the latest frame",
    )
    async def push_predictions(
        session_id: str,
        body: PredictionBatchRequest,
    ) -> Union[FeedResponse, JSONResponse]:
        """
        Push the classifier's output for the latest camera frame.

        **Request Body:**
        ```json
        {"predictions": [{"class": "cup", "score": 0.82, "bbox": [12, 40, 96, 120]}]}
        ```
        """
        return respond(api_service.push_predictions(session_id, body))

    @app.post(
        "/api/v1/sessions/{session_id}/tick",
        response_model=SessionResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Detection Loop"],
        summary="Run one tick immediately",
    )
    async def tick(session_id: str) -> Union[SessionResponse, JSONResponse]:
        """Skipped if the session is idle or a tick is already in flight."""
        return respond(await api_service.tick(session_id))

    @app.put(
        "/api/v1/sessions/{session_id}/threshold",
        response_model=SessionResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Detection Loop"],
        summary="Change the detection threshold",
    )
    async def set_threshold(
        session_id: str,
        body: ThresholdRequest,
    ) -> Union[SessionResponse, JSONResponse]:
        """Takes effect from the next tick."""
        return respond(api_service.set_threshold(session_id, body))

    @app.post(
        "/api/v1/sessions/{session_id}/clear",
        response_model=SessionResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Detection Loop"],
        summary="Clear all detections",
    )
    async def clear_detections(session_id: str) -> Union[SessionResponse, JSONResponse]:
        return respond(api_service.clear_detections(session_id))

    @app.post(
        "/api/v1/sessions/{session_id}/reset",
        response_model=SessionResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Detection Loop"],
        summary="Reset beliefs and history",
    )
    async def reset_beliefs(session_id: str) -> Union[SessionResponse, JSONResponse]:
        return respond(api_service.reset_beliefs(session_id))

    @app.get(
        "/api/v1/sessions/{session_id}/statistics",
        response_model=StatisticsResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Detection Loop"],
        summary="Detection history statistics",
    )
    async def get_statistics(session_id: str) -> Union[StatisticsResponse, JSONResponse]:
        return respond(api_service.get_statistics(session_id))

    @app.get(
        "/api/v1/sessions/{session_id}/announcements",
        response_model=AnnouncementsResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Voice"],
        summary="Announcements spoken so far",
    )
    async def get_announcements(session_id: str) -> Union[AnnouncementsResponse, JSONResponse]:
        return respond(api_service.get_announcements(session_id))

    @app.post(
        "/api/v1/sessions/{session_id}/guidance",
        response_model=AnnouncementsResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Voice"],
        summary="Speak guidance for equipment",
    )
    async def speak_guidance(
        session_id: str,
        body: GuidanceRequest,
    ) -> Union[AnnouncementsResponse, JSONResponse]:
        """
        Speak name, description, safety warnings and steps.

        Without an `identity`, guidance is for the current top detection.
        """
        return respond(await api_service.speak_guidance(session_id, body))

    # =========================================================================
    # WebSocket Endpoint
    # =========================================================================

    @app.websocket("/api/v1/sessions/{session_id}/ws")
    async def websocket_endpoint(websocket: WebSocket, session_id: str):
        """
        WebSocket for session snapshots.

        Messages from server:
        - snapshot: Current session snapshot
        - pong: Reply to ping
        - error: Error occurred

        Messages from client:
        - ping: Keep-alive
        - snapshot: Request a fresh snapshot
        """
        await websocket.accept()

        async def send_snapshot():
            response = api_service.get_session(session_id)
            if isinstance(response, ErrorResponse):
                await websocket.send_json({
                    "type": "error",
                    "payload": response.model_dump(mode="json"),
                })
            else:
                await websocket.send_json({
                    "type": "snapshot",
                    "payload": response.model_dump(mode="json"),
                })

        try:
            await send_snapshot()

            while True:
                data = await websocket.receive_text()
                try:
                    message = json.loads(data)
                except json.JSONDecodeError:
                    await websocket.send_json({
                        "type": "error",
                        "payload": {"message": "Invalid JSON"},
                    })
                    continue

                message_type = message.get("type") if isinstance(message, dict) else None
                if message_type == "ping":
                    await websocket.send_json({"type": "pong"})
                elif message_type == "snapshot":
                    await send_snapshot()
        except WebSocketDisconnect:
            logger.debug("WebSocket for session %s disconnected", session_id)

    # =========================================================================
    # Health Check
    # =========================================================================

    @app.get(
        "/health",
        response_model=HealthResponse,
        tags=["System"],
        summary="Health check",
    )
    async def health_check() -> HealthResponse:
        """Health check endpoint for load balancers."""
        return HealthResponse(
            status="healthy",
            service="labsight",
            version=__version__,
        )

    @app.get("/", tags=["System"])
    async def root():
        """Root endpoint with API info."""
        return {
            "name": "LabSight API",
            "version": __version__,
            "docs": "/api/docs",
            "health": "/health",
        }

    return app


# For running directly: uvicorn labsight.api.app:app
app = create_app()
