"""
API Module - Client interface.

Exposes the engine via REST API. A client:
1. Creates a detection session
2. Starts it
3. Pushes classifier predictions for its camera frames
4. Reads markers, the top detection and its equipment info
5. Stops or ends the session

All state is session-scoped. No persistent user accounts required.

Run with:
    uvicorn labsight.api.app:app
"""

from .schemas import (
    # Requests
    CreateSessionRequest,
    PredictionBatchRequest,
    Prediction,
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
)
from .service import APIService
from .app import create_app

__all__ = [
    # Requests
    "CreateSessionRequest",
    "PredictionBatchRequest",
    "Prediction",
    "ThresholdRequest",
    "IdentifyRequest",
    "GuidanceRequest",
    # Responses
    "SessionResponse",
    "FeedResponse",
    "StatisticsResponse",
    "IdentifyResponse",
    "CatalogResponse",
    "AnnouncementsResponse",
    "ErrorResponse",
    # Shared
    "BeliefInfo",
    "DetectionInfo",
    "EquipmentInfo",
    "MarkerInfo",
    "VerdictInfo",
    # Enums
    "ErrorCode",
    "SessionStatus",
    # Service
    "APIService",
    "create_app",
]
