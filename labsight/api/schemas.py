"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the exact contract between clients and the engine.
Predictions use the classifier's own shape ({"class", "score", "bbox"})
so a browser or mobile client can forward COCO-SSD output unchanged.

Error Codes:
- SESSION_NOT_FOUND: Session does not exist or has ended
- EQUIPMENT_NOT_FOUND: Identity is not in the catalog
- VALIDATION_ERROR: Request failed validation
- INTERNAL_ERROR: Unexpected failure
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Enums
# =============================================================================

class SessionStatus(str, Enum):
    """Detection session status values."""
    IDLE = "idle"
    RUNNING = "running"


class ConfidenceLevel(str, Enum):
    """Confidence buckets for display."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    UNCERTAIN = "uncertain"


class ErrorCode(str, Enum):
    """Structured error codes."""
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    EQUIPMENT_NOT_FOUND = "EQUIPMENT_NOT_FOUND"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


# =============================================================================
# Shared Models
# =============================================================================

class BeliefInfo(BaseModel):
    """One identity with its posterior."""
    identity: str
    posterior: float = Field(ge=0.0, le=1.0)


class EquipmentInfo(BaseModel):
    """Catalog entry for display."""
    identity: str
    name: str
    description: str
    aliases: list[str] = Field(default_factory=list)
    safety_warnings: list[str] = Field(default_factory=list)
    usage: list[str] = Field(default_factory=list)
    steps: list[str] = Field(default_factory=list)


class DetectionInfo(BaseModel):
    """A tracked detection after belief fusion."""
    detection_id: str
    bbox: list[float] = Field(description="x, y, width, height in pixels")
    detected_class: str
    class_confidence: float
    equipment: str
    equipment_confidence: float
    confidence_level: ConfidenceLevel
    beliefs: list[BeliefInfo] = Field(
        default_factory=list, description="Ranked posteriors, highest first"
    )


class MarkerInfo(BaseModel):
    """An on-screen marker as currently drawn."""
    detection_id: str
    bbox: list[float]
    identity: str
    score: float


class VerdictInfo(BaseModel):
    """Most likely identity over the detection history."""
    identity: Optional[str] = None
    score: float = 0.0


# =============================================================================
# Requests
# =============================================================================

class Prediction(BaseModel):
    """One raw classifier prediction."""
    model_config = ConfigDict(populate_by_name=True)

    label: str = Field(alias="class", min_length=1)
    score: float = Field(ge=0.0, le=1.0)
    bbox: list[float] = Field(
        min_length=4, max_length=4, description="x, y, width, height in pixels"
    )

    def to_raw(self) -> dict:
        return {"class": self.label, "score": self.score, "bbox": self.bbox}


class PredictionBatchRequest(BaseModel):
    """A batch of predictions for the latest frame."""
    predictions: list[Prediction] = Field(default_factory=list)


class CreateSessionRequest(BaseModel):
    """Options for a new detection session."""
    detection_threshold: Optional[float] = Field(None, ge=0.0, le=1.0)
    tick_interval: Optional[float] = Field(
        None, gt=0.0, le=60.0, description="Seconds between ticks"
    )
    lab_classes_only: Optional[bool] = Field(
        None, description="Ignore classifier labels unrelated to lab equipment"
    )
    autostart: bool = False


class ThresholdRequest(BaseModel):
    """New detection threshold."""
    detection_threshold: float = Field(ge=0.0, le=1.0)


class IdentifyRequest(BaseModel):
    """Stateless ranking of a single label."""
    label: str = Field(min_length=1)
    confidence: float = Field(ge=0.0, le=1.0)
    top: Optional[int] = Field(None, ge=1, description="Limit to the top N identities")


class GuidanceRequest(BaseModel):
    """Speak guidance for an identity (defaults to the current top detection)."""
    identity: Optional[str] = None


# =============================================================================
# Responses
# =============================================================================

class SessionResponse(BaseModel):
    """Snapshot of a detection session."""
    session_id: str
    status: SessionStatus
    created_at: float
    detection_threshold: float
    tick_interval: float
    lab_classes_only: bool = False
    tick_count: int = 0
    skipped_ticks: int = 0
    frames_received: int = 0
    detections: list[DetectionInfo] = Field(default_factory=list)
    markers: list[MarkerInfo] = Field(default_factory=list)
    top_detection: Optional[DetectionInfo] = None
    equipment: Optional[EquipmentInfo] = None
    api_version: str = "v1"


class FeedResponse(BaseModel):
    """Acknowledgement of a pushed prediction batch."""
    session_id: str
    frame_id: int
    accepted: int


class StatisticsResponse(BaseModel):
    """History ledger statistics."""
    session_id: str
    total_count: int
    unique_identity_count: int
    most_likely: VerdictInfo
    current_posteriors: dict[str, float] = Field(default_factory=dict)


class IdentifyResponse(BaseModel):
    """Ranked identities for one label."""
    label: str
    confidence: float
    beliefs: list[BeliefInfo]
    best: Optional[BeliefInfo] = None


class CatalogResponse(BaseModel):
    """All known equipment."""
    equipment: list[EquipmentInfo]
    count: int


class AnnouncementsResponse(BaseModel):
    """Announcements spoken so far."""
    session_id: str
    announcements: list[str]


class ErrorResponse(BaseModel):
    """Structured error."""
    error: str
    error_code: ErrorCode
    details: Optional[dict] = None


class SessionListResponse(BaseModel):
    """Response listing sessions."""
    sessions: list[str]
    count: int


class EndSessionResponse(BaseModel):
    """Response after ending a session."""
    success: bool
    session_id: str


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    service: str
    version: str
