"""
Tests for API Pydantic schemas.

Validates that:
- Predictions accept the classifier's own field names
- Requests reject out-of-range values
- Error codes are properly structured
- The OpenAPI schema lists every endpoint
"""

import pytest
from pydantic import ValidationError
from fastapi.openapi.utils import get_openapi

from ..api.app import create_app
from ..api.schemas import (
    CreateSessionRequest,
    ErrorCode,
    ErrorResponse,
    IdentifyRequest,
    Prediction,
    PredictionBatchRequest,
    SessionResponse,
    SessionStatus,
    ThresholdRequest,
)


class TestPydanticSchemas:
    """Tests for Pydantic schema validation."""

    def test_prediction_uses_class_alias(self):
        """Predictions parse from {"class", "score", "bbox"}."""
        p = Prediction.model_validate({"class": "cup", "score": 0.8, "bbox": [1, 2, 3, 4]})

        assert p.label == "cup"
        assert p.to_raw() == {"class": "cup", "score": 0.8, "bbox": [1.0, 2.0, 3.0, 4.0]}

    def test_prediction_by_field_name(self):
        """The Python field name works as well."""
        p = Prediction(label="bottle", score=0.5, bbox=[0, 0, 1, 1])
        assert p.model_dump(by_alias=True)["class"] == "bottle"

    @pytest.mark.parametrize("data", [
        {"class": "cup", "score": 1.2, "bbox": [0, 0, 1, 1]},
        {"class": "cup", "score": 0.5, "bbox": [0, 0, 1]},
        {"class": "cup", "score": 0.5, "bbox": [0, 0, 1, 1, 1]},
        {"class": "", "score": 0.5, "bbox": [0, 0, 1, 1]},
        {"score": 0.5, "bbox": [0, 0, 1, 1]},
    ])
    def test_prediction_validation(self, data):
        """Malformed predictions are rejected."""
        with pytest.raises(ValidationError):
            Prediction.model_validate(data)

    def test_batch_defaults_to_empty(self):
        """An empty batch is valid: nothing in view."""
        assert PredictionBatchRequest().predictions == []

    def test_create_session_defaults(self):
        """Omitted options fall back to server defaults."""
        request = CreateSessionRequest()
        assert request.detection_threshold is None
        assert request.tick_interval is None
        assert request.autostart is False

    def test_request_ranges(self):
        """Out-of-range request values are rejected."""
        with pytest.raises(ValidationError):
            ThresholdRequest(detection_threshold=1.5)
        with pytest.raises(ValidationError):
            CreateSessionRequest(tick_interval=0)
        with pytest.raises(ValidationError):
            IdentifyRequest(label="cup", confidence=0.5, top=0)

    def test_session_response_schema(self):
        """SessionResponse serializes enums as strings."""
        response = SessionResponse(
            session_id="session-123",
            status=SessionStatus.RUNNING,
            created_at=0.0,
            detection_threshold=0.5,
            tick_interval=0.5,
        )

        data = response.model_dump(mode="json")
        assert data["status"] == "running"
        assert data["detections"] == []
        assert data["top_detection"] is None
        assert data["api_version"] == "v1"

    def test_error_response_schema(self):
        """ErrorResponse carries a code."""
        error = ErrorResponse(error="Session x not found", error_code=ErrorCode.SESSION_NOT_FOUND)

        data = error.model_dump(mode="json")
        assert data["error_code"] == "SESSION_NOT_FOUND"
        assert data["details"] is None


class TestErrorCodes:
    """Tests for error code coverage."""

    def test_all_error_codes_defined(self):
        """All required error codes are defined."""
        for code in ["SESSION_NOT_FOUND", "EQUIPMENT_NOT_FOUND", "VALIDATION_ERROR", "INTERNAL_ERROR"]:
            assert hasattr(ErrorCode, code), f"Missing error code: {code}"
            assert ErrorCode[code].value == code

    def test_error_code_values_are_strings(self):
        """Error codes are UPPER_SNAKE_CASE strings."""
        for code in ErrorCode:
            assert isinstance(code.value, str)
            assert code.value == code.value.upper()


class TestOpenAPISchema:
    """Tests for OpenAPI schema generation."""

    @pytest.fixture
    def schema(self):
        app = create_app()
        return get_openapi(title=app.title, version=app.version, routes=app.routes)

    def test_openapi_schema_generates(self, schema):
        """OpenAPI schema generates without errors."""
        assert "paths" in schema
        assert "schemas" in schema["components"]

    def test_response_models_in_schema(self, schema):
        """Response models appear in OpenAPI schema."""
        schemas = schema["components"]["schemas"]
        for name in [
            "SessionResponse",
            "CatalogResponse",
            "IdentifyResponse",
            "FeedResponse",
            "StatisticsResponse",
            "ErrorResponse",
        ]:
            assert name in schemas, f"Missing schema: {name}"

    def test_endpoints_present(self, schema):
        """Main endpoints are routed with the expected methods."""
        paths = schema["paths"]

        assert "post" in paths["/api/v1/sessions"]
        assert "get" in paths["/api/v1/sessions"]
        assert "post" in paths["/api/v1/sessions/{session_id}/predictions"]
        assert "put" in paths["/api/v1/sessions/{session_id}/threshold"]
        assert "200" in paths["/api/v1/identify"]["post"]["responses"]
        assert "404" in paths["/api/v1/sessions/{session_id}"]["get"]["responses"]
