"""
API Response Schemas.

Pydantic models for the JSON endpoints. They drive OpenAPI docs and
response serialization. The text-to-speech request body is parsed by
hand (see services/validators.py) because malformed JSON and non-string
text must map to contract error codes, not FastAPI's 422.
"""
from __future__ import annotations

from typing import Any, Dict

from pydantic import BaseModel, Field


class SessionResponse(BaseModel):
    """
    Response of GET /api/session.

    Example Response:
        {"token": "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9..."}
    """
    token: str = Field(..., description="Signed session token, valid for one hour")


class HealthResponse(BaseModel):
    status: str = Field(default="ok")


class ErrorDetails(BaseModel):
    originalError: str


class ErrorInfo(BaseModel):
    type: str
    code: str
    message: str
    details: ErrorDetails


class ErrorResponse(BaseModel):
    """Normalized error body returned by every failing TTS/session call."""
    error: ErrorInfo


class MetadataErrorResponse(BaseModel):
    error: str = Field(default="INTERNAL_SERVER_ERROR")
    message: str


# Documented in OpenAPI for POST /api/text-to-speech
TTS_RESPONSES: Dict[int | str, Dict[str, Any]] = {
    200: {"content": {"audio/mpeg": {}}, "description": "Synthesized audio"},
    400: {"model": ErrorResponse, "description": "Invalid input or rejected by provider"},
    401: {"model": ErrorResponse, "description": "Missing, invalid or expired session token"},
    500: {"model": ErrorResponse, "description": "Speech generation failed"},
}
