"""
ArtCritic Backend — HTTP Request/Response Schemas
==================================================

What:  Pydantic models defining the public API contract.
Why:   Kept apart from the domain models so the wire format (field names the
       frontend already consumes) can differ from the internal structure.
Who:   Used by route handlers as request bodies and response models.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from artcritic.schemas.analysis import AnalysisResult, LearningResource


class AnalyzeUrlRequest(BaseModel):
    """
    JSON body for POST /api/ai/analyze-url.

    At least one of `image_url` / `text_prompt` must be present; the check
    lives in the analysis service so both endpoints reject the same way.
    """

    image_url: Optional[str] = Field(default=None, description="Public URL of the artwork image")
    text_prompt: Optional[str] = Field(default=None, description="Free-text context or question")
    language: str = Field(default="en", description="ISO 639-1 reply language")
    analysis_type: str = Field(default="general", description="general, technique, composition, color or style")


class AnalysisResponse(BaseModel):
    """
    Response of both analyze endpoints.

    When the analysis was not saved (anonymous caller or data service down),
    the ids are `temp-…` placeholders and `is_temporary` is true.
    """

    id: str
    artwork_id: str
    analysis_id: str
    filename: Optional[str] = None
    analysis_type: str
    analysis: str = Field(description="Full critique text as returned by the model")
    detected_style: str
    technical_assessment: str
    composition: str
    color_theory: str
    style_and_context: str
    improvements: List[str]
    suggestions: List[str]
    learning_resources: List[LearningResource]
    timestamp: datetime
    model_used: str
    token_usage: Optional[int] = None
    image_url: Optional[str] = None
    is_temporary: bool
    persistence_error: Optional[str] = None

    @classmethod
    def from_result(
        cls,
        result: AnalysisResult,
        filename: Optional[str] = None,
        image_url: Optional[str] = None,
    ) -> "AnalysisResponse":
        """Flatten an AnalysisResult into the wire format, filling temp ids."""
        stamp = int(result.created_at.timestamp() * 1000)
        outcome = result.persistence
        analysis = result.analysis
        analysis_id = outcome.analysis_id or f"temp-analysis-{stamp}"
        return cls(
            id=outcome.analysis_id or f"temp-{stamp}",
            artwork_id=outcome.artwork_id or f"temp-artwork-{stamp}",
            analysis_id=analysis_id,
            filename=filename,
            analysis_type=result.category.value,
            analysis=analysis.full_text,
            detected_style=analysis.detected_style,
            technical_assessment=analysis.technical_assessment,
            composition=analysis.composition_assessment,
            color_theory=analysis.color_assessment,
            style_and_context=analysis.style_context,
            improvements=analysis.improvements,
            suggestions=analysis.suggestions,
            learning_resources=analysis.learning_resources,
            timestamp=result.created_at,
            model_used=result.raw.model_identifier,
            token_usage=result.raw.token_usage,
            image_url=image_url,
            is_temporary=result.temporary,
            persistence_error=outcome.error,
        )


class UploadResponse(BaseModel):
    """Response of POST /api/ai/upload."""

    image_url: str = Field(description="Public URL of the stored image")
    filename: str = Field(description="Name under which the image was stored")


class RecordListResponse(BaseModel):
    """Wrapper for records proxied from the data service (artworks, analyses)."""

    items: List[Dict[str, Any]]
    count: int


class ErrorResponse(BaseModel):
    """
    Standardized error response format for all API errors.

    Example:
        {
            "error": "validation_error",
            "message": "Invalid analysis type 'sculpture'",
            "details": {"field": "analysis_type"},
            "request_id": "a1b2c3d4"
        }
    """

    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Health check response showing service and dependency status."""

    status: str = Field(description="Overall service status: healthy, degraded")
    service: str = Field(default="AI Service")
    version: str = Field(description="Application version")
    gemini: str = Field(description="Gemini API status: available, unavailable, not_configured")
    uptime_seconds: float = Field(description="Seconds since service started")
