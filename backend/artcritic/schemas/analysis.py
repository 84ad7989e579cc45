"""
ArtCritic Backend — Analysis Domain Models
===========================================

What:  Pydantic models for everything that flows through one analysis request:
       the request itself, the raw model output, the parsed/structured result,
       learning resources, and the outcome of the optional save.
Why:   Frozen models make "immutable once constructed" a property of the type
       instead of a convention; FastAPI can serialize them directly.
Who:   Produced by the analysis service and the text extraction components;
       consumed by routes and the persistence client.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


# ══════════════════════════════════════════════════════════════════════════
# Enumerations
# ══════════════════════════════════════════════════════════════════════════


class AnalysisCategory(str, Enum):
    """Caller-selected focus; picks both the prompt template and the resource seeds."""

    GENERAL = "general"
    TECHNIQUE = "technique"
    COMPOSITION = "composition"
    COLOR = "color"
    STYLE = "style"


class ResourceKind(str, Enum):
    VIDEO = "video"
    BOOK = "book"
    TUTORIAL = "tutorial"
    EXHIBITION = "exhibition"
    OTHER = "other"


class DifficultyLevel(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class PersistenceStatus(str, Enum):
    SAVED = "saved"
    SKIPPED = "skipped"
    FAILED = "failed"


# ══════════════════════════════════════════════════════════════════════════
# Value Types
# ══════════════════════════════════════════════════════════════════════════


class LearningResource(BaseModel):
    """A single recommended study resource. Value type, compared by content."""

    model_config = ConfigDict(frozen=True)

    kind: ResourceKind
    title: str
    description: str
    url: Optional[str] = None
    difficulty_level: DifficultyLevel = DifficultyLevel.BEGINNER


class ArtworkMetadata(BaseModel):
    """
    Descriptive fields about the uploaded artwork.

    Only used when the analysis is saved to the data service; defaults mirror
    what the upload form sends when the user leaves a field blank.
    """

    model_config = ConfigDict(frozen=True)

    title: str = "Untitled Artwork"
    description: str = ""
    filename: str = "unknown"
    image_url: Optional[str] = None
    file_size: Optional[int] = None
    content_type: Optional[str] = None
    size: str = "Unknown"
    medium: str = "Digital"
    style: str = "Unknown"


# ══════════════════════════════════════════════════════════════════════════
# Request / Response of one analysis
# ══════════════════════════════════════════════════════════════════════════


class AnalysisRequest(BaseModel):
    """
    Everything the orchestrator needs for one analysis.

    `analysis_category` is kept as the raw string the caller sent; the
    orchestrator resolves it to an AnalysisCategory and rejects unknown values
    before any external call.

    `image_reference` is either a local file path (an upload already stored on
    disk) or an http(s) URL.
    """

    model_config = ConfigDict(frozen=True)

    image_reference: Optional[str] = None
    analysis_category: str = AnalysisCategory.GENERAL.value
    free_text_prompt: Optional[str] = None
    language: str = "en"
    user_identity: Optional[str] = None
    artwork: Optional[ArtworkMetadata] = None

    @property
    def has_image(self) -> bool:
        return bool(self.image_reference and self.image_reference.strip())

    @property
    def has_prompt(self) -> bool:
        return bool(self.free_text_prompt and self.free_text_prompt.strip())

    @property
    def image_is_url(self) -> bool:
        ref = (self.image_reference or "").strip().lower()
        return ref.startswith("http://") or ref.startswith("https://")


class RawFeedback(BaseModel):
    """Unprocessed text returned by the vision model for one request."""

    model_config = ConfigDict(frozen=True)

    full_text: str
    model_identifier: str
    token_usage: Optional[int] = None


class ParsedSections(BaseModel):
    """
    The six labelled sections of a critique.

    A section the model did not produce is an empty string, never None.
    """

    model_config = ConfigDict(frozen=True)

    technical: str = ""
    composition: str = ""
    color: str = ""
    style: str = ""
    improvements: str = ""
    learning_resources: str = ""


class StructuredAnalysis(BaseModel):
    """
    Parsed, typed result of one critique.

    `improvements` comes from the model's own numbered list; `suggestions` and
    `learning_resources` are heuristic views over the whole text. They are
    complementary and are not expected to agree.
    """

    model_config = ConfigDict(frozen=True)

    full_text: str
    detected_style: str
    technical_assessment: str = ""
    composition_assessment: str = ""
    color_assessment: str = ""
    style_context: str = ""
    improvements: List[str] = Field(default_factory=list)
    resources_section: str = ""
    suggestions: List[str] = Field(default_factory=list, max_length=5)
    learning_resources: List[LearningResource] = Field(default_factory=list, max_length=4)


class PersistenceOutcome(BaseModel):
    """
    Result of the best-effort save to the data service.

    The save never fails the request; instead its outcome travels with the
    analysis so callers can see whether (and why) nothing was stored.
    """

    model_config = ConfigDict(frozen=True)

    status: PersistenceStatus
    artwork_id: Optional[str] = None
    analysis_id: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def saved(cls, artwork_id: str, analysis_id: str) -> "PersistenceOutcome":
        return cls(status=PersistenceStatus.SAVED, artwork_id=artwork_id, analysis_id=analysis_id)

    @classmethod
    def skipped(cls) -> "PersistenceOutcome":
        return cls(status=PersistenceStatus.SKIPPED)

    @classmethod
    def failed(cls, error: str) -> "PersistenceOutcome":
        return cls(status=PersistenceStatus.FAILED, error=error)

    @property
    def is_saved(self) -> bool:
        return self.status == PersistenceStatus.SAVED


class AnalysisResult(BaseModel):
    """What the orchestrator hands back to the route layer."""

    model_config = ConfigDict(frozen=True)

    analysis: StructuredAnalysis
    raw: RawFeedback
    category: AnalysisCategory
    persistence: PersistenceOutcome
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def temporary(self) -> bool:
        """True whenever the analysis exists only in this response."""
        return not self.persistence.is_saved
