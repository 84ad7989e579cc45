"""
ArtCritic Backend — Analysis Service (Feedback Orchestrator)
=============================================================

What:  Runs one artwork critique end-to-end and returns an AnalysisResult.
How:   Composes the vision client, text extraction, style classifier,
       resource recommender and persistence client.
Who:   Called by the /api/ai analyze routes.
When:  Once per analysis request.

Orchestration Flow:
    ┌──────────┐    ┌──────────┐    ┌──────────────┐    ┌──────────┐    ┌──────────┐
    │ Validate │───▶│ Prompts  │───▶│ Vision model │───▶│ Extract  │───▶│  Save    │
    │          │    │ + image  │    │ (one call)   │    │ & parse  │    │ (maybe)  │
    └──────────┘    └──────────┘    └──────────────┘    └──────────┘    └──────────┘

    Validate fails  → ValidationError, no external call made
    Vision fails    → ProviderError propagates, no partial result
    Save fails      → logged; result returned with a failed PersistenceOutcome

The service holds only references to its collaborators; every request builds
its own values, so concurrent requests share nothing mutable.
"""

import logging
import re
from typing import Optional

from artcritic.exceptions import ValidationError
from artcritic.prompts import SYSTEM_INSTRUCTION, build_user_instruction
from artcritic.schemas.analysis import (
    AnalysisCategory,
    AnalysisRequest,
    AnalysisResult,
    ArtworkMetadata,
    PersistenceOutcome,
    RawFeedback,
    StructuredAnalysis,
)
from artcritic.services.gemini_service import gemini_service
from artcritic.services.image_processor import preprocess_image_async
from artcritic.services.persistence_client import PersistenceClient, persistence_client
from artcritic.services.resource_recommender import ResourceRecommender, resource_recommender
from artcritic.services.style_classifier import StyleClassifier, style_classifier
from artcritic.services.text_extraction import (
    extract_learning_resources,
    extract_suggestions,
    parse_sections,
    split_improvements,
)
from artcritic.services.vision_base import VisionClient

logger = logging.getLogger(__name__)

_LANGUAGE_CODE = re.compile(r"^[a-z]{2}$")


class AnalysisService:
    """
    Feedback orchestrator.

    Collaborators are injected so tests can swap in fakes; the module-level
    `analysis_service` wires the production singletons.
    """

    def __init__(
        self,
        vision_client: VisionClient,
        persistence: PersistenceClient,
        recommender: Optional[ResourceRecommender] = None,
        classifier: Optional[StyleClassifier] = None,
    ):
        self.vision_client = vision_client
        self.persistence = persistence
        self.recommender = recommender or resource_recommender
        self.classifier = classifier or style_classifier

    def validate(self, request: AnalysisRequest) -> AnalysisCategory:
        """
        Reject requests that cannot be analyzed.

        Returns:
            The resolved AnalysisCategory

        Raises:
            ValidationError: no image and no prompt, unknown category, or a
                language that is not a two-letter code
        """
        if not request.has_image and not request.has_prompt:
            raise ValidationError(
                message="Either an image or a text prompt is required",
                field="image",
            )

        raw_category = (request.analysis_category or "").strip().lower()
        try:
            category = AnalysisCategory(raw_category)
        except ValueError:
            raise ValidationError(
                message=(
                    f"Invalid analysis type '{request.analysis_category}'. "
                    f"Must be one of: {', '.join(c.value for c in AnalysisCategory)}"
                ),
                field="analysis_type",
            )

        if not _LANGUAGE_CODE.match((request.language or "").strip().lower()):
            raise ValidationError(
                message=f"Invalid language '{request.language}'. Use a two-letter ISO 639-1 code.",
                field="language",
            )

        return category

    async def analyze(self, request: AnalysisRequest) -> AnalysisResult:
        """
        Complete workflow: validate → prompt → vision call → extract → optional save.

        Raises:
            ValidationError: request rejected before any external call
            ProviderError: the vision model call failed
            FileStorageError: a local image could not be read or decoded
        """
        # ── Step 1: Validate ──────────────────────────────────────────────
        category = self.validate(request)
        language = request.language.strip().lower()

        # ── Step 2: Prompts ───────────────────────────────────────────────
        user_instruction = build_user_instruction(
            category,
            free_text_prompt=request.free_text_prompt,
            language=language,
            has_image=request.has_image,
        )

        # ── Step 3: Image + single vision call ────────────────────────────
        image_bytes: Optional[bytes] = None
        image_url: Optional[str] = None
        if request.has_image:
            reference = request.image_reference.strip()
            if request.image_is_url:
                image_url = reference
            else:
                image_bytes = await preprocess_image_async(reference)

        raw = await self.vision_client.invoke(
            system_instruction=SYSTEM_INSTRUCTION,
            user_instruction=user_instruction,
            image_bytes=image_bytes,
            image_url=image_url,
            mime_type="image/jpeg",
        )

        # ── Steps 4-7: Extraction ─────────────────────────────────────────
        analysis = self.build_structured_analysis(raw, category)
        logger.info(
            "Analysis complete: category=%s style=%s suggestions=%d resources=%d",
            category.value,
            analysis.detected_style,
            len(analysis.suggestions),
            len(analysis.learning_resources),
        )

        # ── Step 8: Best-effort save ──────────────────────────────────────
        outcome = await self._persist(request, analysis, category, raw, image_url)

        return AnalysisResult(
            analysis=analysis,
            raw=raw,
            category=category,
            persistence=outcome,
        )

    def build_structured_analysis(
        self, raw: RawFeedback, category: AnalysisCategory
    ) -> StructuredAnalysis:
        """Turn the model's free text into a StructuredAnalysis. Never raises."""
        text = raw.full_text
        sections = parse_sections(text)

        # A missing Style & Context section classifies as "mixed media"
        detected_style = self.classifier.extract_from_narrative(sections.style)

        return StructuredAnalysis(
            full_text=text,
            detected_style=detected_style,
            technical_assessment=sections.technical,
            composition_assessment=sections.composition,
            color_assessment=sections.color,
            style_context=sections.style,
            improvements=split_improvements(sections.improvements),
            resources_section=sections.learning_resources,
            suggestions=extract_suggestions(text),
            learning_resources=extract_learning_resources(text, category, self.recommender),
        )

    async def _persist(
        self,
        request: AnalysisRequest,
        analysis: StructuredAnalysis,
        category: AnalysisCategory,
        raw: RawFeedback,
        image_url: Optional[str],
    ) -> PersistenceOutcome:
        if not request.user_identity:
            logger.debug("No caller identity; analysis will not be saved")
            return PersistenceOutcome.skipped()

        artwork = request.artwork or ArtworkMetadata(image_url=image_url)
        return await self.persistence.try_save_analysis(
            user_id=request.user_identity,
            artwork=artwork,
            analysis=analysis,
            category=category,
            model_identifier=raw.model_identifier,
        )


analysis_service = AnalysisService(
    vision_client=gemini_service,
    persistence=persistence_client,
)
