"""
ArtCritic Backend — Google Gemini Vision Client
================================================

What:  VisionClient implementation backed by the Google Gemini API.
How:   Builds a GenerativeModel carrying the critic persona as its system
       instruction, sends the category prompt plus the image as an inline
       part, and returns the text with model name and token usage.
Who:   Instantiated once at import; called by AnalysisService per request.

Failure policy:
    One attempt per request. Any SDK or network error becomes ProviderError
    and propagates to the caller. The generation call is never retried
    and has no internal timeout.

Remote images:
    Gemini takes image bytes rather than arbitrary URLs, so an image URL is
    downloaded with httpx first and then sent inline like a local upload.
"""

import logging
import time
import uuid
from typing import Optional, Tuple

import google.generativeai as genai
import httpx

from artcritic.config import settings
from artcritic.exceptions import ProviderError, ValidationError
from artcritic.schemas.analysis import RawFeedback
from artcritic.services.vision_base import VisionClient

logger = logging.getLogger(__name__)


class GeminiService(VisionClient):
    """
    Google Gemini implementation of the vision client.

    The model object is built per call because the system instruction is
    part of the model configuration in the SDK; building it is local and cheap.
    """

    def __init__(self):
        if settings.gemini_api_key and settings.gemini_api_key != "your_gemini_api_key_here":
            genai.configure(api_key=settings.gemini_api_key)

        self.model_name = settings.gemini_model
        self.generation_config = {"max_output_tokens": settings.gemini_max_output_tokens}

        logger.info(
            "GeminiService initialized with model=%s, max_output_tokens=%d",
            self.model_name,
            settings.gemini_max_output_tokens,
        )

    async def invoke(
        self,
        system_instruction: str,
        user_instruction: str,
        image_bytes: Optional[bytes] = None,
        image_url: Optional[str] = None,
        mime_type: str = "image/jpeg",
    ) -> RawFeedback:
        """
        Send one critique request to Gemini.

        Flow:
            1. Download the image if only a URL was given
            2. Build contents: [user instruction, inline image part]
            3. generate_content_async(), single attempt
            4. Wrap the text, model name and token usage in RawFeedback

        Raises:
            ProviderError: Gemini or the image host failed
            ValidationError: the URL does not point at a usable image
        """
        call_id = str(uuid.uuid4())[:8]

        if image_bytes is None and image_url:
            image_bytes, mime_type = await self._fetch_image(image_url, call_id)

        contents = [user_instruction]
        if image_bytes is not None:
            contents.append({"mime_type": mime_type, "data": image_bytes})

        logger.info(
            "[%s] Starting Gemini analysis (model=%s, image=%s)",
            call_id,
            self.model_name,
            f"{len(image_bytes)} bytes" if image_bytes is not None else "none",
        )
        start_time = time.time()

        try:
            model = genai.GenerativeModel(
                self.model_name,
                system_instruction=system_instruction,
                generation_config=self.generation_config,
            )
            response = await model.generate_content_async(contents)
        except Exception as e:
            duration_ms = (time.time() - start_time) * 1000
            logger.error(
                "[%s] Gemini call failed after %.0fms: %s",
                call_id,
                duration_ms,
                str(e),
            )
            raise ProviderError(
                message="AI analysis failed. Please try again later.",
                context={"call_id": call_id, "error_type": type(e).__name__},
            )

        try:
            text = response.text or ""
        except ValueError as e:
            # The SDK raises ValueError from .text when every candidate was blocked
            logger.error("[%s] Gemini returned no usable content: %s", call_id, str(e))
            raise ProviderError(
                message="The AI service returned no content for this artwork.",
                context={"call_id": call_id, "error_type": "EmptyResponse"},
            )

        usage = getattr(response, "usage_metadata", None)
        token_usage = getattr(usage, "total_token_count", None)
        if not isinstance(token_usage, int):
            token_usage = None

        logger.info(
            "[%s] Gemini analysis completed in %.0fms, %d chars, tokens=%s",
            call_id,
            (time.time() - start_time) * 1000,
            len(text),
            token_usage,
        )

        return RawFeedback(
            full_text=text.strip(),
            model_identifier=self.model_name,
            token_usage=token_usage,
        )

    async def _fetch_image(self, image_url: str, call_id: str) -> Tuple[bytes, str]:
        """Download a remote image so it can be sent inline."""
        try:
            async with httpx.AsyncClient(
                timeout=settings.image_fetch_timeout,
                follow_redirects=True,
            ) as client:
                response = await client.get(image_url)
                response.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning("[%s] Could not download image %s: %s", call_id, image_url, str(e))
            raise ProviderError(
                message="Could not download the image from the given URL.",
                context={"call_id": call_id, "error_type": type(e).__name__},
            )

        mime_type = response.headers.get("content-type", "").split(";")[0].strip().lower()
        if not mime_type.startswith("image/"):
            raise ValidationError(
                message=f"The URL does not point to an image (content type '{mime_type or 'unknown'}').",
                field="image_url",
            )
        if len(response.content) > settings.max_file_size:
            raise ValidationError(
                message="The image at the given URL exceeds the maximum file size.",
                field="image_url",
                context={"max_size": settings.max_file_size, "actual_size": len(response.content)},
            )
        return response.content, mime_type

    async def health_check(self) -> bool:
        """
        Check that the Gemini API is reachable with the configured key.

        Lists models instead of generating, so no tokens are spent.
        """
        try:
            model_names = [m.name for m in genai.list_models()]
            target = f"models/{self.model_name}"
            if target not in model_names:
                logger.warning("Configured model %s not found in available models", target)
            return True
        except Exception as e:
            logger.warning("Gemini health check failed: %s", str(e))
            return False


gemini_service = GeminiService()
