"""
ArtCritic Backend — Abstract Vision Client Interface
=====================================================

What:  Contract for the third-party vision model that writes the critique.
Why:   The orchestrator only needs "instructions + image in, text out"; keeping
       that behind an abstract class lets tests substitute a canned client and
       keeps provider SDK details out of the analysis service.
Who:   Implemented by GeminiService; called by AnalysisService.
"""

from abc import ABC, abstractmethod
from typing import Optional

from artcritic.schemas.analysis import RawFeedback


class VisionClient(ABC):
    """
    Abstract interface for a vision-capable language model.

    Contract:
        - invoke() makes exactly one provider call; no retries
        - Every provider failure is raised as ProviderError
        - The returned text carries no structural guarantee
    """

    @abstractmethod
    async def invoke(
        self,
        system_instruction: str,
        user_instruction: str,
        image_bytes: Optional[bytes] = None,
        image_url: Optional[str] = None,
        mime_type: str = "image/jpeg",
    ) -> RawFeedback:
        """
        Ask the model to critique an artwork.

        Args:
            system_instruction: Fixed persona describing the expected sections.
            user_instruction:   Category-specific request (plus user context).
            image_bytes:        Inline encoded image, if the image is local.
            image_url:          Public image URL, if the image is remote.
                                At most one of image_bytes / image_url is set;
                                neither is set for prompt-only analyses.
            mime_type:          MIME type of image_bytes.

        Returns:
            RawFeedback with the full response text. May be an empty string.

        Raises:
            ProviderError: authentication, quota, malformed request, network
                failure, or an image URL that could not be fetched.
        """
        ...

    @abstractmethod
    async def health_check(self) -> bool:
        """Lightweight reachability check; must not consume generation quota."""
        ...
