"""
ArtCritic Backend — Artwork Data Service Client
================================================

What:  HTTP client for the external service that stores artworks and analyses.
How:   httpx.AsyncClient against settings.data_service_url; transport-level
       failures are retried with tenacity, HTTP error statuses are not.
Who:   AnalysisService (best-effort save) and the history/artwork read routes.

Data service contract:
    POST /artworks                  → {"_id": ...}
    POST /analyses                  → {"_id": ...}
    GET  /analyses/artwork/{id}     → {"analyses": [...]}
    GET  /artworks/user/{id}        → [...]
    GET  /analyses/{id}             → {...}
    GET  /analyses/user/{id}?limit  → {"analyses": [...]}

Failure policy:
    save_analysis() and the fetch_* methods raise PersistenceError (or
    NotFoundError for a missing analysis). try_save_analysis() never raises;
    it logs and returns a failed PersistenceOutcome so the analysis can still
    be returned to the user as temporary.
"""

import logging
from typing import Any, Dict, List, NamedTuple, Optional
from urllib.parse import quote

import httpx
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
    wait_random,
)

from artcritic.config import settings
from artcritic.exceptions import NotFoundError, PersistenceError
from artcritic.schemas.analysis import (
    AnalysisCategory,
    ArtworkMetadata,
    PersistenceOutcome,
    StructuredAnalysis,
)

logger = logging.getLogger(__name__)


class SavedAnalysis(NamedTuple):
    artwork_id: str
    analysis_id: str


class PersistenceClient:
    """
    Thin async wrapper around the data service REST API.

    A new AsyncClient is opened per operation; the save path makes two
    sequential calls on the same client. `transport` lets tests plug in an
    httpx.MockTransport.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or settings.data_service_url).rstrip("/")
        self.timeout = timeout or settings.data_service_timeout
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=self.transport,
            headers={"Content-Type": "application/json"},
        )

    @retry(
        retry=retry_if_exception_type(httpx.TransportError),
        stop=stop_after_attempt(settings.persistence_retry_attempts),
        wait=wait_exponential(multiplier=settings.persistence_retry_wait, max=5) + wait_random(0, 0.5),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
    async def _send(
        self,
        client: httpx.AsyncClient,
        method: str,
        path: str,
        **kwargs: Any,
    ) -> httpx.Response:
        return await client.request(method, path, **kwargs)

    async def _request(
        self,
        client: httpx.AsyncClient,
        method: str,
        path: str,
        **kwargs: Any,
    ) -> Any:
        """
        Send one request and return the decoded JSON body.

        Raises:
            PersistenceError: transport failure after retries, any other httpx
                error (undecodable body, redirect loop), non-2xx status, or a
                body that is not JSON
        """
        try:
            response = await self._send(client, method, path, **kwargs)
        except httpx.TransportError as e:
            raise PersistenceError(
                message="The artwork data service could not be reached",
                context={"path": path, "error_type": type(e).__name__},
            )
        except httpx.HTTPError as e:
            raise PersistenceError(
                message=f"Data service request {method} {path} failed: {type(e).__name__}",
                context={"path": path, "error_type": type(e).__name__},
            )

        if response.is_error:
            detail = _error_detail(response)
            raise PersistenceError(
                message=f"Data service returned {response.status_code} for {method} {path}: {detail}",
                status_code=response.status_code,
                context={"path": path},
            )

        try:
            return response.json()
        except ValueError:
            raise PersistenceError(
                message=f"Data service returned a non-JSON body for {method} {path}",
                status_code=response.status_code,
                context={"path": path},
            )

    # ── Save path ─────────────────────────────────────────────────────────

    async def save_analysis(
        self,
        user_id: str,
        artwork: ArtworkMetadata,
        analysis: StructuredAnalysis,
        category: AnalysisCategory,
        model_identifier: str,
    ) -> SavedAnalysis:
        """
        Create the artwork record, then the analysis record linked to it.

        Raises:
            PersistenceError: either call failed or returned no `_id`
        """
        async with self._client() as client:
            artwork_body = await self._request(
                client,
                "POST",
                "/artworks",
                json=build_artwork_payload(user_id, artwork),
            )
            artwork_id = _record_id(artwork_body, "artwork")

            analysis_body = await self._request(
                client,
                "POST",
                "/analyses",
                json=build_analysis_payload(
                    user_id, artwork_id, artwork, analysis, category, model_identifier
                ),
            )
            analysis_id = _record_id(analysis_body, "analysis")

        logger.info("Saved analysis %s for artwork %s (user=%s)", analysis_id, artwork_id, user_id)
        return SavedAnalysis(artwork_id=artwork_id, analysis_id=analysis_id)

    async def try_save_analysis(
        self,
        user_id: str,
        artwork: ArtworkMetadata,
        analysis: StructuredAnalysis,
        category: AnalysisCategory,
        model_identifier: str,
    ) -> PersistenceOutcome:
        """Best-effort variant of save_analysis(); failures become a failed outcome."""
        try:
            saved = await self.save_analysis(user_id, artwork, analysis, category, model_identifier)
        except PersistenceError as e:
            logger.warning("Analysis not saved, returning it as temporary: %s", e.message)
            return PersistenceOutcome.failed(e.message)
        except Exception as e:
            # e.g. httpx.InvalidURL from a malformed DATA_SERVICE_URL
            logger.error("Analysis not saved, unexpected %s", type(e).__name__, exc_info=True)
            return PersistenceOutcome.failed(f"Unexpected error while saving: {type(e).__name__}")
        return PersistenceOutcome.saved(saved.artwork_id, saved.analysis_id)

    # ── Read path ─────────────────────────────────────────────────────────

    async def fetch_analyses_for_artwork(self, artwork_id: str) -> List[Dict[str, Any]]:
        async with self._client() as client:
            body = await self._request(client, "GET", f"/analyses/artwork/{_segment(artwork_id)}")
        return _analyses_list(body)

    async def fetch_artworks_for_user(self, user_id: str) -> List[Dict[str, Any]]:
        async with self._client() as client:
            body = await self._request(client, "GET", f"/artworks/user/{_segment(user_id)}")
        return body if isinstance(body, list) else []

    async def fetch_analysis(self, analysis_id: str) -> Dict[str, Any]:
        """
        Raises:
            NotFoundError: the data service answered 404
            PersistenceError: any other failure
        """
        async with self._client() as client:
            try:
                body = await self._request(client, "GET", f"/analyses/{_segment(analysis_id)}")
            except PersistenceError as e:
                if e.status_code == 404:
                    raise NotFoundError(resource="Analysis", resource_id=analysis_id)
                raise
        if not isinstance(body, dict):
            raise NotFoundError(resource="Analysis", resource_id=analysis_id)
        return body

    async def fetch_recent_analyses(self, user_id: str, limit: int = 10) -> List[Dict[str, Any]]:
        async with self._client() as client:
            body = await self._request(
                client,
                "GET",
                f"/analyses/user/{_segment(user_id)}",
                params={"limit": limit},
            )
        return _analyses_list(body)


# ══════════════════════════════════════════════════════════════════════════
# Payload builders
# ══════════════════════════════════════════════════════════════════════════


def build_artwork_payload(user_id: str, artwork: ArtworkMetadata) -> Dict[str, Any]:
    return {
        "userId": user_id,
        "title": artwork.title,
        "description": artwork.description,
        "imageUrl": artwork.image_url,
        "metadata": {
            "size": artwork.size,
            "medium": artwork.medium,
            "style": artwork.style,
        },
    }


def build_analysis_payload(
    user_id: str,
    artwork_id: str,
    artwork: ArtworkMetadata,
    analysis: StructuredAnalysis,
    category: AnalysisCategory,
    model_identifier: str,
) -> Dict[str, Any]:
    """Analysis record in the data service's camelCase shape."""
    return {
        "artworkId": artwork_id,
        "userId": user_id,
        "filename": artwork.filename,
        "analysisType": category.value,
        "modelUsed": model_identifier,
        "fileSize": artwork.file_size,
        "contentType": artwork.content_type,
        "imageUrl": artwork.image_url,
        "analysis": analysis.full_text,
        "detectedStyle": analysis.detected_style,
        "suggestions": list(analysis.suggestions),
        "learningResources": [r.model_dump(mode="json") for r in analysis.learning_resources],
        "results": {
            "technicalQuality": analysis.technical_assessment,
            "composition": analysis.composition_assessment,
            "colorTheory": analysis.color_assessment,
            "styleContext": analysis.style_context,
            "improvements": list(analysis.improvements),
            "resources": analysis.resources_section,
        },
    }


def _record_id(body: Any, resource: str) -> str:
    record_id = body.get("_id") if isinstance(body, dict) else None
    if not record_id:
        raise PersistenceError(message=f"Data service did not return an id for the new {resource}")
    return str(record_id)


def _segment(value: str) -> str:
    """Percent-encode an id for use as a single path segment."""
    return quote(str(value), safe="")


def _analyses_list(body: Any) -> List[Dict[str, Any]]:
    if isinstance(body, dict):
        return list(body.get("analyses") or [])
    return []


def _error_detail(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.reason_phrase or "error"
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return response.reason_phrase or "error"


persistence_client = PersistenceClient()
