"""
ArtCritic Backend — Gemini Service Unit Tests (Mocked)
=======================================================

What:  GeminiService with the google.generativeai module patched out.
Why:   Tests must not make real API calls (cost, network, credentials).

What we test:
    ✅ Successful call returns RawFeedback with model and token usage
    ✅ One attempt only; SDK errors become ProviderError
    ✅ Blocked responses (ValueError from .text) become ProviderError
    ✅ Remote images are downloaded and sent inline
    ✅ health_check() never raises
"""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, PropertyMock, patch

import httpx
import pytest

from artcritic.exceptions import ProviderError, ValidationError
from artcritic.services.gemini_service import GeminiService

REAL_ASYNC_CLIENT = httpx.AsyncClient


def gemini_response(text="**Technical Assessment**: Fine.", total_tokens=150):
    response = MagicMock()
    response.text = text
    response.usage_metadata = SimpleNamespace(total_token_count=total_tokens)
    return response


def patch_image_host(handler):
    """Route GeminiService's image download through an httpx.MockTransport."""

    def client_factory(**kwargs):
        return REAL_ASYNC_CLIENT(transport=httpx.MockTransport(handler), **kwargs)

    return patch("artcritic.services.gemini_service.httpx.AsyncClient", side_effect=client_factory)


@pytest.fixture
def mock_genai():
    with patch("artcritic.services.gemini_service.genai") as genai:
        model = genai.GenerativeModel.return_value
        model.generate_content_async = AsyncMock(return_value=gemini_response())
        yield genai


class TestGeminiInvoke:

    @pytest.mark.asyncio
    async def test_success_returns_raw_feedback(self, mock_genai):
        service = GeminiService()
        result = await service.invoke(
            system_instruction="persona",
            user_instruction="critique this",
            image_bytes=b"\xff\xd8jpeg",
        )

        assert result.full_text == "**Technical Assessment**: Fine."
        assert result.model_identifier == service.model_name
        assert result.token_usage == 150

        args, kwargs = mock_genai.GenerativeModel.call_args
        assert args[0] == service.model_name
        assert kwargs["system_instruction"] == "persona"

        contents = mock_genai.GenerativeModel.return_value.generate_content_async.call_args.args[0]
        assert contents[0] == "critique this"
        assert contents[1] == {"mime_type": "image/jpeg", "data": b"\xff\xd8jpeg"}

    @pytest.mark.asyncio
    async def test_prompt_only_sends_text_part(self, mock_genai):
        await GeminiService().invoke("persona", "describe the artwork")
        contents = mock_genai.GenerativeModel.return_value.generate_content_async.call_args.args[0]
        assert contents == ["describe the artwork"]

    @pytest.mark.asyncio
    async def test_sdk_error_is_provider_error_without_retry(self, mock_genai):
        generate = mock_genai.GenerativeModel.return_value.generate_content_async
        generate.side_effect = RuntimeError("429 quota exceeded")

        with pytest.raises(ProviderError):
            await GeminiService().invoke("persona", "critique", image_bytes=b"x")
        assert generate.await_count == 1

    @pytest.mark.asyncio
    async def test_blocked_response_is_provider_error(self, mock_genai):
        response = MagicMock()
        type(response).text = PropertyMock(side_effect=ValueError("no candidates"))
        mock_genai.GenerativeModel.return_value.generate_content_async.return_value = response

        with pytest.raises(ProviderError, match="no content"):
            await GeminiService().invoke("persona", "critique", image_bytes=b"x")

    @pytest.mark.asyncio
    async def test_missing_token_usage(self, mock_genai):
        response = gemini_response()
        response.usage_metadata = None
        mock_genai.GenerativeModel.return_value.generate_content_async.return_value = response

        result = await GeminiService().invoke("persona", "critique", image_bytes=b"x")
        assert result.token_usage is None


class TestRemoteImages:

    @pytest.mark.asyncio
    async def test_url_downloaded_and_inlined(self, mock_genai):
        def handler(request):
            return httpx.Response(200, content=b"PNGDATA", headers={"content-type": "image/png"})

        with patch_image_host(handler):
            await GeminiService().invoke("persona", "critique", image_url="https://img.test/a.png")

        contents = mock_genai.GenerativeModel.return_value.generate_content_async.call_args.args[0]
        assert contents[1] == {"mime_type": "image/png", "data": b"PNGDATA"}

    @pytest.mark.asyncio
    async def test_non_image_url_rejected(self, mock_genai):
        def handler(request):
            return httpx.Response(200, text="<html></html>", headers={"content-type": "text/html"})

        with patch_image_host(handler), pytest.raises(ValidationError, match="does not point to an image"):
            await GeminiService().invoke("persona", "critique", image_url="https://img.test/page")
        mock_genai.GenerativeModel.return_value.generate_content_async.assert_not_called()

    @pytest.mark.asyncio
    async def test_unreachable_image_is_provider_error(self, mock_genai):
        def handler(request):
            return httpx.Response(404)

        with patch_image_host(handler), pytest.raises(ProviderError, match="Could not download"):
            await GeminiService().invoke("persona", "critique", image_url="https://img.test/missing.png")


class TestHealthCheck:

    @pytest.mark.asyncio
    async def test_healthy(self, mock_genai):
        service = GeminiService()
        mock_genai.list_models.return_value = [SimpleNamespace(name=f"models/{service.model_name}")]
        assert await service.health_check() is True

    @pytest.mark.asyncio
    async def test_unreachable(self, mock_genai):
        mock_genai.list_models.side_effect = ConnectionError("offline")
        assert await GeminiService().health_check() is False
