"""
ArtCritic Backend — API Route Tests
====================================

What:  HTTP behavior of the /api/ai routes, /health and /uploads.
How:   httpx AsyncClient over ASGITransport; the orchestrator and data-service
       client are swapped in through app.dependency_overrides. Uploads are
       real files in the test uploads directory.
"""

from unittest.mock import AsyncMock, patch

import httpx
import pytest
from jose import jwt

from artcritic.config import settings
from artcritic.dependencies import get_analysis_service, get_persistence_client
from artcritic.exceptions import ProviderError
from artcritic.main import app
from artcritic.services.file_service import file_service
from artcritic.services.persistence_client import PersistenceClient


def bearer(claims):
    token = jwt.encode(claims, settings.jwt_secret, algorithm=settings.jwt_algorithm)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def use_analysis_service(analysis_service):
    app.dependency_overrides[get_analysis_service] = lambda: analysis_service
    return analysis_service


def use_data_service(handler):
    client = PersistenceClient(base_url="http://data.test/api", transport=httpx.MockTransport(handler))
    app.dependency_overrides[get_persistence_client] = lambda: client


def stored_files():
    return set(file_service.uploads_dir.iterdir())


class TestAnalyze:

    @pytest.mark.asyncio
    async def test_anonymous_analysis_is_temporary(self, test_client, use_analysis_service, sample_png_bytes):
        response = await test_client.post(
            "/api/ai/analyze",
            files={"image": ("heron.png", sample_png_bytes, "image/png")},
            data={"analysis_type": "color", "title": "Heron"},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["is_temporary"] is True
        assert body["id"].startswith("temp-")
        assert body["artwork_id"].startswith("temp-artwork-")
        assert body["analysis_type"] == "color"
        assert body["filename"] == "heron.png"
        assert body["detected_style"] == "watercolor"
        assert body["model_used"] == "gemini-test"
        assert body["learning_resources"][0]["title"] == "Color Theory for Artists"
        assert "/uploads/" in body["image_url"]
        use_analysis_service.persistence.try_save_analysis.assert_not_called()

    @pytest.mark.asyncio
    async def test_signed_in_analysis_is_saved(self, test_client, use_analysis_service, sample_png_bytes):
        response = await test_client.post(
            "/api/ai/analyze",
            files={"image": ("heron.png", sample_png_bytes, "image/png")},
            data={"title": "Heron", "medium": "Watercolor"},
            headers=bearer({"userId": "user-42"}),
        )

        assert response.status_code == 200
        body = response.json()
        assert body["is_temporary"] is False
        assert body["id"] == "analysis-1"
        assert body["artwork_id"] == "artwork-1"

        kwargs = use_analysis_service.persistence.try_save_analysis.call_args.kwargs
        assert kwargs["user_id"] == "user-42"
        assert kwargs["artwork"].title == "Heron"
        assert kwargs["artwork"].medium == "Watercolor"
        assert kwargs["artwork"].content_type == "image/png"

    @pytest.mark.asyncio
    async def test_id_claim_accepted(self, test_client, use_analysis_service, sample_png_bytes):
        await test_client.post(
            "/api/ai/analyze",
            files={"image": ("a.png", sample_png_bytes, "image/png")},
            headers=bearer({"id": "user-7"}),
        )
        assert use_analysis_service.persistence.try_save_analysis.call_args.kwargs["user_id"] == "user-7"

    @pytest.mark.asyncio
    async def test_invalid_token_means_anonymous(self, test_client, use_analysis_service, sample_png_bytes):
        response = await test_client.post(
            "/api/ai/analyze",
            files={"image": ("a.png", sample_png_bytes, "image/png")},
            headers={"Authorization": "Bearer not-a-jwt"},
        )
        assert response.status_code == 200
        assert response.json()["is_temporary"] is True
        use_analysis_service.persistence.try_save_analysis.assert_not_called()

    @pytest.mark.asyncio
    async def test_unsupported_file_type(self, test_client, use_analysis_service):
        response = await test_client.post(
            "/api/ai/analyze",
            files={"image": ("notes.pdf", b"%PDF-1.7", "application/pdf")},
        )
        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "validation_error"
        assert body["request_id"] == response.headers["X-Request-ID"]

    @pytest.mark.asyncio
    async def test_invalid_analysis_type(self, test_client, use_analysis_service, sample_png_bytes):
        before = stored_files()
        response = await test_client.post(
            "/api/ai/analyze",
            files={"image": ("a.png", sample_png_bytes, "image/png")},
            data={"analysis_type": "sculpture"},
        )
        assert response.status_code == 400
        assert response.json()["details"]["field"] == "analysis_type"
        assert stored_files() == before

    @pytest.mark.asyncio
    async def test_provider_failure_is_503_and_upload_removed(
        self, test_client, use_analysis_service, fake_vision_client, sample_png_bytes
    ):
        fake_vision_client.invoke.side_effect = ProviderError("AI analysis failed. Please try again later.")
        before = stored_files()

        response = await test_client.post(
            "/api/ai/analyze",
            files={"image": ("a.png", sample_png_bytes, "image/png")},
        )

        assert response.status_code == 503
        assert response.json()["error"] == "ai_service_error"
        assert stored_files() == before


class TestAnalyzeUrl:

    @pytest.mark.asyncio
    async def test_prompt_only(self, test_client, use_analysis_service, fake_vision_client):
        response = await test_client.post(
            "/api/ai/analyze-url",
            json={"text_prompt": "A charcoal portrait of my grandfather", "analysis_type": "technique"},
        )

        assert response.status_code == 200
        assert response.json()["analysis_type"] == "technique"
        assert fake_vision_client.invoke.call_args.kwargs["image_url"] is None

    @pytest.mark.asyncio
    async def test_image_url_forwarded(self, test_client, use_analysis_service, fake_vision_client):
        response = await test_client.post(
            "/api/ai/analyze-url",
            json={"image_url": "https://img.test/heron.jpg"},
        )
        assert response.status_code == 200
        assert response.json()["image_url"] == "https://img.test/heron.jpg"
        assert fake_vision_client.invoke.call_args.kwargs["image_url"] == "https://img.test/heron.jpg"

    @pytest.mark.asyncio
    async def test_local_path_rejected(self, test_client, use_analysis_service, fake_vision_client):
        response = await test_client.post("/api/ai/analyze-url", json={"image_url": "/etc/passwd"})
        assert response.status_code == 400
        fake_vision_client.invoke.assert_not_called()

    @pytest.mark.asyncio
    async def test_nothing_to_analyze(self, test_client, use_analysis_service):
        response = await test_client.post("/api/ai/analyze-url", json={})
        assert response.status_code == 400


class TestUpload:

    @pytest.mark.asyncio
    async def test_upload_is_served_back(self, test_client, sample_jpeg_bytes):
        response = await test_client.post(
            "/api/ai/upload",
            files={"image": ("sketch.jpg", sample_jpeg_bytes, "image/jpeg")},
        )

        assert response.status_code == 201
        body = response.json()
        assert body["image_url"].endswith(f"/uploads/{body['filename']}")

        served = await test_client.get(body["image_url"])
        assert served.status_code == 200
        assert served.content == sample_jpeg_bytes


class TestHistory:

    @pytest.mark.asyncio
    async def test_recent_analyses(self, test_client):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={"analyses": [{"_id": "a1"}, {"_id": "a2"}]})

        use_data_service(handler)
        response = await test_client.get("/api/ai/user/user-1/analyses", params={"limit": 2})

        assert response.status_code == 200
        assert response.json() == {"items": [{"_id": "a1"}, {"_id": "a2"}], "count": 2}
        assert seen[0].url.params["limit"] == "2"

    @pytest.mark.asyncio
    async def test_artwork_analyses(self, test_client):
        use_data_service(lambda request: httpx.Response(200, json={"analyses": []}))
        response = await test_client.get("/api/ai/artwork/art-1/analyses")
        assert response.json() == {"items": [], "count": 0}

    @pytest.mark.asyncio
    async def test_user_artworks(self, test_client):
        use_data_service(lambda request: httpx.Response(200, json=[{"_id": "art-1"}]))
        response = await test_client.get("/api/ai/user/user-1/artworks")
        assert response.json()["count"] == 1

    @pytest.mark.asyncio
    async def test_analysis_not_found(self, test_client):
        use_data_service(lambda request: httpx.Response(404, json={"message": "Not found"}))
        response = await test_client.get("/api/ai/analyses/missing")
        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    @pytest.mark.asyncio
    async def test_data_service_down_is_502(self, test_client):
        use_data_service(lambda request: httpx.Response(500, text="boom"))
        response = await test_client.get("/api/ai/user/user-1/artworks")
        assert response.status_code == 502
        assert response.json()["error"] == "data_service_error"

    @pytest.mark.asyncio
    async def test_limit_validated(self, test_client):
        use_data_service(lambda request: httpx.Response(200, json={"analyses": []}))
        response = await test_client.get("/api/ai/user/user-1/analyses", params={"limit": 0})
        assert response.status_code == 422


class TestHealth:

    @pytest.mark.asyncio
    async def test_healthy(self, test_client):
        with patch("artcritic.routes.health.gemini_service.health_check", new=AsyncMock(return_value=True)):
            response = await test_client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["gemini"] == "available"
        assert body["service"] == "AI Service"

    @pytest.mark.asyncio
    async def test_degraded(self, test_client):
        with patch("artcritic.routes.health.gemini_service.health_check", new=AsyncMock(return_value=False)):
            response = await test_client.get("/health")
        assert response.json()["status"] == "degraded"

    @pytest.mark.asyncio
    async def test_request_id_echoed(self, test_client):
        with patch("artcritic.routes.health.gemini_service.health_check", new=AsyncMock(return_value=True)):
            response = await test_client.get("/health", headers={"X-Request-ID": "abc123"})
        assert response.headers["X-Request-ID"] == "abc123"
