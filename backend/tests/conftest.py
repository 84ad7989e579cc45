"""
ArtCritic Backend — Test Configuration (conftest.py)
====================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Environment overrides are applied before any `artcritic` import so the
       settings singleton, the upload directory and the retry decorators all
       see test values.

Fixtures:
    ├── image_bytes_factory: real images of any size/format, made with Pillow
    ├── sample_png_bytes / sample_jpeg_bytes
    ├── sample_critique: a well-formed six-section critique
    ├── fake_vision_client: VisionClient returning sample_critique
    ├── mock_persistence: PersistenceClient stand-in (AsyncMock methods)
    ├── analysis_service: AnalysisService wired to the two fakes
    └── test_client: HTTPX AsyncClient bound to the FastAPI app
"""

import io
import os
import tempfile

# Must run before any artcritic import
os.environ["GEMINI_API_KEY"] = "test-key-not-real"
os.environ["UPLOADS_DIR"] = tempfile.mkdtemp(prefix="artcritic_test_")
os.environ["DATA_SERVICE_URL"] = "http://data.test/api"
os.environ["PERSISTENCE_RETRY_WAIT"] = "0"
os.environ["JWT_SECRET"] = "test-jwt-secret"
os.environ["LOG_LEVEL"] = "WARNING"

from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from PIL import Image

from artcritic.schemas.analysis import PersistenceOutcome, RawFeedback
from artcritic.services.analysis_service import AnalysisService
from artcritic.services.persistence_client import PersistenceClient
from artcritic.services.vision_base import VisionClient


SAMPLE_CRITIQUE = """**Technical Assessment**: Confident linework and clean edges throughout.

**Compositional Analysis**: The focal point sits on the left third, with a strong diagonal.

**Color Theory**: A warm palette with muted greens; the shadows lack temperature shifts.

**Style & Context**: This is a watercolor piece with loose brushwork.

**Specific Improvements**:
1. Vary the edge quality around the focal point.
2. Push the value contrast in the foreground.
3. Try cooler shadows to balance the warm light.

**Learning Resources**: Study the figure work of John Singer Sargent.
"""


@pytest.fixture
def image_bytes_factory():
    """
    Build real image bytes with Pillow.

    Usage:
        png = image_bytes_factory("PNG", (64, 32))
    """

    def make(fmt: str = "PNG", size=(32, 32), mode: str = "RGB") -> bytes:
        buffer = io.BytesIO()
        Image.new(mode, size).save(buffer, format=fmt)
        return buffer.getvalue()

    return make


@pytest.fixture
def sample_png_bytes(image_bytes_factory):
    return image_bytes_factory("PNG", (48, 32))


@pytest.fixture
def sample_jpeg_bytes(image_bytes_factory):
    return image_bytes_factory("JPEG", (48, 32))


@pytest.fixture
def sample_critique():
    return SAMPLE_CRITIQUE


@pytest.fixture
def fake_vision_client():
    """A VisionClient whose invoke() returns SAMPLE_CRITIQUE without network access."""
    client = MagicMock(spec=VisionClient)
    client.invoke = AsyncMock(
        return_value=RawFeedback(
            full_text=SAMPLE_CRITIQUE,
            model_identifier="gemini-test",
            token_usage=321,
        )
    )
    client.health_check = AsyncMock(return_value=True)
    return client


@pytest.fixture
def mock_persistence():
    """PersistenceClient stand-in; saves succeed unless a test says otherwise."""
    persistence = MagicMock(spec=PersistenceClient)
    persistence.try_save_analysis = AsyncMock(
        return_value=PersistenceOutcome.saved("artwork-1", "analysis-1")
    )
    return persistence


@pytest.fixture
def analysis_service(fake_vision_client, mock_persistence):
    return AnalysisService(vision_client=fake_vision_client, persistence=mock_persistence)


@pytest_asyncio.fixture
async def test_client():
    """
    HTTPX AsyncClient talking to the app through ASGITransport.

    Dependency overrides set by a test are cleared afterwards.
    """
    from artcritic.main import app

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
