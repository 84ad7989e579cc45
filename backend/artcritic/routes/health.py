"""
ArtCritic Backend — Health Check Route
=======================================

What:  GET /health for container probes and monitoring.
How:   Reports Gemini reachability via a model listing (no generation quota
       spent) plus version and uptime.

Status levels:
    healthy:   Gemini configured and reachable
    degraded:  Gemini key missing or API unreachable; uploads and history
               still work, analyses will fail with 503
"""

import logging
import time

from fastapi import APIRouter

from artcritic import __version__
from artcritic.config import settings
from artcritic.schemas.api import HealthResponse
from artcritic.services.gemini_service import gemini_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check() -> HealthResponse:
    if not settings.gemini_api_key:
        gemini_status = "not_configured"
    elif await gemini_service.health_check():
        gemini_status = "available"
    else:
        gemini_status = "unavailable"

    return HealthResponse(
        status="healthy" if gemini_status == "available" else "degraded",
        version=__version__,
        gemini=gemini_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
