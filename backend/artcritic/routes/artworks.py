"""
ArtCritic Backend — Artwork & Analysis History Routes
======================================================

What:  Read-only views of records kept by the artwork data service.
How:   Each route is a single PersistenceClient call; records are passed
       through as the data service returns them.

Errors:
    Data service unreachable or failing → 502 (PersistenceError)
    Unknown analysis id                 → 404 (NotFoundError)
"""

from fastapi import APIRouter, Depends, Query

from artcritic.dependencies import get_persistence_client
from artcritic.schemas.api import ErrorResponse, RecordListResponse
from artcritic.services.persistence_client import PersistenceClient

router = APIRouter(prefix="/api/ai", tags=["History"])

UPSTREAM_ERROR = {502: {"description": "Data service unavailable", "model": ErrorResponse}}


@router.get(
    "/artwork/{artwork_id}/analyses",
    response_model=RecordListResponse,
    responses=UPSTREAM_ERROR,
    summary="All analyses of one artwork",
)
async def list_artwork_analyses(
    artwork_id: str,
    persistence: PersistenceClient = Depends(get_persistence_client),
) -> RecordListResponse:
    items = await persistence.fetch_analyses_for_artwork(artwork_id)
    return RecordListResponse(items=items, count=len(items))


@router.get(
    "/user/{user_id}/artworks",
    response_model=RecordListResponse,
    responses=UPSTREAM_ERROR,
    summary="All artworks of one user",
)
async def list_user_artworks(
    user_id: str,
    persistence: PersistenceClient = Depends(get_persistence_client),
) -> RecordListResponse:
    items = await persistence.fetch_artworks_for_user(user_id)
    return RecordListResponse(items=items, count=len(items))


@router.get(
    "/user/{user_id}/analyses",
    response_model=RecordListResponse,
    responses=UPSTREAM_ERROR,
    summary="Most recent analyses of one user",
)
async def list_recent_analyses(
    user_id: str,
    limit: int = Query(default=10, ge=1, le=100, description="Maximum number of analyses"),
    persistence: PersistenceClient = Depends(get_persistence_client),
) -> RecordListResponse:
    items = await persistence.fetch_recent_analyses(user_id, limit=limit)
    return RecordListResponse(items=items, count=len(items))


@router.get(
    "/analyses/{analysis_id}",
    responses={
        404: {"description": "Analysis not found", "model": ErrorResponse},
        **UPSTREAM_ERROR,
    },
    summary="One analysis by id",
)
async def get_analysis(
    analysis_id: str,
    persistence: PersistenceClient = Depends(get_persistence_client),
) -> dict:
    return await persistence.fetch_analysis(analysis_id)
