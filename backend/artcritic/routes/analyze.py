"""
ArtCritic Backend — Analyze & Upload Route Handlers
====================================================

What:  POST /api/ai/analyze, POST /api/ai/analyze-url and POST /api/ai/upload.
How:   Routes stay thin: read the upload, store it through FileService, build
       an AnalysisRequest and hand it to AnalysisService.
Who:   Called by the artwork upload form of the frontend.

Request Flow (multipart analyze):
    1. Read the image into memory (bounded by the size check)
    2. FileService: extension → size → real format → store under /uploads
    3. AnalysisService.analyze() with the stored path
    4. On any failure after storing, the stored file is removed again
    5. Flatten the result into AnalysisResponse (temp ids when unsaved)

Authentication:
    The bearer token is optional; without a valid one the analysis is
    returned but not saved (is_temporary=true).
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile

from artcritic.dependencies import get_analysis_service, get_file_service, get_user_identity
from artcritic.exceptions import ValidationError
from artcritic.schemas.analysis import AnalysisRequest, ArtworkMetadata
from artcritic.schemas.api import (
    AnalysisResponse,
    AnalyzeUrlRequest,
    ErrorResponse,
    UploadResponse,
)
from artcritic.services.analysis_service import AnalysisService
from artcritic.services.file_service import FileService, StoredImage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/ai", tags=["Analysis"])

ERROR_RESPONSES = {
    400: {"description": "Invalid input", "model": ErrorResponse},
    500: {"description": "Image could not be stored or processed", "model": ErrorResponse},
    503: {"description": "AI service unavailable", "model": ErrorResponse},
}


def public_upload_url(request: Request, stored: StoredImage) -> str:
    """Absolute URL under the /uploads static mount."""
    return str(request.url_for("uploads", path=stored.stored_name))


async def _read_and_store(image: UploadFile, files: FileService) -> StoredImage:
    try:
        content = await image.read()
    finally:
        await image.close()

    logger.info(
        "Received image: filename=%s, size=%d bytes",
        image.filename or "unknown",
        len(content),
    )
    return await files.validate_and_store(
        filename=image.filename or "upload.jpg",
        content=content,
        content_length=image.size,
    )


@router.post(
    "/analyze",
    response_model=AnalysisResponse,
    responses=ERROR_RESPONSES,
    summary="Analyze an uploaded artwork",
)
async def analyze_artwork(
    request: Request,
    image: UploadFile = File(..., description="Artwork image (JPEG, PNG, GIF, WebP, BMP; max 10MB)"),
    analysis_type: str = Form("general"),
    text_prompt: Optional[str] = Form(None),
    language: str = Form("en"),
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    size: Optional[str] = Form(None),
    medium: Optional[str] = Form(None),
    style: Optional[str] = Form(None),
    user_identity: Optional[str] = Depends(get_user_identity),
    service: AnalysisService = Depends(get_analysis_service),
    files: FileService = Depends(get_file_service),
) -> AnalysisResponse:
    """
    Critique an uploaded artwork.

    The stored image stays available under /uploads and its URL is returned
    (and saved with the artwork record for signed-in users).
    """
    stored = await _read_and_store(image, files)
    image_url = public_upload_url(request, stored)

    # Blank form fields fall back to the ArtworkMetadata defaults
    form_fields = {
        "title": title,
        "description": description,
        "size": size,
        "medium": medium,
        "style": style,
    }
    artwork = ArtworkMetadata(
        filename=image.filename or stored.stored_name,
        image_url=image_url,
        file_size=stored.size,
        content_type=stored.content_type,
        **{name: value.strip() for name, value in form_fields.items() if value and value.strip()},
    )

    analysis_request = AnalysisRequest(
        image_reference=stored.absolute_path,
        analysis_category=analysis_type,
        free_text_prompt=text_prompt,
        language=language,
        user_identity=user_identity,
        artwork=artwork,
    )

    try:
        result = await service.analyze(analysis_request)
    except Exception:
        await files.cleanup_file(stored.absolute_path)
        raise

    return AnalysisResponse.from_result(result, filename=artwork.filename, image_url=image_url)


@router.post(
    "/analyze-url",
    response_model=AnalysisResponse,
    responses=ERROR_RESPONSES,
    summary="Analyze an artwork by URL and/or description",
)
async def analyze_artwork_url(
    body: AnalyzeUrlRequest,
    user_identity: Optional[str] = Depends(get_user_identity),
    service: AnalysisService = Depends(get_analysis_service),
) -> AnalysisResponse:
    """
    Critique a remote image, a text description, or both.

    Only http(s) URLs are accepted so a caller can never point the service
    at a file on the server.
    """
    image_url = (body.image_url or "").strip() or None
    if image_url and not image_url.lower().startswith(("http://", "https://")):
        raise ValidationError(
            message="image_url must be an http or https URL",
            field="image_url",
        )

    analysis_request = AnalysisRequest(
        image_reference=image_url,
        analysis_category=body.analysis_type,
        free_text_prompt=body.text_prompt,
        language=body.language,
        user_identity=user_identity,
        artwork=ArtworkMetadata(image_url=image_url) if image_url else None,
    )
    result = await service.analyze(analysis_request)
    return AnalysisResponse.from_result(result, image_url=image_url)


@router.post(
    "/upload",
    status_code=201,
    response_model=UploadResponse,
    responses={
        400: {"description": "Invalid file type or size", "model": ErrorResponse},
        500: {"description": "Image could not be stored", "model": ErrorResponse},
    },
    summary="Store an artwork image without analyzing it",
)
async def upload_artwork(
    request: Request,
    image: UploadFile = File(...),
    files: FileService = Depends(get_file_service),
) -> UploadResponse:
    stored = await _read_and_store(image, files)
    return UploadResponse(
        image_url=public_upload_url(request, stored),
        filename=stored.stored_name,
    )
