"""
ArtCritic Backend — Upload Storage Service
===========================================

What:  Validates uploaded artwork images and stores them for analysis and for
       serving back under /uploads.
How:   Extension check → size check → content check with Pillow → write under
       a generated name with aiofiles.
Who:   Called by the upload/analyze routes before the analysis service runs.

Security Model:
    1. Extension check:  fast rejection of obviously wrong files
    2. Size check:       bounded memory use (10MB default)
    3. Content check:    Pillow must recognize the bytes as one of the allowed
                         formats, so a renamed PDF or script is rejected
    4. Generated name:   no user input reaches the file system path
"""

import io
import logging
import os
import time
import uuid
from pathlib import Path
from typing import NamedTuple, Optional

import aiofiles
from PIL import Image, UnidentifiedImageError

from artcritic.config import settings
from artcritic.exceptions import FileStorageError, ValidationError

logger = logging.getLogger(__name__)

# Pillow format name → MIME type of the formats the vision model accepts
ALLOWED_FORMATS = {
    "JPEG": "image/jpeg",
    "PNG": "image/png",
    "GIF": "image/gif",
    "WEBP": "image/webp",
    "BMP": "image/bmp",
}

ALLOWED_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".webp", ".bmp"}


class StoredImage(NamedTuple):
    absolute_path: str
    stored_name: str
    content_type: str
    size: int


class FileService:
    """
    Manages validation and storage of uploaded artwork images.

    Layout:
        temp/uploads/
        ├── 1718000000000-3f9c2a1b7d4e.jpg
        └── 1718000004567-a81c09e2f3b6.png

    The flat layout matches the /uploads static mount, so the stored name is
    also the public path segment.
    """

    def __init__(self, uploads_dir: Optional[str] = None):
        """
        Args:
            uploads_dir: Override the storage directory (used in tests).
                         If None, uses settings.uploads_dir.
        """
        self.uploads_dir = Path(uploads_dir or settings.uploads_dir).resolve()
        self.uploads_dir.mkdir(parents=True, exist_ok=True)
        logger.info("FileService initialized with uploads_dir=%s", self.uploads_dir)

    def validate_extension(self, filename: str) -> str:
        """Returns the normalized (lowercase) extension or raises ValidationError."""
        ext = Path(filename).suffix.lower()
        if ext not in ALLOWED_EXTENSIONS:
            raise ValidationError(
                message=(
                    f"File type '{ext or 'none'}' is not supported. "
                    "Supported formats: JPEG, PNG, GIF, WebP, BMP"
                ),
                field="image",
                context={"extension": ext, "allowed": sorted(ALLOWED_EXTENSIONS)},
            )
        return ext

    def validate_size(self, content_length: Optional[int], actual_size: int) -> None:
        """
        Reject files above the configured maximum.

        The declared Content-Length is checked as well as the real size
        because some clients misreport it.
        """
        max_mb = settings.max_file_size / (1024 * 1024)

        if actual_size == 0:
            raise ValidationError(message="No image file provided", field="image")

        if content_length and content_length > settings.max_file_size:
            raise ValidationError(
                message=f"File size must be less than {max_mb:.0f}MB",
                field="image",
                context={"max_size_mb": max_mb, "reported_size": content_length},
            )

        if actual_size > settings.max_file_size:
            raise ValidationError(
                message=f"File size ({actual_size / (1024 * 1024):.1f}MB) must be less than {max_mb:.0f}MB",
                field="image",
                context={"max_size_mb": max_mb, "actual_size": actual_size},
            )

    def detect_content_type(self, content: bytes) -> str:
        """
        Identify the real image format from the bytes themselves.

        Returns:
            MIME type, e.g. "image/png"

        Raises:
            ValidationError: not an image, or an image format we do not accept
        """
        try:
            with Image.open(io.BytesIO(content)) as image:
                image_format = image.format
                image.verify()
        except Image.DecompressionBombError as e:
            raise ValidationError(
                message="The uploaded image dimensions are too large.",
                field="image",
                context={"error_type": type(e).__name__},
            )
        except (UnidentifiedImageError, OSError, SyntaxError) as e:
            raise ValidationError(
                message="The uploaded file is not a valid image.",
                field="image",
                context={"error_type": type(e).__name__},
            )

        mime_type = ALLOWED_FORMATS.get(image_format or "")
        if mime_type is None:
            raise ValidationError(
                message=(
                    f"Image format '{image_format}' is not supported. "
                    "Supported formats: JPEG, PNG, GIF, WebP, BMP"
                ),
                field="image",
                context={"detected_format": image_format},
            )
        return mime_type

    def _generate_name(self, extension: str) -> str:
        return f"{int(time.time() * 1000)}-{uuid.uuid4().hex[:12]}{extension}"

    async def store_file(self, content: bytes, extension: str) -> Path:
        """
        Write validated bytes under a generated name.

        Raises:
            FileStorageError: directory missing/unwritable, disk full, etc.
        """
        path = self.uploads_dir / self._generate_name(extension)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(path, "wb") as f:
                await f.write(content)
        except OSError as e:
            logger.error("Failed to store file at %s: %s", path, str(e))
            raise FileStorageError(
                message="Failed to save uploaded image. Please try again.",
                context={"os_error": str(e)},
            )

        logger.info("File stored: %s (%d bytes)", path.name, len(content))
        return path

    async def cleanup_file(self, file_path: str) -> None:
        """
        Best-effort removal of a stored upload.

        Failures are logged, not raised: a leftover file is not a user-facing error.
        """
        try:
            path = Path(file_path)
            if path.exists():
                os.remove(path)
                logger.info("Cleaned up file: %s", path.name)
        except OSError as e:
            logger.warning("Failed to clean up file %s: %s", file_path, str(e))

    async def validate_and_store(
        self,
        filename: str,
        content: bytes,
        content_length: Optional[int] = None,
    ) -> StoredImage:
        """
        Full validation and storage pipeline, cheapest check first.

        Returns:
            StoredImage with absolute path, stored name, detected MIME type and size
        """
        ext = self.validate_extension(filename)
        self.validate_size(content_length, len(content))
        content_type = self.detect_content_type(content)
        path = await self.store_file(content, ext)
        return StoredImage(
            absolute_path=str(path),
            stored_name=path.name,
            content_type=content_type,
            size=len(content),
        )


file_service = FileService()
