"""
ArtCritic Backend — Image Preprocessing
========================================

What:  Prepares an uploaded artwork for the vision model.
How:   Pillow opens the stored file; images larger than max_image_dimension on
       either side are shrunk to fit (aspect ratio kept, never enlarged), and
       anything that is not already a small JPEG is re-encoded as JPEG.
Why:   Keeps request payloads and token usage bounded; the model sees the
       same detail level regardless of the original camera resolution.

The work is CPU-bound, so callers on the event loop go through
preprocess_image_async(), which runs it in a worker thread.
"""

import asyncio
import io
import logging
from pathlib import Path
from typing import Optional, Union

from PIL import Image, UnidentifiedImageError

from artcritic.config import settings
from artcritic.exceptions import FileStorageError

logger = logging.getLogger(__name__)


def preprocess_image(
    image_path: Union[str, Path],
    max_dimension: Optional[int] = None,
    quality: Optional[int] = None,
) -> bytes:
    """
    Return JPEG bytes ready to be sent inline to the vision model.

    Small JPEGs are returned unchanged (no generational loss).

    Raises:
        FileStorageError: the file is missing or is not a decodable image
    """
    max_dimension = max_dimension or settings.max_image_dimension
    quality = quality or settings.jpeg_quality
    path = Path(image_path)

    try:
        original = path.read_bytes()
        with Image.open(io.BytesIO(original)) as image:
            width, height = image.size
            too_large = width > max_dimension or height > max_dimension

            if not too_large and image.format == "JPEG":
                return original

            if too_large:
                image.thumbnail((max_dimension, max_dimension), Image.Resampling.LANCZOS)

            # JPEG has no alpha channel or palette
            if image.mode != "RGB":
                image = image.convert("RGB")

            buffer = io.BytesIO()
            image.save(buffer, format="JPEG", quality=quality)
    except (OSError, UnidentifiedImageError, Image.DecompressionBombError) as e:
        logger.error("Image preprocessing failed for %s: %s", path.name, str(e))
        raise FileStorageError(
            message="Failed to process image",
            context={"file": path.name, "error_type": type(e).__name__},
        )

    processed = buffer.getvalue()
    logger.info(
        "Preprocessed %s: %dx%d → %d bytes JPEG",
        path.name,
        width,
        height,
        len(processed),
    )
    return processed


async def preprocess_image_async(image_path: Union[str, Path]) -> bytes:
    return await asyncio.to_thread(preprocess_image, image_path)
