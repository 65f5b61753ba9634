"""Image upload storage: validation and writing to the local upload directory."""

import logging
import os
import re
import time
import uuid
from pathlib import Path

import aiofiles
import aiofiles.os
from fastapi import UploadFile

from familyhub.config import settings
from familyhub.core.exception import BadRequestException

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_TYPES = {"image/png", "image/jpeg", "image/jpg", "image/webp", "image/gif"}


def get_upload_dir() -> Path:
    path = Path(settings.UPLOAD_DIR)
    path.mkdir(parents=True, exist_ok=True)
    return path


def build_filename(original_name: str) -> str:
    """``<timestamp>_<random hex>_<base><ext>`` with whitespace in the base collapsed."""
    base, ext = os.path.splitext(os.path.basename(original_name or "upload"))
    base = re.sub(r"\s+", "_", base) or "upload"
    return f"{int(time.time() * 1000)}_{uuid.uuid4().hex[:12]}_{base}{ext.lower()}"


def validate_image(file: UploadFile, size: int) -> None:
    if file.content_type not in ALLOWED_IMAGE_TYPES:
        raise BadRequestException(
            "Only image files are allowed (png, jpg, jpeg, webp, gif)."
        )
    if size > settings.MAX_UPLOAD_SIZE:
        limit_mb = settings.MAX_UPLOAD_SIZE // (1024 * 1024)
        raise BadRequestException(f"File too large. Maximum size is {limit_mb}MB.")


async def save_image(file: UploadFile) -> str:
    """
    Validate and store an uploaded image.

    Args:
        file: The uploaded file

    Returns:
        Public URL path the image is served from, e.g. ``/uploads/<name>``
    """
    # One byte past the limit is enough to know it is too big
    content = await file.read(settings.MAX_UPLOAD_SIZE + 1)
    validate_image(file, len(content))

    filename = build_filename(file.filename or "")
    file_path = get_upload_dir() / filename

    async with aiofiles.open(file_path, "wb") as f:
        await f.write(content)

    logger.info(f"Stored upload {filename} ({len(content)} bytes)")
    return f"{settings.UPLOAD_URL_PATH}/{filename}"


async def discard_image(url: str) -> None:
    """Remove a stored upload, e.g. when the record that would use it was not saved."""
    file_path = get_upload_dir() / url.rsplit("/", 1)[-1]
    if await aiofiles.os.path.exists(file_path):
        await aiofiles.os.remove(file_path)
        logger.info(f"Discarded upload {file_path.name}")
