"""
File Upload Utility - store profile images, company logos and Digital CVs.

Files are written under settings.upload_dir with a random name and served
back from /uploads/<name>.

Limits:
- Images (.jpg, .jpeg, .png, .gif): max_image_size_mb (default 5MB)
- Videos (video/* content type): max_video_size_mb (default 200MB)
"""

import os
import uuid
from typing import Optional

from fastapi import HTTPException, UploadFile
from loguru import logger

from harmony.core.config import get_settings

UPLOAD_URL_PREFIX = "/uploads/"
IMAGE_EXTENSIONS = {'.jpg', '.jpeg', '.png', '.gif'}
IMAGE_CONTENT_TYPES = {'image/jpeg', 'image/jpg', 'image/png', 'image/gif'}
CHUNK_SIZE = 1024 * 1024


def get_file_extension(filename: str) -> str:
    """Get lowercase file extension."""
    if '.' not in filename:
        return ''
    return '.' + filename.rsplit('.', 1)[1].lower()


def get_upload_dir() -> str:
    upload_dir = get_settings().upload_dir
    os.makedirs(upload_dir, exist_ok=True)
    return upload_dir


async def _write_limited(file: UploadFile, prefix: str, ext: str, max_mb: int) -> str:
    """Stream the upload to disk, aborting with 413 once it exceeds max_mb."""
    max_bytes = max_mb * 1024 * 1024
    filename = f"{prefix}-{uuid.uuid4().hex}{ext}"
    path = os.path.join(get_upload_dir(), filename)

    written = 0
    try:
        with open(path, "wb") as out:
            while True:
                chunk = await file.read(CHUNK_SIZE)
                if not chunk:
                    break
                written += len(chunk)
                if written > max_bytes:
                    break
                out.write(chunk)
    except Exception:
        # No partial files left behind
        if os.path.exists(path):
            os.remove(path)
        raise

    if written > max_bytes:
        os.remove(path)
        raise HTTPException(
            status_code=413,
            detail=f"File too large. Maximum size: {max_mb}MB"
        )
    if written == 0:
        os.remove(path)
        raise HTTPException(status_code=400, detail="Uploaded file is empty")

    logger.info(f"Stored upload {filename} ({written} bytes)")
    return UPLOAD_URL_PREFIX + filename


async def save_image(file: UploadFile, prefix: str = "image") -> str:
    """
    Validate and store an image upload.

    Returns:
        Public URL of the stored file (/uploads/...)

    Raises:
        HTTPException 400 for unsupported types, 413 when too large
    """
    if not file.filename:
        raise HTTPException(status_code=400, detail="No filename provided")

    ext = get_file_extension(file.filename)
    if ext not in IMAGE_EXTENSIONS or (file.content_type and file.content_type not in IMAGE_CONTENT_TYPES):
        raise HTTPException(
            status_code=400,
            detail="Only image files are allowed (jpeg, jpg, png, gif)"
        )

    return await _write_limited(file, prefix, ext, get_settings().max_image_size_mb)


async def save_video(file: UploadFile, prefix: str = "video") -> str:
    """Validate and store a video upload. Any video/* content type is accepted."""
    if not file.content_type or not file.content_type.startswith("video/"):
        raise HTTPException(status_code=400, detail="Only video files are allowed")

    ext = get_file_extension(file.filename or "") or ".mp4"
    return await _write_limited(file, prefix, ext, get_settings().max_video_size_mb)


def url_to_path(url: Optional[str]) -> Optional[str]:
    """Map a /uploads/ URL back to its file path; None for external URLs."""
    if not url or not url.startswith(UPLOAD_URL_PREFIX):
        return None
    name = os.path.basename(url[len(UPLOAD_URL_PREFIX):])
    return os.path.join(get_settings().upload_dir, name)


def delete_upload(url: Optional[str]) -> bool:
    """Remove a stored upload. Missing files are logged, not raised."""
    path = url_to_path(url)
    if path is None:
        return False
    try:
        os.remove(path)
        return True
    except FileNotFoundError:
        logger.warning(f"Upload already missing on disk: {path}")
        return False
