"""
Storage Service - product images in Supabase Storage

Author: TM3
Date: 2025-10-17
"""
import logging
import os
import uuid

from app.core.config import settings
from app.core.database import get_supabase

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_TYPES = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/webp": ".webp",
    "image/gif": ".gif",
}
MAX_IMAGE_BYTES = 5 * 1024 * 1024


def build_object_path(filename: str, content_type: str) -> str:
    """products/<uuid><ext>, keeping the original extension when it is known"""
    ext = os.path.splitext(filename or "")[1].lower()
    if ext not in ALLOWED_IMAGE_TYPES.values():
        ext = ALLOWED_IMAGE_TYPES[content_type]
    return f"products/{uuid.uuid4().hex}{ext}"


def upload_product_image(filename: str, content_type: str, data: bytes, client=None) -> str:
    """
    Upload an image and return its public URL

    Raises:
        ValueError: unsupported type, empty or too large
    """
    if content_type not in ALLOWED_IMAGE_TYPES:
        raise ValueError(f"Unsupported image type: {content_type}")
    if not data:
        raise ValueError("Empty file")
    if len(data) > MAX_IMAGE_BYTES:
        raise ValueError("Image exceeds 5 MB")

    client = client or get_supabase()
    bucket = client.storage.from_(settings.SUPABASE_STORAGE_BUCKET)
    path = build_object_path(filename, content_type)

    bucket.upload(path, data, {"content-type": content_type})
    public_url = bucket.get_public_url(path)
    logger.info(f"Uploaded product image {path} ({len(data)} bytes)")
    return public_url
