"""
Cloudinary implementation of the Blobs port.
Provides upload, idempotent deletion and signed delivery URLs.

Calls are attempted exactly once; callers decide what a failure means.
"""
import asyncio
import logging
import posixpath
import re
import time
from typing import Optional

import cloudinary
import cloudinary.uploader
import cloudinary.utils
from cloudinary.exceptions import Error as CloudinaryError

from mediahub.config import settings
from mediahub.errors import BackendError

logger = logging.getLogger(__name__)

# https://res.cloudinary.com/{cloud}/image/upload[/s--sig--][/v{version}]/{public_id}.{format}
_PUBLIC_ID_PATTERN = re.compile(r"/image/upload(?:/s--[^/]+--)?(?:/v\d+)?/(.+)$")

_DELETE_OK_RESULTS = ("ok", "not found")

_IMAGE_EXTENSIONS = (".jpg", ".jpeg", ".png", ".webp", ".gif")


def configure_cloudinary() -> None:
    """Configure the Cloudinary SDK with credentials from settings."""
    cloudinary.config(
        cloud_name=settings.CLOUDINARY_CLOUD_NAME,
        api_key=settings.CLOUDINARY_API_KEY,
        api_secret=settings.CLOUDINARY_API_SECRET,
        secure=True  # Always use HTTPS for secure URLs
    )


def validate_cloudinary_config() -> bool:
    """
    Validate that Cloudinary is properly configured.

    Returns:
        bool: True if Cloudinary is configured, False otherwise
    """
    if not settings.CLOUDINARY_CLOUD_NAME:
        logger.warning("CLOUDINARY_CLOUD_NAME not configured")
        return False
    if not settings.CLOUDINARY_API_KEY:
        logger.warning("CLOUDINARY_API_KEY not configured")
        return False
    if not settings.CLOUDINARY_API_SECRET:
        logger.warning("CLOUDINARY_API_SECRET not configured")
        return False

    return True


def public_id_for(key: str) -> str:
    """Cloudinary public ids carry no file extension; it is appended as the delivery format."""
    root, ext = posixpath.splitext(key)
    # Dots inside slugs (e.g. "python-3.12") are part of the id
    return root if ext.lower() in _IMAGE_EXTENSIONS else key


def extract_public_id_from_url(cloudinary_url: str) -> str:
    """
    Extract Cloudinary public_id from URL.

    Cloudinary URLs typically look like:
    https://res.cloudinary.com/{cloud_name}/image/upload/v{version}/{public_id}.{format}

    Raises:
        ValueError: If URL format is invalid
    """
    match = _PUBLIC_ID_PATTERN.search(cloudinary_url.split("?", 1)[0])
    if not match:
        raise ValueError(f"Invalid Cloudinary URL format: {cloudinary_url}")
    return public_id_for(match.group(1))


class CloudinaryBlobs:
    """Blobs port backed by Cloudinary image uploads."""

    def __init__(self, sign_ttl_seconds: int = 3600):
        self._sign_ttl_seconds = sign_ttl_seconds

    async def put(self, key: str, data: bytes) -> str:
        """
        Upload image bytes under key.

        Returns:
            str: Secure HTTPS URL of the uploaded image

        Raises:
            BackendError: If Cloudinary rejects the upload
        """
        public_id = public_id_for(key)
        try:
            result = await asyncio.to_thread(
                cloudinary.uploader.upload,
                data,
                public_id=public_id,
                overwrite=True,
                resource_type="image",
                # Limit max dimensions, maintain aspect ratio
                transformation=[{"width": 1920, "height": 1080, "crop": "limit"}],
            )
        except CloudinaryError as e:
            logger.error(f"Cloudinary upload failed for {public_id}: {str(e)}")
            raise BackendError(f"upload failed: {str(e)}") from e

        logger.info(f"Successfully uploaded image: {result['public_id']} ({result.get('bytes', len(data)):,} bytes)")
        return result["secure_url"]

    async def delete(self, key: str) -> None:
        """Delete image with CDN invalidation. A missing image counts as deleted."""
        public_id = public_id_for(key)
        try:
            result = await asyncio.to_thread(
                cloudinary.uploader.destroy,
                public_id,
                invalidate=True,  # Invalidate CDN cache
                resource_type="image",
            )
        except CloudinaryError as e:
            logger.error(f"Cloudinary delete failed for {public_id}: {str(e)}")
            raise BackendError(f"delete failed: {str(e)}") from e

        outcome = result.get("result")
        if outcome not in _DELETE_OK_RESULTS:
            raise BackendError(f"unexpected Cloudinary delete result for {public_id}: {result}")

        logger.info(f"Deleted image from Cloudinary: {public_id} (result: {outcome})")

    async def signed_url(self, key: str, expires_in: Optional[int] = None) -> str:
        """Build a signed, expiring delivery URL for key."""
        url, _ = cloudinary.utils.cloudinary_url(
            public_id_for(key),
            resource_type="image",
            type="upload",
            sign_url=True,
            secure=True,
            expires_at=int(time.time()) + (expires_in or self._sign_ttl_seconds),
        )
        return url

    def key_from_url(self, locator: str) -> str:
        try:
            return extract_public_id_from_url(locator)
        except ValueError as e:
            logger.warning(f"Failed to extract public_id from URL: {str(e)}")
            return ""
