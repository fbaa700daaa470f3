"""
Image routes.
Binary payloads arrive base64-encoded in JSON bodies and are handed to the
image orchestrator, which owns the upload/persist/compensate sequence.
"""
from datetime import date, datetime, time, timezone
from fastapi import APIRouter, Depends, Request, status
from typing import List, Optional
import logging

from mediahub.config import settings
from mediahub.core.gallery_events import decode_image
from mediahub.core.images import ImageOrchestrator
from mediahub.dependencies import get_image_orchestrator
from mediahub.schemas import ImageCreateRequest, ImageRecord, ImageUpdateRequest
from mediahub.utils.image_converter import prepare_upload
from mediahub.utils.jwt_auth import require_auth
from mediahub.utils.rate_limit import limiter, RATE_LIMITS

logger = logging.getLogger(__name__)

router = APIRouter(tags=["images"])


def _decode_upload(encoded: str, images: ImageOrchestrator) -> bytes:
    # The size limit applies to the bytes the client sent, before any re-encoding
    data = decode_image(encoded)
    images.check_size(data)
    return prepare_upload(data, settings.CONVERT_UPLOADS_TO_WEBP)


def _as_datetime(value: Optional[date]) -> Optional[datetime]:
    if value is None:
        return None
    return datetime.combine(value, time.min, tzinfo=timezone.utc)


@router.get("/images", response_model=List[ImageRecord])
async def list_images(images: ImageOrchestrator = Depends(get_image_orchestrator)):
    return await images.list()


@router.get("/images/slug/{slug}", response_model=List[ImageRecord])
async def list_images_by_slug(slug: str, images: ImageOrchestrator = Depends(get_image_orchestrator)):
    """List every image sharing a slug (gallery event images share their event's slug)."""
    return await images.list_by_slug(slug)


@router.get("/images/{image_id}", response_model=ImageRecord)
async def get_image(image_id: str, images: ImageOrchestrator = Depends(get_image_orchestrator)):
    return await images.get(image_id)


@router.get("/images/{image_id}/signed_url")
async def get_image_signed_url(image_id: str, images: ImageOrchestrator = Depends(get_image_orchestrator)):
    """
    Get a temporary URL for an image's stored object.

    Returns:
        dict: {"id": image_id, "url": signed URL}

    Raises:
        NotFound: 404 if the image does not exist or has no stored object
    """
    return {"id": image_id, "url": await images.signed_url(image_id)}


@router.post("/images", response_model=ImageRecord, status_code=status.HTTP_201_CREATED)
@limiter.limit(RATE_LIMITS["upload"])
async def create_image(
    request: Request,
    payload: ImageCreateRequest,
    images: ImageOrchestrator = Depends(get_image_orchestrator),
    claims: dict = Depends(require_auth),
):
    """
    Upload a single image and store its metadata.

    Args:
        request: Incoming request (used by the rate limiter)
        payload: Image metadata with base64 data
        images: Image orchestrator (injected by FastAPI dependency)
        claims: Token claims (injected by auth dependency)

    Returns:
        ImageRecord: The stored image with its object_url

    Raises:
        DecodeError: 400 if data is not valid base64
        PayloadTooLarge: 413 if the decoded image exceeds MAX_IMAGE_BYTES
        BackendError: 502 if the upload or the metadata write fails
    """
    data = _decode_upload(payload.data, images)

    meta = ImageRecord(
        slug=payload.slug or payload.name,
        name=payload.name,
        text=payload.text,
        date=_as_datetime(payload.date),
        location=payload.location,
        last_updated_by=claims.get("sub", ""),
    )
    return await images.upload(meta, data)


@router.put("/images/{image_id}", response_model=ImageRecord)
@limiter.limit(RATE_LIMITS["upload"])
async def update_image(
    request: Request,
    image_id: str,
    payload: ImageUpdateRequest,
    images: ImageOrchestrator = Depends(get_image_orchestrator),
    claims: dict = Depends(require_auth),
):
    """
    Patch image metadata. When data is present the stored binary is
    replaced and the previous object removed.
    """
    data = b""
    if payload.data:
        data = _decode_upload(payload.data, images)

    patch = ImageRecord(
        slug=payload.slug,
        name=payload.name,
        text=payload.text,
        date=_as_datetime(payload.date),
        location=payload.location,
        last_updated_by=claims.get("sub", ""),
    )
    updated = await images.update(image_id, patch, data)
    logger.info(f"Updated image {image_id} (binary replaced: {bool(data)})")
    return updated


@router.delete("/images/{image_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_image(
    image_id: str,
    images: ImageOrchestrator = Depends(get_image_orchestrator),
    claims: dict = Depends(require_auth),
):
    """Delete the image record, then its stored object."""
    await images.delete(image_id)
