"""
Gallery event routes.
An event is created together with all of its images in a single request;
either every image and the event are stored, or none of them are.
"""
from fastapi import APIRouter, Depends, Request, status
from typing import List
import logging

from mediahub.core.gallery_events import GalleryEventOrchestrator
from mediahub.dependencies import get_gallery_event_orchestrator
from mediahub.schemas import GalleryEventCreateRequest, GalleryEventRecord
from mediahub.utils.jwt_auth import require_auth
from mediahub.utils.rate_limit import limiter, RATE_LIMITS

logger = logging.getLogger(__name__)

router = APIRouter(tags=["gallery events"])


@router.get("/gallery_events", response_model=List[GalleryEventRecord])
async def list_gallery_events(events: GalleryEventOrchestrator = Depends(get_gallery_event_orchestrator)):
    """List gallery events, most recent date first."""
    return await events.list()


@router.get("/gallery_events/{event_id}", response_model=GalleryEventRecord)
async def get_gallery_event(event_id: str, events: GalleryEventOrchestrator = Depends(get_gallery_event_orchestrator)):
    return await events.get(event_id)


@router.post("/gallery_events", response_model=GalleryEventRecord, status_code=status.HTTP_201_CREATED)
@limiter.limit(RATE_LIMITS["upload"])
async def create_gallery_event(
    request: Request,
    payload: GalleryEventCreateRequest,
    events: GalleryEventOrchestrator = Depends(get_gallery_event_orchestrator),
    claims: dict = Depends(require_auth),
):
    """
    Create a gallery event from base64-encoded images.

    Args:
        request: Incoming request (used by the rate limiter)
        payload: Event name, location, date and images in display order
        events: Gallery event orchestrator (injected by FastAPI dependency)
        claims: Token claims (injected by auth dependency)

    Returns:
        GalleryEventRecord: The stored event with its image URLs and ids

    Raises:
        ValidationError: 400 naming the missing field
        DecodeError: 400 with the index of the malformed image
        PayloadTooLarge: 413 with the index of the oversized image
        BackendError: 502 if storage fails; already stored images are removed
    """
    logger.info(f"Creating gallery event '{payload.name}' with {len(payload.images_base64)} image(s)")
    return await events.create(payload.name, payload.location, payload.date, payload.images_base64)


@router.delete("/gallery_events/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_gallery_event(
    event_id: str,
    events: GalleryEventOrchestrator = Depends(get_gallery_event_orchestrator),
    claims: dict = Depends(require_auth),
):
    """Delete the event record. Its images stay in place."""
    await events.delete(event_id)
    logger.info(f"Deleted gallery event {event_id}")
