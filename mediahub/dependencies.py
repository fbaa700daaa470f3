"""
FastAPI dependency providers.
Builds the storage adapters from settings and injects them into the
orchestrators, one set per request.
"""
import logging

from fastapi import Depends

from mediahub.config import settings
from mediahub.core.content import TextOrchestrator, TimelineOrchestrator
from mediahub.core.events import EventProxyOrchestrator
from mediahub.core.gallery_events import GalleryEventOrchestrator
from mediahub.core.images import ImageOrchestrator
from mediahub.database import AsyncSessionLocal
from mediahub.ports import Blobs, EventsSource, Store
from mediahub.services.cloudinary_blobs import CloudinaryBlobs
from mediahub.services.events_client import GrupyEventsClient
from mediahub.services.memory_blobs import MemoryBlobs
from mediahub.services.sql_store import SqlStore

logger = logging.getLogger(__name__)

# Shared so objects survive across requests when BLOB_BACKEND=memory
_memory_blobs = MemoryBlobs()


def get_store() -> Store:
    return SqlStore(AsyncSessionLocal)


def get_blobs() -> Blobs:
    if settings.BLOB_BACKEND == "memory":
        return _memory_blobs
    return CloudinaryBlobs()


def get_events_source() -> EventsSource:
    return GrupyEventsClient()


def get_text_orchestrator(store: Store = Depends(get_store)) -> TextOrchestrator:
    return TextOrchestrator(store)


def get_timeline_orchestrator(store: Store = Depends(get_store)) -> TimelineOrchestrator:
    return TimelineOrchestrator(store)


def get_image_orchestrator(
    store: Store = Depends(get_store),
    blobs: Blobs = Depends(get_blobs),
) -> ImageOrchestrator:
    return ImageOrchestrator(store, blobs)


def get_gallery_event_orchestrator(
    store: Store = Depends(get_store),
    images: ImageOrchestrator = Depends(get_image_orchestrator),
) -> GalleryEventOrchestrator:
    return GalleryEventOrchestrator(store, images)


def get_event_proxy(source: EventsSource = Depends(get_events_source)) -> EventProxyOrchestrator:
    return EventProxyOrchestrator(source)
