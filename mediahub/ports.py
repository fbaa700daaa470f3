"""
Storage ports consumed by the orchestrators.

Keep these small and framework-agnostic so tests can supply simple fakes.
Implementations must raise NotFound for missing records and BackendError
for any other failure.
"""
from __future__ import annotations

from typing import List, Protocol

from mediahub.schemas import Event, GalleryEventRecord, ImageRecord, TextRecord, TimelineEntry


class Store(Protocol):
    """Structured-record CRUD. Every call is atomic on its own; nothing spans calls."""

    # Texts
    async def create_text(self, text: TextRecord) -> TextRecord: ...
    async def update_text(self, text_id: str, patch: TextRecord) -> TextRecord: ...
    async def delete_text(self, text_id: str) -> None: ...
    async def get_text(self, text_id: str) -> TextRecord: ...
    async def get_text_by_slug(self, slug: str) -> TextRecord: ...
    async def list_texts(self) -> List[TextRecord]: ...
    async def list_texts_by_page_id(self, page_id: str) -> List[TextRecord]: ...
    async def list_texts_by_page_slug(self, page_slug: str) -> List[TextRecord]: ...

    # Images
    async def create_image(self, image: ImageRecord) -> ImageRecord: ...
    async def update_image(self, image_id: str, patch: ImageRecord) -> ImageRecord: ...
    async def delete_image(self, image_id: str) -> None: ...
    async def get_image(self, image_id: str) -> ImageRecord: ...
    async def list_images_by_slug(self, slug: str) -> List[ImageRecord]: ...
    async def list_images(self) -> List[ImageRecord]: ...

    # Gallery events
    async def create_gallery_event(self, event: GalleryEventRecord) -> GalleryEventRecord: ...
    async def get_gallery_event(self, event_id: str) -> GalleryEventRecord: ...
    async def list_gallery_events(self) -> List[GalleryEventRecord]: ...
    async def delete_gallery_event(self, event_id: str) -> None: ...

    # Timeline
    async def create_timeline_entry(self, entry: TimelineEntry) -> TimelineEntry: ...
    async def update_timeline_entry(self, entry_id: str, patch: TimelineEntry) -> TimelineEntry: ...
    async def delete_timeline_entry(self, entry_id: str) -> None: ...
    async def get_timeline_entry(self, entry_id: str) -> TimelineEntry: ...
    async def list_timeline_entries(self) -> List[TimelineEntry]: ...


class Blobs(Protocol):
    """Binary object storage."""

    async def put(self, key: str, data: bytes) -> str:
        """Store data under key and return its locator (public URL)."""
        ...

    async def delete(self, key: str) -> None:
        """Remove the object. Deleting a missing key succeeds."""
        ...

    async def signed_url(self, key: str) -> str: ...

    def key_from_url(self, locator: str) -> str:
        """Inverse of put: recover the key from a locator it returned."""
        ...


class EventsSource(Protocol):
    async def get_events(self, limit: int, order_by: str, desc: bool) -> List[Event]: ...


__all__ = ["Store", "Blobs", "EventsSource"]
