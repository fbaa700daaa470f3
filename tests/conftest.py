"""
Shared fixtures: in-memory Store and Blobs fakes with failure injection.
"""
import base64
from collections import Counter
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional, Tuple

import pytest

from mediahub.core.gallery_events import GalleryEventOrchestrator
from mediahub.core.images import ImageOrchestrator
from mediahub.errors import NotFound
from mediahub.models import new_id
from mediahub.schemas import GalleryEventRecord, ImageRecord, TextRecord, TimelineEntry
from mediahub.services.memory_blobs import MemoryBlobs
from mediahub.utils.rate_limit import limiter

limiter.enabled = False

JPEG_BYTES = b"\xff\xd8\xff\xe0" + b"fake-jpeg-body" * 8
JPEG_B64 = base64.b64encode(JPEG_BYTES).decode()


class FailureInjector:
    """Make chosen methods raise, either always or on their n-th call."""

    def __init__(self):
        self.calls: List[str] = []
        self._counts: Counter = Counter()
        self._failures: Dict[str, Tuple[Optional[int], Exception]] = {}

    def fail(self, method: str, exc: Optional[Exception] = None, on_call: Optional[int] = None) -> None:
        self._failures[method] = (on_call, exc or RuntimeError(f"{method} failed"))

    def _enter(self, method: str) -> None:
        self.calls.append(method)
        self._counts[method] += 1
        if method in self._failures:
            on_call, exc = self._failures[method]
            if on_call is None or on_call == self._counts[method]:
                raise exc


class FakeStore(FailureInjector):
    def __init__(self):
        super().__init__()
        self.texts: Dict[str, TextRecord] = {}
        self.images: Dict[str, ImageRecord] = {}
        self.gallery_events: Dict[str, GalleryEventRecord] = {}
        self.timeline: Dict[str, TimelineEntry] = {}

    # generic helpers

    def _create(self, table: dict, record):
        record = record.model_copy(update={"id": new_id()})
        table[record.id] = record
        return record

    def _get(self, table: dict, record_id: str, label: str):
        if record_id not in table:
            raise NotFound(f"{label} with id {record_id} not found")
        return table[record_id]

    def _patch(self, table: dict, record_id: str, patch, label: str):
        current = self._get(table, record_id, label)
        changes = {
            k: v for k, v in patch.model_dump(exclude={"id", "created_at"}).items()
            if v not in ("", None)
        }
        table[record_id] = current.model_copy(update=changes)
        return table[record_id]

    def _delete(self, table: dict, record_id: str, label: str):
        self._get(table, record_id, label)
        del table[record_id]

    # texts

    async def create_text(self, text):
        self._enter("create_text")
        return self._create(self.texts, text)

    async def update_text(self, text_id, patch):
        self._enter("update_text")
        return self._patch(self.texts, text_id, patch, "text")

    async def delete_text(self, text_id):
        self._enter("delete_text")
        self._delete(self.texts, text_id, "text")

    async def get_text(self, text_id):
        self._enter("get_text")
        return self._get(self.texts, text_id, "text")

    async def get_text_by_slug(self, slug):
        self._enter("get_text_by_slug")
        for text in self.texts.values():
            if text.slug == slug:
                return text
        raise NotFound(f"text with slug {slug} not found")

    async def list_texts(self):
        self._enter("list_texts")
        return list(self.texts.values())

    async def list_texts_by_page_id(self, page_id):
        self._enter("list_texts_by_page_id")
        return [t for t in self.texts.values() if t.page_id == page_id]

    async def list_texts_by_page_slug(self, page_slug):
        self._enter("list_texts_by_page_slug")
        return [t for t in self.texts.values() if t.page_slug == page_slug]

    # images

    async def create_image(self, image):
        self._enter("create_image")
        return self._create(self.images, image)

    async def update_image(self, image_id, patch):
        self._enter("update_image")
        return self._patch(self.images, image_id, patch, "image")

    async def delete_image(self, image_id):
        self._enter("delete_image")
        self._delete(self.images, image_id, "image")

    async def get_image(self, image_id):
        self._enter("get_image")
        return self._get(self.images, image_id, "image")

    async def list_images_by_slug(self, slug):
        self._enter("list_images_by_slug")
        return [i for i in self.images.values() if i.slug == slug]

    async def list_images(self):
        self._enter("list_images")
        return list(self.images.values())

    # gallery events

    async def create_gallery_event(self, event):
        self._enter("create_gallery_event")
        return self._create(self.gallery_events, event)

    async def get_gallery_event(self, event_id):
        self._enter("get_gallery_event")
        return self._get(self.gallery_events, event_id, "gallery event")

    async def list_gallery_events(self):
        self._enter("list_gallery_events")
        return sorted(self.gallery_events.values(), key=lambda e: e.date, reverse=True)

    async def delete_gallery_event(self, event_id):
        self._enter("delete_gallery_event")
        self._delete(self.gallery_events, event_id, "gallery event")

    # timeline

    async def create_timeline_entry(self, entry):
        self._enter("create_timeline_entry")
        return self._create(self.timeline, entry)

    async def update_timeline_entry(self, entry_id, patch):
        self._enter("update_timeline_entry")
        return self._patch(self.timeline, entry_id, patch, "timeline entry")

    async def delete_timeline_entry(self, entry_id):
        self._enter("delete_timeline_entry")
        self._delete(self.timeline, entry_id, "timeline entry")

    async def get_timeline_entry(self, entry_id):
        self._enter("get_timeline_entry")
        return self._get(self.timeline, entry_id, "timeline entry")

    async def list_timeline_entries(self):
        self._enter("list_timeline_entries")
        return sorted(self.timeline.values(), key=lambda e: e.date)


class RecordingBlobs(MemoryBlobs, FailureInjector):
    """MemoryBlobs that records every put/delete and can be told to fail."""

    def __init__(self):
        MemoryBlobs.__init__(self)
        FailureInjector.__init__(self)
        self.puts: List[str] = []
        self.deletes: List[str] = []

    async def put(self, key, data):
        self._enter("put")
        self.puts.append(key)
        return await super().put(key, data)

    async def delete(self, key):
        self._enter("delete")
        self.deletes.append(key)
        await super().delete(key)


class TickingClock:
    """Returns a time one second later on every call."""

    def __init__(self, start: Optional[datetime] = None):
        self.current = start or datetime(2025, 3, 14, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        self.current += timedelta(seconds=1)
        return self.current


@pytest.fixture
def store():
    return FakeStore()


@pytest.fixture
def blobs():
    return RecordingBlobs()


@pytest.fixture
def clock():
    return TickingClock()


@pytest.fixture
def images(store, blobs, clock):
    return ImageOrchestrator(store, blobs, max_bytes=1024, clock=clock)


@pytest.fixture
def gallery(store, images, clock):
    return GalleryEventOrchestrator(store, images, clock=clock)
