"""
Text and timeline orchestration. Single-backend: stamp audit fields,
normalize slugs and delegate to the Store.
"""
from datetime import datetime
from typing import Callable, List

from mediahub.core.images import utcnow
from mediahub.core.keys import normalize
from mediahub.ports import Store
from mediahub.schemas import TextRecord, TimelineEntry


class TextOrchestrator:
    def __init__(self, store: Store, clock: Callable[[], datetime] = utcnow):
        self._store = store
        self._clock = clock

    async def get_by_slug(self, slug: str) -> TextRecord:
        return await self._store.get_text_by_slug(normalize(slug))

    async def get(self, text_id: str) -> TextRecord:
        return await self._store.get_text(text_id)

    async def list(self) -> List[TextRecord]:
        return await self._store.list_texts()

    async def list_by_page_id(self, page_id: str) -> List[TextRecord]:
        return await self._store.list_texts_by_page_id(page_id)

    async def list_by_page_slug(self, page_slug: str) -> List[TextRecord]:
        return await self._store.list_texts_by_page_slug(normalize(page_slug))

    async def create(self, text: TextRecord) -> TextRecord:
        now = self._clock()
        return await self._store.create_text(text.model_copy(update={
            "id": "",
            "slug": normalize(text.slug),
            "page_slug": normalize(text.page_slug),
            "created_at": now,
            "updated_at": now,
        }))

    async def update(self, text_id: str, patch: TextRecord) -> TextRecord:
        """Merge non-empty fields of patch into the stored text; updated_at is always refreshed."""
        return await self._store.update_text(text_id, patch.model_copy(update={
            "slug": normalize(patch.slug),
            "page_slug": normalize(patch.page_slug),
            "updated_at": self._clock(),
        }))

    async def delete(self, text_id: str) -> None:
        await self._store.delete_text(text_id)


class TimelineOrchestrator:
    def __init__(self, store: Store, clock: Callable[[], datetime] = utcnow):
        self._store = store
        self._clock = clock

    async def get(self, entry_id: str) -> TimelineEntry:
        return await self._store.get_timeline_entry(entry_id)

    async def list(self) -> List[TimelineEntry]:
        """Timeline entries in chronological order."""
        return await self._store.list_timeline_entries()

    async def create(self, entry: TimelineEntry) -> TimelineEntry:
        now = self._clock()
        return await self._store.create_timeline_entry(
            entry.model_copy(update={"id": "", "created_at": now, "updated_at": now})
        )

    async def update(self, entry_id: str, patch: TimelineEntry) -> TimelineEntry:
        return await self._store.update_timeline_entry(
            entry_id, patch.model_copy(update={"updated_at": self._clock()})
        )

    async def delete(self, entry_id: str) -> None:
        await self._store.delete_timeline_entry(entry_id)
