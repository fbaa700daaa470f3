"""
SQLAlchemy implementation of the Store port.

Every operation runs in its own session and commits before returning,
so each call is atomic on its own and nothing spans calls. Updates are
merge patches: empty strings and None leave the stored value untouched,
updated_at is always written.
"""
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncIterator, Iterable, List, Type, TypeVar

from pydantic import BaseModel
from sqlalchemy import select, delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
import logging

from mediahub.errors import BackendError, NotFound
from mediahub.models import GalleryEvent, ImageMeta, TextContent, TimelineEntryRow, new_id
from mediahub.schemas import GalleryEventRecord, ImageRecord, TextRecord, TimelineEntry

logger = logging.getLogger(__name__)

R = TypeVar("R", bound=BaseModel)

TEXT_FIELDS = ("slug", "content", "page_id", "page_slug", "created_at", "updated_at", "last_updated_by")
TEXT_PATCH_FIELDS = ("slug", "content", "page_id", "page_slug", "last_updated_by")

IMAGE_FIELDS = ("slug", "object_url", "name", "text", "date", "location", "created_at", "updated_at", "last_updated_by")
IMAGE_PATCH_FIELDS = ("slug", "object_url", "name", "text", "date", "location", "last_updated_by")

TIMELINE_FIELDS = ("name", "text", "location", "date", "created_at", "updated_at", "last_updated_by")
TIMELINE_PATCH_FIELDS = ("name", "text", "location", "date", "last_updated_by")

GALLERY_EVENT_FIELDS = ("name", "location", "date", "image_urls", "image_ids", "created_at", "updated_at")


class SqlStore:
    """Store port backed by an async SQLAlchemy session factory."""

    def __init__(self, session_factory: async_sessionmaker):
        self._session_factory = session_factory

    # =======================
    # TEXT OPERATIONS
    # =======================

    async def create_text(self, text: TextRecord) -> TextRecord:
        return await self._create(TextContent, TextRecord, text, TEXT_FIELDS)

    async def update_text(self, text_id: str, patch: TextRecord) -> TextRecord:
        return await self._patch(TextContent, TextRecord, text_id, patch, TEXT_PATCH_FIELDS, "text")

    async def delete_text(self, text_id: str) -> None:
        await self._delete(TextContent, text_id, "text")

    async def get_text(self, text_id: str) -> TextRecord:
        return await self._get(TextContent, TextRecord, text_id, "text")

    async def get_text_by_slug(self, slug: str) -> TextRecord:
        async with self._session("fetching text") as session:
            result = await session.execute(select(TextContent).where(TextContent.slug == slug).limit(1))
            row = result.scalar_one_or_none()
            if row is None:
                raise NotFound(f"text with slug {slug} not found")
            return TextRecord.model_validate(row)

    async def list_texts(self) -> List[TextRecord]:
        return await self._list(TextContent, TextRecord, order_by=TextContent.created_at.asc())

    async def list_texts_by_page_id(self, page_id: str) -> List[TextRecord]:
        return await self._list(
            TextContent, TextRecord, TextContent.page_id == page_id, order_by=TextContent.created_at.asc()
        )

    async def list_texts_by_page_slug(self, page_slug: str) -> List[TextRecord]:
        return await self._list(
            TextContent, TextRecord, TextContent.page_slug == page_slug, order_by=TextContent.created_at.asc()
        )

    # =======================
    # IMAGE OPERATIONS
    # =======================

    async def create_image(self, image: ImageRecord) -> ImageRecord:
        return await self._create(ImageMeta, ImageRecord, image, IMAGE_FIELDS)

    async def update_image(self, image_id: str, patch: ImageRecord) -> ImageRecord:
        return await self._patch(ImageMeta, ImageRecord, image_id, patch, IMAGE_PATCH_FIELDS, "image")

    async def delete_image(self, image_id: str) -> None:
        await self._delete(ImageMeta, image_id, "image")

    async def get_image(self, image_id: str) -> ImageRecord:
        return await self._get(ImageMeta, ImageRecord, image_id, "image")

    async def list_images_by_slug(self, slug: str) -> List[ImageRecord]:
        return await self._list(ImageMeta, ImageRecord, ImageMeta.slug == slug, order_by=ImageMeta.created_at.asc())

    async def list_images(self) -> List[ImageRecord]:
        return await self._list(ImageMeta, ImageRecord, order_by=ImageMeta.created_at.asc())

    # =======================
    # GALLERY EVENT OPERATIONS
    # =======================

    async def create_gallery_event(self, event: GalleryEventRecord) -> GalleryEventRecord:
        return await self._create(GalleryEvent, GalleryEventRecord, event, GALLERY_EVENT_FIELDS)

    async def get_gallery_event(self, event_id: str) -> GalleryEventRecord:
        return await self._get(GalleryEvent, GalleryEventRecord, event_id, "gallery event")

    async def list_gallery_events(self) -> List[GalleryEventRecord]:
        return await self._list(GalleryEvent, GalleryEventRecord, order_by=GalleryEvent.date.desc())

    async def delete_gallery_event(self, event_id: str) -> None:
        await self._delete(GalleryEvent, event_id, "gallery event")

    # =======================
    # TIMELINE OPERATIONS
    # =======================

    async def create_timeline_entry(self, entry: TimelineEntry) -> TimelineEntry:
        return await self._create(TimelineEntryRow, TimelineEntry, entry, TIMELINE_FIELDS)

    async def update_timeline_entry(self, entry_id: str, patch: TimelineEntry) -> TimelineEntry:
        return await self._patch(
            TimelineEntryRow, TimelineEntry, entry_id, patch, TIMELINE_PATCH_FIELDS, "timeline entry"
        )

    async def delete_timeline_entry(self, entry_id: str) -> None:
        await self._delete(TimelineEntryRow, entry_id, "timeline entry")

    async def get_timeline_entry(self, entry_id: str) -> TimelineEntry:
        return await self._get(TimelineEntryRow, TimelineEntry, entry_id, "timeline entry")

    async def list_timeline_entries(self) -> List[TimelineEntry]:
        return await self._list(TimelineEntryRow, TimelineEntry, order_by=TimelineEntryRow.date.asc())

    # =======================
    # HELPERS
    # =======================

    @asynccontextmanager
    async def _session(self, action: str) -> AsyncIterator[AsyncSession]:
        async with self._session_factory() as session:
            try:
                yield session
                await session.commit()
            except SQLAlchemyError as e:
                await session.rollback()
                logger.error(f"Database error while {action}: {str(e)}", exc_info=True)
                raise BackendError(f"error {action}: {str(e)}") from e

    async def _get(self, model, schema: Type[R], record_id: str, label: str) -> R:
        async with self._session(f"fetching {label}") as session:
            row = await session.get(model, record_id)
            if row is None:
                raise NotFound(f"{label} with id {record_id} not found")
            return schema.model_validate(row)

    async def _list(self, model, schema: Type[R], *criteria, order_by=None) -> List[R]:
        async with self._session(f"listing {model.__tablename__}") as session:
            query = select(model).where(*criteria)
            if order_by is not None:
                query = query.order_by(order_by)
            result = await session.execute(query)
            return [schema.model_validate(row) for row in result.scalars().all()]

    async def _create(self, model, schema: Type[R], record: R, fields: Iterable[str]) -> R:
        async with self._session(f"creating {model.__tablename__}") as session:
            row = model(id=new_id(), **record.model_dump(include=set(fields)))
            session.add(row)
            await session.flush()
            return schema.model_validate(row)

    async def _patch(self, model, schema: Type[R], record_id: str, patch: R, fields: Iterable[str], label: str) -> R:
        async with self._session(f"updating {label}") as session:
            row = await session.get(model, record_id)
            if row is None:
                raise NotFound(f"{label} with id {record_id} not found")

            for field in fields:
                value = getattr(patch, field)
                if value not in ("", None):
                    setattr(row, field, value)
            row.updated_at = patch.updated_at or datetime.now(timezone.utc)

            await session.flush()
            return schema.model_validate(row)

    async def _delete(self, model, record_id: str, label: str) -> None:
        async with self._session(f"deleting {label}") as session:
            result = await session.execute(delete(model).where(model.id == record_id))
            if result.rowcount == 0:
                raise NotFound(f"{label} with id {record_id} not found")
