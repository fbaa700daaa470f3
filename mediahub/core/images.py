"""
Image orchestration: pairs each blob upload with its metadata record.

The object store and the database share no transaction, so every write
path here follows the same rule: upload first, persist second, and
delete the fresh blob if persisting fails. Failures of that cleanup are
logged and swallowed; the caller always sees the original error.
"""
import asyncio
import logging
from datetime import datetime, timezone
from typing import Callable, List, Optional

from mediahub.config import settings
from mediahub.core.keys import derive_object_key, normalize
from mediahub.errors import NotFound, PayloadTooLarge, as_content_error
from mediahub.ports import Blobs, Store
from mediahub.schemas import ImageRecord

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ImageOrchestrator:
    """Upload, replace and delete single images across Blobs and Store."""

    def __init__(
        self,
        store: Store,
        blobs: Blobs,
        max_bytes: Optional[int] = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self._store = store
        self._blobs = blobs
        self._max_bytes = max_bytes if max_bytes is not None else settings.MAX_IMAGE_BYTES
        self._clock = clock

    async def get(self, image_id: str) -> ImageRecord:
        return await self._store.get_image(image_id)

    async def list_by_slug(self, slug: str) -> List[ImageRecord]:
        return await self._store.list_images_by_slug(normalize(slug))

    async def list(self) -> List[ImageRecord]:
        return await self._store.list_images()

    async def signed_url(self, image_id: str) -> str:
        """Temporary link to the image's blob."""
        image = await self._store.get_image(image_id)
        key = self._blobs.key_from_url(image.object_url)
        if not key:
            raise NotFound(f"image {image_id} has no stored object")
        return await self._blobs.signed_url(key)

    async def upload(self, meta: ImageRecord, data: bytes, key: Optional[str] = None) -> ImageRecord:
        """
        Upload data to the object store and persist its metadata.

        Args:
            meta: Image metadata (id, object_url and audit fields are overwritten)
            data: Raw image bytes
            key: Storage key to use instead of one derived from meta.slug

        Returns:
            ImageRecord: The persisted record, including its store-assigned id

        Raises:
            PayloadTooLarge: If data exceeds the configured limit
            BackendError: If the upload or the metadata write fails
        """
        self.check_size(data)

        now = self._clock()
        slug = normalize(meta.slug)
        key = key or derive_object_key(slug, now=now)

        try:
            locator = await self._blobs.put(key, data)
        except Exception as e:
            logger.error(f"Image upload failed for key {key}: {str(e)}")
            raise as_content_error(e, "upload failed")

        record = meta.model_copy(update={
            "id": "",
            "slug": slug,
            "object_url": locator,
            "created_at": now,
            "updated_at": now,
        })

        try:
            created = await self._store.create_image(record)
        except Exception as e:
            logger.error(f"Persisting metadata failed for {key}, removing uploaded object: {str(e)}")
            await self._discard_blob(key)
            raise as_content_error(e, "db persist failed")
        except asyncio.CancelledError:
            logger.warning(f"Persisting metadata for {key} was cancelled, removing uploaded object")
            await self._discard_blob_shielded(key)
            raise

        logger.info(f"Uploaded image {created.id} ({len(data):,} bytes) to {locator}")
        return created

    async def update(self, image_id: str, patch: ImageRecord, data: bytes = b"") -> ImageRecord:
        """
        Merge-patch image metadata, optionally replacing the stored binary.

        With new data the replacement blob is uploaded under a fresh key and
        referenced by the record before the previous blob is removed.
        """
        now = self._clock()
        patch = patch.model_copy(update={"slug": normalize(patch.slug), "updated_at": now})

        if not data:
            return await self._store.update_image(image_id, patch.model_copy(update={"object_url": ""}))

        self.check_size(data)
        existing = await self._store.get_image(image_id)
        old_key = self._blobs.key_from_url(existing.object_url) if existing.object_url else ""

        key = derive_object_key(patch.slug or existing.slug, now=now)
        try:
            locator = await self._blobs.put(key, data)
        except Exception as e:
            logger.error(f"Replacement upload failed for image {image_id}: {str(e)}")
            raise as_content_error(e, "upload failed")

        # Same-second re-uploads reuse the key: the existing record's object
        # now holds the new bytes and must never be discarded
        overwrote_existing = bool(old_key) and old_key == self._blobs.key_from_url(locator)

        try:
            updated = await self._store.update_image(image_id, patch.model_copy(update={"object_url": locator}))
        except Exception as e:
            logger.error(f"Updating image {image_id} failed: {str(e)}")
            if not overwrote_existing:
                await self._discard_blob(key)
            raise as_content_error(e, "db update failed")
        except asyncio.CancelledError:
            logger.warning(f"Updating image {image_id} was cancelled")
            if not overwrote_existing:
                await self._discard_blob_shielded(key)
            raise

        if old_key and not overwrote_existing:
            await self._discard_blob(old_key)

        return updated

    async def delete(self, image_id: str) -> None:
        """
        Delete the metadata record, then its blob.

        A blob left behind is tolerable; a record pointing at a deleted
        blob is not, hence the order.
        """
        image = await self._store.get_image(image_id)
        await self._store.delete_image(image_id)

        if image.object_url:
            await self._discard_blob(self._blobs.key_from_url(image.object_url))

        logger.info(f"Deleted image {image_id}")

    def check_size(self, data: bytes) -> None:
        """
        Raises:
            PayloadTooLarge: If data exceeds the configured limit
        """
        if len(data) > self._max_bytes:
            raise PayloadTooLarge(f"image too large: max {self._max_bytes // (1024 * 1024)}MB")

    async def _discard_blob_shielded(self, key: str) -> None:
        """Blob removal that keeps running when the calling task is being cancelled."""
        try:
            await asyncio.shield(self._discard_blob(key))
        except asyncio.CancelledError:
            logger.warning(f"Cancelled while removing object {key}; removal continues in the background")

    async def _discard_blob(self, key: str) -> None:
        """Best-effort blob removal; a failure leaves an orphan and is only logged."""
        if not key:
            return
        try:
            await self._blobs.delete(key)
        except Exception as e:
            logger.warning(f"Could not delete object {key}, leaving orphan: {str(e)}")
