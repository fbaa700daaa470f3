"""
Gallery event orchestration.

Creating a gallery event is N image sagas followed by one aggregate
write. Images are created strictly in input order and every success is
recorded in a committed list; when a later step fails, everything in
that list is deleted again before the triggering error is re-raised.
The aggregate record is written once, after all images exist, so
readers never see a partially populated event.

Compensation is best effort and also runs when the request is cancelled
mid-saga. A failing compensating delete is logged and the loop moves
on. Whatever it leaves behind stays orphaned; there is no
reconciliation job.
"""
import asyncio
import base64
import binascii
import logging
from datetime import datetime
from typing import Callable, List, Optional, Sequence

from mediahub.core.images import ImageOrchestrator, utcnow
from mediahub.core.keys import gallery_item_key, normalize
from mediahub.errors import DecodeError, ValidationError, as_content_error
from mediahub.ports import Store
from mediahub.schemas import GalleryEventRecord, ImageRecord

logger = logging.getLogger(__name__)


def decode_image(encoded: str) -> bytes:
    """Strict standard base64 decoding of one image payload."""
    try:
        data = base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError) as e:
        raise DecodeError(f"invalid base64 image data: {str(e)}") from e
    if not data:
        raise DecodeError("image payload is empty")
    return data


def _is_zero(value: Optional[datetime]) -> bool:
    return value is None or value.replace(tzinfo=None) == datetime.min


class GalleryEventOrchestrator:
    def __init__(
        self,
        store: Store,
        images: ImageOrchestrator,
        clock: Callable[[], datetime] = utcnow,
    ):
        self._store = store
        self._images = images
        self._clock = clock

    async def create(
        self,
        name: str,
        location: str,
        date: Optional[datetime],
        encoded_images: Sequence[str],
    ) -> GalleryEventRecord:
        """
        Upload every image and persist the event that references them.

        Args:
            name: Event name (required)
            location: Event location (required)
            date: Event date (required, non-zero)
            encoded_images: Base64 image payloads, in render order (at least one)

        Returns:
            GalleryEventRecord: The persisted event with image_urls and image_ids

        Raises:
            ValidationError: Before any side effect, naming the missing field
            DecodeError: Tagged with the index of the malformed payload
            PayloadTooLarge, BackendError: Tagged with the failing item index,
                or untagged when the aggregate write itself fails
        """
        self._validate(name, location, date, encoded_images)

        now = self._clock()
        slug = normalize(name)
        committed: List[ImageRecord] = []

        for index, encoded in enumerate(encoded_images):
            try:
                data = decode_image(encoded)
            except DecodeError as e:
                e.index = index
                logger.error(f"Gallery event '{name}': image {index} could not be decoded: {str(e)}")
                await self._compensate(committed)
                raise

            meta = ImageRecord(
                slug=slug,
                name=f"{name} #{index + 1}",
                text=f"Image {index + 1} of {name}",
                date=date,
                location=location,
            )

            try:
                image = await self._images.upload(meta, data, key=gallery_item_key(index, now))
            except Exception as e:
                error = as_content_error(e, "failed to upload image")
                error.index = index
                logger.error(f"Gallery event '{name}': image {index} failed: {str(e)}")
                await self._compensate(committed)
                raise error
            except asyncio.CancelledError:
                logger.warning(f"Gallery event '{name}' cancelled at image {index}")
                await self._compensate_shielded(committed)
                raise

            committed.append(image)

        record = GalleryEventRecord(
            name=name,
            location=location,
            date=date,
            image_urls=[image.object_url for image in committed],
            image_ids=[image.id for image in committed],
            created_at=now,
            updated_at=now,
        )

        try:
            created = await self._store.create_gallery_event(record)
        except Exception as e:
            logger.error(f"Saving gallery event '{name}' failed after {len(committed)} image(s): {str(e)}")
            await self._compensate(committed)
            raise as_content_error(e, "failed to save gallery event")
        except asyncio.CancelledError:
            logger.warning(f"Saving gallery event '{name}' was cancelled after {len(committed)} image(s)")
            await self._compensate_shielded(committed)
            raise

        logger.info(f"Created gallery event {created.id} with {len(committed)} image(s)")
        return created

    async def get(self, event_id: str) -> GalleryEventRecord:
        return await self._store.get_gallery_event(event_id)

    async def list(self) -> List[GalleryEventRecord]:
        """All gallery events, newest date first."""
        return await self._store.list_gallery_events()

    async def delete(self, event_id: str) -> None:
        # Referenced images may be reused elsewhere; they are not deleted
        await self._store.delete_gallery_event(event_id)

    def _validate(self, name, location, date, encoded_images) -> None:
        if not name:
            raise ValidationError("name")
        if not location:
            raise ValidationError("location")
        if _is_zero(date):
            raise ValidationError("date")
        if not encoded_images:
            raise ValidationError("images", "at least one image is required")

    async def _compensate(self, committed: List[ImageRecord]) -> int:
        """
        Delete every committed image, newest first.

        Returns:
            int: Number of images that could not be deleted (left as residue)
        """
        failures = 0
        for image in reversed(committed):
            try:
                await self._images.delete(image.id)
            except Exception as e:
                failures += 1
                logger.warning(f"Compensation failed for image {image.id} ({image.object_url}): {str(e)}")

        if committed:
            logger.info(
                f"Compensated {len(committed) - failures}/{len(committed)} image(s)"
                + (f", {failures} orphaned" if failures else "")
            )
        return failures

    async def _compensate_shielded(self, committed: List[ImageRecord]) -> None:
        """Compensation that keeps running when the calling task is being cancelled."""
        try:
            await asyncio.shield(self._compensate(list(committed)))
        except asyncio.CancelledError:
            logger.warning(f"Cancelled while compensating {len(committed)} image(s); cleanup continues in the background")
