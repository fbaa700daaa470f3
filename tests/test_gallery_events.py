import asyncio
import base64
from datetime import datetime, timezone

import pytest

from mediahub.core.gallery_events import decode_image
from mediahub.errors import BackendError, DecodeError, PayloadTooLarge, ValidationError

from conftest import JPEG_B64, JPEG_BYTES

EVENT_DATE = datetime(2025, 10, 3, 19, 0, tzinfo=timezone.utc)


async def _create(gallery, images_b64, name="Python Sanca Meetup", location="ICMC", date=EVENT_DATE):
    return await gallery.create(name, location, date, images_b64)


def test_decode_image_rejects_non_base64():
    with pytest.raises(DecodeError):
        decode_image("not-base64!")


def test_decode_image_rejects_empty_payload():
    with pytest.raises(DecodeError):
        decode_image("")


def test_decode_image():
    assert decode_image(JPEG_B64) == JPEG_BYTES


async def test_create_uploads_images_in_order(gallery, store, blobs):
    event = await _create(gallery, [JPEG_B64, JPEG_B64, JPEG_B64])

    assert event.id in store.gallery_events
    assert len(event.image_ids) == 3
    assert len(event.image_urls) == 3
    assert event.image_urls == [store.images[i].object_url for i in event.image_ids]
    assert [k.rsplit("_", 1)[1] for k in blobs.puts] == ["0.jpg", "1.jpg", "2.jpg"]
    assert all(k.startswith("gallery_events/") for k in blobs.puts)


async def test_create_derives_image_metadata_from_event(gallery, store):
    event = await _create(gallery, [JPEG_B64, JPEG_B64])

    first, second = (store.images[i] for i in event.image_ids)
    assert first.slug == "python-sanca-meetup"
    assert first.name == "Python Sanca Meetup #1"
    assert second.text == "Image 2 of Python Sanca Meetup"
    assert first.location == "ICMC"
    assert first.date == EVENT_DATE


@pytest.mark.parametrize(
    "name,location,date,images_b64,field",
    [
        ("", "ICMC", EVENT_DATE, [JPEG_B64], "name"),
        ("Meetup", "", EVENT_DATE, [JPEG_B64], "location"),
        ("Meetup", "ICMC", None, [JPEG_B64], "date"),
        ("Meetup", "ICMC", datetime.min, [JPEG_B64], "date"),
        ("Meetup", "ICMC", EVENT_DATE, [], "images"),
    ],
)
async def test_create_validates_before_side_effects(gallery, store, blobs, name, location, date, images_b64, field):
    with pytest.raises(ValidationError) as exc_info:
        await gallery.create(name, location, date, images_b64)

    assert exc_info.value.field == field
    assert store.calls == []
    assert blobs.calls == []


async def test_create_with_invalid_second_image_removes_first(gallery, store, blobs):
    with pytest.raises(DecodeError) as exc_info:
        await _create(gallery, [JPEG_B64, "not-base64"])

    assert exc_info.value.index == 1
    assert store.images == {}
    assert store.gallery_events == {}
    assert blobs.objects == {}


async def test_upload_failure_removes_exactly_the_committed_images(gallery, store, blobs):
    blobs.fail("put", on_call=3)

    with pytest.raises(BackendError) as exc_info:
        await _create(gallery, [JPEG_B64] * 4)

    assert exc_info.value.index == 2
    assert store.calls.count("delete_image") == 2
    assert len(blobs.puts) == 2
    assert store.images == {}
    assert store.gallery_events == {}


async def test_compensation_runs_newest_first(gallery, store, blobs):
    blobs.fail("put", on_call=3)

    with pytest.raises(BackendError):
        await _create(gallery, [JPEG_B64] * 3)

    assert blobs.deletes == [blobs.puts[1], blobs.puts[0]]


async def test_oversized_image_is_reported_with_its_index(gallery, store):
    too_big = base64.b64encode(b"x" * 2048).decode()

    with pytest.raises(PayloadTooLarge) as exc_info:
        await _create(gallery, [JPEG_B64, too_big])

    assert exc_info.value.index == 1
    assert store.images == {}


async def test_aggregate_write_failure_removes_all_images(gallery, store, blobs):
    store.fail("create_gallery_event")

    with pytest.raises(BackendError) as exc_info:
        await _create(gallery, [JPEG_B64] * 3)

    assert exc_info.value.index is None
    assert store.calls.count("delete_image") == 3
    assert store.images == {}
    assert blobs.objects == {}


async def test_failed_compensation_does_not_mask_original_error(gallery, store, blobs):
    store.fail("create_gallery_event", RuntimeError("aggregate write failed"))
    store.fail("delete_image", RuntimeError("delete failed"), on_call=1)

    with pytest.raises(BackendError) as exc_info:
        await _create(gallery, [JPEG_B64] * 2)

    assert "aggregate write failed" in str(exc_info.value)
    # The second compensating delete still ran
    assert store.calls.count("delete_image") == 2
    assert len(store.images) == 1


async def test_delete_event_keeps_images(gallery, store, blobs):
    event = await _create(gallery, [JPEG_B64, JPEG_B64])

    await gallery.delete(event.id)

    assert store.gallery_events == {}
    for image_id in event.image_ids:
        assert image_id in store.images
    assert len(blobs.objects) == 2


async def test_list_returns_newest_first(gallery):
    older = await _create(gallery, [JPEG_B64], date=datetime(2024, 1, 1, tzinfo=timezone.utc))
    newer = await _create(gallery, [JPEG_B64], date=datetime(2025, 1, 1, tzinfo=timezone.utc))

    assert [e.id for e in await gallery.list()] == [newer.id, older.id]
    assert (await gallery.get(older.id)).name == "Python Sanca Meetup"


async def test_cancellation_mid_saga_removes_committed_images(gallery, store, blobs):
    blobs.fail("put", asyncio.CancelledError(), on_call=3)

    with pytest.raises(asyncio.CancelledError):
        await _create(gallery, [JPEG_B64] * 3)

    assert store.images == {}
    assert store.gallery_events == {}
    assert blobs.objects == {}
    assert blobs.deletes == [blobs.puts[1], blobs.puts[0]]


async def test_cancellation_during_aggregate_write_removes_all_images(gallery, store, blobs):
    store.fail("create_gallery_event", asyncio.CancelledError())

    with pytest.raises(asyncio.CancelledError):
        await _create(gallery, [JPEG_B64] * 2)

    assert store.images == {}
    assert blobs.objects == {}
