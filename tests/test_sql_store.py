from datetime import datetime, timezone

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from mediahub import models  # noqa: F401
from mediahub.database import Base
from mediahub.errors import BackendError, NotFound
from mediahub.schemas import GalleryEventRecord, ImageRecord, TextRecord, TimelineEntry
from mediahub.services.sql_store import SqlStore

NOW = datetime(2025, 3, 14, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
async def sql_store():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield SqlStore(async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False))

    await engine.dispose()


def _image(slug="meetup", url="https://blobs.test/images/meetup-1.jpg"):
    return ImageRecord(slug=slug, object_url=url, name="Photo", created_at=NOW, updated_at=NOW)


async def test_create_assigns_id_and_reads_back(sql_store):
    created = await sql_store.create_text(
        TextRecord(slug="about", content="Hello", page_id="p1", page_slug="home", created_at=NOW, updated_at=NOW)
    )

    assert len(created.id) == 32
    assert (await sql_store.get_text(created.id)).content == "Hello"
    assert (await sql_store.get_text_by_slug("about")).id == created.id
    assert [t.id for t in await sql_store.list_texts_by_page_id("p1")] == [created.id]
    assert [t.id for t in await sql_store.list_texts_by_page_slug("home")] == [created.id]


async def test_missing_records_raise_not_found(sql_store):
    with pytest.raises(NotFound):
        await sql_store.get_text("missing")
    with pytest.raises(NotFound):
        await sql_store.get_text_by_slug("missing")
    with pytest.raises(NotFound):
        await sql_store.update_image("missing", ImageRecord(name="x"))
    with pytest.raises(NotFound):
        await sql_store.delete_gallery_event("missing")


async def test_update_is_a_merge_patch(sql_store):
    created = await sql_store.create_image(_image())

    updated = await sql_store.update_image(created.id, ImageRecord(name="Renamed", updated_at=NOW.replace(hour=13)))

    assert updated.name == "Renamed"
    assert updated.slug == "meetup"
    assert updated.object_url == created.object_url
    assert updated.updated_at.hour == 13


async def test_list_images_by_slug(sql_store):
    first = await sql_store.create_image(_image())
    await sql_store.create_image(_image(slug="other"))

    assert [i.id for i in await sql_store.list_images_by_slug("meetup")] == [first.id]
    assert len(await sql_store.list_images()) == 2


async def test_delete_image(sql_store):
    created = await sql_store.create_image(_image())

    await sql_store.delete_image(created.id)

    with pytest.raises(NotFound):
        await sql_store.get_image(created.id)
    with pytest.raises(NotFound):
        await sql_store.delete_image(created.id)


async def test_gallery_events_keep_image_lists_and_sort_newest_first(sql_store):
    older = await sql_store.create_gallery_event(GalleryEventRecord(
        name="Older", location="ICMC", date=datetime(2024, 1, 1, tzinfo=timezone.utc),
        image_urls=["u1", "u2"], image_ids=["i1", "i2"], created_at=NOW, updated_at=NOW,
    ))
    newer = await sql_store.create_gallery_event(GalleryEventRecord(
        name="Newer", location="ICMC", date=datetime(2025, 1, 1, tzinfo=timezone.utc),
        image_urls=["u3"], image_ids=["i3"], created_at=NOW, updated_at=NOW,
    ))

    assert [e.id for e in await sql_store.list_gallery_events()] == [newer.id, older.id]
    fetched = await sql_store.get_gallery_event(older.id)
    assert fetched.image_urls == ["u1", "u2"]
    assert fetched.image_ids == ["i1", "i2"]


async def test_timeline_entries_in_date_order(sql_store):
    later = await sql_store.create_timeline_entry(
        TimelineEntry(name="Later", date=datetime(2025, 1, 1, tzinfo=timezone.utc), created_at=NOW, updated_at=NOW)
    )
    earlier = await sql_store.create_timeline_entry(
        TimelineEntry(name="Earlier", date=datetime(2020, 1, 1, tzinfo=timezone.utc), created_at=NOW, updated_at=NOW)
    )

    assert [e.id for e in await sql_store.list_timeline_entries()] == [earlier.id, later.id]

    await sql_store.update_timeline_entry(later.id, TimelineEntry(text="Details"))
    assert (await sql_store.get_timeline_entry(later.id)).text == "Details"


async def test_constraint_violation_is_backend_error(sql_store):
    # gallery_events.date is NOT NULL
    with pytest.raises(BackendError):
        await sql_store.create_gallery_event(GalleryEventRecord(name="No date", location="x", created_at=NOW, updated_at=NOW))
