from mediahub.services.memory_blobs import MemoryBlobs


async def test_put_returns_locator_that_maps_back_to_key():
    blobs = MemoryBlobs(base_url="https://blobs.test/")
    locator = await blobs.put("images/a-1.jpg", b"data")

    assert locator == "https://blobs.test/images/a-1.jpg"
    assert blobs.key_from_url(locator) == "images/a-1.jpg"
    assert blobs.objects["images/a-1.jpg"] == b"data"


async def test_delete_twice_is_harmless():
    blobs = MemoryBlobs()
    await blobs.put("images/a-1.jpg", b"data")

    await blobs.delete("images/a-1.jpg")
    await blobs.delete("images/a-1.jpg")

    assert blobs.objects == {}


async def test_delete_unknown_key():
    await MemoryBlobs().delete("never/stored.jpg")


async def test_signed_url_and_foreign_locator():
    blobs = MemoryBlobs()
    signed = await blobs.signed_url("images/a-1.jpg")

    assert signed.endswith("images/a-1.jpg?signed=true")
    assert blobs.key_from_url(signed) == "images/a-1.jpg"
    assert blobs.key_from_url("https://elsewhere.example.com/x.jpg") == ""
