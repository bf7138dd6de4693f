from datetime import timedelta

import pytest

from gallery_api.services.gallery import list_categories, query_gallery
from gallery_api.services.seed import SAMPLE_COUNT, sample_items, seed_gallery
from gallery_api.services.storage import MemoryGalleryStorage
from gallery_api.utils.auth import hash_password, is_bcrypt_hash, verify_password
from gallery_api.utils.sessions import MemorySessionStore, SessionSigner


def item(title, **extra):
    fields = {
        "title": title,
        "category": "photography",
        "image": "https://cdn.example.com/a.jpg",
        "description": f"About {title}",
    }
    fields.update(extra)
    return fields


@pytest.mark.asyncio
async def test_memory_storage_crud():
    storage = MemoryGalleryStorage()
    first = await storage.create(item("First"))
    second = await storage.create(item("Second", type="video", video_url="https://cdn.example.com/v.mp4"))

    assert (first.id, second.id) == (1, 2)
    assert first.type == "image" and first.height == "h-64" and first.featured is False
    assert second.video_url == "https://cdn.example.com/v.mp4"

    updated = await storage.update(first.id, {"title": "Renamed"})
    assert updated.title == "Renamed"
    assert updated.description == "About First"
    assert await storage.update(99, {"title": "x"}) is None

    assert await storage.delete(first.id) is True
    assert await storage.delete(first.id) is False
    assert await storage.get_by_id(first.id) is None

    third = await storage.create(item("Third"))
    assert third.id == 3


@pytest.mark.asyncio
async def test_memory_storage_search_and_filters():
    storage = MemoryGalleryStorage()
    await storage.create(item("Forest", description="Deep NATURE"))
    await storage.create(item("Clip", category="video", type="video", featured=True))
    await storage.create(item("Canvas", category="art"))

    assert [i.title for i in await storage.search("nature")] == ["Forest"]
    assert [i.title for i in await storage.search("VID")] == ["Clip"]
    assert [i.title for i in await storage.list_by_type("video")] == ["Clip"]
    assert [i.title for i in await storage.list_by_category("art")] == ["Canvas"]
    assert [i.title for i in await storage.list_featured()] == ["Clip"]


@pytest.mark.asyncio
async def test_query_gallery_applies_one_filter():
    storage = MemoryGalleryStorage()
    await storage.create(item("Forest", featured=True))
    await storage.create(item("Clip", category="video", type="video"))
    await storage.create(item("Canvas", category="art"))

    async def titles(**params):
        return [i.title for i in await query_gallery(storage, **params)]

    assert await titles() == ["Forest", "Clip", "Canvas"]
    assert await titles(search="canvas", featured="true", item_type="video") == ["Canvas"]
    assert await titles(featured="true", item_type="video") == ["Forest"]
    assert await titles(item_type="video", category="art") == ["Clip"]
    assert await titles(item_type="all", category="art") == ["Canvas"]
    assert await titles(search="", category="all") == ["Forest", "Clip", "Canvas"]
    assert await list_categories(storage) == ["photography", "video", "art"]


@pytest.mark.asyncio
async def test_seed_gallery_runs_once():
    storage = MemoryGalleryStorage()
    assert await seed_gallery(storage) == SAMPLE_COUNT
    assert await seed_gallery(storage) == 0

    items = await storage.list_all()
    assert len(items) == SAMPLE_COUNT
    assert items[0].title == "Urban Landscape"
    assert all(i.video_url for i in items if i.type == "video")
    assert {i.height for i in items} <= {"h-56", "h-64", "h-72", "h-80"}


def test_sample_items_respect_count():
    assert len(sample_items(5)) == 5
    assert len(sample_items(20)) == 20


@pytest.mark.asyncio
async def test_memory_session_store_lifecycle():
    store = MemorySessionStore()
    sid = await store.create({"user_id": 7}, timedelta(hours=24))

    assert await store.get(sid) == {"user_id": 7}
    await store.destroy(sid)
    assert await store.get(sid) is None
    # Destroying twice is fine
    await store.destroy(sid)


@pytest.mark.asyncio
async def test_memory_session_store_expiry_and_prune():
    store = MemorySessionStore()
    expired = await store.create({"user_id": 1}, timedelta(seconds=-1))
    live = await store.create({"user_id": 2}, timedelta(hours=1))
    also_expired = await store.create({"user_id": 3}, timedelta(seconds=-1))

    assert await store.get(expired) is None
    assert await store.prune() == 1
    assert len(store) == 1
    assert await store.get(live) == {"user_id": 2}
    assert await store.get(also_expired) is None


def test_session_signer_round_trip_and_tampering():
    signer = SessionSigner(secret_key="k1")
    token = signer.dumps("abc123")

    assert signer.loads(token) == "abc123"
    assert SessionSigner(secret_key="k2").loads(token) is None
    assert signer.loads(token + "x") is None


def test_password_hashing():
    hashed = hash_password("s3cret")
    assert hashed != "s3cret"
    assert is_bcrypt_hash(hashed)
    assert verify_password("s3cret", hashed)
    assert not verify_password("S3cret", hashed)
    assert not verify_password("s3cret", "not-a-hash")
