"""
Tests for the listing page cache, using an in-memory stand-in for Redis.
"""

import fnmatch

import pytest
from httpx import AsyncClient

from pg_finder.api.routes import listings as listings_routes
from pg_finder.services import cache_service


class InMemoryRedis:
    """The subset of redis.asyncio.Redis the cache service calls."""

    def __init__(self):
        self.store = {}

    async def get(self, key):
        return self.store.get(key)

    async def setex(self, key, ttl, value):
        self.store[key] = value

    async def delete(self, key):
        self.store.pop(key, None)

    async def scan_iter(self, match="*", count=None):
        for key in list(self.store):
            if fnmatch.fnmatch(key, match):
                yield key


@pytest.fixture
def fake_redis(monkeypatch):
    fake = InMemoryRedis()

    async def get_fake_redis():
        return fake

    monkeypatch.setattr(cache_service, "get_redis", get_fake_redis)
    return fake


def test_listing_key_shape():
    key = cache_service.make_listing_list_key(2, 20, True)
    assert key == "listings:list:page=2&size=20&available=True"
    assert key.startswith(cache_service.LISTING_KEY_PREFIX)


@pytest.mark.asyncio
async def test_disabled_cache_is_a_miss():
    assert await cache_service.get_cached_listings(1, 20, False) is None
    assert await cache_service.get_cache_stats() == {"status": "disabled"}


@pytest.mark.asyncio
async def test_set_get_and_invalidate(fake_redis):
    await cache_service.set_cached_listings(1, 20, False, {"listings": [], "total": 0})
    fake_redis.store["unrelated"] = "keep"

    cached = await cache_service.get_cached_listings(1, 20, False)
    assert cached == {"listings": [], "total": 0}

    await cache_service.invalidate_listing_cache()
    assert await cache_service.get_cached_listings(1, 20, False) is None
    assert fake_redis.store == {"unrelated": "keep"}


@pytest.mark.asyncio
async def test_second_page_read_is_cached(client: AsyncClient, fake_redis, listing):
    first = await client.get("/api/v1/listings/")
    second = await client.get("/api/v1/listings/")
    assert first.json()["cached"] is False
    assert second.json()["cached"] is True
    assert second.json()["listings"][0]["name"] == "Sunrise PG"


@pytest.mark.asyncio
async def test_listing_update_invalidates(client: AsyncClient, fake_redis, owner_headers, listing):
    listing_id = listing.id
    await client.get("/api/v1/listings/")

    await client.put(f"/api/v1/listings/{listing_id}", json={"name": "Sunset PG"}, headers=owner_headers)

    response = await client.get("/api/v1/listings/")
    assert response.json()["cached"] is False
    assert response.json()["listings"][0]["name"] == "Sunset PG"


@pytest.mark.asyncio
async def test_listing_change_is_committed_before_invalidation(
    client: AsyncClient, db_session, monkeypatch, owner_headers, listing
):
    listing_id = listing.id
    calls = []
    real_commit = db_session.commit

    async def commit():
        calls.append("commit")
        await real_commit()

    async def invalidate():
        calls.append("invalidate")

    monkeypatch.setattr(db_session, "commit", commit)
    monkeypatch.setattr(listings_routes, "invalidate_listing_cache", invalidate)

    response = await client.put(f"/api/v1/listings/{listing_id}", json={"price": 9000}, headers=owner_headers)
    assert response.status_code == 200
    assert calls == ["commit", "invalidate"]
