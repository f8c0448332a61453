"""Shared fixtures: fake clock, fake Data Dragon transport, in-memory caches."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from waystats.cache.backends import MemoryBackend
from waystats.cache.store import DDRAGON_PREFIX, OPGG_PREFIX, UGG_PREFIX, CacheStore
from waystats.ddragon.client import StaticDataClient
from waystats.ddragon.version import VersionResolver

VERSION = "14.24.1"

CHAMPION_JSON = {
    "type": "champion",
    "version": VERSION,
    "data": {
        "Ahri": {"id": "Ahri", "key": "103", "name": "Ahri", "title": "the Nine-Tailed Fox",
                 "tags": ["Mage", "Assassin"], "image": {"full": "Ahri.png"}, "stats": {"hp": 590}},
        "Zed": {"id": "Zed", "key": "238", "name": "Zed", "title": "the Master of Shadows",
                "tags": ["Assassin"], "image": {"full": "Zed.png"}, "stats": {"hp": 654}},
        "MonkeyKing": {"id": "MonkeyKing", "key": "62", "name": "Wukong", "title": "the Monkey King",
                       "tags": ["Fighter"], "image": {"full": "MonkeyKing.png"}, "stats": {}},
    },
}


class FakeClock:
    def __init__(self, now: float = 1_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def ddragon_router(versions=None, champions=None, extra=None):
    """AsyncMock side effect answering Data Dragon URLs from canned payloads."""
    versions = versions if versions is not None else [VERSION, "14.23.1", "14.22.1"]
    champions = champions if champions is not None else CHAMPION_JSON
    extra = extra or {}

    async def route(url):
        for suffix, payload in extra.items():
            if url.endswith(suffix):
                return payload
        if url.endswith("/api/versions.json"):
            return versions
        if url.endswith("/champion.json"):
            return champions
        return None

    return route


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def backend():
    return MemoryBackend()


@pytest.fixture
def http():
    client = MagicMock()
    client.get_json = AsyncMock(side_effect=ddragon_router())
    return client


@pytest.fixture
def static_cache(backend, clock):
    return CacheStore(backend, DDRAGON_PREFIX, ttl=24 * 3600, clock=clock)


@pytest.fixture
def opgg_cache(backend, clock):
    return CacheStore(backend, OPGG_PREFIX, ttl=6 * 3600, clock=clock)


@pytest.fixture
def ugg_cache(backend, clock):
    return CacheStore(backend, UGG_PREFIX, ttl=6 * 3600, clock=clock)


@pytest.fixture
def versions(http, static_cache):
    return VersionResolver(http, static_cache)


@pytest.fixture
def static(http, versions, static_cache):
    return StaticDataClient(http, versions, static_cache, default_locale="en_US")


@pytest.fixture
def functions():
    client = MagicMock()
    client.invoke = AsyncMock()
    return client


@pytest.fixture
def ddragon_routes():
    """Factory for custom Data Dragon routes: ``http.get_json.side_effect = ddragon_routes(...)``."""
    return ddragon_router
