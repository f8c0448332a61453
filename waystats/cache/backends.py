# waystats/cache/backends.py
# ============================================================================
# Stockage brut clé → chaîne JSON
#   • MemoryBackend : dict process-local (défaut, tests)
#   • RedisBackend  : redis.asyncio, même contrat
# Toute erreur de stockage remonte en StorageError ; c'est CacheStore qui
# l'absorbe.
# ============================================================================

from __future__ import annotations

import logging
from typing import Dict, List, Optional

import redis.asyncio as aioredis
import redis.exceptions as _redis_exc

from waystats.errors import StorageError

log = logging.getLogger(__name__)


class CacheBackend:
    """Async key → string store used by CacheStore."""

    async def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    async def set(self, key: str, value: str) -> None:
        raise NotImplementedError

    async def delete(self, key: str) -> None:
        raise NotImplementedError

    async def keys(self, prefix: str) -> List[str]:
        raise NotImplementedError

    async def close(self) -> None:
        return None


class MemoryBackend(CacheBackend):
    """Process-local store. Contents vanish with the process."""

    def __init__(self) -> None:
        self._data: Dict[str, str] = {}

    async def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        self._data[key] = value

    async def delete(self, key: str) -> None:
        self._data.pop(key, None)

    async def keys(self, prefix: str) -> List[str]:
        return [k for k in list(self._data) if k.startswith(prefix)]

    def __len__(self) -> int:
        return len(self._data)


class RedisBackend(CacheBackend):
    """Redis-backed store (decode_responses=True, values are JSON strings)."""

    def __init__(self, url: str = "redis://localhost:6379/0", client=None) -> None:
        self._redis = client if client is not None else aioredis.from_url(
            url, encoding="utf-8", decode_responses=True
        )

    async def get(self, key: str) -> Optional[str]:
        try:
            return await self._redis.get(key)
        except _redis_exc.RedisError as e:
            raise StorageError(f"redis GET {key}: {e}") from e

    async def set(self, key: str, value: str) -> None:
        try:
            await self._redis.set(key, value)
        except _redis_exc.RedisError as e:
            raise StorageError(f"redis SET {key}: {e}") from e

    async def delete(self, key: str) -> None:
        try:
            await self._redis.delete(key)
        except _redis_exc.RedisError as e:
            raise StorageError(f"redis DEL {key}: {e}") from e

    async def keys(self, prefix: str) -> List[str]:
        try:
            return [k async for k in self._redis.scan_iter(match=f"{prefix}*")]
        except _redis_exc.RedisError as e:
            raise StorageError(f"redis SCAN {prefix}*: {e}") from e

    async def close(self) -> None:
        await self._redis.aclose()


def make_backend(kind: str, redis_url: str) -> CacheBackend:
    """Build the backend named by CACHE_BACKEND."""
    if kind == "redis":
        log.info("Cache backend: redis (%s)", redis_url)
        return RedisBackend(redis_url)
    log.info("Cache backend: memory")
    return MemoryBackend()
