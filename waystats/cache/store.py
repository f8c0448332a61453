# waystats/cache/store.py
# ============================================================================
# Cache TTL + version, un namespace (préfixe) par sous-système
# Entrée sérialisée : {"data": ..., "timestamp": float, "version": str}
# Éviction paresseuse : uniquement à la lecture.
# ============================================================================

from __future__ import annotations

import json
import math
import logging
import time
from typing import Any, Callable, Optional

from waystats.cache.backends import CacheBackend
from waystats.errors import StorageError

log = logging.getLogger(__name__)

# Préfixes par sous-système
DDRAGON_PREFIX = "ddragon_"
OPGG_PREFIX = "opgg_"
UGG_PREFIX = "ugg_"


class CacheStore:
    """
    Namespaced TTL/version cache on top of a CacheBackend.

    ``get`` never raises: a missing, expired, version-mismatched or unreadable
    entry is a miss. Unreadable and stale entries are evicted on the spot.
    """

    def __init__(
        self,
        backend: CacheBackend,
        prefix: str,
        ttl: float,
        clock: Callable[[], float] = time.time,
    ):
        self.backend = backend
        self.prefix = prefix
        self.ttl = ttl
        self._clock = clock

    def _full_key(self, key: str) -> str:
        return f"{self.prefix}{key}"

    async def get(self, key: str, expected_version: Optional[str] = None) -> Any:
        """
        Return cached data for ``key`` or None.

        Args:
            key: Key inside this store's namespace
            expected_version: Required version tag; None skips the version check
        """
        full = self._full_key(key)
        try:
            raw = await self.backend.get(full)
            if raw is None:
                return None
            entry = json.loads(raw)
            if not isinstance(entry, dict) or "timestamp" not in entry or "data" not in entry:
                raise StorageError(f"malformed cache entry {full}")
            timestamp = float(entry["timestamp"])
            if not math.isfinite(timestamp):
                raise StorageError(f"non-finite timestamp in cache entry {full}")
        except (StorageError, ValueError, TypeError) as e:
            log.warning("Cache read failed for %s, evicting: %s", full, e)
            await self._evict(full)
            return None

        if self._clock() - timestamp > self.ttl:
            log.debug("Cache expired: %s", full)
            await self._evict(full)
            return None

        if expected_version is not None and entry.get("version") != expected_version:
            log.debug("Cache version mismatch for %s: %s != %s",
                      full, entry.get("version"), expected_version)
            await self._evict(full)
            return None

        return entry["data"]

    async def set(self, key: str, data: Any, version: str = "") -> None:
        """Store ``data`` under ``key``, replacing any previous entry wholesale."""
        full = self._full_key(key)
        try:
            payload = json.dumps({"data": data, "timestamp": self._clock(), "version": version})
            await self.backend.set(full, payload)
        except (StorageError, TypeError, ValueError) as e:
            log.warning("Cache write failed for %s: %s", full, e)

    async def clear(self, prefix: Optional[str] = None) -> int:
        """
        Remove every key starting with ``prefix`` (this store's namespace by default).

        Returns:
            Number of removed keys
        """
        return await clear_prefix(self.backend, prefix if prefix is not None else self.prefix)

    async def _evict(self, full_key: str) -> None:
        try:
            await self.backend.delete(full_key)
        except StorageError as e:
            log.warning("Cache eviction failed for %s: %s", full_key, e)


async def clear_prefix(backend: CacheBackend, prefix: str) -> int:
    """Remove every backend key under ``prefix``; unrelated keys are left alone."""
    try:
        keys = await backend.keys(prefix)
        for key in keys:
            await backend.delete(key)
    except StorageError as e:
        log.warning("Cache clear failed for prefix %s: %s", prefix, e)
        return 0
    log.info("Cache cleared: %s (%d keys)", prefix, len(keys))
    return len(keys)
