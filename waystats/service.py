# waystats/service.py
# ============================================================================
# Assemblage : un backend de cache partagé, un CacheStore par sous-système
# (préfixes distincts), un seul HttpClient.
# ============================================================================

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from waystats.cache.backends import CacheBackend, make_backend
from waystats.cache.store import DDRAGON_PREFIX, OPGG_PREFIX, UGG_PREFIX, CacheStore, clear_prefix
from waystats.config import Settings
from waystats.ddragon.client import StaticDataClient
from waystats.ddragon.version import VersionResolver
from waystats.functions import FunctionsClient
from waystats.http import HttpClient
from waystats.providers.opgg import OpggProvider
from waystats.providers.ugg import UggProvider

log = logging.getLogger(__name__)


@dataclass
class GameData:
    """Every fetcher of the subsystem, wired on one backend and one HTTP session."""
    backend: CacheBackend
    http: HttpClient
    versions: VersionResolver
    static: StaticDataClient
    opgg: OpggProvider
    ugg: UggProvider

    async def clear_cache(self, prefix: str) -> int:
        """Remove every cache key under ``prefix``; other keys are untouched."""
        return await clear_prefix(self.backend, prefix)

    async def close(self) -> None:
        await self.http.close()
        await self.backend.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()


def build_game_data(settings: Settings, backend: Optional[CacheBackend] = None,
                    http: Optional[HttpClient] = None) -> GameData:
    if backend is None:
        backend = make_backend(settings.CACHE_BACKEND, settings.REDIS_URL)
    if http is None:
        http = HttpClient(timeout=settings.HTTP_TIMEOUT, max_retries=settings.HTTP_MAX_RETRIES)

    static_cache = CacheStore(backend, DDRAGON_PREFIX, settings.STATIC_CACHE_TTL)
    versions = VersionResolver(http, static_cache, settings.DDRAGON_BASE, settings.FALLBACK_VERSION)
    static = StaticDataClient(http, versions, static_cache, settings.DDRAGON_BASE,
                              settings.DEFAULT_LOCALE)
    functions = FunctionsClient(http, settings.FUNCTIONS_URL, settings.FUNCTIONS_KEY)

    opgg = OpggProvider(functions, CacheStore(backend, OPGG_PREFIX, settings.ANALYTICS_CACHE_TTL),
                        settings.DEFAULT_TIER)
    ugg = UggProvider(functions, static, versions,
                      CacheStore(backend, UGG_PREFIX, settings.ANALYTICS_CACHE_TTL))

    log.debug("GameData built (backend=%s)", type(backend).__name__)
    return GameData(backend=backend, http=http, versions=versions, static=static,
                    opgg=opgg, ugg=ugg)
