# waystats/ddragon/version.py
# ============================================================================
# Version courante du client (Data Dragon) + traduction en patch U.GG
#
# Contrat supposé : /api/versions.json renvoie les versions de la plus récente
# à la plus ancienne. Rien ne le garantit côté Riot ; on prend quand même
# l'élément 0 mais on logue un warning si une version plus haute apparaît
# plus loin dans la liste.
# ============================================================================

from __future__ import annotations

import logging
from typing import Any, List, Optional, Tuple

from waystats.cache.store import CacheStore
from waystats.errors import ParseError, WaystatsError
from waystats.http import HttpClient

log = logging.getLogger(__name__)

DDRAGON_BASE = "https://ddragon.leagueoflegends.com"
FALLBACK_VERSION = "14.24.1"

VERSION_KEY = "version"
VERSION_TAG = "latest"   # la version n'est pas liée à un patch


def _numeric(version: str) -> Optional[Tuple[int, ...]]:
    """ "14.24.1" → (14, 24, 1) ; None pour "lolpatch_3.7" & co."""
    try:
        return tuple(int(p) for p in version.split("."))
    except ValueError:
        return None


def to_patch(version: str) -> str:
    """
    Convert a Data Dragon version to the analytics patch id.

    "14.24.1" → "14_24", "15.1.3" → "15_1".

    Raises:
        ParseError: fewer than two numeric components
    """
    parts = str(version).split(".")
    if len(parts) < 2 or not parts[0].isdigit() or not parts[1].isdigit():
        raise ParseError(f"cannot derive patch from version {version!r}")
    major, minor = parts[0], parts[1]
    return f"{major}_{minor}"


def check_newest_first(versions: List[str]) -> bool:
    """True when versions[0] is the highest numeric version of the list."""
    parsed = [v for v in (_numeric(x) for x in versions) if v is not None]
    head = _numeric(versions[0]) if versions else None
    if head is None or not parsed:
        return False
    return head >= max(parsed)


class VersionResolver:
    """Resolves (and caches for STATIC_CACHE_TTL) the latest game-client version."""

    def __init__(self, http: HttpClient, cache: CacheStore,
                 base_url: str = DDRAGON_BASE, fallback: str = FALLBACK_VERSION):
        self.http = http
        self.cache = cache
        self.base_url = base_url.rstrip("/")
        self.fallback = fallback

    async def get_latest_version(self) -> str:
        """
        Latest version string, from cache when fresh.

        Never raises: any fetch or shape failure yields the fallback version,
        which is not cached so the next call retries.
        """
        cached = await self.cache.get(VERSION_KEY, VERSION_TAG)
        if isinstance(cached, str) and cached:
            return cached

        try:
            versions = self._parse(await self.http.get_json(f"{self.base_url}/api/versions.json"))
        except WaystatsError as e:
            log.error("Version lookup failed, falling back to %s: %s", self.fallback, e)
            return self.fallback

        latest = versions[0]
        if not check_newest_first(versions):
            log.warning("versions.json does not look newest-first (head=%s); using it anyway", latest)

        await self.cache.set(VERSION_KEY, latest, VERSION_TAG)
        log.info("Version Data-Dragon : %s", latest)
        return latest

    async def get_patch(self) -> str:
        return to_patch(await self.get_latest_version())

    @staticmethod
    def _parse(data: Any) -> List[str]:
        if not isinstance(data, list) or not data or not isinstance(data[0], str):
            raise ParseError(f"unexpected versions.json payload: {type(data).__name__}")
        return [str(v) for v in data]
