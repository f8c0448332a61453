# waystats/ddragon/client.py
# ============================================================================
# Catalogues statiques Data Dragon (champions, items, runes, sorts)
# Clé de cache = {ressource}_{locale}, tag de version = version résolue.
# En cas d'échec : collection vide + log, jamais d'exception.
# ============================================================================

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional

from waystats.cache.store import CacheStore
from waystats.ddragon.version import DDRAGON_BASE, VersionResolver
from waystats.errors import ErrorKind, NotFoundError, ParseError, Result, WaystatsError
from waystats.http import HttpClient
from waystats.models.champion import Champion

log = logging.getLogger(__name__)

DEFAULT_LOCALE = "pt_BR"

# ressource → (clé de cache, fichier Data Dragon)
RESOURCES: Dict[str, tuple] = {
    "champions": ("champions", "champion.json"),
    "items":     ("items", "item.json"),
    "runes":     ("runes", "runesReforged.json"),
    "spells":    ("spells", "summoner.json"),
}


def _unwrap_data(payload: Any) -> Dict[str, Any]:
    if not isinstance(payload, dict) or not isinstance(payload.get("data"), dict):
        raise ParseError("missing top-level 'data' map")
    return payload["data"]


def _runes_list(payload: Any) -> List[Dict[str, Any]]:
    # runesReforged.json n'a pas d'enveloppe "data"
    if not isinstance(payload, list):
        raise ParseError("runesReforged.json is not an array")
    return payload


class StaticDataClient:
    """Versioned, locale-aware access to the Data Dragon catalogs."""

    def __init__(self, http: HttpClient, versions: VersionResolver, cache: CacheStore,
                 base_url: str = DDRAGON_BASE, default_locale: str = DEFAULT_LOCALE):
        self.http = http
        self.versions = versions
        self.cache = cache
        self.base_url = base_url.rstrip("/")
        self.default_locale = default_locale

    # ------------------------------------------------------------------ #
    async def _load(self, resource: str, locale: Optional[str],
                    extract: Callable[[Any], Any]) -> Result:
        """Shared fetch pattern: cache hit, else GET + unwrap + cache."""
        locale = locale or self.default_locale
        cache_name, filename = RESOURCES[resource]
        key = f"{cache_name}_{locale}"
        version = await self.versions.get_latest_version()

        cached = await self.cache.get(key, version)
        if cached is not None:
            return Result.ok(cached)

        url = f"{self.base_url}/cdn/{version}/data/{locale}/{filename}"
        try:
            payload = await self.http.get_json(url)
            if payload is None:
                raise NotFoundError(f"{url} not found")
            data = extract(payload)
        except WaystatsError as e:
            log.error("Error fetching %s (%s, %s): %s", resource, version, locale, e)
            return Result.from_exc(e)

        await self.cache.set(key, data, version)
        log.info("%s chargés : %d (%s, %s)", resource, len(data), version, locale)
        return Result.ok(data)

    async def fetch_champions(self, locale: Optional[str] = None) -> Result:
        result = await self._load("champions", locale,
                                  lambda p: list(_unwrap_data(p).values()))
        if not result.is_ok:
            return result
        return Result.ok([Champion.from_ddragon(c) for c in result.value if isinstance(c, dict)])

    async def get_champions(self, locale: Optional[str] = None) -> List[Champion]:
        return (await self.fetch_champions(locale)).unwrap_or([])

    async def get_items(self, locale: Optional[str] = None) -> Dict[str, Dict[str, Any]]:
        return (await self._load("items", locale, _unwrap_data)).unwrap_or({})

    async def get_runes(self, locale: Optional[str] = None) -> List[Dict[str, Any]]:
        return (await self._load("runes", locale, _runes_list)).unwrap_or([])

    async def get_summoner_spells(self, locale: Optional[str] = None) -> Dict[str, Dict[str, Any]]:
        return (await self._load("spells", locale, _unwrap_data)).unwrap_or({})

    async def get_champion_details(self, champion_id: str,
                                   locale: Optional[str] = None) -> Optional[Dict[str, Any]]:
        """Full champion file (lore, spells, skins...) for ``champion_id`` ("Ahri")."""
        locale = locale or self.default_locale
        version = await self.versions.get_latest_version()
        key = f"champion_{champion_id}_{locale}"

        cached = await self.cache.get(key, version)
        if cached is not None:
            return cached

        url = f"{self.base_url}/cdn/{version}/data/{locale}/champion/{champion_id}.json"
        try:
            payload = await self.http.get_json(url)
            if payload is None:
                raise NotFoundError(f"champion {champion_id} not found")
            details = _unwrap_data(payload).get(champion_id)
            if not isinstance(details, dict):
                raise ParseError(f"no '{champion_id}' entry in champion file")
        except WaystatsError as e:
            log.error("Error fetching champion details for %s: %s", champion_id, e)
            return None

        await self.cache.set(key, details, version)
        return details

    # ------------------------------------------------------------------ #
    async def find_champion(self, name_or_id: str,
                            locale: Optional[str] = None) -> Optional[Champion]:
        """Case-insensitive lookup by display name or internal id."""
        needle = name_or_id.strip().lower()
        for champ in await self.get_champions(locale):
            if champ.name.lower() == needle or champ.id.lower() == needle:
                return champ
        return None

    async def resolve_champion_key(self, name_or_id: str,
                                   locale: Optional[str] = None) -> Result:
        """Numeric champion key for a display name, or a NOT_FOUND result."""
        champ = await self.find_champion(name_or_id, locale)
        if champ is None or champ.numeric_key is None:
            return Result.fail(ErrorKind.NOT_FOUND, f"unknown champion {name_or_id!r}")
        return Result.ok(champ.numeric_key)

    async def clear_cache(self) -> int:
        return await self.cache.clear()
