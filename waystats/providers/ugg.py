# waystats/providers/ugg.py
# ============================================================================
# Provider B (U.GG brut via fonctions distantes) – overview + matchups
# JSON sans schéma, indexé par patch ("14.24.1" → "14_24").
# Formes candidates essayées dans un ordre fixe (voir *_INTERPRETERS) :
# la première qui reconnaît le payload décide.
#
# ⚠️ Le repli "premier tableau de plus de 10 lignes" pour trouver la table de
# matchups est fragile : si U.GG change de format, on peut tomber sur le
# mauvais tableau sans erreur visible.
# ============================================================================

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional, Tuple

from waystats.cache.store import CacheStore
from waystats.ddragon.client import StaticDataClient
from waystats.ddragon.version import VersionResolver, to_patch
from waystats.errors import NotFoundError, ParseError, Result, WaystatsError
from waystats.functions import UGG_MATCHUPS, UGG_OVERVIEW, FunctionsClient
from waystats.models.champion import Champion, ChampionCounter, ChampionMeta, Matchups
from waystats.normalize import (
    Interpreter,
    interpret,
    number,
    pick,
    rank_matchups,
    raw_matchup_row,
    raw_overview_meta,
    unwrap_result,
)

log = logging.getLogger(__name__)

MATCHUP_TABLE_MIN_ROWS = 10   # seuil hérité, non calibré
MATCHUP_LIMIT = 20


def _entry_matches(entry: Any, champ_id: int) -> bool:
    if not isinstance(entry, Mapping):
        return False
    ident = pick(entry, "championId", "cid")
    if ident is not None and number(ident, default=-1) == champ_id:
        return True
    return number(entry.get("id"), default=-1) == champ_id


def _scan(rows: List[Any], champ_id: int) -> Optional[Mapping[str, Any]]:
    return next((e for e in rows if _entry_matches(e, champ_id)), None)


def _keyed_by_id(root: Any) -> bool:
    return isinstance(root, Mapping) and any(str(k).isdigit() for k in root)


def overview_interpreters(champ_id: int) -> List[Interpreter]:
    """Overview layouts, in precedence order, for champion ``champ_id``."""
    return [
        Interpreter("root-array",
                    lambda root: isinstance(root, list),
                    lambda root: _scan(root, champ_id)),
        Interpreter("data-array",
                    lambda root: isinstance(root, Mapping) and isinstance(root.get("data"), list),
                    lambda root: _scan(root["data"], champ_id)),
        Interpreter("keyed-by-id",
                    _keyed_by_id,
                    lambda root: root.get(str(champ_id), root.get(champ_id))),
    ]


def _first_long_array(root: Mapping[str, Any]) -> Optional[List[Any]]:
    return next((v for v in root.values()
                 if isinstance(v, list) and len(v) > MATCHUP_TABLE_MIN_ROWS), None)


MATCHUP_INTERPRETERS: List[Interpreter] = [
    Interpreter("root-array",
                lambda root: isinstance(root, list),
                lambda root: root),
    Interpreter("matchups-array",
                lambda root: isinstance(root, Mapping) and isinstance(root.get("matchups"), list),
                lambda root: root["matchups"]),
    Interpreter("first-long-array",
                lambda root: isinstance(root, Mapping) and _first_long_array(root) is not None,
                _first_long_array),
]


class UggProvider:
    """Champion overview and matchup tables from the schema-free service."""

    def __init__(self, functions: FunctionsClient, static: StaticDataClient,
                 versions: VersionResolver, cache: CacheStore):
        self.functions = functions
        self.static = static
        self.versions = versions
        self.cache = cache

    async def _patch(self) -> str:
        return to_patch(await self.versions.get_latest_version())

    async def _raw(self, key: str, patch: str, endpoint: str,
                   body: Dict[str, Any]) -> Tuple[Any, bool]:
        """
        Raw upstream JSON (unwrapped from ``result`` if present).

        Returns:
            (payload, fresh): ``fresh`` is True when the payload came from the
            network and still has to be stored once its layout is recognised
        """
        cached = await self.cache.get(key, patch)
        if cached is not None:
            return cached, False
        return unwrap_result(await self.functions.invoke(endpoint, body)), True

    @staticmethod
    def _name_lookup(champions: List[Champion]):
        by_key = {c.numeric_key: c.name for c in champions if c.numeric_key is not None}
        return lambda cid: by_key.get(cid, str(cid))

    async def champion_name_for_id(self, champ_id: int) -> str:
        """Display name for a numeric champion key (the id itself when unknown)."""
        return self._name_lookup(await self.static.get_champions())(champ_id)

    # ------------------------------------------------------------------ #
    async def fetch_champion_stats(self, champion_name: str) -> Result:
        resolved = await self.static.resolve_champion_key(champion_name)
        if not resolved.is_ok:
            log.info("U.GG: %s", resolved.message)
            return resolved
        champ_id = resolved.value

        try:
            patch = await self._patch()
            key = f"overview_{patch}"
            overview, fresh = await self._raw(key, patch, UGG_OVERVIEW, {"patch": patch})
            entry = interpret(overview_interpreters(champ_id), overview)
            # forme reconnue : l'overview sert aux autres champions même si celui-ci manque
            if fresh:
                await self.cache.set(key, overview, patch)
            if not isinstance(entry, Mapping):
                raise NotFoundError(f"{champion_name} ({champ_id}) absent from overview {patch}")
        except WaystatsError as e:
            log.warning("U.GG overview parse failed for %s: %s", champion_name, e)
            return Result.from_exc(e)

        return Result.ok(raw_overview_meta(entry, champion_name))

    async def fetch_matchups(self, champion_name: str) -> Result:
        # résolution avant tout appel réseau
        resolved = await self.static.resolve_champion_key(champion_name)
        if not resolved.is_ok:
            log.info("U.GG: %s", resolved.message)
            return resolved
        champ_id = resolved.value

        try:
            patch = await self._patch()
            key = f"matchups_{patch}_{champ_id}"
            data, fresh = await self._raw(key, patch, UGG_MATCHUPS,
                                          {"patch": patch, "championId": champ_id})
            table = interpret(MATCHUP_INTERPRETERS, data)
            if not isinstance(table, list):
                raise ParseError("matchup table is not a list")
            if fresh:
                await self.cache.set(key, data, patch)
        except WaystatsError as e:
            log.warning("U.GG matchups parse failed for %s: %s", champion_name, e)
            return Result.from_exc(e)

        name_for_id = self._name_lookup(await self.static.get_champions())
        rows = [c for c in (raw_matchup_row(r, name_for_id) for r in table) if c is not None]
        best, worst = rank_matchups(rows, MATCHUP_LIMIT)
        return Result.ok(Matchups(best=best, worst=worst))

    # ------------------------------------------------------------------ #
    async def get_champion_stats(self, champion_name: str) -> Optional[ChampionMeta]:
        return (await self.fetch_champion_stats(champion_name)).unwrap_or(None)

    async def get_matchups(self, champion_name: str) -> Matchups:
        return (await self.fetch_matchups(champion_name)).unwrap_or(Matchups.empty())

    async def get_best_matchups(self, champion_name: str) -> List[ChampionCounter]:
        return (await self.get_matchups(champion_name)).best

    async def get_worst_matchups(self, champion_name: str) -> List[ChampionCounter]:
        return (await self.get_matchups(champion_name)).worst

    async def clear_cache(self) -> int:
        return await self.cache.clear()
