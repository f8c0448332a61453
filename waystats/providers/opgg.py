# waystats/providers/opgg.py
# ============================================================================
# Provider A (OP.GG via fonctions distantes) – analyse, méta, positions
# Réponse enveloppée : {result: {content: [{type: "text", text}]}} ou objet nu,
# clés camelCase ou snake_case. Rien ne remonte à l'appelant : None / [].
# ============================================================================

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from waystats.cache.store import CacheStore
from waystats.errors import ParseError, Result, WaystatsError
from waystats.functions import OPGG_ANALYSIS, OPGG_META, OPGG_POSITIONS, FunctionsClient
from waystats.models.champion import ChampionAnalysis, ChampionCounter, ChampionMeta, PositionStats
from waystats.normalize import (
    extract_envelope,
    normalize_analysis,
    normalize_meta,
    normalize_positions,
)

log = logging.getLogger(__name__)

DEFAULT_TIER = "platinum_plus"


class OpggProvider:
    """Champion analysis, meta and positions from the envelope-wrapped service."""

    def __init__(self, functions: FunctionsClient, cache: CacheStore,
                 default_tier: str = DEFAULT_TIER):
        self.functions = functions
        self.cache = cache
        self.default_tier = default_tier

    def _body(self, champion_name: str, tier: str, position: Optional[str]) -> Dict[str, Any]:
        body: Dict[str, Any] = {"championName": champion_name, "tier": tier}
        if position:
            body["position"] = position
        return body

    async def _invoke(self, endpoint: str, body: Dict[str, Any]) -> Any:
        log.info("Fetching %s for %s", endpoint, body.get("championName"))
        return extract_envelope(await self.functions.invoke(endpoint, body))

    # ------------------------------------------------------------------ #
    async def fetch_analysis(self, champion_name: str, tier: Optional[str] = None,
                             position: Optional[str] = None) -> Result:
        tier = tier or self.default_tier
        key = f"analysis_{champion_name}_{tier}_{position or 'all'}"
        cached = await self.cache.get(key)
        if isinstance(cached, dict):
            return Result.ok(normalize_analysis(cached, champion_name))

        try:
            payload = await self._invoke(OPGG_ANALYSIS, self._body(champion_name, tier, position))
            if not isinstance(payload, dict):
                raise ParseError(f"analysis payload is a {type(payload).__name__}")
            analysis = normalize_analysis(payload, champion_name)
        except WaystatsError as e:
            log.warning("Champion analysis failed for %s: %s", champion_name, e)
            return Result.from_exc(e)

        await self.cache.set(key, analysis.to_dict())
        return Result.ok(analysis)

    async def fetch_meta(self, champion_name: str, tier: Optional[str] = None,
                         position: Optional[str] = None) -> Result:
        tier = tier or self.default_tier
        key = f"meta_{champion_name}_{tier}_{position or 'all'}"
        cached = await self.cache.get(key)
        if isinstance(cached, dict):
            return Result.ok(normalize_meta(cached, champion_name))

        try:
            payload = await self._invoke(OPGG_META, self._body(champion_name, tier, position))
            if not isinstance(payload, dict):
                raise ParseError(f"meta payload is a {type(payload).__name__}")
            meta = normalize_meta(payload, champion_name)
        except WaystatsError as e:
            log.warning("Champion meta failed for %s: %s", champion_name, e)
            return Result.from_exc(e)

        await self.cache.set(key, meta.to_dict())
        return Result.ok(meta)

    async def fetch_positions(self, champion_name: str, tier: Optional[str] = None) -> Result:
        tier = tier or self.default_tier
        key = f"positions_{champion_name}_{tier}"
        cached = await self.cache.get(key)
        if isinstance(cached, list) and cached:
            return Result.ok(normalize_positions(cached))

        try:
            payload = await self._invoke(OPGG_POSITIONS, self._body(champion_name, tier, None))
            positions = normalize_positions(payload)
        except WaystatsError as e:
            log.warning("Champion positions failed for %s: %s", champion_name, e)
            return Result.from_exc(e)

        # liste vide = rien d'utile, on ne la met pas en cache
        if positions:
            await self.cache.set(key, [p.to_dict() for p in positions])
        else:
            log.warning("No positions in OP.GG response for %s", champion_name)
        return Result.ok(positions)

    # ------------------------------------------------------------------ #
    async def get_champion_analysis(self, champion_name: str, tier: Optional[str] = None,
                                    position: Optional[str] = None) -> Optional[ChampionAnalysis]:
        return (await self.fetch_analysis(champion_name, tier, position)).unwrap_or(None)

    async def get_champion_meta(self, champion_name: str, tier: Optional[str] = None,
                                position: Optional[str] = None) -> Optional[ChampionMeta]:
        return (await self.fetch_meta(champion_name, tier, position)).unwrap_or(None)

    async def get_champion_stats(self, champion_name: str, tier: Optional[str] = None,
                                 position: Optional[str] = None) -> Optional[ChampionMeta]:
        return await self.get_champion_meta(champion_name, tier, position)

    async def get_champion_positions(self, champion_name: str,
                                     tier: Optional[str] = None) -> List[PositionStats]:
        return (await self.fetch_positions(champion_name, tier)).unwrap_or([])

    async def get_best_matchups(self, champion_name: str, tier: Optional[str] = None,
                                position: Optional[str] = None) -> List[ChampionCounter]:
        """Champions this one performs well against (``strongCounters``)."""
        analysis = await self.get_champion_analysis(champion_name, tier, position)
        return list(analysis.strong_counters) if analysis else []

    async def get_worst_matchups(self, champion_name: str, tier: Optional[str] = None,
                                 position: Optional[str] = None) -> List[ChampionCounter]:
        """Champions that counter this one (``weakCounters``)."""
        analysis = await self.get_champion_analysis(champion_name, tier, position)
        return list(analysis.weak_counters) if analysis else []

    async def clear_cache(self) -> int:
        return await self.cache.clear()
