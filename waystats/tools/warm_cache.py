#!/usr/bin/env python3
"""
tools/warm_cache.py
Pré-charge le cache statique (version + catalogues Data Dragon).
Étapes :
  1. version courante        api/versions.json   (repli : FALLBACK_VERSION)
  2. patch U.GG              "15.13.1" → "15_13"
  3. catalogues              champion / item / runesReforged / summoner
Usage : python -m waystats.tools.warm_cache [locale ...]
"""
import asyncio
import sys
from typing import Dict, List, Optional

from waystats.config import settings
from waystats.ddragon.version import to_patch
from waystats.logging_config import get_logger, setup_logging
from waystats.service import GameData, build_game_data

log = get_logger(__name__)


async def warm(data: GameData, locales: List[str]) -> Dict[str, int]:
    """Load every static catalog for ``locales``; returns entry counts per catalog."""
    version = await data.versions.get_latest_version()
    log.info("Patch courant : %s (%s)", to_patch(version), version)

    counts: Dict[str, int] = {}
    for locale in locales:
        catalogs = {
            "champions": await data.static.get_champions(locale),
            "items": await data.static.get_items(locale),
            "runes": await data.static.get_runes(locale),
            "spells": await data.static.get_summoner_spells(locale),
        }
        for name, catalog in catalogs.items():
            counts[f"{name}_{locale}"] = len(catalog)
            if not catalog:
                log.warning("%s_%s vide", name, locale)
    return counts


async def main(argv: Optional[List[str]] = None) -> int:
    locales = argv or [settings.DEFAULT_LOCALE]
    async with build_game_data(settings) as data:
        counts = await warm(data, locales)
    for key, n in counts.items():
        log.info("%-20s %d", key, n)
    return 0 if all(counts.values()) else 1


if __name__ == "__main__":
    setup_logging(settings.LOG_LEVEL)
    sys.exit(asyncio.run(main(sys.argv[1:])))
