# waystats/models/champion.py
# ============================================================================
# Objets valeur canoniques (champions, méta, counters, positions)
# Immuables : recalculés à chaque normalisation, jamais modifiés en place.
# to_dict() produit la forme camelCase utilisée sur le fil et dans le cache.
# ============================================================================

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple


@dataclass(frozen=True)
class Champion:
    """Entrée du catalogue Data Dragon (champion.json)."""
    id: str                                  # "MonkeyKing"
    key: str                                 # "62" (numérique en chaîne)
    name: str                                # "Wukong"
    title: str = ""
    image: Dict[str, Any] = field(default_factory=dict)
    tags: Tuple[str, ...] = ()
    stats: Dict[str, float] = field(default_factory=dict)
    blurb: str = ""
    partype: str = ""
    info: Dict[str, int] = field(default_factory=dict)

    @classmethod
    def from_ddragon(cls, raw: Dict[str, Any]) -> "Champion":
        return cls(
            id=str(raw.get("id", "")),
            key=str(raw.get("key", "")),
            name=str(raw.get("name", "")),
            title=str(raw.get("title", "")),
            image=dict(raw.get("image") or {}),
            tags=tuple(raw.get("tags") or ()),
            stats=dict(raw.get("stats") or {}),
            blurb=str(raw.get("blurb", "")),
            partype=str(raw.get("partype", "")),
            info=dict(raw.get("info") or {}),
        )

    @property
    def numeric_key(self) -> Optional[int]:
        try:
            return int(self.key)
        except ValueError:
            return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "key": self.key,
            "name": self.name,
            "title": self.title,
            "image": self.image,
            "tags": list(self.tags),
            "stats": self.stats,
            "blurb": self.blurb,
            "partype": self.partype,
            "info": self.info,
        }


@dataclass(frozen=True)
class ChampionCounter:
    """Une ligne de matchup (utilisée pour les listes best / worst)."""
    champion_name: str
    win_rate: float = 0.0
    games: int = 0
    lane_win_rate: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "championName": self.champion_name,
            "winRate": self.win_rate,
            "games": self.games,
        }
        if self.lane_win_rate is not None:
            out["laneWinRate"] = self.lane_win_rate
        return out


@dataclass(frozen=True)
class ChampionMeta:
    """Stats agrégées d'un champion. Tous les champs numériques sont toujours renseignés."""
    champion_name: str
    tier: str = ""
    position: str = ""
    win_rate: float = 0.0
    pick_rate: float = 0.0
    ban_rate: float = 0.0
    games: int = 0
    avg_kills: float = 0.0
    avg_deaths: float = 0.0
    avg_assists: float = 0.0
    kda: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "championName": self.champion_name,
            "tier": self.tier,
            "position": self.position,
            "winRate": self.win_rate,
            "pickRate": self.pick_rate,
            "banRate": self.ban_rate,
            "games": self.games,
            "avgKills": self.avg_kills,
            "avgDeaths": self.avg_deaths,
            "avgAssists": self.avg_assists,
            "kda": self.kda,
        }


@dataclass(frozen=True)
class ChampionAnalysis:
    champion_name: str
    tier: str = ""
    win_rate: float = 0.0
    pick_rate: float = 0.0
    ban_rate: float = 0.0
    kda: float = 0.0
    weak_counters: Tuple[ChampionCounter, ...] = ()
    strong_counters: Tuple[ChampionCounter, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "championName": self.champion_name,
            "tier": self.tier,
            "winRate": self.win_rate,
            "pickRate": self.pick_rate,
            "banRate": self.ban_rate,
            "kda": self.kda,
            "weakCounters": [c.to_dict() for c in self.weak_counters],
            "strongCounters": [c.to_dict() for c in self.strong_counters],
        }


@dataclass(frozen=True)
class PositionStats:
    position: str
    win_rate: float = 0.0
    pick_rate: float = 0.0
    games: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "position": self.position,
            "winRate": self.win_rate,
            "pickRate": self.pick_rate,
            "games": self.games,
        }


@dataclass(frozen=True)
class Matchups:
    """Meilleurs (win rate décroissant) et pires (croissant) matchups."""
    best: List[ChampionCounter] = field(default_factory=list)
    worst: List[ChampionCounter] = field(default_factory=list)

    @classmethod
    def empty(cls) -> "Matchups":
        return cls([], [])
