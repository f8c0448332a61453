# waystats/normalize.py
# ============================================================================
# Normalisation des payloads hétérogènes → objets canoniques
#   • number() / pick()           : coercition défensive, camelCase + snake_case
#   • Interpreter / interpret()   : chaîne ordonnée (matcher, parser) pour la
#                                   recherche heuristique de forme
#   • normalize_*                 : ChampionMeta, ChampionCounter, Analysis...
# Fonctions pures, aucune I/O.
# ============================================================================

from __future__ import annotations

import json
import math
import re
from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, Mapping, Optional, Sequence

from waystats.errors import ParseError
from waystats.models.champion import (
    ChampionAnalysis,
    ChampionCounter,
    ChampionMeta,
    PositionStats,
)

_FENCE_RE = re.compile(r"```(?:json)?\s*\n([\s\S]*?)\n```")
_MISSING = object()


# ────────────────────────────── Coercition ──────────────────────────────────
def number(value: Any, default: float = 0.0) -> float:
    """Coerce ``value`` to a finite float; anything else becomes ``default``."""
    if value is None or isinstance(value, bool):
        return default
    try:
        out = float(value)
    except (TypeError, ValueError):
        return default
    return out if math.isfinite(out) else default


def integer(value: Any, default: int = 0) -> int:
    return int(number(value, default))


def pick(raw: Any, *names: Any, default: Any = None) -> Any:
    """
    First non-None value among ``names`` in ``raw``.

    Names are dict keys; integer names also index into list/tuple rows.
    """
    for name in names:
        value = _MISSING
        if isinstance(raw, Mapping):
            value = raw.get(name, _MISSING)
        elif isinstance(name, int) and isinstance(raw, (list, tuple)) and -len(raw) <= name < len(raw):
            value = raw[name]
        if value is not _MISSING and value is not None:
            return value
    return default


def as_percentage(value: float) -> float:
    """Provider fractions (0.56) become percentages (56); 56 stays 56."""
    return value * 100 if value <= 1 else value


# ────────────────────────── Chaîne d'interpréteurs ──────────────────────────
@dataclass(frozen=True)
class Interpreter:
    """One candidate payload layout: ``matches`` recognises it, ``parse`` reads it."""
    name: str
    matches: Callable[[Any], bool]
    parse: Callable[[Any], Any]


def interpret(interpreters: Sequence[Interpreter], payload: Any) -> Any:
    """
    Run the first interpreter whose matcher accepts ``payload``.

    The order of ``interpreters`` is the precedence. A matching interpreter
    decides the outcome even if its parser raises.

    Raises:
        ParseError: no interpreter recognises the payload, or the chosen
            parser fails
    """
    for it in interpreters:
        if it.matches(payload):
            try:
                return it.parse(payload)
            except ParseError:
                raise
            except (TypeError, ValueError, KeyError, IndexError) as e:
                raise ParseError(f"{it.name}: {e}") from e
    raise ParseError(f"unrecognized payload shape ({type(payload).__name__})")


def matching_interpreter(interpreters: Sequence[Interpreter], payload: Any) -> Optional[str]:
    """Name of the interpreter ``interpret`` would pick, for diagnostics."""
    for it in interpreters:
        if it.matches(payload):
            return it.name
    return None


# ─────────────────────────── Enveloppe (provider A) ─────────────────────────
def unwrap_result(data: Any) -> Any:
    """``{"result": X}`` → X ; anything else is returned unchanged."""
    if isinstance(data, Mapping) and data.get("result") is not None:
        return data["result"]
    return data


def _first_content(root: Any) -> Any:
    content = root.get("content") if isinstance(root, Mapping) else None
    if isinstance(content, list) and content:
        return content[0]
    return None


def _is_text_content(root: Any) -> bool:
    first = _first_content(root)
    return (isinstance(first, Mapping) and first.get("type") == "text"
            and isinstance(first.get("text"), str))


def parse_text_payload(text: str) -> Any:
    """Parse a fenced ```json block if present, else the whole text."""
    match = _FENCE_RE.search(text)
    if match:
        try:
            return json.loads(match.group(1))
        except ValueError:
            pass
    try:
        return json.loads(text)
    except ValueError as e:
        raise ParseError(f"text content is not JSON: {e}") from e


ENVELOPE_INTERPRETERS: List[Interpreter] = [
    Interpreter(
        "text-content",
        _is_text_content,
        lambda root: parse_text_payload(_first_content(root)["text"]),
    ),
    Interpreter(
        "bare-payload",
        lambda root: root is not None and not (isinstance(root, Mapping) and "content" in root),
        lambda root: root,
    ),
]


def extract_envelope(data: Any) -> Any:
    """
    Pull the analytics payload out of a remote-function envelope.

    Accepts ``{"result": {"content": [{"type": "text", "text": ...}]}}``,
    the same without ``result``, or a bare payload.

    Raises:
        ParseError: unparseable text or a ``content`` list with no text part
    """
    payload = interpret(ENVELOPE_INTERPRETERS, unwrap_result(data))
    if payload is None:
        raise ParseError("empty envelope")
    return payload


# ─────────────────────────── Objets canoniques ──────────────────────────────
def normalize_counter(raw: Any) -> ChampionCounter:
    lane = pick(raw, "laneWinRate", "lane_win_rate")
    return ChampionCounter(
        champion_name=str(pick(raw, "championName", "champion_name", default="")),
        win_rate=number(pick(raw, "winRate", "win_rate")),
        games=integer(pick(raw, "games")),
        lane_win_rate=number(lane) if lane is not None else None,
    )


def normalize_counters(raw: Any) -> List[ChampionCounter]:
    if not isinstance(raw, list):
        return []
    return [normalize_counter(c) for c in raw if isinstance(c, Mapping)]


def normalize_meta(raw: Mapping[str, Any], champion_name: str = "") -> ChampionMeta:
    """Canonical ChampionMeta; idempotent on its own ``to_dict()`` output."""
    return ChampionMeta(
        champion_name=str(pick(raw, "championName", "champion_name", default=champion_name)),
        tier=str(pick(raw, "tier", "rank_tier", default="")),
        position=str(pick(raw, "position", "lane", default="")),
        win_rate=number(pick(raw, "winRate", "win_rate")),
        pick_rate=number(pick(raw, "pickRate", "pick_rate")),
        ban_rate=number(pick(raw, "banRate", "ban_rate")),
        games=integer(pick(raw, "games")),
        avg_kills=number(pick(raw, "avgKills", "avg_kills")),
        avg_deaths=number(pick(raw, "avgDeaths", "avg_deaths")),
        avg_assists=number(pick(raw, "avgAssists", "avg_assists")),
        kda=number(pick(raw, "kda")),
    )


def normalize_analysis(raw: Mapping[str, Any], champion_name: str = "") -> ChampionAnalysis:
    return ChampionAnalysis(
        champion_name=str(pick(raw, "championName", "champion_name", default=champion_name)),
        tier=str(pick(raw, "tier", "rank_tier", default="")),
        win_rate=number(pick(raw, "winRate", "win_rate")),
        pick_rate=number(pick(raw, "pickRate", "pick_rate")),
        ban_rate=number(pick(raw, "banRate", "ban_rate")),
        kda=number(pick(raw, "kda")),
        weak_counters=tuple(normalize_counters(pick(raw, "weakCounters", "weak_counters"))),
        strong_counters=tuple(normalize_counters(pick(raw, "strongCounters", "strong_counters"))),
    )


def normalize_position(raw: Mapping[str, Any]) -> PositionStats:
    return PositionStats(
        position=str(pick(raw, "position", "lane", default="")),
        win_rate=number(pick(raw, "winRate", "win_rate")),
        pick_rate=number(pick(raw, "pickRate", "pick_rate")),
        games=integer(pick(raw, "games")),
    )


def normalize_positions(raw: Any) -> List[PositionStats]:
    if isinstance(raw, Mapping):
        raw = pick(raw, "positions", "data", default=[])
    if not isinstance(raw, list):
        return []
    return [normalize_position(p) for p in raw if isinstance(p, Mapping)]


# ─────────────────────────── Lignes brutes (provider B) ─────────────────────
def raw_overview_meta(entry: Mapping[str, Any], champion_name: str) -> ChampionMeta:
    """ChampionMeta from a schema-free overview entry (short field aliases)."""
    return ChampionMeta(
        champion_name=champion_name,
        win_rate=number(pick(entry, "winRate", "win_rate", "wr", "win")),
        pick_rate=number(pick(entry, "pickRate", "pick_rate", "pr")),
        ban_rate=number(pick(entry, "banRate", "ban_rate", "br")),
        games=integer(pick(entry, "games", "n", "count")),
        avg_kills=number(pick(entry, "avgKills", "avg_kills")),
        avg_deaths=number(pick(entry, "avgDeaths", "avg_deaths")),
        avg_assists=number(pick(entry, "avgAssists", "avg_assists")),
        kda=number(pick(entry, "kda")),
    )


def raw_matchup_row(row: Any, name_for_id: Callable[[int], str]) -> Optional[ChampionCounter]:
    """
    Coerce one matchup row (dict or positional list) to a ChampionCounter.

    Returns None when the row carries no usable opponent id.
    """
    opp = number(pick(row, "enemyChampionId", "opponentId", "cid", "id", 0), default=math.nan)
    if math.isnan(opp):
        return None
    win_rate = as_percentage(number(pick(row, "winRate", "win_rate", "wr", 1)))
    return ChampionCounter(
        champion_name=name_for_id(int(opp)),
        win_rate=win_rate,
        games=max(integer(pick(row, "games", "count", "n", 2)), 0),
    )


def rank_matchups(rows: Iterable[ChampionCounter], limit: int = 20):
    """(best, worst): best by win rate descending, worst ascending."""
    ordered = sorted(rows, key=lambda c: c.win_rate, reverse=True)
    best = ordered[:limit]
    worst = list(reversed(ordered[-limit:])) if ordered else []
    return best, worst
