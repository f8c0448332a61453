# waystats/ddragon/images.py
# URLs d'assets Data Dragon. Les variantes versionnées prennent la version
# explicitement : l'appelant la récupère via VersionResolver.

from waystats.ddragon.version import DDRAGON_BASE


def champion_icon_url(champion_id: str, version: str, base: str = DDRAGON_BASE) -> str:
    return f"{base}/cdn/{version}/img/champion/{champion_id}.png"


def champion_splash_url(champion_id: str, skin_num: int = 0, base: str = DDRAGON_BASE) -> str:
    return f"{base}/cdn/img/champion/splash/{champion_id}_{skin_num}.jpg"


def champion_loading_url(champion_id: str, skin_num: int = 0, base: str = DDRAGON_BASE) -> str:
    return f"{base}/cdn/img/champion/loading/{champion_id}_{skin_num}.jpg"


def item_icon_url(item_id, version: str, base: str = DDRAGON_BASE) -> str:
    return f"{base}/cdn/{version}/img/item/{item_id}.png"


def spell_icon_url(spell_name: str, version: str, base: str = DDRAGON_BASE) -> str:
    return f"{base}/cdn/{version}/img/spell/{spell_name}.png"


def passive_icon_url(passive_image: str, version: str, base: str = DDRAGON_BASE) -> str:
    return f"{base}/cdn/{version}/img/passive/{passive_image}"


def rune_icon_url(icon_path: str, base: str = DDRAGON_BASE) -> str:
    """``icon_path`` as found in runesReforged.json ("perk-images/Styles/...")."""
    return f"{base}/cdn/img/{icon_path}"
