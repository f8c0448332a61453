"""Unit tests for VersionResolver and StaticDataClient."""

from unittest.mock import AsyncMock

import pytest

from waystats.ddragon import images
from waystats.ddragon.version import FALLBACK_VERSION, check_newest_first, to_patch
from waystats.errors import ErrorKind, NetworkError, ParseError


class TestPatch:

    @pytest.mark.parametrize("version,patch", [
        ("14.24.1", "14_24"),
        ("15.1.3", "15_1"),
        ("15.13.1", "15_13"),
    ])
    def test_to_patch(self, version, patch):
        assert to_patch(version) == patch

    @pytest.mark.parametrize("bad", ["14", "", "lolpatch_3.7"])
    def test_to_patch_rejects_malformed(self, bad):
        with pytest.raises(ParseError):
            to_patch(bad)

    def test_newest_first_check(self):
        assert check_newest_first(["14.24.1", "14.23.1", "lolpatch_3.7"])
        assert not check_newest_first(["14.2.1", "14.24.1"])
        assert not check_newest_first([])


@pytest.mark.asyncio
class TestVersionResolver:

    async def test_fetches_first_version(self, versions, http):
        assert await versions.get_latest_version() == "14.24.1"
        http.get_json.assert_awaited_once_with("https://ddragon.leagueoflegends.com/api/versions.json")

    async def test_cached_for_ttl(self, versions, http, clock):
        await versions.get_latest_version()
        clock.advance(23 * 3600)
        await versions.get_latest_version()

        assert http.get_json.await_count == 1

    async def test_refetched_after_ttl(self, versions, http, clock):
        await versions.get_latest_version()
        clock.advance(24 * 3600 + 1)
        await versions.get_latest_version()

        assert http.get_json.await_count == 2

    async def test_fallback_on_network_error(self, versions, http):
        http.get_json = AsyncMock(side_effect=NetworkError("down"))

        assert await versions.get_latest_version() == FALLBACK_VERSION

    async def test_fallback_is_not_cached(self, versions, http, ddragon_routes):
        http.get_json = AsyncMock(side_effect=NetworkError("down"))
        await versions.get_latest_version()

        http.get_json = AsyncMock(side_effect=ddragon_routes(versions=["15.2.1"]))
        assert await versions.get_latest_version() == "15.2.1"

    async def test_fallback_on_unexpected_shape(self, versions, http):
        http.get_json = AsyncMock(return_value={"latest": "14.24.1"})

        assert await versions.get_latest_version() == FALLBACK_VERSION

    async def test_out_of_order_list_still_uses_head(self, versions, http, ddragon_routes, caplog):
        http.get_json = AsyncMock(side_effect=ddragon_routes(versions=["14.2.1", "14.24.1"]))

        assert await versions.get_latest_version() == "14.2.1"
        assert "newest-first" in caplog.text

    async def test_get_patch(self, versions):
        assert await versions.get_patch() == "14_24"


@pytest.mark.asyncio
class TestStaticDataClient:

    async def test_champions_unwrapped(self, static, http):
        champs = await static.get_champions()

        assert {c.id for c in champs} == {"Ahri", "Zed", "MonkeyKing"}
        ahri = next(c for c in champs if c.id == "Ahri")
        assert ahri.key == "103" and ahri.tags == ("Mage", "Assassin")
        http.get_json.assert_any_await(
            "https://ddragon.leagueoflegends.com/cdn/14.24.1/data/en_US/champion.json")

    async def test_champions_cached_per_locale(self, static, http):
        await static.get_champions()
        await static.get_champions()
        await static.get_champions("fr_FR")

        champion_calls = [c for c in http.get_json.await_args_list if c.args[0].endswith("champion.json")]
        assert len(champion_calls) == 2

    async def test_cache_invalidated_by_new_version(self, static, http, clock, ddragon_routes):
        await static.get_champions()
        clock.advance(24 * 3600 + 1)   # version and catalog both stale
        http.get_json.side_effect = ddragon_routes(versions=["14.25.1"])
        await static.get_champions()

        urls = [c.args[0] for c in http.get_json.await_args_list]
        assert any("/cdn/14.25.1/" in u for u in urls)

    async def test_version_mismatch_refetches(self, static, http, static_cache):
        await static.get_champions()
        await static_cache.set("version", "14.25.1", "latest")
        await static.get_champions()

        urls = [c.args[0] for c in http.get_json.await_args_list]
        assert any("/cdn/14.25.1/data/en_US/champion.json" in u for u in urls)

    async def test_items_and_spells_are_maps(self, static, http, ddragon_routes):
        http.get_json.side_effect = ddragon_routes(extra={
            "/item.json": {"data": {"1001": {"name": "Boots"}}},
            "/summoner.json": {"data": {"SummonerFlash": {"name": "Flash"}}},
        })

        assert await static.get_items() == {"1001": {"name": "Boots"}}
        assert await static.get_summoner_spells() == {"SummonerFlash": {"name": "Flash"}}

    async def test_runes_are_top_level_array(self, static, http, ddragon_routes):
        runes = [{"id": 8100, "key": "Domination", "slots": []}]
        http.get_json.side_effect = ddragon_routes(extra={"/runesReforged.json": runes})

        assert await static.get_runes() == runes

    async def test_failure_returns_empty(self, static, http, ddragon_routes):
        http.get_json.side_effect = ddragon_routes(champions={"unexpected": True})

        assert await static.get_champions() == []
        result = await static.fetch_champions()
        assert result.error is ErrorKind.PARSE

    async def test_missing_file_returns_empty(self, static):
        assert await static.get_items() == {}

    async def test_champion_details(self, static, http, ddragon_routes):
        details = {"id": "Ahri", "lore": "...", "spells": []}
        http.get_json.side_effect = ddragon_routes(extra={"/champion/Ahri.json": {"data": {"Ahri": details}}})

        assert await static.get_champion_details("Ahri") == details
        assert await static.get_champion_details("Ahri") == details
        detail_calls = [c for c in http.get_json.await_args_list if c.args[0].endswith("Ahri.json")]
        assert len(detail_calls) == 1

    async def test_champion_details_unknown(self, static):
        assert await static.get_champion_details("Nobody") is None

    async def test_find_champion_by_name_or_id(self, static):
        assert (await static.find_champion("wukong")).id == "MonkeyKing"
        assert (await static.find_champion("MONKEYKING")).name == "Wukong"
        assert await static.find_champion("Aatrox") is None

    async def test_resolve_champion_key(self, static):
        assert (await static.resolve_champion_key("Zed")).value == 238
        assert (await static.resolve_champion_key("Aatrox")).error is ErrorKind.NOT_FOUND


class TestImages:

    def test_urls(self):
        assert images.champion_icon_url("Ahri", "14.24.1") == \
            "https://ddragon.leagueoflegends.com/cdn/14.24.1/img/champion/Ahri.png"
        assert images.champion_splash_url("Ahri", 2).endswith("/cdn/img/champion/splash/Ahri_2.jpg")
        assert images.champion_loading_url("Ahri").endswith("/loading/Ahri_0.jpg")
        assert images.item_icon_url(1001, "14.24.1").endswith("/14.24.1/img/item/1001.png")
        assert images.spell_icon_url("SummonerFlash", "14.24.1").endswith("/img/spell/SummonerFlash.png")
        assert images.passive_icon_url("Ahri_P.png", "14.24.1").endswith("/img/passive/Ahri_P.png")
        assert images.rune_icon_url("perk-images/Styles/7200_Domination.png") == \
            "https://ddragon.leagueoflegends.com/cdn/img/perk-images/Styles/7200_Domination.png"
