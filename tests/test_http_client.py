"""Unit tests for the async HttpClient and FunctionsClient."""

import pytest
import aiohttp
from unittest.mock import AsyncMock, MagicMock, patch

from waystats.errors import NetworkError, ParseError, RateLimitError
from waystats.functions import FunctionsClient
from waystats.http import HttpClient


def make_response(status=200, payload=None, headers=None, json_error=None):
    resp = MagicMock()
    resp.status = status
    resp.headers = headers or {}
    resp.json = AsyncMock(return_value=payload, side_effect=json_error)
    resp.raise_for_status = MagicMock()
    resp.__aenter__.return_value = resp
    resp.__aexit__.return_value = None
    return resp


def make_session(*responses):
    session = MagicMock()
    session.closed = False
    if len(responses) == 1:
        session.request.return_value = responses[0]
    else:
        session.request.side_effect = list(responses)
    return session


@pytest.mark.asyncio
class TestHttpClient:
    """Session lifecycle, retries and error mapping."""

    async def test_client_initialization(self):
        client = HttpClient(timeout=5, max_retries=2)
        assert client.timeout == 5
        assert client.max_retries == 2
        assert client._session is None

    async def test_get_session_creates_session(self):
        client = HttpClient()
        session = await client._get_session()

        assert isinstance(session, aiohttp.ClientSession)
        assert not session.closed
        assert await client._get_session() is session

        await client.close()

    async def test_context_manager(self):
        async with HttpClient() as client:
            session = await client._get_session()
            assert not session.closed

        assert client._session.closed

    async def test_get_json(self):
        client = HttpClient()
        client._session = make_session(make_response(payload=["14.24.1"]))

        assert await client.get_json("http://test.url") == ["14.24.1"]
        client._session.request.assert_called_once_with("GET", "http://test.url")

    async def test_post_json_forwards_body(self):
        client = HttpClient()
        client._session = make_session(make_response(payload={"ok": True}))

        await client.post_json("http://fn/x", {"patch": "14_24"}, headers={"apikey": "k"})

        client._session.request.assert_called_once_with(
            "POST", "http://fn/x", json={"patch": "14_24"}, headers={"apikey": "k"})

    async def test_404_returns_none(self):
        client = HttpClient()
        client._session = make_session(make_response(status=404))

        assert await client.get_json("http://test.url") is None

    async def test_429_retry(self):
        client = HttpClient()
        client._session = make_session(
            make_response(status=429, headers={"Retry-After": "1"}),
            make_response(payload={"data": "success"}),
        )

        with patch("asyncio.sleep", new_callable=AsyncMock):
            result = await client.get_json("http://test.url")

        assert result == {"data": "success"}

    async def test_429_http_date_retry_after_waits_default(self):
        client = HttpClient()
        client._session = make_session(
            make_response(status=429, headers={"Retry-After": "Wed, 21 Oct 2026 07:28:00 GMT"}),
            make_response(payload={"data": "success"}),
        )

        with patch("asyncio.sleep", new_callable=AsyncMock) as sleep:
            result = await client.get_json("http://test.url")

        assert result == {"data": "success"}
        sleep.assert_awaited_once_with(2)

    async def test_429_exhausted_raises_rate_limit(self):
        client = HttpClient(max_retries=2)
        resp = make_response(status=429, headers={"Retry-After": "1"})
        client._session = make_session(resp, resp)

        with patch("asyncio.sleep", new_callable=AsyncMock):
            with pytest.raises(RateLimitError):
                await client.get_json("http://test.url")

    async def test_server_error_retried_then_raised(self):
        client = HttpClient(max_retries=2)
        resp = make_response(status=503)
        resp.raise_for_status.side_effect = aiohttp.ClientResponseError(
            request_info=MagicMock(), history=(), status=503, message="Unavailable")
        client._session = make_session(resp, resp)

        with patch("asyncio.sleep", new_callable=AsyncMock) as sleep:
            with pytest.raises(NetworkError):
                await client.get_json("http://test.url")

        sleep.assert_awaited_once_with(1)

    async def test_connection_error_becomes_network_error(self):
        client = HttpClient(max_retries=1)
        session = MagicMock()
        session.closed = False
        session.request.side_effect = aiohttp.ClientConnectionError("refused")
        client._session = session

        with pytest.raises(NetworkError):
            await client.get_json("http://test.url")

    async def test_invalid_json_is_parse_error(self):
        client = HttpClient()
        client._session = make_session(make_response(json_error=ValueError("Expecting value")))

        with pytest.raises(ParseError):
            await client.get_json("http://test.url")


@pytest.mark.asyncio
class TestFunctionsClient:

    async def test_invoke_posts_to_named_function(self):
        http = MagicMock()
        http.post_json = AsyncMock(return_value={"result": {}})
        client = FunctionsClient(http, "https://proj.example/functions/v1/", api_key="anon")

        assert await client.invoke("ugg-champion-overview", {"patch": "14_24"}) == {"result": {}}

        url, body = http.post_json.await_args.args
        headers = http.post_json.await_args.kwargs["headers"]
        assert url == "https://proj.example/functions/v1/ugg-champion-overview"
        assert body == {"patch": "14_24"}
        assert headers["Authorization"] == "Bearer anon"

    async def test_error_body_is_network_error(self):
        http = MagicMock()
        http.post_json = AsyncMock(return_value={"error": "UGG request failed 403"})
        client = FunctionsClient(http, "https://fn")

        with pytest.raises(NetworkError):
            await client.invoke("ugg-champion-overview", {"patch": "14_24"})

    async def test_empty_body_is_network_error(self):
        http = MagicMock()
        http.post_json = AsyncMock(return_value=None)
        client = FunctionsClient(http, "https://fn")

        with pytest.raises(NetworkError):
            await client.invoke("opgg-champion-meta", {"championName": "Ahri"})

    async def test_no_key_no_auth_header(self):
        http = MagicMock()
        http.post_json = AsyncMock(return_value=[])
        client = FunctionsClient(http, "https://fn")

        await client.invoke("x", {})

        assert "Authorization" not in http.post_json.await_args.kwargs["headers"]
