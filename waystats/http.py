# waystats/http.py

import asyncio
import logging
from typing import Any, Dict, Optional

import aiohttp

from waystats.errors import NetworkError, ParseError, RateLimitError

log = logging.getLogger(__name__)


def _retry_after(headers) -> int:
    """Seconds to wait on 429: delta-seconds form only, 1 otherwise (HTTP-date included)."""
    try:
        return max(int(headers.get("Retry-After", "1")), 0)
    except (TypeError, ValueError):
        return 1


class HttpClient:
    """Async JSON-over-HTTP client with retry handling, shared by every fetcher."""

    def __init__(self, timeout: float = 10.0, max_retries: int = 3,
                 headers: Optional[Dict[str, str]] = None):
        self.timeout = timeout
        self.max_retries = max_retries
        self.headers = headers or {"Accept": "application/json"}
        self._session: Optional[aiohttp.ClientSession] = None

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                headers=self.headers,
                timeout=aiohttp.ClientTimeout(total=self.timeout)
            )
        return self._session

    async def close(self):
        """Close the aiohttp session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def _request(self, method: str, url: str, max_retries: Optional[int] = None,
                       **kwargs) -> Any:
        """
        Make an async HTTP request with retry logic.

        Args:
            method: HTTP verb ("GET", "POST")
            url: The full URL to request
            max_retries: Overrides the client-wide retry count
            **kwargs: Forwarded to ``session.request`` (json=, headers=)

        Returns:
            Decoded JSON body, or None on 404

        Raises:
            RateLimitError: When 429 persists after retries
            NetworkError: For every other transport or HTTP failure
            ParseError: When the body is not valid JSON
        """
        retries = max_retries if max_retries is not None else self.max_retries
        session = await self._get_session()

        for attempt in range(retries):
            try:
                async with session.request(method, url, **kwargs) as resp:
                    if resp.status == 429:
                        retry_after = _retry_after(resp.headers) + 1
                        if attempt < retries - 1:
                            log.warning(f"429 Rate limited, retrying after {retry_after}s (attempt {attempt + 1}/{retries})")
                            await asyncio.sleep(retry_after)
                            continue
                        raise RateLimitError(f"Rate limit exceeded after {retries} attempts")

                    if resp.status == 404:
                        log.debug(f"404 Not Found: {url}")
                        return None

                    resp.raise_for_status()
                    return await resp.json(content_type=None)

            except aiohttp.ClientResponseError as e:
                if e.status >= 500 and attempt < retries - 1:
                    wait = 2 ** attempt
                    log.warning(f"Server error {e.status}, retrying in {wait}s")
                    await asyncio.sleep(wait)
                    continue
                raise NetworkError(f"HTTP {e.status} on {url}: {e.message}") from e
            except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                if attempt < retries - 1:
                    wait = 2 ** attempt
                    log.warning(f"Network error, retrying in {wait}s: {e}")
                    await asyncio.sleep(wait)
                    continue
                raise NetworkError(f"Network error on {url}: {e}") from e
            except ValueError as e:
                # corps non-JSON
                raise ParseError(f"Invalid JSON body from {url}: {e}") from e

        raise NetworkError(f"Failed after {retries} attempts: {url}")

    async def get_json(self, url: str) -> Any:
        return await self._request("GET", url)

    async def post_json(self, url: str, body: Dict[str, Any],
                        headers: Optional[Dict[str, str]] = None) -> Any:
        return await self._request("POST", url, json=body, headers=headers)
