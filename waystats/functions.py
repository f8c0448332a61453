# waystats/functions.py
# ============================================================================
# Appel des fonctions distantes (proxys OP.GG / U.GG)
# POST {FUNCTIONS_URL}/{name} avec un corps JSON, réponse JSON renvoyée telle
# quelle. Un corps {"error": ...} = échec de l'invocation.
# ============================================================================

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from waystats.errors import NetworkError
from waystats.http import HttpClient

log = logging.getLogger(__name__)

# Noms des fonctions exposées par le backend
OPGG_ANALYSIS = "opgg-champion-analysis"
OPGG_META = "opgg-champion-meta"
OPGG_POSITIONS = "opgg-champion-positions"
UGG_OVERVIEW = "ugg-champion-overview"
UGG_MATCHUPS = "ugg-champion-matchups"


class FunctionsClient:
    """Invokes named remote functions that forward requests to vendor APIs."""

    def __init__(self, http: HttpClient, base_url: str, api_key: Optional[str] = None):
        self.http = http
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
            headers["apikey"] = self.api_key
        return headers

    async def invoke(self, name: str, body: Dict[str, Any]) -> Any:
        """
        Invoke function ``name`` with ``body``.

        Raises:
            NetworkError: transport failure, empty response or an error body
        """
        url = f"{self.base_url}/{name}"
        log.debug("Invoking %s with %s", name, body)
        data = await self.http.post_json(url, body, headers=self._headers())
        if data is None:
            raise NetworkError(f"{name}: empty response")
        if isinstance(data, dict) and data.get("error"):
            raise NetworkError(f"{name}: {data['error']}")
        return data
