"""
Game API REST Client.
Thin async wrapper over the inventory and incubator endpoints. No retries.
"""

from __future__ import annotations
from typing import Any, Dict, Optional
import aiohttp
import logging

from game.models import UseIncubatorResponse

logger = logging.getLogger(__name__)


class GameClientError(Exception):
    """Raised when the game API answers with a non-OK result."""

    def __init__(self, endpoint: str, status: int, message: str):
        super().__init__(f"{endpoint} failed ({status}): {message}")
        self.endpoint = endpoint
        self.status = status


class GameClient:
    """Async game API wrapper."""

    def __init__(self, base_url: str, auth_token: str = "", timeout_sec: int = 30):
        self.base_url = base_url.rstrip("/")
        self.auth_token = auth_token
        self.timeout = aiohttp.ClientTimeout(total=timeout_sec)
        self._session: Optional[aiohttp.ClientSession] = None

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self.timeout)
        return self._session

    async def close(self):
        if self._session and not self._session.closed:
            await self._session.close()

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.auth_token:
            headers["Authorization"] = f"Bearer {self.auth_token}"
        return headers

    async def _request(
        self,
        method: str,
        endpoint: str,
        payload: Optional[Dict] = None,
    ) -> Dict[str, Any]:
        """Make an API request and return the decoded JSON body."""
        session = await self._get_session()
        url = f"{self.base_url}{endpoint}"

        try:
            async with session.request(method, url, headers=self._headers(), json=payload) as resp:
                if resp.status != 200:
                    body = await resp.text()
                    logger.error(f"[REST] {method} {endpoint} Error: status={resp.status}, body={body[:200]}")
                    raise GameClientError(endpoint, resp.status, body[:200])
                return await resp.json()

        except aiohttp.ClientError as e:
            logger.error(f"[REST] {method} {endpoint} Exception: {e}")
            raise

    async def get_inventory(self) -> Dict[str, Any]:
        """Full inventory snapshot: player stats, incubators, eggs, pokemons."""
        return await self._request("GET", "/inventory")

    async def use_item_egg_incubator(self, incubator_id: str, egg_id: int) -> UseIncubatorResponse:
        """Put an egg into an incubator."""
        logger.info(f"[REST] Using incubator {incubator_id} for egg {egg_id}")
        data = await self._request(
            "POST", "/incubators/use",
            {"incubator_id": incubator_id, "egg_id": egg_id},
        )
        incubator = data.get("egg_incubator") or {}
        if "target_km_walked" not in incubator:
            raise GameClientError("/incubators/use", 200, "response has no egg_incubator.target_km_walked")
        return UseIncubatorResponse(target_km_walked=float(incubator["target_km_walked"]))
