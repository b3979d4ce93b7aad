"""
Inventory — Cached snapshot of the player's inventory.
Refreshed once per task run; every getter reads the cached copy.
"""

from __future__ import annotations
from typing import Any, Dict, List, TYPE_CHECKING
from game.models import Egg, Incubator, PlayerStats, Pokemon
import logging

if TYPE_CHECKING:
    from game.client import GameClient

logger = logging.getLogger(__name__)


class Inventory:
    """Read-only view over the last fetched inventory snapshot."""

    def __init__(self, client: "GameClient"):
        self.client = client
        self._snapshot: Dict[str, Any] = {}

    async def refresh_cached_inventory(self):
        self._snapshot = await self.client.get_inventory()
        logger.debug(
            f"[INVENTORY] Refreshed: {len(self._snapshot.get('egg_incubators', []))} incubators, "
            f"{len(self._snapshot.get('eggs', []))} eggs, "
            f"{len(self._snapshot.get('pokemons', []))} pokemons"
        )

    def get_player_stats(self) -> List[PlayerStats]:
        return [PlayerStats.from_dict(s) for s in self._snapshot.get("player_stats", [])]

    def get_egg_incubators(self) -> List[Incubator]:
        return [Incubator.from_dict(i) for i in self._snapshot.get("egg_incubators", [])]

    def get_eggs(self) -> List[Egg]:
        return [Egg.from_dict(e) for e in self._snapshot.get("eggs", [])]

    def get_pokemons(self) -> List[Pokemon]:
        return [Pokemon.from_dict(p) for p in self._snapshot.get("pokemons", [])]
