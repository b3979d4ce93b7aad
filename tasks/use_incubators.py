"""
Use Incubators Task — One pass of egg bookkeeping.

1. Refresh the inventory (abort quietly if there are no player stats)
2. Report remembered eggs that have hatched since the last pass
3. Fill idle incubators
4. Remember the new assignments if they changed
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, TYPE_CHECKING
from game.models import EggHatchedEvent, EggIncubatorStatusEvent
from core.hatch_detector import detect_hatched
import logging

if TYPE_CHECKING:
    from core.cancellation import CancellationToken
    from core.incubator_allocator import IncubatorAllocator
    from game.inventory import Inventory
    from notifications.events import EventDispatcher
    from storage.usage_store import IncubatorUsageStore

logger = logging.getLogger(__name__)


@dataclass
class UseIncubatorsResult:
    hatched: List[EggHatchedEvent] = field(default_factory=list)
    statuses: List[EggIncubatorStatusEvent] = field(default_factory=list)
    saved: bool = False


class UseIncubatorsTask:

    def __init__(
        self,
        inventory: "Inventory",
        allocator: "IncubatorAllocator",
        store: "IncubatorUsageStore",
        dispatcher: "EventDispatcher",
    ):
        self.inventory = inventory
        self.allocator = allocator
        self.store = store
        self.dispatcher = dispatcher

    async def execute(self, cancel_token: "CancellationToken") -> UseIncubatorsResult:
        cancel_token.raise_if_cancelled()
        result = UseIncubatorsResult()

        # Fresh stats for the km walked
        await self.inventory.refresh_cached_inventory()

        stats = next(iter(self.inventory.get_player_stats()), None)
        if stats is None:
            logger.debug("[INCUBATOR] No player stats in inventory, skipping")
            return result

        remembered = self.store.load()
        result.hatched = detect_hatched(remembered, self.inventory.get_pokemons())
        for event in result.hatched:
            await self.dispatcher.send(event)

        usages, result.statuses = await self.allocator.allocate(
            self.inventory.get_egg_incubators(),
            self.inventory.get_eggs(),
            stats,
            cancel_token,
            on_status=self.dispatcher.send,
        )

        # Same assignments in a different order are not a change
        if set(usages) != set(remembered):
            self.store.save(usages)
            result.saved = True

        return result
