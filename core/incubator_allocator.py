"""
Incubator Allocator — Pairs idle incubators with unused eggs.

Unlimited incubators prefer short eggs (fast turnover), limited incubators
prefer long eggs (most km per use). With a single usable incubator the long
egg always wins. Long eggs are held back until the player reaches the level
gate, unless nothing else is left to hatch.
"""

from __future__ import annotations
from typing import Awaitable, Callable, List, Optional, Tuple
from core.cancellation import CancellationToken
from game.models import (
    Egg,
    EggIncubatorStatusEvent,
    Incubator,
    IncubatorUsage,
    PlayerStats,
    UseIncubatorResponse,
)
import logging

logger = logging.getLogger(__name__)

CommitFn = Callable[[str, int], Awaitable[UseIncubatorResponse]]
StatusFn = Callable[[EggIncubatorStatusEvent], Awaitable[None]]


class EggQueue:
    """Unused eggs ordered by km remaining, shortest first."""

    def __init__(self, eggs: List[Egg]):
        self._eggs = sorted(eggs, key=lambda e: e.km_remaining)

    def __len__(self) -> int:
        return len(self._eggs)

    def __iter__(self):
        return iter(self._eggs)

    def shortest(self) -> Optional[Egg]:
        return self._eggs[0] if self._eggs else None

    def longest(self) -> Optional[Egg]:
        return self._eggs[-1] if self._eggs else None

    def remove(self, egg: Egg):
        self._eggs.remove(egg)


class IncubatorAllocator:

    def __init__(
        self,
        commit: CommitFn,
        min_km: float,
        long_egg_km: float = 10.0,
        long_egg_min_level: int = 20,
    ):
        self.commit = commit
        self.min_km = min_km
        self.long_egg_km = long_egg_km
        self.long_egg_min_level = long_egg_min_level

    def usable_incubators(self, incubators: List[Incubator]) -> List[Incubator]:
        """Unlimited or with uses left, unlimited ones first."""
        usable = [i for i in incubators if i.is_unlimited or i.uses_remaining > 0]
        return sorted(usable, key=lambda i: not i.is_unlimited)

    async def allocate(
        self,
        incubators: List[Incubator],
        eggs: List[Egg],
        stats: PlayerStats,
        cancel_token: CancellationToken,
        on_status: Optional[StatusFn] = None,
    ) -> Tuple[List[IncubatorUsage], List[EggIncubatorStatusEvent]]:
        """
        Walk the usable incubators in order and fill the idle ones.

        Returns the usages that should be remembered (occupied and newly
        filled incubators) and one status event per incubator in use. Each
        event is also passed to on_status as soon as it is known, so already
        committed incubators are reported even if a later commit fails.
        """
        usable = self.usable_incubators(incubators)
        queue = EggQueue([e for e in eggs if e.is_unused])
        only_long_eggs = all(e.egg_km_walked_target >= self.long_egg_km for e in queue)

        usages: List[IncubatorUsage] = []
        events: List[EggIncubatorStatusEvent] = []

        for incubator in usable:
            cancel_token.raise_if_cancelled()

            if not incubator.is_idle:
                usages.append(IncubatorUsage(incubator.id, incubator.pokemon_id))
                await self._emit(events, EggIncubatorStatusEvent(
                    incubator_id=incubator.id,
                    pokemon_id=incubator.pokemon_id,
                    km_to_walk=incubator.target_km_walked - incubator.start_km_walked,
                    km_remaining=incubator.target_km_walked - stats.km_walked,
                ), on_status)
                continue

            if incubator.is_unlimited and len(usable) > 1:
                egg = queue.shortest()
            else:
                egg = queue.longest()

            if egg is None:
                continue

            if (egg.egg_km_walked_target == self.long_egg_km
                    and stats.level < self.long_egg_min_level
                    and not only_long_eggs):
                logger.info(
                    f"[INCUBATOR] Holding {self.long_egg_km:g}km egg {egg.id} "
                    f"until level {self.long_egg_min_level} (level {stats.level})"
                )
                continue

            if egg.egg_km_walked_target < self.min_km and not incubator.is_unlimited:
                logger.debug(
                    f"[INCUBATOR] {incubator.id}: skipping {egg.egg_km_walked_target:g}km egg "
                    f"(limited incubator, min {self.min_km:g}km)"
                )
                continue

            response = await self.commit(incubator.id, egg.id)
            queue.remove(egg)

            usages.append(IncubatorUsage(incubator.id, egg.id))
            await self._emit(events, EggIncubatorStatusEvent(
                incubator_id=incubator.id,
                pokemon_id=egg.id,
                km_to_walk=egg.egg_km_walked_target,
                km_remaining=response.target_km_walked - stats.km_walked,
                was_added_now=True,
            ), on_status)
            logger.info(
                f"[INCUBATOR] {incubator.id} ({incubator.item_id.name}) <- egg {egg.id} "
                f"({egg.egg_km_walked_target:g}km)"
            )

        return usages, events

    @staticmethod
    async def _emit(
        events: List[EggIncubatorStatusEvent],
        event: EggIncubatorStatusEvent,
        on_status: Optional[StatusFn],
    ):
        events.append(event)
        if on_status is not None:
            await on_status(event)
