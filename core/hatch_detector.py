"""
Hatch Detector — Finds remembered eggs that have since hatched.
An egg counts as hatched once its id shows up as a regular pokemon.
"""

from __future__ import annotations
from typing import Dict, List
from core import pokemon_info
from game.models import EggHatchedEvent, IncubatorUsage, Pokemon
import logging

logger = logging.getLogger(__name__)


def detect_hatched(remembered: List[IncubatorUsage], pokemons: List[Pokemon]) -> List[EggHatchedEvent]:
    # First hatched entry per id wins; egg entries never shadow it
    by_id: Dict[int, Pokemon] = {}
    for p in pokemons:
        if not p.is_egg:
            by_id.setdefault(p.id, p)
    events = []

    for usage in remembered:
        hatched = by_id.get(usage.pokemon_id)
        # Still an egg, or gone from the inventory entirely
        if hatched is None:
            continue

        event = EggHatchedEvent(
            id=hatched.id,
            pokemon_id=hatched.pokemon_id,
            level=pokemon_info.get_level(hatched),
            cp=hatched.cp,
            max_cp=pokemon_info.calculate_max_cp(hatched),
            perfection=round(pokemon_info.calculate_perfection(hatched), 2),
        )
        logger.info(
            f"[HATCH] Egg {hatched.id} from incubator {usage.incubator_id} hatched: "
            f"species {event.pokemon_id}, CP {event.cp}/{event.max_cp}, {event.perfection:.2f}%"
        )
        events.append(event)

    return events
