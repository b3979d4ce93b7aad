"""
Incubator Usage Store.
Persists the remembered incubator → egg assignments as a JSON file so hatches
can be detected after a restart.
"""

from __future__ import annotations
import json
import os
from typing import List
from game.models import IncubatorUsage
import logging

logger = logging.getLogger(__name__)


class UsageStoreError(Exception):
    """Stored usages could not be read back."""


class IncubatorUsageStore:
    """JSON file holding the full list of remembered usages."""

    def __init__(self, path: str):
        self.path = path

    def _ensure_dir(self):
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)

    def load(self) -> List[IncubatorUsage]:
        self._ensure_dir()
        if not os.path.exists(self.path):
            return []

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
            usages = [self._parse_usage(u) for u in data]
        except (ValueError, TypeError, KeyError) as e:
            raise UsageStoreError(f"Corrupt incubator usage file {self.path}: {e}") from e

        logger.debug(f"[STORE] Loaded {len(usages)} incubator usages from {self.path}")
        return usages

    @staticmethod
    def _parse_usage(entry) -> IncubatorUsage:
        pokemon_id = entry["PokemonId"]
        # bool is an int subclass
        if not isinstance(pokemon_id, int) or isinstance(pokemon_id, bool):
            raise TypeError(f"PokemonId must be an integer, got {pokemon_id!r}")
        return IncubatorUsage(incubator_id=str(entry["IncubatorId"]), pokemon_id=pokemon_id)

    def save(self, usages: List[IncubatorUsage]):
        """Overwrite the file with the given usages."""
        self._ensure_dir()
        payload = [{"IncubatorId": u.incubator_id, "PokemonId": u.pokemon_id} for u in usages]
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(payload, f)
        logger.info(f"[STORE] Saved {len(usages)} incubator usages")
