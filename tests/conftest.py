"""
Test configuration — puts the repo root on sys.path and provides in-memory
stand-ins for the game API.
"""

import sys
from pathlib import Path

import pytest

REPO_ROOT = Path(__file__).parent.parent
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from core.cancellation import CancellationToken  # noqa: E402
from game.models import UseIncubatorResponse  # noqa: E402


class FakeGameClient:
    """Serves a fixed inventory dict and records incubator commits."""

    def __init__(self, inventory=None, fail_on=None):
        self.inventory = inventory or {}
        self.fail_on = set(fail_on or [])
        self.commits = []
        self.inventory_calls = 0

    async def get_inventory(self):
        self.inventory_calls += 1
        return self.inventory

    async def use_item_egg_incubator(self, incubator_id, egg_id):
        if egg_id in self.fail_on:
            raise RuntimeError(f"commit failed for egg {egg_id}")
        self.commits.append((incubator_id, egg_id))
        egg = next(e for e in self.inventory.get("eggs", []) if e["id"] == egg_id)
        km_walked = self.inventory["player_stats"][0]["km_walked"]
        return UseIncubatorResponse(
            target_km_walked=km_walked + egg["egg_km_walked_target"] - egg.get("egg_km_walked_start", 0.0)
        )


def incubator_dict(incubator_id, unlimited=True, uses_remaining=0, pokemon_id=0, start=0.0, target=0.0):
    return {
        "id": incubator_id,
        "item_id": "ITEM_INCUBATOR_BASIC_UNLIMITED" if unlimited else "ITEM_INCUBATOR_BASIC",
        "uses_remaining": uses_remaining,
        "pokemon_id": pokemon_id,
        "start_km_walked": start,
        "target_km_walked": target,
    }


def egg_dict(egg_id, target, start=0.0, incubator_id=""):
    return {
        "id": egg_id,
        "egg_km_walked_target": target,
        "egg_km_walked_start": start,
        "egg_incubator_id": incubator_id,
    }


@pytest.fixture
def cancel_token():
    return CancellationToken()
