"""Tests for incubator/egg matching."""

import asyncio

import pytest

from conftest import FakeGameClient, egg_dict, incubator_dict
from core.cancellation import CancellationToken, OperationCancelledError
from core.incubator_allocator import EggQueue, IncubatorAllocator
from game.models import Egg, Incubator, IncubatorUsage, PlayerStats


def build(incubators, eggs, level=25, km_walked=100.0):
    inventory = {
        "player_stats": [{"km_walked": km_walked, "level": level}],
        "egg_incubators": incubators,
        "eggs": eggs,
    }
    return (
        FakeGameClient(inventory),
        [Incubator.from_dict(i) for i in incubators],
        [Egg.from_dict(e) for e in eggs],
        PlayerStats(km_walked=km_walked, level=level),
    )


def run_allocate(client, incubators, eggs, stats, min_km=2.0, token=None):
    allocator = IncubatorAllocator(client.use_item_egg_incubator, min_km=min_km)
    return asyncio.run(allocator.allocate(incubators, eggs, stats, token or CancellationToken()))


class TestEggQueue:

    def test_orders_by_km_remaining(self):
        """Partly walked eggs sort by what is left, not by target."""
        queue = EggQueue([Egg(1, 10.0, 0.0), Egg(2, 5.0, 4.0), Egg(3, 2.0, 0.0)])
        assert [e.id for e in queue] == [2, 3, 1]
        assert queue.shortest().id == 2
        assert queue.longest().id == 1

    def test_empty(self):
        queue = EggQueue([])
        assert queue.shortest() is None
        assert queue.longest() is None

    def test_remove(self):
        queue = EggQueue([Egg(1, 2.0), Egg(2, 10.0)])
        queue.remove(queue.longest())
        assert queue.longest().id == 1
        assert len(queue) == 1


class TestUsableIncubators:

    def test_filters_spent_limited(self):
        """Limited incubators without uses are ignored; unlimited go first."""
        allocator = IncubatorAllocator(None, min_km=2.0)
        incubators = [
            Incubator.from_dict(incubator_dict("lim-spent", unlimited=False, uses_remaining=0)),
            Incubator.from_dict(incubator_dict("lim", unlimited=False, uses_remaining=2)),
            Incubator.from_dict(incubator_dict("unl")),
        ]
        assert [i.id for i in allocator.usable_incubators(incubators)] == ["unl", "lim"]


class TestAllocate:

    def test_unlimited_prefers_short_limited_prefers_long(self):
        """With two incubators, unlimited takes the 2km egg and limited the 10km egg."""
        client, incubators, eggs, stats = build(
            [incubator_dict("lim", unlimited=False, uses_remaining=3), incubator_dict("unl")],
            [egg_dict(10, 10.0), egg_dict(2, 2.0)],
        )
        usages, events = run_allocate(client, incubators, eggs, stats)

        assert client.commits == [("unl", 2), ("lim", 10)]
        assert usages == [IncubatorUsage("unl", 2), IncubatorUsage("lim", 10)]
        assert all(e.was_added_now for e in events)
        assert [e.km_to_walk for e in events] == [2.0, 10.0]
        assert [e.km_remaining for e in events] == [2.0, 10.0]

    def test_single_unlimited_prefers_long(self):
        """A lone unlimited incubator takes the longest egg."""
        client, incubators, eggs, stats = build(
            [incubator_dict("unl")],
            [egg_dict(2, 2.0), egg_dict(10, 10.0)],
        )
        usages, _ = run_allocate(client, incubators, eggs, stats)
        assert usages == [IncubatorUsage("unl", 10)]

    def test_spent_incubator_does_not_count_as_second(self):
        """Only usable incubators count toward the single-incubator rule."""
        client, incubators, eggs, stats = build(
            [incubator_dict("unl"), incubator_dict("lim-spent", unlimited=False, uses_remaining=0)],
            [egg_dict(2, 2.0), egg_dict(5, 5.0)],
        )
        usages, _ = run_allocate(client, incubators, eggs, stats)
        assert usages == [IncubatorUsage("unl", 5)]

    def test_long_egg_held_below_level(self):
        """Below the level gate a 10km egg is skipped while shorter eggs exist."""
        client, incubators, eggs, stats = build(
            [incubator_dict("lim", unlimited=False, uses_remaining=1), incubator_dict("unl")],
            [egg_dict(2, 2.0), egg_dict(10, 10.0)],
            level=15,
        )
        usages, events = run_allocate(client, incubators, eggs, stats)

        assert usages == [IncubatorUsage("unl", 2)]
        assert all(egg_id != 10 for _, egg_id in client.commits)
        assert len(events) == 1

    def test_only_long_eggs_escape_hatch(self):
        """With nothing but 10km eggs, the level gate does not apply."""
        client, incubators, eggs, stats = build(
            [incubator_dict("unl")],
            [egg_dict(10, 10.0)],
            level=5,
        )
        usages, _ = run_allocate(client, incubators, eggs, stats)
        assert usages == [IncubatorUsage("unl", 10)]

    def test_limited_skips_short_eggs(self):
        """Limited incubators never take eggs below the minimum km."""
        client, incubators, eggs, stats = build(
            [incubator_dict("lim", unlimited=False, uses_remaining=1)],
            [egg_dict(2, 2.0)],
        )
        usages, events = run_allocate(client, incubators, eggs, stats, min_km=5.0)
        assert usages == []
        assert events == []
        assert client.commits == []

    def test_unlimited_takes_short_egg_below_min_km(self):
        """The minimum km only binds limited incubators."""
        client, incubators, eggs, stats = build(
            [incubator_dict("unl"), incubator_dict("lim", unlimited=False, uses_remaining=1)],
            [egg_dict(2, 2.0), egg_dict(3, 2.0)],
        )
        usages, _ = run_allocate(client, incubators, eggs, stats, min_km=5.0)
        assert usages == [IncubatorUsage("unl", 2)]

    def test_occupied_incubator_is_remembered(self):
        """Busy incubators report their progress and are kept in the usages."""
        client, incubators, eggs, stats = build(
            [incubator_dict("unl", pokemon_id=77, start=90.0, target=95.0)],
            [egg_dict(2, 2.0)],
            km_walked=93.0,
        )
        usages, events = run_allocate(client, incubators, eggs, stats)

        assert client.commits == []
        assert usages == [IncubatorUsage("unl", 77)]
        assert len(events) == 1
        assert events[0].was_added_now is False
        assert events[0].km_to_walk == 5.0
        assert events[0].km_remaining == 2.0

    def test_no_eggs(self):
        """Idle incubators stay idle when there is nothing to hatch."""
        client, incubators, eggs, stats = build([incubator_dict("unl")], [])
        assert run_allocate(client, incubators, eggs, stats) == ([], [])

    def test_eggs_already_incubating_are_ignored(self):
        client, incubators, eggs, stats = build(
            [incubator_dict("unl")],
            [egg_dict(2, 2.0, incubator_id="other")],
        )
        assert run_allocate(client, incubators, eggs, stats) == ([], [])

    def test_each_incubator_gets_at_most_one_egg(self):
        client, incubators, eggs, stats = build(
            [
                incubator_dict("unl"),
                incubator_dict("lim1", unlimited=False, uses_remaining=1),
                incubator_dict("lim2", unlimited=False, uses_remaining=1),
            ],
            [egg_dict(i, km) for i, km in enumerate([2.0, 5.0, 5.0, 10.0, 2.0], start=1)],
        )
        usages, _ = run_allocate(client, incubators, eggs, stats)

        incubator_ids = [u.incubator_id for u in usages]
        egg_ids = [u.pokemon_id for u in usages]
        assert len(incubator_ids) == len(set(incubator_ids)) == 3
        assert len(egg_ids) == len(set(egg_ids))

    def test_commit_failure_propagates(self):
        """A failed commit is not retried and stops the pass."""
        client, incubators, eggs, stats = build(
            [incubator_dict("unl"), incubator_dict("lim", unlimited=False, uses_remaining=1)],
            [egg_dict(2, 2.0), egg_dict(10, 10.0)],
        )
        client.fail_on = {2}
        with pytest.raises(RuntimeError):
            run_allocate(client, incubators, eggs, stats)
        assert client.commits == []

    def test_cancelled_token_stops_before_commit(self):
        client, incubators, eggs, stats = build([incubator_dict("unl")], [egg_dict(2, 2.0)])
        token = CancellationToken()
        token.cancel()
        with pytest.raises(OperationCancelledError):
            run_allocate(client, incubators, eggs, stats, token=token)
        assert client.commits == []

    def test_cancel_between_incubators(self):
        """Cancelling during a commit prevents the next incubator from being filled."""
        client, incubators, eggs, stats = build(
            [incubator_dict("unl"), incubator_dict("lim", unlimited=False, uses_remaining=1)],
            [egg_dict(2, 2.0), egg_dict(10, 10.0)],
        )
        token = CancellationToken()

        async def commit_then_cancel(incubator_id, egg_id):
            response = await client.use_item_egg_incubator(incubator_id, egg_id)
            token.cancel()
            return response

        allocator = IncubatorAllocator(commit_then_cancel, min_km=2.0)
        with pytest.raises(OperationCancelledError):
            asyncio.run(allocator.allocate(incubators, eggs, stats, token))
        assert client.commits == [("unl", 2)]

    def test_long_egg_assigned_at_level_gate(self):
        """At exactly the gate level a 10km egg is no longer held."""
        client, incubators, eggs, stats = build(
            [incubator_dict("lim", unlimited=False, uses_remaining=1), incubator_dict("unl")],
            [egg_dict(2, 2.0), egg_dict(10, 10.0)],
            level=20,
        )
        usages, _ = run_allocate(client, incubators, eggs, stats)
        assert usages == [IncubatorUsage("unl", 2), IncubatorUsage("lim", 10)]

    def test_partly_walked_long_egg_still_held(self):
        """The gate looks at the egg's target, not the km left on it."""
        client, incubators, eggs, stats = build(
            [incubator_dict("lim", unlimited=False, uses_remaining=1), incubator_dict("unl")],
            [egg_dict(2, 2.0), egg_dict(10, 10.0, start=6.0)],
            level=19,
        )
        usages, events = run_allocate(client, incubators, eggs, stats)

        # 4km left, still the longest egg for the limited incubator
        assert usages == [IncubatorUsage("unl", 2)]
        assert client.commits == [("unl", 2)]
        assert len(events) == 1

    def test_status_callback_fires_before_later_failure(self):
        """Each status goes to the callback right after its commit."""
        client, incubators, eggs, stats = build(
            [incubator_dict("unl"), incubator_dict("lim", unlimited=False, uses_remaining=1)],
            [egg_dict(2, 2.0), egg_dict(10, 10.0)],
        )
        client.fail_on = {10}
        seen = []

        async def on_status(event):
            seen.append((event.incubator_id, event.pokemon_id))

        allocator = IncubatorAllocator(client.use_item_egg_incubator, min_km=2.0)
        with pytest.raises(RuntimeError):
            asyncio.run(allocator.allocate(incubators, eggs, stats, CancellationToken(), on_status=on_status))
        assert seen == [("unl", 2)]
