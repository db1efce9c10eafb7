from __future__ import annotations

from conftest import TableHasher

from geocoin.game_state import build_registry
from geocoin.grid import CellCoordinate
from geocoin.hashing import GridHasher


def test_example_scenario_spawns_exactly_one_cache(config) -> None:
    config = config.model_copy(update={"spawn_rate": 0.1})
    hasher = TableHasher({"0,0": 0.05, "1,0": 0.5})
    registry = build_registry(config, hasher)

    created = registry.discover(CellCoordinate(0, 0), 1)
    assert [cache.cell for cache in created] == [CellCoordinate(0, 0)]
    assert CellCoordinate(1, 0) not in registry

    again = registry.discover(CellCoordinate(0, 0), 1)
    assert again == []
    assert len(registry) == 1


def test_discover_is_deterministic_across_registries(config) -> None:
    first = build_registry(config, GridHasher())
    second = build_registry(config, GridHasher())

    first.discover(CellCoordinate(0, 0), 10)
    second.discover(CellCoordinate(0, 0), 10)

    assert len(first) > 0
    assert first.cells() == second.cells()
    assert first.snapshot() == second.snapshot()


def test_overlapping_discovery_is_idempotent(config) -> None:
    registry = build_registry(config, GridHasher())
    registry.discover(CellCoordinate(0, 0), 6)
    before = registry.snapshot()

    registry.discover(CellCoordinate(3, -2), 6)
    registry.discover(CellCoordinate(0, 0), 6)

    after = registry.snapshot()
    assert before.cells <= after.cells
    for record in before.caches:
        assert record in after.caches

    ids = [coin.id for cache in registry for coin in cache.coins]
    assert len(ids) == len(set(ids))


def test_minting_follows_hash_draws(config) -> None:
    hasher = TableHasher({"2,-3": 0.0, "2,-3,numCoins": 0.45, "2,-3,coinValue0": 0.25, "2,-3,coinValue1": 0.0})
    registry = build_registry(config.model_copy(update={"max_coins_per_cache": 4, "max_coin_value": 8}), hasher)

    registry.discover(CellCoordinate(2, -3), 0)
    cache = registry.get(CellCoordinate(2, -3))

    assert cache is not None
    assert [(coin.id, coin.value) for coin in cache.coins] == [("2:-3#0", 3), ("2:-3#1", 1)]
    assert cache.serial_counter == 2
    assert cache.bounds == registry.indexer.to_bounds(CellCoordinate(2, -3))


def test_discovery_does_not_rehash_known_cells(config) -> None:
    hasher = TableHasher({"0,0": 0.0})
    registry = build_registry(config, hasher)
    registry.discover(CellCoordinate(0, 0), 0)
    hasher.calls.clear()

    registry.discover(CellCoordinate(0, 0), 0)

    assert hasher.calls == []


def test_within_returns_only_neighborhood_caches(dense_config) -> None:
    registry = build_registry(dense_config, GridHasher())
    registry.discover(CellCoordinate(0, 0), 1)
    registry.discover(CellCoordinate(10, 10), 1)

    nearby = registry.within(CellCoordinate(0, 0), 1)
    assert len(nearby) == 9
    assert all(abs(cache.cell.i) <= 1 and abs(cache.cell.j) <= 1 for cache in nearby)


def test_reset_and_regenerate_never_reuses_ids(dense_config) -> None:
    registry = build_registry(dense_config, GridHasher())
    registry.discover(CellCoordinate(0, 0), 1)
    first_ids = {coin.id for cache in registry for coin in cache.coins}

    registry.reset()
    assert len(registry) == 0
    registry.discover(CellCoordinate(0, 0), 1)
    second_ids = {coin.id for cache in registry for coin in cache.coins}

    assert len(registry) == 9
    assert first_ids.isdisjoint(second_ids)


def test_restore_replaces_caches_with_copies(dense_config) -> None:
    registry = build_registry(dense_config, GridHasher())
    registry.discover(CellCoordinate(0, 0), 0)
    snapshot = registry.snapshot()

    cache = registry.get(CellCoordinate(0, 0))
    cache.collect(cache.coins[0].id)
    registry.discover(CellCoordinate(5, 5), 0)
    assert registry.snapshot() != snapshot

    registry.restore(snapshot)
    assert registry.snapshot() == snapshot

    registry.get(CellCoordinate(0, 0)).coins.clear()
    assert snapshot.caches[0].coins
